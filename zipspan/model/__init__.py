"""Span data model."""

from zipspan.model.annotation import Annotation
from zipspan.model.endpoint import Endpoint
from zipspan.model.span import Kind, Span
from zipspan.model.builder import Builder, new_builder

__all__ = [
    "Annotation",
    "Endpoint",
    "Kind",
    "Span",
    "Builder",
    "new_builder",
]
