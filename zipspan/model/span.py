"""Immutable span value, the result of ``Builder.build()``."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Mapping, Optional, Tuple

from zipspan import ids
from zipspan.model.annotation import Annotation
from zipspan.model.endpoint import Endpoint

if TYPE_CHECKING:
    from zipspan.model.builder import Builder


class Kind(Enum):
    CLIENT = "CLIENT"
    SERVER = "SERVER"
    PRODUCER = "PRODUCER"
    CONSUMER = "CONSUMER"


@dataclass(frozen=True)
class Span:
    """
    A single unit of work in a trace.

    Instances are normally produced by :class:`~zipspan.model.builder.Builder`,
    which applies all normalization before construction. Direct construction
    still validates the identifiers and freezes the collections. Identifiers
    are lowercase hex; optional fields are ``None`` when absent.
    ``str(span)`` is the canonical JSON form and pickling goes through its
    UTF-8 bytes.
    """

    trace_id: str
    id: str
    parent_id: Optional[str] = None
    kind: Optional[Kind] = None
    name: Optional[str] = None
    timestamp: Optional[int] = None
    duration: Optional[int] = None
    local_endpoint: Optional[Endpoint] = None
    remote_endpoint: Optional[Endpoint] = None
    annotations: Tuple[Annotation, ...] = ()
    tags: Mapping[str, str] = field(default_factory=dict)
    debug: bool = False
    shared: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "trace_id", ids.normalize_trace_id(self.trace_id))
        object.__setattr__(self, "id", ids.normalize_id(self.id))
        if self.parent_id is not None:
            object.__setattr__(self, "parent_id", ids.normalize_id(self.parent_id, field="parentId"))
        object.__setattr__(self, "annotations", tuple(self.annotations))
        object.__setattr__(self, "tags", MappingProxyType(dict(self.tags)))

    @staticmethod
    def builder() -> "Builder":
        from zipspan.model.builder import Builder

        return Builder()

    def to_builder(self) -> "Builder":
        """Return a builder holding independent copies of every field."""
        from zipspan.model.builder import Builder

        return Builder()._copy_from(self)

    @property
    def local_service_name(self) -> Optional[str]:
        return self.local_endpoint.service_name if self.local_endpoint else None

    @property
    def remote_service_name(self) -> Optional[str]:
        return self.remote_endpoint.service_name if self.remote_endpoint else None

    def __hash__(self) -> int:
        return hash((
            self.trace_id,
            self.id,
            self.parent_id,
            self.kind,
            self.name,
            self.timestamp,
            self.duration,
            self.local_endpoint,
            self.remote_endpoint,
            self.annotations,
            frozenset(self.tags.items()),
            self.debug,
            self.shared,
        ))

    def __str__(self) -> str:
        from zipspan.codec.json_codec import encode

        return encode(self)

    def __reduce__(self):
        from zipspan.codec.json_codec import decode_bytes, encode_bytes

        return (decode_bytes, (encode_bytes(self),))
