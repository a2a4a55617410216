"""Mutable accumulator that validates span fields and produces ``Span`` values."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Union

from zipspan import ids, runtime_config
from zipspan.errors import ValidationError
from zipspan.model.annotation import Annotation
from zipspan.model.endpoint import Endpoint
from zipspan.model.span import Kind, Span

logger = logging.getLogger(__name__)


class Builder:
    """
    Collects span fields, normalizing each one as it is set.

    Every setter validates eagerly and returns the builder, so calls chain::

        span = (
            Builder()
            .trace_id("463ac35c9f6413ad48485a3953bb6124")
            .id(3405691582)
            .name("GET")
            .put_tag("http.path", "/api")
            .build()
        )

    A setter that raises leaves the builder unchanged. The builder is not
    thread-safe; the spans it builds are immutable and never share state
    with it.
    """

    def __init__(self) -> None:
        self._trace_id: Optional[str] = None
        self._parent_id: Optional[str] = None
        self._id: Optional[str] = None
        self._kind: Optional[Kind] = None
        self._name: Optional[str] = None
        self._timestamp: Optional[int] = None
        self._duration: Optional[int] = None
        self._local_endpoint: Optional[Endpoint] = None
        self._remote_endpoint: Optional[Endpoint] = None
        self._annotations: List[Annotation] = []
        self._tags: Dict[str, str] = {}
        self._debug = False
        self._shared = False

    # Identifiers

    def trace_id(self, trace_id: Union[str, int], low: Optional[int] = None) -> "Builder":
        """
        Set the trace id.

        Args:
            trace_id: hex string, or a 64-bit integer. When ``low`` is given
                this is the high 64 bits of a 128-bit id.
            low: low 64 bits of a 128-bit id
        """
        strict = runtime_config.get_strict_trace_id()
        if isinstance(trace_id, str) and low is None:
            self._trace_id = ids.normalize_trace_id(trace_id, strict=strict)
            return self
        if low is None:
            trace_id, low = 0, trace_id
        if not strict:
            trace_id = 0
        self._trace_id = ids.encode_trace_id(trace_id, low)
        return self

    def id(self, span_id: Union[str, int]) -> "Builder":
        if isinstance(span_id, str):
            self._id = ids.normalize_id(span_id)
        else:
            if span_id == 0:
                raise ValidationError("id is zero")
            self._id = ids.encode_id(span_id)
        return self

    def parent_id(self, parent_id: Union[str, int, None]) -> "Builder":
        """Set the parent id. ``None`` or the integer 0 mean "no parent"."""
        if parent_id is None:
            self._parent_id = None
        elif isinstance(parent_id, str):
            self._parent_id = ids.normalize_id(parent_id, field="parentId")
        elif parent_id == 0:
            self._debug_log("parentId 0 treated as absent")
            self._parent_id = None
        else:
            self._parent_id = ids.encode_id(parent_id)
        return self

    # Scalars

    def kind(self, kind: Optional[Kind]) -> "Builder":
        if kind is not None and not isinstance(kind, Kind):
            try:
                kind = Kind(str(kind).upper())
            except ValueError:
                raise ValidationError("unknown span kind", {"kind": kind}) from None
        self._kind = kind
        return self

    def name(self, name: Optional[str]) -> "Builder":
        if name is not None and not isinstance(name, str):
            raise ValidationError("name must be a string", {"name": name})
        self._name = name.lower() if name else None
        return self

    def timestamp(self, timestamp: Optional[int]) -> "Builder":
        self._timestamp = self._micros("timestamp", timestamp)
        return self

    def duration(self, duration: Optional[int]) -> "Builder":
        self._duration = self._micros("duration", duration)
        return self

    def local_endpoint(self, endpoint: Optional[Endpoint]) -> "Builder":
        self._local_endpoint = self._endpoint("localEndpoint", endpoint)
        return self

    def remote_endpoint(self, endpoint: Optional[Endpoint]) -> "Builder":
        self._remote_endpoint = self._endpoint("remoteEndpoint", endpoint)
        return self

    def debug(self, debug: Optional[bool]) -> "Builder":
        self._debug = self._flag("debug", debug)
        return self

    def shared(self, shared: Optional[bool]) -> "Builder":
        self._shared = self._flag("shared", shared)
        return self

    # Collections

    def add_annotation(self, timestamp: int, value: str) -> "Builder":
        self._annotations.append(Annotation.create(timestamp, value))
        return self

    def clear_annotations(self) -> "Builder":
        self._annotations.clear()
        return self

    def put_tag(self, key: str, value: str) -> "Builder":
        if not isinstance(key, str):
            raise ValidationError("tag key must be a string", {"key": key})
        if not isinstance(value, str):
            raise ValidationError("tag value must be a string", {"key": key, "value": value})
        self._tags[key] = value
        return self

    def clear_tags(self) -> "Builder":
        self._tags.clear()
        return self

    # Lifecycle

    def clear(self) -> "Builder":
        """Reset every field to its initial state."""
        self.__init__()
        return self

    def clone(self) -> "Builder":
        """Return a builder with the same fields and its own collections."""
        result = Builder()
        result.__dict__.update(self.__dict__)
        result._annotations = list(self._annotations)
        result._tags = dict(self._tags)
        return result

    def merge(self, source: Span) -> "Builder":
        """
        Fill unset fields from ``source`` and add its annotations and tags.

        Used to combine two halves of the same span, such as client and
        server reports sharing an id.
        """
        if self._trace_id is None:
            self._trace_id = source.trace_id
        elif self._trace_id != source.trace_id:
            raise ValidationError(
                "cannot merge spans of different traces",
                {"trace_id": self._trace_id, "other": source.trace_id},
            )
        if self._id is None:
            self._id = source.id
        if self._parent_id is None:
            self._parent_id = source.parent_id
        if self._kind is None:
            self._kind = source.kind
        if self._name is None:
            self._name = source.name
        if self._timestamp is None:
            self._timestamp = source.timestamp
        if self._duration is None:
            self._duration = source.duration
        if self._local_endpoint is None:
            self._local_endpoint = source.local_endpoint
        if self._remote_endpoint is None:
            self._remote_endpoint = source.remote_endpoint
        self._annotations.extend(source.annotations)
        self._tags.update(source.tags)
        self._debug = self._debug or source.debug
        self._shared = self._shared or source.shared
        return self

    def build(self) -> Span:
        if self._trace_id is None:
            raise ValidationError("missing traceId")
        if self._id is None:
            raise ValidationError("missing id")
        return Span(
            trace_id=self._trace_id,
            id=self._id,
            parent_id=self._parent_id,
            kind=self._kind,
            name=self._name,
            timestamp=self._timestamp,
            duration=self._duration,
            local_endpoint=self._local_endpoint,
            remote_endpoint=self._remote_endpoint,
            annotations=tuple(sorted(self._annotations, key=lambda a: a.timestamp)),
            tags=self._tags,
            debug=self._debug,
            shared=self._shared,
        )

    def _copy_from(self, span: Span) -> "Builder":
        self._trace_id = span.trace_id
        self._parent_id = span.parent_id
        self._id = span.id
        self._kind = span.kind
        self._name = span.name
        self._timestamp = span.timestamp
        self._duration = span.duration
        self._local_endpoint = span.local_endpoint
        self._remote_endpoint = span.remote_endpoint
        self._annotations = list(span.annotations)
        self._tags = dict(span.tags)
        self._debug = span.debug
        self._shared = span.shared
        return self

    def _micros(self, field: str, value: Optional[int]) -> Optional[int]:
        if value is None:
            return None
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(f"{field} must be an integer", {"value": value})
        if value < 0:
            raise ValidationError(f"{field} is negative", {"value": value})
        if value == 0:
            self._debug_log("%s 0 treated as absent", field)
            return None
        return value

    def _endpoint(self, field: str, endpoint: Optional[Endpoint]) -> Optional[Endpoint]:
        if endpoint is None:
            return None
        if not isinstance(endpoint, Endpoint):
            raise ValidationError(f"{field} must be an Endpoint", {"value": endpoint})
        if endpoint.is_empty():
            self._debug_log("empty %s treated as absent", field)
            return None
        return endpoint

    @staticmethod
    def _flag(field: str, value: Optional[bool]) -> bool:
        if value is None:
            return False
        if not isinstance(value, bool):
            raise ValidationError(f"{field} must be a boolean", {"value": value})
        return value

    @staticmethod
    def _debug_log(msg: str, *args) -> None:
        if runtime_config.get_debug():
            logger.debug(msg, *args)


def new_builder() -> Builder:
    return Builder()
