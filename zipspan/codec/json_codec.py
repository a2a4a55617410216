"""Canonical JSON form of a span and its UTF-8 bytes."""

from __future__ import annotations

import json
from typing import Any, Dict, Optional, Union

from zipspan.errors import DecodeError, ValidationError
from zipspan.model.builder import Builder
from zipspan.model.endpoint import Endpoint
from zipspan.model.span import Span


def to_dict(span: Span) -> Dict[str, Any]:
    """
    Ordered dict of the span's present fields, keyed as in the JSON form.

    Key order is fixed: traceId, parentId, id, kind, name, timestamp,
    duration, localEndpoint, remoteEndpoint, annotations, tags, debug,
    shared. Absent fields, empty collections and false flags are omitted.
    """
    result: Dict[str, Any] = {"traceId": span.trace_id}
    if span.parent_id is not None:
        result["parentId"] = span.parent_id
    result["id"] = span.id
    if span.kind is not None:
        result["kind"] = span.kind.value
    if span.name is not None:
        result["name"] = span.name
    if span.timestamp is not None:
        result["timestamp"] = span.timestamp
    if span.duration is not None:
        result["duration"] = span.duration
    if span.local_endpoint is not None:
        result["localEndpoint"] = span.local_endpoint.to_dict()
    if span.remote_endpoint is not None:
        result["remoteEndpoint"] = span.remote_endpoint.to_dict()
    if span.annotations:
        result["annotations"] = [a.to_dict() for a in span.annotations]
    if span.tags:
        result["tags"] = dict(span.tags)
    if span.debug:
        result["debug"] = True
    if span.shared:
        result["shared"] = True
    return result


def encode(span: Span) -> str:
    return json.dumps(to_dict(span), separators=(",", ":"), ensure_ascii=False)


def encode_bytes(span: Span) -> bytes:
    return encode(span).encode("utf-8")


def decode(data: Union[str, bytes]) -> Span:
    """
    Parse the canonical JSON form back into a span.

    Every field goes through the builder, so the result is normalized the
    same way as a span built directly.

    Raises:
        DecodeError: if the input is not JSON, is not an object, lacks
            ``traceId``/``id``, or holds an invalid field value
    """
    try:
        raw = json.loads(data)
    except (TypeError, ValueError) as e:
        raise DecodeError("malformed span JSON", {"error": e}) from e
    if not isinstance(raw, dict):
        raise DecodeError("span JSON must be an object", {"type": type(raw).__name__})
    for required in ("traceId", "id"):
        if required not in raw:
            raise DecodeError(f"span JSON is missing {required}")
    try:
        return from_dict(raw)
    except ValidationError as e:
        raise DecodeError(f"invalid span field: {e.message}", e.details) from e


def decode_bytes(data: bytes) -> Span:
    try:
        text = data.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError("span bytes are not UTF-8", {"error": e}) from e
    return decode(text)


def from_dict(raw: Dict[str, Any]) -> Span:
    builder = (
        Builder()
        .trace_id(raw["traceId"])
        .id(raw["id"])
        .parent_id(raw.get("parentId"))
        .kind(raw.get("kind"))
        .name(raw.get("name"))
        .timestamp(raw.get("timestamp"))
        .duration(raw.get("duration"))
        .local_endpoint(_endpoint_from_dict(raw.get("localEndpoint")))
        .remote_endpoint(_endpoint_from_dict(raw.get("remoteEndpoint")))
        .debug(raw.get("debug"))
        .shared(raw.get("shared"))
    )
    annotations = raw.get("annotations")
    if annotations is None:
        annotations = []
    elif not isinstance(annotations, list):
        raise ValidationError("annotations must be an array", {"annotations": annotations})
    for annotation in annotations:
        if not isinstance(annotation, dict):
            raise ValidationError("annotation must be an object", {"annotation": annotation})
        builder.add_annotation(annotation.get("timestamp"), annotation.get("value"))
    tags = raw.get("tags")
    if tags is None:
        tags = {}
    elif not isinstance(tags, dict):
        raise ValidationError("tags must be an object", {"tags": tags})
    for key, value in tags.items():
        builder.put_tag(key, value)
    return builder.build()


def _endpoint_from_dict(raw: Optional[Dict[str, Any]]) -> Optional[Endpoint]:
    if raw is None:
        return None
    if not isinstance(raw, dict):
        raise ValidationError("endpoint must be an object", {"endpoint": raw})
    return Endpoint(
        service_name=raw.get("serviceName"),
        ipv4=raw.get("ipv4"),
        ipv6=raw.get("ipv6"),
        port=raw.get("port"),
    )
