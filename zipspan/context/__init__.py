"""OpenTelemetry interoperability for zipspan spans."""

from zipspan.context.otel import (
    builder_from_otel_span_context,
    format_traceparent,
    from_otel_span_kind,
    to_otel_span_context,
    to_otel_span_kind,
)

__all__ = [
    "builder_from_otel_span_context",
    "format_traceparent",
    "from_otel_span_kind",
    "to_otel_span_context",
    "to_otel_span_kind",
]
