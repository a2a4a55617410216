"""Conversion between zipspan spans and OpenTelemetry span contexts."""

from __future__ import annotations

from typing import Dict, Optional

from opentelemetry.trace import NonRecordingSpan, SpanKind, set_span_in_context
from opentelemetry.trace import SpanContext as OTelSpanContext, TraceFlags
from opentelemetry.trace.propagation.tracecontext import TraceContextTextMapPropagator

from zipspan.errors import ValidationError
from zipspan.ids import lower_hex_to_unsigned_long
from zipspan.model.builder import Builder
from zipspan.model.span import Kind, Span

# Use OTel's W3C Trace Context propagator
_propagator = TraceContextTextMapPropagator()

_MASK_64 = 0xFFFFFFFFFFFFFFFF

_TO_OTEL_KIND = {
    Kind.CLIENT: SpanKind.CLIENT,
    Kind.SERVER: SpanKind.SERVER,
    Kind.PRODUCER: SpanKind.PRODUCER,
    Kind.CONSUMER: SpanKind.CONSUMER,
}
_FROM_OTEL_KIND = {v: k for k, v in _TO_OTEL_KIND.items()}


def to_otel_span_kind(kind: Optional[Kind]) -> SpanKind:
    """Map a span kind to OTel; an absent kind is ``SpanKind.INTERNAL``."""
    if kind is None:
        return SpanKind.INTERNAL
    return _TO_OTEL_KIND[kind]


def from_otel_span_kind(kind: SpanKind) -> Optional[Kind]:
    return _FROM_OTEL_KIND.get(kind)


def to_otel_span_context(span: Span) -> OTelSpanContext:
    """Convert a span's identifiers to a sampled OTel SpanContext."""
    if len(span.trace_id) == 32:
        trace_id = (lower_hex_to_unsigned_long(span.trace_id, 0) << 64) | lower_hex_to_unsigned_long(
            span.trace_id, 16
        )
    else:
        trace_id = lower_hex_to_unsigned_long(span.trace_id)

    return OTelSpanContext(
        trace_id=trace_id,
        span_id=lower_hex_to_unsigned_long(span.id),
        is_remote=False,
        trace_flags=TraceFlags(TraceFlags.SAMPLED),
    )


def builder_from_otel_span_context(context: OTelSpanContext) -> Builder:
    """
    Start a builder from an OTel SpanContext.

    Only the trace id and span id are copied; the caller fills in the rest.
    """
    if not context.is_valid:
        raise ValidationError(
            "invalid OTel span context",
            {"trace_id": context.trace_id, "span_id": context.span_id},
        )
    return (
        Builder()
        .trace_id(context.trace_id >> 64, context.trace_id & _MASK_64)
        .id(context.span_id)
    )


def format_traceparent(span: Span) -> str:
    """
    Format traceparent header value (W3C Trace Context standard).

    Uses OpenTelemetry's propagator internally. 64-bit trace ids are left
    padded to the 32 digits W3C requires.
    """
    ctx = set_span_in_context(NonRecordingSpan(to_otel_span_context(span)))

    carrier: Dict[str, str] = {}
    _propagator.inject(carrier, context=ctx)
    return carrier.get("traceparent", "")
