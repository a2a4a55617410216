"""
zipspan - the Zipkin v2 span model.

Provides:
- an immutable ``Span`` value and the mutable ``Builder`` that validates and
  normalizes its fields
- conversion between numeric identifiers and lowercase hex
- the canonical JSON text form and its bytes (also used by ``pickle``)
- interop with OpenTelemetry span contexts
"""

__version__ = "0.1.0"

from zipspan.errors import ConfigError, DecodeError, ValidationError, ZipspanError
from zipspan.ids import encode_id, encode_trace_id, parse_id
from zipspan.model import Annotation, Builder, Endpoint, Kind, Span, new_builder
from zipspan.codec import decode, decode_bytes, encode, encode_bytes

__all__ = [
    "Annotation",
    "Builder",
    "Endpoint",
    "Kind",
    "Span",
    "new_builder",
    "encode_id",
    "encode_trace_id",
    "parse_id",
    "encode",
    "encode_bytes",
    "decode",
    "decode_bytes",
    "ZipspanError",
    "ValidationError",
    "DecodeError",
    "ConfigError",
]
