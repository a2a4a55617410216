"""Conversion between numeric span/trace identifiers and lowercase hex strings."""

from __future__ import annotations

from zipspan.errors import ValidationError

_MASK_64 = 0xFFFFFFFFFFFFFFFF
_MIN_SIGNED_64 = -(1 << 63)
_MAX_SIGNED_64 = (1 << 63) - 1
_HEX_DIGITS = frozenset("0123456789abcdef")


def _to_unsigned(value: int, field: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer", {"value": value})
    if value < _MIN_SIGNED_64 or value > _MASK_64:
        raise ValidationError(f"{field} does not fit in 64 bits", {"value": value})
    return value & _MASK_64


def encode_id(value: int) -> str:
    """
    Format a 64-bit identifier as 16 lowercase hex digits.

    Negative values are rendered as their two's-complement bit pattern, so
    ``-1`` becomes ``ffffffffffffffff``.

    Args:
        value: signed or unsigned 64-bit integer

    Returns:
        16-character hex string
    """
    return format(_to_unsigned(value, "id"), "016x")


def encode_trace_id(high: int, low: int) -> str:
    """
    Format a trace id from its high and low 64 bits.

    Returns 32 hex digits when ``high`` is non-zero, otherwise the 16 digit
    form of ``low``.
    """
    high_bits = _to_unsigned(high, "trace_id high bits")
    low_bits = _to_unsigned(low, "trace_id low bits")
    if high_bits == 0 and low_bits == 0:
        raise ValidationError("traceId is zero")
    if high_bits == 0:
        return format(low_bits, "016x")
    return format(high_bits, "016x") + format(low_bits, "016x")


def parse_id(hex_string: str) -> int:
    """
    Parse a 16 or 32 character hex id.

    A 16 digit id is read as a signed 64-bit value, the inverse of
    :func:`encode_id`, so ``ffffffffffffffff`` is ``-1``. A 32 digit trace id
    is returned as an unsigned 128-bit value. Unlike the builder setters this
    does not pad short input.
    """
    if not isinstance(hex_string, str):
        raise ValidationError("id must be a string", {"value": hex_string})
    if not hex_string:
        raise ValidationError("id is empty")
    if len(hex_string) not in (16, 32):
        raise ValidationError(
            "id must be 16 or 32 hex characters", {"length": len(hex_string)}
        )
    _validate_hex(hex_string.lower(), "id")
    value = int(hex_string, 16)
    if len(hex_string) == 16 and value > _MAX_SIGNED_64:
        value -= 1 << 64
    return value


def lower_hex_to_unsigned_long(hex_string: str, index: int = 0) -> int:
    """Read the 64-bit value at ``index`` (a character offset) of a hex id."""
    chunk = hex_string[index:index + 16]
    if len(chunk) != 16:
        raise ValidationError(
            "expected 16 hex characters", {"value": hex_string, "index": index}
        )
    _validate_hex(chunk, "id")
    return int(chunk, 16)


def normalize_trace_id(trace_id: str, strict: bool = True) -> str:
    """
    Validate an externally supplied trace id and return its canonical form.

    Short ids are left padded to 16 digits, or to 32 when longer than 16.
    A 128-bit id whose high half is zero collapses to the low 16 digits.
    When ``strict`` is False only the low 64 bits are kept.
    """
    if not isinstance(trace_id, str):
        raise ValidationError("traceId must be a string", {"value": trace_id})
    length = len(trace_id)
    if length == 0:
        raise ValidationError("traceId is empty")
    if length > 32:
        raise ValidationError("traceId.length > 32", {"value": trace_id})
    trace_id = trace_id.lower()
    _validate_hex(trace_id, "traceId")
    if length <= 16:
        trace_id = trace_id.rjust(16, "0")
    elif length < 32:
        trace_id = trace_id.rjust(32, "0")
    if len(trace_id) == 32 and (not strict or trace_id.startswith("0" * 16)):
        trace_id = trace_id[16:]
    if trace_id.count("0") == len(trace_id):
        raise ValidationError("traceId is all zeros")
    return trace_id


def normalize_id(span_id: str, field: str = "id") -> str:
    """Validate an externally supplied span or parent id; pads to 16 digits."""
    if not isinstance(span_id, str):
        raise ValidationError(f"{field} must be a string", {"value": span_id})
    length = len(span_id)
    if length == 0:
        raise ValidationError(f"{field} is empty")
    if length > 16:
        raise ValidationError(f"{field}.length > 16", {"value": span_id})
    span_id = span_id.lower()
    _validate_hex(span_id, field)
    span_id = span_id.rjust(16, "0")
    if span_id == "0" * 16:
        raise ValidationError(f"{field} is all zeros")
    return span_id


def _validate_hex(value: str, field: str) -> None:
    for c in value:
        if c not in _HEX_DIGITS:
            raise ValidationError(
                f"{field} should be lower-hex encoded with no prefix",
                {"value": value},
            )
