"""Canonical text and bytes forms of a span."""

from zipspan.codec.json_codec import decode, decode_bytes, encode, encode_bytes, from_dict, to_dict

__all__ = ["encode", "encode_bytes", "decode", "decode_bytes", "to_dict", "from_dict"]
