from __future__ import annotations

"""
Canonical RLP codec (deterministic)
-----------------------------------

Recursive Length Prefix encoding as used for every serialized chain object.
The codec is intentionally tiny and strict:

Supported Python types on encode:
- bytes / bytearray
- int (non-negative; minimal big-endian, zero is the empty string)
- list / tuple (nested)

Decoding returns only `bytes` and `list`; integer interpretation is the job
of the schema layer, which knows the field types.

Canonical rules enforced on decode:
- a single byte < 0x80 must be encoded as itself, not as a 1-byte string
- short forms must be used whenever the payload is <= 55 bytes
- long-form lengths must not have leading zero bytes
- no trailing bytes after the top-level item

Public API:
- encode_int(n) -> bytes
- rlp_encode(item) -> bytes
- rlp_decode(data) -> bytes | list
"""

from typing import Any, List, Tuple, Union

from ..errors import DecodeError, EncodingInvariantError
from ..utils.bytes import be_to_int, int_to_be

RLPItem = Union[bytes, List["RLPItem"]]

_SHORT_LIMIT = 55
_STRING_OFFSET = 0x80
_LIST_OFFSET = 0xC0

# ------------------------
# Encode
# ------------------------


def encode_int(n: int) -> bytes:
    """Minimal big-endian magnitude; 0 encodes as the empty byte string."""
    if isinstance(n, bool) or not isinstance(n, int):
        raise EncodingInvariantError("integer field expected", got=type(n).__name__)
    if n < 0:
        raise EncodingInvariantError("negative integers are not encodable", value=n)
    return int_to_be(n)


def _length_prefix(length: int, offset: int) -> bytes:
    if length <= _SHORT_LIMIT:
        return bytes([offset + length])
    len_bytes = encode_int(length)
    return bytes([offset + _SHORT_LIMIT + len(len_bytes)]) + len_bytes


def _encode_bytes(data: bytes) -> bytes:
    if len(data) == 1 and data[0] < _STRING_OFFSET:
        return data
    return _length_prefix(len(data), _STRING_OFFSET) + data


def rlp_encode(item: Any) -> bytes:
    """Encode bytes, non-negative ints and (nested) lists to RLP."""
    if isinstance(item, (bytes, bytearray)):
        return _encode_bytes(bytes(item))
    if isinstance(item, int) and not isinstance(item, bool):
        return _encode_bytes(encode_int(item))
    if isinstance(item, (list, tuple)):
        body = b"".join(rlp_encode(x) for x in item)
        return _length_prefix(len(body), _LIST_OFFSET) + body
    raise EncodingInvariantError(f"unsupported type for RLP: {type(item).__name__}")


# ------------------------
# Decode (strict)
# ------------------------


def _read_length(data: bytes, pos: int, n_len: int) -> int:
    if pos + n_len > len(data):
        raise DecodeError("truncated length prefix")
    raw = data[pos : pos + n_len]
    if raw[0] == 0:
        raise DecodeError("length prefix has leading zero bytes")
    length = int.from_bytes(raw, "big")
    if length <= _SHORT_LIMIT:
        raise DecodeError("long form used for short payload")
    return length


def _decode_at(data: bytes, pos: int) -> Tuple[RLPItem, int]:
    if pos >= len(data):
        raise DecodeError("truncated")
    b0 = data[pos]

    if b0 < _STRING_OFFSET:
        return data[pos : pos + 1], pos + 1

    if b0 < _LIST_OFFSET:
        if b0 <= _STRING_OFFSET + _SHORT_LIMIT:
            length, start = b0 - _STRING_OFFSET, pos + 1
        else:
            n_len = b0 - _STRING_OFFSET - _SHORT_LIMIT
            length, start = _read_length(data, pos + 1, n_len), pos + 1 + n_len
        end = start + length
        if end > len(data):
            raise DecodeError("truncated string payload")
        out = data[start:end]
        if length == 1 and out[0] < _STRING_OFFSET:
            raise DecodeError("single byte below 0x80 must not be length-prefixed")
        return out, end

    if b0 <= _LIST_OFFSET + _SHORT_LIMIT:
        length, start = b0 - _LIST_OFFSET, pos + 1
    else:
        n_len = b0 - _LIST_OFFSET - _SHORT_LIMIT
        length, start = _read_length(data, pos + 1, n_len), pos + 1 + n_len
    end = start + length
    if end > len(data):
        raise DecodeError("truncated list payload")
    items: List[RLPItem] = []
    cur = start
    while cur < end:
        item, cur = _decode_at(data, cur)
        items.append(item)
    if cur != end:
        raise DecodeError("list item overruns list payload")
    return items, end


def rlp_decode(data: bytes) -> RLPItem:
    """
    Decode canonical RLP back to nested bytes/lists. Raises DecodeError on
    truncation, non-canonical prefixes or trailing bytes.
    """
    data = bytes(data)
    item, end = _decode_at(data, 0)
    if end != len(data):
        raise DecodeError("trailing bytes")
    return item


def decode_int(data: bytes) -> int:
    """Inverse of encode_int; rejects leading zero bytes."""
    if data[:1] == b"\x00":
        raise DecodeError("integer has leading zero bytes")
    return be_to_int(data)


__all__ = ["RLPItem", "encode_int", "decode_int", "rlp_encode", "rlp_decode"]
