"""
Byte helpers shared by the codec, encoder and builders.

- Integer conversions: int_to_be (minimal or fixed width) / be_to_int

Only the standard library is used here so every layer can import it.

>>> int_to_be(0)
b''
>>> int_to_be(256)
b'\\x01\\x00'
>>> int_to_be(5, length=32)[-1]
5
"""

from __future__ import annotations

from typing import Optional, Union

BytesLike = Union[bytes, bytearray, memoryview]

UINT256_MAX = (1 << 256) - 1


def int_to_be(x: int, *, length: Optional[int] = None) -> bytes:
    """
    Unsigned big-endian encoding.

    Without `length` the encoding is minimal and zero maps to the empty string,
    which is the chain's canonical integer form. With `length` the value is
    left-padded and must fit.
    """
    if x < 0:
        raise ValueError("int_to_be: negative not supported")
    if length is None:
        length = (x.bit_length() + 7) // 8
    return x.to_bytes(length, "big")


def be_to_int(data: BytesLike) -> int:
    return int.from_bytes(bytes(data), "big")


__all__ = ["BytesLike", "UINT256_MAX", "int_to_be", "be_to_int"]
