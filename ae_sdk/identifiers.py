"""
ae_sdk.identifiers
==================

Checksummed, type-tagged textual identifiers.

Format
------
Every identifier is rendered as::

    <prefix> "_" base(payload || checksum)

where `checksum = sha256(sha256(payload))[:4]` and `base` is base58
(Bitcoin alphabet) or base64 (standard alphabet, padded) depending on the tag.
The prefix fixes the tag; e.g. ``ak_`` is an account public key, ``tx_`` a
serialized transaction.

This module provides:
- encode(tag, payload) -> str
- decode(text, expected=None) -> (tag, payload)
- Identifier: frozen (tag, payload) value with parse()/encode()/retag()
- id_bytes(identifier) -> one-byte on-chain id tag || payload
- is_valid(text, expected=None) -> bool

Decoding is strict: unknown prefixes, bad alphabet characters, checksum
mismatches, non-canonical renderings and wrong payload widths all raise
`DecodeError`.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, Optional, Tuple, Union

import base58

from .errors import DecodeError
from .utils.bytes import BytesLike
from .utils.hash import CHECKSUM_LEN, checksum

__all__ = [
    "Encoding",
    "Tag",
    "Identifier",
    "ID_TAGS",
    "encode",
    "decode",
    "decode_payload",
    "id_bytes",
    "is_valid",
]


class Encoding(str, Enum):
    BASE58 = "base58"
    BASE64 = "base64"


class Tag(Enum):
    """Identifier types: (prefix, base encoding, fixed payload length or None)."""

    ACCOUNT = ("ak", Encoding.BASE58, 32)
    NAME = ("nm", Encoding.BASE58, None)
    COMMITMENT = ("cm", Encoding.BASE58, 32)
    ORACLE = ("ok", Encoding.BASE58, 32)
    ORACLE_QUERY_ID = ("oq", Encoding.BASE58, 32)
    CONTRACT = ("ct", Encoding.BASE58, 32)
    CHANNEL = ("ch", Encoding.BASE58, 32)
    TX_HASH = ("th", Encoding.BASE58, 32)
    KEY_BLOCK_HASH = ("kh", Encoding.BASE58, 32)
    MICRO_BLOCK_HASH = ("mh", Encoding.BASE58, 32)
    SIGNATURE = ("sg", Encoding.BASE58, 64)
    TRANSACTION = ("tx", Encoding.BASE64, None)
    CONTRACT_BYTEARRAY = ("cb", Encoding.BASE64, None)
    ORACLE_QUERY = ("ov", Encoding.BASE64, None)
    ORACLE_RESPONSE = ("or", Encoding.BASE64, None)
    BYTEARRAY = ("ba", Encoding.BASE64, None)

    def __init__(self, prefix: str, encoding: Encoding, length: Optional[int]) -> None:
        self.prefix = prefix
        self.encoding = encoding
        self.length = length

    @classmethod
    def from_prefix(cls, prefix: str) -> "Tag":
        try:
            return _BY_PREFIX[prefix]
        except KeyError:
            raise DecodeError("unknown identifier prefix", prefix=prefix) from None


_BY_PREFIX = {t.prefix: t for t in Tag}

# One-byte type tags written in front of the 32-byte payload wherever a
# transaction field holds an id.
ID_TAGS = {
    Tag.ACCOUNT: 1,
    Tag.NAME: 2,
    Tag.COMMITMENT: 3,
    Tag.ORACLE: 4,
    Tag.CONTRACT: 5,
    Tag.CHANNEL: 6,
}

TagSpec = Union[Tag, Iterable[Tag], None]


# ---- base encodings ----------------------------------------------------------


def _b58check_encode(payload: bytes) -> str:
    return base58.b58encode_check(payload).decode("ascii")


def _b58check_decode(text: str) -> bytes:
    try:
        return base58.b58decode_check(text)
    except ValueError as e:
        # base58 raises ValueError for both bad characters and bad checksums
        raise DecodeError(f"invalid base58check: {e}") from None


def _b64check_encode(payload: bytes) -> str:
    return base64.b64encode(payload + checksum(payload)).decode("ascii")


def _b64check_decode(text: str) -> bytes:
    try:
        raw = base64.b64decode(text.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise DecodeError(f"invalid base64: {e}") from None
    if len(raw) < CHECKSUM_LEN:
        raise DecodeError("encoded data too short for checksum")
    payload, check = raw[:-CHECKSUM_LEN], raw[-CHECKSUM_LEN:]
    if checksum(payload) != check:
        raise DecodeError("invalid checksum")
    return payload


# ---- core API ----------------------------------------------------------------


def encode(tag: Tag, payload: BytesLike) -> str:
    """Render `payload` as checksummed text under `tag`."""
    data = bytes(payload)
    if tag.length is not None and len(data) != tag.length:
        raise DecodeError(
            f"{tag.name.lower()} payload must be {tag.length} bytes",
            got=len(data),
        )
    if tag.encoding is Encoding.BASE58:
        body = _b58check_encode(data)
    else:
        body = _b64check_encode(data)
    return f"{tag.prefix}_{body}"


def decode(text: str, expected: TagSpec = None) -> Tuple[Tag, bytes]:
    """
    Parse checksummed identifier text into (tag, payload).

    If `expected` is given (a Tag or an iterable of Tags) any other tag is
    rejected with DecodeError.
    """
    if not isinstance(text, str):
        raise DecodeError("identifier must be a string", got=type(text).__name__)
    prefix, sep, body = text.partition("_")
    if not sep or not body:
        raise DecodeError("identifier is missing its prefix separator", value=text)
    tag = Tag.from_prefix(prefix)
    allowed = _allowed(expected)
    if allowed is not None and tag not in allowed:
        raise DecodeError(
            "unexpected identifier type",
            got=tag.name,
            expected=[t.name for t in allowed],
        )

    if tag.encoding is Encoding.BASE58:
        payload = _b58check_decode(body)
    else:
        payload = _b64check_decode(body)

    if tag.length is not None and len(payload) != tag.length:
        raise DecodeError(
            f"{tag.name.lower()} payload must be {tag.length} bytes",
            got=len(payload),
        )
    # Reject alternative renderings (e.g. base64 with non-zero pad bits) so
    # that text -> bytes -> text is the identity.
    if encode(tag, payload) != text:
        raise DecodeError("non-canonical identifier encoding", value=text)
    return tag, payload


def decode_payload(text: str, expected: TagSpec = None) -> bytes:
    """Like decode() but return only the payload bytes."""
    return decode(text, expected)[1]


def is_valid(text: str, expected: TagSpec = None) -> bool:
    try:
        decode(text, expected)
        return True
    except DecodeError:
        return False


def _allowed(expected: TagSpec) -> Optional[Tuple[Tag, ...]]:
    if expected is None:
        return None
    if isinstance(expected, Tag):
        return (expected,)
    return tuple(expected)


# ---- value type --------------------------------------------------------------


@dataclass(frozen=True)
class Identifier:
    """Immutable (tag, payload) pair; passed by value between layers."""

    tag: Tag
    payload: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.tag, Tag):
            raise TypeError("Identifier.tag must be a Tag")
        object.__setattr__(self, "payload", bytes(self.payload))
        if self.tag.length is not None and len(self.payload) != self.tag.length:
            raise DecodeError(
                f"{self.tag.name.lower()} payload must be {self.tag.length} bytes",
                got=len(self.payload),
            )

    @classmethod
    def parse(cls, text: Union[str, "Identifier"], expected: TagSpec = None) -> "Identifier":
        if isinstance(text, Identifier):
            allowed = _allowed(expected)
            if allowed is not None and text.tag not in allowed:
                raise DecodeError(
                    "unexpected identifier type",
                    got=text.tag.name,
                    expected=[t.name for t in allowed],
                )
            return text
        tag, payload = decode(text, expected)
        return cls(tag, payload)

    def encode(self) -> str:
        return encode(self.tag, self.payload)

    def retag(self, tag: Tag) -> "Identifier":
        """Same payload under another tag (accounts and oracles share keys)."""
        return Identifier(tag, self.payload)

    def __str__(self) -> str:
        return self.encode()


def id_bytes(ident: Identifier) -> bytes:
    """On-chain id serialization: one id-type byte followed by the payload."""
    try:
        type_byte = ID_TAGS[ident.tag]
    except KeyError:
        raise DecodeError("identifier type cannot be used as an id field", got=ident.tag.name) from None
    return bytes([type_byte]) + ident.payload
