"""
ae_sdk.encoding.schema
======================

(tag, version) schemas for serialized transactions.

A transaction is serialized as::

    rlp([object_tag, version, field_1, ..., field_n])

where the field list is *fully determined* by (object_tag, version): no
field is optional, absent semantic values are written as canonical zero or
empty values, and order is fixed. `encode()` refuses any field list that
deviates from its schema with `EncodingInvariantError` instead of guessing.

Field types
-----------
INT        non-negative integer, minimal big-endian (0 -> b"")
BINARY     raw bytes
STRING     text, UTF-8 encoded
ID         Identifier, written as one id-type byte + 32-byte payload
TTL        (type code, value) pair, flattened into two INT items
POINTERS   sequence of (key, Identifier), written as [[key, id], ...]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, IntEnum
from typing import Any, Dict, Iterable, List, Mapping, NamedTuple, Sequence, Tuple

from ..errors import DecodeError, EncodingInvariantError
from ..identifiers import ID_TAGS, Identifier, id_bytes
from .rlp import decode_int, encode_int, rlp_decode, rlp_encode

log = logging.getLogger(__name__)

__all__ = [
    "TxType",
    "FieldType",
    "FieldSpec",
    "SCHEMAS",
    "VERSION",
    "DecodedTx",
    "schema_for",
    "encode",
    "decode",
]

VERSION = 1


class TxType(IntEnum):
    SPEND = 12
    ORACLE_REGISTER = 22
    ORACLE_QUERY = 23
    ORACLE_RESPONSE = 24
    ORACLE_EXTEND = 25
    NAME_CLAIM = 32
    NAME_PRECLAIM = 33
    NAME_UPDATE = 34
    NAME_REVOKE = 35
    NAME_TRANSFER = 36
    CONTRACT_CREATE = 42
    CONTRACT_CALL = 43


class FieldType(Enum):
    INT = "int"
    BINARY = "binary"
    STRING = "string"
    ID = "id"
    TTL = "ttl"
    POINTERS = "pointers"


class FieldSpec(NamedTuple):
    name: str
    type: FieldType


def _s(*pairs: Tuple[str, FieldType]) -> Tuple[FieldSpec, ...]:
    return tuple(FieldSpec(n, t) for n, t in pairs)


I, B, S, ID, TTL, PTR = (
    FieldType.INT,
    FieldType.BINARY,
    FieldType.STRING,
    FieldType.ID,
    FieldType.TTL,
    FieldType.POINTERS,
)

SCHEMAS: Dict[Tuple[int, int], Tuple[FieldSpec, ...]] = {
    (TxType.SPEND, 1): _s(
        ("sender_id", ID), ("recipient_id", ID), ("amount", I), ("fee", I),
        ("ttl", I), ("nonce", I), ("payload", B),
    ),
    (TxType.NAME_PRECLAIM, 1): _s(
        ("account_id", ID), ("nonce", I), ("commitment_id", ID), ("fee", I), ("ttl", I),
    ),
    (TxType.NAME_CLAIM, 1): _s(
        ("account_id", ID), ("nonce", I), ("name", B), ("name_salt", I), ("fee", I), ("ttl", I),
    ),
    (TxType.NAME_UPDATE, 1): _s(
        ("account_id", ID), ("nonce", I), ("name_id", ID), ("name_ttl", I),
        ("pointers", PTR), ("client_ttl", I), ("fee", I), ("ttl", I),
    ),
    (TxType.NAME_REVOKE, 1): _s(
        ("account_id", ID), ("nonce", I), ("name_id", ID), ("fee", I), ("ttl", I),
    ),
    (TxType.NAME_TRANSFER, 1): _s(
        ("account_id", ID), ("nonce", I), ("name_id", ID), ("recipient_id", ID),
        ("fee", I), ("ttl", I),
    ),
    (TxType.CONTRACT_CREATE, 1): _s(
        ("owner_id", ID), ("nonce", I), ("code", B), ("vm_version", I), ("fee", I),
        ("ttl", I), ("deposit", I), ("amount", I), ("gas", I), ("gas_price", I),
        ("call_data", B),
    ),
    (TxType.CONTRACT_CALL, 1): _s(
        ("caller_id", ID), ("nonce", I), ("contract_id", ID), ("vm_version", I),
        ("fee", I), ("ttl", I), ("amount", I), ("gas", I), ("gas_price", I),
        ("call_data", B),
    ),
    (TxType.ORACLE_REGISTER, 1): _s(
        ("account_id", ID), ("nonce", I), ("query_format", S), ("response_format", S),
        ("query_fee", I), ("oracle_ttl", TTL), ("fee", I), ("ttl", I), ("vm_version", I),
    ),
    (TxType.ORACLE_EXTEND, 1): _s(
        ("oracle_id", ID), ("nonce", I), ("oracle_ttl", TTL), ("fee", I), ("ttl", I),
    ),
    (TxType.ORACLE_QUERY, 1): _s(
        ("sender_id", ID), ("nonce", I), ("oracle_id", ID), ("query", S),
        ("query_fee", I), ("query_ttl", TTL), ("response_ttl", TTL), ("fee", I), ("ttl", I),
    ),
    (TxType.ORACLE_RESPONSE, 1): _s(
        ("oracle_id", ID), ("nonce", I), ("query_id", B), ("response", S),
        ("response_ttl", TTL), ("fee", I), ("ttl", I),
    ),
}

_ID_TYPES = {v: k for k, v in ID_TAGS.items()}


def schema_for(tag: int, version: int) -> Tuple[FieldSpec, ...]:
    try:
        return SCHEMAS[(int(tag), int(version))]
    except KeyError:
        raise EncodingInvariantError("unknown (tag, version) schema", tag=int(tag), version=int(version)) from None


# ------------------------
# Encode
# ------------------------


def _encode_value(spec: FieldSpec, value: Any) -> List[Any]:
    """Return the RLP item(s) for one field (TTL expands to two)."""
    t = spec.type
    try:
        if t is FieldType.INT:
            return [encode_int(value)]
        if t is FieldType.BINARY:
            if not isinstance(value, (bytes, bytearray)):
                raise TypeError("bytes expected")
            return [bytes(value)]
        if t is FieldType.STRING:
            if not isinstance(value, str):
                raise TypeError("str expected")
            return [value.encode("utf-8")]
        if t is FieldType.ID:
            if not isinstance(value, Identifier):
                raise TypeError("Identifier expected")
            return [id_bytes(value)]
        if t is FieldType.TTL:
            ttl_type, ttl_value = value
            return [encode_int(int(ttl_type)), encode_int(ttl_value)]
        if t is FieldType.POINTERS:
            out = []
            for key, ident in value:
                key_b = key.encode("utf-8") if isinstance(key, str) else bytes(key)
                if not isinstance(ident, Identifier):
                    raise TypeError("pointer target must be an Identifier")
                out.append([key_b, id_bytes(ident)])
            return [out]
    except EncodingInvariantError as e:
        raise EncodingInvariantError(e.message, field=spec.name, **e.data) from None
    except (TypeError, ValueError) as e:
        raise EncodingInvariantError(
            f"value does not fit field type {t.value}: {e}",
            field=spec.name,
            got=type(value).__name__,
        ) from None
    raise EncodingInvariantError(f"unknown field type {t!r}", field=spec.name)  # pragma: no cover


def encode(tag: int, version: int, fields: Sequence[Tuple[str, Any]]) -> bytes:
    """
    Serialize an ordered (name, value) field list under its (tag, version)
    schema. Names, count and order must match the schema exactly.
    """
    schema = schema_for(tag, version)
    if isinstance(fields, Mapping):
        raise EncodingInvariantError("field list must be an ordered sequence, not a mapping")
    fields = list(fields)
    names = [name for name, _ in fields]
    expected = [spec.name for spec in schema]
    if names != expected:
        raise EncodingInvariantError(
            "field list does not match schema",
            tag=int(tag),
            version=int(version),
            expected=expected,
            got=names,
        )

    items: List[Any] = [encode_int(int(tag)), encode_int(int(version))]
    for spec, (_, value) in zip(schema, fields):
        items.extend(_encode_value(spec, value))
    raw = rlp_encode(items)
    log.debug("encoded tx tag=%d version=%d size=%d", int(tag), int(version), len(raw))
    return raw


# ------------------------
# Decode
# ------------------------


@dataclass(frozen=True)
class DecodedTx:
    tag: int
    version: int
    fields: Tuple[Tuple[str, Any], ...]

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.fields)

    def __getitem__(self, name: str) -> Any:
        for key, value in self.fields:
            if key == name:
                return value
        raise KeyError(name)


def _expect_bytes(item: Any, name: str) -> bytes:
    if not isinstance(item, bytes):
        raise DecodeError("expected a byte string, found a list", field=name)
    return item


def _decode_id(raw: bytes, name: str) -> Identifier:
    if len(raw) != 33 or raw[0] not in _ID_TYPES:
        raise DecodeError("malformed id field", field=name, value=raw)
    return Identifier(_ID_TYPES[raw[0]], raw[1:])


def decode(data: bytes) -> DecodedTx:
    """Inverse of encode(): recover (tag, version, field list) from bytes."""
    top = rlp_decode(data)
    if not isinstance(top, list) or len(top) < 2:
        raise DecodeError("serialized tx must be a list of at least tag and version")
    tag = decode_int(_expect_bytes(top[0], "tag"))
    version = decode_int(_expect_bytes(top[1], "version"))
    try:
        schema = schema_for(tag, version)
    except EncodingInvariantError:
        raise DecodeError("unknown (tag, version)", tag=tag, version=version) from None

    items: Iterable[Any] = iter(top[2:])
    out: List[Tuple[str, Any]] = []
    try:
        for spec in schema:
            item = next(items)
            t = spec.type
            if t is FieldType.INT:
                out.append((spec.name, decode_int(_expect_bytes(item, spec.name))))
            elif t is FieldType.BINARY:
                out.append((spec.name, _expect_bytes(item, spec.name)))
            elif t is FieldType.STRING:
                text = _expect_bytes(item, spec.name).decode("utf-8")
                out.append((spec.name, text))
            elif t is FieldType.ID:
                out.append((spec.name, _decode_id(_expect_bytes(item, spec.name), spec.name)))
            elif t is FieldType.TTL:
                ttl_value = next(items)
                out.append(
                    (
                        spec.name,
                        (
                            decode_int(_expect_bytes(item, spec.name)),
                            decode_int(_expect_bytes(ttl_value, spec.name)),
                        ),
                    )
                )
            elif t is FieldType.POINTERS:
                if not isinstance(item, list):
                    raise DecodeError("pointers must be a list", field=spec.name)
                pointers = []
                for entry in item:
                    if not isinstance(entry, list) or len(entry) != 2:
                        raise DecodeError("pointer must be a [key, id] pair", field=spec.name)
                    key = _expect_bytes(entry[0], spec.name).decode("utf-8")
                    pointers.append((key, _decode_id(_expect_bytes(entry[1], spec.name), spec.name)))
                out.append((spec.name, tuple(pointers)))
    except StopIteration:
        raise DecodeError("too few fields for schema", tag=tag, version=version) from None
    except UnicodeDecodeError as e:
        raise DecodeError(f"invalid UTF-8: {e}") from None

    if next(items, None) is not None:
        raise DecodeError("too many fields for schema", tag=tag, version=version)
    return DecodedTx(tag=tag, version=version, fields=tuple(out))
