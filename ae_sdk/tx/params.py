"""
ae_sdk.tx.params
================

Typed parameter aggregates, one frozen dataclass per transaction kind.

Each dataclass:
- is keyword-only; required fields have no default, optional ones carry the
  client's defaults (fee 20000, ttl 0, gas 1_579_000, ...);
- validates in `__post_init__`: integers must be non-negative, at most
  2**256 - 1 and not bool (ValidationError naming the field); identifiers are
  parsed into `Identifier` values (DecodeError naming the field); byte fields
  given as cb_/ba_ text are decoded;
- offers `from_obj(mapping)` accepting camelCase or snake_case keys.

Both builder strategies consume the same validated instances, so the local
and remote paths reject exactly the same inputs.
"""

from __future__ import annotations

import re
from dataclasses import MISSING, dataclass, field, fields
from enum import IntEnum
from typing import Any, ClassVar, Iterator, Mapping, Sequence, Tuple, Type, TypeVar, Union

from ..errors import DecodeError, ValidationError
from ..identifiers import Identifier, Tag, decode
from ..utils.bytes import UINT256_MAX

__all__ = [
    "TtlType",
    "Ttl",
    "Pointer",
    "SpendParams",
    "NamePreclaimParams",
    "NameClaimParams",
    "NameUpdateParams",
    "NameRevokeParams",
    "NameTransferParams",
    "ContractCreateParams",
    "ContractCallParams",
    "OracleRegisterParams",
    "OracleExtendParams",
    "OraclePostQueryParams",
    "OracleRespondParams",
    "DEFAULT_FEE",
    "DEFAULT_GAS",
]

DEFAULT_FEE = 20000
DEFAULT_TTL = 0
DEFAULT_VM_VERSION = 1
DEFAULT_GAS = 1_600_000 - 21_000
DEFAULT_GAS_PRICE = 1
DEFAULT_QUERY_FEE = 30000
DEFAULT_ORACLE_TTL_DELTA = 500
DEFAULT_QUERY_TTL_DELTA = 10
DEFAULT_RESPONSE_TTL_DELTA = 10
DEFAULT_CLIENT_TTL = 1
DEFAULT_NAME_TTL = 50000

IdLike = Union[str, Identifier]
BytesInput = Union[bytes, bytearray, str]

P = TypeVar("P", bound="_Params")


# ---------------------------------------------------------------------------
# Field helpers
# ---------------------------------------------------------------------------


def _uint(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{name} must be an integer", field=name, got=type(value).__name__)
    if value < 0:
        raise ValidationError(f"{name} must be non-negative", field=name, value=value)
    if value > UINT256_MAX:
        raise ValidationError(f"{name} exceeds 2**256 - 1", field=name)
    return value


def _ident(name: str, value: Any, expected: Union[Tag, Tuple[Tag, ...]]) -> Identifier:
    if value is None:
        raise ValidationError(f"{name} is required", field=name)
    try:
        return Identifier.parse(value, expected)
    except DecodeError as e:
        raise e.for_field(name) from None


def _bytes(name: str, value: Any, tags: Tuple[Tag, ...], *, allow_text: bool = False) -> bytes:
    """bytes as-is; tagged text is decoded; plain text only where allowed."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        prefix = value.partition("_")[0]
        if any(prefix == t.prefix for t in tags) and "_" in value:
            try:
                return decode(value, tags)[1]
            except DecodeError as e:
                if not allow_text:
                    raise e.for_field(name) from None
        if allow_text:
            return value.encode("utf-8")
        raise ValidationError(
            f"{name} must be bytes or {'/'.join(t.prefix + '_' for t in tags)} text",
            field=name,
        )
    raise ValidationError(f"{name} must be bytes or text", field=name, got=type(value).__name__)


def _text(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"{name} must be a string", field=name, got=type(value).__name__)
    return value


def _set(obj: Any, name: str, value: Any) -> None:
    object.__setattr__(obj, name, value)


# Word boundaries: lower or digit before upper ("senderId"), and the end of
# an acronym run ("queryIDValue"). A trailing acronym ("senderID") stays whole.
_CAMEL_RE = re.compile(r"(?<=[a-z0-9])(?=[A-Z])|(?<=[A-Z])(?=[A-Z][a-z])")


def _snake(key: str) -> str:
    return _CAMEL_RE.sub("_", key).lower()


# ---------------------------------------------------------------------------
# Small value types
# ---------------------------------------------------------------------------


class TtlType(IntEnum):
    DELTA = 0
    BLOCK = 1


@dataclass(frozen=True)
class Ttl:
    """
    Lifetime of an oracle, query or response: relative (DELTA, a number of
    blocks from inclusion) or absolute (BLOCK, a height). Opaque to the
    builders, which encode it as (type code, value).
    """

    type: TtlType
    value: int

    def __post_init__(self) -> None:
        try:
            _set(self, "type", TtlType(self.type))
        except ValueError:
            raise ValidationError("unknown ttl type", field="ttl.type", got=self.type) from None
        _uint("ttl.value", self.value)
        if self.type is TtlType.DELTA and self.value == 0:
            raise ValidationError("relative ttl must be positive", field="ttl.value")

    @classmethod
    def delta(cls, value: int) -> "Ttl":
        return cls(TtlType.DELTA, value)

    @classmethod
    def block(cls, height: int) -> "Ttl":
        return cls(TtlType.BLOCK, height)

    @classmethod
    def parse(cls, value: Any, name: str = "ttl") -> "Ttl":
        """Accept a Ttl, a bare int (relative), or {"type": "delta"|"block", "value": n}."""
        if isinstance(value, Ttl):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return cls.delta(value)
        if isinstance(value, Mapping):
            kind = value.get("type", "delta")
            if isinstance(kind, str):
                try:
                    kind = TtlType[kind.upper()]
                except KeyError:
                    raise ValidationError("ttl type must be 'delta' or 'block'", field=name, got=kind) from None
            try:
                return cls(kind, value.get("value"))
            except ValidationError as e:
                raise ValidationError(e.message, field=name) from None
        raise ValidationError("ttl must be an int or a {type, value} mapping", field=name)

    def to_obj(self) -> Mapping[str, Any]:
        return {"type": self.type.name.lower(), "value": int(self.value)}

    def __iter__(self) -> Iterator[int]:
        yield int(self.type)
        yield int(self.value)


# Identifier types a name may point at.
POINTER_TAGS = (Tag.ACCOUNT, Tag.ORACLE, Tag.CONTRACT, Tag.CHANNEL)


@dataclass(frozen=True)
class Pointer:
    key: str
    id: Identifier

    def __post_init__(self) -> None:
        _text("pointers.key", self.key)
        _set(self, "id", _ident("pointers.id", self.id, POINTER_TAGS))

    @classmethod
    def parse(cls, value: Any) -> "Pointer":
        if isinstance(value, Pointer):
            return value
        if isinstance(value, Mapping):
            if "key" not in value or "id" not in value:
                raise ValidationError("pointer needs 'key' and 'id'", field="pointers")
            return cls(value["key"], value["id"])
        if isinstance(value, (tuple, list)) and len(value) == 2:
            return cls(value[0], value[1])
        raise ValidationError("pointer must be a {key, id} mapping or a pair", field="pointers")

    def to_obj(self) -> Mapping[str, Any]:
        return {"key": self.key, "id": self.id.encode()}


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------


class _Params:
    """Shared mapping constructor; subclasses are frozen keyword-only dataclasses."""

    kind: ClassVar[str] = ""

    @classmethod
    def from_obj(cls: Type[P], obj: Mapping[str, Any]) -> P:
        if isinstance(obj, cls):
            return obj
        if not isinstance(obj, Mapping):
            raise ValidationError(f"{cls.kind} parameters must be a mapping", got=type(obj).__name__)
        known = {f.name: f for f in fields(cls)}  # type: ignore[arg-type]
        kwargs: dict = {}
        for key, value in obj.items():
            name = _snake(key)
            if name not in known:
                raise ValidationError(f"unknown {cls.kind} parameter", field=key)
            if name in kwargs:
                raise ValidationError(f"{cls.kind} parameter given twice", field=key, normalized=name)
            kwargs[name] = value
        for name, f in known.items():
            if name not in kwargs and f.default is MISSING and f.default_factory is MISSING:
                raise ValidationError(f"{name} is required", field=name)
        return cls(**kwargs)


# ---------------------------------------------------------------------------
# Per-kind parameters
# ---------------------------------------------------------------------------


@dataclass(frozen=True, kw_only=True)
class SpendParams(_Params):
    kind: ClassVar[str] = "spend"

    sender_id: IdLike
    recipient_id: IdLike
    amount: int
    nonce: int
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL
    payload: BytesInput = b""

    def __post_init__(self) -> None:
        _set(self, "sender_id", _ident("sender_id", self.sender_id, Tag.ACCOUNT))
        # A spend may target a name as well as an account.
        _set(self, "recipient_id", _ident("recipient_id", self.recipient_id, (Tag.ACCOUNT, Tag.NAME)))
        if self.recipient_id.tag is Tag.NAME and len(self.recipient_id.payload) != 32:
            raise DecodeError("recipient name must be a name hash", field="recipient_id")
        for name in ("amount", "nonce", "fee", "ttl"):
            _uint(name, getattr(self, name))
        _set(self, "payload", _bytes("payload", self.payload, (Tag.BYTEARRAY,), allow_text=True))


@dataclass(frozen=True, kw_only=True)
class NamePreclaimParams(_Params):
    kind: ClassVar[str] = "name-preclaim"

    account_id: IdLike
    commitment_id: IdLike
    nonce: int
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "account_id", _ident("account_id", self.account_id, Tag.ACCOUNT))
        _set(self, "commitment_id", _ident("commitment_id", self.commitment_id, Tag.COMMITMENT))
        for name in ("nonce", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class NameClaimParams(_Params):
    """`name` is checked against the registrar rules by the builder."""

    kind: ClassVar[str] = "name-claim"

    account_id: IdLike
    name: str
    name_salt: int
    nonce: int
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "account_id", _ident("account_id", self.account_id, Tag.ACCOUNT))
        _text("name", self.name)
        for name in ("name_salt", "nonce", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class NameUpdateParams(_Params):
    kind: ClassVar[str] = "name-update"

    account_id: IdLike
    name_id: IdLike
    nonce: int
    name_ttl: int = DEFAULT_NAME_TTL
    pointers: Sequence[Any] = ()
    client_ttl: int = DEFAULT_CLIENT_TTL
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "account_id", _ident("account_id", self.account_id, Tag.ACCOUNT))
        _set(self, "name_id", _name_hash("name_id", self.name_id))
        if isinstance(self.pointers, (str, bytes, Mapping)):
            raise ValidationError("pointers must be a sequence", field="pointers")
        _set(self, "pointers", tuple(Pointer.parse(p) for p in self.pointers))
        for name in ("nonce", "name_ttl", "client_ttl", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class NameRevokeParams(_Params):
    kind: ClassVar[str] = "name-revoke"

    account_id: IdLike
    name_id: IdLike
    nonce: int
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "account_id", _ident("account_id", self.account_id, Tag.ACCOUNT))
        _set(self, "name_id", _name_hash("name_id", self.name_id))
        for name in ("nonce", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class NameTransferParams(_Params):
    kind: ClassVar[str] = "name-transfer"

    account_id: IdLike
    name_id: IdLike
    recipient_id: IdLike
    nonce: int
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "account_id", _ident("account_id", self.account_id, Tag.ACCOUNT))
        _set(self, "name_id", _name_hash("name_id", self.name_id))
        _set(self, "recipient_id", _ident("recipient_id", self.recipient_id, Tag.ACCOUNT))
        for name in ("nonce", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class ContractCreateParams(_Params):
    kind: ClassVar[str] = "contract-create"

    owner_id: IdLike
    code: BytesInput
    nonce: int
    vm_version: int = DEFAULT_VM_VERSION
    deposit: int = 0
    amount: int = 0
    gas: int = DEFAULT_GAS
    gas_price: int = DEFAULT_GAS_PRICE
    call_data: BytesInput = b""
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "owner_id", _ident("owner_id", self.owner_id, Tag.ACCOUNT))
        _set(self, "code", _bytes("code", self.code, (Tag.CONTRACT_BYTEARRAY,)))
        _set(self, "call_data", _bytes("call_data", self.call_data, (Tag.CONTRACT_BYTEARRAY,)))
        for name in ("nonce", "vm_version", "deposit", "amount", "gas", "gas_price", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class ContractCallParams(_Params):
    kind: ClassVar[str] = "contract-call"

    caller_id: IdLike
    contract_id: IdLike
    nonce: int
    call_data: BytesInput = b""
    vm_version: int = DEFAULT_VM_VERSION
    amount: int = 0
    gas: int = DEFAULT_GAS
    gas_price: int = DEFAULT_GAS_PRICE
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "caller_id", _ident("caller_id", self.caller_id, Tag.ACCOUNT))
        _set(self, "contract_id", _ident("contract_id", self.contract_id, Tag.CONTRACT))
        _set(self, "call_data", _bytes("call_data", self.call_data, (Tag.CONTRACT_BYTEARRAY,)))
        for name in ("nonce", "vm_version", "amount", "gas", "gas_price", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class OracleRegisterParams(_Params):
    kind: ClassVar[str] = "oracle-register"

    account_id: IdLike
    query_format: str
    response_format: str
    nonce: int
    query_fee: int = DEFAULT_QUERY_FEE
    oracle_ttl: Any = field(default_factory=lambda: Ttl.delta(DEFAULT_ORACLE_TTL_DELTA))
    vm_version: int = DEFAULT_VM_VERSION
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "account_id", _ident("account_id", self.account_id, Tag.ACCOUNT))
        _text("query_format", self.query_format)
        _text("response_format", self.response_format)
        _set(self, "oracle_ttl", Ttl.parse(self.oracle_ttl, "oracle_ttl"))
        for name in ("nonce", "query_fee", "vm_version", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class OracleExtendParams(_Params):
    """`caller_id` names the signer; it is validated but not serialized."""

    kind: ClassVar[str] = "oracle-extend"

    oracle_id: IdLike
    caller_id: IdLike
    nonce: int
    oracle_ttl: Any = field(default_factory=lambda: Ttl.delta(DEFAULT_ORACLE_TTL_DELTA))
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "oracle_id", _ident("oracle_id", self.oracle_id, Tag.ORACLE))
        _set(self, "caller_id", _ident("caller_id", self.caller_id, Tag.ACCOUNT))
        _set(self, "oracle_ttl", Ttl.parse(self.oracle_ttl, "oracle_ttl"))
        if self.oracle_ttl.type is not TtlType.DELTA:
            raise ValidationError("oracle extension must be a relative ttl", field="oracle_ttl")
        for name in ("nonce", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class OraclePostQueryParams(_Params):
    kind: ClassVar[str] = "oracle-post-query"

    sender_id: IdLike
    oracle_id: IdLike
    query: str
    nonce: int
    query_fee: int = DEFAULT_QUERY_FEE
    query_ttl: Any = field(default_factory=lambda: Ttl.delta(DEFAULT_QUERY_TTL_DELTA))
    response_ttl: Any = field(default_factory=lambda: Ttl.delta(DEFAULT_RESPONSE_TTL_DELTA))
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "sender_id", _ident("sender_id", self.sender_id, Tag.ACCOUNT))
        _set(self, "oracle_id", _ident("oracle_id", self.oracle_id, Tag.ORACLE))
        _text("query", self.query)
        _set(self, "query_ttl", Ttl.parse(self.query_ttl, "query_ttl"))
        _set(self, "response_ttl", Ttl.parse(self.response_ttl, "response_ttl"))
        if self.response_ttl.type is not TtlType.DELTA:
            raise ValidationError("response ttl must be relative", field="response_ttl")
        for name in ("nonce", "query_fee", "fee", "ttl"):
            _uint(name, getattr(self, name))


@dataclass(frozen=True, kw_only=True)
class OracleRespondParams(_Params):
    """`caller_id` names the signer; it is validated but not serialized."""

    kind: ClassVar[str] = "oracle-respond"

    oracle_id: IdLike
    caller_id: IdLike
    query_id: Any
    response: str
    nonce: int
    response_ttl: Any = field(default_factory=lambda: Ttl.delta(DEFAULT_RESPONSE_TTL_DELTA))
    fee: int = DEFAULT_FEE
    ttl: int = DEFAULT_TTL

    def __post_init__(self) -> None:
        _set(self, "oracle_id", _ident("oracle_id", self.oracle_id, Tag.ORACLE))
        _set(self, "caller_id", _ident("caller_id", self.caller_id, Tag.ACCOUNT))
        qid = self.query_id
        if isinstance(qid, (bytes, bytearray)):
            if len(qid) != 32:
                raise ValidationError("query_id must be 32 bytes", field="query_id", got=len(qid))
            qid = Identifier(Tag.ORACLE_QUERY_ID, bytes(qid))
        _set(self, "query_id", _ident("query_id", qid, Tag.ORACLE_QUERY_ID))
        _text("response", self.response)
        _set(self, "response_ttl", Ttl.parse(self.response_ttl, "response_ttl"))
        if self.response_ttl.type is not TtlType.DELTA:
            raise ValidationError("response ttl must be relative", field="response_ttl")
        for name in ("nonce", "fee", "ttl"):
            _uint(name, getattr(self, name))


def _name_hash(name: str, value: Any) -> Identifier:
    ident = _ident(name, value, Tag.NAME)
    if len(ident.payload) != 32:
        raise DecodeError("expected a name hash (nm_ of 32 bytes)", field=name, got=len(ident.payload))
    return ident

