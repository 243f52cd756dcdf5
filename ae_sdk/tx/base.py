"""
ae_sdk.tx.base
==============

The builder capability shared by the two strategies:

- `BuiltTx`: the result of building one transaction (tx_ text, raw bytes and
  any identifier the transaction derives).
- `TxBuilder`: protocol satisfied by `NativeTxBuilder` (local encoding) and
  `NodeTxBuilder` (a node's debug endpoints). Equivalence of the two is the
  defining property of this package.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional, Protocol, Union, runtime_checkable

from ..config import SDKConfig
from ..derive import tx_hash
from ..errors import DecodeError
from ..identifiers import Tag, decode, encode
from ..encoding.schema import DecodedTx
from ..encoding.schema import decode as decode_fields

__all__ = ["BuiltTx", "TxBuilder", "KINDS", "with_defaults"]

# Kind name -> builder method name.
KINDS = {
    "spend": "spend_tx",
    "name-preclaim": "name_preclaim_tx",
    "name-claim": "name_claim_tx",
    "name-update": "name_update_tx",
    "name-revoke": "name_revoke_tx",
    "name-transfer": "name_transfer_tx",
    "contract-create": "contract_create_tx",
    "contract-call": "contract_call_tx",
    "oracle-register": "oracle_register_tx",
    "oracle-extend": "oracle_extend_tx",
    "oracle-post-query": "oracle_post_query_tx",
    "oracle-respond": "oracle_respond_tx",
}


@dataclass(frozen=True)
class BuiltTx:
    tx: str
    raw: bytes
    contract_id: Optional[str] = None
    query_id: Optional[str] = None

    @classmethod
    def from_raw(cls, raw: bytes, **derived: Optional[str]) -> "BuiltTx":
        return cls(tx=encode(Tag.TRANSACTION, raw), raw=bytes(raw), **derived)

    @classmethod
    def from_tx(cls, tx: str, **derived: Optional[str]) -> "BuiltTx":
        try:
            raw = decode(tx, Tag.TRANSACTION)[1]
        except DecodeError as e:
            raise e.for_field("tx") from None
        return cls(tx=tx, raw=raw, **derived)

    @property
    def tx_hash(self) -> str:
        return tx_hash(self.raw)

    def decode(self) -> DecodedTx:
        return decode_fields(self.raw)

    def to_obj(self) -> Mapping[str, Any]:
        out: dict = {"tx": self.tx}
        if self.contract_id is not None:
            out["contract_id"] = self.contract_id
        if self.query_id is not None:
            out["query_id"] = self.query_id
        return out


Params = Union[Mapping[str, Any], Any]


@runtime_checkable
class TxBuilder(Protocol):
    """One method per transaction kind; each takes a params dataclass or mapping."""

    def spend_tx(self, params: Params) -> BuiltTx: ...

    def name_preclaim_tx(self, params: Params) -> BuiltTx: ...

    def name_claim_tx(self, params: Params) -> BuiltTx: ...

    def name_update_tx(self, params: Params) -> BuiltTx: ...

    def name_revoke_tx(self, params: Params) -> BuiltTx: ...

    def name_transfer_tx(self, params: Params) -> BuiltTx: ...

    def contract_create_tx(self, params: Params) -> BuiltTx: ...

    def contract_call_tx(self, params: Params) -> BuiltTx: ...

    def oracle_register_tx(self, params: Params) -> BuiltTx: ...

    def oracle_extend_tx(self, params: Params) -> BuiltTx: ...

    def oracle_post_query_tx(self, params: Params) -> BuiltTx: ...

    def oracle_respond_tx(self, params: Params) -> BuiltTx: ...


def with_defaults(params: Params, config: SDKConfig) -> Params:
    """Fill `fee` and `ttl` from `config` when a mapping leaves them out."""
    if not isinstance(params, Mapping):
        return params
    out = dict(params)
    out.setdefault("fee", config.default_fee)
    out.setdefault("ttl", config.default_ttl)
    return out
