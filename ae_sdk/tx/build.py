"""
ae_sdk.tx.build
===============

Local (native) builders: parameters in, canonical serialized transaction out.

Each builder:
1. accepts its params dataclass or a mapping (camelCase or snake_case);
2. validates and resolves identifiers (ValidationError / DecodeError naming
   the offending field);
3. derives the identifier the transaction creates, if any
   (contract-create -> contract_id, oracle-post-query -> query_id);
4. assembles the schema-ordered field list and hands it to the encoder.

No network access, no clock, no randomness: equal inputs give equal bytes.

Examples
--------
    from ae_sdk.tx.build import spend_tx

    built = spend_tx({
        "senderId": "ak_...", "recipientId": "ak_...",
        "amount": 100, "nonce": 1, "payload": "hello",
    })
    built.tx        # "tx_..."
    built.tx_hash   # "th_..."
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar, Union

from .. import derive
from ..config import SDKConfig
from ..encoding.schema import VERSION, TxType
from ..encoding.schema import encode as encode_fields
from ..identifiers import Identifier
from .base import BuiltTx, with_defaults
from .params import (ContractCallParams, ContractCreateParams, NameClaimParams,
                     NamePreclaimParams, NameRevokeParams, NameTransferParams,
                     NameUpdateParams, OracleExtendParams, OraclePostQueryParams,
                     OracleRegisterParams, OracleRespondParams, SpendParams,
                     _Params)

log = logging.getLogger(__name__)

__all__ = [
    "spend_tx",
    "name_preclaim_tx",
    "name_claim_tx",
    "name_update_tx",
    "name_revoke_tx",
    "name_transfer_tx",
    "contract_create_tx",
    "contract_call_tx",
    "oracle_register_tx",
    "oracle_extend_tx",
    "oracle_post_query_tx",
    "oracle_respond_tx",
    "NativeTxBuilder",
]

P = TypeVar("P", bound=_Params)
Fields = List[Tuple[str, Any]]


def _coerce(cls: Type[P], params: Union[P, Mapping[str, Any]]) -> P:
    return cls.from_obj(params)


def _finish(tag: TxType, fields: Fields, **derived: Optional[str]) -> BuiltTx:
    raw = encode_fields(tag, VERSION, fields)
    built = BuiltTx.from_raw(raw, **derived)
    log.debug(
        "built %s tx",
        tag.name.lower(),
        extra={"kind": tag.name.lower(), "size": len(raw), **{k: v for k, v in derived.items() if v}},
    )
    return built


# -----------------------------------------------------------------------------
# Spend
# -----------------------------------------------------------------------------


def spend_tx(params: Union[SpendParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(SpendParams, params)
    return _finish(
        TxType.SPEND,
        [
            ("sender_id", p.sender_id),
            ("recipient_id", p.recipient_id),
            ("amount", p.amount),
            ("fee", p.fee),
            ("ttl", p.ttl),
            ("nonce", p.nonce),
            ("payload", p.payload),
        ],
    )


# -----------------------------------------------------------------------------
# Naming
# -----------------------------------------------------------------------------


def name_preclaim_tx(params: Union[NamePreclaimParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(NamePreclaimParams, params)
    return _finish(
        TxType.NAME_PRECLAIM,
        [
            ("account_id", p.account_id),
            ("nonce", p.nonce),
            ("commitment_id", p.commitment_id),
            ("fee", p.fee),
            ("ttl", p.ttl),
        ],
    )


def name_claim_tx(
    params: Union[NameClaimParams, Mapping[str, Any]],
    *,
    suffixes: Optional[Iterable[str]] = None,
) -> BuiltTx:
    """The claim reveals the name in clear together with the preclaim salt."""
    p = _coerce(NameClaimParams, params)
    name = derive.normalize_name(p.name, suffixes)
    return _finish(
        TxType.NAME_CLAIM,
        [
            ("account_id", p.account_id),
            ("nonce", p.nonce),
            ("name", name.encode("ascii")),
            ("name_salt", p.name_salt),
            ("fee", p.fee),
            ("ttl", p.ttl),
        ],
    )


def name_update_tx(params: Union[NameUpdateParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(NameUpdateParams, params)
    return _finish(
        TxType.NAME_UPDATE,
        [
            ("account_id", p.account_id),
            ("nonce", p.nonce),
            ("name_id", p.name_id),
            ("name_ttl", p.name_ttl),
            ("pointers", [(ptr.key, ptr.id) for ptr in p.pointers]),
            ("client_ttl", p.client_ttl),
            ("fee", p.fee),
            ("ttl", p.ttl),
        ],
    )


def name_revoke_tx(params: Union[NameRevokeParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(NameRevokeParams, params)
    return _finish(
        TxType.NAME_REVOKE,
        [
            ("account_id", p.account_id),
            ("nonce", p.nonce),
            ("name_id", p.name_id),
            ("fee", p.fee),
            ("ttl", p.ttl),
        ],
    )


def name_transfer_tx(params: Union[NameTransferParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(NameTransferParams, params)
    return _finish(
        TxType.NAME_TRANSFER,
        [
            ("account_id", p.account_id),
            ("nonce", p.nonce),
            ("name_id", p.name_id),
            ("recipient_id", p.recipient_id),
            ("fee", p.fee),
            ("ttl", p.ttl),
        ],
    )


# -----------------------------------------------------------------------------
# Contracts
# -----------------------------------------------------------------------------


def contract_create_tx(params: Union[ContractCreateParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(ContractCreateParams, params)
    return _finish(
        TxType.CONTRACT_CREATE,
        [
            ("owner_id", p.owner_id),
            ("nonce", p.nonce),
            ("code", p.code),
            ("vm_version", p.vm_version),
            ("fee", p.fee),
            ("ttl", p.ttl),
            ("deposit", p.deposit),
            ("amount", p.amount),
            ("gas", p.gas),
            ("gas_price", p.gas_price),
            ("call_data", p.call_data),
        ],
        contract_id=derive.contract_id(p.owner_id, p.nonce),
    )


def contract_call_tx(params: Union[ContractCallParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(ContractCallParams, params)
    return _finish(
        TxType.CONTRACT_CALL,
        [
            ("caller_id", p.caller_id),
            ("nonce", p.nonce),
            ("contract_id", p.contract_id),
            ("vm_version", p.vm_version),
            ("fee", p.fee),
            ("ttl", p.ttl),
            ("amount", p.amount),
            ("gas", p.gas),
            ("gas_price", p.gas_price),
            ("call_data", p.call_data),
        ],
    )


# -----------------------------------------------------------------------------
# Oracles
# -----------------------------------------------------------------------------


def oracle_register_tx(params: Union[OracleRegisterParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(OracleRegisterParams, params)
    return _finish(
        TxType.ORACLE_REGISTER,
        [
            ("account_id", p.account_id),
            ("nonce", p.nonce),
            ("query_format", p.query_format),
            ("response_format", p.response_format),
            ("query_fee", p.query_fee),
            ("oracle_ttl", tuple(p.oracle_ttl)),
            ("fee", p.fee),
            ("ttl", p.ttl),
            ("vm_version", p.vm_version),
        ],
    )


def oracle_extend_tx(params: Union[OracleExtendParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(OracleExtendParams, params)
    return _finish(
        TxType.ORACLE_EXTEND,
        [
            ("oracle_id", p.oracle_id),
            ("nonce", p.nonce),
            ("oracle_ttl", tuple(p.oracle_ttl)),
            ("fee", p.fee),
            ("ttl", p.ttl),
        ],
    )


def oracle_post_query_tx(params: Union[OraclePostQueryParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(OraclePostQueryParams, params)
    return _finish(
        TxType.ORACLE_QUERY,
        [
            ("sender_id", p.sender_id),
            ("nonce", p.nonce),
            ("oracle_id", p.oracle_id),
            ("query", p.query),
            ("query_fee", p.query_fee),
            ("query_ttl", tuple(p.query_ttl)),
            ("response_ttl", tuple(p.response_ttl)),
            ("fee", p.fee),
            ("ttl", p.ttl),
        ],
        query_id=derive.query_id(p.sender_id, p.nonce, p.oracle_id),
    )


def oracle_respond_tx(params: Union[OracleRespondParams, Mapping[str, Any]]) -> BuiltTx:
    p = _coerce(OracleRespondParams, params)
    return _finish(
        TxType.ORACLE_RESPONSE,
        [
            ("oracle_id", p.oracle_id),
            ("nonce", p.nonce),
            ("query_id", p.query_id.payload),
            ("response", p.response),
            ("response_ttl", tuple(p.response_ttl)),
            ("fee", p.fee),
            ("ttl", p.ttl),
        ],
    )


# -----------------------------------------------------------------------------
# Strategy object
# -----------------------------------------------------------------------------


def _method(fn: Callable[..., BuiltTx]) -> Callable[..., BuiltTx]:
    @functools.wraps(fn)
    def bound(self: "NativeTxBuilder", params: Union[_Params, Mapping[str, Any]]) -> BuiltTx:
        return fn(with_defaults(params, self.config))

    return bound


class NativeTxBuilder:
    """
    `TxBuilder` backed by the local encoder.

    The config supplies the registrar suffix list used to validate claimed
    names and the fee/ttl used when a mapping leaves them out.
    """

    def __init__(self, config: Optional[SDKConfig] = None) -> None:
        self.config = config or SDKConfig()

    def __repr__(self) -> str:
        return f"NativeTxBuilder(suffixes={list(self.config.name_suffixes)!r})"

    spend_tx = _method(spend_tx)
    name_preclaim_tx = _method(name_preclaim_tx)
    name_update_tx = _method(name_update_tx)
    name_revoke_tx = _method(name_revoke_tx)
    name_transfer_tx = _method(name_transfer_tx)
    contract_create_tx = _method(contract_create_tx)
    contract_call_tx = _method(contract_call_tx)
    oracle_register_tx = _method(oracle_register_tx)
    oracle_extend_tx = _method(oracle_extend_tx)
    oracle_post_query_tx = _method(oracle_post_query_tx)
    oracle_respond_tx = _method(oracle_respond_tx)

    def name_claim_tx(self, params: Union[NameClaimParams, Mapping[str, Any]]) -> BuiltTx:
        return name_claim_tx(with_defaults(params, self.config), suffixes=self.config.name_suffixes)

    def contract_id(self, owner_id: Union[str, Identifier], nonce: int) -> str:
        return derive.contract_id(owner_id, nonce)

    def query_id(self, sender_id: Union[str, Identifier], nonce: int, oracle_id: Union[str, Identifier]) -> str:
        return derive.query_id(sender_id, nonce, oracle_id)
