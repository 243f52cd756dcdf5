"""
ae_sdk.tx.remote
================

Remote builder strategy: the node's debug endpoints serialize the
transaction and the SDK only validates inputs and parses the answer.

Endpoints (POST, JSON bodies with snake_case keys):

    /v2/debug/transactions/spend
    /v2/debug/names/{preclaim,claim,update,revoke,transfer}
    /v2/debug/contracts/{create,call}
    /v2/debug/oracles/{register,extend,query,respond}

Every answer is ``{"tx": "tx_...", "contract_id"?: "ct_...", "query_id"?: "oq_..."}``.

Parameters go through the same dataclasses as the native path, so both
strategies reject identical inputs before anything leaves the process.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional, Union

from .. import derive
from ..config import SDKConfig
from ..errors import DecodeError, RpcError, ValidationError
from ..identifiers import Identifier, Tag, encode
from ..rpc.http import NodeClient
from .base import BuiltTx, with_defaults
from .params import (ContractCallParams, ContractCreateParams, NameClaimParams,
                     NamePreclaimParams, NameRevokeParams, NameTransferParams,
                     NameUpdateParams, OracleExtendParams, OraclePostQueryParams,
                     OracleRegisterParams, OracleRespondParams, SpendParams)

log = logging.getLogger(__name__)

__all__ = ["NodeTxBuilder", "next_nonce", "ENDPOINTS"]

ENDPOINTS = {
    "spend": "/v2/debug/transactions/spend",
    "name-preclaim": "/v2/debug/names/preclaim",
    "name-claim": "/v2/debug/names/claim",
    "name-update": "/v2/debug/names/update",
    "name-revoke": "/v2/debug/names/revoke",
    "name-transfer": "/v2/debug/names/transfer",
    "contract-create": "/v2/debug/contracts/create",
    "contract-call": "/v2/debug/contracts/call",
    "oracle-register": "/v2/debug/oracles/register",
    "oracle-extend": "/v2/debug/oracles/extend",
    "oracle-post-query": "/v2/debug/oracles/query",
    "oracle-respond": "/v2/debug/oracles/respond",
}


def next_nonce(client: NodeClient, account_id: Union[str, Identifier]) -> int:
    """
    Nonce for the account's next transaction (current nonce + 1).

    An account the node has never seen answers 404 and starts at 1. The
    value is request input only; nothing here is cached.
    """
    try:
        ident = Identifier.parse(account_id, Tag.ACCOUNT)
    except DecodeError as e:
        raise e.for_field("account_id") from None
    try:
        account = client.get(f"/v2/accounts/{ident.encode()}")
    except RpcError as e:
        if e.status == 404:
            return 1
        raise
    if not isinstance(account, Mapping) or not isinstance(account.get("nonce"), int):
        raise RpcError("account response lacks a nonce", path="/v2/accounts")
    return int(account["nonce"]) + 1


def _cb(data: bytes) -> str:
    return encode(Tag.CONTRACT_BYTEARRAY, data)


def _text(name: str, data: bytes) -> str:
    # The debug API takes spend payloads as JSON strings.
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        raise ValidationError(f"{name} is not representable as text for the node API", field=name) from None


class NodeTxBuilder:
    """`TxBuilder` that delegates serialization to a node."""

    def __init__(self, client: NodeClient, config: Optional[SDKConfig] = None) -> None:
        self.client = client
        self.config = config or SDKConfig()

    def __repr__(self) -> str:
        return f"NodeTxBuilder(url={self.client.url!r})"

    # --- plumbing --------------------------------------------------------

    def _post(self, kind: str, body: Dict[str, Any]) -> BuiltTx:
        path = ENDPOINTS[kind]
        resp = self.client.post(path, body)
        if not isinstance(resp, Mapping) or not isinstance(resp.get("tx"), str):
            raise RpcError("node answer lacks a tx", path=path)
        built = BuiltTx.from_tx(
            resp["tx"],
            contract_id=resp.get("contract_id"),
            query_id=resp.get("query_id"),
        )
        log.debug("node built %s tx", kind, extra={"kind": kind, "size": len(built.raw)})
        return built

    # --- spend -----------------------------------------------------------

    def spend_tx(self, params: Union[SpendParams, Mapping[str, Any]]) -> BuiltTx:
        p = SpendParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "spend",
            {
                "sender_id": p.sender_id.encode(),
                "recipient_id": p.recipient_id.encode(),
                "amount": p.amount,
                "fee": p.fee,
                "ttl": p.ttl,
                "nonce": p.nonce,
                "payload": _text("payload", p.payload),
            },
        )

    # --- naming ----------------------------------------------------------

    def name_preclaim_tx(self, params: Union[NamePreclaimParams, Mapping[str, Any]]) -> BuiltTx:
        p = NamePreclaimParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "name-preclaim",
            {
                "account_id": p.account_id.encode(),
                "nonce": p.nonce,
                "commitment_id": p.commitment_id.encode(),
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )

    def name_claim_tx(self, params: Union[NameClaimParams, Mapping[str, Any]]) -> BuiltTx:
        p = NameClaimParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "name-claim",
            {
                "account_id": p.account_id.encode(),
                "nonce": p.nonce,
                "name": derive.encode_name(p.name, self.config.name_suffixes),
                "name_salt": p.name_salt,
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )

    def name_update_tx(self, params: Union[NameUpdateParams, Mapping[str, Any]]) -> BuiltTx:
        p = NameUpdateParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "name-update",
            {
                "account_id": p.account_id.encode(),
                "nonce": p.nonce,
                "name_id": p.name_id.encode(),
                "name_ttl": p.name_ttl,
                "pointers": [dict(ptr.to_obj()) for ptr in p.pointers],
                "client_ttl": p.client_ttl,
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )

    def name_revoke_tx(self, params: Union[NameRevokeParams, Mapping[str, Any]]) -> BuiltTx:
        p = NameRevokeParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "name-revoke",
            {
                "account_id": p.account_id.encode(),
                "nonce": p.nonce,
                "name_id": p.name_id.encode(),
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )

    def name_transfer_tx(self, params: Union[NameTransferParams, Mapping[str, Any]]) -> BuiltTx:
        p = NameTransferParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "name-transfer",
            {
                "account_id": p.account_id.encode(),
                "nonce": p.nonce,
                "name_id": p.name_id.encode(),
                "recipient_id": p.recipient_id.encode(),
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )

    # --- contracts -------------------------------------------------------

    def contract_create_tx(self, params: Union[ContractCreateParams, Mapping[str, Any]]) -> BuiltTx:
        p = ContractCreateParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "contract-create",
            {
                "owner_id": p.owner_id.encode(),
                "nonce": p.nonce,
                "code": _cb(p.code),
                "vm_version": p.vm_version,
                "deposit": p.deposit,
                "amount": p.amount,
                "gas": p.gas,
                "gas_price": p.gas_price,
                "fee": p.fee,
                "ttl": p.ttl,
                "call_data": _cb(p.call_data),
            },
        )

    def contract_call_tx(self, params: Union[ContractCallParams, Mapping[str, Any]]) -> BuiltTx:
        p = ContractCallParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "contract-call",
            {
                "caller_id": p.caller_id.encode(),
                "nonce": p.nonce,
                "contract_id": p.contract_id.encode(),
                "vm_version": p.vm_version,
                "amount": p.amount,
                "gas": p.gas,
                "gas_price": p.gas_price,
                "fee": p.fee,
                "ttl": p.ttl,
                "call_data": _cb(p.call_data),
            },
        )

    # --- oracles ---------------------------------------------------------

    def oracle_register_tx(self, params: Union[OracleRegisterParams, Mapping[str, Any]]) -> BuiltTx:
        p = OracleRegisterParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "oracle-register",
            {
                "account_id": p.account_id.encode(),
                "nonce": p.nonce,
                "query_format": p.query_format,
                "response_format": p.response_format,
                "query_fee": p.query_fee,
                "oracle_ttl": dict(p.oracle_ttl.to_obj()),
                "vm_version": p.vm_version,
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )

    def oracle_extend_tx(self, params: Union[OracleExtendParams, Mapping[str, Any]]) -> BuiltTx:
        p = OracleExtendParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "oracle-extend",
            {
                "oracle_id": p.oracle_id.encode(),
                "nonce": p.nonce,
                "oracle_ttl": dict(p.oracle_ttl.to_obj()),
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )

    def oracle_post_query_tx(self, params: Union[OraclePostQueryParams, Mapping[str, Any]]) -> BuiltTx:
        p = OraclePostQueryParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "oracle-post-query",
            {
                "sender_id": p.sender_id.encode(),
                "nonce": p.nonce,
                "oracle_id": p.oracle_id.encode(),
                "query": p.query,
                "query_fee": p.query_fee,
                "query_ttl": dict(p.query_ttl.to_obj()),
                "response_ttl": dict(p.response_ttl.to_obj()),
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )

    def oracle_respond_tx(self, params: Union[OracleRespondParams, Mapping[str, Any]]) -> BuiltTx:
        p = OracleRespondParams.from_obj(with_defaults(params, self.config))
        return self._post(
            "oracle-respond",
            {
                "oracle_id": p.oracle_id.encode(),
                "nonce": p.nonce,
                "query_id": p.query_id.encode(),
                "response": p.response,
                "response_ttl": dict(p.response_ttl.to_obj()),
                "fee": p.fee,
                "ttl": p.ttl,
            },
        )
