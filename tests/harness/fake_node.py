"""
In-process stand-in for a node's HTTP API
=========================================

A small FastAPI app exposing the debug serialization endpoints and the
account endpoint. Its server-side encoding is deliberately independent of
`ae_sdk.encoding`: RLP comes from `rlp` (pyrlp), ids and tx envelopes are
decoded/encoded directly with `base58`/`base64`/`hashlib`. Agreement between
this app and the native builders is therefore a real cross-check, not the
SDK agreeing with itself.

Usage in tests:

    from fastapi.testclient import TestClient
    from tests.harness.fake_node import create_app

    client = TestClient(create_app(accounts={"ak_...": 7}))
    node = NodeClient("http://testserver", client=client)
"""

from __future__ import annotations

import base64
import hashlib
from typing import Any, Dict, List, Mapping, Optional

import base58
import rlp
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse

ID_TYPES = {"ak": 1, "nm": 2, "cm": 3, "ok": 4, "ct": 5, "ch": 6}
TTL_TYPES = {"delta": 0, "block": 1}

SPEND, ORACLE_REGISTER, ORACLE_QUERY, ORACLE_RESPONSE, ORACLE_EXTEND = 12, 22, 23, 24, 25
NAME_CLAIM, NAME_PRECLAIM, NAME_UPDATE, NAME_REVOKE, NAME_TRANSFER = 32, 33, 34, 35, 36
CONTRACT_CREATE, CONTRACT_CALL = 42, 43


class BadRequest(Exception):
    pass


# ---------------------------------------------------------------------------
# Server-side primitives
# ---------------------------------------------------------------------------


def _sha256d4(data: bytes) -> bytes:
    return hashlib.sha256(hashlib.sha256(data).digest()).digest()[:4]


def _blake(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


def _int(n: Any) -> bytes:
    if isinstance(n, bool) or not isinstance(n, int) or n < 0:
        raise BadRequest(f"bad integer: {n!r}")
    return n.to_bytes((n.bit_length() + 7) // 8, "big") if n else b""


def _b58(text: str, prefix: str) -> bytes:
    if not isinstance(text, str) or not text.startswith(prefix + "_"):
        raise BadRequest(f"expected {prefix}_ value, got {text!r}")
    try:
        return base58.b58decode_check(text[len(prefix) + 1 :])
    except ValueError as e:
        raise BadRequest(str(e)) from None


def _b58_enc(prefix: str, payload: bytes) -> str:
    return f"{prefix}_" + base58.b58encode_check(payload).decode("ascii")


def _b64(text: str, prefix: str) -> bytes:
    if not isinstance(text, str) or not text.startswith(prefix + "_"):
        raise BadRequest(f"expected {prefix}_ value")
    raw = base64.b64decode(text[len(prefix) + 1 :])
    payload, check = raw[:-4], raw[-4:]
    if _sha256d4(payload) != check:
        raise BadRequest("invalid checksum")
    return payload


def _id(text: str, *prefixes: str) -> bytes:
    prefix = text.partition("_")[0] if isinstance(text, str) else ""
    if prefix not in prefixes:
        raise BadRequest(f"unexpected id {text!r}")
    payload = _b58(text, prefix)
    if len(payload) != 32:
        raise BadRequest("id payload must be 32 bytes")
    return bytes([ID_TYPES[prefix]]) + payload


def _ttl(obj: Mapping[str, Any]) -> List[bytes]:
    try:
        return [_int(TTL_TYPES[obj["type"]]), _int(obj["value"])]
    except (KeyError, TypeError):
        raise BadRequest(f"bad ttl: {obj!r}") from None


def _tx(fields: List[Any]) -> str:
    raw = rlp.encode(fields)
    return "tx_" + base64.b64encode(raw + _sha256d4(raw)).decode("ascii")


def _need(body: Mapping[str, Any], *keys: str) -> None:
    missing = [k for k in keys if k not in body]
    if missing:
        raise BadRequest(f"missing fields: {', '.join(missing)}")


# ---------------------------------------------------------------------------
# App
# ---------------------------------------------------------------------------


def create_app(accounts: Optional[Mapping[str, int]] = None) -> FastAPI:
    """
    Build the fake node. `accounts` maps ak_ ids to their current nonce;
    unknown accounts answer 404 like a real node.
    """
    app = FastAPI(title="fake-node")
    known: Dict[str, int] = dict(accounts or {})
    app.state.requests = []

    @app.exception_handler(BadRequest)
    async def _bad_request(_request: Request, exc: BadRequest) -> JSONResponse:
        return JSONResponse({"reason": str(exc)}, status_code=400)

    @app.middleware("http")
    async def _record(request: Request, call_next):
        app.state.requests.append((request.method, request.url.path))
        return await call_next(request)

    v2 = APIRouter(prefix="/v2")

    @v2.get("/accounts/{account_id}")
    def get_account(account_id: str) -> Any:
        if account_id not in known:
            return JSONResponse({"reason": "Account not found"}, status_code=404)
        return {"id": account_id, "nonce": known[account_id], "balance": 0}

    @v2.post("/debug/transactions/spend")
    def spend(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "sender_id", "recipient_id", "amount", "fee", "nonce", "payload")
        fields = [
            _int(SPEND), _int(1),
            _id(body["sender_id"], "ak"),
            _id(body["recipient_id"], "ak", "nm"),
            _int(body["amount"]), _int(body["fee"]), _int(body.get("ttl", 0)),
            _int(body["nonce"]), body["payload"].encode("utf-8"),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/names/preclaim")
    def name_preclaim(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "account_id", "nonce", "commitment_id", "fee")
        fields = [
            _int(NAME_PRECLAIM), _int(1),
            _id(body["account_id"], "ak"), _int(body["nonce"]),
            _id(body["commitment_id"], "cm"),
            _int(body["fee"]), _int(body.get("ttl", 0)),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/names/claim")
    def name_claim(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "account_id", "nonce", "name", "name_salt", "fee")
        fields = [
            _int(NAME_CLAIM), _int(1),
            _id(body["account_id"], "ak"), _int(body["nonce"]),
            _b58(body["name"], "nm"), _int(body["name_salt"]),
            _int(body["fee"]), _int(body.get("ttl", 0)),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/names/update")
    def name_update(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "account_id", "nonce", "name_id", "name_ttl", "pointers", "client_ttl", "fee")
        pointers = [
            [p["key"].encode("utf-8"), _id(p["id"], "ak", "ok", "ct", "ch")]
            for p in body["pointers"]
        ]
        fields = [
            _int(NAME_UPDATE), _int(1),
            _id(body["account_id"], "ak"), _int(body["nonce"]),
            _id(body["name_id"], "nm"), _int(body["name_ttl"]),
            pointers, _int(body["client_ttl"]),
            _int(body["fee"]), _int(body.get("ttl", 0)),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/names/revoke")
    def name_revoke(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "account_id", "nonce", "name_id", "fee")
        fields = [
            _int(NAME_REVOKE), _int(1),
            _id(body["account_id"], "ak"), _int(body["nonce"]),
            _id(body["name_id"], "nm"),
            _int(body["fee"]), _int(body.get("ttl", 0)),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/names/transfer")
    def name_transfer(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "account_id", "nonce", "name_id", "recipient_id", "fee")
        fields = [
            _int(NAME_TRANSFER), _int(1),
            _id(body["account_id"], "ak"), _int(body["nonce"]),
            _id(body["name_id"], "nm"), _id(body["recipient_id"], "ak"),
            _int(body["fee"]), _int(body.get("ttl", 0)),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/contracts/create")
    def contract_create(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "owner_id", "nonce", "code", "vm_version", "deposit", "amount",
              "gas", "gas_price", "fee", "call_data")
        owner = _id(body["owner_id"], "ak")
        fields = [
            _int(CONTRACT_CREATE), _int(1),
            owner, _int(body["nonce"]), _b64(body["code"], "cb"),
            _int(body["vm_version"]), _int(body["fee"]), _int(body.get("ttl", 0)),
            _int(body["deposit"]), _int(body["amount"]), _int(body["gas"]),
            _int(body["gas_price"]), _b64(body["call_data"], "cb"),
        ]
        contract = _b58_enc("ct", _blake(owner[1:] + _int(body["nonce"])))
        return {"tx": _tx(fields), "contract_id": contract}

    @v2.post("/debug/contracts/call")
    def contract_call(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "caller_id", "nonce", "contract_id", "vm_version", "amount",
              "gas", "gas_price", "fee", "call_data")
        fields = [
            _int(CONTRACT_CALL), _int(1),
            _id(body["caller_id"], "ak"), _int(body["nonce"]),
            _id(body["contract_id"], "ct"), _int(body["vm_version"]),
            _int(body["fee"]), _int(body.get("ttl", 0)), _int(body["amount"]),
            _int(body["gas"]), _int(body["gas_price"]), _b64(body["call_data"], "cb"),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/oracles/register")
    def oracle_register(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "account_id", "nonce", "query_format", "response_format",
              "query_fee", "oracle_ttl", "fee", "vm_version")
        fields = [
            _int(ORACLE_REGISTER), _int(1),
            _id(body["account_id"], "ak"), _int(body["nonce"]),
            body["query_format"].encode("utf-8"), body["response_format"].encode("utf-8"),
            _int(body["query_fee"]), *_ttl(body["oracle_ttl"]),
            _int(body["fee"]), _int(body.get("ttl", 0)), _int(body["vm_version"]),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/oracles/extend")
    def oracle_extend(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "oracle_id", "nonce", "oracle_ttl", "fee")
        fields = [
            _int(ORACLE_EXTEND), _int(1),
            _id(body["oracle_id"], "ok"), _int(body["nonce"]),
            *_ttl(body["oracle_ttl"]),
            _int(body["fee"]), _int(body.get("ttl", 0)),
        ]
        return {"tx": _tx(fields)}

    @v2.post("/debug/oracles/query")
    def oracle_query(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "sender_id", "nonce", "oracle_id", "query", "query_fee",
              "query_ttl", "response_ttl", "fee")
        sender = _id(body["sender_id"], "ak")
        oracle = _id(body["oracle_id"], "ok")
        fields = [
            _int(ORACLE_QUERY), _int(1),
            sender, _int(body["nonce"]), oracle,
            body["query"].encode("utf-8"), _int(body["query_fee"]),
            *_ttl(body["query_ttl"]), *_ttl(body["response_ttl"]),
            _int(body["fee"]), _int(body.get("ttl", 0)),
        ]
        qid = _blake(sender[1:] + body["nonce"].to_bytes(32, "big") + oracle[1:])
        return {"tx": _tx(fields), "query_id": _b58_enc("oq", qid)}

    @v2.post("/debug/oracles/respond")
    def oracle_respond(body: Dict[str, Any]) -> Dict[str, Any]:
        _need(body, "oracle_id", "nonce", "query_id", "response", "response_ttl", "fee")
        fields = [
            _int(ORACLE_RESPONSE), _int(1),
            _id(body["oracle_id"], "ok"), _int(body["nonce"]),
            _b58(body["query_id"], "oq"), body["response"].encode("utf-8"),
            *_ttl(body["response_ttl"]),
            _int(body["fee"]), _int(body.get("ttl", 0)),
        ]
        return {"tx": _tx(fields)}

    app.include_router(v2)
    return app
