from __future__ import annotations

import io
import json
import logging

from ae_sdk import logging as aelog
from ae_sdk.errors import (AeSdkError, DecodeError, EncodingInvariantError,
                           ErrorCode, InvalidNameError, RpcError,
                           ValidationError)


def test_error_codes_and_payloads():
    err = ValidationError("amount must be non-negative", field="amount", value=-1)
    assert isinstance(err, AeSdkError)
    assert err.code is ErrorCode.VALIDATION
    assert err.field == "amount"
    assert err.to_dict() == {
        "code": "TX/VALIDATION",
        "message": "amount must be non-negative",
        "data": {"field": "amount", "value": -1},
        "retryable": False,
    }


def test_decode_error_for_field_keeps_data():
    err = DecodeError("invalid checksum", value="ak_x").for_field("sender_id")
    assert err.field == "sender_id"
    assert err.data["value"] == "ak_x"
    assert isinstance(err, ValueError)


def test_core_errors_are_not_retryable():
    for err in (
        ValidationError("x"),
        DecodeError("x"),
        InvalidNameError("x", name="a"),
        EncodingInvariantError("x", tag=12, version=1),
    ):
        assert err.retryable is False


def test_rpc_error_carries_status():
    err = RpcError("busy", status=503, path="/v2/x", retryable=True)
    assert err.status == 503
    assert err.retryable
    assert err.to_dict()["data"] == {"status": 503, "path": "/v2/x"}


def test_bytes_are_hex_in_error_data():
    err = EncodingInvariantError("bad", value=b"\x01\x02")
    assert err.data["value"] == "0102"


def test_json_logging_includes_context_and_extras():
    stream = io.StringIO()
    logger = aelog.configure(json=True, level="DEBUG", stream=stream)
    try:
        with aelog.trace_scope("abc123"):
            aelog.bind(component="wallet")
            logging.getLogger("ae_sdk.tx.build").debug("built tx", extra={"kind": "spend", "size": 10})
        line = json.loads(stream.getvalue().strip().splitlines()[-1])
        assert line["msg"] == "built tx"
        assert line["trace_id"] == "abc123"
        assert line["component"] == "wallet"
        assert line["kind"] == "spend"
        assert aelog.context() == {}
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)


def test_text_logging_is_single_line():
    stream = io.StringIO()
    logger = aelog.configure(json=False, level="INFO", stream=stream)
    try:
        logging.getLogger("ae_sdk.rpc.http").warning("retrying", extra={"attempt": 2})
        out = stream.getvalue()
        assert "WARNING" in out and "retrying" in out and "attempt=2" in out
        logging.getLogger("ae_sdk.rpc.http").debug("hidden")
        assert "hidden" not in stream.getvalue()
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)


def test_configure_replaces_its_own_handler():
    a, b = io.StringIO(), io.StringIO()
    aelog.configure(json=True, stream=a)
    logger = aelog.configure(json=True, stream=b)
    try:
        installed = [h for h in logger.handlers if getattr(h, "_ae_sdk_handler", False)]
        assert len(installed) == 1
    finally:
        for h in list(logger.handlers):
            logger.removeHandler(h)
        logger.setLevel(logging.NOTSET)


def test_context_helpers():
    aelog.clear_context()
    aelog.bind(node="http://127.0.0.1:3013", kind="spend", raw=b"\x01")
    assert aelog.context() == {"node": "http://127.0.0.1:3013", "kind": "spend", "raw": "01"}
    aelog.unbind("kind", "missing")
    assert "kind" not in aelog.context()
    aelog.clear_context()
    assert aelog.context() == {}
    assert aelog.get_logger().name == "ae_sdk"
    with aelog.trace_scope() as tid:
        assert aelog.context()["trace_id"] == tid
