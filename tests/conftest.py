"""
Shared pytest fixtures:
- Deterministic accounts and identifiers built from fixed key bytes
- The in-process fake node (FastAPI TestClient) and a NodeClient bound to it
- Both builder strategies (native and node-backed)
- A deterministic salt source
"""
from __future__ import annotations

import random
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from ae_sdk.config import SDKConfig
from ae_sdk.identifiers import Tag, encode
from ae_sdk.rpc.http import NodeClient
from ae_sdk.tx.build import NativeTxBuilder
from ae_sdk.tx.remote import NodeTxBuilder
from tests.harness.fake_node import create_app


def _key(seed: int) -> bytes:
    return bytes((seed + i) % 256 for i in range(32))


@pytest.fixture(scope="session")
def ids() -> SimpleNamespace:
    """Textual identifiers derived from fixed 32-byte keys."""
    sender = _key(0x11)
    recipient = _key(0x42)
    return SimpleNamespace(
        sender=encode(Tag.ACCOUNT, sender),
        recipient=encode(Tag.ACCOUNT, recipient),
        sender_key=sender,
        recipient_key=recipient,
        oracle=encode(Tag.ORACLE, sender),
        contract=encode(Tag.CONTRACT, _key(0x77)),
        channel=encode(Tag.CHANNEL, _key(0x99)),
        name_hash=encode(Tag.NAME, _key(0xA0)),
        commitment=encode(Tag.COMMITMENT, _key(0xC0)),
        query=encode(Tag.ORACLE_QUERY_ID, _key(0xD0)),
    )


@pytest.fixture
def node_app(ids: SimpleNamespace):
    return create_app(accounts={ids.sender: 7})


@pytest.fixture
def node_client(node_app) -> NodeClient:
    with TestClient(node_app) as http:
        yield NodeClient("http://testserver", client=http, max_retries=0)


@pytest.fixture
def native() -> NativeTxBuilder:
    return NativeTxBuilder(SDKConfig())


@pytest.fixture
def remote(node_client: NodeClient) -> NodeTxBuilder:
    return NodeTxBuilder(node_client, SDKConfig())


@pytest.fixture
def salt_source() -> random.Random:
    """Seeded PRNG standing in for the OS CSPRNG."""
    return random.Random(20250921)
