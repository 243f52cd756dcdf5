from __future__ import annotations

import hashlib
import random
import secrets

import pytest

from ae_sdk import derive
from ae_sdk.errors import DecodeError, InvalidNameError, ValidationError
from ae_sdk.identifiers import Tag, decode, encode

KEY = bytes(range(32))
ACCOUNT = encode(Tag.ACCOUNT, KEY)


def _blake(data: bytes) -> bytes:
    return hashlib.blake2b(data, digest_size=32).digest()


# ---------------------------------------------------------------------------
# names
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("test123test.test", "test123test.test"),
        ("Alice.TEST", "alice.test"),
        ("my-name.aet", "my-name.aet"),
    ],
)
def test_normalize_name(raw: str, expected: str):
    assert derive.normalize_name(raw) == expected


@pytest.mark.parametrize(
    "bad",
    ["", "alice", "alice.com", ".test", "-alice.test", "alice-.test", "al ice.test",
     "al_ice.test", "ålice.test", "a" * 250 + ".test"],
)
def test_invalid_names_are_rejected(bad: str):
    with pytest.raises(InvalidNameError):
        derive.normalize_name(bad)


def test_custom_suffixes():
    assert derive.normalize_name("alice.chain", suffixes=("chain",)) == "alice.chain"
    with pytest.raises(InvalidNameError):
        derive.normalize_name("alice.test", suffixes=("chain",))


def test_encoded_names_are_accepted():
    encoded = derive.encode_name("test123test.test")
    assert encoded == encode(Tag.NAME, b"test123test.test")
    assert derive.normalize_name(encoded) == "test123test.test"
    # A name hash is not a name
    with pytest.raises(InvalidNameError):
        derive.normalize_name(derive.name_id("test123test.test"))


def test_name_id_hashes_normalized_name():
    assert derive.name_id("Test123Test.test") == encode(Tag.NAME, _blake(b"test123test.test"))


# ---------------------------------------------------------------------------
# commitments
# ---------------------------------------------------------------------------


def test_commitment_is_deterministic():
    a = derive.commitment_id("test123test.test", 42)
    b = derive.commitment_id("test123test.test", 42)
    assert a == b
    assert a.startswith("cm_")
    assert decode(a)[1] == _blake(b"test123test.test" + (42).to_bytes(32, "big"))


def test_commitment_is_sensitive_to_name_and_salt():
    base = derive.commitment_id("test123test.test", 42)
    assert derive.commitment_id("test123test.test", 43) != base
    assert derive.commitment_id("test124test.test", 42) != base


def test_commitment_normalizes_case():
    assert derive.commitment_id("TEST123test.test", 7) == derive.commitment_id("test123test.test", 7)


@pytest.mark.parametrize("salt", [-1, 2**256, True, "1"])
def test_commitment_salt_bounds(salt):
    with pytest.raises(ValidationError):
        derive.commitment_id("test123test.test", salt)


def test_commitment_salt_extremes_are_fine():
    assert derive.commitment_id("a.test", 0) != derive.commitment_id("a.test", 2**256 - 1)


def test_generate_salt_uses_injected_source():
    a = derive.generate_salt(random.Random(1))
    b = derive.generate_salt(random.Random(1))
    assert a == b
    assert 0 <= a < 2**256
    assert 0 <= derive.generate_salt() < 2**256


def test_generate_salt_draws_256_bits():
    class Recording:
        def __init__(self):
            self.calls = []

        def getrandbits(self, k):
            self.calls.append(k)
            return 2**k - 1

    source = Recording()
    assert derive.generate_salt(source) == 2**256 - 1
    assert source.calls == [256]
    assert 0 <= derive.generate_salt(secrets.SystemRandom()) < 2**256


def test_preclaim_claim_scenario():
    salt = derive.generate_salt(random.Random(20250921))
    cm = derive.commitment_id("test123test.test", salt)
    # The salt revealed at claim time re-derives the published commitment.
    assert derive.commitment_id("test123test.test", salt) == cm


# ---------------------------------------------------------------------------
# derived addresses
# ---------------------------------------------------------------------------


def test_oracle_id_retags_account():
    oid = derive.oracle_id(ACCOUNT)
    assert oid == encode(Tag.ORACLE, KEY)


def test_query_id_layout():
    oracle = derive.oracle_id(ACCOUNT)
    sender = encode(Tag.ACCOUNT, b"\x09" * 32)
    qid = derive.query_id(sender, 5, oracle)
    assert qid == encode(Tag.ORACLE_QUERY_ID, _blake(b"\x09" * 32 + (5).to_bytes(32, "big") + KEY))


def test_contract_id_layout():
    assert derive.contract_id(ACCOUNT, 1) == encode(Tag.CONTRACT, _blake(KEY + b"\x01"))
    assert derive.contract_id(ACCOUNT, 256) == encode(Tag.CONTRACT, _blake(KEY + b"\x01\x00"))
    assert derive.contract_id(ACCOUNT, 0) == encode(Tag.CONTRACT, _blake(KEY))


def test_contract_id_depends_on_nonce():
    assert derive.contract_id(ACCOUNT, 1) != derive.contract_id(ACCOUNT, 2)


def test_derivations_name_the_bad_field():
    with pytest.raises(DecodeError) as ei:
        derive.contract_id(encode(Tag.CONTRACT, KEY), 1)
    assert ei.value.field == "owner_id"
    with pytest.raises(DecodeError) as ei:
        derive.query_id(ACCOUNT, 1, ACCOUNT)
    assert ei.value.field == "oracle_id"
    with pytest.raises(ValidationError):
        derive.contract_id(ACCOUNT, -1)


def test_tx_hash_accepts_text_or_bytes():
    raw = b"\xc3\x0c\x01\x80"
    tx = encode(Tag.TRANSACTION, raw)
    assert derive.tx_hash(tx) == derive.tx_hash(raw) == encode(Tag.TX_HASH, _blake(raw))
