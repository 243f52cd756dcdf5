"""
ae_sdk.derive
=============

Deterministic, offline derivation of identifiers from transaction inputs.

- normalize_name(name)                 -> canonical lower-case registrar name
- commitment_id(name, salt)            -> cm_ hash binding a name to a secret salt
- name_id(name)                        -> nm_ hash of a name
- encode_name(name)                    -> nm_ encoded name text (claim form)
- oracle_id(account_id)                -> ok_ id sharing the account's key
- query_id(sender_id, nonce, oracle_id)-> oq_ id of an oracle query
- contract_id(owner_id, nonce)         -> ct_ address of a created contract
- tx_hash(tx)                          -> th_ hash of a serialized transaction
- generate_salt(source=None)           -> 256-bit salt for name preclaims

All functions are pure apart from generate_salt(), whose randomness comes
from an injectable `SaltSource` (defaults to the OS CSPRNG).
"""

from __future__ import annotations

import logging
import re
import secrets
from typing import Iterable, Optional, Protocol, Union

from .errors import DecodeError, InvalidNameError, ValidationError
from .identifiers import Identifier, Tag, decode
from .identifiers import encode as encode_id
from .utils.bytes import UINT256_MAX, int_to_be
from .utils.hash import blake2b_256

log = logging.getLogger(__name__)

__all__ = [
    "DEFAULT_NAME_SUFFIXES",
    "MAX_NAME_LENGTH",
    "SaltSource",
    "normalize_name",
    "commitment_id",
    "name_id",
    "encode_name",
    "oracle_id",
    "query_id",
    "contract_id",
    "generate_salt",
    "tx_hash",
]

DEFAULT_NAME_SUFFIXES = ("test", "aet")
MAX_NAME_LENGTH = 253

_LABEL_RE = re.compile(r"^[a-z0-9](?:[a-z0-9-]*[a-z0-9])?$")

IdLike = Union[str, Identifier]


class SaltSource(Protocol):
    """Anything with random.Random's getrandbits(); secrets.SystemRandom qualifies."""

    def getrandbits(self, k: int) -> int: ...


# ---------------------------------------------------------------------------
# Names
# ---------------------------------------------------------------------------


def normalize_name(name: str, suffixes: Optional[Iterable[str]] = None) -> str:
    """
    Return the canonical form of a registrar name.

    Accepts plain text (``Alice.test``) or the nm_-encoded claim form. The
    result is lower-case ASCII ``label.suffix`` where the suffix is one of
    `suffixes` (default: test, aet).
    """
    if not isinstance(name, str):
        raise InvalidNameError("name must be a string", got=type(name).__name__)
    text = name
    if text.startswith(Tag.NAME.prefix + "_"):
        try:
            raw = decode(text, Tag.NAME)[1]
            text = raw.decode("ascii")
        except (DecodeError, UnicodeDecodeError):
            raise InvalidNameError("nm_ value does not carry a name", name=name) from None

    if not text.isascii():
        raise InvalidNameError("name must be ASCII", name=name)
    text = text.lower()
    if len(text) > MAX_NAME_LENGTH:
        raise InvalidNameError(f"name longer than {MAX_NAME_LENGTH} characters", name=name)

    label, dot, suffix = text.rpartition(".")
    allowed = tuple(s.lower() for s in (suffixes or DEFAULT_NAME_SUFFIXES))
    if not dot or suffix not in allowed:
        raise InvalidNameError("name must end with a registrar suffix", name=name, suffixes=list(allowed))
    if not _LABEL_RE.match(label):
        raise InvalidNameError("invalid characters in name label", name=name)
    return text


def name_id(name: str, suffixes: Optional[Iterable[str]] = None) -> str:
    """nm_ encoded blake2b-256 hash of the normalized name."""
    return encode_id(Tag.NAME, blake2b_256(normalize_name(name, suffixes).encode("ascii")))


def encode_name(name: str, suffixes: Optional[Iterable[str]] = None) -> str:
    """nm_ encoded name text, the form used by claim transactions."""
    return encode_id(Tag.NAME, normalize_name(name, suffixes).encode("ascii"))


def _check_salt(salt: int) -> int:
    if isinstance(salt, bool) or not isinstance(salt, int):
        raise ValidationError("salt must be an integer", field="salt", got=type(salt).__name__)
    if not 0 <= salt <= UINT256_MAX:
        raise ValidationError("salt must be within [0, 2**256)", field="salt")
    return salt


def commitment_id(name: str, salt: int, suffixes: Optional[Iterable[str]] = None) -> str:
    """
    cm_ commitment binding `name` to `salt`:

        blake2b_256(normalized_name || salt as 32-byte big-endian)

    The preclaim publishes only this hash; the later claim reveals the salt.
    """
    text = normalize_name(name, suffixes)
    digest = blake2b_256(text.encode("ascii") + int_to_be(_check_salt(salt), length=32))
    return encode_id(Tag.COMMITMENT, digest)


def generate_salt(source: Optional[SaltSource] = None) -> int:
    """Uniform 256-bit salt; `source` defaults to secrets.SystemRandom()."""
    rng = source if source is not None else secrets.SystemRandom()
    return _check_salt(rng.getrandbits(256))


# ---------------------------------------------------------------------------
# Derived addresses
# ---------------------------------------------------------------------------


def _payload(value: IdLike, expected, field: str) -> bytes:
    try:
        return Identifier.parse(value, expected).payload
    except DecodeError as e:
        raise e.for_field(field) from None


def _check_nonce(nonce: int) -> int:
    if isinstance(nonce, bool) or not isinstance(nonce, int):
        raise ValidationError("nonce must be an integer", field="nonce", got=type(nonce).__name__)
    if not 0 <= nonce <= UINT256_MAX:
        raise ValidationError("nonce must be within [0, 2**256)", field="nonce")
    return nonce


def oracle_id(account_id: IdLike) -> str:
    """An oracle is addressed by its operator's public key under the ok_ tag."""
    return encode_id(Tag.ORACLE, _payload(account_id, Tag.ACCOUNT, "account_id"))


def query_id(sender_id: IdLike, nonce: int, oracle: IdLike) -> str:
    """blake2b_256(sender || nonce as 32-byte big-endian || oracle) as oq_."""
    sender = _payload(sender_id, Tag.ACCOUNT, "sender_id")
    oracle_key = _payload(oracle, Tag.ORACLE, "oracle_id")
    digest = blake2b_256(sender + int_to_be(_check_nonce(nonce), length=32) + oracle_key)
    return encode_id(Tag.ORACLE_QUERY_ID, digest)


def contract_id(owner_id: IdLike, nonce: int) -> str:
    """blake2b_256(owner || minimal big-endian nonce) as ct_."""
    owner = _payload(owner_id, Tag.ACCOUNT, "owner_id")
    cid = encode_id(Tag.CONTRACT, blake2b_256(owner + int_to_be(_check_nonce(nonce))))
    log.debug("derived contract id", extra={"contract_id": cid, "nonce": nonce})
    return cid


def tx_hash(tx: Union[str, bytes]) -> str:
    """th_ hash of a serialized transaction (tx_ text or raw bytes)."""
    raw = decode(tx, Tag.TRANSACTION)[1] if isinstance(tx, str) else bytes(tx)
    return encode_id(Tag.TX_HASH, blake2b_256(raw))
