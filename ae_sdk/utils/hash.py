"""
ae_sdk.utils.hash
=================

Digests used by the identifier codec and the derived-id functions.

- blake2b_256(data)     chain hash: object ids, commitments, tx hashes
- sha256d(data)         double SHA-256, source of the 4-byte identifier checksum
- checksum(data)        sha256d(data)[:4]

All digests come from hashlib; no optional accelerators are needed.
"""

from __future__ import annotations

import hashlib

from .bytes import BytesLike

CHECKSUM_LEN = 4
HASH_LEN = 32


def blake2b_256(data: BytesLike) -> bytes:
    """BLAKE2b with a 32-byte digest."""
    return hashlib.blake2b(bytes(data), digest_size=HASH_LEN).digest()


def sha256(data: BytesLike) -> bytes:
    return hashlib.sha256(bytes(data)).digest()


def sha256d(data: BytesLike) -> bytes:
    """sha256(sha256(data))."""
    return sha256(sha256(data))


def checksum(data: BytesLike) -> bytes:
    return sha256d(data)[:CHECKSUM_LEN]


__all__ = [
    "CHECKSUM_LEN",
    "HASH_LEN",
    "blake2b_256",
    "sha256",
    "sha256d",
    "checksum",
]
