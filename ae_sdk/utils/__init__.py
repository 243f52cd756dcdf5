"""
Utility helpers for the SDK.

Re-exports:
- bytes: big-endian integer conversion and the uint256 bound
- hash: blake2b-256 and double-sha256 checksum helpers
"""

from .bytes import UINT256_MAX, be_to_int, int_to_be
from .hash import blake2b_256, checksum, sha256d

__all__ = [
    # bytes
    "UINT256_MAX",
    "int_to_be",
    "be_to_int",
    # hash
    "blake2b_256",
    "sha256d",
    "checksum",
]
