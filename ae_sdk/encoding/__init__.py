"""
ae_sdk.encoding
===============

Canonical binary encoding for transactions:

- rlp.py:    strict RLP encode/decode (minimal integers, canonical prefixes)
- schema.py: (tag, version) field schemas; encode/decode of whole transactions

The schema layer is the only place that knows field order. Builders hand it
an ordered (name, value) list and it refuses anything that drifts.
"""

from __future__ import annotations

from .rlp import decode_int, encode_int, rlp_decode, rlp_encode
from .schema import (SCHEMAS, VERSION, DecodedTx, FieldSpec, FieldType, TxType,
                     schema_for)
from .schema import decode as decode_tx
from .schema import encode as encode_tx

__all__ = [
    # RLP
    "encode_int",
    "decode_int",
    "rlp_encode",
    "rlp_decode",
    # Schemas
    "TxType",
    "FieldType",
    "FieldSpec",
    "SCHEMAS",
    "VERSION",
    "DecodedTx",
    "schema_for",
    "encode_tx",
    "decode_tx",
]
