"""
ae_sdk: offline transaction construction.
Convenience exports for the most common client APIs.
"""

from .version import __version__  # noqa: F401

# Core config & errors
from .config import SDKConfig  # noqa: F401
from .errors import (  # noqa: F401
    AeSdkError,
    DecodeError,
    EncodingInvariantError,
    InvalidNameError,
    RpcError,
    ValidationError,
)

# Identifiers
from .identifiers import Identifier, Tag  # noqa: F401

# Derived ids
from .derive import (  # noqa: F401
    commitment_id,
    contract_id,
    encode_name,
    generate_salt,
    name_id,
    oracle_id,
    query_id,
    tx_hash,
)

# Tx builders
from .tx import (  # noqa: F401
    BuiltTx,
    NativeTxBuilder,
    NodeTxBuilder,
    Ttl,
    TxBuilder,
    next_nonce,
)

# RPC
from .rpc.http import NodeClient  # noqa: F401

__all__ = [
    "__version__",
    "SDKConfig",
    "AeSdkError",
    "DecodeError",
    "EncodingInvariantError",
    "InvalidNameError",
    "RpcError",
    "ValidationError",
    "Identifier",
    "Tag",
    "commitment_id",
    "contract_id",
    "encode_name",
    "generate_salt",
    "name_id",
    "oracle_id",
    "query_id",
    "tx_hash",
    "BuiltTx",
    "NativeTxBuilder",
    "NodeTxBuilder",
    "Ttl",
    "TxBuilder",
    "next_nonce",
    "NodeClient",
]
