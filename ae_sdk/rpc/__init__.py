"""
ae_sdk.rpc
==========

Transport to the remote authority (a node's HTTP API). Only the remote
builder strategy and nonce lookup use it; the offline core never does.
"""

from .http import NodeClient

__all__ = ["NodeClient"]
