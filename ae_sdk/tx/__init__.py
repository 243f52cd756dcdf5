"""
ae_sdk.tx
=========

Transaction construction.

- params.py: typed, validated parameter dataclasses (one per kind)
- base.py:   BuiltTx result and the TxBuilder protocol
- build.py:  local builders (`spend_tx`, ..., `NativeTxBuilder`)
- remote.py: node-backed strategy (`NodeTxBuilder`) and `next_nonce`
"""

from .base import KINDS, BuiltTx, TxBuilder
from .build import (NativeTxBuilder, contract_call_tx, contract_create_tx,
                    name_claim_tx, name_preclaim_tx, name_revoke_tx,
                    name_transfer_tx, name_update_tx, oracle_extend_tx,
                    oracle_post_query_tx, oracle_register_tx,
                    oracle_respond_tx, spend_tx)
from .params import (ContractCallParams, ContractCreateParams, NameClaimParams,
                     NamePreclaimParams, NameRevokeParams, NameTransferParams,
                     NameUpdateParams, OracleExtendParams,
                     OraclePostQueryParams, OracleRegisterParams,
                     OracleRespondParams, Pointer, SpendParams, Ttl, TtlType)
from .remote import NodeTxBuilder, next_nonce

__all__ = [
    "KINDS",
    "BuiltTx",
    "TxBuilder",
    "NativeTxBuilder",
    "NodeTxBuilder",
    "next_nonce",
    "spend_tx",
    "name_preclaim_tx",
    "name_claim_tx",
    "name_update_tx",
    "name_revoke_tx",
    "name_transfer_tx",
    "contract_create_tx",
    "contract_call_tx",
    "oracle_register_tx",
    "oracle_extend_tx",
    "oracle_post_query_tx",
    "oracle_respond_tx",
    "Ttl",
    "TtlType",
    "Pointer",
    "SpendParams",
    "NamePreclaimParams",
    "NameClaimParams",
    "NameUpdateParams",
    "NameRevokeParams",
    "NameTransferParams",
    "ContractCreateParams",
    "ContractCallParams",
    "OracleRegisterParams",
    "OracleExtendParams",
    "OraclePostQueryParams",
    "OracleRespondParams",
]
