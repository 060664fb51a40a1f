"""
Workproof Ledger Collaborators

Clients for the external ledgers that proofs are anchored to.

Submodules:
    - client: LedgerClient protocol and result types
    - registry: explicit network id -> client registry
    - networks: default network catalogue
    - transport: async JSON-RPC transport seam (httpx)
    - jsonrpc: EVM JSON-RPC LedgerClient
"""

from workproof.ledger.client import (
    Block,
    LedgerClient,
    PendingTransaction,
    ReceiptTimeoutError,
    TransactionReceipt,
)
from workproof.ledger.networks import DEFAULT_NETWORKS, LedgerNetwork, resolve_networks
from workproof.ledger.registry import LedgerClientRegistry, LedgerHandle
from workproof.ledger.transport import HttpxTransport, JsonRpcTransport
from workproof.ledger.jsonrpc import EthJsonRpcClient, JsonRpcError

__all__ = [
    "Block",
    "LedgerClient",
    "PendingTransaction",
    "ReceiptTimeoutError",
    "TransactionReceipt",
    "DEFAULT_NETWORKS",
    "LedgerNetwork",
    "resolve_networks",
    "LedgerClientRegistry",
    "LedgerHandle",
    "HttpxTransport",
    "JsonRpcTransport",
    "EthJsonRpcClient",
    "JsonRpcError",
]
