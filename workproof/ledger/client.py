"""
Ledger client protocol: the network boundary of the anchor service.

Defines the interface the anchor service depends on, not a concrete
implementation. Concrete implementations:
    - EthJsonRpcClient (EVM JSON-RPC over an async transport)
    - fake clients in tests

All methods are async because ledger I/O is network I/O. Unlike the
anchor service, clients are allowed to raise: transport failures, RPC
errors and timeouts surface as exceptions and the anchor service turns
them into AnchorAttempt failures.
"""

from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable


@dataclass(frozen=True)
class Block:
    """A ledger block header as far as anchoring needs it.

    Attributes:
        number: Block height.
        hash: Block hash (0x-prefixed hex for EVM chains).
        timestamp: Block timestamp in seconds since the epoch.
    """

    number: int
    hash: str
    timestamp: int


@dataclass(frozen=True)
class PendingTransaction:
    """Handle for a transaction that was handed to the ledger."""

    transaction_hash: str
    network_id: str


@dataclass(frozen=True)
class TransactionReceipt:
    """Confirmed transaction, with the block it landed in.

    Attributes:
        transaction_hash: Hash of the confirmed transaction.
        block_number: Height of the including block.
        block_hash: Hash of the including block.
        block_timestamp: Timestamp of the including block, seconds.
        gas_used: Gas consumed, when the ledger reports it.
        success: False if the ledger included the transaction but
            reverted it.
    """

    transaction_hash: str
    block_number: int
    block_hash: str
    block_timestamp: int
    gas_used: Optional[int] = None
    success: bool = True


class ReceiptTimeoutError(TimeoutError):
    """No receipt appeared before the confirmation deadline."""

    def __init__(self, transaction_hash: str, timeout: float):
        self.transaction_hash = transaction_hash
        self.timeout = timeout
        super().__init__(f"No receipt for {transaction_hash} within {timeout:.1f}s")


@runtime_checkable
class LedgerClient(Protocol):
    """Interface for one ledger network."""

    async def get_latest_block(self) -> Block:
        """Read the current head block."""
        ...

    async def send_self_transaction(self, payload: str) -> PendingTransaction:
        """Submit a minimal transaction to the signer's own account.

        Args:
            payload: Opaque hex payload carried in the transaction data.
        """
        ...

    async def wait_for_receipt(
        self, pending: PendingTransaction, timeout: float
    ) -> TransactionReceipt:
        """Wait until the transaction is included.

        Raises:
            ReceiptTimeoutError: If no receipt appears within timeout.
        """
        ...

    async def get_balance(self, address: str) -> int:
        """Native balance of an address in the smallest unit (wei)."""
        ...
