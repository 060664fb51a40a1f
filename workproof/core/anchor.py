"""
Workproof Ledger Anchor Service

Binds a commitment hash to a point in an external ledger's history.

Per request the service walks a two-tier state machine:

    REQUEST
      -> [signer configured AND balance > 0] -> SUBMIT_TRANSACTION
             -> CONFIRMED                        (kind = "transaction")
             -> FAILED -> BLOCK_REFERENCE        (kind = "block-reference")
      -> [no signer OR zero balance]         -> BLOCK_REFERENCE

Each tier returns an AnchorAttempt instead of raising, and
AnchorAttempt.or_else() chains the fallback explicitly. Anchoring only
fails when the read-only head-block query fails too; that final state is
raised as AnchorUnavailableError naming the network.

What gets embedded downstream is not the AnchorRecord but its
timestamp hash:

    timestamp_hash = SHA-256(canonical_json({hash, blockNumber, blockHash, timestamp}))

Usage:
    >>> service = LedgerAnchorService(registry)
    >>> record = await service.anchor(verification_hash, "polygon")
    >>> anchor_digest = timestamp_hash(verification_hash, record)
"""

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Optional, Tuple

from workproof.core.errors import AnchorUnavailableError, TransactionInFlightError
from workproof.ledger.client import Block, TransactionReceipt
from workproof.ledger.registry import LedgerClientRegistry, LedgerHandle
from workproof.utils.helpers import canonical_json, sha256_text

logger = logging.getLogger(__name__)

DEFAULT_REQUEST_TIMEOUT = 15.0
DEFAULT_CONFIRMATION_TIMEOUT = 120.0


class AnchorKind(Enum):
    """How an anchor is bound to the ledger."""

    TRANSACTION = "transaction"          # funded self-transaction carrying the hash
    BLOCK_REFERENCE = "block-reference"  # passive reference to the chain head


@dataclass(frozen=True)
class AnchorRecord:
    """
    Immutable record of where a commitment was anchored.

    Retained for audit and debugging; only its timestamp hash is exposed
    in a VerificationProof.

    Attributes:
        network_id: Network the anchor lives on
        block_number: Height of the referenced block
        block_hash: Hash of the referenced block
        block_timestamp: Block timestamp in seconds
        kind: Transaction or block reference
        transaction_hash: Present only for kind == TRANSACTION
        gas_used: Gas consumed by the transaction, if reported
    """
    network_id: str
    block_number: int
    block_hash: str
    block_timestamp: int
    kind: AnchorKind
    transaction_hash: Optional[str] = None
    gas_used: Optional[int] = None

    @classmethod
    def from_block(cls, network_id: str, block: Block) -> "AnchorRecord":
        return cls(
            network_id=network_id,
            block_number=block.number,
            block_hash=block.hash,
            block_timestamp=block.timestamp,
            kind=AnchorKind.BLOCK_REFERENCE,
        )

    @classmethod
    def from_receipt(cls, network_id: str, receipt: TransactionReceipt) -> "AnchorRecord":
        return cls(
            network_id=network_id,
            block_number=receipt.block_number,
            block_hash=receipt.block_hash,
            block_timestamp=receipt.block_timestamp,
            kind=AnchorKind.TRANSACTION,
            transaction_hash=receipt.transaction_hash,
            gas_used=receipt.gas_used,
        )

    def to_dict(self) -> dict:
        return {
            "networkId": self.network_id,
            "blockNumber": self.block_number,
            "blockHash": self.block_hash,
            "blockTimestamp": self.block_timestamp,
            "transactionHash": self.transaction_hash,
            "gasUsed": self.gas_used,
            "kind": self.kind.value,
        }


def timestamp_hash(commitment_hash: str, record: AnchorRecord) -> str:
    """
    Digest binding a commitment hash to an anchor's block.

    Args:
        commitment_hash: The hash that was anchored
        record: Where it was anchored

    Returns:
        str: 64-character hex digest, embedded as blockchainAnchor
    """
    return sha256_text(canonical_json({
        "hash": commitment_hash,
        "blockNumber": record.block_number,
        "blockHash": record.block_hash,
        "timestamp": record.block_timestamp,
    }))


@dataclass(frozen=True)
class AnchorAttempt:
    """
    Outcome of one anchoring tier: either a record or an error, never both.

    Attributes:
        record: The anchor, when the tier succeeded
        stage: Where the tier stopped ("skipped", "balance", "submit",
               "confirm", "block", or "done")
        errors: Failure descriptions accumulated across tiers
    """
    record: Optional[AnchorRecord] = None
    stage: str = "done"
    errors: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def ok(self) -> bool:
        return self.record is not None

    @property
    def error(self) -> Optional[str]:
        return self.errors[-1] if self.errors else None

    @classmethod
    def success(cls, record: AnchorRecord) -> "AnchorAttempt":
        return cls(record=record)

    @classmethod
    def failure(cls, stage: str, error: str) -> "AnchorAttempt":
        return cls(stage=stage, errors=(error,))

    async def or_else(
        self, fallback: Callable[[], Awaitable["AnchorAttempt"]]
    ) -> "AnchorAttempt":
        """Run fallback only if this attempt failed, keeping earlier errors."""
        if self.ok:
            return self
        result = await fallback()
        if result.ok:
            return result
        return AnchorAttempt(stage=result.stage, errors=self.errors + result.errors)


def _describe(exc: BaseException) -> str:
    message = str(exc)
    return f"{type(exc).__name__}: {message}" if message else type(exc).__name__


class LedgerAnchorService:
    """
    Anchors commitment hashes to registered ledgers.

    Stateless between calls; safe to share across concurrent requests.

    Args:
        registry: Network id -> ledger client handles
        request_timeout: Bound on each individual ledger call, seconds
        confirmation_timeout: Bound on waiting for a transaction receipt
    """

    def __init__(
        self,
        registry: LedgerClientRegistry,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        confirmation_timeout: float = DEFAULT_CONFIRMATION_TIMEOUT,
    ):
        self._registry = registry
        self._request_timeout = request_timeout
        self._confirmation_timeout = confirmation_timeout

    @property
    def registry(self) -> LedgerClientRegistry:
        return self._registry

    async def anchor(self, commitment_hash: str, network_id: str) -> AnchorRecord:
        """
        Anchor a commitment hash on one network.

        Args:
            commitment_hash: Hex hash to anchor
            network_id: Registered network to anchor on

        Returns:
            AnchorRecord: kind "transaction" or "block-reference"

        Raises:
            UnknownNetworkError: If network_id is not registered
            AnchorUnavailableError: If both tiers failed
            TransactionInFlightError: If cancelled after submission
        """
        handle = self._registry.get(network_id)

        attempt = await self.try_transaction(handle, commitment_hash)
        if not attempt.ok and attempt.stage != "skipped":
            logger.warning(
                "Transaction anchor failed on %s at %s stage (%s); using block reference",
                network_id, attempt.stage, attempt.error,
            )

        attempt = await attempt.or_else(lambda: self.try_block_reference(handle))
        if not attempt.ok:
            logger.error("Ledger %s unavailable: %s", network_id, "; ".join(attempt.errors))
            raise AnchorUnavailableError(network_id, attempt.error or "unknown failure")

        record = attempt.record
        logger.info(
            "Anchored on %s at block %d (%s)",
            network_id, record.block_number, record.kind.value,
        )
        return record

    async def block_reference(self, network_id: str) -> AnchorRecord:
        """
        Anchor passively to the current head of a network.

        Used directly by callers who abandoned an in-flight transaction.

        Raises:
            UnknownNetworkError: If network_id is not registered
            AnchorUnavailableError: If the head block cannot be read
        """
        handle = self._registry.get(network_id)
        attempt = await self.try_block_reference(handle)
        if not attempt.ok:
            raise AnchorUnavailableError(network_id, attempt.error or "unknown failure")
        return attempt.record

    async def try_transaction(self, handle: LedgerHandle, commitment_hash: str) -> AnchorAttempt:
        """Tier 1: funded self-transaction carrying the commitment hash."""
        if not handle.signer_account:
            return AnchorAttempt.failure("skipped", "no signing account configured")

        client = handle.client
        try:
            balance = await asyncio.wait_for(
                client.get_balance(handle.signer_account), self._request_timeout
            )
        except Exception as exc:
            return AnchorAttempt.failure("balance", _describe(exc))
        if balance <= 0:
            return AnchorAttempt.failure("skipped", "signing account has zero balance")

        try:
            pending = await asyncio.wait_for(
                client.send_self_transaction(commitment_hash), self._request_timeout
            )
        except Exception as exc:
            return AnchorAttempt.failure("submit", _describe(exc))

        try:
            receipt = await asyncio.wait_for(
                client.wait_for_receipt(pending, self._confirmation_timeout),
                self._confirmation_timeout + self._request_timeout,
            )
        except asyncio.CancelledError as exc:
            logger.warning(
                "Anchor cancelled on %s with transaction %s in flight; not resubmitting",
                handle.network_id, pending.transaction_hash,
            )
            raise TransactionInFlightError(handle.network_id, pending.transaction_hash) from exc
        except Exception as exc:
            return AnchorAttempt.failure(
                "confirm", f"{pending.transaction_hash}: {_describe(exc)}"
            )

        if not receipt.success:
            return AnchorAttempt.failure("confirm", f"{pending.transaction_hash}: reverted")
        return AnchorAttempt.success(AnchorRecord.from_receipt(handle.network_id, receipt))

    async def try_block_reference(self, handle: LedgerHandle) -> AnchorAttempt:
        """Tier 2: passive reference to the chain's current head block."""
        try:
            block = await asyncio.wait_for(
                handle.client.get_latest_block(), self._request_timeout
            )
        except Exception as exc:
            return AnchorAttempt.failure("block", _describe(exc))
        return AnchorAttempt.success(AnchorRecord.from_block(handle.network_id, block))
