"""
Shared fixtures: fake ledger and content clients, a fixed clock, and
ready-wired services.

No test touches the network.
"""

import asyncio
from typing import List, Optional

import pytest

from workproof.core.anchor import LedgerAnchorService
from workproof.core.fingerprint import WorkMetadata
from workproof.core.orchestrator import IssueOptions, ProofOrchestrator
from workproof.core.signer import HmacProofSigner
from workproof.core.verifier import ProofVerifier
from workproof.ledger.client import Block, PendingTransaction, TransactionReceipt
from workproof.ledger.registry import LedgerClientRegistry


FIXED_NOW = 1_700_000_000_000
HEAD_BLOCK = Block(number=18_500_000, hash="0x" + "ab" * 32, timestamp=1_699_999_990)
SIGNER_ACCOUNT = "0x" + "11" * 20
TEST_SECRET = "test-signing-secret"


class FakeLedgerClient:
    """
    Scriptable LedgerClient.

    By default it answers head-block queries, reports zero balance and
    refuses to send transactions.
    """

    def __init__(
        self,
        block: Block = HEAD_BLOCK,
        balance: int = 0,
        block_error: Optional[Exception] = None,
        balance_error: Optional[Exception] = None,
        send_error: Optional[Exception] = None,
        receipt_error: Optional[Exception] = None,
        receipt_success: bool = True,
        hang_receipt: bool = False,
        hang_block: bool = False,
    ):
        self.block = block
        self.balance = balance
        self.block_error = block_error
        self.balance_error = balance_error
        self.send_error = send_error
        self.receipt_error = receipt_error
        self.receipt_success = receipt_success
        self.hang_receipt = hang_receipt
        self.hang_block = hang_block
        self.sent: List[str] = []
        self.block_calls = 0
        self.submitted = asyncio.Event() if hang_receipt else None

    async def get_latest_block(self) -> Block:
        self.block_calls += 1
        if self.hang_block:
            await asyncio.sleep(3600)
        if self.block_error is not None:
            raise self.block_error
        return self.block

    async def get_balance(self, address: str) -> int:
        if self.balance_error is not None:
            raise self.balance_error
        return self.balance

    async def send_self_transaction(self, payload: str) -> PendingTransaction:
        if self.send_error is not None:
            raise self.send_error
        self.sent.append(payload)
        return PendingTransaction(transaction_hash="0x" + "cd" * 32, network_id="test")

    async def wait_for_receipt(self, pending: PendingTransaction, timeout: float) -> TransactionReceipt:
        if self.hang_receipt:
            self.submitted.set()
            await asyncio.sleep(3600)
        if self.receipt_error is not None:
            raise self.receipt_error
        return TransactionReceipt(
            transaction_hash=pending.transaction_hash,
            block_number=self.block.number + 1,
            block_hash="0x" + "ef" * 32,
            block_timestamp=self.block.timestamp + 12,
            gas_used=21_512,
            success=self.receipt_success,
        )


class FakeContentClient:
    """Content store returning a fixed CID, or raising."""

    def __init__(self, content_id: str = "bafybeigdyrztestcid", error: Optional[Exception] = None):
        self.content_id = content_id
        self.error = error
        self.stored: List[bytes] = []

    async def store(self, data: bytes) -> str:
        if self.error is not None:
            raise self.error
        self.stored.append(data)
        return self.content_id


def fixed_clock() -> int:
    return FIXED_NOW


def make_registry(client, signer_account: Optional[str] = None, network_id: str = "test"):
    return LedgerClientRegistry().register(network_id, client, signer_account=signer_account)


@pytest.fixture
def signer():
    return HmacProofSigner(TEST_SECRET)


@pytest.fixture
def metadata():
    return WorkMetadata.create("Sunset", "alice", "CERT-001", ["carol", "bob"])


@pytest.fixture
def ledger_client():
    return FakeLedgerClient()


@pytest.fixture
def registry(ledger_client):
    return make_registry(ledger_client)


@pytest.fixture
def anchor_service(registry):
    return LedgerAnchorService(registry, request_timeout=1.0, confirmation_timeout=1.0)


@pytest.fixture
def content_client():
    return FakeContentClient()


@pytest.fixture
def orchestrator(anchor_service, signer, content_client):
    return ProofOrchestrator(anchor_service, signer, content_client, clock=fixed_clock)


@pytest.fixture
def verifier(signer):
    return ProofVerifier(signer, clock=lambda: FIXED_NOW + 60_000)


@pytest.fixture
def issued(orchestrator, metadata):
    """A proof issued over b"hello" on the fake network."""
    return asyncio.run(orchestrator.issue(b"hello", metadata, IssueOptions(network_id="test")))
