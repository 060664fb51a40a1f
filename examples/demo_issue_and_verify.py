#!/usr/bin/env python3
"""
Workproof Demo: Issue and Verify a Proof

This script issues a proof of authorship for a file and then verifies it,
showing what each verification check reacts to.

Without --rpc-url the ledger is simulated in-process, so the demo runs
offline and anchors by block reference. With --rpc-url a real EVM node
is queried for its head block.

Usage:
    python examples/demo_issue_and_verify.py -i artwork.png --creator alice

    # Anchor against a real node
    python examples/demo_issue_and_verify.py -i artwork.png --rpc-url https://polygon-rpc.com

    # Save the proof
    python examples/demo_issue_and_verify.py -i artwork.png -o proof.json
"""

import argparse
import asyncio
import dataclasses
import sys
import time
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from workproof.core.anchor import LedgerAnchorService
from workproof.core.fingerprint import WorkMetadata
from workproof.core.orchestrator import IssueOptions, ProofOrchestrator
from workproof.core.signer import Ed25519ProofSigner, generate_key_pair_b64
from workproof.core.verifier import ProofVerifier
from workproof.ledger.client import Block
from workproof.ledger.jsonrpc import EthJsonRpcClient
from workproof.ledger.registry import LedgerClientRegistry
from workproof.utils.helpers import truncate_hash


class SimulatedLedger:
    """Offline ledger that only answers head-block queries."""

    def __init__(self):
        self._started = int(time.time())

    async def get_latest_block(self) -> Block:
        height = 18_000_000 + int(time.time()) - self._started
        return Block(number=height, hash="0x" + f"{height:064x}", timestamp=int(time.time()))

    async def get_balance(self, address):
        return 0

    async def send_self_transaction(self, payload):
        raise RuntimeError("simulated ledger does not accept transactions")

    async def wait_for_receipt(self, pending, timeout):
        raise RuntimeError("simulated ledger does not accept transactions")


def print_result(label, result):
    status = "VALID" if result.is_valid else "INVALID"
    print(f"  {label:<28} {status:<8} confidence {result.confidence:>3}%")
    failed = result.checks.failed_names()
    if failed:
        print(f"  {'':<28} failed: {', '.join(failed)}")


async def run(args):
    data = Path(args.input).read_bytes() if args.input else b"hello"

    if args.rpc_url:
        client = EthJsonRpcClient(args.network, args.rpc_url)
    else:
        client = SimulatedLedger()
    registry = LedgerClientRegistry().register(args.network, client)

    private_key_b64, public_key_b64 = generate_key_pair_b64()
    signer = Ed25519ProofSigner.from_private_key_b64(private_key_b64)

    orchestrator = ProofOrchestrator(LedgerAnchorService(registry), signer)
    metadata = WorkMetadata.create(args.title, args.creator, args.certificate_id, args.collaborator)

    print("=" * 60)
    print("ISSUING PROOF")
    print("=" * 60)
    issuance = await orchestrator.issue(data, metadata, IssueOptions(network_id=args.network))
    proof = issuance.proof
    print(f"  File hash:         {truncate_hash(proof.file_hash, 32)}")
    print(f"  Verification hash: {truncate_hash(issuance.verification_hash, 32)}")
    print(f"  Anchor:            {issuance.anchor.kind.value} at block {issuance.anchor.block_number}")
    print(f"  Anchor digest:     {truncate_hash(proof.blockchain_anchor, 32)}")
    print(f"  Public key:        {public_key_b64}")

    if args.output:
        Path(args.output).write_text(proof.to_json(), encoding="utf-8")
        print(f"  Saved to:          {args.output}")

    # Verifiers only need the public key
    verifier = ProofVerifier(Ed25519ProofSigner.from_public_key_b64(public_key_b64))

    print()
    print("=" * 60)
    print("VERIFYING")
    print("=" * 60)
    print_result("original file", verifier.verify(proof, data))
    print_result("modified file", verifier.verify(proof, data + b"!"))
    forged = dataclasses.replace(proof, creator="mallory")
    print_result("forged creator", verifier.verify(forged, data))
    print_result("forged creator + file", verifier.verify(forged, data + b"!"))


def main():
    parser = argparse.ArgumentParser(description="Issue and verify a Workproof proof")
    parser.add_argument("-i", "--input", help="File to prove (default: b'hello')")
    parser.add_argument("--title", default="Untitled")
    parser.add_argument("--creator", default="alice")
    parser.add_argument("--collaborator", action="append", default=[])
    parser.add_argument("--certificate-id", default="DEMO-0001")
    parser.add_argument("--network", default="ethereum")
    parser.add_argument("--rpc-url", help="EVM JSON-RPC endpoint (default: simulated)")
    parser.add_argument("-o", "--output", help="Write the proof JSON here")
    args = parser.parse_args()

    asyncio.run(run(args))


if __name__ == "__main__":
    main()
