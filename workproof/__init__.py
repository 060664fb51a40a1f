"""
Workproof: ledger-anchored proofs of authorship

Cryptographic proof that a work existed, in a given form, attributed to a
given creator, no later than a given point in a public ledger's history.

This library provides:
- Deterministic fingerprints of content and metadata
- Merkle commitments for batch issuance
- Ledger anchoring with a funded-transaction path and a passive
  block-reference fallback
- HMAC or Ed25519 proof signatures
- Confidence-scored verification

Example:
    >>> import asyncio
    >>> from workproof import (
    ...     HmacProofSigner, LedgerAnchorService, LedgerClientRegistry,
    ...     ProofOrchestrator, ProofVerifier, WorkMetadata,
    ... )
    >>>
    >>> registry = LedgerClientRegistry().register("ethereum", client)
    >>> signer = HmacProofSigner(secret)
    >>> orchestrator = ProofOrchestrator(LedgerAnchorService(registry), signer)
    >>>
    >>> metadata = WorkMetadata.create("T", "alice", "C1")
    >>> proof = asyncio.run(orchestrator.issue_proof(b"hello", metadata))
    >>>
    >>> result = ProofVerifier(signer).verify(proof, b"hello")
    >>> print(f"Valid: {result.is_valid} ({result.confidence}%)")

License:
    Apache License 2.0
"""

__version__ = "0.1.0"
__author__ = "Workproof Maintainers"
__license__ = "Apache-2.0"

from workproof.core.errors import (
    ProofEngineError,
    EmptyInputError,
    UnknownNetworkError,
    AnchorUnavailableError,
    TransactionInFlightError,
    MalformedProofError,
)
from workproof.core.fingerprint import WorkMetadata, fingerprint_file, fingerprint_work
from workproof.core.merkle import MerkleEngine, MerkleCommitment, build_tree
from workproof.core.anchor import AnchorKind, AnchorRecord, LedgerAnchorService
from workproof.core.signer import HmacProofSigner, Ed25519ProofSigner
from workproof.core.proof import VerificationProof
from workproof.core.orchestrator import (
    IssueOptions,
    ProofOrchestrator,
    VerificationLevel,
)
from workproof.core.verifier import ProofVerifier, VerificationResult
from workproof.ledger.registry import LedgerClientRegistry

__all__ = [
    # Version info
    "__version__",
    "__author__",
    "__license__",
    # Errors
    "ProofEngineError",
    "EmptyInputError",
    "UnknownNetworkError",
    "AnchorUnavailableError",
    "TransactionInFlightError",
    "MalformedProofError",
    # Core components
    "WorkMetadata",
    "fingerprint_file",
    "fingerprint_work",
    "MerkleEngine",
    "MerkleCommitment",
    "build_tree",
    "AnchorKind",
    "AnchorRecord",
    "LedgerAnchorService",
    "LedgerClientRegistry",
    "HmacProofSigner",
    "Ed25519ProofSigner",
    # Issuance and verification
    "VerificationProof",
    "IssueOptions",
    "ProofOrchestrator",
    "VerificationLevel",
    "ProofVerifier",
    "VerificationResult",
]
