"""
Workproof Core Module

The verification proof engine.

Submodules:
    - errors: exception taxonomy
    - fingerprint: file and work fingerprints
    - merkle: Merkle commitments and inclusion proofs
    - anchor: ledger anchoring with block-reference fallback
    - signer: HMAC and Ed25519 proof signatures
    - proof: the VerificationProof wire format
    - orchestrator: proof issuance
    - verifier: confidence-scored verification
    - certificate: certificate data derived from a proof
"""

from workproof.core.errors import (
    ProofEngineError,
    EmptyInputError,
    UnknownNetworkError,
    AnchorUnavailableError,
    TransactionInFlightError,
    MalformedProofError,
)

from workproof.core.fingerprint import (
    WorkMetadata,
    canonical_metadata,
    fingerprint_file,
    fingerprint_work,
)

from workproof.core.merkle import (
    MerkleEngine,
    MerkleCommitment,
    ProofStep,
    build_tree,
    verify_proof,
    verify_indexed_proof,
)

from workproof.core.anchor import (
    AnchorAttempt,
    AnchorKind,
    AnchorRecord,
    LedgerAnchorService,
    timestamp_hash,
)

from workproof.core.signer import (
    ProofSigner,
    HmacProofSigner,
    Ed25519ProofSigner,
    generate_key_pair_b64,
)

from workproof.core.proof import VerificationProof, signing_payload

from workproof.core.certificate import BlockchainCertificateData, build_certificate_data

from workproof.core.orchestrator import (
    IssueOptions,
    ProofIssuance,
    ProofOrchestrator,
    VerificationLevel,
)

from workproof.core.verifier import (
    ProofVerifier,
    VerificationChecks,
    VerificationResult,
)

__all__ = [
    # Errors
    "ProofEngineError",
    "EmptyInputError",
    "UnknownNetworkError",
    "AnchorUnavailableError",
    "TransactionInFlightError",
    "MalformedProofError",
    # Fingerprint
    "WorkMetadata",
    "canonical_metadata",
    "fingerprint_file",
    "fingerprint_work",
    # Merkle
    "MerkleEngine",
    "MerkleCommitment",
    "ProofStep",
    "build_tree",
    "verify_proof",
    "verify_indexed_proof",
    # Anchor
    "AnchorAttempt",
    "AnchorKind",
    "AnchorRecord",
    "LedgerAnchorService",
    "timestamp_hash",
    # Signer
    "ProofSigner",
    "HmacProofSigner",
    "Ed25519ProofSigner",
    "generate_key_pair_b64",
    # Proof
    "VerificationProof",
    "signing_payload",
    "BlockchainCertificateData",
    "build_certificate_data",
    # Issuance
    "IssueOptions",
    "ProofIssuance",
    "ProofOrchestrator",
    "VerificationLevel",
    # Verification
    "ProofVerifier",
    "VerificationChecks",
    "VerificationResult",
]
