"""
Workproof Verification Module

Recomputes the checks behind a VerificationProof and reports a
confidence-scored result:

    1. fileHashMatch    - original bytes hash to proof.fileHash
                          (assumed true when the bytes are not supplied)
    2. signatureValid   - signature over the rebuilt signing payload
    3. timestampValid   - 0 <= now - proof.timestamp < retention window
    4. merkleProofValid - inclusion proof against a caller-supplied batch
                          root; without a root only the proof's structure
                          is checked (an empty proof is trivially valid)

    confidence = 100 * passed / 4
    is_valid   = confidence >= 75

A proof that parsed is never rejected by an exception: every failure is
a false check. Parsing problems surface earlier, as MalformedProofError
from verify_document().

Usage:
    >>> verifier = ProofVerifier(signer)
    >>> result = verifier.verify(proof, original_bytes)
    >>> print(f"Valid: {result.is_valid} ({result.confidence}%)")
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Union

from workproof.core.errors import MalformedProofError
from workproof.core.fingerprint import fingerprint_file
from workproof.core.merkle import MerkleEngine
from workproof.core.proof import VerificationProof
from workproof.core.signer import ProofSigner
from workproof.utils.helpers import MS_PER_DAY, is_hex_digest, now_ms, truncate_hash

logger = logging.getLogger(__name__)

RETENTION_MS = 365 * MS_PER_DAY
VALIDITY_THRESHOLD = 75
CHECK_COUNT = 4


@dataclass(frozen=True)
class VerificationChecks:
    """
    Outcome of each independent check.

    Attributes:
        file_hash_match: Original bytes match the proof's file hash
        signature_valid: Signature matches the proof contents
        timestamp_valid: Timestamp is not in the future and within retention
        merkle_proof_valid: Inclusion proof is valid (or structurally sound)
    """
    file_hash_match: bool
    signature_valid: bool
    timestamp_valid: bool
    merkle_proof_valid: bool

    @property
    def passed(self) -> int:
        """Number of checks that passed."""
        return sum((
            self.file_hash_match,
            self.signature_valid,
            self.timestamp_valid,
            self.merkle_proof_valid,
        ))

    def failed_names(self) -> List[str]:
        return [name for name, ok in self.to_dict().items() if not ok]

    def to_dict(self) -> dict:
        return {
            "fileHashMatch": self.file_hash_match,
            "signatureValid": self.signature_valid,
            "timestampValid": self.timestamp_valid,
            "merkleProofValid": self.merkle_proof_valid,
        }


def confidence_for(checks: VerificationChecks) -> int:
    """Percentage of checks that passed."""
    return 100 * checks.passed // CHECK_COUNT


@dataclass(frozen=True)
class VerificationResult:
    """
    Confidence-scored verification outcome. Computed on demand, never stored.

    Attributes:
        is_valid: True when confidence reaches VALIDITY_THRESHOLD
        checks: Individual check outcomes
        confidence: 0, 25, 50, 75 or 100
    """
    is_valid: bool
    checks: VerificationChecks
    confidence: int

    @classmethod
    def from_checks(cls, checks: VerificationChecks) -> "VerificationResult":
        confidence = confidence_for(checks)
        return cls(
            is_valid=confidence >= VALIDITY_THRESHOLD,
            checks=checks,
            confidence=confidence,
        )

    def to_dict(self) -> dict:
        return {
            "isValid": self.is_valid,
            "checks": self.checks.to_dict(),
            "confidence": self.confidence,
        }


class ProofVerifier:
    """
    Verifies VerificationProofs.

    Stateless; safe to share between threads and tasks.

    Args:
        signer: Signer (or verify-only signer) matching the issuer's scheme
        merkle_engine: Merkle engine (default MerkleEngine())
        clock: Callable returning epoch milliseconds (default now_ms)
        retention_ms: Age after which a timestamp no longer validates
    """

    def __init__(
        self,
        signer: ProofSigner,
        merkle_engine: Optional[MerkleEngine] = None,
        clock: Optional[Callable[[], int]] = None,
        retention_ms: int = RETENTION_MS,
    ):
        self._signer = signer
        self._merkle = merkle_engine or MerkleEngine()
        self._clock = clock or now_ms
        self._retention_ms = retention_ms

    def check_file_hash(self, proof: VerificationProof, data: Optional[bytes]) -> bool:
        if data is None:
            return True
        return fingerprint_file(data) == proof.file_hash

    def check_signature(self, proof: VerificationProof) -> bool:
        try:
            return self._signer.verify(proof.signing_payload(), proof.digital_signature)
        except (TypeError, ValueError) as e:
            logger.debug("Signature check failed on malformed input: %s", e)
            return False

    def check_timestamp(self, proof: VerificationProof) -> bool:
        if isinstance(proof.timestamp, bool) or not isinstance(proof.timestamp, int):
            return False
        age = self._clock() - proof.timestamp
        return 0 <= age < self._retention_ms

    def check_merkle(
        self,
        proof: VerificationProof,
        batch_root: Optional[str] = None,
        leaf_hash: Optional[str] = None,
        leaf_index: int = 0,
    ) -> bool:
        """
        Check the inclusion proof.

        Batch leaves are verification hashes, which the proof does not
        carry, so a batch_root is only checked together with leaf_hash.
        """
        try:
            siblings = list(proof.merkle_proof)
        except TypeError as e:
            logger.debug("Merkle check failed on malformed input: %s", e)
            return False
        if batch_root is None:
            # No independent root: only the shape of the proof can be checked
            return all(is_hex_digest(element) for element in siblings)
        if leaf_hash is None:
            logger.warning(
                "Batch root given for proof %s without its leaf hash; Merkle check fails",
                proof.certificate_id,
            )
            return False
        return self._merkle.verify(leaf_hash, siblings, batch_root, leaf_index)

    def verify(
        self,
        proof: VerificationProof,
        data: Optional[bytes] = None,
        batch_root: Optional[str] = None,
        leaf_hash: Optional[str] = None,
        leaf_index: int = 0,
    ) -> VerificationResult:
        """
        Verify a proof, optionally against the original bytes.

        Args:
            proof: The proof to verify
            data: Original bytes of the work, if available
            batch_root: Independently known Merkle root of the issuing batch
            leaf_hash: Verification hash to prove against batch_root; required
                       whenever batch_root is given
            leaf_index: Position of the leaf in its batch

        Returns:
            VerificationResult: Never raises for a parsed proof
        """
        checks = VerificationChecks(
            file_hash_match=self.check_file_hash(proof, data),
            signature_valid=self.check_signature(proof),
            timestamp_valid=self.check_timestamp(proof),
            merkle_proof_valid=self.check_merkle(proof, batch_root, leaf_hash, leaf_index),
        )
        result = VerificationResult.from_checks(checks)
        if result.is_valid:
            logger.info(
                "Proof %s verified (confidence %d%%)",
                proof.certificate_id, result.confidence,
            )
        else:
            logger.info(
                "Proof %s failed verification (confidence %d%%, failed: %s, file %s)",
                proof.certificate_id, result.confidence,
                ", ".join(checks.failed_names()), truncate_hash(proof.file_hash),
            )
        return result

    def verify_document(
        self,
        document: Union[str, bytes, Mapping[str, Any]],
        data: Optional[bytes] = None,
        batch_root: Optional[str] = None,
        leaf_hash: Optional[str] = None,
        leaf_index: int = 0,
    ) -> VerificationResult:
        """
        Parse a proof at the transport boundary, then verify it.

        Raises:
            MalformedProofError: If the document is not a valid proof
        """
        if isinstance(document, bytes):
            try:
                document = document.decode("utf-8")
            except UnicodeDecodeError as e:
                raise MalformedProofError([f"invalid UTF-8: {e}"]) from e
        if isinstance(document, str):
            proof = VerificationProof.from_json(document)
        else:
            proof = VerificationProof.from_dict(dict(document))
        return self.verify(proof, data, batch_root, leaf_hash, leaf_index)
