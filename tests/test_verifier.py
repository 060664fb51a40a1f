"""
Tests for Workproof Verification Module

Tests cover:
- Each of the four checks
- Confidence scoring and the validity threshold
- Batch root verification
- Malformed fields failing checks without raising
- Document parsing at the boundary
"""

import dataclasses
import itertools

import pytest

from conftest import FIXED_NOW, TEST_SECRET
from workproof.core.errors import MalformedProofError
from workproof.core.merkle import build_tree
from workproof.core.proof import VerificationProof, signing_payload
from workproof.core.signer import HmacProofSigner
from workproof.core.verifier import (
    RETENTION_MS,
    ProofVerifier,
    VerificationChecks,
    VerificationResult,
    confidence_for,
)
from workproof.utils.helpers import MS_PER_DAY, is_hex_digest, sha256_text


def resign(proof: VerificationProof, signer, **changes) -> VerificationProof:
    """Apply changes and produce a correctly signed proof."""
    changed = dataclasses.replace(proof, **changes)
    return dataclasses.replace(changed, digital_signature=signer.sign(changed.signing_payload()))


class TestChecks:
    """Test individual checks."""

    def test_untouched_proof_passes_everything(self, issued, verifier):
        result = verifier.verify(issued.proof, b"hello")
        assert result.checks == VerificationChecks(True, True, True, True)

    def test_without_original_file(self, issued, verifier):
        """fileHashMatch is assumed true when no bytes are given."""
        result = verifier.verify(issued.proof)
        assert result.checks.file_hash_match
        assert result.confidence == 100

    def test_modified_file(self, issued, verifier):
        """Changed bytes fail only the file hash check."""
        result = verifier.verify(issued.proof, b"hello!")
        assert not result.checks.file_hash_match
        assert result.checks.signature_valid
        assert result.confidence == 75
        assert result.is_valid

    def test_tampered_creator(self, issued, verifier):
        """Any change to signed fields breaks the signature."""
        forged = dataclasses.replace(issued.proof, creator="mallory")
        result = verifier.verify(forged, b"hello")
        assert not result.checks.signature_valid
        assert result.confidence == 75

    def test_tampered_anchor(self, issued, verifier):
        forged = dataclasses.replace(issued.proof, blockchain_anchor="00" * 32)
        assert not verifier.verify(forged).checks.signature_valid

    def test_tampered_content_id(self, issued, verifier):
        forged = dataclasses.replace(issued.proof, ipfs_hash="bafyforged")
        assert not verifier.verify(forged).checks.signature_valid

    def test_wrong_secret(self, issued):
        verifier = ProofVerifier(HmacProofSigner("another-secret"), clock=lambda: FIXED_NOW)
        assert not verifier.verify(issued.proof).checks.signature_valid

    def test_signature_over_garbage_is_false(self, issued, verifier):
        forged = dataclasses.replace(issued.proof, digital_signature="zz")
        assert not verifier.verify(forged).checks.signature_valid

    def test_old_timestamp(self, issued, signer):
        """A proof older than the retention window fails the timestamp check."""
        verifier = ProofVerifier(signer, clock=lambda: FIXED_NOW + 400 * MS_PER_DAY)
        result = verifier.verify(issued.proof, b"hello")
        assert not result.checks.timestamp_valid
        assert result.confidence == 75

    def test_retention_boundary(self, issued, signer):
        """Age must be strictly below the retention window."""
        just_inside = ProofVerifier(signer, clock=lambda: FIXED_NOW + RETENTION_MS - 1)
        at_limit = ProofVerifier(signer, clock=lambda: FIXED_NOW + RETENTION_MS)
        assert just_inside.check_timestamp(issued.proof)
        assert not at_limit.check_timestamp(issued.proof)

    def test_future_timestamp(self, issued, signer):
        """A timestamp ahead of the clock fails."""
        verifier = ProofVerifier(signer, clock=lambda: FIXED_NOW - 1)
        assert not verifier.verify(issued.proof).checks.timestamp_valid

    def test_same_instant(self, issued, signer):
        verifier = ProofVerifier(signer, clock=lambda: FIXED_NOW)
        assert verifier.check_timestamp(issued.proof)

    def test_malformed_merkle_element(self, issued, signer, verifier):
        """Without a batch root, siblings must look like digests."""
        proof = resign(issued.proof, signer, merkle_proof=("not-a-hash",))
        result = verifier.verify(proof, b"hello")
        assert not result.checks.merkle_proof_valid
        assert result.checks.signature_valid

    def test_two_failures_is_invalid(self, issued, verifier):
        """Modified file plus broken signature drops below the threshold."""
        forged = dataclasses.replace(issued.proof, creator="mallory")
        result = verifier.verify(forged, b"other bytes")
        assert result.confidence == 50
        assert not result.is_valid


class TestBatchVerification:
    """Test inclusion against an independently known batch root."""

    @pytest.fixture
    def batch(self, issued, signer):
        siblings = [sha256_text("other-1"), sha256_text("other-2")]
        leaves = [siblings[0], issued.verification_hash, siblings[1]]
        commitment = build_tree(leaves)
        proof = resign(
            issued.proof,
            signer,
            merkle_proof=tuple(commitment.wire_proof(issued.verification_hash)),
        )
        return commitment, proof

    def test_member_of_batch(self, batch, issued, verifier):
        commitment, proof = batch
        result = verifier.verify(
            proof,
            b"hello",
            batch_root=commitment.root,
            leaf_hash=issued.verification_hash,
            leaf_index=1,
        )
        assert result.checks.merkle_proof_valid
        assert result.confidence == 100

    def test_wrong_root(self, batch, issued, verifier):
        _, proof = batch
        result = verifier.verify(
            proof, batch_root=sha256_text("wrong"), leaf_hash=issued.verification_hash, leaf_index=1
        )
        assert not result.checks.merkle_proof_valid
        assert result.confidence == 75

    def test_wrong_index(self, batch, issued, verifier):
        commitment, proof = batch
        assert not verifier.check_merkle(proof, commitment.root, issued.verification_hash, 0)

    def test_single_work_root(self, issued, verifier):
        """A single-work batch verifies against its own verification hash."""
        assert verifier.check_merkle(
            issued.proof, issued.merkle_root, issued.verification_hash
        )

    def test_issued_proof_against_its_root(self, issued, verifier):
        """An issued proof verifies fully against its recorded root and leaf."""
        result = verifier.verify(
            issued.proof,
            b"hello",
            batch_root=issued.merkle_root,
            leaf_hash=issued.verification_hash,
        )
        assert result.checks.merkle_proof_valid
        assert result.confidence == 100

    def test_root_without_leaf_hash_fails(self, issued, verifier, caplog):
        """The proof does not carry its leaf, so a root alone cannot be checked."""
        with caplog.at_level("WARNING", logger="workproof.core.verifier"):
            result = verifier.verify(issued.proof, b"hello", batch_root=issued.merkle_root)
        assert not result.checks.merkle_proof_valid
        assert result.confidence == 75
        assert "leaf hash" in caplog.text

    def test_file_hash_is_not_the_leaf(self, issued, verifier):
        """Leaves are verification hashes, not file hashes."""
        assert not verifier.check_merkle(
            issued.proof, issued.merkle_root, issued.proof.file_hash
        )


class TestMalformedInput:
    """Test that malformed fields fail checks instead of raising."""

    def test_missing_merkle_proof(self, issued, verifier):
        proof = dataclasses.replace(issued.proof, merkle_proof=None)
        result = verifier.verify(proof, b"hello")
        assert not result.checks.merkle_proof_valid
        assert not result.checks.signature_valid

    def test_missing_merkle_proof_with_root(self, issued, verifier):
        proof = dataclasses.replace(issued.proof, merkle_proof=None)
        assert not verifier.check_merkle(
            proof, issued.merkle_root, issued.verification_hash
        )

    def test_digest_with_trailing_newline(self):
        assert is_hex_digest("ab" * 32)
        assert not is_hex_digest("ab" * 32 + "\n")

    def test_sibling_with_trailing_newline(self, issued, signer, verifier):
        proof = resign(issued.proof, signer, merkle_proof=(sha256_text("other") + "\n",))
        result = verifier.verify(proof, b"hello")
        assert not result.checks.merkle_proof_valid
        assert result.checks.signature_valid


class TestConfidence:
    """Test scoring."""

    def test_every_combination(self):
        """Confidence is 25 per passed check; valid from three checks up."""
        for flags in itertools.product([True, False], repeat=4):
            checks = VerificationChecks(*flags)
            result = VerificationResult.from_checks(checks)
            assert result.confidence == 25 * sum(flags)
            assert result.is_valid == (sum(flags) >= 3)

    def test_monotonic(self):
        """Passing an additional check never lowers confidence."""
        for flags in itertools.product([True, False], repeat=4):
            base = confidence_for(VerificationChecks(*flags))
            for i, flag in enumerate(flags):
                if not flag:
                    improved = list(flags)
                    improved[i] = True
                    assert confidence_for(VerificationChecks(*improved)) > base

    def test_result_to_dict(self):
        result = VerificationResult.from_checks(VerificationChecks(True, False, True, True))
        assert result.to_dict() == {
            "isValid": True,
            "checks": {
                "fileHashMatch": True,
                "signatureValid": False,
                "timestampValid": True,
                "merkleProofValid": True,
            },
            "confidence": 75,
        }

    def test_failed_names(self):
        checks = VerificationChecks(False, True, False, True)
        assert checks.failed_names() == ["fileHashMatch", "timestampValid"]


class TestVerifyDocument:
    """Test parsing and verifying serialized proofs."""

    def test_json_text(self, issued, verifier):
        assert verifier.verify_document(issued.proof.to_json(), b"hello").confidence == 100

    def test_json_bytes(self, issued, verifier):
        document = issued.proof.to_json().encode("utf-8")
        assert verifier.verify_document(document).is_valid

    def test_mapping(self, issued, verifier):
        assert verifier.verify_document(issued.proof.to_dict()).is_valid

    def test_malformed_document(self, verifier):
        with pytest.raises(MalformedProofError):
            verifier.verify_document('{"fileHash": "abc"}')

    def test_invalid_utf8(self, verifier):
        with pytest.raises(MalformedProofError):
            verifier.verify_document(b"\xff\xfe\x00")

    def test_signature_covers_payload_fields(self, issued):
        """The signature recomputes from the wire proof alone."""
        proof = issued.proof
        payload = signing_payload(
            file_hash=proof.file_hash,
            timestamp=proof.timestamp,
            creator=proof.creator,
            certificate_id=proof.certificate_id,
            merkle_proof=list(proof.merkle_proof),
            timestamp_hash=proof.blockchain_anchor,
            ipfs_hash=proof.ipfs_hash,
        )
        assert HmacProofSigner(TEST_SECRET).verify(payload, proof.digital_signature)
