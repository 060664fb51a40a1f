"""
Tests for Workproof Signature Service

Tests cover:
- HMAC-SHA256 signing and verification
- Ed25519 signing and verification
- Verify-only signers
- Tamper detection
"""

import hashlib
import hmac
import json

import pytest

from workproof.core.signer import (
    Ed25519ProofSigner,
    HmacProofSigner,
    ProofSigner,
    generate_key_pair_b64,
)

PAYLOAD = {"fileHash": "ab" * 32, "timestamp": 1_700_000_000_000, "creator": "alice"}


class TestHmacSigner:
    """Test the shared-secret signer."""

    def test_sign_matches_hmac_of_canonical_json(self):
        """Signature is HMAC-SHA256 over sorted, compact JSON."""
        signer = HmacProofSigner("secret")
        canonical = json.dumps(PAYLOAD, sort_keys=True, separators=(",", ":")).encode()
        expected = hmac.new(b"secret", canonical, hashlib.sha256).hexdigest()
        assert signer.sign(PAYLOAD) == expected

    def test_key_order_does_not_matter(self):
        """Canonical serialization makes dict order irrelevant."""
        signer = HmacProofSigner("secret")
        reordered = dict(reversed(list(PAYLOAD.items())))
        assert signer.sign(PAYLOAD) == signer.sign(reordered)

    def test_verify_valid(self):
        signer = HmacProofSigner("secret")
        assert signer.verify(PAYLOAD, signer.sign(PAYLOAD))

    def test_verify_uppercase_signature(self):
        """Hex case is not significant."""
        signer = HmacProofSigner("secret")
        assert signer.verify(PAYLOAD, signer.sign(PAYLOAD).upper())

    def test_tampered_payload_fails(self):
        """Changing any field invalidates the signature."""
        signer = HmacProofSigner("secret")
        signature = signer.sign(PAYLOAD)
        assert not signer.verify({**PAYLOAD, "creator": "mallory"}, signature)

    def test_wrong_secret_fails(self):
        signature = HmacProofSigner("secret").sign(PAYLOAD)
        assert not HmacProofSigner("other").verify(PAYLOAD, signature)

    def test_non_string_signature_fails(self):
        """Verification returns False rather than raising."""
        assert not HmacProofSigner("secret").verify(PAYLOAD, None)

    def test_empty_secret_rejected(self):
        with pytest.raises(ValueError):
            HmacProofSigner("")

    def test_bytes_secret(self):
        assert HmacProofSigner(b"secret").sign(PAYLOAD) == HmacProofSigner("secret").sign(PAYLOAD)

    def test_satisfies_protocol(self):
        assert isinstance(HmacProofSigner("secret"), ProofSigner)


class TestEd25519Signer:
    """Test the public-key signer."""

    def test_sign_and_verify(self):
        """Signatures are 64 bytes, hex encoded."""
        private_b64, _ = generate_key_pair_b64()
        signer = Ed25519ProofSigner.from_private_key_b64(private_b64)
        signature = signer.sign(PAYLOAD)

        assert len(signature) == 128
        assert signer.verify(PAYLOAD, signature)

    def test_deterministic(self):
        """Ed25519 signatures are deterministic."""
        private_b64, _ = generate_key_pair_b64()
        signer = Ed25519ProofSigner.from_private_key_b64(private_b64)
        assert signer.sign(PAYLOAD) == signer.sign(PAYLOAD)

    def test_verify_only_signer(self):
        """A public key alone verifies but cannot sign."""
        private_b64, public_b64 = generate_key_pair_b64()
        signature = Ed25519ProofSigner.from_private_key_b64(private_b64).sign(PAYLOAD)
        verifier = Ed25519ProofSigner.from_public_key_b64(public_b64)

        assert not verifier.can_sign
        assert verifier.verify(PAYLOAD, signature)
        with pytest.raises(ValueError):
            verifier.sign(PAYLOAD)

    def test_public_key_round_trip(self):
        private_b64, public_b64 = generate_key_pair_b64()
        signer = Ed25519ProofSigner.from_private_key_b64(private_b64)
        assert signer.public_key_b64 == public_b64
        assert len(signer.public_key) == 32

    def test_tampered_payload_fails(self):
        private_b64, _ = generate_key_pair_b64()
        signer = Ed25519ProofSigner.from_private_key_b64(private_b64)
        signature = signer.sign(PAYLOAD)
        assert not signer.verify({**PAYLOAD, "timestamp": 0}, signature)

    def test_wrong_key_fails(self):
        first = Ed25519ProofSigner.from_private_key_b64(generate_key_pair_b64()[0])
        second = Ed25519ProofSigner.from_private_key_b64(generate_key_pair_b64()[0])
        assert not second.verify(PAYLOAD, first.sign(PAYLOAD))

    def test_malformed_signature_fails(self):
        """Non-hex or short signatures return False."""
        signer = Ed25519ProofSigner.from_private_key_b64(generate_key_pair_b64()[0])
        assert not signer.verify(PAYLOAD, "not-hex")
        assert not signer.verify(PAYLOAD, "abcd")

    def test_requires_a_key(self):
        with pytest.raises(ValueError):
            Ed25519ProofSigner()
