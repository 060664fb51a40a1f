"""
Workproof Signature Service

Keyed signatures over the canonical serialization of proof data.

Two interchangeable signers implement the ProofSigner protocol:

    - HmacProofSigner: HMAC-SHA256 with one shared secret. This is the
      default. Anyone holding the secret can produce a proof for any
      creator, so it attests that the platform issued the proof, not that
      a particular creator did.
    - Ed25519ProofSigner: Ed25519 (RFC 8032) via PyNaCl. Verification needs
      only the public key, so verifiers never hold signing material. A
      deployment can key it per creator.

Both take a mapping, serialize it as canonical JSON (sorted keys, compact
separators, UTF-8) and return a lowercase hex signature. Verification
returns a bool and never raises on a bad signature.

Key material comes from the environment (see workproof.config); this
module never generates or persists it except through the explicit
generate_key_pair helper.

Usage:
    >>> signer = HmacProofSigner(secret="s3cret")
    >>> signature = signer.sign({"fileHash": "ab..", "timestamp": 1})
    >>> signer.verify({"fileHash": "ab..", "timestamp": 1}, signature)
    True
"""

import base64
import hashlib
import hmac
from typing import Any, Mapping, Optional, Protocol, Tuple, Union, runtime_checkable

from nacl.exceptions import BadSignatureError, CryptoError
from nacl.signing import SigningKey, VerifyKey

from workproof.utils.helpers import canonical_json_bytes


@runtime_checkable
class ProofSigner(Protocol):
    """Signs and verifies canonical proof data."""

    scheme: str

    def sign(self, data: Mapping[str, Any]) -> str:
        """Return a hex signature over canonical_json(data)."""
        ...

    def verify(self, data: Mapping[str, Any], signature: str) -> bool:
        """True if signature matches canonical_json(data)."""
        ...


class HmacProofSigner:
    """
    HMAC-SHA256 signer keyed with a shared secret.

    Args:
        secret: Signing secret (str is UTF-8 encoded)

    Raises:
        ValueError: If the secret is empty
    """

    scheme = "hmac-sha256"

    def __init__(self, secret: Union[str, bytes]):
        key = secret.encode("utf-8") if isinstance(secret, str) else bytes(secret)
        if not key:
            raise ValueError("Signing secret must not be empty")
        self._key = key

    def sign(self, data: Mapping[str, Any]) -> str:
        return hmac.new(self._key, canonical_json_bytes(dict(data)), hashlib.sha256).hexdigest()

    def verify(self, data: Mapping[str, Any], signature: str) -> bool:
        if not isinstance(signature, str):
            return False
        return hmac.compare_digest(self.sign(data), signature.lower())


class Ed25519ProofSigner:
    """
    Ed25519 digital signature provider.

    A signer built from a private key can sign and verify. A signer built
    from a public key only (from_public_key / from_public_key_b64) can only
    verify; sign() raises.

    Attributes:
        _signing_key: The private signing key, if held
        _verify_key: The public verification key
    """

    scheme = "ed25519"

    def __init__(self, private_key: Optional[bytes] = None, public_key: Optional[bytes] = None):
        """
        Initialize the signer.

        Args:
            private_key: Optional 32-byte private key seed
            public_key: Optional 32-byte public key, used when no private
                        key is given

        Raises:
            ValueError: If neither key is given
        """
        if private_key:
            self._signing_key: Optional[SigningKey] = SigningKey(private_key)
            self._verify_key = self._signing_key.verify_key
        elif public_key:
            self._signing_key = None
            self._verify_key = VerifyKey(public_key)
        else:
            raise ValueError("Ed25519 signer needs a private or public key")

    @classmethod
    def from_private_key_b64(cls, private_key_b64: str) -> "Ed25519ProofSigner":
        """
        Create a signer from a base64-encoded private key.

        Args:
            private_key_b64: Base64-encoded 32-byte private key

        Returns:
            Ed25519ProofSigner: A signer instance with the provided key
        """
        return cls(private_key=base64.b64decode(private_key_b64))

    @classmethod
    def from_public_key_b64(cls, public_key_b64: str) -> "Ed25519ProofSigner":
        """Create a verify-only signer from a base64-encoded public key."""
        return cls(public_key=base64.b64decode(public_key_b64))

    @property
    def can_sign(self) -> bool:
        return self._signing_key is not None

    @property
    def public_key(self) -> bytes:
        """Get the public key bytes."""
        return bytes(self._verify_key)

    @property
    def public_key_b64(self) -> str:
        """Get the public key as base64 string."""
        return base64.b64encode(self.public_key).decode("ascii")

    def sign(self, data: Mapping[str, Any]) -> str:
        """
        Sign canonical proof data with the private key.

        Raises:
            ValueError: If this signer only holds a public key
        """
        if self._signing_key is None:
            raise ValueError("Verify-only Ed25519 signer cannot sign")
        signed = self._signing_key.sign(canonical_json_bytes(dict(data)))
        return signed.signature.hex()

    def verify(self, data: Mapping[str, Any], signature: str) -> bool:
        try:
            raw_signature = bytes.fromhex(signature)
        except (TypeError, ValueError):
            return False
        try:
            self._verify_key.verify(canonical_json_bytes(dict(data)), raw_signature)
        except (BadSignatureError, CryptoError, ValueError):
            return False
        return True


def generate_key_pair_b64() -> Tuple[str, str]:
    """
    Generate a new Ed25519 key pair as base64 strings.

    Returns:
        Tuple[str, str]: (private_key_b64, public_key_b64)
    """
    signing_key = SigningKey.generate()
    return (
        base64.b64encode(bytes(signing_key)).decode("ascii"),
        base64.b64encode(bytes(signing_key.verify_key)).decode("ascii"),
    )
