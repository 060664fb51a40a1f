"""
Workproof VerificationProof

The only durable artifact the engine produces. A proof is created once at
issuance, never mutated, and carries everything a verifier needs except
(optionally) the original bytes.

Wire format (JSON, exactly these fields, all present):

    {fileHash, timestamp, creator, merkleProof, blockchainAnchor,
     ipfsHash, digitalSignature, certificateId}

Parsing happens at the transport boundary: from_dict / from_json validate
against schemas/verification-proof.json and raise MalformedProofError
before any verification check runs.
"""

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from jsonschema import Draft202012Validator

from workproof.core.errors import MalformedProofError


SCHEMA_PATH = Path(__file__).parent.parent / "schemas" / "verification-proof.json"

_validator: Optional[Draft202012Validator] = None


def load_schema() -> dict:
    """Load the VerificationProof JSON Schema."""
    with open(SCHEMA_PATH, encoding="utf-8") as f:
        return json.load(f)


def _get_validator() -> Draft202012Validator:
    global _validator
    if _validator is None:
        _validator = Draft202012Validator(load_schema())
    return _validator


def schema_problems(data: Any) -> List[str]:
    """
    Validate a decoded document against the proof schema.

    Returns:
        List[str]: One message per violation, empty if valid
    """
    problems = []
    for error in sorted(_get_validator().iter_errors(data), key=lambda e: list(e.path)):
        location = "/".join(str(part) for part in error.path)
        problems.append(f"{location}: {error.message}" if location else error.message)
    return problems


def signing_payload(
    file_hash: str,
    timestamp: int,
    creator: str,
    certificate_id: str,
    merkle_proof: List[str],
    timestamp_hash: str,
    ipfs_hash: str,
) -> Dict[str, Any]:
    """
    The canonical data a proof signature covers.

    Every field is carried by the wire proof, so a verifier rebuilds the
    exact same payload from the proof alone. The block number is bound
    through timestamp_hash.
    """
    return {
        "fileHash": file_hash,
        "timestamp": timestamp,
        "creator": creator,
        "certificateId": certificate_id,
        "merkleProof": list(merkle_proof),
        "timestampHash": timestamp_hash,
        "ipfsHash": ipfs_hash,
    }


@dataclass(frozen=True)
class VerificationProof:
    """
    Self-contained proof of a work's authorship at a point in time.

    Attributes:
        file_hash: SHA-256 of the work's bytes (hex)
        timestamp: Issuance time in epoch milliseconds
        creator: Creator named in the metadata
        merkle_proof: Sibling hashes from the verification hash to the batch root
        blockchain_anchor: Timestamp hash of the ledger anchor (hex)
        ipfs_hash: Content identifier, "" if content storage was unreachable
        digital_signature: Hex signature over signing_payload()
        certificate_id: Certificate the proof belongs to
    """
    file_hash: str
    timestamp: int
    creator: str
    merkle_proof: Tuple[str, ...]
    blockchain_anchor: str
    ipfs_hash: str
    digital_signature: str
    certificate_id: str

    @property
    def has_content_id(self) -> bool:
        """False when issuance could not reach content storage."""
        return bool(self.ipfs_hash)

    def signing_payload(self) -> Dict[str, Any]:
        """Rebuild the payload the signature was computed over."""
        return signing_payload(
            file_hash=self.file_hash,
            timestamp=self.timestamp,
            creator=self.creator,
            certificate_id=self.certificate_id,
            merkle_proof=list(self.merkle_proof),
            timestamp_hash=self.blockchain_anchor,
            ipfs_hash=self.ipfs_hash,
        )

    def to_dict(self) -> dict:
        """Convert to the wire dictionary (camelCase keys)."""
        return {
            "fileHash": self.file_hash,
            "timestamp": self.timestamp,
            "creator": self.creator,
            "merkleProof": list(self.merkle_proof),
            "blockchainAnchor": self.blockchain_anchor,
            "ipfsHash": self.ipfs_hash,
            "digitalSignature": self.digital_signature,
            "certificateId": self.certificate_id,
        }

    def to_json(self, indent: Optional[int] = 2) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Any) -> "VerificationProof":
        """
        Create from a decoded wire dictionary.

        Raises:
            MalformedProofError: If data does not match the wire schema
        """
        problems = schema_problems(data)
        if problems:
            raise MalformedProofError(problems)
        return cls(
            file_hash=data["fileHash"],
            timestamp=int(data["timestamp"]),
            creator=data["creator"],
            merkle_proof=tuple(data["merkleProof"]),
            blockchain_anchor=data["blockchainAnchor"],
            ipfs_hash=data["ipfsHash"],
            digital_signature=data["digitalSignature"],
            certificate_id=data["certificateId"],
        )

    @classmethod
    def from_json(cls, json_str: str) -> "VerificationProof":
        """
        Create from JSON text.

        Raises:
            MalformedProofError: If the text is not JSON or fails validation
        """
        try:
            data = json.loads(json_str)
        except (TypeError, ValueError) as e:
            raise MalformedProofError([f"invalid JSON: {e}"]) from e
        return cls.from_dict(data)
