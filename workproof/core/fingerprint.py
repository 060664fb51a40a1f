"""
Workproof Fingerprint Service

Deterministic digests of a work's bytes and of its metadata.

Two digests are produced:
    - file hash: SHA-256 of the raw bytes
    - verification hash: SHA-256(file_hash || SHA-256(canonical metadata))

The metadata digest covers title, creator, the sorted collaborator list,
the certificate id and the issuance timestamp. Collaborators are sorted
before serialization so the order in which they were entered never
changes the fingerprint.

Usage:
    >>> from workproof.core.fingerprint import WorkMetadata, fingerprint_work
    >>>
    >>> metadata = WorkMetadata(title="T", creator="alice", certificate_id="C1")
    >>> verification_hash = fingerprint_work(b"hello", metadata, 1700000000000)
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable

from workproof.utils.helpers import canonical_json, sha256_hex, sha256_text


@dataclass(frozen=True)
class WorkMetadata:
    """
    Descriptive metadata of a work, read-only input to the engine.

    Attributes:
        title: Title of the work
        creator: Creator identifier as it should appear in the proof
        certificate_id: Identifier of the certificate the proof belongs to
        collaborators: Additional contributors; unordered
    """
    title: str
    creator: str
    certificate_id: str
    collaborators: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def create(
        cls,
        title: str,
        creator: str,
        certificate_id: str,
        collaborators: Iterable[str] = (),
    ) -> "WorkMetadata":
        """Build metadata from any iterable of collaborators."""
        return cls(
            title=title,
            creator=creator,
            certificate_id=certificate_id,
            collaborators=frozenset(collaborators),
        )


def canonical_metadata(metadata: WorkMetadata, timestamp: int) -> Dict[str, Any]:
    """
    Build the canonical metadata document that gets hashed.

    Args:
        metadata: Work metadata
        timestamp: Issuance time in epoch milliseconds

    Returns:
        dict: Metadata with collaborators sorted and the timestamp included
    """
    return {
        "title": metadata.title,
        "creator": metadata.creator,
        "certificateId": metadata.certificate_id,
        "collaborators": sorted(metadata.collaborators),
        "timestamp": timestamp,
    }


def fingerprint_file(data: bytes) -> str:
    """
    Fingerprint raw file bytes.

    An empty buffer is valid input and hashes to the SHA-256 of b"".

    Args:
        data: Raw content of the work

    Returns:
        str: 64-character hex SHA-256 digest
    """
    return sha256_hex(bytes(data))


def fingerprint_metadata(metadata: WorkMetadata, timestamp: int) -> str:
    """SHA-256 of the canonical JSON form of the metadata."""
    return sha256_text(canonical_json(canonical_metadata(metadata, timestamp)))


def fingerprint_work(data: bytes, metadata: WorkMetadata, timestamp: int) -> str:
    """
    Compute the verification hash binding content, metadata and time.

    Args:
        data: Raw content of the work
        metadata: Work metadata
        timestamp: Issuance time in epoch milliseconds

    Returns:
        str: 64-character hex verification hash
    """
    file_hash = fingerprint_file(data)
    metadata_hash = fingerprint_metadata(metadata, timestamp)
    return sha256_text(file_hash + metadata_hash)
