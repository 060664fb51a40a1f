"""
Blockchain certificate data derived from an issued proof.

A certificate commits the file hash and the anchor digest together in a
two-leaf Merkle tree, so a certificate holder can show that the file hash
belongs to the anchored commitment without the rest of the proof.
"""

from dataclasses import dataclass
from typing import List

from workproof.core.merkle import build_tree, verify_indexed_proof
from workproof.core.proof import VerificationProof


@dataclass(frozen=True)
class BlockchainCertificateData:
    """
    Ledger-facing summary printed on, or embedded in, a certificate.

    Attributes:
        merkle_root: Root over [file_hash, timestamp_hash]
        merkle_proof: Inclusion proof of the file hash (sibling hashes)
        timestamp_hash: The proof's blockchain anchor
        ipfs_hash: Content identifier from the proof
        network_id: Network the proof was anchored on
        verification_level: basic, enhanced or premium
    """
    merkle_root: str
    merkle_proof: List[str]
    timestamp_hash: str
    ipfs_hash: str
    network_id: str
    verification_level: str

    def file_hash_included(self, file_hash: str) -> bool:
        """Check the certificate's inclusion proof for a file hash."""
        return verify_indexed_proof(file_hash, self.merkle_proof, self.merkle_root, leaf_index=0)

    def to_dict(self) -> dict:
        return {
            "merkleRoot": self.merkle_root,
            "merkleProof": list(self.merkle_proof),
            "timestampHash": self.timestamp_hash,
            "ipfsHash": self.ipfs_hash,
            "networkId": self.network_id,
            "verificationLevel": self.verification_level,
        }


def build_certificate_data(
    proof: VerificationProof,
    network_id: str,
    verification_level: str,
) -> BlockchainCertificateData:
    """
    Derive certificate data from an issued proof.

    Args:
        proof: The issued proof
        network_id: Network the proof was anchored on
        verification_level: Level the proof was issued at

    Returns:
        BlockchainCertificateData
    """
    commitment = build_tree([proof.file_hash, proof.blockchain_anchor])
    return BlockchainCertificateData(
        merkle_root=commitment.root,
        merkle_proof=commitment.wire_proof(proof.file_hash),
        timestamp_hash=proof.blockchain_anchor,
        ipfs_hash=proof.ipfs_hash,
        network_id=network_id,
        verification_level=verification_level,
    )
