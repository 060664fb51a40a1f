"""
Workproof Merkle Engine

Builds commitment trees over a batch of fingerprints and produces or
checks inclusion proofs.

Tree construction:
    - Leaves are the fingerprints themselves (hex strings, not re-hashed),
      so a single-leaf batch has root == leaf and an empty proof.
    - Internal node: SHA-256 over the UTF-8 concatenation of the left and
      right hex strings, in positional order.
    - A level with an odd number of nodes pairs its last node with itself.
      The node is duplicated, never dropped or promoted.

Ordering rule:
    Build and verify both use positional order. Each proof step records
    whether its sibling sits on the left or right. The wire format of a
    VerificationProof only keeps the sibling hashes; positions are then
    re-derived from the leaf index (see verify_indexed_proof). Since odd
    levels duplicate their last node, every level contributes exactly one
    sibling, so the index bits fully determine the positions.

Usage:
    >>> from workproof.core.merkle import build_tree, verify_proof
    >>>
    >>> commitment = build_tree([hash_a, hash_b, hash_c])
    >>> steps = commitment.proofs[hash_b]
    >>> verify_proof(hash_b, steps, commitment.root)
    True
"""

import json
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Union

from workproof.core.errors import EmptyInputError
from workproof.utils.helpers import sha256_text


LEFT = "left"
RIGHT = "right"


def hash_pair(left: str, right: str) -> str:
    """Hash two nodes together in positional order."""
    return sha256_text(left + right)


@dataclass(frozen=True)
class ProofStep:
    """
    One sibling on the path from a leaf to the root.

    Attributes:
        sibling: Hex hash of the sibling node
        position: Where the sibling sits relative to the running hash,
                  "left" or "right"
    """
    sibling: str
    position: str

    def apply(self, current: str) -> str:
        """Fold the running hash with this sibling."""
        if self.position == LEFT:
            return hash_pair(self.sibling, current)
        return hash_pair(current, self.sibling)

    def to_dict(self) -> dict:
        return {"sibling": self.sibling, "position": self.position}

    @classmethod
    def from_dict(cls, data: dict) -> "ProofStep":
        return cls(sibling=data["sibling"], position=data["position"])


@dataclass
class MerkleCommitment:
    """
    A Merkle commitment over an ordered batch of fingerprints.

    Attributes:
        root: The Merkle root (hex)
        leaves: Leaves in batch order
        proofs: Inclusion proof per leaf. A leaf that appears more than
                once maps to the proof of its first occurrence.
        levels: Every tree level, leaves first and root last
    """
    root: str
    leaves: List[str]
    proofs: Dict[str, List[ProofStep]]
    levels: List[List[str]] = field(default_factory=list, repr=False)

    @property
    def size(self) -> int:
        """Number of leaves in the batch."""
        return len(self.leaves)

    def proof_for_index(self, index: int) -> List[ProofStep]:
        """
        Inclusion proof for the leaf at a given batch position.

        Raises:
            IndexError: If index is out of range
        """
        if index < 0 or index >= len(self.leaves):
            raise IndexError(f"Leaf index {index} out of range [0, {len(self.leaves) - 1}]")
        return _proof_path(self.levels, index)

    def wire_proof(self, leaf: str) -> List[str]:
        """Sibling hashes only, as carried in a VerificationProof."""
        return [step.sibling for step in self.proofs[leaf]]

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "root": self.root,
            "leaves": list(self.leaves),
            "proofs": {
                leaf: [step.to_dict() for step in steps]
                for leaf, steps in self.proofs.items()
            },
        }

    def to_json(self) -> str:
        """Convert to JSON string."""
        return json.dumps(self.to_dict(), indent=2)


def _build_levels(leaves: Sequence[str]) -> List[List[str]]:
    levels = [list(leaves)]
    current = levels[0]
    while len(current) > 1:
        next_level = []
        for i in range(0, len(current), 2):
            left = current[i]
            # Odd node pairs with itself
            right = current[i + 1] if i + 1 < len(current) else left
            next_level.append(hash_pair(left, right))
        levels.append(next_level)
        current = next_level
    return levels


def _proof_path(levels: List[List[str]], index: int) -> List[ProofStep]:
    steps = []
    current_index = index
    for level in levels[:-1]:
        if current_index % 2 == 0:
            sibling_index = current_index + 1
            sibling = level[sibling_index] if sibling_index < len(level) else level[current_index]
            steps.append(ProofStep(sibling=sibling, position=RIGHT))
        else:
            steps.append(ProofStep(sibling=level[current_index - 1], position=LEFT))
        current_index //= 2
    return steps


def build_tree(leaves: Sequence[str]) -> MerkleCommitment:
    """
    Build a Merkle commitment over an ordered batch of fingerprints.

    Args:
        leaves: Fingerprints (hex strings) in batch order

    Returns:
        MerkleCommitment: Root, leaves and one proof per leaf

    Raises:
        EmptyInputError: If leaves is empty
    """
    if not leaves:
        raise EmptyInputError()

    levels = _build_levels(leaves)
    proofs: Dict[str, List[ProofStep]] = {}
    for index, leaf in enumerate(levels[0]):
        if leaf not in proofs:
            proofs[leaf] = _proof_path(levels, index)

    return MerkleCommitment(
        root=levels[-1][0],
        leaves=list(levels[0]),
        proofs=proofs,
        levels=levels,
    )


def verify_proof(leaf_hash: str, proof: Sequence[ProofStep], root: str) -> bool:
    """
    Verify a positional inclusion proof.

    Args:
        leaf_hash: The leaf being proven
        proof: Proof steps from leaf to root
        root: Expected Merkle root

    Returns:
        bool: True if folding the proof over the leaf yields root
    """
    current = leaf_hash
    for step in proof:
        if step.position not in (LEFT, RIGHT):
            return False
        current = step.apply(current)
    return current == root


def positions_for_index(leaf_index: int, depth: int) -> List[str]:
    """Sibling positions for a leaf, derived from its index bits."""
    positions = []
    index = leaf_index
    for _ in range(depth):
        positions.append(RIGHT if index % 2 == 0 else LEFT)
        index //= 2
    return positions


def verify_indexed_proof(
    leaf_hash: str,
    proof: Sequence[str],
    root: str,
    leaf_index: int = 0,
) -> bool:
    """
    Verify a wire-format proof (sibling hashes only).

    Args:
        leaf_hash: The leaf being proven
        proof: Sibling hashes from leaf to root
        root: Expected Merkle root
        leaf_index: Position of the leaf in its batch

    Returns:
        bool: True if the proof folds to root
    """
    if leaf_index < 0:
        return False
    steps = [
        ProofStep(sibling=sibling, position=position)
        for sibling, position in zip(proof, positions_for_index(leaf_index, len(proof)))
    ]
    return verify_proof(leaf_hash, steps, root)


class MerkleEngine:
    """
    Stateless facade over build_tree / verify_proof.

    Kept as a class so the orchestrator and verifier can take it as a
    collaborator.
    """

    def build_tree(self, leaves: Sequence[str]) -> MerkleCommitment:
        return build_tree(leaves)

    def verify(
        self,
        leaf_hash: str,
        proof: Sequence[Union[ProofStep, str]],
        root: str,
        leaf_index: int = 0,
    ) -> bool:
        """
        Verify either tagged proof steps or bare sibling hashes.

        Bare hashes use positions derived from leaf_index.
        """
        if all(isinstance(step, ProofStep) for step in proof):
            return verify_proof(leaf_hash, proof, root)  # type: ignore[arg-type]
        if all(isinstance(step, str) for step in proof):
            return verify_indexed_proof(leaf_hash, proof, root, leaf_index)  # type: ignore[arg-type]
        return False
