"""
Workproof Error Taxonomy

Only conditions the caller must act on are exceptions. Degraded paths
(transaction anchor failing over to a block reference, an unreachable
content store, a signature that does not match) are reported in result
objects instead.

    - EmptyInputError: Merkle tree requested over zero leaves
    - UnknownNetworkError: no ledger client registered for a network id
    - AnchorUnavailableError: both anchor tiers failed for a network
    - TransactionInFlightError: cancelled after a transaction was handed
      to the ledger; funds may already be committed
    - MalformedProofError: proof document failed to parse or validate
"""

from typing import List, Optional


class ProofEngineError(Exception):
    """Base class for all workproof errors."""


class EmptyInputError(ProofEngineError, ValueError):
    """Raised when a Merkle commitment is requested over no leaves."""

    def __init__(self, message: str = "Cannot build a Merkle tree from zero leaves"):
        super().__init__(message)


class UnknownNetworkError(ProofEngineError, LookupError):
    """Raised when no ledger client is registered for a network id."""

    def __init__(self, network_id: str, known: Optional[List[str]] = None):
        self.network_id = network_id
        self.known = sorted(known or [])
        detail = f" (known: {', '.join(self.known)})" if self.known else ""
        super().__init__(f"Network {network_id!r} not supported{detail}")


class AnchorUnavailableError(ProofEngineError):
    """
    Raised when a network could not be anchored to at all.

    Both the transaction path (if attempted) and the read-only block
    reference failed. The caller may retry later or pick another network.

    Attributes:
        network_id: The network that was unreachable
        cause: Description of the last failure
    """

    def __init__(self, network_id: str, cause: str):
        self.network_id = network_id
        self.cause = cause
        super().__init__(f"Ledger anchor unavailable on {network_id}: {cause}")


class TransactionInFlightError(ProofEngineError):
    """
    Raised when anchoring is cancelled after a transaction was submitted.

    The transaction is not resubmitted. The caller decides whether to wait
    for it out of band or fall back to a block reference.
    """

    def __init__(self, network_id: str, transaction_hash: str):
        self.network_id = network_id
        self.transaction_hash = transaction_hash
        super().__init__(
            f"Anchor cancelled on {network_id} with transaction "
            f"{transaction_hash} still in flight"
        )


class MalformedProofError(ProofEngineError, ValueError):
    """
    Raised when a proof document cannot be parsed into a VerificationProof.

    Attributes:
        problems: Individual parse or schema violations
    """

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("Malformed verification proof: " + "; ".join(self.problems))
