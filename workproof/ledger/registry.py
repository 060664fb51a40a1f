"""
Explicit registry of ledger clients keyed by network id.

The registry is a value handed to the anchor service at construction.
Nothing in workproof reaches for a process-wide provider map, which keeps
test doubles and per-request network selection trivial.
"""

from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional

from workproof.core.errors import UnknownNetworkError
from workproof.ledger.client import LedgerClient
from workproof.ledger.networks import LedgerNetwork


@dataclass(frozen=True)
class LedgerHandle:
    """A registered network: its client and optional funded signer.

    Attributes:
        network_id: Registry key.
        client: Ledger client for the network.
        signer_account: Account that signs self-transactions, or None for
            block-reference-only anchoring.
        network: Catalogue entry, when the network is a known one.
    """

    network_id: str
    client: LedgerClient
    signer_account: Optional[str] = None
    network: Optional[LedgerNetwork] = None


class LedgerClientRegistry:
    """Maps network ids to independent ledger client handles."""

    def __init__(self) -> None:
        self._handles: Dict[str, LedgerHandle] = {}

    def register(
        self,
        network_id: str,
        client: LedgerClient,
        signer_account: Optional[str] = None,
        network: Optional[LedgerNetwork] = None,
    ) -> "LedgerClientRegistry":
        """Register (or replace) a network. Returns self for chaining."""
        self._handles[network_id] = LedgerHandle(
            network_id=network_id,
            client=client,
            signer_account=signer_account or None,
            network=network,
        )
        return self

    def get(self, network_id: str) -> LedgerHandle:
        """
        Look up a network.

        Raises:
            UnknownNetworkError: If nothing is registered under network_id
        """
        try:
            return self._handles[network_id]
        except KeyError:
            raise UnknownNetworkError(network_id, list(self._handles)) from None

    @property
    def network_ids(self) -> List[str]:
        return sorted(self._handles)

    def __contains__(self, network_id: object) -> bool:
        return network_id in self._handles

    def __iter__(self) -> Iterator[LedgerHandle]:
        return iter(self._handles[key] for key in sorted(self._handles))

    def __len__(self) -> int:
        return len(self._handles)
