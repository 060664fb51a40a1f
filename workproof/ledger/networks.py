"""
Default ledger network catalogue.

RPC endpoints are public defaults; deployments override them through
ProofEngineSettings.rpc_urls.
"""

from dataclasses import dataclass, replace
from typing import Dict, Mapping, Optional


@dataclass(frozen=True)
class LedgerNetwork:
    """Static description of a supported network."""

    network_id: str
    name: str
    chain_id: int
    rpc_url: str
    explorer_url: str
    currency_symbol: str = "ETH"

    def explorer_tx_url(self, transaction_hash: str) -> str:
        """Block explorer link for a transaction."""
        return f"{self.explorer_url.rstrip('/')}/tx/{transaction_hash}"

    def explorer_block_url(self, block_number: int) -> str:
        """Block explorer link for a block."""
        return f"{self.explorer_url.rstrip('/')}/block/{block_number}"


DEFAULT_NETWORKS: Dict[str, LedgerNetwork] = {
    "ethereum": LedgerNetwork(
        network_id="ethereum",
        name="Ethereum",
        chain_id=1,
        rpc_url="https://eth.llamarpc.com",
        explorer_url="https://etherscan.io",
    ),
    "polygon": LedgerNetwork(
        network_id="polygon",
        name="Polygon",
        chain_id=137,
        rpc_url="https://polygon-rpc.com",
        explorer_url="https://polygonscan.com",
        currency_symbol="MATIC",
    ),
    "arbitrum": LedgerNetwork(
        network_id="arbitrum",
        name="Arbitrum One",
        chain_id=42161,
        rpc_url="https://arb1.arbitrum.io/rpc",
        explorer_url="https://arbiscan.io",
    ),
    "base": LedgerNetwork(
        network_id="base",
        name="Base",
        chain_id=8453,
        rpc_url="https://base.llamarpc.com",
        explorer_url="https://basescan.org",
    ),
}


def resolve_networks(rpc_overrides: Optional[Mapping[str, str]] = None) -> Dict[str, LedgerNetwork]:
    """
    Default catalogue with RPC URL overrides applied.

    Overrides for unknown network ids are ignored; adding a network needs
    a chain id and explorer, which only the catalogue carries.
    """
    networks = dict(DEFAULT_NETWORKS)
    for network_id, url in (rpc_overrides or {}).items():
        if network_id in networks and url:
            networks[network_id] = replace(networks[network_id], rpc_url=url)
    return networks
