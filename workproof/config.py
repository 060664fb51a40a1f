"""
Workproof Configuration

Settings are read from the environment (prefix WORKPROOF_) or a .env file
and turned into explicit collaborators by the factory functions below.
Nothing here is a process-wide singleton: callers build a settings object
and pass what they build from it.

Example .env:
    WORKPROOF_SIGNING_SECRET=change-me
    WORKPROOF_DEFAULT_NETWORK=polygon
    WORKPROOF_RPC_URLS={"polygon": "https://polygon.example/rpc"}
    WORKPROOF_SIGNER_ACCOUNTS={"polygon": "0xabc..."}
    WORKPROOF_PINATA_JWT=eyJ...
"""

import logging
from typing import Dict, Literal, Optional

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from workproof.content.client import ContentAddressingClient, PinataContentClient
from workproof.core.anchor import LedgerAnchorService
from workproof.core.orchestrator import DEFAULT_NETWORK, ProofOrchestrator
from workproof.core.signer import Ed25519ProofSigner, HmacProofSigner, ProofSigner
from workproof.core.verifier import ProofVerifier
from workproof.ledger.jsonrpc import EthJsonRpcClient
from workproof.ledger.networks import resolve_networks
from workproof.ledger.registry import LedgerClientRegistry
from workproof.ledger.transport import HttpxTransport, JsonRpcTransport

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class ProofEngineSettings(BaseSettings):
    """Configuration for issuing and verifying proofs."""

    model_config = SettingsConfigDict(
        env_prefix="WORKPROOF_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- Signing ---
    signing_scheme: Literal["hmac", "ed25519"] = "hmac"
    signing_secret: SecretStr = Field(default=SecretStr(""))
    ed25519_private_key_b64: SecretStr = Field(default=SecretStr(""))
    ed25519_public_key_b64: str = Field(default="")

    # --- Ledger ---
    default_network: str = DEFAULT_NETWORK
    rpc_urls: Dict[str, str] = Field(default_factory=dict)
    signer_accounts: Dict[str, str] = Field(default_factory=dict)
    request_timeout: float = 15.0
    confirmation_timeout: float = 120.0
    poll_interval: float = 2.0

    # --- Content addressing ---
    pinata_jwt: SecretStr = Field(default=SecretStr(""))
    content_timeout: float = 30.0

    # --- Logging ---
    log_level: str = "WARNING"


def configure_logging(log_level: str = "WARNING") -> None:
    """Configure root logging for command-line use."""
    level = getattr(logging, log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format=LOG_FORMAT)


def build_registry(
    settings: ProofEngineSettings,
    transport: Optional[JsonRpcTransport] = None,
) -> LedgerClientRegistry:
    """
    Register a JSON-RPC client for every catalogued network.

    Networks with an entry in signer_accounts get a funded transaction
    path; the others anchor by block reference only.

    Args:
        settings: Engine settings
        transport: Shared JSON-RPC transport (default HttpxTransport)

    Returns:
        LedgerClientRegistry
    """
    transport = transport or HttpxTransport(timeout=settings.request_timeout)
    registry = LedgerClientRegistry()
    for network_id, network in resolve_networks(settings.rpc_urls).items():
        account = settings.signer_accounts.get(network_id)
        client = EthJsonRpcClient(
            network_id=network_id,
            rpc_url=network.rpc_url,
            account=account,
            transport=transport,
            poll_interval=settings.poll_interval,
        )
        registry.register(network_id, client, signer_account=account, network=network)
    return registry


def build_signer(settings: ProofEngineSettings) -> ProofSigner:
    """
    Build the configured proof signer.

    An ed25519 deployment with only a public key yields a verify-only
    signer.

    Raises:
        ValueError: If the configured scheme has no key material
    """
    if settings.signing_scheme == "ed25519":
        private_key = settings.ed25519_private_key_b64.get_secret_value()
        if private_key:
            return Ed25519ProofSigner.from_private_key_b64(private_key)
        if settings.ed25519_public_key_b64:
            return Ed25519ProofSigner.from_public_key_b64(settings.ed25519_public_key_b64)
        raise ValueError(
            "ed25519 signing needs WORKPROOF_ED25519_PRIVATE_KEY_B64 "
            "or WORKPROOF_ED25519_PUBLIC_KEY_B64"
        )

    secret = settings.signing_secret.get_secret_value()
    if not secret:
        raise ValueError("hmac signing needs WORKPROOF_SIGNING_SECRET")
    return HmacProofSigner(secret)


def build_content_client(settings: ProofEngineSettings) -> Optional[ContentAddressingClient]:
    """Pinata client when a JWT is configured, otherwise None."""
    jwt = settings.pinata_jwt.get_secret_value()
    if not jwt:
        return None
    return PinataContentClient(jwt, timeout=settings.content_timeout)


def build_orchestrator(
    settings: ProofEngineSettings,
    registry: Optional[LedgerClientRegistry] = None,
) -> ProofOrchestrator:
    """Wire an orchestrator from settings."""
    anchor_service = LedgerAnchorService(
        registry if registry is not None else build_registry(settings),
        request_timeout=settings.request_timeout,
        confirmation_timeout=settings.confirmation_timeout,
    )
    return ProofOrchestrator(
        anchor_service,
        build_signer(settings),
        content_client=build_content_client(settings),
        content_timeout=settings.content_timeout,
    )


def build_verifier(settings: ProofEngineSettings) -> ProofVerifier:
    return ProofVerifier(build_signer(settings))
