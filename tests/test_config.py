"""
Tests for settings and the collaborator factories.
"""

import pytest

from workproof.config import (
    ProofEngineSettings,
    build_content_client,
    build_orchestrator,
    build_registry,
    build_signer,
    build_verifier,
)
from workproof.content.client import PinataContentClient
from workproof.core.signer import Ed25519ProofSigner, HmacProofSigner, generate_key_pair_b64
from workproof.ledger.jsonrpc import EthJsonRpcClient


def settings(**values) -> ProofEngineSettings:
    return ProofEngineSettings(_env_file=None, **values)


class TestSettings:
    """Test environment parsing."""

    def test_defaults(self):
        config = settings()
        assert config.signing_scheme == "hmac"
        assert config.default_network == "ethereum"
        assert config.rpc_urls == {}
        assert config.log_level == "WARNING"

    def test_environment(self, monkeypatch):
        """WORKPROOF_ variables populate settings; mappings are JSON."""
        monkeypatch.setenv("WORKPROOF_SIGNING_SECRET", "from-env")
        monkeypatch.setenv("WORKPROOF_DEFAULT_NETWORK", "polygon")
        monkeypatch.setenv("WORKPROOF_RPC_URLS", '{"polygon": "https://polygon.example/rpc"}')
        monkeypatch.setenv("WORKPROOF_SIGNER_ACCOUNTS", '{"polygon": "0xabc"}')

        config = settings()

        assert config.signing_secret.get_secret_value() == "from-env"
        assert config.default_network == "polygon"
        assert config.rpc_urls == {"polygon": "https://polygon.example/rpc"}
        assert config.signer_accounts == {"polygon": "0xabc"}

    def test_secret_not_in_repr(self):
        assert "hunter2" not in repr(settings(signing_secret="hunter2"))


class TestFactories:
    """Test building collaborators from settings."""

    def test_registry_covers_catalogue(self):
        registry = build_registry(settings())
        assert registry.network_ids == ["arbitrum", "base", "ethereum", "polygon"]
        assert all(isinstance(handle.client, EthJsonRpcClient) for handle in registry)

    def test_registry_overrides_and_signers(self):
        registry = build_registry(settings(
            rpc_urls={"base": "https://base.example/rpc"},
            signer_accounts={"base": "0xabc"},
        ))
        base = registry.get("base")

        assert base.client.rpc_url == "https://base.example/rpc"
        assert base.signer_account == "0xabc"
        assert base.network.chain_id == 8453
        assert registry.get("ethereum").signer_account is None

    def test_hmac_signer(self):
        assert isinstance(build_signer(settings(signing_secret="s")), HmacProofSigner)

    def test_hmac_without_secret(self):
        with pytest.raises(ValueError):
            build_signer(settings())

    def test_ed25519_signer(self):
        private_b64, _ = generate_key_pair_b64()
        signer = build_signer(settings(signing_scheme="ed25519", ed25519_private_key_b64=private_b64))
        assert isinstance(signer, Ed25519ProofSigner)
        assert signer.can_sign

    def test_ed25519_verify_only(self):
        _, public_b64 = generate_key_pair_b64()
        signer = build_signer(settings(signing_scheme="ed25519", ed25519_public_key_b64=public_b64))
        assert not signer.can_sign

    def test_ed25519_without_keys(self):
        with pytest.raises(ValueError):
            build_signer(settings(signing_scheme="ed25519"))

    def test_content_client(self):
        assert build_content_client(settings()) is None
        assert isinstance(build_content_client(settings(pinata_jwt="jwt")), PinataContentClient)

    def test_orchestrator_and_verifier(self):
        config = settings(signing_secret="s")
        assert build_orchestrator(config) is not None
        assert build_verifier(config) is not None
