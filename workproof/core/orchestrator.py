"""
Workproof Proof Orchestrator

Composes fingerprinting, ledger anchoring, the Merkle commitment and the
signature into one VerificationProof per work.

Issuance steps:
    1. file_hash = fingerprint_file(bytes)
    2. verification_hash = fingerprint_work(bytes, metadata, now)
    3. anchor = anchor_service.anchor(verification_hash, network)
       blockchain_anchor = timestamp_hash(verification_hash, anchor)
    4. commitment = build_tree([verification_hash])
    5. content_id = content_client.store(bytes), "" if unreachable
    6. signature over signing_payload(...)
    7. emit VerificationProof

Content storage runs concurrently with anchoring; both are network calls
and neither depends on the other. Nothing is persisted here: the caller
owns the returned proof.

Usage:
    >>> orchestrator = ProofOrchestrator(anchor_service, signer, content_client)
    >>> proof = await orchestrator.issue_proof(data, metadata, IssueOptions("polygon"))
"""

import asyncio
import contextlib
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, Iterable, Optional, Union

from workproof.core.anchor import AnchorRecord, LedgerAnchorService, timestamp_hash
from workproof.core.certificate import BlockchainCertificateData, build_certificate_data
from workproof.core.fingerprint import WorkMetadata, fingerprint_file, fingerprint_work
from workproof.core.merkle import MerkleCommitment, MerkleEngine
from workproof.core.proof import VerificationProof, signing_payload
from workproof.core.signer import ProofSigner
from workproof.content.client import ContentAddressingClient
from workproof.utils.helpers import now_ms, truncate_hash

logger = logging.getLogger(__name__)

DEFAULT_NETWORK = "ethereum"


class VerificationLevel(Enum):
    """Service tier a proof is issued at."""

    BASIC = "basic"
    ENHANCED = "enhanced"
    PREMIUM = "premium"


@dataclass(frozen=True)
class IssueOptions:
    """Per-request issuance options."""

    network_id: str = DEFAULT_NETWORK
    verification_level: VerificationLevel = VerificationLevel.BASIC


@dataclass(frozen=True)
class ProofIssuance:
    """
    A proof together with the intermediates that produced it.

    Only `proof` is meant to be persisted; the rest is audit context.
    """
    proof: VerificationProof
    verification_hash: str
    anchor: AnchorRecord
    commitment: MerkleCommitment = field(repr=False)
    options: IssueOptions = field(default_factory=IssueOptions)

    @property
    def merkle_root(self) -> str:
        return self.commitment.root

    def audit_dict(self) -> dict:
        """Everything about the issuance except the proof's own fields."""
        return {
            "verificationHash": self.verification_hash,
            "merkleRoot": self.merkle_root,
            "anchor": self.anchor.to_dict(),
            "networkId": self.options.network_id,
            "verificationLevel": self.options.verification_level.value,
        }


class ProofOrchestrator:
    """
    Issues VerificationProofs.

    Holds no per-request state; one instance serves concurrent requests.

    Args:
        anchor_service: Ledger anchoring
        signer: Signature scheme for the proof
        content_client: Content-addressing collaborator; None disables it
                        and every proof carries an empty ipfsHash
        merkle_engine: Merkle engine (default MerkleEngine())
        clock: Callable returning epoch milliseconds (default now_ms)
        content_timeout: Bound on the content store call, seconds
    """

    def __init__(
        self,
        anchor_service: LedgerAnchorService,
        signer: ProofSigner,
        content_client: Optional[ContentAddressingClient] = None,
        merkle_engine: Optional[MerkleEngine] = None,
        clock: Optional[Callable[[], int]] = None,
        content_timeout: float = 30.0,
    ):
        self._anchor_service = anchor_service
        self._signer = signer
        self._content_client = content_client
        self._merkle = merkle_engine or MerkleEngine()
        self._clock = clock or now_ms
        self._content_timeout = content_timeout

    async def _store_content(self, data: bytes) -> str:
        if self._content_client is None:
            logger.warning("No content store configured; proof will carry an empty ipfsHash")
            return ""
        try:
            return await asyncio.wait_for(self._content_client.store(data), self._content_timeout)
        except Exception as e:
            logger.warning("Content store unreachable (%s); proof will carry an empty ipfsHash", e)
            return ""

    async def issue(
        self,
        data: bytes,
        metadata: WorkMetadata,
        options: Optional[IssueOptions] = None,
    ) -> ProofIssuance:
        """
        Issue a proof and keep the intermediates for auditing.

        Raises:
            UnknownNetworkError: If the network is not registered
            AnchorUnavailableError: If the network cannot be anchored to
        """
        options = options or IssueOptions()
        timestamp = self._clock()

        file_hash = fingerprint_file(data)
        verification_hash = fingerprint_work(data, metadata, timestamp)

        content_task = asyncio.ensure_future(self._store_content(data))
        try:
            anchor = await self._anchor_service.anchor(verification_hash, options.network_id)
        except BaseException:
            content_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await content_task
            raise
        anchor_digest = timestamp_hash(verification_hash, anchor)

        commitment = self._merkle.build_tree([verification_hash])
        merkle_proof = commitment.wire_proof(verification_hash)

        content_id = await content_task

        signature = self._signer.sign(signing_payload(
            file_hash=file_hash,
            timestamp=timestamp,
            creator=metadata.creator,
            certificate_id=metadata.certificate_id,
            merkle_proof=merkle_proof,
            timestamp_hash=anchor_digest,
            ipfs_hash=content_id,
        ))

        proof = VerificationProof(
            file_hash=file_hash,
            timestamp=timestamp,
            creator=metadata.creator,
            merkle_proof=tuple(merkle_proof),
            blockchain_anchor=anchor_digest,
            ipfs_hash=content_id,
            digital_signature=signature,
            certificate_id=metadata.certificate_id,
        )
        logger.info(
            "Issued proof for certificate %s (file %s, %s anchor on %s, level %s)",
            metadata.certificate_id,
            truncate_hash(file_hash),
            anchor.kind.value,
            options.network_id,
            options.verification_level.value,
        )
        return ProofIssuance(
            proof=proof,
            verification_hash=verification_hash,
            anchor=anchor,
            commitment=commitment,
            options=options,
        )

    async def issue_proof(
        self,
        data: bytes,
        metadata: WorkMetadata,
        options: Optional[IssueOptions] = None,
    ) -> VerificationProof:
        """Issue a proof for one work. See issue() for errors."""
        issuance = await self.issue(data, metadata, options)
        return issuance.proof

    async def issue_certificate(
        self,
        data: bytes,
        metadata: WorkMetadata,
        options: Optional[IssueOptions] = None,
    ) -> BlockchainCertificateData:
        """Issue a proof and derive its certificate data."""
        options = options or IssueOptions()
        proof = await self.issue_proof(data, metadata, options)
        return build_certificate_data(
            proof,
            network_id=options.network_id,
            verification_level=options.verification_level.value,
        )

    async def probe_networks(
        self, network_ids: Optional[Iterable[str]] = None
    ) -> Dict[str, Union[AnchorRecord, str]]:
        """
        Check connectivity by reading a block reference from each network.

        Networks are queried concurrently. No transaction is sent.

        Args:
            network_ids: Networks to probe; default all registered

        Returns:
            dict: network id -> AnchorRecord, or an error string
        """
        ids = list(network_ids) if network_ids is not None else self._anchor_service.registry.network_ids
        results = await asyncio.gather(
            *(self._anchor_service.block_reference(network_id) for network_id in ids),
            return_exceptions=True,
        )
        report: Dict[str, Union[AnchorRecord, str]] = {}
        for network_id, result in zip(ids, results):
            if isinstance(result, AnchorRecord):
                report[network_id] = result
            else:
                report[network_id] = str(result) or type(result).__name__
        return report

