"""
Content-addressing collaborator.

The engine treats the content-addressed storage network as an opaque
identifier producer: bytes in, content id out. Failures are allowed to
raise here; the orchestrator decides how to degrade.

Concrete implementations:
    - PinataContentClient (pins through the Pinata HTTP API)
    - fake clients in tests
"""

import logging
from typing import Any, Dict, Optional, Protocol, runtime_checkable

import httpx

logger = logging.getLogger(__name__)

PINATA_PIN_FILE_URL = "https://api.pinata.cloud/pinning/pinFileToIPFS"
PINATA_GATEWAY_URL = "https://gateway.pinata.cloud/ipfs"


class ContentStoreError(Exception):
    """Content storage rejected or failed to store the bytes."""


@runtime_checkable
class ContentAddressingClient(Protocol):
    """Stores bytes and returns their content identifier."""

    async def store(self, data: bytes) -> str:
        """
        Store bytes.

        Returns:
            str: Content identifier (CID)

        Raises:
            Exception: On any storage failure
        """
        ...


class PinataContentClient:
    """
    Pins content to IPFS through Pinata.

    Args:
        jwt: Pinata JWT, sent as a bearer token
        timeout: Request timeout in seconds
        client: Optional shared httpx.AsyncClient
        filename: Name recorded in Pinata metadata
    """

    def __init__(
        self,
        jwt: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
        filename: str = "work",
        endpoint: str = PINATA_PIN_FILE_URL,
    ) -> None:
        if not jwt:
            raise ValueError("Pinata JWT must not be empty")
        self._jwt = jwt
        self._timeout = timeout
        self._client = client
        self._filename = filename
        self._endpoint = endpoint

    @staticmethod
    def gateway_url(content_id: str) -> str:
        """Public gateway link for a content id."""
        return f"{PINATA_GATEWAY_URL}/{content_id}"

    async def store(self, data: bytes) -> str:
        if self._client is not None:
            return await self._pin(self._client, data)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._pin(client, data)

    async def _pin(self, client: httpx.AsyncClient, data: bytes) -> str:
        response = await client.post(
            self._endpoint,
            headers={"Authorization": f"Bearer {self._jwt}"},
            files={"file": (self._filename, data, "application/octet-stream")},
            data={"pinataOptions": '{"cidVersion":1}'},
        )
        if response.status_code >= 400:
            raise ContentStoreError(
                f"Pinata upload failed: {response.status_code} - {response.text[:200]}"
            )
        body: Dict[str, Any] = response.json()
        content_id = body.get("IpfsHash")
        if not content_id:
            raise ContentStoreError("Pinata response carried no IpfsHash")
        logger.debug("Pinned %d bytes as %s", len(data), content_id)
        return content_id
