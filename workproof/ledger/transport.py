"""
Transport protocol for ledger JSON-RPC calls.

The JSON-RPC client depends on this protocol, not on httpx directly, so
tests plug in a canned transport and deployments can swap the HTTP layer
without touching client logic.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

import httpx


@runtime_checkable
class JsonRpcTransport(Protocol):
    """Async transport for JSON-RPC POST requests."""

    async def post_json(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Send a JSON-RPC request and return the parsed response.

        Raises:
            Exception: On transport-level failures (connection refused,
                timeout, TLS error, non-2xx status).
        """
        ...


class HttpxTransport:
    """Default transport using httpx.AsyncClient.

    A client may be injected (shared connection pool, MockTransport in
    tests). Without one, a short-lived client is opened per request.
    """

    def __init__(self, timeout: float = 30.0, client: Optional[httpx.AsyncClient] = None) -> None:
        self._timeout = timeout
        self._client = client

    async def post_json(self, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        if self._client is not None:
            return await self._post(self._client, url, payload)
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await self._post(client, url, payload)

    @staticmethod
    async def _post(client: httpx.AsyncClient, url: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        response = await client.post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
        )
        response.raise_for_status()
        result: Dict[str, Any] = response.json()
        return result
