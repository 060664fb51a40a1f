"""
EVM JSON-RPC ledger client.

Implements LedgerClient over the standard Ethereum JSON-RPC methods:

    - eth_getBlockByNumber("latest") -> head block
    - eth_getBalance(address)        -> funding check
    - eth_sendTransaction            -> self-transaction carrying the payload
    - eth_getTransactionReceipt      -> polled until included or deadline

Transactions are signed by the node's account manager (an unlocked node
account or a remote signer fronting the RPC endpoint). This client never
holds private key material.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from workproof.ledger.client import (
    Block,
    PendingTransaction,
    ReceiptTimeoutError,
    TransactionReceipt,
)
from workproof.ledger.transport import HttpxTransport, JsonRpcTransport

logger = logging.getLogger(__name__)


class JsonRpcError(Exception):
    """The node answered with a JSON-RPC error object."""

    def __init__(self, method: str, code: Optional[int], message: str):
        self.method = method
        self.code = code
        super().__init__(f"{method} failed ({code}): {message}")


def _hex_to_int(value: Any, field_name: str) -> int:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise ValueError(f"Expected hex quantity for {field_name}, got {value!r}")
    return int(value, 16)


class EthJsonRpcClient:
    """
    LedgerClient for EVM-compatible networks.

    Args:
        network_id: Network name, used in handles and logs
        rpc_url: JSON-RPC endpoint
        account: Node-managed account used for self-transactions
        transport: JSON-RPC transport; defaults to HttpxTransport
        poll_interval: Seconds between receipt polls
    """

    def __init__(
        self,
        network_id: str,
        rpc_url: str,
        account: Optional[str] = None,
        transport: Optional[JsonRpcTransport] = None,
        poll_interval: float = 2.0,
    ) -> None:
        self.network_id = network_id
        self.rpc_url = rpc_url
        self.account = account
        self._transport = transport or HttpxTransport()
        self._poll_interval = poll_interval
        self._request_id = 0

    async def _call(self, method: str, params: List[Any]) -> Any:
        self._request_id += 1
        payload = {
            "jsonrpc": "2.0",
            "id": self._request_id,
            "method": method,
            "params": params,
        }
        response = await self._transport.post_json(self.rpc_url, payload)
        error = response.get("error")
        if error:
            raise JsonRpcError(method, error.get("code"), error.get("message", "unknown error"))
        return response.get("result")

    @staticmethod
    def _parse_block(raw: Optional[Dict[str, Any]]) -> Block:
        if not raw:
            raise ValueError("Could not fetch block")
        return Block(
            number=_hex_to_int(raw.get("number"), "number"),
            hash=raw["hash"],
            timestamp=_hex_to_int(raw.get("timestamp"), "timestamp"),
        )

    async def get_latest_block(self) -> Block:
        raw = await self._call("eth_getBlockByNumber", ["latest", False])
        return self._parse_block(raw)

    async def get_block(self, number: int) -> Block:
        raw = await self._call("eth_getBlockByNumber", [hex(number), False])
        return self._parse_block(raw)

    async def get_balance(self, address: str) -> int:
        raw = await self._call("eth_getBalance", [address, "latest"])
        return _hex_to_int(raw, "balance")

    async def send_self_transaction(self, payload: str) -> PendingTransaction:
        if not self.account:
            raise ValueError(f"No signing account configured for {self.network_id}")
        data = payload if payload.startswith("0x") else f"0x{payload}"
        tx_hash = await self._call(
            "eth_sendTransaction",
            [{"from": self.account, "to": self.account, "value": "0x0", "data": data}],
        )
        if not isinstance(tx_hash, str):
            raise ValueError(f"Node returned no transaction hash: {tx_hash!r}")
        logger.debug("Submitted self-transaction %s on %s", tx_hash, self.network_id)
        return PendingTransaction(transaction_hash=tx_hash, network_id=self.network_id)

    async def wait_for_receipt(
        self, pending: PendingTransaction, timeout: float
    ) -> TransactionReceipt:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while True:
            raw = await self._call("eth_getTransactionReceipt", [pending.transaction_hash])
            if raw and raw.get("blockNumber"):
                block_number = _hex_to_int(raw["blockNumber"], "blockNumber")
                block = await self.get_block(block_number)
                gas_used = raw.get("gasUsed")
                return TransactionReceipt(
                    transaction_hash=pending.transaction_hash,
                    block_number=block_number,
                    block_hash=raw.get("blockHash") or block.hash,
                    block_timestamp=block.timestamp,
                    gas_used=_hex_to_int(gas_used, "gasUsed") if gas_used else None,
                    success=raw.get("status", "0x1") == "0x1",
                )
            remaining = deadline - loop.time()
            if remaining <= 0:
                raise ReceiptTimeoutError(pending.transaction_hash, timeout)
            await asyncio.sleep(min(self._poll_interval, remaining))
