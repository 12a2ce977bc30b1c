"""
JSON-RPC Client - the transport collaborator.

Lightweight alternative to web3.py: uses httpx for HTTP.  One blocking
request per call, no retries; every failure surfaces as TransportError.
"""

from __future__ import annotations

import itertools
import logging
import time
from typing import Any, Optional, Protocol

import httpx

from ..config import ChainConfig
from ..errors import TransportError
from ..utils import bytes_to_hex, hex_to_bytes

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """What the aggregate reader and the sender need from the network."""

    def call_contract(self, to: str, data: bytes, block: str = "latest") -> bytes: ...

    def get_transaction_count(self, address: str, block: str = "latest") -> int: ...

    def get_code(self, address: str, block: str = "latest") -> bytes: ...

    def send_raw_transaction(self, raw_tx: bytes) -> str: ...


class JsonRpcClient:
    """
    Minimal Ethereum JSON-RPC client.

    Args:
        rpc_url: Endpoint URL
        timeout: HTTP timeout in seconds
        transport: httpx transport override (e.g. httpx.MockTransport)
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.transport = transport
        self._ids = itertools.count(1)

    @classmethod
    def from_config(cls, config: ChainConfig) -> "JsonRpcClient":
        return cls(config.rpc_url, timeout=config.timeout)

    def request(self, method: str, params: list) -> Any:
        """
        Make a JSON-RPC call.

        Args:
            method: RPC method name (e.g., "eth_call")
            params: RPC parameters

        Returns:
            Result field from the RPC response

        Raises:
            TransportError: On HTTP failure or a JSON-RPC error object
        """
        payload = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": next(self._ids),
        }
        logger.debug("rpc %s -> %s", method, self.rpc_url)

        try:
            with httpx.Client(timeout=self.timeout, transport=self.transport) as client:
                response = client.post(self.rpc_url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as exc:
            raise TransportError(f"{method} failed: {exc}") from exc
        except ValueError as exc:
            raise TransportError(f"{method} returned invalid JSON: {exc}") from exc

        if "error" in data:
            error = data["error"] or {}
            raise TransportError(
                f"RPC error: {error.get('message', error)}",
                code=error.get("code"),
                data=error.get("data"),
            )

        return data.get("result")

    # ---- reads ----

    def chain_id(self) -> int:
        return int(self.request("eth_chainId", []), 16)

    def call_contract(self, to: str, data: bytes, block: str = "latest") -> bytes:
        """eth_call; returns the raw return bytes."""
        result = self.request("eth_call", [{"to": to, "data": bytes_to_hex(data)}, block])
        return hex_to_bytes(result or "0x")

    def get_balance(self, address: str, block: str = "latest") -> int:
        """Balance in wei."""
        return int(self.request("eth_getBalance", [address, block]), 16)

    def get_transaction_count(self, address: str, block: str = "latest") -> int:
        return int(self.request("eth_getTransactionCount", [address, block]), 16)

    def get_code(self, address: str, block: str = "latest") -> bytes:
        return hex_to_bytes(self.request("eth_getCode", [address, block]) or "0x")

    def gas_price(self) -> int:
        return int(self.request("eth_gasPrice", []), 16)

    def max_priority_fee(self) -> int:
        return int(self.request("eth_maxPriorityFeePerGas", []), 16)

    # ---- writes ----

    def send_raw_transaction(self, raw_tx: bytes) -> str:
        """
        Send a signed raw transaction.

        Returns:
            Transaction hash (0x-prefixed hex)
        """
        return self.request("eth_sendRawTransaction", [bytes_to_hex(raw_tx)])

    def wait_for_receipt(
        self,
        tx_hash: str,
        timeout: int = 120,
        poll_interval: float = 2.0,
    ) -> dict:
        """
        Wait for a transaction receipt.

        Raises:
            TransportError: If the receipt is not found within timeout
        """
        start = time.time()
        while time.time() - start < timeout:
            receipt: Optional[dict] = self.request("eth_getTransactionReceipt", [tx_hash])
            if receipt is not None:
                return receipt
            time.sleep(poll_interval)

        raise TransportError(f"Transaction {tx_hash} not confirmed within {timeout}s")
