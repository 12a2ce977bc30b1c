"""
Shared fixtures: an in-memory Multicall3 and a fake JSON-RPC node.

Nothing here touches the network.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest
from eth_abi import encode as abi_encode
from eth_account import Account
from eth_utils import keccak

from delegata.chain import abi
from delegata.chain.abi import Signature
from delegata.errors import TransportError
from delegata.keys.keystore import keystore_filename

_BY_SELECTOR = {member.selector: member for member in Signature}


Handler = Callable[[tuple], tuple[bool, bytes]]


class FakeMulticall:
    """
    Emulates Multicall3 ``tryAggregate`` behind ``call_contract``.

    Inner calls are routed to handlers registered per (target, signature).
    A target without a handler behaves like an account without code:
    success with empty return data.
    """

    REVERT = (False, b"")

    @staticmethod
    def ok(signature: Signature, *values: Any) -> tuple[bool, bytes]:
        """Successful inner call returning ``values`` encoded per the signature."""
        return True, abi_encode(list(signature.spec.outputs), list(values))

    def __init__(self) -> None:
        self.handlers: dict[tuple[str, bytes], Handler] = {}
        self.requests: list[tuple[str, bytes]] = []
        self.aggregate_sizes: list[int] = []

    def on(self, target: str, signature: Signature, handler: Handler) -> None:
        self.handlers[(target.lower(), signature.selector)] = handler

    def call_contract(self, to: str, data: bytes, block: str = "latest") -> bytes:
        self.requests.append((to, bytes(data)))
        require_success, calls = abi.decode_input(Signature.TRY_AGGREGATE, data)
        self.aggregate_sizes.append(len(calls))

        results = [self._run(target, bytes(call_data)) for target, call_data in calls]
        if require_success and not all(success for success, _ in results):
            raise TransportError("execution reverted: Multicall3: call failed", code=3)
        return abi_encode(["(bool,bytes)[]"], [results])

    def _run(self, target: str, call_data: bytes) -> tuple[bool, bytes]:
        handler = self.handlers.get((target.lower(), call_data[:4]))
        if handler is None:
            return True, b""
        signature = _BY_SELECTOR[call_data[:4]]
        return handler(abi.decode_input(signature, call_data))


class FakeRpc:
    """Just enough of JsonRpcClient for TransactionSender."""

    def __init__(self, nonce: int = 7, code: bytes = b"") -> None:
        self.nonce = nonce
        self.code = code
        self.sent: list[bytes] = []

    def get_transaction_count(self, address: str, block: str = "latest") -> int:
        return self.nonce

    def get_code(self, address: str, block: str = "latest") -> bytes:
        return self.code

    def gas_price(self) -> int:
        return 10 * 10**9

    def max_priority_fee(self) -> int:
        return 10**9

    def send_raw_transaction(self, raw_tx: bytes) -> str:
        self.sent.append(bytes(raw_tx))
        return "0x" + keccak(raw_tx).hex()

    def wait_for_receipt(self, tx_hash: str, timeout: int = 120, poll_interval: float = 2.0) -> dict:
        return {"transactionHash": tx_hash, "status": "0x1"}


@pytest.fixture()
def multicall() -> FakeMulticall:
    return FakeMulticall()


@pytest.fixture()
def fake_rpc() -> FakeRpc:
    return FakeRpc()


@pytest.fixture()
def account():
    return Account.create()


def write_keystore(directory: Path, account, password: str) -> Path:
    """Keystore with cheap pbkdf2 parameters, for fast tests."""
    directory.mkdir(parents=True, exist_ok=True)
    keystore = Account.encrypt(account.key, password, kdf="pbkdf2", iterations=2)
    path = directory / keystore_filename(account.address)
    path.write_text(json.dumps(keystore), encoding="utf-8")
    return path


@pytest.fixture()
def keystore(tmp_path: Path, account) -> tuple[Path, str]:
    password = "correct horse"
    return write_keystore(tmp_path / "keystore", account, password), password
