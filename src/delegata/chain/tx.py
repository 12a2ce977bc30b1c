"""
Transaction Builder - Build, sign, and send transactions from the EOA.

Uses eth-account for signing and the JSON-RPC client for sending.
Delegation changes and batched executions are both transactions from the
EOA to itself: the first carries an authorization list (type 4), the
second carries ``execute(mode, batch)`` calldata for the delegated code.
"""

from __future__ import annotations

import logging
from typing import Any, Optional, Sequence

from eth_account.signers.local import LocalAccount

from ..keys.authorization import (
    AuthorizationIntent,
    AuthorizationTuple,
    delegate_for,
    sign_authorization,
)
from ..utils import bytes_to_hex, checksum
from .execution import ExecutionCall, ExecutionMode, encode_execute
from .rpc import JsonRpcClient

logger = logging.getLogger(__name__)

DEFAULT_GAS_LIMIT = 500_000
SET_CODE_TX_TYPE = 4


class TransactionSender:
    """
    Signs and submits transactions for one account on one chain.

    Args:
        rpc: Transport
        account: Signing account
        chain_id: EIP-155 chain id
        gas_limit: Gas limit used for every transaction
    """

    def __init__(
        self,
        rpc: JsonRpcClient,
        account: LocalAccount,
        chain_id: int,
        gas_limit: int = DEFAULT_GAS_LIMIT,
    ) -> None:
        self.rpc = rpc
        self.account = account
        self.chain_id = chain_id
        self.gas_limit = gas_limit

    @property
    def address(self) -> str:
        return self.account.address

    def build_tx(
        self,
        to: str,
        data: bytes = b"",
        value: int = 0,
        nonce: Optional[int] = None,
        authorization_list: Optional[Sequence[AuthorizationTuple]] = None,
    ) -> dict[str, Any]:
        """
        Build an unsigned EIP-1559 (or EIP-7702 with authorizations) transaction.
        """
        if nonce is None:
            nonce = self.rpc.get_transaction_count(self.address)
        priority_fee = self.rpc.max_priority_fee()
        max_fee = max(self.rpc.gas_price() * 2, priority_fee)

        tx: dict[str, Any] = {
            "to": checksum(to),
            "data": bytes_to_hex(data),
            "value": value,
            "nonce": nonce,
            "gas": self.gas_limit,
            "maxFeePerGas": max_fee,
            "maxPriorityFeePerGas": priority_fee,
            "chainId": self.chain_id,
        }
        if authorization_list:
            tx["type"] = SET_CODE_TX_TYPE
            tx["authorizationList"] = [auth.to_dict() for auth in authorization_list]
        return tx

    def sign_and_send(
        self,
        tx: dict[str, Any],
        wait: bool = False,
        timeout: int = 120,
    ) -> dict[str, Any]:
        """
        Sign a transaction and send it.

        Returns:
            Dict with tx_hash and, when waiting, receipt and status
        """
        signed = self.account.sign_transaction(tx)
        tx_hash = self.rpc.send_raw_transaction(bytes(signed.raw_transaction))
        logger.info("sent transaction %s (nonce %d)", tx_hash, tx["nonce"])
        result: dict[str, Any] = {"tx_hash": tx_hash}

        if wait:
            receipt = self.rpc.wait_for_receipt(tx_hash, timeout=timeout)
            result["receipt"] = receipt
            result["status"] = int(receipt.get("status", "0x0"), 16)

        return result

    # ---- delegation ----

    def authorization_tx(
        self,
        intent: AuthorizationIntent,
        delegate_address: str,
    ) -> tuple[dict[str, Any], AuthorizationTuple]:
        """
        Build the self-transaction carrying exactly one authorization.

        The EOA both signs the authorization and sends the transaction, so
        the sender nonce is consumed first and the authorization must name
        nonce + 1.
        """
        nonce = self.rpc.get_transaction_count(self.address)
        logger.debug("nonce for %s: %d", self.address, nonce)
        authorization = sign_authorization(
            self.account,
            delegate_for(intent, delegate_address),
            self.chain_id,
            nonce + 1,
        )
        tx = self.build_tx(self.address, nonce=nonce, authorization_list=[authorization])
        return tx, authorization

    def send_authorization(
        self,
        intent: AuthorizationIntent,
        delegate_address: str,
        wait: bool = False,
    ) -> dict[str, Any]:
        tx, authorization = self.authorization_tx(intent, delegate_address)
        result = self.sign_and_send(tx, wait=wait)
        result["authorization"] = authorization
        return result

    # ---- batched execution ----

    def batch_tx(
        self,
        calls: Sequence[ExecutionCall],
        mode: ExecutionMode = ExecutionMode.BATCH_DEFAULT,
    ) -> dict[str, Any]:
        """Self-transaction running ``calls`` through the delegated code."""
        data = encode_execute(calls, mode)
        return self.build_tx(self.address, data=data)

    def send_batch(
        self,
        calls: Sequence[ExecutionCall],
        mode: ExecutionMode = ExecutionMode.BATCH_DEFAULT,
        wait: bool = False,
    ) -> dict[str, Any]:
        return self.sign_and_send(self.batch_tx(calls, mode), wait=wait)
