"""
EIP-7702 authorizations.

An authorization names the contract whose code runs at the signer's own
address; the zero address clears an existing delegation.  Signing itself
is done by eth-account.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

from eth_account.signers.local import LocalAccount

from ..config import ZERO_ADDRESS
from ..errors import EncodingError
from ..utils import checksum

logger = logging.getLogger(__name__)

# Code of a delegated account: 0xef0100 || delegate address
DELEGATION_PREFIX = bytes.fromhex("ef0100")


class AuthorizationIntent(Enum):
    AUTHORIZE = "authorize"
    REVOKE = "revoke"


@dataclass(frozen=True)
class AuthorizationTuple:
    signer: str
    chain_id: int
    delegate: str
    nonce: int
    y_parity: int
    r: int
    s: int

    @property
    def is_revocation(self) -> bool:
        return self.delegate == ZERO_ADDRESS

    def to_dict(self) -> dict[str, Any]:
        """Entry for a transaction's ``authorizationList``."""
        return {
            "chainId": self.chain_id,
            "address": self.delegate,
            "nonce": self.nonce,
            "yParity": self.y_parity,
            "r": self.r,
            "s": self.s,
        }


def delegate_for(intent: AuthorizationIntent, delegate_address: str) -> str:
    """
    Address an authorization must name for the given intent.

    REVOKE always names the zero address.  AUTHORIZE always names the
    configured delegate contract, which must not be the zero address.
    """
    if intent is AuthorizationIntent.REVOKE:
        return ZERO_ADDRESS
    delegate = checksum(delegate_address)
    if delegate == ZERO_ADDRESS:
        raise EncodingError("Delegate contract must not be the zero address; use revoke")
    return delegate


def sign_authorization(
    account: LocalAccount,
    delegate: str,
    chain_id: int,
    nonce: int,
) -> AuthorizationTuple:
    """
    Sign an EIP-7702 authorization with the account's key.

    Args:
        account: Signer, also the account being delegated
        delegate: Contract to install, or the zero address to revoke
        chain_id: Chain the authorization is valid on
        nonce: Account nonce at the time the authorization is processed

    Returns:
        AuthorizationTuple
    """
    delegate = checksum(delegate)
    signed = account.sign_authorization(
        {"chainId": chain_id, "address": delegate, "nonce": nonce}
    )
    logger.debug("signed authorization %s -> %s (nonce %d)", account.address, delegate, nonce)
    return AuthorizationTuple(
        signer=account.address,
        chain_id=chain_id,
        delegate=delegate,
        nonce=nonce,
        y_parity=signed.y_parity,
        r=signed.r,
        s=signed.s,
    )


def parse_delegation(code: bytes) -> Optional[str]:
    """Delegate address if the account code is an EIP-7702 designator."""
    code = bytes(code)
    if len(code) == 23 and code.startswith(DELEGATION_PREFIX):
        return checksum("0x" + code[3:].hex())
    return None
