from __future__ import annotations

from decimal import Decimal, InvalidOperation, localcontext
from typing import Union

from eth_utils import from_wei, is_hex_address, to_checksum_address, to_wei

from .errors import EncodingError

UINT256_MAX = 2**256 - 1


def checksum(address: str) -> str:
    """
    Canonicalise an address to EIP-55 form.

    Input is case-insensitive: a mixed-case address with a wrong checksum
    is accepted and rewritten.

    Raises:
        EncodingError: If the value is not a 20-byte hex address
    """
    if not isinstance(address, str) or not is_hex_address(address.lower()):
        raise EncodingError(f"Invalid address: {address!r}")
    return to_checksum_address(address.lower())


def hex_to_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    raw = value[2:] if value.startswith(("0x", "0X")) else value
    try:
        return bytes.fromhex(raw)
    except ValueError:
        raise EncodingError(f"Invalid hex data: {value!r}")


def bytes_to_hex(data: bytes) -> str:
    return "0x" + data.hex()


def parse_ether(amount: Union[str, int, Decimal]) -> int:
    """Convert a decimal ether amount (e.g. "1.5") to wei."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise EncodingError(f"Invalid amount: {amount!r}")
    if not value.is_finite():
        raise EncodingError(f"Invalid amount: {amount!r}")
    if value < 0:
        raise EncodingError(f"Amount must not be negative: {amount}")
    if value > UINT256_MAX:
        raise EncodingError(f"Amount too large: {amount}")
    with localcontext() as ctx:
        ctx.prec = 999
        sub_wei = (value * 10**18) % 1
    if sub_wei:
        raise EncodingError(f"Amount has more than 18 decimals: {amount}")
    try:
        wei = int(to_wei(value, "ether"))
    except ValueError as exc:
        raise EncodingError(f"Invalid amount {amount}: {exc}")
    if wei > UINT256_MAX:
        raise EncodingError(f"Amount too large: {amount}")
    return wei


def format_ether(wei: int) -> str:
    return f"{Decimal(from_wei(wei, 'ether')).normalize():f}"
