"""
Execution - ERC-7579 batch encoding for EIP-7702 delegated accounts.

A delegated EOA exposes ``execute(bytes32 mode, bytes executionCalldata)``.
The mode's first byte is the call type (0x00 single, 0x01 batch), the
second the exec type (0x00 revert on failure, 0x01 try).  The encoded
call is sent as the ``data`` of a transaction from the EOA to itself.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Union

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_abi.packed import encode_packed
from eth_utils import to_checksum_address

from ..errors import DecodingError, EmptyBatchError, EncodingError
from ..utils import UINT256_MAX, checksum, hex_to_bytes
from . import abi
from .abi import Signature

logger = logging.getLogger(__name__)

BATCH_TYPE = "(address,uint256,bytes)[]"


class ExecutionMode(Enum):
    SINGLE_DEFAULT = bytes(32)
    SINGLE_TRY = bytes([0x00, 0x01]) + bytes(30)
    BATCH_DEFAULT = bytes([0x01]) + bytes(31)
    BATCH_TRY = bytes([0x01, 0x01]) + bytes(30)

    @property
    def is_batch(self) -> bool:
        return self.value[0] == 0x01

    @property
    def is_try(self) -> bool:
        return self.value[1] == 0x01


@dataclass(frozen=True)
class ExecutionCall:
    target: str
    value: int = 0
    call_data: Union[bytes, str] = b""

    def __post_init__(self) -> None:
        if self.target is None:
            raise EncodingError("Execution target must not be empty")
        object.__setattr__(self, "target", checksum(self.target))
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise EncodingError(f"Execution value must be an integer, got {self.value!r}")
        if not 0 <= self.value <= UINT256_MAX:
            raise EncodingError(f"Execution value out of range: {self.value}")
        object.__setattr__(self, "call_data", hex_to_bytes(self.call_data))


def encode_batch(
    calls: Sequence[ExecutionCall],
    mode: ExecutionMode = ExecutionMode.BATCH_DEFAULT,
) -> bytes:
    """
    Serialize calls into ERC-7579 execution calldata.

    Batch modes ABI-encode ``(address,uint256,bytes)[]``; single modes pack
    ``address ++ uint256 ++ bytes`` and take exactly one call.

    Raises:
        EmptyBatchError: If calls is empty
        EncodingError: If a single mode is given more than one call
    """
    calls = list(calls)
    if not calls:
        raise EmptyBatchError("A batch needs at least one call")

    try:
        if mode.is_batch:
            return abi_encode(
                [BATCH_TYPE],
                [[(call.target, call.value, call.call_data) for call in calls]],
            )
        if len(calls) != 1:
            raise EncodingError(f"{mode.name} takes exactly one call, got {len(calls)}")
        call = calls[0]
        return encode_packed(
            ["address", "uint256", "bytes"], [call.target, call.value, call.call_data]
        )
    except AbiEncodingError as exc:
        raise EncodingError(f"Cannot encode batch: {exc}") from exc


def encode_execute(
    calls: Sequence[ExecutionCall],
    mode: ExecutionMode = ExecutionMode.BATCH_DEFAULT,
) -> bytes:
    """Full ``execute(mode, executionCalldata)`` transaction data."""
    execution_calldata = encode_batch(calls, mode)
    logger.debug("execute: %s with %d call(s)", mode.name, len(calls))
    return abi.encode(Signature.EXECUTE, [mode.value, execution_calldata])


def decode_batch(data: bytes) -> list[ExecutionCall]:
    """Inverse of the batch-mode layout of :func:`encode_batch`."""
    try:
        (entries,) = abi_decode([BATCH_TYPE], bytes(data))
    except AbiDecodingError as exc:
        raise DecodingError(f"Cannot decode batch: {exc}") from exc
    return [
        ExecutionCall(to_checksum_address(target), value, bytes(call_data))
        for target, value, call_data in entries
    ]


def native_transfers(destinations: Sequence[str], amount_wei: int) -> list[ExecutionCall]:
    """One value-only call per destination, in order."""
    return [ExecutionCall(destination, amount_wei, b"") for destination in destinations]
