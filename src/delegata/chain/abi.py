"""
ABI Codec - Fixed signature table and calldata encoding / decoding.

Every function Delegata can call is a member of the closed ``Signature``
enum, so an unsupported function is rejected where a descriptor is built
rather than deep inside a batch.  Encoding and decoding are pure functions
over eth-abi.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Sequence

from eth_abi import decode as abi_decode
from eth_abi import encode as abi_encode
from eth_abi.exceptions import DecodingError as AbiDecodingError
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_utils import keccak, to_checksum_address

from ..errors import DecodingError, EncodingError


@dataclass(frozen=True)
class FunctionSpec:
    name: str
    inputs: tuple[str, ...]
    outputs: tuple[str, ...]

    @property
    def text(self) -> str:
        """Canonical signature text, e.g. ``balanceOf(address)``."""
        return f"{self.name}({','.join(self.inputs)})"

    @property
    def selector(self) -> bytes:
        # NOTE: Keccak-256 != SHA3-256 (NIST). Never use hashlib.sha3_256 here.
        return keccak(text=self.text)[:4]


class Signature(Enum):
    # Multicall3
    GET_ETH_BALANCE = FunctionSpec("getEthBalance", ("address",), ("uint256",))
    TRY_AGGREGATE = FunctionSpec(
        "tryAggregate", ("bool", "(address,bytes)[]"), ("(bool,bytes)[]",)
    )
    # ERC20 / ERC721
    NAME = FunctionSpec("name", (), ("string",))
    SYMBOL = FunctionSpec("symbol", (), ("string",))
    DECIMALS = FunctionSpec("decimals", (), ("uint8",))
    TOTAL_SUPPLY = FunctionSpec("totalSupply", (), ("uint256",))
    BALANCE_OF = FunctionSpec("balanceOf", ("address",), ("uint256",))
    TRANSFER = FunctionSpec("transfer", ("address", "uint256"), ("bool",))
    OWNER_OF = FunctionSpec("ownerOf", ("uint256",), ("address",))
    TOKEN_URI = FunctionSpec("tokenURI", ("uint256",), ("string",))
    TOKEN_OF_OWNER_BY_INDEX = FunctionSpec(
        "tokenOfOwnerByIndex", ("address", "uint256"), ("uint256",)
    )
    # ERC-7579 delegated execution
    EXECUTE = FunctionSpec("execute", ("bytes32", "bytes"), ())

    @property
    def spec(self) -> FunctionSpec:
        return self.value

    @property
    def text(self) -> str:
        return self.value.text

    @property
    def selector(self) -> bytes:
        return self.value.selector


_BY_TEXT = {member.text: member for member in Signature}


def lookup(text: str) -> Signature:
    """
    Resolve canonical signature text to a table member.

    Raises:
        EncodingError: If the signature is not in the table
    """
    try:
        return _BY_TEXT[text.replace(" ", "")]
    except KeyError:
        raise EncodingError(f"Unsupported function signature: {text}")


def encode(signature: Signature, args: Sequence[Any] = ()) -> bytes:
    """
    ABI-encode a function call.

    Args:
        signature: Function to call
        args: Positional arguments matching the declared input types

    Returns:
        4-byte selector followed by the encoded arguments

    Raises:
        EncodingError: On arity or type mismatch
    """
    spec = signature.spec
    args = list(args)
    if len(args) != len(spec.inputs):
        raise EncodingError(
            f"{spec.text} takes {len(spec.inputs)} argument(s), got {len(args)}"
        )
    if not args:
        return spec.selector
    try:
        encoded_args = abi_encode(list(spec.inputs), args)
    except (AbiEncodingError, TypeError) as exc:
        raise EncodingError(f"Cannot encode arguments for {spec.text}: {exc}") from exc
    return spec.selector + encoded_args


def decode(signature: Signature, data: bytes) -> Any:
    """
    ABI-decode a function's return data.

    Empty data is not special-cased: check for it before calling.

    Returns:
        The single value for one-output functions, a tuple otherwise,
        None for functions without outputs

    Raises:
        DecodingError: If the data does not match the declared outputs
    """
    spec = signature.spec
    if not spec.outputs:
        return None
    try:
        decoded = abi_decode(list(spec.outputs), bytes(data))
    except (AbiDecodingError, UnicodeDecodeError) as exc:
        raise DecodingError(f"Cannot decode {spec.text} result: {exc}") from exc

    values = tuple(
        _normalize(abi_type, value) for abi_type, value in zip(spec.outputs, decoded)
    )
    if len(values) == 1:
        return values[0]
    return values


def decode_input(signature: Signature, data: bytes) -> tuple[Any, ...]:
    """Decode calldata produced by :func:`encode` back into its arguments."""
    spec = signature.spec
    data = bytes(data)
    if data[:4] != spec.selector:
        raise DecodingError(
            f"Selector mismatch for {spec.text}: expected 0x{spec.selector.hex()}, "
            f"got 0x{data[:4].hex()}"
        )
    if not spec.inputs:
        return ()
    try:
        decoded = abi_decode(list(spec.inputs), data[4:])
    except (AbiDecodingError, UnicodeDecodeError) as exc:
        raise DecodingError(f"Cannot decode {spec.text} input: {exc}") from exc
    return tuple(_normalize(abi_type, value) for abi_type, value in zip(spec.inputs, decoded))


def _normalize(abi_type: str, value: Any) -> Any:
    if abi_type == "address":
        return to_checksum_address(value)
    return value
