"""Unit tests for the fixed signature table and the ABI codec."""

from __future__ import annotations

import pytest
from eth_abi import encode as abi_encode

from delegata.chain import abi
from delegata.chain.abi import Signature
from delegata.errors import DecodingError, EncodingError

UINT256_MAX = 2**256 - 1
ALICE = "0x1111111111111111111111111111111111111111"
TOKEN = "0xdAC17F958D2ee523a2206206994597C13D831ec7"


class TestSelectors:
    @pytest.mark.parametrize(
        "signature, selector",
        [
            (Signature.BALANCE_OF, "70a08231"),
            (Signature.TRANSFER, "a9059cbb"),
            (Signature.NAME, "06fdde03"),
            (Signature.SYMBOL, "95d89b41"),
            (Signature.DECIMALS, "313ce567"),
            (Signature.TOTAL_SUPPLY, "18160ddd"),
            (Signature.OWNER_OF, "6352211e"),
            (Signature.TOKEN_URI, "c87b56dd"),
            (Signature.TOKEN_OF_OWNER_BY_INDEX, "2f745c59"),
            (Signature.GET_ETH_BALANCE, "4d2301cc"),
            (Signature.TRY_AGGREGATE, "bce38bd7"),
            (Signature.EXECUTE, "e9ae5c53"),
        ],
    )
    def test_known_selectors(self, signature: Signature, selector: str) -> None:
        assert signature.selector.hex() == selector

    def test_text(self) -> None:
        assert Signature.TOKEN_OF_OWNER_BY_INDEX.text == "tokenOfOwnerByIndex(address,uint256)"
        assert Signature.TRY_AGGREGATE.text == "tryAggregate(bool,(address,bytes)[])"

    def test_lookup(self) -> None:
        assert abi.lookup("getEthBalance(address)") is Signature.GET_ETH_BALANCE
        assert abi.lookup("balanceOf( address )") is Signature.BALANCE_OF

    def test_lookup_unknown_signature(self) -> None:
        with pytest.raises(EncodingError, match="Unsupported"):
            abi.lookup("approve(address,uint256)")


class TestEncode:
    def test_no_arguments_is_bare_selector(self) -> None:
        assert abi.encode(Signature.NAME) == Signature.NAME.selector

    def test_layout(self) -> None:
        data = abi.encode(Signature.BALANCE_OF, [ALICE])
        assert len(data) == 4 + 32
        assert data[4:16] == bytes(12)
        assert data[16:] == bytes.fromhex(ALICE[2:])

    def test_wrong_arity(self) -> None:
        with pytest.raises(EncodingError, match="takes 2 argument"):
            abi.encode(Signature.TOKEN_OF_OWNER_BY_INDEX, [ALICE])

    def test_wrong_type(self) -> None:
        with pytest.raises(EncodingError):
            abi.encode(Signature.TOKEN_URI, ["not a number"])

    def test_negative_uint(self) -> None:
        with pytest.raises(EncodingError):
            abi.encode(Signature.TOKEN_URI, [-1])

    def test_uint_overflow(self) -> None:
        with pytest.raises(EncodingError):
            abi.encode(Signature.TOKEN_URI, [UINT256_MAX + 1])

    def test_invalid_address(self) -> None:
        with pytest.raises(EncodingError):
            abi.encode(Signature.BALANCE_OF, ["0x1234"])

    def test_encoding_error_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            abi.encode(Signature.BALANCE_OF, [])


class TestRoundTrip:
    @pytest.mark.parametrize(
        "signature, args",
        [
            (Signature.TOKEN_URI, (0,)),
            (Signature.TOKEN_URI, (UINT256_MAX,)),
            (Signature.TOKEN_OF_OWNER_BY_INDEX, (TOKEN, 0)),
            (Signature.TOKEN_OF_OWNER_BY_INDEX, (TOKEN, UINT256_MAX)),
            (Signature.TRANSFER, (TOKEN, 1)),
            (Signature.EXECUTE, (bytes(32), b"")),
            (Signature.EXECUTE, (b"\x01" + bytes(31), b"\xde\xad\xbe\xef" * 20)),
            (Signature.NAME, ()),
        ],
    )
    def test_decode_input_recovers_arguments(self, signature: Signature, args: tuple) -> None:
        assert abi.decode_input(signature, abi.encode(signature, args)) == args

    def test_try_aggregate(self) -> None:
        calls = [(TOKEN, Signature.NAME.selector), (ALICE, b"")]
        require_success, decoded = abi.decode_input(
            Signature.TRY_AGGREGATE, abi.encode(Signature.TRY_AGGREGATE, [False, calls])
        )
        assert require_success is False
        assert [(t.lower(), bytes(d)) for t, d in decoded] == [
            (TOKEN.lower(), Signature.NAME.selector),
            (ALICE.lower(), b""),
        ]

    def test_selector_mismatch(self) -> None:
        data = abi.encode(Signature.BALANCE_OF, [ALICE])
        with pytest.raises(DecodingError, match="Selector mismatch"):
            abi.decode_input(Signature.GET_ETH_BALANCE, data)


class TestDecode:
    def test_single_output_is_unwrapped(self) -> None:
        assert abi.decode(Signature.TOTAL_SUPPLY, abi_encode(["uint256"], [42])) == 42

    @pytest.mark.parametrize("value", [0, UINT256_MAX])
    def test_uint_bounds(self, value: int) -> None:
        assert abi.decode(Signature.BALANCE_OF, abi_encode(["uint256"], [value])) == value

    def test_string(self) -> None:
        raw = abi_encode(["string"], ["ipfs://token/1"])
        assert abi.decode(Signature.TOKEN_URI, raw) == "ipfs://token/1"

    def test_empty_string(self) -> None:
        assert abi.decode(Signature.NAME, abi_encode(["string"], [""])) == ""

    def test_address_is_checksummed(self) -> None:
        raw = abi_encode(["address"], [TOKEN.lower()])
        assert abi.decode(Signature.OWNER_OF, raw) == TOKEN

    def test_no_outputs(self) -> None:
        assert abi.decode(Signature.EXECUTE, b"") is None

    def test_truncated_data(self) -> None:
        with pytest.raises(DecodingError):
            abi.decode(Signature.BALANCE_OF, b"\x01" * 16)

    def test_empty_data_is_not_special_cased(self) -> None:
        # Callers check for empty return data before decoding.
        with pytest.raises(DecodingError):
            abi.decode(Signature.BALANCE_OF, b"")


# Two boundary samples per ABI type, written in the form eth-abi decodes to.
SAMPLES = {
    "address": (TOKEN, ALICE),
    "uint256": (0, UINT256_MAX),
    "uint8": (0, 255),
    "bool": (False, True),
    "string": ("", "ipfs://token/é"),
    "bytes": (b"", b"\x00" * 33),
    "bytes32": (bytes(32), b"\xff" * 32),
    "(address,bytes)[]": ((), ((TOKEN.lower(), b""), (ALICE.lower(), b"\x01\x02"))),
    "(bool,bytes)[]": ((), ((True, b""), (False, b"\x08\xc3\x79\xa0"))),
}

SAMPLE_CASES = [
    pytest.param(member, which, id=f"{member.name}-{which}")
    for member in Signature
    for which in (0, 1)
]


@pytest.mark.parametrize("signature, which", SAMPLE_CASES)
def test_every_signature_round_trips_inputs(signature: Signature, which: int) -> None:
    args = tuple(SAMPLES[abi_type][which] for abi_type in signature.spec.inputs)
    assert abi.decode_input(signature, abi.encode(signature, args)) == args


@pytest.mark.parametrize("signature, which", SAMPLE_CASES)
def test_every_signature_decodes_outputs(signature: Signature, which: int) -> None:
    outputs = signature.spec.outputs
    if not outputs:
        assert abi.decode(signature, b"") is None
        return
    values = [SAMPLES[abi_type][which] for abi_type in outputs]
    expected = values[0] if len(values) == 1 else tuple(values)
    assert abi.decode(signature, abi_encode(list(outputs), values)) == expected
