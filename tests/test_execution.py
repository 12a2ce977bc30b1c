"""Batch execution encoding for delegated accounts."""

from __future__ import annotations

import pytest
from eth_abi import decode as abi_decode

from delegata.chain import abi
from delegata.chain.abi import Signature
from delegata.chain.execution import (
    ExecutionCall,
    ExecutionMode,
    decode_batch,
    encode_batch,
    encode_execute,
    native_transfers,
)
from delegata.errors import EmptyBatchError, EncodingError
from delegata.utils import parse_ether

A = "0x5aAeb6053F3E94C9b9A09f33669435E7Ef1BeAed"
B = "0xfB6916095ca1df60bB79Ce92cE3Ea74c37c5d359"
USDC = "0xA0b86991c6218b36c1d19D4a2e9Eb0cE3606eB48"


class TestModes:
    def test_mode_codes(self) -> None:
        assert ExecutionMode.BATCH_DEFAULT.value.hex() == "01" + "00" * 31
        assert ExecutionMode.BATCH_TRY.value.hex() == "0101" + "00" * 30
        assert ExecutionMode.SINGLE_DEFAULT.value == bytes(32)
        assert ExecutionMode.SINGLE_TRY.value.hex() == "0001" + "00" * 30

    def test_mode_flags(self) -> None:
        assert ExecutionMode.BATCH_DEFAULT.is_batch
        assert not ExecutionMode.BATCH_DEFAULT.is_try
        assert ExecutionMode.SINGLE_TRY.is_try
        assert not ExecutionMode.SINGLE_TRY.is_batch


class TestExecutionCall:
    def test_target_checksummed(self) -> None:
        assert ExecutionCall(A.lower(), 1).target == A

    def test_hex_call_data(self) -> None:
        assert ExecutionCall(A, 0, "0xdeadbeef").call_data == bytes.fromhex("deadbeef")

    @pytest.mark.parametrize("target", [None, "", "0x1234", "not an address"])
    def test_invalid_target(self, target) -> None:
        with pytest.raises(EncodingError):
            ExecutionCall(target, 1)

    @pytest.mark.parametrize("value", [-1, 2**256, 1.5, True])
    def test_invalid_value(self, value) -> None:
        with pytest.raises(EncodingError):
            ExecutionCall(A, value)


class TestEncodeBatch:
    def test_batch_transfer_scenario(self) -> None:
        calls = native_transfers([A, B], parse_ether("1.5"))

        assert calls == [
            ExecutionCall(A, 1_500_000_000_000_000_000, b""),
            ExecutionCall(B, 1_500_000_000_000_000_000, b""),
        ]

        data = encode_execute(calls)
        assert data[:4] == Signature.EXECUTE.selector
        mode, execution_calldata = abi.decode_input(Signature.EXECUTE, data)
        assert mode == ExecutionMode.BATCH_DEFAULT.value
        assert decode_batch(execution_calldata) == calls

    def test_batch_layout(self) -> None:
        calls = [ExecutionCall(A, 5, b"\x01\x02"), ExecutionCall(USDC, 0, "0xa9059cbb")]
        (entries,) = abi_decode(["(address,uint256,bytes)[]"], encode_batch(calls))
        assert [(t.lower(), v, bytes(d)) for t, v, d in entries] == [
            (A.lower(), 5, b"\x01\x02"),
            (USDC.lower(), 0, bytes.fromhex("a9059cbb")),
        ]

    def test_empty_batch(self) -> None:
        with pytest.raises(EmptyBatchError):
            encode_batch([])
        with pytest.raises(EncodingError):
            encode_execute([])

    @pytest.mark.parametrize(
        "changed",
        [
            [ExecutionCall(A, 1, b""), ExecutionCall(A, 1, b"")],
            [ExecutionCall(A, 1, b""), ExecutionCall(B, 2, b"")],
            [ExecutionCall(A, 1, b""), ExecutionCall(B, 1, b"\x00")],
            [ExecutionCall(B, 1, b""), ExecutionCall(A, 1, b"")],
            [ExecutionCall(A, 1, b"")],
            [ExecutionCall(A, 1, b""), ExecutionCall(B, 1, b""), ExecutionCall(B, 1, b"")],
        ],
    )
    def test_injective(self, changed: list[ExecutionCall]) -> None:
        base = [ExecutionCall(A, 1, b""), ExecutionCall(B, 1, b"")]
        assert encode_batch(changed) != encode_batch(base)

    def test_deterministic(self) -> None:
        calls = native_transfers([A, B], 1)
        assert encode_batch(calls) == encode_batch(list(calls))

    def test_single_mode_is_packed(self) -> None:
        call = ExecutionCall(USDC, 7, bytes.fromhex("a9059cbb"))
        data = encode_batch([call], ExecutionMode.SINGLE_DEFAULT)
        assert data == bytes.fromhex(USDC[2:]) + (7).to_bytes(32, "big") + bytes.fromhex("a9059cbb")

    def test_single_mode_takes_one_call(self) -> None:
        with pytest.raises(EncodingError, match="exactly one call"):
            encode_batch(native_transfers([A, B], 1), ExecutionMode.SINGLE_DEFAULT)

    def test_try_mode_tag_travels_with_payload(self) -> None:
        calls = native_transfers([A], 1)
        default = encode_execute(calls, ExecutionMode.BATCH_DEFAULT)
        try_mode = encode_execute(calls, ExecutionMode.BATCH_TRY)
        assert default != try_mode
        assert abi.decode_input(Signature.EXECUTE, try_mode)[1] == encode_batch(calls)


def test_token_transfer_inside_batch() -> None:
    transfer = abi.encode(Signature.TRANSFER, [B, 10**6])
    calls = [ExecutionCall(USDC, 0, transfer), *native_transfers([A], 1)]
    decoded = decode_batch(encode_batch(calls))
    assert decoded[0].call_data == transfer
    assert abi.decode_input(Signature.TRANSFER, decoded[0].call_data) == (B, 10**6)
