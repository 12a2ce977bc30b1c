"""
Multicall - Batched reads through Multicall3 ``tryAggregate``.

Many contract reads are packed into one ``eth_call``; the per-call
``(success, returnData)`` pairs come back in input order and are decoded
against each descriptor's signature.

Result rules, per index:
- inner call failed          -> DecodedResult(False, None)
- succeeded, empty data      -> DecodedResult(True, None), no decode attempt
- succeeded, non-empty data  -> decoded value; a decode failure is fatal
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Sequence

from ..errors import AggregateCallError, DecodingError, EncodingError, TransportError
from ..utils import checksum
from . import abi
from .abi import Signature
from .rpc import Transport

logger = logging.getLogger(__name__)

MAX_OWNED_TOKENS = 10_000


@dataclass(frozen=True)
class CallDescriptor:
    """
    One pending contract read.

    The signature's declared outputs are the shape its result is decoded to.
    """
    target: str
    signature: Signature
    args: tuple[Any, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        object.__setattr__(self, "target", checksum(self.target))
        object.__setattr__(self, "args", tuple(self.args))

    @property
    def call_data(self) -> bytes:
        return abi.encode(self.signature, self.args)


@dataclass(frozen=True)
class AggregateResult:
    success: bool
    return_data: bytes


@dataclass(frozen=True)
class DecodedResult:
    success: bool
    value: Optional[Any] = None

    @property
    def present(self) -> bool:
        return self.success and self.value is not None


def present_values(results: Sequence[DecodedResult]) -> list[Any]:
    """Values of the results that succeeded and carried data, in order."""
    return [r.value for r in results if r.present]


Step = Callable[[list[DecodedResult]], Sequence[CallDescriptor]]


class AggregateReader:
    """
    Runs CallDescriptor batches through a Multicall3 deployment.

    Args:
        transport: Anything exposing ``call_contract(to, data) -> bytes``
        multicall_address: Multicall3 contract address
    """

    def __init__(self, transport: Transport, multicall_address: str) -> None:
        self.transport = transport
        self.multicall_address = checksum(multicall_address)

    def aggregate(
        self,
        descriptors: Sequence[CallDescriptor],
        allow_failure: bool = True,
    ) -> list[DecodedResult]:
        """
        Execute every descriptor in a single ``tryAggregate`` call.

        Args:
            descriptors: Calls to make, in order
            allow_failure: When False the whole batch reverts if any call fails

        Returns:
            One DecodedResult per descriptor, same order

        Raises:
            EncodingError: A descriptor's arguments do not fit its signature
            AggregateCallError: The aggregate call itself reverted
            DecodingError: Return data does not match a declared shape
            TransportError: Network / RPC failure
        """
        descriptors = list(descriptors)
        if not descriptors:
            return []

        calls = []
        for index, descriptor in enumerate(descriptors):
            try:
                calls.append((descriptor.target, descriptor.call_data))
            except EncodingError as exc:
                raise EncodingError(f"call #{index}: {exc}") from exc

        raw_results = self._try_aggregate(calls, require_success=not allow_failure)
        if len(raw_results) != len(descriptors):
            raise DecodingError(
                f"tryAggregate returned {len(raw_results)} results for {len(descriptors)} calls"
            )

        decoded = [
            self._resolve(index, descriptor, result)
            for index, (descriptor, result) in enumerate(zip(descriptors, raw_results))
        ]
        failed = sum(1 for r in decoded if not r.success)
        logger.debug("aggregate: %d calls, %d failed", len(decoded), failed)
        return decoded

    def fan_out(
        self,
        first: Sequence[CallDescriptor],
        *steps: Step,
        allow_failure: bool = True,
    ) -> list[list[DecodedResult]]:
        """
        Run dependent batches, each derived from the previous results.

        Every step is a pure function of the previous phase's results
        returning the next batch of descriptors.

        Returns:
            The results of every phase, in phase order
        """
        phases = [self.aggregate(first, allow_failure=allow_failure)]
        for step in steps:
            descriptors = list(step(phases[-1]))
            logger.debug("fan_out: phase %d with %d calls", len(phases) + 1, len(descriptors))
            phases.append(self.aggregate(descriptors, allow_failure=allow_failure))
        return phases

    def _try_aggregate(
        self,
        calls: list[tuple[str, bytes]],
        require_success: bool,
    ) -> list[AggregateResult]:
        data = abi.encode(Signature.TRY_AGGREGATE, [require_success, calls])
        try:
            raw = self.transport.call_contract(self.multicall_address, data)
        except TransportError as exc:
            if exc.is_revert:
                raise AggregateCallError(
                    f"tryAggregate reverted ({len(calls)} calls, "
                    f"requireSuccess={require_success}): {exc}"
                ) from exc
            raise

        if not raw:
            raise AggregateCallError("tryAggregate returned no data")

        pairs = abi.decode(Signature.TRY_AGGREGATE, raw)
        return [AggregateResult(bool(success), bytes(return_data)) for success, return_data in pairs]

    @staticmethod
    def _resolve(index: int, descriptor: CallDescriptor, result: AggregateResult) -> DecodedResult:
        if not result.success:
            return DecodedResult(False, None)
        if not result.return_data:
            return DecodedResult(True, None)
        try:
            value = abi.decode(descriptor.signature, result.return_data)
        except DecodingError as exc:
            raise DecodingError(str(exc), index=index) from exc
        return DecodedResult(True, value)


# ============ Batch builders ============


def balances_batch(multicall_address: str, accounts: Sequence[str]) -> list[CallDescriptor]:
    """Native balances via Multicall3's own ``getEthBalance``."""
    return [
        CallDescriptor(multicall_address, Signature.GET_ETH_BALANCE, (checksum(account),))
        for account in accounts
    ]


def token_info_batch(token: str, signatures: Sequence[Signature]) -> list[CallDescriptor]:
    """Argument-less reads (name, symbol, ...) against one token contract."""
    return [CallDescriptor(token, signature) for signature in signatures]


def owned_token_ids_step(token: str, owner: str, max_items: int = MAX_OWNED_TOKENS) -> Step:
    """
    balanceOf(owner) result -> tokenOfOwnerByIndex(owner, i) for every index.

    The count comes from the contract; more than ``max_items`` is refused
    with DecodingError rather than building an unbounded batch.
    """
    owner = checksum(owner)

    def step(results: list[DecodedResult]) -> list[CallDescriptor]:
        count = results[0].value if results and results[0].present else 0
        if count > max_items:
            raise DecodingError(
                f"balanceOf reported {count} tokens, more than the limit of {max_items}", index=0
            )
        return [
            CallDescriptor(token, Signature.TOKEN_OF_OWNER_BY_INDEX, (owner, index))
            for index in range(count)
        ]

    return step


def token_uri_step(token: str) -> Step:
    """Token id results -> tokenURI(id) for every id that was read."""

    def step(results: list[DecodedResult]) -> list[CallDescriptor]:
        return [
            CallDescriptor(token, Signature.TOKEN_URI, (token_id,))
            for token_id in present_values(results)
        ]

    return step
