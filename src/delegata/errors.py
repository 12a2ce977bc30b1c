"""
Error taxonomy for Delegata.

Every fatal condition is a DelegataError subclass carrying the exit code the
CLI terminates with.  A reverted inner call inside a tryAggregate batch is
NOT an error: it is reported in-band as ``DecodedResult(success=False)``.
"""

from __future__ import annotations

from typing import Any, Optional


class DelegataError(RuntimeError):
    exit_code: int = 1


class EncodingError(DelegataError, ValueError):
    """Arguments do not match a function signature, or a batch is malformed."""

    exit_code = 2


class EmptyBatchError(EncodingError):
    """A batch was requested with no calls in it."""


class DecodingError(DelegataError):
    """Return data cannot be parsed as the declared result shape."""

    exit_code = 3

    def __init__(self, message: str, index: Optional[int] = None) -> None:
        if index is not None:
            message = f"call #{index}: {message}"
        super().__init__(message)
        self.index = index


class AggregateCallError(DelegataError):
    """The aggregate entry point itself reverted; no partial results exist."""

    exit_code = 4


class TransportError(DelegataError):
    """Network or JSON-RPC failure."""

    exit_code = 5

    def __init__(
        self,
        message: str,
        code: Optional[int] = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.data = data

    @property
    def is_revert(self) -> bool:
        """True when the node reports that the EVM execution reverted."""
        if self.code == 3:
            return True
        return "revert" in str(self).lower()


class ConfigError(DelegataError):
    exit_code = 6


class KeystoreError(DelegataError):
    exit_code = 7


__all__ = [
    "AggregateCallError",
    "ConfigError",
    "DecodingError",
    "DelegataError",
    "EmptyBatchError",
    "EncodingError",
    "KeystoreError",
    "TransportError",
]
