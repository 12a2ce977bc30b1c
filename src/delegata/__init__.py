__all__ = [
    # Errors
    "DelegataError",
    "EncodingError",
    "EmptyBatchError",
    "DecodingError",
    "AggregateCallError",
    "TransportError",
    "ConfigError",
    "KeystoreError",
    # Config
    "ChainConfig",
    "load_config",
    # Codec
    "Signature",
    "encode",
    "decode",
    "decode_input",
    # Reads
    "CallDescriptor",
    "AggregateResult",
    "DecodedResult",
    "AggregateReader",
    "present_values",
    # Writes
    "ExecutionCall",
    "ExecutionMode",
    "encode_batch",
    "encode_execute",
    "native_transfers",
    "TransactionSender",
    # Authorization
    "AuthorizationIntent",
    "AuthorizationTuple",
    "delegate_for",
    "sign_authorization",
    # Transport
    "JsonRpcClient",
]

from .errors import (
    AggregateCallError,
    ConfigError,
    DecodingError,
    DelegataError,
    EmptyBatchError,
    EncodingError,
    KeystoreError,
    TransportError,
)
from .config import ChainConfig, load_config
from .chain.abi import Signature, decode, decode_input, encode
from .chain.multicall import (
    AggregateReader,
    AggregateResult,
    CallDescriptor,
    DecodedResult,
    present_values,
)
from .chain.execution import (
    ExecutionCall,
    ExecutionMode,
    encode_batch,
    encode_execute,
    native_transfers,
)
from .chain.rpc import JsonRpcClient
from .chain.tx import TransactionSender
from .keys.authorization import (
    AuthorizationIntent,
    AuthorizationTuple,
    delegate_for,
    sign_authorization,
)
