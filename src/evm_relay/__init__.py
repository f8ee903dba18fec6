"""EVM transaction relay.

Submits transactions on behalf of a single account with safe nonce
allocation, legacy or EIP-1559 fee pricing, preflight balance checks,
confirmation waiting and classified retries.
"""

from .classifier import classify_error
from .client import RelayClient
from .config import MarketFeeConfig, PreflightConfig, RelayConfig
from .connections import account_from_key
from .constants import ChainConfig, get_chain
from .exceptions import (
    ErrorKind,
    EVMRelayError,
    NetworkError,
    RelayError,
    ValidationError,
)
from .gas import GasStrategy, LegacyGasStrategy, MarketGasStrategy, create_gas_strategy
from .hooks import HooksManager
from .nonce import NonceManager
from .preflight import check_balance
from .retry import ExponentialBackoff, RetryStrategy
from .types import (
    Address,
    FeeParameters,
    RelayResult,
    TransactionHooks,
    TransactionRequest,
    TxHash,
    Wei,
)

__version__ = "0.1.0"

__all__ = [
    # Client
    "RelayClient",
    "account_from_key",
    # Configuration
    "RelayConfig",
    "PreflightConfig",
    "MarketFeeConfig",
    "ChainConfig",
    "get_chain",
    # Strategies and components
    "GasStrategy",
    "LegacyGasStrategy",
    "MarketGasStrategy",
    "create_gas_strategy",
    "RetryStrategy",
    "ExponentialBackoff",
    "NonceManager",
    "HooksManager",
    "check_balance",
    "classify_error",
    # Types
    "TransactionRequest",
    "FeeParameters",
    "RelayResult",
    "TransactionHooks",
    "Address",
    "TxHash",
    "Wei",
    # Exceptions
    "EVMRelayError",
    "RelayError",
    "ErrorKind",
    "NetworkError",
    "ValidationError",
]
