"""Configuration containers for the relay client."""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import GWEI, ChainConfig
from .exceptions import ValidationError

DEFAULT_REQUEST_TIMEOUT = 10.0
DEFAULT_RECEIPT_TIMEOUT = 120.0
DEFAULT_POLL_INTERVAL = 0.5

DEFAULT_BASE_FEE_MULTIPLIER = 2.0
DEFAULT_PRIORITY_FEE_MULTIPLIER = 1.5
DEFAULT_MIN_PRIORITY_FEE = 1 * GWEI
DEFAULT_MAX_PRIORITY_FEE = 500 * GWEI
DEFAULT_MAX_TOTAL_FEE = 1000 * GWEI
DEFAULT_FEE_PERCENTILE = 50.0
DEFAULT_FEE_BLOCK_HISTORY = 20


@dataclass(frozen=True)
class MarketFeeConfig:
    """Tuning for EIP-1559 fee computation."""

    base_fee_multiplier: float = DEFAULT_BASE_FEE_MULTIPLIER
    priority_fee_multiplier: float = DEFAULT_PRIORITY_FEE_MULTIPLIER
    min_priority_fee: int = DEFAULT_MIN_PRIORITY_FEE
    max_priority_fee: int = DEFAULT_MAX_PRIORITY_FEE
    max_total_fee: int = DEFAULT_MAX_TOTAL_FEE
    percentile: float = DEFAULT_FEE_PERCENTILE
    block_history: int = DEFAULT_FEE_BLOCK_HISTORY

    def __post_init__(self) -> None:
        if self.base_fee_multiplier <= 0:
            raise ValidationError(
                "Base fee multiplier must be positive",
                field="base_fee_multiplier",
                value=self.base_fee_multiplier,
            )
        if self.priority_fee_multiplier <= 0:
            raise ValidationError(
                "Priority fee multiplier must be positive",
                field="priority_fee_multiplier",
                value=self.priority_fee_multiplier,
            )
        if self.min_priority_fee < 0 or self.min_priority_fee > self.max_priority_fee:
            raise ValidationError(
                "Priority fee bounds must satisfy 0 <= min <= max",
                field="min_priority_fee",
                value=(self.min_priority_fee, self.max_priority_fee),
            )
        if self.max_total_fee <= 0:
            raise ValidationError(
                "Max total fee must be positive", field="max_total_fee", value=self.max_total_fee
            )
        if not 0 <= self.percentile <= 100:
            raise ValidationError(
                "Percentile must be within [0, 100]", field="percentile", value=self.percentile
            )
        if self.block_history < 1:
            raise ValidationError(
                "Block history must cover at least one block",
                field="block_history",
                value=self.block_history,
            )


@dataclass(frozen=True)
class PreflightConfig:
    """Balance checks performed before a transaction is signed."""

    check_balance: bool = False
    min_balance_required: int | None = None


@dataclass(frozen=True)
class RelayConfig:
    """Aggregated configuration used to construct the relay client."""

    rpc_url: str
    chain: ChainConfig
    max_retries: int | None = None
    timeout: float = DEFAULT_RECEIPT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    preflight: PreflightConfig = field(default_factory=PreflightConfig)

    def __post_init__(self) -> None:
        if not self.rpc_url:
            raise ValidationError("RPC URL is required", field="rpc_url", value=self.rpc_url)
        if self.max_retries is not None and self.max_retries < 0:
            raise ValidationError(
                "Max retries cannot be negative", field="max_retries", value=self.max_retries
            )
        if self.timeout <= 0:
            raise ValidationError("Timeout must be positive", field="timeout", value=self.timeout)
