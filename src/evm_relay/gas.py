"""Gas pricing strategies for outbound transactions."""

from __future__ import annotations

import asyncio
import logging
import math
from abc import ABC, abstractmethod

from web3 import AsyncWeb3

from .config import MarketFeeConfig
from .constants import ChainConfig
from .exceptions import ErrorKind, RelayError, ValidationError
from .types import FeeParameters, RelayResult
from .utils import ceil_multiply, median

logger = logging.getLogger(__name__)


class GasStrategy(ABC):
    """Compute fee fields to attach to a transaction."""

    @abstractmethod
    async def get_fee_parameters(self) -> RelayResult[FeeParameters]:
        pass


class LegacyGasStrategy(GasStrategy):
    """Single gas price scaled from the node's current quote."""

    def __init__(self, web3: AsyncWeb3, multiplier: float = 1.0) -> None:
        if multiplier <= 0:
            raise ValidationError(
                "Gas price multiplier must be positive", field="multiplier", value=multiplier
            )
        self._web3 = web3
        self._multiplier = multiplier

    async def get_fee_parameters(self) -> RelayResult[FeeParameters]:
        try:
            gas_price = await self._web3.eth.gas_price
            scaled = ceil_multiply(gas_price, self._multiplier)
        except Exception as exc:
            return RelayResult.failure(
                RelayError("Failed to get gas price", ErrorKind.GAS_ESTIMATION_FAILED, cause=exc)
            )

        logger.debug("Legacy gas price %s (node quote %s)", scaled, gas_price)
        return RelayResult.success(FeeParameters.legacy(scaled))


class MarketGasStrategy(GasStrategy):
    """EIP-1559 pricing from the latest base fee and recent priority tips.

    The priority fee is bounded before it is folded into the max fee, and
    the max fee is capped last so ``max_total_fee`` always wins. When that
    cap lands below the tip, the tip is lowered to the max fee as well.
    """

    def __init__(self, web3: AsyncWeb3, config: MarketFeeConfig | None = None) -> None:
        self._web3 = web3
        self._config = config or MarketFeeConfig()

    @property
    def config(self) -> MarketFeeConfig:
        return self._config

    async def get_fee_parameters(self) -> RelayResult[FeeParameters]:
        config = self._config
        try:
            block, fee_history = await asyncio.gather(
                self._web3.eth.get_block("latest"),
                self._web3.eth.fee_history(config.block_history, "latest", [config.percentile]),
            )
            base_fee = block["baseFeePerGas"]
            rewards = [entry[0] for entry in (fee_history.get("reward") or []) if entry]
        except Exception as exc:
            return RelayResult.failure(
                RelayError(
                    "Failed to get EIP-1559 gas parameters",
                    ErrorKind.GAS_ESTIMATION_FAILED,
                    cause=exc,
                )
            )

        sampled = median(rewards) if rewards else config.min_priority_fee
        priority_fee = ceil_multiply(sampled, config.priority_fee_multiplier)
        priority_fee = max(config.min_priority_fee, min(priority_fee, config.max_priority_fee))

        max_fee = base_fee * math.ceil(config.base_fee_multiplier) + priority_fee
        max_fee = min(max_fee, config.max_total_fee)
        priority_fee = min(priority_fee, max_fee)

        logger.debug(
            "Market fees base=%s sampled_tip=%s max_fee=%s priority=%s",
            base_fee,
            sampled,
            max_fee,
            priority_fee,
        )
        return RelayResult.success(FeeParameters.market(max_fee, priority_fee))


def create_gas_strategy(
    web3: AsyncWeb3,
    chain: ChainConfig,
    override: MarketFeeConfig | float | None = None,
) -> GasStrategy:
    """Pick the pricing strategy the chain supports.

    A numeric ``override`` is the legacy multiplier; a
    :class:`MarketFeeConfig` tunes the market strategy.
    """

    if not chain.supports_eip1559:
        multiplier = override if isinstance(override, int | float) else 1.0
        return LegacyGasStrategy(web3, multiplier)

    market_config = override if isinstance(override, MarketFeeConfig) else None
    return MarketGasStrategy(web3, market_config)
