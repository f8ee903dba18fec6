from __future__ import annotations

import pytest
from conftest import GWEI, LEGACY_CHAIN, MARKET_CHAIN, FakeEth, fake_web3

from evm_relay.config import MarketFeeConfig
from evm_relay.exceptions import ErrorKind, ValidationError
from evm_relay.gas import LegacyGasStrategy, MarketGasStrategy, create_gas_strategy


@pytest.mark.asyncio
async def test_legacy_applies_multiplier_exactly() -> None:
    eth = FakeEth(gas_price=100 * GWEI)
    strategy = LegacyGasStrategy(fake_web3(eth), 1.1)

    result = await strategy.get_fee_parameters()

    assert result.error is None
    assert result.data.gas_price == 110 * GWEI
    assert result.data.max_fee_per_gas is None
    assert result.data.max_priority_fee_per_gas is None


@pytest.mark.asyncio
async def test_legacy_rounds_up() -> None:
    strategy = LegacyGasStrategy(fake_web3(FakeEth(gas_price=3)), 1.5)
    result = await strategy.get_fee_parameters()
    assert result.data.gas_price == 5


@pytest.mark.parametrize("multiplier", [0, -1.5])
def test_legacy_rejects_non_positive_multiplier(multiplier: float) -> None:
    with pytest.raises(ValidationError) as excinfo:
        LegacyGasStrategy(fake_web3(FakeEth()), multiplier)
    assert excinfo.value.field == "multiplier"

    with pytest.raises(ValidationError):
        create_gas_strategy(fake_web3(FakeEth()), LEGACY_CHAIN, multiplier)


@pytest.mark.asyncio
async def test_legacy_query_failure() -> None:
    eth = FakeEth()
    eth.gas_price_mock.side_effect = RuntimeError("RPC Error")

    result = await LegacyGasStrategy(fake_web3(eth)).get_fee_parameters()

    assert result.data is None
    assert result.error.kind is ErrorKind.GAS_ESTIMATION_FAILED
    assert isinstance(result.error.cause, RuntimeError)


@pytest.mark.asyncio
async def test_market_parameters_with_defaults() -> None:
    eth = FakeEth(base_fee=100 * GWEI, rewards=[[2 * GWEI]])

    result = await MarketGasStrategy(fake_web3(eth)).get_fee_parameters()

    assert result.error is None
    assert result.data.gas_price is None
    assert result.data.max_priority_fee_per_gas == 3 * GWEI
    assert result.data.max_fee_per_gas == 203 * GWEI
    eth.fee_history.assert_awaited_once_with(20, "latest", [50.0])


@pytest.mark.asyncio
async def test_market_uses_median_of_sample() -> None:
    eth = FakeEth(base_fee=10 * GWEI, rewards=[[9 * GWEI], [2 * GWEI], [4 * GWEI]])

    result = await MarketGasStrategy(fake_web3(eth)).get_fee_parameters()

    assert result.data.max_priority_fee_per_gas == 6 * GWEI


@pytest.mark.asyncio
async def test_market_priority_fee_floor() -> None:
    eth = FakeEth(rewards=[[GWEI // 2]])

    result = await MarketGasStrategy(fake_web3(eth)).get_fee_parameters()

    assert result.data.max_priority_fee_per_gas == MarketFeeConfig().min_priority_fee


@pytest.mark.asyncio
async def test_market_priority_fee_ceiling() -> None:
    eth = FakeEth(rewards=[[400 * GWEI]])

    result = await MarketGasStrategy(fake_web3(eth)).get_fee_parameters()

    assert result.data.max_priority_fee_per_gas == 500 * GWEI


@pytest.mark.asyncio
async def test_market_total_fee_cap_wins() -> None:
    eth = FakeEth(base_fee=600 * GWEI)

    result = await MarketGasStrategy(fake_web3(eth)).get_fee_parameters()

    assert result.data.max_fee_per_gas == 1000 * GWEI
    assert result.data.max_priority_fee_per_gas == 3 * GWEI


@pytest.mark.asyncio
async def test_market_total_fee_cap_also_bounds_priority_fee() -> None:
    eth = FakeEth(base_fee=100 * GWEI, rewards=[[2 * GWEI]])
    config = MarketFeeConfig(max_total_fee=2 * GWEI)

    result = await MarketGasStrategy(fake_web3(eth), config).get_fee_parameters()

    assert result.data.max_fee_per_gas == 2 * GWEI
    assert result.data.max_priority_fee_per_gas == 2 * GWEI


@pytest.mark.asyncio
async def test_market_empty_sample_falls_back_to_min_fee() -> None:
    eth = FakeEth(base_fee=GWEI, rewards=[])

    result = await MarketGasStrategy(fake_web3(eth)).get_fee_parameters()

    # min_priority_fee (1 gwei) scaled by the 1.5 priority multiplier
    assert result.data.max_priority_fee_per_gas == 1_500_000_000
    assert result.data.max_fee_per_gas == 2 * GWEI + 1_500_000_000


@pytest.mark.asyncio
async def test_market_rounds_base_multiplier_up() -> None:
    eth = FakeEth(base_fee=10 * GWEI)
    config = MarketFeeConfig(base_fee_multiplier=1.2)

    result = await MarketGasStrategy(fake_web3(eth), config).get_fee_parameters()

    assert result.data.max_fee_per_gas == 20 * GWEI + 3 * GWEI


@pytest.mark.asyncio
async def test_market_missing_base_fee() -> None:
    eth = FakeEth(base_fee=None)

    result = await MarketGasStrategy(fake_web3(eth)).get_fee_parameters()

    assert result.error.kind is ErrorKind.GAS_ESTIMATION_FAILED


@pytest.mark.asyncio
async def test_market_query_failure() -> None:
    eth = FakeEth()
    eth.get_block.side_effect = RuntimeError("RPC Error")

    result = await MarketGasStrategy(fake_web3(eth)).get_fee_parameters()

    assert result.data is None
    assert result.error.kind is ErrorKind.GAS_ESTIMATION_FAILED


def test_factory_selects_by_chain() -> None:
    web3 = fake_web3(FakeEth())

    legacy = create_gas_strategy(web3, LEGACY_CHAIN, 1.2)
    assert isinstance(legacy, LegacyGasStrategy)

    config = MarketFeeConfig(percentile=75)
    market = create_gas_strategy(web3, MARKET_CHAIN, config)
    assert isinstance(market, MarketGasStrategy)
    assert market.config is config


def test_factory_ignores_mismatched_override() -> None:
    web3 = fake_web3(FakeEth())

    market = create_gas_strategy(web3, MARKET_CHAIN, 1.2)
    assert isinstance(market, MarketGasStrategy)
    assert market.config == MarketFeeConfig()

    assert isinstance(create_gas_strategy(web3, LEGACY_CHAIN, MarketFeeConfig()), LegacyGasStrategy)
