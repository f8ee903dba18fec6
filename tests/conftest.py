from __future__ import annotations

import inspect
from types import SimpleNamespace
from typing import Any, cast
from unittest.mock import AsyncMock

import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount
from hexbytes import HexBytes
from web3 import AsyncWeb3
from web3.eth import AsyncEth

from evm_relay.client import RelayClient
from evm_relay.constants import ChainConfig
from evm_relay.retry import ExponentialBackoff

# Anvil's first default account
SENDER_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
RECEIVER = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
TX_HASH = HexBytes(b"\x11" * 32)
GWEI = 10**9

LEGACY_CHAIN = ChainConfig(chain_id=31337, name="Foundry", supports_eip1559=False)
MARKET_CHAIN = ChainConfig(chain_id=31337, name="Foundry")


class EthMethodMock(AsyncMock):
    """AsyncMock that only accepts the arguments the real ``AsyncEth`` method takes."""

    def __call__(self, /, *args: Any, **kwargs: Any) -> Any:
        self._signature.bind(None, *args, **kwargs)
        return super().__call__(*args, **kwargs)


def eth_method(name: str, **kwargs: Any) -> EthMethodMock:
    mock = EthMethodMock(**kwargs)
    mock._signature = inspect.signature(getattr(AsyncEth, name))
    return mock


class FakeEth:
    """Stand-in for ``AsyncWeb3.eth`` with every query backed by a checked AsyncMock."""

    def __init__(
        self,
        *,
        tx_count: int = 7,
        balance: int = 10**21,
        gas_price: int = 20 * GWEI,
        base_fee: int | None = 100 * GWEI,
        rewards: list[list[int]] | None = None,
        gas_estimate: int = 21_000,
        receipt_status: int = 1,
        chain_id: int = 31337,
    ) -> None:
        block: dict[str, Any] = {"number": 1}
        if base_fee is not None:
            block["baseFeePerGas"] = base_fee

        self.get_transaction_count = eth_method("get_transaction_count", return_value=tx_count)
        self.get_balance = eth_method("get_balance", return_value=balance)
        self.estimate_gas = eth_method("estimate_gas", return_value=gas_estimate)
        self.get_block = eth_method("get_block", return_value=block)
        self.fee_history = eth_method(
            "fee_history",
            return_value={"reward": rewards if rewards is not None else [[2 * GWEI]]},
        )
        self.send_raw_transaction = eth_method("send_raw_transaction", return_value=TX_HASH)
        self.wait_for_transaction_receipt = eth_method(
            "wait_for_transaction_receipt",
            return_value={"status": receipt_status, "blockNumber": 12, "transactionHash": TX_HASH},
        )
        self.gas_price_mock = AsyncMock(return_value=gas_price)
        self.chain_id_mock = AsyncMock(return_value=chain_id)

    @property
    def gas_price(self):
        return self.gas_price_mock()

    @property
    def chain_id(self):
        return self.chain_id_mock()


class RecordingAccount:
    """Delegate signing to a real key while keeping every signed dict."""

    def __init__(self, account: LocalAccount) -> None:
        self._account = account
        self.signed: list[dict[str, Any]] = []

    @property
    def address(self) -> str:
        return self._account.address

    def sign_transaction(self, tx: dict[str, Any]):
        self.signed.append(dict(tx))
        return self._account.sign_transaction(tx)


def fake_web3(eth: FakeEth, *, reachable: bool = True) -> AsyncWeb3:
    return cast(AsyncWeb3, SimpleNamespace(eth=eth, is_connected=AsyncMock(return_value=reachable)))


def fast_retries(max_attempts: int = 2) -> ExponentialBackoff:
    return ExponentialBackoff(max_attempts=max_attempts, base_delay=0, max_delay=0)


def make_client(
    eth: FakeEth,
    *,
    chain: ChainConfig = LEGACY_CHAIN,
    **kwargs: Any,
) -> tuple[RelayClient, RecordingAccount]:
    account = RecordingAccount(cast(LocalAccount, Account.from_key(SENDER_KEY)))
    kwargs.setdefault("retry_strategy", fast_retries())
    client = RelayClient(
        cast(LocalAccount, account),
        chain,
        "http://127.0.0.1:8545",
        web3=fake_web3(eth),
        **kwargs,
    )
    return client, account


@pytest.fixture
def eth() -> FakeEth:
    return FakeEth()
