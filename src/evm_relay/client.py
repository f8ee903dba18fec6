"""Relay client sequencing pricing, nonces, broadcast and confirmation."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3
from web3.exceptions import TimeExhausted
from web3.types import TxParams, TxReceipt

from . import preflight
from .classifier import classify_error
from .config import (
    DEFAULT_POLL_INTERVAL,
    DEFAULT_RECEIPT_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
    PreflightConfig,
    RelayConfig,
)
from .connections import Web3Connections, account_from_key
from .constants import ChainConfig
from .exceptions import ErrorKind, RelayError
from .gas import GasStrategy, create_gas_strategy
from .hooks import HooksManager
from .nonce import NonceManager
from .retry import ExponentialBackoff, RetryStrategy
from .types import (
    Address,
    FeeParameters,
    RelayResult,
    TransactionHooks,
    TransactionRequest,
    TxHash,
)
from .utils import to_hex_hash

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _HookFailure(Exception):
    """Carries an exception raised by caller hook code past the classifier."""

    def __init__(self, original: Exception) -> None:
        super().__init__(str(original))
        self.original = original


class RelayClient:
    """Submit transactions for one account with nonce, fee and retry handling.

    A single client may serve many concurrent :meth:`send_transaction`
    calls; nonces are handed out in allocation order.

    Exceptions raised by lifecycle hooks are not classified. They reset the
    nonce cache and propagate out of :meth:`send_transaction` unchanged,
    which means a failing ``after_transaction`` hook raises even though the
    transaction itself was mined.
    """

    def __init__(
        self,
        account: LocalAccount,
        chain: ChainConfig,
        rpc_url: str,
        *,
        max_retries: int | None = None,
        timeout: float = DEFAULT_RECEIPT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        hooks: TransactionHooks | None = None,
        gas_strategy: GasStrategy | None = None,
        retry_strategy: RetryStrategy | None = None,
        check_balance: bool = False,
        min_balance_required: int | None = None,
        web3: AsyncWeb3 | None = None,
    ) -> None:
        config = RelayConfig(
            rpc_url=rpc_url,
            chain=chain,
            max_retries=max_retries,
            timeout=timeout,
            poll_interval=poll_interval,
            request_timeout=request_timeout,
            preflight=PreflightConfig(
                check_balance=check_balance,
                min_balance_required=min_balance_required,
            ),
        )

        self._config = config
        self._account = account
        self._connections = Web3Connections(config, web3)
        web3 = self._connections.web3

        self._nonce = NonceManager(web3, account.address)
        self._hooks = HooksManager(hooks)
        self._gas_strategy = gas_strategy or create_gas_strategy(web3, chain)
        if retry_strategy is not None:
            self._retry_strategy = retry_strategy
        elif max_retries is not None:
            self._retry_strategy = ExponentialBackoff(max_attempts=max_retries)
        else:
            self._retry_strategy = ExponentialBackoff()

    @classmethod
    def from_private_key(
        cls, private_key: str, chain: ChainConfig, rpc_url: str, **kwargs: Any
    ) -> RelayClient:
        """Build a client signing with the account behind ``private_key``."""

        return cls(account_from_key(private_key), chain, rpc_url, **kwargs)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def address(self) -> Address:
        return self._account.address

    @property
    def config(self) -> RelayConfig:
        return self._config

    @property
    def nonce_manager(self) -> NonceManager:
        return self._nonce

    @property
    def gas_strategy(self) -> GasStrategy:
        return self._gas_strategy

    @property
    def retry_strategy(self) -> RetryStrategy:
        return self._retry_strategy

    async def connect(self) -> None:
        await self._connections.connect()

    def is_connected(self) -> bool:
        return self._connections.is_connected()

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------
    async def estimate_gas(self, request: TransactionRequest) -> RelayResult[int]:
        params = request.as_call_params(self.address)
        web3 = self._connections.web3
        return await self._with_retry(lambda: web3.eth.estimate_gas(params), action="estimate_gas")

    async def wait_for_transaction(self, tx_hash: TxHash) -> RelayResult[TxReceipt]:
        web3 = self._connections.web3
        timeout = self._config.timeout

        async def wait() -> TxReceipt:
            try:
                return await web3.eth.wait_for_transaction_receipt(
                    tx_hash, timeout=timeout, poll_latency=self._config.poll_interval
                )
            except TimeExhausted as exc:
                raise RelayError(
                    f"Transaction {tx_hash} not mined within {timeout}s",
                    ErrorKind.TIMEOUT,
                    cause=exc,
                ) from exc

        return await self._with_retry(wait, action="wait_for_transaction")

    async def send_transaction(self, request: TransactionRequest) -> RelayResult[TxHash]:
        hook_error: Exception | None = None
        result: RelayResult[TxHash] | None = None
        try:
            result = await self._submit(request)
        except _HookFailure as failure:
            hook_error = failure.original
        except Exception as exc:
            await self._nonce.reset()
            result = RelayResult.failure(classify_error(exc))

        if hook_error is not None:
            await self._nonce.reset()
            logger.error("Lifecycle hook raised while relaying to %s: %r", request.to, hook_error)
            raise hook_error

        assert result is not None
        if result.error is not None:
            logger.error(
                "Transaction to %s failed (%s): %s",
                request.to,
                result.error.kind.name,
                result.error.message,
            )
            await self._hooks.run_on_error(result.error)
        return result

    # ------------------------------------------------------------------
    # Internal workflow
    # ------------------------------------------------------------------
    async def _submit(self, request: TransactionRequest) -> RelayResult[TxHash]:
        web3 = self._connections.web3

        gas_result, fee_result = await asyncio.gather(
            self._resolve_gas_limit(request),
            self._gas_strategy.get_fee_parameters(),
        )
        if gas_result.error is not None:
            return RelayResult.failure(gas_result.error)
        if fee_result.error is not None:
            return RelayResult.failure(fee_result.error)

        gas_limit = gas_result.data
        fees = fee_result.data
        if gas_limit is None or fees is None:
            return RelayResult.failure(
                RelayError("Failed to get gas parameters", ErrorKind.GAS_ESTIMATION_FAILED)
            )

        preflight_config = self._config.preflight
        if preflight_config.check_balance:
            required = gas_limit * fees.price_per_gas
            balance_result = await preflight.check_balance(
                web3, self.address, required, preflight_config.min_balance_required
            )
            if balance_result.error is not None:
                return RelayResult.failure(balance_result.error)

        await self._call_hook(self._hooks.run_before_transaction(request))

        try:
            nonce = await self._nonce.next_nonce()
        except Exception as exc:
            raise RelayError(
                f"Failed to allocate nonce: {exc}", ErrorKind.NONCE_ERROR, cause=exc
            ) from exc

        tx = self._build_transaction(request, nonce, gas_limit, fees)
        signed = self._account.sign_transaction(tx)
        tx_hash = to_hex_hash(await web3.eth.send_raw_transaction(signed.raw_transaction))
        logger.info("Broadcast transaction %s nonce=%s to=%s", tx_hash, nonce, request.to)

        await self._call_hook(self._hooks.run_on_transaction_broadcast(tx_hash))

        receipt_result = await self.wait_for_transaction(tx_hash)
        if receipt_result.error is not None:
            await self._nonce.reset()
            return RelayResult.failure(receipt_result.error)

        receipt = receipt_result.data
        assert receipt is not None
        status = receipt.get("status")
        logger.info(
            "Transaction %s mined in block %s status=%s",
            tx_hash,
            receipt.get("blockNumber"),
            status,
        )

        if status == 1:
            await self._call_hook(self._hooks.run_on_transaction_confirmed(receipt))
        await self._call_hook(self._hooks.run_after_transaction(receipt))

        return RelayResult.success(tx_hash)

    async def _resolve_gas_limit(self, request: TransactionRequest) -> RelayResult[int]:
        if request.gas is not None:
            return RelayResult.success(request.gas)
        return await self.estimate_gas(request)

    def _build_transaction(
        self,
        request: TransactionRequest,
        nonce: int,
        gas_limit: int,
        fees: FeeParameters,
    ) -> TxParams:
        tx: dict[str, Any] = {
            "to": request.to,
            "value": request.value,
            "nonce": nonce,
            "gas": gas_limit,
            "chainId": self._config.chain.chain_id,
        }
        if request.data is not None:
            tx["data"] = request.data
        tx.update(fees.as_tx_fields())
        return tx  # type: ignore[return-value]

    async def _call_hook(self, call: Awaitable[None]) -> None:
        try:
            await call
        except Exception as exc:
            raise _HookFailure(exc) from exc

    async def _with_retry(
        self, operation: Callable[[], Awaitable[T]], *, action: str
    ) -> RelayResult[T]:
        attempt = 0
        while True:
            try:
                return RelayResult.success(await operation())
            except Exception as exc:
                error = classify_error(exc)
                if not self._retry_strategy.should_retry(error, attempt):
                    return RelayResult.failure(error)

                delay = self._retry_strategy.get_delay(attempt)
                logger.warning(
                    "%s failed on attempt %s (%s): %s; retrying in %.2fs",
                    action,
                    attempt + 1,
                    error.kind.name,
                    error.message,
                    delay,
                )
                await asyncio.sleep(delay)
                attempt += 1
