"""Lifecycle hook dispatch."""

from __future__ import annotations

from web3.types import TxReceipt

from .exceptions import RelayError
from .types import TransactionHooks, TransactionRequest, TxHash


class HooksManager:
    """Invoke caller-supplied hooks; absent hooks are skipped.

    Exceptions raised by a hook are not caught here.
    """

    def __init__(self, hooks: TransactionHooks | None = None) -> None:
        self._hooks = hooks or TransactionHooks()

    @property
    def hooks(self) -> TransactionHooks:
        return self._hooks

    async def run_before_transaction(self, request: TransactionRequest) -> None:
        if self._hooks.before_transaction is not None:
            await self._hooks.before_transaction(request)

    async def run_on_transaction_broadcast(self, tx_hash: TxHash) -> None:
        if self._hooks.on_transaction_broadcast is not None:
            await self._hooks.on_transaction_broadcast(tx_hash)

    async def run_on_transaction_confirmed(self, receipt: TxReceipt) -> None:
        if self._hooks.on_transaction_confirmed is not None:
            await self._hooks.on_transaction_confirmed(receipt)

    async def run_after_transaction(self, receipt: TxReceipt) -> None:
        if self._hooks.after_transaction is not None:
            await self._hooks.after_transaction(receipt)

    async def run_on_error(self, error: RelayError) -> None:
        if self._hooks.on_error is not None:
            await self._hooks.on_error(error)
