"""Sequential nonce allocation for a single account."""

from __future__ import annotations

import asyncio
import logging

from web3 import AsyncWeb3

from .types import Address

logger = logging.getLogger(__name__)


class NonceManager:
    """Hand out consecutive nonces for one account on one endpoint.

    The first allocation, and the first after :meth:`reset`, reads the
    pending transaction count from the chain; later allocations increment
    the cached value so several transactions can be in flight at once.
    Allocation and reset share one lock.
    """

    def __init__(self, web3: AsyncWeb3, address: Address) -> None:
        self._web3 = web3
        self._address = address
        self._lock = asyncio.Lock()
        self._current_nonce: int | None = None

    @property
    def address(self) -> Address:
        return self._address

    @property
    def current_nonce(self) -> int | None:
        """Last nonce handed out, or None when the next call re-fetches."""
        return self._current_nonce

    async def next_nonce(self) -> int:
        async with self._lock:
            if self._current_nonce is None:
                self._current_nonce = await self._web3.eth.get_transaction_count(
                    self._address, "pending"
                )
                logger.debug("Fetched nonce %s for %s", self._current_nonce, self._address)
            else:
                self._current_nonce += 1
            return self._current_nonce

    async def reset(self) -> None:
        async with self._lock:
            if self._current_nonce is not None:
                logger.warning(
                    "Resetting nonce for %s (was %s)", self._address, self._current_nonce
                )
            self._current_nonce = None
