"""Connection helpers for the relay client."""

from __future__ import annotations

import logging
from typing import cast

import aiohttp
from eth_account import Account
from eth_account.signers.local import LocalAccount
from web3 import AsyncHTTPProvider, AsyncWeb3

from .config import RelayConfig
from .exceptions import NetworkError, ValidationError

logger = logging.getLogger(__name__)


def account_from_key(private_key: str) -> LocalAccount:
    """Derive a signing account from a hex private key."""

    try:
        return cast(LocalAccount, Account.from_key(private_key))
    except Exception as exc:
        raise ValidationError(
            "Failed to derive signer account from provided private key",
            field="private_key",
            details={"error": str(exc)},
        ) from exc


class Web3Connections:
    """Own the async Web3 handle used for every chain query."""

    def __init__(self, config: RelayConfig, web3: AsyncWeb3 | None = None) -> None:
        self.config = config
        self._web3 = web3
        self._connected = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    async def connect(self) -> None:
        """Check the endpoint is reachable and serves the configured chain."""

        web3 = self.web3
        try:
            reachable = await web3.is_connected()
        except Exception as exc:
            raise NetworkError(
                "Unable to reach RPC endpoint",
                endpoint=self.config.rpc_url,
                details={"error": str(exc)},
            ) from exc

        if not reachable:
            raise NetworkError(
                f"Unable to connect to {self.config.chain.name} RPC",
                endpoint=self.config.rpc_url,
            )

        chain_id = await web3.eth.chain_id
        if chain_id != self.config.chain.chain_id:
            raise ValidationError(
                "RPC endpoint serves a different chain",
                field="chain_id",
                value=chain_id,
                details={"expected": self.config.chain.chain_id},
            )

        self._connected = True
        logger.info("Connected to %s RPC at %s", self.config.chain.name, self.config.rpc_url)

    def is_connected(self) -> bool:
        return self._connected and self._web3 is not None

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def web3(self) -> AsyncWeb3:
        if self._web3 is None:
            self._web3 = self._build_web3()
        return self._web3

    # ------------------------------------------------------------------
    # Internal wiring
    # ------------------------------------------------------------------
    def _build_web3(self) -> AsyncWeb3:
        timeout = aiohttp.ClientTimeout(total=self.config.request_timeout)
        provider = AsyncHTTPProvider(self.config.rpc_url, request_kwargs={"timeout": timeout})
        return AsyncWeb3(provider)
