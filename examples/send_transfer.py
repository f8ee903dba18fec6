"""Example: relay a native-token transfer and log each lifecycle stage."""

from __future__ import annotations

import asyncio
import logging
import os

from dotenv import load_dotenv
from web3 import Web3

from evm_relay import (
    ChainConfig,
    RelayClient,
    RelayError,
    TransactionHooks,
    TransactionRequest,
    get_chain,
)

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOGLEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

DEFAULT_AMOUNT_ETH = "0.001"


def _require_env(name: str) -> str:
    value = os.getenv(name)
    if not value:
        raise ValueError(f"{name} not found in environment variables")
    return value


def _resolve_chain() -> ChainConfig:
    chain_id = int(os.getenv("RELAY_CHAIN_ID", "31337"))
    try:
        return get_chain(chain_id)
    except ValueError:
        supports_eip1559 = os.getenv("RELAY_EIP1559", "true").lower() == "true"
        return ChainConfig(
            chain_id=chain_id, name=f"chain-{chain_id}", supports_eip1559=supports_eip1559
        )


async def _on_broadcast(tx_hash: str) -> None:
    logging.info("Broadcast: %s", tx_hash)


async def _on_error(error: RelayError) -> None:
    logging.error("Relay failed (%s): %s", error.kind.name, error.message)


async def main() -> None:
    """Send a small transfer to RELAY_RECIPIENT and wait for it to be mined."""

    private_key = _require_env("RELAY_PRIVATE_KEY")
    recipient = _require_env("RELAY_RECIPIENT")
    rpc_url = os.getenv("RELAY_RPC_URL", "http://127.0.0.1:8545")
    amount = Web3.to_wei(os.getenv("RELAY_AMOUNT_ETH", DEFAULT_AMOUNT_ETH), "ether")

    client = RelayClient.from_private_key(
        private_key,
        _resolve_chain(),
        rpc_url,
        max_retries=int(os.getenv("RELAY_MAX_RETRIES", "3")),
        timeout=float(os.getenv("RELAY_TIMEOUT", "120")),
        check_balance=True,
        hooks=TransactionHooks(on_transaction_broadcast=_on_broadcast, on_error=_on_error),
    )
    await client.connect()

    result = await client.send_transaction(TransactionRequest(to=recipient, value=amount))
    if result.ok:
        logging.info("Transfer mined: %s", result.data)
    else:
        logging.error("Transfer failed: %s", result.error)


if __name__ == "__main__":
    asyncio.run(main())
