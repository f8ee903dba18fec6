"""Balance checks run before a transaction is signed."""

from __future__ import annotations

from web3 import AsyncWeb3

from .classifier import classify_error
from .types import Address, RelayResult, Wei


async def check_balance(
    web3: AsyncWeb3,
    address: Address,
    required_amount: Wei,
    min_balance_required: Wei | None = None,
) -> RelayResult[None]:
    """Fail with an insufficient-funds error when ``address`` cannot pay.

    ``min_balance_required`` replaces ``required_amount`` as the threshold
    when given. A balance equal to the threshold passes.
    """
    try:
        balance = await web3.eth.get_balance(address)
    except Exception as exc:
        return RelayResult.failure(classify_error(exc))

    threshold = min_balance_required if min_balance_required is not None else required_amount
    if balance < threshold:
        return RelayResult.failure(
            classify_error(f"Insufficient balance. Required: {threshold}, Available: {balance}")
        )
    return RelayResult.success()
