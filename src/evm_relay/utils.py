"""Utility functions for the EVM transaction relay."""

from collections.abc import Sequence
from decimal import ROUND_CEILING, Decimal

from eth_typing import HexStr
from hexbytes import HexBytes

from .exceptions import ValidationError


def ceil_multiply(amount: int, multiplier: float | Decimal | int) -> int:
    """Multiply a wei amount by ``multiplier`` and round up to a whole unit."""
    if multiplier < 0:
        raise ValidationError("Multiplier cannot be negative", field="multiplier", value=multiplier)

    if isinstance(multiplier, float | int):
        multiplier = Decimal(str(multiplier))

    product = Decimal(amount) * multiplier
    return int(product.to_integral_value(rounding=ROUND_CEILING))


def median(values: Sequence[int]) -> int:
    """Return the upper median of ``values``."""
    if not values:
        raise ValueError("median() of an empty sequence")
    ordered = sorted(values)
    return ordered[len(ordered) // 2]


def to_hex_hash(tx_hash: bytes | str) -> HexStr:
    """Normalise a transaction hash to a 0x-prefixed hex string."""
    return HexStr(HexBytes(tx_hash).to_0x_hex())
