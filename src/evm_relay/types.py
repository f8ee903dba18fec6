"""Type definitions and data models for the EVM transaction relay."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from eth_typing import HexStr
from web3 import Web3
from web3.types import TxParams, TxReceipt

from .exceptions import RelayError, ValidationError

T = TypeVar("T")

Address = str
Wei = int
TxHash = HexStr  # 0x-prefixed


@dataclass(frozen=True)
class TransactionRequest:
    """Caller-supplied transaction fields."""

    to: Address
    value: Wei = 0
    data: bytes | None = None
    gas: int | None = None

    def __post_init__(self) -> None:
        if not Web3.is_address(self.to):
            raise ValidationError("Invalid recipient address", field="to", value=self.to)
        object.__setattr__(self, "to", Web3.to_checksum_address(self.to))

        if self.value < 0:
            raise ValidationError("Value cannot be negative", field="value", value=self.value)

        if self.gas is not None and self.gas <= 0:
            raise ValidationError("Gas limit must be positive", field="gas", value=self.gas)

    def as_call_params(self, sender: Address) -> TxParams:
        """Return the request as web3 call parameters sent from ``sender``."""

        params: dict[str, Any] = {"from": sender, "to": self.to, "value": self.value}
        if self.data is not None:
            params["data"] = self.data
        if self.gas is not None:
            params["gas"] = self.gas
        return params  # type: ignore[return-value]


@dataclass(frozen=True)
class FeeParameters:
    """Fee fields for an outbound transaction.

    Either ``gas_price`` alone (legacy) or both market fields are set.
    """

    gas_price: Wei | None = None
    max_fee_per_gas: Wei | None = None
    max_priority_fee_per_gas: Wei | None = None

    def __post_init__(self) -> None:
        market = (self.max_fee_per_gas, self.max_priority_fee_per_gas)
        if self.gas_price is not None:
            if any(value is not None for value in market):
                raise ValidationError(
                    "Legacy gas price cannot be combined with market fee fields",
                    field="gas_price",
                    value=self.gas_price,
                )
        elif any(value is None for value in market):
            raise ValidationError(
                "Market fees require both max_fee_per_gas and max_priority_fee_per_gas",
                field="max_fee_per_gas",
                value=market,
            )

    @classmethod
    def legacy(cls, gas_price: Wei) -> FeeParameters:
        return cls(gas_price=gas_price)

    @classmethod
    def market(cls, max_fee_per_gas: Wei, max_priority_fee_per_gas: Wei) -> FeeParameters:
        return cls(
            max_fee_per_gas=max_fee_per_gas,
            max_priority_fee_per_gas=max_priority_fee_per_gas,
        )

    @property
    def is_legacy(self) -> bool:
        return self.gas_price is not None

    @property
    def price_per_gas(self) -> Wei:
        """Upper bound paid per unit of gas."""

        if self.gas_price is not None:
            return self.gas_price
        return self.max_fee_per_gas  # type: ignore[return-value]

    def as_tx_fields(self) -> dict[str, Wei]:
        """Return only the populated fee fields keyed by their JSON-RPC names."""

        if self.gas_price is not None:
            return {"gasPrice": self.gas_price}
        return {
            "maxFeePerGas": self.max_fee_per_gas,  # type: ignore[dict-item]
            "maxPriorityFeePerGas": self.max_priority_fee_per_gas,  # type: ignore[dict-item]
        }


@dataclass(frozen=True)
class RelayResult(Generic[T]):
    """Outcome of a relay operation: a value or a classified error, never both."""

    data: T | None = None
    error: RelayError | None = None

    def __post_init__(self) -> None:
        if self.error is not None and self.data is not None:
            raise ValueError("RelayResult cannot carry both data and an error")

    @classmethod
    def success(cls, data: T | None = None) -> RelayResult[T]:
        return cls(data=data)

    @classmethod
    def failure(cls, error: RelayError) -> RelayResult[T]:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> T:
        """Return the value or raise the carried error."""

        if self.error is not None:
            raise self.error
        return self.data  # type: ignore[return-value]


BeforeTransactionHook = Callable[[TransactionRequest], Awaitable[None]]
ReceiptHook = Callable[[TxReceipt], Awaitable[None]]
BroadcastHook = Callable[[TxHash], Awaitable[None]]
ErrorHook = Callable[[RelayError], Awaitable[None]]


@dataclass(frozen=True)
class TransactionHooks:
    """Optional lifecycle callbacks invoked by the relay client."""

    before_transaction: BeforeTransactionHook | None = None
    on_transaction_broadcast: BroadcastHook | None = None
    on_transaction_confirmed: ReceiptHook | None = None
    after_transaction: ReceiptHook | None = None
    on_error: ErrorHook | None = None
