"""Exception hierarchy for the EVM transaction relay."""

from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Classification of relay failures used to drive retry decisions."""

    TRANSACTION_FAILED = "transaction_failed"
    GAS_ESTIMATION_FAILED = "gas_estimation_failed"
    NONCE_ERROR = "nonce_error"
    INSUFFICIENT_FUNDS = "insufficient_funds"
    INVALID_SIGNATURE = "invalid_signature"
    PERMANENT_REVERT = "permanent_revert"
    TEMPORARY_FAILURE = "temporary_failure"
    TIMEOUT = "timeout"


class EVMRelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RelayError(EVMRelayError):
    """A failure tagged with an :class:`ErrorKind`.

    Instances are returned inside :class:`~evm_relay.types.RelayResult`
    rather than raised across component boundaries. The originating failure
    is kept on ``cause`` for diagnostics.
    """

    def __init__(
        self,
        message: str,
        kind: ErrorKind,
        cause: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self._kind = kind
        self._cause = cause

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def cause(self) -> Any | None:
        return self._cause

    def __repr__(self) -> str:
        return f"RelayError({self.message!r}, kind={self._kind.name})"


class NetworkError(EVMRelayError):
    """Raised when the RPC endpoint cannot be reached."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.endpoint = endpoint


class ValidationError(EVMRelayError):
    """Raised when caller input or configuration is invalid."""

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: Any | None = None,
        details: dict | None = None,
    ):
        super().__init__(message, details)
        self.field = field
        self.value = value
