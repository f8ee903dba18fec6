"""Map arbitrary failures onto :class:`ErrorKind` values."""

from collections.abc import Mapping
from typing import Any

from .exceptions import ErrorKind, RelayError

# Checked in order; the first kind with a matching substring wins.
_PATTERNS: tuple[tuple[ErrorKind, tuple[str, ...]], ...] = (
    (ErrorKind.INSUFFICIENT_FUNDS, ("insufficient funds", "insufficient balance")),
    (ErrorKind.INVALID_SIGNATURE, ("invalid signature", "invalid sender")),
    (
        ErrorKind.PERMANENT_REVERT,
        ("invalid opcode", "execution reverted", "revert", "unauthorized"),
    ),
    (
        ErrorKind.TEMPORARY_FAILURE,
        ("timeout", "timed out", "network", "connection", "rate limit", "nonce too low"),
    ),
)


def _extract_message(failure: Any) -> str:
    if isinstance(failure, BaseException):
        return str(failure) or type(failure).__name__
    if isinstance(failure, Mapping):
        message = failure.get("message")
        if message is not None:
            return str(message)
    return str(failure)


def classify_error(failure: Any) -> RelayError:
    """Classify ``failure`` into a :class:`RelayError`.

    Already-classified errors are returned unchanged. Anything that matches
    no known wording is treated as a temporary failure so it stays eligible
    for retry.
    """
    if isinstance(failure, RelayError):
        return failure

    message = _extract_message(failure)
    lowered = message.lower()

    for kind, patterns in _PATTERNS:
        if any(pattern in lowered for pattern in patterns):
            return RelayError(message, kind, cause=failure)

    return RelayError(message, ErrorKind.TEMPORARY_FAILURE, cause=failure)
