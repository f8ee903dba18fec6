"""Retry policies for transient chain-query failures."""

from __future__ import annotations

import random
from abc import ABC, abstractmethod

from .exceptions import ErrorKind, RelayError, ValidationError

TERMINAL_KINDS = frozenset(
    {
        ErrorKind.INSUFFICIENT_FUNDS,
        ErrorKind.INVALID_SIGNATURE,
        ErrorKind.PERMANENT_REVERT,
    }
)

DEFAULT_MAX_ATTEMPTS = 5
DEFAULT_BASE_DELAY = 1.0
DEFAULT_MAX_DELAY = 30.0


class RetryStrategy(ABC):
    """Decide whether a failed attempt is retried and how long to wait."""

    @abstractmethod
    def should_retry(self, error: RelayError, attempt: int) -> bool:
        pass

    @abstractmethod
    def get_delay(self, attempt: int) -> float:
        """Seconds to wait before the next attempt."""


class ExponentialBackoff(RetryStrategy):
    """Exponential backoff with jitter.

    Args:
        max_attempts: Attempts after which no further retry is made
        base_delay: Delay in seconds before the first retry
        max_delay: Upper bound in seconds before jitter is applied

    Attempts are counted from zero. The jitter factor is drawn from
    [0.75, 1.25] on every call so that concurrent relays do not retry in
    lockstep against the same endpoint.
    """

    def __init__(
        self,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
    ) -> None:
        if max_attempts < 0:
            raise ValidationError(
                "max_attempts cannot be negative", field="max_attempts", value=max_attempts
            )
        if base_delay < 0 or max_delay < 0:
            raise ValidationError(
                "Delays cannot be negative", field="base_delay", value=(base_delay, max_delay)
            )
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay

    def should_retry(self, error: RelayError, attempt: int) -> bool:
        if attempt >= self.max_attempts:
            return False
        return error.kind not in TERMINAL_KINDS

    def get_delay(self, attempt: int) -> float:
        delay = min(self.max_delay, self.base_delay * 2**attempt)
        return delay * random.uniform(0.75, 1.25)
