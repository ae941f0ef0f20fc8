"""Retry definitions - Backoff, RetryConfig."""

from collections.abc import Callable
from dataclasses import dataclass

from core.domain.enums import BackoffKind


@dataclass(frozen=True)
class Backoff:
    """Delay between retry attempts, in seconds."""

    kind: BackoffKind = BackoffKind.FIXED
    delay: float = 0.0

    def __post_init__(self):
        if self.delay < 0:
            raise ValueError(f"Backoff delay must be >= 0, got {self.delay}")
        # Accept plain strings ("fixed", "exponential")
        object.__setattr__(self, "kind", BackoffKind(self.kind))

    def delay_for(self, attempt: int) -> float:
        """Delay to wait after the given (1-indexed) failed attempt."""
        if self.kind is BackoffKind.FIXED:
            return self.delay
        return self.delay * 2 ** (attempt - 1)


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for a step.

    Attempt ``k`` runs only if ``k <= max_attempts`` and, for ``k > 1``,
    ``should_retry`` accepted the previous attempt's error.
    """

    max_attempts: int = 1
    backoff: Backoff | None = None
    should_retry: Callable[[Exception], bool] | None = None

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")

    def delay_for(self, attempt: int) -> float:
        if self.backoff is None:
            return 0.0
        return self.backoff.delay_for(attempt)


NO_RETRY = RetryConfig()
