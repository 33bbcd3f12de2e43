"""
Retry policy.

A policy knows how many times to try and how long to wait in between; it
knows nothing about what it retries. Operations report success or failure
through an Outcome value instead of raising.

Usage:
    policy = RetryPolicy(max_attempts=3, delay=3.0)
    outcome = policy.run(lambda attempt: try_login())
    if not outcome.ok:
        raise outcome.error
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class Outcome:
    """Result-or-error value returned by a retried operation."""
    value: Any = None
    error: Optional[Exception] = None
    attempts: int = 0

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any = None) -> "Outcome":
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> "Outcome":
        return cls(error=error)


@dataclass(frozen=True)
class RetryPolicy:
    """Fixed-delay retry policy."""
    max_attempts: int = 3
    delay: float = 1.0
    sleep: Callable[[float], None] = field(default=time.sleep, compare=False, repr=False)

    def __post_init__(self):
        if self.max_attempts < 1:
            raise ValueError(f"max_attempts must be >= 1, got {self.max_attempts}")
        if self.delay < 0:
            raise ValueError(f"delay must be >= 0, got {self.delay}")

    def run(
        self,
        operation: Callable[[int], Outcome],
        on_retry: Callable[[int, Exception], None] | None = None,
    ) -> Outcome:
        """
        Call operation(attempt) until it succeeds or attempts run out.

        Args:
            operation: Called with the 1-based attempt number
            on_retry: Called with (attempt, error) after each failed attempt
                      that will be followed by another one

        Returns:
            The last Outcome, with attempts set to the number of calls made
        """
        outcome = Outcome.failure(RuntimeError("operation never ran"))
        for attempt in range(1, self.max_attempts + 1):
            outcome = replace(operation(attempt), attempts=attempt)
            if outcome.ok:
                return outcome
            if attempt < self.max_attempts:
                if on_retry:
                    on_retry(attempt, outcome.error)
                self.sleep(self.delay)
        return outcome
