"""Retry policy for projection delivery.

Implements exponential backoff for transient projection failures. No jitter:
there is one engine per process and delays must be reproducible in tests.
"""

from dataclasses import dataclass

from splitstate.core.config import Settings


@dataclass(frozen=True, kw_only=True)
class RetryPolicy:
    """Exponential backoff settings.

    Attributes:
        max_attempts: Total attempts per event, first try included.
        base_delay: Delay before the first retry, in seconds.
        max_delay: Upper bound for any single delay, in seconds.
        backoff_multiplier: Factor applied per further retry.
    """

    max_attempts: int = 5
    base_delay: float = 0.05
    max_delay: float = 5.0
    backoff_multiplier: float = 2.0

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        if self.base_delay < 0 or self.max_delay < 0:
            raise ValueError("delays must be >= 0")

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        """Build the policy from application settings."""
        return cls(
            max_attempts=settings.projection_max_attempts,
            base_delay=settings.projection_retry_base_delay,
            max_delay=settings.projection_retry_max_delay,
            backoff_multiplier=settings.projection_backoff_multiplier,
        )

    def calculate_delay(self, retry_count: int) -> float:
        """
        Calculate delay before a retry.

        Args:
            retry_count: Retries already made (0 for the first retry).

        Returns:
            Delay in seconds, capped at max_delay.
        """
        delay = self.base_delay * (self.backoff_multiplier**retry_count)
        return min(delay, self.max_delay)

    def should_retry(self, attempts: int) -> bool:
        """Whether another attempt is allowed after `attempts` failures."""
        return attempts < self.max_attempts
