"""Domain models for retry configuration."""

from dataclasses import dataclass

# Caps the exponent so very large attempt counts cannot overflow the delay
MAX_BACKOFF_EXPONENT = 16


@dataclass(frozen=True)
class RetryPolicy:
    """Retry behaviour with capped exponential backoff and no jitter.

    ``max_retries`` counts retries, not attempts: a policy with
    ``max_retries=3`` makes at most four requests.
    """

    max_retries: int = 3
    base_backoff_ms: int = 250
    max_backoff_ms: int = 5_000
    retry_on_rate_limit: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be greater than or equal to 0")
        if self.base_backoff_ms <= 0:
            raise ValueError("base_backoff_ms must be greater than 0")
        if self.max_backoff_ms < self.base_backoff_ms:
            raise ValueError(
                "max_backoff_ms must be greater than or equal to base_backoff_ms"
            )

    def delay_ms(self, attempt: int) -> int:
        """
        Calculate delay for given retry attempt using exponential backoff.

        Formula: min(base_backoff_ms * 2 ^ attempt, max_backoff_ms)

        Args:
            attempt: Attempt that just failed (0-indexed)

        Returns:
            Delay in milliseconds

        Examples:
            >>> policy = RetryPolicy(base_backoff_ms=100, max_backoff_ms=1000)
            >>> policy.delay_ms(0)  # First retry
            100
            >>> policy.delay_ms(1)  # Second retry
            200
            >>> policy.delay_ms(4)  # Capped
            1000
        """
        exponent = min(max(attempt, 0), MAX_BACKOFF_EXPONENT)
        return min(self.base_backoff_ms * (2**exponent), self.max_backoff_ms)

    def can_retry(self, attempt: int) -> bool:
        """Whether another try is allowed after ``attempt`` failed."""
        return attempt < self.max_retries

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1
