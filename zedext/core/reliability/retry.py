"""
Retry policy — bounded exponential backoff for flaky network operations.

    delay(n) = min(base_delay * 2 ** (n - 1), max_delay)

where ``n`` counts retries from 1. There is no delay before the first
try and no jitter: with the defaults a download is tried 6 times, waiting
2, 4, 8, 16 and 30 seconds in between.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry and how long to wait in between."""

    max_retries: int = 5
    base_delay: float = 2.0
    max_delay: float = 30.0

    @property
    def total_attempts(self) -> int:
        """Initial try plus every retry."""
        return self.max_retries + 1

    def delay_for(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (1-based)."""
        if attempt < 1:
            return 0.0
        return min(self.base_delay * (2 ** (attempt - 1)), self.max_delay)
