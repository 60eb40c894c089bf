"""Token Bucket Rate Limiter implementation.

This module provides a thread-safe token bucket rate limiter that keeps
table reads under the per-base request rate Airtable enforces.
"""

from __future__ import annotations

import logging
import threading
import time

from linkvault.shared.constants import AirtableConfig
from linkvault.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)


class TokenBucketRateLimiter:
    """Thread-safe token bucket rate limiter.

    Tokens are consumed by each request and refilled at a constant rate.
    Page requests run in worker threads, so the bucket is guarded by a
    lock rather than relying on the event loop.

    Args:
        capacity: Maximum number of tokens the bucket can hold (default: 5)
        refill_rate: Number of tokens to add per second (default: 5)
    """

    def __init__(
        self,
        capacity: int = int(AirtableConfig.RATE_LIMIT_RPS),
        refill_rate: float = AirtableConfig.RATE_LIMIT_RPS,
    ) -> None:
        """Initialize the token bucket rate limiter.

        Raises:
            ApplicationError: If capacity or refill_rate are invalid
        """
        context = ErrorContext(
            operation="rate_limiter_init",
            additional_data={"capacity": capacity, "refill_rate": refill_rate},
        )

        if capacity <= 0:
            raise ApplicationError(
                code=ErrorCode.VALIDATION_ERROR,
                message=f"Capacity must be positive, got: {capacity}",
                context=context,
            )

        if refill_rate <= 0:
            raise ApplicationError(
                code=ErrorCode.VALIDATION_ERROR,
                message=f"Refill rate must be positive, got: {refill_rate}",
                context=context,
            )

        self.capacity = capacity
        self.refill_rate = refill_rate
        self.tokens = float(capacity)
        self.last_refill = time.monotonic()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        """Add the tokens earned since the last refill, up to capacity."""
        now = time.monotonic()
        tokens_to_add = (now - self.last_refill) * self.refill_rate

        if tokens_to_add > 0:
            self.tokens = min(self.capacity, self.tokens + tokens_to_add)
            self.last_refill = now

    def try_acquire(self, tokens: int = 1) -> bool:
        """Try to acquire tokens from the bucket.

        Args:
            tokens: Number of tokens to acquire (default: 1)

        Returns:
            True if tokens were acquired, False if the bucket is short

        Raises:
            ApplicationError: If the request is not positive or exceeds capacity
        """
        if tokens <= 0 or tokens > self.capacity:
            raise ApplicationError(
                code=ErrorCode.VALIDATION_ERROR,
                message=(
                    f"Tokens to acquire must be between 1 and {self.capacity}, "
                    f"got: {tokens}"
                ),
                context=ErrorContext(
                    operation="rate_limiter_acquire",
                    additional_data={"requested_tokens": tokens},
                ),
            )

        with self._lock:
            self._refill()
            if self.tokens >= tokens:
                self.tokens -= tokens
                return True

        logger.debug("Rate limit reached, %d token(s) unavailable", tokens)
        return False

    def get_tokens_available(self) -> int:
        """Get the current number of whole tokens in the bucket."""
        with self._lock:
            self._refill()
            return int(self.tokens)

    def reset(self) -> None:
        """Reset the bucket to its full capacity."""
        with self._lock:
            self.tokens = float(self.capacity)
            self.last_refill = time.monotonic()
