"""Rate limiting for GitHub API calls."""

import time


class RateLimiter:
    """Token bucket rate limiter for API requests.

    GitHub applies secondary rate limits to content-creating requests such as
    repository creation, so calls are spaced out even when the primary quota
    is far from exhausted.
    """

    def __init__(self, requests_per_second: float = 1.0):
        """Initialize rate limiter.

        Args:
            requests_per_second: Maximum requests per second allowed
        """
        self.requests_per_second = requests_per_second
        self.tokens = requests_per_second
        self.last_update = time.monotonic()

    def _refill(self) -> None:
        now = time.monotonic()
        elapsed = now - self.last_update
        self.tokens = min(
            self.requests_per_second, self.tokens + elapsed * self.requests_per_second
        )
        self.last_update = now

    def acquire(self) -> None:
        """Acquire a token, sleeping until one is available."""
        self._refill()

        if self.tokens >= 1:
            self.tokens -= 1
            return

        time.sleep(self.time_until_next_request())
        self.tokens = 0
        self.last_update = time.monotonic()

    def time_until_next_request(self) -> float:
        """Get time until next request can be made.

        Returns:
            Seconds until next request is allowed
        """
        if self.tokens >= 1:
            return 0.0
        return (1 - self.tokens) / self.requests_per_second
