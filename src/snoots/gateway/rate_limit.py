"""
Rate limit tracking for Reddit API responses.

Reddit reports the remaining request budget and the seconds until the budget
resets on every response. Responses complete out of order when several
requests are in flight, so a slow response for an earlier request must not
overwrite the fresher count from a later one.
"""

import time
from typing import Any, Dict, Mapping, Optional

import structlog

from .types import RateLimit

logger = structlog.get_logger(__name__)

REMAINING_HEADER = "x-ratelimit-remaining"
RESET_HEADER = "x-ratelimit-reset"


class RateLimitTracker:
    """
    Tracks the last known rate limit state of one gateway.

    The stored value is only replaced when:
    - nothing is stored yet,
    - the stored window has already reset, or
    - the new ``remaining`` is strictly lower than the stored one.

    Updates are plain read-modify-replace operations; they rely on running on
    a single event loop and need no lock.
    """

    def __init__(self, warn_ratio: float = 0.1) -> None:
        """
        Initialize the tracker.

        Args:
            warn_ratio: Fraction of the window budget below which a warning
                is logged (default: 0.1)
        """
        self.warn_ratio = warn_ratio
        self._current: Optional[RateLimit] = None
        self._window_size: Optional[int] = None

    @property
    def current(self) -> Optional[RateLimit]:
        """The last known rate limit, or None if no response was seen."""
        return self._current

    def update(
        self,
        remaining: int,
        reset_seconds: float,
        now: Optional[float] = None,
    ) -> bool:
        """
        Apply a rate limit observation from a response.

        Args:
            remaining: Requests remaining in the current window
            reset_seconds: Seconds until the window resets
            now: Current epoch time (defaults to time.time())

        Returns:
            True if the stored value was replaced

        Example:
            >>> tracker = RateLimitTracker()
            >>> tracker.update(10, 60)
            True
            >>> tracker.update(15, 60)  # Older response, ignored
            False
            >>> tracker.update(5, 60)
            True
        """
        if now is None:
            now = time.time()

        stored = self._current
        stale = stored is not None and stored.reset <= now

        if stored is not None and not stale and remaining >= stored.remaining:
            logger.debug(
                "rate_limit_update_ignored",
                stored_remaining=stored.remaining,
                remaining=remaining,
            )
            return False

        if stored is None or stale:
            self._window_size = remaining

        self._current = RateLimit(remaining=remaining, reset=now + reset_seconds)

        if self._window_size and remaining <= self._window_size * self.warn_ratio:
            logger.warning(
                "rate_limit_approaching",
                remaining=remaining,
                reset_seconds=reset_seconds,
            )

        return True

    def update_from_headers(
        self,
        headers: Mapping[str, str],
        now: Optional[float] = None,
    ) -> bool:
        """
        Apply the rate limit headers of a response.

        Responses without both headers (e.g. from www.reddit.com) are ignored.

        Args:
            headers: Response headers (case-insensitive mapping)
            now: Current epoch time (defaults to time.time())

        Returns:
            True if the stored value was replaced
        """
        raw_remaining = headers.get(REMAINING_HEADER)
        raw_reset = headers.get(RESET_HEADER)
        if raw_remaining is None or raw_reset is None:
            return False

        try:
            # Reddit sends the remaining count as a float, e.g. "598.0".
            remaining = int(float(raw_remaining))
            reset_seconds = float(raw_reset)
        except ValueError:
            logger.warning(
                "rate_limit_headers_invalid",
                remaining=raw_remaining,
                reset=raw_reset,
            )
            return False

        return self.update(remaining, reset_seconds, now=now)

    def get_remaining(self, now: Optional[float] = None) -> Optional[int]:
        """
        Get the number of requests left in the current window.

        Returns:
            The remaining count, or None if unknown or the window has reset
        """
        if now is None:
            now = time.time()

        if self._current is None or self._current.reset <= now:
            return None

        return max(0, self._current.remaining)

    def reset(self) -> None:
        """
        Forget the stored state.

        Useful for testing or manual intervention.
        """
        self._current = None
        self._window_size = None
        logger.info("rate_limit_tracker_reset")

    def get_stats(self, now: Optional[float] = None) -> Dict[str, Any]:
        """
        Get current rate limit statistics.

        Returns:
            Dictionary with the remaining count, seconds until reset and
            whether the stored value has gone stale.

        Example:
            >>> tracker.get_stats()
            {'remaining': 87, 'reset_in_seconds': 42.1, 'stale': False}
        """
        if now is None:
            now = time.time()

        if self._current is None:
            return {"remaining": None, "reset_in_seconds": None, "stale": True}

        reset_in = self._current.reset - now
        return {
            "remaining": self._current.remaining,
            "reset_in_seconds": round(max(0.0, reset_in), 2),
            "stale": reset_in <= 0,
        }
