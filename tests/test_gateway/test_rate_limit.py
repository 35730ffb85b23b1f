"""
Tests for RateLimitTracker.

Tests cover:
- Monotonic updates within a window
- Replacing stale values
- Parsing Reddit's rate limit headers
- get_remaining() and get_stats()
- Warnings when the budget runs low
"""

from unittest.mock import patch

from snoots.gateway.rate_limit import RateLimitTracker

NOW = 1_700_000_000.0


class TestRateLimitTracker:
    """Test suite for RateLimitTracker."""

    def test_initialization(self):
        """Test tracker starts without a value."""
        tracker = RateLimitTracker()

        assert tracker.current is None
        assert tracker.get_remaining(now=NOW) is None

    def test_first_update_stored(self):
        """Test the first observation is always stored."""
        tracker = RateLimitTracker()

        assert tracker.update(10, 60, now=NOW) is True
        assert tracker.current.remaining == 10
        assert tracker.current.reset == NOW + 60

    def test_higher_remaining_ignored(self):
        """Test an out of order response cannot raise the count."""
        tracker = RateLimitTracker()

        tracker.update(10, 60, now=NOW)
        assert tracker.update(15, 60, now=NOW + 1) is False
        assert tracker.current.remaining == 10

        assert tracker.update(5, 59, now=NOW + 1) is True
        assert tracker.current.remaining == 5

    def test_equal_remaining_ignored(self):
        """Test an equal count does not replace the stored value."""
        tracker = RateLimitTracker()

        tracker.update(10, 60, now=NOW)

        assert tracker.update(10, 30, now=NOW + 1) is False
        assert tracker.current.reset == NOW + 60

    def test_stale_value_replaced(self):
        """Test any observation replaces a value whose window has reset."""
        tracker = RateLimitTracker()

        tracker.update(2, 60, now=NOW)

        assert tracker.update(600, 600, now=NOW + 60) is True
        assert tracker.current.remaining == 600
        assert tracker.current.reset == NOW + 660

    def test_update_from_headers(self):
        """Test the float count Reddit sends is accepted."""
        tracker = RateLimitTracker()

        updated = tracker.update_from_headers(
            {"x-ratelimit-remaining": "598.0", "x-ratelimit-reset": "42"}, now=NOW
        )

        assert updated is True
        assert tracker.current.remaining == 598
        assert tracker.current.reset == NOW + 42

    def test_missing_headers_ignored(self):
        """Test responses without both headers leave the value alone."""
        tracker = RateLimitTracker()

        assert tracker.update_from_headers({}, now=NOW) is False
        assert tracker.update_from_headers({"x-ratelimit-remaining": "5"}, now=NOW) is False
        assert tracker.current is None

    def test_invalid_headers_logged(self):
        """Test unparseable headers are ignored with a warning."""
        tracker = RateLimitTracker()

        with patch("snoots.gateway.rate_limit.logger") as mock_logger:
            updated = tracker.update_from_headers(
                {"x-ratelimit-remaining": "lots", "x-ratelimit-reset": "60"}, now=NOW
            )

        assert updated is False
        assert tracker.current is None
        mock_logger.warning.assert_called_once()

    def test_get_remaining(self):
        """Test remaining is reported until the window resets."""
        tracker = RateLimitTracker()
        tracker.update(42, 60, now=NOW)

        assert tracker.get_remaining(now=NOW + 30) == 42
        assert tracker.get_remaining(now=NOW + 60) is None

    def test_get_stats(self):
        """Test statistics of a fresh and a stale value."""
        tracker = RateLimitTracker()

        assert tracker.get_stats(now=NOW) == {
            "remaining": None,
            "reset_in_seconds": None,
            "stale": True,
        }

        tracker.update(87, 60, now=NOW)
        assert tracker.get_stats(now=NOW + 17.9) == {
            "remaining": 87,
            "reset_in_seconds": 42.1,
            "stale": False,
        }
        assert tracker.get_stats(now=NOW + 61)["stale"] is True

    def test_reset(self):
        """Test reset forgets the stored value."""
        tracker = RateLimitTracker()
        tracker.update(1, 60, now=NOW)

        tracker.reset()

        assert tracker.current is None
        assert tracker.update(100, 60, now=NOW) is True

    def test_warning_when_low(self):
        """Test a warning is logged below the warn ratio."""
        tracker = RateLimitTracker(warn_ratio=0.1)

        with patch("snoots.gateway.rate_limit.logger") as mock_logger:
            tracker.update(100, 60, now=NOW)
            mock_logger.warning.assert_not_called()

            tracker.update(10, 50, now=NOW + 10)
            mock_logger.warning.assert_called_once()
            assert mock_logger.warning.call_args[0][0] == "rate_limit_approaching"
