"""
Custom exceptions for the snoots Reddit client.

Transport failures (DNS, connection, timeouts, non-2xx statuses) are raised
by httpx and are never wrapped. Everything in this module describes a
problem with what Reddit returned or with how the client was used.
"""

from typing import Optional


class RedditAPIError(Exception):
    """
    Base exception for all snoots errors.

    Use this for catching any error raised by the client itself.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        """
        Initialize RedditAPIError.

        Args:
            message: Error description
            status_code: Optional HTTP status code from Reddit API
        """
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class RedditResponseError(RedditAPIError):
    """
    Raised when Reddit reports an error in the response body.

    Reddit uses two envelopes for this, ``{"error": ..., "error_description":
    ...}`` on older endpoints and ``{"json": {"errors": [...]}}`` on newer
    ones. Both end up here. The error is not classified any further, so a
    rate-limit error and a validation error look the same apart from
    ``error``.

    Attributes:
        error: The error code or list Reddit returned
        description: Optional human readable description

    Example:
        >>> raise RedditResponseError("invalid_grant")
    """

    def __init__(self, error: object, description: Optional[str] = None) -> None:
        """
        Initialize RedditResponseError.

        Args:
            error: The error value Reddit returned
            description: Optional error description
        """
        self.error = error
        self.description = description

        message = f"Reddit returned an error: {error}"
        if description is not None:
            message += f": {description}"

        super().__init__(message)


class InvalidKindError(RedditAPIError):
    """
    Raised when a Reddit object has an unexpected ``kind``.

    This indicates that Reddit changed the shape of a response and is never
    retried.

    Example:
        >>> raise InvalidKindError("Listing", "t3")
    """

    def __init__(self, expected: str, got: Optional[str]) -> None:
        self.expected = expected
        self.got = got
        super().__init__(f"Expected '{expected}', got '{got}'")


class UnsupportedRepliesError(RedditAPIError):
    """Raised when a comment's ``replies`` is neither ``""`` nor a Listing."""

    def __init__(self, replies: object) -> None:
        self.replies = replies
        super().__init__(
            f"Unsupported comment replies of type {type(replies).__name__}"
        )


class ListingContextError(RedditAPIError):
    """
    Raised when a fetcher is used without the context it needs.

    This is a programming error in the calling layer: a Listing was built
    without a request to page through, or comment replies were fetched
    without knowing which post they belong to.
    """


class InvalidRedirectError(RedditAPIError):
    """Raised when a redirect does not point where it was expected to."""

    def __init__(self, location: str) -> None:
        self.location = location
        super().__init__(f"Invalid redirect URI '{location}'")


class ConfigurationError(RedditAPIError):
    """
    Raised when the client cannot be configured.

    Example:
        >>> raise ConfigurationError("REDDIT_USER_AGENT is required")
    """
