"""
snoots: an asyncio client core for the Reddit API.

Example:
    >>> from snoots import Client, ClientOptions
    >>> client = Client(ClientOptions(user_agent="linux:demo:v1 (by /u/me)"))
    >>> post_id = await client.get_random_post_id("python")
"""

from snoots.client import Client
from snoots.comment import Comment, CommentListing
from snoots.config import ClientOptions
from snoots.exceptions import (
    ConfigurationError,
    InvalidKindError,
    InvalidRedirectError,
    ListingContextError,
    RedditAPIError,
    RedditResponseError,
    UnsupportedRepliesError,
)
from snoots.gateway import (
    ClientAuth,
    Credentials,
    Gateway,
    RateLimit,
    TokenAuth,
    UsernameAuth,
)
from snoots.listing import Fetcher, Listing, Pager

__version__ = "1.0.0"

__all__ = [
    "Client",
    "ClientOptions",
    "Comment",
    "CommentListing",
    "ConfigurationError",
    "InvalidKindError",
    "InvalidRedirectError",
    "ListingContextError",
    "RedditAPIError",
    "RedditResponseError",
    "UnsupportedRepliesError",
    "ClientAuth",
    "Credentials",
    "Gateway",
    "RateLimit",
    "TokenAuth",
    "UsernameAuth",
    "Fetcher",
    "Listing",
    "Pager",
]
