"""Generic paginated Listings and the fetchers that extend them."""

from snoots.listing.listing import Fetcher, Listing, Pager
from snoots.listing.types import (
    ListingContext,
    ListingRequest,
    RedditListing,
    RedditMore,
    RedditObject,
    assert_kind,
    empty_reddit_listing,
    fake_listing_after,
    fake_more_listing,
)

__all__ = [
    "Fetcher",
    "Listing",
    "Pager",
    "ListingContext",
    "ListingRequest",
    "RedditListing",
    "RedditMore",
    "RedditObject",
    "assert_kind",
    "empty_reddit_listing",
    "fake_listing_after",
    "fake_more_listing",
]
