"""
Raw Reddit listing shapes and the context passed to every fetch.

Children stay plain dicts: the comment tree reconstruction rewires them in
place before they are turned into objects.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from snoots.exceptions import InvalidKindError
from snoots.gateway.types import Query

RawObject = Dict[str, Any]


class RedditObject(BaseModel):
    """A tagged Reddit object, ``{"kind": ..., "data": {...}}``."""

    model_config = ConfigDict(extra="ignore")

    kind: str
    data: Any = None


class RedditListing(BaseModel):
    """The ``data`` of a Listing object."""

    model_config = ConfigDict(extra="ignore")

    children: List[RawObject] = Field(default_factory=list)
    after: Optional[str] = None
    before: Optional[str] = None
    dist: Optional[int] = None
    modhash: Optional[str] = None


class RedditMore(BaseModel):
    """The ``data`` of a "load more comments" marker."""

    model_config = ConfigDict(extra="ignore")

    count: int = 0
    name: str
    id: str
    parent_id: str
    depth: int = 0
    children: List[str] = Field(default_factory=list)


class ListingRequest(BaseModel):
    """The request a Pager repeats to fetch the following pages."""

    model_config = ConfigDict(frozen=True)

    url: str
    query: Query = Field(default_factory=dict)


class ListingContext(BaseModel):
    """
    Everything a fetcher needs to get the next page.

    Attributes:
        client: The Client the listing belongs to
        post: ID of the post comments belong to, for comment listings
        request: The request to page through, for cursor listings
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    client: Any
    post: Optional[str] = None
    request: Optional[ListingRequest] = None


def assert_kind(kind: str, obj: Any) -> RedditObject:
    """
    Ensure a raw object is of the expected kind.

    Raises:
        InvalidKindError: If the object is not a tagged object of that kind
    """
    got = obj.get("kind") if isinstance(obj, dict) else None
    if got != kind:
        raise InvalidKindError(kind, got)
    return RedditObject.model_validate(obj)


def empty_reddit_listing() -> RedditListing:
    return RedditListing()


def fake_listing_after(after: str) -> RedditListing:
    """A listing with no items whose first fetch starts at ``after``."""
    return RedditListing(after=after)


def fake_more_listing(name: str) -> RedditListing:
    """
    A listing holding only a "continue this thread" marker for ``name``.

    Comments whose replies were not sent have ``replies == ""``; the marker
    makes their replies fetchable through the same path as any other page.
    """
    more = {
        "count": 0,
        "name": f"{name[:2]}__",
        "id": "_",
        "parent_id": name,
        "depth": 0,
        "children": [],
    }
    return RedditListing(children=[{"kind": "more", "data": more}])
