"""
Lazily fetched, cursor paginated Listings.

A Listing holds one page of items plus a Fetcher that knows how to get the
next page. Pages are fetched on demand while iterating, each page at most
once.

Example:
    >>> posts = client.get_listing("r/python/new", post_from_raw)
    >>> async for post in posts:
    ...     print(post["title"])
"""

import asyncio
import functools
import inspect
from abc import ABC, abstractmethod
from typing import (
    Any,
    AsyncIterator,
    Awaitable,
    Callable,
    Generic,
    List,
    Optional,
    TypeVar,
    Union,
)

from snoots.exceptions import ListingContextError
from snoots.utils.logger import get_logger

from .types import ListingContext, RawObject, RedditListing, assert_kind

T = TypeVar("T")

FromRaw = Callable[[RawObject], T]
ListingFactory = Callable[[RedditListing, ListingContext], "Listing[T]"]
Handler = Callable[[Any], Union[Any, Awaitable[Any]]]

PAGE_LIMIT = "100"

logger = get_logger(__name__)


def context_logger(context: ListingContext) -> Any:
    """The logger of the client a listing belongs to."""
    return getattr(context.client, "logger", None) or logger


class Fetcher(ABC, Generic[T]):
    """
    How to get the next page of a Listing.

    A fetcher holds only what it was constructed with (a cursor, a list of
    ids). The Listing that owns it calls it again only after a failed or
    cancelled fetch.
    """

    @abstractmethod
    async def fetch(self, context: ListingContext) -> "Listing[T]":
        """Fetch the next page."""


class Pager(Fetcher[T]):
    """
    Cursor based pagination using Reddit's ``after`` parameter.

    Repeats ``context.request`` with ``after`` set and hands the page to
    ``factory``, which builds the next Listing (and with it the next Pager).
    """

    def __init__(self, after: str, factory: ListingFactory) -> None:
        self.after = after
        self.factory = factory

    async def fetch(self, context: ListingContext) -> "Listing[T]":
        page = await self.next_page(context)
        return self.factory(page, context)

    async def next_page(self, context: ListingContext) -> RedditListing:
        """
        Fetch the raw page following ``after``.

        Raises:
            ListingContextError: If the listing was built without a request
            InvalidKindError: If Reddit did not return a Listing
        """
        if context.request is None:
            raise ListingContextError("Unable to fetch next page: no request in context")

        query = {"limit": PAGE_LIMIT, "after": self.after, **context.request.query}
        raw = await context.client.gateway.get(context.request.url, query)
        listing = assert_kind("Listing", raw)
        return RedditListing.model_validate(listing.data or {})

    def __repr__(self) -> str:
        return f"{type(self).__name__}(after={self.after!r})"


class Listing(Generic[T]):
    """
    A Listing of items.

    Since Reddit's responses are paged, Listings are async iterables and
    have no known length. Iterating fetches pages as they are needed;
    ``for_each``, ``some`` and ``each_page`` stop early when their handler
    returns ``False`` (or ``True`` for ``some``).

    A Listing fetches its successor at most once, no matter how many
    iterations or ``empty()`` calls ask for it concurrently. A caller that is
    cancelled while waiting leaves the fetch running for the others.
    Iteration is not restartable from a later page: a new ``async for`` over
    the same Listing starts again at this page and reuses the memoized
    successors.

    Attributes:
        context: What the fetchers need to get further pages
        items: The items of this page
        fetcher: How to get the next page, or None if this is the last one
    """

    def __init__(
        self,
        context: ListingContext,
        items: List[T],
        fetcher: Optional[Fetcher[T]] = None,
    ) -> None:
        self.context = context
        self.items = list(items)
        self.fetcher = fetcher
        self._next: Optional["asyncio.Future[Listing[T]]"] = None

    @classmethod
    def from_page(
        cls,
        page: RedditListing,
        context: ListingContext,
        from_raw: FromRaw,
    ) -> "Listing[T]":
        """
        Build a Listing from a raw page.

        Args:
            page: The raw listing data
            context: The listing context
            from_raw: Converts one raw child into an item

        Returns:
            A Listing with a Pager if the page has an ``after`` cursor
        """
        items = [from_raw(child) for child in page.children]

        fetcher: Optional[Fetcher[T]] = None
        if page.after is not None:
            factory = functools.partial(cls.from_page, from_raw=from_raw)
            fetcher = Pager(page.after, factory)

        return cls(context, items, fetcher)

    async def empty(self) -> bool:
        """
        Whether or not this listing is empty.

        May fetch the next page once, if this page has no items.
        """
        if self.items:
            return False

        if self.fetcher is None:
            return True

        successor = await self._fetch_next()
        return not successor.items

    def can_fetch_more(self) -> bool:
        """
        Whether or not this listing can perform a fetch to get more data.

        ``True`` does not mean there are more items, only that there might be.
        """
        return self.fetcher is not None

    async def each_page(self, handler: Handler) -> None:
        """
        Execute a function on each page of the listing.

        Args:
            handler: Called with the list of items of each page. If it
                returns (or resolves to) ``False`` iteration stops.
        """
        page: Optional[Listing[T]] = self
        while page is not None:
            if await _call(handler, list(page.items)) is False:
                return
            page = await page._next_page()

    async def for_each(self, handler: Handler) -> None:
        """
        Execute a function on each item of the listing.

        Args:
            handler: Called with each item; sync or async. If it returns (or
                resolves to) ``False`` iteration stops.
        """
        async for item in self:
            if await _call(handler, item) is False:
                break

    async def some(self, handler: Handler) -> bool:
        """
        Whether ``handler`` returns true for any item of the listing.

        Stops fetching at the first match.
        """
        async for item in self:
            if await _call(handler, item):
                return True
        return False

    async def first(self) -> Optional[T]:
        """Get the first item of this listing, or None if it is empty."""
        async for item in self:
            return item
        return None

    async def __aiter__(self) -> AsyncIterator[T]:
        page: Optional[Listing[T]] = self
        while page is not None:
            for item in page.items:
                yield item
            page = await page._next_page()

    async def _next_page(self) -> Optional["Listing[T]"]:
        # A successor without items ends the iteration, even if it could
        # fetch further.
        if self.fetcher is None:
            return None
        successor = await self._fetch_next()
        return successor if successor.items else None

    async def _fetch_next(self) -> "Listing[T]":
        if self._next is None:
            context_logger(self.context).debug(
                "listing_fetch_next", fetcher=repr(self.fetcher)
            )
            self._next = asyncio.ensure_future(self.fetcher.fetch(self.context))
            self._next.add_done_callback(self._forget_failed_fetch)

        # Cancelling one caller must not cancel the fetch the others await.
        return await asyncio.shield(self._next)

    def _forget_failed_fetch(self, task: "asyncio.Future[Listing[T]]") -> None:
        # Failed or cancelled fetches are forgotten so a later call retries.
        if self._next is task and (task.cancelled() or task.exception() is not None):
            self._next = None

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(items={len(self.items)}, "
            f"fetcher={self.fetcher!r})"
        )


async def _call(handler: Handler, arg: Any) -> Any:
    result = handler(arg)
    if inspect.isawaitable(result):
        result = await result
    return result
