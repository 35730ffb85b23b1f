"""Listings of comments."""

from typing import Any, Optional

from snoots.exceptions import InvalidKindError
from snoots.listing.listing import Fetcher, Listing, Pager, context_logger
from snoots.listing.types import ListingContext, RedditListing, RedditMore

from .more import MoreComments, PostComments
from .object import Comment


class CommentListing(Listing[Comment]):
    """
    A Listing of comments.

    Besides ``after`` pagination, comment listings end in a "more" marker
    when Reddit held back some of the replies. That marker becomes the
    listing's fetcher, so iterating loads the held back comments as the next
    page.
    """

    @classmethod
    def from_page(
        cls,
        page: RedditListing,
        context: ListingContext,
        from_raw: Any = None,
    ) -> "CommentListing":
        fetcher: Optional[Fetcher[Comment]] = None
        comments = []

        for child in page.children:
            kind = child.get("kind")
            if kind == "t1":
                comments.append(Comment.from_raw(child, context.client))
            elif kind == "more":
                fetcher = MoreComments(RedditMore.model_validate(child.get("data") or {}))
            else:
                context_logger(context).debug("comment_listing_invalid_child", kind=kind)
                raise InvalidKindError("t1 or more", kind)

        # A Pager needs a request to repeat.
        if fetcher is None and page.after is not None and context.request is not None:
            fetcher = Pager(page.after, cls.from_page)

        return cls(context, comments, fetcher)

    @classmethod
    def for_post(cls, post_id: str, client: Any) -> "CommentListing":
        """A listing of a post's comments; the first page is fetched lazily."""
        context = ListingContext(client=client, post=post_id)
        return cls(context, [], PostComments())
