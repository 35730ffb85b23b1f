"""
Fetchers for comments Reddit held back.

Two kinds of "more" markers exist:
- "continue this thread" (``name == "t1__"``): a single, arbitrarily deep
  subthread, fetched by re-requesting the post filtered to one comment.
- "load more comments": a list of comment ids, fetched in batches through
  ``api/morechildren`` and nested back into a tree.
"""

from typing import TYPE_CHECKING, Any, List

from snoots.exceptions import ListingContextError
from snoots.listing.listing import Fetcher, context_logger
from snoots.listing.types import (
    ListingContext,
    RawObject,
    RedditListing,
    RedditMore,
    empty_reddit_listing,
)

from .tree import fix_comment_tree, is_listing_object

if TYPE_CHECKING:
    from .listing import CommentListing
    from .object import Comment

# api/morechildren loses items above ~75 ids, even though the docs say 100.
MORE_CHILDREN_BATCH_SIZE = 75
CONTINUE_THREAD_NAME = "t1__"


def _require_post(context: ListingContext) -> str:
    if not context.post:
        raise ListingContextError("Unable to fetch comments: no post in context")
    return context.post


def _comments_page(response: Any) -> RedditListing:
    # comments/<post> returns [post listing, comment listing].
    if not isinstance(response, list) or len(response) < 2:
        return empty_reddit_listing()
    listing = response[1]
    if not is_listing_object(listing):
        return empty_reddit_listing()
    return RedditListing.model_validate(listing.get("data") or {})


class MoreComments(Fetcher["Comment"]):
    """
    Fetch the comments behind a "more" marker.

    Attributes:
        data: The marker's data (ids, parent, depth)
    """

    def __init__(self, data: RedditMore) -> None:
        self.data = data

    async def fetch(self, context: ListingContext) -> "CommentListing":
        post = _require_post(context)
        if self.data.name == CONTINUE_THREAD_NAME:
            return await self.fetch_thread(post, context)
        return await self.fetch_batch(post, context)

    async def fetch_thread(self, post: str, context: ListingContext) -> "CommentListing":
        """Fetch the replies of the marker's parent comment."""
        from .listing import CommentListing

        comment_id = self.data.parent_id[3:]
        response = await context.client.gateway.get(
            f"comments/{post}", {"comment": comment_id}
        )

        page = _comments_page(response)
        if not page.children:
            return CommentListing.from_page(empty_reddit_listing(), context)

        replies = (page.children[0].get("data") or {}).get("replies")
        if not is_listing_object(replies):
            return CommentListing.from_page(empty_reddit_listing(), context)

        return CommentListing.from_page(
            RedditListing.model_validate(replies.get("data") or {}), context
        )

    async def fetch_batch(self, post: str, context: ListingContext) -> "CommentListing":
        """
        Fetch the next batch of ids and rebuild their tree.

        If ids remain, a new marker holding them is appended, which becomes
        the fetcher of the returned listing.
        """
        from .listing import CommentListing

        batch = self.data.children[:MORE_CHILDREN_BATCH_SIZE]
        rest = self.data.children[MORE_CHILDREN_BATCH_SIZE:]

        query = {"children": ",".join(batch), "link_id": f"t3_{post}"}
        response = await context.client.gateway.get("api/morechildren", query)

        things: List[RawObject] = (response or {}).get("things") or []
        children = fix_comment_tree(things)

        context_logger(context).debug(
            "more_comments_fetched",
            post=post,
            requested=len(batch),
            received=len(things),
            remaining=len(rest),
        )

        if rest:
            children.append(
                {
                    "kind": "more",
                    "data": {
                        "count": self.data.count - len(things),
                        "depth": self.data.depth,
                        "children": rest,
                        "id": rest[0],
                        "name": f"t1_{rest[0]}",
                        "parent_id": self.data.parent_id,
                    },
                }
            )

        return CommentListing.from_page(RedditListing(children=children), context)

    def __repr__(self) -> str:
        return (
            f"MoreComments(name={self.data.name!r}, "
            f"children={len(self.data.children)})"
        )


class PostComments(Fetcher["Comment"]):
    """Fetch the first page of a post's comments."""

    async def fetch(self, context: ListingContext) -> "CommentListing":
        from .listing import CommentListing

        post = _require_post(context)
        response = await context.client.gateway.get(f"comments/{post}")
        return CommentListing.from_page(_comments_page(response), context)

    def __repr__(self) -> str:
        return "PostComments()"
