"""
The Comment object.

Only the parts of a comment the listing engine relies on are typed here;
everything else Reddit sends is kept in ``data``.
"""

from typing import TYPE_CHECKING, Any, Dict, Optional

from snoots.exceptions import UnsupportedRepliesError
from snoots.listing.types import (
    ListingContext,
    RawObject,
    RedditListing,
    assert_kind,
    fake_more_listing,
)

from .tree import is_listing_object

if TYPE_CHECKING:
    from .listing import CommentListing


class Comment:
    """
    A Reddit comment.

    Attributes:
        id: The comment ID, without prefix
        name: The full name, e.g. "t1_abc123"
        parent_id: Full name of the parent post or comment
        post_id: ID of the post the comment belongs to
        replies: A CommentListing of the replies to this comment
        data: The raw comment data
    """

    def __init__(self, data: Dict[str, Any], replies: "CommentListing") -> None:
        self.data = data
        self.id: str = data.get("id", "")
        self.name: str = data.get("name", "")
        self.parent_id: str = data.get("parent_id", "")
        self.post_id: str = (data.get("link_id") or "")[3:]
        self.author: Optional[str] = data.get("author")
        self.body: Optional[str] = data.get("body")
        self.score: Optional[int] = data.get("score")
        self.depth: Optional[int] = data.get("depth")
        self.replies = replies

    @classmethod
    def from_raw(cls, raw: RawObject, client: Any) -> "Comment":
        """
        Build a Comment from a raw ``t1`` object.

        Raises:
            InvalidKindError: If the object is not a comment
            UnsupportedRepliesError: If ``replies`` has an unexpected shape
        """
        obj = assert_kind("t1", raw)
        data = dict(obj.data or {})
        post_id = (data.get("link_id") or "")[3:]
        replies = convert_replies_to_listing(
            data.get("replies", ""), data.get("name", ""), post_id, client
        )
        return cls(data, replies)

    def __repr__(self) -> str:
        return f"Comment(name={self.name!r}, parent_id={self.parent_id!r})"


def convert_replies_to_listing(
    replies: Any, comment_name: str, post_id: str, client: Any
) -> "CommentListing":
    """
    Turn the raw ``replies`` of a comment into a CommentListing.

    Comments whose replies were not sent have ``replies == ""``; those get a
    "continue this thread" marker so the replies can be fetched on demand.
    """
    from .listing import CommentListing

    context = ListingContext(client=client, post=post_id)
    if replies == "":
        return CommentListing.from_page(fake_more_listing(comment_name), context)
    if is_listing_object(replies):
        page = RedditListing.model_validate(replies.get("data") or {})
        return CommentListing.from_page(page, context)

    raise UnsupportedRepliesError(replies)
