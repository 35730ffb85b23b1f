"""Comments, comment listings and comment tree reconstruction."""

from snoots.comment.listing import CommentListing
from snoots.comment.more import MORE_CHILDREN_BATCH_SIZE, MoreComments, PostComments
from snoots.comment.object import Comment
from snoots.comment.tree import fix_comment_tree

__all__ = [
    "Comment",
    "CommentListing",
    "MORE_CHILDREN_BATCH_SIZE",
    "MoreComments",
    "PostComments",
    "fix_comment_tree",
]
