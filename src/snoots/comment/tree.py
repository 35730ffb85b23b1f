"""
Comment tree reconstruction.

``api/morechildren`` returns the requested comments as one flat list, with
deeper replies following their parents. The tree is rebuilt from the
``parent_id`` of every item.
"""

from typing import Any, Dict, List

from snoots.exceptions import RedditAPIError, UnsupportedRepliesError
from snoots.listing.types import RawObject


def is_listing_object(value: Any) -> bool:
    return isinstance(value, dict) and value.get("kind") == "Listing"


def empty_listing_object() -> RawObject:
    return {"kind": "Listing", "data": {"children": []}}


def fix_comment_tree(objects: List[RawObject]) -> List[RawObject]:
    """
    Nest a flat batch of comments into a tree.

    Every comment (``t1``) gets an empty Listing as ``replies``, then each
    item is appended to the replies of its parent if the parent is part of
    the same batch. This relies on Reddit sending parents before their
    children. Comments whose parent is not in the batch are the roots of the
    returned tree; "more" markers without a parent in the batch are dropped.

    Args:
        objects: The raw ``things`` of the batch; modified in place

    Returns:
        The root comments of the batch

    Raises:
        UnsupportedRepliesError: If a comment's replies are neither ``""``
            nor a Listing
        RedditAPIError: If an item has no name
    """
    by_name: Dict[str, RawObject] = {}
    for item in objects:
        data = item.get("data") or {}
        name = data.get("name")
        if not name:
            raise RedditAPIError(f"Comment tree item without a name: {item.get('kind')}")
        by_name[name] = item

        if item.get("kind") == "t1":
            replies = data.get("replies", "")
            if replies != "" and not is_listing_object(replies):
                raise UnsupportedRepliesError(replies)
            data["replies"] = empty_listing_object()

    tree: List[RawObject] = []
    for item in objects:
        parent = by_name.get(item["data"].get("parent_id"))
        if parent is not None and parent.get("kind") == "t1":
            parent["data"]["replies"]["data"]["children"].append(item)
        elif item.get("kind") == "t1":
            tree.append(item)

    return tree
