"""Partition a raw blog batch into original posts and reblogs.

condenser_api.get_discussions_by_blog mixes both kinds of entry in one
feed.  An entry is an original post when the blog owner wrote it and
nobody is listed as having reblogged it; it is a reblog when the owner is
listed in ``reblogged_by`` and someone else wrote it.  Self-authored
entries that carry a reblog marker are contradictory upstream data and
belong to neither list.
"""

from __future__ import annotations

import logging
from typing import Sequence

from .models import ContentType, Cursor, FeedItem, RawItem, reblog_marker

logger = logging.getLogger(__name__)


def drop_cursor_echo(raw_items: Sequence[RawItem], cursor: Cursor | None) -> list[RawItem]:
    """Remove the leading entry when it is the cursor itself.

    The upstream call is inclusive of ``start_author/start_permlink``; the
    page contract is exclusive-after-cursor.
    """
    items = list(raw_items)
    if cursor is not None and items and cursor.matches(items[0]):
        return items[1:]
    return items


def is_original_post(raw: RawItem, username: str) -> bool:
    return raw.get("author") == username and not reblog_marker(raw)


def is_reblog(raw: RawItem, username: str) -> bool:
    if raw.get("author") == username:
        return False
    return username in reblog_marker(raw)


_PREDICATES = {
    ContentType.POSTS: is_original_post,
    ContentType.REBLOGS: is_reblog,
}


def classify(
    raw_items: Sequence[RawItem],
    content_type: ContentType,
    username: str,
    cursor: Cursor | None = None,
    *,
    blog_base_url: str | None = None,
) -> list[FeedItem]:
    """Return the entries of *content_type*, preserving upstream order."""
    predicate = _PREDICATES[content_type]
    selected: list[FeedItem] = []
    for raw in drop_cursor_echo(raw_items, cursor):
        if not raw.get("author") or not raw.get("permlink"):
            logger.debug("Skipping malformed feed entry without author/permlink")
            continue
        if predicate(raw, username):
            selected.append(FeedItem.from_raw(raw, blog_base_url))
    return selected
