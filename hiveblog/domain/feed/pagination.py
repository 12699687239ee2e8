"""Cursor translation and page assembly.

The upstream feed only paginates over raw entries, so the next cursor is
always the last *raw* entry of a full batch.  Deriving it from the
filtered result would stall a client whenever a whole raw batch filters
down to nothing: the server would keep answering ``hasMore`` with the
same cursor.
"""

from __future__ import annotations

from typing import Sequence

from .classifier import classify
from .models import Cursor, FeedItem, PageRequest, PageResponse, RawItem, RawPage

# condenser_api.get_discussions_by_blog rejects limits above this.
MAX_RAW_PAGE_SIZE = 20


def next_cursor(
    raw_items: Sequence[RawItem],
    raw_page_size: int = MAX_RAW_PAGE_SIZE,
    *,
    full_batch: bool | None = None,
) -> Cursor | None:
    """Cursor for the next raw batch, or None once the feed is exhausted.

    *full_batch* overrides the length check when the source already knows
    whether upstream returned a full batch (entries may have been dropped
    in transit).  The cursor is the last raw entry that carries both an
    author and a permlink.
    """
    if full_batch is None:
        full_batch = len(raw_items) >= raw_page_size
    if not full_batch:
        return None
    for raw in reversed(raw_items):
        if raw.get("author") and raw.get("permlink"):
            return Cursor.of(raw)
    return None


def assemble(
    classified_items: Sequence[FeedItem],
    limit: int,
    next_cursor: Cursor | None,
    has_more: bool,
) -> PageResponse:
    """Slice to *limit* and attach pagination metadata."""
    if not has_more:
        next_cursor = None
    elif next_cursor is None:
        has_more = False
    return PageResponse(
        items=tuple(classified_items[:limit]),
        next_cursor=next_cursor,
        has_more=has_more,
    )


def build_page(
    raw_page: RawPage,
    request: PageRequest,
    raw_page_size: int = MAX_RAW_PAGE_SIZE,
    *,
    blog_base_url: str | None = None,
) -> PageResponse:
    """Classify → translate → assemble one raw batch for *request*."""
    items = classify(
        raw_page.items,
        request.content_type,
        request.username,
        request.cursor,
        blog_base_url=blog_base_url,
    )
    cursor = next_cursor(raw_page.items, raw_page_size, full_batch=raw_page.upstream_has_more)
    if cursor is not None and cursor == request.cursor:
        # Only the echoed cursor had an identity; re-requesting it would loop.
        cursor = None
    has_more = raw_page.upstream_has_more and cursor is not None
    return assemble(items, request.limit, cursor, has_more)
