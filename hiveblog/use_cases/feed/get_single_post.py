"""GetSinglePostUseCase: fetch one post by author and permlink."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from hiveblog.domain.common.deadline import Deadline
from hiveblog.domain.common.errors import EntityNotFoundError, InvalidRequestError
from hiveblog.domain.feed.models import FeedItem
from hiveblog.domain.feed.ports import FeedSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GetSinglePostQuery:
    """Immutable value object describing the post lookup."""

    author: str
    permlink: str

    def __post_init__(self) -> None:
        author = (self.author or "").strip().lstrip("@").lower()
        permlink = (self.permlink or "").strip()
        if not author or not permlink:
            raise InvalidRequestError("Missing required parameters 'author' and 'permlink'")
        object.__setattr__(self, "author", author)
        object.__setattr__(self, "permlink", permlink)


class GetSinglePostUseCase:
    """Retrieve a single post, with its front-end URL."""

    def __init__(self, feed_source: FeedSource, blog_base_url: str | None = None) -> None:
        self._feed_source = feed_source
        self._blog_base_url = blog_base_url

    async def execute(self, query: GetSinglePostQuery, deadline: Deadline) -> FeedItem:
        raw = await self._feed_source.fetch_post(query.author, query.permlink, deadline)
        if raw is None:
            logger.warning(f"Post not found: @{query.author}/{query.permlink}")
            raise EntityNotFoundError("Post", f"@{query.author}/{query.permlink}")
        return FeedItem.from_raw(raw, self._blog_base_url)
