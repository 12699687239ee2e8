"""Ports (abstract interfaces) for the feed domain.

These define WHAT the use cases need from the outside world without
specifying HOW it's provided.  Concrete implementations live in
``hiveblog.infra``.
"""

from __future__ import annotations

import abc

from ..common.deadline import Deadline
from .models import Cursor, RawItem, RawPage


class FeedSource(abc.ABC):
    """Read blog entries from the chain."""

    @abc.abstractmethod
    async def fetch_raw_page(
        self,
        username: str,
        cursor: Cursor | None,
        raw_page_size: int,
        deadline: Deadline,
    ) -> RawPage:
        """Fetch one unfiltered batch starting at *cursor* (inclusive).

        Raises:
            UpstreamUnavailableError: No endpoint produced a usable answer.
            UpstreamError: An endpoint answered with a JSON-RPC error.
            DeadlineExceededError: The request budget ran out.
        """
        ...

    @abc.abstractmethod
    async def fetch_post(self, author: str, permlink: str, deadline: Deadline) -> RawItem | None:
        """Return a single post, or None when the chain has no such post."""
        ...


class PageCache(abc.ABC):
    """Key-value store holding serialized page responses.

    Every method raises ``CacheUnavailableError`` on failure (timeouts
    included); callers treat that as a miss or a skipped write.
    ``ConfigurationError`` signals a missing store configuration.
    """

    @abc.abstractmethod
    async def ensure_ready(self, deadline: Deadline) -> None:
        """Health-check the connection, reconnecting when it has dropped."""
        ...

    @abc.abstractmethod
    async def get(self, key: str, deadline: Deadline) -> str | None:
        ...

    @abc.abstractmethod
    async def set(self, key: str, value: str, ttl_seconds: int, deadline: Deadline) -> None:
        ...
