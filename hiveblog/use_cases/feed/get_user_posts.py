"""GetUserPostsUseCase: one page of a user's original posts or reblogs.

Business rules:
  1. Health-check the cache connection (reconnecting if it dropped)
  2. Look the page up by a key derived from every request field
  3. HIT  → return the stored body verbatim
  4. MISS → fetch one raw batch, classify, translate the cursor, assemble
  5. Store the body with a TTL that depends on the age of its items
  6. Cache failures degrade to a miss or a skipped write, never an error

The use case depends ONLY on domain ports, never on Redis, httpx or
FastAPI.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from hiveblog.domain.common.deadline import Deadline
from hiveblog.domain.common.errors import CacheUnavailableError
from hiveblog.domain.feed.cache_policy import CacheTtlPolicy, cache_key
from hiveblog.domain.feed.models import PageRequest
from hiveblog.domain.feed.pagination import MAX_RAW_PAGE_SIZE, build_page
from hiveblog.domain.feed.ports import FeedSource, PageCache

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# ── Result (output) ─────────────────────────────────────────────────────


@dataclass(frozen=True)
class GetUserPostsResult:
    """Serialized client payload and where it came from."""

    body: str
    cache_hit: bool
    ttl_seconds: int | None = None

    @property
    def payload(self) -> dict[str, Any]:
        return json.loads(self.body)


# ── Use Case ────────────────────────────────────────────────────────────


class GetUserPostsUseCase:
    """Serve a filtered page over the raw, cursor-paginated blog feed."""

    def __init__(
        self,
        feed_source: FeedSource,
        page_cache: PageCache,
        *,
        ttl_policy: CacheTtlPolicy | None = None,
        raw_page_size: int = MAX_RAW_PAGE_SIZE,
        key_prefix: str = "user-posts",
        blog_base_url: str | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._feed_source = feed_source
        self._page_cache = page_cache
        self._ttl_policy = ttl_policy or CacheTtlPolicy()
        self._raw_page_size = min(raw_page_size, MAX_RAW_PAGE_SIZE)
        self._key_prefix = key_prefix
        self._blog_base_url = blog_base_url
        self._clock = clock

    async def execute(self, request: PageRequest, deadline: Deadline) -> GetUserPostsResult:
        key = cache_key(request, prefix=self._key_prefix)

        cache_ready = await self._prepare_cache(deadline)
        if cache_ready:
            cached = await self._read(key, deadline)
            if cached is not None:
                logger.info(f"Cache HIT for {key}")
                return GetUserPostsResult(body=cached, cache_hit=True)

        logger.info(f"Cache MISS for {key} - fetching from Hive")
        raw_page = await self._feed_source.fetch_raw_page(
            request.username,
            request.cursor,
            self._raw_page_size,
            deadline,
        )
        page = build_page(
            raw_page,
            request,
            self._raw_page_size,
            blog_base_url=self._blog_base_url,
        )
        body = json.dumps(page.to_payload(), ensure_ascii=False, separators=(",", ":"))
        ttl = self._ttl_policy.ttl_for(page.items, self._clock())

        if cache_ready:
            await self._write(key, body, ttl, deadline)

        logger.info(
            f"Served {len(page.items)} {request.content_type.value} for @{request.username} "
            f"from {len(raw_page.items)} raw entries (hasMore={page.has_more}, ttl={ttl}s)"
        )
        return GetUserPostsResult(body=body, cache_hit=False, ttl_seconds=ttl)

    async def _prepare_cache(self, deadline: Deadline) -> bool:
        try:
            await self._page_cache.ensure_ready(deadline)
            return True
        except CacheUnavailableError as e:
            logger.warning(f"Cache unavailable, serving directly from Hive: {e}")
            return False

    async def _read(self, key: str, deadline: Deadline) -> str | None:
        try:
            cached = await self._page_cache.get(key, deadline)
        except CacheUnavailableError as e:
            logger.warning(f"Cache read failed, treating as miss: {e}")
            return None
        if cached is None:
            return None
        try:
            json.loads(cached)
        except ValueError:
            logger.warning(f"Cached value for {key} is not JSON, treating as miss")
            return None
        return cached

    async def _write(self, key: str, body: str, ttl: int, deadline: Deadline) -> None:
        try:
            await self._page_cache.set(key, body, ttl, deadline)
        except CacheUnavailableError as e:
            logger.warning(f"Cache write failed, response not cached: {e}")
