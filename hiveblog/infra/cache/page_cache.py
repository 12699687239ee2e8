"""
Redis implementation of the PageCache port.

Values are the JSON response bodies exactly as sent to the client, stored
with ``SET key value EX ttl``.  Every failure (Redis errors, socket
errors, the request deadline running out) surfaces as
``CacheUnavailableError``.
"""
import logging
from typing import Optional

from redis.exceptions import RedisError

from ...domain.common.deadline import Deadline
from ...domain.common.errors import CacheUnavailableError, DeadlineExceededError
from ...domain.feed.ports import PageCache
from .redis_pool import RedisConnectionHolder

logger = logging.getLogger(__name__)


class RedisPageCache(PageCache):
    """Page cache backed by the shared Redis connection."""

    def __init__(self, holder: RedisConnectionHolder):
        self._holder = holder

    async def ensure_ready(self, deadline: Deadline) -> None:
        try:
            await deadline.run(self._holder.ensure_connected())
        except DeadlineExceededError as e:
            raise CacheUnavailableError("Timed out connecting to Redis") from e

    def _client(self):
        client = self._holder.client
        if client is None:
            raise CacheUnavailableError("Redis connection is not established")
        return client

    async def get(self, key: str, deadline: Deadline) -> Optional[str]:
        client = self._client()
        try:
            value = await deadline.run(client.get(key))
            if isinstance(value, bytes):
                value = value.decode("utf-8")
        except (RedisError, OSError, UnicodeDecodeError, DeadlineExceededError) as e:
            raise CacheUnavailableError(f"Redis GET {key} failed: {e}") from e
        return value

    async def set(self, key: str, value: str, ttl_seconds: int, deadline: Deadline) -> None:
        client = self._client()
        try:
            await deadline.run(client.set(key, value, ex=ttl_seconds))
        except (RedisError, OSError, DeadlineExceededError) as e:
            raise CacheUnavailableError(f"Redis SET {key} failed: {e}") from e
        logger.debug(f"Cached {key} for {ttl_seconds}s")
