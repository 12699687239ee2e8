"""
Shared Redis connection for the page cache.

Holds one lazily created ``redis.asyncio`` client per process.  When the
host keeps the process warm the client is reused across requests; every
request starts with ``ensure_connected()``, which pings the client and
rebuilds it when the connection has gone away.

Nothing connects at import time: configuration is read the first time a
request needs the cache.
"""
import logging
from typing import Callable, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from ...config import settings
from ...domain.common.errors import CacheUnavailableError, ConfigurationError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[], redis.Redis]


class RedisConnectionHolder:
    """Lazy, self-healing holder for a single async Redis client."""

    def __init__(
        self,
        url: Optional[str],
        token: Optional[str] = None,
        socket_timeout: float = 2.0,
        client_factory: Optional[ClientFactory] = None,
    ):
        self._url = url
        self._token = token
        self._socket_timeout = socket_timeout
        self._client_factory = client_factory or self._default_factory
        self._client: Optional[redis.Redis] = None

    def _default_factory(self) -> redis.Redis:
        return redis.Redis.from_url(
            self._url,
            password=self._token or None,
            socket_timeout=self._socket_timeout,
            socket_connect_timeout=self._socket_timeout,
            decode_responses=True,
        )

    @property
    def client(self) -> Optional[redis.Redis]:
        """The current client, or None before the first successful connect."""
        return self._client

    async def ensure_connected(self) -> redis.Redis:
        """
        Return a live client, reconnecting if the held one stopped answering.

        Raises:
            ConfigurationError: No cache URL is configured
            CacheUnavailableError: A fresh connection could not be established
        """
        if not self._url:
            raise ConfigurationError("Cache store is not configured: set REDIS_URL")

        if self._client is not None:
            try:
                await self._client.ping()
                return self._client
            except (RedisError, OSError) as e:
                logger.warning(f"Redis connection lost, reconnecting: {e}")
                await self._discard()

        client = self._client_factory()
        try:
            await client.ping()
        except (RedisError, OSError) as e:
            await self._close_quietly(client)
            raise CacheUnavailableError(f"Cannot connect to Redis: {e}") from e

        self._client = client
        logger.info("Redis connection initialized")
        return client

    async def reset(self) -> None:
        """Close the held client; the next request reconnects."""
        await self._discard()

    async def _discard(self) -> None:
        client, self._client = self._client, None
        if client is not None:
            await self._close_quietly(client)

    @staticmethod
    async def _close_quietly(client: redis.Redis) -> None:
        try:
            await client.aclose()
        except (RedisError, OSError) as e:
            logger.warning(f"Error closing Redis client: {e}")


# Module-level holder instance (singleton)
_holder: Optional[RedisConnectionHolder] = None


def get_connection_holder() -> RedisConnectionHolder:
    """Get the process-wide connection holder, creating it on first use."""
    global _holder

    if _holder is None:
        _holder = RedisConnectionHolder(
            url=settings.redis_url,
            token=settings.redis_token,
            socket_timeout=settings.redis_socket_timeout,
        )
    return _holder


async def reset_connection_holder() -> None:
    """Close and forget the singleton (shutdown and tests)."""
    global _holder

    if _holder is not None:
        try:
            await _holder.reset()
            logger.info("Redis connection closed")
        finally:
            _holder = None
