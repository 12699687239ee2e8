"""Tests for the Redis connection holder and the Redis page cache."""

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from hiveblog.domain.common.deadline import Deadline
from hiveblog.domain.common.errors import CacheUnavailableError, ConfigurationError
from hiveblog.infra.cache.page_cache import RedisPageCache
from hiveblog.infra.cache.redis_pool import RedisConnectionHolder

from tests.unit.feed_fakes import FakeRedisClient


class _Factory:
    """Hands out prepared clients in order and remembers them."""

    def __init__(self, *clients):
        self.clients = list(clients)
        self.created = []

    def __call__(self):
        client = self.clients.pop(0)
        self.created.append(client)
        return client


def _holder(*clients, url="redis://cache.example:6379"):
    factory = _Factory(*clients)
    return RedisConnectionHolder(url=url, client_factory=factory), factory


class TestConnectionHolder:
    @pytest.mark.asyncio
    async def test_missing_url_is_a_configuration_error(self):
        holder, factory = _holder(FakeRedisClient(), url=None)

        with pytest.raises(ConfigurationError):
            await holder.ensure_connected()
        assert factory.created == []

    @pytest.mark.asyncio
    async def test_connects_lazily_and_reuses_live_client(self):
        client = FakeRedisClient()
        holder, factory = _holder(client)
        assert holder.client is None

        first = await holder.ensure_connected()
        second = await holder.ensure_connected()

        assert first is second is client
        assert len(factory.created) == 1
        assert client.pings == 2

    @pytest.mark.asyncio
    async def test_reconnects_after_connection_loss(self):
        stale, fresh = FakeRedisClient(), FakeRedisClient()
        holder, factory = _holder(stale, fresh)
        await holder.ensure_connected()

        stale.ping_error = RedisConnectionError("Connection reset by peer")
        client = await holder.ensure_connected()

        assert client is fresh
        assert stale.closed
        assert holder.client is fresh

    @pytest.mark.asyncio
    async def test_failed_connect_raises_cache_unavailable(self):
        broken = FakeRedisClient(ping_error=OSError("connection refused"))
        holder, _ = _holder(broken)

        with pytest.raises(CacheUnavailableError):
            await holder.ensure_connected()
        assert broken.closed
        assert holder.client is None

    @pytest.mark.asyncio
    async def test_reset_closes_client(self):
        client = FakeRedisClient()
        holder, _ = _holder(client)
        await holder.ensure_connected()

        await holder.reset()

        assert client.closed
        assert holder.client is None


class TestRedisPageCache:
    @pytest.mark.asyncio
    async def test_set_then_get_with_expiry(self):
        client = FakeRedisClient()
        holder, _ = _holder(client)
        cache = RedisPageCache(holder)
        deadline = Deadline(5.0)

        await cache.ensure_ready(deadline)
        await cache.set("user-posts:posts:alice:5:-:-", '{"posts":[]}', 300, deadline)

        assert await cache.get("user-posts:posts:alice:5:-:-", deadline) == '{"posts":[]}'
        assert client.expiry["user-posts:posts:alice:5:-:-"] == 300

    @pytest.mark.asyncio
    async def test_miss_returns_none(self):
        holder, _ = _holder(FakeRedisClient())
        cache = RedisPageCache(holder)
        deadline = Deadline(5.0)
        await cache.ensure_ready(deadline)

        assert await cache.get("absent", deadline) is None

    @pytest.mark.asyncio
    async def test_bytes_values_are_decoded(self):
        client = FakeRedisClient()
        client.store["k"] = '{"é":1}'.encode("utf-8")
        holder, _ = _holder(client)
        cache = RedisPageCache(holder)
        deadline = Deadline(5.0)
        await cache.ensure_ready(deadline)

        assert await cache.get("k", deadline) == '{"é":1}'

    @pytest.mark.asyncio
    async def test_operation_errors_become_cache_unavailable(self):
        client = FakeRedisClient()
        holder, _ = _holder(client)
        cache = RedisPageCache(holder)
        deadline = Deadline(5.0)
        await cache.ensure_ready(deadline)
        client.op_error = RedisConnectionError("gone")

        with pytest.raises(CacheUnavailableError):
            await cache.get("k", deadline)
        with pytest.raises(CacheUnavailableError):
            await cache.set("k", "v", 300, deadline)

    @pytest.mark.asyncio
    async def test_use_before_connect_is_cache_unavailable(self):
        holder, _ = _holder(FakeRedisClient())

        with pytest.raises(CacheUnavailableError):
            await RedisPageCache(holder).get("k", Deadline(5.0))

    @pytest.mark.asyncio
    async def test_ready_check_surfaces_configuration_error(self):
        holder, _ = _holder(FakeRedisClient(), url="")

        with pytest.raises(ConfigurationError):
            await RedisPageCache(holder).ensure_ready(Deadline(5.0))


class TestUndecodableValues:
    @pytest.mark.asyncio
    async def test_invalid_utf8_is_cache_unavailable(self):
        client = FakeRedisClient()
        client.store["k"] = b"\xff\xfe"
        holder, _ = _holder(client)
        cache = RedisPageCache(holder)
        deadline = Deadline(5.0)
        await cache.ensure_ready(deadline)

        with pytest.raises(CacheUnavailableError):
            await cache.get("k", deadline)
