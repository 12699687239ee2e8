"""Unit tests for GetUserPostsUseCase.

Pure in-memory tests, no Redis or HTTP.
"""

import pytest

from hiveblog.domain.common.errors import (
    ConfigurationError,
    DeadlineExceededError,
    UpstreamError,
    UpstreamUnavailableError,
)
from hiveblog.domain.feed.cache_policy import CacheTtlPolicy, cache_key
from hiveblog.domain.feed.models import ContentType, Cursor, PageRequest
from hiveblog.infra.cache.page_cache import RedisPageCache
from hiveblog.infra.cache.redis_pool import RedisConnectionHolder
from hiveblog.use_cases.feed.get_user_posts import GetUserPostsUseCase

from tests.unit.feed_fakes import (
    NOW,
    OLD,
    RECENT,
    FakeFeedSource,
    FakePageCache,
    FakeRedisClient,
    deadline,
    make_feed,
)

LONG_TTL = 2592000
SHORT_TTL = 300


def _make_use_case(feed_source, page_cache=None):
    return GetUserPostsUseCase(
        feed_source,
        page_cache if page_cache is not None else FakePageCache(),
        ttl_policy=CacheTtlPolicy(long_ttl_seconds=LONG_TTL, short_ttl_seconds=SHORT_TTL),
        blog_base_url="https://blog.example",
        clock=lambda: NOW,
    )


def _request(**overrides) -> PageRequest:
    defaults = dict(username="alice", content_type=ContentType.POSTS, limit=5, cursor=None)
    defaults.update(overrides)
    return PageRequest(**defaults)


class TestCacheMissAndHit:
    @pytest.mark.asyncio
    async def test_miss_fetches_and_stores(self):
        source = FakeFeedSource(make_feed("alice", "P" * 20))
        cache = FakePageCache()
        uc = _make_use_case(source, cache)

        result = await uc.execute(_request(), deadline())

        assert result.cache_hit is False
        assert len(result.payload["posts"]) == 5
        assert cache.store[cache_key(_request())] == result.body
        assert len(source.calls) == 1

    @pytest.mark.asyncio
    async def test_hit_returns_stored_body_without_upstream_call(self):
        source = FakeFeedSource(make_feed("alice", "P" * 20))
        cache = FakePageCache()
        uc = _make_use_case(source, cache)

        first = await uc.execute(_request(), deadline())
        second = await uc.execute(_request(), deadline())

        assert second.cache_hit is True
        assert second.body == first.body
        assert len(source.calls) == 1

    @pytest.mark.asyncio
    async def test_cached_body_is_returned_verbatim(self):
        cache = FakePageCache()
        cache.store[cache_key(_request())] = '{"posts":[],"nextStartAuthor":null,"nextStartPermlink":null,"hasMore":false}'
        source = FakeFeedSource(make_feed("alice", "P" * 20))

        result = await _make_use_case(source, cache).execute(_request(), deadline())

        assert result.body == cache.store[cache_key(_request())]
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_payload_shape(self):
        source = FakeFeedSource(make_feed("alice", "P" * 20))

        payload = (await _make_use_case(source).execute(_request(), deadline())).payload

        assert set(payload) == {"posts", "nextStartAuthor", "nextStartPermlink", "hasMore"}
        assert payload["hasMore"] is True
        assert payload["nextStartAuthor"] == "alice"
        assert payload["nextStartPermlink"] == "post-19"
        assert payload["posts"][0]["url"] == "https://blog.example/@alice/post-0"


class TestTtl:
    @pytest.mark.asyncio
    async def test_old_content_is_cached_long(self):
        cache = FakePageCache()
        source = FakeFeedSource(make_feed("alice", "P" * 20, created=OLD))

        result = await _make_use_case(source, cache).execute(_request(), deadline())

        assert result.ttl_seconds == LONG_TTL
        assert cache.ttls[cache_key(_request())] == LONG_TTL

    @pytest.mark.asyncio
    async def test_recent_content_is_cached_short(self):
        cache = FakePageCache()
        source = FakeFeedSource(make_feed("alice", "P" * 20, created=RECENT))

        result = await _make_use_case(source, cache).execute(_request(), deadline())

        assert result.ttl_seconds == SHORT_TTL

    @pytest.mark.asyncio
    async def test_empty_page_is_cached_short(self):
        cache = FakePageCache()
        source = FakeFeedSource(make_feed("alice", "R" * 20, created=OLD))

        result = await _make_use_case(source, cache).execute(_request(), deadline())

        assert result.payload["posts"] == []
        assert result.ttl_seconds == SHORT_TTL


class TestCacheDegradation:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("failure", ["fail_ready", "fail_get", "fail_set"])
    async def test_cache_failures_still_serve_fresh_page(self, failure):
        cache = FakePageCache(**{failure: True})
        source = FakeFeedSource(make_feed("alice", "P" * 20))

        result = await _make_use_case(source, cache).execute(_request(), deadline())

        assert result.cache_hit is False
        assert len(result.payload["posts"]) == 5
        assert len(source.calls) == 1

    @pytest.mark.asyncio
    async def test_unready_cache_is_not_written(self):
        cache = FakePageCache(fail_ready=True)
        source = FakeFeedSource(make_feed("alice", "P" * 20))

        await _make_use_case(source, cache).execute(_request(), deadline())

        assert cache.store == {}

    @pytest.mark.asyncio
    async def test_missing_cache_configuration_is_an_error(self):
        cache = FakePageCache(not_configured=True)
        source = FakeFeedSource(make_feed("alice", "P" * 20))

        with pytest.raises(ConfigurationError):
            await _make_use_case(source, cache).execute(_request(), deadline())
        assert source.calls == []

    @pytest.mark.asyncio
    async def test_cache_is_health_checked_on_every_request(self):
        cache = FakePageCache()
        uc = _make_use_case(FakeFeedSource(make_feed("alice", "P" * 20)), cache)

        await uc.execute(_request(), deadline())
        await uc.execute(_request(), deadline())

        assert cache.ready_checks == 2


class TestUpstreamFailures:
    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "error",
        [
            UpstreamUnavailableError("All 3 upstream endpoints failed", failures=["a", "b", "c"]),
            UpstreamError("Hive API error", error={"message": "bad"}),
            DeadlineExceededError("Deadline of 9.0s exceeded"),
        ],
    )
    async def test_errors_propagate_and_nothing_is_cached(self, error):
        cache = FakePageCache()
        source = FakeFeedSource(error=error)

        with pytest.raises(type(error)):
            await _make_use_case(source, cache).execute(_request(), deadline())
        assert cache.store == {}


class TestPaginationWalk:
    @pytest.mark.asyncio
    @pytest.mark.parametrize("content_type", [ContentType.POSTS, ContentType.REBLOGS])
    async def test_walk_visits_every_item_once(self, content_type):
        feed = make_feed("alice", "PRRPRPPRRR" * 5)
        source = FakeFeedSource(feed)
        uc = _make_use_case(source)

        seen = []
        cursor = None
        for _ in range(10):
            payload = (
                await uc.execute(
                    _request(limit=20, content_type=content_type, cursor=cursor),
                    deadline(),
                )
            ).payload
            seen.extend((post["author"], post["permlink"]) for post in payload["posts"])
            if not payload["hasMore"]:
                break
            cursor = Cursor(payload["nextStartAuthor"], payload["nextStartPermlink"])
        else:
            pytest.fail("pagination did not terminate")

        if content_type is ContentType.POSTS:
            expected = [(r["author"], r["permlink"]) for r in feed if r["author"] == "alice"]
        else:
            expected = [(r["author"], r["permlink"]) for r in feed if r["author"] != "alice"]
        assert len(seen) == len(set(seen))
        assert seen == expected

    @pytest.mark.asyncio
    async def test_batch_with_no_matches_still_advances(self):
        feed = make_feed("alice", "R" * 20 + "P" * 5)
        uc = _make_use_case(FakeFeedSource(feed))

        first = (await uc.execute(_request(), deadline())).payload
        assert first["posts"] == []
        assert first["hasMore"] is True

        cursor = Cursor(first["nextStartAuthor"], first["nextStartPermlink"])
        second = (await uc.execute(_request(cursor=cursor), deadline())).payload

        assert [post["permlink"] for post in second["posts"]] == [f"post-{i}" for i in range(20, 25)]
        assert second["hasMore"] is False

    @pytest.mark.asyncio
    @pytest.mark.parametrize("limit", [1, 3, 20, 100])
    async def test_page_never_exceeds_limit(self, limit):
        uc = _make_use_case(FakeFeedSource(make_feed("alice", "P" * 20)))

        payload = (await uc.execute(_request(limit=limit), deadline())).payload

        assert len(payload["posts"]) <= limit


class TestCorruptCacheEntries:
    @pytest.mark.asyncio
    async def test_non_json_entry_is_a_miss_and_is_replaced(self):
        cache = FakePageCache()
        cache.store[cache_key(_request())] = "<html>not a page</html>"
        source = FakeFeedSource(make_feed("alice", "P" * 20))

        result = await _make_use_case(source, cache).execute(_request(), deadline())

        assert result.cache_hit is False
        assert len(result.payload["posts"]) == 5
        assert cache.store[cache_key(_request())] == result.body
        assert len(source.calls) == 1

    @pytest.mark.asyncio
    async def test_undecodable_redis_value_is_a_miss(self):
        client = FakeRedisClient()
        client.store[cache_key(_request())] = b"\xff\xfe"
        holder = RedisConnectionHolder(url="redis://cache.example", client_factory=lambda: client)
        source = FakeFeedSource(make_feed("alice", "P" * 20))

        result = await _make_use_case(source, RedisPageCache(holder)).execute(_request(), deadline())

        assert result.cache_hit is False
        assert len(result.payload["posts"]) == 5
        assert client.store[cache_key(_request())] == result.body
