"""Dependency injection bootstrap: the single place that binds ports to adapters.

Every factory function here can be used as a FastAPI ``Depends()`` target.
Routers never import concrete implementations directly; they depend on
the abstractions returned by these factories.

Example usage in a router::

    from hiveblog.wiring.bootstrap import get_get_user_posts_use_case, get_request_deadline

    @router.get("/get-user-posts")
    async def get_user_posts(
        use_case: GetUserPostsUseCase = Depends(get_get_user_posts_use_case),
        deadline: Deadline = Depends(get_request_deadline),
    ):
        result = await use_case.execute(request, deadline)
"""

from __future__ import annotations

from datetime import timedelta

from hiveblog.config import settings
from hiveblog.domain.chain.ports import ChainStateSource
from hiveblog.domain.common.deadline import Deadline
from hiveblog.domain.feed.cache_policy import CacheTtlPolicy
from hiveblog.domain.feed.ports import FeedSource, PageCache
from hiveblog.infra.cache.page_cache import RedisPageCache
from hiveblog.infra.cache.redis_pool import get_connection_holder, reset_connection_holder
from hiveblog.infra.hive.feed_source import HiveChainStateSource, HiveFeedSource
from hiveblog.infra.hive.rpc_client import HiveRpcClient
from hiveblog.use_cases.chain.get_chain_info import GetChainInfoUseCase
from hiveblog.use_cases.feed.get_single_post import GetSinglePostUseCase
from hiveblog.use_cases.feed.get_user_posts import GetUserPostsUseCase


# ── Request budget ──────────────────────────────────────────────────────


def get_request_deadline() -> Deadline:
    """A fresh deadline per request, shared by every I/O step in it."""
    return Deadline(settings.request_deadline_seconds)


# ── RPC client ──────────────────────────────────────────────────────────

_rpc_client: HiveRpcClient | None = None


def get_rpc_client() -> HiveRpcClient:
    """Return a singleton HiveRpcClient over the configured endpoints."""
    global _rpc_client
    if _rpc_client is None:
        _rpc_client = HiveRpcClient(
            endpoints=settings.hive_rpc_endpoints_list,
            attempt_timeout=settings.hive_rpc_attempt_timeout,
        )
    return _rpc_client


# ── Providers ───────────────────────────────────────────────────────────


def get_feed_source() -> FeedSource:
    return HiveFeedSource(get_rpc_client())


def get_chain_source() -> ChainStateSource:
    return HiveChainStateSource(get_rpc_client())


def get_page_cache() -> PageCache:
    return RedisPageCache(get_connection_holder())


def get_ttl_policy() -> CacheTtlPolicy:
    return CacheTtlPolicy(
        long_ttl_seconds=settings.cache_long_ttl_seconds,
        short_ttl_seconds=settings.cache_short_ttl_seconds,
        final_age=timedelta(days=settings.cache_final_age_days),
    )


# ── Use Cases ───────────────────────────────────────────────────────────


def get_get_user_posts_use_case() -> GetUserPostsUseCase:
    """Build a GetUserPostsUseCase wired with infrastructure adapters."""
    return GetUserPostsUseCase(
        feed_source=get_feed_source(),
        page_cache=get_page_cache(),
        ttl_policy=get_ttl_policy(),
        raw_page_size=settings.raw_page_size,
        key_prefix=settings.cache_key_prefix,
        blog_base_url=settings.blog_base_url,
    )


def get_get_single_post_use_case() -> GetSinglePostUseCase:
    return GetSinglePostUseCase(
        feed_source=get_feed_source(),
        blog_base_url=settings.blog_base_url,
    )


def get_get_chain_info_use_case() -> GetChainInfoUseCase:
    return GetChainInfoUseCase(chain_source=get_chain_source())


# ── Shutdown ────────────────────────────────────────────────────────────


async def shutdown() -> None:
    """Release pooled connections (HTTP client and Redis)."""
    global _rpc_client
    if _rpc_client is not None:
        await _rpc_client.close()
        _rpc_client = None
    await reset_connection_holder()
