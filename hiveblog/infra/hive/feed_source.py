"""
Hive-backed implementations of the feed and chain-state ports.
"""
import logging
from typing import Optional

from ...domain.chain.models import ChainHead
from ...domain.chain.ports import ChainStateSource
from ...domain.common.deadline import Deadline
from ...domain.feed.models import Cursor, RawItem, RawPage
from ...domain.feed.pagination import MAX_RAW_PAGE_SIZE
from ...domain.feed.ports import FeedSource
from .rpc_client import HiveRpcClient

logger = logging.getLogger(__name__)


class HiveFeedSource(FeedSource):
    """Blog entries via condenser_api."""

    def __init__(self, rpc: HiveRpcClient):
        self._rpc = rpc

    async def fetch_raw_page(
        self,
        username: str,
        cursor: Optional[Cursor],
        raw_page_size: int,
        deadline: Deadline,
    ) -> RawPage:
        limit = min(raw_page_size, MAX_RAW_PAGE_SIZE)
        query = {"tag": username, "limit": limit}
        if cursor is not None:
            query["start_author"] = cursor.author
            query["start_permlink"] = cursor.permlink

        result = await self._rpc.call(
            "condenser_api.get_discussions_by_blog",
            [query],
            deadline,
            expect=list,
        )
        items = tuple(entry for entry in result.value if isinstance(entry, dict))
        logger.info(
            f"Fetched {len(items)} raw blog entries for @{username} "
            f"(cursor={cursor.permlink if cursor else None}, node={result.endpoint})"
        )
        return RawPage(items=items, upstream_has_more=len(result.value) >= limit)

    async def fetch_post(self, author: str, permlink: str, deadline: Deadline) -> Optional[RawItem]:
        result = await self._rpc.call(
            "condenser_api.get_content",
            [author, permlink],
            deadline,
            expect=dict,
        )
        post = result.value
        # get_content answers a missing post with an empty shell (id 0, no author).
        if not post or not post.get("author") or post.get("id") == 0:
            return None
        return post


class HiveChainStateSource(ChainStateSource):
    """Head block via condenser_api.get_dynamic_global_properties."""

    def __init__(self, rpc: HiveRpcClient):
        self._rpc = rpc

    async def fetch_head(self, deadline: Deadline) -> ChainHead:
        result = await self._rpc.call(
            "condenser_api.get_dynamic_global_properties",
            [],
            deadline,
            expect=dict,
        )
        return ChainHead(
            head_block_number=int(result.value.get("head_block_number", 0)),
            node=result.endpoint,
        )
