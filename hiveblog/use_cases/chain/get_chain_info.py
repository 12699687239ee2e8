"""GetChainInfoUseCase: report the latest block seen by an RPC node."""

from __future__ import annotations

from hiveblog.domain.chain.models import ChainHead
from hiveblog.domain.chain.ports import ChainStateSource
from hiveblog.domain.common.deadline import Deadline


class GetChainInfoUseCase:

    def __init__(self, chain_source: ChainStateSource) -> None:
        self._chain_source = chain_source

    async def execute(self, deadline: Deadline) -> ChainHead:
        return await self._chain_source.fetch_head(deadline)
