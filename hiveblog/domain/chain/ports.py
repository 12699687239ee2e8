"""Ports for reading global chain state."""

from __future__ import annotations

import abc

from ..common.deadline import Deadline
from .models import ChainHead


class ChainStateSource(abc.ABC):

    @abc.abstractmethod
    async def fetch_head(self, deadline: Deadline) -> ChainHead:
        """Return the current head block and the node that reported it."""
        ...
