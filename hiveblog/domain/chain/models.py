"""Value objects describing the state of the chain."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ChainHead:
    """Latest block as reported by one RPC node."""

    head_block_number: int
    node: str
