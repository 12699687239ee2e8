"""Pydantic schemas for the chain-state endpoint."""

from pydantic import BaseModel


class HiveInfoResponse(BaseModel):
    message: str
    headBlockNumber: int
    nodeUsed: str
