"""Shared Pydantic schemas used across multiple routers."""

from typing import Any, Optional

from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """Body of every failed request."""

    error: str
    details: Optional[Any] = None


class MessageResponse(BaseModel):
    message: str
