"""Error taxonomy shared by every layer.

Pipeline stages raise these; the API boundary matches each one to a
response shape.  ``CacheUnavailableError`` never reaches the boundary:
use cases recover from it locally.
"""

from __future__ import annotations

from typing import Any, Sequence


class HiveBlogError(Exception):
    """Base exception for hiveblog."""


class InvalidRequestError(HiveBlogError):
    """Raised when required query parameters are missing or malformed."""


class ConfigurationError(HiveBlogError):
    """Raised when required configuration (e.g. the cache URL) is absent."""


class UpstreamUnavailableError(HiveBlogError):
    """Raised when every configured RPC endpoint failed."""

    def __init__(self, message: str, failures: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.failures = tuple(failures)


class UpstreamError(HiveBlogError):
    """Raised when an RPC node answered with a JSON-RPC error payload."""

    def __init__(
        self,
        message: str,
        error: Any = None,
        endpoint: str | None = None,
    ) -> None:
        super().__init__(message)
        self.error = error
        self.endpoint = endpoint


class CacheUnavailableError(HiveBlogError):
    """Raised when a cache read or write fails or times out."""


class DeadlineExceededError(HiveBlogError):
    """Raised when the per-request deadline elapsed."""


class EntityNotFoundError(HiveBlogError):
    """Raised when a looked-up entity does not exist upstream."""

    def __init__(self, entity: str, identifier: str) -> None:
        super().__init__(f"{entity} not found: {identifier}")
        self.entity = entity
        self.identifier = identifier
