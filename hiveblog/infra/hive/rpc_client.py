"""
Hive JSON-RPC client with endpoint failover.

Posts JSON-RPC 2.0 requests to an ordered list of public API nodes and
returns the first well-formed result.  Network errors, non-2xx statuses,
non-JSON bodies and results of the wrong shape fall through to the next
node; JSON-RPC error payloads do too, but are kept so they can be
surfaced when every node fails.
"""
import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

import httpx

from ...domain.common.deadline import Deadline
from ...domain.common.errors import UpstreamError
from .failover import AttemptFailed, first_successful

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RpcResult:
    """Decoded ``result`` member and the node that produced it."""

    endpoint: str
    value: Any


class HiveRpcClient:
    """Async JSON-RPC client over a fixed, ordered list of Hive API nodes."""

    USER_AGENT = "hiveblog/0.1 (+https://hive.blog)"

    def __init__(
        self,
        endpoints: Sequence[str],
        attempt_timeout: float = 4.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.endpoints = list(endpoints)
        self.attempt_timeout = attempt_timeout
        self._client = http_client

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.attempt_timeout,
                headers={
                    "User-Agent": self.USER_AGENT,
                    "Content-Type": "application/json",
                },
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def call(
        self,
        method: str,
        params: list,
        deadline: Deadline,
        expect: type = object,
    ) -> RpcResult:
        """
        Call *method* on the first node that answers.

        Args:
            method: JSON-RPC method, e.g. ``condenser_api.get_content``
            params: Positional params list
            deadline: Shared request budget
            expect: Type the ``result`` member must have; other shapes fail over

        Raises:
            UpstreamUnavailableError, UpstreamError, DeadlineExceededError
        """
        payload = {"jsonrpc": "2.0", "id": 1, "method": method, "params": params}

        async def attempt(endpoint: str, timeout: float) -> Any:
            return await self._post(endpoint, payload, timeout, expect)

        endpoint, value = await first_successful(
            self.endpoints,
            attempt,
            deadline,
            attempt_timeout=self.attempt_timeout,
        )
        logger.debug(f"{method} answered by {endpoint}")
        return RpcResult(endpoint=endpoint, value=value)

    async def _post(self, endpoint: str, payload: dict, timeout: float, expect: type) -> Any:
        client = await self._get_client()
        try:
            response = await client.post(endpoint, json=payload, timeout=timeout)
        except httpx.TimeoutException as e:
            raise AttemptFailed(endpoint, f"timed out after {timeout:.1f}s") from e
        except httpx.HTTPError as e:
            raise AttemptFailed(endpoint, f"network error: {e}") from e

        if not response.is_success:
            raise AttemptFailed(endpoint, f"HTTP {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise AttemptFailed(endpoint, "response body is not JSON") from e
        if not isinstance(body, dict):
            raise AttemptFailed(endpoint, "response body is not a JSON-RPC object")

        if body.get("error"):
            raise UpstreamError(
                f"Hive API error from {endpoint}",
                error=body["error"],
                endpoint=endpoint,
            )
        if "result" not in body:
            raise AttemptFailed(endpoint, "response has neither result nor error")

        result = body["result"]
        if not isinstance(result, expect):
            raise AttemptFailed(
                endpoint, f"unexpected result type {type(result).__name__}"
            )
        return result
