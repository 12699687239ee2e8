"""Try an ordered list of candidates until one succeeds.

All attempts share a single ``Deadline``; each attempt additionally gets a
per-attempt cap so a hanging node cannot consume the whole budget.
"""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, Sequence, TypeVar

from ...domain.common.deadline import Deadline
from ...domain.common.errors import (
    DeadlineExceededError,
    UpstreamError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)

C = TypeVar("C")
R = TypeVar("R")


class AttemptFailed(Exception):
    """Raised by an attempt to move on to the next candidate."""

    def __init__(self, candidate: str, reason: str) -> None:
        super().__init__(f"{candidate}: {reason}")
        self.candidate = candidate
        self.reason = reason


async def first_successful(
    candidates: Sequence[C],
    attempt: Callable[[C, float], Awaitable[R]],
    deadline: Deadline,
    *,
    attempt_timeout: float,
) -> tuple[C, R]:
    """Return ``(candidate, result)`` for the first candidate that succeeds.

    *attempt* receives the candidate and the seconds it may spend.  It
    signals a transport-level failure with ``AttemptFailed`` and a
    protocol-level one with ``UpstreamError``; both move on to the next
    candidate.

    Raises:
        UpstreamError: Exhausted, and at least one candidate answered with a
            protocol error (the last one is re-raised).
        UpstreamUnavailableError: Exhausted with transport failures only.
        DeadlineExceededError: The shared budget ran out.
    """
    if not candidates:
        raise UpstreamUnavailableError("No upstream endpoints configured")

    failures: list[str] = []
    last_upstream_error: UpstreamError | None = None

    for candidate in candidates:
        timeout = min(attempt_timeout, deadline.remaining())
        if timeout <= 0:
            raise DeadlineExceededError(
                f"Deadline exceeded after {len(failures)} endpoint attempt(s)"
            )
        try:
            result = await deadline.run(attempt(candidate, timeout))
        except AttemptFailed as e:
            logger.warning(f"Upstream attempt failed, trying next endpoint: {e}")
            failures.append(str(e))
            continue
        except UpstreamError as e:
            logger.warning(f"Upstream error from {candidate}, trying next endpoint: {e.error}")
            failures.append(f"{candidate}: {e}")
            last_upstream_error = e
            continue

        if failures:
            logger.info(f"Upstream call succeeded on {candidate} after {len(failures)} failure(s)")
        return candidate, result

    if last_upstream_error is not None:
        raise last_upstream_error
    raise UpstreamUnavailableError(
        f"All {len(candidates)} upstream endpoints failed",
        failures=failures,
    )
