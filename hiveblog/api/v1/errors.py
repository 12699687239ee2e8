"""
Map domain errors to JSON error responses.

Every failure body is ``{"error": str, "details": ...}``; the status code
depends on which stage failed.
"""
import logging
from typing import Any, Optional

from fastapi.responses import JSONResponse

from ...domain.common.errors import (
    ConfigurationError,
    DeadlineExceededError,
    EntityNotFoundError,
    HiveBlogError,
    InvalidRequestError,
    UpstreamError,
    UpstreamUnavailableError,
)

logger = logging.getLogger(__name__)


def error_response(status_code: int, error: str, details: Optional[Any] = None) -> JSONResponse:
    content = {"error": error}
    if details is not None:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content)


def domain_error_response(exc: HiveBlogError) -> JSONResponse:
    """Explicitly match each error kind to its response shape."""
    if isinstance(exc, InvalidRequestError):
        return error_response(400, str(exc))

    if isinstance(exc, EntityNotFoundError):
        return error_response(404, str(exc))

    if isinstance(exc, DeadlineExceededError):
        logger.error(f"Request timed out: {exc}")
        return error_response(500, "Request timed out", str(exc))

    if isinstance(exc, UpstreamError):
        logger.error(f"Hive API returned an error: {exc.error}")
        return error_response(
            500,
            "Error communicating with the Hive blockchain",
            {"endpoint": exc.endpoint, "upstream_error": exc.error},
        )

    if isinstance(exc, UpstreamUnavailableError):
        logger.error(f"All Hive endpoints failed: {list(exc.failures)}")
        return error_response(
            500,
            "Hive blockchain is unavailable",
            {"message": str(exc), "failures": list(exc.failures)},
        )

    if isinstance(exc, ConfigurationError):
        logger.error(f"Configuration error: {exc}")
        return error_response(500, "Server is misconfigured", str(exc))

    logger.error(f"Unhandled domain error: {exc}", exc_info=True)
    return error_response(500, "Internal server error", str(exc))
