"""
Main FastAPI application entry point.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager

from . import __version__
from .config import settings
from .domain.common.errors import CacheUnavailableError, ConfigurationError
from .infra.cache.redis_pool import get_connection_holder
from .logging import configure_logging
from .wiring import bootstrap

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for startup and shutdown events.

    No connections are opened here; the RPC client and the Redis
    connection are created lazily by the first request that needs them.
    """
    configure_logging(settings.log_level)
    logger.info("Starting Hive blog API...")
    logger.info(f"Hive RPC endpoints: {settings.hive_rpc_endpoints_list}")
    logger.info(f"CORS origins: {settings.cors_origins_list}")
    if not settings.redis_url:
        logger.warning("REDIS_URL is not set; feed requests will fail until it is configured")

    yield

    logger.info("Shutting down Hive blog API...")
    await bootstrap.shutdown()


# Create FastAPI application
app = FastAPI(
    title="Hive Blog API",
    description="A Hive user's posts and reblogs, paginated and cached",
    version=__version__,
    lifespan=lifespan
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request parameters", "details": jsonable_encoder(exc.errors())},
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.url.path}: {exc}", exc_info=True)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.get("/")
async def root():
    """Root endpoint with API information."""
    return {
        "name": "Hive Blog API",
        "version": __version__,
        "docs": "/docs",
        "status": "running"
    }


@app.get("/livez")
async def liveness():
    """Liveness probe - zero dependencies, confirms process is responsive."""
    return {"status": "ok"}


@app.get("/readyz")
async def readiness():
    """Readiness probe - checks Redis connectivity.

    Redis is a soft dependency: its absence degrades the service (every
    request goes to Hive) but doesn't make it unhealthy.
    """
    checks = {}
    try:
        await get_connection_holder().ensure_connected()
        checks["redis"] = "ok"
    except ConfigurationError:
        checks["redis"] = "warning: not configured"
    except CacheUnavailableError as e:
        checks["redis"] = f"warning: {type(e.__cause__ or e).__name__}"

    status_label = "degraded" if checks["redis"].startswith("warning") else "ok"
    return JSONResponse(content={"status": status_label, "checks": checks}, status_code=200)


# Include API routers
from .api.v1.router import router as api_router
app.include_router(api_router, prefix="/api/v1")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "hiveblog.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
