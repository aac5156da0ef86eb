from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from containerdash.config import configure_logging, get_settings, validate_config_on_startup
from containerdash.errors import ContainerNotFoundError, UpstreamError
from containerdash.routers import containers
from containerdash.version import __version__


logger = logging.getLogger(__name__)


settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup and shutdown events."""
    configure_logging(settings)
    # Raises ConfigurationError and keeps the server from starting
    validate_config_on_startup(settings)
    yield


app = FastAPI(
    title="Container Dashboard API",
    version=__version__,
    lifespan=lifespan,
)

# Parse CORS origins from settings
cors_origins = [
    origin.strip()
    for origin in settings.cors_allowed_origins.split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

app.include_router(containers.router)


@app.exception_handler(ContainerNotFoundError)
async def container_not_found_handler(request: Request, exc: ContainerNotFoundError):
    logger.info(f"Container lookup failed: {exc}")
    return JSONResponse(
        status_code=404,
        content={
            "detail": str(exc),
            "container": exc.name,
            "error_type": "container_not_found",
        },
    )


@app.exception_handler(UpstreamError)
async def upstream_error_handler(request: Request, exc: UpstreamError):
    """Handle monitoring agent failures with 502 error."""
    logger.error(f"Upstream fetch failed: {exc}")
    return JSONResponse(
        status_code=502,
        content={
            "detail": "Failed to fetch container data from the monitoring agent",
            "error": str(exc),
            "error_type": "upstream_error",
        },
    )


@app.get("/api/ping")
async def ping():
    """Simple health check for load balancers."""
    return {"status": "ok", "version": __version__}
