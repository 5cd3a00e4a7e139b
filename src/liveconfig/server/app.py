"""FastAPI application for the live configuration service."""

import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..services import ConfigurationStore, FileRecordBackend
from .config import LiveConfigConfig
from .routes import router

SERVICE_VERSION = "0.1.0"

# Global store instance (set during lifespan)
_config_store: Optional[ConfigurationStore] = None

logger = logging.getLogger("liveconfig.server")


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager."""
    global _config_store

    config: LiveConfigConfig = app.state.config

    # Validate config
    errors = config.validate()
    if errors:
        raise ValueError(f"Configuration errors: {errors}")

    store = ConfigurationStore(
        backend=FileRecordBackend(config.storage.path),
        read_policy=config.storage.policy,
    )
    await store.initialize()
    _config_store = store

    logger.info(
        f"Configuration store ready (storage: {config.storage.path}, "
        f"read policy: {config.storage.read_policy})"
    )

    yield

    logger.info("Shutting down liveconfig service")
    _config_store = None


async def _invalid_body_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.debug(f"Rejected request body on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


def create_app(config: Optional[LiveConfigConfig] = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Service configuration. If None, loads from environment.

    Returns:
        Configured FastAPI application.
    """
    if config is None:
        config = LiveConfigConfig.from_env()

    app = FastAPI(
        title="Live Config",
        description="Serves and updates a single live configuration script",
        version=SERVICE_VERSION,
        lifespan=lifespan,
    )

    # Store config for lifespan access
    app.state.config = config

    # Any origin may read or write the configuration
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _invalid_body_handler)

    app.include_router(router)

    # Root endpoint
    @app.get("/")
    async def root():
        return {
            "service": "liveconfig",
            "version": SERVICE_VERSION,
            "endpoints": {
                "GET /currentlyConfig.json": "Fetch the current configuration",
                "POST /set-config": "Update the configuration (JSON body required)",
            },
        }

    return app


def run_server(
    config: Optional[LiveConfigConfig] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    log_level: str = "info",
):
    """Run the HTTP server.

    Args:
        config: Service configuration. If None, loads from environment.
        host: Override host from config.
        port: Override port from config.
        log_level: Logging level.
    """
    if config is None:
        config = LiveConfigConfig.from_env()
    if host is not None:
        config.server.host = host
    if port is not None:
        config.server.port = port

    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = create_app(config)

    uvicorn.run(
        app,
        host=config.server.host,
        port=config.server.port,
        log_level=log_level,
    )
