"""API route handlers."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from fastapi.responses import JSONResponse

from ..interfaces import PersistenceError, ValidationError
from ..services import ConfigurationStore
from ..services.file_backend import encode_record
from .models import (
    ErrorResponse,
    HealthResponse,
    SetConfigRequest,
    SetConfigResponse,
)

logger = logging.getLogger("liveconfig.server")

router = APIRouter(tags=["config"])

READ_FAILED = "Failed to read configuration"
SAVE_FAILED = "Failed to save configuration"


def get_config_store() -> ConfigurationStore:
    """Dependency injection for the configuration store.

    This is set by the app during startup.
    """
    from .app import _config_store
    if _config_store is None:
        raise HTTPException(status_code=503, detail="Service not initialized")
    return _config_store


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.get(
    "/currentlyConfig.json",
    responses={500: {"model": ErrorResponse}},
)
async def current_config(
    store: ConfigurationStore = Depends(get_config_store),
) -> Response:
    """Serve the live configuration record, pretty-printed."""
    try:
        record = await store.get()
    except PersistenceError as e:
        logger.warning(f"Configuration read failed: {e}")
        return _error(500, READ_FAILED)
    except Exception:
        logger.exception("Unexpected error reading configuration")
        return _error(500, READ_FAILED)

    return Response(content=encode_record(record), media_type="application/json")


@router.post(
    "/set-config",
    response_model=SetConfigResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def set_config(
    request: SetConfigRequest,
    store: ConfigurationStore = Depends(get_config_store),
):
    """Replace the live configuration record."""
    try:
        result = await store.set(request.model_dump(exclude_none=True))
    except ValidationError as e:
        return _error(400, str(e))
    except Exception:
        logger.exception("Unexpected error saving configuration")
        return _error(500, SAVE_FAILED)

    note = "Saved to memory and disk" if result.persisted else "Using in-memory storage"
    return SetConfigResponse(note=note)


@router.get("/health", response_model=HealthResponse)
async def health(
    store: ConfigurationStore = Depends(get_config_store),
) -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        read_policy=store.read_policy.value,
        storage_path=store.backend.describe(),
    )
