"""Pydantic models for HTTP API request/response."""

from typing import Optional

from pydantic import BaseModel, Field


# =============================================================================
# Request Models
# =============================================================================

class SetConfigRequest(BaseModel):
    """Request to replace the current configuration.

    ``code`` is optional at the schema level so a missing value reaches the
    store and is reported as "Code is required" rather than a schema error.
    """
    code: Optional[str] = Field(default=None, description="Script text to serve")
    timestamp: Optional[str] = Field(
        default=None,
        description="ISO-8601 write time (defaults to now)"
    )
    version: Optional[str] = Field(
        default=None,
        description="Version label (defaults to 1.0)"
    )


# =============================================================================
# Response Models
# =============================================================================

class SetConfigResponse(BaseModel):
    """Response from a successful write."""
    success: bool = True
    message: str = "Configuration updated"
    note: str


class ErrorResponse(BaseModel):
    """Error payload for 4xx/5xx responses."""
    error: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    read_policy: str
    storage_path: str
