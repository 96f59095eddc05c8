"""Response models for meta API endpoints."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HealthResponse(BaseModel):
    """Response model for health check."""

    model_config = ConfigDict(
        json_schema_extra={"examples": [{"status": "ok", "version": "0.1.0"}]}
    )

    status: str = Field(..., description="Service status", examples=["ok"])
    version: str | None = Field(None, description="Deployed API version")
