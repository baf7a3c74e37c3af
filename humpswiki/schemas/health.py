"""Pydantic schemas for the database connectivity check."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response body for GET /connect."""

    status: Literal["ok"] = Field(default="ok", description="Service status")
    message: str = Field(default="Connected to database!")
    environment: str = Field(description="Current app environment (e.g. dev, prod)")
    database: Literal["connected", "disconnected"] = Field(
        default="connected",
        description="Database connectivity status",
    )
