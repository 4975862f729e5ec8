"""Pydantic schema for the public health probe."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: Literal["ok"] = Field(default="ok", description="Panel API status")
    environment: Literal["dev", "prod"] = Field(description="APP_ENV of the running panel")
    database: Literal["connected", "disconnected"] = Field(
        description="Whether a trivial query against the panel database succeeded",
    )
