"""Pydantic schemas for the scanner HTTP API."""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = Field("ok", description="Always 'ok' when the server answers.")
    message: str = Field(..., description="Human readable server banner.")
    version: str = Field(..., description="Application version string.")


class ScanAcceptedResponse(BaseModel):
    """Acknowledgement that a scan was initiated (not that it completed)."""

    message: str = Field(..., description="Acknowledgement text.")
    scan_in_progress: bool = Field(
        False,
        description="True when a scan was already running; the new request is dropped.",
    )


class ScanStatusResponse(BaseModel):
    running: bool = Field(..., description="True while a scan holds the single-flight guard.")
    last_started_utc: Optional[str] = Field(None, description="Start time of the most recent scan.")
    last_finished_utc: Optional[str] = Field(None, description="Finish time of the most recent scan.")
