"""FastAPI application exposing the media scan trigger."""
from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .auth import APIKeyAuth
from .models import HealthResponse, ScanAcceptedResponse, ScanStatusResponse
from .scan_worker import ScanTrigger

LOGGER = logging.getLogger("streamflex.api")

SCAN_ACCEPTED_MESSAGE = "Media scan initiated successfully. This process will run in the background."
SCAN_BUSY_MESSAGE = "A media scan is already running. This request was ignored."


@dataclass(slots=True)
class APIServerConfig:
    """Runtime configuration for the FastAPI application."""

    trigger: ScanTrigger
    api_key: Optional[str] = None
    cors_origins: Sequence[str] = field(default_factory=list)
    app_version: str = "dev"


def create_app(config: APIServerConfig) -> FastAPI:
    """Create a FastAPI application bound to the given configuration."""

    app = FastAPI(
        title="StreamFlex Scanner",
        version=config.app_version,
        docs_url="/docs",
        openapi_url="/openapi.json",
    )

    allowed_origins: List[str] = [origin for origin in config.cors_origins if origin]
    if allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=allowed_origins,
            allow_methods=["GET", "POST"],
            allow_headers=["*"],
        )

    auth_dependency = APIKeyAuth(config.api_key)
    trigger = config.trigger

    @app.middleware("http")
    async def log_requests(request: Request, call_next):  # type: ignore[override]
        start = time.perf_counter()
        response: Optional[Response] = None
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000
            status_code = response.status_code if response is not None else 500
            client = request.client.host if request.client else "-"
            LOGGER.info(
                "%s %s -> %s (%.1f ms) ip=%s",
                request.method,
                request.url.path,
                status_code,
                duration_ms,
                client,
            )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(_request: Request, exc: HTTPException):
        detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
        return JSONResponse(status_code=exc.status_code, content={"error": detail})

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(_request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "invalid parameters", "details": exc.errors()},
        )

    @app.get("/", response_model=HealthResponse)
    def health() -> HealthResponse:
        return HealthResponse(
            status="ok",
            message="StreamFlex scanner is running",
            version=config.app_version,
        )

    @app.post(
        "/api/scan",
        response_model=ScanAcceptedResponse,
        status_code=status.HTTP_202_ACCEPTED,
    )
    def start_scan(_: str = Depends(auth_dependency)) -> ScanAcceptedResponse:
        try:
            started = trigger.fire()
        except RuntimeError as exc:
            LOGGER.error("Failed to start media scan: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to start media scan.")
        if not started:
            return ScanAcceptedResponse(message=SCAN_BUSY_MESSAGE, scan_in_progress=True)
        return ScanAcceptedResponse(message=SCAN_ACCEPTED_MESSAGE)

    @app.get("/api/scan/status", response_model=ScanStatusResponse)
    def scan_status(_: str = Depends(auth_dependency)) -> ScanStatusResponse:
        orchestrator = trigger.orchestrator
        return ScanStatusResponse(
            running=orchestrator.running,
            last_started_utc=orchestrator.last_started_utc,
            last_finished_utc=orchestrator.last_finished_utc,
        )

    return app


__all__ = ["APIServerConfig", "create_app"]
