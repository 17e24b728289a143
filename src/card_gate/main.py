"""
CardGate Main Application
=========================

FastAPI entry point for the image validation service.

The capture screen posts the user's photo here before any upload to the
grading service. The response is a verdict only: the image is neither
stored, modified nor forwarded.

Endpoints:
    GET  /          - Service information
    GET  /health    - Liveness probe (is process alive?)
    POST /validate  - Validate one image, returns a ValidationReport
"""

import asyncio
import logging
import os
import time
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from card_gate.config import settings
from card_gate.engine import ImageValidator
from card_gate.imaging.decoder import base64_payload_size, format_bytes
from card_gate.models.report import ValidationReport
from card_gate.models.request import ValidateRequest
from card_gate.models.thresholds import ValidationThresholds


logger = logging.getLogger(__name__)


# =============================================================================
# Global State
# =============================================================================

_validator: Optional[ImageValidator] = None
_startup_time: float = 0.0

# Counters
_validated_count: int = 0
_rejected_count: int = 0
_timeout_count: int = 0


def get_validator() -> ImageValidator:
    """Shared validator, created lazily if the lifespan has not run."""
    global _validator
    if _validator is None:
        _validator = ImageValidator(settings.thresholds)
    return _validator


def _resolve_validator(overrides: Optional[dict]) -> ImageValidator:
    """Validator for one request, merging overrides over service thresholds."""
    if not overrides:
        return get_validator()
    merged = {**settings.thresholds.model_dump(), **overrides}
    try:
        thresholds = ValidationThresholds.model_validate(merged)
    except ValidationError as e:
        raise HTTPException(
            status_code=422,
            detail=f"Invalid threshold override: {e.errors(include_url=False)}",
        )
    return ImageValidator(thresholds)


# =============================================================================
# Lifespan Management
# =============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan manager."""
    global _validator, _startup_time

    _startup_time = time.time()
    logger.info(f"Starting {settings.service.name} {settings.service.version}")

    _validator = ImageValidator(settings.thresholds)
    logger.info(
        f"Validator ready: min_dimension={settings.thresholds.min_dimension}, "
        f"max_analysis_size={settings.thresholds.max_analysis_size}, "
        f"timeout={settings.server.validation_timeout_seconds}s"
    )

    yield

    logger.info(
        f"Shutting down: validated={_validated_count}, "
        f"rejected={_rejected_count}, timeouts={_timeout_count}"
    )


# =============================================================================
# FastAPI Application
# =============================================================================

app = FastAPI(
    title="CardGate",
    description="Trading-card photo quality and card-presence validation",
    version=settings.service.version,
    lifespan=lifespan,
)


# =============================================================================
# HTTP Endpoints
# =============================================================================

@app.get("/")
async def root() -> JSONResponse:
    """Service information endpoint."""
    return JSONResponse({
        "service": "CardGate",
        "version": settings.service.version,
        "name": settings.service.name,
        "status": "running",
    })


@app.get("/health")
async def health() -> JSONResponse:
    """
    Liveness probe - is the process alive?

    Always returns 200 if the service is running.
    """
    return JSONResponse({
        "status": "healthy",
        "uptime_seconds": round(time.time() - _startup_time, 1),
        "validated": _validated_count,
        "rejected": _rejected_count,
    })


@app.post("/validate", response_model=ValidationReport)
async def validate(request: ValidateRequest) -> ValidationReport:
    """
    Validate one image.

    Returns 200 with the report for both valid and invalid images.
    Returns 413 if the payload is too large, 504 if analysis times out.
    """
    global _validated_count, _rejected_count, _timeout_count

    payload_size = base64_payload_size(request.image)
    if payload_size > settings.server.max_payload_bytes:
        raise HTTPException(
            status_code=413,
            detail=(
                f"Image is too large ({format_bytes(payload_size)}); "
                f"limit is {format_bytes(settings.server.max_payload_bytes)}"
            ),
        )

    validator = _resolve_validator(request.thresholds)

    try:
        report = await asyncio.wait_for(
            asyncio.to_thread(validator.inspect, request.image),
            timeout=settings.server.validation_timeout_seconds,
        )
    except asyncio.TimeoutError:
        _timeout_count += 1
        logger.error(
            f"Validation timed out after {settings.server.validation_timeout_seconds}s "
            f"({format_bytes(payload_size)} payload)"
        )
        raise HTTPException(status_code=504, detail="Image validation timed out")

    _validated_count += 1
    if not report.outcome.valid:
        _rejected_count += 1

    return report


# =============================================================================
# Main Entry Point
# =============================================================================

if __name__ == "__main__":
    import uvicorn

    # Cloud Run uses PORT env var
    port = int(os.environ.get("PORT", settings.server.port))

    uvicorn.run(
        "card_gate.main:app",
        host=settings.server.host,
        port=port,
        reload=False,
    )
