"""Health check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from scenesight import __version__
from scenesight.models.responses import HealthResponse
from scenesight.models.scene import PrimitiveKind

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        status="ok",
        version=__version__,
        primitive_kinds=[kind.value for kind in PrimitiveKind],
    )
