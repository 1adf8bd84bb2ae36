"""Health check + meta endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from landclaim.config import Settings
from landclaim.dependencies import get_settings
from landclaim.engine.registry import get_registry
from landclaim.models.responses import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse)
async def health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    return HealthResponse(
        status="ok",
        version="0.1.0",
        environment=settings.landclaim_env,
        checks_registered=get_registry().count,
    )
