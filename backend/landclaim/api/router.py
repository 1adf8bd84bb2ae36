"""Master API router — mounts all endpoint routers."""

from __future__ import annotations

from fastapi import APIRouter

from landclaim.api import claims, collisions, health, sessions

api_router = APIRouter(prefix="/api")

api_router.include_router(health.router)
api_router.include_router(claims.router)
api_router.include_router(collisions.router)
api_router.include_router(sessions.router)
