"""FastAPI dependency injection."""

from __future__ import annotations

from fastapi import HTTPException, Request

from landclaim.config import Settings, settings
from landclaim.engine.collision import CollisionEngine
from landclaim.engine.session import SessionStore, TrackingSession
from landclaim.engine.validator import TerritoryValidator


def get_settings() -> Settings:
    return settings


def get_validator(request: Request) -> TerritoryValidator:
    return request.app.state.validator


def get_collision_engine(request: Request) -> CollisionEngine:
    return request.app.state.collision_engine


def get_session_store(request: Request) -> SessionStore:
    return request.app.state.sessions


def get_session(session_id: str, request: Request) -> TrackingSession:
    session = get_session_store(request).get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Unknown session {session_id}")
    return session
