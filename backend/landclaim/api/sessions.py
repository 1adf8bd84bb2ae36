"""/api/sessions — live tracking sessions held in the app's SessionStore."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from landclaim.dependencies import get_session, get_session_store
from landclaim.engine.records import RecordError
from landclaim.engine.session import SessionStateError, SessionStore, TrackingSession
from landclaim.models.geo import FixModel, territories_of
from landclaim.models.requests import CreateSessionRequest, TerritoriesUpdateRequest
from landclaim.models.responses import (
    CollisionResponse,
    FixResponse,
    JournalResponse,
    SessionResponse,
)

router = APIRouter(prefix="/sessions")


@router.post("", response_model=SessionResponse, status_code=201)
def create_session(
    req: CreateSessionRequest,
    store: SessionStore = Depends(get_session_store),
) -> SessionResponse:
    try:
        territories = territories_of(req.territories)
    except RecordError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    session = store.create(req.player_id, territories)
    result = session.start(req.start.to_fix() if req.start else None)
    if result.is_violation:
        store.remove(session.id)
        raise HTTPException(status_code=409, detail=result.message)
    return SessionResponse.from_session(session)


@router.get("/{session_id}", response_model=SessionResponse)
def read_session(session: TrackingSession = Depends(get_session)) -> SessionResponse:
    return SessionResponse.from_session(session)


@router.post("/{session_id}/fixes", response_model=FixResponse)
def add_fix(fix: FixModel, session: TrackingSession = Depends(get_session)) -> FixResponse:
    result = session.add_fix(fix.to_fix())
    # Cooperative scheduling: a due collision check runs on the fix that finds it due
    if not session.auto_schedule:
        session.tick()
    return FixResponse.from_result(result, session)


@router.put("/{session_id}/territories", response_model=SessionResponse)
def update_territories(
    req: TerritoriesUpdateRequest,
    session: TrackingSession = Depends(get_session),
) -> SessionResponse:
    try:
        session.update_territories(territories_of(req.territories))
    except RecordError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    return SessionResponse.from_session(session)


@router.post("/{session_id}/collision-check", response_model=CollisionResponse)
def collision_check(session: TrackingSession = Depends(get_session)) -> CollisionResponse:
    result = session.check_collisions()
    if result is None:
        raise HTTPException(status_code=409, detail=f"Session is {session.state.value}")
    return CollisionResponse.from_result(result)


@router.post("/{session_id}/clear", response_model=SessionResponse)
def clear_path(session: TrackingSession = Depends(get_session)) -> SessionResponse:
    try:
        session.clear_path()
    except SessionStateError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    return SessionResponse.from_session(session)


@router.get("/{session_id}/journal", response_model=JournalResponse)
def journal(session: TrackingSession = Depends(get_session)) -> JournalResponse:
    return JournalResponse(session_id=session.id, text=session.journal.export())


@router.delete("/{session_id}", status_code=204)
def delete_session(
    session: TrackingSession = Depends(get_session),
    store: SessionStore = Depends(get_session_store),
) -> None:
    store.remove(session.id)
