"""API response models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from landclaim.engine.context import ValidationContext
from landclaim.engine.sampler import SampleResult
from landclaim.engine.session import TrackingSession
from landclaim.engine.types import CollisionResult, Invalid, ValidationOutcome


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = "0.1.0"
    environment: str = "development"
    checks_registered: int = 0


class ValidationResponse(BaseModel):
    valid: bool
    reason: str | None = None
    detail: str = ""
    point_count: int = 0
    total_distance_m: float | None = None
    area_m2: float | None = None
    checks_completed: list[str] = Field(default_factory=list)

    @classmethod
    def from_outcome(cls, outcome: ValidationOutcome, ctx: ValidationContext | None = None) -> ValidationResponse:
        if isinstance(outcome, Invalid):
            return cls(
                valid=False,
                reason=outcome.reason.value,
                detail=outcome.detail,
                point_count=ctx.point_count if ctx else 0,
                total_distance_m=ctx.total_distance_m if ctx else None,
                area_m2=ctx.area_m2 if ctx else None,
                checks_completed=list(ctx.completed_checks) if ctx else [],
            )
        return cls(
            valid=True,
            point_count=outcome.point_count,
            total_distance_m=outcome.total_distance_m,
            area_m2=outcome.area_m2,
            checks_completed=list(ctx.completed_checks) if ctx else [],
        )


class CollisionResponse(BaseModel):
    severity: str
    distance_m: float | None = None
    message: str | None = None
    violation: str | None = None
    territory_id: str | None = None

    @classmethod
    def from_result(cls, result: CollisionResult) -> CollisionResponse:
        return cls(
            severity=result.severity.name,
            distance_m=result.distance_m,
            message=result.message,
            violation=result.violation.value if result.violation else None,
            territory_id=result.territory_id,
        )


class ClaimRecordResponse(BaseModel):
    record: dict[str, Any]


class SessionResponse(BaseModel):
    id: str
    player_id: str
    state: str
    point_count: int = 0
    path_version: int = 0
    outcome: ValidationResponse | None = None
    last_collision: CollisionResponse | None = None
    termination: str | None = None
    termination_detail: str | None = None

    @classmethod
    def from_session(cls, session: TrackingSession) -> SessionResponse:
        path = session.path()
        collision = session.last_collision
        termination = session.termination
        return cls(
            id=session.id,
            player_id=session.player_id,
            state=session.state.value,
            point_count=len(path),
            path_version=path.version,
            outcome=_session_outcome(session),
            last_collision=CollisionResponse.from_result(collision) if collision else None,
            termination=termination.reason.value if termination else None,
            termination_detail=termination.detail if termination else None,
        )


class FixResponse(BaseModel):
    status: str
    accepted: bool
    distance_m: float | None = None
    speed_kmh: float | None = None
    advisory: str | None = None
    session: SessionResponse

    @classmethod
    def from_result(cls, result: SampleResult, session: TrackingSession) -> FixResponse:
        return cls(
            status=result.status.value,
            accepted=result.accepted,
            distance_m=result.distance_m,
            speed_kmh=result.speed_kmh,
            advisory=result.advisory,
            session=SessionResponse.from_session(session),
        )


class JournalResponse(BaseModel):
    session_id: str
    text: str


def _session_outcome(session: TrackingSession) -> ValidationResponse | None:
    outcome = session.outcome
    if outcome is None:
        return None
    response = ValidationResponse.from_outcome(outcome)
    claimed = session.claimed_path
    if not response.valid and claimed is not None:
        response = response.model_copy(update={"point_count": len(claimed)})
    return response
