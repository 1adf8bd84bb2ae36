"""POST /api/collisions/* — one-off collision checks against a supplied territory snapshot."""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from landclaim.dependencies import get_collision_engine
from landclaim.engine.collision import CollisionEngine
from landclaim.engine.records import RecordError
from landclaim.models.geo import points_of, territories_of
from landclaim.models.requests import PathCollisionRequest, StartPointRequest
from landclaim.models.responses import CollisionResponse

router = APIRouter(prefix="/collisions")


@router.post("/start", response_model=CollisionResponse)
async def start_point(
    req: StartPointRequest,
    engine: CollisionEngine = Depends(get_collision_engine),
) -> CollisionResponse:
    try:
        territories = territories_of(req.territories)
    except RecordError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    result = engine.check_start_point(req.point.to_point(), territories, req.player_id)
    return CollisionResponse.from_result(result)


@router.post("/path", response_model=CollisionResponse)
async def path(
    req: PathCollisionRequest,
    engine: CollisionEngine = Depends(get_collision_engine),
) -> CollisionResponse:
    try:
        territories = territories_of(req.territories)
    except RecordError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    result = engine.check_path(points_of(req.path), territories, req.player_id)
    return CollisionResponse.from_result(result)
