"""POST /api/claims/* — stateless validation of a walked loop and claim-record building."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from landclaim.dependencies import get_validator
from landclaim.engine.context import PathSnapshot, ValidationContext
from landclaim.engine.records import build_claim_record
from landclaim.engine.validator import TerritoryValidator
from landclaim.models.geo import points_of
from landclaim.models.requests import ClaimRecordRequest, ValidateRequest
from landclaim.models.responses import ClaimRecordResponse, ValidationResponse

router = APIRouter(prefix="/claims")


@router.post("/validate", response_model=ValidationResponse)
async def validate(
    req: ValidateRequest,
    validator: TerritoryValidator = Depends(get_validator),
) -> ValidationResponse:
    ctx = ValidationContext(snapshot=PathSnapshot.of(points_of(req.path)), config=validator.config)
    outcome = validator.run(ctx)
    return ValidationResponse.from_outcome(outcome, ctx)


@router.post("/record", response_model=ClaimRecordResponse)
async def record(req: ClaimRecordRequest) -> ClaimRecordResponse:
    return ClaimRecordResponse(
        record=build_claim_record(req.owner_id, points_of(req.path), req.area_m2, req.started_at)
    )
