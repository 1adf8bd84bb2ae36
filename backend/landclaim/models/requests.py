"""API request models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from landclaim.models.geo import FixModel, PointModel, TerritoryModel


class ValidateRequest(BaseModel):
    path: list[PointModel] = Field(..., description="Closed walk, in walking order")


class ClaimRecordRequest(BaseModel):
    owner_id: str
    path: list[PointModel]
    area_m2: float = Field(..., ge=0)
    started_at: datetime


class StartPointRequest(BaseModel):
    player_id: str
    point: PointModel
    territories: list[TerritoryModel] = Field(default_factory=list)


class PathCollisionRequest(BaseModel):
    player_id: str
    path: list[PointModel]
    territories: list[TerritoryModel] = Field(default_factory=list)


class CreateSessionRequest(BaseModel):
    player_id: str
    territories: list[TerritoryModel] = Field(default_factory=list)
    start: FixModel | None = Field(default=None, description="Current fix, recorded as the first point")


class TerritoriesUpdateRequest(BaseModel):
    territories: list[TerritoryModel] = Field(default_factory=list)
