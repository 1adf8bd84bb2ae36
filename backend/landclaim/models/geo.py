"""Wire shapes for points and territories, matching the territory-store row layout."""

from __future__ import annotations

from pydantic import BaseModel, Field

from landclaim.engine.records import load_territories
from landclaim.engine.types import GeoFix, GeoPoint, Territory


class PointModel(BaseModel):
    lat: float = Field(..., ge=-90, le=90)
    lon: float = Field(..., ge=-180, le=180)

    def to_point(self) -> GeoPoint:
        return GeoPoint(self.lat, self.lon)


class FixModel(BaseModel):
    model_config = {"allow_inf_nan": False}

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    timestamp: float = Field(..., description="Epoch seconds")

    def to_fix(self) -> GeoFix:
        return GeoFix(self.latitude, self.longitude, self.timestamp)


class TerritoryModel(BaseModel):
    id: str
    user_id: str
    name: str | None = None
    path: list[PointModel]
    area: float = 0.0
    point_count: int | None = None
    is_active: bool | None = True


def points_of(path: list[PointModel]) -> list[GeoPoint]:
    return [p.to_point() for p in path]


def territories_of(models: list[TerritoryModel]) -> tuple[Territory, ...]:
    """Active territories only; raises RecordError on a malformed ring."""
    return load_territories(m.model_dump() for m in models)
