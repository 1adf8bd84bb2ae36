"""Value types shared across the claim engine."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from functools import cached_property
from typing import NamedTuple, Union

import numpy as np
from numpy.typing import NDArray
from shapely.geometry import Polygon

from landclaim.utils.polygon import distinct_vertex_count, open_ring


class GeoPoint(NamedTuple):
    latitude: float
    longitude: float


class GeoFix(NamedTuple):
    """A raw location sample from the platform location service."""

    latitude: float
    longitude: float
    timestamp: float  # epoch seconds

    @property
    def point(self) -> GeoPoint:
        return GeoPoint(self.latitude, self.longitude)


@dataclass(frozen=True)
class Territory:
    """A claimed polygon. Read-only snapshot of the authoritative store copy."""

    id: str
    owner_id: str
    ring: tuple[GeoPoint, ...]
    area_m2: float = 0.0
    name: str | None = None
    point_count: int | None = None
    is_active: bool = True

    def __post_init__(self) -> None:
        pts = open_ring([(float(p[0]), float(p[1])) for p in self.ring])
        if distinct_vertex_count(pts) < 3:
            raise ValueError(f"Territory {self.id!r} ring needs at least 3 distinct vertices")
        object.__setattr__(self, "ring", tuple(GeoPoint(float(lat), float(lon)) for lat, lon in pts))

    @cached_property
    def vertices(self) -> NDArray[np.float64]:
        """Read-only ``(n, 2)`` lat/lon array of the open ring."""
        arr = np.array(self.ring, dtype=np.float64)
        arr.flags.writeable = False
        return arr

    @cached_property
    def polygon(self) -> Polygon:
        """Shapely polygon in (lon, lat) axis order."""
        return Polygon([(p.longitude, p.latitude) for p in self.ring])

    @cached_property
    def bounds(self) -> tuple[float, float, float, float]:
        """(min_lon, min_lat, max_lon, max_lat)."""
        return self.polygon.bounds

    def owned_by(self, player_id: str) -> bool:
        return self.owner_id.casefold() == player_id.casefold()


class InvalidReason(str, enum.Enum):
    INSUFFICIENT_POINTS = "insufficient_points"
    INSUFFICIENT_DISTANCE = "insufficient_distance"
    SELF_INTERSECTING = "self_intersecting"
    INSUFFICIENT_AREA = "insufficient_area"


@dataclass(frozen=True)
class Valid:
    area_m2: float
    point_count: int
    total_distance_m: float

    is_valid = True


@dataclass(frozen=True)
class Invalid:
    reason: InvalidReason
    detail: str = ""

    is_valid = False


ValidationOutcome = Union[Valid, Invalid]


class CollisionSeverity(enum.IntEnum):
    """Proximity ladder; VIOLATION sits above it and always wins."""

    SAFE = 0
    CAUTION = 1
    WARNING = 2
    DANGER = 3
    VIOLATION = 4

    @property
    def is_fatal(self) -> bool:
        return self is CollisionSeverity.VIOLATION


class ViolationKind(str, enum.Enum):
    POINT_IN_TERRITORY = "point_in_territory"
    PATH_CROSSES_TERRITORY = "path_crosses_territory"


@dataclass(frozen=True)
class CollisionResult:
    severity: CollisionSeverity
    distance_m: float | None = None
    message: str | None = None
    violation: ViolationKind | None = None
    territory_id: str | None = None

    @property
    def is_violation(self) -> bool:
        return self.severity.is_fatal


SAFE_RESULT = CollisionResult(severity=CollisionSeverity.SAFE)


class SessionState(str, enum.Enum):
    IDLE = "idle"
    TRACKING = "tracking"
    CLOSED = "closed"
    VALID = "valid"
    INVALID = "invalid"


@dataclass(frozen=True)
class BoundingBox:
    min_lat: float
    max_lat: float
    min_lon: float
    max_lon: float
