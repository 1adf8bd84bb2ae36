"""Frozen path snapshots and the validation context flowing through the checks.

Every traversal (self-intersection, area, collision) reads a PathSnapshot,
never the live buffer the sampler appends to.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

import numpy as np
from numpy.typing import ArrayLike, NDArray

from landclaim.engine.config import ClaimConfig, DEFAULT_CONFIG
from landclaim.engine.types import GeoPoint
from landclaim.utils.geo import as_points


@dataclass(frozen=True)
class PathSnapshot:
    """Immutable view of a path at one version."""

    # Nx2 read-only array of (lat, lon)
    points: NDArray[np.float64]
    version: int = 0

    @classmethod
    def of(cls, points: ArrayLike, version: int = 0) -> PathSnapshot:
        arr = np.array(as_points(points), dtype=np.float64, copy=True)
        arr.flags.writeable = False
        return cls(points=arr, version=version)

    def __len__(self) -> int:
        return len(self.points)

    @property
    def first(self) -> GeoPoint | None:
        if len(self.points) == 0:
            return None
        return GeoPoint(float(self.points[0, 0]), float(self.points[0, 1]))

    @property
    def last(self) -> GeoPoint | None:
        if len(self.points) == 0:
            return None
        return GeoPoint(float(self.points[-1, 0]), float(self.points[-1, 1]))

    def to_points(self) -> list[GeoPoint]:
        return [GeoPoint(float(lat), float(lon)) for lat, lon in self.points]


@dataclass
class ValidationContext:
    """Shared state for one validation run."""

    snapshot: PathSnapshot
    config: ClaimConfig = DEFAULT_CONFIG

    # --- Measurements, filled in by the checks ---
    total_distance_m: float | None = None
    area_m2: float | None = None
    intersection: tuple[int, int] | None = None

    # Anything else a check wants to report, keyed by check ID
    details: dict[str, Any] = field(default_factory=dict)
    completed_checks: list[str] = field(default_factory=list)

    @property
    def points(self) -> NDArray[np.float64]:
        return self.snapshot.points

    @property
    def point_count(self) -> int:
        return len(self.snapshot)
