"""CollisionEngine — compares a live claim against other players' territories.

Both entry points are pure given the territory snapshot passed in. Territories
owned by the evaluating player (case-insensitive id match) are ignored.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

import numpy as np
from numpy.typing import ArrayLike, NDArray

from landclaim.engine.config import ClaimConfig, DEFAULT_CONFIG
from landclaim.engine.context import PathSnapshot
from landclaim.engine.types import (
    SAFE_RESULT,
    CollisionResult,
    CollisionSeverity,
    Territory,
    ViolationKind,
)
from landclaim.utils.geo import point_in_polygon
from landclaim.utils.polygon import first_crossing_edge, nearest_vertex

logger = logging.getLogger(__name__)


def _bounds_overlap(
    a: tuple[float, float, float, float], b: tuple[float, float, float, float]
) -> bool:
    return a[0] <= b[2] and b[0] <= a[2] and a[1] <= b[3] and b[1] <= a[3]


def _path_bounds(points: NDArray[np.float64]) -> tuple[float, float, float, float]:
    """(min_lon, min_lat, max_lon, max_lat), matching shapely's axis order."""
    return (
        float(np.min(points[:, 1])),
        float(np.min(points[:, 0])),
        float(np.max(points[:, 1])),
        float(np.max(points[:, 0])),
    )


class CollisionEngine:
    """Hard violations and the proximity ladder for an in-progress claim."""

    def __init__(self, config: ClaimConfig | None = None) -> None:
        self.config = config or DEFAULT_CONFIG

    @staticmethod
    def competitors(territories: Iterable[Territory], self_id: str) -> list[Territory]:
        return [t for t in territories if not t.owned_by(self_id)]

    def classify_distance(self, distance_m: float) -> CollisionSeverity:
        """Map a distance onto the ladder; each boundary belongs to the nearer tier."""
        cfg = self.config
        if distance_m > cfg.caution_distance:
            return CollisionSeverity.SAFE
        if distance_m > cfg.warning_distance:
            return CollisionSeverity.CAUTION
        if distance_m > cfg.danger_distance:
            return CollisionSeverity.WARNING
        return CollisionSeverity.DANGER

    def check_start_point(
        self, point: ArrayLike, territories: Iterable[Territory], self_id: str
    ) -> CollisionResult:
        """A claim may not start inside someone else's territory."""
        lat, lon = (float(v) for v in np.asarray(point, dtype=np.float64))
        for territory in self.competitors(territories, self_id):
            min_lon, min_lat, max_lon, max_lat = territory.bounds
            if not (min_lon <= lon <= max_lon and min_lat <= lat <= max_lat):
                continue
            if point_in_polygon((lat, lon), territory.vertices):
                logger.error("Start point lies inside territory %s", territory.id)
                return CollisionResult(
                    severity=CollisionSeverity.VIOLATION,
                    violation=ViolationKind.POINT_IN_TERRITORY,
                    territory_id=territory.id,
                    message="Cannot start a claim inside another player's territory",
                )
        return SAFE_RESULT

    def check_path(
        self,
        path: PathSnapshot | ArrayLike,
        territories: Iterable[Territory],
        self_id: str,
    ) -> CollisionResult:
        snapshot = path if isinstance(path, PathSnapshot) else PathSnapshot.of(path)
        pts = snapshot.points
        others = self.competitors(territories, self_id)
        if len(pts) == 0 or not others:
            return SAFE_RESULT

        crossing = self._find_crossing(pts, others)
        if crossing is not None:
            return crossing

        latest = snapshot.last
        for territory in others:
            if point_in_polygon(latest, territory.vertices):
                logger.error("Current position inside territory %s", territory.id)
                return CollisionResult(
                    severity=CollisionSeverity.VIOLATION,
                    violation=ViolationKind.POINT_IN_TERRITORY,
                    territory_id=territory.id,
                    message="Entered another player's territory",
                )

        nearest_id = None
        nearest = float("inf")
        for territory in others:
            _, dist = nearest_vertex(latest, territory.vertices, self.config.earth_radius)
            if dist < nearest:
                nearest, nearest_id = dist, territory.id

        severity = self.classify_distance(nearest)
        message = None
        if severity is not CollisionSeverity.SAFE:
            message = f"{nearest:.0f}m from another player's territory"
            logger.info("Proximity %s: %.0fm from territory %s", severity.name, nearest, nearest_id)
        return CollisionResult(
            severity=severity,
            distance_m=nearest,
            message=message,
            territory_id=nearest_id if severity is not CollisionSeverity.SAFE else None,
        )

    def _find_crossing(
        self, pts: NDArray[np.float64], others: list[Territory]
    ) -> CollisionResult | None:
        if len(pts) < 2:
            return None
        path_bounds = _path_bounds(pts)
        for territory in others:
            if not _bounds_overlap(path_bounds, territory.bounds):
                continue
            ring = territory.vertices
            for k in range(len(pts) - 1):
                edge = first_crossing_edge(pts[k], pts[k + 1], ring)
                if edge is not None:
                    logger.error(
                        "Path segment %d-%d crosses edge %d of territory %s",
                        k, k + 1, edge, territory.id,
                    )
                    return CollisionResult(
                        severity=CollisionSeverity.VIOLATION,
                        violation=ViolationKind.PATH_CROSSES_TERRITORY,
                        territory_id=territory.id,
                        message="Path crossed another player's territory boundary",
                    )
        return None
