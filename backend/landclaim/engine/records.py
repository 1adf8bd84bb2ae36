"""Claim records — conversion between engine geometry and territory-store rows.

Row layout (one territory):
    id, user_id, name?, path: [{"lat": .., "lon": ..}, ...], area,
    point_count?, is_active?

No network access happens here; the upload/download collaborator sends and
receives these dicts.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any

import numpy as np
from numpy.typing import ArrayLike
from shapely.geometry import Polygon

from landclaim.engine.types import BoundingBox, GeoPoint, Territory
from landclaim.utils.geo import as_points

logger = logging.getLogger(__name__)

SRID = 4326


class RecordError(ValueError):
    """A territory-store row could not be interpreted."""


def path_to_json(points: ArrayLike) -> list[dict[str, float]]:
    return [{"lat": float(lat), "lon": float(lon)} for lat, lon in as_points(points)]


def path_from_json(path: Iterable[Mapping[str, Any]]) -> list[GeoPoint]:
    """Entries missing ``lat`` or ``lon`` are skipped."""
    points = []
    for entry in path:
        lat, lon = entry.get("lat"), entry.get("lon")
        if lat is None or lon is None:
            continue
        points.append(GeoPoint(float(lat), float(lon)))
    return points


def ring_to_wkt(points: ArrayLike) -> str:
    """EWKT polygon, longitude first, explicitly closed."""
    pts = as_points(points)
    if len(pts) < 3:
        return f"SRID={SRID};POLYGON EMPTY"
    # shapely closes the ring itself when first != last
    polygon = Polygon([(lon, lat) for lat, lon in pts])
    return f"SRID={SRID};{polygon.wkt}"


def bounding_box(points: ArrayLike) -> BoundingBox:
    pts = as_points(points)
    if len(pts) == 0:
        return BoundingBox(0.0, 0.0, 0.0, 0.0)
    return BoundingBox(
        min_lat=float(np.min(pts[:, 0])),
        max_lat=float(np.max(pts[:, 0])),
        min_lon=float(np.min(pts[:, 1])),
        max_lon=float(np.max(pts[:, 1])),
    )


def build_claim_record(
    owner_id: str,
    points: ArrayLike,
    area_m2: float,
    started_at: datetime,
) -> dict[str, Any]:
    """Row to insert for a freshly validated claim."""
    pts = as_points(points)
    bbox = bounding_box(pts)
    logger.info("Prepared claim record: %d points, %.0fm²", len(pts), area_m2)
    return {
        "user_id": owner_id,
        "path": path_to_json(pts),
        "polygon": ring_to_wkt(pts),
        "bbox_min_lat": bbox.min_lat,
        "bbox_max_lat": bbox.max_lat,
        "bbox_min_lon": bbox.min_lon,
        "bbox_max_lon": bbox.max_lon,
        "area": float(area_m2),
        "point_count": len(pts),
        "started_at": started_at.isoformat(),
        "is_active": True,
    }


def territory_from_record(row: Mapping[str, Any]) -> Territory:
    try:
        territory_id = str(row["id"])
        owner_id = str(row["user_id"])
        path = row["path"]
    except KeyError as e:
        raise RecordError(f"Territory row missing field {e.args[0]!r}") from e

    is_active = row.get("is_active")
    try:
        return Territory(
            id=territory_id,
            owner_id=owner_id,
            ring=tuple(path_from_json(path)),
            area_m2=float(row.get("area") or 0.0),
            name=row.get("name"),
            point_count=row.get("point_count"),
            is_active=True if is_active is None else bool(is_active),
        )
    except (TypeError, ValueError) as e:
        raise RecordError(f"Territory {territory_id!r}: {e}") from e


def load_territories(rows: Iterable[Mapping[str, Any]]) -> tuple[Territory, ...]:
    """Active territories from store rows, in row order."""
    territories = tuple(
        t for t in (territory_from_record(row) for row in rows) if t.is_active
    )
    logger.debug("Loaded %d active territories", len(territories))
    return territories
