"""Leaf-node geodesy helpers. No engine imports.

Points are ``(latitude, longitude)`` pairs in degrees. Arrays are ``(n, 2)``
with latitude in column 0 and longitude in column 1.
"""

from __future__ import annotations

import enum
import math
from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

EARTH_RADIUS_M = 6371000.0

LatLon = Sequence[float]


class Orientation(enum.Enum):
    CCW = "ccw"
    # Exactly collinear triples fall on this side too.
    CW = "cw"


def as_points(points: ArrayLike) -> NDArray[np.float64]:
    """Coerce a point sequence to an ``(n, 2)`` float array."""
    arr = np.asarray(points, dtype=np.float64)
    if arr.size == 0:
        return np.empty((0, 2))
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected (n, 2) lat/lon points, got shape {arr.shape}")
    return arr


def distance(a: LatLon, b: LatLon, radius: float = EARTH_RADIUS_M) -> float:
    """Haversine great-circle distance in meters."""
    lat1 = math.radians(a[0])
    lat2 = math.radians(b[0])
    dlat = lat2 - lat1
    dlon = math.radians(b[1] - a[1])
    h = math.sin(dlat / 2) ** 2 + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    return 2 * radius * math.asin(min(1.0, math.sqrt(h)))


def distances_from(
    point: LatLon, points: ArrayLike, radius: float = EARTH_RADIUS_M
) -> NDArray[np.float64]:
    """Vectorised haversine distance from ``point`` to every row of ``points``."""
    pts = np.radians(as_points(points))
    if len(pts) == 0:
        return np.empty(0)
    lat1 = math.radians(point[0])
    lon1 = math.radians(point[1])
    dlat = pts[:, 0] - lat1
    dlon = pts[:, 1] - lon1
    h = np.sin(dlat / 2) ** 2 + math.cos(lat1) * np.cos(pts[:, 0]) * np.sin(dlon / 2) ** 2
    return 2 * radius * np.arcsin(np.minimum(1.0, np.sqrt(h)))


def segment_lengths(points: ArrayLike, radius: float = EARTH_RADIUS_M) -> NDArray[np.float64]:
    """Great-circle length of each consecutive segment."""
    pts = np.radians(as_points(points))
    if len(pts) < 2:
        return np.empty(0)
    lat1, lat2 = pts[:-1, 0], pts[1:, 0]
    dlat = lat2 - lat1
    dlon = pts[1:, 1] - pts[:-1, 1]
    h = np.sin(dlat / 2) ** 2 + np.cos(lat1) * np.cos(lat2) * np.sin(dlon / 2) ** 2
    return 2 * radius * np.arcsin(np.minimum(1.0, np.sqrt(h)))


def path_length(points: ArrayLike, radius: float = EARTH_RADIUS_M) -> float:
    """Sum of consecutive great-circle distances (open path, no wrap)."""
    return float(np.sum(segment_lengths(points, radius)))


def orientation(a: LatLon, b: LatLon, c: LatLon) -> Orientation:
    """Turn direction of a→b→c with longitude as x and latitude as y."""
    cross = (c[0] - a[0]) * (b[1] - a[1]) - (b[0] - a[0]) * (c[1] - a[1])
    return Orientation.CCW if cross > 0 else Orientation.CW


def segments_properly_intersect(p1: LatLon, p2: LatLon, p3: LatLon, p4: LatLon) -> bool:
    """True when segment p1-p2 crosses segment p3-p4 (CCW sign test)."""
    return orientation(p1, p3, p4) != orientation(p2, p3, p4) and orientation(
        p1, p2, p3
    ) != orientation(p1, p2, p4)


def point_in_polygon(point: LatLon, ring: ArrayLike) -> bool:
    """Even-odd ray casting; the ray runs north (increasing latitude).

    ``ring`` is treated cyclically, so an explicit closing vertex is optional.
    """
    pts = as_points(ring)
    n = len(pts)
    if n < 3:
        raise ValueError(f"Polygon ring needs at least 3 vertices, got {n}")

    lat, lon = float(point[0]), float(point[1])
    inside = False
    j = n - 1
    for i in range(n):
        lat_i, lon_i = pts[i]
        lat_j, lon_j = pts[j]
        if (lon_i > lon) != (lon_j > lon):
            lat_cross = lat_i + (lon - lon_i) * (lat_j - lat_i) / (lon_j - lon_i)
            if lat < lat_cross:
                inside = not inside
        j = i
    return inside


def offset(
    origin: LatLon, north_m: float, east_m: float, radius: float = EARTH_RADIUS_M
) -> tuple[float, float]:
    """Move ``origin`` by a local metric offset (flat-earth, small distances only)."""
    lat = origin[0] + math.degrees(north_m / radius)
    lon = origin[1] + math.degrees(east_m / (radius * math.cos(math.radians(origin[0]))))
    return (lat, lon)
