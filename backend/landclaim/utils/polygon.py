"""Polygon helpers built on the geodesy primitives. No engine imports."""

from __future__ import annotations

import numpy as np
from numpy.typing import ArrayLike, NDArray

from landclaim.utils.geo import EARTH_RADIUS_M, as_points, distances_from, segments_properly_intersect


def open_ring(points: ArrayLike) -> NDArray[np.float64]:
    """Drop an explicit closing vertex so the ring is implicitly wrapped."""
    pts = as_points(points)
    if len(pts) > 1 and np.array_equal(pts[0], pts[-1]):
        return pts[:-1]
    return pts


def distinct_vertex_count(points: ArrayLike) -> int:
    pts = as_points(points)
    if len(pts) == 0:
        return 0
    return len(np.unique(pts, axis=0))


def signed_ring_area(points: ArrayLike, radius: float = EARTH_RADIUS_M) -> float:
    """Spherically-corrected shoelace sum over the cyclic ring, in m².

    Accumulates ``(lon2 - lon1) * (2 + sin(lat1) + sin(lat2))`` in radians and
    scales by ``R² / 2``. This is a small-polygon approximation: it tracks the
    true area closely for sub-kilometer parcels away from the poles and drifts
    for large or polar polygons. Sign follows traversal direction.
    """
    pts = np.radians(as_points(points))
    if len(pts) < 3:
        return 0.0
    nxt = np.roll(pts, -1, axis=0)
    terms = (nxt[:, 1] - pts[:, 1]) * (2 + np.sin(pts[:, 0]) + np.sin(nxt[:, 0]))
    return float(np.sum(terms) * radius * radius / 2.0)


def ring_area(points: ArrayLike, radius: float = EARTH_RADIUS_M) -> float:
    """Absolute enclosed area in m² (see ``signed_ring_area``)."""
    return abs(signed_ring_area(points, radius))


def find_self_intersection(points: ArrayLike, skip: int = 2) -> tuple[int, int] | None:
    """Return the first pair of crossing segment indices ``(i, j)``, else None.

    Segment ``k`` joins points ``k`` and ``k + 1``; the path is not wrapped.
    Pairs where ``i`` is among the first ``skip`` segments and ``j`` among the
    last ``skip`` are not compared: both ends of a closed walk meet near the
    start point and would read as crossings.
    """
    pts = as_points(points)
    if len(pts) < 4:
        return None

    segment_count = len(pts) - 1
    for i in range(segment_count):
        p1, p2 = pts[i], pts[i + 1]
        for j in range(i + 2, segment_count):
            if i < skip and j >= segment_count - skip:
                continue
            if segments_properly_intersect(p1, p2, pts[j], pts[j + 1]):
                return (i, j)
    return None


def has_self_intersection(points: ArrayLike, skip: int = 2) -> bool:
    return find_self_intersection(points, skip) is not None


def _ccw(a: NDArray[np.float64], b: NDArray[np.float64], c: NDArray[np.float64]) -> NDArray[np.bool_]:
    """Elementwise ``orientation(a, b, c) is CCW`` over broadcast lat/lon arrays."""
    return (c[..., 0] - a[..., 0]) * (b[..., 1] - a[..., 1]) - (b[..., 0] - a[..., 0]) * (
        c[..., 1] - a[..., 1]
    ) > 0


def first_crossing_edge(p1: ArrayLike, p2: ArrayLike, ring: ArrayLike) -> int | None:
    """Index of the first ring edge properly crossed by segment p1-p2, else None.

    Edge ``k`` joins vertex ``k`` to vertex ``k + 1`` (wrapping). Same sign test
    as ``segments_properly_intersect``, evaluated over all edges at once.
    """
    a = as_points(ring)
    if len(a) < 2:
        return None
    b = np.roll(a, -1, axis=0)
    s1 = np.asarray(p1, dtype=np.float64)
    s2 = np.asarray(p2, dtype=np.float64)
    hits = (_ccw(s1, a, b) != _ccw(s2, a, b)) & (_ccw(s1, s2, a) != _ccw(s1, s2, b))
    idx = np.flatnonzero(hits)
    return int(idx[0]) if len(idx) else None


def nearest_vertex(
    point: ArrayLike, ring: ArrayLike, radius: float = EARTH_RADIUS_M
) -> tuple[int, float]:
    """Index of and great-circle distance to the closest ring vertex."""
    dists = distances_from(np.asarray(point, dtype=np.float64), ring, radius)
    if len(dists) == 0:
        raise ValueError("Cannot measure distance to an empty ring")
    idx = int(np.argmin(dists))
    return idx, float(dists[idx])
