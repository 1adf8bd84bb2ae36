"""Shared test fixtures.

Geometry is laid out in local meters around ORIGIN (low latitude) and
converted to lat/lon with ``offset``.
"""

from __future__ import annotations

import pytest

from landclaim.engine.types import GeoFix, GeoPoint, Territory
from landclaim.utils.geo import offset

ORIGIN = (1.0, 103.8)

# Walking pace used for synthetic fixes: ~16.7m every 10s = 6 km/h
STEP_SECONDS = 10.0


def at(north_m: float, east_m: float, origin: tuple[float, float] = ORIGIN) -> GeoPoint:
    return GeoPoint(*offset(origin, north_m, east_m))


def square_loop(side: float = 50.0, per_side: int = 3) -> list[GeoPoint]:
    """Open square walk, counter-clockwise from ORIGIN; ``4 * per_side`` points."""
    step = side / per_side
    corners = [(0.0, 0.0), (0.0, side), (side, side), (side, 0.0)]
    directions = [(0.0, 1.0), (1.0, 0.0), (0.0, -1.0), (-1.0, 0.0)]
    points = []
    for (n0, e0), (dn, de) in zip(corners, directions):
        for k in range(per_side):
            points.append(at(n0 + dn * step * k, e0 + de * step * k))
    return points


# Bowtie: the two diagonals cross at (30, 30) in the middle of segments 2 and 11.
FIGURE_EIGHT_METERS = [
    (0, 0), (12, 12), (24, 24), (36, 36), (48, 48), (60, 60),
    (45, 60), (30, 60), (15, 60), (0, 60),
    (12, 48), (24, 36), (36, 24), (48, 12), (60, 0),
    (44, 0), (28, 0),
]


def figure_eight() -> list[GeoPoint]:
    return [at(n, e) for n, e in FIGURE_EIGHT_METERS]


def fixes_for(points: list[GeoPoint], step_seconds: float = STEP_SECONDS, t0: float = 1_700_000_000.0) -> list[GeoFix]:
    return [GeoFix(p.latitude, p.longitude, t0 + i * step_seconds) for i, p in enumerate(points)]


def square_territory(
    territory_id: str,
    owner_id: str,
    south_west: tuple[float, float],
    side: float = 50.0,
) -> Territory:
    """Axis-aligned square territory; ``south_west`` is a (north_m, east_m) offset from ORIGIN."""
    n, e = south_west
    ring = (at(n, e), at(n, e + side), at(n + side, e + side), at(n + side, e))
    return Territory(id=territory_id, owner_id=owner_id, ring=ring, area_m2=side * side)


@pytest.fixture
def square_path() -> list[GeoPoint]:
    return square_loop()


@pytest.fixture
def figure_eight_path() -> list[GeoPoint]:
    return figure_eight()


@pytest.fixture
def rival_territory() -> Territory:
    """100m square owned by someone else, 200m east of ORIGIN."""
    return square_territory("t-rival", "rival-player", (-50.0, 200.0), side=100.0)
