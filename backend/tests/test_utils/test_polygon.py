"""Tests for area, self-intersection and vertex-distance helpers."""

import pytest

from landclaim.utils.polygon import (
    find_self_intersection,
    first_crossing_edge,
    has_self_intersection,
    nearest_vertex,
    open_ring,
    ring_area,
    signed_ring_area,
)
from tests.conftest import ORIGIN, at, figure_eight, square_loop


def test_square_area_close_to_planar():
    assert ring_area(square_loop(50.0)) == pytest.approx(2500.0, rel=0.05)


def test_area_ignores_explicit_closing_vertex():
    loop = square_loop(50.0)
    assert ring_area(loop + [loop[0]]) == pytest.approx(ring_area(loop))


def test_signed_area_flips_with_direction():
    loop = square_loop(40.0)
    assert signed_ring_area(loop) == pytest.approx(-signed_ring_area(loop[::-1]))
    assert ring_area(loop) == ring_area(loop[::-1])


def test_area_of_degenerate_ring_is_zero():
    assert ring_area([at(0, 0), at(0, 10)]) == 0.0


def test_open_ring_drops_duplicate_closing_vertex():
    ring = [(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (0.0, 0.0)]
    assert len(open_ring(ring)) == 3
    assert len(open_ring(ring[:-1])) == 3


def test_square_has_no_self_intersection():
    assert not has_self_intersection(square_loop())


def test_figure_eight_crossing_found():
    assert find_self_intersection(figure_eight()) == (2, 11)


def test_fewer_than_four_points_never_intersect():
    assert find_self_intersection([at(0, 0), at(10, 10), at(0, 10)]) is None


def test_closure_segments_are_skipped():
    # The last segment overshoots past the start and crosses the first one.
    loop = [at(0, 0), at(0, 20), at(20, 20), at(40, 20), at(40, 0), at(20, -5), at(-5, 5)]
    assert find_self_intersection(loop) is None
    assert find_self_intersection(loop, skip=0) == (0, 5)


def test_first_crossing_edge():
    ring = [at(0, 0), at(0, 10), at(10, 10), at(10, 0)]
    # Enters through the west edge (vertex 3 → vertex 0)
    assert first_crossing_edge(at(5, -5), at(5, 5), ring) == 3
    assert first_crossing_edge(at(5, -10), at(5, -5), ring) is None


def test_nearest_vertex():
    ring = [at(0, 100), at(0, 150), at(50, 150)]
    idx, dist = nearest_vertex(ORIGIN, ring)
    assert idx == 0
    assert dist == pytest.approx(100.0, rel=1e-4)
