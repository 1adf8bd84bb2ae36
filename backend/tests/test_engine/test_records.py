"""Tests for claim records and territory-store rows."""

from datetime import datetime, timezone

import pytest

from landclaim.engine.records import (
    RecordError,
    bounding_box,
    build_claim_record,
    load_territories,
    path_from_json,
    path_to_json,
    ring_to_wkt,
    territory_from_record,
)
from landclaim.engine.types import GeoPoint

TRIANGLE = [(1.0, 103.0), (1.0, 103.001), (1.001, 103.0)]


def _row(**overrides):
    row = {
        "id": "t-1",
        "user_id": "owner",
        "name": "Park",
        "path": [{"lat": lat, "lon": lon} for lat, lon in TRIANGLE],
        "area": 6000.0,
        "point_count": 3,
        "is_active": True,
    }
    row.update(overrides)
    return row


def test_wkt_is_lon_first_and_closed():
    wkt = ring_to_wkt(TRIANGLE)
    assert wkt.startswith("SRID=4326;POLYGON ((103 1, ")
    assert wkt.endswith("103 1))")


def test_wkt_of_degenerate_path():
    assert ring_to_wkt(TRIANGLE[:2]) == "SRID=4326;POLYGON EMPTY"


def test_bounding_box():
    bbox = bounding_box(TRIANGLE)
    assert (bbox.min_lat, bbox.max_lat) == (1.0, 1.001)
    assert (bbox.min_lon, bbox.max_lon) == (103.0, 103.001)


def test_path_json():
    encoded = path_to_json(TRIANGLE)
    assert encoded[1] == {"lat": 1.0, "lon": 103.001}
    assert path_from_json(encoded) == [GeoPoint(*p) for p in TRIANGLE]


def test_path_from_json_skips_partial_entries():
    assert path_from_json([{"lat": 1.0}, {"lat": 1.0, "lon": 2.0}]) == [GeoPoint(1.0, 2.0)]


def test_build_claim_record():
    started = datetime(2024, 5, 1, 9, 30, tzinfo=timezone.utc)
    record = build_claim_record("me", TRIANGLE, 6100.5, started)
    assert record["user_id"] == "me"
    assert record["point_count"] == 3
    assert record["area"] == 6100.5
    assert record["bbox_max_lat"] == 1.001
    assert record["started_at"] == "2024-05-01T09:30:00+00:00"
    assert record["is_active"] is True
    assert len(record["path"]) == 3


def test_territory_from_record():
    territory = territory_from_record(_row())
    assert territory.id == "t-1"
    assert territory.owner_id == "owner"
    assert territory.name == "Park"
    assert len(territory.ring) == 3


def test_closed_ring_in_row_is_opened():
    path = _row()["path"] + [_row()["path"][0]]
    assert len(territory_from_record(_row(path=path)).ring) == 3


def test_missing_field():
    row = _row()
    del row["user_id"]
    with pytest.raises(RecordError, match="user_id"):
        territory_from_record(row)


def test_degenerate_ring():
    with pytest.raises(RecordError):
        territory_from_record(_row(path=_row()["path"][:2]))


def test_load_territories_keeps_active_only():
    rows = [_row(), _row(id="t-2", is_active=False), _row(id="t-3", is_active=None)]
    assert [t.id for t in load_territories(rows)] == ["t-1", "t-3"]
