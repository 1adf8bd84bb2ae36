"""Tests for the tracking session state machine."""

from __future__ import annotations

import logging
import time

import pytest

from landclaim.engine.config import ClaimConfig
from landclaim.engine.sampler import SampleStatus
from landclaim.engine.session import (
    SessionListener,
    SessionStateError,
    SessionStore,
    TerminationReason,
    TrackingSession,
)
from landclaim.engine.types import (
    CollisionSeverity,
    GeoFix,
    InvalidReason,
    SessionState,
    Valid,
    ViolationKind,
)
from tests.conftest import at, figure_eight, fixes_for, square_loop

ME = "player-one"


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class Recorder(SessionListener):
    def __init__(self) -> None:
        self.outcomes = []
        self.collisions = []
        self.terminations = []

    def on_outcome(self, session, outcome):
        self.outcomes.append(outcome)

    def on_collision(self, session, result):
        self.collisions.append(result)

    def on_terminated(self, session, termination):
        self.terminations.append(termination)


def _walk(session: TrackingSession, fixes: list[GeoFix]):
    session.start(fixes[0])
    return [session.add_fix(f) for f in fixes[1:]]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def session(recorder) -> TrackingSession:
    return TrackingSession(ME, listener=recorder, clock=FakeClock())


def test_square_walk_is_claimed(session, recorder):
    results = _walk(session, fixes_for(square_loop()))
    assert all(r.accepted for r in results)
    assert session.state is SessionState.VALID
    assert isinstance(session.outcome, Valid)
    assert session.outcome.point_count == 12
    assert len(session.claimed_path) == 12
    assert recorder.outcomes == [session.outcome]


def test_claim_record_after_valid(session):
    _walk(session, fixes_for(square_loop()))
    record = session.claim_record()
    assert record["user_id"] == ME
    assert record["point_count"] == 12
    assert record["polygon"].startswith("SRID=4326;POLYGON")
    assert record["started_at"] == session.started_at.isoformat()


def test_claim_record_requires_valid(session):
    session.start()
    with pytest.raises(SessionStateError):
        session.claim_record()


def test_fixes_ignored_after_closure(session):
    fixes = fixes_for(square_loop())
    _walk(session, fixes)
    late = GeoFix(*at(100, 100), fixes[-1].timestamp + 60)
    assert session.add_fix(late).status is SampleStatus.INACTIVE
    assert len(session.path()) == 12


def test_figure_eight_is_rejected(session, recorder):
    _walk(session, fixes_for(figure_eight()))
    assert session.state is SessionState.INVALID
    assert session.outcome.reason is InvalidReason.SELF_INTERSECTING
    assert recorder.outcomes[0].reason is InvalidReason.SELF_INTERSECTING


# Out east along a 1m-wide sliver and back: closes with too little area.
SLIVER_METERS = [
    (0, 0), (0, 12), (0, 24), (0, 36), (0, 48), (0, 60),
    (1, 48), (1, 36), (1, 24), (1, 12),
]


def test_rejected_claim_keeps_walking(session, recorder):
    fixes = fixes_for([at(n, e) for n, e in SLIVER_METERS])
    _walk(session, fixes)
    assert session.state is SessionState.INVALID
    assert session.outcome.reason is InvalidReason.INSUFFICIENT_AREA
    assert len(session.path()) == 10

    # Heading north widens the parcel; closure is retried on this fix
    onward = GeoFix(*at(13, 12), fixes[-1].timestamp + 10)
    result = session.add_fix(onward)
    assert result.accepted
    assert session.state is SessionState.VALID
    assert session.outcome.point_count == 11
    assert [o.is_valid for o in recorder.outcomes] == [False, True]


def test_fixes_accepted_after_self_intersection(session):
    fixes = fixes_for(figure_eight())
    _walk(session, fixes)
    assert session.state is SessionState.INVALID

    result = session.add_fix(GeoFix(*at(13, 0), fixes[-1].timestamp + 10))
    assert result.status is SampleStatus.ACCEPTED
    assert len(session.path()) == 18
    # Still crosses itself, so the retried closure is rejected again
    assert session.outcome.reason is InvalidReason.SELF_INTERSECTING


def test_too_close_fix_leaves_invalid_claim_in_place(session):
    fixes = fixes_for(figure_eight())
    _walk(session, fixes)
    last = session.path().last
    result = session.add_fix(GeoFix(last.latitude, last.longitude, fixes[-1].timestamp + 10))
    assert result.status is SampleStatus.TOO_CLOSE
    assert session.state is SessionState.INVALID


def test_clear_path_allows_retry(session):
    _walk(session, fixes_for(figure_eight()))
    session.clear_path()
    assert session.state is SessionState.TRACKING
    assert session.is_tracking
    assert session.outcome is None
    assert len(session.path()) == 0

    fixes = fixes_for(square_loop(), t0=1_800_000_000.0)
    for fix in fixes:
        session.add_fix(fix)
    assert session.state is SessionState.VALID


def test_clear_path_on_idle_session(session):
    with pytest.raises(SessionStateError):
        session.clear_path()


def test_start_twice_refused(session):
    session.start()
    with pytest.raises(SessionStateError):
        session.start()


def test_speed_violation_terminates(session, recorder):
    t0 = 1_700_000_000.0
    session.start(GeoFix(*at(0, 0), t0))
    session.add_fix(GeoFix(*at(0, 20), t0 + 10))
    result = session.add_fix(GeoFix(*at(0, 120), t0 + 20))  # 36 km/h
    assert result.status is SampleStatus.SPEED_VIOLATION
    assert session.state is SessionState.IDLE
    assert len(session.path()) == 0
    assert session.termination.reason is TerminationReason.SPEED_VIOLATION
    assert recorder.terminations == [session.termination]


def test_stop_discards_path(session):
    _walk(session, fixes_for(square_loop()[:5]))
    session.stop()
    assert session.state is SessionState.IDLE
    assert len(session.path()) == 0
    assert session.termination.reason is TerminationReason.STOPPED
    assert session.add_fix(GeoFix(*at(0, 0), 0.0)).status is SampleStatus.INACTIVE


def test_stop_when_idle_is_noop(session, recorder):
    session.stop()
    assert session.termination is None
    assert recorder.terminations == []


def test_start_inside_rival_refused(recorder, rival_territory):
    session = TrackingSession(ME, territories=[rival_territory], listener=recorder)
    result = session.start(GeoFix(*at(0, 250), 0.0))
    assert result.violation is ViolationKind.POINT_IN_TERRITORY
    assert session.state is SessionState.IDLE
    assert session.last_collision is result
    assert len(session.path()) == 0


def test_tick_runs_on_interval(recorder, rival_territory):
    clock = FakeClock()
    session = TrackingSession(ME, territories=[rival_territory], listener=recorder, clock=clock)
    session.start(GeoFix(*at(-70, 200), 0.0))  # 20m south of the rival's corner

    clock.now = 5.0
    assert session.tick() is None
    clock.now = 10.0
    result = session.tick()
    assert result.severity is CollisionSeverity.DANGER
    assert session.last_collision is result
    assert session.state is SessionState.TRACKING
    # Next one is due a full interval later
    clock.now = 15.0
    assert session.tick() is None
    clock.now = 20.0
    assert session.tick() is not None
    assert len(recorder.collisions) == 2


def test_collision_violation_terminates(recorder, rival_territory):
    session = TrackingSession(ME, territories=[rival_territory], listener=recorder, clock=FakeClock())
    _walk(session, fixes_for([at(0, 150), at(0, 165), at(0, 180), at(0, 195), at(0, 210)]))
    result = session.check_collisions()
    assert result.violation is ViolationKind.PATH_CROSSES_TERRITORY
    assert session.state is SessionState.IDLE
    assert len(session.path()) == 0
    assert session.termination.reason is TerminationReason.TERRITORY_COLLISION
    assert recorder.collisions == [result]
    assert session.check_collisions() is None


def test_update_territories(session, rival_territory):
    session.start(GeoFix(*at(-70, 200), 0.0))
    assert session.check_collisions().severity is CollisionSeverity.SAFE
    session.update_territories([rival_territory])
    assert session.check_collisions().severity is CollisionSeverity.DANGER


def test_journal_records_session(session):
    _walk(session, fixes_for(square_loop()))
    text = session.journal.text()
    assert "Tracking started" in text
    assert "Loop closed with 12 points" in text
    assert "[INFO]" in text


def test_journal_points_at_debug(session):
    _walk(session, fixes_for(square_loop()))
    points = [e for e in session.journal.entries if e.message.startswith("Recorded point")]
    assert len(points) == 11
    assert all(e.level == logging.DEBUG for e in points)


def test_auto_schedule_runs_and_stops(recorder, rival_territory):
    config = ClaimConfig(collision_check_interval_seconds=0.05)
    session = TrackingSession(
        ME, territories=[rival_territory], config=config, listener=recorder, auto_schedule=True
    )
    session.start(GeoFix(*at(-70, 200), 0.0))
    deadline = time.monotonic() + 2.0
    while not recorder.collisions and time.monotonic() < deadline:
        time.sleep(0.01)
    session.stop()

    assert recorder.collisions
    assert recorder.collisions[0].severity is CollisionSeverity.DANGER
    seen = len(recorder.collisions)
    time.sleep(0.15)
    assert len(recorder.collisions) == seen


def test_store_lifecycle(rival_territory):
    store = SessionStore()
    session = store.create(ME, [rival_territory])
    assert store.get(session.id) is session
    assert session.territories == (rival_territory,)
    assert len(store) == 1

    session.start()
    assert store.remove(session.id) is session
    assert session.state is SessionState.IDLE
    assert store.get(session.id) is None

    store.create("a")
    store.create("b")
    store.close_all()
    assert len(store) == 0


def test_store_evicts_idle_sessions():
    clock = FakeClock()
    store = SessionStore(idle_timeout=60.0, clock=clock)
    old = store.create("a")
    old.start()
    clock.now = 30.0
    recent = store.create("b")
    recent.start()

    clock.now = 70.0
    assert store.prune() == [old.id]
    assert store.get(old.id) is None
    assert old.state is SessionState.IDLE
    assert old.termination.reason is TerminationReason.STOPPED
    assert store.get(recent.id) is recent


def test_store_activity_keeps_session():
    clock = FakeClock()
    store = SessionStore(idle_timeout=60.0, clock=clock)
    session = store.create(ME)
    fixes = fixes_for(square_loop()[:3])
    session.start(fixes[0])
    clock.now = 50.0
    session.add_fix(fixes[1])
    clock.now = 100.0
    store.create("other")  # prunes on create
    assert store.get(session.id) is session
    clock.now = 200.0
    store.create("third")
    assert store.get(session.id) is None
