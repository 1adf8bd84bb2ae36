"""TrackingSession — one player's claim attempt, from first fix to outcome.

State machine:

    IDLE ──start()──▶ TRACKING ──loop closes──▶ CLOSED ──▶ VALID | INVALID
      ▲                  │   ▲                                    │
      │                  │   └──── next accepted fix (INVALID) ◀──┤
      └── stop() / speed violation / territory violation ◀────────┘

An INVALID claim is not final: the player keeps walking on the same path and
the next accepted fix reopens closure detection. ``clear_path()`` returns a
TRACKING, VALID or INVALID session to TRACKING with an empty path instead.

Two triggers touch a session: ``add_fix`` per GPS fix, and the collision
check every ``collision_check_interval_seconds`` (``tick()`` for cooperative
callers, or a PeriodicTask when ``auto_schedule`` is set). State changes
happen under one re-entrant lock and every traversal reads a PathSnapshot.
"""

from __future__ import annotations

import enum
import logging
import threading
import time
import uuid
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from landclaim.engine.closure import ClosureDetector
from landclaim.engine.collision import CollisionEngine
from landclaim.engine.config import ClaimConfig, DEFAULT_CONFIG
from landclaim.engine.context import PathSnapshot
from landclaim.engine.journal import SessionJournal
from landclaim.engine.records import build_claim_record
from landclaim.engine.sampler import PathSampler, SampleResult, SampleStatus
from landclaim.engine.scheduler import PeriodicTask
from landclaim.engine.types import (
    SAFE_RESULT,
    CollisionResult,
    CollisionSeverity,
    GeoFix,
    Invalid,
    SessionState,
    Territory,
    Valid,
    ValidationOutcome,
)
from landclaim.engine.validator import TerritoryValidator

logger = logging.getLogger(__name__)

# States in which fixes are sampled and collision checks run
_WALKING = (SessionState.TRACKING, SessionState.INVALID)


class SessionStateError(RuntimeError):
    """Operation not allowed in the session's current state."""


class TerminationReason(str, enum.Enum):
    STOPPED = "stopped"
    SPEED_VIOLATION = "speed_violation"
    TERRITORY_COLLISION = "territory_collision"


@dataclass(frozen=True)
class Termination:
    reason: TerminationReason
    detail: str | None = None


class SessionListener:
    """Receives session signals. Override what you need; defaults do nothing."""

    def on_outcome(self, session: TrackingSession, outcome: ValidationOutcome) -> None:
        pass

    def on_collision(self, session: TrackingSession, result: CollisionResult) -> None:
        pass

    def on_terminated(self, session: TrackingSession, termination: Termination) -> None:
        pass


class TrackingSession:
    def __init__(
        self,
        player_id: str,
        *,
        territories: Iterable[Territory] = (),
        config: ClaimConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
        sampler: PathSampler | None = None,
        validator: TerritoryValidator | None = None,
        collision_engine: CollisionEngine | None = None,
        listener: SessionListener | None = None,
        auto_schedule: bool = False,
        session_id: str | None = None,
    ) -> None:
        self.id = session_id or uuid.uuid4().hex
        self.player_id = player_id
        self.config = config or DEFAULT_CONFIG
        self.clock = clock
        self.sampler = sampler or PathSampler(config=self.config)
        self.validator = validator or TerritoryValidator(config=self.config)
        self.collision_engine = collision_engine or CollisionEngine(config=self.config)
        self.listener = listener or SessionListener()
        self.auto_schedule = auto_schedule
        self.closure = ClosureDetector(on_closed=self._on_closed, config=self.config)
        self.journal = SessionJournal(logger)

        self._lock = threading.RLock()
        self._territories: tuple[Territory, ...] = tuple(territories)
        self._state = SessionState.IDLE
        self._outcome: ValidationOutcome | None = None
        self._claimed: PathSnapshot | None = None
        self._last_collision: CollisionResult | None = None
        self._termination: Termination | None = None
        self._started_at: datetime | None = None
        self._next_collision_at: float | None = None
        self._task: PeriodicTask | None = None
        self._touched_at = self.clock()

    # ------------------------------------------------------------------
    # Read-only views

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def outcome(self) -> ValidationOutcome | None:
        return self._outcome

    @property
    def last_collision(self) -> CollisionResult | None:
        return self._last_collision

    @property
    def termination(self) -> Termination | None:
        return self._termination

    @property
    def started_at(self) -> datetime | None:
        return self._started_at

    @property
    def territories(self) -> tuple[Territory, ...]:
        return self._territories

    @property
    def last_activity(self) -> float:
        """Clock reading of the last start, fix, clear or termination."""
        return self._touched_at

    @property
    def is_tracking(self) -> bool:
        return self._state is SessionState.TRACKING

    def path(self) -> PathSnapshot:
        return self.sampler.buffer.snapshot()

    @property
    def claimed_path(self) -> PathSnapshot | None:
        """The snapshot that closed the loop, once closed."""
        return self._claimed

    # ------------------------------------------------------------------
    # Lifecycle

    def start(self, start_fix: GeoFix | None = None) -> CollisionResult:
        """Begin tracking. A start point inside a competitor's territory refuses the start."""
        with self._lock:
            if self._state is not SessionState.IDLE:
                raise SessionStateError(f"Cannot start a session that is {self._state.value}")

            result = SAFE_RESULT
            self._last_collision = None
            if start_fix is not None:
                result = self.collision_engine.check_start_point(
                    start_fix.point, self._territories, self.player_id
                )
                self._last_collision = result
                if result.is_violation:
                    self.journal.error("Start refused: inside territory %s", result.territory_id)
                    return result

            self.sampler.reset()
            self.closure.reset()
            self._outcome = None
            self._claimed = None
            self._termination = None
            self._started_at = datetime.now(timezone.utc)
            self._touched_at = self.clock()
            self._state = SessionState.TRACKING
            self._next_collision_at = self.clock() + self.config.collision_check_interval_seconds
            self.journal.info("Tracking started")

            if start_fix is not None:
                self.sampler.sample(start_fix)

            if self.auto_schedule:
                self._task = PeriodicTask(
                    self.config.collision_check_interval_seconds,
                    self.check_collisions,
                    name=f"collision-{self.id[:8]}",
                )
                self._task.start()
            return result

    def stop(self) -> None:
        """Halt sampling and collision checks and discard the path."""
        with self._lock:
            if self._state is SessionState.IDLE and self._task is None:
                return
            task = self._terminate(TerminationReason.STOPPED)
        if task is not None:
            task.cancel()

    def clear_path(self) -> None:
        """Discard the path and any outcome but keep tracking."""
        with self._lock:
            if self._state is SessionState.IDLE:
                raise SessionStateError("Cannot clear the path of an idle session")
            self.sampler.reset()
            self.closure.reset()
            self._outcome = None
            self._claimed = None
            self._touched_at = self.clock()
            self._state = SessionState.TRACKING
            self._next_collision_at = self.clock() + self.config.collision_check_interval_seconds
            self.journal.info("Path cleared")

    def update_territories(self, territories: Iterable[Territory]) -> None:
        snapshot = tuple(territories)
        with self._lock:
            self._territories = snapshot
        logger.debug("Session %s: territory snapshot now %d entries", self.id, len(snapshot))

    # ------------------------------------------------------------------
    # Triggers

    def add_fix(self, fix: GeoFix) -> SampleResult:
        with self._lock:
            if self._state not in _WALKING:
                return SampleResult(SampleStatus.INACTIVE)

            self._touched_at = self.clock()
            result = self.sampler.sample(fix)
            if result.is_fatal:
                self.journal.error("%s", result.advisory)
                self._terminate(TerminationReason.SPEED_VIOLATION, result.advisory)
                return result

            if result.status is SampleStatus.ACCEPTED_FAST:
                self.journal.warning("%s", result.advisory)
            if result.accepted and self._state is SessionState.INVALID:
                self._reopen()
            if result.accepted:
                self.journal.debug(
                    "Recorded point %d, %.0fm from previous",
                    len(self.sampler.buffer),
                    result.distance_m or 0.0,
                )
            if result.closure_ready:
                self.closure.check(self.sampler.buffer.snapshot())
            return result

    def tick(self) -> CollisionResult | None:
        """Run the collision check if its interval has elapsed."""
        with self._lock:
            if self._state not in _WALKING or self._next_collision_at is None:
                return None
            now = self.clock()
            if now < self._next_collision_at:
                return None
            self._next_collision_at = now + self.config.collision_check_interval_seconds
            return self.check_collisions()

    def check_collisions(self) -> CollisionResult | None:
        """Check the live path against the territory snapshot now."""
        with self._lock:
            if self._state not in _WALKING:
                return None
            result = self.collision_engine.check_path(
                self.sampler.buffer.snapshot(), self._territories, self.player_id
            )
            self._last_collision = result

            if result.is_violation:
                self.journal.error(
                    "Territory violation (%s) with %s", result.violation.value, result.territory_id
                )
                self.listener.on_collision(self, result)
                self._terminate(TerminationReason.TERRITORY_COLLISION, result.message)
                return result

            if result.severity is not CollisionSeverity.SAFE:
                self.journal.warning("%s: %s", result.severity.name, result.message)
            self.listener.on_collision(self, result)
            return result

    # ------------------------------------------------------------------
    # Outcome

    def claim_record(self, started_at: datetime | None = None) -> dict[str, Any]:
        """Store row for the validated claim; the caller performs the upload."""
        with self._lock:
            if self._state is not SessionState.VALID or not isinstance(self._outcome, Valid):
                raise SessionStateError("Only a valid claim can be recorded")
            return build_claim_record(
                self.player_id,
                self._claimed.points,
                self._outcome.area_m2,
                started_at or self._started_at,
            )

    # ------------------------------------------------------------------
    # Internals (lock held)

    def _on_closed(self, snapshot: PathSnapshot) -> None:
        self._state = SessionState.CLOSED
        self._claimed = snapshot
        self.journal.info("Loop closed with %d points", len(snapshot))

        outcome = self.validator.validate(snapshot)
        self._outcome = outcome
        if isinstance(outcome, Invalid):
            self._state = SessionState.INVALID
            self.journal.error("Claim invalid: %s", outcome.detail or outcome.reason.value)
        else:
            self._state = SessionState.VALID
            self.journal.info("Claim valid: %.0fm²", outcome.area_m2)
        self.listener.on_outcome(self, outcome)

    def _reopen(self) -> None:
        """Walk on after a rejected claim, keeping the path."""
        self.closure.reset()
        self._state = SessionState.TRACKING
        self.journal.info("Walking on after rejected claim; %d points kept", len(self.sampler.buffer))

    def _terminate(self, reason: TerminationReason, detail: str | None = None) -> PeriodicTask | None:
        """Back to IDLE with nothing left over. Returns the detached task for joining outside the lock."""
        task, self._task = self._task, None
        if task is not None:
            task.cancel(wait=False)
        points = len(self.sampler.buffer)
        self.sampler.reset()
        self.closure.reset()
        self._state = SessionState.IDLE
        self._outcome = None
        self._claimed = None
        self._next_collision_at = None
        self._touched_at = self.clock()
        self._termination = Termination(reason, detail)
        self.journal.info("Tracking ended (%s), discarded %d points", reason.value, points)
        self.listener.on_terminated(self, self._termination)
        return task


class SessionStore:
    """In-memory registry of live sessions, owned by whoever constructs it.

    Sessions untouched for ``idle_timeout`` seconds, tracking or ended, are
    stopped and evicted whenever a new session is created or ``prune()`` is
    called.
    """

    def __init__(
        self,
        config: ClaimConfig | None = None,
        auto_schedule: bool = False,
        idle_timeout: float = 900.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if idle_timeout <= 0:
            raise ValueError("idle_timeout must be positive")
        self.config = config or DEFAULT_CONFIG
        self.auto_schedule = auto_schedule
        self.idle_timeout = idle_timeout
        self.clock = clock
        self._sessions: dict[str, TrackingSession] = {}
        self._lock = threading.Lock()

    def create(self, player_id: str, territories: Iterable[Territory] = ()) -> TrackingSession:
        self.prune()
        session = TrackingSession(
            player_id,
            territories=territories,
            config=self.config,
            clock=self.clock,
            auto_schedule=self.auto_schedule,
        )
        with self._lock:
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str) -> TrackingSession | None:
        with self._lock:
            return self._sessions.get(session_id)

    def remove(self, session_id: str) -> TrackingSession | None:
        with self._lock:
            session = self._sessions.pop(session_id, None)
        if session is not None:
            session.stop()
        return session

    def prune(self) -> list[str]:
        """Stop and drop idle sessions; returns their ids."""
        cutoff = self.clock() - self.idle_timeout
        with self._lock:
            stale = [s for s in self._sessions.values() if s.last_activity < cutoff]
            for session in stale:
                del self._sessions[session.id]
        for session in stale:
            session.stop()
        if stale:
            logger.info("Evicted %d idle sessions", len(stale))
        return [s.id for s in stale]

    def close_all(self) -> None:
        with self._lock:
            sessions = list(self._sessions.values())
            self._sessions.clear()
        for session in sessions:
            session.stop()

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
