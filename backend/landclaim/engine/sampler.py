"""PathSampler — speed gating and spatial decimation of raw GPS fixes."""

from __future__ import annotations

import enum
import logging
import math
import threading
from dataclasses import dataclass

from landclaim.engine.config import ClaimConfig, DEFAULT_CONFIG, speed_kmh
from landclaim.engine.context import PathSnapshot
from landclaim.engine.types import GeoFix, GeoPoint
from landclaim.utils.geo import distance

logger = logging.getLogger(__name__)


class PathBuffer:
    """Append-only path owned by one session. Thread-safe; readers take snapshots."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._points: list[GeoPoint] = []
        self._version = 0

    def append(self, point: GeoPoint) -> int:
        with self._lock:
            self._points.append(point)
            self._version += 1
            return self._version

    def clear(self) -> None:
        with self._lock:
            self._points = []
            self._version += 1

    def snapshot(self) -> PathSnapshot:
        with self._lock:
            return PathSnapshot.of(self._points, self._version)

    @property
    def last(self) -> GeoPoint | None:
        with self._lock:
            return self._points[-1] if self._points else None

    @property
    def version(self) -> int:
        with self._lock:
            return self._version

    def __len__(self) -> int:
        with self._lock:
            return len(self._points)


class SampleStatus(str, enum.Enum):
    ACCEPTED = "accepted"
    # Accepted, but between the soft and hard speed caps
    ACCEPTED_FAST = "accepted_fast"
    TOO_CLOSE = "too_close"
    # Non-increasing or non-finite timestamp
    STALE = "stale"
    SPEED_VIOLATION = "speed_violation"
    # Session not tracking; fix ignored
    INACTIVE = "inactive"


@dataclass(frozen=True)
class SampleResult:
    status: SampleStatus
    distance_m: float | None = None
    speed_kmh: float | None = None
    version: int | None = None
    closure_ready: bool = False

    @property
    def accepted(self) -> bool:
        return self.status in (SampleStatus.ACCEPTED, SampleStatus.ACCEPTED_FAST)

    @property
    def is_fatal(self) -> bool:
        return self.status is SampleStatus.SPEED_VIOLATION

    @property
    def advisory(self) -> str | None:
        if self.status is SampleStatus.ACCEPTED_FAST:
            return f"Moving fast: {self.speed_kmh:.0f} km/h"
        if self.status is SampleStatus.SPEED_VIOLATION:
            return f"Too fast ({self.speed_kmh:.0f} km/h), tracking stopped"
        return None


class PathSampler:
    """Decides which fixes become path points.

    Speed is measured against the last *accepted* point. The caller owns the
    consequences of a SPEED_VIOLATION result (stop GPS, discard the path).
    """

    def __init__(self, buffer: PathBuffer | None = None, config: ClaimConfig | None = None) -> None:
        self.buffer = buffer or PathBuffer()
        self.config = config or DEFAULT_CONFIG
        self._last_timestamp: float | None = None

    def reset(self) -> None:
        self.buffer.clear()
        self._last_timestamp = None

    def sample(self, fix: GeoFix) -> SampleResult:
        cfg = self.config
        if not math.isfinite(fix.timestamp):
            logger.warning("Dropped fix with non-finite timestamp %r", fix.timestamp)
            return SampleResult(SampleStatus.STALE)

        last = self.buffer.last

        if last is None or self._last_timestamp is None:
            return self._accept(fix, None, None, SampleStatus.ACCEPTED)

        dist = distance(last, fix.point, cfg.earth_radius)
        elapsed = fix.timestamp - self._last_timestamp
        if elapsed <= 0:
            logger.debug("Dropped fix with non-increasing timestamp (dt=%.3fs)", elapsed)
            return SampleResult(SampleStatus.STALE, distance_m=dist)

        speed = speed_kmh(dist, elapsed)
        if speed > cfg.hard_speed_cap_kmh:
            logger.error("Speed %.0f km/h exceeds hard cap %.0f km/h", speed, cfg.hard_speed_cap_kmh)
            return SampleResult(SampleStatus.SPEED_VIOLATION, distance_m=dist, speed_kmh=speed)

        if dist < cfg.minimum_point_spacing:
            logger.debug("Dropped fix %.1fm from last point", dist)
            return SampleResult(SampleStatus.TOO_CLOSE, distance_m=dist, speed_kmh=speed)

        status = SampleStatus.ACCEPTED
        if speed > cfg.soft_speed_cap_kmh:
            logger.warning("Speed advisory: %.0f km/h", speed)
            status = SampleStatus.ACCEPTED_FAST
        return self._accept(fix, dist, speed, status)

    def _accept(
        self,
        fix: GeoFix,
        dist: float | None,
        speed: float | None,
        status: SampleStatus,
    ) -> SampleResult:
        held_before = len(self.buffer)
        version = self.buffer.append(fix.point)
        self._last_timestamp = fix.timestamp
        logger.debug(
            "Recorded point %d (%.1fm from previous)", held_before + 1, dist or 0.0
        )
        return SampleResult(
            status,
            distance_m=dist,
            speed_kmh=speed,
            version=version,
            closure_ready=held_before >= self.config.minimum_path_points - 1,
        )
