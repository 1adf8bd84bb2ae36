"""ClosureDetector — declares a walk closed once it returns near its start."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass

from landclaim.engine.config import ClaimConfig, DEFAULT_CONFIG
from landclaim.engine.context import PathSnapshot
from landclaim.utils.geo import distance

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClosureCheck:
    closed: bool
    # True only on the call that performed the transition
    transitioned: bool = False
    distance_m: float | None = None


class ClosureDetector:
    """One-shot closure latch.

    ``on_closed`` receives the snapshot that closed the loop and is invoked at
    most once until ``reset()``.
    """

    def __init__(
        self,
        on_closed: Callable[[PathSnapshot], None] | None = None,
        config: ClaimConfig | None = None,
    ) -> None:
        self.on_closed = on_closed
        self.config = config or DEFAULT_CONFIG
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def reset(self) -> None:
        with self._lock:
            self._closed = False

    def check(self, snapshot: PathSnapshot) -> ClosureCheck:
        cfg = self.config
        with self._lock:
            if self._closed:
                return ClosureCheck(closed=True)
            if len(snapshot) < cfg.minimum_path_points:
                return ClosureCheck(closed=False)

            gap = distance(snapshot.first, snapshot.last, cfg.earth_radius)
            if gap > cfg.closure_distance_threshold:
                logger.info(
                    "%.0fm from start (needs <= %.0fm)", gap, cfg.closure_distance_threshold
                )
                return ClosureCheck(closed=False, distance_m=gap)

            self._closed = True

        logger.info("Loop closed %.0fm from start after %d points", gap, len(snapshot))
        if self.on_closed is not None:
            self.on_closed(snapshot)
        return ClosureCheck(closed=True, transitioned=True, distance_m=gap)
