"""PeriodicTask — a cancellable fixed-interval background callback."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs ``callback`` every ``interval`` seconds on a daemon thread.

    The stop event is the cancellation token: once ``cancel()`` returns, the
    callback will not run again. ``cancel(wait=False)`` only signals, for
    callers holding a lock the callback may need.
    """

    def __init__(self, interval: float, callback: Callable[[], object], name: str = "periodic") -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interval = interval
        self.callback = callback
        self.name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stop.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"Periodic task {self.name!r} already started")
        self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
        self._thread.start()
        logger.debug("Started %s every %.1fs", self.name, self.interval)

    def cancel(self, wait: bool = True) -> None:
        self._stop.set()
        # Wait out an in-flight callback, unless we are that callback
        thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join()
        logger.debug("Cancelled %s", self.name)

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.callback()
            except Exception:
                logger.exception("Periodic task %s failed; stopping", self.name)
                self._stop.set()
