"""Session journal — a bounded, exportable record of one tracking session."""

from __future__ import annotations

import logging
import threading
from collections import deque
from dataclasses import dataclass
from datetime import datetime

MAX_ENTRIES = 200


@dataclass(frozen=True)
class JournalEntry:
    timestamp: datetime
    level: int
    message: str

    @property
    def level_name(self) -> str:
        return logging.getLevelName(self.level)


class SessionJournal:
    """Keeps the newest ``max_entries`` messages and mirrors them to ``logger``."""

    def __init__(
        self,
        logger: logging.Logger | logging.LoggerAdapter | None = None,
        max_entries: int = MAX_ENTRIES,
    ) -> None:
        self._logger = logger
        self._entries: deque[JournalEntry] = deque(maxlen=max_entries)
        self._lock = threading.Lock()

    def log(self, level: int, msg: str, *args: object) -> None:
        message = msg % args if args else msg
        with self._lock:
            self._entries.append(JournalEntry(datetime.now(), level, message))
        if self._logger is not None:
            self._logger.log(level, msg, *args)

    def debug(self, msg: str, *args: object) -> None:
        self.log(logging.DEBUG, msg, *args)

    def info(self, msg: str, *args: object) -> None:
        self.log(logging.INFO, msg, *args)

    def warning(self, msg: str, *args: object) -> None:
        self.log(logging.WARNING, msg, *args)

    def error(self, msg: str, *args: object) -> None:
        self.log(logging.ERROR, msg, *args)

    @property
    def entries(self) -> list[JournalEntry]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def text(self) -> str:
        """Compact display form: ``[HH:MM:SS] [LEVEL] message`` per line."""
        return "\n".join(
            f"[{e.timestamp:%H:%M:%S}] [{e.level_name}] {e.message}" for e in self.entries
        )

    def export(self) -> str:
        entries = self.entries
        if not entries:
            return "No journal entries"
        lines = "\n".join(
            f"[{e.timestamp:%Y-%m-%d %H:%M:%S}] [{e.level_name}] {e.message}" for e in entries
        )
        return (
            "=== Territory claim journal ===\n"
            f"Exported: {datetime.now():%Y-%m-%d %H:%M:%S}\n"
            f"Entries: {len(entries)}\n"
            "\n"
            f"{lines}"
        )
