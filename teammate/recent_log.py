"""Thread-safe rolling buffer of recent log lines for the organizer view."""

from __future__ import annotations

from collections import deque
import logging
import threading


DEFAULT_CAPACITY = 1000
_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class RecentLogHandler(logging.Handler):
    """Keeps the newest *capacity* formatted records in memory."""

    def __init__(self, capacity: int = DEFAULT_CAPACITY, level: int = logging.NOTSET):
        super().__init__(level)
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self._records: deque[str] = deque(maxlen=capacity)
        self._buffer_lock = threading.Lock()
        self.setFormatter(logging.Formatter(_FORMAT, datefmt=_DATE_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:
            self.handleError(record)
            return
        with self._buffer_lock:
            self._records.appendleft(line)

    def recent(self) -> list[str]:
        """Newest first."""
        with self._buffer_lock:
            return list(self._records)

    def clear(self) -> None:
        with self._buffer_lock:
            self._records.clear()


def configure_logging(
    capacity: int = DEFAULT_CAPACITY,
    level: int | str = logging.INFO,
    logger_name: str = "teammate",
) -> RecentLogHandler:
    """Attach a fresh RecentLogHandler to the package logger and return it.

    Any handler installed by an earlier call is replaced.
    """
    log = logging.getLogger(logger_name)
    for existing in [h for h in log.handlers if isinstance(h, RecentLogHandler)]:
        log.removeHandler(existing)
    handler = RecentLogHandler(capacity)
    log.addHandler(handler)
    log.setLevel(level)
    return handler
