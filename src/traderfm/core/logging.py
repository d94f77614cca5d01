"""Logging setup and the in-memory recent-log sink."""

from __future__ import annotations

import logging
from collections import deque
from threading import Lock

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


class RecentLogBuffer(logging.Handler):
    """Bounded handler that keeps the most recent formatted log lines.

    Owned by the application instance: attach it with :meth:`install` during
    startup and detach it with :meth:`uninstall` on shutdown.
    """

    def __init__(self, capacity: int = 500, level: int = logging.NOTSET) -> None:
        super().__init__(level)
        if capacity < 1:
            raise ValueError("capacity must be at least 1")
        self.capacity = capacity
        self._records: deque[str] = deque(maxlen=capacity)
        self._records_lock = Lock()
        self._target: logging.Logger | None = None
        self.setFormatter(logging.Formatter(LOG_FORMAT))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            line = self.format(record)
        except Exception:  # pragma: no cover - logging internals
            self.handleError(record)
            return
        with self._records_lock:
            self._records.append(line)

    def lines(self, limit: int | None = None) -> list[str]:
        """Return buffered lines, oldest first, optionally only the last ``limit``."""
        with self._records_lock:
            items = list(self._records)
        if limit is not None:
            items = items[-limit:] if limit > 0 else []
        return items

    def clear(self) -> None:
        with self._records_lock:
            self._records.clear()

    def install(self, logger_name: str = "traderfm") -> None:
        """Attach the buffer to ``logger_name``."""
        target = logging.getLogger(logger_name)
        if self not in target.handlers:
            target.addHandler(self)
        self._target = target

    def uninstall(self) -> None:
        """Detach the buffer from the logger it was installed on."""
        if self._target is not None:
            self._target.removeHandler(self)
            self._target = None


def configure_logging(level: str = "INFO") -> None:
    """Configure the package logger with a stream handler."""
    logger = logging.getLogger("traderfm")
    logger.setLevel(level.upper())
    if not any(isinstance(h, logging.StreamHandler) and not isinstance(h, RecentLogBuffer)
               for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
