"""Concrete LeveledLogger sinks.

- ConsoleLogger: timestamped lines on the console via rich.
- StdlibLogger: forwards to a stdlib `logging.Logger` so the handlers set up
  by `setup_logging` apply.
- NullLogger: drops everything.
- MemoryLogger: keeps entries in memory, mostly for tests.
"""

import logging
import threading
from datetime import datetime, timezone
from typing import List, Optional

from rich.console import Console

from resilient.domain.interfaces.logger import LeveledLogger
from resilient.domain.log_formatter import LogFormatter
from resilient.domain.models.common import CorrelationId, LogEntry, LogLevel


def utc_timestamp() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class ConsoleLogger(LeveledLogger):
    """A logger that writes `LEVEL: <UTC timestamp> <message>` lines to the console."""

    def __init__(self, minimum_level: LogLevel = LogLevel.TRACE, console: Optional[Console] = None):
        """Initializes the ConsoleLogger.

        Args:
            minimum_level: The minimum level this logger accepts. TRACE if not set.
            console: Rich console to write to. Defaults to a stderr console so
                log lines do not mix with command output on stdout.
        """
        super().__init__(minimum_level)
        self._console = console or Console(stderr=True)

    @property
    def console(self) -> Console:
        return self._console

    def _write(
        self,
        level: LogLevel,
        correlation_id: Optional[CorrelationId],
        state: Optional[str],
        error: Optional[BaseException],
        formatter: LogFormatter,
    ) -> None:
        line = f"{level.name}: {utc_timestamp()} {formatter(state, correlation_id, error)}"
        # Messages may contain brackets (URLs, reprs); keep rich from parsing them
        self.console.print(line, markup=False, highlight=False, soft_wrap=True)


class StdlibLogger(LeveledLogger):
    """A logger that forwards formatted entries to the stdlib logging module."""

    def __init__(
        self,
        minimum_level: LogLevel = LogLevel.TRACE,
        target: Optional[logging.Logger] = None,
    ):
        super().__init__(minimum_level)
        self._target = target or logging.getLogger("resilient.requests")
        logging.addLevelName(LogLevel.TRACE, "TRACE")

    def _write(self, level, correlation_id, state, error, formatter) -> None:
        self._target.log(int(level), formatter(state, correlation_id, error))


class NullLogger(LeveledLogger):
    """A logger that discards every entry."""

    def __init__(self):
        super().__init__(LogLevel.ERROR)

    def is_enabled(self, level: LogLevel) -> bool:
        return False

    def _write(self, level, correlation_id, state, error, formatter) -> None:
        pass


class MemoryLogger(LeveledLogger):
    """A logger that records LogEntry values in `entries`."""

    def __init__(self, minimum_level: LogLevel = LogLevel.TRACE):
        super().__init__(minimum_level)
        self.entries: List[LogEntry] = []
        self._lock = threading.Lock()

    def _write(self, level, correlation_id, state, error, formatter) -> None:
        message = formatter(state, correlation_id, error)
        with self._lock:
            self.entries.append(
                LogEntry(level=level, correlation_id=correlation_id, message=message, error=error)
            )

    def messages(self, level: Optional[LogLevel] = None) -> List[str]:
        """Formatted messages, optionally restricted to one level."""
        return [e.message for e in self.entries if level is None or e.level == level]


LOGGER_KINDS = ("console", "stdlib", "null")


def build_logger(kind: str = "console", minimum_level: LogLevel = LogLevel.INFO) -> LeveledLogger:
    """Creates a sink by name for the composition root.

    Args:
        kind: One of 'console', 'stdlib' or 'null'.
        minimum_level: Minimum level for the created sink.

    Raises:
        ValueError: If `kind` is unknown.
    """
    kind = kind.lower()
    if kind == "console":
        return ConsoleLogger(minimum_level)
    if kind == "stdlib":
        return StdlibLogger(minimum_level)
    if kind == "null":
        return NullLogger()
    raise ValueError(f"Unknown logger kind '{kind}'. Expected one of: {', '.join(LOGGER_KINDS)}")
