"""Interface for leveled diagnostic loggers.

Defines the contract the retry executor and the client facade log through.
Sinks (console, stdlib bridge, in-memory, no-op) implement `_write`; level
filtering and the convenience methods live here.
"""

import abc
from typing import Optional

from ..log_formatter import LogFormatter, format_log_message
from ..models.common import CorrelationId, LogLevel


class LeveledLogger(abc.ABC):
    """Abstract Base Class for leveled, correlation-aware loggers."""

    def __init__(self, minimum_level: LogLevel = LogLevel.TRACE):
        """Initializes the logger.

        Args:
            minimum_level: Entries below this level are silently dropped.
        """
        self.minimum_level = LogLevel(minimum_level)

    def is_enabled(self, level: LogLevel) -> bool:
        return level >= self.minimum_level

    def log(
        self,
        level: LogLevel,
        correlation_id: Optional[CorrelationId],
        state: Optional[str],
        error: Optional[BaseException] = None,
        formatter: LogFormatter = format_log_message,
    ) -> None:
        """Writes an entry if `level` is at or above the minimum level.

        Callers must supply at least one of `state` or `error`; otherwise the
        formatter raises FormatterError, which is not suppressed.
        """
        if not self.is_enabled(level):
            return
        self._write(level, correlation_id, state, error, formatter)

    @abc.abstractmethod
    def _write(
        self,
        level: LogLevel,
        correlation_id: Optional[CorrelationId],
        state: Optional[str],
        error: Optional[BaseException],
        formatter: LogFormatter,
    ) -> None:
        """The real handler for log entries that passed the level filter.

        Args:
            level: Entry will be written on this level.
            correlation_id: Id of the logical call.
            state: The entry to be written.
            error: The error related to this entry.
            formatter: Function creating the message string from state, id and error.
        """
        pass

    # --- Convenience methods ---

    def trace(self, correlation_id, state, error=None, formatter: LogFormatter = format_log_message) -> None:
        self.log(LogLevel.TRACE, correlation_id, state, error, formatter)

    def debug(self, correlation_id, state, error=None, formatter: LogFormatter = format_log_message) -> None:
        self.log(LogLevel.DEBUG, correlation_id, state, error, formatter)

    def info(self, correlation_id, state, error=None, formatter: LogFormatter = format_log_message) -> None:
        self.log(LogLevel.INFO, correlation_id, state, error, formatter)

    def warn(self, correlation_id, state, error=None, formatter: LogFormatter = format_log_message) -> None:
        self.log(LogLevel.WARN, correlation_id, state, error, formatter)

    def error(self, correlation_id, state, error=None, formatter: LogFormatter = format_log_message) -> None:
        self.log(LogLevel.ERROR, correlation_id, state, error, formatter)
