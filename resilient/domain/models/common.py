"""Defines common Value Objects used across the resilient request layer.

These objects represent simple values like correlation ids, retry policies
and log entries, ensuring consistency and type safety.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Generic, NewType, Optional, TypeVar

from resilient.domain.exceptions import InvalidArgumentError

T = TypeVar("T")

# === Core Value Objects ===

# Using NewType for semantic clarity, although they are strings at runtime.
CorrelationId = NewType("CorrelationId", str)   # Ties every log line of one logical call together
TargetUrl = NewType("TargetUrl", str)           # URL relative to the transport's base URL
QueryParams = Dict[str, Any]


class HttpMethod(str, enum.Enum):
    """Verbs exposed by the client facade."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"


class LogLevel(enum.IntEnum):
    """Ordered severities. Values match the stdlib logging numbers."""
    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARN = 30
    ERROR = 40


# --- Retry ---

@dataclass(frozen=True)
class RetryPolicy:
    """Value Object: how many times an operation may run and how far apart.

    `max_attempts` counts every attempt, the first one included, so 1 means
    "no retry". Values below 1 are treated as 1 by the executor.
    """
    max_attempts: int = 1
    delay_seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.delay_seconds < 0:
            raise InvalidArgumentError(
                "delay_seconds", f"delay_seconds must be >= 0, got {self.delay_seconds}"
            )

    @classmethod
    def from_options(cls, max_retry_count: int, delay_between_retries: float) -> "RetryPolicy":
        """Builds a policy from the configuration surface, validating strictly."""
        if max_retry_count < 1:
            raise InvalidArgumentError(
                "max_retry_count", f"max_retry_count must be >= 1, got {max_retry_count}"
            )
        return cls(max_attempts=max_retry_count, delay_seconds=delay_between_retries)


@dataclass(frozen=True)
class RetryOutcome(Generic[T]):
    """Result of a successful execution plus how much of the budget it used."""
    result: T
    attempts_remaining: int
    max_attempts: int

    @property
    def retries_used(self) -> int:
        """Number of retries after the first attempt (max_attempts - attempts_remaining)."""
        return self.max_attempts - self.attempts_remaining

    @property
    def attempts_made(self) -> int:
        return self.retries_used + 1


# --- Logging ---

@dataclass(frozen=True)
class LogEntry:
    """A single log call as seen by a capturing sink. Never persisted."""
    level: LogLevel
    correlation_id: Optional[CorrelationId]
    message: str
    error: Optional[BaseException] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
