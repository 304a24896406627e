"""Error types raised by the resilient request layer.

Failures raised by a wrapped operation are never translated into one of
these: once the retry budget is spent the original exception reaches the
caller unchanged. The classes here only cover misuse of the API itself.
"""

from typing import Any, Optional


class ResilientError(Exception):
    """Base class for errors raised by this package."""


class InvalidArgumentError(ResilientError, ValueError):
    """A required argument is missing, empty or out of range.

    Raised synchronously, before any attempt is made, and never retried.
    """

    def __init__(self, argument_name: str, message: Optional[str] = None):
        self.argument_name = argument_name
        super().__init__(message or f"Argument '{argument_name}' must not be null or empty.")


class FormatterError(ResilientError):
    """The log formatter was called with nothing to format."""


class ConfigurationError(ResilientError):
    """A configuration value could not be interpreted."""

    def __init__(self, key: str, value: Any, reason: str):
        self.key = key
        self.value = value
        super().__init__(f"Invalid configuration value for '{key}' ({value!r}): {reason}")


def ensure_not_empty(value: Any, argument_name: str) -> None:
    """Raises InvalidArgumentError if `value` is None or an empty string/collection."""
    if value is None:
        raise InvalidArgumentError(argument_name)
    if isinstance(value, (str, bytes, list, tuple, dict, set)) and len(value) == 0:
        raise InvalidArgumentError(argument_name)
