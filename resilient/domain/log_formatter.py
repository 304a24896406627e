"""Default log string formatter for the resilient request layer."""

from typing import Callable, Optional

from resilient.domain.exceptions import FormatterError
from resilient.domain.models.common import CorrelationId

LogFormatter = Callable[[Optional[str], Optional[CorrelationId], Optional[BaseException]], str]


def _error_text(error: Optional[BaseException]) -> Optional[str]:
    if error is None:
        return None
    # Some exceptions (e.g. TimeoutError()) carry no message
    return str(error) or type(error).__name__


def format_log_message(
    state: Optional[str],
    correlation_id: Optional[CorrelationId] = None,
    error: Optional[BaseException] = None,
) -> str:
    """Combines whichever of state, correlation id and error are present.

    Empty strings count as absent.

    Args:
        state: The log message, if any.
        correlation_id: Id of the logical call the entry belongs to, if any.
        error: The error related to this entry, if any.

    Returns:
        The rendered message.

    Raises:
        FormatterError: If none of the three inputs were supplied.
    """
    error_text = _error_text(error)

    if correlation_id and state and error_text:
        return f'{correlation_id} {state} with error "{error_text}"'
    if state and error_text:
        return f'{state} with error "{error_text}"'
    if correlation_id and state:
        return f"{correlation_id} {state}"
    if state:
        return state
    if correlation_id and error_text:
        return f"{correlation_id} {error_text}"
    if error_text:
        return error_text

    raise FormatterError("Invalid inputs provided for log formatter")
