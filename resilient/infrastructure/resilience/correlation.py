"""Correlation id generation.

One id is created per logical call and threaded unchanged through every
attempt and log line of that call.
"""

import uuid

from resilient.domain.models.common import CorrelationId


def new_correlation_id() -> CorrelationId:
    """Returns a fresh random (UUID4) correlation id."""
    return CorrelationId(str(uuid.uuid4()))
