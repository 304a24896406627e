"""Retry policy resolution.

Supplies a usable policy for every call, falling back to a shared,
immutable "no retry" default when the caller configured none.
"""

from typing import Optional

from resilient.domain.models.common import RetryPolicy

# Frozen dataclass, safe to share across concurrent calls
NO_RETRY = RetryPolicy(max_attempts=1, delay_seconds=0.0)


def resolve_policy(explicit: Optional[RetryPolicy] = None) -> RetryPolicy:
    """Returns `explicit` unchanged, or NO_RETRY when it is None."""
    if explicit is None:
        return NO_RETRY
    return explicit
