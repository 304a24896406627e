"""resilient: retrying, correlated request execution for async clients."""

__version__ = "0.3.0"
