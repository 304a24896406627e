"""Request Resilience Implementations.

Contains the retry executor, retry policy resolution and correlation id
generation.
Bounded Context: Request Resilience
"""
