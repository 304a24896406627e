"""Core application services.

Contains the client facade that composes correlation, policy resolution
and the retry executor around a transport.
"""
