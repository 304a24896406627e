"""Infrastructure Layer:

Concrete implementations of the domain ports (logger sinks, HTTP transport)
plus the retry executor, configuration loading and console display.
"""
