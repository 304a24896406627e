"""Domain Interfaces (Ports):

Defines the contracts (Abstract Base Classes) that infrastructure components
must implement. The retry core and the client facade depend on these
interfaces, not on concrete sinks or transports.
"""
