"""Domain layer: value objects, error types and the ports the core depends on."""
