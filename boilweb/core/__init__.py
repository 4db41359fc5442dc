"""Core wiring: configuration, logging and the dependency container."""
