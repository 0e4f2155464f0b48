"""Exceptions raised by the race simulation engine."""


class ConfigurationError(ValueError):
    """Raised when a track, roster, or race is configured inconsistently."""
