"""Zone race simulation engine."""

__version__ = "0.1.0"
