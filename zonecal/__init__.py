"""Zonecal: timezone-aware calendar scheduling."""

__version__ = "1.0.0"
