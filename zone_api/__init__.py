"""Zones REST resource backed by MongoDB."""

__version__ = "1.0.0"
