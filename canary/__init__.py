"""Synthetic URL availability canary."""

__version__ = "0.1.0"
