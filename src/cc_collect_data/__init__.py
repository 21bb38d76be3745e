"""Collect diagnostic data about a Clear Containers installation."""

__version__ = "3.0.0"
