"""Landscape explorer - query engine and read-only API over a landscape catalog."""

__version__ = "0.1.0"
