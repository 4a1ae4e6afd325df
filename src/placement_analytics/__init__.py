"""Linked-view analytics over student placement records."""

__version__ = "0.1.0"
