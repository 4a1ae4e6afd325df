"""Exceptions raised by placement_analytics.

Only ``LoadError`` is meant to reach the user. Alias misses are recorded on
the record store and empty aggregates resolve to zero/empty results, so
neither has an exception type.
"""

from __future__ import annotations

from typing import Optional


class PlacementAnalyticsError(Exception):
    """Base class for errors raised by this package."""


class LoadError(PlacementAnalyticsError):
    """Raised when the source dataset cannot be read or parsed.

    Fatal for initialisation; the dashboard stays blank.
    """

    def __init__(self, message: str, source: Optional[str] = None):
        super().__init__(message)
        self.source = source

    def __str__(self) -> str:
        base = super().__str__()
        return f"{base} (source: {self.source})" if self.source else base


class FilterValueError(PlacementAnalyticsError, ValueError):
    """Raised when a control value is outside its accepted vocabulary."""
