"""
MARKET VIEW ERRORS

Failures that can happen while acquiring a snapshot.
Nothing past ingestion raises: search, ranking, paging and projections
are total over sanitized entries.
"""

from typing import Optional


class MarketViewError(Exception):
    """Base class for market view errors."""


class SourceFetchError(MarketViewError):
    """
    A single feed endpoint failed (non-2xx, transport error, timeout).

    Raised by the feed client, handled by the resolver.
    """

    def __init__(self, message: str, url: str = "", status: Optional[int] = None):
        super().__init__(message)
        self.url = url
        self.status = status

    def __str__(self):
        base = super().__str__()
        if self.status is not None:
            return f"{base} (HTTP {self.status}, {self.url})"
        if self.url:
            return f"{base} ({self.url})"
        return base


class ParseFailure(SourceFetchError):
    """Response body was not JSON or did not have the expected shape."""
