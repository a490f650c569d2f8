"""
BASE SOURCE - Abstract base class for token feeds

Defines the interface the resolver calls on both the primary and the
fallback feed. Ensures consistent data structure across feeds.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List


class BaseTokenSource(ABC):
    """
    Abstract base class for token feeds.

    fetch_entries() returns the raw item list of one response or raises
    SourceFetchError (ParseFailure for unusable bodies). One call is one
    request: retry policy belongs to the resolver.
    """

    def __init__(self, name: str, config: Dict = None):
        """
        Initialize base source.

        Args:
            name: Label used in logs and Dataset.source ('primary', 'fallback')
            config: Source configuration dict
        """
        self.name = name
        self.config = config or {}
        self.last_request_time = None
        self.request_count = 0
        self.failure_count = 0

    @abstractmethod
    async def fetch_entries(self) -> List:
        """
        Fetch the raw entry list.

        Returns:
            List of raw entry items (not yet normalized)
        """
        pass

    async def close(self):
        """Release network resources. No-op by default."""

    def _record_request(self):
        """Update request tracking."""
        self.last_request_time = datetime.now()
        self.request_count += 1

    def get_stats(self) -> Dict:
        """
        Get source statistics.

        Returns:
            Dict with request count, failures and last request time
        """
        return {
            'name': self.name,
            'request_count': self.request_count,
            'failure_count': self.failure_count,
            'last_request': self.last_request_time.isoformat() if self.last_request_time else None,
            'source': self.__class__.__name__,
        }
