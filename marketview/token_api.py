"""
TOKEN FEED API CLIENT

HTTP client for the token list endpoints:
- GET /api/tokens        (primary)
- GET /api/mock-tokens   (fallback)

Both answer {"data": [...]}. One fetch is exactly one GET; this client never
retries or backs off on its own.
"""

import asyncio
import logging
from typing import Dict, List, Optional

import aiohttp

from .base_source import BaseTokenSource
from .errors import ParseFailure, SourceFetchError

logger = logging.getLogger(__name__)


class TokenFeedAPI(BaseTokenSource):
    """
    Token feed client for one endpoint.

    Usage:
        feed = TokenFeedAPI("primary", "http://localhost:3000/api/tokens")
        items = await feed.fetch_entries()
        await feed.close()
    """

    def __init__(self, name: str, url: str, config: Dict = None,
                 session: Optional[aiohttp.ClientSession] = None):
        """
        Initialize feed client.

        Args:
            name: Source label ('primary' / 'fallback')
            url: Full endpoint URL
            config: Optional dict with 'timeout_seconds'
            session: Shared aiohttp session. A session passed in is not closed by close().
        """
        super().__init__(name, config)
        self.url = url
        self.timeout = aiohttp.ClientTimeout(total=self.config.get('timeout_seconds', 10))
        self.session = session
        self._owns_session = session is None

    async def _ensure_session(self):
        """Ensure aiohttp session exists."""
        if self.session is None or self.session.closed:
            self.session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True

    async def close(self):
        """Close aiohttp session."""
        if self.session and self._owns_session:
            await self.session.close()
        self.session = None

    async def _request(self) -> object:
        """
        Make one GET request and decode the JSON body.

        Raises:
            SourceFetchError: non-2xx status, timeout or transport error
            ParseFailure: body is not valid JSON
        """
        await self._ensure_session()

        try:
            async with self.session.get(self.url, timeout=self.timeout,
                                        headers={'Accept': 'application/json'}) as response:
                self._record_request()

                if not 200 <= response.status < 300:
                    raise SourceFetchError("Unexpected status", url=self.url, status=response.status)

                try:
                    return await response.json(content_type=None)
                except ValueError as e:
                    raise ParseFailure(f"Invalid JSON body: {e}", url=self.url) from e

        except asyncio.TimeoutError as e:
            raise SourceFetchError("Timeout", url=self.url) from e
        except aiohttp.ClientError as e:
            raise SourceFetchError(f"Request error: {e}", url=self.url) from e

    async def fetch_entries(self) -> List:
        """
        Fetch the raw entry list from the endpoint.

        A missing or null 'data' is an empty list. A body that is not an
        object, or a 'data' that is not a list, is a ParseFailure.
        """
        try:
            body = await self._request()
            items = extract_items(body, self.url)
        except SourceFetchError:
            self.failure_count += 1
            raise

        logger.info(f"[TOKEN API] {self.name}: {len(items)} items from {self.url}")
        return items


def extract_items(body, url: str = "") -> List:
    """Pull the entry list out of a decoded {"data": [...]} body."""
    if not isinstance(body, dict):
        raise ParseFailure(f"Expected a JSON object, got {type(body).__name__}", url=url)

    items = body.get('data')
    if items is None:
        return []
    if not isinstance(items, list):
        raise ParseFailure(f"'data' is {type(items).__name__}, expected a list", url=url)
    return items
