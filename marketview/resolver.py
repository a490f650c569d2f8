"""
DATA SOURCE RESOLVER

Single-primary + single-fallback acquisition:

  primary.fetch_entries()        (exactly once)
        | SourceFetchError / ParseFailure
        v
  fallback.fetch_entries()       (exactly once)
        | SourceFetchError / ParseFailure
        v
  SourceUnavailable              (returned, not raised)

No retry loop and no backoff.
"""

import itertools
import logging
from typing import Dict, Optional, Union

from .base_source import BaseTokenSource
from .errors import SourceFetchError
from .models import Dataset, SourceUnavailable
from .normalizer import EntryNormalizer

logger = logging.getLogger(__name__)


class DataSourceResolver:
    """
    Produces a fresh Dataset per call, from the primary feed or the fallback.
    """

    def __init__(self, primary: BaseTokenSource, fallback: BaseTokenSource,
                 normalizer: Optional[EntryNormalizer] = None):
        self.primary = primary
        self.fallback = fallback
        self.normalizer = normalizer or EntryNormalizer()
        self._generations = itertools.count(1)

        self.stats = {
            'acquisitions': 0,
            'primary_successes': 0,
            'fallbacks_used': 0,
            'unavailable': 0,
        }

    async def acquire(self) -> Union[Dataset, SourceUnavailable]:
        self.stats['acquisitions'] += 1

        try:
            raw_items = await self.primary.fetch_entries()
            self.stats['primary_successes'] += 1
            return self._build_dataset(raw_items, self.primary.name)
        except SourceFetchError as primary_error:
            logger.warning(f"[RESOLVER] Primary feed failed: {primary_error}. Trying fallback")
            errors = [f"{self.primary.name}: {primary_error}"]

        try:
            raw_items = await self.fallback.fetch_entries()
            self.stats['fallbacks_used'] += 1
            return self._build_dataset(raw_items, self.fallback.name)
        except SourceFetchError as fallback_error:
            logger.error(f"[RESOLVER] Fallback feed failed: {fallback_error}. Source unavailable")
            errors.append(f"{self.fallback.name}: {fallback_error}")

        self.stats['unavailable'] += 1
        return SourceUnavailable(errors=tuple(errors))

    def _build_dataset(self, raw_items, source_name: str) -> Dataset:
        entries = self.normalizer.normalize_all(raw_items)
        dataset = Dataset(
            entries=entries,
            generation=next(self._generations),
            source=source_name,
        )
        logger.info(f"[RESOLVER] Snapshot #{dataset.generation}: {len(entries)} entries from {source_name}")
        return dataset

    async def close(self):
        await self.primary.close()
        await self.fallback.close()

    def get_stats(self) -> Dict:
        return {
            'resolver': dict(self.stats),
            'normalizer': self.normalizer.get_stats(),
            'primary': self.primary.get_stats(),
            'fallback': self.fallback.get_stats(),
        }
