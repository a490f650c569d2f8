"""
VIEW PROJECTOR

Three top-N lists computed straight off the raw snapshot.
Search, mode and page never touch these.
"""

from dataclasses import dataclass
from typing import Dict, Tuple

from .models import Dataset, FilterMode, MarketEntry
from .ranking import rank_descending

DEFAULT_TOP_N = 5


@dataclass(frozen=True)
class Projections:
    trending_pools: Tuple[MarketEntry, ...] = ()
    new_pools: Tuple[MarketEntry, ...] = ()
    top_gainers: Tuple[MarketEntry, ...] = ()

    def as_sections(self) -> Dict[str, Tuple[MarketEntry, ...]]:
        """Section title -> entries, in display order."""
        return {
            "Trending Pools": self.trending_pools,
            "New Pools": self.new_pools,
            "Top Gainers": self.top_gainers,
        }


class ViewProjector:
    def __init__(self, top_n: int = DEFAULT_TOP_N):
        self.top_n = top_n

    def project(self, dataset: Dataset) -> Projections:
        entries = dataset.entries
        return Projections(
            trending_pools=rank_descending(entries, FilterMode.TRENDING)[:self.top_n],
            new_pools=rank_descending(entries, FilterMode.NEW_PAIRS)[:self.top_n],
            top_gainers=rank_descending(entries, FilterMode.HOT)[:self.top_n],
        )
