"""
RANKING ENGINE

Applies the active FilterMode to an already-searched sequence.

  TRENDING   stable sort by volume_24h, descending
  NEW_PAIRS  stable sort by pair_created_at, descending (0 sorts last)
  MEME_ZONE  keyword filter, order untouched
  HOT        stable sort by price_change_24h_pct, descending

sorted(..., reverse=True) keeps equal keys in their input order, so repeated
recomputation over the same snapshot gives the same pages.
"""

from typing import Callable, Dict, Sequence, Tuple

from .filters import is_meme_entry
from .models import FilterMode, MarketEntry

SORT_KEYS: Dict[FilterMode, Callable[[MarketEntry], float]] = {
    FilterMode.TRENDING: lambda entry: entry.volume_24h,
    FilterMode.NEW_PAIRS: lambda entry: entry.pair_created_at,
    FilterMode.HOT: lambda entry: entry.price_change_24h_pct,
}


class RankingEngine:
    """Ranks or filters entries for one of the four modes."""

    def rank(self, entries: Sequence[MarketEntry], mode: FilterMode) -> Tuple[MarketEntry, ...]:
        mode = FilterMode.parse(mode)

        if mode is FilterMode.MEME_ZONE:
            return tuple(entry for entry in entries if is_meme_entry(entry))

        return rank_descending(entries, mode)


def rank_descending(entries: Sequence[MarketEntry], mode: FilterMode) -> Tuple[MarketEntry, ...]:
    """Stable descending sort by the sort key of a sorting mode."""
    return tuple(sorted(entries, key=SORT_KEYS[mode], reverse=True))
