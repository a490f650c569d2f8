"""
MARKET FILTERS

Keyword search and the MemeZone keyword predicate.

Both are pure: they never reorder or mutate their input, they only drop
entries. Search is always applied before the ranking mode.
"""

from typing import Dict, Sequence, Tuple

from .models import MarketEntry

MEME_KEYWORDS = (
    "meme", "doge", "shib", "pepe", "coin", "moon",
    "elon", "inu", "cat", "dog", "frog",
)


class FilterEngine:
    """
    Case-insensitive substring search over name, symbol and token address.
    """

    def __init__(self):
        self.stats = {
            'searches': 0,
            'identity_searches': 0,
        }

    def search(self, entries: Sequence[MarketEntry], query: str) -> Tuple[MarketEntry, ...]:
        """
        Keep entries whose name, symbol or token address contains the query.

        Empty or whitespace-only queries return the input unchanged. Any other
        query is matched as typed, surrounding whitespace included.
        """
        query = query or ""
        if not query.strip():
            self.stats['identity_searches'] += 1
            return tuple(entries)

        self.stats['searches'] += 1
        needle = query.lower()
        return tuple(entry for entry in entries if matches_query(entry, needle))

    def get_stats(self) -> Dict:
        return dict(self.stats)


def matches_query(entry: MarketEntry, needle: str) -> bool:
    """needle must already be lowercased."""
    fields = (
        entry.base_name,
        entry.base_symbol,
        entry.profile.token_address or "",
    )
    return any(needle in text.lower() for text in fields)


def is_meme_entry(entry: MarketEntry) -> bool:
    """True if name, symbol or description contains a meme keyword."""
    haystacks = (
        entry.base_name.lower(),
        entry.base_symbol.lower(),
        (entry.profile.description or "").lower(),
    )
    return any(keyword in text for keyword in MEME_KEYWORDS for text in haystacks)
