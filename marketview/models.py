"""
MARKET VIEW MODELS

Sanitized entries, snapshots and the query state.

All numeric fields are plain floats/ints by the time a MarketEntry exists;
missing values were already replaced by 0 in the normalizer.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

UNKNOWN_NAME = "Unknown Token"
UNKNOWN_SYMBOL = "???"

AUDIT_LIQUIDITY_THRESHOLD = 5000

# Shown when a query or a failed load leaves nothing to display
EMPTY_STATE_MESSAGE = "No tokens found. Try a different search or filter, or refresh to reload market data."


class FilterMode(Enum):
    """Ranking/filter policy selected by the user."""
    TRENDING = "TRENDING"
    NEW_PAIRS = "NEW_PAIRS"
    MEME_ZONE = "MEME_ZONE"
    HOT = "HOT"

    @classmethod
    def parse(cls, value) -> 'FilterMode':
        """Accept a FilterMode or its name in any case, with or without separators
        ("NewPairs", "new_pairs", "new-pairs", "NEWPAIRS")."""
        if isinstance(value, cls):
            return value
        key = "".join(c for c in str(value) if c.isalnum()).upper()
        for mode in cls:
            if mode.value.replace("_", "") == key:
                return mode
        raise ValueError(f"Unknown filter mode: {value!r}")


@dataclass(frozen=True)
class TokenProfile:
    """Optional token profile attached to a pair."""
    token_address: Optional[str] = None
    icon_url: Optional[str] = None
    description: Optional[str] = None
    external_url: Optional[str] = None


@dataclass(frozen=True)
class MarketEntry:
    """
    One tradable pair.

    base_name / base_symbol hold the feed's text ('' when absent) and are what
    search and MemeZone look at. name / symbol are the display values.
    """
    id: str
    base_name: str = ""
    base_symbol: str = ""
    liquidity_usd: float = 0.0
    volume_24h: float = 0.0
    price_change_24h_pct: float = 0.0
    pair_created_at: int = 0              # epoch ms
    pair_address: Optional[str] = None
    profile: TokenProfile = field(default_factory=TokenProfile)

    @property
    def name(self) -> str:
        return self.base_name or UNKNOWN_NAME

    @property
    def symbol(self) -> str:
        return self.base_symbol or UNKNOWN_SYMBOL

    @property
    def ticker_label(self) -> str:
        """Short label for the top-5 lists."""
        if self.base_symbol:
            return self.base_symbol
        if self.profile.token_address:
            return self.profile.token_address[:6]
        return UNKNOWN_SYMBOL

    @property
    def audit_status(self) -> str:
        return "PASSED" if self.liquidity_usd > AUDIT_LIQUIDITY_THRESHOLD else "CAUTION"

    @property
    def created_at(self) -> Optional[datetime]:
        if not self.pair_created_at:
            return None
        try:
            return datetime.fromtimestamp(self.pair_created_at / 1000)
        except (OverflowError, OSError, ValueError):
            # out of the platform's representable range
            return None


@dataclass(frozen=True)
class Dataset:
    """Immutable snapshot produced by one load cycle."""
    entries: Tuple[MarketEntry, ...]
    generation: int
    source: str
    loaded_at: datetime = field(default_factory=datetime.now)

    def __len__(self):
        return len(self.entries)

    @classmethod
    def empty(cls) -> 'Dataset':
        return cls(entries=(), generation=0, source="none")


@dataclass(frozen=True)
class SourceUnavailable:
    """Both endpoints failed. Returned, never raised."""
    errors: Tuple[str, ...] = ()
    occurred_at: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class QueryState:
    """User-controlled query. Replaced, never mutated."""
    search_query: str = ""
    active_filter_mode: FilterMode = FilterMode.TRENDING
    current_page: int = 1
    page_size: int = 10

    def cache_key(self) -> Tuple[str, str]:
        """Serialized form of the parts that affect the ranked sequence."""
        return (self.search_query, self.active_filter_mode.value)
