"""
MARKET VIEW MODULE

Token pair listing with search, ranking modes, pagination and top-5 lists.

Architecture:
  /api/tokens  (primary)   /api/mock-tokens  (fallback)
          ↓                        ↓
  DATA SOURCE RESOLVER (one attempt each, SourceUnavailable on double failure)
          ↓
  ENTRY NORMALIZER (defaults, unique ids)
          ↓
  DATASET (immutable snapshot)
          ↓                                  ↓
  SEARCH → RANKING MODE → PAGINATOR    VIEW PROJECTOR (top-5 x3)
          ↓                                  ↓
  MARKET VIEW SESSION (query state, memoized recomputation)
"""

from .base_source import BaseTokenSource
from .cache import ViewCache
from .errors import MarketViewError, ParseFailure, SourceFetchError
from .filters import MEME_KEYWORDS, FilterEngine
from .models import (
    EMPTY_STATE_MESSAGE,
    Dataset,
    FilterMode,
    MarketEntry,
    QueryState,
    SourceUnavailable,
    TokenProfile,
)
from .normalizer import EntryNormalizer
from .paginator import Page, Paginator, page_window
from .projector import Projections, ViewProjector
from .ranking import RankingEngine
from .resolver import DataSourceResolver
from .session import MarketViewSession, MarketViewState
from .token_api import TokenFeedAPI

__all__ = [
    'BaseTokenSource',
    'TokenFeedAPI',
    'DataSourceResolver',
    'EntryNormalizer',
    'FilterEngine',
    'RankingEngine',
    'Paginator',
    'ViewProjector',
    'ViewCache',
    'MarketViewSession',
    'MarketViewState',
    'Dataset',
    'MarketEntry',
    'TokenProfile',
    'QueryState',
    'FilterMode',
    'SourceUnavailable',
    'Page',
    'Projections',
    'page_window',
    'MEME_KEYWORDS',
    'EMPTY_STATE_MESSAGE',
    'MarketViewError',
    'SourceFetchError',
    'ParseFailure',
]
