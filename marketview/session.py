"""
MARKET VIEW SESSION

Owns the current snapshot and the query state, and recomputes the view
explicitly after every change.

  load() / start_load()  ->  DataSourceResolver.acquire()  ->  snapshot
  set_search_query()     ->  query reset to page 1          ->  view()
  set_active_filter_mode()-> query reset to page 1          ->  view()
  set_page()             ->  clamped page                   ->  view()

view():
  snapshot -> FilterEngine.search -> RankingEngine.rank -> Paginator.page
  snapshot -> ViewProjector.project

Overlapping loads: every load gets a ticket. A Dataset is applied only if its
ticket is newer than the one already applied (last successful response wins).
SourceUnavailable never replaces a successful snapshot.
"""

import asyncio
import itertools
import logging
from dataclasses import dataclass, replace
from typing import Dict, Optional, Set, Tuple, Union

from .cache import ViewCache
from .filters import FilterEngine
from .models import (
    EMPTY_STATE_MESSAGE,
    Dataset,
    FilterMode,
    MarketEntry,
    QueryState,
    SourceUnavailable,
)
from .paginator import DEFAULT_PAGE_SIZE, Page, Paginator, page_window
from .projector import DEFAULT_TOP_N, Projections, ViewProjector
from .ranking import RankingEngine
from .resolver import DataSourceResolver
from .token_api import TokenFeedAPI

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketViewState:
    """Everything the presentation layer reads. Read-only."""
    page: Page
    projections: Projections
    query: QueryState
    loading: bool = False
    source_unavailable: bool = False
    source: str = "none"
    generation: int = 0
    empty_state_message: Optional[str] = None
    page_window: Tuple[Optional[int], ...] = ()

    @property
    def items(self) -> Tuple[MarketEntry, ...]:
        return self.page.items

    @property
    def total_pages(self) -> int:
        return self.page.total_pages

    @property
    def total_results(self) -> int:
        return self.page.total_results

    @property
    def display_range(self) -> Tuple[int, int]:
        return self.page.display_range

    def filter_summary(self) -> str:
        summary = f"Filter: {self.query.active_filter_mode.value}"
        if self.query.search_query:
            summary += f' • Search: "{self.query.search_query}"'
        return summary


class MarketViewSession:
    """
    Session-scoped market view.

    Usage:
        async with MarketViewSession.from_config(get_market_view_config()) as session:
            await session.load()
            state = session.set_search_query("pepe")
            state = session.set_active_filter_mode(FilterMode.HOT)
            state = session.set_page(2)
    """

    def __init__(self, resolver: DataSourceResolver, config: Dict = None):
        self.config = config or {}
        self.resolver = resolver

        page_size = self.config.get('pagination', {}).get('page_size', DEFAULT_PAGE_SIZE)
        top_n = self.config.get('projections', {}).get('top_n', DEFAULT_TOP_N)

        self.paginator = Paginator(page_size)
        self.filter_engine = FilterEngine()
        self.ranking = RankingEngine()
        self.projector = ViewProjector(top_n)
        self.cache = ViewCache(self.config.get('cache', {}))

        self.dataset = Dataset.empty()
        self.query = QueryState(page_size=page_size)
        self.last_failure: Optional[SourceUnavailable] = None

        self._tickets = itertools.count(1)
        self._applied_ticket = 0
        self._load_completed = False
        self._pending: Set[asyncio.Task] = set()

        self.stats = {
            'loads_started': 0,
            'snapshots_applied': 0,
            'stale_discarded': 0,
            'failures': 0,
        }

    @classmethod
    def from_config(cls, config: Dict) -> 'MarketViewSession':
        """Build a session with HTTP feeds for the configured primary/fallback URLs."""
        sources = config.get('sources', {})
        base_url = sources.get('base_url', '').rstrip('/')
        feed_config = {'timeout_seconds': sources.get('timeout_seconds', 10)}

        primary = TokenFeedAPI('primary', base_url + sources.get('primary_path', '/api/tokens'), feed_config)
        fallback = TokenFeedAPI('fallback', base_url + sources.get('fallback_path', '/api/mock-tokens'), feed_config)
        return cls(DataSourceResolver(primary, fallback), config)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        await self.close()

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load(self) -> Union[Dataset, SourceUnavailable]:
        """Run one load cycle and apply its result."""
        ticket = next(self._tickets)
        self.stats['loads_started'] += 1

        result = await self.resolver.acquire()
        self._apply(ticket, result)
        return result

    def start_load(self) -> asyncio.Task:
        """Schedule load() on the running loop. close() cancels it if still pending."""
        task = asyncio.get_running_loop().create_task(self.load())
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def _apply(self, ticket: int, result: Union[Dataset, SourceUnavailable]) -> bool:
        self._load_completed = True

        if isinstance(result, SourceUnavailable):
            self.stats['failures'] += 1
            self.last_failure = result
            if self._applied_ticket:
                logger.warning(f"[SESSION] Load #{ticket} failed, keeping snapshot #{self.dataset.generation}")
            else:
                logger.error(f"[SESSION] Load #{ticket} failed, no market data available")
            return False

        if ticket < self._applied_ticket:
            self.stats['stale_discarded'] += 1
            logger.info(f"[SESSION] Load #{ticket} finished after load #{self._applied_ticket}, discarded")
            return False

        self.dataset = result
        self._applied_ticket = ticket
        self.last_failure = None
        self.stats['snapshots_applied'] += 1
        logger.info(f"[SESSION] Applied snapshot #{result.generation} ({len(result)} entries, {result.source})")
        return True

    async def close(self):
        """Cancel in-flight loads and close the feeds."""
        pending = list(self._pending)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        await self.resolver.close()

    # ------------------------------------------------------------------
    # Query state
    # ------------------------------------------------------------------

    def set_search_query(self, text: str) -> MarketViewState:
        self.query = replace(self.query, search_query=text or "", current_page=1)
        return self.view()

    def set_active_filter_mode(self, mode) -> MarketViewState:
        self.query = replace(self.query, active_filter_mode=FilterMode.parse(mode), current_page=1)
        return self.view()

    def set_page(self, page_number: int) -> MarketViewState:
        total_results = len(self._ranked())
        self.query = replace(self.query, current_page=self.paginator.clamp(page_number, total_results))
        return self.view()

    # ------------------------------------------------------------------
    # Derived views
    # ------------------------------------------------------------------

    def _ranked(self) -> Tuple[MarketEntry, ...]:
        key = ('ranked', self.dataset.generation) + self.query.cache_key()

        def compute():
            searched = self.filter_engine.search(self.dataset.entries, self.query.search_query)
            return self.ranking.rank(searched, self.query.active_filter_mode)

        return self.cache.get_or_compute(key, compute)

    def projections(self) -> Projections:
        key = ('projections', self.dataset.generation)
        return self.cache.get_or_compute(key, lambda: self.projector.project(self.dataset))

    def view(self) -> MarketViewState:
        """Recompute the full view for the current snapshot and query."""
        page = self.paginator.page(self._ranked(), self.query.current_page)
        if page.page_number != self.query.current_page:
            self.query = replace(self.query, current_page=page.page_number)

        loading = not self._load_completed
        source_unavailable = self.last_failure is not None and not self._applied_ticket
        empty_state = EMPTY_STATE_MESSAGE if not loading and not page.total_results else None

        return MarketViewState(
            page=page,
            projections=self.projections(),
            query=self.query,
            loading=loading,
            source_unavailable=source_unavailable,
            source=self.dataset.source,
            generation=self.dataset.generation,
            empty_state_message=empty_state,
            page_window=page_window(page.page_number, page.total_pages),
        )

    def get_stats(self) -> Dict:
        return {
            'session': dict(self.stats),
            'cache': self.cache.get_stats(),
            'search': self.filter_engine.get_stats(),
            **self.resolver.get_stats(),
        }
