import unittest

from marketview.filters import MEME_KEYWORDS, FilterEngine, is_meme_entry
from marketview.models import Dataset, FilterMode, MarketEntry, TokenProfile
from marketview.normalizer import EntryNormalizer
from marketview.paginator import Paginator, page_window
from marketview.projector import ViewProjector
from marketview.ranking import RankingEngine


def make_entry(entry_id, name="", symbol="", volume=0.0, created=0, change=0.0,
               liquidity=0.0, address=None, description=None):
    return MarketEntry(
        id=entry_id,
        base_name=name,
        base_symbol=symbol,
        liquidity_usd=liquidity,
        volume_24h=volume,
        price_change_24h_pct=change,
        pair_created_at=created,
        profile=TokenProfile(token_address=address, description=description),
    )


def make_entries(count):
    return tuple(make_entry(f"pair-{i}", name=f"Token {i}", symbol=f"T{i}") for i in range(count))


class TestNormalizer(unittest.TestCase):

    def setUp(self):
        self.normalizer = EntryNormalizer()

    def test_wrapped_pair_is_normalized(self):
        raw = {
            'pairData': {
                'pairAddress': '0xpair',
                'baseToken': {'name': 'PepeCoin', 'symbol': 'PEPE'},
                'liquidity': {'usd': 12000.5},
                'volume': {'h24': '80000'},
                'priceChange': {'h24': -12.5},
                'pairCreatedAt': 1700000000000,
            },
            'profile': {
                'tokenAddress': 'So1anaMint111',
                'icon': 'https://img/pepe.png',
                'description': 'frog money',
                'url': 'https://pepe.example',
            },
        }

        entry = self.normalizer.normalize_entry(raw)

        self.assertEqual(entry.id, '0xpair')
        self.assertEqual(entry.name, 'PepeCoin')
        self.assertEqual(entry.symbol, 'PEPE')
        self.assertEqual(entry.liquidity_usd, 12000.5)
        self.assertEqual(entry.volume_24h, 80000.0)
        self.assertEqual(entry.price_change_24h_pct, -12.5)
        self.assertEqual(entry.pair_created_at, 1700000000000)
        self.assertEqual(entry.profile.icon_url, 'https://img/pepe.png')
        self.assertEqual(entry.profile.external_url, 'https://pepe.example')
        self.assertEqual(entry.audit_status, 'PASSED')

    def test_missing_fields_default(self):
        entry = self.normalizer.normalize_entry({'pairData': {'volume': None, 'priceChange': {'h24': 'n/a'}}}, 7)

        self.assertEqual(entry.id, 'entry-7')
        self.assertEqual(entry.name, 'Unknown Token')
        self.assertEqual(entry.symbol, '???')
        self.assertEqual(entry.ticker_label, '???')
        self.assertEqual(entry.volume_24h, 0.0)
        self.assertEqual(entry.price_change_24h_pct, 0.0)
        self.assertEqual(entry.liquidity_usd, 0.0)
        self.assertEqual(entry.pair_created_at, 0)
        self.assertIsNone(entry.created_at)
        self.assertEqual(entry.audit_status, 'CAUTION')

    def test_created_at_out_of_range_is_none(self):
        self.assertEqual(make_entry('a', created=1700000000000).created_at.year, 2023)
        self.assertIsNone(make_entry('b', created=10 ** 18).created_at)
        self.assertIsNone(make_entry('c', created=-(10 ** 18)).created_at)

    def test_non_finite_numbers_become_zero(self):
        entry = self.normalizer.normalize_entry({'volume': {'h24': float('nan')}, 'liquidity': {'usd': 'inf'}})
        self.assertEqual(entry.volume_24h, 0.0)
        self.assertEqual(entry.liquidity_usd, 0.0)

    def test_flat_pair_and_ticker_fallback(self):
        entry = self.normalizer.normalize_entry({
            'baseToken': {'name': 'NoSymbol'},
            'profile': {'tokenAddress': 'ABCDEFGHIJ'},
        })
        self.assertEqual(entry.id, 'ABCDEFGHIJ')
        self.assertEqual(entry.ticker_label, 'ABCDEF')

    def test_duplicates_and_invalid_items_dropped(self):
        raw = [
            {'pairData': {'pairAddress': 'a', 'baseToken': {'name': 'First'}}},
            'not-an-object',
            {'pairData': {'pairAddress': 'a', 'baseToken': {'name': 'Second'}}},
            {'pairData': {'pairAddress': 'b'}},
        ]

        entries = self.normalizer.normalize_all(raw)

        self.assertEqual([e.id for e in entries], ['a', 'b'])
        self.assertEqual(entries[0].name, 'First')
        stats = self.normalizer.get_stats()
        self.assertEqual(stats['dropped_invalid'], 1)
        self.assertEqual(stats['dropped_duplicate'], 1)


class TestFilterEngine(unittest.TestCase):

    def setUp(self):
        self.engine = FilterEngine()
        self.entries = (
            make_entry('1', name='Dogecoin', symbol='DOGE', address='DogeMint111'),
            make_entry('2', name='Solana Bonk', symbol='BONK', address='BonkMint222'),
            make_entry('3', name='Wrapped Ether', symbol='WETH', address='xyzUNIQUE999'),
        )

    def test_blank_query_is_identity(self):
        self.assertEqual(self.engine.search(self.entries, ''), self.entries)
        self.assertEqual(self.engine.search(self.entries, '   '), self.entries)

    def test_case_insensitive_name_and_symbol(self):
        result = self.engine.search(self.entries, 'dOgE')
        self.assertEqual([e.id for e in result], ['1'])

        result = self.engine.search(self.entries, 'bonk')
        self.assertEqual([e.id for e in result], ['2'])

    def test_token_address_only_match(self):
        result = self.engine.search(self.entries, 'unique999')
        self.assertEqual([e.id for e in result], ['3'])

    def test_default_display_values_not_searchable(self):
        nameless = (make_entry('x'),)
        self.assertEqual(self.engine.search(nameless, 'unknown'), ())
        self.assertEqual(self.engine.search(nameless, '???'), ())

    def test_search_keeps_input_order(self):
        result = self.engine.search(self.entries, 'mint')
        self.assertEqual([e.id for e in result], ['1', '2'])

    def test_surrounding_whitespace_is_part_of_query(self):
        entries = (make_entry('1', name='PepeCoin'), make_entry('2', name='Pepe Coin Max'))

        self.assertEqual([e.id for e in self.engine.search(entries, 'coin ')], ['2'])
        self.assertEqual([e.id for e in self.engine.search(entries, ' coin')], ['2'])
        self.assertEqual([e.id for e in self.engine.search(entries, 'coin')], ['1', '2'])
        self.assertEqual(self.engine.search(entries[:1], 'coin '), ())


class TestRankingEngine(unittest.TestCase):

    def setUp(self):
        self.ranking = RankingEngine()

    def test_trending_is_stable_descending(self):
        entries = (
            make_entry('a', volume=100),
            make_entry('b', volume=500),
            make_entry('c', volume=100),
            make_entry('d'),              # missing volume -> 0
            make_entry('e', volume=500),
        )

        ranked = self.ranking.rank(entries, FilterMode.TRENDING)

        self.assertEqual([e.id for e in ranked], ['b', 'e', 'a', 'c', 'd'])

    def test_missing_volume_not_dropped(self):
        entries = (make_entry('a'), make_entry('b', volume=-5))
        ranked = self.ranking.rank(entries, FilterMode.TRENDING)
        self.assertEqual([e.id for e in ranked], ['a', 'b'])

    def test_new_pairs_missing_timestamp_sorts_last(self):
        entries = (
            make_entry('old', created=1_600_000_000_000),
            make_entry('none'),
            make_entry('new', created=1_700_000_000_000),
        )
        ranked = self.ranking.rank(entries, FilterMode.NEW_PAIRS)
        self.assertEqual([e.id for e in ranked], ['new', 'old', 'none'])

    def test_hot_sorts_by_price_change(self):
        entries = (
            make_entry('down', change=-40),
            make_entry('flat'),
            make_entry('up', change=250.5),
        )
        ranked = self.ranking.rank(entries, FilterMode.HOT)
        self.assertEqual([e.id for e in ranked], ['up', 'flat', 'down'])

    def test_meme_zone_filters_without_reordering(self):
        entries = (
            make_entry('1', name='Serious Finance', volume=900),
            make_entry('2', name='Moon Rocket', volume=10),
            make_entry('3', symbol='WIF', description='a dog with a hat', volume=500),
            make_entry('4', name='Bitcoin Cash'),
            make_entry('5', name='Utility'),
        )

        ranked = self.ranking.rank(entries, FilterMode.MEME_ZONE)

        self.assertEqual([e.id for e in ranked], ['2', '3', '4'])
        for entry in ranked:
            self.assertTrue(is_meme_entry(entry))
        for entry in entries:
            if entry not in ranked:
                text = f"{entry.base_name} {entry.base_symbol} {entry.profile.description or ''}".lower()
                self.assertFalse(any(k in text for k in MEME_KEYWORDS))

    def test_ranking_is_idempotent(self):
        entries = tuple(make_entry(str(i), volume=i % 3, created=i % 4, change=i % 5) for i in range(30))
        for mode in FilterMode:
            once = self.ranking.rank(entries, mode)
            twice = self.ranking.rank(once, mode)
            self.assertEqual(once, twice, mode)

    def test_mode_accepts_names(self):
        entries = (make_entry('a', change=1), make_entry('b', change=2))
        self.assertEqual(self.ranking.rank(entries, 'Hot'), self.ranking.rank(entries, FilterMode.HOT))
        self.assertEqual(FilterMode.parse('NewPairs'), FilterMode.NEW_PAIRS)
        self.assertEqual(FilterMode.parse('MemeZone'), FilterMode.MEME_ZONE)
        self.assertEqual(FilterMode.parse('new_pairs'), FilterMode.NEW_PAIRS)
        self.assertEqual(FilterMode.parse('newpairs'), FilterMode.NEW_PAIRS)
        self.assertEqual(FilterMode.parse('new-pairs'), FilterMode.NEW_PAIRS)
        self.assertEqual(FilterMode.parse('memezone'), FilterMode.MEME_ZONE)
        self.assertEqual(FilterMode.parse('MEMEZONE'), FilterMode.MEME_ZONE)
        self.assertEqual(FilterMode.parse('Meme Zone'), FilterMode.MEME_ZONE)
        with self.assertRaises(ValueError):
            FilterMode.parse('Cold')


class TestPaginator(unittest.TestCase):

    def setUp(self):
        self.paginator = Paginator(10)

    def test_twenty_three_entries(self):
        entries = make_entries(23)

        pages = [self.paginator.page(entries, n) for n in (1, 2, 3)]

        self.assertEqual(pages[0].total_pages, 3)
        self.assertEqual([len(p.items) for p in pages], [10, 10, 3])
        self.assertEqual(pages[2].display_range, (21, 23))
        self.assertEqual(pages[2].summary(), "Showing 21 - 23 of 23 tokens")
        self.assertFalse(pages[2].has_next)
        self.assertTrue(pages[2].has_previous)

    def test_pages_reconstruct_sequence(self):
        for count in (1, 9, 10, 11, 37):
            entries = make_entries(count)
            total = self.paginator.total_pages(count)
            rebuilt = []
            for number in range(1, total + 1):
                rebuilt.extend(self.paginator.page(entries, number).items)
            self.assertEqual(tuple(rebuilt), entries)

    def test_out_of_range_is_clamped(self):
        entries = make_entries(23)
        self.assertEqual(self.paginator.page(entries, 99).page_number, 3)
        self.assertEqual(self.paginator.page(entries, 0).page_number, 1)
        self.assertEqual(self.paginator.page(entries, -4).page_number, 1)

    def test_infinite_and_nan_pages_are_clamped(self):
        entries = make_entries(23)
        self.assertEqual(self.paginator.page(entries, float('inf')).page_number, 3)
        self.assertEqual(self.paginator.page(entries, float('-inf')).page_number, 1)
        self.assertEqual(self.paginator.page(entries, float('nan')).page_number, 1)
        self.assertEqual(self.paginator.page((), float('inf')).page_number, 1)

    def test_empty_sequence(self):
        page = self.paginator.page((), 5)
        self.assertEqual(page.total_pages, 0)
        self.assertEqual(page.total_results, 0)
        self.assertEqual(page.page_number, 1)
        self.assertEqual(page.items, ())
        self.assertEqual(page.display_range, (0, 0))
        self.assertFalse(page.has_next)

    def test_page_window(self):
        self.assertEqual(page_window(5, 10), (1, None, 4, 5, 6, None, 10))
        self.assertEqual(page_window(1, 3), (1, 2, 3))
        self.assertEqual(page_window(1, 10), (1, 2, None, 10))
        self.assertEqual(page_window(10, 10), (1, None, 9, 10))
        self.assertEqual(page_window(1, 0), ())


class TestViewProjector(unittest.TestCase):

    def test_top_five_from_raw_snapshot(self):
        entries = tuple(
            make_entry(f"p{i}", volume=i * 10, created=1000 - i, change=(i % 4) * 5.0)
            for i in range(8)
        )
        dataset = Dataset(entries=entries, generation=1, source='primary')

        projections = ViewProjector().project(dataset)

        self.assertEqual([e.id for e in projections.trending_pools], ['p7', 'p6', 'p5', 'p4', 'p3'])
        self.assertEqual([e.id for e in projections.new_pools], ['p0', 'p1', 'p2', 'p3', 'p4'])
        self.assertEqual([e.id for e in projections.top_gainers], ['p3', 'p7', 'p2', 'p6', 'p1'])
        # snapshot order untouched
        self.assertEqual(dataset.entries, entries)

    def test_small_snapshot(self):
        dataset = Dataset(entries=make_entries(2), generation=1, source='fallback')
        projections = ViewProjector().project(dataset)
        self.assertEqual(len(projections.trending_pools), 2)
        self.assertEqual(list(projections.as_sections()), ['Trending Pools', 'New Pools', 'Top Gainers'])


if __name__ == '__main__':
    unittest.main()
