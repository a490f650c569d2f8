"""
ENTRY NORMALIZER

Converts raw feed items into sanitized MarketEntry values.

Accepted item shapes:
  {"pairData": {...DexScreener pair...}, "profile": {...}}   (feed wrapper)
  {...DexScreener pair..., "profile": {...}}                  (flat pair)

Field-level defaulting happens here and only here:
- liquidity.usd / volume.h24 / priceChange.h24 -> 0.0 when absent or bad
- pairCreatedAt -> 0 when absent or bad
- missing name/symbol stay '' (display defaults live on MarketEntry)
"""

import logging
import math
from typing import Dict, Iterable, List, Optional, Tuple

from .models import MarketEntry, TokenProfile

logger = logging.getLogger(__name__)


class EntryNormalizer:
    """
    Normalizes feed items into MarketEntry values with unique ids.
    """

    def __init__(self):
        self.stats = {
            'normalized': 0,
            'dropped_invalid': 0,
            'dropped_duplicate': 0,
        }

    def normalize_all(self, raw_items: Iterable) -> Tuple[MarketEntry, ...]:
        """
        Normalize a full feed payload.

        Items that are not objects are dropped. Later items whose id was already
        seen are dropped so ids stay unique within the snapshot.
        """
        entries: List[MarketEntry] = []
        seen_ids = set()

        for index, raw in enumerate(raw_items):
            if not isinstance(raw, dict):
                self.stats['dropped_invalid'] += 1
                logger.warning(f"[NORMALIZER] Item {index} dropped (not an object: {type(raw).__name__})")
                continue

            entry = self.normalize_entry(raw, index)
            if entry.id in seen_ids:
                self.stats['dropped_duplicate'] += 1
                logger.warning(f"[NORMALIZER] Item {index} dropped (duplicate id {entry.id[:12]})")
                continue

            seen_ids.add(entry.id)
            entries.append(entry)

        self.stats['normalized'] += len(entries)
        return tuple(entries)

    def normalize_entry(self, raw: Dict, index: int = 0) -> MarketEntry:
        """Normalize one feed item. Never raises on missing or malformed fields."""
        pair = raw.get('pairData')
        if not isinstance(pair, dict):
            pair = raw

        base_token = self._as_dict(pair.get('baseToken'))
        profile = self._normalize_profile(self._as_dict(raw.get('profile')))

        pair_address = self._safe_str(pair.get('pairAddress'))
        entry_id = (
            self._safe_str(raw.get('id'))
            or pair_address
            or profile.token_address
            or f"entry-{index}"
        )

        return MarketEntry(
            id=entry_id,
            base_name=self._safe_str(base_token.get('name')) or "",
            base_symbol=self._safe_str(base_token.get('symbol')) or "",
            liquidity_usd=self._safe_float(self._as_dict(pair.get('liquidity')).get('usd')),
            volume_24h=self._safe_float(self._as_dict(pair.get('volume')).get('h24')),
            price_change_24h_pct=self._safe_float(self._as_dict(pair.get('priceChange')).get('h24')),
            pair_created_at=self._safe_int(pair.get('pairCreatedAt')),
            pair_address=pair_address,
            profile=profile,
        )

    def _normalize_profile(self, raw_profile: Dict) -> TokenProfile:
        return TokenProfile(
            token_address=self._safe_str(raw_profile.get('tokenAddress')),
            icon_url=self._safe_str(raw_profile.get('iconUrl') or raw_profile.get('icon')),
            description=self._safe_str(raw_profile.get('description')),
            external_url=self._safe_str(raw_profile.get('externalUrl') or raw_profile.get('url')),
        )

    def _as_dict(self, value) -> Dict:
        return value if isinstance(value, dict) else {}

    def _safe_str(self, value) -> Optional[str]:
        """Non-empty string or None."""
        if value is None or isinstance(value, (dict, list, bool)):
            return None
        text = str(value).strip()
        return text or None

    def _safe_float(self, value, default=0.0) -> float:
        """Safely convert to a finite float."""
        if isinstance(value, bool):
            return default
        try:
            result = float(value) if value is not None else default
        except (ValueError, TypeError):
            return default
        return result if math.isfinite(result) else default

    def _safe_int(self, value, default=0) -> int:
        """Safely convert to int (accepts '1700000000000' and 1.7e12)."""
        return int(self._safe_float(value, float(default)))

    def get_stats(self) -> Dict:
        return dict(self.stats)
