"""
MARKET VIEW CONFIGURATION

Feed endpoints, pagination and projection sizes.

Environment (.env supported):
- MARKETVIEW_BASE_URL          host serving the token feeds
- MARKETVIEW_PRIMARY_PATH      default /api/tokens
- MARKETVIEW_FALLBACK_PATH     default /api/mock-tokens
- MARKETVIEW_TIMEOUT_SECONDS   per-request timeout

Optional overrides: marketview.yaml next to this file, same section layout.
"""

import copy
import logging
import os
from pathlib import Path

import yaml
from dotenv import load_dotenv

load_dotenv()
logger = logging.getLogger(__name__)


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning(f"[CONFIG] {name}={value!r} is not a number, using {default}")
        return default


MARKET_VIEW_CONFIG = {
    'enabled': True,

    # ================================================================
    # FEEDS (one primary attempt, one fallback attempt)
    # ================================================================
    'sources': {
        'base_url': os.getenv("MARKETVIEW_BASE_URL", "http://localhost:3000"),
        'primary_path': os.getenv("MARKETVIEW_PRIMARY_PATH", "/api/tokens"),
        'fallback_path': os.getenv("MARKETVIEW_FALLBACK_PATH", "/api/mock-tokens"),
        'timeout_seconds': _env_float("MARKETVIEW_TIMEOUT_SECONDS", 10.0),
    },

    # ================================================================
    # VIEW
    # ================================================================
    'pagination': {
        'page_size': 10,
    },
    'projections': {
        'top_n': 5,
    },

    # Memoized ranked sequences / projections
    'cache': {
        'max_size': 64,
    },
}

CONFIG_OVERRIDES_PATH = Path(__file__).parent / "marketview.yaml"


def load_config_overrides(path: Path = CONFIG_OVERRIDES_PATH) -> dict:
    """Load section overrides from marketview.yaml (empty if missing)."""
    if not path.exists():
        return {}
    with open(path, 'r') as f:
        overrides = yaml.safe_load(f) or {}
    if not isinstance(overrides, dict):
        logger.warning(f"[CONFIG] {path.name} ignored (top level must be a mapping)")
        return {}
    return overrides


def get_market_view_config(path: Path = CONFIG_OVERRIDES_PATH) -> dict:
    """Defaults merged with marketview.yaml, one level deep per section."""
    config = copy.deepcopy(MARKET_VIEW_CONFIG)
    for section, values in load_config_overrides(path).items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def is_market_view_enabled() -> bool:
    return get_market_view_config().get('enabled', False)
