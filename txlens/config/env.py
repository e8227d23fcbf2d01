"""
Environment variable loading for txlens.

- LOG_LEVEL / LOG_FORMAT: read by txlens_logging at import time, not part of Settings
- TXLENS_MIN_SCORE: minimum total score kept by the scan workflow (default: 5)
- TXLENS_COMPUTE_UNIT_LIMIT: compute-unit limit assumed per transaction (default: 200000)
- TXLENS_DEBUG / DEBUG: include error details in formatted messages
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is txlens/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_MIN_SCORE = 5
DEFAULT_COMPUTE_UNIT_LIMIT = 200_000

_TRUTHY = ("1", "true", "yes", "on")


def load_txlens_env() -> None:
    """Load .env from project root. Safe to call multiple times."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH)


def _get_int(name: str, default: int) -> int:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        # logging imports nothing from config, so importing here is safe
        from txlens.txlens_logging import get_logger

        get_logger(__name__).warning("config_invalid_int", variable=name, value=raw, default=default)
        return default


def get_min_score() -> int:
    """Return TXLENS_MIN_SCORE from env; default 5."""
    load_txlens_env()
    return _get_int("TXLENS_MIN_SCORE", DEFAULT_MIN_SCORE)


def get_compute_unit_limit() -> int:
    """Return TXLENS_COMPUTE_UNIT_LIMIT from env; non-positive values fall back to the default."""
    load_txlens_env()
    limit = _get_int("TXLENS_COMPUTE_UNIT_LIMIT", DEFAULT_COMPUTE_UNIT_LIMIT)
    return limit if limit > 0 else DEFAULT_COMPUTE_UNIT_LIMIT


def is_debug() -> bool:
    """Return True when TXLENS_DEBUG=1 or DEBUG=true."""
    load_txlens_env()
    if (os.getenv("TXLENS_DEBUG") or "").strip().lower() in _TRUTHY:
        return True
    return (os.getenv("DEBUG") or "").strip().lower() in _TRUTHY
