"""
Application settings.

Typed, read-only view over the environment for the ambient parts of txlens:
the batch scan workflow and error formatting. Logging reads LOG_LEVEL and
LOG_FORMAT itself, at import time. The parser and rule engine never read
settings; callers pass what they need explicitly.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from txlens.config.env import (
    get_compute_unit_limit,
    get_min_score,
    is_debug,
    load_txlens_env,
)


@dataclass(frozen=True)
class Settings:
    min_score: int
    """Minimum total score kept by scan_transactions."""
    compute_unit_limit: int
    """Compute-unit limit handed to TransactionParser by the scan workflow."""
    debug: bool
    """Default for TxLensError.to_formatted_string(debug=...)."""


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the current settings (cached; see reset_settings_cache)."""
    load_txlens_env()
    return Settings(
        min_score=get_min_score(),
        compute_unit_limit=get_compute_unit_limit(),
        debug=is_debug(),
    )


def reset_settings_cache() -> None:
    """Drop the cached Settings so the next get_settings() re-reads the environment."""
    get_settings.cache_clear()
