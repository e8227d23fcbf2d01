"""
Scan pipeline: parse -> score -> filter over a batch of raw transactions.

Single entrypoint for discovery workflows. Structural parse failures are
logged and skipped so one corrupt record never stops the batch. Minimum
score and compute-unit limit default to the configured settings.
"""

from __future__ import annotations

from typing import Any, Iterable, Sequence

from txlens.analysis_engine.rules import DEFAULT_RULES, Rule
from txlens.analysis_engine.scorer import (
    ScoredTransaction,
    filter_by_score,
    filter_by_tags,
    score_transactions,
)
from txlens.config import get_settings
from txlens.parser.decoders.registry import DecoderRegistry
from txlens.parser.models import RawTransaction
from txlens.parser.parser import TransactionParser, parse_batch
from txlens.txlens_logging import get_logger

logger = get_logger(__name__)


def scan_transactions(
    raw_list: Iterable[RawTransaction | dict[str, Any]],
    *,
    registry: DecoderRegistry | None = None,
    rules: Sequence[Rule] = DEFAULT_RULES,
    min_score: float | None = None,
    tags: Iterable[str] | None = None,
) -> list[ScoredTransaction]:
    """
    Parse and score a batch; return interesting transactions, best first.

    min_score falls back to TXLENS_MIN_SCORE. When tags is given, only
    transactions carrying one of them are kept.
    """
    settings = get_settings()
    threshold = settings.min_score if min_score is None else min_score
    parser = TransactionParser(registry, compute_unit_limit=settings.compute_unit_limit)

    raw_list = list(raw_list)
    logger.info("scan_pipeline_start", transactions=len(raw_list), min_score=threshold)

    parsed = parse_batch(raw_list, parser)
    scored = filter_by_score(score_transactions(parsed, rules), threshold)
    if tags is not None:
        scored = filter_by_tags(scored, tags)

    logger.info(
        "scan_pipeline_done",
        transactions=len(raw_list),
        parsed=len(parsed),
        kept=len(scored),
        top_tag=scored[0].top_tag if scored else None,
    )
    return scored
