"""
Analysis engine package: interest scoring for parsed transactions.

Normalizes a ParsedTransaction once, runs independent rules against it,
and aggregates their scores and tags into a ScoredTransaction.
"""

from txlens.analysis_engine.rules import DEFAULT_RULES, WATCHED_PROGRAMS, Rule, RuleResult
from txlens.analysis_engine.scorer import (
    ScoredTransaction,
    filter_by_score,
    filter_by_tags,
    score_transaction,
    score_transactions,
)
from txlens.analysis_engine.signals import NormalizedTransaction, normalize_transaction

__all__ = [
    "DEFAULT_RULES",
    "WATCHED_PROGRAMS",
    "NormalizedTransaction",
    "Rule",
    "RuleResult",
    "ScoredTransaction",
    "filter_by_score",
    "filter_by_tags",
    "normalize_transaction",
    "score_transaction",
    "score_transactions",
]
