"""
Interest score computation: rules and aggregation.

Runs every rule against one normalized view, sums the scores, keeps tags
and reasons in rule order, and picks the top tag (highest score, earliest
rule on ties). Scoring is advisory and never raises: a rule that errors
or returns an invalid result abstains and is logged.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Sequence

from txlens.analysis_engine.rules import DEFAULT_RULES, Rule, RuleResult
from txlens.analysis_engine.signals import normalize_transaction
from txlens.config.env import DEFAULT_MIN_SCORE
from txlens.parser.models import ParsedTransaction
from txlens.txlens_logging import get_logger

logger = get_logger(__name__)

UNKNOWN_TAG = "unknown"


@dataclass(frozen=True)
class ScoredTransaction:
    transaction: ParsedTransaction
    total_score: float
    tags: list[str] = field(default_factory=list)
    reasons: list[str] = field(default_factory=list)
    """Parallel to tags."""
    top_tag: str = UNKNOWN_TAG

    def to_dict(self) -> dict[str, Any]:
        return {
            "transaction": self.transaction.to_dict(),
            "total_score": self.total_score,
            "tags": list(self.tags),
            "reasons": list(self.reasons),
            "top_tag": self.top_tag,
        }


def _rule_name(rule: Rule) -> str:
    return getattr(rule, "__name__", repr(rule))


def score_transaction(
    tx: ParsedTransaction,
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> ScoredTransaction:
    normalized = normalize_transaction(tx)
    results: list[RuleResult] = []
    for rule in rules:
        try:
            result = rule(normalized)
        except Exception as e:
            logger.warning(
                "rule_evaluation_failed",
                signature=tx.signature,
                rule=_rule_name(rule),
                error=str(e),
            )
            continue
        if result is None:
            continue
        if not isinstance(result, RuleResult):
            logger.warning(
                "rule_result_invalid",
                signature=tx.signature,
                rule=_rule_name(rule),
                result=repr(result),
            )
            continue
        results.append(result)

    # max() keeps the first of equal scores, i.e. the earliest rule
    top = max(results, key=lambda r: r.score) if results else None
    return ScoredTransaction(
        transaction=tx,
        total_score=sum(r.score for r in results),
        tags=[r.tag for r in results],
        reasons=[r.reason or r.tag for r in results],
        top_tag=top.tag if top else UNKNOWN_TAG,
    )


def score_transactions(
    transactions: Iterable[ParsedTransaction],
    rules: Sequence[Rule] = DEFAULT_RULES,
) -> list[ScoredTransaction]:
    """Score each transaction; highest total first, input order kept on ties."""
    scored = [score_transaction(tx, rules) for tx in transactions]
    return sorted(scored, key=lambda s: s.total_score, reverse=True)


def filter_by_score(
    scored: Iterable[ScoredTransaction],
    min_score: float = DEFAULT_MIN_SCORE,
) -> list[ScoredTransaction]:
    return [s for s in scored if s.total_score >= min_score]


def filter_by_tags(
    scored: Iterable[ScoredTransaction],
    tags: Iterable[str],
) -> list[ScoredTransaction]:
    """Keep transactions carrying at least one of the requested tags."""
    wanted = set(tags)
    return [s for s in scored if any(tag in wanted for tag in s.tags)]
