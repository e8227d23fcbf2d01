"""
Default interestingness rules.

Each rule is a pure function of a NormalizedTransaction returning a
RuleResult or None (abstain). Rules are independent; the order of
DEFAULT_RULES decides top-tag tie-breaks.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from txlens.analysis_engine.signals import NormalizedTransaction
from txlens.parser.known_programs import KNOWN_PROGRAMS
from txlens.parser.models import TransactionStatus
from txlens.utils.amounts import lamports_to_sol


@dataclass(frozen=True)
class RuleResult:
    score: float
    tag: str
    reason: str

    def __post_init__(self) -> None:
        if not self.score > 0:
            raise ValueError(f"Rule score must be positive, got {self.score!r}")


Rule = Callable[[NormalizedTransaction], Optional[RuleResult]]

# DEX / lending programs watched by the defi rule
WATCHED_PROGRAMS = frozenset({
    "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4",  # Jupiter
    "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc",  # Orca Whirlpool
    "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK",  # Raydium CLMM
    "So1endDq2YkqhipRh3WViPa8hdiSpxWy6z3Z6tMCpAo",  # Solend
    "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin",  # Serum DEX
})

HIGH_COMPUTE_UNITS = 1_000_000
COMPUTE_INTENSIVE_PERCENT = 80
HIGH_FEE_SOL = 0.01


def sol_moved_rule(tx: NormalizedTransaction) -> RuleResult | None:
    """Whale activity; highest tier first."""
    reason = f"{tx.total_sol_moved:.2f} SOL moved"
    if tx.total_sol_moved > 100:
        return RuleResult(10, "whale_move", reason)
    if tx.total_sol_moved > 50:
        return RuleResult(7, "large_move", reason)
    if tx.total_sol_moved > 10:
        return RuleResult(4, "medium_move", reason)
    return None


def new_token_rule(tx: NormalizedTransaction) -> RuleResult | None:
    if tx.creates_mint and not tx.is_nft_mint:
        return RuleResult(8, "new_token", "New token mint created")
    return None


def nft_mint_rule(tx: NormalizedTransaction) -> RuleResult | None:
    if tx.is_nft_mint:
        return RuleResult(6, "nft_mint", "NFT minted")
    return None


def compute_rule(tx: NormalizedTransaction) -> RuleResult | None:
    used, limit = tx.compute_units.used, tx.compute_units.limit
    if used > HIGH_COMPUTE_UNITS:
        return RuleResult(7, "high_compute", f"{used:,} compute units")
    if limit <= 0:
        return None
    percent = used / limit * 100
    if percent > COMPUTE_INTENSIVE_PERCENT:
        return RuleResult(5, "compute_intensive", f"{percent:.1f}% compute used")
    return None


def high_fee_rule(tx: NormalizedTransaction) -> RuleResult | None:
    fee_sol = lamports_to_sol(tx.fee)
    if fee_sol > HIGH_FEE_SOL:
        return RuleResult(6, "high_fee", f"{fee_sol:.6f} SOL fee")
    return None


def defi_rule(tx: NormalizedTransaction) -> RuleResult | None:
    for program_id in tx.program_ids:
        if program_id in WATCHED_PROGRAMS:
            name = KNOWN_PROGRAMS.get(program_id, "Unknown")
            return RuleResult(5, "defi", f"Interacts with {name}")
    return None


def token_transfer_rule(tx: NormalizedTransaction) -> RuleResult | None:
    count = tx.token_transfer_count
    if count > 5:
        return RuleResult(6, "multi_token", f"{count} token transfers")
    if count > 0:
        return RuleResult(3, "token_transfer", f"{count} token transfer(s)")
    return None


def program_count_rule(tx: NormalizedTransaction) -> RuleResult | None:
    if tx.unique_programs > 5:
        return RuleResult(7, "complex", f"{tx.unique_programs} different programs")
    if tx.unique_programs > 3:
        return RuleResult(4, "multi_program", f"{tx.unique_programs} different programs")
    return None


def failed_rule(tx: NormalizedTransaction) -> RuleResult | None:
    if tx.status == TransactionStatus.FAILED:
        return RuleResult(5, "failed", "Transaction failed")
    return None


DEFAULT_RULES: tuple[Rule, ...] = (
    sol_moved_rule,
    new_token_rule,
    nft_mint_rule,
    compute_rule,
    high_fee_rule,
    defi_rule,
    token_transfer_rule,
    program_count_rule,
    failed_rule,
)
