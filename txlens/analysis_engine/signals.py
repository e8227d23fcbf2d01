"""
Signal extraction: the normalized view every scoring rule reads.

Derived once per scoring call from a ParsedTransaction: SOL moved,
programs touched, mint creation, token transfer counts. Read-only.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from txlens.parser.models import (
    ComputeUnits,
    ParsedTransaction,
    TokenTransfer,
    TransactionStatus,
)
from txlens.utils.amounts import lamports_to_sol

INITIALIZE_MINT = "InitializeMint"


@dataclass(frozen=True)
class NormalizedTransaction:
    transaction: ParsedTransaction
    total_sol_moved: float
    """Sum of absolute lamport changes over all accounts, in SOL."""
    program_ids: tuple[str, ...]
    """Program id of every interaction, in instruction order (may repeat)."""
    unique_programs: int
    has_token_transfers: bool
    token_transfer_count: int
    creates_mint: bool
    """Some interaction is an InitializeMint."""
    is_nft_mint: bool
    """Some InitializeMint has 0 decimals."""

    @property
    def status(self) -> TransactionStatus:
        return self.transaction.status

    @property
    def fee(self) -> int:
        return self.transaction.fee

    @property
    def compute_units(self) -> ComputeUnits:
        return self.transaction.compute_units

    @property
    def token_transfers(self) -> list[TokenTransfer]:
        return self.transaction.token_transfers

    def to_dict(self) -> dict[str, Any]:
        return {
            "signature": self.transaction.signature,
            "total_sol_moved": self.total_sol_moved,
            "program_ids": list(self.program_ids),
            "unique_programs": self.unique_programs,
            "has_token_transfers": self.has_token_transfers,
            "token_transfer_count": self.token_transfer_count,
            "creates_mint": self.creates_mint,
            "is_nft_mint": self.is_nft_mint,
        }


def normalize_transaction(tx: ParsedTransaction) -> NormalizedTransaction:
    total_lamports = sum(abs(change.balance_change) for change in tx.account_changes)
    program_ids = tuple(p.program_id for p in tx.program_interactions)
    mints = [p for p in tx.program_interactions if p.instruction_type == INITIALIZE_MINT]
    return NormalizedTransaction(
        transaction=tx,
        total_sol_moved=lamports_to_sol(total_lamports),
        program_ids=program_ids,
        unique_programs=len(set(program_ids)),
        has_token_transfers=bool(tx.token_transfers),
        token_transfer_count=len(tx.token_transfers),
        creates_mint=bool(mints),
        is_nft_mint=any(p.details.get("decimals") == 0 for p in mints),
    )
