"""
Builders shared by the test modules: well-known addresses, base58
instruction payloads, and parsed-transaction parts.
"""

from __future__ import annotations

import base58

from txlens.parser.models import (
    AccountChange,
    ProgramInteraction,
    TokenBalance,
    TokenTransfer,
)

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
PAYER = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"
RECIPIENT = "7xKXtg2CW87d97TXJSDpbD5jBkheTqA83TZRuJosgAsU"
SIGNATURE = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
LAMPORTS_PER_SOL = 1_000_000_000


def b58(data: bytes) -> str:
    return base58.b58encode(data).decode("ascii")


def system_transfer_data(lamports: int) -> str:
    """System Program Transfer payload: u32 discriminator 2, then u64 lamports."""
    return b58((2).to_bytes(4, "little") + lamports.to_bytes(8, "little"))


def sol_changes(*sol_deltas: float) -> list[AccountChange]:
    return [
        AccountChange(address=f"acct{i}", balance_change=int(d * LAMPORTS_PER_SOL), is_fee_payer=False)
        for i, d in enumerate(sol_deltas)
    ]


def interaction(program_id: str, instruction_type: str = "Unknown", **details) -> ProgramInteraction:
    return ProgramInteraction(program_id=program_id, program_name=None, instruction_type=instruction_type, details=details)


def token_transfer(mint: str = "MintA", amount: int = 1) -> TokenTransfer:
    return TokenTransfer(mint=mint, amount=amount, decimals=6, from_address="unknown", to_address=PAYER)


def token_balance(account_index: int, mint: str, amount: int, decimals: int = 6) -> TokenBalance:
    return TokenBalance(account_index=account_index, mint=mint, amount=str(amount), decimals=decimals)
