"""Lamport and token amount conversions."""

from __future__ import annotations

from decimal import Decimal

LAMPORTS_PER_SOL = 1_000_000_000


def lamports_to_sol(lamports: int) -> float:
    """Amount in SOL as a float; for thresholds and display."""
    return lamports / LAMPORTS_PER_SOL


def _strip_zeros(text: str) -> str:
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_lamports(lamports: int) -> str:
    """SOL amount with up to 9 decimal places, trailing zeros removed."""
    return _strip_zeros(f"{Decimal(lamports) / LAMPORTS_PER_SOL:.9f}")


def format_token_amount(amount: int, decimals: int) -> str:
    """
    Token base units scaled by decimals, trailing zeros removed.

    Exact for any amount (Decimal, not float).
    """
    if decimals <= 0:
        return str(amount)
    scaled = Decimal(amount).scaleb(-decimals)
    return _strip_zeros(f"{scaled:.{decimals}f}")
