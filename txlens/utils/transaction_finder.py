"""
Helpers for picking candidate transactions from getSignaturesForAddress results.

The fetch itself belongs to the RPC collaborator; these functions only
filter SignatureInfo values already in memory.
"""

from __future__ import annotations

import random
from typing import Iterable

from txlens.parser.models import SignatureInfo

# Well-known addresses whose recent signatures tend to be interesting
INTERESTING_ADDRESSES: dict[str, str] = {
    # DEXs
    "JUPITER": "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4",
    "ORCA_WHIRLPOOL": "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc",
    "RAYDIUM": "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK",
    # Lending
    "SOLEND": "So1endDq2YkqhipRh3WViPa8hdiSpxWy6z3Z6tMCpAo",
    # NFT marketplaces
    "MAGIC_EDEN": "M2mx93ekt1fmXSVkTrUL9xVFHkmME8HTUi5Cyc5aF7K",
    "TOKEN_PROGRAM": "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",
}


def signature_infos_from_rpc(items: Iterable[dict]) -> list[SignatureInfo]:
    """Build SignatureInfo values from a getSignaturesForAddress result list."""
    return [SignatureInfo.from_rpc_item(item) for item in items]


def filter_interesting_transactions(
    transactions: Iterable[SignatureInfo],
    *,
    only_successful: bool = False,
    only_failed: bool = False,
) -> list[SignatureInfo]:
    """Filter by outcome. Both flags set returns an empty list."""
    filtered = list(transactions)
    if only_successful:
        filtered = [tx for tx in filtered if tx.err is None]
    if only_failed:
        filtered = [tx for tx in filtered if tx.err is not None]
    return filtered


def pick_random_transaction(
    transactions: list[SignatureInfo],
    rng: random.Random | None = None,
) -> SignatureInfo | None:
    if not transactions:
        return None
    return (rng or random).choice(transactions)
