"""
txlens: Solana transaction decoding and interest scoring.

Turns already-fetched transaction records into structured form (balance
changes, token transfers, decoded instructions) and scores how interesting
each one is with a pluggable rule engine. Clear separation between parser,
analysis engine, and batch analytics.
"""

__version__ = "0.1.0"
