"""
Batch analytics over raw transactions.

Modules: scan_pipeline.
"""

from txlens.analytics.scan_pipeline import scan_transactions

__all__ = ["scan_transactions"]
