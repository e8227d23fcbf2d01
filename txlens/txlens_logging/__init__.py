"""
Structured logging for txlens.

JSON logs with timestamp, signature, event_type.
Use get_logger() in all modules for aggregation-friendly output.
"""

from txlens.txlens_logging.logger import bind_signature, configure_structlog, get_logger

__all__ = ["bind_signature", "configure_structlog", "get_logger"]
