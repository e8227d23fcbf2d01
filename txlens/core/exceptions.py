"""
Application-level exceptions.

Every txlens error carries an ErrorCode, a message and optional details.
Structural parse failures (TransactionParsingError subclasses) also carry
the transaction signature so batch callers can log and skip them.
InstructionDecodeError is per-instruction and never escapes the parser.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any

from txlens.config.settings import get_settings


class ErrorCode(str, Enum):
    # Data
    INCOMPLETE_TRANSACTION_DATA = "INCOMPLETE_TRANSACTION_DATA"

    # Processing
    PARSING_FAILED = "PARSING_FAILED"
    INSTRUCTION_DECODE_FAILED = "INSTRUCTION_DECODE_FAILED"
    INVALID_BALANCE_DATA = "INVALID_BALANCE_DATA"
    TIMESTAMP_PARSING_ERROR = "TIMESTAMP_PARSING_ERROR"

    UNKNOWN_ERROR = "UNKNOWN_ERROR"


SUGGESTIONS: dict[ErrorCode, str] = {
    ErrorCode.INCOMPLETE_TRANSACTION_DATA: (
        "The transaction data from RPC is incomplete; this may be temporary, try again in a moment"
    ),
    ErrorCode.PARSING_FAILED: (
        "Failed to parse transaction data; this may indicate corrupted or unexpected data"
    ),
    ErrorCode.INSTRUCTION_DECODE_FAILED: (
        "The transaction is still reported with generic instruction info"
    ),
    ErrorCode.INVALID_BALANCE_DATA: (
        "Transaction balance data is invalid or corrupted; try fetching the transaction again"
    ),
    ErrorCode.TIMESTAMP_PARSING_ERROR: (
        "The block time on this transaction is not a valid Unix timestamp"
    ),
    ErrorCode.UNKNOWN_ERROR: (
        "Run with TXLENS_DEBUG=1 for more details"
    ),
}


class TxLensError(Exception):
    """Base error for txlens. Carries an ErrorCode and JSON-serializable details."""

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.UNKNOWN_ERROR,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    @property
    def suggestion(self) -> str | None:
        return SUGGESTIONS.get(self.code)

    def to_formatted_string(self, *, debug: bool | None = None) -> str:
        """
        Return '[CODE] message' plus the suggestion and, in debug mode, the details.

        debug defaults to the TXLENS_DEBUG / DEBUG setting.
        """
        if debug is None:
            debug = get_settings().debug
        lines = [f"[{self.code.value}] {self.message}"]
        if self.suggestion:
            lines.append(f"Tip: {self.suggestion}")
        if debug and self.details:
            lines.append(f"Details: {json.dumps(self.details, indent=2, default=str)}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class TransactionParsingError(TxLensError):
    """Structural failure that aborts a whole parse. Always carries the signature."""

    code_default = ErrorCode.PARSING_FAILED

    def __init__(
        self,
        message: str,
        signature: str | None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = dict(details or {})
        details.setdefault("signature", signature)
        super().__init__(message, self.code_default, details)
        self.signature = signature


class IncompleteTransactionDataError(TransactionParsingError):
    code_default = ErrorCode.INCOMPLETE_TRANSACTION_DATA


class InvalidBalanceDataError(TransactionParsingError):
    code_default = ErrorCode.INVALID_BALANCE_DATA


class TimestampParsingError(TransactionParsingError):
    code_default = ErrorCode.TIMESTAMP_PARSING_ERROR


class ParsingFailedError(TransactionParsingError):
    """Catch-all wrapper for unexpected faults inside parse()."""

    code_default = ErrorCode.PARSING_FAILED


class InstructionDecodeError(TxLensError):
    """Raised by a decoder for its own program when the payload cannot be decoded."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message, ErrorCode.INSTRUCTION_DECODE_FAILED, details)
