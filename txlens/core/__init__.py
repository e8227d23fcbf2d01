"""
Core utilities: error taxonomy shared by the parser, decoders and scan workflow.
"""

from txlens.core.exceptions import (
    ErrorCode,
    IncompleteTransactionDataError,
    InstructionDecodeError,
    InvalidBalanceDataError,
    ParsingFailedError,
    TimestampParsingError,
    TransactionParsingError,
    TxLensError,
)

__all__ = [
    "ErrorCode",
    "IncompleteTransactionDataError",
    "InstructionDecodeError",
    "InvalidBalanceDataError",
    "ParsingFailedError",
    "TimestampParsingError",
    "TransactionParsingError",
    "TxLensError",
]
