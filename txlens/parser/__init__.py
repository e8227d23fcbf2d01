"""
Solana transaction parser package.

Turns already-fetched transaction records into ParsedTransaction values:
lamport balance changes, token transfers, and decoded program
instructions, via an ordered registry of instruction decoders.
"""

from txlens.parser.decoders import DecoderRegistry, InstructionDecoder, default_registry
from txlens.parser.known_programs import KNOWN_PROGRAMS, get_program_name
from txlens.parser.models import (
    UNKNOWN_ADDRESS,
    AccountChange,
    AccountKey,
    ComputeUnits,
    ParsedTransaction,
    ProgramInteraction,
    RawInstruction,
    RawTransaction,
    SignatureInfo,
    TokenBalance,
    TokenTransfer,
    TransactionMeta,
    TransactionStatus,
)
from txlens.parser.parser import TransactionParser, parse, parse_batch

__all__ = [
    "KNOWN_PROGRAMS",
    "UNKNOWN_ADDRESS",
    "AccountChange",
    "AccountKey",
    "ComputeUnits",
    "DecoderRegistry",
    "InstructionDecoder",
    "ParsedTransaction",
    "ProgramInteraction",
    "RawInstruction",
    "RawTransaction",
    "SignatureInfo",
    "TokenBalance",
    "TokenTransfer",
    "TransactionMeta",
    "TransactionParser",
    "TransactionStatus",
    "default_registry",
    "get_program_name",
    "parse",
    "parse_batch",
]
