"""
Base class and byte-level helpers shared by every instruction decoder.

A decoder owns a fixed set of program ids. The parser only calls decode()
after can_handle() returned True; decode() raises InstructionDecodeError
when a payload for its own program is malformed (bad base58, truncated
fields, account index out of range). Unknown discriminators are not
errors: they produce an "Unknown <Family> Instruction" result.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any

import base58

from txlens.core.exceptions import InstructionDecodeError
from txlens.parser.models import AccountKeyLike, RawInstruction, resolve_address

PUBKEY_LENGTH = 32


@dataclass(frozen=True)
class DecodedInstruction:
    type: str
    params: dict[str, Any] = field(default_factory=dict)


def decode_data(data: str) -> bytes:
    """Decode a base58 instruction payload to raw bytes."""
    try:
        return base58.b58decode(data)
    except ValueError as e:
        raise InstructionDecodeError(f"Invalid base58 instruction data: {e}") from e


def _require(buf: bytes, offset: int, width: int, what: str) -> None:
    if offset < 0 or offset + width > len(buf):
        raise InstructionDecodeError(
            f"Instruction data too short for {what} at offset {offset}",
            {"offset": offset, "width": width, "length": len(buf)},
        )


def read_uint_le(buf: bytes, offset: int, width: int) -> int:
    """Unsigned little-endian integer: sum(byte[i] * 256**i) over exactly `width` bytes."""
    _require(buf, offset, width, f"u{width * 8}")
    value = 0
    for i in range(width):
        value += buf[offset + i] * 256**i
    return value


def read_u8(buf: bytes, offset: int) -> int:
    return read_uint_le(buf, offset, 1)


def read_u32(buf: bytes, offset: int) -> int:
    return read_uint_le(buf, offset, 4)


def read_u64(buf: bytes, offset: int) -> int:
    return read_uint_le(buf, offset, 8)


def read_pubkey(buf: bytes, offset: int) -> str:
    """Read a 32-byte public key and re-encode it as base58 text."""
    _require(buf, offset, PUBKEY_LENGTH, "pubkey")
    return base58.b58encode(buf[offset:offset + PUBKEY_LENGTH]).decode("ascii")


class InstructionDecoder(ABC):
    """One decoder per program family."""

    family: str = "Program"
    """Display family, used in 'Unknown <Family> Instruction'."""
    program_ids: frozenset[str] = frozenset()

    def can_handle(self, program_id: str) -> bool:
        return program_id in self.program_ids

    @abstractmethod
    def decode(
        self,
        instruction: RawInstruction,
        account_keys: list[AccountKeyLike],
    ) -> DecodedInstruction:
        """Decode one instruction of a program this decoder owns."""

    @property
    def unknown_type(self) -> str:
        return f"Unknown {self.family} Instruction"

    def unknown(self, discriminator: Any) -> DecodedInstruction:
        return DecodedInstruction(type=self.unknown_type, params={"discriminator": discriminator})

    @staticmethod
    def account(
        instruction: RawInstruction,
        account_keys: list[AccountKeyLike],
        position: int,
    ) -> str:
        """Address of the instruction's `position`-th account."""
        if not (0 <= position < len(instruction.accounts)):
            raise InstructionDecodeError(
                f"Instruction has no account at position {position}",
                {"position": position, "accounts": len(instruction.accounts)},
            )
        address = resolve_address(account_keys, instruction.accounts[position])
        if address is None:
            raise InstructionDecodeError(
                f"Account index {instruction.accounts[position]} out of range",
                {"position": position, "index": instruction.accounts[position]},
            )
        return address
