"""
Decoder registry: ordered, first-match dispatch from program id to decoder.

Order is an explicit priority (lower runs first); decoders registered with
the same priority keep registration order. The registry is read-only once
built and safe to share between threads.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator

from txlens.parser.decoders.base import InstructionDecoder
from txlens.parser.decoders.metaplex import MetaplexDecoder
from txlens.parser.decoders.system import SystemProgramDecoder
from txlens.parser.decoders.token import TokenProgramDecoder


@dataclass(frozen=True)
class RegisteredDecoder:
    priority: int
    sequence: int
    decoder: InstructionDecoder


class DecoderRegistry:
    def __init__(self, decoders: Iterable[tuple[int, InstructionDecoder]] = ()) -> None:
        self._entries: list[RegisteredDecoder] = []
        for priority, decoder in decoders:
            self.register(decoder, priority=priority)

    def register(self, decoder: InstructionDecoder, *, priority: int = 100) -> "DecoderRegistry":
        entry = RegisteredDecoder(priority=priority, sequence=len(self._entries), decoder=decoder)
        self._entries.append(entry)
        self._entries.sort(key=lambda e: (e.priority, e.sequence))
        return self

    def find(self, program_id: str) -> InstructionDecoder | None:
        """First decoder (in priority order) whose can_handle() accepts program_id."""
        for entry in self._entries:
            if entry.decoder.can_handle(program_id):
                return entry.decoder
        return None

    def __iter__(self) -> Iterator[InstructionDecoder]:
        return (e.decoder for e in self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def default_registry() -> DecoderRegistry:
    """System, SPL Token (incl. Token-2022), then Metaplex."""
    return DecoderRegistry([
        (10, SystemProgramDecoder()),
        (20, TokenProgramDecoder()),
        (30, MetaplexDecoder()),
    ])
