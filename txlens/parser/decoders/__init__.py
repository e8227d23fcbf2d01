"""
Instruction decoders, one per program family, and the registry that orders them.
"""

from txlens.parser.decoders.base import DecodedInstruction, InstructionDecoder
from txlens.parser.decoders.metaplex import MetaplexDecoder
from txlens.parser.decoders.registry import DecoderRegistry, default_registry
from txlens.parser.decoders.system import SystemProgramDecoder
from txlens.parser.decoders.token import TokenProgramDecoder

__all__ = [
    "DecodedInstruction",
    "DecoderRegistry",
    "InstructionDecoder",
    "MetaplexDecoder",
    "SystemProgramDecoder",
    "TokenProgramDecoder",
    "default_registry",
]
