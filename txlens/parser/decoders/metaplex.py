"""
Metaplex decoder: Token Metadata, Candy Machine v3 and Auction House.

These are anchor-style programs: the first 8 bytes of the payload are an
opaque discriminator. Instruction shapes are not tabulated, so the
decoder reports the discriminator (hex) and the resolved account list.
"""

from __future__ import annotations

from txlens.core.exceptions import InstructionDecodeError
from txlens.parser.decoders.base import DecodedInstruction, InstructionDecoder, decode_data
from txlens.parser.models import AccountKeyLike, RawInstruction, resolve_address

TOKEN_METADATA_PROGRAM_ID = "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s"
CANDY_MACHINE_V3_PROGRAM_ID = "CndyV3LdqHUfDLmE5naZjVN8rBZz4tqhdefbAnjHG3JR"
AUCTION_HOUSE_PROGRAM_ID = "hausS13jsjafwWwGqZTUQRmWyvyxn9EQpqMwV1PBBmk"

ANCHOR_DISCRIMINATOR_LENGTH = 8

INSTRUCTION_TYPES = {
    TOKEN_METADATA_PROGRAM_ID: "Token Metadata Instruction",
    CANDY_MACHINE_V3_PROGRAM_ID: "Candy Machine Instruction",
    AUCTION_HOUSE_PROGRAM_ID: "Auction House Instruction",
}


class MetaplexDecoder(InstructionDecoder):
    family = "Metaplex"
    program_ids = frozenset(INSTRUCTION_TYPES)

    def decode(
        self,
        instruction: RawInstruction,
        account_keys: list[AccountKeyLike],
    ) -> DecodedInstruction:
        program_id = resolve_address(account_keys, instruction.program_id_index)
        data = decode_data(instruction.data)
        if len(data) < ANCHOR_DISCRIMINATOR_LENGTH:
            raise InstructionDecodeError(
                "Instruction data too short for an 8-byte discriminator",
                {"length": len(data)},
            )
        discriminator = data[:ANCHOR_DISCRIMINATOR_LENGTH].hex()
        instruction_type = INSTRUCTION_TYPES[program_id]
        accounts = [
            self.account(instruction, account_keys, position)
            for position in range(len(instruction.accounts))
        ]
        return DecodedInstruction(instruction_type, {
            "discriminator": discriminator,
            "accounts": accounts,
        })
