"""SPL Token and Token-2022 decoder (single-byte discriminator)."""

from __future__ import annotations

from txlens.parser.decoders.base import (
    DecodedInstruction,
    InstructionDecoder,
    decode_data,
    read_u64,
    read_u8,
)
from txlens.parser.models import AccountKeyLike, RawInstruction

TOKEN_PROGRAM_ID = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"
TOKEN_2022_PROGRAM_ID = "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb"

INITIALIZE_MINT = 0
INITIALIZE_ACCOUNT = 1
TRANSFER = 3
MINT_TO = 7
BURN = 8
CLOSE_ACCOUNT = 9
TRANSFER_CHECKED = 12


class TokenProgramDecoder(InstructionDecoder):
    family = "Token"
    program_ids = frozenset({TOKEN_PROGRAM_ID, TOKEN_2022_PROGRAM_ID})

    def decode(
        self,
        instruction: RawInstruction,
        account_keys: list[AccountKeyLike],
    ) -> DecodedInstruction:
        data = decode_data(instruction.data)
        kind = read_u8(data, 0)

        def acct(position: int) -> str:
            return self.account(instruction, account_keys, position)

        if kind == INITIALIZE_MINT:
            return DecodedInstruction("InitializeMint", {
                "mint": acct(0),
                "decimals": read_u8(data, 1),
            })
        if kind == INITIALIZE_ACCOUNT:
            return DecodedInstruction("InitializeAccount", {
                "account": acct(0),
                "mint": acct(1),
                "owner": acct(2),
            })
        if kind == TRANSFER:
            return DecodedInstruction("Transfer", {
                "source": acct(0),
                "destination": acct(1),
                "authority": acct(2),
                "amount": read_u64(data, 1),
            })
        if kind == MINT_TO:
            return DecodedInstruction("MintTo", {
                "mint": acct(0),
                "account": acct(1),
                "authority": acct(2),
                "amount": read_u64(data, 1),
            })
        if kind == BURN:
            return DecodedInstruction("Burn", {
                "account": acct(0),
                "mint": acct(1),
                "authority": acct(2),
                "amount": read_u64(data, 1),
            })
        if kind == CLOSE_ACCOUNT:
            return DecodedInstruction("CloseAccount", {
                "account": acct(0),
                "destination": acct(1),
                "authority": acct(2),
            })
        if kind == TRANSFER_CHECKED:
            return DecodedInstruction("TransferChecked", {
                "source": acct(0),
                "mint": acct(1),
                "destination": acct(2),
                "authority": acct(3),
                "amount": read_u64(data, 1),
                "decimals": read_u8(data, 9),
            })
        return self.unknown(kind)
