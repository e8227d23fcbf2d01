"""System Program decoder (u32 little-endian discriminator)."""

from __future__ import annotations

from txlens.parser.decoders.base import (
    DecodedInstruction,
    InstructionDecoder,
    decode_data,
    read_pubkey,
    read_u32,
    read_u64,
)
from txlens.parser.models import AccountKeyLike, RawInstruction

SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"

CREATE_ACCOUNT = 0
ASSIGN = 1
TRANSFER = 2
CREATE_ACCOUNT_WITH_SEED = 3
ADVANCE_NONCE_ACCOUNT = 4
WITHDRAW_NONCE_ACCOUNT = 5
INITIALIZE_NONCE_ACCOUNT = 6
AUTHORIZE_NONCE_ACCOUNT = 7
ALLOCATE = 8


class SystemProgramDecoder(InstructionDecoder):
    family = "System"
    program_ids = frozenset({SYSTEM_PROGRAM_ID})

    def decode(
        self,
        instruction: RawInstruction,
        account_keys: list[AccountKeyLike],
    ) -> DecodedInstruction:
        data = decode_data(instruction.data)
        kind = read_u32(data, 0)

        def acct(position: int) -> str:
            return self.account(instruction, account_keys, position)

        if kind == CREATE_ACCOUNT:
            return DecodedInstruction("CreateAccount", {
                "from": acct(0),
                "to": acct(1),
                "lamports": read_u64(data, 4),
                "space": read_u64(data, 12),
                "owner": read_pubkey(data, 20),
            })
        if kind == ASSIGN:
            return DecodedInstruction("Assign", {
                "account": acct(0),
                "owner": read_pubkey(data, 4),
            })
        if kind == TRANSFER:
            return DecodedInstruction("Transfer", {
                "from": acct(0),
                "to": acct(1),
                "lamports": read_u64(data, 4),
            })
        if kind == CREATE_ACCOUNT_WITH_SEED:
            return DecodedInstruction("CreateAccountWithSeed", {
                "from": acct(0),
                "to": acct(1),
            })
        if kind == ADVANCE_NONCE_ACCOUNT:
            return DecodedInstruction("AdvanceNonceAccount", {
                "nonce": acct(0),
                "authority": acct(2),
            })
        if kind == WITHDRAW_NONCE_ACCOUNT:
            return DecodedInstruction("WithdrawNonceAccount", {
                "nonce": acct(0),
                "to": acct(1),
                "authority": acct(4),
                "lamports": read_u64(data, 4),
            })
        if kind == INITIALIZE_NONCE_ACCOUNT:
            return DecodedInstruction("InitializeNonceAccount", {
                "nonce": acct(0),
                "authority": read_pubkey(data, 4),
            })
        if kind == AUTHORIZE_NONCE_ACCOUNT:
            return DecodedInstruction("AuthorizeNonceAccount", {
                "nonce": acct(0),
                "authority": acct(1),
            })
        if kind == ALLOCATE:
            return DecodedInstruction("Allocate", {
                "account": acct(0),
                "space": read_u64(data, 4),
            })
        return self.unknown(kind)
