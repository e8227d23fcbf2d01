"""
Tests for the transaction parser (parser.TransactionParser, parse, parse_batch).

Raw transactions are built in memory (conftest.make_raw_tx) or as
getTransaction-style dicts; no RPC.
"""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from helpers import (
    LAMPORTS_PER_SOL,
    PAYER,
    RECIPIENT,
    SIGNATURE,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
    b58,
    system_transfer_data,
    token_balance,
)
from txlens.core.exceptions import (
    ErrorCode,
    IncompleteTransactionDataError,
    InvalidBalanceDataError,
    ParsingFailedError,
    TimestampParsingError,
)
from txlens.parser import (
    AccountChange,
    AccountKey,
    DecoderRegistry,
    ProgramInteraction,
    RawInstruction,
    TokenBalance,
    TokenTransfer,
    TransactionParser,
    TransactionStatus,
    parse,
    parse_batch,
)

MINT = "So11111111111111111111111111111111111111112"
OTHER_MINT = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
UNREGISTERED_PROGRAM = "Prog1111111111111111111111111111111111111111"


# --- Happy path ---


def test_parse_system_transfer(make_raw_tx):
    parsed = TransactionParser().parse(make_raw_tx())

    assert parsed.signature == SIGNATURE
    assert parsed.status == TransactionStatus.SUCCESS
    assert parsed.slot == 250_000_000
    assert parsed.block_time == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
    assert parsed.fee == 5000
    assert parsed.compute_units.used == 0
    assert parsed.compute_units.limit == 200_000
    assert parsed.account_changes == [
        AccountChange(address=PAYER, balance_change=-(LAMPORTS_PER_SOL + 5000), is_fee_payer=True),
        AccountChange(address=RECIPIENT, balance_change=LAMPORTS_PER_SOL, is_fee_payer=False),
    ]
    assert parsed.program_interactions == [
        ProgramInteraction(
            program_id=SYSTEM_PROGRAM_ID,
            program_name="System Program",
            instruction_type="Transfer",
            details={"from": PAYER, "to": RECIPIENT, "lamports": LAMPORTS_PER_SOL},
        )
    ]
    assert parsed.token_transfers == []
    assert parsed.warnings == []


def test_status_failed_when_meta_err_present(make_raw_tx):
    parsed = TransactionParser().parse(make_raw_tx(err={"InstructionError": [0, "Custom"]}))
    assert parsed.status == TransactionStatus.FAILED


def test_compute_units_and_custom_limit(make_raw_tx):
    parsed = TransactionParser(compute_unit_limit=1_400_000).parse(make_raw_tx(compute_units_consumed=150))
    assert parsed.compute_units.used == 150
    assert parsed.compute_units.limit == 1_400_000


def test_parse_is_deterministic(make_raw_tx):
    raw = make_raw_tx()
    parser = TransactionParser()
    assert parser.parse(raw) == parser.parse(raw)
    assert parser.parse(raw).to_dict() == parser.parse(raw).to_dict()


# --- Account changes ---


def test_zero_changes_omitted(make_raw_tx):
    parsed = parse(make_raw_tx(pre_balances=[5, 7, 1], post_balances=[5, 7, 1]))
    assert parsed.account_changes == []


def test_fee_payer_only_for_index_zero_debit(make_raw_tx):
    parsed = parse(make_raw_tx(pre_balances=[10, 10, 1], post_balances=[20, 0, 1]))
    assert [c.is_fee_payer for c in parsed.account_changes] == [False, False]
    assert all(c.balance_change != 0 for c in parsed.account_changes)


def test_unequal_balance_arrays_fail(make_raw_tx):
    with pytest.raises(InvalidBalanceDataError) as exc_info:
        TransactionParser().parse(make_raw_tx(pre_balances=[1, 2, 3], post_balances=[1, 2]))
    assert exc_info.value.signature == SIGNATURE
    assert exc_info.value.code == ErrorCode.INVALID_BALANCE_DATA


def test_balance_index_without_account_key_degrades(make_raw_tx):
    parsed = parse(
        make_raw_tx(
            account_keys=[PAYER],
            instructions=[],
            pre_balances=[10, 0],
            post_balances=[5, 5],
        )
    )
    assert [c.address for c in parsed.account_changes] == [PAYER, "unknown"]
    assert len(parsed.warnings) == 1


def test_malformed_balance_entry_skipped(make_raw_tx):
    parsed = parse(
        make_raw_tx(
            pre_balances=[10 * LAMPORTS_PER_SOL, None, 1],
            post_balances=[10 * LAMPORTS_PER_SOL - 1_000_005_000, 5, 1],
        )
    )
    assert parsed.account_changes == [
        AccountChange(address=PAYER, balance_change=-1_000_005_000, is_fee_payer=True),
    ]
    assert parsed.warnings == ["account 1: malformed balance entry"]
    assert len(parsed.program_interactions) == 1


# --- Token transfers ---


def test_token_transfers_from_balance_diff(make_raw_tx):
    keys = [PAYER, "tokA", "tokB", "tokC", TOKEN_PROGRAM_ID]
    parsed = parse(
        make_raw_tx(
            account_keys=keys,
            instructions=[],
            pre_balances=[0] * 5,
            post_balances=[0] * 5,
            pre_token_balances=[token_balance(1, MINT, 500), token_balance(2, MINT, 100)],
            post_token_balances=[
                token_balance(1, MINT, 300),
                token_balance(2, MINT, 300),
                token_balance(3, OTHER_MINT, 50, decimals=9),
            ],
        )
    )
    assert parsed.token_transfers == [
        TokenTransfer(mint=MINT, amount=200, decimals=6, from_address="tokA", to_address="unknown"),
        TokenTransfer(mint=MINT, amount=200, decimals=6, from_address="unknown", to_address="tokB"),
        TokenTransfer(mint=OTHER_MINT, amount=50, decimals=9, from_address="unknown", to_address="tokC"),
    ]


def test_token_account_closed_counts_as_outflow(make_raw_tx):
    keys = [PAYER, "tokA", TOKEN_PROGRAM_ID]
    parsed = parse(
        make_raw_tx(
            account_keys=keys,
            instructions=[],
            pre_balances=[0] * 3,
            post_balances=[0] * 3,
            pre_token_balances=[token_balance(1, MINT, 42)],
        )
    )
    assert parsed.token_transfers == [
        TokenTransfer(mint=MINT, amount=42, decimals=6, from_address="tokA", to_address="unknown")
    ]


def test_unchanged_and_malformed_token_balances_skipped(make_raw_tx):
    keys = [PAYER, "tokA", "tokB", TOKEN_PROGRAM_ID]
    bad = TokenBalance(account_index=2, mint=MINT, amount="12.5", decimals=6)
    parsed = parse(
        make_raw_tx(
            account_keys=keys,
            instructions=[],
            pre_balances=[0] * 4,
            post_balances=[0] * 4,
            pre_token_balances=[token_balance(1, MINT, 10)],
            post_token_balances=[token_balance(1, MINT, 10), bad],
        )
    )
    assert parsed.token_transfers == []
    assert len(parsed.warnings) == 1


# --- Program interactions ---


def test_unregistered_program_is_unknown(make_raw_tx):
    keys = [PAYER, RECIPIENT, UNREGISTERED_PROGRAM]
    parsed = parse(make_raw_tx(account_keys=keys))
    assert len(parsed.program_interactions) == 1
    interaction = parsed.program_interactions[0]
    assert interaction.program_id == UNREGISTERED_PROGRAM
    assert interaction.program_name is None
    assert interaction.instruction_type == "Unknown"
    assert interaction.details == {}
    assert parsed.warnings == []


def test_decoder_failure_falls_back_and_continues(make_raw_tx):
    instructions = [
        RawInstruction(program_id_index=2, accounts=[0, 1], data="0OIl"),
        RawInstruction(program_id_index=2, accounts=[0, 1], data=system_transfer_data(7)),
    ]
    parsed = parse(make_raw_tx(instructions=instructions))
    failed, ok = parsed.program_interactions
    assert failed.instruction_type == "Unknown System Instruction"
    assert failed.details["program_id"] == SYSTEM_PROGRAM_ID
    assert "error" in failed.details
    assert ok.instruction_type == "Transfer"
    assert ok.details["lamports"] == 7
    assert len(parsed.warnings) == 1


def test_interactions_preserve_instruction_order(make_raw_tx):
    keys = [PAYER, RECIPIENT, SYSTEM_PROGRAM_ID, TOKEN_PROGRAM_ID, UNREGISTERED_PROGRAM]
    instructions = [
        RawInstruction(program_id_index=3, accounts=[1], data=b58(bytes([0, 0]))),
        RawInstruction(program_id_index=4, accounts=[], data=""),
        RawInstruction(program_id_index=2, accounts=[0, 1], data=system_transfer_data(1)),
        RawInstruction(program_id_index=9, accounts=[], data=""),
    ]
    parsed = parse(make_raw_tx(account_keys=keys, instructions=instructions, pre_balances=[0] * 5, post_balances=[0] * 5))
    assert len(parsed.program_interactions) == len(instructions)
    assert [p.instruction_type for p in parsed.program_interactions] == [
        "InitializeMint",
        "Unknown",
        "Transfer",
        "Unknown",
    ]
    assert parsed.program_interactions[3].program_id == "unknown"


# --- Structural failures ---


def test_missing_meta_fails(make_raw_tx):
    with pytest.raises(IncompleteTransactionDataError) as exc_info:
        parse(make_raw_tx(meta=False))
    assert exc_info.value.signature == SIGNATURE


def test_missing_signatures_fails(make_raw_tx):
    with pytest.raises(IncompleteTransactionDataError):
        parse(make_raw_tx(signatures=[]))


@pytest.mark.parametrize("block_time", ["not-a-time", 10**20, float("nan"), [1]])
def test_corrupt_block_time_fails(make_raw_tx, block_time):
    with pytest.raises(TimestampParsingError):
        parse(make_raw_tx(block_time=block_time))


@pytest.mark.parametrize("block_time", [None, 0])
def test_absent_block_time_is_unknown(make_raw_tx, block_time):
    assert parse(make_raw_tx(block_time=block_time)).block_time is None


class _ExplodingRegistry(DecoderRegistry):
    def find(self, program_id):
        raise RuntimeError("registry corrupted")


def test_unexpected_fault_wrapped_with_signature(make_raw_tx):
    parser = TransactionParser(_ExplodingRegistry())
    with pytest.raises(ParsingFailedError) as exc_info:
        parser.parse(make_raw_tx())
    assert exc_info.value.signature == SIGNATURE
    assert exc_info.value.details["signature"] == SIGNATURE
    assert "registry corrupted" in exc_info.value.details["original_error"]


# --- RPC payloads ---


def _rpc_payload(meta: dict | None) -> dict:
    return {
        "slot": 123,
        "blockTime": 1_700_000_000,
        "transaction": {
            "signatures": [SIGNATURE],
            "message": {
                "accountKeys": [
                    {"pubkey": PAYER, "signer": True, "writable": True},
                    {"pubkey": RECIPIENT, "signer": False, "writable": True},
                    {"pubkey": SYSTEM_PROGRAM_ID, "signer": False, "writable": False},
                ],
                "instructions": [
                    {"programIdIndex": 2, "accounts": [0, 1], "data": system_transfer_data(500)},
                ],
                "recentBlockhash": "EkSnNWid2cvwEVnVx9aBqawnmiCNiDgp3gUdkDPTKN1N",
            },
        },
        "meta": meta,
    }


def test_parse_rpc_dict_with_annotated_keys_and_loaded_addresses():
    loaded = "Lookup11111111111111111111111111111111111111"
    raw = _rpc_payload({
        "err": None,
        "fee": 5000,
        "preBalances": [1_000_000, 0, 1, 10],
        "postBalances": [994_500, 500, 1, 20],
        "preTokenBalances": [],
        "postTokenBalances": [
            {"accountIndex": 3, "mint": MINT, "uiTokenAmount": {"amount": "9", "decimals": 0, "uiAmount": 9.0}},
        ],
        "logMessages": ["Program 11111111111111111111111111111111 success"],
        "computeUnitsConsumed": 150,
        "loadedAddresses": {"writable": [loaded], "readonly": []},
    })
    parsed = parse(raw)
    assert parsed.program_interactions[0].details == {"from": PAYER, "to": RECIPIENT, "lamports": 500}
    assert [c.address for c in parsed.account_changes] == [PAYER, RECIPIENT, loaded]
    assert parsed.token_transfers[0].to_address == loaded
    assert parsed.compute_units.used == 150


def test_from_rpc_keeps_account_key_flags():
    from txlens.parser import RawTransaction

    raw = RawTransaction.from_rpc(_rpc_payload({"err": None, "fee": 0, "preBalances": [], "postBalances": []}))
    assert raw.account_keys[0] == AccountKey(pubkey=PAYER, signer=True, writable=True)
    assert raw.instructions[0].program_id_index == 2


def test_parse_rpc_dict_without_meta_fails():
    with pytest.raises(IncompleteTransactionDataError):
        parse(_rpc_payload(None))


def test_parse_rpc_dict_skips_malformed_token_balance():
    raw = _rpc_payload({
        "err": None,
        "fee": 5000,
        "preBalances": [1_000_000, 0, 1],
        "postBalances": [994_500, 500, 1],
        "preTokenBalances": [
            {"accountIndex": 0, "uiTokenAmount": {"amount": "5", "decimals": 0}},
        ],
        "postTokenBalances": [
            {"accountIndex": 1, "mint": MINT, "uiTokenAmount": {"amount": "3", "decimals": 0}},
        ],
    })
    parsed = parse(raw)
    assert parsed.signature == SIGNATURE
    assert [(t.mint, t.amount, t.to_address) for t in parsed.token_transfers] == [(MINT, 3, RECIPIENT)]
    assert len(parsed.warnings) == 1
    assert parsed.warnings[0].startswith("token balance entry skipped")


def test_parse_batch_skips_structural_failures(make_raw_tx):
    good = make_raw_tx()
    no_meta = make_raw_tx(meta=False)
    mismatched = make_raw_tx(pre_balances=[1], post_balances=[1, 2])
    parsed = parse_batch([good, no_meta, mismatched, _rpc_payload(None)])
    assert len(parsed) == 1
    assert parsed[0].signature == SIGNATURE
