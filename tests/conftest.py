"""
Pytest fixtures for txlens tests: raw and parsed transaction builders
and a fresh settings cache per test, so tests need no RPC.
"""

from __future__ import annotations

import pytest

from helpers import LAMPORTS_PER_SOL, PAYER, RECIPIENT, SIGNATURE, SYSTEM_PROGRAM_ID, system_transfer_data
from txlens.config import reset_settings_cache
from txlens.parser.models import (
    ComputeUnits,
    ParsedTransaction,
    RawInstruction,
    RawTransaction,
    TransactionMeta,
    TransactionStatus,
)


@pytest.fixture(autouse=True)
def _fresh_settings():
    """Each test reads settings from its own environment."""
    reset_settings_cache()
    yield
    reset_settings_cache()


@pytest.fixture
def make_raw_tx():
    """
    Build a RawTransaction. Defaults: payer -> recipient System transfer,
    fee 5000, balances [10 SOL, 0] -> [10 SOL - amount - fee, amount].
    """

    def _make(
        *,
        account_keys=None,
        instructions=None,
        pre_balances=None,
        post_balances=None,
        pre_token_balances=None,
        post_token_balances=None,
        fee=5000,
        err=None,
        compute_units_consumed=None,
        block_time=1_700_000_000,
        signatures=None,
        meta=True,
        slot=250_000_000,
    ) -> RawTransaction:
        amount = 1 * LAMPORTS_PER_SOL
        if account_keys is None:
            account_keys = [PAYER, RECIPIENT, SYSTEM_PROGRAM_ID]
        if instructions is None:
            instructions = [RawInstruction(program_id_index=2, accounts=[0, 1], data=system_transfer_data(amount))]
        if pre_balances is None:
            pre_balances = [10 * LAMPORTS_PER_SOL, 0, 1]
        if post_balances is None:
            post_balances = [10 * LAMPORTS_PER_SOL - amount - fee, amount, 1]
        tx_meta = None
        if meta:
            tx_meta = TransactionMeta(
                err=err,
                fee=fee,
                pre_balances=pre_balances,
                post_balances=post_balances,
                pre_token_balances=pre_token_balances or [],
                post_token_balances=post_token_balances or [],
                log_messages=[],
                compute_units_consumed=compute_units_consumed,
            )
        return RawTransaction(
            slot=slot,
            block_time=block_time,
            account_keys=account_keys,
            instructions=instructions,
            signatures=[SIGNATURE] if signatures is None else signatures,
            meta=tx_meta,
        )

    return _make


@pytest.fixture
def make_parsed_tx():
    """Build a ParsedTransaction directly, for rule and scorer tests."""

    def _make(
        *,
        account_changes=None,
        token_transfers=None,
        program_interactions=None,
        status=TransactionStatus.SUCCESS,
        compute_used=0,
        compute_limit=200_000,
        fee=5000,
        signature=SIGNATURE,
    ) -> ParsedTransaction:
        return ParsedTransaction(
            signature=signature,
            status=status,
            slot=1,
            block_time=None,
            account_changes=account_changes or [],
            token_transfers=token_transfers or [],
            program_interactions=program_interactions or [],
            compute_units=ComputeUnits(used=compute_used, limit=compute_limit),
            fee=fee,
        )

    return _make
