"""
Solana transaction parser: raw transaction records to ParsedTransaction.

Diffs pre/post lamport balances and token balances, decodes every
instruction through the decoder registry, and extracts fee, compute and
status data. Purely structural; no scoring.

Failure policy:
- Per-item problems (one instruction fails to decode, one token balance
  entry is malformed, an account index cannot be resolved) are logged,
  recorded in ParsedTransaction.warnings, and replaced by degraded output.
- Structural problems (no metadata, mismatched balance arrays, corrupt
  block time) abort the parse with a TransactionParsingError subclass.
  Anything else unexpected is wrapped in ParsingFailedError.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Iterable

from txlens.config.env import DEFAULT_COMPUTE_UNIT_LIMIT
from txlens.core.exceptions import (
    IncompleteTransactionDataError,
    InstructionDecodeError,
    InvalidBalanceDataError,
    ParsingFailedError,
    TimestampParsingError,
    TransactionParsingError,
)
from txlens.parser.decoders.registry import DecoderRegistry, default_registry
from txlens.parser.known_programs import get_program_name
from txlens.parser.models import (
    UNKNOWN_ADDRESS,
    AccountChange,
    AccountKeyLike,
    ComputeUnits,
    ParsedTransaction,
    ProgramInteraction,
    RawInstruction,
    RawTransaction,
    TokenBalance,
    TokenTransfer,
    TransactionMeta,
    TransactionStatus,
    resolve_address,
)
from txlens.txlens_logging import get_logger

logger = get_logger(__name__)

UNKNOWN_INSTRUCTION = "Unknown"


@dataclass(frozen=True)
class _DecodeOutcome:
    interaction: ProgramInteraction
    warning: str | None = None


class TransactionParser:
    """
    Parses RawTransaction values using an ordered decoder registry.

    Holds no per-call state; one instance can be shared across threads.
    """

    def __init__(
        self,
        registry: DecoderRegistry | None = None,
        *,
        compute_unit_limit: int = DEFAULT_COMPUTE_UNIT_LIMIT,
    ) -> None:
        self.registry = registry if registry is not None else default_registry()
        self.compute_unit_limit = compute_unit_limit

    def parse(self, raw: RawTransaction) -> ParsedTransaction:
        signature = raw.signatures[0] if raw.signatures else None
        try:
            return self._parse(raw, signature)
        except TransactionParsingError as e:
            logger.warning("transaction_parse_rejected", signature=signature, code=e.code.value, error=e.message)
            raise
        except Exception as e:
            logger.error("transaction_parse_failed", signature=signature, error=str(e), exc_info=True)
            raise ParsingFailedError(
                f"Unexpected error while parsing transaction: {e}",
                signature,
                {"original_error": repr(e)},
            ) from e

    def _parse(self, raw: RawTransaction, signature: str | None) -> ParsedTransaction:
        if raw.meta is None:
            raise IncompleteTransactionDataError(
                "Transaction has no execution metadata", signature
            )
        if signature is None:
            raise IncompleteTransactionDataError("Transaction has no signatures", signature)
        meta: TransactionMeta = raw.meta
        warnings: list[str] = []

        block_time = _parse_block_time(raw.block_time, signature)
        account_changes = _parse_account_changes(
            raw.account_keys, meta.pre_balances, meta.post_balances, signature, warnings
        )
        for item in meta.rejected_token_balances:
            logger.warning("token_balance_malformed", signature=signature, item=repr(item))
            warnings.append(f"token balance entry skipped: {item!r}")
        token_transfers = _parse_token_transfers(
            raw.account_keys, meta.pre_token_balances, meta.post_token_balances, signature, warnings
        )

        program_interactions: list[ProgramInteraction] = []
        for index, instruction in enumerate(raw.instructions):
            outcome = self._decode_instruction(raw.account_keys, instruction)
            program_interactions.append(outcome.interaction)
            if outcome.warning:
                logger.warning(
                    "instruction_decode_failed",
                    signature=signature,
                    index=index,
                    program_id=outcome.interaction.program_id,
                    error=outcome.warning,
                )
                warnings.append(f"instruction {index}: {outcome.warning}")

        parsed = ParsedTransaction(
            signature=signature,
            status=TransactionStatus.FAILED if meta.err is not None else TransactionStatus.SUCCESS,
            slot=raw.slot,
            block_time=block_time,
            account_changes=account_changes,
            token_transfers=token_transfers,
            program_interactions=program_interactions,
            compute_units=ComputeUnits(
                used=meta.compute_units_consumed or 0,
                limit=self.compute_unit_limit,
            ),
            fee=meta.fee or 0,
            warnings=warnings,
        )
        logger.debug(
            "transaction_parsed",
            signature=signature,
            instructions=len(program_interactions),
            account_changes=len(account_changes),
            token_transfers=len(token_transfers),
            warnings=len(warnings),
        )
        return parsed

    def _decode_instruction(
        self,
        account_keys: list[AccountKeyLike],
        instruction: RawInstruction,
    ) -> _DecodeOutcome:
        """Decode one instruction; never raises. Failures come back as a warning."""
        program_id = resolve_address(account_keys, instruction.program_id_index)
        if program_id is None:
            return _DecodeOutcome(
                ProgramInteraction(UNKNOWN_ADDRESS, None, UNKNOWN_INSTRUCTION, {}),
                f"program index {instruction.program_id_index} out of range",
            )
        program_name = get_program_name(program_id)

        decoder = self.registry.find(program_id)
        if decoder is None:
            return _DecodeOutcome(ProgramInteraction(program_id, program_name, UNKNOWN_INSTRUCTION, {}))

        try:
            decoded = decoder.decode(instruction, account_keys)
        except InstructionDecodeError as e:
            error = e.message
        except Exception as e:
            # a decoder bug must not discard the rest of the transaction
            error = f"{type(e).__name__}: {e}"
        else:
            return _DecodeOutcome(
                ProgramInteraction(program_id, program_name, decoded.type, dict(decoded.params))
            )
        return _DecodeOutcome(
            ProgramInteraction(
                program_id,
                program_name,
                decoder.unknown_type,
                {"program_id": program_id, "error": error},
            ),
            error,
        )


def _parse_block_time(block_time: Any, signature: str) -> datetime | None:
    """
    Convert blockTime (Unix seconds) to a UTC datetime.

    None or 0 means the node did not report a time. Anything present that
    cannot become a valid instant raises TimestampParsingError.
    """
    if block_time is None:
        return None
    if isinstance(block_time, bool) or not isinstance(block_time, (int, float, str)):
        raise TimestampParsingError(
            f"Invalid block time: {block_time!r}",
            signature,
            {"block_time": repr(block_time)},
        )
    try:
        seconds = int(block_time) if isinstance(block_time, str) else block_time
        if seconds == 0:
            return None
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (ValueError, OverflowError, OSError) as e:
        raise TimestampParsingError(
            f"Invalid block time: {block_time!r}",
            signature,
            {"block_time": repr(block_time), "error": str(e)},
        ) from e


def _parse_account_changes(
    account_keys: list[AccountKeyLike],
    pre_balances: list[int],
    post_balances: list[int],
    signature: str,
    warnings: list[str],
) -> list[AccountChange]:
    """
    One AccountChange per index whose post - pre != 0.
    Fee payer: index 0 with a negative delta. An entry that is not an
    integer is skipped with a warning.
    """
    if len(pre_balances) != len(post_balances):
        raise InvalidBalanceDataError(
            "Pre and post balance arrays differ in length",
            signature,
            {"pre_balances": len(pre_balances), "post_balances": len(post_balances)},
        )
    changes: list[AccountChange] = []
    for i, (pre, post) in enumerate(zip(pre_balances, post_balances)):
        try:
            delta = int(post) - int(pre)
        except (TypeError, ValueError):
            logger.warning(
                "account_balance_malformed",
                signature=signature,
                index=i,
                pre=repr(pre),
                post=repr(post),
            )
            warnings.append(f"account {i}: malformed balance entry")
            continue
        if delta == 0:
            continue
        address = resolve_address(account_keys, i)
        if address is None:
            logger.warning("account_index_unresolved", signature=signature, index=i)
            warnings.append(f"account {i}: no account key for balance entry")
            address = UNKNOWN_ADDRESS
        changes.append(
            AccountChange(
                address=address,
                balance_change=delta,
                is_fee_payer=i == 0 and delta < 0,
            )
        )
    return changes


def _token_amount(balance: TokenBalance | None) -> int:
    if balance is None:
        return 0
    return int(balance.amount)


def _parse_token_transfers(
    account_keys: list[AccountKeyLike],
    pre_token_balances: list[TokenBalance],
    post_token_balances: list[TokenBalance],
    signature: str,
    warnings: list[str],
) -> list[TokenTransfer]:
    """
    Diff token balances keyed by (account_index, mint).

    Post entries overlay pre entries, so token accounts created by the
    transaction appear too. Each non-zero delta yields one transfer whose
    counter-party is UNKNOWN_ADDRESS.
    """
    balance_map: dict[tuple[int, str], list[TokenBalance | None]] = {}
    for pre in pre_token_balances:
        balance_map[(pre.account_index, pre.mint)] = [pre, None]
    for post in post_token_balances:
        key = (post.account_index, post.mint)
        if key in balance_map:
            balance_map[key][1] = post
        else:
            balance_map[key] = [None, post]

    transfers: list[TokenTransfer] = []
    for (account_index, mint), (pre, post) in balance_map.items():
        try:
            delta = _token_amount(post) - _token_amount(pre)
        except ValueError:
            logger.warning(
                "token_balance_malformed",
                signature=signature,
                account_index=account_index,
                mint=mint,
            )
            warnings.append(f"token account {account_index}: malformed amount for mint {mint}")
            continue
        if delta == 0:
            continue
        balance = post or pre
        address = resolve_address(account_keys, account_index)
        if address is None:
            logger.warning("account_index_unresolved", signature=signature, index=account_index)
            warnings.append(f"token account {account_index}: no account key for balance entry")
            address = UNKNOWN_ADDRESS
        transfers.append(
            TokenTransfer(
                mint=mint,
                amount=abs(delta),
                decimals=balance.decimals,
                from_address=address if delta < 0 else UNKNOWN_ADDRESS,
                to_address=address if delta > 0 else UNKNOWN_ADDRESS,
            )
        )
    return transfers


_DEFAULT_PARSER = TransactionParser()


def _coerce(raw: RawTransaction | dict[str, Any]) -> RawTransaction:
    if isinstance(raw, RawTransaction):
        return raw
    try:
        return RawTransaction.from_rpc(raw)
    except Exception as e:
        tx_obj = raw.get("transaction") if isinstance(raw, dict) else None
        sigs = (tx_obj.get("signatures") if isinstance(tx_obj, dict) else None) or [None]
        raise ParsingFailedError(
            f"Malformed getTransaction payload: {e}",
            sigs[0],
            {"original_error": repr(e)},
        ) from e


def parse(
    raw: RawTransaction | dict[str, Any],
    parser: TransactionParser | None = None,
) -> ParsedTransaction:
    """
    Parse a single RawTransaction (or getTransaction-style dict).

    Raises a TransactionParsingError subclass on structural failure.
    """
    return (parser or _DEFAULT_PARSER).parse(_coerce(raw))


def parse_batch(
    raw_list: Iterable[RawTransaction | dict[str, Any]],
    parser: TransactionParser | None = None,
) -> list[ParsedTransaction]:
    """
    Parse many transactions. Structural failures are logged and skipped;
    returned list may be shorter than input.
    """
    parsed_list: list[ParsedTransaction] = []
    skipped = 0
    for raw in raw_list:
        try:
            parsed_list.append(parse(raw, parser))
        except TransactionParsingError as e:
            skipped += 1
            logger.info("transaction_skipped", signature=e.signature, code=e.code.value)
    if skipped:
        logger.info("parse_batch_done", parsed=len(parsed_list), skipped=skipped)
    return parsed_list
