"""
Data models for the transaction parser.

Inbound: RawTransaction (and its parts) as returned by a getTransaction call,
built directly or via RawTransaction.from_rpc(). Outbound: ParsedTransaction
and its parts, consumed by the analysis engine and by rendering (to_dict()).
All models are per-request value objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Union

# Sentinel used for an address that cannot be observed or resolved
UNKNOWN_ADDRESS = "unknown"


@dataclass(frozen=True)
class SignatureInfo:
    """
    Normalized transaction signature info from getSignaturesForAddress.

    Mirrors Solana RPC response fields; used to pick candidate
    transactions before fetching and parsing them.
    """

    signature: str
    slot: int
    err: Any  # None if success; dict/object from RPC if failed
    block_time: int | None  # Unix timestamp; None if not available
    memo: str | None = None
    confirmation_status: str | None = None  # processed | confirmed | finalized

    @classmethod
    def from_rpc_item(cls, item: dict[str, Any]) -> "SignatureInfo":
        """Build from a single getSignaturesForAddress result item."""
        return cls(
            signature=item["signature"],
            slot=int(item["slot"]),
            err=item.get("err"),
            block_time=item.get("blockTime"),
            memo=item.get("memo"),
            confirmation_status=item.get("confirmationStatus"),
        )


# ---------------------------------------------------------------------------
# Inbound
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class AccountKey:
    """Account key annotated with signer/writable flags (jsonParsed shape)."""

    pubkey: str
    signer: bool = False
    writable: bool = False


AccountKeyLike = Union[str, AccountKey, dict]


@dataclass(frozen=True)
class RawInstruction:
    program_id_index: int
    accounts: list[int] = field(default_factory=list)
    """Indices into the transaction's account key list."""
    data: str = ""
    """Instruction payload, base58 text."""


@dataclass(frozen=True)
class TokenBalance:
    """One entry of meta.preTokenBalances / meta.postTokenBalances."""

    account_index: int
    mint: str
    amount: str
    """Raw amount in base units, as the decimal string the RPC returns."""
    decimals: int
    owner: str | None = None
    program_id: str | None = None
    ui_amount: float | None = None

    @classmethod
    def from_rpc(cls, item: dict[str, Any]) -> "TokenBalance":
        ui = item.get("uiTokenAmount") or {}
        return cls(
            account_index=int(item["accountIndex"]),
            mint=item["mint"],
            amount=str(ui.get("amount", "0")),
            decimals=int(ui.get("decimals", 0)),
            owner=item.get("owner"),
            program_id=item.get("programId"),
            ui_amount=ui.get("uiAmount"),
        )


def _token_balances_from_rpc(items: Any, rejected: list[Any]) -> list[TokenBalance]:
    """Build TokenBalance values item by item; malformed items land in rejected."""
    balances: list[TokenBalance] = []
    for item in items or []:
        try:
            balances.append(TokenBalance.from_rpc(item))
        except (KeyError, TypeError, ValueError, AttributeError):
            rejected.append(item)
    return balances


@dataclass(frozen=True)
class TransactionMeta:
    err: Any = None
    fee: int = 0
    pre_balances: list[int] = field(default_factory=list)
    post_balances: list[int] = field(default_factory=list)
    pre_token_balances: list[TokenBalance] = field(default_factory=list)
    post_token_balances: list[TokenBalance] = field(default_factory=list)
    log_messages: list[str] = field(default_factory=list)
    compute_units_consumed: int | None = None
    rejected_token_balances: list[Any] = field(default_factory=list)
    """Raw token balance items from_rpc could not read; reported by the parser."""

    @classmethod
    def from_rpc(cls, meta: dict[str, Any]) -> "TransactionMeta":
        rejected: list[Any] = []
        return cls(
            err=meta.get("err"),
            fee=int(meta.get("fee") or 0),
            pre_balances=list(meta.get("preBalances") or []),
            post_balances=list(meta.get("postBalances") or []),
            pre_token_balances=_token_balances_from_rpc(meta.get("preTokenBalances"), rejected),
            post_token_balances=_token_balances_from_rpc(meta.get("postTokenBalances"), rejected),
            log_messages=list(meta.get("logMessages") or []),
            compute_units_consumed=meta.get("computeUnitsConsumed"),
            rejected_token_balances=rejected,
        )


def _account_key_from_rpc(key: Any) -> AccountKeyLike:
    if isinstance(key, dict):
        return AccountKey(
            pubkey=key.get("pubkey", ""),
            signer=bool(key.get("signer", False)),
            writable=bool(key.get("writable", False)),
        )
    return str(key)


def _instruction_from_rpc(ix: dict[str, Any], addresses: list[str]) -> RawInstruction:
    """Compiled instructions carry indices; jsonParsed ones carry addresses, mapped back here."""
    program_index = ix.get("programIdIndex")
    if program_index is None:
        program_id = ix.get("programId")
        program_index = addresses.index(program_id) if program_id in addresses else -1
    accounts: list[int] = []
    for acct in ix.get("accounts") or []:
        if isinstance(acct, int):
            accounts.append(acct)
        else:
            accounts.append(addresses.index(acct) if acct in addresses else -1)
    return RawInstruction(
        program_id_index=int(program_index),
        accounts=accounts,
        data=ix.get("data") or "",
    )


@dataclass(frozen=True)
class RawTransaction:
    """
    One already-fetched transaction record.

    account_keys accepts bare base58 strings, AccountKey values, or
    {"pubkey": ...} dicts; see resolve_address().
    """

    slot: int
    block_time: int | None
    account_keys: list[AccountKeyLike]
    instructions: list[RawInstruction]
    signatures: list[str]
    meta: TransactionMeta | None
    recent_blockhash: str | None = None

    @classmethod
    def from_rpc(cls, raw: dict[str, Any]) -> "RawTransaction":
        """
        Build from a getTransaction-style result (json or jsonParsed encoding).

        For versioned transactions, meta.loadedAddresses (writable, then readonly)
        are appended to the static account keys, matching the balance arrays.
        """
        tx_obj = raw.get("transaction") or {}
        message = tx_obj.get("message") or {}
        raw_meta = raw.get("meta")

        account_keys = [_account_key_from_rpc(k) for k in message.get("accountKeys") or []]
        loaded = (raw_meta or {}).get("loadedAddresses") or {}
        for role in ("writable", "readonly"):
            for addr in loaded.get(role) or []:
                account_keys.append(AccountKey(pubkey=addr, writable=role == "writable"))

        addresses = [address_of(k) for k in account_keys]
        return cls(
            slot=int(raw.get("slot") or 0),
            block_time=raw.get("blockTime"),
            account_keys=account_keys,
            instructions=[_instruction_from_rpc(ix, addresses) for ix in message.get("instructions") or []],
            signatures=list(tx_obj.get("signatures") or []),
            meta=TransactionMeta.from_rpc(raw_meta) if isinstance(raw_meta, dict) else None,
            recent_blockhash=message.get("recentBlockhash"),
        )


def address_of(key: AccountKeyLike) -> str:
    """Return the base58 address of an account key in any accepted shape."""
    if isinstance(key, str):
        return key
    if isinstance(key, dict):
        return str(key.get("pubkey", ""))
    return key.pubkey


def resolve_address(account_keys: list[AccountKeyLike], index: int) -> str | None:
    """Resolve an account index to its address; None when the index is out of range."""
    if not isinstance(index, int) or not (0 <= index < len(account_keys)):
        return None
    return address_of(account_keys[index])


# ---------------------------------------------------------------------------
# Outbound
# ---------------------------------------------------------------------------


class TransactionStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class AccountChange:
    address: str
    balance_change: int
    """post - pre, in lamports; never 0."""
    is_fee_payer: bool

    def to_dict(self) -> dict[str, Any]:
        return {
            "address": self.address,
            "balance_change": self.balance_change,
            "is_fee_payer": self.is_fee_payer,
        }


@dataclass(frozen=True)
class TokenTransfer:
    """
    Token movement inferred from one side of a balance snapshot.

    Exactly one of from_address / to_address is a real address; the other
    is UNKNOWN_ADDRESS because a single token account's delta does not
    reveal the counter-party.
    """

    mint: str
    amount: int
    """Magnitude of the delta in base units."""
    decimals: int
    from_address: str
    to_address: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "mint": self.mint,
            "amount": self.amount,
            "decimals": self.decimals,
            "from": self.from_address,
            "to": self.to_address,
        }


@dataclass(frozen=True)
class ProgramInteraction:
    program_id: str
    program_name: str | None
    instruction_type: str
    details: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "program_id": self.program_id,
            "program_name": self.program_name,
            "instruction_type": self.instruction_type,
            "details": dict(self.details),
        }


@dataclass(frozen=True)
class ComputeUnits:
    used: int
    limit: int

    def to_dict(self) -> dict[str, Any]:
        return {"used": self.used, "limit": self.limit}


@dataclass(frozen=True)
class ParsedTransaction:
    """
    Structured form of one transaction.

    Schema is stable and scoring-agnostic. Use for downstream
    scoring, storage, or rendering.
    """

    signature: str
    status: TransactionStatus
    slot: int
    block_time: datetime | None
    """UTC block time; None when the node did not report one."""
    account_changes: list[AccountChange]
    token_transfers: list[TokenTransfer]
    program_interactions: list[ProgramInteraction]
    compute_units: ComputeUnits
    fee: int
    """Fee in lamports; 0 if absent."""
    warnings: list[str] = field(default_factory=list)
    """Per-item degradations recovered during parsing (decode failures, bad entries)."""

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict."""
        return {
            "signature": self.signature,
            "status": self.status.value,
            "slot": self.slot,
            "block_time": self.block_time.isoformat() if self.block_time else None,
            "account_changes": [c.to_dict() for c in self.account_changes],
            "token_transfers": [t.to_dict() for t in self.token_transfers],
            "program_interactions": [p.to_dict() for p in self.program_interactions],
            "compute_units": self.compute_units.to_dict(),
            "fee": self.fee,
            "warnings": list(self.warnings),
        }
