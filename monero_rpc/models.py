"""
Monero RPC Types

Typed request options and response records for the daemon and wallet APIs.

Defines:
  - TransferPriority with its explicit 0-3 wire table
  - SubaddressIndex, the (account, address) pair
  - GetTransfersCategory and the get_transfers selector
  - Response records decoded with ``from_dict``

Decoders raise :class:`~monero_rpc.exceptions.DecodeError` on malformed
values; nothing is silently coerced.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional

from .constants import (
    HASH_LENGTH,
    LONG_PAYMENT_ID_LENGTH,
    SHORT_PAYMENT_ID_LENGTH,
)
from .encoding import (
    decode_bool,
    decode_hex,
    decode_hex_list,
    decode_list,
    decode_object,
    decode_str,
    decode_u64,
    encode_hex,
    require,
)
from .exceptions import DecodeError, DecodeErrorKind
from .heights import HeightRange

PAYMENT_ID_LENGTHS = (SHORT_PAYMENT_ID_LENGTH, LONG_PAYMENT_ID_LENGTH)
KEY_IMAGE_LENGTH = 32
KEY_IMAGE_SIGNATURE_LENGTH = 64


def _timestamp(value: Any, field_name: str) -> datetime:
    return datetime.fromtimestamp(decode_u64(value, field_name), tz=timezone.utc)


def _optional_hash(value: Any, field_name: str) -> Optional[bytes]:
    """A 32-byte hash that the wallet reports as "" when there is none yet."""
    if value in (None, ""):
        return None
    return decode_hex(value, HASH_LENGTH, field_name)


def _bytes_field(data: Dict[str, Any], name: str) -> bytes:
    return decode_hex(data.get(name, ""), field=name)


# ══════════════════════════════════════════════════════════════════════
#  TRANSFER PRIORITY
# ══════════════════════════════════════════════════════════════════════

class TransferPriority(Enum):
    """Fee tier of an outgoing transfer."""
    DEFAULT = "default"
    UNIMPORTANT = "unimportant"
    ELEVATED = "elevated"
    PRIORITY = "priority"

    def encode(self) -> int:
        return _PRIORITY_TO_WIRE[self]

    @classmethod
    def decode(cls, value: Any) -> "TransferPriority":
        if isinstance(value, bool) or not isinstance(value, int):
            raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected integer, got {value!r}", "priority")
        try:
            return _WIRE_TO_PRIORITY[value]
        except KeyError:
            raise DecodeError(
                DecodeErrorKind.OUT_OF_RANGE, f"invalid variant {value}, expected 0-3", "priority",
            ) from None


# Wire values are fixed by the node; never derived from declaration order
_PRIORITY_TO_WIRE: Dict[TransferPriority, int] = {
    TransferPriority.DEFAULT: 0,
    TransferPriority.UNIMPORTANT: 1,
    TransferPriority.ELEVATED: 2,
    TransferPriority.PRIORITY: 3,
}
_WIRE_TO_PRIORITY: Dict[int, TransferPriority] = {v: k for k, v in _PRIORITY_TO_WIRE.items()}


# ══════════════════════════════════════════════════════════════════════
#  SUBADDRESS INDEX
# ══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SubaddressIndex:
    """
    Account and address-within-account of a receiving address.

    Attributes:
        major: Account index
        minor: Address index within the account
    """
    major: int
    minor: int

    def to_dict(self) -> Dict[str, int]:
        return {"major": self.major, "minor": self.minor}

    @classmethod
    def from_dict(cls, d: Any) -> "SubaddressIndex":
        return cls(
            major=decode_u64(require(d, "major"), "major"),
            minor=decode_u64(require(d, "minor"), "minor"),
        )

    def as_tuple(self):
        return self.major, self.minor


# ══════════════════════════════════════════════════════════════════════
#  DAEMON RECORDS
# ══════════════════════════════════════════════════════════════════════

@dataclass
class BlockHeaderResponse:
    """Header of a block as reported by the daemon."""
    major_version: int
    minor_version: int
    timestamp: datetime
    prev_hash: bytes
    nonce: int
    orphan_status: bool
    height: int
    depth: int
    hash: bytes
    difficulty: int
    reward: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BlockHeaderResponse":
        return cls(
            major_version=decode_u64(require(d, "major_version"), "major_version"),
            minor_version=decode_u64(require(d, "minor_version"), "minor_version"),
            timestamp=_timestamp(require(d, "timestamp"), "timestamp"),
            prev_hash=decode_hex(require(d, "prev_hash"), HASH_LENGTH, "prev_hash"),
            nonce=decode_u64(require(d, "nonce"), "nonce"),
            orphan_status=decode_bool(require(d, "orphan_status"), "orphan_status"),
            height=decode_u64(require(d, "height"), "height"),
            depth=decode_u64(require(d, "depth"), "depth"),
            hash=decode_hex(require(d, "hash"), HASH_LENGTH, "hash"),
            difficulty=decode_u64(require(d, "difficulty"), "difficulty"),
            reward=decode_u64(require(d, "reward"), "reward"),
        )


@dataclass
class BlockTemplate:
    """A block template to mine on."""
    blockhashing_blob: bytes
    blocktemplate_blob: bytes
    difficulty: int
    expected_reward: int
    height: int
    prev_hash: bytes
    reserved_offset: int
    untrusted: bool

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BlockTemplate":
        return cls(
            blockhashing_blob=decode_hex(require(d, "blockhashing_blob"), field="blockhashing_blob"),
            blocktemplate_blob=decode_hex(require(d, "blocktemplate_blob"), field="blocktemplate_blob"),
            difficulty=decode_u64(require(d, "difficulty"), "difficulty"),
            expected_reward=decode_u64(require(d, "expected_reward"), "expected_reward"),
            height=decode_u64(require(d, "height"), "height"),
            prev_hash=decode_hex(require(d, "prev_hash"), HASH_LENGTH, "prev_hash"),
            reserved_offset=decode_u64(require(d, "reserved_offset"), "reserved_offset"),
            untrusted=decode_bool(d.get("untrusted", False), "untrusted"),
        )


# ══════════════════════════════════════════════════════════════════════
#  WALLET RECORDS
# ══════════════════════════════════════════════════════════════════════

@dataclass
class SubaddressBalanceData:
    address: str
    address_index: int
    balance: int
    label: str
    num_unspent_outputs: int
    unlocked_balance: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SubaddressBalanceData":
        return cls(
            address=decode_str(require(d, "address"), "address"),
            address_index=decode_u64(require(d, "address_index"), "address_index"),
            balance=decode_u64(require(d, "balance"), "balance"),
            label=decode_str(d.get("label", ""), "label"),
            num_unspent_outputs=decode_u64(d.get("num_unspent_outputs", 0), "num_unspent_outputs"),
            unlocked_balance=decode_u64(require(d, "unlocked_balance"), "unlocked_balance"),
        )


@dataclass
class BalanceData:
    """Balance of an account, in atomic units."""
    balance: int
    unlocked_balance: int
    multisig_import_needed: bool = False
    per_subaddress: List[SubaddressBalanceData] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "BalanceData":
        return cls(
            balance=decode_u64(require(d, "balance"), "balance"),
            unlocked_balance=decode_u64(require(d, "unlocked_balance"), "unlocked_balance"),
            multisig_import_needed=decode_bool(d.get("multisig_import_needed", False), "multisig_import_needed"),
            per_subaddress=[
                SubaddressBalanceData.from_dict(s)
                for s in decode_list(d.get("per_subaddress", []), "per_subaddress")
            ],
        )


@dataclass
class SubaddressData:
    address: str
    address_index: int
    label: str
    used: bool

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SubaddressData":
        return cls(
            address=decode_str(require(d, "address"), "address"),
            address_index=decode_u64(require(d, "address_index"), "address_index"),
            label=decode_str(d.get("label", ""), "label"),
            used=decode_bool(d.get("used", False), "used"),
        )


@dataclass
class AddressData:
    """Base address of an account and its subaddresses."""
    address: str
    addresses: List[SubaddressData] = field(default_factory=list)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "AddressData":
        return cls(
            address=decode_str(require(d, "address"), "address"),
            addresses=[SubaddressData.from_dict(a) for a in decode_list(d.get("addresses", []), "addresses")],
        )


@dataclass
class SubaddressAccountData:
    account_index: int
    balance: int
    base_address: str
    label: Optional[str]
    tag: Optional[str]
    unlocked_balance: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SubaddressAccountData":
        d = decode_object(d)
        label = d.get("label")
        tag = d.get("tag")
        return cls(
            account_index=decode_u64(require(d, "account_index"), "account_index"),
            balance=decode_u64(require(d, "balance"), "balance"),
            base_address=decode_str(require(d, "base_address"), "base_address"),
            label=decode_str(label, "label") if label is not None else None,
            tag=decode_str(tag, "tag") if tag is not None else None,
            unlocked_balance=decode_u64(require(d, "unlocked_balance"), "unlocked_balance"),
        )


@dataclass
class GetAccountsData:
    subaddress_accounts: List[SubaddressAccountData]
    total_balance: int
    total_unlocked_balance: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GetAccountsData":
        d = decode_object(d)
        return cls(
            subaddress_accounts=[
                SubaddressAccountData.from_dict(a)
                for a in decode_list(d.get("subaddress_accounts", []), "subaddress_accounts")
            ],
            total_balance=decode_u64(require(d, "total_balance"), "total_balance"),
            total_unlocked_balance=decode_u64(require(d, "total_unlocked_balance"), "total_unlocked_balance"),
        )


@dataclass
class Payment:
    """An incoming payment matched by payment id."""
    payment_id: bytes
    tx_hash: bytes
    amount: int
    block_height: int
    unlock_time: int
    subaddr_index: SubaddressIndex
    address: str

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Payment":
        return cls(
            payment_id=decode_hex(require(d, "payment_id"), PAYMENT_ID_LENGTHS, "payment_id"),
            tx_hash=decode_hex(require(d, "tx_hash"), HASH_LENGTH, "tx_hash"),
            amount=decode_u64(require(d, "amount"), "amount"),
            block_height=decode_u64(require(d, "block_height"), "block_height"),
            unlock_time=decode_u64(d.get("unlock_time", 0), "unlock_time"),
            subaddr_index=SubaddressIndex.from_dict(require(d, "subaddr_index")),
            address=decode_str(d.get("address", ""), "address"),
        )


@dataclass
class TransferOptions:
    """
    Optional arguments of ``transfer``. Fields left as None are not sent.

    Attributes:
        account_index: Account to spend from
        subaddr_indices: Subaddresses of the account to spend from
        mixin: Number of outputs to mix in (legacy, prefer ring_size)
        ring_size: Ring size of each input
        unlock_time: Blocks before the funds can be spent
        payment_id: 8-byte payment id
        do_not_relay: Build the transaction without broadcasting it
    """
    account_index: Optional[int] = None
    subaddr_indices: Optional[List[int]] = None
    mixin: Optional[int] = None
    ring_size: Optional[int] = None
    unlock_time: Optional[int] = None
    payment_id: Optional[bytes] = None
    do_not_relay: Optional[bool] = None


@dataclass
class TransferData:
    """Outcome of ``transfer``."""
    amount: int
    fee: int
    tx_hash: Optional[bytes]
    tx_key: bytes
    tx_blob: bytes
    tx_metadata: bytes
    multisig_txset: bytes
    unsigned_txset: bytes

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TransferData":
        return cls(
            amount=decode_u64(require(d, "amount"), "amount"),
            fee=decode_u64(require(d, "fee"), "fee"),
            tx_hash=_optional_hash(d.get("tx_hash"), "tx_hash"),
            tx_key=_bytes_field(d, "tx_key"),
            tx_blob=_bytes_field(d, "tx_blob"),
            tx_metadata=_bytes_field(d, "tx_metadata"),
            multisig_txset=_bytes_field(d, "multisig_txset"),
            unsigned_txset=_bytes_field(d, "unsigned_txset"),
        )


@dataclass
class SignedTransferOutput:
    """Result of signing an unsigned transaction set on a cold wallet."""
    signed_txset: bytes
    tx_hash_list: List[bytes]
    tx_raw_list: List[bytes]

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SignedTransferOutput":
        return cls(
            signed_txset=decode_hex(require(d, "signed_txset"), field="signed_txset"),
            tx_hash_list=decode_hex_list(d.get("tx_hash_list", []), HASH_LENGTH, "tx_hash_list"),
            tx_raw_list=decode_hex_list(d.get("tx_raw_list", []), field="tx_raw_list"),
        )


@dataclass(frozen=True)
class SignedKeyImage:
    key_image: bytes
    signature: bytes

    def to_dict(self) -> Dict[str, str]:
        return {
            "key_image": encode_hex(self.key_image),
            "signature": encode_hex(self.signature),
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "SignedKeyImage":
        return cls(
            key_image=decode_hex(require(d, "key_image"), KEY_IMAGE_LENGTH, "key_image"),
            signature=decode_hex(require(d, "signature"), KEY_IMAGE_SIGNATURE_LENGTH, "signature"),
        )


@dataclass
class KeyImageImportResponse:
    height: int
    spent: int
    unspent: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "KeyImageImportResponse":
        return cls(
            height=decode_u64(require(d, "height"), "height"),
            spent=decode_u64(require(d, "spent"), "spent"),
            unspent=decode_u64(require(d, "unspent"), "unspent"),
        )


# ══════════════════════════════════════════════════════════════════════
#  TRANSFER HISTORY
# ══════════════════════════════════════════════════════════════════════

class GetTransfersCategory(Enum):
    """Transfer categories of ``get_transfers``; values are the wire keys."""
    IN = "in"
    OUT = "out"
    PENDING = "pending"
    FAILED = "failed"
    POOL = "pool"
    BLOCK = "block"

    @classmethod
    def decode(cls, value: Any) -> "GetTransfersCategory":
        try:
            return cls(value)
        except ValueError:
            raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"unknown transfer category {value!r}", "type") from None


@dataclass
class GetTransfersSelector:
    """
    Filters of ``get_transfers``.

    Attributes:
        category_selector: Which categories to request, e.g. ``{IN: True, OUT: True}``
        filter_by_height: Height range to restrict the results to
        account_index: Account to query
        subaddr_indices: Subaddresses of the account to query
    """
    category_selector: Dict[GetTransfersCategory, bool] = field(default_factory=dict)
    filter_by_height: Optional[HeightRange] = None
    account_index: Optional[int] = None
    subaddr_indices: Optional[List[int]] = None


@dataclass
class GotTransfer:
    """A transfer from the wallet's history."""
    address: str
    amount: int
    confirmations: Optional[int]
    double_spend_seen: bool
    fee: int
    height: Optional[int]
    note: str
    payment_id: bytes
    subaddr_index: SubaddressIndex
    suggested_confirmations_threshold: Optional[int]
    timestamp: datetime
    txid: bytes
    transfer_type: GetTransfersCategory
    unlock_time: int

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "GotTransfer":
        d = decode_object(d)
        confirmations = d.get("confirmations")
        threshold = d.get("suggested_confirmations_threshold")
        height = decode_u64(d.get("height", 0), "height")
        return cls(
            address=decode_str(require(d, "address"), "address"),
            amount=decode_u64(require(d, "amount"), "amount"),
            confirmations=decode_u64(confirmations, "confirmations") if confirmations is not None else None,
            double_spend_seen=decode_bool(d.get("double_spend_seen", False), "double_spend_seen"),
            fee=decode_u64(d.get("fee", 0), "fee"),
            # Unconfirmed transfers report height 0
            height=height or None,
            note=decode_str(d.get("note", ""), "note"),
            payment_id=decode_hex(require(d, "payment_id"), PAYMENT_ID_LENGTHS, "payment_id"),
            subaddr_index=SubaddressIndex.from_dict(require(d, "subaddr_index")),
            suggested_confirmations_threshold=(
                decode_u64(threshold, "suggested_confirmations_threshold") if threshold is not None else None
            ),
            timestamp=_timestamp(require(d, "timestamp"), "timestamp"),
            txid=decode_hex(require(d, "txid"), HASH_LENGTH, "txid"),
            transfer_type=GetTransfersCategory.decode(require(d, "type")),
            unlock_time=decode_u64(d.get("unlock_time", 0), "unlock_time"),
        )


def decode_transfers(d: Any) -> Dict[GetTransfersCategory, List[GotTransfer]]:
    """Decode a ``get_transfers`` result keyed by category."""
    if not isinstance(d, dict):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected object, got {type(d).__name__}")
    return {
        GetTransfersCategory.decode(category): [
            GotTransfer.from_dict(t) for t in decode_list(transfers, category)
        ]
        for category, transfers in d.items()
    }
