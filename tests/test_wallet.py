"""
Tests for the wallet client: accounts, payments, transfers, transfer
history, key images and the not-found classification of
get_transfer_by_txid.
"""

import pytest

from conftest import ADDRESS, HASH_A, HASH_B, transfer_dict
from monero_rpc.exceptions import DecodeError, DecodeErrorKind, RPCError, TransportError
from monero_rpc.heights import HeightRange
from monero_rpc.models import (
    GetTransfersCategory,
    GetTransfersSelector,
    SignedKeyImage,
    SubaddressIndex,
    TransferOptions,
    TransferPriority,
)
from monero_rpc.rpc import RPCErrorCode


# ============================================================================
# Accounts and addresses
# ============================================================================

class TestAccounts:

    @pytest.mark.asyncio
    async def test_get_balance_positional(self, caller, wallet):
        caller.respond({"balance": 5000, "unlocked_balance": 4000, "multisig_import_needed": False})
        balance = await wallet.get_balance(0)
        assert caller.last_params == [0]
        assert balance.balance == 5000
        assert balance.unlocked_balance == 4000
        assert balance.per_subaddress == []

    @pytest.mark.asyncio
    async def test_get_balance_with_subaddresses(self, caller, wallet):
        caller.respond({
            "balance": 5000,
            "unlocked_balance": 4000,
            "per_subaddress": [{
                "address": ADDRESS,
                "address_index": 1,
                "balance": 5000,
                "label": "shop",
                "num_unspent_outputs": 2,
                "unlocked_balance": 4000,
            }],
        })
        balance = await wallet.get_balance(0, [1])
        assert caller.last_params == [0, [1]]
        assert balance.per_subaddress[0].label == "shop"

    @pytest.mark.asyncio
    async def test_get_address_omits_absent_filter(self, caller, wallet):
        caller.respond({"address": ADDRESS, "addresses": []})
        data = await wallet.get_address(2)
        assert caller.last_params == {"account_index": 2}
        assert data.address == ADDRESS

    @pytest.mark.asyncio
    async def test_get_address_with_filter(self, caller, wallet):
        caller.respond({
            "address": ADDRESS,
            "addresses": [{"address": ADDRESS, "address_index": 0, "label": "Primary account", "used": True}],
        })
        data = await wallet.get_address(0, [0])
        assert caller.last_params == {"account_index": 0, "address_index": [0]}
        assert data.addresses[0].used is True

    @pytest.mark.asyncio
    async def test_get_address_index(self, caller, wallet):
        caller.respond({"index": {"major": 1, "minor": 3}})
        assert await wallet.get_address_index(ADDRESS) == (1, 3)

    @pytest.mark.asyncio
    async def test_create_address(self, caller, wallet):
        caller.respond({"address": ADDRESS, "address_index": 4})
        assert await wallet.create_address(0) == (ADDRESS, 4)
        assert caller.last_params == {"account_index": 0}

    @pytest.mark.asyncio
    async def test_create_address_with_label(self, caller, wallet):
        caller.respond({"address": ADDRESS, "address_index": 5})
        await wallet.create_address(0, "donations")
        assert caller.last_params == {"account_index": 0, "label": "donations"}

    @pytest.mark.asyncio
    async def test_label_address(self, caller, wallet):
        caller.respond({})
        assert await wallet.label_address(0, 5, "donations") is None
        assert caller.last_params == {"index": {"major": 0, "minor": 5}, "label": "donations"}

    @pytest.mark.asyncio
    async def test_get_accounts(self, caller, wallet):
        caller.respond({
            "subaddress_accounts": [{
                "account_index": 0,
                "balance": 100,
                "base_address": ADDRESS,
                "label": "Primary account",
                "tag": "",
                "unlocked_balance": 100,
            }],
            "total_balance": 100,
            "total_unlocked_balance": 100,
        })
        data = await wallet.get_accounts()
        assert caller.last_params == {}
        assert data.subaddress_accounts[0].label == "Primary account"
        assert data.total_balance == 100

    @pytest.mark.asyncio
    async def test_get_accounts_by_tag(self, caller, wallet):
        caller.respond({"subaddress_accounts": [], "total_balance": 0, "total_unlocked_balance": 0})
        await wallet.get_accounts("savings")
        assert caller.last_params == {"tag": "savings"}


# ============================================================================
# Payments
# ============================================================================

def _payment(payment_id: str = "1234567890abcdef") -> dict:
    return {
        "payment_id": payment_id,
        "tx_hash": HASH_A.hex(),
        "amount": 1000,
        "block_height": 2000,
        "unlock_time": 0,
        "subaddr_index": {"major": 0, "minor": 0},
        "address": ADDRESS,
    }


class TestPayments:

    @pytest.mark.asyncio
    async def test_get_payments(self, caller, wallet):
        caller.respond({"payments": [_payment()]})
        payments = await wallet.get_payments(bytes.fromhex("1234567890abcdef"))
        assert caller.last_params == {"payment_id": "1234567890abcdef"}
        assert payments[0].tx_hash == HASH_A
        assert payments[0].subaddr_index == SubaddressIndex(0, 0)

    @pytest.mark.asyncio
    async def test_get_payments_none_found(self, caller, wallet):
        caller.respond({})
        assert await wallet.get_payments(b"\x00" * 8) == []

    @pytest.mark.asyncio
    async def test_get_bulk_payments(self, caller, wallet):
        caller.respond({"payments": [_payment(), _payment("ab" * 32)]})
        payments = await wallet.get_bulk_payments([b"\x12" * 8, b"\xab" * 32], 1500)
        assert caller.last_params == {
            "payment_ids": ["12" * 8, "ab" * 32],
            "min_block_height": 1500,
        }
        assert len(payments[1].payment_id) == 32


# ============================================================================
# Wallet state
# ============================================================================

class TestWalletState:

    @pytest.mark.asyncio
    async def test_query_view_key(self, caller, wallet):
        caller.respond({"key": HASH_B.hex()})
        assert await wallet.query_view_key() == HASH_B
        assert caller.last_method == "query_key"
        assert caller.last_params == {"key_type": "view_key"}

    @pytest.mark.asyncio
    async def test_get_height_sends_no_params(self, caller, wallet):
        caller.respond({"height": 145545})
        assert await wallet.get_height() == 145545
        assert caller.calls[-1] == ("get_height", None, True)

    @pytest.mark.asyncio
    async def test_get_height_zero_rejected(self, caller, wallet):
        caller.respond({"height": 0})
        with pytest.raises(DecodeError):
            await wallet.get_height()

    @pytest.mark.asyncio
    async def test_get_version(self, caller, wallet):
        caller.respond({"version": 65562})
        assert await wallet.get_version() == (1, 26)


# ============================================================================
# Transfers
# ============================================================================

def _transfer_result(**overrides) -> dict:
    result = {
        "amount": 300000000000,
        "fee": 86897600000,
        "multisig_txset": "",
        "tx_blob": "0a0b",
        "tx_hash": HASH_A.hex(),
        "tx_key": HASH_B.hex(),
        "tx_metadata": "0c",
        "unsigned_txset": "",
    }
    result.update(overrides)
    return result


class TestTransfer:

    @pytest.mark.asyncio
    async def test_minimal_payload(self, caller, wallet):
        caller.respond(_transfer_result())
        data = await wallet.transfer({ADDRESS: 300000000000}, TransferPriority.DEFAULT)

        assert caller.last_params == {
            "destinations": [{"address": ADDRESS, "amount": 300000000000}],
            "priority": 0,
            "get_tx_key": True,
            "get_tx_hex": True,
            "get_tx_metadata": True,
        }
        assert data.tx_hash == HASH_A
        assert data.tx_key == HASH_B
        assert data.tx_blob == b"\x0a\x0b"
        assert data.unsigned_txset == b""

    @pytest.mark.asyncio
    async def test_options_included_when_set(self, caller, wallet):
        caller.respond(_transfer_result())
        options = TransferOptions(
            account_index=1,
            subaddr_indices=[0, 2],
            ring_size=16,
            payment_id=b"\x01" * 8,
            do_not_relay=False,
        )
        await wallet.transfer({ADDRESS: 1}, TransferPriority.PRIORITY, options)

        params = caller.last_params
        assert params["priority"] == 3
        assert params["account_index"] == 1
        assert params["subaddr_indices"] == [0, 2]
        assert params["ring_size"] == 16
        assert params["payment_id"] == "01" * 8
        assert params["do_not_relay"] is False
        assert "mixin" not in params
        assert "unlock_time" not in params

    @pytest.mark.asyncio
    async def test_unsigned_transfer_has_no_hash(self, caller, wallet):
        caller.respond(_transfer_result(tx_hash="", tx_key="", unsigned_txset="0102"))
        data = await wallet.transfer({ADDRESS: 1}, TransferPriority.DEFAULT)
        assert data.tx_hash is None
        assert data.unsigned_txset == b"\x01\x02"

    @pytest.mark.asyncio
    async def test_sign_transfer(self, caller, wallet):
        caller.respond({"signed_txset": "aabb", "tx_hash_list": [HASH_A.hex()], "tx_raw_list": ["0102"]})
        out = await wallet.sign_transfer(b"\x01\x02")
        assert caller.last_params == {"unsigned_txset": "0102", "export_raw": True}
        assert out.signed_txset == b"\xaa\xbb"
        assert out.tx_hash_list == [HASH_A]
        assert out.tx_raw_list == [b"\x01\x02"]

    @pytest.mark.asyncio
    async def test_submit_transfer(self, caller, wallet):
        caller.respond({"tx_hash_list": [HASH_A.hex(), HASH_B.hex()]})
        assert await wallet.submit_transfer(b"\xaa\xbb") == [HASH_A, HASH_B]
        assert caller.last_params == {"tx_data_hex": "aabb"}

    @pytest.mark.asyncio
    async def test_rpc_error_raised(self, caller, wallet):
        caller.respond(error=RPCError(-4, "not enough money"))
        with pytest.raises(RPCError) as exc_info:
            await wallet.transfer({ADDRESS: 1}, TransferPriority.DEFAULT)
        assert exc_info.value.message == "not enough money"


# ============================================================================
# Transfer history
# ============================================================================

class TestGetTransfers:

    @pytest.mark.asyncio
    async def test_categories_and_height_filter(self, caller, wallet):
        caller.respond({"in": [transfer_dict()], "out": [transfer_dict(type="out", amount=5)]})
        selector = GetTransfersSelector(
            category_selector={GetTransfersCategory.IN: True, GetTransfersCategory.OUT: True},
            filter_by_height=HeightRange.inclusive(5, 10),
        )
        transfers = await wallet.get_transfers(selector)

        assert caller.last_params == {
            "in": True,
            "out": True,
            "filter_by_height": True,
            "min_height": 4,
            "max_height": 10,
        }
        assert transfers[GetTransfersCategory.IN][0].txid == HASH_A
        assert transfers[GetTransfersCategory.OUT][0].transfer_type is GetTransfersCategory.OUT
        assert transfers[GetTransfersCategory.OUT][0].amount == 5

    @pytest.mark.asyncio
    async def test_no_height_filter_omits_flag(self, caller, wallet):
        caller.respond({})
        selector = GetTransfersSelector(category_selector={GetTransfersCategory.POOL: True}, account_index=1)
        assert await wallet.get_transfers(selector) == {}
        assert caller.last_params == {"pool": True, "account_index": 1}

    @pytest.mark.asyncio
    async def test_unbounded_range_keeps_flag(self, caller, wallet):
        caller.respond({})
        await wallet.get_transfers(GetTransfersSelector(filter_by_height=HeightRange.all()))
        assert caller.last_params == {"filter_by_height": True}

    @pytest.mark.asyncio
    async def test_unknown_category_rejected(self, caller, wallet):
        caller.respond({"sideways": []})
        with pytest.raises(DecodeError) as exc_info:
            await wallet.get_transfers(GetTransfersSelector())
        assert exc_info.value.kind is DecodeErrorKind.INVALID_VALUE

    @pytest.mark.asyncio
    async def test_pending_transfer_has_no_height(self, caller, wallet):
        caller.respond({"pending": [transfer_dict(type="pending", height=0, confirmations=0)]})
        transfers = await wallet.get_transfers(GetTransfersSelector())
        pending = transfers[GetTransfersCategory.PENDING][0]
        assert pending.height is None
        assert pending.confirmations == 0


# ============================================================================
# Single transfer lookup
# ============================================================================

class TestGetTransfer:

    @pytest.mark.asyncio
    async def test_found(self, caller, wallet):
        caller.respond({"transfer": transfer_dict(), "transfers": [transfer_dict()]})
        transfer = await wallet.get_transfer(HASH_A)
        assert caller.last_method == "get_transfer_by_txid"
        assert caller.last_params == {"txid": HASH_A.hex()}
        assert transfer.txid == HASH_A
        assert transfer.subaddr_index == SubaddressIndex(0, 1)

    @pytest.mark.asyncio
    async def test_with_account_index(self, caller, wallet):
        caller.respond({"transfer": transfer_dict()})
        await wallet.get_transfer(HASH_A, account_index=2)
        assert caller.last_params == {"txid": HASH_A.hex(), "account_index": 2}

    @pytest.mark.asyncio
    async def test_wrong_txid_is_not_found(self, caller, wallet):
        caller.respond(error=RPCError(RPCErrorCode.WALLET_WRONG_TXID, "Transaction not found."))
        assert await wallet.get_transfer(HASH_A) is None

    @pytest.mark.asyncio
    async def test_other_error_raised(self, caller, wallet):
        caller.respond(error=RPCError(-1, "Unknown error"))
        with pytest.raises(RPCError) as exc_info:
            await wallet.get_transfer(HASH_A)
        assert exc_info.value.code == -1

    @pytest.mark.asyncio
    async def test_transport_error_raised(self, caller, wallet):
        caller.fail(TransportError("connection refused"))
        with pytest.raises(TransportError):
            await wallet.get_transfer(HASH_A)


# ============================================================================
# Key images and proofs
# ============================================================================

class TestKeyImages:

    @pytest.mark.asyncio
    async def test_export_key_images(self, caller, wallet):
        caller.respond({"offset": 0, "signed_key_images": [{"key_image": "11" * 32, "signature": "22" * 64}]})
        images = await wallet.export_key_images()
        assert caller.calls[-1][2] is True
        assert images == [SignedKeyImage(b"\x11" * 32, b"\x22" * 64)]

    @pytest.mark.asyncio
    async def test_export_key_images_empty(self, caller, wallet):
        caller.respond({"offset": 0})
        assert await wallet.export_key_images() == []

    @pytest.mark.asyncio
    async def test_import_key_images(self, caller, wallet):
        caller.respond({"height": 1000, "spent": 5, "unspent": 7})
        result = await wallet.import_key_images([SignedKeyImage(b"\x11" * 32, b"\x22" * 64)])
        assert caller.last_params == {
            "signed_key_images": [{"key_image": "11" * 32, "signature": "22" * 64}],
        }
        assert (result.height, result.spent, result.unspent) == (1000, 5, 7)

    @pytest.mark.asyncio
    async def test_bad_signature_length(self, caller, wallet):
        caller.respond({"signed_key_images": [{"key_image": "11" * 32, "signature": "22" * 32}]})
        with pytest.raises(DecodeError) as exc_info:
            await wallet.export_key_images()
        assert exc_info.value.kind is DecodeErrorKind.WRONG_LENGTH

    @pytest.mark.asyncio
    async def test_check_tx_key(self, caller, wallet):
        caller.respond({"confirmations": 0, "in_pool": True, "received": 1000000})
        result = await wallet.check_tx_key(HASH_A, HASH_B, ADDRESS)
        assert caller.last_params == {"txid": HASH_A.hex(), "tx_key": HASH_B.hex(), "address": ADDRESS}
        assert result == (0, True, 1000000)
