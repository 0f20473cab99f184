"""
Monero Wallet RPC Client

Balances, addresses, transfers, transfer history, key image exchange and the
cold-signing calls of monero-wallet-rpc.
"""

from itertools import chain
from typing import Dict, Iterable, List, Optional, Tuple

from .constants import HASH_LENGTH, PRIVATE_KEY_LENGTH
from .encoding import (
    decode_bool,
    decode_hex,
    decode_hex_list,
    decode_list,
    decode_nonzero,
    decode_object,
    decode_str,
    decode_u64,
    decode_version,
    encode_hex,
    require,
)
from .heights import height_filter_params
from .logger import get_logger
from .models import (
    AddressData,
    BalanceData,
    GetAccountsData,
    GetTransfersCategory,
    GetTransfersSelector,
    GotTransfer,
    KeyImageImportResponse,
    Payment,
    SignedKeyImage,
    SignedTransferOutput,
    SubaddressIndex,
    TransferData,
    TransferOptions,
    TransferPriority,
    decode_transfers,
)
from .rpc import CallerWrapper, RPCErrorCode, RpcParams, once, once_value, optional, optional_value

logger = get_logger(__name__)


class WalletClient:
    """Client of the wallet (monero-wallet-rpc) JSON-RPC API."""

    def __init__(self, inner: CallerWrapper):
        self.inner = inner

    def __repr__(self) -> str:
        return f"WalletClient({self.inner.caller!r})"

    # -----------------------------------------------------------------
    #  Accounts and addresses
    # -----------------------------------------------------------------

    async def get_balance(self, account: int, addresses: Optional[List[int]] = None) -> BalanceData:
        """Return the balance of an account, optionally for a subset of its subaddresses."""
        params = RpcParams.array(chain(
            once_value(account),
            optional_value(list(addresses) if addresses is not None else None),
        ))
        return BalanceData.from_dict(await self.inner.request("get_balance", params))

    async def get_address(self, account: int, addresses: Optional[List[int]] = None) -> AddressData:
        """Return the addresses of an account. Optionally filter for a set of subaddresses."""
        params = RpcParams.map(chain(
            once("account_index", account),
            optional("address_index", list(addresses) if addresses is not None else None),
        ))
        return AddressData.from_dict(await self.inner.request("get_address", params))

    async def get_address_index(self, address: str) -> Tuple[int, int]:
        """Get the account and address indexes of a (sub)address."""
        rsp = await self.inner.request("get_address_index", RpcParams.map(once("address", address)))
        return SubaddressIndex.from_dict(require(rsp, "index")).as_tuple()

    async def create_address(self, account_index: int, label: Optional[str] = None) -> Tuple[str, int]:
        """
        Create a new address for an account.

        Returns:
            The new address and its index within the account
        """
        params = RpcParams.map(chain(
            once("account_index", account_index),
            optional("label", label),
        ))
        rsp = await self.inner.request("create_address", params)
        return (
            decode_str(require(rsp, "address"), "address"),
            decode_u64(require(rsp, "address_index"), "address_index"),
        )

    async def label_address(self, account_index: int, address_index: int, label: str) -> None:
        """Label an address."""
        index = SubaddressIndex(major=account_index, minor=address_index)
        params = RpcParams.map(chain(
            once("index", index.to_dict()),
            once("label", label),
        ))
        await self.inner.request("label_address", params)

    async def get_accounts(self, tag: Optional[str] = None) -> GetAccountsData:
        """Get all accounts of the wallet. Optionally filter accounts by tag."""
        params = RpcParams.map(optional("tag", tag))
        return GetAccountsData.from_dict(await self.inner.request("get_accounts", params))

    # -----------------------------------------------------------------
    #  Payments
    # -----------------------------------------------------------------

    async def get_payments(self, payment_id: bytes) -> List[Payment]:
        """Get the incoming payments carrying ``payment_id``."""
        params = RpcParams.map(once("payment_id", encode_hex(payment_id)))
        rsp = decode_object(await self.inner.request("get_payments", params))
        return [Payment.from_dict(p) for p in decode_list(rsp.get("payments", []), "payments")]

    async def get_bulk_payments(self, payment_ids: Iterable[bytes], min_block_height: int) -> List[Payment]:
        """
        Get the incoming payments carrying any of ``payment_ids``, from a given height.

        Preferred over :meth:`get_payments`; both work for a single payment id.
        """
        params = RpcParams.map(chain(
            once("payment_ids", [encode_hex(p) for p in payment_ids]),
            once("min_block_height", min_block_height),
        ))
        rsp = decode_object(await self.inner.request("get_bulk_payments", params))
        return [Payment.from_dict(p) for p in decode_list(rsp.get("payments", []), "payments")]

    # -----------------------------------------------------------------
    #  Wallet state
    # -----------------------------------------------------------------

    async def query_view_key(self) -> bytes:
        """Return the private view key."""
        rsp = await self.inner.request("query_key", RpcParams.map(once("key_type", "view_key")))
        return decode_hex(require(rsp, "key"), PRIVATE_KEY_LENGTH, "key")

    async def get_height(self) -> int:
        """Return the wallet's current block height."""
        rsp = await self.inner.request("get_height", RpcParams.NONE)
        return decode_nonzero(require(rsp, "height"), "height")

    async def get_version(self) -> Tuple[int, int]:
        """Get the RPC version as ``(major, minor)``."""
        rsp = await self.inner.request("get_version", RpcParams.NONE)
        return decode_version(require(rsp, "version"))

    # -----------------------------------------------------------------
    #  Transfers
    # -----------------------------------------------------------------

    async def transfer(
        self,
        destinations: Dict[str, int],
        priority: TransferPriority,
        options: Optional[TransferOptions] = None,
    ) -> TransferData:
        """
        Send monero to a number of recipients.

        Args:
            destinations: Amount in atomic units per recipient address
            priority: Fee tier
            options: Optional transfer arguments; unset fields are not sent
        """
        options = options or TransferOptions()
        params = RpcParams.map(chain(
            once("destinations", [
                {"address": address, "amount": amount} for address, amount in destinations.items()
            ]),
            once("priority", priority.encode()),
            optional("account_index", options.account_index),
            optional("subaddr_indices", list(options.subaddr_indices) if options.subaddr_indices is not None else None),
            optional("mixin", options.mixin),
            optional("ring_size", options.ring_size),
            optional("unlock_time", options.unlock_time),
            optional("payment_id", encode_hex(options.payment_id) if options.payment_id is not None else None),
            optional("do_not_relay", options.do_not_relay),
            once("get_tx_key", True),
            once("get_tx_hex", True),
            once("get_tx_metadata", True),
        ))
        data = TransferData.from_dict(await self.inner.request("transfer", params))
        logger.info(
            f"Transfer of {data.amount} to {len(destinations)} destination(s), fee {data.fee}"
            f"{'' if data.tx_hash is None else ', tx ' + encode_hex(data.tx_hash)}"
        )
        return data

    async def sign_transfer(self, unsigned_txset: bytes) -> SignedTransferOutput:
        """Sign a transaction set created on a read-only wallet (cold signing)."""
        params = RpcParams.map(chain(
            once("unsigned_txset", encode_hex(unsigned_txset)),
            once("export_raw", True),
        ))
        return SignedTransferOutput.from_dict(await self.inner.request("sign_transfer", params))

    async def submit_transfer(self, tx_data: bytes) -> List[bytes]:
        """
        Submit a transaction set signed on a cold wallet.

        Returns:
            Hashes of the submitted transactions
        """
        params = RpcParams.map(once("tx_data_hex", encode_hex(tx_data)))
        rsp = await self.inner.request("submit_transfer", params)
        return decode_hex_list(require(rsp, "tx_hash_list"), HASH_LENGTH, "tx_hash_list")

    async def get_transfers(self, selector: GetTransfersSelector) -> Dict[GetTransfersCategory, List[GotTransfer]]:
        """Return the wallet's transfers, grouped by category."""
        heights = selector.filter_by_height
        params = RpcParams.map(chain(
            ((category.value, bool(wanted)) for category, wanted in selector.category_selector.items()),
            height_filter_params(heights) if heights is not None else (),
            optional("account_index", selector.account_index),
            optional("subaddr_indices", list(selector.subaddr_indices) if selector.subaddr_indices is not None else None),
        ))
        return decode_transfers(await self.inner.request("get_transfers", params))

    async def get_transfer(self, txid: bytes, account_index: Optional[int] = None) -> Optional[GotTransfer]:
        """
        Look up a single transfer by transaction id.

        Returns:
            The transfer, or None if the wallet does not know the transaction
        """
        params = RpcParams.map(chain(
            once("txid", encode_hex(txid)),
            optional("account_index", account_index),
        ))
        rsp = await self.inner.call("get_transfer_by_txid", params)
        if rsp.error is not None:
            if rsp.error.code == RPCErrorCode.WALLET_WRONG_TXID:
                logger.debug(f"Transfer {encode_hex(txid)} not found")
                return None
            raise rsp.error
        return GotTransfer.from_dict(require(rsp.result, "transfer"))

    # -----------------------------------------------------------------
    #  Key images
    # -----------------------------------------------------------------

    async def export_key_images(self) -> List[SignedKeyImage]:
        """Export a signed set of key images."""
        rsp = decode_object(await self.inner.request("export_key_images", RpcParams.NONE))
        return [
            SignedKeyImage.from_dict(k)
            for k in decode_list(rsp.get("signed_key_images", []), "signed_key_images")
        ]

    async def import_key_images(self, signed_key_images: Iterable[SignedKeyImage]) -> KeyImageImportResponse:
        """Import a signed key image list and verify their spent status."""
        params = RpcParams.map(once("signed_key_images", [k.to_dict() for k in signed_key_images]))
        return KeyImageImportResponse.from_dict(await self.inner.request("import_key_images", params))

    async def check_tx_key(self, txid: bytes, tx_key: bytes, address: str) -> Tuple[int, bool, int]:
        """
        Check a transaction key against a transaction id and receiving address.

        Returns:
            ``(confirmations, in_pool, received)``
        """
        params = RpcParams.map(chain(
            once("txid", encode_hex(txid)),
            once("tx_key", encode_hex(tx_key)),
            once("address", address),
        ))
        rsp = await self.inner.request("check_tx_key", params)
        return (
            decode_u64(require(rsp, "confirmations"), "confirmations"),
            decode_bool(require(rsp, "in_pool"), "in_pool"),
            decode_u64(require(rsp, "received"), "received"),
        )
