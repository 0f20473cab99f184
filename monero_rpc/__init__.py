"""
Monero RPC Client Package

Typed async client for the monerod and monero-wallet-rpc JSON-RPC APIs:

    from monero_rpc import RpcClient, GetBlockHeaderSelector

    async with RpcClient("http://127.0.0.1:18081") as client:
        header = await client.daemon().get_block_header(GetBlockHeaderSelector.LAST)
"""

from .client import RpcClient
from .daemon import DaemonClient, GetBlockHeaderSelector, RegtestDaemonClient
from .exceptions import (
    ConfigurationError,
    DecodeError,
    DecodeErrorKind,
    MoneroRPCException,
    ProtocolError,
    RPCError,
    TransportError,
)
from .heights import Bound, HeightRange
from .models import (
    GetTransfersCategory,
    GetTransfersSelector,
    GotTransfer,
    SubaddressIndex,
    TransferOptions,
    TransferPriority,
)
from .wallet import WalletClient

__all__ = [
    "RpcClient",
    "DaemonClient",
    "RegtestDaemonClient",
    "WalletClient",
    "GetBlockHeaderSelector",
    "Bound",
    "HeightRange",
    "GetTransfersCategory",
    "GetTransfersSelector",
    "GotTransfer",
    "SubaddressIndex",
    "TransferOptions",
    "TransferPriority",
    "MoneroRPCException",
    "ConfigurationError",
    "DecodeError",
    "DecodeErrorKind",
    "ProtocolError",
    "RPCError",
    "TransportError",
]
