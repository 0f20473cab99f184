"""
Monero Daemon RPC Client

Chain queries, block templates and, on regtest networks, block generation.
"""

from dataclasses import dataclass
from enum import Enum
from itertools import chain
from typing import List, Optional, Tuple

from .constants import HASH_LENGTH
from .encoding import decode_bool, decode_hex, decode_list, decode_nonzero, decode_u64, encode_hex, require, unwrap_status
from .logger import get_logger
from .models import BlockHeaderResponse, BlockTemplate
from .rpc import CallerWrapper, RpcParams, once, once_value

logger = get_logger(__name__)


class _SelectorKind(Enum):
    LAST = "last"
    HASH = "hash"
    HEIGHT = "height"


@dataclass(frozen=True)
class GetBlockHeaderSelector:
    """
    Which block header to fetch.

    Use ``GetBlockHeaderSelector.LAST``, ``GetBlockHeaderSelector.hash(h)``
    or ``GetBlockHeaderSelector.height(n)``.
    """
    kind: _SelectorKind
    block_hash: Optional[bytes] = None
    block_height: Optional[int] = None

    LAST = None  # assigned below

    @classmethod
    def hash(cls, block_hash: bytes) -> "GetBlockHeaderSelector":
        return cls(_SelectorKind.HASH, block_hash=bytes(block_hash))

    @classmethod
    def height(cls, block_height: int) -> "GetBlockHeaderSelector":
        return cls(_SelectorKind.HEIGHT, block_height=block_height)

    def to_request(self) -> Tuple[str, RpcParams]:
        """The RPC method and parameters selecting this header."""
        if self.kind is _SelectorKind.HASH:
            return "get_block_header_by_hash", RpcParams.map(once("hash", encode_hex(self.block_hash)))
        if self.kind is _SelectorKind.HEIGHT:
            return "get_block_header_by_height", RpcParams.map(once("height", self.block_height))
        return "get_last_block_header", RpcParams.NONE


GetBlockHeaderSelector.LAST = GetBlockHeaderSelector(_SelectorKind.LAST)


class DaemonClient:
    """Client of the daemon (monerod) JSON-RPC API."""

    def __init__(self, inner: CallerWrapper):
        self.inner = inner

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.inner.caller!r})"

    async def get_block_count(self) -> int:
        """Look up how many blocks are in the longest chain known to the node."""
        rsp = unwrap_status(await self.inner.request("get_block_count", RpcParams.array(())))
        return decode_nonzero(require(rsp, "count"), "count")

    async def on_get_block_hash(self, height: int) -> bytes:
        """Look up a block's hash by its height."""
        rsp = await self.inner.request("on_get_block_hash", RpcParams.array(once_value(height)))
        return decode_hex(rsp, HASH_LENGTH, "block_hash")

    async def get_block_template(self, wallet_address: str, reserve_size: int) -> BlockTemplate:
        """Get a block template on which to mine a new block."""
        params = RpcParams.array(chain(once_value(wallet_address), once_value(reserve_size)))
        rsp = unwrap_status(await self.inner.request("get_block_template", params))
        return BlockTemplate.from_dict(rsp)

    async def submit_block(self, block_blob_data: str):
        """
        Submit a mined block to the network.

        ``block_blob_data`` is the hex blob of the mined block. Returns the
        node's raw result unchecked; a rejected block comes back as a
        JSON-RPC error.
        """
        return await self.inner.request("submit_block", RpcParams.array(once_value(block_blob_data)))

    async def get_block_header(self, selector: GetBlockHeaderSelector) -> BlockHeaderResponse:
        """Retrieve block header information matching the selector."""
        method, params = selector.to_request()
        rsp = unwrap_status(await self.inner.request(method, params))
        return BlockHeaderResponse.from_dict(require(rsp, "block_header"))

    async def get_block_headers_range(self, start_height: int, end_height: int) -> Tuple[List[BlockHeaderResponse], bool]:
        """
        Retrieve headers of the blocks from ``start_height`` to ``end_height``, both included.

        Returns:
            The headers and the node's ``untrusted`` flag
        """
        params = RpcParams.map(chain(
            once("start_height", start_height),
            once("end_height", end_height),
        ))
        rsp = unwrap_status(await self.inner.request("get_block_headers_range", params))
        headers = [BlockHeaderResponse.from_dict(h) for h in decode_list(require(rsp, "headers"), "headers")]
        return headers, decode_bool(rsp.get("untrusted", False), "untrusted")

    def regtest(self) -> "RegtestDaemonClient":
        """Enable additional functions for regtest mode."""
        return RegtestDaemonClient(self.inner)


class RegtestDaemonClient(DaemonClient):
    """Daemon client with the regtest-only mining call."""

    async def generate_blocks(self, amount_of_blocks: int, wallet_address: str) -> int:
        """Generate blocks and give the mining rewards to ``wallet_address``."""
        params = RpcParams.map(chain(
            once("amount_of_blocks", amount_of_blocks),
            once("wallet_address", wallet_address),
        ))
        rsp = unwrap_status(await self.inner.request("generateblocks", params))
        height = decode_u64(require(rsp, "height"), "height")
        logger.info(f"Generated {amount_of_blocks} block(s), chain height {height}")
        return height
