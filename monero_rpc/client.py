"""
Monero RPC Client Entry Point

:class:`RpcClient` owns the transport to one node and hands out the typed
daemon and wallet clients that share it:

    async with RpcClient("http://127.0.0.1:18081") as client:
        height = await client.daemon().get_block_count()
"""

from typing import Optional

import httpx

from .config import EndpointConfig
from .daemon import DaemonClient
from .rpc import CallerWrapper, JsonRpcCaller, RemoteCaller
from .wallet import WalletClient


class RpcClient:
    """Connection to a monerod or monero-wallet-rpc endpoint."""

    def __init__(
        self,
        addr: str,
        client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        auth: Optional[httpx.Auth] = None,
        endpoint: Optional[str] = None,
    ):
        """
        Args:
            addr: Base URL of the node, e.g. ``http://127.0.0.1:18081``
            client: Shared ``httpx.AsyncClient``; left open by :meth:`aclose`
            timeout: Request timeout in seconds. None waits indefinitely.
            auth: HTTP authentication, typically ``httpx.DigestAuth``
            endpoint: JSON-RPC path, ``/json_rpc`` unless overridden
        """
        kwargs = {"endpoint": endpoint} if endpoint is not None else {}
        self.inner = CallerWrapper(RemoteCaller(addr, client=client, timeout=timeout, auth=auth, **kwargs))

    @classmethod
    def with_caller(cls, caller: JsonRpcCaller) -> "RpcClient":
        """Build a client on an arbitrary transport."""
        obj = cls.__new__(cls)
        obj.inner = CallerWrapper(caller)
        return obj

    @classmethod
    def from_config(cls, config: EndpointConfig, client: Optional[httpx.AsyncClient] = None) -> "RpcClient":
        """Build a client from a loaded ``[daemon]`` or ``[wallet]`` section."""
        return cls(
            config.url,
            client=client,
            timeout=config.timeout,
            auth=config.auth,
            endpoint=config.endpoint,
        )

    def __repr__(self) -> str:
        return f"RpcClient({self.inner.caller!r})"

    def daemon(self) -> DaemonClient:
        """Daemon API on this connection."""
        return DaemonClient(self.inner)

    def wallet(self) -> WalletClient:
        """Wallet API on this connection."""
        return WalletClient(self.inner)

    async def aclose(self) -> None:
        await self.inner.caller.aclose()

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
