"""
Tests for the RpcClient entry point and its lifecycle.
"""

import json

import httpx
import pytest

from monero_rpc.client import RpcClient
from monero_rpc.config import EndpointConfig
from monero_rpc.daemon import DaemonClient
from monero_rpc.wallet import WalletClient


class TestRpcClient:

    def test_daemon_and_wallet_share_transport(self, client):
        daemon = client.daemon()
        wallet = client.wallet()
        assert isinstance(daemon, DaemonClient)
        assert isinstance(wallet, WalletClient)
        assert daemon.inner is wallet.inner is client.inner

    @pytest.mark.asyncio
    async def test_context_manager_closes_transport(self, caller):
        async with RpcClient.with_caller(caller) as client:
            assert client.inner.caller is caller
        assert caller.closed

    @pytest.mark.asyncio
    async def test_end_to_end_over_http(self):
        def handler(request):
            body = json.loads(request.content)
            assert body["method"] == "get_block_count"
            return httpx.Response(200, json={
                "jsonrpc": "2.0", "id": body["id"], "result": {"count": 993163, "status": "OK"},
            })

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        async with RpcClient("http://node.test:18081", client=http) as client:
            assert await client.daemon().get_block_count() == 993163
        assert not http.is_closed
        await http.aclose()

    @pytest.mark.asyncio
    async def test_from_config(self):
        config = EndpointConfig(url="http://wallet.test:18083", endpoint="/json_rpc", timeout=5.0)
        client = RpcClient.from_config(config)
        try:
            assert client.inner.caller.url == "http://wallet.test:18083/json_rpc"
            assert client.inner.caller.client.timeout.read == 5.0
        finally:
            await client.aclose()
