"""
Shared fixtures for the Monero RPC client tests.

StaticCaller stands in for the network: it records every call with its
serialized parameters and replays queued results or errors.
"""

from collections import deque
from typing import Any, List, Optional, Tuple

import pytest

from monero_rpc.client import RpcClient
from monero_rpc.exceptions import RPCError
from monero_rpc.rpc import JsonRpcCaller, RPCResponse, RpcParams


# ============================================================================
# Test double
# ============================================================================

class StaticCaller(JsonRpcCaller):
    """In-memory JsonRpcCaller with canned responses."""

    def __init__(self):
        self.calls: List[Tuple[str, Any, bool]] = []
        self._responses = deque()
        self.closed = False

    def respond(self, result: Any = None, error: Optional[RPCError] = None) -> "StaticCaller":
        self._responses.append(RPCResponse(result=result, error=error))
        return self

    def fail(self, exc: Exception) -> "StaticCaller":
        self._responses.append(exc)
        return self

    async def call(self, method: str, params: RpcParams) -> RPCResponse:
        self.calls.append((method, params.to_wire(), params.is_none))
        if not self._responses:
            raise AssertionError(f"unexpected call to {method}")
        rsp = self._responses.popleft()
        if isinstance(rsp, Exception):
            raise rsp
        return rsp

    async def aclose(self) -> None:
        self.closed = True

    @property
    def last_method(self) -> str:
        return self.calls[-1][0]

    @property
    def last_params(self) -> Any:
        return self.calls[-1][1]


# ============================================================================
# Fixtures & Helpers
# ============================================================================

HASH_A = bytes(range(32))
HASH_B = bytes([0xab] * 32)
ADDRESS = "4" + "A" * 94


@pytest.fixture
def caller():
    return StaticCaller()


@pytest.fixture
def client(caller):
    return RpcClient.with_caller(caller)


@pytest.fixture
def daemon(client):
    return client.daemon()


@pytest.fixture
def wallet(client):
    return client.wallet()


def block_header_dict(height: int = 100, **overrides) -> dict:
    header = {
        "major_version": 16,
        "minor_version": 16,
        "timestamp": 1700000000,
        "prev_hash": HASH_B.hex(),
        "nonce": 12345,
        "orphan_status": False,
        "height": height,
        "depth": 2,
        "hash": HASH_A.hex(),
        "difficulty": 250000,
        "reward": 600000000000,
    }
    header.update(overrides)
    return header


def transfer_dict(**overrides) -> dict:
    transfer = {
        "address": ADDRESS,
        "amount": 1000000000000,
        "confirmations": 12,
        "double_spend_seen": False,
        "fee": 30000000,
        "height": 2500000,
        "note": "",
        "payment_id": "0000000000000000",
        "subaddr_index": {"major": 0, "minor": 1},
        "suggested_confirmations_threshold": 1,
        "timestamp": 1700000000,
        "txid": HASH_A.hex(),
        "type": "in",
        "unlock_time": 0,
    }
    transfer.update(overrides)
    return transfer
