"""
Monero RPC Marshaling Layer

Lazily built parameter payloads and the JSON-RPC 2.0 transport capability.
"""

from .params import RpcParams, ParamsKind, once, once_value, optional, optional_value
from .caller import (
    JsonRpcCaller,
    RemoteCaller,
    CallerWrapper,
    RPCResponse,
    RPCErrorCode,
)

__all__ = [
    "RpcParams",
    "ParamsKind",
    "once",
    "once_value",
    "optional",
    "optional_value",
    "JsonRpcCaller",
    "RemoteCaller",
    "CallerWrapper",
    "RPCResponse",
    "RPCErrorCode",
]
