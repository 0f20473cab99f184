"""
Monero JSON-RPC 2.0 Transport

The transport is a capability: anything implementing :class:`JsonRpcCaller`
can stand in for the network. :class:`RemoteCaller` is the production
implementation over ``httpx``; tests substitute an in-memory responder.

A caller returns an :class:`RPCResponse` carrying either the node's result
or its JSON-RPC error. Error codes are not interpreted here; what a code
means depends on the method and is decided by the typed clients. Anything
that goes wrong below the JSON-RPC envelope raises
:class:`~monero_rpc.exceptions.TransportError`.
"""

import json
import time
import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, Dict, Optional

import httpx

from ..constants import (
    JSON_RPC_ENDPOINT,
    JSON_RPC_VERSION,
    LOG_INCLUDE_REQUEST_CONTENT,
    LOG_INCLUDE_RESPONSE_CONTENT,
    LOG_MAX_BODY_LENGTH,
)
from ..exceptions import RPCError, TransportError
from ..logger import get_logger
from .params import RpcParams

logger = get_logger(__name__)


class RPCErrorCode(IntEnum):
    """JSON-RPC 2.0 error codes seen from Monero nodes."""

    # Standard errors
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603

    # Wallet server errors
    WALLET_UNKNOWN_ERROR = -1
    WALLET_WRONG_ADDRESS = -2
    WALLET_WRONG_TXID = -8  # get_transfer_by_txid: transaction not found


@dataclass
class RPCResponse:
    """Outcome of one JSON-RPC call: a result or a node-reported error."""

    result: Optional[Any] = None
    error: Optional[RPCError] = None
    id: Optional[str] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    def unwrap(self) -> Any:
        """Return the result, raising the node's error if there is one."""
        if self.error is not None:
            raise self.error
        return self.result


def _truncate(text: str) -> str:
    if len(text) > LOG_MAX_BODY_LENGTH:
        return text[:LOG_MAX_BODY_LENGTH] + "...[TRUNCATED]"
    return text


class JsonRpcCaller(ABC):
    """Performs a single JSON-RPC call."""

    @abstractmethod
    async def call(self, method: str, params: RpcParams) -> RPCResponse:
        """
        Send ``method`` with ``params`` and return the node's response.

        Raises:
            TransportError: the call did not produce a JSON-RPC response
        """

    async def aclose(self) -> None:
        """Release resources held by the caller."""


class RemoteCaller(JsonRpcCaller):
    """
    JSON-RPC 2.0 over HTTP POST to ``<addr>/json_rpc``.

    One ``httpx.AsyncClient`` is reused for every call. A client passed in by
    the application stays owned by the application and is not closed by
    :meth:`aclose`.
    """

    def __init__(
        self,
        addr: str,
        client: Optional[httpx.AsyncClient] = None,
        endpoint: str = JSON_RPC_ENDPOINT,
        timeout: Optional[float] = None,
        auth: Optional[httpx.Auth] = None,
    ):
        self.addr = addr.rstrip('/')
        self.url = f"{self.addr}/{endpoint.lstrip('/')}"
        self._owns_client = client is None
        self.client = client if client is not None else httpx.AsyncClient(timeout=timeout, auth=auth)
        self._auth = auth if client is not None else None

    def __repr__(self) -> str:
        return f"RemoteCaller({self.url!r})"

    def build_request(self, method: str, params: RpcParams) -> Dict[str, Any]:
        """Build the request envelope with a fresh request id."""
        payload = {
            "jsonrpc": JSON_RPC_VERSION,
            "method": method,
            "id": str(uuid.uuid4()),
        }
        wire_params = params.to_wire()
        if not params.is_none:
            payload["params"] = wire_params
        return payload

    async def call(self, method: str, params: RpcParams) -> RPCResponse:
        payload = self.build_request(method, params)
        request_id = payload["id"]

        body = ""
        if LOG_INCLUDE_REQUEST_CONTENT:
            body = f"\n\nOutgoing Request:\n\"{_truncate(json.dumps(payload.get('params')))}\"\n"
        logger.debug(f"--> {method} {self.url} id={request_id}{body}")

        start_time = time.time()
        try:
            kwargs = {"auth": self._auth} if self._auth is not None else {}
            response = await self.client.post(self.url, json=payload, **kwargs)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            elapsed = time.time() - start_time
            status_code = exc.response.status_code
            logger.warning(f"<-- {method} {self.url} {status_code} ERROR ({elapsed:.3f}s)")
            raise TransportError(
                f"HTTP {status_code} from {self.url}", method=method, url=self.url, status_code=status_code,
            ) from exc
        except httpx.RequestError as exc:
            elapsed = time.time() - start_time
            logger.warning(f"<-- {method} {self.url} NETWORK_ERROR ({elapsed:.3f}s): {exc!r}")
            raise TransportError(
                f"request to {self.url} failed: {exc!r}", method=method, url=self.url,
            ) from exc
        except ValueError as exc:
            # json.JSONDecodeError is a ValueError
            elapsed = time.time() - start_time
            logger.warning(f"<-- {method} {self.url} ERROR ({elapsed:.3f}s): invalid JSON body")
            raise TransportError(
                f"response from {self.url} is not JSON", method=method, url=self.url,
                status_code=response.status_code,
            ) from exc

        elapsed = time.time() - start_time
        rsp = self._parse_envelope(method, request_id, data)

        response_body = ""
        if LOG_INCLUDE_RESPONSE_CONTENT:
            response_body = f"\n\nIncoming Response:\n\"{_truncate(json.dumps(data))}\"\n"
        if rsp.is_error:
            logger.debug(
                f"<-- {method} {self.url} RPC_ERROR [{rsp.error.code}] ({elapsed:.3f}s){response_body}"
            )
        else:
            logger.debug(f"<-- {method} {self.url} {response.status_code} ({elapsed:.3f}s){response_body}")
        return rsp

    def _parse_envelope(self, method: str, request_id: str, data: Any) -> RPCResponse:
        """Validate a JSON-RPC 2.0 response envelope."""

        def malformed(reason: str) -> TransportError:
            logger.warning(f"<-- {method} {self.url} ERROR: malformed response envelope ({reason})")
            return TransportError(f"malformed JSON-RPC response: {reason}", method=method, url=self.url)

        if not isinstance(data, dict):
            raise malformed("not an object")
        if data.get("id") != request_id:
            raise malformed(f"id {data.get('id')!r} does not match request {request_id!r}")

        error = data.get("error")
        if error is not None:
            if not isinstance(error, dict) or isinstance(error.get("code"), bool) \
                    or not isinstance(error.get("code"), int):
                raise malformed("invalid error member")
            return RPCResponse(error=RPCError.from_dict(error), id=request_id)

        if "result" not in data:
            raise malformed("neither result nor error present")
        return RPCResponse(result=data["result"], id=request_id)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()


class CallerWrapper:
    """Shared front of a :class:`JsonRpcCaller` used by the typed clients."""

    __slots__ = ("caller",)

    def __init__(self, caller: JsonRpcCaller):
        self.caller = caller

    def __repr__(self) -> str:
        return f"CallerWrapper({self.caller!r})"

    async def call(self, method: str, params: RpcParams) -> RPCResponse:
        return await self.caller.call(method, params)

    async def request(self, method: str, params: RpcParams) -> Any:
        """
        Perform a call and return its raw result.

        Raises:
            RPCError: the node reported an error, passed through unchanged
            TransportError: the call failed below JSON-RPC
        """
        rsp = await self.caller.call(method, params)
        return rsp.unwrap()
