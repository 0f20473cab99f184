"""
Monero RPC Exceptions

Custom exception classes for the Monero RPC client.

Every failure surfaced by the client is one of three kinds:

- DecodeError: a wire value could not be decoded (bad hex, out of range
  integer, envelope status mismatch, missing field).
- RPCError: the node accepted the call and reported a JSON-RPC error.
- TransportError: the call failed below JSON-RPC (connection, HTTP status,
  unparseable response envelope).
"""

from enum import Enum
from typing import Any, Dict, Optional


class MoneroRPCException(Exception):
    """Base exception for the Monero RPC client."""
    pass


class ConfigurationError(MoneroRPCException):
    """Configuration error."""
    pass


class DecodeErrorKind(Enum):
    """Why a wire value was rejected."""
    INVALID_HEX = "invalid_hex"
    WRONG_LENGTH = "wrong_length"
    OUT_OF_RANGE = "out_of_range"
    INVALID_VALUE = "invalid_value"
    BAD_STATUS = "bad_status"


class DecodeError(MoneroRPCException):
    """A value received from (or destined to) the node is malformed."""

    def __init__(self, kind: DecodeErrorKind, message: str, field: Optional[str] = None):
        self.kind = kind
        self.field = field
        if field:
            message = f"{field}: {message}"
        super().__init__(message)


class ProtocolError(DecodeError):
    """The node signalled failure through the result envelope's status field."""

    def __init__(self, status: Any):
        self.status = status
        super().__init__(DecodeErrorKind.BAD_STATUS, f"node returned status {status!r}", field="status")


class RPCError(MoneroRPCException):
    """JSON-RPC error reported by the node."""

    def __init__(self, code: int, message: str, data: Optional[Any] = None):
        self.code = code
        self.message = message
        self.data = data
        super().__init__(f"[{code}] {message}")

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "code": self.code,
            "message": self.message,
        }
        if self.data is not None:
            result["data"] = self.data
        return result

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RPCError":
        return cls(
            code=data["code"],
            message=data.get("message", ""),
            data=data.get("data"),
        )

    def __eq__(self, other):
        if not isinstance(other, RPCError):
            return NotImplemented
        return (self.code, self.message, self.data) == (other.code, other.message, other.data)

    __hash__ = Exception.__hash__


class TransportError(MoneroRPCException):
    """Network communication error below the JSON-RPC layer."""

    def __init__(self, message: str, method: Optional[str] = None, url: Optional[str] = None,
                 status_code: Optional[int] = None):
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(message)
