"""
Monero RPC Wire Encoding Module

Codecs for the value shapes the node puts on the wire:

- hex strings carrying raw bytes (hashes, keys, transaction blobs)
- the ``{"status": "OK", ...}`` result envelope
- unsigned integers with range guards (u64, non-zero, packed u32 versions)

Encoders always succeed; decoders either return the value or raise
:class:`~monero_rpc.exceptions.DecodeError`.
"""

from decimal import Decimal
from typing import Any, Dict, Optional, Tuple, Union

from .constants import ATOMIC_UNITS_PER_XMR, STATUS_OK, U32_MAX, U64_MAX, VALID_HEX_PATTERN
from .exceptions import DecodeError, DecodeErrorKind, ProtocolError

# An expected byte length, or several accepted ones
Length = Union[int, Tuple[int, ...]]


# =============================================================================
# HEX STRINGS
# =============================================================================

def encode_hex(data: bytes) -> str:
    """Encode raw bytes as the node's lowercase, unprefixed hex string."""
    return bytes(data).hex()


def decode_hex(value: Any, length: Optional[Length] = None, field: Optional[str] = None) -> bytes:
    """
    Decode a hex string received from the node.

    Args:
        value: The wire value
        length: Expected byte length, or a tuple of accepted lengths
        field: Field name used in error messages

    Returns:
        The decoded bytes

    Raises:
        DecodeError: INVALID_HEX for non-strings, odd lengths and non-hex
            characters; WRONG_LENGTH when ``length`` is not met.
    """
    if not isinstance(value, str):
        raise DecodeError(DecodeErrorKind.INVALID_HEX, f"expected hex string, got {type(value).__name__}", field)
    if len(value) % 2:
        raise DecodeError(DecodeErrorKind.INVALID_HEX, f"odd-length hex string ({len(value)} chars)", field)
    if not VALID_HEX_PATTERN.fullmatch(value):
        raise DecodeError(DecodeErrorKind.INVALID_HEX, "non-hex characters in string", field)

    try:
        data = bytes.fromhex(value)
    except ValueError as exc:
        raise DecodeError(DecodeErrorKind.INVALID_HEX, str(exc), field) from exc

    if length is not None:
        accepted = (length,) if isinstance(length, int) else tuple(length)
        if len(data) not in accepted:
            expected = " or ".join(str(n) for n in accepted)
            raise DecodeError(
                DecodeErrorKind.WRONG_LENGTH,
                f"expected {expected} bytes, got {len(data)}",
                field,
            )
    return data


def decode_hex_list(values: Any, length: Optional[Length] = None, field: Optional[str] = None) -> list:
    """Decode a JSON array of hex strings."""
    if not isinstance(values, list):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, "expected a list of hex strings", field)
    return [decode_hex(v, length, field) for v in values]


# =============================================================================
# RESULT ENVELOPE
# =============================================================================

def unwrap_status(result: Any) -> Dict[str, Any]:
    """
    Check the ``status`` field of an enveloped daemon result and strip it.

    Any value other than ``"OK"``, including a missing status, means the node
    signalled a failure inside a successful JSON-RPC response.

    Raises:
        ProtocolError: status is not the success token
        DecodeError: the result is not an object
    """
    if not isinstance(result, dict):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected object, got {type(result).__name__}")
    status = result.get("status")
    if status != STATUS_OK:
        raise ProtocolError(status)
    return {k: v for k, v in result.items() if k != "status"}


# =============================================================================
# FIELD ACCESS AND INTEGERS
# =============================================================================

def require(data: Any, field: str) -> Any:
    """Return ``data[field]``, raising DecodeError if the object or key is missing."""
    if not isinstance(data, dict):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected object, got {type(data).__name__}", field)
    if field not in data:
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, "missing field", field)
    return data[field]


def decode_u64(value: Any, field: Optional[str] = None) -> int:
    """Decode an unsigned 64-bit integer."""
    # bool is an int subclass; the node never sends one where a number is expected
    if isinstance(value, bool) or not isinstance(value, int):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected integer, got {type(value).__name__}", field)
    if value < 0 or value > U64_MAX:
        raise DecodeError(DecodeErrorKind.OUT_OF_RANGE, f"{value} is outside u64", field)
    return value


def decode_nonzero(value: Any, field: Optional[str] = None) -> int:
    """Decode an unsigned 64-bit integer that must not be zero."""
    value = decode_u64(value, field)
    if value == 0:
        raise DecodeError(DecodeErrorKind.OUT_OF_RANGE, "expected non-zero value", field)
    return value


def decode_object(value: Any, field: Optional[str] = None) -> Dict[str, Any]:
    if not isinstance(value, dict):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected object, got {type(value).__name__}", field)
    return value


def decode_bool(value: Any, field: Optional[str] = None) -> bool:
    if not isinstance(value, bool):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected boolean, got {type(value).__name__}", field)
    return value


def decode_str(value: Any, field: Optional[str] = None) -> str:
    if not isinstance(value, str):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected string, got {type(value).__name__}", field)
    return value


def decode_list(value: Any, field: Optional[str] = None) -> list:
    if not isinstance(value, list):
        raise DecodeError(DecodeErrorKind.INVALID_VALUE, f"expected list, got {type(value).__name__}", field)
    return value


def decode_version(value: Any) -> Tuple[int, int]:
    """
    Split a packed RPC version into ``(major, minor)``.

    The wallet reports its version as a u32: major in the high 16 bits,
    minor in the low 16 bits.
    """
    value = decode_u64(value, "version")
    if value > U32_MAX:
        raise DecodeError(DecodeErrorKind.OUT_OF_RANGE, f"{value} does not fit a u32 version", "version")
    major = value >> 16
    minor = value - (major << 16)
    return major, minor


# =============================================================================
# AMOUNTS
# =============================================================================

def atomic_to_xmr(amount: int) -> Decimal:
    """Convert piconero to XMR."""
    return Decimal(amount) / ATOMIC_UNITS_PER_XMR


def xmr_to_atomic(amount: Union[Decimal, str, int]) -> int:
    """Convert an XMR amount to piconero. Fractions below one piconero are rejected."""
    atomic = Decimal(amount) * ATOMIC_UNITS_PER_XMR
    if atomic != atomic.to_integral_value():
        raise ValueError(f"{amount} XMR is not a whole number of piconero")
    if atomic < 0:
        raise ValueError("amount must be non-negative")
    return int(atomic)
