"""
Monero RPC Parameter Payloads

Parameters are described as iterables and only materialized when the
transport serializes the request. Call sites compose them from small
generators so that optional fields are included by yielding a pair and
omitted by yielding nothing:

    params = RpcParams.map(chain(
        once("account_index", account_index),
        optional("label", label),
    ))

An absent optional field never becomes ``null`` on the wire; some wallet
methods treat an explicit ``null`` as an override.
"""

from enum import Enum
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

Pair = Tuple[str, Any]
WireParams = Union[List[Any], Dict[str, Any], None]


class ParamsKind(Enum):
    ARRAY = "array"
    MAP = "map"
    NONE = "none"


class RpcParams:
    """
    A lazily evaluated JSON-RPC ``params`` member.

    Three variants exist: a positional array, a named map, and ``NONE``.
    ``NONE`` is distinct from an empty array or map: the transport leaves the
    ``params`` member out of the request entirely.
    """

    NONE: "RpcParams"

    __slots__ = ("kind", "_source", "_consumed")

    def __init__(self, kind: ParamsKind, source: Optional[Iterable] = None):
        self.kind = kind
        self._source = source
        self._consumed = False

    @classmethod
    def array(cls, values: Iterable[Any]) -> "RpcParams":
        """Positional parameters."""
        return cls(ParamsKind.ARRAY, values)

    @classmethod
    def map(cls, pairs: Iterable[Pair]) -> "RpcParams":
        """Named parameters from ``(key, value)`` pairs, in yield order."""
        return cls(ParamsKind.MAP, pairs)

    @property
    def is_none(self) -> bool:
        return self.kind is ParamsKind.NONE

    def to_wire(self) -> WireParams:
        """
        Evaluate the parameter source into its JSON shape.

        A payload is handed to exactly one call, so it can be evaluated once.

        Raises:
            RuntimeError: the payload was already evaluated
            ValueError: a key was yielded twice in map mode
        """
        if self.kind is ParamsKind.NONE:
            return None
        if self._consumed:
            raise RuntimeError("RpcParams can only be serialized once")
        self._consumed = True

        if self.kind is ParamsKind.ARRAY:
            return list(self._source)

        result: Dict[str, Any] = {}
        for key, value in self._source:
            if key in result:
                raise ValueError(f"duplicate parameter: {key}")
            result[key] = value
        return result

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "pending"
        return f"RpcParams({self.kind.value}, {state})"


RpcParams.NONE = RpcParams(ParamsKind.NONE)


def once(key: str, value: Any) -> Iterator[Pair]:
    """Yield a single named parameter."""
    yield key, value


def optional(key: str, value: Any) -> Iterator[Pair]:
    """Yield a named parameter only when ``value`` is not None."""
    if value is not None:
        yield key, value


def optional_value(value: Any) -> Iterator[Any]:
    """Yield a positional parameter only when it is not None."""
    if value is not None:
        yield value


def once_value(value: Any) -> Iterator[Any]:
    """Yield a single positional parameter."""
    yield value
