"""
Block Height Ranges

A height range has a lower and an upper :class:`Bound`, each included,
excluded or unbounded. Wallet transfer queries take the range as a flat
``min_height`` / ``max_height`` pair where ``min_height`` is exclusive and
``max_height`` is inclusive; :func:`height_filter_params` performs that
translation.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Tuple


class BoundKind(Enum):
    INCLUDED = "included"
    EXCLUDED = "excluded"
    UNBOUNDED = "unbounded"


@dataclass(frozen=True)
class Bound:
    """One end of a height range."""

    kind: BoundKind
    height: Optional[int] = None

    def __post_init__(self):
        if self.kind is BoundKind.UNBOUNDED:
            if self.height is not None:
                raise ValueError("an unbounded end carries no height")
            return
        if isinstance(self.height, bool) or not isinstance(self.height, int):
            raise ValueError(f"height must be an integer, got {self.height!r}")
        if self.height < 0:
            raise ValueError("height must be non-negative")

    @classmethod
    def included(cls, height: int) -> "Bound":
        return cls(BoundKind.INCLUDED, height)

    @classmethod
    def excluded(cls, height: int) -> "Bound":
        return cls(BoundKind.EXCLUDED, height)

    @classmethod
    def unbounded(cls) -> "Bound":
        return cls(BoundKind.UNBOUNDED)


@dataclass(frozen=True)
class HeightRange:
    """
    A range of block heights.

    Examples:
        HeightRange.inclusive(5, 10)   # 5..=10
        HeightRange.half_open(5, 10)   # 5..10
        HeightRange.up_to(10)          # ..=10
        HeightRange.below(10)          # ..10
        HeightRange.starting_at(5)     # 5..
        HeightRange.all()              # ..
    """

    start: Bound = Bound.unbounded()
    end: Bound = Bound.unbounded()

    @classmethod
    def inclusive(cls, start: int, end: int) -> "HeightRange":
        return cls(Bound.included(start), Bound.included(end))

    @classmethod
    def half_open(cls, start: int, end: int) -> "HeightRange":
        return cls(Bound.included(start), Bound.excluded(end))

    @classmethod
    def starting_at(cls, start: int) -> "HeightRange":
        return cls(Bound.included(start), Bound.unbounded())

    @classmethod
    def up_to(cls, end: int) -> "HeightRange":
        return cls(Bound.unbounded(), Bound.included(end))

    @classmethod
    def below(cls, end: int) -> "HeightRange":
        return cls(Bound.unbounded(), Bound.excluded(end))

    @classmethod
    def all(cls) -> "HeightRange":
        return cls()

    @classmethod
    def from_range(cls, heights: range) -> "HeightRange":
        """Convert a Python ``range`` (half-open, step 1)."""
        if heights.step != 1:
            raise ValueError("only ranges with step 1 describe a height interval")
        return cls.half_open(heights.start, heights.stop)


def resolve_heights(heights: HeightRange) -> Tuple[Optional[int], Optional[int]]:
    """
    Resolve a range into the node's ``(min_height, max_height)``.

    ``min_height`` is exclusive, so an included lower bound ``b`` becomes
    ``b - 1``. An included lower bound of 0 has no exclusive equivalent and
    leaves ``min_height`` unset. An excluded upper bound saturates at 0.
    """
    start, end = heights.start, heights.end

    if start.kind is BoundKind.INCLUDED:
        min_height = start.height - 1 if start.height > 0 else None
    elif start.kind is BoundKind.EXCLUDED:
        min_height = start.height
    else:
        min_height = None

    if end.kind is BoundKind.INCLUDED:
        max_height = end.height
    elif end.kind is BoundKind.EXCLUDED:
        max_height = max(end.height - 1, 0)
    else:
        max_height = None

    return min_height, max_height


def height_filter_params(heights: HeightRange) -> Iterator[Tuple[str, Any]]:
    """
    Yield the ``get_transfers`` height filter parameters for ``heights``.

    ``filter_by_height`` is always yielded, including for a fully unbounded
    range; each bound is yielded only when it resolves to a height.
    """
    if isinstance(heights, range):
        heights = HeightRange.from_range(heights)
    min_height, max_height = resolve_heights(heights)

    yield "filter_by_height", True
    if min_height is not None:
        yield "min_height", min_height
    if max_height is not None:
        yield "max_height", max_height
