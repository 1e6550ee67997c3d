"""Fixed-width field slicing and padding."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator, Optional, Sequence

BLANK = " "
ZERO = "0"


@dataclass(frozen=True)
class FieldSpec:
    """One fixed-width field of a record layout.

    ``rule`` is the validator applied to the raw value; fields without a rule
    are not checked on their own.
    """

    name: str
    width: int
    rule: Optional[Callable] = None


def iter_positions(layout: Sequence[FieldSpec]) -> Iterator[tuple[FieldSpec, int, int]]:
    """Yield each field with its 1-based inclusive start and end positions."""

    offset = 0
    for spec in layout:
        yield spec, offset + 1, offset + spec.width
        offset += spec.width


def layout_width(layout: Sequence[FieldSpec]) -> int:
    return sum(spec.width for spec in layout)


def extract_fields(line: str, layout: Sequence[FieldSpec]) -> dict[str, str]:
    """Slice ``line`` into the named fields of ``layout``, in layout order."""

    values: dict[str, str] = {}
    for spec, start, end in iter_positions(layout):
        values[spec.name] = line[start - 1 : end]
    return values


def pad_left_justified(value: str, width: int, fill: str = BLANK) -> str:
    """Append ``fill`` until ``value`` is ``width`` characters long.

    Values already at or over ``width`` are returned unchanged.
    """

    if len(value) >= width:
        return value
    return value + fill * (width - len(value))


def pad_right_justified(value: str, width: int, fill: str = ZERO) -> str:
    """Prepend ``fill`` until ``value`` is ``width`` characters long.

    Values already at or over ``width`` are returned unchanged.
    """

    if len(value) >= width:
        return value
    return fill * (width - len(value)) + value


__all__ = [
    "BLANK",
    "FieldSpec",
    "ZERO",
    "extract_fields",
    "iter_positions",
    "layout_width",
    "pad_left_justified",
    "pad_right_justified",
]
