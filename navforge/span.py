"""Spans of a heightfield and the area types assigned to them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Hashable

_U8_MAX = 0xFF


class AreaType(int):
    """An 8-bit area identifier; 0 is not walkable, 255 is the default walkable area."""

    NOT_WALKABLE: ClassVar[AreaType]
    DEFAULT_WALKABLE: ClassVar[AreaType]

    def __new__(cls, value: int = 0) -> AreaType:
        value = int(value)
        if not 0 <= value <= _U8_MAX:
            raise ValueError(f"area type {value} does not fit in 8 bits")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"AreaType({int(self)})"

    def is_walkable(self) -> bool:
        """Every area type except NOT_WALKABLE is walkable."""
        return self != AreaType.NOT_WALKABLE


AreaType.NOT_WALKABLE = AreaType(0)
AreaType.DEFAULT_WALKABLE = AreaType(_U8_MAX)


@dataclass
class Span:
    """A solid interval of a heightfield column, linked to the next-higher span."""

    MAX_HEIGHT: ClassVar[int] = 0xFFFF

    min: int
    max: int
    area: AreaType = AreaType.NOT_WALKABLE
    next: Hashable | None = None