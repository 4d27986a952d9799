"""Region identifiers used while partitioning a heightfield."""

from __future__ import annotations

from typing import ClassVar

_U16_MAX = 0xFFFF


class RegionId(int):
    """A 16-bit region identifier whose top bit marks border regions."""

    NONE: ClassVar[RegionId]
    BORDER_REGION: ClassVar[RegionId]
    MAX: ClassVar[RegionId]

    def __new__(cls, value: int = 0) -> RegionId:
        value = int(value)
        if not 0 <= value <= _U16_MAX:
            raise ValueError(f"region id {value} does not fit in 16 bits")
        return super().__new__(cls, value)

    def __repr__(self) -> str:
        return f"RegionId({int(self):#06x})"

    def is_border(self) -> bool:
        """Whether the border bit is set."""
        return bool(int(self) & int(RegionId.BORDER_REGION))

    def __add__(self, other: int) -> RegionId:
        total = int(self) + int(other)
        if total > _U16_MAX:
            raise OverflowError(f"region id overflow: {int(self)} + {int(other)}")
        return RegionId(total)

    def __or__(self, other: int) -> RegionId:
        return RegionId(int(self) | int(other))

    def __and__(self, other: int) -> RegionId:
        return RegionId(int(self) & int(other) & _U16_MAX)


RegionId.NONE = RegionId(0)
RegionId.BORDER_REGION = RegionId(0x8000)
RegionId.MAX = RegionId(_U16_MAX)