"""Filters that adjust span walkability after rasterization."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator

from navforge.span import AreaType, Span

MAX_HEIGHTFIELD_HEIGHT = 0xFFFF

# Neighbour offsets (dx, dz) in direction order.
_DIRECTIONS = ((-1, 0), (0, 1), (1, 0), (0, -1))


@dataclass
class SpanGrid:
    """A width x height grid of columns; each column lists its spans bottom to top."""

    width: int
    height: int
    columns: list[list[Span]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.width < 0 or self.height < 0:
            raise ValueError("grid dimensions must not be negative")
        cell_count = self.width * self.height
        if not self.columns:
            self.columns = [[] for _ in range(cell_count)]
        elif len(self.columns) != cell_count:
            raise ValueError(
                f"expected {cell_count} columns for a {self.width}x{self.height} grid, "
                f"got {len(self.columns)}"
            )

    def contains(self, x: int, z: int) -> bool:
        """Whether the cell lies inside the grid."""
        return 0 <= x < self.width and 0 <= z < self.height

    def column(self, x: int, z: int) -> list[Span]:
        """The spans of a cell, lowest first."""
        if not self.contains(x, z):
            raise IndexError(f"cell ({x}, {z}) is outside the {self.width}x{self.height} grid")
        return self.columns[x + z * self.width]

    def cells(self) -> Iterator[tuple[int, int, list[Span]]]:
        """Every cell as (x, z, spans), row by row."""
        for z in range(self.height):
            for x in range(self.width):
                yield x, z, self.columns[x + z * self.width]


def _with_ceilings(column: list[Span]) -> Iterator[tuple[Span, int]]:
    """Pair each span with the floor of the span above it, or the maximum height."""
    for index, span in enumerate(column):
        above = column[index + 1] if index + 1 < len(column) else None
        yield span, above.min if above is not None else MAX_HEIGHTFIELD_HEIGHT


def filter_low_hanging_walkable_obstacles(grid: SpanGrid, walkable_climb: int) -> None:
    """Make non-walkable spans walkable when they sit low enough above a walkable span."""
    for _x, _z, column in grid.cells():
        previous_max: int | None = None
        previous_was_walkable = False
        previous_area = AreaType.NOT_WALKABLE
        for span in column:
            walkable = span.area.is_walkable()
            if (
                previous_max is not None
                and not walkable
                and previous_was_walkable
                and span.max - previous_max <= walkable_climb
            ):
                span.area = previous_area
            # Keep the original walkability so a run of obstacles is not promoted.
            previous_was_walkable = walkable
            previous_area = span.area
            previous_max = span.max


def _is_ledge(
    grid: SpanGrid,
    x: int,
    z: int,
    floor: int,
    ceiling: int,
    walkable_height: int,
    walkable_climb: int,
) -> bool:
    lowest_difference = MAX_HEIGHTFIELD_HEIGHT
    lowest_traversable = floor
    highest_traversable = floor

    for dx, dz in _DIRECTIONS:
        nx, nz = x + dx, z + dz
        if not grid.contains(nx, nz):
            lowest_difference = -walkable_climb - 1
            break
        neighbor_column = grid.column(nx, nz)

        neighbor_ceiling = neighbor_column[0].min if neighbor_column else MAX_HEIGHTFIELD_HEIGHT
        # The space below the neighbour column is a drop the agent could fall into.
        if min(ceiling, neighbor_ceiling) - floor >= walkable_height:
            lowest_difference = -walkable_climb - 1
            break

        for neighbor, neighbor_ceiling in _with_ceilings(neighbor_column):
            neighbor_floor = neighbor.max
            if min(ceiling, neighbor_ceiling) - max(floor, neighbor_floor) < walkable_height:
                continue
            difference = neighbor_floor - floor
            lowest_difference = min(lowest_difference, difference)
            if abs(difference) <= walkable_climb:
                lowest_traversable = min(lowest_traversable, neighbor_floor)
                highest_traversable = max(highest_traversable, neighbor_floor)
            elif difference < -walkable_climb:
                break

    if lowest_difference < -walkable_climb:
        return True
    return highest_traversable - lowest_traversable > walkable_climb


def filter_ledge_spans(grid: SpanGrid, walkable_height: int, walkable_climb: int) -> None:
    """Mark walkable spans next to a ledge or on a too-steep slope as not walkable."""
    for x, z, column in grid.cells():
        for span, ceiling in _with_ceilings(column):
            if not span.area.is_walkable():
                continue
            if _is_ledge(grid, x, z, span.max, ceiling, walkable_height, walkable_climb):
                span.area = AreaType.NOT_WALKABLE


def filter_walkable_low_height_spans(grid: SpanGrid, walkable_height: int) -> None:
    """Mark spans without enough headroom for the agent as not walkable."""
    for _x, _z, column in grid.cells():
        for span, ceiling in _with_ceilings(column):
            if ceiling - span.max < walkable_height:
                span.area = AreaType.NOT_WALKABLE