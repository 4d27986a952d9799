"""Rasterization of triangles into heightfield column spans."""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Sequence

from navforge.span import AreaType, Span
from navforge.trimesh import Aabb3d, TriMesh, Vec3

MAX_DIVIDE_VERTICES = 12


class RasterizationError(Exception):
    """Raised when a triangle cannot be rasterized."""


class PolygonDivisionError(RasterizationError):
    """Raised when a polygon cannot be split across an axis."""


class DivisionAxis(Enum):
    """The coordinate a polygon is split along."""

    X = 0
    Z = 2


@dataclass(frozen=True)
class SpanSample:
    """A span produced for one grid cell by a rasterized triangle."""

    x: int
    z: int
    min: int
    max: int
    area: AreaType


def _lerp(a: Vec3, b: Vec3, s: float) -> Vec3:
    return (
        a[0] + (b[0] - a[0]) * s,
        a[1] + (b[1] - a[1]) * s,
        a[2] + (b[2] - a[2]) * s,
    )


def divide_polygon(
    vertices: Sequence[Vec3], axis_offset: float, axis: DivisionAxis
) -> tuple[list[Vec3], list[Vec3]]:
    """Split a convex polygon at ``axis_offset``.

    Returns the part at or below the offset and the part at or above it.
    """
    verts = [tuple(v) for v in vertices]
    if len(verts) > MAX_DIVIDE_VERTICES:
        raise PolygonDivisionError(
            "Failed to divide polygon: too many vertices. "
            f"Expected at most {MAX_DIVIDE_VERTICES}, got {len(verts)}."
        )
    if not verts:
        return [], []

    deltas = [axis_offset - v[axis.value] for v in verts]
    below: list[Vec3] = []
    above: list[Vec3] = []
    prev_vertex, prev_delta = verts[-1], deltas[-1]
    for vertex, delta in zip(verts, deltas):
        if (delta >= 0.0) != (prev_delta >= 0.0):
            s = prev_delta / (prev_delta - delta)
            crossing = _lerp(prev_vertex, vertex, s)
            below.append(crossing)
            above.append(crossing)
            # Points on the dividing line were already added as the crossing.
            if delta > 0.0:
                below.append(vertex)
            elif delta < 0.0:
                above.append(vertex)
        elif delta >= 0.0:
            below.append(vertex)
            if delta == 0.0:
                above.append(vertex)
        else:
            above.append(vertex)
        prev_vertex, prev_delta = vertex, delta
    return below, above


def _clamp(value: int, low: int, high: int) -> int:
    return min(max(value, low), high)


def rasterize_triangle(
    triangle: Sequence[Vec3],
    area: AreaType,
    bounds: Aabb3d,
    width: int,
    height: int,
    cell_size: float,
    cell_height: float,
) -> list[SpanSample]:
    """Clip a triangle against the grid and return one span per touched cell."""
    triangle_box = Aabb3d.from_vertices(triangle)
    if triangle_box is None or not bounds.intersects(triangle_box):
        return []

    inverse_cell_size = 1.0 / cell_size
    inverse_cell_height = 1.0 / cell_height
    bounds_height = bounds.max[1] - bounds.min[1]

    # Start at -1 so the polygon is cut properly at the start of the tile.
    z0 = _clamp(int((triangle_box.min[2] - bounds.min[2]) * inverse_cell_size), -1, height - 1)
    z1 = _clamp(int((triangle_box.max[2] - bounds.min[2]) * inverse_cell_size), 0, height - 1)

    samples: list[SpanSample] = []
    remaining = [tuple(v) for v in triangle]
    for z in range(z0, z1 + 1):
        cell_z = bounds.min[2] + z * cell_size
        row, remaining = divide_polygon(remaining, cell_z + cell_size, DivisionAxis.Z)
        if len(row) < 3 or z < 0:
            continue

        min_x = min(v[0] for v in row)
        max_x = max(v[0] for v in row)
        x0 = int((min_x - bounds.min[0]) * inverse_cell_size)
        x1 = int((max_x - bounds.min[0]) * inverse_cell_size)
        if x1 < 0 or x0 >= width:
            continue
        x0 = _clamp(x0, -1, width - 1)
        x1 = _clamp(x1, 0, width - 1)

        row_rest = row
        for x in range(x0, x1 + 1):
            cell_x = bounds.min[0] + x * cell_size
            cell, row_rest = divide_polygon(row_rest, cell_x + cell_size, DivisionAxis.X)
            if len(cell) < 3 or x < 0:
                continue

            ys = [v[1] for v in cell]
            span_min = min(ys) - bounds.min[1]
            span_max = max(ys) - bounds.min[1]
            if span_max < 0.0 or span_min > bounds_height:
                continue
            span_min = max(span_min, 0.0)
            span_max = min(span_max, bounds_height)

            min_index = _clamp(math.floor(span_min * inverse_cell_height), 0, Span.MAX_HEIGHT)
            max_index = _clamp(
                math.ceil(span_max * inverse_cell_height), min_index + 1, Span.MAX_HEIGHT
            )
            samples.append(SpanSample(x, z, min_index, max_index, area))
    return samples


def rasterize_triangles(
    trimesh: TriMesh,
    bounds: Aabb3d,
    width: int,
    height: int,
    cell_size: float,
    cell_height: float,
) -> list[SpanSample]:
    """Rasterize every triangle of a mesh, in order."""
    samples: list[SpanSample] = []
    for (a, b, c), area in zip(trimesh.indices, trimesh.area_types, strict=True):
        triangle = (trimesh.vertices[a], trimesh.vertices[b], trimesh.vertices[c])
        samples.extend(
            rasterize_triangle(triangle, area, bounds, width, height, cell_size, cell_height)
        )
    return samples