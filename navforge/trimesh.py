"""Triangle meshes used as rasterization input, and their bounding boxes."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Sequence

from navforge.span import AreaType

Vec3 = tuple[float, float, float]
Triangle = tuple[int, int, int]

_U32_MAX = 0xFFFF_FFFF


@dataclass(frozen=True)
class Aabb3d:
    """An axis-aligned bounding box."""

    min: Vec3
    max: Vec3

    @classmethod
    def from_vertices(cls, vertices: Iterable[Sequence[float]]) -> Aabb3d | None:
        """The smallest box holding all vertices, or None when there are none."""
        points = [tuple(float(c) for c in v) for v in vertices]
        if not points:
            return None
        xs, ys, zs = zip(*points)
        return cls((min(xs), min(ys), min(zs)), (max(xs), max(ys), max(zs)))

    def intersects(self, other: Aabb3d) -> bool:
        """Whether the two boxes overlap or touch."""
        return all(
            a_min <= b_max and a_max >= b_min
            for a_min, a_max, b_min, b_max in zip(self.min, self.max, other.min, other.max)
        )


def _triangle_normal(a: Vec3, b: Vec3, c: Vec3) -> Vec3:
    e0 = (b[0] - a[0], b[1] - a[1], b[2] - a[2])
    e1 = (c[0] - a[0], c[1] - a[1], c[2] - a[2])
    n = (
        e0[1] * e1[2] - e0[2] * e1[1],
        e0[2] * e1[0] - e0[0] * e1[2],
        e0[0] * e1[1] - e0[1] * e1[0],
    )
    length = math.sqrt(n[0] ** 2 + n[1] ** 2 + n[2] ** 2)
    if length == 0.0:
        return (0.0, 0.0, 0.0)
    return (n[0] / length, n[1] / length, n[2] / length)


@dataclass
class TriMesh:
    """A triangle list with one area type per triangle."""

    vertices: list[Vec3] = field(default_factory=list)
    indices: list[Triangle] = field(default_factory=list)
    area_types: list[AreaType] = field(default_factory=list)

    def extend(self, other: TriMesh) -> None:
        """Append another mesh, offsetting its indices past this mesh's vertices."""
        if len(self.vertices) > _U32_MAX:
            raise OverflowError("cannot extend a trimesh with more than 2^32 vertices")
        offset = len(self.vertices)
        self.vertices.extend(other.vertices)
        self.indices.extend(tuple(i + offset for i in tri) for tri in other.indices)
        self.area_types.extend(other.area_types)

    def compute_aabb(self) -> Aabb3d | None:
        """The bounding box of the vertices, or None for an empty mesh."""
        return Aabb3d.from_vertices(self.vertices)

    def mark_walkable_triangles(self, threshold_rad: float) -> None:
        """Mark triangles whose normal is within the slope threshold as walkable."""
        threshold_cos = math.cos(threshold_rad)
        for i, (a, b, c) in enumerate(self.indices):
            normal = _triangle_normal(self.vertices[a], self.vertices[b], self.vertices[c])
            if normal[1] > threshold_cos:
                self.area_types[i] = AreaType.DEFAULT_WALKABLE