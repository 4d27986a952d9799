"""Vertex welding and merging of convex polygons stored as padded index lists."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

NO_INDEX = 0xFFFF
VERTEX_BUCKET_COUNT = 1 << 12

# Large multiplicative constants; arbitrarily chosen primes.
_HASH_FACTORS = (0x8DA6B343, 0xD8163841, 0xCB1AB31F)

Vertex = tuple[int, int, int]


@dataclass(frozen=True)
class MergeCandidate:
    """How two polygons can be merged: the shared edge in each and its squared length."""

    length_squared: int
    edge_a: int
    edge_b: int


def vertex_hash(vertex: Sequence[int]) -> int:
    """The spatial hash bucket of an integer vertex."""
    total = sum(factor * int(c) for factor, c in zip(_HASH_FACTORS, vertex)) & 0xFFFF_FFFF
    return total & (VERTEX_BUCKET_COUNT - 1)


class VertexWelder:
    """Collects vertices, merging ones that share x and z and lie within 2 cells in y."""

    def __init__(self) -> None:
        self.vertices: list[Vertex] = []
        self._buckets: dict[int, list[int]] = {}

    def __len__(self) -> int:
        return len(self.vertices)

    def add(self, vertex: Sequence[int]) -> int:
        """Return the index of a matching vertex, adding the vertex if there is none."""
        x, y, z = (int(c) for c in vertex)
        bucket = self._buckets.setdefault(vertex_hash((x, 0, z)), [])
        # Most recently added vertices are searched first.
        for index in reversed(bucket):
            vx, vy, vz = self.vertices[index]
            if vx == x and abs(vy - y) <= 2 and vz == z:
                return index
        index = len(self.vertices)
        self.vertices.append((x, y, z))
        bucket.append(index)
        return index


def count_polygon_vertices(polygon: Sequence[int]) -> int:
    """The number of vertex indices before the first NO_INDEX padding entry."""
    for count, index in enumerate(polygon):
        if index == NO_INDEX:
            return count
    return len(polygon)


def _uleft(a: Sequence[int], b: Sequence[int], c: Sequence[int]) -> bool:
    cross = (b[0] - a[0]) * (c[2] - a[2]) - (c[0] - a[0]) * (b[2] - a[2])
    return cross < 0


def polygon_merge_value(
    pa: Sequence[int], pb: Sequence[int], vertices: Sequence[Sequence[int]]
) -> MergeCandidate | None:
    """Describe how ``pa`` and ``pb`` merge into one convex polygon, or None if they cannot.

    Both polygons are padded to the maximum vertex count per polygon.
    """
    max_vertices = len(pa)
    na = count_polygon_vertices(pa)
    nb = count_polygon_vertices(pb)
    if na + nb - 2 > max_vertices:
        return None

    edge_a: int | None = None
    edge_b: int | None = None
    for i in range(na):
        a_edge = sorted((pa[i], pa[(i + 1) % na]))
        for j in range(nb):
            if a_edge == sorted((pb[j], pb[(j + 1) % nb])):
                edge_a, edge_b = i, j
                break
    if edge_a is None or edge_b is None:
        return None

    # The merged polygon must stay convex at both ends of the shared edge.
    if not _uleft(
        vertices[pa[(edge_a + na - 1) % na]],
        vertices[pa[edge_a]],
        vertices[pb[(edge_b + 2) % nb]],
    ):
        return None
    if not _uleft(
        vertices[pb[(edge_b + nb - 1) % nb]],
        vertices[pb[edge_b]],
        vertices[pa[(edge_a + 2) % na]],
    ):
        return None

    va = vertices[pa[edge_a]]
    vb = vertices[pa[(edge_a + 1) % na]]
    dx = va[0] - vb[0]
    dz = va[2] - vb[2]
    return MergeCandidate(dx * dx + dz * dz, edge_a, edge_b)


def merge_polygons(
    pa: Sequence[int],
    pb: Sequence[int],
    edge_a: int,
    edge_b: int,
    max_vertices_per_polygon: int,
) -> list[int]:
    """Join two polygons along their shared edge, padded with NO_INDEX."""
    na = count_polygon_vertices(pa)
    nb = count_polygon_vertices(pb)
    merged = [pa[(edge_a + 1 + i) % na] for i in range(na - 1)]
    merged.extend(pb[(edge_b + 1 + i) % nb] for i in range(nb - 1))
    if len(merged) > max_vertices_per_polygon:
        raise ValueError(
            f"merged polygon has {len(merged)} vertices, "
            f"more than {max_vertices_per_polygon}"
        )
    return merged + [NO_INDEX] * (max_vertices_per_polygon - len(merged))