"""Polygon navigation meshes and the working state used while building them."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Iterator

from navforge.polygon_ops import NO_INDEX, count_polygon_vertices
from navforge.region import RegionId
from navforge.span import AreaType
from navforge.trimesh import Aabb3d

NO_CONNECTION = 0xFFFF

Vertex = tuple[int, int, int]


def _empty_aabb() -> Aabb3d:
    return Aabb3d((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))


@dataclass
class PolygonNavmesh:
    """A mesh of convex polygons laid out on a grid inside ``aabb``.

    ``polygons`` and ``polygon_neighbors`` hold ``max_vertices_per_polygon`` entries
    per polygon; NO_INDEX ends a polygon early and NO_CONNECTION marks a solid edge.
    """

    NO_INDEX: ClassVar[int] = NO_INDEX
    NO_CONNECTION: ClassVar[int] = NO_CONNECTION

    vertices: list[Vertex] = field(default_factory=list)
    polygons: list[int] = field(default_factory=list)
    polygon_neighbors: list[int] = field(default_factory=list)
    flags: list[int] = field(default_factory=list)
    regions: list[RegionId] = field(default_factory=list)
    areas: list[AreaType] = field(default_factory=list)
    max_vertices_per_polygon: int = 6
    aabb: Aabb3d = field(default_factory=_empty_aabb)
    cell_size: float = 0.0
    cell_height: float = 0.0
    border_size: int = 0
    max_edge_error: float = 0.0

    def polygon_count(self) -> int:
        """The number of polygons, not the length of ``polygons``."""
        if self.max_vertices_per_polygon <= 0:
            raise ValueError("max_vertices_per_polygon must be positive")
        return len(self.polygons) // self.max_vertices_per_polygon

    def iter_polygons(self) -> Iterator[tuple[int, ...]]:
        """Yield each polygon's vertex indices without padding."""
        nvp = self.max_vertices_per_polygon
        for start in range(0, self.polygon_count() * nvp, nvp):
            chunk = self.polygons[start : start + nvp]
            yield tuple(chunk[: count_polygon_vertices(chunk)])


@dataclass
class MeshWorkspace:
    """Mutable polygon mesh with one padded row of vertices and neighbours per polygon."""

    max_vertices_per_polygon: int
    vertices: list[Vertex] = field(default_factory=list)
    polygons: list[list[int]] = field(default_factory=list)
    neighbors: list[list[int]] = field(default_factory=list)
    regions: list[RegionId] = field(default_factory=list)
    areas: list[AreaType] = field(default_factory=list)
    aabb: Aabb3d = field(default_factory=_empty_aabb)
    cell_size: float = 0.0
    cell_height: float = 0.0
    border_size: int = 0
    max_edge_error: float = 0.0

    def __post_init__(self) -> None:
        nvp = self.max_vertices_per_polygon
        if nvp < 3:
            raise ValueError("a polygon needs at least 3 vertices")
        padded = []
        for polygon in self.polygons:
            row = list(polygon)
            if len(row) > nvp:
                raise ValueError(f"polygon {row} has more than {nvp} entries")
            padded.append(row + [NO_INDEX] * (nvp - len(row)))
        self.polygons = padded
        count = len(self.polygons)
        if not self.neighbors:
            self.neighbors = [[NO_CONNECTION] * nvp for _ in range(count)]
        if not self.regions:
            self.regions = [RegionId.NONE] * count
        if not self.areas:
            self.areas = [AreaType.NOT_WALKABLE] * count
        if not len(self.neighbors) == len(self.regions) == len(self.areas) == count:
            raise ValueError("neighbors, regions and areas need one entry per polygon")

    def __len__(self) -> int:
        return len(self.polygons)

    def build_adjacency(self) -> None:
        """Record, for every edge shared by two polygons, the polygon across it."""
        edges: list[list[int]] = []  # [v0, v1, poly0, edge0, poly1, edge1]
        by_start: dict[int, list[int]] = {}
        for i, polygon in enumerate(self.polygons):
            nv = count_polygon_vertices(polygon)
            for j in range(nv):
                v0 = polygon[j]
                v1 = polygon[j + 1] if j + 1 < nv else polygon[0]
                if v0 < v1:
                    by_start.setdefault(v0, []).append(len(edges))
                    edges.append([v0, v1, i, j, i, 0])

        for i, polygon in enumerate(self.polygons):
            nv = count_polygon_vertices(polygon)
            for j in range(nv):
                v0 = polygon[j]
                v1 = polygon[j + 1] if j + 1 < nv else polygon[0]
                if v0 <= v1:
                    continue
                # Later edges are found first.
                for e in reversed(by_start.get(v1, [])):
                    edge = edges[e]
                    if edge[1] == v0 and edge[2] == edge[4]:
                        edge[4] = i
                        edge[5] = j
                        break

        for _v0, _v1, poly0, edge0, poly1, edge1 in edges:
            if poly0 != poly1:
                self.neighbors[poly0][edge0] = poly1
                self.neighbors[poly1][edge1] = poly0

    def can_remove_vertex(self, rem: int) -> bool:
        """Whether removing vertex ``rem`` leaves a hole that can be re-triangulated."""
        remaining_edges = 0
        for polygon in self.polygons:
            nv = count_polygon_vertices(polygon)
            removed = polygon[:nv].count(rem)
            if removed:
                remaining_edges += nv - (removed + 1)

        # Too few edges would remain to form a polygon, e.g. the tip of a lone triangle.
        if remaining_edges <= 2:
            return False

        # Each entry: [vertex rem, other vertex, share count].
        edges: list[list[int]] = []
        for polygon in self.polygons:
            nv = count_polygon_vertices(polygon)
            for j in range(nv):
                a, b = polygon[j], polygon[j - 1 if j else nv - 1]
                if rem not in (a, b):
                    continue
                if b == rem:
                    a, b = b, a
                exists = False
                for edge in edges:
                    if edge[1] == b:
                        edge[2] += 1
                        exists = True
                if not exists:
                    edges.append([a, b, 1])

        # More than two open edges means non-adjacent polygons share the vertex.
        open_edges = sum(1 for edge in edges if edge[2] < 2)
        return open_edges <= 2

    def to_navmesh(self) -> PolygonNavmesh:
        """Flatten into a PolygonNavmesh with all polygon flags cleared."""
        return PolygonNavmesh(
            vertices=list(self.vertices),
            polygons=[index for polygon in self.polygons for index in polygon],
            polygon_neighbors=[n for row in self.neighbors for n in row],
            flags=[0] * len(self.polygons),
            regions=list(self.regions),
            areas=list(self.areas),
            max_vertices_per_polygon=self.max_vertices_per_polygon,
            aabb=self.aabb,
            cell_size=self.cell_size,
            cell_height=self.cell_height,
            border_size=self.border_size,
            max_edge_error=self.max_edge_error,
        )