"""Building a polygon navigation mesh from a set of region contours."""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import combinations

from navforge.navmesh import NO_CONNECTION, MeshWorkspace, PolygonNavmesh
from navforge.polygon_ops import (
    NO_INDEX,
    VertexWelder,
    merge_polygons,
    polygon_merge_value,
)
from navforge.region import RegionId
from navforge.span import AreaType
from navforge.triangulation import TooManyPolygonsError, TooManyVerticesError, triangulate
from navforge.trimesh import Aabb3d
from navforge.vertex_removal import remove_vertex

BORDER_VERTEX = 0x10000
MAX_MESH_VERTICES = 0xFFFF


def _empty_aabb() -> Aabb3d:
    return Aabb3d((0.0, 0.0, 0.0), (0.0, 0.0, 0.0))


@dataclass(frozen=True)
class ContourVertex:
    """A contour vertex in grid coordinates with its vertex flags."""

    x: int
    y: int
    z: int
    flags: int = 0


@dataclass
class Contour:
    """The simplified outline of one region."""

    vertices: list[ContourVertex] = field(default_factory=list)
    region: RegionId = RegionId.NONE
    area: AreaType = AreaType.NOT_WALKABLE


@dataclass
class ContourSet:
    """All contours of a compact heightfield and the grid they live on."""

    contours: list[Contour] = field(default_factory=list)
    aabb: Aabb3d = field(default_factory=_empty_aabb)
    cell_size: float = 0.0
    cell_height: float = 0.0
    width: int = 0
    height: int = 0
    border_size: int = 0
    max_error: float = 0.0

    def into_polygon_mesh(self, max_vertices_per_polygon: int) -> PolygonNavmesh:
        """Build a polygon mesh from these contours."""
        return build_polygon_mesh(self, max_vertices_per_polygon)


def _merge_contour_polygons(
    polys: list[list[int]], vertices: list[tuple[int, int, int]], nvp: int
) -> None:
    while True:
        best_value = 0
        best = None
        for a, b in combinations(range(len(polys)), 2):
            candidate = polygon_merge_value(polys[a], polys[b], vertices)
            if candidate is not None and candidate.length_squared > best_value:
                best_value = candidate.length_squared
                best = (a, b, candidate)
        if best is None:
            return
        a, b, candidate = best
        polys[a] = merge_polygons(polys[a], polys[b], candidate.edge_a, candidate.edge_b, nvp)
        polys[b] = polys[-1]
        polys.pop()


def _mark_portal_edges(mesh: MeshWorkspace, width: int, height: int) -> None:
    nvp = mesh.max_vertices_per_polygon
    border = int(RegionId.BORDER_REGION)
    for polygon, neighbors in zip(mesh.polygons, mesh.neighbors):
        for j in range(nvp):
            if polygon[j] == NO_INDEX:
                break
            if neighbors[j] != NO_CONNECTION:
                continue
            nj = j + 1
            if nj >= nvp or polygon[nj] == NO_INDEX:
                nj = 0
            va = mesh.vertices[polygon[j]]
            vb = mesh.vertices[polygon[nj]]
            if va[0] == 0 and vb[0] == 0:
                neighbors[j] = border
            elif va[2] == height and vb[2] == height:
                neighbors[j] = border | 1
            elif va[0] == width and vb[0] == width:
                neighbors[j] = border | 2
            elif va[2] == 0 and vb[2] == 0:
                neighbors[j] = border | 3


def build_polygon_mesh(contour_set: ContourSet, max_vertices_per_polygon: int) -> PolygonNavmesh:
    """Triangulate every contour, merge into convex polygons and link neighbours."""
    nvp = max_vertices_per_polygon
    usable = [c for c in contour_set.contours if len(c.vertices) >= 3]
    max_vertices = sum(len(c.vertices) for c in usable)
    max_tris = sum(len(c.vertices) - 2 for c in usable)
    if max_vertices > MAX_MESH_VERTICES:
        raise TooManyVerticesError(max_vertices, MAX_MESH_VERTICES)

    mesh = MeshWorkspace(
        max_vertices_per_polygon=nvp,
        aabb=contour_set.aabb,
        cell_size=contour_set.cell_size,
        cell_height=contour_set.cell_height,
        border_size=contour_set.border_size,
        max_edge_error=contour_set.max_error,
    )
    welder = VertexWelder()
    removable: list[bool] = []
    padding = [NO_INDEX] * (nvp - 3)

    for contour in usable:
        triangles = triangulate([(v.x, v.y, v.z) for v in contour.vertices])
        indices = []
        for vertex in contour.vertices:
            index = welder.add((vertex.x, vertex.y, vertex.z))
            if index == len(removable):
                removable.append(False)
            if vertex.flags & BORDER_VERTEX:
                removable[index] = True
            indices.append(index)

        polys = [
            [indices[a], indices[b], indices[c], *padding]
            for a, b, c in triangles
            if a != b and a != c and b != c
        ]
        if not polys:
            continue
        if nvp > 3:
            _merge_contour_polygons(polys, welder.vertices, nvp)

        for polygon in polys:
            mesh.polygons.append(polygon)
            mesh.neighbors.append([NO_CONNECTION] * nvp)
            mesh.regions.append(contour.region)
            mesh.areas.append(contour.area)
            if len(mesh.polygons) > max_tris:
                raise TooManyPolygonsError(len(mesh.polygons), max_tris)

    mesh.vertices = list(welder.vertices)

    # Remove vertices that lie on the tile border.
    i = 0
    while i < len(mesh.vertices):
        if removable[i] and mesh.can_remove_vertex(i):
            remove_vertex(mesh, i, max_tris)
            del removable[i]
        else:
            i += 1

    mesh.build_adjacency()
    if contour_set.border_size > 0:
        _mark_portal_edges(mesh, contour_set.width, contour_set.height)
    return mesh.to_navmesh()