"""Removal of a vertex from a polygon mesh, re-triangulating the hole it leaves."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from itertools import combinations
from typing import Sequence

from navforge.navmesh import NO_CONNECTION, MeshWorkspace
from navforge.polygon_ops import (
    NO_INDEX,
    count_polygon_vertices,
    merge_polygons,
    polygon_merge_value,
)
from navforge.region import RegionId
from navforge.span import AreaType
from navforge.triangulation import triangulate


@dataclass(frozen=True)
class _HoleEdge:
    start: int
    end: int
    region: RegionId
    area: AreaType

    def shifted(self, removed: int) -> _HoleEdge:
        return _HoleEdge(
            self.start - (self.start > removed),
            self.end - (self.end > removed),
            self.region,
            self.area,
        )


def _drop_polygon(mesh: MeshWorkspace, index: int) -> None:
    """Remove a polygon by moving the last polygon into its slot."""
    last = len(mesh.polygons) - 1
    if index != last:
        mesh.polygons[index] = mesh.polygons[last]
        mesh.regions[index] = mesh.regions[last]
        mesh.areas[index] = mesh.areas[last]
        mesh.neighbors[index] = [NO_CONNECTION] * mesh.max_vertices_per_polygon
    mesh.polygons.pop()
    mesh.regions.pop()
    mesh.areas.pop()
    mesh.neighbors.pop()


def _trace_hole(
    edges: list[_HoleEdge],
) -> tuple[list[int], list[RegionId], list[AreaType]]:
    """Chain the boundary edges into the outline of the hole."""
    first = edges[0]
    hole = deque([first.start])
    regions = deque([first.region])
    areas = deque([first.area])

    pending = list(edges)
    while pending:
        matched = False
        i = 0
        while i < len(pending):
            edge = pending[i]
            if hole[0] == edge.end:
                # The segment matches the beginning of the hole boundary.
                hole.appendleft(edge.start)
                regions.appendleft(edge.region)
                areas.appendleft(edge.area)
            elif hole[-1] == edge.start:
                # The segment matches the end of the hole boundary.
                hole.append(edge.end)
                regions.append(edge.region)
                areas.append(edge.area)
            else:
                i += 1
                continue
            pending[i] = pending[-1]
            pending.pop()
            matched = True
        if not matched:
            break
    return list(hole), list(regions), list(areas)


def _merge_hole_polygons(
    polys: list[list[int]],
    regions: list[RegionId],
    areas: list[AreaType],
    vertices: Sequence[Sequence[int]],
    nvp: int,
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
        if regions[a] != regions[b]:
            regions[a] = RegionId.NONE
        polys[b] = polys[-1]
        regions[b] = regions[-1]
        areas[b] = areas[-1]
        polys.pop()
        regions.pop()
        areas.pop()


def remove_vertex(mesh: MeshWorkspace, rem: int, max_polygons: int) -> None:
    """Remove vertex ``rem`` and every polygon touching it, then fill the hole.

    New polygons are added only while the mesh holds fewer than ``max_polygons``.
    """
    if not 0 <= rem < len(mesh.vertices):
        raise IndexError(f"vertex {rem} is not in the mesh")
    nvp = mesh.max_vertices_per_polygon

    edges: list[_HoleEdge] = []
    i = 0
    while i < len(mesh.polygons):
        polygon = mesh.polygons[i]
        nv = count_polygon_vertices(polygon)
        if rem not in polygon[:nv]:
            i += 1
            continue
        # Collect edges which do not touch the removed vertex.
        for j in range(nv):
            k = j - 1 if j else nv - 1
            if polygon[j] != rem and polygon[k] != rem:
                edges.append(_HoleEdge(polygon[k], polygon[j], mesh.regions[i], mesh.areas[i]))
        _drop_polygon(mesh, i)

    del mesh.vertices[rem]
    for polygon in mesh.polygons:
        for j in range(count_polygon_vertices(polygon)):
            if polygon[j] > rem:
                polygon[j] -= 1
    edges = [edge.shifted(rem) for edge in edges]

    if not edges:
        return

    hole, hole_regions, hole_areas = _trace_hole(edges)
    triangles = triangulate([mesh.vertices[v] for v in hole])

    polys: list[list[int]] = []
    poly_regions: list[RegionId] = []
    poly_areas: list[AreaType] = []
    padding = [NO_INDEX] * (nvp - 3)
    for a, b, c in triangles:
        if a == b or a == c or b == c:
            continue
        polys.append([hole[a], hole[b], hole[c], *padding])
        # A polygon spanning several regions belongs to none of them.
        if hole_regions[a] != hole_regions[b] or hole_regions[b] != hole_regions[c]:
            poly_regions.append(RegionId.NONE)
        else:
            poly_regions.append(hole_regions[a])
        poly_areas.append(hole_areas[a])

    if not polys:
        return
    if nvp > 3:
        _merge_hole_polygons(polys, poly_regions, poly_areas, mesh.vertices, nvp)

    for polygon, region, area in zip(polys, poly_regions, poly_areas):
        if len(mesh.polygons) >= max_polygons:
            break
        mesh.polygons.append(polygon)
        mesh.neighbors.append([NO_CONNECTION] * nvp)
        mesh.regions.append(region)
        mesh.areas.append(area)