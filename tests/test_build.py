import pytest

from navforge.build import (
    BORDER_VERTEX,
    Contour,
    ContourSet,
    ContourVertex,
    build_polygon_mesh,
)
from navforge.navmesh import NO_CONNECTION
from navforge.region import RegionId
from navforge.span import AreaType
from navforge.triangulation import TooManyVerticesError


def _square(x0, z0, size):
    return [
        ContourVertex(x0, 0, z0),
        ContourVertex(x0, 0, z0 + size),
        ContourVertex(x0 + size, 0, z0 + size),
        ContourVertex(x0 + size, 0, z0),
    ]


def _area(points):
    total = 0
    for (x0, _, z0), (x1, _, z1) in zip(points, points[1:] + points[:1]):
        total += x0 * z1 - x1 * z0
    return abs(total) / 2


def _navmesh_area(navmesh):
    return sum(
        _area([navmesh.vertices[i] for i in polygon]) for polygon in navmesh.iter_polygons()
    )


def test_square_contour_becomes_one_quad():
    square = _square(0, 0, 10)
    contours = ContourSet(contours=[Contour(square, RegionId(3), AreaType(8))])
    navmesh = build_polygon_mesh(contours, 6)
    polygons = list(navmesh.iter_polygons())
    assert len(polygons) == 1
    assert {navmesh.vertices[i] for i in polygons[0]} == {(v.x, v.y, v.z) for v in square}
    assert navmesh.regions == [RegionId(3)]
    assert navmesh.areas == [AreaType(8)]
    assert navmesh.flags == [0]
    assert navmesh.polygon_neighbors == [NO_CONNECTION] * 6


def test_triangles_only_cover_contour_area():
    square = _square(0, 0, 10)
    navmesh = build_polygon_mesh(ContourSet(contours=[Contour(square)]), 3)
    assert navmesh.polygon_count() == 2
    assert all(len(p) == 3 for p in navmesh.iter_polygons())
    assert _navmesh_area(navmesh) == _area([(v.x, v.y, v.z) for v in square])


def test_adjacent_contours_share_vertices_and_link():
    contours = ContourSet(
        contours=[
            Contour(_square(0, 0, 10), RegionId(1), AreaType(1)),
            Contour(_square(10, 0, 10), RegionId(2), AreaType(1)),
        ]
    )
    navmesh = build_polygon_mesh(contours, 6)
    assert len(navmesh.vertices) == 6
    assert sorted(navmesh.regions) == [RegionId(1), RegionId(2)]
    assert 1 in navmesh.polygon_neighbors[0:6]
    assert 0 in navmesh.polygon_neighbors[6:12]


def test_method_matches_function():
    contours = ContourSet(contours=[Contour(_square(0, 0, 10), RegionId(1))])
    assert contours.into_polygon_mesh(6) == build_polygon_mesh(contours, 6)


def test_short_contours_are_skipped():
    contours = ContourSet(contours=[Contour([ContourVertex(0, 0, 0), ContourVertex(1, 0, 1)])])
    navmesh = build_polygon_mesh(contours, 6)
    assert navmesh.polygon_count() == 0
    assert navmesh.vertices == []
    assert navmesh.flags == []


def test_border_edges_become_portals():
    contours = ContourSet(
        contours=[Contour(_square(0, 0, 10), RegionId(1))],
        width=10,
        height=10,
        border_size=1,
    )
    navmesh = build_polygon_mesh(contours, 6)
    border = int(RegionId.BORDER_REGION)
    portals = set(navmesh.polygon_neighbors[:4])
    assert portals == {border, border | 1, border | 2, border | 3}


def test_border_vertex_removal_keeps_area_and_indices_valid():
    vertices = [
        ContourVertex(0, 0, 0),
        ContourVertex(0, 0, 5, BORDER_VERTEX),
        ContourVertex(0, 0, 10),
        ContourVertex(10, 0, 10),
        ContourVertex(10, 0, 0),
    ]
    navmesh = build_polygon_mesh(ContourSet(contours=[Contour(vertices, RegionId(2))]), 6)
    for polygon in navmesh.iter_polygons():
        assert all(0 <= i < len(navmesh.vertices) for i in polygon)
    assert _navmesh_area(navmesh) == _area([(v.x, v.y, v.z) for v in vertices])
    assert len(navmesh.flags) == navmesh.polygon_count()


def test_too_many_vertices():
    count = 0x10000
    vertices = [ContourVertex(i % 256, 0, i // 256) for i in range(count)]
    with pytest.raises(TooManyVerticesError) as info:
        build_polygon_mesh(ContourSet(contours=[Contour(vertices)]), 6)
    assert info.value.actual == count
    assert info.value.max == 0xFFFF