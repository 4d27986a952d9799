import pytest

from navforge.navmesh import NO_CONNECTION, MeshWorkspace, PolygonNavmesh
from navforge.polygon_ops import NO_INDEX
from navforge.region import RegionId
from navforge.span import AreaType

SQUARE = [(0, 0, 0), (10, 0, 0), (10, 0, 10), (0, 0, 10)]


def _two_triangles(nvp=4):
    return MeshWorkspace(
        max_vertices_per_polygon=nvp,
        vertices=list(SQUARE),
        polygons=[[2, 1, 0], [3, 2, 0]],
        regions=[RegionId(1), RegionId(2)],
        areas=[AreaType.DEFAULT_WALKABLE, AreaType(7)],
    )


def _fan():
    vertices = SQUARE + [(5, 0, 5)]
    polygons = [[0, 1, 4], [1, 2, 4], [2, 3, 4], [3, 0, 4]]
    return MeshWorkspace(max_vertices_per_polygon=6, vertices=vertices, polygons=polygons)


def test_navmesh_constants_match_padding():
    assert PolygonNavmesh.NO_INDEX == 0xFFFF
    assert PolygonNavmesh.NO_CONNECTION == 0xFFFF
    mesh = PolygonNavmesh(
        polygons=[0, 1, 2, PolygonNavmesh.NO_INDEX], max_vertices_per_polygon=4
    )
    assert list(mesh.iter_polygons()) == [(0, 1, 2)]


def test_navmesh_iter_polygons_strips_padding():
    mesh = PolygonNavmesh(polygons=[0, 1, 2, NO_INDEX, 3, 4, 5, 6], max_vertices_per_polygon=4)
    assert mesh.polygon_count() == 2
    assert list(mesh.iter_polygons()) == [(0, 1, 2), (3, 4, 5, 6)]


def test_navmesh_polygon_count_rejects_zero_width():
    mesh = PolygonNavmesh(max_vertices_per_polygon=0)
    with pytest.raises(ValueError):
        mesh.polygon_count()


def test_workspace_pads_polygons():
    ws = _two_triangles(nvp=5)
    assert ws.polygons[0] == [2, 1, 0, NO_INDEX, NO_INDEX]
    assert ws.neighbors == [[NO_CONNECTION] * 5, [NO_CONNECTION] * 5]
    assert len(ws) == 2


def test_workspace_rejects_oversized_polygon():
    with pytest.raises(ValueError):
        MeshWorkspace(max_vertices_per_polygon=3, vertices=list(SQUARE), polygons=[[0, 1, 2, 3]])


def test_build_adjacency_links_shared_edge():
    ws = _two_triangles()
    ws.build_adjacency()
    assert ws.neighbors[0] == [NO_CONNECTION, NO_CONNECTION, 1, NO_CONNECTION]
    assert ws.neighbors[1] == [NO_CONNECTION, 0, NO_CONNECTION, NO_CONNECTION]


def test_build_adjacency_fan_is_symmetric():
    ws = _fan()
    ws.build_adjacency()
    for i, row in enumerate(ws.neighbors):
        linked = [n for n in row if n != NO_CONNECTION]
        assert len(linked) == 2
        for n in linked:
            assert i in ws.neighbors[n]


def test_can_remove_vertex_refuses_lone_tip():
    assert _two_triangles().can_remove_vertex(1) is False


def test_can_remove_vertex_accepts_fan_center():
    assert _fan().can_remove_vertex(4) is True


def test_can_remove_vertex_refuses_corner_of_fan():
    assert _fan().can_remove_vertex(0) is False


def test_to_navmesh_round_trip():
    ws = _two_triangles()
    ws.build_adjacency()
    mesh = ws.to_navmesh()
    assert mesh.polygon_count() == 2
    assert list(mesh.iter_polygons()) == [(2, 1, 0), (3, 2, 0)]
    assert mesh.polygon_neighbors == ws.neighbors[0] + ws.neighbors[1]
    assert mesh.flags == [0, 0]
    assert mesh.regions == [RegionId(1), RegionId(2)]
    assert mesh.areas == [AreaType.DEFAULT_WALKABLE, AreaType(7)]
    assert mesh.vertices == SQUARE
    assert mesh.max_vertices_per_polygon == 4