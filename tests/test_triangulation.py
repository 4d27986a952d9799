import pytest

from navforge.triangulation import (
    InvalidContourError,
    PolygonNavmeshError,
    TooManyPolygonsError,
    TooManyVerticesError,
    triangulate,
)

SQUARE = [(0, 0, 0), (0, 0, 10), (10, 0, 10), (10, 0, 0)]
L_SHAPE = [(0, 0, 0), (0, 0, 20), (10, 0, 20), (10, 0, 10), (20, 0, 10), (20, 0, 0)]
HEXAGON = [(0, 0, 5), (0, 0, 15), (10, 0, 20), (20, 0, 15), (20, 0, 5), (10, 0, 0)]


def _signed_area2(points):
    total = 0
    for (x0, _, z0), (x1, _, z1) in zip(points, points[1:] + points[:1]):
        total += x0 * z1 - x1 * z0
    return total


def _check(vertices):
    triangles = triangulate(vertices)
    assert len(triangles) == len(vertices) - 2
    assert {i for tri in triangles for i in tri} == set(range(len(vertices)))
    tri_areas = [_signed_area2([vertices[i] for i in tri]) for tri in triangles]
    polygon_area = _signed_area2(list(vertices))
    assert all(a * polygon_area > 0 for a in tri_areas)
    assert sum(tri_areas) == polygon_area
    return triangles


def test_triangle_is_returned_unchanged():
    assert triangulate([(0, 0, 0), (0, 0, 4), (4, 0, 0)]) == [(0, 1, 2)]


def test_square():
    _check(SQUARE)


def test_concave_l_shape():
    _check(L_SHAPE)


def test_convex_hexagon():
    _check(HEXAGON)


def test_y_coordinate_is_ignored():
    flat = triangulate(SQUARE)
    raised = triangulate([(x, 7 * i, z) for i, (x, _, z) in enumerate(SQUARE)])
    assert flat == raised


def test_too_few_vertices():
    with pytest.raises(InvalidContourError):
        triangulate([(0, 0, 0), (1, 0, 1)])


def test_error_messages_and_hierarchy():
    err = TooManyVerticesError(actual=70000, max=65535)
    assert str(err) == "Too many vertices: 70000 > 65535"
    assert (err.actual, err.max) == (70000, 65535)
    assert str(TooManyPolygonsError(5, 4)) == "Too many polygons: 5 > 4"
    assert "contour simplification is too aggressive" in str(InvalidContourError())
    for cls in (TooManyVerticesError, TooManyPolygonsError, InvalidContourError):
        assert issubclass(cls, PolygonNavmeshError)