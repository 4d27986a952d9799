"""Ear-clipping triangulation of integer contours on the xz-plane."""

from __future__ import annotations

from typing import Sequence

Point = tuple[int, int]


class PolygonNavmeshError(Exception):
    """Base class for errors raised while building a polygon mesh."""


class TooManyVerticesError(PolygonNavmeshError):
    """Raised when the contours hold more vertices than a mesh can index."""

    def __init__(self, actual: int, max: int) -> None:
        super().__init__(f"Too many vertices: {actual} > {max}")
        self.actual = actual
        self.max = max


class TooManyPolygonsError(PolygonNavmeshError):
    """Raised when more polygons are produced than space was reserved for."""

    def __init__(self, actual: int, max: int) -> None:
        super().__init__(f"Too many polygons: {actual} > {max}")
        self.actual = actual
        self.max = max


class InvalidContourError(PolygonNavmeshError):
    """Raised when a contour cannot be triangulated."""

    def __init__(self) -> None:
        super().__init__(
            "Invalid contour. This sometimes happens if the contour simplification "
            "is too aggressive."
        )


def _area2(a: Point, b: Point, c: Point) -> int:
    return (b[0] - a[0]) * (c[1] - a[1]) - (c[0] - a[0]) * (b[1] - a[1])


def _left(a: Point, b: Point, c: Point) -> bool:
    return _area2(a, b, c) < 0


def _left_on(a: Point, b: Point, c: Point) -> bool:
    return _area2(a, b, c) <= 0


def _collinear(a: Point, b: Point, c: Point) -> bool:
    return _area2(a, b, c) == 0


def _between(a: Point, b: Point, c: Point) -> bool:
    if not _collinear(a, b, c):
        return False
    axis = 0 if a[0] != b[0] else 1
    return a[axis] <= c[axis] <= b[axis] or a[axis] >= c[axis] >= b[axis]


def _intersect_prop(a: Point, b: Point, c: Point, d: Point) -> bool:
    if _collinear(a, b, c) or _collinear(a, b, d) or _collinear(c, d, a) or _collinear(c, d, b):
        return False
    return (_left(a, b, c) ^ _left(a, b, d)) and (_left(c, d, a) ^ _left(c, d, b))


def _intersect(a: Point, b: Point, c: Point, d: Point) -> bool:
    if _intersect_prop(a, b, c, d):
        return True
    return _between(a, b, c) or _between(a, b, d) or _between(c, d, a) or _between(c, d, b)


class _Ring:
    """The remaining outline during ear clipping."""

    def __init__(self, points: list[Point]) -> None:
        self.points = points
        self.order = list(range(len(points)))
        self.removable = [False] * len(points)

    def __len__(self) -> int:
        return len(self.order)

    def next(self, i: int) -> int:
        return i + 1 if i + 1 < len(self.order) else 0

    def prev(self, i: int) -> int:
        return i - 1 if i >= 1 else len(self.order) - 1

    def at(self, i: int) -> Point:
        return self.points[self.order[i]]

    def in_cone(self, i: int, j: int, loose: bool) -> bool:
        pi, pj = self.at(i), self.at(j)
        pi1, pin1 = self.at(self.next(i)), self.at(self.prev(i))
        if _left_on(pin1, pi, pi1):
            if loose:
                return _left_on(pi, pj, pin1) and _left_on(pj, pi, pi1)
            return _left(pi, pj, pin1) and _left(pj, pi, pi1)
        return not (_left_on(pi, pj, pi1) and _left_on(pj, pi, pin1))

    def clear_of_edges(self, i: int, j: int, loose: bool) -> bool:
        d0, d1 = self.at(i), self.at(j)
        for k in range(len(self.order)):
            k1 = self.next(k)
            if k in (i, j) or k1 in (i, j):
                continue
            p0, p1 = self.at(k), self.at(k1)
            if d0 == p0 or d1 == p0 or d0 == p1 or d1 == p1:
                continue
            crosses = _intersect_prop(d0, d1, p0, p1) if loose else _intersect(d0, d1, p0, p1)
            if crosses:
                return False
        return True

    def is_diagonal(self, i: int, j: int, loose: bool = False) -> bool:
        return self.in_cone(i, j, loose) and self.clear_of_edges(i, j, loose)

    def length_key(self, a: int, b: int) -> int:
        pa, pb = self.at(a), self.at(b)
        dx, dz = pb[0] - pa[0], pb[1] - pa[1]
        # Lengths are compared as 16-bit values.
        return (dx * dx + dz * dz) & 0xFFFF


def _find_ear(ring: _Ring) -> int | None:
    best_len: int | None = None
    best: int | None = None
    for i in range(len(ring)):
        i1 = ring.next(i)
        if ring.removable[i1]:
            length = ring.length_key(i, ring.next(i1))
            if best_len is None or length < best_len:
                best_len, best = length, i
    if best is not None:
        return best

    # Overlapping contour segments can leave no strict ear; relax the cone test.
    best_len = None
    for i in range(len(ring)):
        i2 = ring.next(ring.next(i))
        if ring.is_diagonal(i, i2, loose=True):
            length = ring.length_key(i, ring.next(i2))
            if best_len is None or length < best_len:
                best_len, best = length, i
    return best


def triangulate(vertices: Sequence[Sequence[int]]) -> list[tuple[int, int, int]]:
    """Triangulate a contour given as (x, y, z) points, returning index triples."""
    points = [(int(v[0]), int(v[2])) for v in vertices]
    if len(points) < 3:
        raise InvalidContourError()

    ring = _Ring(points)
    for i in range(len(ring)):
        i1 = ring.next(i)
        if ring.is_diagonal(i, ring.next(i1)):
            ring.removable[i1] = True

    triangles: list[tuple[int, int, int]] = []
    while len(ring) > 3:
        ear = _find_ear(ring)
        if ear is None:
            raise InvalidContourError()

        i1 = ring.next(ear)
        i2 = ring.next(i1)
        triangles.append((ring.order[ear], ring.order[i1], ring.order[i2]))

        del ring.order[i1]
        del ring.removable[i1]
        if i1 >= len(ring):
            i1 = 0
        i = ring.prev(i1)
        ring.removable[i] = ring.is_diagonal(ring.prev(i), i1)
        ring.removable[i1] = ring.is_diagonal(i, ring.next(i1))

    triangles.append((ring.order[0], ring.order[1], ring.order[2]))
    return triangles