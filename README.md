# navforge

Building blocks for generating navigation meshes from triangle geometry,
written in plain Python with no third-party dependencies.

The package covers four stages:

- marking walkable triangles in a triangle mesh
- clipping triangles into per-cell height spans
- filtering spans for walkability
- turning region contours into a mesh of convex polygons with neighbour links

## Installation

```
pip install navforge
```

## Modules

### `navforge.trimesh`

- `TriMesh(vertices, indices, area_types)` is a triangle list with one
  `AreaType` per triangle.
- `TriMesh.extend(other)` appends another mesh and offsets its indices past
  the existing vertices.
- `TriMesh.compute_aabb()` returns an `Aabb3d`, or `None` for an empty mesh.
- `TriMesh.mark_walkable_triangles(threshold_rad)` sets
  `AreaType.DEFAULT_WALKABLE` on every triangle whose unit normal has a y
  component greater than `cos(threshold_rad)`. Other triangles keep the area
  they had.
- `Aabb3d.from_vertices(vertices)` returns the bounding box of the points, or
  `None` when there are none. `Aabb3d.intersects(other)` is true when the two
  boxes overlap or touch.

### `navforge.rasterize`

- `rasterize_triangle(triangle, area, bounds, width, height, cell_size, cell_height)`
  clips one triangle against a `width` x `height` grid laid out from
  `bounds.min`. It returns a list of `SpanSample(x, z, min, max, area)`, one
  for each cell the triangle covers. `min` and `max` are heights in units of
  `cell_height`, clamped to the bounds. A triangle outside `bounds` gives an
  empty list.
- `rasterize_triangles(trimesh, bounds, width, height, cell_size, cell_height)`
  does the same for every triangle of a `TriMesh`, in order.
- `divide_polygon(vertices, axis_offset, axis)` splits a convex polygon along
  `DivisionAxis.X` or `DivisionAxis.Z`. It returns the part at or below the
  offset and the part at or above it. A polygon with more than 12 vertices
  raises `PolygonDivisionError`.

### `navforge.pre_filter`

`SpanGrid(width, height, columns)` holds one list of `Span` objects per cell,
lowest first. Use `SpanGrid.column(x, z)` to get a cell's spans,
`SpanGrid.contains(x, z)` to test whether a cell is in the grid, and
`SpanGrid.cells()` to iterate over all cells. The filters change `Span.area`
in place:

- `filter_low_hanging_walkable_obstacles(grid, walkable_climb)` makes a
  non-walkable span walkable when it lies directly above a walkable span and
  at most `walkable_climb` higher. The span takes the area of the span below.
- `filter_ledge_spans(grid, walkable_height, walkable_climb)` marks a walkable
  span as not walkable when it borders a drop larger than `walkable_climb`,
  when it is at the edge of the grid, or when its reachable neighbours differ
  in height by more than `walkable_climb`.
- `filter_walkable_low_height_spans(grid, walkable_height)` marks a span as not
  walkable when the gap to the span above it is less than `walkable_height`.

### `navforge.build`

- `ContourSet` holds `Contour` objects together with the grid description:
  `aabb`, `cell_size`, `cell_height`, `width`, `height`, `border_size` and
  `max_error`.
- Each `Contour` is a list of `ContourVertex(x, y, z, flags)` plus a `region`
  and an `area`.
- `ContourSet.into_polygon_mesh(max_vertices_per_polygon)`, or
  `build_polygon_mesh(contour_set, max_vertices_per_polygon)`, builds the
  mesh in these steps:
  1. Contours with fewer than three vertices are skipped. Each remaining
     contour is triangulated.
  2. Vertices that share x and z and lie within 2 cells of each other in y are
     welded into one.
  3. Triangles are merged greedily into convex polygons of up to
     `max_vertices_per_polygon` vertices.
  4. Vertices flagged with `BORDER_VERTEX` are removed where
     `MeshWorkspace.can_remove_vertex` allows it.
  5. Adjacency between polygons is computed.
  6. When `border_size > 0`, unconnected edges that lie on the grid edges are
     marked as portals with `RegionId.BORDER_REGION | 0..3`.

### `navforge.navmesh`

`PolygonNavmesh` is the finished mesh. Its fields are:

- `vertices`: integer grid coordinates
- `polygons` and `polygon_neighbors`: `max_vertices_per_polygon` entries per
  polygon
- `flags`: one per polygon, all 0 after building
- `regions` and `areas`: one per polygon
- `aabb`, `cell_size`, `cell_height`, `border_size` and `max_edge_error`

In `polygons`, unused slots hold `PolygonNavmesh.NO_INDEX`. In
`polygon_neighbors`, solid edges hold `PolygonNavmesh.NO_CONNECTION`.

```python
mesh = contour_set.into_polygon_mesh(6)

for polygon in mesh.iter_polygons():
    for vertex_index in polygon:
        v = mesh.vertices[vertex_index]
        world = (
            mesh.aabb.min[0] + v[0] * mesh.cell_size,
            mesh.aabb.min[1] + v[1] * mesh.cell_height,
            mesh.aabb.min[2] + v[2] * mesh.cell_size,
        )
```

`MeshWorkspace` is the mutable form used during building. It keeps one
padded row per polygon and provides `build_adjacency()`,
`can_remove_vertex(rem)` and `to_navmesh()`.

### Lower-level helpers

- `navforge.triangulation.triangulate(vertices)` ear-clips a contour given as
  `(x, y, z)` points on the xz-plane. It returns index triples.
- `navforge.polygon_ops` provides:
  - `VertexWelder` and `vertex_hash`
  - `count_polygon_vertices`
  - `polygon_merge_value`, which returns a `MergeCandidate` or `None`
  - `merge_polygons`
- `navforge.vertex_removal.remove_vertex(mesh, rem, max_polygons)` deletes a
  vertex and the polygons that touch it from a `MeshWorkspace`. It then
  re-triangulates and merges the hole.

### Identifiers

- `navforge.region.RegionId` is a 16-bit int. It has the constants `NONE`,
  `BORDER_REGION` and `MAX`, and `is_border()` tests the high bit. Adding past
  `0xFFFF` raises `OverflowError`.
- `navforge.span.AreaType` is an 8-bit int. `NOT_WALKABLE` (0) is the only
  area for which `is_walkable()` is false. `DEFAULT_WALKABLE` is 255.

## Errors

Rasterization raises `RasterizationError` and its subclass
`PolygonDivisionError`.

Mesh building raises `PolygonNavmeshError`, or one of its subclasses:

- `TooManyVerticesError`, when there are more than 65535 contour vertices
- `TooManyPolygonsError`
- `InvalidContourError`, when a contour cannot be triangulated

## What the package does not do

The stages above are separate. The package has no stage that connects
rasterization to filtering, or filtering to mesh building:

- It has no heightfield that collects `SpanSample` values and merges
  overlapping spans into columns. You fill a `SpanGrid` yourself.
- It has no compact heightfield, distance field, region partitioning or
  contour tracing. A `ContourSet` has to be built by the caller.
- It does not build detail meshes and does not do path queries.
- There is no command-line tool.

## Running the tests

```
pip install navforge[test]
pytest
```