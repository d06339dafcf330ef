# tinmesh

A pure-Python library for building, checking and storing triangulated
irregular network (TIN) meshes of terrain. It has no dependencies outside
the standard library.

## Modules

- `tinmesh.delaunator`: `Delaunator.triangulate(coords)` computes a sweep-hull
  Delaunay triangulation of a flat `[x0, y0, x1, y1, ...]` sequence. Afterwards
  `triangles` holds point indices, three per triangle, and `halfedges` holds the
  opposite half-edge of every half-edge, or -1 on the hull. Degenerate input
  (for example all points on one line) raises `TriangulationError`.
- `tinmesh.points2mesh`: `generate_delaunay_faces(vertices)` returns index
  triples for the x/y positions of the vertices; `generate_delaunay_mesh(vertices)`
  returns a decomposed `Mesh` (with no faces if the points cannot be
  triangulated). `check_duplicates(vertices, precision)` lists indices of
  vertices closer than `precision` in x/y to a later vertex, and
  `remove_duplicates(vertices, indices)` removes them in place by moving the
  last vertex into each slot.
- `tinmesh.mesh`: `Vertex` (a named tuple `x, y, z`), `BBox`, and `Mesh`, which
  holds a triangle list, a decomposed form (vertices plus faces of indices), or
  both. It converts between the two (`generate_triangles`,
  `generate_decomposed`), compares meshes regardless of triangle order and
  rotation (`semantic_equal`, `triangles_semantic_equal`), computes bounding
  boxes and vertex normals, and checks TIN consistency
  (`check_tin_properties`, `is_square`, `check_for_holes_in_square_mesh`).
  `check_tin_properties` requires every face to be wound counter-clockwise
  when seen from above, every vertex to be used, no duplicate vertices, no
  crossing edges and, for square meshes, no holes.
- `tinmesh.meshio`: `write_mesh_as_off`, `write_mesh_as_obj` and
  `write_mesh_as_geojson` take either a path or a `FileLike`;
  `load_mesh_from_off` reads from either, `load_mesh_from_obj` reads a path.
  `write_mesh_to_file(filename, mesh, file_format)` dispatches on a
  `FileFormat` (`OFF`, `OBJ`, `JSON`, `GEOJSON`). Writers need a decomposed
  mesh and raise `MeshFormatError` otherwise, as does the OFF parser
  (`OFFReader`) on malformed input. `ObjMeshWriter` writes OBJ files.
- `tinmesh.files`: byte-addressed `File` (on disk, usable as a context manager,
  opened with an `OpenMode`) and `MemoryFile` (in memory), sharing the
  `FileLike` interface, plus `getline(f, offset)` which returns a line and the
  offset after it.
- `tinmesh.binaryio`: `BinaryIO` reads and writes typed values (`"int8"` to
  `"uint64"`, `"float32"`, `"float64"`) in a chosen `Endianness`, with separate
  read and write positions. Failures are recorded in a
  `BinaryIOErrorTracker`, or raised as `OSError` when no tracker is passed.
- `tinmesh.mercator`: `MercatorProjection` converts between lon/lat, meters,
  pixels and tile indices, and gives tile bounds in meters.
- `tinmesh.delaunay_mesh`: an incremental Delaunay triangulation on the
  quad-edge structure (`QuadEdge`, `splice`, `DelaunayMesh`): start with
  `init_mesh(a, b, c, d)` and add points with `insert`; `triangles()` lists
  the corner points of every face.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Example

```python
from tinmesh.mesh import Vertex
from tinmesh.points2mesh import generate_delaunay_mesh
from tinmesh.files import MemoryFile
from tinmesh.meshio import write_mesh_as_off, load_mesh_from_off

points = [Vertex(x, y, (x * y) % 3) for y in range(5) for x in range(5)]
mesh = generate_delaunay_mesh(points)
print(mesh.poly_count())            # 32

out = MemoryFile()
write_mesh_as_off(out, mesh)
again = load_mesh_from_off(out)
print(again.poly_count())           # 32
```

## What it does not do

- There is no command-line program; everything is used as a library.
- It does not read raster elevation files (such as GeoTIFF) and does not
  simplify a raster into a mesh; meshes come from point lists or from OFF/OBJ
  files.
- It does not write quantized-mesh (`.terrain`) tiles; output formats are
  OFF, OBJ and GeoJSON only, and GeoJSON cannot be read back.