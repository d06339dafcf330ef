"""Triangle meshes held as triangle soup, as indexed vertices and faces, or both."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Iterable, NamedTuple, Sequence

_log = logging.getLogger(__name__)

_INF = math.inf


class Vertex(NamedTuple):
    """A point in 3D space; ordered lexicographically by x, y, z."""

    x: float
    y: float
    z: float = 0.0


Triangle = tuple[Vertex, Vertex, Vertex]
Face = tuple[int, int, int]
Normal = tuple[float, float, float]


def _as_vertex(point: Sequence[float]) -> Vertex:
    if isinstance(point, Vertex):
        return point
    coords = tuple(point)
    z = coords[2] if len(coords) > 2 else 0.0
    return Vertex(float(coords[0]), float(coords[1]), float(z))


def _as_triangle(triangle: Iterable[Sequence[float]]) -> Triangle:
    corners = tuple(_as_vertex(p) for p in triangle)
    if len(corners) != 3:
        raise ValueError(f"a triangle needs 3 corners, got {len(corners)}")
    return corners  # type: ignore[return-value]


def _as_face(face: Iterable[int]) -> Face:
    indices = tuple(int(i) for i in face)
    if len(indices) != 3:
        raise ValueError(f"a face needs 3 vertex indices, got {len(indices)}")
    return indices  # type: ignore[return-value]


def triangles_semantic_equal(t1: Sequence[Sequence[float]], t2: Sequence[Sequence[float]]) -> bool:
    """Whether two triangles have the same corners in the same winding order."""
    a = _as_triangle(t1)
    b = _as_triangle(t2)
    return any(a == b[k:] + b[:k] for k in range(3))


@dataclass
class BBox:
    """Axis-aligned bounding box; empty until the first point is added."""

    min: Vertex = Vertex(_INF, _INF, _INF)
    max: Vertex = Vertex(-_INF, -_INF, -_INF)

    def add(self, point: Sequence[float]) -> None:
        """Grow the box to contain ``point`` (2 or 3 coordinates)."""
        coords = tuple(point)
        x, y = float(coords[0]), float(coords[1])
        min_z, max_z = self.min.z, self.max.z
        if len(coords) > 2:
            z = float(coords[2])
            min_z = min(min_z, z)
            max_z = max(max_z, z)
        self.min = Vertex(min(self.min.x, x), min(self.min.y, y), min_z)
        self.max = Vertex(max(self.max.x, x), max(self.max.y, y), max_z)


def _bbox_of(points: Iterable[Sequence[float]]) -> BBox:
    box = BBox()
    for p in points:
        box.add(p)
    return box


def _bboxes_intersect_2d(a: BBox, b: BBox) -> bool:
    return not (
        a.max.x < b.min.x or b.max.x < a.min.x or a.max.y < b.min.y or b.max.y < a.min.y
    )


def _orient(p: Vertex, q: Vertex, r: Vertex) -> float:
    return (q.x - p.x) * (r.y - p.y) - (q.y - p.y) * (r.x - p.x)


def _on_segment(p: Vertex, q: Vertex, r: Vertex) -> bool:
    return min(p.x, q.x) <= r.x <= max(p.x, q.x) and min(p.y, q.y) <= r.y <= max(p.y, q.y)


def _segments_intersect_2d(p1: Vertex, p2: Vertex, p3: Vertex, p4: Vertex) -> bool:
    d1 = _orient(p3, p4, p1)
    d2 = _orient(p3, p4, p2)
    d3 = _orient(p1, p2, p3)
    d4 = _orient(p1, p2, p4)
    if ((d1 > 0 and d2 < 0) or (d1 < 0 and d2 > 0)) and (
        (d3 > 0 and d4 < 0) or (d3 < 0 and d4 > 0)
    ):
        return True
    return (
        (d1 == 0 and _on_segment(p3, p4, p1))
        or (d2 == 0 and _on_segment(p3, p4, p2))
        or (d3 == 0 and _on_segment(p1, p2, p3))
        or (d4 == 0 and _on_segment(p1, p2, p4))
    )


def _face_edges(f: Face) -> tuple[tuple[int, int], ...]:
    return ((f[0], f[1]), (f[1], f[2]), (f[2], f[0]))


def _face_edge_crosses_other_edge(fi: int, faces: list[Face], vertices: list[Vertex]) -> bool:
    f = faces[fi]
    f_box = _bbox_of(vertices[i] for i in f)
    f_edges = _face_edges(f)
    for o in faces[fi + 1 :]:
        o_box = _bbox_of(vertices[i] for i in o)
        if not _bboxes_intersect_2d(f_box, o_box):
            continue
        for e in f_edges:
            for oe in _face_edges(o):
                if set(e) & set(oe):
                    continue
                if _segments_intersect_2d(
                    vertices[e[0]], vertices[e[1]], vertices[oe[0]], vertices[oe[1]]
                ):
                    return True
    return False


def _is_facing_upwards(f: Face, vertices: list[Vertex]) -> bool:
    a, b, c = (vertices[i] for i in f)
    return (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x) > 0


def _sub(a: Sequence[float], b: Sequence[float]) -> Normal:
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def _cross(a: Normal, b: Normal) -> Normal:
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def _normalize(v: Normal) -> Normal:
    length = math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])
    if length == 0:
        return (math.nan, math.nan, math.nan)
    return (v[0] / length, v[1] / length, v[2] / length)


class Mesh:
    """A triangle mesh.

    The mesh can hold a list of triangles, a decomposed form of shared
    vertices plus faces indexing them, or both.
    """

    def __init__(self) -> None:
        self._triangles: list[Triangle] = []
        self._vertices: list[Vertex] = []
        self._faces: list[Face] = []
        self._normals: list[Normal] = []

    def clear(self) -> None:
        self._triangles = []
        self._vertices = []
        self._faces = []
        self._normals = []

    def clear_triangles(self) -> None:
        self._triangles = []

    def clear_decomposed(self) -> None:
        self._vertices = []
        self._faces = []

    def clone(self) -> Mesh:
        out = Mesh()
        out._faces = list(self._faces)
        out._vertices = list(self._vertices)
        out._triangles = list(self._triangles)
        out._normals = list(self._normals)
        return out

    def from_decomposed(
        self, vertices: Iterable[Sequence[float]], faces: Iterable[Iterable[int]]
    ) -> None:
        """Replace the whole mesh with the given vertices and faces."""
        self.clear()
        self._vertices = [_as_vertex(v) for v in vertices]
        self._faces = [_as_face(f) for f in faces]

    def from_triangles(self, triangles: Iterable[Iterable[Sequence[float]]]) -> None:
        """Replace the triangle list; the decomposed form is left untouched."""
        self._triangles = [_as_triangle(t) for t in triangles]

    def has_triangles(self) -> bool:
        return bool(self._triangles)

    def has_decomposed(self) -> bool:
        return bool(self._vertices) and bool(self._faces)

    def empty(self) -> bool:
        return not self.has_triangles() and not self.has_decomposed()

    def poly_count(self) -> int:
        return len(self._triangles) if self.has_triangles() else len(self._faces)

    def add_triangle(self, triangle: Iterable[Sequence[float]], decompose: bool = False) -> None:
        """Append a triangle, also to the decomposed form if asked or already present."""
        t = _as_triangle(triangle)
        self._triangles.append(t)
        if decompose or self.has_decomposed():
            self._decompose_triangle(t)

    def generate_triangles(self) -> None:
        """Build the triangle list from the faces unless it already exists."""
        if self.has_triangles():
            return
        _log.debug("generate triangles...")
        for face in self._faces:
            t = self.compose_triangle(face)
            if t is not None:
                self._triangles.append(t)
        _log.debug("done")

    def generate_decomposed(self) -> None:
        """Build vertices and faces from the triangles unless they already exist."""
        if self.has_decomposed():
            return
        _log.debug("generate decomposed...")
        lookup: dict[Vertex, int] = {}
        for t in self._triangles:
            indices = []
            for v in t:
                index = lookup.get(v)
                if index is None:
                    index = len(self._vertices)
                    lookup[v] = index
                    self._vertices.append(v)
                indices.append(index)
            self._faces.append(tuple(indices))  # type: ignore[arg-type]
        _log.debug("done")

    def _decompose_triangle(self, t: Triangle) -> None:
        f: list[int | None] = [None, None, None]
        found = 0
        for j, v in enumerate(self._vertices):
            if found >= 3:
                break
            for i in range(3):
                if t[i] == v:
                    f[i] = j
                    found += 1
        if found != 3:
            for i in range(3):
                if f[i] is None:
                    f[i] = len(self._vertices)
                    self._vertices.append(t[i])
        self._faces.append(tuple(f))  # type: ignore[arg-type]

    def compose_triangle(self, face: Sequence[int]) -> Triangle | None:
        """The triangle a face refers to, or None if an index is out of range."""
        n = len(self._vertices)
        if any(not 0 <= i < n for i in face):
            return None
        return (self._vertices[face[0]], self._vertices[face[1]], self._vertices[face[2]])

    def triangles(self) -> tuple[Triangle, ...]:
        return tuple(self._triangles)

    def faces(self) -> tuple[Face, ...]:
        return tuple(self._faces)

    def vertices(self) -> tuple[Vertex, ...]:
        return tuple(self._vertices)

    def vertex_normals(self) -> tuple[Normal, ...]:
        return tuple(self._normals)

    def grab_triangles(self) -> list[Triangle]:
        """Take the triangle list out of the mesh."""
        out, self._triangles = self._triangles, []
        return out

    def grab_decomposed(self) -> tuple[list[Vertex], list[Face]]:
        """Take the vertices and faces out of the mesh."""
        vertices, faces = self._vertices, self._faces
        self._vertices = []
        self._faces = []
        return vertices, faces

    def semantic_equal(self, other: Mesh) -> bool:
        """Whether both meshes describe the same set of triangles."""
        if self.poly_count() != other.poly_count():
            return False
        if self.has_triangles() and other.has_triangles():
            return self._semantic_equal_tri_tri(other)
        if self.has_decomposed() and other.has_decomposed():
            return self._semantic_equal_dec_dec(other)
        if self.has_triangles() and other.has_decomposed():
            return self._semantic_equal_tri_dec(other)
        if self.has_decomposed() and other.has_triangles():
            return other._semantic_equal_tri_dec(self)
        return True

    def _semantic_equal_tri_tri(self, other: Mesh) -> bool:
        remaining: list[Triangle | None] = list(other._triangles)
        for t in self._triangles:
            for i, o in enumerate(remaining):
                if o is not None and triangles_semantic_equal(t, o):
                    remaining[i] = None
                    break
            else:
                return False
        return True

    def _match_against_faces(self, t1: Triangle, other: Mesh, remaining: list) -> bool:
        for i, face in enumerate(remaining):
            if face is None:
                continue
            t2 = other.compose_triangle(face)
            if t2 is None:
                remaining[i] = None
                continue
            if triangles_semantic_equal(t1, t2):
                remaining[i] = None
                return True
        return False

    def _semantic_equal_dec_dec(self, other: Mesh) -> bool:
        remaining: list[Face | None] = list(other._faces)
        for f in self._faces:
            t1 = self.compose_triangle(f)
            if t1 is None:
                continue
            if not self._match_against_faces(t1, other, remaining):
                return False
        return True

    def _semantic_equal_tri_dec(self, other: Mesh) -> bool:
        remaining: list[Face | None] = list(other._faces)
        for t1 in self._triangles:
            if not self._match_against_faces(t1, other, remaining):
                return False
        return True

    def get_bbox(self) -> BBox:
        """Bounding box of the decomposed vertices."""
        return _bbox_of(self._vertices)

    def is_square(self) -> bool:
        """Whether there are vertices at all four corners of the bounding box."""
        bb = self.get_bbox()
        dx = bb.max.x - bb.min.x
        dy = bb.max.y - bb.min.y
        eps = (dx + dy) / 20000.0
        corners = [False] * 4
        for v in self._vertices:
            near_min_x = abs(v.x - bb.min.x) < eps
            near_max_x = abs(v.x - bb.max.x) < eps
            near_min_y = abs(v.y - bb.min.y) < eps
            near_max_y = abs(v.y - bb.max.y) < eps
            if near_min_x and near_min_y:
                corners[0] = True
            if near_max_x and near_max_y:
                corners[1] = True
            if near_max_x and near_min_y:
                corners[2] = True
            if near_min_x and near_max_y:
                corners[3] = True
            if all(corners):
                return True
        return False

    def check_for_holes_in_square_mesh(self) -> bool:
        """Whether a square mesh has holes; non-square meshes report False."""
        bb = self.get_bbox()
        dx = bb.max.x - bb.min.x
        dy = bb.max.y - bb.min.y
        eps = (dx + dy) / 20000.0
        if not self.is_square():
            _log.debug("mesh is not square - can not check for holes")
            return False
        _log.debug("mesh is square - checking for holes")
        area_bb = dx * dy
        area_sum = 0.0
        for f in self._faces:
            v1, v2, v3 = (self._vertices[i] for i in f)
            area_sum += 0.5 * abs((v2.x - v1.x) * (v3.y - v1.y) - (v3.x - v1.x) * (v2.y - v1.y))
        if abs(area_sum - area_bb) > eps:
            _log.debug(
                "mesh has holes. area of bounding box %s area of all triangles combined %s",
                area_bb,
                area_sum,
            )
            return True
        _log.debug("mesh has no holes")
        return False

    def check_tin_properties(self) -> bool:
        """Whether the decomposed mesh is a proper triangulated irregular network."""
        _log.debug("checking mesh consistency / TIN properties...")
        if not self.has_decomposed():
            return False
        vertices = self._vertices
        n = len(vertices)
        used = [False] * n
        for f in self._faces:
            if any(not 0 <= i < n for i in f):
                _log.debug("mesh is NOT a proper TIN, some face indices are not valid")
                return False
            for i in f:
                used[i] = True
            if f[0] == f[1] or f[0] == f[2] or f[1] == f[2]:
                _log.debug("mesh is NOT a proper TIN, some faces have collapsed corner points")
                return False
            if not _is_facing_upwards(f, vertices):
                _log.debug("mesh is NOT a proper TIN, some faces are not oriented upwards")
                return False
        if not all(used):
            _log.debug("mesh is NOT a proper TIN, some vertices are not referenced by a face")
            return False

        ordered = sorted(vertices)
        if any(a == b for a, b in zip(ordered, ordered[1:])):
            _log.debug("mesh is NOT a proper TIN, there are duplicate vertices")
            return False

        for fi in range(len(self._faces)):
            if _face_edge_crosses_other_edge(fi, self._faces, vertices):
                _log.debug("mesh is NOT a proper TIN, some triangles are overlapping")
                return False

        if self.check_for_holes_in_square_mesh():
            return False

        _log.debug("mesh is a proper TIN")
        return True

    def has_normals(self) -> bool:
        return bool(self._normals)

    def compute_vertex_normals(self) -> None:
        """Average the unit normals of the faces around each vertex."""
        face_normals = [
            _normalize(_cross(_sub(t[0], t[2]), _sub(t[1], t[2]))) for t in self._triangles
        ]
        sums = [[0.0, 0.0, 0.0] for _ in self._vertices]
        for face, normal in zip(self._faces, face_normals):
            for vi in face:
                acc = sums[vi]
                acc[0] += normal[0]
                acc[1] += normal[1]
                acc[2] += normal[2]
        self._normals = [_normalize((s[0], s[1], s[2])) for s in sums]