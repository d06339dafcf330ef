"""Reading and writing meshes as OFF, OBJ and GeoJSON."""

from __future__ import annotations

import enum
import logging
import os
import sys
from contextlib import contextmanager
from typing import Iterable, Iterator, Union

from tinmesh.files import File, FileLike, OpenMode, getline
from tinmesh.mesh import BBox, Face, Mesh, Vertex

_log = logging.getLogger(__name__)

PathOrFile = Union[str, os.PathLike, FileLike]

_MAX_DOUBLE = sys.float_info.max


class MeshFormatError(ValueError):
    """Raised when a mesh cannot be written or parsed in a given format."""


class FileFormat(enum.Enum):
    """Mesh file formats this module writes."""

    OFF = "off"
    OBJ = "obj"
    JSON = "json"
    GEOJSON = "geojson"


@contextmanager
def _output(out: PathOrFile) -> Iterator[FileLike]:
    if isinstance(out, FileLike):
        yield out
    else:
        with File(out, OpenMode.RWCF) as f:
            yield f


@contextmanager
def _input(source: PathOrFile) -> Iterator[FileLike]:
    if isinstance(source, FileLike):
        yield source
    else:
        with File(source, OpenMode.R) as f:
            yield f


def _write_chunks(f: FileLike, chunks: Iterable[str]) -> None:
    position = 0
    for chunk in chunks:
        data = chunk.encode("utf-8")
        f.write(position, data)
        position += len(data)


def _require_decomposed(mesh: Mesh) -> None:
    if not mesh.has_decomposed():
        raise MeshFormatError("mesh is not in decomposed format, please decompose first")


def write_mesh_to_file(filename: str | os.PathLike, mesh: Mesh, file_format) -> None:
    """Write ``mesh`` to ``filename`` in ``file_format`` (a :class:`FileFormat` or its name)."""
    if not isinstance(file_format, FileFormat):
        try:
            file_format = FileFormat(str(file_format).lower())
        except ValueError:
            raise MeshFormatError(
                f"unsupported file format {file_format} for mesh output"
            ) from None
    if file_format is FileFormat.OFF:
        write_mesh_as_off(filename, mesh)
    elif file_format is FileFormat.OBJ:
        write_mesh_as_obj(filename, mesh)
    else:
        write_mesh_as_geojson(filename, mesh)


def _obj_records(text: str) -> Iterator[tuple[str, tuple[float, float, float]]]:
    """Yield (kind, three numbers) records until the input stops parsing."""
    tokens = iter(text.split())
    for token in tokens:
        kind = token[0]
        parts = [token[1:]] if len(token) > 1 else []
        try:
            while len(parts) < 3:
                parts.append(next(tokens))
            x, y, z = (float(p) for p in parts)
        except (StopIteration, ValueError):
            return
        yield kind, (x, y, z)


def load_mesh_from_obj(filename: str | os.PathLike) -> Mesh:
    """Load vertices ("v x y z") and triangular faces ("f a b c") from an OBJ file."""
    with open(filename, encoding="utf-8", errors="replace") as fp:
        text = fp.read()
    vertices: list[Vertex] = []
    faces: list[Face] = []
    for kind, (x, y, z) in _obj_records(text):
        if kind == "v":
            vertices.append(Vertex(x, y, z))
        elif kind == "f":
            faces.append((int(x) - 1, int(y) - 1, int(z) - 1))
    mesh = Mesh()
    mesh.from_decomposed(vertices, faces)
    return mesh


_FACE_PAD = " " * 32


def make_geojson_face(v1, v2, v3) -> str:
    """A GeoJSON feature holding the closed outline of a triangle."""
    return (
        '{\n "type" : "Feature" , "properties" : { "id" : 0 } , "geometry" :\n { \n "type" :  '
        + _FACE_PAD
        + '"LineString", "coordinates" : \n '
        + _FACE_PAD
        + f"[ \n [ {v1[0]:.18f} , {v1[1]:.18f} ], \n [ {v2[0]:.18f}, {v2[1]:.18f} ], "
        + f"\n [ {v3[0]:.18f}, {v3[1]:.18f} ],\n [ {v1[0]:.18f}, {v1[1]:.18f} ] "
        + _FACE_PAD
        + "\n ] \n } \n } \n"
    )


def make_geojson_vertex(v) -> str:
    """A GeoJSON point feature for one vertex."""
    return (
        "{ \n  "
        + '        "type": "Feature",\n '
        + '        "properties": {},\n '
        + '        "geometry": {\n '
        + '            "type": "Point",\n '
        + '            "coordinates": [\n '
        + f"                            {v[0]:.18f}, \n "
        + f"                            {v[1]:.18f} \n "
        + "                            ]\n "
        + "        } "
        + "    }"
    )


def _geojson_chunks(mesh: Mesh) -> Iterator[str]:
    vertices = mesh.vertices()
    faces = mesh.faces()
    yield (
        "{\n"
        '"type": "FeatureCollection",\n'
        '"crs": { "type": "name", "properties": '
        '{ "name": "urn:ogc:def:crs:OGC:1.3:CRS84" } },\n'
        '"features": [\n'
    )
    _log.info("number of faces %d", len(faces))
    for v in vertices:
        yield make_geojson_vertex(v) + ","
    last = len(faces) - 1
    for index, face in enumerate(faces):
        face_string = make_geojson_face(*(vertices[i] for i in face))
        if index == last:
            yield f"{face_string} \n ] \n }}"
        else:
            yield f"{face_string},"


def write_mesh_as_geojson(out: PathOrFile, mesh: Mesh) -> None:
    """Write vertices as points and faces as outlines into a GeoJSON collection."""
    _require_decomposed(mesh)
    with _output(out) as f:
        _write_chunks(f, _geojson_chunks(mesh))
        f.flush()
        if not f.is_good():
            raise OSError(f"writing GeoJSON to {f.name!r} failed")


def _obj_chunks(mesh: Mesh) -> Iterator[str]:
    for v in mesh.vertices():
        yield f"v {v.x:.18f} {v.y:.18f} {v.z:.18f}\n\n"
    for a, b, c in mesh.faces():
        yield f"f {a + 1} {b + 1} {c + 1}\n\n"


def write_mesh_as_obj(out: PathOrFile, mesh: Mesh) -> None:
    """Write the decomposed mesh as Wavefront OBJ with 1-based face indices."""
    _require_decomposed(mesh)
    with _output(out) as f:
        _write_chunks(f, _obj_chunks(mesh))
        if not f.is_good():
            raise OSError(f"writing OBJ to {f.name!r} failed")


def _count_edges(faces: Iterable[Face]) -> int:
    edges = set()
    for a, b, c in faces:
        for p, q in ((a, b), (b, c), (c, a)):
            edges.add((min(p, q), max(p, q)))
    return len(edges)


def _off_chunks(mesh: Mesh) -> Iterator[str]:
    vertices = mesh.vertices()
    faces = mesh.faces()
    yield "OFF\n"
    yield f"{len(vertices)} {len(faces)} {_count_edges(faces)}\n"
    for v in vertices:
        yield f"{v.x:.18f} {v.y:.18f} {v.z:.18f}\n"
    for a, b, c in faces:
        yield f"3 {a} {b} {c}\n"


def write_mesh_as_off(out: PathOrFile, mesh: Mesh) -> None:
    """Write the decomposed mesh in the Object File Format."""
    _require_decomposed(mesh)
    with _output(out) as f:
        if not f.is_good():
            raise OSError("output file is not in a good state")
        _write_chunks(f, _off_chunks(mesh))


def load_mesh_from_off(source: PathOrFile) -> Mesh:
    """Read a mesh from an OFF file name or file-like object."""
    with _input(source) as f:
        reader = OFFReader()
        reader.read_file(f)
        return reader.convert_to_mesh()


def _is_data(tokens: list[str]) -> bool:
    return bool(tokens) and not tokens[0].startswith("#")


def _to_int(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        raise MeshFormatError(f"expected an integer, got {token!r}") from None


def _to_float(token: str) -> float:
    try:
        return float(token)
    except ValueError:
        raise MeshFormatError(f"expected a number, got {token!r}") from None


class OFFReader:
    """Parser for triangle meshes in the Object File Format."""

    def __init__(self) -> None:
        self.clear()

    def clear(self) -> None:
        self._vertices: list[Vertex] = []
        self._faces: list[Face] = []
        self.num_vertices = 0
        self.num_faces = 0
        self.num_edges = 0

    @staticmethod
    def _next_dimension_like_line(f: FileLike, offset: int, what: str) -> tuple[list[str], int]:
        while True:
            line, next_offset = getline(f, offset)
            if next_offset == offset:
                raise MeshFormatError(f"unexpected end of input while looking for {what}")
            offset = next_offset
            tokens = line.split()
            if _is_data(tokens) and len(tokens) == 3:
                return tokens, offset

    @staticmethod
    def _parse_vertex(tokens: list[str]) -> Vertex | None:
        if len(tokens) >= 3 and _is_data(tokens):
            return Vertex(_to_float(tokens[0]), _to_float(tokens[1]), _to_float(tokens[2]))
        return None

    @staticmethod
    def _parse_face(tokens: list[str]) -> Face | None:
        if not (len(tokens) >= 3 and _is_data(tokens)):
            return None
        if len(tokens) > 3:
            n = _to_int(tokens[0])
            if n == 3:
                return (_to_int(tokens[1]), _to_int(tokens[2]), _to_int(tokens[3]))
            _log.warning("incorrect facade format, vertices per facade: %d (only supporting n=3)", n)
        return (0, 0, 0)

    def read_file(self, f: FileLike) -> None:
        """Parse ``f``; raises :class:`MeshFormatError` if it is not a valid OFF mesh."""
        self.clear()
        if not f.is_good():
            raise OSError("input is not open/in a good state")
        line, offset = getline(f, 0)
        if line != "OFF":
            raise MeshFormatError("the file to read is not in OFF format")

        tokens, offset = self._next_dimension_like_line(f, offset, "the dimension line")
        self.num_vertices = _to_int(tokens[0])
        self.num_faces = _to_int(tokens[1])
        self.num_edges = _to_int(tokens[2])
        _log.debug("vertices: %d, facades: %d", self.num_vertices, self.num_faces)

        if self.num_vertices <= 0 or self.num_faces <= 0:
            return

        tokens, offset = self._next_dimension_like_line(f, offset, "the first vertex")

        vertices_read = 0
        for i in range(self.num_vertices):
            vertex = self._parse_vertex(tokens)
            if vertex is None:
                _log.warning("could not read vertex %d", i)
                vertex = Vertex(0.0, 0.0, 0.0)
            else:
                vertices_read += 1
            self._vertices.append(vertex)
            line, offset = getline(f, offset)
            tokens = line.split()

        faces_read = 0
        for i in range(self.num_faces):
            face = self._parse_face(tokens)
            if face is None:
                _log.warning("could not read facade %d", i)
                face = (0, 0, 0)
            else:
                faces_read += 1
            self._faces.append(face)
            line, offset = getline(f, offset)
            tokens = line.split()

        if vertices_read != self.num_vertices:
            raise MeshFormatError(
                f"not all vertices read: expected {self.num_vertices}, read {vertices_read}"
            )
        if faces_read != self.num_faces:
            raise MeshFormatError(
                f"not all facades read: expected {self.num_faces}, read {faces_read}"
            )

    def convert_to_mesh(self) -> Mesh:
        """Hand the parsed data over to a new mesh and reset the reader."""
        mesh = Mesh()
        mesh.from_decomposed(self._vertices, self._faces)
        self.clear()
        return mesh

    def find_xy_bounds(self) -> tuple[float, float, float, float]:
        """The (xmin, ymin, xmax, ymax) of the parsed vertices."""
        xmin = ymin = _MAX_DOUBLE
        xmax = ymax = -_MAX_DOUBLE
        for v in self._vertices:
            xmin = min(xmin, v.x)
            xmax = max(xmax, v.x)
            ymin = min(ymin, v.y)
            ymax = max(ymax, v.y)
        return xmin, ymin, xmax, ymax


class ObjMeshWriter:
    """Mesh writer producing OBJ files."""

    def write_mesh_to_file(self, filename: str | os.PathLike, mesh: Mesh, bbox: BBox | None = None) -> None:
        write_mesh_as_obj(filename, mesh)

    def file_extension(self) -> str:
        return "obj"