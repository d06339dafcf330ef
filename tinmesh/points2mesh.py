"""Delaunay meshing of scattered points."""

from __future__ import annotations

from typing import Iterable, MutableSequence, Sequence

from tinmesh.delaunator import Delaunator, TriangulationError
from tinmesh.mesh import Face, Mesh


def generate_delaunay_faces(vertices: Sequence[Sequence[float]]) -> list[Face]:
    """Triangulate the x/y positions of ``vertices``.

    Returns faces as triples of indices into ``vertices``. Raises
    :class:`~tinmesh.delaunator.TriangulationError` for degenerate input.
    """
    coords: list[float] = []
    for v in vertices:
        coords.append(float(v[0]))
        coords.append(float(v[1]))
    dn = Delaunator()
    dn.triangulate(coords)
    t = dn.triangles
    return [(t[k], t[k + 1], t[k + 2]) for k in range(0, len(t) - len(t) % 3, 3)]


def check_duplicates(vertices: Sequence[Sequence[float]], precision: float) -> list[int]:
    """Indices of vertices that lie closer than ``precision`` to a later vertex in x/y.

    An index appears once for every later vertex it is close to.
    """
    p2 = precision * precision
    duplicates: list[int] = []
    for i, a in enumerate(vertices):
        for b in vertices[i + 1 :]:
            dx = a[0] - b[0]
            dy = a[1] - b[1]
            if dx * dx + dy * dy < p2:
                duplicates.append(i)
    return duplicates


def remove_duplicates(vertices: MutableSequence, indices: Iterable[int]) -> None:
    """Remove the vertices at ``indices`` in place by moving the last vertex into their slot."""
    for i in indices:
        vertices[i] = vertices[-1]
        vertices.pop()


def generate_delaunay_mesh(vertices: Iterable[Sequence[float]]) -> Mesh:
    """A decomposed mesh of ``vertices`` and their Delaunay faces.

    Degenerate input yields a mesh with the vertices and no faces.
    """
    vlist = list(vertices)
    try:
        faces = generate_delaunay_faces(vlist)
    except TriangulationError:
        faces = []
    mesh = Mesh()
    mesh.from_decomposed(vlist, faces)
    return mesh