import pytest

from tinmesh.delaunay_mesh import DelaunayMesh, DelaunayTriangle, QuadEdge, splice


def _area(tri):
    a, b, c = tri
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


@pytest.fixture
def mesh():
    m = DelaunayMesh()
    # corners in the order the meshing code uses them
    m.init_mesh((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))
    return m


def _check_tiling(mesh):
    tris = mesh.triangles()
    for t in tris:
        assert _area(t) > 0
    assert sum(_area(t) for t in tris) / 2 == pytest.approx(1.0)
    return tris


def test_quad_edge_algebra():
    e = QuadEdge.make()
    assert e.sym.sym is e
    assert e.rot.rot.rot.rot is e
    assert e.rot.inv_rot is e
    assert e.onext is e
    assert e.sym.onext is e.sym
    assert e.rot.onext is e.rot.sym


def test_set_end_points():
    e = QuadEdge.make()
    e.set_end_points((1, 2), (3, 4))
    assert e.org == (1.0, 2.0)
    assert e.dest == (3.0, 4.0)
    assert e.sym.org == e.dest


def test_splice_is_its_own_inverse():
    a = QuadEdge.make()
    b = QuadEdge.make()
    splice(a, b)
    assert a.onext is b
    assert b.onext is a
    splice(a, b)
    assert a.onext is a
    assert b.onext is b


def test_init_mesh_two_triangles(mesh):
    tris = _check_tiling(mesh)
    assert len(tris) == 2
    corners = {p for t in tris for p in t}
    assert corners == {(0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0)}


def test_triangle_reshape_sets_faces():
    m = DelaunayMesh()
    m.init_mesh((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))
    e = m.locate((0.2, 0.7))
    face = e.lface
    assert isinstance(face, DelaunayTriangle)
    assert e.lnext.lface is face
    assert e.lprev.lface is face


def test_dont_anchor_moves_anchor():
    m = DelaunayMesh()
    m.init_mesh((0.0, 0.0), (0.0, 1.0), (1.0, 1.0), (1.0, 0.0))
    e = m.locate((0.2, 0.7))
    face = e.lface
    face.reshape(e)
    face.dont_anchor(e)
    assert face.anchor is e.lnext


def test_insert_interior_point(mesh):
    mesh.insert((0.25, 0.6))
    tris = _check_tiling(mesh)
    assert len(tris) == 4
    assert any((0.25, 0.6) in t for t in tris)


def test_insert_on_diagonal(mesh):
    mesh.insert((0.5, 0.5))
    tris = _check_tiling(mesh)
    assert len(tris) == 4
    assert all((0.5, 0.5) in t for t in tris)


def test_insert_on_boundary(mesh):
    mesh.insert((0.5, 0.0))
    tris = _check_tiling(mesh)
    assert len(tris) == 3


def test_insert_existing_point_keeps_mesh(mesh):
    mesh.insert((0.0, 0.0))
    tris = _check_tiling(mesh)
    assert len(tris) == 2


def test_many_insertions_keep_tiling(mesh):
    points = [(0.1 * i + 0.05, 0.07 * ((i * 3) % 13) + 0.03) for i in range(9)]
    for p in points:
        mesh.insert(p)
    tris = _check_tiling(mesh)
    assert len(tris) == 2 + 2 * len(points)


def test_locate_finds_containing_triangle(mesh):
    x = (0.7, 0.2)
    e = mesh.locate(x)
    tri = e.lface.points
    assert _area(tri) > 0
    for k in range(3):
        assert _area((tri[k], tri[(k + 1) % 3], x)) >= 0


def test_locate_without_init_raises():
    with pytest.raises(ValueError):
        DelaunayMesh().locate((0.0, 0.0))