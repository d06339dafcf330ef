import math
import random

import pytest

from tinmesh.delaunator import Delaunator, TriangulationError


def _cross(coords, a, b, c):
    ax, ay = coords[2 * a], coords[2 * a + 1]
    bx, by = coords[2 * b], coords[2 * b + 1]
    cx, cy = coords[2 * c], coords[2 * c + 1]
    return (bx - ax) * (cy - ay) - (by - ay) * (cx - ax)


def _grid(w, h):
    coords = []
    for r in range(h):
        for c in range(w):
            coords.extend((float(c), float(r)))
    return coords


def _random_points(count, seed=42):
    rng = random.Random(seed)
    coords = []
    for _ in range(count):
        coords.extend((rng.uniform(0, 100), rng.uniform(0, 100)))
    return coords


def test_single_triangle():
    dn = Delaunator()
    dn.triangulate([0, 0, 1, 1, 1, 0])
    assert dn.triangles == [0, 1, 2]
    assert dn.halfedges == [-1, -1, -1]


def test_trailing_odd_value_is_ignored():
    dn = Delaunator()
    dn.triangulate([0, 0, 1, 1, 1, 0, 5])
    assert dn.triangles == [0, 1, 2]


def test_square_gives_two_triangles():
    dn = Delaunator()
    dn.triangulate([0, 0, 100, 0, 100, 100, 0, 100])
    assert len(dn.triangles) == 6
    assert set(dn.triangles) == {0, 1, 2, 3}


def test_grid_triangle_count():
    w, h = 20, 10
    dn = Delaunator()
    dn.triangulate(_grid(w, h))
    assert len(dn.triangles) // 3 == (w - 1) * (h - 1) * 2


def test_reuse_resets_state():
    dn = Delaunator()
    dn.triangulate(_grid(20, 10))
    dn.triangulate([0, 0, 1, 1, 1, 0])
    assert dn.triangles == [0, 1, 2]


@pytest.mark.parametrize(
    "coords",
    [
        [],
        [1.0, 2.0],
        [0, 0, 1, 1],
        [0, 0, 1, 0, 2, 0],
        [3, 3, 3, 3, 3, 3],
    ],
)
def test_degenerate_input_raises(coords):
    with pytest.raises(TriangulationError):
        Delaunator().triangulate(coords)


def test_halfedges_are_symmetric():
    coords = _random_points(200)
    dn = Delaunator()
    dn.triangulate(coords)
    assert len(dn.halfedges) == len(dn.triangles)
    for e, opposite in enumerate(dn.halfedges):
        if opposite != -1:
            assert dn.halfedges[opposite] == e
            # opposite half-edges run between the same two points in reverse
            start = dn.triangles[e]
            end = dn.triangles[e - e % 3 + (e + 1) % 3]
            o_start = dn.triangles[opposite]
            o_end = dn.triangles[opposite - opposite % 3 + (opposite + 1) % 3]
            assert (start, end) == (o_end, o_start)


def test_consistent_orientation_and_all_points_used():
    coords = _random_points(150, seed=7)
    dn = Delaunator()
    dn.triangulate(coords)
    tris = [dn.triangles[k : k + 3] for k in range(0, len(dn.triangles), 3)]
    assert all(_cross(coords, *t) < 0 for t in tris)
    assert set(dn.triangles) == set(range(150))


def test_empty_circumcircle_property():
    coords = _random_points(120, seed=3)
    n = len(coords) // 2
    dn = Delaunator()
    dn.triangulate(coords)
    for k in range(0, len(dn.triangles), 3):
        a, b, c = dn.triangles[k : k + 3]
        ax, ay = coords[2 * a], coords[2 * a + 1]
        bx, by = coords[2 * b], coords[2 * b + 1]
        cx, cy = coords[2 * c], coords[2 * c + 1]
        d = 2 * (ax * (by - cy) + bx * (cy - ay) + cx * (ay - by))
        ux = ((ax * ax + ay * ay) * (by - cy) + (bx * bx + by * by) * (cy - ay) + (cx * cx + cy * cy) * (ay - by)) / d
        uy = ((ax * ax + ay * ay) * (cx - bx) + (bx * bx + by * by) * (ax - cx) + (cx * cx + cy * cy) * (bx - ax)) / d
        radius = math.hypot(ax - ux, ay - uy)
        for p in range(n):
            if p in (a, b, c):
                continue
            dist = math.hypot(coords[2 * p] - ux, coords[2 * p + 1] - uy)
            assert dist >= radius - 1e-6 * max(1.0, radius)


def test_hull_triangle_count_formula_for_random_points():
    coords = _random_points(100, seed=11)
    dn = Delaunator()
    dn.triangulate(coords)
    hull_edges = sum(1 for h in dn.halfedges if h == -1)
    # a triangulation of n points with h hull vertices has 2n - h - 2 triangles
    assert len(dn.triangles) // 3 == 2 * 100 - hull_edges - 2