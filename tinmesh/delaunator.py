"""Sweep-hull Delaunay triangulation of 2D points."""

from __future__ import annotations

import math
import sys
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Sequence

_MAX_DOUBLE = sys.float_info.max

Point = tuple[float, float]


class TriangulationError(ValueError):
    """Raised when a set of points cannot be triangulated."""


def _dist(ax: float, ay: float, bx: float, by: float) -> float:
    dx = ax - bx
    dy = ay - by
    return dx * dx + dy * dy


def _circumradius(ax: float, ay: float, bx: float, by: float, cx: float, cy: float) -> float:
    dx = bx - ax
    dy = by - ay
    ex = cx - ax
    ey = cy - ay
    bl = dx * dx + dy * dy
    cl = ex * ex + ey * ey
    d = dx * ey - dy * ex
    if not (bl and cl and d):
        return _MAX_DOUBLE
    x = (ey * bl - dy * cl) * 0.5 / d
    y = (dx * cl - ex * bl) * 0.5 / d
    return x * x + y * y


def _area(px: float, py: float, qx: float, qy: float, rx: float, ry: float) -> float:
    return (qy - py) * (rx - qx) - (qx - px) * (ry - qy)


def _circumcenter(
    ax: float, ay: float, bx: float, by: float, cx: float, cy: float
) -> Point:
    dx = bx - ax
    dy = by - ay
    ex = cx - ax
    ey = cy - ay
    bl = dx * dx + dy * dy
    cl = ex * ex + ey * ey
    d = dx * ey - dy * ex
    return (ax + (ey * bl - dy * cl) * 0.5 / d, ay + (dx * cl - ex * bl) * 0.5 / d)


def _in_circle(
    ax: float, ay: float, bx: float, by: float, cx: float, cy: float, px: float, py: float
) -> bool:
    dx = ax - px
    dy = ay - py
    ex = bx - px
    ey = by - py
    fx = cx - px
    fy = cy - py
    ap = dx * dx + dy * dy
    bp = ex * ex + ey * ey
    cp = fx * fx + fy * fy
    return (dx * (ey * cp - bp * fy) - dy * (ex * cp - bp * fx) + ap * (ex * fy - ey * fx)) < 0


@dataclass
class HullNode:
    """A point on the advancing convex hull, linked to its neighbours."""

    i: int
    x: float
    y: float
    prev: int
    next: int
    t: int = 0
    removed: bool = False


class Delaunator:
    """Delaunay triangulator.

    After :meth:`triangulate`, ``triangles`` holds point indices, three per
    triangle, and ``halfedges`` holds for every half-edge the index of its
    opposite half-edge, or -1 on the hull.
    """

    def __init__(self) -> None:
        self.triangles: list[int] = []
        self.halfedges: list[int] = []
        self._hull: list[HullNode] = []
        self._hash: list[int] = []
        self._hash_size = 0
        self._center_x = 0.0
        self._center_y = 0.0

    def triangulate(self, coords: Sequence[float]) -> None:
        """Triangulate the flat ``[x0, y0, x1, y1, ...]`` coordinate sequence.

        Raises :class:`TriangulationError` when the points are degenerate.
        """
        self._center_x = 0.0
        self._center_y = 0.0
        self._hash_size = 0
        self._hash = []
        self._hull = []
        self.triangles = []
        self.halfedges = []

        values = [float(c) for c in coords]
        pts: list[Point] = list(zip(values[0::2], values[1::2]))
        n = len(pts)

        min_x = min((x for x, _ in pts), default=_MAX_DOUBLE)
        min_y = min((y for _, y in pts), default=_MAX_DOUBLE)
        max_x = max((x for x, _ in pts), default=-_MAX_DOUBLE)
        max_y = max((y for _, y in pts), default=-_MAX_DOUBLE)
        cx = (min_x + max_x) / 2
        cy = (min_y + max_y) / 2

        # seed point closest to the centre of the bounding box
        i0 = 0
        min_dist = _MAX_DOUBLE
        for i, (x, y) in enumerate(pts):
            d = _dist(cx, cy, x, y)
            if d < min_dist:
                i0 = i
                min_dist = d

        # point closest to the seed
        i1 = 0
        min_dist = _MAX_DOUBLE
        if n:
            x0, y0 = pts[i0]
            for i, (x, y) in enumerate(pts):
                if i == i0:
                    continue
                d = _dist(x0, y0, x, y)
                if 0 < d < min_dist:
                    i1 = i
                    min_dist = d

        # third point forming the smallest circumcircle with the first two
        i2 = 0
        min_radius = _MAX_DOUBLE
        if n:
            x0, y0 = pts[i0]
            x1, y1 = pts[i1]
            for i, (x, y) in enumerate(pts):
                if i in (i0, i1):
                    continue
                r = _circumradius(x0, y0, x1, y1, x, y)
                if r < min_radius:
                    i2 = i
                    min_radius = r

        if min_radius == _MAX_DOUBLE:
            raise TriangulationError("no triangulation: points are degenerate")

        if _area(*pts[i0], *pts[i1], *pts[i2]) < 0:
            i1, i2 = i2, i1

        i0x, i0y = pts[i0]
        i1x, i1y = pts[i1]
        i2x, i2y = pts[i2]

        self._center_x, self._center_y = _circumcenter(i0x, i0y, i1x, i1y, i2x, i2y)
        center_x, center_y = self._center_x, self._center_y

        def compare(i: int, j: int) -> float:
            xi, yi = pts[i]
            xj, yj = pts[j]
            diff = _dist(xi, yi, center_x, center_y) - _dist(xj, yj, center_x, center_y)
            if diff:
                return diff
            if xi - xj:
                return xi - xj
            return yi - yj

        ids = sorted(range(n), key=cmp_to_key(compare))

        self._hash_size = int(math.ceil(math.sqrt(n)))
        self._hash = [-1] * self._hash_size

        hull = self._hull
        e = self._new_node(i0, pts)
        self._hash_edge(e)
        hull[e].t = 0

        e = self._insert_node(i1, e, pts)
        self._hash_edge(e)
        hull[e].t = 1

        e = self._insert_node(i2, e, pts)
        self._hash_edge(e)
        hull[e].t = 2

        self._add_triangle(i0, i1, i2, -1, -1, -1)

        xp = math.nan
        yp = math.nan
        for i in ids:
            x, y = pts[i]
            if x == xp and y == yp:
                continue
            xp, yp = x, y
            if (x == i0x and y == i0y) or (x == i1x and y == i1y) or (x == i2x and y == i2y):
                continue

            start_key = self._hash_key(x, y)
            key = start_key
            while True:
                start = self._hash[key]
                key = (key + 1) % self._hash_size
                if not ((start < 0 or hull[start].removed) and key != start_key):
                    break
            if start < 0:
                raise TriangulationError("no visible hull edge found for a point")

            e = start
            while _area(x, y, hull[e].x, hull[e].y, hull[hull[e].next].x, hull[hull[e].next].y) >= 0:
                e = hull[e].next
                if e == start:
                    raise TriangulationError("something is wrong with the input points")

            walk_back = e == start

            # first triangle from the point
            t = self._add_triangle(hull[e].i, i, hull[hull[e].next].i, -1, -1, hull[e].t)
            hull[e].t = t
            e = self._insert_node(i, e, pts)

            hull[e].t = self._legalize(t + 2, pts)
            prev_prev = hull[hull[e].prev].prev
            if hull[prev_prev].t == self.halfedges[t + 1]:
                hull[prev_prev].t = t + 2

            # walk forward through the hull
            q = hull[e].next
            while _area(x, y, hull[q].x, hull[q].y, hull[hull[q].next].x, hull[hull[q].next].y) < 0:
                t = self._add_triangle(
                    hull[q].i, i, hull[hull[q].next].i, hull[hull[q].prev].t, -1, hull[q].t
                )
                hull[hull[q].prev].t = self._legalize(t + 2, pts)
                self._remove_node(q)
                q = hull[q].next

            if walk_back:
                # walk backward from the other side
                q = hull[e].prev
                while _area(x, y, hull[hull[q].prev].x, hull[hull[q].prev].y, hull[q].x, hull[q].y) < 0:
                    t = self._add_triangle(
                        hull[hull[q].prev].i, i, hull[q].i, -1, hull[q].t, hull[hull[q].prev].t
                    )
                    self._legalize(t + 2, pts)
                    hull[hull[q].prev].t = t
                    self._remove_node(q)
                    q = hull[q].prev

            self._hash_edge(e)
            self._hash_edge(hull[e].prev)

    def _remove_node(self, node: int) -> int:
        hull = self._hull
        hull[hull[node].prev].next = hull[node].next
        hull[hull[node].next].prev = hull[node].prev
        hull[node].removed = True
        return hull[node].prev

    def _legalize(self, a: int, pts: list[Point]) -> int:
        """Flip edges from ``a`` until the Delaunay condition holds."""
        triangles = self.triangles
        halfedges = self.halfedges
        pending: list[int] = []
        while True:
            b = halfedges[a]
            a0 = a - a % 3
            al = a0 + (a + 1) % 3
            ar = a0 + (a + 2) % 3

            if b >= 0:
                b0 = b - b % 3
                bl = b0 + (b + 2) % 3
                p0 = triangles[ar]
                pr = triangles[a]
                pl = triangles[al]
                p1 = triangles[bl]
                if _in_circle(*pts[p0], *pts[pr], *pts[pl], *pts[p1]):
                    triangles[a] = p1
                    triangles[b] = p0
                    self._link(a, halfedges[bl])
                    self._link(b, halfedges[ar])
                    self._link(ar, bl)
                    pending.append(b0 + (b + 1) % 3)
                    continue

            if not pending:
                return ar
            a = pending.pop()

    def _new_node(self, i: int, pts: list[Point]) -> int:
        node = len(self._hull)
        x, y = pts[i]
        self._hull.append(HullNode(i=i, x=x, y=y, prev=node, next=node))
        return node

    def _insert_node(self, i: int, prev: int, pts: list[Point]) -> int:
        hull = self._hull
        node = self._new_node(i, pts)
        hull[node].next = hull[prev].next
        hull[node].prev = prev
        hull[hull[node].next].prev = node
        hull[prev].next = node
        return node

    def _hash_key(self, x: float, y: float) -> int:
        dx = x - self._center_x
        dy = y - self._center_y
        # pseudo-angle, monotonic in the real angle
        den = abs(dx) + abs(dy)
        p = 1 - dx / den if den != 0 else 0.0
        nom = 2 + (-p if dy < 0 else p)
        return int(math.floor((self._hash_size - 1) * (nom / 4.0)))

    def _hash_edge(self, e: int) -> None:
        node = self._hull[e]
        self._hash[self._hash_key(node.x, node.y)] = e

    def _add_triangle(self, i0: int, i1: int, i2: int, a: int, b: int, c: int) -> int:
        t = len(self.triangles)
        self.triangles.extend((i0, i1, i2))
        self._link(t, a)
        self._link(t + 1, b)
        self._link(t + 2, c)
        return t

    def _link(self, a: int, b: int) -> None:
        halfedges = self.halfedges
        if a == len(halfedges):
            halfedges.append(b)
        elif a < len(halfedges):
            halfedges[a] = b
        else:
            raise TriangulationError("cannot link edge")
        if b != -1:
            if b == len(halfedges):
                halfedges.append(a)
            elif b < len(halfedges):
                halfedges[b] = a
            else:
                raise TriangulationError("cannot link edge")