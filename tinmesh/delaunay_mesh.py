"""Incremental Delaunay triangulation built on the quad-edge structure."""

from __future__ import annotations

import math
import random
from typing import Optional

Point2D = tuple[float, float]

EPS = 1e-6


def _tri_area(a: Point2D, b: Point2D, c: Point2D) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (b[1] - a[1]) * (c[0] - a[0])


def _ccw(a: Point2D, b: Point2D, c: Point2D) -> bool:
    return _tri_area(a, b, c) > 0


def _in_circle(a: Point2D, b: Point2D, c: Point2D, d: Point2D) -> bool:
    def sq(p: Point2D) -> float:
        return p[0] * p[0] + p[1] * p[1]

    det = (
        sq(a) * _tri_area(b, c, d)
        - sq(b) * _tri_area(a, c, d)
        + sq(c) * _tri_area(a, b, d)
        - sq(d) * _tri_area(a, b, c)
    )
    return det > EPS


def _line_eval(p: Point2D, q: Point2D, x: Point2D) -> float:
    tx = q[0] - p[0]
    ty = q[1] - p[1]
    length = math.hypot(tx, ty)
    a = ty / length
    b = -tx / length
    c = -(a * p[0] + b * p[1])
    return a * x[0] + b * x[1] + c


class QuadEdge:
    """One directed edge of a quad-edge record of four rotated edges."""

    __slots__ = ("qnext", "qprev", "next", "data", "lface")

    def __init__(self) -> None:
        self.qnext: QuadEdge = self
        self.qprev: QuadEdge = self
        self.next: QuadEdge = self
        self.data: Optional[Point2D] = None
        self.lface: Optional[DelaunayTriangle] = None

    @classmethod
    def make(cls) -> QuadEdge:
        """Create an isolated edge together with its three rotations."""
        e0, e1, e2, e3 = cls(), cls(), cls(), cls()
        ring = (e0, e1, e2, e3)
        for k, e in enumerate(ring):
            e.qnext = ring[(k + 1) % 4]
            e.qprev = ring[(k - 1) % 4]
        e0.next = e0
        e1.next = e3
        e2.next = e2
        e3.next = e1
        return e0

    @property
    def rot(self) -> QuadEdge:
        return self.qnext

    @property
    def inv_rot(self) -> QuadEdge:
        return self.qprev

    @property
    def sym(self) -> QuadEdge:
        return self.qnext.qnext

    @property
    def onext(self) -> QuadEdge:
        return self.next

    @property
    def oprev(self) -> QuadEdge:
        return self.rot.onext.rot

    @property
    def dnext(self) -> QuadEdge:
        return self.sym.onext.sym

    @property
    def dprev(self) -> QuadEdge:
        return self.inv_rot.onext.inv_rot

    @property
    def lnext(self) -> QuadEdge:
        return self.inv_rot.onext.rot

    @property
    def lprev(self) -> QuadEdge:
        return self.onext.sym

    @property
    def rnext(self) -> QuadEdge:
        return self.rot.onext.inv_rot

    @property
    def rprev(self) -> QuadEdge:
        return self.sym.onext

    @property
    def org(self) -> Point2D:
        return self.data

    @property
    def dest(self) -> Point2D:
        return self.sym.data

    def set_end_points(self, org: Point2D, dest: Point2D) -> None:
        self.data = (float(org[0]), float(org[1]))
        self.sym.data = (float(dest[0]), float(dest[1]))


def splice(a: QuadEdge, b: QuadEdge) -> None:
    """Join or separate the origin rings of ``a`` and ``b``; its own inverse."""
    alpha = a.onext.rot
    beta = b.onext.rot
    t1 = b.onext
    t2 = a.onext
    t3 = beta.onext
    t4 = alpha.onext
    a.next = t1
    b.next = t2
    alpha.next = t3
    beta.next = t4


def _right_of(x: Point2D, e: QuadEdge) -> bool:
    return _ccw(x, e.dest, e.org)


def _left_of(x: Point2D, e: QuadEdge) -> bool:
    return _ccw(x, e.org, e.dest)


class DelaunayTriangle:
    """A mesh face, identified by an anchor edge that has it on its left."""

    def __init__(self, anchor: QuadEdge):
        self.anchor = anchor
        self.reshape(anchor)

    def dont_anchor(self, e: QuadEdge) -> None:
        """Move the anchor off ``e`` if it is anchored there."""
        if self.anchor is e:
            self.anchor = e.lnext

    def reshape(self, e: QuadEdge) -> None:
        """Make this face the left face of ``e`` and its two neighbouring edges."""
        self.anchor = e
        e.lface = self
        e.lnext.lface = self
        e.lprev.lface = self

    @property
    def points(self) -> tuple[Point2D, Point2D, Point2D]:
        a = self.anchor
        return (a.org, a.dest, a.lprev.org)


class DelaunayMesh:
    """A Delaunay triangulation grown one point at a time inside a quadrilateral."""

    def __init__(self, seed: int = 0) -> None:
        self._faces: list[DelaunayTriangle] = []
        self._starting_edge: Optional[QuadEdge] = None
        self._rng = random.Random(seed)

    def _make_face(self, e: QuadEdge) -> DelaunayTriangle:
        t = DelaunayTriangle(e)
        self._faces.append(t)
        return t

    def init_mesh(self, a: Point2D, b: Point2D, c: Point2D, d: Point2D) -> None:
        """Start with the quadrilateral a, b, c, d split along the diagonal a-c."""
        ea = QuadEdge.make()
        ea.set_end_points(a, b)

        eb = QuadEdge.make()
        splice(ea.sym, eb)
        eb.set_end_points(b, c)

        ec = QuadEdge.make()
        splice(eb.sym, ec)
        ec.set_end_points(c, d)

        ed = QuadEdge.make()
        splice(ec.sym, ed)
        ed.set_end_points(d, a)
        splice(ed.sym, ea)

        diag = QuadEdge.make()
        splice(ed.sym, diag)
        splice(eb.sym, diag.sym)
        diag.set_end_points(a, c)

        self._starting_edge = ea
        self._faces = []
        self._make_face(ea.sym)
        self._make_face(ec.sym)

    def delete_edge(self, e: QuadEdge) -> None:
        splice(e, e.oprev)
        splice(e.sym, e.sym.oprev)

    def connect(self, a: QuadEdge, b: QuadEdge) -> QuadEdge:
        """A new edge from the destination of ``a`` to the origin of ``b``."""
        e = QuadEdge.make()
        splice(e, a.lnext)
        splice(e.sym, b)
        e.set_end_points(a.dest, b.org)
        return e

    def swap(self, e: QuadEdge) -> None:
        """Flip ``e`` to the other diagonal of its two adjacent triangles."""
        f1 = e.lface
        f2 = e.sym.lface
        a = e.oprev
        b = e.sym.oprev
        splice(e, a)
        splice(e.sym, b)
        splice(e, a.lnext)
        splice(e.sym, b.lnext)
        e.set_end_points(a.dest, b.dest)
        f1.reshape(e)
        f2.reshape(e.sym)

    def _ccw_boundary(self, e: QuadEdge) -> bool:
        return not _right_of(e.oprev.dest, e)

    def _on_edge(self, x: Point2D, e: QuadEdge) -> bool:
        t1 = math.hypot(x[0] - e.org[0], x[1] - e.org[1])
        t2 = math.hypot(x[0] - e.dest[0], x[1] - e.dest[1])
        if t1 < EPS or t2 < EPS:
            return True
        t3 = math.hypot(e.org[0] - e.dest[0], e.org[1] - e.dest[1])
        if t1 > t3 or t2 > t3:
            return False
        return abs(_line_eval(e.org, e.dest, x)) < EPS

    @staticmethod
    def _is_interior(e: QuadEdge) -> bool:
        return e.lnext.lnext.lnext is e and e.rnext.rnext.rnext is e

    @staticmethod
    def _should_swap(x: Point2D, e: QuadEdge) -> bool:
        t = e.oprev
        return _in_circle(e.org, t.dest, e.dest, x)

    def locate(self, x: Point2D, start: Optional[QuadEdge] = None) -> QuadEdge:
        """An edge of the triangle containing ``x``, or one starting or ending at ``x``."""
        if start is None:
            start = self._starting_edge
        if start is None:
            raise ValueError("mesh is not initialised")
        x = (float(x[0]), float(x[1]))
        e = start
        t = _tri_area(x, e.dest, e.org)
        if t > 0:
            t = -t
            e = e.sym

        while True:
            eo = e.onext
            ed = e.dprev
            to = _tri_area(x, eo.dest, eo.org)
            td = _tri_area(x, ed.dest, ed.org)

            if td > 0:
                if to > 0 or (to == 0 and t == 0):
                    self._starting_edge = e
                    return e
                t = to
                e = eo
            elif to > 0:
                if td == 0 and t == 0:
                    self._starting_edge = e
                    return e
                t = td
                e = ed
            elif t == 0 and not _left_of(eo.dest, e):
                e = e.sym
            elif self._rng.getrandbits(1) == 0:
                t = to
                e = eo
            else:
                t = td
                e = ed

    def _spoke(self, x: Point2D, e: QuadEdge) -> QuadEdge:
        new_faces: list[DelaunayTriangle] = []
        boundary_edge: Optional[QuadEdge] = None

        lface = e.lface
        lface.dont_anchor(e)
        new_faces.append(lface)

        if self._on_edge(x, e):
            if self._ccw_boundary(e):
                # deleted only after the new edges are in place
                boundary_edge = e
            else:
                sym_lface = e.sym.lface
                new_faces.append(sym_lface)
                sym_lface.dont_anchor(e.sym)
                e = e.oprev
                self.delete_edge(e.onext)

        base = QuadEdge.make()
        base.set_end_points(e.org, x)
        splice(base, e)

        starting = base
        self._starting_edge = base
        while True:
            base = self.connect(e, base.sym)
            e = base.oprev
            if e.lnext is starting:
                break

        if boundary_edge is not None:
            self.delete_edge(boundary_edge)

        base = starting.rprev if boundary_edge is not None else starting.sym
        while True:
            if new_faces:
                new_faces.pop().reshape(base)
            else:
                self._make_face(base)
            base = base.onext
            if base is starting.sym:
                break

        return starting

    def _optimize(self, x: Point2D, s: QuadEdge) -> None:
        start_spoke = s
        spoke = s
        while True:
            e = spoke.lnext
            if self._is_interior(e) and self._should_swap(x, e):
                self.swap(e)
            else:
                spoke = spoke.onext
                if spoke is start_spoke:
                    break

    def insert(self, x: Point2D, tri: Optional[DelaunayTriangle] = None) -> None:
        """Add point ``x``, restoring the Delaunay condition around it."""
        x = (float(x[0]), float(x[1]))
        e = self.locate(x, tri.anchor) if tri is not None else self.locate(x)
        if x == e.org or x == e.dest:
            self._optimize(x, e)
        else:
            start_spoke = self._spoke(x, e)
            self._optimize(x, start_spoke.sym)

    def triangles(self) -> list[tuple[Point2D, Point2D, Point2D]]:
        """The corner points of every face, in face creation order."""
        return [face.points for face in self._faces]