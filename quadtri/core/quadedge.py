"""Quad-edge representation of a planar subdivision (Guibas & Stolfi).

Edges live in an arena owned by :class:`QuadEdgeMesh` and are addressed by
integer handles. Quad slot ``q`` holds the four directed records
``4*q + r`` for rotations ``r = 0..3``:

    r = 0   the edge itself, origin -> destination
    r = 1   its dual (rot), crossing it from right face to left face
    r = 2   its reverse (sym)
    r = 3   the inverse dual (rot**-1)

Only two things are stored per record: ``origin`` (a point index, or -1 for
dual records, which index faces rather than vertices) and ``next`` (the next
record counter-clockwise around the same origin). ``rot`` is handle
arithmetic, so four rotations are always the identity, and every other
navigation (``sym``, ``oprev``, ``lnext`` ...) is composed from ``next`` and
``rot`` on demand.

Topology changes only through :meth:`QuadEdgeMesh.splice`. Deleted quads go
on a free list and their slots are reused by :meth:`QuadEdgeMesh.make_edge`.
"""
from __future__ import annotations

import math
from typing import Iterator, List, Optional, Sequence

from .errors import InternalInvariantError

__all__ = ['QuadEdgeMesh', 'rot', 'sym', 'inv_rot', 'NO_ORIGIN']

NO_ORIGIN = -1


def rot(e: int) -> int:
    return (e & ~3) | ((e + 1) & 3)


def sym(e: int) -> int:
    return e ^ 2


def inv_rot(e: int) -> int:
    return (e & ~3) | ((e + 3) & 3)


class QuadEdgeMesh:
    """Arena of quad-edge records."""

    def __init__(self):
        self._next: List[int] = []
        self._origin: List[int] = []
        self._live: List[bool] = []
        self._free: List[int] = []
        self.created = 0
        self.deleted = 0

    # ------------------------------------------------------------------
    # navigation
    # ------------------------------------------------------------------
    def onext(self, e: int) -> int:
        return self._next[e]

    def oprev(self, e: int) -> int:
        return rot(self._next[rot(e)])

    def dnext(self, e: int) -> int:
        return sym(self._next[sym(e)])

    def dprev(self, e: int) -> int:
        return inv_rot(self._next[inv_rot(e)])

    def lnext(self, e: int) -> int:
        return rot(self._next[inv_rot(e)])

    def lprev(self, e: int) -> int:
        return sym(self._next[e])

    def rnext(self, e: int) -> int:
        return inv_rot(self._next[rot(e)])

    def rprev(self, e: int) -> int:
        return self._next[sym(e)]

    def origin(self, e: int) -> int:
        return self._origin[e]

    def dest(self, e: int) -> int:
        return self._origin[sym(e)]

    # ------------------------------------------------------------------
    # primitives
    # ------------------------------------------------------------------
    def make_edge(self, origin: int, dest: int) -> int:
        """Create an isolated edge origin -> dest and return its handle."""
        if self._free:
            q = self._free.pop()
            e = 4 * q
            self._live[q] = True
        else:
            q = len(self._live)
            e = 4 * q
            self._next.extend((0, 0, 0, 0))
            self._origin.extend((NO_ORIGIN,) * 4)
            self._live.append(True)
        self._next[e] = e
        self._next[e + 1] = e + 3
        self._next[e + 2] = e + 2
        self._next[e + 3] = e + 1
        self._origin[e] = origin
        self._origin[e + 1] = NO_ORIGIN
        self._origin[e + 2] = dest
        self._origin[e + 3] = NO_ORIGIN
        self.created += 1
        return e

    def splice(self, a: int, b: int) -> None:
        """Exchange the origin rings of a and b (and their left-face rings).

        Joins two distinct rings into one, or splits a shared ring in two.
        Applying it twice with the same arguments restores the structure.
        """
        live = self._live
        if not (live[a >> 2] and live[b >> 2]):
            raise InternalInvariantError(f"splice on deleted edge ({a}, {b})")
        nxt = self._next
        alpha = rot(nxt[a])
        beta = rot(nxt[b])
        t1 = nxt[b]
        t2 = nxt[a]
        t3 = nxt[beta]
        t4 = nxt[alpha]
        nxt[a] = t1
        nxt[b] = t2
        nxt[alpha] = t3
        nxt[beta] = t4

    def connect_left(self, a: int, b: int) -> int:
        """Add an edge dest(a) -> origin(b) sharing the left face of a and b."""
        e = self.make_edge(self.dest(a), self.origin(b))
        self.splice(e, self.lnext(a))
        self.splice(sym(e), b)
        return e

    def connect_right(self, a: int, b: int) -> int:
        """Add an edge dest(a) -> origin(b) spliced after sym(a) and before b."""
        e = self.make_edge(self.dest(a), self.origin(b))
        self.splice(e, sym(a))
        self.splice(sym(e), self.oprev(b))
        return e

    def delete(self, e: int) -> None:
        """Detach e from both endpoint rings and release its quad."""
        q = e >> 2
        if not self._live[q]:
            raise InternalInvariantError(f"edge {e} deleted twice")
        self.splice(e, self.oprev(e))
        s = sym(e)
        self.splice(s, self.oprev(s))
        self._live[q] = False
        self._free.append(q)
        self.deleted += 1

    # ------------------------------------------------------------------
    # bookkeeping
    # ------------------------------------------------------------------
    def is_live(self, e: int) -> bool:
        return self._live[e >> 2]

    @property
    def num_edges(self) -> int:
        return len(self._live) - len(self._free)

    def edges(self) -> Iterator[int]:
        """Yield the primal (r = 0) handle of every live quad."""
        for q, alive in enumerate(self._live):
            if alive:
                yield 4 * q

    def ring(self, e: int) -> Iterator[int]:
        """Yield the records around origin(e), starting at e, counter-clockwise."""
        f = e
        while True:
            yield f
            f = self._next[f]
            if f == e:
                break

    def length(self, e: int, points: Sequence) -> float:
        a = points[self.origin(e)]
        b = points[self.dest(e)]
        return math.hypot(a[0] - b[0], a[1] - b[1])

    def describe(self, e: int, points: Optional[Sequence] = None) -> str:
        o, d = self.origin(e), self.dest(e)
        if points is None:
            return f"{o}; {d}"
        return f"{points[o]}; {points[d]}"

    def absorb(self, other: 'QuadEdgeMesh', point_offset: int = 0) -> int:
        """Append all records of ``other`` to this arena.

        Handles of ``other`` become ``handle + offset`` where ``offset`` is
        the returned value; primal origins are shifted by ``point_offset``.
        ``other`` must not be used afterwards.
        """
        offset = len(self._next)
        qoff = offset >> 2
        self._next.extend(n + offset for n in other._next)
        self._origin.extend(o + point_offset if o != NO_ORIGIN else NO_ORIGIN
                            for o in other._origin)
        self._live.extend(other._live)
        self._free.extend(q + qoff for q in other._free)
        self.created += other.created
        self.deleted += other.deleted
        return offset

    def check_consistency(self) -> None:
        """Verify ring invariants over all live records.

        Raises InternalInvariantError on the first violation.
        """
        nxt = self._next
        live = self._live
        total = len(nxt)
        for q, alive in enumerate(live):
            if not alive:
                continue
            for r in range(4):
                e = 4 * q + r
                n = nxt[e]
                if not (0 <= n < total) or not live[n >> 2]:
                    raise InternalInvariantError(f"record {e} points at dead record {n}")
                if (n & 1) != (e & 1):
                    raise InternalInvariantError(f"record {e} ring mixes primal and dual records")
                if self.onext(self.oprev(e)) != e:
                    raise InternalInvariantError(f"onext(oprev({e})) != {e}")
                primal = (r & 1) == 0
                if primal and self._origin[e] == NO_ORIGIN:
                    raise InternalInvariantError(f"primal record {e} has no origin")
                if primal and self._origin[n] != self._origin[e]:
                    raise InternalInvariantError(f"ring of {e} mixes origins")
                steps = 0
                f = n
                while f != e:
                    f = nxt[f]
                    steps += 1
                    if steps > total:
                        raise InternalInvariantError(f"ring of record {e} is not closed")
