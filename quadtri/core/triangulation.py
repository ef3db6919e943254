"""Divide-and-conquer Delaunay triangulation (Guibas & Stolfi, 1985).

Points are deduplicated, sorted by (x, y) and split recursively. Ranges of
two or three points are triangulated directly; larger ranges are split at
the midpoint and the two triangulations are zipped together along their
lower common tangent, legalizing edges with the in-circle test as the seam
advances upward. The final quad-edge structure is walked once to list the
edges.
"""
from __future__ import annotations

import time
from collections import deque
from dataclasses import dataclass, field
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

import numpy as np

from .config import TriangulatorConfig
from .errors import InternalInvariantError, InvalidInputError
from .geometry import (
    Point, in_circle, is_counter_clockwise, is_left_of, is_right_of, sort_points, unique_points,
)
from .logging_utils import get_logger
from .parallel_operations import Block, midpoint, plan_blocks, run_blocks
from .quadedge import QuadEdgeMesh, sym
from .stats import TriangulationStats

logger = get_logger(__name__)

__all__ = [
    'Partition', 'Triangulator', 'TriangulationResult',
    'triangulate', 'triangulate_result', 'delaunay_edges', 'build_block',
]


class Partition(NamedTuple):
    """Outer hull edges of a sub-triangulation.

    ``left`` leaves the leftmost vertex counter-clockwise along the hull,
    ``right`` leaves the rightmost vertex clockwise along the hull.
    """
    left: int
    right: int


@dataclass
class TriangulationResult:
    points: List[Point]
    edges: List[Tuple[Point, Point]]
    edge_index: np.ndarray
    triangles: np.ndarray
    stats: TriangulationStats = field(default_factory=TriangulationStats)

    def points_array(self) -> np.ndarray:
        return np.asarray(self.points, dtype=np.float64).reshape(-1, 2)


class Triangulator:
    """One triangulation run over a fixed point set.

    The constructor normalizes the input (drops None entries, collapses
    tolerant duplicates, sorts); :meth:`run` builds the triangulation.
    """

    def __init__(self, points: Iterable, config: Optional[TriangulatorConfig] = None):
        self.config = config or TriangulatorConfig()
        if points is None:
            raise InvalidInputError("points must be an iterable of 2D points, got None")
        raw = list(points)
        unique = unique_points(raw, self.config.tolerance)
        if len(unique) < 2:
            raise InvalidInputError(
                f"need at least 2 distinct points to triangulate, got {len(unique)}")
        self.points: List[Point] = sort_points(unique, self.config.tolerance)
        self.mesh = QuadEdgeMesh()
        self.stats = TriangulationStats(n_input=len(raw), n_unique=len(self.points))

    @classmethod
    def from_sorted(cls, points: Sequence[Point],
                    config: Optional[TriangulatorConfig] = None) -> 'Triangulator':
        """Build a Triangulator over points that are already unique and sorted."""
        self = cls.__new__(cls)
        self.config = config or TriangulatorConfig()
        self.points = list(points)
        self.mesh = QuadEdgeMesh()
        self.stats = TriangulationStats(n_input=len(self.points), n_unique=len(self.points))
        return self

    # ------------------------------------------------------------------
    # predicates on point indices
    # ------------------------------------------------------------------
    def _ccw(self, a: int, b: int, c: int) -> bool:
        P = self.points
        return is_counter_clockwise(P[a], P[b], P[c])

    def _left_of(self, p: int, e: int) -> bool:
        P = self.points
        return is_left_of(P[p], P[self.mesh.origin(e)], P[self.mesh.dest(e)])

    def _right_of(self, p: int, e: int) -> bool:
        P = self.points
        return is_right_of(P[p], P[self.mesh.origin(e)], P[self.mesh.dest(e)])

    def _in_circle(self, p: int, a: int, b: int, c: int) -> bool:
        P = self.points
        return in_circle(P[p], P[a], P[b], P[c])

    # ------------------------------------------------------------------
    # divide
    # ------------------------------------------------------------------
    def subdivide(self, lo: int, hi: int) -> Partition:
        """Triangulate the sorted points in [lo, hi) and return the hull partition."""
        mesh = self.mesh
        n = hi - lo
        if n < 2:
            raise InternalInvariantError(f"sub-range [{lo}, {hi}) has fewer than 2 points")
        if n == 2:
            a = mesh.make_edge(lo, lo + 1)
            return Partition(a, sym(a))
        if n == 3:
            s1, s2, s3 = lo, lo + 1, lo + 2
            a = mesh.make_edge(s1, s2)
            b = mesh.make_edge(s2, s3)
            mesh.splice(sym(a), b)
            if self._ccw(s1, s2, s3):
                mesh.connect_left(b, a)
                return Partition(a, sym(b))
            if self._ccw(s1, s3, s2):
                c = mesh.connect_left(b, a)
                return Partition(sym(c), c)
            # collinear: open path, no closing edge
            return Partition(a, sym(b))
        mid = midpoint(lo, hi)
        left = self.subdivide(lo, mid)
        right = self.subdivide(mid, hi)
        return self.merge(left, right)

    # ------------------------------------------------------------------
    # merge
    # ------------------------------------------------------------------
    def lower_common_tangent(self, ldi: int, rdi: int) -> Tuple[int, int]:
        """Walk ldi / rdi down the facing hulls until they see each other."""
        mesh = self.mesh
        while True:
            if self._left_of(mesh.origin(rdi), ldi):
                ldi = mesh.lnext(ldi)
            elif self._right_of(mesh.origin(ldi), rdi):
                rdi = mesh.rprev(rdi)
            else:
                return ldi, rdi

    def merge(self, left: Partition, right: Partition) -> Partition:
        """Zip two adjacent triangulations together from the bottom up."""
        mesh = self.mesh
        ldo, ldi = left
        rdi, rdo = right
        ldi, rdi = self.lower_common_tangent(ldi, rdi)

        # basel runs right -> left along the current seam
        basel = mesh.connect_left(sym(rdi), ldi)
        if mesh.origin(ldi) == mesh.origin(ldo):
            ldo = sym(basel)
        if mesh.origin(rdi) == mesh.origin(rdo):
            rdo = basel

        while True:
            b_org = mesh.origin(basel)
            b_dst = mesh.dest(basel)

            lcand = mesh.onext(sym(basel))
            if self._ccw(mesh.dest(lcand), b_dst, b_org):
                while self._in_circle(mesh.dest(mesh.onext(lcand)), b_dst, b_org, mesh.dest(lcand)):
                    t = mesh.onext(lcand)
                    mesh.delete(lcand)
                    lcand = t

            rcand = mesh.oprev(basel)
            if self._ccw(mesh.dest(rcand), b_dst, b_org):
                while self._in_circle(mesh.dest(mesh.oprev(rcand)), b_dst, b_org, mesh.dest(rcand)):
                    t = mesh.oprev(rcand)
                    mesh.delete(rcand)
                    rcand = t

            lvalid = self._ccw(mesh.dest(lcand), b_dst, b_org)
            rvalid = self._ccw(mesh.dest(rcand), b_dst, b_org)
            if not lvalid and not rvalid:
                # upper common tangent reached
                break
            if not lvalid or (rvalid and self._in_circle(
                    mesh.dest(rcand), mesh.dest(lcand), mesh.origin(lcand), mesh.origin(rcand))):
                basel = mesh.connect_left(rcand, sym(basel))
            else:
                basel = sym(mesh.connect_right(lcand, basel))

        self.stats.merges += 1
        return Partition(ldo, rdo)

    # ------------------------------------------------------------------
    # extraction
    # ------------------------------------------------------------------
    def extract_edges(self, start: int) -> List[Tuple[int, int]]:
        """List every edge reachable from ``start`` once, as (origin, dest) indices.

        Vertices are visited breadth first; for each one the ring of outgoing
        edges is walked until it returns to the edge the vertex was entered by.
        """
        mesh = self.mesh
        seen_quads = set()
        seen_vertices = {mesh.origin(start)}
        queue = deque([start])
        out: List[Tuple[int, int]] = []
        while queue:
            first = queue.popleft()
            for e in mesh.ring(first):
                d = mesh.dest(e)
                q = e >> 2
                if q not in seen_quads:
                    seen_quads.add(q)
                    out.append((mesh.origin(e), d))
                if d not in seen_vertices:
                    seen_vertices.add(d)
                    queue.append(sym(e))
        return out

    def extract_triangles(self) -> np.ndarray:
        """Bounded triangular faces as CCW index triples, smallest index first."""
        mesh = self.mesh
        tris = set()
        for q in mesh.edges():
            for e in (q, sym(q)):
                f1 = mesh.lnext(e)
                f2 = mesh.lnext(f1)
                if mesh.lnext(f2) != e:
                    continue
                a, b, c = mesh.origin(e), mesh.origin(f1), mesh.origin(f2)
                if not self._ccw(a, b, c):
                    continue
                if b < a and b < c:
                    a, b, c = b, c, a
                elif c < a and c < b:
                    a, b, c = c, a, b
                tris.add((a, b, c))
        return np.array(sorted(tris), dtype=np.intp).reshape(-1, 3)

    # ------------------------------------------------------------------
    # driver
    # ------------------------------------------------------------------
    def _run_parallel(self) -> Partition:
        cfg = self.config
        tree, blocks = plan_blocks(0, len(self.points), cfg.parallel_threshold)
        results = run_blocks(build_block, self.points, blocks,
                             backend=cfg.backend, max_workers=cfg.max_workers)
        self.stats.leaf_tasks = len(blocks)
        built = dict(zip(blocks, results))

        def _join(node) -> Partition:
            if isinstance(node, Block):
                mesh, part, merges = built[node]
                offset = self.mesh.absorb(mesh, point_offset=node.lo)
                self.stats.merges += merges
                return Partition(part.left + offset, part.right + offset)
            return self.merge(_join(node[0]), _join(node[1]))

        return _join(tree)

    def run(self) -> TriangulationResult:
        """Triangulate and collect the result.

        ``config.log_level`` applies to the module logger only while this
        call runs; its previous level is restored afterwards.
        """
        if self.config.log_level is None:
            return self._run()
        saved = logger.level
        get_logger(__name__, self.config.log_level)
        try:
            return self._run()
        finally:
            logger.setLevel(saved)

    def _run(self) -> TriangulationResult:
        cfg = self.config
        t0 = time.perf_counter()
        n = len(self.points)
        if cfg.parallel and n > cfg.parallel_threshold:
            part = self._run_parallel()
        else:
            part = self.subdivide(0, n)
        if cfg.check_consistency:
            self.mesh.check_consistency()

        pairs = self.extract_edges(part.left)
        if len(pairs) != self.mesh.num_edges:
            raise InternalInvariantError(
                f"boundary walk reached {len(pairs)} of {self.mesh.num_edges} live edges")
        triangles = self.extract_triangles()
        edge_index = np.array(pairs, dtype=np.intp).reshape(-1, 2)
        P = self.points
        edges = [(P[i], P[j]) for i, j in pairs]

        st = self.stats
        st.n_edges = len(pairs)
        st.n_triangles = len(triangles)
        st.edges_created = self.mesh.created
        st.edges_deleted = self.mesh.deleted
        st.time_total = time.perf_counter() - t0
        logger.info("triangulated %d points (%d input) into %d edges / %d triangles in %.3fs",
                 st.n_unique, st.n_input, st.n_edges, st.n_triangles, st.time_total)
        logger.debug("merges=%d leaf_tasks=%d created=%d deleted=%d",
                  st.merges, st.leaf_tasks, st.edges_created, st.edges_deleted)
        return TriangulationResult(points=list(P), edges=edges, edge_index=edge_index,
                                   triangles=triangles, stats=st)


def build_block(points: Sequence[Point]):
    """Worker entry point: triangulate one sorted block on a fresh arena.

    Returns (mesh, partition, merges) with point indices local to the block.
    """
    tri = Triangulator.from_sorted(points)
    part = tri.subdivide(0, len(tri.points))
    return tri.mesh, part, tri.stats.merges


def triangulate_result(points: Iterable,
                       config: Optional[TriangulatorConfig] = None) -> TriangulationResult:
    """Triangulate ``points`` and return edges, triangles and run statistics."""
    return Triangulator(points, config).run()


def triangulate(points: Iterable,
                config: Optional[TriangulatorConfig] = None) -> List[Tuple[Point, Point]]:
    """Delaunay triangulation edges of ``points`` as (Point, Point) pairs.

    None entries are dropped and tolerant duplicates collapsed; at least two
    distinct points are required. Edge order is unspecified.
    """
    return triangulate_result(points, config).edges


def delaunay_edges(xy, config: Optional[TriangulatorConfig] = None) -> Tuple[np.ndarray, np.ndarray]:
    """Array interface: (N,2) coordinates in, (unique points (n,2), edges (m,2)) out.

    Edge rows index into the returned point array, which is deduplicated and
    sorted by (x, y).
    """
    arr = np.asarray(xy, dtype=np.float64)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise InvalidInputError(f"expected an (N, 2) array, got shape {arr.shape}")
    res = triangulate_result(arr.tolist(), config)
    return res.points_array(), res.edge_index
