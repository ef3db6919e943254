"""Structural and Delaunay checks on a finished triangulation.

These work on plain arrays (point coordinates, edge index pairs, triangle
index triples) so they can check any triangulation, not only ours.
"""
from __future__ import annotations

from typing import List, Tuple

import numpy as np

from .geometry import in_circle_vectorized, vectorized_seg_intersect

__all__ = [
    'normalize_edge', 'edge_key_set', 'expected_edge_count',
    'find_crossing_edges', 'find_delaunay_violations', 'check_triangulation',
]


def normalize_edge(u: int, v: int) -> Tuple[int, int]:
    """Canonical (min, max) key for an undirected edge."""
    return (u, v) if u <= v else (v, u)


def edge_key_set(edges) -> set:
    return {normalize_edge(int(a), int(b)) for a, b in edges}


def expected_edge_count(n: int, hull_size: int) -> int:
    """Edge count of any triangulation of n points in general position with h hull vertices."""
    return 3 * n - 2 * hull_size - 3


def find_crossing_edges(points, edges) -> List[Tuple[int, int]]:
    """Return index pairs (i, j) of edges that properly cross each other."""
    pts = np.asarray(points, dtype=np.float64)
    E = np.asarray(edges, dtype=np.intp).reshape(-1, 2)
    m = len(E)
    if m < 2:
        return []
    a = pts[E[:, 0]]
    b = pts[E[:, 1]]
    minx = np.minimum(a[:, 0], b[:, 0]); maxx = np.maximum(a[:, 0], b[:, 0])
    miny = np.minimum(a[:, 1], b[:, 1]); maxy = np.maximum(a[:, 1], b[:, 1])
    crossings = []
    for i in range(m - 1):
        j = np.arange(i + 1, m)
        # quick bbox reject
        near = ~((maxx[i] < minx[j]) | (maxx[j] < minx[i]) | (maxy[i] < miny[j]) | (maxy[j] < miny[i]))
        j = j[near]
        if j.size == 0:
            continue
        k = j.size
        hit = vectorized_seg_intersect(np.repeat(a[i:i + 1], k, axis=0), np.repeat(b[i:i + 1], k, axis=0),
                                       a[j], b[j])
        crossings.extend((i, int(jj)) for jj in j[hit])
    return crossings


def find_delaunay_violations(points, triangles) -> List[Tuple[int, int]]:
    """Return (triangle row, point index) pairs where a point lies inside a circumcircle."""
    pts = np.asarray(points, dtype=np.float64)
    T = np.asarray(triangles, dtype=np.intp).reshape(-1, 3)
    out = []
    for t, (i, j, k) in enumerate(T):
        inside = in_circle_vectorized(pts, pts[i], pts[j], pts[k], exclude=(i, j, k))
        out.extend((t, int(p)) for p in np.nonzero(inside)[0])
    return out


def check_triangulation(points, edges, triangles=None) -> Tuple[bool, List[str]]:
    """Check endpoints, planarity, face count and (optionally) the empty-circle property.

    Returns (ok, messages) where messages describe every failed check.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    E = np.asarray(edges, dtype=np.intp).reshape(-1, 2)
    msgs: List[str] = []
    n = len(pts)
    if E.size and (E.min() < 0 or E.max() >= n):
        msgs.append("edge endpoint index out of range")
        return False, msgs
    if np.any(E[:, 0] == E[:, 1]):
        msgs.append("degenerate edge joins a point to itself")
    keys = edge_key_set(E)
    if len(keys) != len(E):
        msgs.append(f"{len(E) - len(keys)} duplicate edges")
    crossing = find_crossing_edges(pts, E)
    if crossing:
        msgs.append(f"{len(crossing)} crossing edge pairs, first: {crossing[0]}")
    if triangles is not None:
        T = np.asarray(triangles, dtype=np.intp).reshape(-1, 3)
        # Euler: V - E + F = 2 with the outer face counted once
        if n - len(keys) + len(T) + 1 != 2:
            msgs.append(f"Euler relation fails: V={n} E={len(keys)} F={len(T) + 1}")
        for t in T:
            a, b, c = (int(v) for v in t)
            for u, v in ((a, b), (b, c), (c, a)):
                if normalize_edge(u, v) not in keys:
                    msgs.append(f"triangle {tuple(int(v) for v in t)} uses missing edge {(u, v)}")
                    break
        violations = find_delaunay_violations(pts, T)
        if violations:
            msgs.append(f"{len(violations)} empty-circle violations, first: {violations[0]}")
    return (not msgs), msgs
