"""Point type and geometric predicates.

Scalar predicates work on :class:`Point` values and are what the
triangulator calls in its inner loops. The ``*_vectorized`` variants take
numpy arrays and are used by the conformity checks.

The orientation and in-circle tests use plain double precision and a strict
sign convention: collinear triples are not counter-clockwise and points on a
circle are not inside it. Near-collinear or near-cocircular inputs may get
inconsistent answers from rounding; that is a known limitation, not an error.
"""
from __future__ import annotations

import math
from functools import cmp_to_key
from typing import Iterable, List, NamedTuple, Optional, Sequence

import numpy as np

from .constants import EPS_POINT
from .errors import InvalidInputError

__all__ = [
    'Point', 'as_point', 'points_equal', 'compare_points',
    'distance', 'distance_squared', 'orient', 'is_counter_clockwise',
    'is_left_of', 'is_right_of', 'in_circle',
    'unique_points', 'sort_points',
    'in_circle_vectorized', 'vectorized_seg_intersect',
]


class Point(NamedTuple):
    """Immutable 2D coordinate."""
    x: float
    y: float

    def __str__(self):
        return f"{self.x}, {self.y}"


def as_point(obj) -> Point:
    """Coerce a Point, pair or array row to a Point.

    Point instances are returned unchanged so callers get their own objects
    back in the triangulation output.
    """
    if isinstance(obj, Point):
        return obj
    try:
        x, y = obj
        return Point(float(x), float(y))
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"cannot read {obj!r} as a 2D point") from exc


def points_equal(a: Point, b: Point, tol: float = EPS_POINT) -> bool:
    """True when both coordinate differences are below ``tol``."""
    return abs(a.x - b.x) < tol and abs(a.y - b.y) < tol


def compare_points(a: Point, b: Point, tol: float = EPS_POINT) -> int:
    """Lexicographic (x, y) comparison; tolerant-equal points compare as 0."""
    if points_equal(a, b, tol):
        return 0
    if a.x != b.x:
        return -1 if a.x < b.x else 1
    if a.y != b.y:
        return -1 if a.y < b.y else 1
    return 0


def distance_squared(a: Point, b: Point) -> float:
    dx = a.x - b.x
    dy = a.y - b.y
    return dx * dx + dy * dy


def distance(a: Point, b: Point) -> float:
    return math.sqrt(distance_squared(a, b))


def orient(a: Point, b: Point, c: Point) -> float:
    """2D orientation (signed area * 2) for points a, b, c.

    Positive when (a, b, c) are counter-clockwise, negative when clockwise,
    zero when collinear.
    """
    return (b.x - a.x) * (c.y - a.y) - (b.y - a.y) * (c.x - a.x)


def is_counter_clockwise(a: Point, b: Point, c: Point) -> bool:
    return orient(a, b, c) > 0.0


def is_left_of(p: Point, a: Point, b: Point) -> bool:
    """True if p lies strictly left of the directed segment a -> b."""
    return is_counter_clockwise(p, a, b)


def is_right_of(p: Point, a: Point, b: Point) -> bool:
    """True if p lies strictly right of the directed segment a -> b."""
    return is_counter_clockwise(p, b, a)


def in_circle(p: Point, a: Point, b: Point, c: Point) -> bool:
    """True if p lies strictly inside the circle through a, b, c.

    (a, b, c) must be counter-clockwise for the sign to be meaningful. If p
    is one of the three defining points (the same object) the answer is
    False. Lifted terms are evaluated relative to p in double precision.
    """
    if p is a or p is b or p is c:
        return False
    adx = a.x - p.x
    ady = a.y - p.y
    bdx = b.x - p.x
    bdy = b.y - p.y
    cdx = c.x - p.x
    cdy = c.y - p.y
    alift = adx * adx + ady * ady
    blift = bdx * bdx + bdy * bdy
    clift = cdx * cdx + cdy * cdy
    det = (alift * (bdx * cdy - bdy * cdx)
           + blift * (cdx * ady - cdy * adx)
           + clift * (adx * bdy - ady * bdx))
    return det > 0.0


def unique_points(points: Iterable, tol: float = EPS_POINT) -> List[Point]:
    """Drop None entries and collapse tolerant duplicates.

    The first occurrence of each point is kept. Points are hashed into grid
    cells of size ``tol``; any tolerant duplicate lies in one of the 3x3
    neighbouring cells, so the result does not depend on cell boundaries.
    """
    kept: List[Point] = []
    seen = set()
    cells = {}
    for obj in points:
        if obj is None:
            continue
        p = as_point(obj)
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise InvalidInputError(f"point {p!r} has a non-finite coordinate")
        if tol <= 0:
            # exact deduplication
            if (p.x, p.y) not in seen:
                seen.add((p.x, p.y))
                kept.append(p)
            continue
        ci = math.floor(p.x / tol)
        cj = math.floor(p.y / tol)
        duplicate = False
        for di in (-1, 0, 1):
            for dj in (-1, 0, 1):
                for q in cells.get((ci + di, cj + dj), ()):
                    if points_equal(p, q, tol):
                        duplicate = True
                        break
                if duplicate:
                    break
            if duplicate:
                break
        if not duplicate:
            cells.setdefault((ci, cj), []).append(p)
            kept.append(p)
    return kept


def sort_points(points: Sequence[Point], tol: float = EPS_POINT) -> List[Point]:
    """Sort deduplicated points by compare_points."""
    return sorted(points, key=cmp_to_key(lambda a, b: compare_points(a, b, tol)))


# ---------------------------------------------------------------------------
# numpy batch predicates
# ---------------------------------------------------------------------------

def _orient_rows(a, b, c):
    """Row-wise orientation of (a[i], b[i], c[i]) for (M,2) arrays."""
    return (b[:, 0] - a[:, 0]) * (c[:, 1] - a[:, 1]) - (b[:, 1] - a[:, 1]) * (c[:, 0] - a[:, 0])


def in_circle_vectorized(pts, a, b, c, exclude: Optional[Sequence[int]] = None):
    """Boolean mask of pts strictly inside the circle through CCW a, b, c.

    Rows listed in ``exclude`` (typically the indices of a, b, c) are forced
    to False.
    """
    p = np.asarray(pts, dtype=np.float64)
    if p.size == 0:
        return np.zeros((0,), dtype=bool)
    ad = np.asarray(a, dtype=np.float64) - p
    bd = np.asarray(b, dtype=np.float64) - p
    cd = np.asarray(c, dtype=np.float64) - p
    adx, ady = ad[:, 0], ad[:, 1]
    bdx, bdy = bd[:, 0], bd[:, 1]
    cdx, cdy = cd[:, 0], cd[:, 1]
    det = ((adx * adx + ady * ady) * (bdx * cdy - bdy * cdx)
           + (bdx * bdx + bdy * bdy) * (cdx * ady - cdy * adx)
           + (cdx * cdx + cdy * cdy) * (adx * bdy - ady * bdx))
    mask = det > 0.0
    if exclude is not None:
        mask[list(exclude)] = False
    return mask


def vectorized_seg_intersect(a_pts, b_pts, c_pts, d_pts):
    """Strict crossing test for equal-length arrays of segments.

    Returns a boolean array (M,) where element i tells whether segment
    a_pts[i]-b_pts[i] properly crosses c_pts[i]-d_pts[i]. Shared endpoints
    and collinear overlaps do not count as crossings.
    """
    a = np.asarray(a_pts, dtype=np.float64)
    b = np.asarray(b_pts, dtype=np.float64)
    c = np.asarray(c_pts, dtype=np.float64)
    d = np.asarray(d_pts, dtype=np.float64)
    if a.size == 0:
        return np.zeros((0,), dtype=bool)
    # Strict signs: a shared vertex or a collinear overlap gives a zero
    # orientation and is not a crossing. Duplicate edges are reported by
    # check_triangulation on their own.
    o1 = _orient_rows(a, b, c)
    o2 = _orient_rows(a, b, d)
    o3 = _orient_rows(c, d, a)
    o4 = _orient_rows(c, d, b)
    return (o1 * o2 < 0) & (o3 * o4 < 0)
