"""Tests for the post-hoc triangulation checks."""
import numpy as np

from quadtri.core.conformity import (
    check_triangulation, edge_key_set, expected_edge_count, find_crossing_edges,
    find_delaunay_violations, normalize_edge,
)

SQUARE = np.array([[0, 0], [1, 0], [1, 1], [0, 1]], dtype=float)


def test_normalize_edge():
    assert normalize_edge(5, 1) == (1, 5)
    assert normalize_edge(1, 5) == (1, 5)
    assert edge_key_set([(2, 1), (1, 2), (0, 3)]) == {(1, 2), (0, 3)}


def test_expected_edge_count():
    # triangle, square, square with centre point
    assert expected_edge_count(3, 3) == 3
    assert expected_edge_count(4, 4) == 5
    assert expected_edge_count(5, 4) == 8


def test_valid_square_passes():
    edges = [(0, 1), (1, 2), (2, 3), (3, 0), (0, 2)]
    tris = [(0, 1, 2), (0, 2, 3)]
    ok, msgs = check_triangulation(SQUARE, edges, tris)
    assert ok, msgs


def test_crossing_diagonals_detected():
    edges = [(0, 1), (1, 2), (2, 3), (3, 0), (0, 2), (1, 3)]
    assert find_crossing_edges(SQUARE, edges) == [(4, 5)]
    ok, msgs = check_triangulation(SQUARE, edges)
    assert not ok
    assert any('crossing' in m for m in msgs)


def test_empty_circle_violation_detected():
    # kite where the short diagonal is the Delaunay one
    pts = np.array([[0.0, 0.0], [2.0, -0.5], [4.0, 0.0], [2.0, 0.5]])
    bad_tris = [(0, 1, 2), (0, 2, 3)]
    assert find_delaunay_violations(pts, bad_tris)
    good_tris = [(0, 1, 3), (1, 2, 3)]
    assert find_delaunay_violations(pts, good_tris) == []


def test_out_of_range_and_degenerate_edges():
    ok, msgs = check_triangulation(SQUARE, [(0, 9)])
    assert not ok
    ok, msgs = check_triangulation(SQUARE, [(0, 0), (0, 1), (1, 0)])
    assert not ok
    assert any('itself' in m for m in msgs)
    assert any('duplicate' in m for m in msgs)


def test_euler_mismatch_reported():
    edges = [(0, 1), (1, 2), (2, 3), (3, 0), (0, 2)]
    ok, msgs = check_triangulation(SQUARE, edges, [(0, 1, 2)])
    assert not ok
    assert any('Euler' in m for m in msgs)
