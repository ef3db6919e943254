"""Tests for the quad-edge arena and its topological primitives."""
import pytest

from quadtri.core.errors import InternalInvariantError
from quadtri.core.geometry import Point
from quadtri.core.quadedge import NO_ORIGIN, QuadEdgeMesh, inv_rot, rot, sym


def make_triangle(mesh):
    """CCW triangle 0 -> 1 -> 2 built the way the 3-point base case does."""
    a = mesh.make_edge(0, 1)
    b = mesh.make_edge(1, 2)
    mesh.splice(sym(a), b)
    c = mesh.connect_left(b, a)
    return a, b, c


class TestHandleArithmetic:

    @pytest.mark.parametrize("e", [0, 1, 2, 3, 8, 13, 42])
    def test_rot_four_times_is_identity(self, e):
        assert rot(rot(rot(rot(e)))) == e

    @pytest.mark.parametrize("e", [0, 1, 2, 3, 8, 13, 42])
    def test_sym_twice_is_identity(self, e):
        assert sym(sym(e)) == e
        assert sym(e) == rot(rot(e))

    @pytest.mark.parametrize("e", [0, 5, 10, 15])
    def test_inv_rot_undoes_rot(self, e):
        assert inv_rot(rot(e)) == e
        assert rot(inv_rot(e)) == e

    def test_rotations_stay_in_the_quad(self):
        for e in range(16):
            assert rot(e) >> 2 == e >> 2
            assert sym(e) >> 2 == e >> 2


class TestMakeEdge:

    def test_isolated_edge(self):
        mesh = QuadEdgeMesh()
        e = mesh.make_edge(3, 7)
        assert mesh.origin(e) == 3
        assert mesh.dest(e) == 7
        assert mesh.origin(rot(e)) == NO_ORIGIN
        assert mesh.onext(e) == e
        assert mesh.onext(sym(e)) == sym(e)
        # both faces of an isolated edge are the same face
        assert mesh.onext(rot(e)) == inv_rot(e)
        assert mesh.lnext(e) == sym(e)
        assert mesh.rnext(e) == sym(e)
        assert mesh.num_edges == 1
        mesh.check_consistency()

    def test_handles_are_primal(self):
        mesh = QuadEdgeMesh()
        handles = [mesh.make_edge(i, i + 1) for i in range(5)]
        assert all(h % 4 == 0 for h in handles)
        assert len(set(handles)) == 5
        assert list(mesh.edges()) == handles


class TestSplice:

    def test_joins_and_splits_origin_rings(self):
        mesh = QuadEdgeMesh()
        a = mesh.make_edge(0, 1)
        b = mesh.make_edge(0, 2)
        mesh.splice(a, b)
        assert mesh.onext(a) == b
        assert mesh.onext(b) == a
        assert list(mesh.ring(a)) == [a, b]
        mesh.check_consistency()
        mesh.splice(a, b)
        assert mesh.onext(a) == a
        assert mesh.onext(b) == b
        mesh.check_consistency()

    def test_splice_on_deleted_edge_raises(self):
        mesh = QuadEdgeMesh()
        a = mesh.make_edge(0, 1)
        b = mesh.make_edge(1, 2)
        mesh.delete(a)
        with pytest.raises(InternalInvariantError):
            mesh.splice(a, b)


class TestConnect:

    def test_connect_left_closes_triangle(self):
        mesh = QuadEdgeMesh()
        a, b, c = make_triangle(mesh)
        assert (mesh.origin(c), mesh.dest(c)) == (2, 0)
        assert mesh.lnext(a) == b
        assert mesh.lnext(b) == c
        assert mesh.lnext(c) == a
        assert mesh.lprev(a) == c
        assert mesh.num_edges == 3
        mesh.check_consistency()

    def test_navigation_identities(self):
        mesh = QuadEdgeMesh()
        a, b, c = make_triangle(mesh)
        for e in (a, b, c, sym(a), sym(b), sym(c)):
            assert mesh.onext(mesh.oprev(e)) == e
            assert mesh.dnext(e) == sym(mesh.onext(sym(e)))
            assert mesh.dprev(mesh.dnext(e)) == e
            assert mesh.rprev(mesh.rnext(e)) == e
            assert mesh.lprev(mesh.lnext(e)) == e
            assert mesh.dest(e) == mesh.origin(sym(e))

    def test_connect_right_links_rings(self):
        mesh = QuadEdgeMesh()
        a = mesh.make_edge(0, 1)
        b = mesh.make_edge(2, 3)
        e = mesh.connect_right(a, b)
        assert (mesh.origin(e), mesh.dest(e)) == (1, 2)
        # e joins the ring at vertex 1 (with sym(a)) and at vertex 2 (with b)
        assert set(mesh.ring(e)) == {e, sym(a)}
        assert set(mesh.ring(sym(e))) == {sym(e), b}
        mesh.check_consistency()


class TestDelete:

    def test_delete_restores_rings_and_reuses_slot(self):
        mesh = QuadEdgeMesh()
        a, b, c = make_triangle(mesh)
        mesh.delete(c)
        assert mesh.num_edges == 2
        assert not mesh.is_live(c)
        assert mesh.onext(a) == a
        assert mesh.onext(sym(b)) == sym(b)
        assert mesh.created == 3 and mesh.deleted == 1
        mesh.check_consistency()
        d = mesh.make_edge(5, 6)
        assert d == c
        assert mesh.is_live(d)
        assert (mesh.origin(d), mesh.dest(d)) == (5, 6)

    def test_double_delete_raises(self):
        mesh = QuadEdgeMesh()
        e = mesh.make_edge(0, 1)
        mesh.delete(e)
        with pytest.raises(InternalInvariantError):
            mesh.delete(e)


class TestConsistencyAndAbsorb:

    def test_dangling_reference_detected(self):
        mesh = QuadEdgeMesh()
        a, b, c = make_triangle(mesh)
        # mark c dead without splicing it out
        mesh._live[c >> 2] = False
        with pytest.raises(InternalInvariantError):
            mesh.check_consistency()

    def test_broken_ring_detected(self):
        mesh = QuadEdgeMesh()
        a, b, c = make_triangle(mesh)
        mesh._next[a] = sym(b)
        with pytest.raises(InternalInvariantError):
            mesh.check_consistency()

    def test_absorb_shifts_handles_and_origins(self):
        left = QuadEdgeMesh()
        make_triangle(left)
        right = QuadEdgeMesh()
        ra, rb, rc = make_triangle(right)
        right.delete(rc)
        offset = left.absorb(right, point_offset=10)
        assert offset == 12
        assert left.num_edges == 5
        assert (left.origin(ra + offset), left.dest(ra + offset)) == (10, 11)
        assert left.lnext(ra + offset) == rb + offset
        assert left.created == 6 and left.deleted == 1
        left.check_consistency()
        # the freed slot of the absorbed arena is reused
        assert left.make_edge(0, 1) == rc + offset

    def test_length_and_describe(self):
        mesh = QuadEdgeMesh()
        pts = [Point(0.0, 0.0), Point(3.0, 4.0)]
        e = mesh.make_edge(0, 1)
        assert mesh.length(e, pts) == 5.0
        assert mesh.describe(e) == "0; 1"
        assert mesh.describe(sym(e), pts) == "3.0, 4.0; 0.0, 0.0"
