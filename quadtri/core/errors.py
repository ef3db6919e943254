"""Exception types raised by quadtri."""
from __future__ import annotations


class TriangulationError(Exception):
    """Base class for all quadtri errors."""


class InvalidInputError(TriangulationError, ValueError):
    """The input cannot be triangulated (e.g. fewer than 2 distinct points)."""


class InternalInvariantError(TriangulationError, RuntimeError):
    """The quad-edge structure or the recursion reached an impossible state.

    This signals a defect in the algorithm, not bad input, and is never
    recovered from.
    """


__all__ = ['TriangulationError', 'InvalidInputError', 'InternalInvariantError']
