"""Public package API for quadtri.

Divide-and-conquer Delaunay triangulation of 2D point sets on a quad-edge
structure. This facade provides a flat import surface on top of the
internal implementation package ``quadtri.core``.

Example
-------
    from quadtri import triangulate, Point

    edges = triangulate([Point(0, 0), Point(1, 0), Point(0, 1)])

The deeper modules (``quadtri.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
import logging as _logging
from importlib.metadata import PackageNotFoundError as _PackageNotFoundError
from importlib.metadata import version as _pkg_version

try:
    __version__ = _pkg_version("quadtri")  # populated when installed
except _PackageNotFoundError:  # pragma: no cover - source checkout
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

from .core import constants, conformity, geometry, quadedge, stats  # noqa: E402
from .core.config import TriangulatorConfig  # noqa: E402
from .core.constants import EPS_POINT, PARALLEL_THRESHOLD  # noqa: E402
from .core.errors import InternalInvariantError, InvalidInputError, TriangulationError  # noqa: E402
from .core.geometry import (  # noqa: E402
    Point, compare_points, distance, distance_squared, in_circle,
    is_counter_clockwise, points_equal,
)
from .core.logging_utils import configure_logging, get_logger  # noqa: E402
from .core.quadedge import QuadEdgeMesh  # noqa: E402
from .core.triangulation import (  # noqa: E402
    TriangulationResult, Triangulator, delaunay_edges, triangulate, triangulate_result,
)

__all__ = [
    '__version__',
    # entry points
    'triangulate', 'triangulate_result', 'delaunay_edges',
    'Triangulator', 'TriangulationResult', 'TriangulatorConfig',
    # geometry
    'Point', 'points_equal', 'compare_points', 'distance', 'distance_squared',
    'is_counter_clockwise', 'in_circle',
    # structure
    'QuadEdgeMesh',
    # errors
    'TriangulationError', 'InvalidInputError', 'InternalInvariantError',
    # tolerances
    'EPS_POINT', 'PARALLEL_THRESHOLD',
    # logging
    'configure_logging', 'get_logger',
    # submodules
    'constants', 'conformity', 'geometry', 'quadedge', 'stats',
]
