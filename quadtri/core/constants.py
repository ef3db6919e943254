"""Central numerical tolerances and tuning constants.

Tolerances live here so they can be tuned consistently and referenced
without scattering literals across the code base.
"""
from __future__ import annotations

# Point identity
EPS_POINT: float = 1e-4           # two points closer than this on both axes are the same point

# Fork-join scheduling
PARALLEL_THRESHOLD: int = 4096    # sub-ranges at or below this size run sequentially

__all__ = [
    'EPS_POINT',
    'PARALLEL_THRESHOLD',
]
