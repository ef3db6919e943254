"""Configuration objects for quadtri triangulation runs."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .constants import EPS_POINT, PARALLEL_THRESHOLD

BACKENDS = ('thread', 'process')


@dataclass
class TriangulatorConfig:
    """Run configuration.

    Attributes
    ----------
    tolerance : float
        Coordinate tolerance for point equality and deduplication.
    parallel : bool
        Build large sub-ranges on an executor before merging them.
    parallel_threshold : int
        Ranges at or below this many points are never split into tasks.
    backend : str
        'thread' or 'process' executor for the fork-join leaves.
    max_workers : int, optional
        Executor size; None lets concurrent.futures pick.
    check_consistency : bool
        Verify quad-edge ring invariants after the run.
    log_level : str or int, optional
        Level applied to the triangulation logger for this run.
    """
    tolerance: float = EPS_POINT
    parallel: bool = False
    parallel_threshold: int = PARALLEL_THRESHOLD
    backend: str = 'thread'
    max_workers: Optional[int] = None
    check_consistency: bool = False
    log_level: Optional[Union[str, int]] = None

    def __post_init__(self):
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {self.tolerance}")
        if self.parallel_threshold < 3:
            raise ValueError(f"parallel_threshold must be at least 3, got {self.parallel_threshold}")
        if self.backend not in BACKENDS:
            raise ValueError(f"unknown backend {self.backend!r}; expected one of {BACKENDS}")
        if self.max_workers is not None and self.max_workers < 1:
            raise ValueError(f"max_workers must be positive, got {self.max_workers}")


__all__ = ['TriangulatorConfig', 'BACKENDS']
