"""Fork-join scheduling for the divide step.

The sorted point range is split with the same midpoint rule the sequential
recursion uses, down to blocks of at most ``threshold`` points. Each block
is triangulated on its own arena by a worker; the caller then absorbs the
worker arenas and merges them bottom-up in recursion order, so a parallel
run returns exactly what the sequential one would.

Tasks are submitted only from the calling thread and workers never wait on
other tasks, so a bounded pool cannot deadlock.
"""
from __future__ import annotations

from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import Any, Callable, List, NamedTuple, Optional, Sequence, Tuple, Union

from .errors import InternalInvariantError
from .logging_utils import get_logger

logger = get_logger(__name__)

__all__ = ['Block', 'midpoint', 'plan_blocks', 'run_blocks', 'make_executor']


class Block(NamedTuple):
    """Half-open range [lo, hi) of the sorted points."""
    lo: int
    hi: int

    @property
    def size(self) -> int:
        return self.hi - self.lo


# A plan is either a leaf Block or a (left, right) pair of sub-plans.
Plan = Union[Block, Tuple[Any, Any]]


def midpoint(lo: int, hi: int) -> int:
    """Split index for [lo, hi); the left half gets the extra point."""
    return lo + (hi - lo + 1) // 2


def plan_blocks(lo: int, hi: int, threshold: int) -> Tuple[Plan, List[Block]]:
    """Split [lo, hi) until every piece holds at most ``threshold`` points.

    Returns the split tree and its leaves in left-to-right order.
    """
    if hi - lo < 2:
        raise InternalInvariantError(f"cannot plan range [{lo}, {hi}) with fewer than 2 points")
    blocks: List[Block] = []

    def _split(a: int, b: int) -> Plan:
        if b - a <= threshold:
            block = Block(a, b)
            blocks.append(block)
            return block
        m = midpoint(a, b)
        return (_split(a, m), _split(m, b))

    tree = _split(lo, hi)
    return tree, blocks


def make_executor(backend: str, max_workers: Optional[int] = None) -> Executor:
    if backend == 'thread':
        return ThreadPoolExecutor(max_workers=max_workers)
    if backend == 'process':
        return ProcessPoolExecutor(max_workers=max_workers)
    raise ValueError(f"unknown backend {backend!r}")


def run_blocks(fn: Callable[[Sequence], Any], points: Sequence, blocks: Sequence[Block],
               backend: str = 'thread', max_workers: Optional[int] = None) -> List[Any]:
    """Apply ``fn`` to the point slice of every block and return results in block order."""
    logger.debug("submitting %d blocks to %s executor (max_workers=%s)",
                 len(blocks), backend, max_workers)
    with make_executor(backend, max_workers) as ex:
        futs = [ex.submit(fn, points[b.lo:b.hi]) for b in blocks]
        return [f.result() for f in futs]
