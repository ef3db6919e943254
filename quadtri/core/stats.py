"""Per-run counters and their presentation."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict


@dataclass
class TriangulationStats:
    n_input: int = 0
    n_unique: int = 0
    n_edges: int = 0
    n_triangles: int = 0
    # Quad-edge arena activity
    edges_created: int = 0
    edges_deleted: int = 0
    merges: int = 0
    leaf_tasks: int = 0
    # Timing (seconds)
    time_total: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {
            'n_input': self.n_input,
            'n_unique': self.n_unique,
            'duplicates_dropped': self.n_input - self.n_unique,
            'n_edges': self.n_edges,
            'n_triangles': self.n_triangles,
            'edges_created': self.edges_created,
            'edges_deleted': self.edges_deleted,
            'merges': self.merges,
            'leaf_tasks': self.leaf_tasks,
            'time_total': self.time_total,
            'points_per_second': (self.n_unique / self.time_total) if self.time_total else 0.0,
        }


def format_stats(stats: TriangulationStats) -> str:
    """Return a human readable two-column summary."""
    d = stats.to_dict()
    width = max(len(k) for k in d)
    lines = []
    for k, v in d.items():
        if isinstance(v, float):
            lines.append(f"{k.ljust(width)} {v:12.6f}")
        else:
            lines.append(f"{k.ljust(width)} {v:12d}")
    return "\n".join(lines)


__all__ = ['TriangulationStats', 'format_stats']
