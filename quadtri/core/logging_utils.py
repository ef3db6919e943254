"""Logging utilities for quadtri.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All quadtri code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')


def _ensure_quadtri_root() -> logging.Logger:
    """Ensure the 'quadtri' logger is isolated from the process root logger
    and return it. A stream handler is only attached by configure_logging().
    """
    root = logging.getLogger('quadtri')
    root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO') -> None:
    """Configure the 'quadtri' logger family level and attach a stdout handler.

    This does NOT modify the process root logger.
    """
    root = _ensure_quadtri_root()
    # Replace NullHandlers (added by the package __init__) with a StreamHandler
    for h in list(root.handlers):
        if isinstance(h, logging.NullHandler):
            root.removeHandler(h)
    if not root.handlers:
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.setLevel(_to_level(level))


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'quadtri' namespace.

    Without an explicit level the logger is left at NOTSET so it inherits
    from the 'quadtri' parent configured via configure_logging().
    """
    _ensure_quadtri_root()
    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    else:
        log.setLevel(logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
