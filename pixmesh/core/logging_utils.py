"""Logging utilities for pixmesh.

Provides a consistent logger hierarchy and formatting without modifying the
process root logger. All pixmesh code should obtain loggers via get_logger().
"""
from __future__ import annotations

import logging
import sys
from typing import Optional, Union

_FORMAT = logging.Formatter('%(levelname)s %(name)s: %(message)s')
_ROOT_NAME = 'pixmesh'


def _ensure_pixmesh_root() -> logging.Logger:
    """Ensure the 'pixmesh' logger has a single stream handler and is isolated
    from the process root logger. Returns the 'pixmesh' logger.
    """
    root = logging.getLogger(_ROOT_NAME)
    has_non_null = any(not isinstance(h, logging.NullHandler) for h in root.handlers)
    if not has_non_null:
        # NullHandlers come from the package __init__; drop them so records are not swallowed
        for h in list(root.handlers):
            root.removeHandler(h)
        handler = logging.StreamHandler(stream=sys.stdout)
        handler.setFormatter(_FORMAT)
        root.addHandler(handler)
    root.propagate = False
    return root


def _to_level(level: Union[str, int, None], default: int = logging.INFO) -> int:
    if level is None:
        return default
    if isinstance(level, int):
        return level
    value = getattr(logging, str(level).upper(), None)
    return value if isinstance(value, int) else default


def configure_logging(level: Union[str, int] = 'INFO', mute_external: bool = True) -> None:
    """Configure the 'pixmesh' logger family level and optional external noise suppression.

    This does NOT modify the process root logger.
    """
    root = _ensure_pixmesh_root()
    lvl = _to_level(level)
    root.setLevel(lvl)
    if mute_external and lvl <= logging.DEBUG:
        for noisy in ('matplotlib', 'matplotlib.font_manager', 'PIL'):
            logging.getLogger(noisy).setLevel(logging.INFO)


def get_logger(name: str, level: Optional[Union[str, int]] = None) -> logging.Logger:
    """Return a logger under the 'pixmesh' namespace.

    Without a level the logger is set to NOTSET so it inherits from the
    'pixmesh' parent configured via configure_logging(). Handlers are only
    attached by configure_logging(), so importing the package stays silent.
    """
    log = logging.getLogger(name)
    if level is not None:
        log.setLevel(_to_level(level))
    else:
        log.setLevel(logging.NOTSET)
    return log


__all__ = ['get_logger', 'configure_logging']
