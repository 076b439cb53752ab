"""Exception hierarchy for pixmesh.

Every error raised by the package derives from :class:`PixmeshError` and
also from the closest builtin exception so callers can catch either.
"""
from __future__ import annotations


class PixmeshError(Exception):
    """Base class for pixmesh errors."""


class ConfigurationError(PixmeshError, ValueError):
    """Malformed refinement plan, partition, base or resolution."""


class GeometryMismatchError(PixmeshError, IndexError):
    """A mapped pixel falls outside the intensity field or color image."""


class UnsupportedColorFormatError(PixmeshError, NotImplementedError):
    """A sampled pixel has a channel layout other than RGB or RGBA."""


class MeshError(PixmeshError, ValueError):
    """Invalid mesh arrays or a failed conformity check."""


class CellIndexError(PixmeshError, IndexError):
    """A cell index marked for refinement does not exist in the mesh."""


__all__ = [
    'PixmeshError',
    'ConfigurationError',
    'GeometryMismatchError',
    'UnsupportedColorFormatError',
    'MeshError',
    'CellIndexError',
]
