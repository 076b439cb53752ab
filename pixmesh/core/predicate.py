"""Intensity-driven refinement predicate.

Maps cell barycenters from mesh coordinates onto the pixel grid of an
intensity field and marks the cells sitting on pixels darker than a
threshold.
"""
from __future__ import annotations

from typing import Sequence

import numpy as np

from .errors import ConfigurationError, GeometryMismatchError
from .logging_utils import get_logger
from .mesh import Mesh

log = get_logger('pixmesh.predicate')


def map_to_pixels(points, shape: Sequence[int], partition: Sequence[int]) -> np.ndarray:
    """0-based pixel indices of domain points, shape (N, 2).

    The domain ``[0, px] x [0, py]`` is scaled onto ``[0, width-1] x
    [0, height-1]`` and floored, so only points on the far boundary reach
    the last pixel row or column. Indices are not range checked here.
    """
    pts = np.asarray(points, dtype=np.float64).reshape(-1, 2)
    span = np.asarray(shape[:2], dtype=np.float64) - 1.0
    # left to right: (p * span) / partition, never p * (span / partition)
    return np.floor(pts * span / np.asarray(partition, dtype=np.float64)).astype(np.int64)


def pixels_in_bounds(pixels: np.ndarray, shape: Sequence[int]) -> np.ndarray:
    """Boolean mask of pixel rows that index inside a field of ``shape``."""
    upper = np.asarray(shape[:2], dtype=np.int64)
    return np.all((pixels >= 0) & (pixels < upper), axis=1)


def field_values(field) -> np.ndarray:
    """Plain 2D array behind an IntensityField or array-like."""
    values = np.asarray(getattr(field, 'values', field), dtype=np.float64)
    if values.ndim != 2:
        raise ConfigurationError(f"intensity field must be 2D, got shape {values.shape}")
    return values


def mark_cells(mesh: Mesh, field, partition: Sequence[int], threshold: float) -> np.ndarray:
    """Indices of the cells whose barycenter pixel is darker than ``threshold``.

    Raises GeometryMismatchError when a barycenter maps outside the field,
    which means the partition does not belong to this field.
    """
    if not 0.0 < float(threshold) <= 1.0:
        raise ConfigurationError(f"threshold {threshold!r} outside (0, 1]")
    values = field_values(field)
    if mesh.num_cells == 0:
        return np.empty((0,), dtype=np.int64)
    bary = mesh.barycenters()
    pix = map_to_pixels(bary, values.shape, partition)
    ok = pixels_in_bounds(pix, values.shape)
    if not np.all(ok):
        bad = int(np.nonzero(~ok)[0][0])
        raise GeometryMismatchError(
            f"cell {bad} barycenter {bary[bad].tolist()} maps to pixel {pix[bad].tolist()} "
            f"outside field of shape {values.shape} (partition {tuple(partition)})")
    marked = np.nonzero(values[pix[:, 0], pix[:, 1]] < threshold)[0]
    log.debug('mark_cells: threshold=%.4f marked=%d/%d', threshold, len(marked), mesh.num_cells)
    return marked


__all__ = ['map_to_pixels', 'pixels_in_bounds', 'field_values', 'mark_cells']
