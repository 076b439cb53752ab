"""Edge color sampling.

Every unique mesh edge gets one color per endpoint: the endpoint is mapped to
pixel space with the same scaling as the refinement predicate and the source
image is sampled there. Transparent pixels and near-white RGB pixels become
transparent black, so background regions vanish from the rendered mesh.
"""
from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np

from .constants import TRANSPARENT_BLACK, WHITE_THRESHOLD
from .errors import GeometryMismatchError, UnsupportedColorFormatError
from .image import Color, ColorLayout, RawImage
from .logging_utils import get_logger
from .mesh import Mesh
from .predicate import map_to_pixels, pixels_in_bounds

log = get_logger('pixmesh.colors')


def apply_color_policy(samples: np.ndarray, layout: ColorLayout) -> np.ndarray:
    """RGBA rows for sampled pixels of ``layout``, shape (N, 4).

    RGBA pixels with zero alpha and RGB pixels brighter than the white
    threshold on every channel are replaced by transparent black; RGB pixels
    otherwise get full opacity.
    """
    samples = np.asarray(samples, dtype=np.float64)
    samples = samples.reshape(-1, samples.shape[-1])
    if layout is ColorLayout.RGBA:
        rgba = samples[:, :4].copy()
        drop = rgba[:, 3] == 0.0
    elif layout is ColorLayout.RGB:
        rgba = np.column_stack((samples[:, :3], np.ones(len(samples))))
        drop = np.all(samples[:, :3] > WHITE_THRESHOLD, axis=1)
    else:
        raise UnsupportedColorFormatError(f"unsupported color layout {layout!r}")
    rgba[drop] = TRANSPARENT_BLACK
    return rgba


def color_policy(color: Color) -> Tuple[float, float, float, float]:
    """Scalar form of :func:`apply_color_policy` for one tagged color."""
    row = apply_color_policy(np.asarray([color.channels]), color.layout)[0]
    return tuple(float(v) for v in row)


def edge_colors(mesh: Mesh, image: RawImage, partition: Sequence[int]) -> np.ndarray:
    """Endpoint colors of every edge in ``mesh.edges`` order, shape (E, 2, 4)."""
    layout = image.layout
    if layout is None:
        raise UnsupportedColorFormatError(
            f"pixel layout with {image.channels} channel(s) is not supported")
    edges = mesh.edges
    if edges.size == 0:
        return np.empty((0, 2, 4), dtype=np.float64)
    endpoints = mesh.vertices[edges.ravel()]
    pix = map_to_pixels(endpoints, image.size, partition)
    ok = pixels_in_bounds(pix, image.size)
    if not np.all(ok):
        bad = int(np.nonzero(~ok)[0][0])
        e = bad // 2
        raise GeometryMismatchError(
            f"edge {e} {edges[e].tolist()} endpoint {endpoints[bad].tolist()} maps to pixel "
            f"{pix[bad].tolist()} outside image of size {image.size} (partition {tuple(partition)})")
    samples = image.pixels[pix[:, 0], pix[:, 1]]
    rgba = apply_color_policy(samples, layout)
    log.debug('edge_colors: edges=%d dropped=%d', len(edges), int(np.sum(rgba[:, 3] == 0.0)))
    return rgba.reshape(len(edges), 2, 4)


def colored_segments(mesh: Mesh, image: RawImage, partition: Sequence[int]):
    """``(segments, colors)`` with shapes (E, 2, 2) and (E, 2, 4), ready for rendering."""
    return mesh.segments(), edge_colors(mesh, image, partition)


__all__ = ['apply_color_policy', 'color_policy', 'edge_colors', 'colored_segments']
