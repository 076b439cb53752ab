"""Rendering of colored mesh edges with matplotlib.

Separated from the pipeline so that importing the refinement core does not
pull in matplotlib.
"""
from __future__ import annotations

import os as _os
from typing import Sequence

import matplotlib as _mpl
# Ensure a non-interactive backend in headless environments before importing pyplot
if not _os.environ.get('MPLBACKEND'):
    _mpl.use('Agg')
import matplotlib.pyplot as plt
import numpy as np
from matplotlib.collections import LineCollection

from .constants import DEFAULT_DPI
from .logging_utils import get_logger

logger = get_logger('pixmesh.render')


def split_segments(segments: np.ndarray, colors: np.ndarray):
    """Cut each segment at its midpoint, giving each half one endpoint color.

    segments: (E, 2, 2), colors: (E, 2, 4). Returns (2E, 2, 2) halves and
    (2E, 4) colors; the first E halves start at endpoint 0.
    """
    segments = np.asarray(segments, dtype=np.float64).reshape(-1, 2, 2)
    colors = np.asarray(colors, dtype=np.float64).reshape(-1, 2, 4)
    mid = segments.mean(axis=1)
    first = np.stack((segments[:, 0], mid), axis=1)
    second = np.stack((mid, segments[:, 1]), axis=1)
    return np.concatenate((first, second)), np.concatenate((colors[:, 0], colors[:, 1]))


def render_segments(segments, colors, outfile: str, resolution: Sequence[int], partition: Sequence[int],
                    linewidth_px: float = 1.5, dpi: int = DEFAULT_DPI) -> str:
    """Draw colored segments over ``[0, px] x [0, py]`` and save to ``outfile``.

    The figure is ``resolution`` pixels with no padding, axes hidden and equal
    aspect. Errors raised by matplotlib while saving (unwritable path,
    unknown format) propagate.
    """
    w, h = (int(r) for r in resolution)
    px, py = partition
    halves, half_colors = split_segments(segments, colors)
    fig = plt.figure(figsize=(w / dpi, h / dpi), dpi=dpi)
    try:
        ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
        ax.set_axis_off()
        ax.add_collection(LineCollection(halves, colors=half_colors,
                                         linewidths=linewidth_px * 72.0 / dpi))
        ax.set_xlim(0, px)
        ax.set_ylim(0, py)
        ax.set_aspect('equal', adjustable='box')
        fig.savefig(outfile, dpi=dpi)
    finally:
        plt.close(fig)
    logger.info('rendered %d segments to %s (%dx%d)', len(halves) // 2, outfile, w, h)
    return outfile


__all__ = ['split_segments', 'render_segments']
