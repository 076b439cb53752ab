"""Initial coarse mesh construction and domain partition helpers.

The domain of an image is the rectangle ``[0, px] x [0, py]`` where
``(px, py)`` is the image resolution reduced to lowest terms. The initial
mesh splits that rectangle into ``base`` squares per unit and every square
into two triangles.
"""
from __future__ import annotations

import math
from typing import NamedTuple, Sequence, Tuple

import numpy as np

from .constants import DEFAULT_SHORT_SIDE
from .errors import ConfigurationError
from .geometry import longest_edge_local
from .logging_utils import get_logger
from .mesh import Mesh

log = get_logger('pixmesh.grid')


class Partition(NamedTuple):
    """Domain extent ``(px, py)`` in mesh units."""
    px: int
    py: int

    @property
    def aspect(self) -> float:
        return self.px / self.py


def _positive_pair(values, what: str) -> Tuple[int, int]:
    pair = tuple(values)
    if len(pair) != 2:
        raise ConfigurationError(f"{what} must have two entries, got {values!r}")
    out = []
    for v in pair:
        if isinstance(v, bool) or int(v) != v or int(v) <= 0:
            raise ConfigurationError(f"{what} entries must be positive integers, got {values!r}")
        out.append(int(v))
    return out[0], out[1]


def partition_from_resolution(resolution: Sequence[int]) -> Partition:
    """Reduce ``(width, height)`` to lowest terms."""
    w, h = _positive_pair(resolution, 'resolution')
    g = math.gcd(w, h)
    return Partition(w // g, h // g)


def default_resolution(size: Sequence[int]) -> Tuple[int, int]:
    """Working resolution for an image of ``(width, height)`` pixels.

    The short side becomes 1000 pixels and the long side a multiple of 100
    following the aspect ratio rounded to one decimal.
    """
    w, h = _positive_pair(size, 'image size')
    r = round(max(w, h) / min(w, h) * 10)
    if w > h:
        return (100 * r, DEFAULT_SHORT_SIDE)
    return (DEFAULT_SHORT_SIDE, 100 * r)


def with_longest_edge_marking(points, tris) -> Mesh:
    """Mesh whose cells use their longest edge as refinement edge.

    Rows are rotated so the vertex opposite the longest edge comes first,
    which is the newest-vertex convention used by the bisection refiner.
    """
    pts = np.asarray(points, dtype=np.float64)
    T = np.asarray(tris, dtype=np.int64).reshape(-1, 3)
    k = longest_edge_local(pts, T)
    order = (k[:, None] + np.arange(3)[None, :]) % 3
    return Mesh(pts, np.take_along_axis(T, order, axis=1))


def build_initial_mesh(partition: Partition, base: int = 1) -> Mesh:
    """Uniform simplicial grid over ``[0, px] x [0, py]``.

    Each of the ``(px*base) x (py*base)`` squares is split along the diagonal
    joining its lower-right and upper-left corners; that diagonal is the
    refinement edge of both halves.
    """
    px, py = _positive_pair(partition, 'partition')
    if isinstance(base, bool) or int(base) != base or base <= 0:
        raise ConfigurationError(f"base must be a positive integer, got {base!r}")
    base = int(base)
    nx, ny = px * base, py * base
    xs = np.arange(nx + 1, dtype=np.float64) / base
    ys = np.arange(ny + 1, dtype=np.float64) / base
    X, Y = np.meshgrid(xs, ys)
    points = np.column_stack((X.ravel(), Y.ravel()))

    i, j = np.meshgrid(np.arange(nx), np.arange(ny))
    v00 = (j * (nx + 1) + i).ravel()
    v10 = v00 + 1
    v01 = v00 + nx + 1
    v11 = v01 + 1
    lower = np.column_stack((v00, v10, v01))
    upper = np.column_stack((v11, v01, v10))
    # lower/upper halves of a square stay adjacent in cell order
    tris = np.stack((lower, upper), axis=1).reshape(-1, 3)

    mesh = with_longest_edge_marking(points, tris)
    log.debug('initial mesh: partition=%s base=%d vertices=%d cells=%d',
              (px, py), base, mesh.num_vertices, mesh.num_cells)
    return mesh


__all__ = [
    'Partition', 'partition_from_resolution', 'default_resolution',
    'with_longest_edge_marking', 'build_initial_mesh',
]
