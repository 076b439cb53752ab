"""Immutable simplicial mesh value.

A :class:`Mesh` is an arena of vertices plus index-based triangles. Both
arrays are copied on construction and marked read-only, so a mesh can be
shared freely; refinement always produces a new value.

Row order of ``cells`` carries the newest-vertex-bisection marking: for a row
``(a, b, c)`` the vertex ``a`` is the newest vertex and ``(b, c)`` is the
refinement edge. Geometric orientation is not significant.
"""
from __future__ import annotations

from dataclasses import dataclass
from functools import cached_property

import numpy as np

from .errors import MeshError
from .geometry import triangles_barycenters, triangles_signed_areas, unique_edges


@dataclass(frozen=True, eq=False)
class Mesh:
    vertices: np.ndarray
    cells: np.ndarray

    def __post_init__(self):
        verts = np.array(self.vertices, dtype=np.float64)
        cells = np.array(self.cells, dtype=np.int64)
        if cells.size == 0:
            cells = cells.reshape(0, 3)
        if verts.size == 0:
            verts = verts.reshape(0, 2)
        if verts.ndim != 2 or verts.shape[1] != 2:
            raise MeshError(f"vertices must have shape (N, 2), got {verts.shape}")
        if cells.ndim != 2 or cells.shape[1] != 3:
            raise MeshError(f"cells must have shape (M, 3), got {cells.shape}")
        if cells.size:
            if cells.min() < 0 or cells.max() >= len(verts):
                raise MeshError(f"cell indices out of range [0, {len(verts)})")
            repeated = (cells[:, 0] == cells[:, 1]) | (cells[:, 1] == cells[:, 2]) | (cells[:, 0] == cells[:, 2])
            if np.any(repeated):
                bad = int(np.nonzero(repeated)[0][0])
                raise MeshError(f"cell {bad} repeats a vertex: {cells[bad].tolist()}")
        verts.setflags(write=False)
        cells.setflags(write=False)
        object.__setattr__(self, 'vertices', verts)
        object.__setattr__(self, 'cells', cells)

    @property
    def num_vertices(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def num_cells(self) -> int:
        return int(self.cells.shape[0])

    @cached_property
    def edges(self) -> np.ndarray:
        """Unique undirected edges as sorted vertex index pairs, shape (E, 2)."""
        edges = unique_edges(self.cells)
        edges.setflags(write=False)
        return edges

    @property
    def num_edges(self) -> int:
        return int(self.edges.shape[0])

    def barycenters(self) -> np.ndarray:
        return triangles_barycenters(self.vertices, self.cells)

    def areas(self) -> np.ndarray:
        return np.abs(triangles_signed_areas(self.vertices, self.cells))

    def total_area(self) -> float:
        return float(self.areas().sum())

    def segments(self) -> np.ndarray:
        """Endpoint coordinates of every unique edge, shape (E, 2, 2)."""
        return self.vertices[self.edges]

    def refinement_edges(self) -> np.ndarray:
        """Refinement edge of every cell as a sorted index pair, shape (M, 2)."""
        return np.sort(self.cells[:, 1:3], axis=1)

    def equals(self, other: 'Mesh') -> bool:
        """Exact equality of vertex coordinates and cell rows."""
        return (np.array_equal(self.vertices, other.vertices)
                and np.array_equal(self.cells, other.cells))

    def __repr__(self) -> str:
        return f"Mesh(vertices={self.num_vertices}, cells={self.num_cells})"


__all__ = ['Mesh']
