"""Geometry primitives for triangle meshes.

All batch functions take the canonical mesh arrays:
    points: (N, 2) float64 array
    tris:   (M, 3) int array
"""
from __future__ import annotations

import numpy as np

from .constants import EPS_COLINEAR

__all__ = [
    'triangle_area', 'triangles_signed_areas', 'compute_triangulation_area',
    'triangles_barycenters', 'edge_lengths', 'longest_edge_local',
    'points_strictly_on_segment', 'normalize_edge', 'unique_edges',
]


def triangle_area(p0, p1, p2):
    p0 = np.asarray(p0, dtype=np.float64); p1 = np.asarray(p1, dtype=np.float64); p2 = np.asarray(p2, dtype=np.float64)
    d1 = p1 - p0; d2 = p2 - p0
    return 0.5 * float(d1[0] * d2[1] - d1[1] * d2[0])


def triangles_signed_areas(points, tris):
    """Vectorized signed area for a batch of triangles.

    Returns: (M,) float64 array of signed areas (0.5 * cross).
    """
    pts = np.asarray(points, dtype=np.float64)
    T = np.asarray(tris, dtype=np.int64)
    if T.size == 0:
        return np.empty((0,), dtype=float)
    p0 = pts[T[:, 0]]; p1 = pts[T[:, 1]]; p2 = pts[T[:, 2]]
    d1 = p1 - p0; d2 = p2 - p0
    return 0.5 * (d1[:, 0] * d2[:, 1] - d1[:, 1] * d2[:, 0])


def compute_triangulation_area(points, tris, indices=None):
    """Total (unsigned) area of the triangles selected by indices (all when None)."""
    T = np.asarray(tris, dtype=np.int64)
    if indices is not None:
        idx = np.asarray(indices, dtype=np.int64)
        if idx.size == 0:
            return 0.0
        T = T[idx]
    return float(np.abs(triangles_signed_areas(points, T)).sum())


def triangles_barycenters(points, tris):
    """Arithmetic mean of each triangle's three vertices, shape (M, 2)."""
    pts = np.asarray(points, dtype=np.float64)
    T = np.asarray(tris, dtype=np.int64)
    if T.size == 0:
        return np.empty((0, 2), dtype=np.float64)
    return pts[T].mean(axis=1)


def edge_lengths(points, tris):
    """Per-triangle edge lengths, column k is the edge opposite local vertex k."""
    pts = np.asarray(points, dtype=np.float64)
    T = np.asarray(tris, dtype=np.int64)
    p0 = pts[T[:, 0]]; p1 = pts[T[:, 1]]; p2 = pts[T[:, 2]]
    return np.stack([
        np.linalg.norm(p1 - p2, axis=1),
        np.linalg.norm(p2 - p0, axis=1),
        np.linalg.norm(p0 - p1, axis=1),
    ], axis=1)


def longest_edge_local(points, tris):
    """Local index of the vertex opposite each triangle's longest edge.

    Ties resolve to the lowest local index so the choice is deterministic.
    """
    T = np.asarray(tris, dtype=np.int64)
    if T.size == 0:
        return np.empty((0,), dtype=np.int64)
    return np.argmax(edge_lengths(points, T), axis=1)


def points_strictly_on_segment(points, a, b, tol=EPS_COLINEAR):
    """Boolean mask of points lying on segment a-b, excluding its endpoints.

    The colinearity tolerance is relative to the squared segment length.
    """
    pts = np.asarray(points, dtype=np.float64)
    a = np.asarray(a, dtype=np.float64); b = np.asarray(b, dtype=np.float64)
    d = b - a
    L2 = float(d @ d)
    if L2 == 0.0:
        return np.zeros(len(pts), dtype=bool)
    rel = pts - a
    cross = rel[:, 0] * d[1] - rel[:, 1] * d[0]
    t = (rel @ d) / L2
    on_line = np.abs(cross) <= tol * L2
    inside = (t > tol) & (t < 1.0 - tol)
    return on_line & inside


def normalize_edge(u, v):
    """Return a normalized edge representation as (min, max).

    Edges (u, v) and (v, u) share one key, which is what edge-keyed caches
    and maps rely on.
    """
    u = int(u); v = int(v)
    return (u, v) if u < v else (v, u)


def unique_edges(tris):
    """Sorted unique undirected edges of a triangle array, shape (E, 2)."""
    T = np.asarray(tris, dtype=np.int64)
    if T.size == 0:
        return np.empty((0, 2), dtype=np.int64)
    edges = np.vstack((T[:, [0, 1]], T[:, [1, 2]], T[:, [2, 0]]))
    edges.sort(axis=1)
    return np.unique(edges, axis=0)
