"""Conformity and structural checks for :class:`Mesh` values."""
from __future__ import annotations

from typing import List, Tuple

import numpy as np

from .constants import EPS_AREA
from .geometry import points_strictly_on_segment, triangles_signed_areas
from .logging_utils import get_logger
from .mesh import Mesh

__all__ = ['edge_cell_counts', 'find_hanging_nodes', 'check_mesh_conformity']


def edge_cell_counts(cells) -> Tuple[np.ndarray, np.ndarray]:
    """Unique sorted edges and the number of cells sharing each one."""
    T = np.asarray(cells, dtype=np.int64)
    if T.size == 0:
        return np.empty((0, 2), dtype=np.int64), np.empty((0,), dtype=np.int64)
    edges = np.vstack((T[:, [0, 1]], T[:, [1, 2]], T[:, [2, 0]]))
    edges.sort(axis=1)
    return np.unique(edges, axis=0, return_counts=True)


def find_hanging_nodes(mesh: Mesh) -> List[Tuple[int, Tuple[int, int]]]:
    """Vertices lying strictly inside a mesh edge, as ``(vertex, edge)`` pairs.

    Any such vertex is a T-junction: one side of the edge was split and the
    other was not. Candidates are pruned by the edge's x-extent on a sorted
    copy of the vertices.
    """
    pts = mesh.vertices
    if mesh.num_cells == 0:
        return []
    order = np.argsort(pts[:, 0], kind='stable')
    xs = pts[order, 0]
    found = []
    for u, v in mesh.edges:
        pu = pts[u]; pv = pts[v]
        lo = np.searchsorted(xs, min(pu[0], pv[0]), side='left')
        hi = np.searchsorted(xs, max(pu[0], pv[0]), side='right')
        if hi - lo <= 2:
            continue
        cand = order[lo:hi]
        on_seg = points_strictly_on_segment(pts[cand], pu, pv)
        for w in cand[on_seg]:
            found.append((int(w), (int(u), int(v))))
    return found


def check_mesh_conformity(mesh: Mesh, verbose: bool = False, check_hanging: bool = True):
    """Return ``(ok, msgs)`` for a mesh.

    Checks for degenerate and duplicate cells, edges shared by more than two
    cells, and (optionally) hanging nodes.
    """
    msgs = []
    ok = True
    cells = mesh.cells
    if cells.size == 0:
        return False, ["No cells."]

    areas = np.abs(triangles_signed_areas(mesh.vertices, cells))
    zero = np.nonzero(areas < EPS_AREA)[0]
    for i in zero[:50]:
        msgs.append(f"Cell {int(i)} has near-zero area ({areas[i]:.3e}).")
    if zero.size:
        ok = False

    _, tri_counts = np.unique(np.sort(cells, axis=1), axis=0, return_counts=True)
    if np.any(tri_counts > 1):
        msgs.append("Duplicate cells detected.")
        ok = False

    uniq_edges, counts = edge_cell_counts(cells)
    nm_mask = counts > 2
    if np.any(nm_mask):
        for e, n in zip(uniq_edges[nm_mask][:10], counts[nm_mask][:10]):
            msgs.append(f"Non-manifold edge ({int(e[0])}, {int(e[1])}) shared by {int(n)} cells.")
        ok = False

    if check_hanging:
        hanging = find_hanging_nodes(mesh)
        for w, e in hanging[:50]:
            msgs.append(f"Hanging node {w} lies inside edge {e}.")
        if hanging:
            ok = False

    if verbose:
        logger = get_logger('pixmesh.conformity')
        for m in msgs:
            logger.info("Conformity: %s", m)
    return ok, msgs
