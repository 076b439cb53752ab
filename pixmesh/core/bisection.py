"""Conforming newest-vertex bisection (NVB).

Cells are stored as ``(a, b, c)`` rows where ``a`` is the newest vertex and
``(b, c)`` the refinement edge. Bisecting a cell inserts the midpoint ``m``
of ``(b, c)`` and yields the children ``(m, a, b)`` and ``(m, c, a)``; the
refinement edge of each child is the parent edge opposite ``m``.

Refinement runs in two phases:

1. closure: starting from the refinement edges of the marked cells, every
   cell touching a marked edge gets its own refinement edge marked too. A
   worklist of edges drives this until nothing new is marked.
2. bisection: every cell whose refinement edge is marked is bisected, and
   each child is bisected again when its refinement edge is marked. After
   closure at most the three edges of a cell are marked, so this ends after
   two generations.

Midpoints are cached per edge key, so the two cells sharing a marked edge
split it at the same new vertex and no hanging node is created.
"""
from __future__ import annotations

from collections import defaultdict, deque
from typing import Dict, Iterable, List, Sequence, Set, Tuple

import numpy as np

from .errors import CellIndexError
from .geometry import normalize_edge
from .logging_utils import get_logger
from .mesh import Mesh

log = get_logger('pixmesh.bisection')

Edge = Tuple[int, int]


def build_edge_to_cell_map(cells: Sequence[Sequence[int]]) -> Dict[Edge, List[int]]:
    """Map each undirected edge to the cells containing it."""
    edge_map: Dict[Edge, List[int]] = defaultdict(list)
    for idx, (a, b, c) in enumerate(cells):
        edge_map[normalize_edge(a, b)].append(idx)
        edge_map[normalize_edge(b, c)].append(idx)
        edge_map[normalize_edge(c, a)].append(idx)
    return edge_map


def propagate_marks(cells: Sequence[Sequence[int]], seeds: Iterable[int],
                    edge_map: Dict[Edge, List[int]] = None) -> Set[Edge]:
    """Close the set of marked edges under the NVB conformity rule.

    ``seeds`` are cell indices whose refinement edges start the worklist.
    Returns every edge that has to be bisected.
    """
    if edge_map is None:
        edge_map = build_edge_to_cell_map(cells)
    ref_edges = [normalize_edge(c[1], c[2]) for c in cells]
    marked: Set[Edge] = set()
    queue: deque = deque()
    for t in seeds:
        e = ref_edges[t]
        if e not in marked:
            marked.add(e)
            queue.append(e)
    while queue:
        e = queue.popleft()
        for t in edge_map[e]:
            r = ref_edges[t]
            if r not in marked:
                marked.add(r)
                queue.append(r)
    return marked


def _normalize_marked(marked, num_cells: int) -> np.ndarray:
    if isinstance(marked, np.ndarray):
        idx = marked.astype(np.int64).ravel()
    else:
        idx = np.asarray([int(i) for i in marked], dtype=np.int64)
    if idx.size == 0:
        return idx
    bad = idx[(idx < 0) | (idx >= num_cells)]
    if bad.size:
        raise CellIndexError(f"cell index {int(bad[0])} outside mesh with {num_cells} cells")
    return np.unique(idx)


def refine(mesh: Mesh, marked) -> Mesh:
    """Bisect the marked cells of ``mesh`` and return a new conforming mesh.

    Existing vertices keep their indices and new midpoints are appended.
    Cells untouched by the closure keep their rows and relative order;
    bisected cells are replaced in place by their children. Raises
    CellIndexError for an index outside the mesh. An empty selection returns
    ``mesh`` itself.
    """
    seeds = _normalize_marked(marked, mesh.num_cells)
    if seeds.size == 0:
        return mesh

    cells = mesh.cells.tolist()
    edge_map = build_edge_to_cell_map(cells)
    marked_edges = propagate_marks(cells, seeds.tolist(), edge_map)

    points = mesh.vertices.tolist()
    midpoints: Dict[Edge, int] = {}

    def midpoint(u: int, v: int) -> int:
        key = normalize_edge(u, v)
        m = midpoints.get(key)
        if m is None:
            pu = points[key[0]]; pv = points[key[1]]
            m = len(points)
            points.append([0.5 * (pu[0] + pv[0]), 0.5 * (pu[1] + pv[1])])
            midpoints[key] = m
        return m

    new_cells: List[Tuple[int, int, int]] = []
    split_count = 0
    for a, b, c in cells:
        if normalize_edge(b, c) not in marked_edges:
            new_cells.append((a, b, c))
            continue
        split_count += 1
        stack = [(a, b, c)]
        while stack:
            a_, b_, c_ = stack.pop()
            if normalize_edge(b_, c_) in marked_edges:
                m = midpoint(b_, c_)
                # pushed in reverse so (m, a, b) is emitted first
                stack.append((m, c_, a_))
                stack.append((m, a_, b_))
            else:
                new_cells.append((a_, b_, c_))

    log.debug('refine: seeds=%d closure_edges=%d bisected_cells=%d new_vertices=%d cells %d -> %d',
              seeds.size, len(marked_edges), split_count, len(midpoints), mesh.num_cells, len(new_cells))
    return Mesh(np.asarray(points, dtype=np.float64), np.asarray(new_cells, dtype=np.int64))


__all__ = ['build_edge_to_cell_map', 'propagate_marks', 'refine']
