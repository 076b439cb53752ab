"""Multi-pass refinement driver.

Runs a :class:`RefinementPlan` over an initial mesh: for each
``(threshold, count)`` entry, ``count`` passes of mark-then-bisect are
applied to the mesh produced by the previous pass.
"""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import List, Optional, Sequence

from .bisection import refine
from .config import RefinementPlan
from .conformity import check_mesh_conformity
from .errors import ConfigurationError, MeshError
from .logging_utils import get_logger
from .mesh import Mesh
from .predicate import mark_cells

log = get_logger('pixmesh.scheduler')


@dataclass
class PassStats:
    """Summary of one refinement pass."""
    level_index: int
    repeat: int
    threshold: float
    marked: int = 0
    cells_before: int = 0
    cells_after: int = 0
    vertices_before: int = 0
    vertices_after: int = 0
    time_total: float = 0.0

    @property
    def cells_added(self) -> int:
        return self.cells_after - self.cells_before


def run_plan(mesh: Mesh, field, partition: Sequence[int], plan: RefinementPlan, *,
             check_conformity: bool = False, history: Optional[List[PassStats]] = None) -> Mesh:
    """Apply every pass of ``plan`` and return the final mesh.

    The plan is checked before the first pass. With ``check_conformity`` the
    structural checks run after each pass and a failure raises MeshError.
    Per-pass statistics are appended to ``history`` when a list is given.
    """
    if not isinstance(plan, RefinementPlan):
        raise ConfigurationError(f"expected a RefinementPlan, got {type(plan).__name__}")
    log.info('refinement plan: %d levels, %d passes, start cells=%d',
             len(plan), plan.total_passes, mesh.num_cells)
    for li, (threshold, count) in enumerate(plan):
        for rep in range(count):
            t0 = time.perf_counter()
            stats = PassStats(level_index=li, repeat=rep, threshold=threshold,
                              cells_before=mesh.num_cells, vertices_before=mesh.num_vertices)
            marked = mark_cells(mesh, field, partition, threshold)
            mesh = refine(mesh, marked)
            stats.marked = int(len(marked))
            stats.cells_after = mesh.num_cells
            stats.vertices_after = mesh.num_vertices
            stats.time_total = time.perf_counter() - t0
            log.info('pass level=%d rep=%d threshold=%.4f marked=%d cells %d -> %d (%.3fs)',
                     li, rep, threshold, stats.marked, stats.cells_before, stats.cells_after,
                     stats.time_total)
            if check_conformity:
                ok, msgs = check_mesh_conformity(mesh)
                if not ok:
                    raise MeshError(f"mesh not conforming after level {li} pass {rep}: {msgs[:5]}")
            if history is not None:
                history.append(stats)
    return mesh


def format_history(history: Sequence[PassStats]) -> str:
    """Return a human readable multi-line table of pass statistics."""
    if not history:
        return "<no passes>"
    header = ["level", "rep", "threshold", "marked", "cells", "added", "vertices", "ms"]
    rows = []
    for s in history:
        rows.append([
            str(s.level_index), str(s.repeat), f"{s.threshold:.4f}", str(s.marked),
            str(s.cells_after), str(s.cells_added), str(s.vertices_after),
            f"{s.time_total * 1000.0:8.3f}",
        ])
    col_w = [len(h) for h in header]
    for r in rows:
        for i, v in enumerate(r):
            if len(v) > col_w[i]:
                col_w[i] = len(v)

    def fmt(r):
        return " ".join(r[i].rjust(col_w[i]) for i in range(len(r)))
    lines = [fmt(header), "-" * (sum(col_w) + len(col_w) - 1)] + [fmt(r) for r in rows]
    return "\n".join(lines)


__all__ = ['PassStats', 'run_plan', 'format_history']
