import numpy as np

from pixmesh.core.conformity import check_mesh_conformity, edge_cell_counts, find_hanging_nodes
from pixmesh.core.geometry import (
    compute_triangulation_area, normalize_edge, points_strictly_on_segment, triangle_area,
)
from pixmesh.core.grid import Partition, build_initial_mesh
from pixmesh.core.mesh import Mesh


def _t_junction_mesh():
    pts = np.array([
        [0, 0], [1, 0], [2, 0],   # 0 1 2
        [0, 1], [1, 1], [2, 1],   # 3 4 5
        [1, 0.5],                 # 6 sits on edge (1, 4)
    ], dtype=float)
    tris = np.array([
        [0, 1, 3], [1, 4, 3],
        [1, 2, 6], [2, 5, 6], [5, 4, 6],
    ])
    return Mesh(pts, tris)


def test_grid_is_conforming():
    ok, msgs = check_mesh_conformity(build_initial_mesh(Partition(3, 2), 2))
    assert ok, msgs


def test_hanging_node_detected():
    mesh = _t_junction_mesh()
    assert find_hanging_nodes(mesh) == [(6, (1, 4))]
    ok, msgs = check_mesh_conformity(mesh)
    assert not ok
    assert any('Hanging node 6' in m for m in msgs)


def test_hanging_check_can_be_skipped():
    ok, _ = check_mesh_conformity(_t_junction_mesh(), check_hanging=False)
    assert ok


def test_degenerate_and_duplicate_cells():
    pts = np.array([[0, 0], [1, 0], [2, 0], [0, 1]], dtype=float)
    ok, msgs = check_mesh_conformity(Mesh(pts, [[0, 1, 2]]))
    assert not ok and 'near-zero area' in msgs[0]
    ok, msgs = check_mesh_conformity(Mesh(pts, [[0, 1, 3], [1, 3, 0]]))
    assert not ok
    assert "Duplicate cells detected." in msgs


def test_non_manifold_edge():
    pts = np.array([[0, 0], [1, 0], [0, 1], [0, -1], [1, 1]], dtype=float)
    mesh = Mesh(pts, [[0, 1, 2], [0, 1, 3], [0, 1, 4]])
    ok, msgs = check_mesh_conformity(mesh, check_hanging=False)
    assert not ok
    assert any('Non-manifold edge (0, 1)' in m for m in msgs)
    edges, counts = edge_cell_counts(mesh.cells)
    assert counts[edges.tolist().index([0, 1])] == 3


def test_geometry_helpers():
    assert triangle_area([0, 0], [1, 0], [0, 1]) == 0.5
    assert triangle_area([0, 0], [0, 1], [1, 0]) == -0.5
    assert normalize_edge(5, 2) == (2, 5)
    pts = np.array([[0, 0], [1, 0], [0, 1], [1, 1]])
    assert compute_triangulation_area(pts, [[0, 1, 2], [1, 3, 2]]) == 1.0
    assert compute_triangulation_area(pts, [[0, 1, 2], [1, 3, 2]], [1]) == 0.5
    assert compute_triangulation_area(pts, [[0, 1, 2]], []) == 0.0
    mask = points_strictly_on_segment([[0, 0], [0.5, 0.5], [1, 1], [0.5, 0.6]], [0, 0], [1, 1])
    assert mask.tolist() == [False, True, False, False]
