import math

import numpy as np
import pytest

from pixmesh.core.errors import ConfigurationError, MeshError
from pixmesh.core.grid import (
    Partition, build_initial_mesh, default_resolution, partition_from_resolution,
    with_longest_edge_marking,
)
from pixmesh.core.mesh import Mesh


def test_mesh_rejects_repeated_vertex():
    pts = np.array([[0, 0], [1, 0], [0, 1]], dtype=float)
    with pytest.raises(MeshError):
        Mesh(pts, np.array([[0, 1, 1]]))


def test_mesh_rejects_out_of_range_index():
    pts = np.array([[0, 0], [1, 0], [0, 1]], dtype=float)
    with pytest.raises(MeshError):
        Mesh(pts, np.array([[0, 1, 3]]))
    with pytest.raises(ValueError):
        Mesh(pts, np.array([[0, -1, 2]]))


def test_mesh_rejects_bad_shapes():
    with pytest.raises(MeshError):
        Mesh(np.zeros((3, 3)), np.array([[0, 1, 2]]))
    with pytest.raises(MeshError):
        Mesh(np.zeros((3, 2)), np.array([[0, 1]]))


def test_mesh_arrays_are_read_only_copies():
    pts = np.array([[0, 0], [1, 0], [0, 1]], dtype=float)
    tris = np.array([[0, 1, 2]])
    mesh = Mesh(pts, tris)
    pts[0, 0] = 9.0
    assert mesh.vertices[0, 0] == 0.0
    with pytest.raises(ValueError):
        mesh.vertices[0, 0] = 5.0
    with pytest.raises(ValueError):
        mesh.cells[0, 0] = 2


def test_mesh_derived_quantities():
    mesh = Mesh([[0, 0], [1, 0], [0, 1], [1, 1]], [[0, 1, 2], [3, 2, 1]])
    assert mesh.num_vertices == 4
    assert mesh.num_cells == 2
    assert mesh.edges.tolist() == [[0, 1], [0, 2], [1, 2], [1, 3], [2, 3]]
    assert mesh.total_area() == pytest.approx(1.0)
    assert mesh.barycenters()[0] == pytest.approx([1 / 3, 1 / 3])
    assert mesh.segments().shape == (5, 2, 2)
    assert mesh.refinement_edges().tolist() == [[1, 2], [1, 2]]


def test_initial_mesh_counts_and_area():
    mesh = build_initial_mesh(Partition(3, 2), base=1)
    assert mesh.num_vertices == 12
    assert mesh.num_cells == 12
    # 9 horizontal + 8 vertical + 6 diagonals
    assert mesh.num_edges == 23
    assert mesh.total_area() == pytest.approx(6.0)
    assert mesh.vertices.min(axis=0).tolist() == [0.0, 0.0]
    assert mesh.vertices.max(axis=0).tolist() == [3.0, 2.0]


def test_initial_mesh_base_multiplies_cells_not_extent():
    mesh = build_initial_mesh(Partition(1, 1), base=2)
    assert mesh.num_vertices == 9
    assert mesh.num_cells == 8
    assert mesh.total_area() == pytest.approx(1.0)
    assert mesh.vertices.max(axis=0).tolist() == [1.0, 1.0]


def test_initial_mesh_refinement_edge_is_the_diagonal():
    mesh = build_initial_mesh(Partition(2, 3), base=2)
    pts = mesh.vertices
    ref = mesh.refinement_edges()
    lengths = np.linalg.norm(pts[ref[:, 0]] - pts[ref[:, 1]], axis=1)
    assert np.allclose(lengths, math.sqrt(2) / 2)
    # both halves of a square share the same refinement edge
    assert np.array_equal(ref[0::2], ref[1::2])


@pytest.mark.parametrize('partition, base', [((0, 2), 1), ((2, -1), 1), ((2, 2), 0)])
def test_initial_mesh_degenerate_domain(partition, base):
    with pytest.raises(ConfigurationError):
        build_initial_mesh(Partition(*partition), base)


def test_with_longest_edge_marking_rotates_rows():
    pts = np.array([[0, 0], [2, 0], [0, 1]], dtype=float)
    mesh = with_longest_edge_marking(pts, [[1, 2, 0]])
    # longest edge (1, 2) is opposite vertex 0, which becomes the newest vertex
    assert mesh.cells.tolist() == [[0, 1, 2]]


def test_partition_from_resolution():
    assert partition_from_resolution((1500, 1000)) == (3, 2)
    assert partition_from_resolution((1000, 1000)) == (1, 1)
    assert partition_from_resolution((1000, 2000)) == Partition(1, 2)
    with pytest.raises(ConfigurationError):
        partition_from_resolution((0, 10))


def test_default_resolution_follows_aspect_ratio():
    assert default_resolution((300, 200)) == (1500, 1000)
    assert default_resolution((200, 400)) == (1000, 2000)
    assert default_resolution((100, 100)) == (1000, 1000)
