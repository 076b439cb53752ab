import pytest

from pixmesh.core.config import ImageMeshConfig, RefinementPlan, default_output_path
from pixmesh.core.errors import ConfigurationError


def test_from_levels_normalizes_by_256():
    plan = RefinementPlan.from_levels([256, 128, 64], [1, 2, 1])
    assert plan.thresholds == (1.0, 0.5, 0.25)
    assert plan.counts == (1, 2, 1)
    assert list(plan) == [(1.0, 1), (0.5, 2), (0.25, 1)]
    assert len(plan) == 3
    assert plan.total_passes == 4


def test_default_plan():
    plan = RefinementPlan.default()
    assert len(plan) == 8
    assert plan.thresholds[0] == 1.0
    assert plan.thresholds[-1] == 16 / 256
    assert plan.total_passes == 11


def test_increasing_levels_fail_fast():
    with pytest.raises(ConfigurationError):
        RefinementPlan.from_levels([100, 200], [1, 1])


@pytest.mark.parametrize('levels, counts', [
    ([128, 128], [1, 1]),      # not strictly decreasing
    ([0], [1]),                # below range
    ([257], [1]),              # above range
    ([200, 100], [1]),         # length mismatch
    ([200, 100], [1, 0]),      # non-positive count
    ([200.5], [1]),            # not an integer
    ([200], [True]),
])
def test_malformed_levels(levels, counts):
    with pytest.raises(ConfigurationError):
        RefinementPlan.from_levels(levels, counts)


@pytest.mark.parametrize('thresholds, counts', [
    ((0.5, 0.6), (1, 1)),
    ((0.0,), (1,)),
    ((1.2,), (1,)),
    ((float('nan'),), (1,)),
    ((0.5,), ()),
])
def test_malformed_thresholds(thresholds, counts):
    with pytest.raises(ValueError):
        RefinementPlan(thresholds, counts)


def test_default_output_path_avoids_collisions(tmp_path):
    src = tmp_path / 'photo.jpg'
    first = default_output_path(str(src))
    assert first == str(tmp_path / 'photo_mesh.png')
    (tmp_path / 'photo_mesh.png').write_bytes(b'')
    second = default_output_path(str(src))
    assert second == str(tmp_path / 'photo_mesh_mesh.png')
    (tmp_path / 'photo_mesh_mesh.png').write_bytes(b'')
    assert default_output_path(str(src)) == str(tmp_path / 'photo_mesh_mesh_mesh.png')


def test_default_output_path_without_directory():
    assert default_output_path('does-not-exist-xyz.png') == 'does-not-exist-xyz_mesh.png'


def test_image_mesh_config(tmp_path):
    cfg = ImageMeshConfig(input_path=str(tmp_path / 'in.png'))
    assert cfg.validate() == RefinementPlan.default()
    assert cfg.resolve_output_path() == str(tmp_path / 'in_mesh.png')
    cfg.output_path = 'explicit.png'
    assert cfg.resolve_output_path() == 'explicit.png'


@pytest.mark.parametrize('kwargs', [
    {'base': 0},
    {'resolution': (100,)},
    {'resolution': (100, -5)},
    {'levels': [10, 20], 'counts': [1, 1]},
])
def test_image_mesh_config_validation(kwargs):
    with pytest.raises(ConfigurationError):
        ImageMeshConfig(input_path='x.png', **kwargs).validate()
