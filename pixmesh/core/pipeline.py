"""Image-to-mesh pipeline entry point.

Wires the image adapter, grid builder, refinement scheduler, color sampler
and renderer together::

    from pixmesh import img2mesh
    result = img2mesh('photo.jpg', levels=[256, 128, 64], counts=[1, 2, 1])
    print(result.output_path, result.mesh)
"""
from __future__ import annotations

from dataclasses import dataclass, field
from importlib import import_module
from typing import List, Optional, Sequence, Tuple

from .colors import colored_segments
from .config import ImageMeshConfig, RefinementPlan
from .constants import DEFAULT_COUNTS, DEFAULT_LEVELS
from .grid import Partition, build_initial_mesh, default_resolution, partition_from_resolution
from .image import RawImage, load_image, resize, to_grayscale_intensity
from .logging_utils import get_logger
from .mesh import Mesh
from .scheduler import PassStats, run_plan

log = get_logger('pixmesh.pipeline')


@dataclass
class ImageMeshResult:
    """Outcome of a run: the final mesh and the resized image it was sampled from."""
    mesh: Mesh
    partition: Partition
    resolution: Tuple[int, int]
    image: RawImage
    history: List[PassStats] = field(default_factory=list)
    output_path: Optional[str] = None


def prepare_image(image: RawImage, resolution: Optional[Sequence[int]] = None):
    """Resize ``image`` to ``resolution`` (derived when None).

    Returns ``(resized, resolution, partition)``.
    """
    if resolution is None:
        resolution = default_resolution(image.size)
    resolution = (int(resolution[0]), int(resolution[1]))
    partition = partition_from_resolution(resolution)
    return resize(image, resolution), resolution, partition


def mesh_image(image: RawImage, plan: RefinementPlan, *, base: int = 1,
               resolution: Optional[Sequence[int]] = None, check_conformity: bool = False) -> ImageMeshResult:
    """Refine a mesh over an in-memory image without writing anything."""
    resized, resolution, partition = prepare_image(image, resolution)
    field_ = to_grayscale_intensity(resized)
    mesh = build_initial_mesh(partition, base)
    history: List[PassStats] = []
    mesh = run_plan(mesh, field_, partition, plan, check_conformity=check_conformity, history=history)
    log.info('final mesh: vertices=%d cells=%d edges=%d', mesh.num_vertices, mesh.num_cells, mesh.num_edges)
    return ImageMeshResult(mesh, partition, resolution, resized, history)


def run(config: ImageMeshConfig) -> ImageMeshResult:
    """Execute one configured run and write the rendered mesh.

    The configuration, including the refinement plan, is validated before
    the image is read.
    """
    plan = config.validate()
    outfile = config.resolve_output_path()
    image = load_image(config.input_path)
    result = mesh_image(image, plan, base=config.base, resolution=config.resolution,
                        check_conformity=config.check_conformity)
    segments, colors = colored_segments(result.mesh, result.image, result.partition)
    render = import_module('pixmesh.core.render')
    render.render_segments(segments, colors, outfile, result.resolution, result.partition)
    result.output_path = outfile
    return result


def img2mesh(imgfile: str, outfile: Optional[str] = None, *, resolution: Optional[Sequence[int]] = None,
             base: int = 1, levels: Sequence[int] = DEFAULT_LEVELS, counts: Sequence[int] = DEFAULT_COUNTS,
             check_conformity: bool = False) -> ImageMeshResult:
    """Convert ``imgfile`` into a colored simplicial mesh image.

    Parameters
    ----------
    imgfile : str
        Input image path.
    outfile : str, optional
        Output path; defaults to ``<name>_mesh.png`` beside the input, with
        extra ``_mesh`` suffixes until the name is free.
    resolution : (int, int), optional
        Working and output resolution ``(width, height)``. Derived from the
        input aspect ratio when omitted.
    base : int
        Number of grid squares per partition unit in the initial mesh.
    levels : sequence of int
        Strictly decreasing intensity levels in (0, 256]; smaller levels
        refine darker regions only.
    counts : sequence of int
        Number of passes at each level, aligned with ``levels``.
    """
    cfg = ImageMeshConfig(input_path=imgfile, output_path=outfile,
                          resolution=tuple(resolution) if resolution is not None else None,
                          base=base, levels=list(levels), counts=list(counts),
                          check_conformity=check_conformity)
    return run(cfg)


__all__ = ['ImageMeshResult', 'prepare_image', 'mesh_image', 'run', 'img2mesh']
