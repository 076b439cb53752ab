"""Public package API for pixmesh.

This facade provides a stable, flat import surface on top of the internal
implementation package ``pixmesh.core`` while deferring the matplotlib
renderer until first use to keep ``import pixmesh`` fast.

Example
-------
    from pixmesh import img2mesh, build_initial_mesh, refine, RefinementPlan

The deeper modules (``pixmesh.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _NotFound
    __version__ = _pkg_version("pixmesh")  # populated when installed
except _NotFound:  # pragma: no cover - source checkout without install
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

# Eager light-weight submodules
_const = _imp('pixmesh.core.constants')
_errors = _imp('pixmesh.core.errors')
_geom = _imp('pixmesh.core.geometry')
_mesh = _imp('pixmesh.core.mesh')
_grid = _imp('pixmesh.core.grid')
_pred = _imp('pixmesh.core.predicate')
_bisect = _imp('pixmesh.core.bisection')
_conf = _imp('pixmesh.core.conformity')
_config = _imp('pixmesh.core.config')
_sched = _imp('pixmesh.core.scheduler')
_image = _imp('pixmesh.core.image')
_colors = _imp('pixmesh.core.colors')
_pipe = _imp('pixmesh.core.pipeline')


def _lazy_module(mod_name):
    class _ModuleProxy:
        __slots__ = ('_m',)

        def _load(self):
            try:
                return self._m
            except AttributeError:
                self._m = _imp(mod_name)
                return self._m

        def __getattr__(self, item):
            if item == '_m':
                raise AttributeError(item)
            return getattr(self._load(), item)

        def __dir__(self):
            return dir(self._load())
    return _ModuleProxy()


# Lazily loaded matplotlib renderer
render = _lazy_module('pixmesh.core.render')

# Data model
Mesh = _mesh.Mesh
Partition = _grid.Partition
RefinementPlan = _config.RefinementPlan
ImageMeshConfig = _config.ImageMeshConfig
IntensityField = _image.IntensityField
RawImage = _image.RawImage
ColorLayout = _image.ColorLayout
Color = _image.Color

# Errors
PixmeshError = _errors.PixmeshError
ConfigurationError = _errors.ConfigurationError
GeometryMismatchError = _errors.GeometryMismatchError
UnsupportedColorFormatError = _errors.UnsupportedColorFormatError
MeshError = _errors.MeshError
CellIndexError = _errors.CellIndexError

# Operations
build_initial_mesh = _grid.build_initial_mesh
partition_from_resolution = _grid.partition_from_resolution
default_resolution = _grid.default_resolution
mark_cells = _pred.mark_cells
refine = _bisect.refine
run_plan = _sched.run_plan
edge_colors = _colors.edge_colors
color_policy = _colors.color_policy
check_mesh_conformity = _conf.check_mesh_conformity
load_image = _image.load_image
to_grayscale_intensity = _image.to_grayscale_intensity
pixel_color_at = _image.pixel_color_at
img2mesh = _pipe.img2mesh

# Namespace submodules for exploratory users
constants = _const
geometry = _geom
conformity = _conf
bisection = _bisect
scheduler = _sched
image = _image
colors = _colors
pipeline = _pipe

__all__ = [
    '__version__',
    # data model
    'Mesh', 'Partition', 'RefinementPlan', 'ImageMeshConfig', 'IntensityField', 'RawImage',
    'ColorLayout', 'Color',
    # errors
    'PixmeshError', 'ConfigurationError', 'GeometryMismatchError', 'UnsupportedColorFormatError',
    'MeshError', 'CellIndexError',
    # operations
    'build_initial_mesh', 'partition_from_resolution', 'default_resolution', 'mark_cells', 'refine',
    'run_plan', 'edge_colors', 'color_policy', 'check_mesh_conformity', 'load_image', 'to_grayscale_intensity',
    'pixel_color_at', 'img2mesh',
    # submodules / namespaces
    'constants', 'geometry', 'conformity', 'bisection', 'scheduler', 'image', 'colors', 'pipeline', 'render',
]
