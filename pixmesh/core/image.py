"""Image adapter: decoding, resizing, grayscale intensity and pixel lookup.

Pixel arrays are kept as float64 in [0, 1] and indexed ``[x, y]`` with ``y``
growing upward, the same orientation as mesh coordinates. Decoded images
come in row-major ``[row, column]`` order with row 0 at the top, so they are
rotated a quarter turn clockwise on the way in.
"""
from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import imageio
import numpy as np
from scipy import ndimage

from .errors import ConfigurationError, GeometryMismatchError, UnsupportedColorFormatError
from .logging_utils import get_logger

log = get_logger('pixmesh.image')

# ITU-R BT.601 luma weights
LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float64)


class ColorLayout(enum.Enum):
    RGB = 'RGB'
    RGBA = 'RGBA'


@dataclass(frozen=True)
class Color:
    """A sampled pixel tagged with its channel layout."""
    layout: ColorLayout
    channels: Tuple[float, ...]

    @property
    def alpha(self) -> float:
        return self.channels[3] if self.layout is ColorLayout.RGBA else 1.0

    def to_rgba(self) -> Tuple[float, float, float, float]:
        r, g, b = self.channels[:3]
        return (r, g, b, self.alpha)


def normalize_pixels(array) -> np.ndarray:
    """Float64 copy of ``array`` scaled to [0, 1] according to its dtype."""
    arr = np.asarray(array)
    if arr.dtype == np.bool_:
        return arr.astype(np.float64)
    if np.issubdtype(arr.dtype, np.integer):
        return arr.astype(np.float64) / float(np.iinfo(arr.dtype).max)
    return np.clip(arr.astype(np.float64), 0.0, 1.0)


@dataclass(frozen=True, eq=False)
class RawImage:
    """Decoded color image, ``(width, height)`` or ``(width, height, channels)``."""
    pixels: np.ndarray

    def __post_init__(self):
        px = np.array(self.pixels, dtype=np.float64)
        if px.ndim not in (2, 3):
            raise ConfigurationError(f"image must be 2D or 3D, got shape {px.shape}")
        px.setflags(write=False)
        object.__setattr__(self, 'pixels', px)

    @classmethod
    def from_array(cls, array) -> 'RawImage':
        """Build from a decoded ``[row, column(, channel)]`` array, top row first."""
        return cls(np.rot90(normalize_pixels(array), k=-1))

    def to_array(self) -> np.ndarray:
        """Inverse of :meth:`from_array`, float64 in [0, 1]."""
        return np.rot90(self.pixels, k=1).copy()

    @property
    def size(self) -> Tuple[int, int]:
        return int(self.pixels.shape[0]), int(self.pixels.shape[1])

    @property
    def channels(self) -> int:
        return 1 if self.pixels.ndim == 2 else int(self.pixels.shape[2])

    @property
    def layout(self) -> Optional[ColorLayout]:
        """RGB or RGBA, or None for any other channel layout."""
        if self.pixels.ndim == 3:
            if self.pixels.shape[2] == 3:
                return ColorLayout.RGB
            if self.pixels.shape[2] == 4:
                return ColorLayout.RGBA
        return None


@dataclass(frozen=True, eq=False)
class IntensityField:
    """Normalized grayscale intensities, ``(width, height)``, 0 is darkest."""
    values: np.ndarray

    def __post_init__(self):
        vals = np.array(self.values, dtype=np.float64)
        if vals.ndim != 2:
            raise ConfigurationError(f"intensity field must be 2D, got shape {vals.shape}")
        vals.setflags(write=False)
        object.__setattr__(self, 'values', vals)

    @property
    def shape(self) -> Tuple[int, int]:
        return int(self.values.shape[0]), int(self.values.shape[1])

    def __getitem__(self, coord) -> float:
        x, y = coord
        w, h = self.shape
        if not (0 <= x < w and 0 <= y < h):
            raise GeometryMismatchError(f"pixel {(x, y)} outside field of shape {(w, h)}")
        return float(self.values[x, y])


def load_image(path: str) -> RawImage:
    """Decode an image file with imageio. Read errors propagate unchanged."""
    data = imageio.v2.imread(path)
    image = RawImage.from_array(data)
    log.info('loaded %s: size=%s channels=%d', path, image.size, image.channels)
    return image


def to_grayscale_intensity(image: RawImage) -> IntensityField:
    """Luma of the color channels; alpha is ignored."""
    px = image.pixels
    if px.ndim == 2:
        gray = px
    elif px.shape[2] in (3, 4):
        gray = px[..., :3] @ LUMA_WEIGHTS
    elif px.shape[2] in (1, 2):
        gray = px[..., 0]
    else:
        raise UnsupportedColorFormatError(f"cannot derive intensity from {px.shape[2]} channels")
    return IntensityField(np.clip(gray, 0.0, 1.0))


def resize(image: RawImage, resolution: Sequence[int]) -> RawImage:
    """Linearly resample ``image`` to ``(width, height)`` pixels."""
    w, h = (int(r) for r in resolution)
    if w <= 0 or h <= 0:
        raise ConfigurationError(f"resolution must be positive, got {tuple(resolution)}")
    if image.size == (w, h):
        return image
    W, H = image.size
    factors = [w / W, h / H] + [1.0] * (image.pixels.ndim - 2)
    out = ndimage.zoom(image.pixels, factors, order=1, mode='nearest', grid_mode=True)
    if out.shape[:2] != (w, h):
        raise ConfigurationError(f"resize produced {out.shape[:2]}, expected {(w, h)}")
    log.info('resized image %s -> %s', image.size, (w, h))
    return RawImage(np.clip(out, 0.0, 1.0))


def pixel_color_at(image: RawImage, coord: Sequence[int]) -> Color:
    """Tagged color of the pixel at ``coord = (x, y)``."""
    x, y = int(coord[0]), int(coord[1])
    w, h = image.size
    if not (0 <= x < w and 0 <= y < h):
        raise GeometryMismatchError(f"pixel {(x, y)} outside image of size {(w, h)}")
    layout = image.layout
    if layout is None:
        raise UnsupportedColorFormatError(f"pixel layout with {image.channels} channel(s) is not supported")
    return Color(layout, tuple(float(v) for v in image.pixels[x, y]))


__all__ = [
    'ColorLayout', 'Color', 'RawImage', 'IntensityField', 'normalize_pixels',
    'load_image', 'to_grayscale_intensity', 'resize', 'pixel_color_at', 'LUMA_WEIGHTS',
]
