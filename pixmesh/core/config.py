"""Configuration objects for pixmesh: the refinement plan and the pipeline settings."""
from __future__ import annotations

import math
import numbers
import os
from dataclasses import dataclass, field
from typing import Iterator, Optional, Sequence, Tuple

from .constants import (
    DEFAULT_COUNTS, DEFAULT_LEVELS, DEFAULT_OUTPUT_EXT, DEFAULT_OUTPUT_SUFFIX, LEVEL_SCALE,
)
from .errors import ConfigurationError


def _is_int(value) -> bool:
    return isinstance(value, numbers.Integral) and not isinstance(value, bool)


@dataclass(frozen=True)
class RefinementPlan:
    """Ordered ``(threshold, repeat_count)`` pairs, coarse to fine.

    Thresholds lie in (0, 1] and strictly decrease; every repeat count is a
    positive integer. The plan is validated on construction so a malformed
    plan is rejected before any mesh is touched.
    """
    thresholds: Tuple[float, ...]
    counts: Tuple[int, ...]

    def __post_init__(self):
        thresholds = tuple(self.thresholds)
        counts = tuple(self.counts)
        if len(thresholds) != len(counts):
            raise ConfigurationError(
                f"plan has {len(thresholds)} thresholds but {len(counts)} repeat counts")
        for t in thresholds:
            if not isinstance(t, numbers.Real) or isinstance(t, bool) or math.isnan(float(t)):
                raise ConfigurationError(f"threshold {t!r} is not a number")
            if not 0.0 < float(t) <= 1.0:
                raise ConfigurationError(f"threshold {t!r} outside (0, 1]")
        for c in counts:
            if not _is_int(c) or int(c) < 1:
                raise ConfigurationError(f"repeat count {c!r} is not a positive integer")
        for i in range(1, len(thresholds)):
            if not float(thresholds[i]) < float(thresholds[i - 1]):
                raise ConfigurationError(
                    f"thresholds must strictly decrease: {thresholds[i - 1]!r} then {thresholds[i]!r}")
        object.__setattr__(self, 'thresholds', tuple(float(t) for t in thresholds))
        object.__setattr__(self, 'counts', tuple(int(c) for c in counts))

    @classmethod
    def from_levels(cls, levels: Sequence[int], counts: Sequence[int], scale: int = LEVEL_SCALE) -> 'RefinementPlan':
        """Build a plan from integer intensity levels in (0, scale], normalized by ``scale``."""
        levels = list(levels)
        counts = list(counts)
        if len(levels) != len(counts):
            raise ConfigurationError(
                f"levels and counts must align: {len(levels)} levels, {len(counts)} counts")
        for lv in levels:
            if not _is_int(lv):
                raise ConfigurationError(f"level {lv!r} is not an integer")
            if not 0 < int(lv) <= scale:
                raise ConfigurationError(f"level {lv!r} outside (0, {scale}]")
        for i in range(1, len(levels)):
            if not int(levels[i]) < int(levels[i - 1]):
                raise ConfigurationError(
                    f"levels must strictly decrease: {levels[i - 1]} then {levels[i]}")
        return cls(tuple(int(lv) / scale for lv in levels), tuple(counts))

    @classmethod
    def default(cls) -> 'RefinementPlan':
        return cls.from_levels(DEFAULT_LEVELS, DEFAULT_COUNTS)

    def __iter__(self) -> Iterator[Tuple[float, int]]:
        return iter(zip(self.thresholds, self.counts))

    def __len__(self) -> int:
        return len(self.thresholds)

    @property
    def total_passes(self) -> int:
        return sum(self.counts)


def default_output_path(infile: str) -> str:
    """``<dir>/<name>_mesh.png`` for ``infile``, re-suffixed until no file exists there."""
    directory, fname = os.path.split(infile)
    name, _ = os.path.splitext(fname)
    outfile = os.path.join(directory, name + DEFAULT_OUTPUT_SUFFIX + DEFAULT_OUTPUT_EXT)
    while os.path.isfile(outfile):
        name = name + DEFAULT_OUTPUT_SUFFIX
        outfile = os.path.join(directory, name + DEFAULT_OUTPUT_SUFFIX + DEFAULT_OUTPUT_EXT)
    return outfile


@dataclass
class ImageMeshConfig:
    """Settings of one image-to-mesh run.

    Attributes
    ----------
    input_path : str
        Image to convert.
    output_path : str or None
        Where to write the rendered mesh; derived from ``input_path`` when None.
    resolution : (int, int) or None
        Working and output resolution ``(width, height)``; derived from the
        input aspect ratio when None.
    base : int
        Grid multiplier: the initial mesh has ``base`` squares per partition unit.
    levels, counts : sequence of int
        Refinement plan as integer levels in (0, 256] and repeat counts.
    check_conformity : bool
        Run the structural mesh checks after every refinement pass.
    """
    input_path: str
    output_path: Optional[str] = None
    resolution: Optional[Tuple[int, int]] = None
    base: int = 1
    levels: Sequence[int] = field(default_factory=lambda: list(DEFAULT_LEVELS))
    counts: Sequence[int] = field(default_factory=lambda: list(DEFAULT_COUNTS))
    check_conformity: bool = False

    def plan(self) -> RefinementPlan:
        return RefinementPlan.from_levels(self.levels, self.counts)

    def validate(self) -> RefinementPlan:
        """Check every setting that can be checked without reading the image."""
        if not _is_int(self.base) or self.base < 1:
            raise ConfigurationError(f"base must be a positive integer, got {self.base!r}")
        if self.resolution is not None:
            res = tuple(self.resolution)
            if len(res) != 2 or not all(_is_int(r) and r > 0 for r in res):
                raise ConfigurationError(f"resolution must be two positive integers, got {self.resolution!r}")
        return self.plan()

    def resolve_output_path(self) -> str:
        if self.output_path:
            return self.output_path
        return default_output_path(self.input_path)


__all__ = ['RefinementPlan', 'ImageMeshConfig', 'default_output_path']
