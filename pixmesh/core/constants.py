"""Central numerical tolerances and pipeline defaults.

This module centralizes tiny numeric thresholds and default parameters used
across the codebase so they can be tuned consistently and referenced without
scattering literals.
"""
from __future__ import annotations

# Geometry tolerances
EPS_AREA: float = 1e-12           # minimum positive (absolute) triangle area
EPS_COLINEAR: float = 1e-12       # relative tolerance for point-on-segment tests

# Refinement plan
LEVEL_SCALE: int = 256            # integer levels are divided by this to get thresholds
DEFAULT_LEVELS = (256, 221, 181, 141, 101, 66, 36, 16)
DEFAULT_COUNTS = (1, 2, 2, 2, 1, 1, 1, 1)

# Color sampling
WHITE_THRESHOLD: float = 240.0 / 255.0   # RGB pixels above this on every channel are dropped
TRANSPARENT_BLACK = (0.0, 0.0, 0.0, 0.0)

# Output
DEFAULT_OUTPUT_SUFFIX: str = '_mesh'
DEFAULT_OUTPUT_EXT: str = '.png'
DEFAULT_SHORT_SIDE: int = 1000     # pixels along the short side of a derived resolution
DEFAULT_DPI: int = 100

__all__ = [
    'EPS_AREA',
    'EPS_COLINEAR',
    'LEVEL_SCALE',
    'DEFAULT_LEVELS',
    'DEFAULT_COUNTS',
    'WHITE_THRESHOLD',
    'TRANSPARENT_BLACK',
    'DEFAULT_OUTPUT_SUFFIX',
    'DEFAULT_OUTPUT_EXT',
    'DEFAULT_SHORT_SIDE',
    'DEFAULT_DPI',
]
