"""Command line front end: ``pixmesh INPUT [-o OUTPUT] [options]``."""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from .core.config import ImageMeshConfig
from .core.constants import DEFAULT_COUNTS, DEFAULT_LEVELS
from .core.errors import ConfigurationError, PixmeshError
from .core.logging_utils import configure_logging, get_logger
from .core.pipeline import run
from .core.scheduler import format_history

log = get_logger('pixmesh.cli')


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog='pixmesh',
        description='Convert an image into a colored triangular mesh refined by image intensity.')
    ap.add_argument('input', help='input image file')
    ap.add_argument('-o', '--output', default=None,
                    help='output image (default: <input>_mesh.png next to the input)')
    ap.add_argument('--resolution', type=int, nargs=2, metavar=('WIDTH', 'HEIGHT'), default=None,
                    help='working/output resolution (default: derived from the input aspect ratio)')
    ap.add_argument('--base', type=int, default=1, help='grid squares per partition unit (default: 1)')
    ap.add_argument('--levels', type=int, nargs='+', default=list(DEFAULT_LEVELS),
                    help='strictly decreasing intensity levels in (0, 256]')
    ap.add_argument('--counts', type=int, nargs='+', default=list(DEFAULT_COUNTS),
                    help='refinement passes per level, aligned with --levels')
    ap.add_argument('--check-conformity', action='store_true',
                    help='verify mesh conformity after every refinement pass')
    ap.add_argument('--stats', action='store_true', help='print a per-pass statistics table')
    ap.add_argument('--log-level', default='INFO', help='logging level (default: INFO)')
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)
    configure_logging(args.log_level)
    cfg = ImageMeshConfig(
        input_path=args.input,
        output_path=args.output,
        resolution=tuple(args.resolution) if args.resolution else None,
        base=args.base,
        levels=args.levels,
        counts=args.counts,
        check_conformity=args.check_conformity,
    )
    try:
        result = run(cfg)
    except ConfigurationError as e:
        ap.exit(2, f"pixmesh: configuration error: {e}\n")
    except PixmeshError as e:
        log.error('%s: %s', type(e).__name__, e)
        return 1
    if args.stats:
        print(format_history(result.history))
    print(result.output_path)
    return 0


if __name__ == '__main__':  # pragma: no cover
    sys.exit(main())
