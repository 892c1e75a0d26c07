"""
Command line entry point for rendering scene scripts.

Usage:
    python -m scenescript scene.mdl [--config render.json] [--output-dir out]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import load_config
from .errors import ScriptError
from .interpreter import Interpreter

logger = logging.getLogger("scenescript")

EXIT_OK = 0
EXIT_SCRIPT_ERROR = 1
EXIT_USAGE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scenescript",
        description="Render a scene script to one image per frame",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Render a static scene; files are written by its save directives
  python -m scenescript robot.mdl

  # Render an animation into ./anim at 250x250
  python -m scenescript spin.mdl --output-dir anim --width 250 --height 250

  # Keep raw PPM output
  python -m scenescript robot.mdl --converter none
        """,
    )
    parser.add_argument("script", type=Path, help="scene script to execute")
    parser.add_argument("--config", type=Path, default=None, help="JSON interpreter config")
    parser.add_argument("--output-dir", default=None, help="directory for saved images and frames")
    parser.add_argument("--width", type=int, default=None, help="canvas width in pixels")
    parser.add_argument("--height", type=int, default=None, help="canvas height in pixels")
    parser.add_argument("--steps", type=int, default=None, help="tessellation steps for spheres and tori")
    parser.add_argument(
        "--converter",
        default=None,
        help="format normalization after each save: pillow, magick or none",
    )
    parser.add_argument("--no-display", action="store_true", help="ignore display directives")
    parser.add_argument("--dump-config", action="store_true", help="print the effective config and exit")
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="log every directive")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="only log warnings and errors")
    return parser


def _configure_logging(verbose: bool, quiet: bool) -> None:
    level = logging.DEBUG if verbose else logging.WARNING if quiet else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose, args.quiet)

    overrides = {
        "width": args.width,
        "height": args.height,
        "steps": args.steps,
        "output_dir": args.output_dir,
        "converter": args.converter,
    }
    try:
        config = load_config(args.config, overrides)
    except (OSError, ValueError, TypeError) as exc:
        logger.error(f"invalid configuration: {exc}")
        return EXIT_USAGE

    if args.dump_config:
        print(json.dumps(config.to_dict(), indent=2))
        return EXIT_OK

    if not args.script.is_file():
        logger.error(f"script not found: {args.script}")
        return EXIT_USAGE

    presenter = (lambda canvas: None) if args.no_display else None
    interpreter = Interpreter(config, presenter=presenter)
    try:
        result = interpreter.run_file(args.script)
    except (OSError, UnicodeDecodeError) as exc:
        logger.error(f"could not read script {args.script}: {exc}")
        return EXIT_USAGE
    except ScriptError as exc:
        logger.error(str(exc))
        partial = interpreter.last_result
        if partial is not None and partial.written:
            logger.error(f"{len(partial.written)} image(s) were written before the failure")
        return EXIT_SCRIPT_ERROR

    logger.info(f"Rendered {result.frame_count} frame(s), wrote {len(result.written)} image(s)")
    for warning in result.warnings:
        logger.debug(f"warning: {warning}")
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
