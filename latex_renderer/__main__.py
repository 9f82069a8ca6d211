#!/usr/bin/env python3
"""
Render a single formula from the command line.

Usage:
    python -m latex_renderer 'E=mc^2' --format svg --output formula.svg
    python -m latex_renderer '\\frac{a}{b}' --format png > formula.png
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from latex_renderer.config.logging import get_logger
from latex_renderer.config.settings import get_settings
from latex_renderer.core.errors import RenderError
from latex_renderer.core.rendering.renderer import create_renderer
from latex_renderer.models.schemas import OutputFormat

logger = get_logger("latex_renderer.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="latex_renderer",
        description="Render a LaTeX formula into an SVG or PNG image.",
    )
    parser.add_argument("formula", help="LaTeX formula to render")
    parser.add_argument(
        "--format",
        "-f",
        choices=[fmt.value for fmt in OutputFormat],
        default=OutputFormat.SVG.value,
        help="Output format (default: svg)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help="Output file (default: stdout)",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    renderer = create_renderer(get_settings())

    try:
        content = renderer.render(args.formula, args.format)
    except RenderError as e:
        logger.error("Rendering failed", error=str(e), error_type=type(e).__name__)
        return 1

    if not content:
        logger.error("Renderer produced no output", format=args.format)
        return 1

    if args.output is not None:
        args.output.write_bytes(content)
        logger.info("Formula rendered", output=str(args.output), file_size=len(content))
    else:
        sys.stdout.buffer.write(content)
        sys.stdout.buffer.flush()

    return 0


if __name__ == "__main__":
    sys.exit(main())
