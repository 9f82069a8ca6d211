"""
PNG Converter
=============

SVG to PNG conversion through an external rasterizer that writes the image
to stdout (rsvg-convert by default).
"""

from typing import Any, Optional
from pathlib import Path

from latex_renderer.config.logging import get_logger
from latex_renderer.config.settings import Settings, get_settings
from latex_renderer.core.errors import StageLaunchError, StageTimeoutError
from latex_renderer.core.rendering.stage_runner import render_command, run_stage
from latex_renderer.models.schemas import StageStatus

logger = get_logger(__name__)


class PngConverter:
    """Rasterize SVG files with a stdout-writing command."""

    def __init__(self, command_template: str, timeout: Optional[float] = None):
        self.command_template = command_template
        self.timeout = timeout
        self.logger: Any = logger.bind(component="png_converter")  # structlog.BoundLoggerBase

    def convert(self, svg_path: Path) -> bytes:
        """
        Convert an SVG file into PNG bytes.

        Args:
            svg_path: SVG file to rasterize

        Returns:
            PNG image data

        Raises:
            StageTimeoutError: If the rasterizer exceeded its time budget
            StageLaunchError: If the rasterizer could not run or produced nothing
        """
        command = render_command(self.command_template, svg_path)
        outcome = run_stage(command, timeout=self.timeout, merge_stderr=False)

        if outcome.status == StageStatus.TIMED_OUT:
            self.logger.error("SVG to PNG conversion timed out", **outcome.log_context())
            raise StageTimeoutError("SVG to PNG conversion timed out", outcome)

        if not outcome.completed or not outcome.raw_output:
            self.logger.error("SVG to PNG conversion failed", **outcome.log_context())
            raise StageLaunchError("SVG to PNG conversion failed", outcome)

        self.logger.debug("SVG converted to PNG", file_size=len(outcome.raw_output))
        return outcome.raw_output


def create_png_converter(settings: Optional[Settings] = None) -> Optional[PngConverter]:
    """PNG converter from settings, None when SVG to PNG conversion is disabled."""
    template = (settings or get_settings()).svg2png_template()
    if template is None:
        return None
    return PngConverter(template)
