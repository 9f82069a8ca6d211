"""
LaTeX Renderer
==============

The rendering pipeline: validate the formula, expand it into a LaTeX
document, typeset it to DVI, convert the DVI to SVG and optionally to PNG.
Each request runs in its own workspace, removed on every exit path.

Typesetting success is judged by the presence of the DVI file, not by the
latex exit code: latex exits nonzero on many recoverable warnings.
"""

from typing import Any, Optional, Union

from latex_renderer.config.logging import get_logger
from latex_renderer.config.settings import Settings, get_settings
from latex_renderer.core.errors import (
    InvalidFormulaError,
    MissingArtifactError,
    StageLaunchError,
    StageTimeoutError,
)
from latex_renderer.core.formula.guard import validate_formula
from latex_renderer.core.formula.templater import DEFAULT_TEMPLATES_DIR, Templater
from latex_renderer.core.rendering.png_converter import PngConverter, create_png_converter
from latex_renderer.core.rendering.stage_runner import render_command, run_stage
from latex_renderer.core.rendering.svg_metadata import process_svg
from latex_renderer.core.rendering.workspace import Workspace
from latex_renderer.models.schemas import (
    CompiledSource,
    FormulaRequest,
    OutputFormat,
    StageOutcome,
    StageStatus,
    parse_output_format,
)

logger = get_logger(__name__)

SVG_ERRORS = "surrogateescape"


class LatexRenderer:
    """Drive latex, dvisvgm and a rasterizer to render one formula at a time."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        templater: Optional[Templater] = None,
        png_converter: Optional[PngConverter] = None,
        diagnostics: Optional[Any] = None,
    ):
        self.settings = settings or get_settings()
        self.templater = templater or Templater(self.settings.templates_dir or DEFAULT_TEMPLATES_DIR)
        self.png_converter = png_converter
        # structlog.BoundLoggerBase or any object with error/warning/debug methods
        self.logger: Any = diagnostics if diagnostics is not None else logger.bind(component="renderer")

    def render(self, formula: str, output_format: Union[OutputFormat, str] = OutputFormat.SVG) -> bytes:
        """
        Render a formula.

        Args:
            formula: Raw LaTeX formula
            output_format: "svg" or "png"

        Returns:
            SVG document (UTF-8) or PNG image bytes; empty bytes for PNG when
            no rasterizer is configured

        Raises:
            ForbiddenDirectiveError: If the formula uses a denylisted directive
            TemplatingError: If the templater fails
            StageTimeoutError: If latex exceeded its timeout
            StageLaunchError: If latex could not run
            InvalidFormulaError: If latex produced no DVI file
            MissingArtifactError: If dvisvgm or dvipng produced no output file
        """
        output_format = parse_output_format(output_format)
        validate_formula(formula, self.logger)

        with Workspace.allocate(self.settings.tmp_dir) as workspace:
            source = self.templater.run(formula)
            workspace.write_source(source.text)
            self._debug("LaTeX source", source=source.text)

            self._typeset(workspace, source)
            svg = self._vectorize(workspace, source)

            if output_format == OutputFormat.PNG:
                return self._rasterize(workspace)
            return svg.encode("utf-8", SVG_ERRORS)

    def render_request(self, request: FormulaRequest) -> bytes:
        """Render a parsed request in its requested format."""
        return self.render(request.formula, request.extension)

    def _typeset(self, workspace: Workspace, source: CompiledSource) -> StageOutcome:
        """LaTeX -> DVI."""
        command = self.settings.latex_args() + [str(workspace.source)]
        outcome = run_stage(
            command,
            timeout=self.settings.primary_timeout,
            cwd=self.settings.tmp_dir,
        )

        if outcome.status == StageStatus.TIMED_OUT:
            message = "Latex has been interrupted by a timeout"
            self._report(message, **outcome.log_context(), output=outcome.output, source=source.text)
            raise StageTimeoutError(message, outcome)

        if outcome.status == StageStatus.LAUNCH_FAILED:
            message = "Cannot run Latex"
            self._report(message, **outcome.log_context(), output=outcome.output, source=source.text)
            raise StageLaunchError(message, outcome)

        self._debug("Latex finished", exit_code=outcome.exit_code, output=outcome.output)

        if not workspace.dvi.exists():
            self._report(
                "Latex finished incorrectly",
                **outcome.log_context(),
                output=outcome.output,
                source=source.text,
                trace=workspace.read_log(),
            )
            raise InvalidFormulaError("Invalid formula", outcome)

        return outcome

    def _vectorize(self, workspace: Workspace, source: CompiledSource) -> str:
        """DVI -> SVG with layout metadata embedded."""
        command = render_command(self.settings.svg_template(), workspace.base)
        outcome = run_stage(command, cwd=self.settings.tmp_dir)
        self._debug("Dvisvgm finished", **outcome.log_context(), output=outcome.output)

        try:
            # Bytes in, bytes out: no newline translation, undecodable bytes survive
            svg = workspace.svg.read_bytes().decode("utf-8", SVG_ERRORS)
        except FileNotFoundError:
            self._report("SVG file was not created", **outcome.log_context(), source=source.text)
            raise MissingArtifactError(workspace.svg) from None

        return process_svg(svg, source.has_baseline, self.settings.outer_scale)

    def _rasterize(self, workspace: Workspace) -> bytes:
        """SVG -> PNG, or DVI -> PNG through the legacy command."""
        if self.png_converter is not None:
            return self.png_converter.convert(workspace.svg)

        png_template = self.settings.png_template()
        if png_template is not None:
            outcome = run_stage(render_command(png_template, workspace.base), cwd=self.settings.tmp_dir)
            self._debug("Dvipng finished", **outcome.log_context(), output=outcome.output)
            try:
                return workspace.png.read_bytes()
            except FileNotFoundError:
                self._report("PNG file was not created", **outcome.log_context())
                raise MissingArtifactError(workspace.png) from None

        self._warn("PNG requested but no rasterizer is configured")
        return b""

    def _report(self, message: str, **context: Any) -> None:
        try:
            self.logger.error(message, **context)
        except Exception:  # noqa: BLE001
            pass

    def _warn(self, message: str, **context: Any) -> None:
        try:
            self.logger.warning(message, **context)
        except Exception:  # noqa: BLE001
            pass

    def _debug(self, message: str, **context: Any) -> None:
        if not self.settings.debug:
            return
        try:
            self.logger.debug(message, **context)
        except Exception:  # noqa: BLE001
            pass


def create_renderer(settings: Optional[Settings] = None) -> LatexRenderer:
    """Build a renderer wired from settings."""
    settings = settings or get_settings()
    return LatexRenderer(
        settings=settings,
        templater=Templater(settings.templates_dir or DEFAULT_TEMPLATES_DIR),
        png_converter=create_png_converter(settings),
    )


# Global renderer instance
_global_renderer: Optional[LatexRenderer] = None


def render_formula(formula: str, output_format: Union[OutputFormat, str] = OutputFormat.SVG) -> bytes:
    """Render a formula with the global renderer built from current settings."""
    global _global_renderer
    if _global_renderer is None:
        _global_renderer = create_renderer()
    return _global_renderer.render(formula, output_format)


def reset_renderer() -> None:
    """Drop the global renderer so the next call picks up reloaded settings."""
    global _global_renderer
    _global_renderer = None
