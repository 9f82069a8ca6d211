"""
Render Errors
=============

Exceptions raised by the rendering pipeline. Every fatal failure derives from
RenderError so callers can map the whole family to a single response.
"""

from pathlib import Path
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from latex_renderer.models.schemas import StageOutcome


class RenderError(Exception):
    """Base exception for rendering failures."""

    pass


class ForbiddenDirectiveError(RenderError):
    """Formula contains a directive with filesystem or engine-escape side effects."""

    def __init__(self, directive: str):
        super().__init__("Forbidden commands.")
        self.directive = directive


class StageError(RenderError):
    """A toolchain stage failed."""

    def __init__(self, message: str, outcome: Optional["StageOutcome"] = None):
        super().__init__(message)
        self.outcome = outcome


class StageTimeoutError(StageError):
    """Toolchain stage exceeded its time budget."""

    pass


class StageLaunchError(StageError):
    """Toolchain stage could not be started or crashed."""

    pass


class InvalidFormulaError(StageError):
    """Typesetting completed without producing a DVI file."""

    pass


class MissingArtifactError(RenderError):
    """An expected toolchain output file does not exist."""

    def __init__(self, path: Path):
        super().__init__(f"Expected output file is missing: {path.name}")
        self.path = path


class TemplatingError(RenderError):
    """Formula could not be expanded into a LaTeX document."""

    pass


class InvalidRequestError(RenderError, ValueError):
    """Render request could not be parsed."""

    pass
