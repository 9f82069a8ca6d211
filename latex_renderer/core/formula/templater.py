"""
LaTeX Templater
===============

Expand a raw formula into a complete LaTeX document using Jinja2.
Detects the packages a formula relies on and whether it is typeset inline
(with a text baseline) or as a standalone display block.
"""

from typing import Any, Iterable, List, Optional, Tuple
from dataclasses import dataclass
from pathlib import Path
import re

import jinja2

from latex_renderer.config.logging import get_logger
from latex_renderer.config.settings import get_settings
from latex_renderer.core.errors import TemplatingError
from latex_renderer.models.schemas import CompiledSource

logger = get_logger(__name__)

DEFAULT_TEMPLATE = "formula.tex.j2"
DEFAULT_TEMPLATES_DIR = Path(__file__).parent / "templates"

BASE_PACKAGES: Tuple[str, ...] = (
    r"\usepackage{amsmath}",
    r"\usepackage{amssymb}",
)

# Environments typeset outside math mode, they have no meaningful baseline
DISPLAY_ENVIRONMENTS = frozenset(
    {
        "tikzpicture",
        "tikzcd",
        "align",
        "align*",
        "gather",
        "gather*",
        "multline",
        "multline*",
        "flalign",
        "flalign*",
        "equation",
        "equation*",
        "eqnarray",
        "eqnarray*",
    }
)

_LEADING_ENVIRONMENT_RE = re.compile(r"^\\begin\{([A-Za-z*]+)\}")

# Pictures need text mode wherever they appear in the formula
_PICTURE_RE = re.compile(r"\\begin\{tikz(?:picture|cd)\}|\\xymatrix\b")


@dataclass(frozen=True)
class LatexPackage:
    """Preamble code loaded when the formula uses one of its commands."""

    name: str
    trigger: "re.Pattern[str]"
    code: str

    def is_used_by(self, formula: str) -> bool:
        return self.trigger.search(formula) is not None


DEFAULT_PACKAGES: Tuple[LatexPackage, ...] = (
    LatexPackage(
        "tikz",
        re.compile(r"\\begin\{tikzpicture\}|\\tikz\b"),
        "\\usepackage{tikz}\n\\usetikzlibrary{arrows.meta,calc,positioning}",
    ),
    LatexPackage("tikz-cd", re.compile(r"\\begin\{tikzcd\}"), r"\usepackage{tikz-cd}"),
    LatexPackage("xy", re.compile(r"\\xymatrix\b"), r"\usepackage[all]{xy}"),
    LatexPackage("mhchem", re.compile(r"\\ce\{"), r"\usepackage[version=4]{mhchem}"),
    LatexPackage("xcolor", re.compile(r"\\(?:color|textcolor|colorbox)\b"), r"\usepackage{xcolor}"),
    LatexPackage("cancel", re.compile(r"\\[bx]?cancel(?:to)?\b"), r"\usepackage{cancel}"),
    LatexPackage("bm", re.compile(r"\\bm\b"), r"\usepackage{bm}"),
)


class Templater:
    """Jinja2-based LaTeX document templater."""

    def __init__(
        self,
        templates_dir: Optional[Path] = None,
        packages: Iterable[LatexPackage] = DEFAULT_PACKAGES,
        template_name: str = DEFAULT_TEMPLATE,
    ) -> None:
        if templates_dir is None:
            templates_dir = get_settings().templates_dir or DEFAULT_TEMPLATES_DIR
        self.templates_dir = templates_dir
        self.packages = tuple(packages)
        self.template_name = template_name
        self.logger: Any = logger.bind(component="templater")  # structlog.BoundLoggerBase
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 environment with LaTeX-friendly delimiters."""
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(self.templates_dir)),
            block_start_string=r"\BLOCK{",
            block_end_string="}",
            variable_start_string=r"\VAR{",
            variable_end_string="}",
            comment_start_string=r"\#{",
            comment_end_string="}",
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=jinja2.StrictUndefined,
            autoescape=False,
        )

    def run(self, formula: str) -> CompiledSource:
        """
        Expand a formula into a complete LaTeX document.

        Args:
            formula: Raw LaTeX formula

        Returns:
            CompiledSource with the document text and baseline flag

        Raises:
            TemplatingError: If the template cannot be loaded or rendered
        """
        formula = formula.strip()
        inline = not is_display_formula(formula)
        packages = self.detect_packages(formula)

        try:
            template = self.env.get_template(self.template_name)
            text = template.render(
                formula=formula,
                inline=inline,
                packages=list(BASE_PACKAGES) + packages,
            )
        except jinja2.TemplateError as e:
            self.logger.error("Template rendering failed", template=self.template_name, error=str(e))
            raise TemplatingError(f"Template rendering failed: {e}") from e

        self.logger.debug("Formula templated", inline=inline, packages=len(packages))
        return CompiledSource(text=text, has_baseline=inline)

    def detect_packages(self, formula: str) -> List[str]:
        """Preamble code for every package the formula uses."""
        return [package.code for package in self.packages if package.is_used_by(formula)]


def is_display_formula(formula: str) -> bool:
    """Whether the formula is typeset outside math mode, without a baseline."""
    if _PICTURE_RE.search(formula):
        return True
    match = _LEADING_ENVIRONMENT_RE.match(formula.strip())
    return match is not None and match.group(1) in DISPLAY_ENVIRONMENTS
