"""
Formula Guard
=============

Rejects formulas that use TeX directives able to touch the filesystem or
escape the typesetting engine. Runs before any workspace is allocated.
"""

from typing import Any, Optional, Tuple

from latex_renderer.config.logging import get_logger
from latex_renderer.core.errors import ForbiddenDirectiveError

logger = get_logger(__name__)

# Matched as plain case-sensitive substrings
FORBIDDEN_DIRECTIVES: Tuple[str, ...] = ("\\write", "\\input", "\\usepackage", "\\special")


def find_forbidden_directive(formula: str) -> Optional[str]:
    """Return the first denylisted directive found in the formula, if any."""
    for directive in FORBIDDEN_DIRECTIVES:
        if directive in formula:
            return directive
    return None


def validate_formula(formula: str, diagnostics: Optional[Any] = None) -> None:
    """
    Check a formula against the directive denylist.

    Args:
        formula: Raw LaTeX formula
        diagnostics: Logger receiving the rejection record, module logger if omitted

    Raises:
        ForbiddenDirectiveError: If the formula contains a denylisted directive
    """
    directive = find_forbidden_directive(formula)
    if directive is None:
        return

    sink = diagnostics if diagnostics is not None else logger
    try:
        sink.error(f'Forbidden command "{directive}"', directive=directive, formula=formula)
    except Exception:  # noqa: BLE001
        pass

    raise ForbiddenDirectiveError(directive)
