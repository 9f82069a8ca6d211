"""
Unit Tests for Formula Guard
============================

Tests for the directive denylist applied before any workspace exists.
"""

import pytest
from unittest.mock import Mock

from latex_renderer.core.errors import ForbiddenDirectiveError, RenderError
from latex_renderer.core.formula.guard import (
    FORBIDDEN_DIRECTIVES,
    find_forbidden_directive,
    validate_formula,
)


class TestFindForbiddenDirective:
    """Test directive detection."""

    @pytest.mark.parametrize("directive", FORBIDDEN_DIRECTIVES)
    def test_detects_each_directive(self, directive):
        assert find_forbidden_directive(f"x^2 {directive}{{foo}} + 1") == directive

    def test_clean_formula(self):
        assert find_forbidden_directive(r"\frac{a}{b} + \sqrt{x}") is None

    def test_match_is_case_sensitive(self):
        assert find_forbidden_directive(r"\Write{x} \INPUT{y}") is None

    def test_plain_substring_match(self):
        # \inputenc is still rejected, matching is not token-aware
        assert find_forbidden_directive(r"\inputenc") == "\\input"


class TestValidateFormula:
    """Test rejection and diagnostics."""

    def test_accepts_clean_formula(self):
        sink = Mock()
        validate_formula(r"E = mc^2", sink)
        sink.error.assert_not_called()

    def test_rejects_with_directive(self):
        with pytest.raises(ForbiddenDirectiveError) as exc_info:
            validate_formula(r"\write18{rm -rf /}", Mock())

        assert exc_info.value.directive == "\\write"
        assert isinstance(exc_info.value, RenderError)
        assert str(exc_info.value) == "Forbidden commands."

    def test_logs_directive_and_formula(self):
        sink = Mock()
        formula = r"a + \special{ps: foo}"

        with pytest.raises(ForbiddenDirectiveError):
            validate_formula(formula, sink)

        sink.error.assert_called_once()
        args, kwargs = sink.error.call_args
        assert "\\special" in args[0]
        assert kwargs["directive"] == "\\special"
        assert kwargs["formula"] == formula

    def test_broken_sink_does_not_block_rejection(self):
        sink = Mock()
        sink.error.side_effect = RuntimeError("sink is down")

        with pytest.raises(ForbiddenDirectiveError):
            validate_formula(r"\usepackage{foo}", sink)

    def test_module_logger_used_without_sink(self):
        with pytest.raises(ForbiddenDirectiveError):
            validate_formula(r"\input{/etc/passwd}")
