"""
Unit Tests for Schemas
======================

Tests for request parsing, format projection, dispatch payloads and metadata formatting.
"""

import pytest
from pydantic import ValidationError

from latex_renderer.core.errors import InvalidRequestError
from latex_renderer.models.schemas import (
    AsyncRenderRequest,
    FormulaRequest,
    LayoutMetadata,
    OutputFormat,
    alternate_request,
    parse_output_format,
)


class TestFormulaRequest:
    """Test formula request construction."""

    def test_from_uri(self):
        request = FormulaRequest.from_uri("/g/svg/E%3Dmc%5E2")

        assert request.formula == "E=mc^2"
        assert request.extension == OutputFormat.SVG
        assert request.is_svg
        assert not request.is_png

    def test_from_uri_trims_and_ignores_query(self):
        request = FormulaRequest.from_uri("/g/png/%20%5Cfrac%7Ba%7D%7Bb%7D%20?v=2")

        assert request.formula == r"\frac{a}{b}"
        assert request.is_png

    def test_from_uri_keeps_raw_slashes(self):
        request = FormulaRequest.from_uri("/g/svg/a/b")
        assert request.formula == "a/b"

    def test_from_uri_too_short(self):
        with pytest.raises(InvalidRequestError, match="Incorrect input format"):
            FormulaRequest.from_uri("/svg")

    def test_from_uri_bad_extension(self):
        with pytest.raises(InvalidRequestError, match="Expected SVG or PNG"):
            FormulaRequest.from_uri("/g/gif/x")

    def test_with_extension(self):
        request = FormulaRequest.create("x^2", "svg")

        png_request = request.with_extension(OutputFormat.PNG)

        assert png_request.is_png
        assert png_request.formula == "x^2"
        assert request.is_svg

    def test_with_bad_extension(self):
        request = FormulaRequest.create("x^2", "svg")
        with pytest.raises(InvalidRequestError):
            request.with_extension("jpg")

    def test_is_frozen(self):
        request = FormulaRequest.create("x", "svg")
        with pytest.raises(ValidationError):
            request.formula = "y"

    def test_parse_output_format(self):
        assert parse_output_format("png") == OutputFormat.PNG
        assert parse_output_format(OutputFormat.SVG) == OutputFormat.SVG
        assert isinstance(InvalidRequestError("x"), ValueError)


class TestAsyncRenderRequest:
    """Test the pre-render dispatch payload."""

    def test_alternate_of_svg_is_png(self):
        payload = alternate_request(FormulaRequest.create("x+y", "svg"))
        assert payload == AsyncRenderRequest(formula="x+y", extension=OutputFormat.PNG)

    def test_alternate_of_png_is_svg(self):
        payload = alternate_request(FormulaRequest.create("x+y", "png"))
        assert payload.extension == OutputFormat.SVG

    def test_as_form(self):
        payload = AsyncRenderRequest(formula=r"\alpha & b", extension=OutputFormat.PNG)
        assert payload.as_form() == "formula=%5Calpha+%26+b&extension=png"


class TestLayoutMetadata:
    """Test the parent-frame message payload."""

    def test_integral_values(self):
        metadata = LayoutMetadata(depth=1.0, width=10.0, height=6.0)
        assert metadata.message_payload() == "1|10|6|"

    def test_fractional_values(self):
        metadata = LayoutMetadata(depth=0.33, width=12.5, height=7.00001)
        assert metadata.message_payload() == "0.33|12.5|7.00001|"

    def test_tiny_values_use_exponent_form(self):
        metadata = LayoutMetadata(depth=-0.00001, width=0.000015, height=0.00009)
        assert metadata.message_payload() == "-1.0E-5|1.5E-5|9.0E-5|"
