"""
Pydantic Models and Schemas
===========================

Core data models for render requests, compiled LaTeX sources, toolchain
stage outcomes and SVG layout metadata.
"""

from typing import Optional, List, Dict
from enum import Enum
from urllib.parse import unquote, urlencode, urlsplit

from pydantic import BaseModel, ConfigDict, Field

from latex_renderer.core.errors import InvalidRequestError


# Enums
class OutputFormat(str, Enum):
    """Requested output representation."""
    SVG = "svg"
    PNG = "png"


class StageStatus(str, Enum):
    """How an external toolchain invocation ended."""
    COMPLETED = "completed"
    TIMED_OUT = "timed_out"
    LAUNCH_FAILED = "launch_failed"


# Request Models
class FormulaRequest(BaseModel):
    """A formula together with the requested output format."""
    model_config = ConfigDict(frozen=True)

    formula: str = Field(..., description="Raw LaTeX formula")
    extension: OutputFormat = Field(..., description="Requested output format")

    @classmethod
    def from_uri(cls, uri: str) -> "FormulaRequest":
        """
        Parse a request URI of the form /<prefix>/<extension>/<formula>.

        Raises:
            InvalidRequestError: If the URI has too few segments or an unsupported extension
        """
        parts = urlsplit(uri).path.split("/")
        if len(parts) < 4:
            raise InvalidRequestError("Incorrect input format.")

        extension = parts[2]
        formula = unquote("/".join(parts[3:])).strip()

        return cls.create(formula, extension)

    @classmethod
    def create(cls, formula: str, extension: str) -> "FormulaRequest":
        """Build a request, rejecting unsupported extensions."""
        return cls(formula=formula, extension=parse_output_format(extension))

    def with_extension(self, extension: OutputFormat) -> "FormulaRequest":
        """Same formula projected onto another output format."""
        return self.model_copy(update={"extension": parse_output_format(extension)})

    @property
    def is_svg(self) -> bool:
        return self.extension == OutputFormat.SVG

    @property
    def is_png(self) -> bool:
        return self.extension == OutputFormat.PNG


class AsyncRenderRequest(BaseModel):
    """Payload dispatched to pre-render a formula in another format."""
    model_config = ConfigDict(frozen=True)

    formula: str = Field(..., description="Raw LaTeX formula")
    extension: OutputFormat = Field(..., description="Format to pre-render")

    def as_form(self) -> str:
        """Form-encoded body for the dispatch channel."""
        return urlencode({"formula": self.formula, "extension": self.extension.value})


def parse_output_format(extension: str) -> OutputFormat:
    """Output format for an extension string, rejecting unsupported ones."""
    try:
        return OutputFormat(extension)
    except ValueError:
        raise InvalidRequestError(
            f"Unsupported extension \"{extension}\". Expected SVG or PNG."
        ) from None


def alternate_request(request: FormulaRequest) -> AsyncRenderRequest:
    """Build the dispatch payload for the format the client did not ask for."""
    other = OutputFormat.PNG if request.is_svg else OutputFormat.SVG
    return AsyncRenderRequest(formula=request.formula, extension=other)


# Pipeline Models
class CompiledSource(BaseModel):
    """Complete LaTeX document produced from a formula."""
    model_config = ConfigDict(frozen=True)

    text: str = Field(..., description="LaTeX document source")
    has_baseline: bool = Field(True, description="Whether the visual has a text baseline")


class StageOutcome(BaseModel):
    """Result of one external toolchain invocation."""
    command: List[str] = Field(..., description="Executed argument list")
    status: StageStatus = Field(..., description="How the invocation ended")
    exit_code: Optional[int] = Field(None, description="Process exit code if it completed")
    output: str = Field("", description="Captured process output")
    error: Optional[str] = Field(None, description="Timeout or launch failure description")
    raw_output: bytes = Field(b"", description="Undecoded stdout", exclude=True, repr=False)

    @property
    def completed(self) -> bool:
        return self.status == StageStatus.COMPLETED

    @property
    def command_line(self) -> str:
        return " ".join(self.command)

    def log_context(self) -> Dict[str, object]:
        """Fields attached to diagnostic records about this stage."""
        return {
            "command": self.command_line,
            "status": self.status.value,
            "exit_code": self.exit_code,
            "error": self.error,
        }


class LayoutMetadata(BaseModel):
    """Physical size and baseline depth of a rendered formula."""
    model_config = ConfigDict(frozen=True)

    depth: float = Field(..., description="Baseline offset from the bottom edge")
    width: float = Field(..., description="Image width in device units")
    height: float = Field(..., description="Image height in device units")

    def message_payload(self) -> str:
        """The "depth|width|height|" prefix posted to the parent frame."""
        return "".join(f"{_format_number(value)}|" for value in (self.depth, self.width, self.height))


def _format_number(value: float) -> str:
    # Integral values are printed without a fractional part: 1.0 -> "1"
    if value == int(value):
        return str(int(value))
    text = repr(value)
    if "e" not in text:
        return text
    # Exponent form keeps a fractional mantissa and a signed exponent: 1e-05 -> "1.0E-5"
    mantissa, _, exponent = text.partition("e")
    if "." not in mantissa:
        mantissa += ".0"
    power = int(exponent)
    return f"{mantissa}E{'+' if power >= 0 else '-'}{abs(power)}"
