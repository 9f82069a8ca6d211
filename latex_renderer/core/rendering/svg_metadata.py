"""
SVG Layout Metadata
===================

dvisvgm leaves two comments in its output:

    <!--start X Y -->          position of the first glyph baseline
    <!--bbox X Y W H -->       bounding box of the whole picture

Both are in dvisvgm's internal zoom scale. The extractor turns them into
device-unit width, height and baseline depth; the assembler embeds those
numbers in a script that reports them to an embedding page.
"""

from typing import Optional
import re

from latex_renderer.models.schemas import LayoutMetadata

SVG_PRECISION = 5

_NUMBER = r"(-?\d+(?:\.\d+)?)"
START_RE = re.compile(r"<!--start " + " ".join([_NUMBER] * 2) + r" -->")
BBOX_RE = re.compile(r"<!--bbox " + " ".join([_NUMBER] * 4) + r" -->")

SVG_CLOSING_TAG = "</svg>"
SCRIPT_TEMPLATE = (
    '<script type="text/ecmascript">'
    'if(window.parent.postMessage)window.parent.postMessage("{payload}"+window.location,"*");'
    "</script>\n"
)


def extract_layout_metadata(svg: str, has_baseline: bool, scale: float) -> Optional[LayoutMetadata]:
    """
    Compute the physical size and baseline depth of a rendered formula.

    Args:
        svg: dvisvgm output
        has_baseline: Whether the formula was typeset inline
        scale: Ratio between dvisvgm internal units and device units

    Returns:
        LayoutMetadata, or None when either annotation is missing or malformed
    """
    start = START_RE.search(svg)
    bbox = BBOX_RE.search(svg)
    if start is None or bbox is None:
        return None

    raw_y, raw_width, raw_height = (float(value) for value in bbox.group(2, 3, 4))
    raw_start_y = float(start.group(2))

    # Typically raw_y < raw_start_y
    if has_baseline:
        raw_depth = min(0.0, raw_y - raw_start_y) + raw_height
    else:
        raw_depth = raw_height * 0.5

    return LayoutMetadata(
        depth=round(scale * raw_depth, SVG_PRECISION),
        width=round(scale * raw_width, SVG_PRECISION),
        height=round(scale * raw_height, SVG_PRECISION),
    )


def inject_metadata_script(svg: str, metadata: Optional[LayoutMetadata]) -> str:
    """Embed the parent-frame notification script before the closing svg tag."""
    if metadata is None:
        return svg

    script = SCRIPT_TEMPLATE.format(payload=metadata.message_payload())
    return svg.replace(SVG_CLOSING_TAG, script + SVG_CLOSING_TAG)


def process_svg(svg: str, has_baseline: bool, scale: float) -> str:
    """Extract layout metadata and embed it, leaving the SVG untouched without it."""
    return inject_metadata_script(svg, extract_layout_metadata(svg, has_baseline, scale))
