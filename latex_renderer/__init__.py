"""
LaTeX Formula Renderer
======================

Render LaTeX formulas into SVG or PNG images by driving the external
latex, dvisvgm and rsvg-convert toolchain.

This package provides:
- Formula admission control against engine-escape directives
- Jinja2 templating of formulas into complete LaTeX documents
- Bounded external-process invocation with per-request workspaces
- Layout metadata extraction and parent-frame notification for SVG output
"""

__version__ = "1.0.0"
__author__ = "LaTeX Formula Renderer Team"
