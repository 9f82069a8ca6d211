"""
Rendering Module
===============

LaTeX toolchain invocation and output assembly.

Components:
- stage_runner: Bounded external command execution
- workspace: Per-request transient files and cleanup
- svg_metadata: Layout metadata extraction and script injection
- png_converter: SVG to PNG conversion
- renderer: The typeset, vectorize and rasterize pipeline
"""
