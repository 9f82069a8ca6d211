"""
Core Business Logic
==================

Core business logic modules for formula processing and image rendering.

Modules:
- errors: Render failure taxonomy
- formula: Formula validation and LaTeX templating
- rendering: External toolchain pipeline, workspaces and SVG metadata
"""
