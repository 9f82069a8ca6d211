"""
Formula Processing Module
=========================

Formula admission control and expansion into complete LaTeX documents.

Components:
- guard: Denylist of engine-escape directives
- templater: Jinja2 document templating and package detection
"""
