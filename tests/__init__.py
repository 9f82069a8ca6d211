"""
Test Suite
==========

Test suite matching the latex_renderer/ package structure.

Test Categories:
- unit: Unit tests for individual components
- integration: Full pipeline tests against a fake TeX toolchain
"""
