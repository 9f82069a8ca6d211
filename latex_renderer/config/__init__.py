"""
Configuration Management
=======================

Environment-based configuration using Pydantic Settings.

Components:
- settings: Toolchain commands, output scale, timeouts and paths
- logging: Structured logging configuration
"""
