"""
Data Models
===========

Pydantic data models for render requests and internal pipeline data.

Models:
- schemas: Requests, compiled sources, stage outcomes and layout metadata
"""
