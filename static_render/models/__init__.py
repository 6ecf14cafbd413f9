"""
Data Models
===========

Data structures shared across the rendering pipeline.

Models:
- schemas: Component reflection metadata and bound parameter sets
- results: Success/failure result type and operation wrapper
"""
