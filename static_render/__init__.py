"""
Static Component Renderer
=========================

Renders UI components to static HTML strings outside of any interactive
request pipeline, for emails, static pages and pre-rendered content.

This package provides:
- Reflective binding of arbitrary data models onto component parameters
- One-shot component rendering inside an isolated service scope
- A value-based result type so failures never escape as exceptions
"""

__version__ = "1.0.0"
