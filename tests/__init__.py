"""
Test Suite
==========

Test suite matching the static_render/ package structure.

Test Categories:
- unit: Unit tests for individual pipeline components and the render engine
"""
