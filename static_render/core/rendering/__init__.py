"""
Rendering Module
===============

Model-to-HTML rendering pipeline.

Components:
- parameter_binder: Map model fields onto component parameters
- component_renderer: Render a component once inside an isolated scope
- orchestrator: Public entry point sequencing binding and rendering
"""
