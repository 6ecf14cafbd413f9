"""
Core Business Logic
==================

Core modules for binding models to components and rendering them.

Modules:
- components: Component model, reflection, service scopes and the HTML render engine
- rendering: Parameter binding, component rendering and orchestration
- errors: Failure taxonomy
- cancellation: Cooperative cancellation token
"""
