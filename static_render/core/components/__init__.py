"""
Components Module
=================

The component framework the rendering pipeline drives.

Components:
- component: Component base class and Parameter/Inject markers
- descriptor: Reflective discovery of component inputs
- services: Service provider and per-call scopes
- engine: Single-pass HTML render engine and dispatcher
"""
