"""
Service Registration
====================

Wires the static rendering pipeline into a ``ServiceProvider``.
"""

from typing import Any, Callable, Optional

import jinja2

from static_render.config.logging import get_logger, setup_logging
from static_render.config.settings import Settings, get_settings
from static_render.core.components.engine import create_environment
from static_render.core.components.services import ServiceProvider
from static_render.core.rendering.component_renderer import ComponentRenderer
from static_render.core.rendering.orchestrator import RenderOrchestrator
from static_render.core.rendering.parameter_binder import ParameterBinder


def add_static_rendering(
    services: ServiceProvider,
    settings: Optional[Settings] = None,
    logger_factory: Callable[[str], Any] = get_logger,
) -> ServiceProvider:
    """
    Register the rendering pipeline on a service provider.

    Args:
        services: Process-wide provider; render scopes are created from it
        settings: Settings to register, defaults to the global settings
        logger_factory: Factory used by every pipeline component

    Returns:
        The same provider, for chaining
    """
    settings = settings or get_settings()

    services.add_singleton(Settings, instance=settings)
    services.add_singleton(jinja2.Environment, lambda sp: create_environment(sp.get(Settings)))
    services.add_singleton(ParameterBinder, lambda sp: ParameterBinder(logger_factory))
    services.add_singleton(
        ComponentRenderer,
        lambda sp: ComponentRenderer(
            services,
            logger_factory=logger_factory,
            environment=sp.get(jinja2.Environment),
            settings=sp.get(Settings),
        ),
    )
    services.add_singleton(
        RenderOrchestrator,
        lambda sp: RenderOrchestrator(
            sp.get(ComponentRenderer), sp.get(ParameterBinder), logger_factory
        ),
    )
    return services


def create_orchestrator(
    services: Optional[ServiceProvider] = None,
    settings: Optional[Settings] = None,
    configure_logging: bool = False,
) -> RenderOrchestrator:
    """
    Build a ready-to-use orchestrator.

    Args:
        services: Provider holding application services for components to inject
        settings: Settings override
        configure_logging: Run ``setup_logging`` before wiring

    Returns:
        Orchestrator resolved from the provider
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings)

    services = services or ServiceProvider()
    add_static_rendering(services, settings)
    return services.get(RenderOrchestrator)
