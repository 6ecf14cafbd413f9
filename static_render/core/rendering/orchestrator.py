"""
Render Orchestrator
===================

Public entry point: binds a model to a component and renders it to HTML.
"""

import asyncio
from typing import Any, Callable, Iterable, List, Optional

from static_render.config.logging import get_logger
from static_render.core.cancellation import CancellationToken
from static_render.models.results import Result
from static_render.models.schemas import RenderRequest
from .component_renderer import ComponentRenderer
from .parameter_binder import ParameterBinder


class RenderOrchestrator:
    """Sequences parameter binding and component rendering."""

    def __init__(
        self,
        component_renderer: ComponentRenderer,
        parameter_binder: ParameterBinder,
        logger_factory: Callable[[str], Any] = get_logger,
    ):
        self.component_renderer = component_renderer
        self.parameter_binder = parameter_binder
        self.logger: Any = logger_factory(__name__).bind(component="render_orchestrator")

    async def render_model_to_string(
        self,
        model: Any,
        component_type: type,
        cancellation: Optional[CancellationToken] = None,
    ) -> Result[str]:
        """
        Render ``component_type`` with parameters taken from ``model``.

        Args:
            model: Data object supplying parameter values
            component_type: Component class to render
            cancellation: Optional cooperative cancellation token

        Returns:
            Result holding the HTML string or the failure; never raises for
            binding or rendering errors
        """
        binding = self.parameter_binder.bind(model, component_type)
        if binding.is_failure:
            return Result.failure(binding.error)

        return await self.component_renderer.render(component_type, binding.value, cancellation)

    async def render_many(
        self,
        requests: Iterable[RenderRequest],
        cancellation: Optional[CancellationToken] = None,
    ) -> List[Result[str]]:
        """Render several pairings concurrently; each result is independent."""
        requests = list(requests)
        self.logger.debug("Rendering batch", size=len(requests))
        results = await asyncio.gather(
            *(
                self.render_model_to_string(request.model, request.component_type, cancellation)
                for request in requests
            )
        )
        return list(results)
