"""
Component Renderer
==================

Renders one component type with a bound parameter set into an HTML string,
inside a fresh service scope and on the render engine's own dispatcher.
"""

import asyncio
from typing import Any, Callable, Mapping, Optional

import jinja2

from static_render.config.logging import get_logger
from static_render.config.settings import Settings, get_settings
from static_render.core.cancellation import CancellationToken
from static_render.core.components.engine import HtmlRenderer, create_environment
from static_render.core.components.services import ServiceProvider
from static_render.core.errors import RenderCancelledError, RenderError
from static_render.models.results import Result, process_operation

RendererFactory = Callable[..., HtmlRenderer]


class ComponentRenderer:
    """Executes a single render pass per call; no retries and no output caching."""

    def __init__(
        self,
        services: ServiceProvider,
        logger_factory: Callable[[str], Any] = get_logger,
        environment: Optional[jinja2.Environment] = None,
        renderer_factory: RendererFactory = HtmlRenderer,
        settings: Optional[Settings] = None,
    ):
        self.settings = settings or get_settings()
        self.services = services
        self.logger_factory = logger_factory
        self.environment = environment or create_environment(self.settings)
        self.renderer_factory = renderer_factory
        self.logger: Any = logger_factory(__name__).bind(component="component_renderer")

    async def render(
        self,
        component_type: type,
        parameters: Mapping[str, Any],
        cancellation: Optional[CancellationToken] = None,
    ) -> Result[str]:
        """
        Render a component to an HTML string.

        Args:
            component_type: Component class to render
            parameters: Bound parameter values by name
            cancellation: Optional token; a cancelled token short-circuits the call

        Returns:
            Success with the HTML, or failure with RenderError, EmptyResultError
            or RenderCancelledError
        """
        cancellation = cancellation or CancellationToken.none()
        operation_name = f"render {_type_name(component_type)}"
        return await process_operation(
            lambda: self._render_to_html(component_type, parameters, cancellation),
            operation_name,
            self.logger,
            cancellation,
        )

    async def _render_to_html(
        self,
        component_type: type,
        parameters: Mapping[str, Any],
        cancellation: CancellationToken,
    ) -> Optional[str]:
        scope = self.services.create_scope()
        renderer: Optional[HtmlRenderer] = None
        try:
            renderer = self.renderer_factory(
                scope,
                logger_factory=self.logger_factory,
                environment=self.environment,
                cancellation=cancellation,
                thread_name=self.settings.dispatcher_thread_prefix,
            )

            async def render_once() -> Optional[str]:
                rendered = await renderer.render_component(component_type, parameters)
                cancellation.raise_if_cancelled(f"render {_type_name(component_type)}")
                return rendered.to_html_string()

            dispatched = renderer.dispatcher.invoke_async(render_once)
            if self.settings.render_timeout is not None:
                return await asyncio.wait_for(dispatched, timeout=self.settings.render_timeout)
            return await dispatched

        except asyncio.CancelledError:
            raise
        except RenderCancelledError:
            self.logger.warning("Render cancelled", component_type=_type_name(component_type))
            raise
        except Exception as e:
            self.logger.error(
                "Error rendering component",
                component_type=_type_name(component_type),
                error=str(e),
                exc_info=True,
            )
            raise RenderError(component_type, e) from e
        finally:
            try:
                if renderer is not None:
                    renderer.close()
            finally:
                scope.dispose()


def _type_name(component_type: Any) -> str:
    return getattr(component_type, "__name__", repr(component_type))
