"""
Component Model
===============

Base class and annotation markers for renderable components.

A component declares its inputs as annotated class attributes::

    class WelcomeEmail(Component):
        template = "<h1>{{ subject }}</h1>{{ body | safe }}"

        subject: Annotated[str, Parameter()]
        body: Annotated[Optional[str], Parameter()] = None
        clock: Annotated[Clock, Inject()]

Parameters are set by the caller before rendering; injected attributes are
resolved from the render scope. Components render exactly once per call and
have no event handling or client-side behaviour.
"""

from typing import TYPE_CHECKING, Any, ClassVar, Dict, Optional

if TYPE_CHECKING:
    from .engine import RenderContext


class Parameter:
    """Marks an ``Annotated`` class attribute as a component input."""

    def __repr__(self) -> str:
        return "Parameter()"


class Inject:
    """Marks an ``Annotated`` class attribute as a scoped dependency.

    Args:
        key: Service key to resolve; defaults to the annotated type.
    """

    def __init__(self, key: Any = None):
        self.key = key

    def __repr__(self) -> str:
        return f"Inject(key={self.key!r})"


class Component:
    """Base class for statically renderable components."""

    # Inline Jinja2 source, takes precedence over template_name
    template: ClassVar[Optional[str]] = None
    # Template file resolved through the environment's loader
    template_name: ClassVar[Optional[str]] = None
    # Child components addressable by name from the template
    components: ClassVar[Dict[str, type]] = {}

    def on_initialized(self) -> Any:
        """Called once after dependencies are injected and parameters are set.

        May return an awaitable.
        """
        return None

    def on_parameters_set(self) -> Any:
        """Called after ``on_initialized``. May return an awaitable."""
        return None

    async def render(self, context: "RenderContext") -> Optional[str]:
        """Produce this component's markup."""
        return await context.render_template()
