"""
HTML Render Engine
==================

Renders component trees to HTML in a single pass. Each ``HtmlRenderer`` is
bound to one service scope and owns a ``Dispatcher``: a dedicated thread with
its own event loop on which all component work for that renderer runs.
"""

import asyncio
import inspect
import itertools
import threading
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, List, Mapping, Optional, TypeVar, Union

import jinja2
from markupsafe import Markup

from static_render.config.logging import get_logger
from static_render.config.settings import Settings, get_settings
from static_render.core.cancellation import CancellationToken
from static_render.models.schemas import ComponentDescriptor
from .component import Component
from .descriptor import describe_component
from .services import ServiceScope

T = TypeVar("T")

_thread_ids = itertools.count(1)


def create_environment(settings: Optional[Settings] = None) -> jinja2.Environment:
    """
    Create the Jinja2 environment shared by all renders.

    Args:
        settings: Settings providing template directories and escaping policy

    Returns:
        Async-enabled Jinja2 environment
    """
    settings = settings or get_settings()
    loader = (
        jinja2.FileSystemLoader([str(path) for path in settings.template_dirs])
        if settings.template_dirs
        else None
    )
    autoescape: Union[bool, Callable[[Optional[str]], bool]] = (
        jinja2.select_autoescape(default_for_string=True, default=True)
        if settings.autoescape
        else False
    )
    return jinja2.Environment(loader=loader, autoescape=autoescape, enable_async=True)


class Dispatcher:
    """Runs coroutines on a single dedicated thread with its own event loop."""

    def __init__(self, thread_name: str = "static-render-dispatcher"):
        self._thread_name = f"{thread_name}-{next(_thread_ids)}"
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._thread: Optional[threading.Thread] = None
        self._started = threading.Event()
        self._closed = False

    def check_access(self) -> bool:
        """Whether the calling thread is this dispatcher's thread."""
        return self._thread is not None and threading.current_thread() is self._thread

    def assert_access(self) -> None:
        if not self.check_access():
            raise RuntimeError(
                "The current thread is not associated with the renderer's dispatcher. "
                "Use invoke_async() to switch execution to the dispatcher."
            )

    async def invoke_async(self, func: Callable[[], Awaitable[T]]) -> T:
        """Run ``func()`` on the dispatcher thread and await its result."""
        if self.check_access():
            return await func()

        self._ensure_started()

        async def run() -> T:
            return await func()

        future = asyncio.run_coroutine_threadsafe(run(), self._loop)
        return await asyncio.wrap_future(future)

    def close(self) -> None:
        """Ask the dispatcher loop to stop without waiting for its thread.

        Work still running on the thread (a component blocking synchronously,
        for example) finishes in the background; the daemon thread then
        cancels what is left and closes its loop.
        """
        if self._closed:
            return
        self._closed = True
        if self._thread is None or self._loop is None:
            return
        self._loop.call_soon_threadsafe(self._loop.stop)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Block until the dispatcher thread has exited; True when it has.

        Never call this from an event loop thread.
        """
        if self._thread is None:
            return True
        if threading.current_thread() is not self._thread:
            self._thread.join(timeout)
        return not self._thread.is_alive()

    def _ensure_started(self) -> None:
        if self._closed:
            raise RuntimeError("Dispatcher is closed")
        if self._thread is not None:
            return
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run, name=self._thread_name, daemon=True)
        self._thread.start()
        self._started.wait()

    def _run(self) -> None:
        loop = self._loop
        asyncio.set_event_loop(loop)
        loop.call_soon(self._started.set)
        try:
            loop.run_forever()
        finally:
            pending = asyncio.all_tasks(loop)
            for task in pending:
                task.cancel()
            if pending:
                loop.run_until_complete(asyncio.gather(*pending, return_exceptions=True))
            loop.run_until_complete(loop.shutdown_asyncgens())
            loop.close()


@dataclass
class RenderedComponent:
    """One node of a rendered component tree."""

    component_type: type
    markup: Optional[Markup] = None
    children: List["RenderedComponent"] = field(default_factory=list)

    def to_html_string(self) -> Optional[str]:
        """Serialise the node to HTML; None when the component produced nothing."""
        if self.markup is None:
            return None
        return str(self.markup)


class RenderContext:
    """Per-component view of the renderer, passed to ``Component.render``."""

    def __init__(
        self,
        renderer: "HtmlRenderer",
        component: Component,
        descriptor: ComponentDescriptor,
        node: RenderedComponent,
    ):
        self.renderer = renderer
        self.component = component
        self.descriptor = descriptor
        self.node = node

    @property
    def services(self) -> ServiceScope:
        return self.renderer.services

    def template_variables(self) -> Dict[str, Any]:
        """Variables exposed to the component's template."""
        variables: Dict[str, Any] = dict(type(self.component).components)
        for parameter in self.descriptor.parameters:
            if hasattr(self.component, parameter.name):
                variables[parameter.name] = getattr(self.component, parameter.name)
        variables["component"] = self.component
        variables["render_child"] = self.render_child
        return variables

    async def render_template(self) -> str:
        template = self.renderer.get_template(type(self.component))
        return await template.render_async(self.template_variables())

    async def render_child(self, child: Union[str, type], **parameters: Any) -> Markup:
        """Render a nested component in the same pass and return its markup."""
        if isinstance(child, str):
            try:
                child = type(self.component).components[child]
            except KeyError:
                raise LookupError(
                    f"Component {self.descriptor.name} has no child component named {child!r}"
                ) from None

        node = await self.renderer._render_node(child, parameters)
        self.node.children.append(node)
        return node.markup if node.markup is not None else Markup("")


class HtmlRenderer:
    """Single-use renderer bound to one service scope."""

    def __init__(
        self,
        services: ServiceScope,
        logger_factory: Callable[[str], Any] = get_logger,
        environment: Optional[jinja2.Environment] = None,
        cancellation: Optional[CancellationToken] = None,
        thread_name: str = "static-render-dispatcher",
    ):
        self.services = services
        self.environment = environment or create_environment()
        self.cancellation = cancellation or CancellationToken.none()
        self.dispatcher = Dispatcher(thread_name)
        self.logger: Any = logger_factory(__name__).bind(component="html_renderer")

    async def render_component(
        self, component_type: type, parameters: Optional[Mapping[str, Any]] = None
    ) -> RenderedComponent:
        """
        Render a component and its children once.

        Must be awaited on the dispatcher, e.g. inside ``dispatcher.invoke_async``.

        Args:
            component_type: Component class to instantiate
            parameters: Parameter values by declared name

        Returns:
            Root of the rendered component tree
        """
        self.dispatcher.assert_access()
        return await self._render_node(component_type, parameters or {})

    def get_template(self, component_type: type) -> jinja2.Template:
        if component_type.template is not None:
            return _inline_template(self.environment, component_type.template)
        if component_type.template_name is not None:
            return self.environment.get_template(component_type.template_name)
        raise TypeError(
            f"Component {component_type.__name__} defines neither template nor template_name "
            "and does not override render()"
        )

    def close(self) -> None:
        self.dispatcher.close()

    async def _render_node(self, component_type: type, parameters: Mapping[str, Any]) -> RenderedComponent:
        if not (isinstance(component_type, type) and issubclass(component_type, Component)):
            raise TypeError(f"{component_type!r} is not a Component subclass")

        operation = f"render {component_type.__name__}"
        self.cancellation.raise_if_cancelled(operation)

        descriptor = describe_component(component_type)
        component = component_type()
        for injection in descriptor.injections:
            setattr(component, injection.name, self.services.get(injection.key))
        for name, value in parameters.items():
            if descriptor.parameter(name) is None:
                raise ValueError(
                    f"Component {descriptor.name} does not declare a parameter named {name!r}"
                )
            setattr(component, name, value)

        await _maybe_await(component.on_initialized())
        await _maybe_await(component.on_parameters_set())
        self.cancellation.raise_if_cancelled(operation)

        node = RenderedComponent(component_type)
        markup = await component.render(RenderContext(self, component, descriptor, node))
        node.markup = Markup(markup) if markup is not None else None

        self.logger.debug(
            "Component rendered",
            component_type=descriptor.name,
            children=len(node.children),
            html_length=len(node.markup or ""),
        )
        return node


@lru_cache(maxsize=256)
def _inline_template(environment: jinja2.Environment, source: str) -> jinja2.Template:
    return environment.from_string(source)


async def _maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value
