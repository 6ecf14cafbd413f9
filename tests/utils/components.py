"""
Sample Components and Models
============================

Components and data models shared by the unit tests.
"""

import asyncio
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel

from static_render.core.components.component import Component, Inject, Parameter


# Models
@dataclass
class EmailModel:
    subject: str
    body: str


class EmailRecord(BaseModel):
    Subject: str
    body: Optional[str] = None


@dataclass
class Order:
    number: int
    total: float


class Priority(str, Enum):
    LOW = "low"
    HIGH = "high"


class ExplodingModel:
    """Model whose only field cannot be read."""

    @property
    def subject(self) -> str:
        raise RuntimeError("unreadable")


class PlainModel:
    def __init__(self, count: Any, label: Any = None):
        self.count = count
        self.label = label
        self._secret = "hidden"

    @property
    def upper_label(self) -> Optional[str]:
        return self.label.upper() if self.label else None


# Services
class Greeter:
    def greet(self, name: str) -> str:
        return f"Hello {name}"


class Connection:
    def __init__(self) -> None:
        self.closed = False

    def close(self) -> None:
        self.closed = True


# Components
class EmailComponent(Component):
    template = "<div>{{ subject }}</div>"

    subject: Annotated[str, Parameter()]
    body: Annotated[str, Parameter()]


class EmailBodyComponent(Component):
    template = "<h1>{{ subject }}</h1>{{ body }}<footer>{{ body | safe }}</footer>"

    subject: Annotated[str, Parameter()]
    body: Annotated[Optional[str], Parameter()] = None


class CounterComponent(Component):
    template = "<span>{{ count }}</span>"

    count: Annotated[int, Parameter()] = 0
    label: Annotated[Optional[str], Parameter()] = None


class OrderSummary(Component):
    template = "<p>Order #{{ order.number }}: {{ order.total }}</p>"

    order: Annotated[Order, Parameter()]


class PriorityBadge(Component):
    template = "<b>{{ priority.value }}</b>"

    priority: Annotated[Priority, Parameter()] = Priority.LOW


class GreetingComponent(Component):
    template = "<p>{{ component.greeter.greet(name) }}</p>"

    name: Annotated[str, Parameter()]
    greeter: Annotated[Greeter, Inject()]


class ConnectionComponent(Component):
    template = "<p>{{ 'closed' if component.connection.closed else 'open' }}</p>"

    connection: Annotated[Connection, Inject()]


class ListItem(Component):
    template = "<li>{{ label }}</li>"

    label: Annotated[str, Parameter()]


class ItemList(Component):
    template = (
        "<ul>{% for item in items or [] %}{{ render_child('item', label=item) }}{% endfor %}</ul>"
    )
    components = {"item": ListItem}

    items: Annotated[Optional[List[str]], Parameter()] = None


class LifecycleComponent(Component):
    template = "<p>{{ component.state }}</p>"

    def __init__(self) -> None:
        self.state = "created"
        self.thread_name: Optional[str] = None

    async def on_initialized(self) -> None:
        await asyncio.sleep(0)
        self.thread_name = threading.current_thread().name
        self.state = "initialized"

    def on_parameters_set(self) -> None:
        self.state += "+parameters"


class ThreadRecordingComponent(Component):
    template = "<p>{{ component.thread_name }}</p>"

    def on_initialized(self) -> None:
        self.thread_name = threading.current_thread().name


class BrokenComponent(Component):
    async def render(self, context: Any) -> Optional[str]:
        raise ValueError("boom")


class EmptyComponent(Component):
    template = ""


class NothingComponent(Component):
    async def render(self, context: Any) -> Optional[str]:
        return None


class SlowComponent(Component):
    template = "<p>slow</p>"

    async def on_initialized(self) -> None:
        await asyncio.sleep(5)


class NeedsArguments(Component):
    template = "<p>never</p>"

    def __init__(self, required: str) -> None:
        self.required = required


class TemplatelessComponent(Component):
    pass


class NotAComponent:
    subject: Annotated[str, Parameter()]


class BlockingComponent(Component):
    """Blocks its dispatcher thread without yielding."""

    template = "<p>late</p>"

    def on_initialized(self) -> None:
        time.sleep(1.0)
