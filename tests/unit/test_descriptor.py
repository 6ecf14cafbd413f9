"""
Unit Tests for Component Reflection
===================================
"""

import pytest
from typing import Annotated, Any, List, Literal, NewType, Optional, TypeVar, Union

from static_render.core.components.component import Component, Inject, Parameter
from static_render.core.components.descriptor import (
    accepts_none, accepts_value, describe_component, type_label,
)
from static_render.models.schemas import NO_DEFAULT

from tests.utils.components import CounterComponent, EmailComponent, GreetingComponent, Greeter

UserId = NewType("UserId", int)
Bounded = TypeVar("Bounded", bound=int)


class TestDescribeComponent:
    """Test parameter and injection discovery."""

    def test_parameters_in_declaration_order(self):
        descriptor = describe_component(EmailComponent)

        assert descriptor.name == "EmailComponent"
        assert [p.name for p in descriptor.parameters] == ["subject", "body"]
        assert descriptor.parameter("subject").annotation is str
        assert descriptor.parameter("missing") is None

    def test_defaults_and_nullability(self):
        descriptor = describe_component(CounterComponent)
        count = descriptor.parameter("count")
        label = descriptor.parameter("label")

        assert count.default == 0 and count.has_default
        assert count.nullable is False
        assert label.nullable is True

    def test_parameter_without_default(self):
        subject = describe_component(EmailComponent).parameter("subject")

        assert subject.default is NO_DEFAULT
        assert not subject.has_default

    def test_injections(self):
        descriptor = describe_component(GreetingComponent)

        assert [p.name for p in descriptor.parameters] == ["name"]
        assert [(i.name, i.key) for i in descriptor.injections] == [("greeter", Greeter)]

    def test_named_injection_and_marker_forms(self):
        class Widget(Component):
            title: Annotated[str, Parameter]
            clock: Annotated[Any, Inject("clock")]
            plain: str = "x"
            _hidden: Annotated[str, Parameter()] = "h"

        descriptor = describe_component(Widget)

        assert [p.name for p in descriptor.parameters] == ["title"]
        assert descriptor.injections[0].key == "clock"

    def test_inherited_parameters(self):
        class Base(Component):
            title: Annotated[str, Parameter()]

        class Derived(Base):
            subtitle: Annotated[str, Parameter()]

        assert [p.name for p in describe_component(Derived).parameters] == ["title", "subtitle"]

    def test_descriptors_are_cached(self):
        assert describe_component(EmailComponent) is describe_component(EmailComponent)

    def test_non_type_raises(self):
        with pytest.raises(TypeError):
            describe_component(EmailComponent())


class TestAnnotationChecks:
    """Test runtime annotation helpers."""

    @pytest.mark.parametrize(
        "annotation,expected",
        [
            (Optional[int], True),
            (int | None, True),
            (Union[str, int], False),
            (Any, True),
            (str, False),
            (Literal["a", None], True),
            (Bounded, False),
        ],
    )
    def test_accepts_none(self, annotation, expected):
        assert accepts_none(annotation) is expected

    @pytest.mark.parametrize(
        "annotation,value,expected",
        [
            (int, 3, True),
            (int, "3", False),
            (int, True, False),
            (float, False, False),
            (bool, True, True),
            (Optional[str], "x", True),
            (List[str], ["a"], True),
            (List[str], ("a",), False),
            (UserId, 5, True),
            (Literal["a"], "a", True),
            (Literal[1], True, False),
            (Bounded, 1, True),
            (object, "anything", True),
        ],
    )
    def test_accepts_value(self, annotation, value, expected):
        assert accepts_value(annotation, value) is expected

    def test_type_label(self):
        assert type_label(int) == "int"
        assert type_label(Optional[int]) == "Optional[int]"
