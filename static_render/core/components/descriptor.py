"""
Component Reflection
====================

Discovers the declared inputs and injected dependencies of component types,
and answers type questions about annotations at runtime.
"""

import types
from functools import lru_cache
from typing import Annotated, Any, List, Literal, TypeVar, Union, get_args, get_origin, get_type_hints

from static_render.models.schemas import (
    NO_DEFAULT,
    ComponentDescriptor,
    InjectionDescriptor,
    ParameterDescriptor,
)
from .component import Inject, Parameter

_UNION_ORIGINS = (Union, types.UnionType)
_NONE_TYPE = type(None)
_NUMERIC_TYPES = (int, float, complex)


@lru_cache(maxsize=None)
def describe_component(component_type: type) -> ComponentDescriptor:
    """
    Build the descriptor for a component type.

    Component shapes are static for the lifetime of the process, so results
    are cached per type and never invalidated.

    Args:
        component_type: Component class to inspect

    Returns:
        ComponentDescriptor listing parameters and injections in declaration order

    Raises:
        TypeError: If component_type is not a class
        NameError: If an annotation cannot be resolved
    """
    if not isinstance(component_type, type):
        raise TypeError(f"{component_type!r} is not a component type")

    hints = get_type_hints(component_type, include_extras=True)
    parameters: List[ParameterDescriptor] = []
    injections: List[InjectionDescriptor] = []

    for name, annotation in hints.items():
        if name.startswith("_") or get_origin(annotation) is not Annotated:
            continue

        base_type, *metadata = get_args(annotation)
        for marker in metadata:
            if marker is Parameter or isinstance(marker, Parameter):
                parameters.append(
                    ParameterDescriptor(
                        name=name,
                        annotation=base_type,
                        nullable=accepts_none(base_type),
                        default=getattr(component_type, name, NO_DEFAULT),
                    )
                )
                break
            if marker is Inject or isinstance(marker, Inject):
                key = marker.key if isinstance(marker, Inject) and marker.key is not None else base_type
                injections.append(InjectionDescriptor(name=name, key=key))
                break

    return ComponentDescriptor(component_type, tuple(parameters), tuple(injections))


def accepts_none(annotation: Any) -> bool:
    """Whether ``None`` is a valid value for the annotation."""
    if annotation is Any or annotation is object or annotation is None or annotation is _NONE_TYPE:
        return True
    if isinstance(annotation, TypeVar):
        return annotation.__bound__ is None or accepts_none(annotation.__bound__)

    origin = get_origin(annotation)
    if origin is Annotated:
        return accepts_none(get_args(annotation)[0])
    if origin in _UNION_ORIGINS:
        return any(accepts_none(arg) for arg in get_args(annotation))
    if origin is Literal:
        return None in get_args(annotation)
    return False


def accepts_value(annotation: Any, value: Any) -> bool:
    """Whether ``value`` can be assigned to a slot declared as ``annotation``.

    Generic aliases are checked against their origin only; element types
    are not inspected.
    """
    if annotation is Any or annotation is object:
        return True
    if value is None:
        return accepts_none(annotation)
    if isinstance(annotation, TypeVar):
        return annotation.__bound__ is None or accepts_value(annotation.__bound__, value)

    supertype = getattr(annotation, "__supertype__", None)
    if supertype is not None:  # typing.NewType
        return accepts_value(supertype, value)

    origin = get_origin(annotation)
    if origin is Annotated:
        return accepts_value(get_args(annotation)[0], value)
    if origin in _UNION_ORIGINS:
        return any(accepts_value(arg, value) for arg in get_args(annotation))
    if origin is Literal:
        return any(value == arg and type(value) is type(arg) for arg in get_args(annotation))
    if origin is not None:
        return isinstance(origin, type) and isinstance(value, origin)
    if isinstance(annotation, type):
        # bool subclasses int but renders as True/False; route it through coercion
        if isinstance(value, bool) and annotation in _NUMERIC_TYPES:
            return False
        return isinstance(value, annotation)
    return False


def type_label(annotation: Any) -> str:
    """Human readable name for an annotation, used in log entries."""
    if isinstance(annotation, type) and get_origin(annotation) is None:
        return annotation.__name__
    return str(annotation).replace("typing.", "")
