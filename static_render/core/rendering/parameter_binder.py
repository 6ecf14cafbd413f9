"""
Parameter Binder
================

Maps the readable fields of an arbitrary model onto the declared parameters
of a component type, coercing values where the types differ.
"""

import dataclasses
import types
from collections.abc import Mapping
from decimal import Decimal
from enum import Enum
from functools import cached_property, lru_cache
from typing import Annotated, Any, Callable, Dict, List, Optional, Tuple, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict, PydanticUserError, TypeAdapter, ValidationError

from static_render.config.logging import get_logger
from static_render.core.components.descriptor import accepts_value, describe_component, type_label
from static_render.core.errors import BindingError
from static_render.models.results import Result
from static_render.models.schemas import BindingWarning, BoundParameterSet, ParameterDescriptor

_UNBOUND = object()
_SCALAR_TYPES = (bool, int, float, Decimal, Enum)

# Lax validation: "42" -> 42, 42 -> "42", "true" -> True
_COERCION_CONFIG = ConfigDict(coerce_numbers_to_str=True, arbitrary_types_allowed=True)


class ModelFields:
    """Case-insensitive view over the publicly readable fields of a model."""

    def __init__(self, model: Any):
        self.model = model
        self._names: Dict[str, List[str]] = {}
        for name in _readable_names(model):
            self._names.setdefault(name.lower(), []).append(name)

    def lookup(self, name: str) -> Optional[str]:
        """Return the model field matching ``name``; an exact-case match wins."""
        candidates = self._names.get(name.lower())
        if not candidates:
            return None
        return name if name in candidates else candidates[0]

    def read(self, name: str) -> Any:
        if isinstance(self.model, Mapping):
            return self.model[name]
        return getattr(self.model, name)


class ParameterBinder:
    """Builds the parameter set for rendering a component from a model."""

    def __init__(self, logger_factory: Callable[[str], Any] = get_logger):
        self.logger: Any = logger_factory(__name__).bind(component="parameter_binder")

    def bind(self, model: Any, component_type: type) -> Result[BoundParameterSet]:
        """
        Bind model fields to the component's declared parameters.

        Parameters without a usable model value are omitted and logged as
        warnings; they keep the component's default.

        Args:
            model: Source data object, never mutated
            component_type: Target component class

        Returns:
            Success with the bound parameter set, or failure with a BindingError
            when reflection over the model or component raises unexpectedly
        """
        try:
            descriptor = describe_component(component_type)
            fields = ModelFields(model)
            values: Dict[str, Any] = {}
            warnings: List[BindingWarning] = []

            for parameter in descriptor.parameters:
                value, warning = self._bind_parameter(model, fields, parameter)
                if warning is not None:
                    warnings.append(warning)
                    self.logger.warning(
                        "Type mismatch for parameter",
                        parameter=warning.parameter,
                        component_type=descriptor.name,
                        model_type=type(model).__name__,
                        expected=warning.expected,
                        actual=warning.actual,
                        reason=warning.reason,
                    )
                elif value is not _UNBOUND:
                    values[parameter.name] = value

            return Result.success(BoundParameterSet(values, tuple(warnings)))

        except Exception as e:
            error = BindingError(type(model), component_type, e)
            self.logger.error(
                "Parameter binding failed",
                component_type=getattr(component_type, "__name__", repr(component_type)),
                model_type=type(model).__name__,
                error=str(e),
                exc_info=True,
            )
            return Result.failure(error)

    def _bind_parameter(
        self, model: Any, fields: ModelFields, parameter: ParameterDescriptor
    ) -> Tuple[Any, Optional[BindingWarning]]:
        expected = type_label(parameter.annotation)
        field_name = fields.lookup(parameter.name)

        if field_name is None:
            # The component may want the whole model as a single parameter
            if accepts_value(parameter.annotation, model):
                return model, None
            return _UNBOUND, BindingWarning(
                parameter.name, "expected field absent", expected, type(model).__name__
            )

        value = fields.read(field_name)

        if value is None:
            if parameter.nullable:
                return None, None
            return _UNBOUND, BindingWarning(
                parameter.name, "null value for non-nullable parameter", expected, "None"
            )

        if accepts_value(parameter.annotation, value):
            return value, None

        try:
            return coerce_value(value, parameter.annotation), None
        except (ValidationError, PydanticUserError) as e:
            return _UNBOUND, BindingWarning(
                parameter.name,
                f"conversion failed: {_first_error(e)}",
                expected,
                type(value).__name__,
            )


def coerce_value(value: Any, annotation: Any) -> Any:
    """
    Convert ``value`` to ``annotation`` using lax pydantic validation.

    Scalars bound to a string parameter are formatted directly: ``True`` ->
    ``"True"``, ``Decimal("1.50")`` -> ``"1.50"``, an enum member -> its name.

    Raises:
        ValidationError: If the value cannot be converted
        PydanticUserError: If no validator can be built for the annotation
    """
    if isinstance(value, _SCALAR_TYPES) and _targets_str(annotation):
        return value.name if isinstance(value, Enum) else str(value)

    try:
        adapter = _cached_adapter(annotation)
    except TypeError:
        # Unhashable annotation, build without caching
        adapter = _build_adapter(annotation)
    return adapter.validate_python(value)


def _targets_str(annotation: Any) -> bool:
    """Whether the annotation is ``str`` or an optional ``str``."""
    if annotation is str:
        return True
    origin = get_origin(annotation)
    if origin is Annotated:
        return _targets_str(get_args(annotation)[0])
    if origin in (Union, types.UnionType):
        members = [arg for arg in get_args(annotation) if arg is not type(None)]
        return len(members) == 1 and _targets_str(members[0])
    return False


@lru_cache(maxsize=256)
def _cached_adapter(annotation: Any) -> TypeAdapter:
    return _build_adapter(annotation)


def _build_adapter(annotation: Any) -> TypeAdapter:
    try:
        return TypeAdapter(annotation, config=_COERCION_CONFIG)
    except PydanticUserError:
        # Models, dataclasses and TypedDicts carry their own config
        return TypeAdapter(annotation)


def _first_error(error: Exception) -> str:
    if isinstance(error, ValidationError):
        details = error.errors()
        if details:
            return details[0].get("msg", str(error))
    return str(error)


def _readable_names(model: Any) -> List[str]:
    if model is None:
        return []
    if isinstance(model, Mapping):
        names = [key for key in model.keys() if isinstance(key, str)]
    elif isinstance(model, BaseModel):
        names = list(type(model).model_fields) + list(type(model).model_computed_fields)
    elif dataclasses.is_dataclass(model) and not isinstance(model, type):
        names = [f.name for f in dataclasses.fields(model)]
    else:
        names = list(getattr(model, "__dict__", {}))
        for cls in type(model).__mro__:
            for name, attribute in vars(cls).items():
                if isinstance(attribute, (property, cached_property)) and name not in names:
                    names.append(name)
            for name in getattr(cls, "__slots__", ()):
                if isinstance(name, str) and name not in names and hasattr(model, name):
                    names.append(name)
    return [name for name in names if not name.startswith("_")]
