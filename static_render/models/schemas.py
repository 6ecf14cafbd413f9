"""
Component Metadata Schemas
==========================

Reflection metadata describing component inputs, and the bound parameter set
handed from the parameter binder to the component renderer.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Tuple


NO_DEFAULT = object()


@dataclass(frozen=True)
class ParameterDescriptor:
    """A declared component input.

    Attributes:
        name: Attribute name on the component class.
        annotation: Declared type with the ``Parameter`` marker stripped.
        nullable: Whether ``None`` is an acceptable value.
        default: Class-level default, or ``NO_DEFAULT`` when none is declared.
    """

    name: str
    annotation: Any
    nullable: bool
    default: Any = NO_DEFAULT

    @property
    def has_default(self) -> bool:
        return self.default is not NO_DEFAULT


@dataclass(frozen=True)
class InjectionDescriptor:
    """A component attribute resolved from the render scope.

    Attributes:
        name: Attribute name on the component class.
        key: Service key used to resolve the dependency (a type or a string).
    """

    name: str
    key: Any


@dataclass(frozen=True)
class ComponentDescriptor:
    """Declared inputs and injected dependencies of a component type."""

    component_type: type
    parameters: Tuple[ParameterDescriptor, ...] = ()
    injections: Tuple[InjectionDescriptor, ...] = ()

    @property
    def name(self) -> str:
        return self.component_type.__name__

    def parameter(self, name: str) -> Optional[ParameterDescriptor]:
        """Look up a declared parameter by exact name."""
        return next((p for p in self.parameters if p.name == name), None)


@dataclass(frozen=True)
class BindingWarning:
    """Why a declared parameter was left unbound."""

    parameter: str
    reason: str
    expected: str
    actual: str


class BoundParameterSet(Mapping):
    """Read-only, ordered mapping of parameter name to bound value.

    Keys are always parameters declared by the target component. Parameters
    missing from the set keep their component-side default.
    """

    def __init__(
        self,
        values: Optional[Dict[str, Any]] = None,
        warnings: Tuple[BindingWarning, ...] = (),
    ):
        self._values: Dict[str, Any] = dict(values or {})
        self.warnings = tuple(warnings)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"BoundParameterSet({self._values!r})"

    def to_dict(self) -> Dict[str, Any]:
        """Return a shallow copy of the bound values."""
        return dict(self._values)


@dataclass(frozen=True)
class RenderRequest:
    """A model/component pairing for batch rendering."""

    model: Any
    component_type: type
