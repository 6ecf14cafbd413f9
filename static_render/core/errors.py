"""
Rendering Errors
================

Error taxonomy for the static rendering pipeline. Errors are raised inside the
pipeline and surface to callers as failed ``Result`` values.
"""

from enum import Enum
from typing import Any, Optional


class ErrorType(str, Enum):
    """Classification of pipeline failures."""
    BINDING = "binding"
    RENDER = "render"
    EMPTY_RESULT = "empty_result"
    CANCELLED = "cancelled"
    DEPENDENCY = "dependency"


class StaticRenderError(Exception):
    """Base class for static rendering failures."""

    error_type: ErrorType = ErrorType.RENDER

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.details = details


class BindingError(StaticRenderError):
    """Raised when reflecting over a model or component fails unexpectedly."""

    error_type = ErrorType.BINDING

    def __init__(self, model_type: type, component_type: type, cause: BaseException):
        super().__init__(
            f"Binding {_name_of(model_type)} to {_name_of(component_type)} failed: {cause}"
        )
        self.model_type = model_type
        self.component_type = component_type
        self.__cause__ = cause


class RenderError(StaticRenderError):
    """Raised when instantiating or rendering a component fails."""

    error_type = ErrorType.RENDER

    def __init__(self, component_type: type, cause: BaseException):
        super().__init__(f"Error rendering component {_name_of(component_type)}: {cause}")
        self.component_type = component_type
        self.__cause__ = cause


class EmptyResultError(StaticRenderError):
    """Raised when an operation completes without producing a value."""

    error_type = ErrorType.EMPTY_RESULT

    def __init__(self, operation_name: str):
        super().__init__(f"{operation_name} returned an empty result.")
        self.operation_name = operation_name


class RenderCancelledError(StaticRenderError):
    """Raised when a render call is cancelled through its cancellation token."""

    error_type = ErrorType.CANCELLED

    def __init__(self, operation_name: str):
        super().__init__(f"{operation_name} was cancelled.")
        self.operation_name = operation_name


class DependencyError(StaticRenderError):
    """Raised when a service cannot be resolved from a scope."""

    error_type = ErrorType.DEPENDENCY


def _name_of(obj: Any) -> str:
    return getattr(obj, "__name__", repr(obj))
