"""
Operation Results
=================

Value-based success/failure type used across the rendering pipeline, and the
helper that turns an awaitable operation into such a value.
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from static_render.core.cancellation import CancellationToken
from static_render.core.errors import EmptyResultError, StaticRenderError

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True)
class Result(Generic[T]):
    """Either a successful value or the exception that prevented it."""

    _value: Optional[T] = None
    _error: Optional[BaseException] = None

    @classmethod
    def success(cls, value: T) -> "Result[T]":
        return cls(_value=value)

    @classmethod
    def failure(cls, error: BaseException) -> "Result[T]":
        if error is None:
            raise ValueError("A failed result requires an error")
        return cls(_error=error)

    @property
    def is_success(self) -> bool:
        return self._error is None

    @property
    def is_failure(self) -> bool:
        return self._error is not None

    @property
    def value(self) -> Optional[T]:
        return self._value

    @property
    def error(self) -> Optional[BaseException]:
        return self._error

    def match(self, on_success: Callable[[T], R], on_failure: Callable[[BaseException], R]) -> R:
        """Dispatch to ``on_success`` or ``on_failure`` and return its result."""
        if self._error is None:
            return on_success(self._value)
        return on_failure(self._error)

    def handle_success(self, handler: Callable[[T], Any]) -> Optional[T]:
        """Call ``handler`` with the value on success; return the value or None."""
        if self._error is None:
            handler(self._value)
            return self._value
        return None

    def handle_error(self, handler: Callable[[BaseException], Any]) -> Optional[BaseException]:
        """Call ``handler`` with the error on failure; return the error or None."""
        if self._error is not None:
            handler(self._error)
            return self._error
        return None

    def unwrap(self) -> T:
        """Return the value, raising the captured error on failure."""
        if self._error is not None:
            raise self._error
        return self._value

    def __repr__(self) -> str:
        if self._error is None:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error!r})"


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value == "")


async def process_operation(
    operation: Callable[[], Awaitable[T]],
    operation_name: str,
    logger: Any,
    cancellation: Optional[CancellationToken] = None,
) -> Result[T]:
    """
    Run an awaitable operation and capture its outcome as a ``Result``.

    Args:
        operation: Zero-argument callable producing the awaitable to run
        operation_name: Name used in log entries and error messages
        logger: Structured logger receiving failure entries
        cancellation: Optional token checked before the operation starts

    Returns:
        Success with the operation's value, or failure with the captured error.
        ``None`` and empty-string values are reported as ``EmptyResultError``.
    """
    if cancellation is not None:
        try:
            cancellation.raise_if_cancelled(operation_name)
        except StaticRenderError as e:
            logger.warning("Operation cancelled before start", operation=operation_name)
            return Result.failure(e)

    try:
        value = await operation()
    except asyncio.CancelledError:
        raise
    except StaticRenderError as e:
        # Typed errors are logged where they are raised
        return Result.failure(e)
    except Exception as e:
        logger.error("Exception in operation", operation=operation_name, error=str(e), exc_info=True)
        return Result.failure(e)

    if _is_empty(value):
        empty = EmptyResultError(operation_name)
        logger.error("Empty result in operation", operation=operation_name, error=str(empty))
        return Result.failure(empty)

    return Result.success(value)
