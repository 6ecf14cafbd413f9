"""
Service Container
=================

Minimal dependency-resolution container with singleton, scoped and transient
lifetimes. The root ``ServiceProvider`` lives for the whole process; every
render call gets its own ``ServiceScope`` which is disposed when the call ends.

Services registered without a factory are built by calling the registered type,
resolving each annotated constructor argument from the scope. A string
qualifier attached with ``Annotated[T, "name"]`` resolves by name instead of by
type.
"""

import inspect
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any, Callable, Dict, List, Optional, Union, get_args, get_origin, get_type_hints

from static_render.config.logging import get_logger
from static_render.core.errors import DependencyError

logger = get_logger(__name__)

ServiceKey = Union[str, type]
_MISSING = object()


class Lifetime(str, Enum):
    """Service instance lifetimes."""
    SINGLETON = "singleton"
    SCOPED = "scoped"
    TRANSIENT = "transient"


@dataclass(frozen=True)
class ServiceRegistration:
    """A registered service and how to build it.

    Attributes:
        key: Type or name the service is resolved by.
        lifetime: How long built instances are reused.
        factory: Callable receiving the resolving scope, or None to autowire ``key``.
        instance: Pre-built singleton instance, if any.
    """

    key: ServiceKey
    lifetime: Lifetime
    factory: Optional[Callable[[Any], Any]] = None
    instance: Any = _MISSING


class ServiceProvider:
    """Process-wide service registry and singleton holder."""

    def __init__(self) -> None:
        self._registrations: Dict[ServiceKey, ServiceRegistration] = {}
        self._singletons: Dict[ServiceKey, Any] = {}
        self._lock = threading.RLock()

    def add_singleton(
        self, key: ServiceKey, factory: Optional[Callable[[Any], Any]] = None, instance: Any = _MISSING
    ) -> "ServiceProvider":
        """Register a service built once per provider."""
        return self._register(ServiceRegistration(key, Lifetime.SINGLETON, factory, instance))

    def add_scoped(self, key: ServiceKey, factory: Optional[Callable[[Any], Any]] = None) -> "ServiceProvider":
        """Register a service built once per scope."""
        return self._register(ServiceRegistration(key, Lifetime.SCOPED, factory))

    def add_transient(self, key: ServiceKey, factory: Optional[Callable[[Any], Any]] = None) -> "ServiceProvider":
        """Register a service built on every resolution."""
        return self._register(ServiceRegistration(key, Lifetime.TRANSIENT, factory))

    def _register(self, registration: ServiceRegistration) -> "ServiceProvider":
        if registration.factory is None and registration.instance is _MISSING:
            if not isinstance(registration.key, type):
                raise DependencyError(
                    f"Service <{registration.key}> is registered by name and needs a factory"
                )
        with self._lock:
            self._registrations[registration.key] = registration
            self._singletons.pop(registration.key, None)
        return self

    def is_registered(self, key: ServiceKey) -> bool:
        return key in self._registrations

    def registration(self, key: ServiceKey) -> ServiceRegistration:
        try:
            return self._registrations[key]
        except KeyError:
            raise DependencyError(f"No service registered for <{_key_name(key)}>") from None

    def create_scope(self) -> "ServiceScope":
        """Create a new, independent resolution scope."""
        return ServiceScope(self)

    def get(self, key: ServiceKey) -> Any:
        """Resolve a singleton or transient service from the root provider.

        Raises:
            DependencyError: If the key is unknown or registered as scoped
        """
        registration = self.registration(key)
        if registration.lifetime is Lifetime.SCOPED:
            raise DependencyError(
                f"Scoped service <{_key_name(key)}> cannot be resolved from the root provider"
            )
        if registration.lifetime is Lifetime.TRANSIENT:
            return _build(registration, self)
        return self._singleton(registration)

    def _singleton(self, registration: ServiceRegistration) -> Any:
        if registration.instance is not _MISSING:
            return registration.instance
        with self._lock:
            if registration.key not in self._singletons:
                self._singletons[registration.key] = _build(registration, self)
            return self._singletons[registration.key]


class ServiceScope:
    """Per-call resolution scope owning its scoped and transient instances."""

    def __init__(self, provider: ServiceProvider):
        self.provider = provider
        self._scoped: Dict[ServiceKey, Any] = {}
        self._owned: List[Any] = []
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def get(self, key: ServiceKey) -> Any:
        """Resolve a service, reusing scoped instances within this scope.

        Raises:
            DependencyError: If the key is unknown or the scope is disposed
        """
        if self._disposed:
            raise DependencyError(f"Cannot resolve <{_key_name(key)}> from a disposed scope")

        registration = self.provider.registration(key)
        if registration.lifetime is Lifetime.SINGLETON:
            return self.provider._singleton(registration)
        if registration.lifetime is Lifetime.SCOPED and key in self._scoped:
            return self._scoped[key]

        instance = _build(registration, self)
        self._owned.append(instance)
        if registration.lifetime is Lifetime.SCOPED:
            self._scoped[key] = instance
        return instance

    def get_optional(self, key: ServiceKey, default: Any = None) -> Any:
        """Resolve a service, or return ``default`` when it is not registered."""
        if not self.provider.is_registered(key):
            return default
        return self.get(key)

    def dispose(self) -> None:
        """Close owned instances in reverse creation order. Safe to call twice."""
        if self._disposed:
            return
        self._disposed = True

        for instance in reversed(self._owned):
            close = getattr(instance, "close", None)
            if not callable(close):
                continue
            try:
                close()
            except Exception as e:
                logger.warning(
                    "Failed to close scoped service",
                    service=type(instance).__name__,
                    error=str(e),
                )

        self._owned.clear()
        self._scoped.clear()

    def __enter__(self) -> "ServiceScope":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.dispose()


def _key_name(key: ServiceKey) -> str:
    return key if isinstance(key, str) else getattr(key, "__name__", repr(key))


def _build(registration: ServiceRegistration, resolver: Any) -> Any:
    if registration.factory is not None:
        return registration.factory(resolver)
    return _autowire(registration.key, resolver)


def _autowire(cls: type, resolver: Any) -> Any:
    try:
        hints = get_type_hints(cls.__init__, include_extras=True)
    except (NameError, TypeError) as e:
        raise DependencyError(f"Cannot inspect constructor of <{cls.__name__}>: {e}") from e

    kwargs: Dict[str, Any] = {}
    for name, param in inspect.signature(cls.__init__).parameters.items():
        if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
            continue

        annotation = hints.get(name)
        if annotation is None:
            if param.default is param.empty:
                raise DependencyError(
                    f"Dependency <{name}> of <{cls.__name__}> is not annotated"
                )
            continue

        if get_origin(annotation) is Annotated:
            base_type, *metadata = get_args(annotation)
            key = next((m for m in metadata if isinstance(m, str)), base_type)
        else:
            key = annotation

        provider = resolver if isinstance(resolver, ServiceProvider) else resolver.provider
        if provider.is_registered(key):
            kwargs[name] = resolver.get(key)
        elif param.default is param.empty:
            raise DependencyError(
                f"Dependency <{name}> of <{cls.__name__}> has no registered service <{_key_name(key)}>"
            )

    return cls(**kwargs)
