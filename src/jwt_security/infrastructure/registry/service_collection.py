"""In-memory service registry.

Security wiring only needs two operations from a host container:
add_singleton and add_scoped. ServiceCollection implements them together
with scoped resolution so the bundled FastAPI app (and tests) can resolve
what was registered.

Generic services are keyed by tuples, e.g. service_key(Authenticator, MyUser).
"""

import logging
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Hashable, Optional, Protocol

logger = logging.getLogger(__name__)

ServiceFactory = Callable[["ServiceScope"], Any]


def service_key(service: Hashable, *type_args: Hashable) -> Hashable:
    """Build a registry key for service, optionally parameterized by types."""
    if not type_args:
        return service
    return (service, *type_args)


class ServiceRegistry(Protocol):
    """Registration surface required by the security builder"""

    def add_singleton(self, key: Hashable, instance: Any) -> None:
        ...

    def add_scoped(self, key: Hashable, factory: ServiceFactory) -> None:
        ...

    def __contains__(self, key: Hashable) -> bool:
        ...


class ServiceLifetime(Enum):
    SINGLETON = "singleton"
    SCOPED = "scoped"


@dataclass(frozen=True)
class ServiceDescriptor:
    """One registration"""
    key: Hashable
    lifetime: ServiceLifetime
    instance: Any = None
    factory: Optional[ServiceFactory] = None


class ServiceCollection:
    """Ordered list of service descriptors; last registration wins on resolve."""

    def __init__(self):
        self._descriptors: list[ServiceDescriptor] = []
        self._lock = threading.Lock()

    def add_singleton(self, key: Hashable, instance: Any) -> None:
        with self._lock:
            self._descriptors.append(
                ServiceDescriptor(key=key, lifetime=ServiceLifetime.SINGLETON, instance=instance)
            )
        logger.debug(f"Registered singleton {_key_name(key)}")

    def add_scoped(self, key: Hashable, factory: ServiceFactory) -> None:
        if not callable(factory):
            raise TypeError(f"Scoped factory for {_key_name(key)} must be callable")
        with self._lock:
            self._descriptors.append(
                ServiceDescriptor(key=key, lifetime=ServiceLifetime.SCOPED, factory=factory)
            )
        logger.debug(f"Registered scoped {_key_name(key)}")

    def descriptors(self, key: Optional[Hashable] = None) -> list[ServiceDescriptor]:
        """All descriptors, or those registered under key, in order."""
        with self._lock:
            if key is None:
                return list(self._descriptors)
            return [d for d in self._descriptors if d.key == key]

    def count(self, key: Hashable) -> int:
        return len(self.descriptors(key))

    def __contains__(self, key: Hashable) -> bool:
        return self.count(key) > 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._descriptors)

    def create_scope(self) -> "ServiceScope":
        return ServiceScope(self)


class ServiceScope:
    """Resolution scope: scoped services are created once per scope."""

    def __init__(self, services: ServiceCollection):
        self._services = services
        self._scoped: dict[Hashable, Any] = {}

    def resolve(self, key: Hashable) -> Any:
        """Resolve key.

        Raises:
            LookupError: If nothing is registered under key
        """
        descriptors = self._services.descriptors(key)
        if not descriptors:
            raise LookupError(f"No service registered for {_key_name(key)}")

        descriptor = descriptors[-1]
        if descriptor.lifetime is ServiceLifetime.SINGLETON:
            return descriptor.instance

        if key not in self._scoped:
            self._scoped[key] = descriptor.factory(self)
        return self._scoped[key]

    def try_resolve(self, key: Hashable, default: Any = None) -> Any:
        try:
            return self.resolve(key)
        except LookupError:
            return default


def _key_name(key: Hashable) -> str:
    if isinstance(key, tuple):
        return "[".join([_key_name(key[0]), ", ".join(_key_name(k) for k in key[1:])]) + "]"
    return getattr(key, "__name__", repr(key))
