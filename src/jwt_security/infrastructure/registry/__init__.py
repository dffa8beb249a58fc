"""Service registry"""

from jwt_security.infrastructure.registry.service_collection import (
    ServiceCollection,
    ServiceDescriptor,
    ServiceLifetime,
    ServiceRegistry,
    ServiceScope,
    service_key,
)

__all__ = [
    "ServiceCollection",
    "ServiceDescriptor",
    "ServiceLifetime",
    "ServiceRegistry",
    "ServiceScope",
    "service_key",
]
