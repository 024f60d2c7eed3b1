from scopewire.exceptions import (
    ScopewireCircularDependencyError,
    ScopewireError,
    ScopewireInvalidRegistrationError,
    ScopewireServiceNotFoundError,
    ScopewireUnresolvedDependencyError,
)
from scopewire.lock_mode import LockMode
from scopewire.providers import Resolver, ServiceFactory
from scopewire.registry import Registry
from scopewire.resolution import ResolutionContext
from scopewire.scope_chain import ScopeChainResolver, render_route_element
from scopewire.service_key import ServiceKey, type_display_name

__all__ = [
    "LockMode",
    "Registry",
    "ResolutionContext",
    "Resolver",
    "ScopeChainResolver",
    "ScopewireCircularDependencyError",
    "ScopewireError",
    "ScopewireInvalidRegistrationError",
    "ScopewireServiceNotFoundError",
    "ScopewireUnresolvedDependencyError",
    "ServiceFactory",
    "ServiceKey",
    "render_route_element",
    "type_display_name",
]
