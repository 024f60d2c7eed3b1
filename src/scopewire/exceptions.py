from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from scopewire.service_key import ServiceKey


class ScopewireError(Exception):
    """Represent a base class for recoverable scopewire failures.

    Catch this type when you want to handle any scopewire error path without
    matching each concrete exception class individually.
    """


class ScopewireInvalidRegistrationError(ScopewireError):
    """Signal an invalid registration.

    Raised by ``Registry.register`` when the factory is neither callable nor an
    object implementing ``ServiceFactory``.

    Typical fix is passing a ``(resolver) -> value`` callable, or using
    ``Registry.register_value`` for a pre-built value.
    """


class ScopewireServiceNotFoundError(ScopewireError):
    """Signal that no registration produced the requested service.

    Raised by ``Registry.resolve`` when nothing is registered for the requested
    ``(type, name, scope)`` combination, or when the registered factory returned
    a value that is not an instance of the requested type. Raised by
    ``ScopeChainResolver.resolve`` when every candidate scope missed.

    ``ScopeChainResolver`` treats this error as "try the next scope".

    Typical fixes include registering the service in one of the scopes derived
    from the current route, or checking that the factory returns the requested
    type.
    """

    def __init__(self, descriptor: str, service_key: ServiceKey | None = None) -> None:
        self.descriptor = descriptor
        self.service_key = service_key
        message = f"Service '{descriptor}' is not registered"
        if service_key is not None:
            message += f" (name: {service_key.display_name}, scope: {service_key.display_scope})"
        super().__init__(message)


class ScopewireCircularDependencyError(ScopewireError):
    """Signal a resolution chain that requests a key already in flight.

    ``chain`` lists the descriptors of every key on the resolution stack at the
    moment of detection, followed by the key that closed the cycle.

    This error is never retried by scope fallback. Typical fix is breaking the
    cycle by resolving one side lazily or by restructuring the factories.
    """

    def __init__(self, service_key: ServiceKey, chain: list[str]) -> None:
        self.service_key = service_key
        self.chain = chain
        super().__init__(f"Circular dependency detected: {' -> '.join(chain)}")


class ScopewireUnresolvedDependencyError(RuntimeError):
    """Signal a failed ``ScopeChainResolver.find`` call.

    This is a fatal condition. It intentionally does not derive from
    ``ScopewireError`` so that handlers written for recoverable lookups do not
    swallow it. The original error is available as ``__cause__``.
    """

    def __init__(self, descriptor: str) -> None:
        self.descriptor = descriptor
        super().__init__(f"Dependency '{descriptor}' not found in any accessible scope")
