from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol, TypeAlias, TypeVar, overload, runtime_checkable

from scopewire.exceptions import ScopewireInvalidRegistrationError
from scopewire.service_key import ServiceKey

if TYPE_CHECKING:
    from scopewire.resolution import ResolutionContext

T = TypeVar("T")
T_co = TypeVar("T_co", covariant=True)


class Resolver(Protocol):
    """Capability handed to factories so they can resolve their own dependencies."""

    @property
    def context(self) -> ResolutionContext:
        """Resolution context of the call that invoked the factory."""

    @overload
    def resolve(
        self,
        service_type: type[T],
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> T: ...

    @overload
    def resolve(
        self,
        service_type: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> Any: ...

    def resolve(
        self,
        service_type: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> Any:
        """Resolve the given service and return its instance."""

    def has_registration(
        self,
        service_type: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> bool:
        """Return whether a registration exists for the given key."""


@runtime_checkable
class ServiceFactory(Protocol[T_co]):
    """Object form of a factory: anything with a ``resolve(resolver)`` method."""

    def resolve(self, resolver: Resolver) -> T_co:
        """Build the service, resolving dependencies through ``resolver``."""


FactoryFunction: TypeAlias = Callable[[Resolver], Any]
"""A callable taking the resolver capability and returning the service."""

Factory: TypeAlias = FactoryFunction | ServiceFactory[Any]
"""Either a factory function or a ``ServiceFactory`` object."""


@dataclass(frozen=True, slots=True)
class Provider:
    """A stored registration with its factory erased to ``(Resolver) -> Any``."""

    service_key: ServiceKey
    factory: FactoryFunction

    def provide(self, resolver: Resolver) -> Any:
        return self.factory(resolver)


def erase_factory(factory: Factory) -> FactoryFunction:
    """Normalize a registered factory into a plain callable.

    ``ServiceFactory`` objects are erased to their bound ``resolve`` method.

    Raises:
        ScopewireInvalidRegistrationError: If the factory is neither callable nor
            a ``ServiceFactory``.

    """
    if isinstance(factory, ServiceFactory) and not isinstance(factory, type):
        return factory.resolve
    if callable(factory):
        return factory
    msg = f"Factory must be callable or implement ServiceFactory, got {factory!r}."
    raise ScopewireInvalidRegistrationError(msg)


def value_factory(value: Any) -> FactoryFunction:
    """Return a factory that ignores its resolver and hands out ``value``."""

    def provide_value(_resolver: Resolver) -> Any:
        return value

    return provide_value
