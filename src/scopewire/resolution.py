"""Cycle-detecting resolution support.

A ``ResolutionContext`` holds the keys that are currently being resolved within
one top-level ``Registry.resolve`` call and its recursive descendants. The
context is passed explicitly: factories receive a ``BoundResolver`` that carries
the caller's context into every nested resolve. Concurrent top-level calls, on
different threads or interleaved tasks, therefore never share a stack.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, TypeVar, overload

from scopewire.exceptions import ScopewireCircularDependencyError, ScopewireServiceNotFoundError
from scopewire.service_key import ServiceKey
from scopewire.type_checks import is_instance_of

if TYPE_CHECKING:
    from scopewire.registry import Registry

T = TypeVar("T")

logger = logging.getLogger(__name__)


class ResolutionContext:
    """Ordered stack of keys in flight within one resolution call tree."""

    __slots__ = ("_stack",)

    def __init__(self) -> None:
        self._stack: list[ServiceKey] = []

    def __contains__(self, service_key: object) -> bool:
        return service_key in self._stack

    def __len__(self) -> int:
        return len(self._stack)

    @property
    def stack(self) -> tuple[ServiceKey, ...]:
        """Snapshot of the in-flight keys, outermost first."""
        return tuple(self._stack)

    @contextmanager
    def track(self, service_key: ServiceKey) -> Iterator[None]:
        """Keep ``service_key`` on the stack for the duration of the block.

        The key is popped whether the block returns or raises, so a failed
        resolution never leaves a stale entry behind.

        Raises:
            ScopewireCircularDependencyError: If ``service_key`` is already on the
                stack.

        """
        if service_key in self._stack:
            error = circular_dependency_error(self._stack, service_key)
            logger.debug("%s", error)
            raise error

        self._stack.append(service_key)
        try:
            yield
        finally:
            self._stack.pop()


def circular_dependency_error(
    stack: list[ServiceKey] | tuple[ServiceKey, ...],
    service_key: ServiceKey,
) -> ScopewireCircularDependencyError:
    """Build the error for ``service_key`` closing a cycle over ``stack``."""
    chain = [key.describe() for key in (*stack, service_key)]
    return ScopewireCircularDependencyError(service_key, chain)


def ensure_instance(value: Any, service_key: ServiceKey) -> Any:
    """Checked downcast of a factory result to the requested type.

    A mismatch is reported the same way as a missing registration: the caller
    could not obtain the requested type.

    Raises:
        ScopewireServiceNotFoundError: If ``value`` is not an instance of the
            requested type.

    """
    if not is_instance_of(value, service_key.service_type):
        logger.debug(
            "Factory for %s produced %s, rejecting it",
            service_key.describe(),
            type(value).__qualname__,
        )
        raise ScopewireServiceNotFoundError(service_key.type_name, service_key)
    return value


class BoundResolver:
    """Resolver handed to factories.

    Nested ``resolve`` calls share the resolution context of the call that
    invoked the factory, which is what makes cycle detection work.
    """

    __slots__ = ("_context", "_registry")

    def __init__(self, registry: Registry, context: ResolutionContext) -> None:
        self._registry = registry
        self._context = context

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def context(self) -> ResolutionContext:
        return self._context

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
        return self._registry.resolve(
            service_type,
            name=name,
            scope=scope,
            context=self._context,
        )

    def has_registration(
        self,
        service_type: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> bool:
        return self._registry.has_registration(service_type, name=name, scope=scope)
