from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Sequence
from enum import Enum
from typing import Any, TypeAlias, TypeVar, overload

from scopewire.defaults import DEFAULT_NAME, SCOPE_SEPARATOR
from scopewire.exceptions import (
    ScopewireError,
    ScopewireServiceNotFoundError,
    ScopewireUnresolvedDependencyError,
)
from scopewire.providers import Factory, Resolver
from scopewire.registry import Registry
from scopewire.resolution import ResolutionContext
from scopewire.service_key import type_display_name

T = TypeVar("T")

RouteSupplier: TypeAlias = Callable[[], Sequence[Any]]
"""Returns the current route, outermost element first. Re-read on every call."""

RouteRenderer: TypeAlias = Callable[[Any], str]
"""Renders one route element to its canonical string form."""

logger = logging.getLogger(__name__)

_MISSING: Any = object()


def render_route_element(element: Any) -> str:
    """Render a route element: enum members by name, everything else with ``str``."""
    if isinstance(element, Enum):
        return element.name
    return str(element)


class ScopeChainResolver:
    """Resolve services through the scopes derived from the current route.

    A route such as ``[root, parent, child]`` yields the scopes
    ``root/parent/child``, ``root/parent`` and ``root``. Lookups try them from
    most to least specific, so registrations made deeper in the route shadow the
    ones made by its ancestors. Registrations made through this resolver land in
    the most specific scope of the route at the time of the call.

    Examples:
        .. code-block:: python

            route = ["app", "settings"]
            resolver = ScopeChainResolver(registry, lambda: route)
            resolver.register(Theme, lambda _: Theme("dark"))  # scope "app/settings"

    """

    __slots__ = ("_context", "_registry", "_render", "_route")

    def __init__(
        self,
        registry: Registry,
        route: RouteSupplier,
        *,
        render: RouteRenderer = render_route_element,
        context: ResolutionContext | None = None,
    ) -> None:
        self._registry = registry
        self._route = route
        self._render = render
        self._context = context

    @property
    def registry(self) -> Registry:
        return self._registry

    @property
    def context(self) -> ResolutionContext | None:
        """Context used when ``resolve`` is called without one."""
        return self._context

    def bind(self, context: ResolutionContext) -> ScopeChainResolver:
        """Return a view of this resolver that resolves within ``context``.

        The view shares the registry, route and renderer. Use it only for the
        duration of the factory call that owns ``context``.
        """
        return ScopeChainResolver(
            self._registry,
            self._route,
            render=self._render,
            context=context,
        )

    def current_scope_path(self) -> str:
        """Return the most specific scope: the whole route joined with ``/``."""
        return self._join(self._route())

    def all_possible_scopes(self) -> list[str]:
        """Return every non-empty route prefix as a scope path, most specific first."""
        rendered = [self._render(element) for element in self._route()]
        return [SCOPE_SEPARATOR.join(rendered[:end]) for end in range(len(rendered), 0, -1)]

    @overload
    def resolve(
        self,
        service_type: type[T],
        *,
        name: str | None = None,
        scope: str | None = None,
        context: ResolutionContext | None = None,
    ) -> T: ...

    @overload
    def resolve(
        self,
        service_type: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
        context: ResolutionContext | None = None,
    ) -> Any: ...

    def resolve(
        self,
        service_type: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
        context: ResolutionContext | None = None,
    ) -> Any:
        """Resolve a service from the nearest scope that provides it.

        Without ``scope`` only the route-derived scopes are searched. With
        ``scope``, that scope is tried first, then the route-derived scopes, then
        the global registration. The explicit scope is a first guess, not a
        constraint.

        Args:
            service_type: The requested type.
            name: Optional registration name.
            scope: Optional scope path to try before the route-derived ones.
            context: Resolution context of an enclosing resolve call. Defaults to
                the context this resolver is bound to, if any.

        Raises:
            ScopewireServiceNotFoundError: If no candidate scope provides the
                service. A miss raised inside a factory for one of its own
                dependencies is kept as ``__cause__``.
            ScopewireCircularDependencyError: Propagated from the registry as soon
                as it happens; no further scopes are tried.

        """
        descriptor = type_display_name(service_type)
        if context is None:
            context = self._context
        misses: list[ScopewireServiceNotFoundError] = []

        if scope is not None:
            try:
                instance = self._registry.resolve(
                    service_type,
                    name=name,
                    scope=scope,
                    context=context,
                )
            except ScopewireServiceNotFoundError as error:
                misses.append(error)
                logger.debug(
                    "%s not found in explicit scope %s, trying the hierarchy",
                    descriptor,
                    scope,
                )
            else:
                logger.debug("Resolved %s in explicit scope %s", descriptor, scope)
                return instance

        scopes = self.all_possible_scopes()
        instance = self._resolve_first(service_type, name, scopes, context, misses)
        if instance is not _MISSING:
            return instance

        if scope is not None:
            try:
                instance = self._registry.resolve(service_type, name=name, context=context)
            except ScopewireServiceNotFoundError as error:
                misses.append(error)
            else:
                logger.debug("Resolved %s in the global scope", descriptor)
                return instance

        raise ScopewireServiceNotFoundError(descriptor) from _diagnostic_miss(
            misses,
            service_type,
            name,
        )

    def find(self, service_type: Any, *, name: str | None = None) -> Any:
        """Resolve a dependency that must exist.

        Do not use this when the dependency may legitimately be absent: every
        scopewire failure becomes a fatal ``ScopewireUnresolvedDependencyError``.
        """
        try:
            return self.resolve(service_type, name=name)
        except ScopewireError as error:
            descriptor = type_display_name(service_type)
            logger.error("Dependency %s not found in any accessible scope: %s", descriptor, error)
            raise ScopewireUnresolvedDependencyError(descriptor) from error

    def register(self, service_type: Any, factory: Factory, *, name: str | None = None) -> None:
        """Register a factory in the scope of the current route."""
        self._registry.register(service_type, factory, name=name, scope=self.current_scope_path())

    def register_value(self, service_type: Any, value: Any, *, name: str | None = None) -> None:
        """Register a pre-built value in the scope of the current route."""
        self._registry.register_value(
            service_type,
            value,
            name=name,
            scope=self.current_scope_path(),
        )

    def cleanup_scope(self, route_prefix: Iterable[Any]) -> None:
        """Drop every registration made while the route was ``route_prefix``.

        Only that exact scope is cleared; deeper scopes are left alone.
        """
        self._registry.clear_scope(self._join(route_prefix))

    def register_self(self) -> None:
        """Register this resolver globally so factories can look it up.

        Factories resolving ``ScopeChainResolver`` get a view bound to their
        own resolution context, so cycles through the chain resolver are still
        detected.
        """
        self._registry.register(ScopeChainResolver, self._bound_to_caller)

    def _bound_to_caller(self, resolver: Resolver) -> ScopeChainResolver:
        return self.bind(resolver.context)

    def _join(self, route: Iterable[Any]) -> str:
        return SCOPE_SEPARATOR.join(self._render(element) for element in route)

    def _resolve_first(
        self,
        service_type: Any,
        name: str | None,
        scopes: list[str],
        context: ResolutionContext | None,
        misses: list[ScopewireServiceNotFoundError],
    ) -> Any:
        logger.debug("Trying to resolve %s in scopes %s", type_display_name(service_type), scopes)
        for candidate in scopes:
            try:
                instance = self._registry.resolve(
                    service_type,
                    name=name,
                    scope=candidate,
                    context=context,
                )
            except ScopewireServiceNotFoundError as error:
                misses.append(error)
                continue
            logger.debug("Resolved %s in scope %s", type_display_name(service_type), candidate)
            return instance
        return _MISSING


def _diagnostic_miss(
    misses: list[ScopewireServiceNotFoundError],
    service_type: Any,
    name: str | None,
) -> ScopewireServiceNotFoundError | None:
    # A miss for another key was raised by a factory for its own dependency.
    requested_name = DEFAULT_NAME if name is None else name
    for miss in misses:
        key = miss.service_key
        if key is not None and (key.service_type != service_type or key.name != requested_name):
            return miss
    return misses[-1] if misses else None
