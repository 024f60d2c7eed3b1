from __future__ import annotations

import logging
import threading
from contextlib import AbstractContextManager, nullcontext
from typing import Any, TypeVar, overload

from scopewire.defaults import DEFAULT_LOCK_MODE
from scopewire.exceptions import ScopewireServiceNotFoundError
from scopewire.lock_mode import LockMode
from scopewire.providers import Factory, Provider, erase_factory, value_factory
from scopewire.resolution import BoundResolver, ResolutionContext, ensure_instance
from scopewire.service_key import ServiceKey, type_display_name

T = TypeVar("T")

logger = logging.getLogger(__name__)

_ProvidersByType = dict[Any, dict[str, Provider]]


class Registry:
    """Store factories keyed by ``(type, name, scope)`` and resolve them on demand.

    Registrations made without a scope are global. Registrations made with a
    scope live only in that scope: ``resolve`` with a scope looks in that scope
    and nowhere else. Ordered fallback across scopes is the job of
    ``ScopeChainResolver``.

    Factories are invoked on every ``resolve``; nothing is cached. A factory
    receives a resolver bound to the current resolution context and may resolve
    its own dependencies through it. Resolving a key that is already being
    resolved in the same call tree raises ``ScopewireCircularDependencyError``.

    All map access is serialized by one lock per registry, chosen by
    ``lock_mode``. The lock is never held while a factory runs.
    """

    __slots__ = ("_lock", "_registrations", "_scoped_registrations")

    def __init__(self, *, lock_mode: LockMode = DEFAULT_LOCK_MODE) -> None:
        self._registrations: _ProvidersByType = {}
        self._scoped_registrations: dict[str, _ProvidersByType] = {}
        self._lock: AbstractContextManager[Any] = (
            threading.Lock() if lock_mode is LockMode.THREAD else nullcontext()
        )

    def register(
        self,
        service_type: Any,
        factory: Factory,
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> None:
        """Register a factory for a service.

        Re-registering the same ``(service_type, name, scope)`` replaces the
        previous factory.

        Args:
            service_type: The type the factory provides. Also the lookup key.
            factory: A ``(resolver) -> value`` callable or a ``ServiceFactory``.
            name: Optional name distinguishing several registrations of one type.
            scope: Optional scope path. ``None`` registers globally.

        Raises:
            ScopewireInvalidRegistrationError: If ``factory`` is not usable.

        """
        service_key = ServiceKey.of(service_type, name, scope)
        provider = Provider(service_key=service_key, factory=erase_factory(factory))

        with self._lock:
            if scope is None:
                providers_by_type = self._registrations
            else:
                providers_by_type = self._scoped_registrations.setdefault(scope, {})
            providers_by_type.setdefault(service_type, {})[service_key.name] = provider

        logger.debug("Registered %s", service_key.describe())

    def register_value(
        self,
        service_type: Any,
        value: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> None:
        """Register a pre-built value. Every resolve returns this same object."""
        self.register(service_type, value_factory(value), name=name, scope=scope)

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
        """Resolve a service registered under exactly ``(service_type, name, scope)``.

        Args:
            service_type: The requested type.
            name: Optional registration name.
            scope: Optional scope path. Only that scope is consulted.
            context: The resolution context of an enclosing resolve call. Leave
                it ``None`` for top-level calls; factories get it threaded
                through their resolver.

        Raises:
            ScopewireServiceNotFoundError: If nothing is registered for the key or
                the factory result is not an instance of ``service_type``.
            ScopewireCircularDependencyError: If the key is already being resolved
                in this call tree.

        """
        service_key = ServiceKey.of(service_type, name, scope)
        if context is None:
            context = ResolutionContext()

        with context.track(service_key):
            provider = self._get_provider(service_key)
            if provider is None:
                logger.debug("No registration for %s", service_key.describe())
                raise ScopewireServiceNotFoundError(service_key.type_name, service_key)

            instance = provider.provide(BoundResolver(self, context))
            return ensure_instance(instance, service_key)

    def delete(
        self,
        service_type: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> None:
        """Remove a registration. Deleting a missing registration is a no-op."""
        service_key = ServiceKey.of(service_type, name, scope)

        with self._lock:
            if scope is None:
                providers_by_type = self._registrations
            else:
                scoped = self._scoped_registrations.get(scope)
                if scoped is None:
                    return
                providers_by_type = scoped

            providers = providers_by_type.get(service_type)
            if providers is None or providers.pop(service_key.name, None) is None:
                return
            if not providers:
                del providers_by_type[service_type]
            if scope is not None and not providers_by_type:
                del self._scoped_registrations[scope]

        logger.debug("Deleted %s", service_key.describe())

    def has_registration(
        self,
        service_type: Any,
        *,
        name: str | None = None,
        scope: str | None = None,
    ) -> bool:
        """Return whether a factory is registered. The factory is not invoked."""
        return self._get_provider(ServiceKey.of(service_type, name, scope)) is not None

    def clear_scope(self, scope: str) -> None:
        """Drop every registration in ``scope``. Unknown scopes are ignored."""
        with self._lock:
            removed = self._scoped_registrations.pop(scope, None)

        if removed is not None:
            logger.debug("Cleared scope %s", scope)

    def scopes(self) -> list[str]:
        """Return the scopes that currently hold registrations, sorted."""
        with self._lock:
            return sorted(self._scoped_registrations)

    def registrations(self) -> list[ServiceKey]:
        """Return every registered key: global ones first, then scope by scope."""
        with self._lock:
            keys = _sorted_keys(self._registrations)
            for scope in sorted(self._scoped_registrations):
                keys.extend(_sorted_keys(self._scoped_registrations[scope]))
        return keys

    def describe_registrations(self) -> str:
        """Render all registrations grouped by scope, one name per line."""
        keys = self.registrations()
        global_keys = [key for key in keys if key.is_global]
        scoped_keys = [key for key in keys if not key.is_global]

        lines = ["Global registrations:"]
        lines.extend(_describe_group(global_keys, indent="  "))

        lines.append("Scoped registrations:")
        if not scoped_keys:
            lines.append("  (none)")
        current_scope: str | None = None
        group: list[ServiceKey] = []
        for key in scoped_keys:
            if key.scope != current_scope and group:
                lines.append(f"  Scope: {current_scope}")
                lines.extend(_describe_group(group, indent="    "))
                group = []
            current_scope = key.scope
            group.append(key)
        if group:
            lines.append(f"  Scope: {current_scope}")
            lines.extend(_describe_group(group, indent="    "))

        return "\n".join(lines)

    def log_registrations(self, level: int = logging.DEBUG) -> None:
        """Emit ``describe_registrations`` through the module logger at ``level``."""
        logger.log(level, "%s", self.describe_registrations())

    def _get_provider(self, service_key: ServiceKey) -> Provider | None:
        with self._lock:
            if service_key.scope is None:
                providers_by_type: _ProvidersByType | None = self._registrations
            else:
                providers_by_type = self._scoped_registrations.get(service_key.scope)
            if providers_by_type is None:
                return None
            providers = providers_by_type.get(service_key.service_type)
            if providers is None:
                return None
            return providers.get(service_key.name)


def _sorted_keys(providers_by_type: _ProvidersByType) -> list[ServiceKey]:
    keys = [
        provider.service_key
        for providers in providers_by_type.values()
        for provider in providers.values()
    ]
    return sorted(keys, key=lambda key: (type_display_name(key.service_type), key.name))


def _describe_group(keys: list[ServiceKey], *, indent: str) -> list[str]:
    if not keys:
        return [f"{indent}(none)"]

    lines: list[str] = []
    previous_type: Any = object()
    for key in keys:
        if key.service_type != previous_type:
            lines.append(f"{indent}{key.type_name}")
            previous_type = key.service_type
        lines.append(f"{indent}  - {key.display_name}")
    return lines
