"""Shared pytest fixtures for scopewire tests."""

from typing import Any

import pytest

from scopewire.lock_mode import LockMode
from scopewire.registry import Registry
from scopewire.scope_chain import ScopeChainResolver
from tests.routes import Route


@pytest.fixture()
def registry() -> Registry:
    """Fresh registry with thread locking."""
    return Registry()


@pytest.fixture()
def registry_unlocked() -> Registry:
    """Registry with locking disabled."""
    return Registry(lock_mode=LockMode.NONE)


@pytest.fixture()
def route() -> list[Any]:
    """Mutable route; tests navigate by reassigning its contents."""
    return [Route.root, Route.parent, Route.child]


@pytest.fixture()
def resolver(registry: Registry, route: list[Any]) -> ScopeChainResolver:
    """Scope-chain resolver reading ``route`` on every call."""
    return ScopeChainResolver(registry, lambda: route)
