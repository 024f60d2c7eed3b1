from __future__ import annotations

from typing import Any

import pytest

from scopewire.registry import Registry
from scopewire.scope_chain import ScopeChainResolver


@pytest.fixture()
def scopewire_registry() -> Registry:
    """Create a per-test registry.

    The fixture is function-scoped, so registrations are isolated between tests
    unless users override fixture scope explicitly.

    Returns:
        A new ``Registry`` instance.

    """
    return Registry()


@pytest.fixture()
def scopewire_route() -> list[Any]:
    """Provide the mutable route read by ``scopewire_resolver``.

    The route starts empty. Override this fixture in a test module or conftest
    to start from another route, and mutate the list in place to navigate.

    Returns:
        The route list.

    """
    return []


@pytest.fixture()
def scopewire_resolver(
    scopewire_registry: Registry,
    scopewire_route: list[Any],
) -> ScopeChainResolver:
    """Create a scope-chain resolver over the per-test registry and route.

    Returns:
        A ``ScopeChainResolver`` that re-reads ``scopewire_route`` on every call.

    """
    return ScopeChainResolver(scopewire_registry, lambda: scopewire_route)
