from scopewire.integrations.pytest_plugin.plugin import (
    scopewire_registry,
    scopewire_resolver,
    scopewire_route,
)

__all__ = [
    "scopewire_registry",
    "scopewire_resolver",
    "scopewire_route",
]
