from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from scopewire.defaults import DEFAULT_NAME, DEFAULT_NAME_LABEL, GLOBAL_SCOPE_LABEL
from scopewire.type_checks import is_runtime_class

_LOCALS_MARKER = "<locals>."


def type_display_name(service_type: Any) -> str:
    """Return a human-readable name for a requested type.

    Runtime classes render as their qualified name without the ``<locals>``
    prefix of function-local classes. Typing constructs render as their
    ``repr`` without the ``typing.`` prefix. Only used for diagnostics.
    """
    if is_runtime_class(service_type):
        return service_type.__qualname__.rsplit(_LOCALS_MARKER, maxsplit=1)[-1]
    return repr(service_type).replace("typing.", "")


@dataclass(frozen=True, slots=True)
class ServiceKey:
    """Identity of a registration: requested type, name and scope.

    Build keys with ``ServiceKey.of`` so an absent name is normalized to
    ``DEFAULT_NAME``. A ``None`` scope means the global scope.
    """

    service_type: Any
    name: str = DEFAULT_NAME
    scope: str | None = None

    @classmethod
    def of(
        cls,
        service_type: Any,
        name: str | None = None,
        scope: str | None = None,
    ) -> ServiceKey:
        """Build a key, normalizing an absent name to ``DEFAULT_NAME``."""
        return cls(
            service_type=service_type,
            name=DEFAULT_NAME if name is None else name,
            scope=scope,
        )

    @property
    def is_global(self) -> bool:
        return self.scope is None

    @property
    def type_name(self) -> str:
        return type_display_name(self.service_type)

    @property
    def display_name(self) -> str:
        return self.name or DEFAULT_NAME_LABEL

    @property
    def display_scope(self) -> str:
        return GLOBAL_SCOPE_LABEL if self.scope is None else self.scope

    def describe(self) -> str:
        """Render the key as ``Type(name: <name>, scope: <scope>)``."""
        return f"{self.type_name}(name: {self.display_name}, scope: {self.display_scope})"
