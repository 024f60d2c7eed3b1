"""Common error classes for troubleshooting.

This module triggers representative error paths and prints exception type names
so you can recognize each error category quickly.
"""

from __future__ import annotations

from typing import Any, cast

from scopewire import (
    Registry,
    ScopeChainResolver,
    ScopewireCircularDependencyError,
    ScopewireInvalidRegistrationError,
    ScopewireServiceNotFoundError,
)


class Parent:
    def __init__(self, child: Child) -> None:
        self.child = child


class Child:
    def __init__(self, parent: Parent) -> None:
        self.parent = parent


class Missing:
    pass


def main() -> None:
    registry = Registry()

    try:
        registry.resolve(Missing)
    except ScopewireServiceNotFoundError as error:
        print(type(error).__name__)  # => ScopewireServiceNotFoundError
        print(error)  # => Service 'Missing' is not registered (name: default, scope: global)

    registry.register(Parent, lambda r: Parent(r.resolve(Child)))
    registry.register(Child, lambda r: Child(r.resolve(Parent)))
    try:
        registry.resolve(Parent)
    except ScopewireCircularDependencyError as error:
        print(type(error).__name__)  # => ScopewireCircularDependencyError
        print(" -> ".join(item.split("(")[0] for item in error.chain))  # => Parent -> Child -> Parent

    try:
        registry.register(Missing, cast("Any", "not a factory"))
    except ScopewireInvalidRegistrationError as error:
        print(type(error).__name__)  # => ScopewireInvalidRegistrationError

    registry.register(float, lambda _: "not a float")
    try:
        registry.resolve(float)
    except ScopewireServiceNotFoundError as error:
        print(f"wrong_type={error.descriptor}")  # => wrong_type=float

    resolver = ScopeChainResolver(registry, lambda: ["checkout"])
    registry.register_value(str, "global only")
    try:
        resolver.resolve(str)
    except ScopewireServiceNotFoundError:
        print("route_lookup_skips_global=True")  # => route_lookup_skips_global=True


if __name__ == "__main__":
    main()
