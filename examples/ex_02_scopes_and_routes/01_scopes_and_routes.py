"""Route-derived scopes: deeper registrations shadow their ancestors.

The route is read on every call, so navigating is just changing the list the
supplier returns. Leaving a screen drops what it registered with
``cleanup_scope``.
"""

from __future__ import annotations

from enum import Enum, auto

from scopewire import Registry, ScopeChainResolver


class Screen(Enum):
    home = auto()
    settings = auto()
    profile = auto()


class Theme:
    def __init__(self, name: str) -> None:
        self.name = name


def main() -> None:
    registry = Registry()
    route: list[Screen] = [Screen.home]
    resolver = ScopeChainResolver(registry, lambda: route)

    resolver.register(Theme, lambda _: Theme("light"))

    route.append(Screen.settings)
    resolver.register(Theme, lambda _: Theme("dark"))

    print(f"scopes={resolver.all_possible_scopes()}")  # => scopes=['home/settings', 'home']
    print(f"theme={resolver.resolve(Theme).name}")  # => theme=dark

    route.append(Screen.profile)
    print(f"inherited={resolver.resolve(Theme).name}")  # => inherited=dark

    resolver.cleanup_scope([Screen.home, Screen.settings])
    print(f"after_cleanup={resolver.resolve(Theme).name}")  # => after_cleanup=light

    registry.register_value(str, "v1.2.0", name="app_version")
    version = resolver.resolve(str, name="app_version", scope="home/profile")
    print(f"global_fallback={version}")  # => global_fallback=v1.2.0

    print(f"registered_scopes={registry.scopes()}")  # => registered_scopes=['home']


if __name__ == "__main__":
    main()
