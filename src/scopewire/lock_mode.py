from __future__ import annotations

from enum import Enum


class LockMode(Enum):
    """Select how a ``Registry`` guards its registration maps.

    The lock only ever wraps map access. Factories run outside of it, so a
    factory may call back into ``resolve`` with either mode.
    """

    THREAD = "thread"
    """Guard map access with ``threading.Lock``."""

    NONE = "none"
    """Disable locking for registries confined to a single execution context."""
