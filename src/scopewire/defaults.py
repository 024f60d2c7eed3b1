from scopewire.lock_mode import LockMode

DEFAULT_NAME = ""
"""Canonical map key for registrations made without a name."""

DEFAULT_NAME_LABEL = "default"
GLOBAL_SCOPE_LABEL = "global"

SCOPE_SEPARATOR = "/"
"""Joins rendered route elements into a scope path."""

DEFAULT_LOCK_MODE = LockMode.THREAD
