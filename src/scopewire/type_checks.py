from __future__ import annotations

import types
from typing import Annotated, Any, Literal, TypeGuard, TypeVar, Union, get_args, get_origin

_UNCHECKABLE: None = None


def is_runtime_class(candidate: object) -> TypeGuard[type[Any]]:
    """Return true when candidate is a runtime class safe for class-only operations.

    Args:
        candidate: Value being checked for eligibility or runtime type constraints.

    """
    return isinstance(candidate, type) and not isinstance(candidate, types.GenericAlias)


def _is_static_protocol(candidate: type[Any]) -> bool:
    return bool(getattr(candidate, "_is_protocol", False)) and not getattr(
        candidate,
        "_is_runtime_protocol",
        False,
    )


def runtime_check_targets(service_type: Any) -> tuple[type[Any], ...] | None:
    """Return the classes a resolved value must be an instance of.

    ``None`` means the requested type cannot be checked at runtime and any value
    is accepted. ``Annotated[T, ...]`` is checked against ``T``, generic aliases
    against their origin, and unions against any of their members.

    Args:
        service_type: The type requested from the registry.

    """
    if service_type is Any or isinstance(service_type, TypeVar):
        return _UNCHECKABLE

    supertype = getattr(service_type, "__supertype__", None)
    if supertype is not None:
        return runtime_check_targets(supertype)

    origin = get_origin(service_type)
    if origin is Annotated:
        return runtime_check_targets(get_args(service_type)[0])
    if origin is Union or origin is types.UnionType:
        targets: list[type[Any]] = []
        for member in get_args(service_type):
            member_targets = runtime_check_targets(member)
            if member_targets is None:
                return _UNCHECKABLE
            targets.extend(member_targets)
        return tuple(targets)
    if origin is Literal:
        return _UNCHECKABLE
    if origin is not None:
        return runtime_check_targets(origin) if is_runtime_class(origin) else _UNCHECKABLE

    if service_type is None:
        return (type(None),)
    if is_runtime_class(service_type):
        if _is_static_protocol(service_type):
            return _UNCHECKABLE
        return (service_type,)
    return _UNCHECKABLE


def is_instance_of(value: object, service_type: Any) -> bool:
    """Return true when value can be handed out as ``service_type``."""
    targets = runtime_check_targets(service_type)
    if targets is None:
        return True
    return isinstance(value, targets)


__all__ = ["is_instance_of", "is_runtime_class", "runtime_check_targets"]
