"""Role based capability checks applied at the edge of every core operation."""

from __future__ import annotations

from enum import Enum
from typing import Protocol

from .catalog import MANAGER_ROLES, ROLES
from .errors import AuthorizationError


class Actor(Protocol):
    id: int
    role: str


class Capability(str, Enum):
    CHECK_OUT = "check_out"
    MANAGE_INVENTORY = "manage_inventory"


def can_manage_inventory(user: Actor | None) -> bool:
    return user is not None and user.role in MANAGER_ROLES


def can_check_out(user: Actor | None) -> bool:
    return user is not None and user.role in ROLES


_CHECKS = {
    Capability.CHECK_OUT: can_check_out,
    Capability.MANAGE_INVENTORY: can_manage_inventory,
}


def has_capability(user: Actor | None, capability: Capability) -> bool:
    return _CHECKS[capability](user)


def require_capability(user: Actor | None, capability: Capability) -> Actor:
    """Return ``user`` unchanged or raise ``AuthorizationError``."""

    if user is None:
        raise AuthorizationError("Authentication required")
    if not has_capability(user, capability):
        raise AuthorizationError(
            f"Role '{user.role}' is not allowed to {capability.value.replace('_', ' ')}",
            details={"capability": capability.value},
        )
    return user


__all__ = [
    "Capability",
    "can_check_out",
    "can_manage_inventory",
    "has_capability",
    "require_capability",
]
