"""Ownership and role decisions for write paths.

Everything here is a pure decision: functions return ``Allow`` or ``Deny`` and
never raise. Services decide how a ``Deny`` is surfaced.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Protocol

from devcamper.schemas.auth import Principal, Role


class Action(str, Enum):
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    UPLOAD = "upload"


class OwnableResource(Protocol):
    @property
    def id(self) -> str: ...

    @property
    def owner_id(self) -> str: ...


@dataclass(frozen=True, slots=True)
class Allow:
    def __bool__(self) -> bool:
        return True


@dataclass(frozen=True, slots=True)
class Deny:
    reason: str
    resource_id: str | None = None
    action: Action | None = None

    def __bool__(self) -> bool:
        return False


ALLOW = Allow()


def authorize(principal: Principal, resource: OwnableResource, action: Action) -> Allow | Deny:
    """Allow admins and the resource owner; deny everyone else."""
    if principal.is_admin or resource.owner_id == principal.id:
        return ALLOW
    return Deny(
        reason=f"User {principal.id} is not authorized to {action.value} resource {resource.id}",
        resource_id=resource.id,
        action=action,
    )


def require_single_per_owner(
    principal: Principal,
    existing: OwnableResource | None,
    *,
    kind: str,
) -> Allow | Deny:
    """Creation precondition for resources a principal may own only one of.

    ``existing`` is the resource the principal already owns in this scope (as
    looked up by the caller), or ``None``.
    """
    if existing is None or principal.is_admin:
        return ALLOW
    return Deny(
        reason=f"The user with ID {principal.id} has already published a {kind}",
        resource_id=existing.id,
        action=Action.CREATE,
    )


def require_role(principal: Principal, allowed_roles: Iterable[Role]) -> Allow | Deny:
    allowed = frozenset(allowed_roles)
    if principal.role in allowed:
        return ALLOW
    return Deny(reason=f"User role {principal.role.value} is not authorized to access this route")


__all__ = [
    "ALLOW",
    "Action",
    "Allow",
    "Deny",
    "OwnableResource",
    "authorize",
    "require_role",
    "require_single_per_owner",
]
