from __future__ import annotations

from collections.abc import Iterable

from apps.core.services.permission_catalog import Permission, Role


def implied_permission_ids(owned_roles: Iterable[Role]) -> frozenset[str]:
    return frozenset(permission.id for role in owned_roles for permission in role.implied_permissions)


def effective_permission_ids(owned_permissions: Iterable[Permission], owned_roles: Iterable[Role]) -> frozenset[str]:
    return frozenset(permission.id for permission in owned_permissions) | implied_permission_ids(owned_roles)


def has_permission(permission: Permission, owned_permissions: Iterable[Permission], owned_roles: Iterable[Role]) -> bool:
    # Compared by id: two Permission values with the same id are interchangeable.
    return permission.id in effective_permission_ids(owned_permissions, owned_roles)
