from __future__ import annotations

import pytest

from apps.core.services.permission_catalog import Permission, all_permissions, all_roles, parse_permission, parse_role
from apps.core.services.permission_resolver import effective_permission_ids, has_permission, implied_permission_ids


@pytest.mark.parametrize("role", all_roles(), ids=lambda role: role.id)
def test_role_grants_every_implied_permission(role) -> None:
    for permission in role.implied_permissions:
        assert has_permission(permission, [], [role])


@pytest.mark.parametrize("role", all_roles(), ids=lambda role: role.id)
def test_role_grants_nothing_else(role) -> None:
    implied = {permission.id for permission in role.implied_permissions}
    for permission in all_permissions():
        if permission.id not in implied:
            assert not has_permission(permission, [], [role])


def test_direct_permission_is_enough() -> None:
    assert has_permission(parse_permission("day:delete"), [parse_permission("day:delete")], [])
    assert not has_permission(parse_permission("day:delete"), [parse_permission("day:update")], [])


def test_nothing_owned_grants_nothing() -> None:
    assert not any(has_permission(permission, [], []) for permission in all_permissions())


def test_lookup_is_by_id_not_identity() -> None:
    assert has_permission(Permission("crew:update", "copy"), [], [parse_role("coordinator")])
    assert has_permission(parse_permission("crew:update"), [Permission("crew:update")], [])


def test_effective_permissions_union_direct_and_implied() -> None:
    viewer = parse_role("viewer")
    effective = effective_permission_ids([parse_permission("template:write")], [viewer])
    assert "template:write" in effective
    assert implied_permission_ids([viewer]) <= effective
    assert implied_permission_ids([]) == frozenset()
