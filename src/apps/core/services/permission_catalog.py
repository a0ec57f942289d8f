from __future__ import annotations

import re
from dataclasses import dataclass

from apps.core.contracts.errors import AuthorizationConfigError, InvalidPermissionName, InvalidRoleName

PERMISSION_NAME_RE = re.compile(r"^[a-z]+(-[a-z]+)*:[a-z]+(-[a-z]+)*$")

ROLE_LEVELS: tuple[str, ...] = ("basic", "advanced", "admin")


@dataclass(frozen=True)
class Permission:
    id: str
    description: str = ""

    @property
    def category(self) -> str:
        return self.id.split(":", 1)[0]

    @property
    def action(self) -> str:
        return self.id.split(":", 1)[1]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Permission):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "category": self.category, "action": self.action, "description": self.description}


@dataclass(frozen=True)
class Role:
    id: str
    name: str
    level: str
    implied_permissions: tuple[Permission, ...]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Role):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "level": self.level,
            "implied_permissions": [permission.id for permission in self.implied_permissions],
        }


_PERMISSION_DEFINITIONS: tuple[tuple[str, str], ...] = (
    ("age-groups:retrieve", "View age groups"),
    ("age-groups:update", "Change age groups"),
    ("child:retrieve", "View children"),
    ("child:create", "Register children"),
    ("child:update", "Edit children"),
    ("child:delete", "Remove children"),
    ("child-attendance:retrieve", "View child attendances"),
    ("child-attendance:create", "Register child attendances"),
    ("child-attendance:delete", "Remove child attendances"),
    ("contactperson:retrieve", "View contact people"),
    ("contactperson:create", "Add contact people"),
    ("contactperson:update", "Edit contact people"),
    ("contactperson:delete", "Remove contact people"),
    ("crew:retrieve", "View crew members"),
    ("crew:create", "Add crew members"),
    ("crew:update", "Edit crew members"),
    ("crew:delete", "Remove crew members"),
    ("crew-attendance:retrieve", "View crew attendances"),
    ("crew-attendance:create", "Register crew attendances"),
    ("crew-attendance:delete", "Remove crew attendances"),
    ("day:retrieve", "View days"),
    ("day:create", "Add days"),
    ("day:update", "Edit days"),
    ("day:delete", "Remove days"),
    ("export:children", "Export the list of children"),
    ("export:fiscalcert", "Export fiscal certificates"),
    ("report:child-attendance", "Child attendance report"),
    ("report:crew-attendance", "Crew attendance report"),
    ("reports:request", "Request generated reports"),
    ("reports:delete", "Delete generated reports"),
    ("template:read", "View document templates"),
    ("template:write", "Upload and remove document templates"),
    ("template:fill-in", "Fill in document templates"),
    ("tenant:list-members", "List organisation members"),
    ("tenant:add-member", "Add organisation members"),
    ("tenant:remove-member", "Remove organisation members"),
    ("user:list", "List users"),
    ("users:put-data", "Change user roles and permissions"),
    ("superuser:list-tenants", "List all tenants"),
    ("superuser:create-tenant", "Create tenants"),
    ("superuser:init-dbs", "Initialise tenant databases"),
    ("superuser:sync-db", "Synchronise tenant databases"),
)


def _build_permissions() -> dict[str, Permission]:
    permissions: dict[str, Permission] = {}
    for permission_id, description in _PERMISSION_DEFINITIONS:
        if not PERMISSION_NAME_RE.fullmatch(permission_id):
            raise InvalidPermissionName(permission_id)
        if permission_id in permissions:
            raise AuthorizationConfigError(f"Duplicate permission in catalog: {permission_id}")
        permissions[permission_id] = Permission(permission_id, description)
    return permissions


PERMISSIONS: dict[str, Permission] = _build_permissions()


def parse_permission(name: object) -> Permission:
    if not isinstance(name, str) or not PERMISSION_NAME_RE.fullmatch(name):
        raise InvalidPermissionName(name)
    permission = PERMISSIONS.get(name)
    if permission is None:
        raise InvalidPermissionName(name)
    return permission


def all_permissions() -> tuple[Permission, ...]:
    return tuple(PERMISSIONS.values())


def all_permissions_by_category() -> dict[str, tuple[Permission, ...]]:
    grouped: dict[str, list[Permission]] = {}
    for permission in PERMISSIONS.values():
        grouped.setdefault(permission.category, []).append(permission)
    return {category: tuple(items) for category, items in grouped.items()}


_READ_ONLY = (
    "age-groups:retrieve",
    "child:retrieve",
    "child-attendance:retrieve",
    "contactperson:retrieve",
    "crew:retrieve",
    "crew-attendance:retrieve",
    "day:retrieve",
)

_ROLE_DEFINITIONS: tuple[tuple[str, str, str, tuple[str, ...]], ...] = (
    ("viewer", "Viewer", "basic", _READ_ONLY),
    (
        "animator",
        "Animator",
        "basic",
        _READ_ONLY
        + (
            "child-attendance:create",
            "child-attendance:delete",
            "crew-attendance:create",
            "crew-attendance:delete",
        ),
    ),
    (
        "coordinator",
        "Coordinator",
        "advanced",
        _READ_ONLY
        + (
            "age-groups:update",
            "child:create",
            "child:update",
            "child:delete",
            "child-attendance:create",
            "child-attendance:delete",
            "contactperson:create",
            "contactperson:update",
            "contactperson:delete",
            "crew:create",
            "crew:update",
            "crew:delete",
            "crew-attendance:create",
            "crew-attendance:delete",
            "day:create",
            "day:update",
            "day:delete",
            "template:read",
            "template:fill-in",
        ),
    ),
    (
        "treasurer",
        "Treasurer",
        "advanced",
        (
            "child:retrieve",
            "crew:retrieve",
            "day:retrieve",
            "child-attendance:retrieve",
            "crew-attendance:retrieve",
            "export:children",
            "export:fiscalcert",
            "report:child-attendance",
            "report:crew-attendance",
            "reports:request",
        ),
    ),
    (
        "admin",
        "Administrator",
        "admin",
        tuple(
            permission_id
            for permission_id, _ in _PERMISSION_DEFINITIONS
            if not permission_id.startswith("superuser:")
        ),
    ),
)


def _build_roles() -> dict[str, Role]:
    roles: dict[str, Role] = {}
    for role_id, name, level, permission_ids in _ROLE_DEFINITIONS:
        if level not in ROLE_LEVELS:
            raise AuthorizationConfigError(f"Unknown level {level!r} for role {role_id}")
        if not permission_ids:
            raise AuthorizationConfigError(f"Role {role_id} implies no permissions")
        if role_id in roles:
            raise AuthorizationConfigError(f"Duplicate role in catalog: {role_id}")
        implied = tuple(dict.fromkeys(parse_permission(permission_id) for permission_id in permission_ids))
        roles[role_id] = Role(role_id, name, level, implied)
    return roles


ROLES: dict[str, Role] = _build_roles()


def parse_role(name: object) -> Role:
    if not isinstance(name, str):
        raise InvalidRoleName(name)
    role = ROLES.get(name)
    if role is None:
        raise InvalidRoleName(name)
    return role


def all_roles() -> tuple[Role, ...]:
    return tuple(ROLES.values())


def all_roles_by_level() -> dict[str, tuple[Role, ...]]:
    return {level: tuple(role for role in ROLES.values() if role.level == level) for level in ROLE_LEVELS}
