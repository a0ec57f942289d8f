from __future__ import annotations

from apps.core.contracts.policy import Route
from apps.core.services.path_matcher import matches
from apps.core.services.permission_catalog import Permission
from apps.core.services.routes import (
    age_groups,
    auth,
    child,
    child_attendance,
    contact_person,
    crew,
    crew_attendance,
    day,
    files,
    tenants,
)
from apps.core.services.route_definitions import build_route_table

# Table order is stable so audit output is reproducible.
ROUTE_MODULES = (
    age_groups,
    auth,
    child,
    child_attendance,
    contact_person,
    crew,
    crew_attendance,
    day,
    files,
    tenants,
)

ALL_ROUTES: tuple[Route, ...] = build_route_table(*(module.ROUTES for module in ROUTE_MODULES))


def all_routes() -> tuple[Route, ...]:
    return ALL_ROUTES


def routes_by_resource() -> dict[str, tuple[Route, ...]]:
    return {module.RESOURCE: tuple(module.ROUTES) for module in ROUTE_MODULES}


def find_route(method: str, path: str, routes: tuple[Route, ...] | None = None) -> Route | None:
    for item in ALL_ROUTES if routes is None else routes:
        if item.method == method and matches(item.path, path):
            return item
    return None


def permission_for(method: str, path: str) -> Permission | None:
    found = find_route(method, path)
    return found.permission_needed if found is not None else None
