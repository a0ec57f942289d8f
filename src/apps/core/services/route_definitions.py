from __future__ import annotations

from collections.abc import Iterable

from apps.core.contracts.errors import AmbiguousRoute, InvalidRouteDefinition
from apps.core.contracts.policy import HTTP_METHODS, Route
from apps.core.services.path_matcher import PARAM_PREFIX, pattern_shape
from apps.core.services.permission_catalog import parse_permission


def route(path: str, method: str, permission_name: str) -> Route:
    if method not in HTTP_METHODS:
        raise InvalidRouteDefinition(f"Unsupported method {method!r} for route {path}")
    if not path.startswith("/"):
        raise InvalidRouteDefinition(f"Route path must start with '/': {path!r}")
    if PARAM_PREFIX in path.split("/"):
        raise InvalidRouteDefinition(f"Route path has an unnamed parameter segment: {path!r}")
    return Route(path=path, method=method, permission_needed=parse_permission(permission_name))


def build_route_table(*groups: Iterable[Route]) -> tuple[Route, ...]:
    """Concatenate route groups in order, rejecting two routes with the same shape and method."""
    table: list[Route] = []
    seen: dict[tuple[str, str], Route] = {}
    for group in groups:
        for item in group:
            key = (pattern_shape(item.path), item.method)
            previous = seen.get(key)
            if previous is not None:
                raise AmbiguousRoute(item.method, item.path, previous.path)
            seen[key] = item
            table.append(item)
    return tuple(table)
