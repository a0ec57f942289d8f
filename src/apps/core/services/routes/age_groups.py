from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "age-groups"

ROUTES = (
    route("/age-groups/", "GET", "age-groups:retrieve"),
    route("/age-groups/", "PUT", "age-groups:update"),
)
