from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "day"

ROUTES = (
    route("/day/", "GET", "day:retrieve"),
    route("/day/:id", "GET", "day:retrieve"),
    route("/day/", "POST", "day:create"),
    route("/day/:id", "PUT", "day:update"),
    route("/day/:id", "DELETE", "day:delete"),
)
