from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "crew"

ROUTES = (
    route("/crew/", "GET", "crew:retrieve"),
    route("/crew/:id", "GET", "crew:retrieve"),
    route("/crew/", "POST", "crew:create"),
    route("/crew/:id", "PUT", "crew:update"),
    route("/crew/:id", "DELETE", "crew:delete"),
)
