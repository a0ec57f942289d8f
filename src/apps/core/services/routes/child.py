from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "child"

ROUTES = (
    route("/child/", "GET", "child:retrieve"),
    route("/child/:id", "GET", "child:retrieve"),
    route("/child/", "POST", "child:create"),
    route("/child/:id", "PUT", "child:update"),
    route("/child/:id", "DELETE", "child:delete"),
)
