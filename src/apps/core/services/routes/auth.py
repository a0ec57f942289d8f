from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "auth"

ROUTES = (
    route("/auth/user", "GET", "user:list"),
    route("/auth/user/:userId", "GET", "user:list"),
    route("/auth/user/:userId/:tenant", "GET", "user:list"),
    route("/auth/user/:userId/:tenant", "PUT", "users:put-data"),
)
