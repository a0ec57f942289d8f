from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "child-attendance"

ROUTES = (
    route("/child-attendance/", "GET", "child-attendance:retrieve"),
    route("/child-attendance/day/:dayId", "GET", "child-attendance:retrieve"),
    route("/child-attendance/all", "GET", "child-attendance:retrieve"),
    route("/child-attendance/all/byChild", "GET", "child-attendance:retrieve"),
    route("/child-attendance/all/byDay", "GET", "child-attendance:retrieve"),
    route("/child-attendance/all/raw", "GET", "child-attendance:retrieve"),
    route("/child-attendance/:childId/attendances", "GET", "child-attendance:retrieve"),
    route("/child-attendance/:childId/attendances/:dayId", "POST", "child-attendance:create"),
    route("/child-attendance/:childId/attendances/:dayId", "DELETE", "child-attendance:delete"),
)
