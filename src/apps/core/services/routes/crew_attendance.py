from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "crew-attendance"

# The byCrew path is what the crew-attendance service deploys; keep it as generated.
ROUTES = (
    route("/crew-attendance/", "GET", "crew-attendance:retrieve"),
    route("/crew-attendance/day/:dayId", "GET", "crew-attendance:retrieve"),
    route("/crew-attendance/all", "GET", "crew-attendance:retrieve"),
    route("/crew-attendanceday/attendances/crew/all/byCrew", "GET", "crew-attendance:retrieve"),
    route("/crew-attendance/all/byDay", "GET", "crew-attendance:retrieve"),
    route("/crew-attendance/all/raw", "GET", "crew-attendance:retrieve"),
    route("/crew-attendance/:crewId/attendances", "GET", "crew-attendance:retrieve"),
    route("/crew-attendance/:crewId/attendances/:dayId", "POST", "crew-attendance:create"),
    route("/crew-attendance/:crewId/attendances/:dayId", "DELETE", "crew-attendance:delete"),
)
