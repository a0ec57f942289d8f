from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "files"

ROUTES = (
    route("/files/export/children", "GET", "export:children"),
    route("/files/export/children/with-remarks", "GET", "export:children"),
    route("/files/report/child-attendance/:year", "GET", "report:child-attendance"),
    route("/files/report/crew-attendance/:year", "GET", "report:crew-attendance"),
    route("/files/report/fiscal-certificates/:year", "GET", "export:fiscalcert"),
)
