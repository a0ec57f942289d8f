from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "contact-person"

ROUTES = (
    route("/contact-person/", "GET", "contactperson:retrieve"),
    route("/contact-person/:id", "GET", "contactperson:retrieve"),
    route("/contact-person/", "POST", "contactperson:create"),
    route("/contact-person/:id", "PUT", "contactperson:update"),
    route("/contact-person/:id", "DELETE", "contactperson:delete"),
)
