from __future__ import annotations

from apps.core.services.route_definitions import route

RESOURCE = "tenants"

ROUTES = (
    route("/tenants/", "GET", "superuser:list-tenants"),
    route("/tenants/:name", "GET", "superuser:list-tenants"),
    route("/tenants/:name", "PUT", "superuser:create-tenant"),
    route("/tenants/:name/generate-design-docs", "POST", "superuser:init-dbs"),
    route("/tenants/sync-to/:name", "POST", "superuser:sync-db"),
    route("/tenants/sync-from/:name", "POST", "superuser:sync-db"),
)
