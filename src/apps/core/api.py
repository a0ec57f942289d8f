from __future__ import annotations

import json

from django.http import HttpRequest, HttpResponse, JsonResponse

from apps.core.config.env import get_runtime_settings, validate_runtime_settings
from apps.core.observability import METRICS
from apps.core.services.permission_catalog import all_permissions, all_roles
from apps.core.services.permission_registry import all_routes

SERVICE_NAME = "hoepel-authorizer"


def health_live(request: HttpRequest) -> JsonResponse:
    return JsonResponse({"ok": True, "service": SERVICE_NAME, "status": "live"})


def _readiness_payload() -> tuple[dict[str, object], int]:
    settings = get_runtime_settings()
    config_issues = validate_runtime_settings(settings)
    ready = not config_issues
    return (
        {
            "ok": ready,
            "service": SERVICE_NAME,
            "status": "ready" if ready else "not_ready",
            "env": settings.env,
            "route_count": len(all_routes()),
            "permission_count": len(all_permissions()),
            "role_count": len(all_roles()),
            "config_issues": config_issues,
        },
        200 if ready else 503,
    )


def health_ready(request: HttpRequest) -> JsonResponse:
    payload, status = _readiness_payload()
    return JsonResponse(payload, status=status)


def health(request: HttpRequest) -> JsonResponse:
    ready = health_ready(request)
    payload = json.loads(ready.content.decode("utf-8"))
    payload["status"] = "healthy" if payload.get("ok") else "degraded"
    return JsonResponse(payload, status=ready.status_code)


def metrics_payload(request: HttpRequest) -> HttpResponse:
    return HttpResponse(
        METRICS.render_prometheus(),
        content_type="text/plain; version=0.0.4; charset=utf-8",
        status=200,
    )
