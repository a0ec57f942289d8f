from __future__ import annotations

import logging
import re
import time
import uuid
from collections.abc import Callable

from django.http import HttpRequest, HttpResponse

from apps.core.observability import METRICS

LOGGER = logging.getLogger("hoepel.rebuild")

REQUEST_ID_HEADER = "X-Request-ID"
# Caller ids are echoed into headers and log lines.
REQUEST_ID_PATTERN = re.compile(r"[A-Za-z0-9._:-]{1,128}")
UNMATCHED_PATH = "unmatched"


def incoming_request_id(request: HttpRequest) -> str:
    candidate = str(request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if REQUEST_ID_PATTERN.fullmatch(candidate):
        return candidate
    return uuid.uuid4().hex


def metric_path(request: HttpRequest) -> str:
    """URL pattern of the view that served the request, so path values never become labels."""
    match = getattr(request, "resolver_match", None)
    if match is None or not match.route:
        return UNMATCHED_PATH
    return "/" + match.route.lstrip("^").rstrip("$")


class RequestIdMiddleware:
    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        request.request_id = incoming_request_id(request)
        response = self.get_response(request)
        response[REQUEST_ID_HEADER] = request.request_id
        return response


class StructuredRequestLogMiddleware:
    """One log line and one metrics observation per request, with the authorized subject when known."""

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        start = time.perf_counter()
        response = self.get_response(request)
        elapsed_ms = (time.perf_counter() - start) * 1000
        method = (request.method or "").upper()
        METRICS.observe_http(metric_path(request), method, response.status_code, elapsed_ms)

        level = logging.WARNING if response.status_code >= 500 else logging.INFO
        LOGGER.log(
            level,
            "request_completed method=%s path=%s status=%s elapsed_ms=%.2f request_id=%s subject=%s",
            method,
            request.path_info,
            response.status_code,
            elapsed_ms,
            getattr(request, "request_id", "-"),
            getattr(request, "auth_subject", "-"),
        )
        return response
