"""Route authorization decorators for Django views."""

from __future__ import annotations

import functools
from typing import Any, Callable

from django.http import HttpRequest, HttpResponse

from apps.core.contracts.identity import resolve_request_descriptor
from apps.core.contracts.policy import REASON_VERIFICATION_FAILED, AuthorizationDecision
from apps.core.responses import forbidden, unauthorized
from apps.core.services.permission_catalog import parse_permission
from apps.core.services.policy_engine import PolicyEngine
from apps.identity.services import authorize_request
from apps.identity.tokens import bearer_token


def decision_response(request: HttpRequest, decision: AuthorizationDecision) -> HttpResponse | None:
    """None when allowed; otherwise the 401/403 response for the caller."""
    if decision.allowed:
        request.auth_subject = decision.subject_id
        return None
    if decision.reason == REASON_VERIFICATION_FAILED:
        return unauthorized(request)
    return forbidden(request)


def require_route_permission(view_func: Callable) -> Callable:
    """
    Authorize the request against the route table.

    Usage:
        @require_route_permission
        def child_detail(request, tenant, id):
            ...
    """

    @functools.wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
        descriptor = resolve_request_descriptor(request, kwargs)
        token = bearer_token(request.headers.get("Authorization"))
        denied = decision_response(request, authorize_request(descriptor, token))
        if denied is not None:
            return denied
        return view_func(request, *args, **kwargs)

    return wrapper


def require_permission(permission_name: str):
    """
    Authorize the request against one fixed permission, whatever its path.

    The permission name is parsed when the decorator is applied, so a typo
    fails at import time.

    Usage:
        @require_permission("template:read")
        def templates(request, tenant):
            ...
    """
    permission = parse_permission(permission_name)

    def decorator(view_func: Callable) -> Callable:
        @functools.wraps(view_func)
        def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> HttpResponse:
            descriptor = resolve_request_descriptor(request, kwargs)
            engine = PolicyEngine.for_permission(permission, descriptor)
            token = bearer_token(request.headers.get("Authorization"))
            denied = decision_response(request, authorize_request(descriptor, token, engine=engine))
            if denied is not None:
                return denied
            return view_func(request, *args, **kwargs)

        return wrapper

    return decorator
