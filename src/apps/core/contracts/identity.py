from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import parse_qs, urlsplit

from django.http import HttpRequest

from apps.core.config.env import get_runtime_settings
from apps.core.contracts.policy import RequestDescriptor
from apps.core.services.path_matcher import extract_params
from apps.core.services.permission_registry import find_route

ORIGINAL_URI_HEADER = "X-Original-URI"
ORIGINAL_METHOD_HEADER = "X-Original-Method"


def request_tenant(request: HttpRequest, view_kwargs: Mapping[str, object] | None = None) -> str | None:
    """Tenant from the ``tenant`` path parameter, falling back to the query string."""
    param = get_runtime_settings().tenant_param
    from_path = (view_kwargs or {}).get(param)
    if isinstance(from_path, str) and from_path.strip():
        return from_path.strip()
    from_query = str(request.GET.get(param, "")).strip()
    return from_query or None


def resolve_request_descriptor(
    request: HttpRequest,
    view_kwargs: Mapping[str, object] | None = None,
) -> RequestDescriptor:
    return RequestDescriptor(
        path=request.path_info,
        http_method=str(request.method or "").upper(),
        tenant=request_tenant(request, view_kwargs),
    )


def _path_tenant(path: str, method: str, param: str) -> str:
    found = find_route(method, path)
    if found is None:
        return ""
    return (extract_params(found.path, path) or {}).get(param, "")


def forwarded_request_descriptor(request: HttpRequest, body: Mapping[str, object]) -> RequestDescriptor:
    """Descriptor for a request another gateway is asking about (JSON body or nginx-style headers).

    The tenant comes from the body, then the forwarded query string, then a
    ``:tenant`` segment of the route the forwarded path matches.
    """
    param = get_runtime_settings().tenant_param
    raw_uri = str(body.get("path") or request.headers.get(ORIGINAL_URI_HEADER, "")).strip()
    method = str(body.get("method") or request.headers.get(ORIGINAL_METHOD_HEADER, "")).strip().upper()

    parts = urlsplit(raw_uri)
    tenant = body.get("tenant")
    if not isinstance(tenant, str) or not tenant.strip():
        tenant = next(iter(parse_qs(parts.query).get(param, [])), "")
    if not tenant.strip():
        tenant = _path_tenant(parts.path, method, param)

    return RequestDescriptor(path=parts.path, http_method=method, tenant=tenant.strip() or None)
