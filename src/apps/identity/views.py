from __future__ import annotations

from django.http import HttpRequest, JsonResponse
from django.views.decorators.http import require_http_methods

from apps.core.contracts.identity import forwarded_request_descriptor
from apps.core.responses import api_error, api_json, parse_json_body
from apps.core.security.rbac import decision_response
from apps.core.services.permission_catalog import all_permissions_by_category, all_roles_by_level
from apps.identity.services import authorize_request
from apps.identity.tokens import bearer_token

SUBJECT_HEADER = "X-Auth-Subject"


@require_http_methods(["POST"])
def authorize_endpoint(request: HttpRequest) -> JsonResponse:
    """Decision endpoint for gateways that forward the request they want checked."""
    try:
        body = parse_json_body(request)
    except ValueError:
        return api_error(request, code="invalid_request", message="Body must be a JSON object.", status=400)

    descriptor = forwarded_request_descriptor(request, body)
    token = bearer_token(request.headers.get("Authorization"))
    decision = authorize_request(descriptor, token)
    denied = decision_response(request, decision)
    if denied is not None:
        return denied

    response = api_json({"allow": True, "subject_id": decision.subject_id})
    response[SUBJECT_HEADER] = decision.subject_id
    return response


@require_http_methods(["GET"])
def permissions_catalog_endpoint(request: HttpRequest) -> JsonResponse:
    return api_json(
        {
            category: [permission.to_dict() for permission in permissions]
            for category, permissions in all_permissions_by_category().items()
        }
    )


@require_http_methods(["GET"])
def roles_catalog_endpoint(request: HttpRequest) -> JsonResponse:
    return api_json(
        [
            {"level": level, "roles": [role.to_dict() for role in roles]}
            for level, roles in all_roles_by_level().items()
        ]
    )
