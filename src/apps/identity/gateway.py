"""API Gateway custom authorizers built on the route policy engine."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from apps.core.config.env import get_runtime_settings
from apps.core.contracts.policy import ANONYMOUS_SUBJECT, AuthorizationDecision, RequestDescriptor
from apps.core.services.permission_catalog import parse_permission
from apps.core.services.policy_engine import PolicyEngine
from apps.identity.services import authorize_request
from apps.identity.tokens import TokenVerifier, bearer_token

LOGGER = logging.getLogger("hoepel.identity")

ALLOW = "Allow"
DENY = "Deny"


def build_iam_policy(principal_id: str, effect: str, resource: str) -> dict[str, Any]:
    return {
        "principalId": principal_id,
        "policyDocument": {
            "Version": "2012-10-17",
            "Statement": [{"Action": "execute-api:Invoke", "Effect": effect, "Resource": resource}],
        },
    }


def _header(headers: Mapping[str, Any] | None, name: str) -> str | None:
    for key, value in (headers or {}).items():
        if str(key).lower() == name.lower():
            return str(value)
    return None


def _event_descriptor(event: Mapping[str, Any]) -> RequestDescriptor:
    param = get_runtime_settings().tenant_param
    query = event.get("queryStringParameters") or {}
    path_params = event.get("pathParameters") or {}
    tenant = str(path_params.get(param) or query.get(param) or "").strip()
    return RequestDescriptor(
        path=str(event.get("path") or ""),
        http_method=str(event.get("httpMethod") or "").upper(),
        tenant=tenant or None,
    )


def _authorize_event(
    event: Mapping[str, Any],
    descriptor: RequestDescriptor,
    engine: PolicyEngine | None,
    verifier: TokenVerifier | None,
) -> dict[str, Any]:
    token = bearer_token(_header(event.get("headers"), "Authorization"))
    decision = authorize_request(descriptor, token, verifier=verifier, engine=engine)
    LOGGER.info(
        "gateway_decision method=%s path=%s tenant=%s allowed=%s",
        descriptor.http_method,
        descriptor.path,
        descriptor.tenant or "-",
        decision.allowed,
    )
    return policy_for_decision(decision, str(event.get("methodArn") or ""))


def policy_for_decision(decision: AuthorizationDecision, method_arn: str) -> dict[str, Any]:
    if decision.allowed:
        return build_iam_policy(decision.subject_id, ALLOW, method_arn)
    return build_iam_policy(ANONYMOUS_SUBJECT, DENY, method_arn)


def lambda_authorizer(
    event: Mapping[str, Any],
    context: Any = None,
    *,
    engine: PolicyEngine | None = None,
    verifier: TokenVerifier | None = None,
) -> dict[str, Any]:
    """REQUEST-type authorizer checked against the full route table.

    Missing AUTH0 configuration raises ``AuthorizationConfigError`` instead of
    producing a policy, so a broken deployment never answers Allow or Deny.
    """
    return _authorize_event(event, _event_descriptor(event), engine, verifier)


def create_permission_authorizer(
    permission_name: str,
    *,
    verifier: TokenVerifier | None = None,
) -> Callable[..., dict[str, Any]]:
    """Authorizer for a single function that always needs ``permission_name``."""
    permission = parse_permission(permission_name)

    def authorizer(event: Mapping[str, Any], context: Any = None) -> dict[str, Any]:
        descriptor = _event_descriptor(event)
        engine = PolicyEngine.for_permission(permission, descriptor)
        return _authorize_event(event, descriptor, engine, verifier)

    authorizer.__name__ = f"authorizer_{permission.category}_{permission.action}".replace("-", "_")
    return authorizer
