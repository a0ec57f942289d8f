from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from apps.core.config.env import get_runtime_settings
from apps.core.contracts.errors import InvalidPermissionName, InvalidRoleName, TokenVerificationError
from apps.core.contracts.policy import (
    ANONYMOUS_SUBJECT,
    AuthorizationDecision,
    RequestDescriptor,
    ResolvedClaims,
    VerificationFailure,
)
from apps.core.services.permission_catalog import parse_permission, parse_role
from apps.core.services.policy_engine import PolicyEngine
from apps.identity.tokens import TokenVerifier, token_verifier_from_settings

LOGGER = logging.getLogger("hoepel.identity")


def _string_list(value: Any) -> list[str] | None:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        return None
    return value


def extract_tenant_claims(
    payload: Mapping[str, Any],
    tenant: str,
    *,
    metadata_claim: str,
) -> ResolvedClaims | VerificationFailure:
    """Narrow a verified token payload to the caller's grants for one tenant.

    Anything missing or malformed fails closed. A tenant the caller is not a
    member of is reported the same way as a bad token.
    """
    subject = payload.get("sub")
    if not isinstance(subject, str) or not subject.strip():
        return VerificationFailure("token has no subject")
    if subject == ANONYMOUS_SUBJECT:
        return VerificationFailure("token subject collides with the anonymous sentinel")

    metadata = payload.get(metadata_claim)
    if not isinstance(metadata, Mapping):
        return VerificationFailure(f"token has no {metadata_claim} claim")

    memberships = metadata.get("tenants")
    if not isinstance(memberships, list):
        return VerificationFailure("app metadata has no tenants list")

    membership = next(
        (item for item in memberships if isinstance(item, Mapping) and item.get("name") == tenant),
        None,
    )
    if membership is None:
        return VerificationFailure(f"subject is not a member of tenant {tenant}")

    permission_names = _string_list(membership.get("permissions"))
    role_names = _string_list(membership.get("roles"))
    if permission_names is None or role_names is None:
        return VerificationFailure("tenant permissions and roles must be lists of strings")

    try:
        permissions = tuple(dict.fromkeys(parse_permission(name) for name in permission_names))
        roles = tuple(dict.fromkeys(parse_role(name) for name in role_names))
    except (InvalidPermissionName, InvalidRoleName) as exc:
        return VerificationFailure(str(exc))

    return ResolvedClaims(subject_id=subject, tenant=tenant, owned_permissions=permissions, owned_roles=roles)


def resolve_claims(
    token: str | None,
    tenant: str,
    verifier: TokenVerifier,
    *,
    metadata_claim: str | None = None,
) -> ResolvedClaims | VerificationFailure:
    if not token:
        return VerificationFailure("no bearer token")
    try:
        payload = verifier.verify(token)
    except TokenVerificationError as exc:
        LOGGER.info("token_rejected tenant=%s error=%s", tenant, exc)
        return VerificationFailure(str(exc))

    claim = metadata_claim or get_runtime_settings().app_metadata_claim
    return extract_tenant_claims(payload, tenant, metadata_claim=claim)


def authorize_request(
    descriptor: RequestDescriptor,
    token: str | None,
    *,
    verifier: TokenVerifier | None = None,
    engine: PolicyEngine | None = None,
) -> AuthorizationDecision:
    engine = engine or PolicyEngine()
    if not descriptor.tenant:
        return engine.authorize(descriptor, VerificationFailure("tenant missing"), token)

    claims = resolve_claims(token, descriptor.tenant, verifier or token_verifier_from_settings())
    return engine.authorize(descriptor, claims, token)
