from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterable

from apps.core.contracts.policy import (
    ANONYMOUS_SUBJECT,
    REASON_INSUFFICIENT_PERMISSION,
    REASON_NO_MATCHING_ROUTE,
    REASON_TENANT_MISSING,
    REASON_VERIFICATION_FAILED,
    AuthorizationDecision,
    RequestDescriptor,
    ResolvedClaims,
    Route,
    VerificationFailure,
)
from apps.core.observability import METRICS, MetricsRegistry
from apps.core.services.path_matcher import matches
from apps.core.services.permission_catalog import Permission, Role
from apps.core.services.permission_registry import all_routes
from apps.core.services.permission_resolver import has_permission, implied_permission_ids

AUDIT_LOGGER = logging.getLogger("hoepel.audit")


def token_reference(raw_token: str | None) -> str:
    """Opaque handle for correlating audit lines with a token without logging the token."""
    if not raw_token:
        return "none"
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()[:12]


def _ids(items: Iterable[Permission] | Iterable[Role]) -> str:
    return ",".join(item.id for item in items) or "-"


class PolicyEngine:
    def __init__(self, routes: tuple[Route, ...] | None = None, metrics: MetricsRegistry | None = None) -> None:
        self._routes = routes
        self._metrics = metrics if metrics is not None else METRICS

    @classmethod
    def for_permission(
        cls,
        permission: Permission,
        descriptor: RequestDescriptor,
        metrics: MetricsRegistry | None = None,
    ) -> PolicyEngine:
        """Engine whose only route is the request's own path guarded by ``permission``."""
        path = descriptor.path or "/"
        return cls(routes=(Route(path=path, method=descriptor.http_method, permission_needed=permission),), metrics=metrics)

    @property
    def routes(self) -> tuple[Route, ...]:
        return self._routes if self._routes is not None else all_routes()

    def evaluate(
        self,
        path: str,
        method: str,
        owned_permissions: Iterable[Permission],
        owned_roles: Iterable[Role],
        raw_token_for_audit: str | None = None,
        *,
        subject_id: str = ANONYMOUS_SUBJECT,
    ) -> AuthorizationDecision:
        owned_permissions = tuple(owned_permissions)
        owned_roles = tuple(owned_roles)

        for item in self.routes:
            if item.method != method or not matches(item.path, path):
                continue

            # First structural match decides; the table never holds two routes of the same shape.
            if has_permission(item.permission_needed, owned_permissions, owned_roles):
                return self._record(AuthorizationDecision.allow(subject_id))

            implied = ",".join(sorted(implied_permission_ids(owned_roles))) or "-"
            diagnostics = (
                f"tried {method} {path}",
                f"needs permission {item.permission_needed.id}",
                f"has permissions {_ids(owned_permissions)}",
                f"has roles {_ids(owned_roles)}",
                f"has implied permissions {implied}",
            )
            AUDIT_LOGGER.info(
                "authorization_denied reason=%s method=%s path=%s route=%s required=%s "
                "permissions=%s roles=%s implied=%s token_ref=%s",
                REASON_INSUFFICIENT_PERMISSION,
                method,
                path,
                item.path,
                item.permission_needed.id,
                _ids(owned_permissions),
                _ids(owned_roles),
                implied,
                token_reference(raw_token_for_audit),
            )
            return self._record(AuthorizationDecision.deny(REASON_INSUFFICIENT_PERMISSION, diagnostics))

        AUDIT_LOGGER.info(
            "authorization_denied reason=%s method=%s path=%s known_routes=%s token_ref=%s",
            REASON_NO_MATCHING_ROUTE,
            method,
            path,
            len(self.routes),
            token_reference(raw_token_for_audit),
        )
        return self._record(
            AuthorizationDecision.deny(REASON_NO_MATCHING_ROUTE, (f"no route matches {method} {path}",))
        )

    def authorize(
        self,
        descriptor: RequestDescriptor,
        claims: ResolvedClaims | VerificationFailure,
        raw_token_for_audit: str | None = None,
    ) -> AuthorizationDecision:
        if not descriptor.tenant:
            AUDIT_LOGGER.info(
                "authorization_denied reason=%s method=%s path=%s token_ref=%s",
                REASON_TENANT_MISSING,
                descriptor.http_method,
                descriptor.path,
                token_reference(raw_token_for_audit),
            )
            return self._record(AuthorizationDecision.deny(REASON_TENANT_MISSING, ("no tenant in request",)))

        if isinstance(claims, VerificationFailure) or claims.tenant != descriptor.tenant:
            detail = claims.reason if isinstance(claims, VerificationFailure) else "claims scoped to another tenant"
            AUDIT_LOGGER.info(
                "authorization_denied reason=%s method=%s path=%s tenant=%s detail=%s token_ref=%s",
                REASON_VERIFICATION_FAILED,
                descriptor.http_method,
                descriptor.path,
                descriptor.tenant,
                detail,
                token_reference(raw_token_for_audit),
            )
            return self._record(AuthorizationDecision.deny(REASON_VERIFICATION_FAILED, (detail,)))

        return self.evaluate(
            descriptor.path,
            descriptor.http_method,
            claims.owned_permissions,
            claims.owned_roles,
            raw_token_for_audit,
            subject_id=claims.subject_id,
        )

    def _record(self, decision: AuthorizationDecision) -> AuthorizationDecision:
        self._metrics.observe_decision(decision.allowed, decision.reason)
        return decision


def check_permission(
    path: str,
    method: str,
    owned_permissions: Iterable[Permission],
    owned_roles: Iterable[Role],
    raw_token_for_audit: str | None = None,
    *,
    routes: tuple[Route, ...] | None = None,
) -> bool:
    return PolicyEngine(routes).evaluate(path, method, owned_permissions, owned_roles, raw_token_for_audit).allowed
