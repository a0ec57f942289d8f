from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from apps.core.services.permission_catalog import Permission, Role

ANONYMOUS_SUBJECT = "anonymous"
HTTP_METHODS: tuple[str, ...] = ("GET", "POST", "PUT", "DELETE")

REASON_ALLOWED = "allowed"
REASON_VERIFICATION_FAILED = "verification_failed"
REASON_TENANT_MISSING = "tenant_missing"
REASON_NO_MATCHING_ROUTE = "no_matching_route"
REASON_INSUFFICIENT_PERMISSION = "insufficient_permission"


@dataclass(frozen=True)
class Route:
    path: str
    method: str
    permission_needed: Permission


@dataclass(frozen=True)
class RequestDescriptor:
    path: str
    http_method: str
    tenant: str | None = None


@dataclass(frozen=True)
class ResolvedClaims:
    subject_id: str
    tenant: str
    owned_permissions: tuple[Permission, ...] = ()
    owned_roles: tuple[Role, ...] = ()

    @property
    def owned_permission_ids(self) -> tuple[str, ...]:
        return tuple(permission.id for permission in self.owned_permissions)

    @property
    def owned_role_ids(self) -> tuple[str, ...]:
        return tuple(role.id for role in self.owned_roles)


@dataclass(frozen=True)
class VerificationFailure:
    reason: str


@dataclass(frozen=True)
class AuthorizationDecision:
    allowed: bool
    subject_id: str
    reason: str
    diagnostics: tuple[str, ...] = field(default=(), compare=False)

    @classmethod
    def allow(cls, subject_id: str) -> AuthorizationDecision:
        return cls(True, subject_id, REASON_ALLOWED)

    @classmethod
    def deny(cls, reason: str, diagnostics: tuple[str, ...] = ()) -> AuthorizationDecision:
        return cls(False, ANONYMOUS_SUBJECT, reason, diagnostics)
