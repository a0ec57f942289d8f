from __future__ import annotations

import pytest
from django.http import JsonResponse

from apps.core.contracts.errors import InvalidPermissionName
from apps.core.security import require_permission, require_route_permission
from conftest import TENANT, membership


@require_route_permission
def crew_detail(request, id, tenant=None):
    return JsonResponse({"id": id, "subject": request.auth_subject})


@require_permission("template:read")
def templates(request, tenant):
    return JsonResponse({"tenant": tenant, "subject": request.auth_subject})


def _bearer(token: str) -> dict:
    return {"HTTP_AUTHORIZATION": f"Bearer {token}"}


def test_route_permission_allows_with_tenant_from_query(rf, auth_env, make_token) -> None:
    token = make_token(sub="auth0|coordinator", tenants=[membership(roles=["coordinator"])])
    request = rf.put(f"/crew/42?tenant={TENANT}", **_bearer(token))
    response = crew_detail(request, id="42")
    assert response.status_code == 200
    assert request.auth_subject == "auth0|coordinator"


def test_route_permission_reads_tenant_view_kwarg(rf, auth_env, make_token) -> None:
    token = make_token(tenants=[membership(roles=["coordinator"])])
    response = crew_detail(rf.put("/crew/42", **_bearer(token)), id="42", tenant=TENANT)
    assert response.status_code == 200


def test_route_permission_denies_with_forbidden(rf, auth_env, make_token) -> None:
    token = make_token(tenants=[membership(roles=["viewer"])])
    request = rf.put(f"/crew/42?tenant={TENANT}", **_bearer(token))
    response = crew_detail(request, id="42")
    assert response.status_code == 403
    assert not hasattr(request, "auth_subject")


def test_route_permission_without_valid_token_is_unauthorized(rf, auth_env) -> None:
    response = crew_detail(rf.put(f"/crew/42?tenant={TENANT}", **_bearer("not-a-jwt")), id="42")
    assert response.status_code == 401


def test_fixed_permission_decorator(rf, auth_env, make_token) -> None:
    coordinator = make_token(sub="auth0|coordinator", tenants=[membership(roles=["coordinator"])])
    viewer = make_token(sub="auth0|viewer", tenants=[membership(roles=["viewer"])])

    allowed = templates(rf.get("/templates", **_bearer(coordinator)), tenant=TENANT)
    assert allowed.status_code == 200
    assert templates(rf.get("/templates", **_bearer(viewer)), tenant=TENANT).status_code == 403


def test_fixed_permission_decorator_validates_name_when_applied() -> None:
    with pytest.raises(InvalidPermissionName):
        require_permission("template:burn")


def test_route_permission_under_script_prefix(rf, auth_env, make_token) -> None:
    token = make_token(tenants=[membership(roles=["coordinator"])])
    request = rf.put(f"/crew/42?tenant={TENANT}", SCRIPT_NAME="/hoepel", **_bearer(token))
    assert crew_detail(request, id="42").status_code == 200
