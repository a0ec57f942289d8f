from __future__ import annotations

import json

from django.test import Client

from apps.core.services.permission_registry import all_routes
from conftest import TENANT, membership


def _authorize(client: Client, token: str | None, **body) -> object:
    headers = {"HTTP_AUTHORIZATION": f"Bearer {token}"} if token else {}
    return client.post("/api/v1/authorize", data=json.dumps(body), content_type="application/json", **headers)


def test_authorize_allows_and_names_subject(client: Client, auth_env, make_token) -> None:
    token = make_token(sub="auth0|coordinator", tenants=[membership(roles=["coordinator"])])
    response = _authorize(client, token, path="/crew/42", method="PUT", tenant=TENANT)
    assert response.status_code == 200
    assert response.json() == {"allow": True, "subject_id": "auth0|coordinator"}
    assert response["X-Auth-Subject"] == "auth0|coordinator"
    assert response["X-Request-ID"]


def test_authorize_without_token_is_unauthorized(client: Client, auth_env) -> None:
    response = _authorize(client, None, path="/crew/42", method="PUT", tenant=TENANT)
    assert response.status_code == 401
    assert response.json()["code"] == "unauthorized"


def test_authorize_with_expired_token_is_unauthorized(client: Client, auth_env, make_token) -> None:
    token = make_token(tenants=[membership(roles=["admin"])], expires_in=-60)
    response = _authorize(client, token, path="/crew/42", method="PUT", tenant=TENANT)
    assert response.status_code == 401


def test_denials_look_the_same_to_the_caller(client: Client, auth_env, make_token) -> None:
    token = make_token(sub="auth0|viewer", tenants=[membership(roles=["viewer"])])
    insufficient = _authorize(client, token, path="/crew/42", method="PUT", tenant=TENANT)
    unknown = _authorize(client, token, path="/nowhere/at/all", method="GET", tenant=TENANT)
    no_tenant = _authorize(client, token, path="/crew/42", method="PUT")

    bodies = []
    for response in (insufficient, unknown, no_tenant):
        assert response.status_code == 403
        payload = response.json()
        payload.pop("request_id")
        bodies.append(payload)
    assert bodies[0] == bodies[1] == bodies[2]
    assert bodies[0]["code"] == "forbidden"
    assert "reason" not in bodies[0]


def test_authorize_reads_forwarded_headers(client: Client, auth_env, make_token) -> None:
    token = make_token(tenants=[membership(roles=["coordinator"])])
    response = client.post(
        "/api/v1/authorize",
        data="",
        content_type="application/json",
        HTTP_AUTHORIZATION=f"Bearer {token}",
        HTTP_X_ORIGINAL_URI=f"/crew/42?tenant={TENANT}",
        HTTP_X_ORIGINAL_METHOD="put",
    )
    assert response.status_code == 200


def test_authorize_reads_tenant_from_route_path(client: Client, auth_env, make_token) -> None:
    token = make_token(sub="auth0|admin", tenants=[membership(roles=["admin"])])
    response = _authorize(client, token, path=f"/auth/user/u1/{TENANT}", method="PUT")
    assert response.status_code == 200
    assert response.json()["subject_id"] == "auth0|admin"

    forwarded = client.post(
        "/api/v1/authorize",
        data="",
        content_type="application/json",
        HTTP_AUTHORIZATION=f"Bearer {token}",
        HTTP_X_ORIGINAL_URI=f"/auth/user/u1/{TENANT}",
        HTTP_X_ORIGINAL_METHOD="GET",
    )
    assert forwarded.status_code == 200


def test_authorize_rejects_non_object_body(client: Client, auth_env) -> None:
    response = client.post("/api/v1/authorize", data="[1, 2]", content_type="application/json")
    assert response.status_code == 400
    assert response.json()["code"] == "invalid_request"

    response = client.post("/api/v1/authorize", data="{broken", content_type="application/json")
    assert response.status_code == 400


def test_authorize_only_accepts_post(client: Client) -> None:
    assert client.get("/api/v1/authorize").status_code == 405


def test_missing_configuration_is_an_internal_error(client: Client, no_auth_env, hoepel_logs) -> None:
    response = _authorize(client, "whatever", path="/crew", method="GET", tenant=TENANT)
    assert response.status_code == 500
    assert response.json()["code"] == "internal_error"
    assert any("request_failed" in record.getMessage() for record in hoepel_logs.records)


def test_permissions_catalog(client: Client) -> None:
    response = client.get("/api/v1/catalog/permissions")
    assert response.status_code == 200
    payload = response.json()
    assert [item["id"] for item in payload["crew"]] == ["crew:retrieve", "crew:create", "crew:update", "crew:delete"]


def test_roles_catalog(client: Client) -> None:
    payload = client.get("/api/v1/catalog/roles").json()
    assert [group["level"] for group in payload] == ["basic", "advanced", "admin"]
    advanced = {role["id"] for role in payload[1]["roles"]}
    assert advanced == {"coordinator", "treasurer"}


def test_health_endpoints(client: Client, auth_env) -> None:
    assert client.get("/api/v1/health/live").json()["status"] == "live"

    ready = client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["route_count"] == len(all_routes())
    assert client.get("/api/v1/health").json()["status"] == "healthy"


def test_readiness_reports_configuration_issues(client: Client, no_auth_env) -> None:
    ready = client.get("/api/v1/health/ready")
    assert ready.status_code == 503
    assert "AUTH0_PEM_KEY not set" in ready.json()["config_issues"]
    assert client.get("/api/v1/health").json()["status"] == "degraded"


def test_metrics_count_requests_and_decisions(client: Client, auth_env) -> None:
    _authorize(client, None, path="/crew/42", method="PUT")
    body = client.get("/api/v1/metrics").content.decode("utf-8")
    assert 'ha_authz_decision_total{outcome="deny",reason="tenant_missing"} 1' in body
    assert 'ha_http_request_total{path="/api/v1/authorize",method="POST",status="403"} 1' in body
