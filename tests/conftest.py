from __future__ import annotations

import logging
import os
import sys
import time
from pathlib import Path

import django
import jwt
import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

REPO_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = REPO_ROOT / "src"

if str(SRC_ROOT) not in sys.path:
    sys.path.insert(0, str(SRC_ROOT))

os.environ.setdefault("HA_ALLOWED_HOSTS", "localhost,127.0.0.1,testserver")
os.environ.setdefault("DJANGO_SETTINGS_MODULE", "hoepel_api.settings")
django.setup()

from apps.core.config.env import DEFAULT_APP_METADATA_CLAIM  # noqa: E402
from apps.core.observability import METRICS  # noqa: E402
from apps.identity.tokens import TokenVerifier  # noqa: E402

AUDIENCE = "https://api.hoepel.app"
TENANT = "speelplein-west"


def _generate_rsa_pems() -> tuple[str, str]:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    private_pem = private_key.private_bytes(
        serialization.Encoding.PEM,
        serialization.PrivateFormat.PKCS8,
        serialization.NoEncryption(),
    ).decode("utf-8")
    public_pem = private_key.public_key().public_bytes(
        serialization.Encoding.PEM,
        serialization.PublicFormat.SubjectPublicKeyInfo,
    ).decode("utf-8")
    return private_pem, public_pem


@pytest.fixture(scope="session")
def rsa_keys() -> tuple[str, str]:
    return _generate_rsa_pems()


@pytest.fixture(scope="session")
def other_rsa_keys() -> tuple[str, str]:
    return _generate_rsa_pems()


def membership(tenant: str = TENANT, permissions: list[str] | None = None, roles: list[str] | None = None) -> dict:
    return {"name": tenant, "permissions": permissions or [], "roles": roles or []}


@pytest.fixture
def make_token(rsa_keys):
    private_pem, _ = rsa_keys

    def _make(
        sub: str = "auth0|coordinator",
        tenants: list[dict] | None = None,
        *,
        audience: str = AUDIENCE,
        expires_in: int = 3600,
        key: str | None = None,
        extra: dict | None = None,
    ) -> str:
        now = int(time.time())
        payload = {"sub": sub, "aud": audience, "iat": now, "exp": now + expires_in}
        if tenants is not None:
            payload[DEFAULT_APP_METADATA_CLAIM] = {"tenants": tenants}
        payload.update(extra or {})
        return jwt.encode(payload, key or private_pem, algorithm="RS256")

    return _make


@pytest.fixture
def verifier(rsa_keys) -> TokenVerifier:
    return TokenVerifier(rsa_keys[1], AUDIENCE)


@pytest.fixture
def auth_env(monkeypatch, rsa_keys) -> str:
    public_pem = rsa_keys[1]
    monkeypatch.setenv("AUTH0_PEM_KEY", public_pem)
    monkeypatch.setenv("AUTH0_AUDIENCE", AUDIENCE)
    for name in ("AUTH0_ISSUER", "HA_JWT_ALGORITHMS", "HA_APP_METADATA_CLAIM", "HA_TENANT_PARAM", "HA_ENV"):
        monkeypatch.delenv(name, raising=False)
    return public_pem


@pytest.fixture
def no_auth_env(monkeypatch) -> None:
    for name in ("AUTH0_PEM_KEY", "AUTH0_AUDIENCE", "AUTH0_ISSUER", "HA_JWT_ALGORITHMS", "HA_ENV"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def hoepel_logs(caplog, monkeypatch):
    # The project logger does not propagate outside tests.
    monkeypatch.setattr(logging.getLogger("hoepel"), "propagate", True)
    caplog.set_level(logging.INFO, logger="hoepel")
    return caplog


@pytest.fixture(autouse=True)
def _reset_metrics():
    METRICS.reset()
    yield
