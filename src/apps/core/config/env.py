from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_SECRET_KEY = "dev-not-secure-change-me"
DEFAULT_APP_METADATA_CLAIM = "https://inschrijven.cloud/app_metadata"
ASYMMETRIC_ALGORITHMS = {"RS256", "RS384", "RS512", "ES256", "ES384", "ES512", "PS256", "PS384", "PS512"}


@dataclass(frozen=True)
class RuntimeSettings:
    env: str
    debug: bool
    secret_key: str
    allowed_hosts: tuple[str, ...]
    auth0_pem_key: str
    auth0_audience: str
    auth0_issuer: str
    jwt_algorithms: tuple[str, ...]
    app_metadata_claim: str
    tenant_param: str


TRUE_VALUES = {"1", "true", "yes", "y", "on"}


def _env(name: str, default: str = "") -> str:
    return str(os.getenv(name, default)).strip()


def _env_bool(name: str, default: bool) -> bool:
    raw = _env(name, "1" if default else "0").lower()
    return raw in TRUE_VALUES


def _env_list(name: str, default: str) -> tuple[str, ...]:
    return tuple(item.strip() for item in _env(name, default).split(",") if item.strip())


def get_runtime_settings() -> RuntimeSettings:
    env = _env("HA_ENV", "dev")

    return RuntimeSettings(
        env=env,
        debug=_env_bool("HA_DEBUG", env != "prod"),
        secret_key=_env("HA_SECRET_KEY", DEFAULT_SECRET_KEY),
        allowed_hosts=_env_list("HA_ALLOWED_HOSTS", "localhost,127.0.0.1"),
        # PEM values often arrive through env files with escaped newlines.
        auth0_pem_key=_env("AUTH0_PEM_KEY", "").replace("\\n", "\n"),
        auth0_audience=_env("AUTH0_AUDIENCE", ""),
        auth0_issuer=_env("AUTH0_ISSUER", ""),
        jwt_algorithms=tuple(item.upper() for item in _env_list("HA_JWT_ALGORITHMS", "RS256")),
        app_metadata_claim=_env("HA_APP_METADATA_CLAIM", DEFAULT_APP_METADATA_CLAIM),
        tenant_param=_env("HA_TENANT_PARAM", "tenant") or "tenant",
    )


def validate_runtime_settings(settings: RuntimeSettings) -> list[str]:
    issues: list[str] = []
    if settings.env == "prod" and (not settings.secret_key or settings.secret_key == DEFAULT_SECRET_KEY):
        issues.append("HA_SECRET_KEY must be set to a non-default value in prod")

    if not settings.auth0_pem_key:
        issues.append("AUTH0_PEM_KEY not set")
    if not settings.auth0_audience:
        issues.append("AUTH0_AUDIENCE not set")

    if not settings.jwt_algorithms:
        issues.append("HA_JWT_ALGORITHMS must name at least one algorithm")
    unsupported = [algorithm for algorithm in settings.jwt_algorithms if algorithm not in ASYMMETRIC_ALGORITHMS]
    if unsupported:
        issues.append(f"HA_JWT_ALGORITHMS contains non-asymmetric algorithms: {', '.join(unsupported)}")

    if not settings.app_metadata_claim:
        issues.append("HA_APP_METADATA_CLAIM must not be empty")

    return issues
