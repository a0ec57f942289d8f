from __future__ import annotations

from typing import Any

import jwt
from cryptography import x509

from apps.core.config.env import RuntimeSettings, get_runtime_settings, validate_runtime_settings
from apps.core.contracts.errors import AuthorizationConfigError, TokenVerificationError

BEARER_SCHEME = "bearer"


def bearer_token(header: str | None) -> str | None:
    raw = str(header or "").strip()
    scheme, _, credentials = raw.partition(" ")
    if scheme.lower() == BEARER_SCHEME:
        raw = credentials.strip()
    return raw or None


def _load_verification_key(pem: str) -> Any:
    if "BEGIN CERTIFICATE" in pem:
        certificate = x509.load_pem_x509_certificate(pem.encode("utf-8"))
        return certificate.public_key()
    return pem


class TokenVerifier:
    """Checks signature, expiry and audience of a bearer token and returns its claims."""

    def __init__(
        self,
        public_key_pem: str,
        audience: str,
        algorithms: tuple[str, ...] = ("RS256",),
        issuer: str | None = None,
    ) -> None:
        if not public_key_pem:
            raise AuthorizationConfigError("AUTH0_PEM_KEY not set")
        if not audience:
            raise AuthorizationConfigError("AUTH0_AUDIENCE not set")
        try:
            self._key = _load_verification_key(public_key_pem)
        except ValueError as exc:
            raise AuthorizationConfigError(f"AUTH0_PEM_KEY is not a valid PEM value: {exc}") from exc
        self.audience = audience
        self.algorithms = list(algorithms)
        self.issuer = issuer or None

    def verify(self, token: str) -> dict[str, Any]:
        if not token:
            raise TokenVerificationError("empty token")
        try:
            claims = jwt.decode(
                token,
                self._key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"require": ["exp", "sub"]},
            )
        except jwt.PyJWTError as exc:
            raise TokenVerificationError(f"{type(exc).__name__}: {exc}") from exc
        except ValueError as exc:
            raise TokenVerificationError(f"unusable verification key: {exc}") from exc
        if not isinstance(claims, dict):
            raise TokenVerificationError("token payload is not an object")
        return claims


def token_verifier_from_settings(settings: RuntimeSettings | None = None) -> TokenVerifier:
    settings = settings or get_runtime_settings()
    issues = [issue for issue in validate_runtime_settings(settings) if "AUTH0" in issue or "JWT" in issue]
    if issues:
        raise AuthorizationConfigError("; ".join(issues))
    return TokenVerifier(
        settings.auth0_pem_key,
        settings.auth0_audience,
        settings.jwt_algorithms,
        settings.auth0_issuer or None,
    )
