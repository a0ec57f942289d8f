from __future__ import annotations

from dataclasses import asdict, dataclass


class AuthorizationConfigError(Exception):
    """Raised while building the catalog or route table; must stop the process from serving."""


class InvalidPermissionName(AuthorizationConfigError, ValueError):
    def __init__(self, name: object) -> None:
        super().__init__(f"Invalid permission name: {name!r}")
        self.name = name


class InvalidRoleName(AuthorizationConfigError, ValueError):
    def __init__(self, name: object) -> None:
        super().__init__(f"Invalid role name: {name!r}")
        self.name = name


class InvalidRouteDefinition(AuthorizationConfigError, ValueError):
    pass


class AmbiguousRoute(AuthorizationConfigError):
    def __init__(self, method: str, path: str, previous_path: str) -> None:
        super().__init__(f"Route {method} {path} collides with {method} {previous_path}")
        self.method = method
        self.path = path
        self.previous_path = previous_path


class TokenVerificationError(Exception):
    pass


@dataclass(frozen=True)
class ApiErrorPayload:
    code: str
    message: str
    request_id: str
    details: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, object]:
        return asdict(self)
