"""Security module with route authorization decorators."""

from apps.core.security.rbac import decision_response, require_permission, require_route_permission

__all__ = ["require_route_permission", "require_permission", "decision_response"]
