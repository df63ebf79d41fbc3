"""Unified error hierarchy for Northstar.

All domain errors inherit from NorthstarError. Each carries a stable
``code`` that the gateway copies into the JSON error body.

Permission denial inside the RBAC core is a return value, not an
exception. AuthorizationError is raised only at the request boundary.
"""

from __future__ import annotations


class NorthstarError(Exception):
    """Base error for all Northstar exceptions."""

    def __init__(self, message: str, code: str = "NORTHSTAR_ERROR") -> None:
        self.code = code
        super().__init__(message)


# -- Store / tree errors --


class NotFoundError(NorthstarError):
    """Requested resource not found."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        self.resource_type = resource_type
        self.resource_id = resource_id
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            code="NOT_FOUND",
        )


class MalformedTreeError(NorthstarError):
    """Organization parent chain contains a cycle, a dangling parent, or exceeds the depth cap."""

    def __init__(self, org_id: str, reason: str) -> None:
        self.org_id = org_id
        self.reason = reason
        super().__init__(
            f"Malformed organization tree at {org_id}: {reason}",
            code="MALFORMED_TREE",
        )


class ServiceUnavailableError(NorthstarError):
    """A backing service (database, store) is temporarily unavailable."""

    def __init__(self, service: str, message: str = "") -> None:
        self.service = service
        super().__init__(
            message or f"Service {service} is unavailable",
            code="SERVICE_UNAVAILABLE",
        )


# -- Auth errors --


class AuthenticationError(NorthstarError):
    """Authentication failed (unknown user, invalid or expired token)."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, code="AUTH_FAILED")


class AuthorizationError(NorthstarError):
    """Caller is not permitted to perform an action.

    The relationship is kept on the exception for audit logging; the
    default message does not include it.
    """

    def __init__(self, action: str = "", relationship: str | None = None) -> None:
        msg = f"Permission denied: {action}" if action else "Permission denied"
        self.action = action
        self.relationship = relationship
        super().__init__(msg, code="AUTH_DENIED")


class InvalidActionError(NorthstarError):
    """An action tag outside the known action enumeration."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(f"Unknown action: {action!r}", code="INVALID_ACTION")


# -- Input errors --


class ValidationError(NorthstarError):
    """Input validation failed."""

    def __init__(self, message: str, field: str = "") -> None:
        self.field = field
        super().__init__(message, code="VALIDATION")


__all__ = [
    "AuthenticationError",
    "AuthorizationError",
    "InvalidActionError",
    "MalformedTreeError",
    "NorthstarError",
    "NotFoundError",
    "ServiceUnavailableError",
    "ValidationError",
]
