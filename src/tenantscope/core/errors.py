"""
Error taxonomy for tenantscope.

All tenantscope errors inherit from TenantScopeError and include:
- A unique error code for programmatic handling
- A human-readable message
- Optional details for audit logging

Unknown roles are deliberately absent here: they degrade to the narrowest
scope instead of raising.
"""

from typing import Any


class TenantScopeError(Exception):
    """
    Base class for all tenantscope errors.

    Attributes:
        code: Unique error code for programmatic handling
        message: Human-readable error message
        details: Additional error context
    """

    code: str = "TENANT_SCOPE_ERROR"

    def __init__(
        self,
        message: str,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a dictionary for serialization."""
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class InvalidPrincipalError(TenantScopeError):
    """
    A scoping call was made without a principal id.

    This is an integration bug upstream: every call must come from a request
    that already passed authentication.
    """

    code = "INVALID_PRINCIPAL"

    def __init__(self, role: str | None = None, **kwargs: Any) -> None:
        super().__init__(
            "Invalid principal: no principal id",
            details={"role": role},
            **kwargs,
        )


class UnauthenticatedError(TenantScopeError):
    """No authenticated principal is attached to the request."""

    code = "UNAUTHENTICATED"

    def __init__(self, **kwargs: Any) -> None:
        super().__init__("Unauthorized: no valid principal", **kwargs)


class PolicyViolationError(TenantScopeError):
    """A built predicate does not bind exclusively to the calling principal."""

    code = "POLICY_VIOLATION"

    def __init__(
        self,
        principal_id: str,
        bound_values: list[Any],
        **kwargs: Any,
    ) -> None:
        super().__init__(
            "Tenant predicate is not bound to the calling principal",
            details={"principal_id": principal_id, "bound_values": bound_values},
            **kwargs,
        )


class PolicyConfigurationError(TenantScopeError):
    """A role-to-scope policy table is incomplete or malformed."""

    code = "POLICY_CONFIGURATION"


class PredicateNotRenderableError(TenantScopeError):
    """The predicate cannot be expressed as a raw SQL fragment."""

    code = "PREDICATE_NOT_RENDERABLE"

    def __init__(self, kind: str, **kwargs: Any) -> None:
        super().__init__(
            f"Predicate node '{kind}' cannot be rendered as a raw SQL fragment",
            details={"kind": kind},
            **kwargs,
        )


class ValidationError(TenantScopeError):
    """Input validation failed."""

    code = "VALIDATION_ERROR"

    def __init__(
        self,
        message: str,
        field: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            message,
            details={"field": field} if field else {},
            **kwargs,
        )
