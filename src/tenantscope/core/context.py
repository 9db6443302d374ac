"""
Caller context for tenant-scoped data access.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from tenantscope.core.errors import UnauthenticatedError, ValidationError


class Role(str, Enum):
    """
    Closed set of principal classifications.

    UNKNOWN is the explicit catch-all for any role string the authentication
    layer produces that this library does not recognise.
    """

    ADMIN = "ADMIN"
    COMPANY = "COMPANY"
    CUSTOMER = "CUSTOMER"
    FARMER = "FARMER"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: "Role | str | None") -> "Role":
        """
        Map a raw role value onto the enum, falling back to UNKNOWN.

        Matching is exact: a role string with different case or surrounding
        whitespace is not recognised.
        """
        if isinstance(value, Role):
            return value
        if not isinstance(value, str) or not value:
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class Principal:
    """
    The authenticated identity a data operation is performed for.

    Produced by the authentication layer once per request. This library only
    reads it.
    """

    id: str
    role: Role = Role.UNKNOWN
    metadata: dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role.parse(self.role))

    @property
    def has_id(self) -> bool:
        return isinstance(self.id, str) and bool(self.id.strip())

    def is_admin(self) -> bool:
        return self.role is Role.ADMIN


@dataclass(frozen=True)
class AccessScopeOptions:
    """
    Per-call scoping configuration.

    allow_global_access is an explicit opt-in that is only honoured for
    ADMIN principals. include_public_data is carried for call sites but does
    not change the produced predicate.
    """

    principal: Principal
    allow_global_access: bool = False
    include_public_data: bool = False

    def __post_init__(self) -> None:
        for name in ("allow_global_access", "include_public_data"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ValidationError(
                    f"{name} must be a bool, got {type(value).__name__}",
                    field=name,
                )

    @property
    def global_access_granted(self) -> bool:
        """True only for an ADMIN principal with the explicit flag set."""
        return self.allow_global_access is True and self.principal.is_admin()

    @property
    def global_access_ignored(self) -> bool:
        """True when the flag was requested by a role that cannot use it."""
        return self.allow_global_access is True and not self.principal.is_admin()

    @classmethod
    def create(
        cls,
        *,
        principal_id: str,
        role: Role | str | None,
        allow_global_access: bool = False,
        include_public_data: bool = False,
        metadata: dict[str, Any] | None = None,
    ) -> "AccessScopeOptions":
        """
        Convenience factory for building options from raw session values.

        Args:
            principal_id: The authenticated principal's id
            role: Role enum or raw role string (unknown strings map to UNKNOWN)
            allow_global_access: Admin-only opt-in to remove scoping. Must be
                a real bool; strings such as "false" are rejected
            include_public_data: Advisory flag for shared records
            metadata: Optional extra principal metadata

        Raises:
            ValidationError: If a flag is not a bool
        """
        principal = Principal(
            id=principal_id,
            role=Role.parse(role),
            metadata=metadata or {},
        )
        return cls(
            principal=principal,
            allow_global_access=allow_global_access,
            include_public_data=include_public_data,
        )


def require_principal(principal: Principal | None) -> Principal:
    """
    Ensure a request carries an authenticated principal.

    Raises:
        UnauthenticatedError: If there is no principal or it has no id
    """
    if principal is None or not principal.has_id:
        raise UnauthenticatedError()
    return principal
