"""
Single-resource access checks.

Used in boolean guard contexts ("can this principal open project #123"), so
these functions never raise for a bad principal; they answer False.

Two role rules are placeholders for relationship checks that do not exist
yet. They are reported with a placeholder marker and logged so that
reliance on them shows up in audit logs.
"""

from enum import Enum

from pydantic import BaseModel

from tenantscope.core.context import AccessScopeOptions, Role
from tenantscope.logging.config import get_logger
from tenantscope.utils.defaults import PROFILE_PROD, ScopeProfile

logger = get_logger("tenantscope.access")


class AccessReason(str, Enum):
    """Why an access decision came out the way it did."""

    NO_PRINCIPAL = "no_principal"
    GLOBAL_ACCESS = "global_access"
    DIRECT_OWNERSHIP = "direct_ownership"
    ROLE_RULE = "role_rule"
    NO_RULE = "no_rule"


class PlaceholderRule(str, Enum):
    """Role rules standing in for relationship checks not yet implemented."""

    # TODO: replace with a lookup of the companies an admin manages
    ADMIN_COMPANY_HIERARCHY = "admin_company_hierarchy"
    # TODO: replace with a lookup of the customers a company serves
    COMPANY_CUSTOMER_RELATIONSHIP = "company_customer_relationship"


class AccessDecision(BaseModel):
    """Outcome of a single-resource access check."""

    allowed: bool
    reason: AccessReason
    placeholder: PlaceholderRule | None = None

    model_config = {"frozen": True}

    def __bool__(self) -> bool:
        return self.allowed


def explain_resource_access(
    resource_owner_id: str | None,
    options: AccessScopeOptions,
    *,
    profile: ScopeProfile = PROFILE_PROD,
) -> AccessDecision:
    """
    Decide whether a principal may access a resource and say why.
    """
    principal = options.principal
    if not principal.has_id:
        return AccessDecision(allowed=False, reason=AccessReason.NO_PRINCIPAL)

    if options.global_access_granted:
        return AccessDecision(allowed=True, reason=AccessReason.GLOBAL_ACCESS)

    if resource_owner_id is not None and resource_owner_id == principal.id:
        return AccessDecision(allowed=True, reason=AccessReason.DIRECT_OWNERSHIP)

    match principal.role:
        case Role.ADMIN:
            decision = AccessDecision(
                allowed=True,
                reason=AccessReason.ROLE_RULE,
                placeholder=PlaceholderRule.ADMIN_COMPANY_HIERARCHY,
            )
        case Role.COMPANY:
            decision = AccessDecision(
                allowed=False,
                reason=AccessReason.ROLE_RULE,
                placeholder=PlaceholderRule.COMPANY_CUSTOMER_RELATIONSHIP,
            )
        case Role.CUSTOMER | Role.FARMER:
            decision = AccessDecision(allowed=False, reason=AccessReason.ROLE_RULE)
        case _:
            decision = AccessDecision(allowed=False, reason=AccessReason.NO_RULE)

    if decision.placeholder is not None and profile.warn_on_placeholder_rules:
        logger.warning(
            "Access decided by placeholder rule",
            principal_id=principal.id,
            role=principal.role.value,
            resource_owner_id=resource_owner_id,
            placeholder=decision.placeholder.value,
            allowed=decision.allowed,
        )
    return decision


def can_access_resource(
    resource_owner_id: str | None,
    options: AccessScopeOptions,
    *,
    profile: ScopeProfile = PROFILE_PROD,
) -> bool:
    """
    Whether a principal may access a resource owned by resource_owner_id.

    Never raises for a missing principal id; returns False instead.
    """
    return explain_resource_access(resource_owner_id, options, profile=profile).allowed
