"""
Tenant filter construction.

The TenantFilterBuilder turns a principal and its per-call options into the
predicate describing the records that principal may see. It is the single
place where global access can be granted, and it refuses to return any
predicate that is not bound exclusively to the calling principal.
"""

from typing import Any

from tenantscope.core.context import AccessScopeOptions
from tenantscope.core.errors import InvalidPrincipalError, PolicyViolationError
from tenantscope.core.predicates import EmptyPredicate, TenantPredicate
from tenantscope.logging.config import LogLevel, get_logger
from tenantscope.policy.models import (
    PolicyTable,
    ResourceKind,
    get_policy_table,
)
from tenantscope.utils.defaults import PROFILE_PROD, ScopeProfile

logger = get_logger("tenantscope.builder")


class TenantFilterBuilder:
    """
    Builds tenant predicates from a role-to-scope policy table.

    When no table is given, the process-wide table is read on every call, so
    a swap through set_policy_table() is picked up immediately.
    """

    def __init__(
        self,
        table: PolicyTable | None = None,
        profile: ScopeProfile = PROFILE_PROD,
    ) -> None:
        self._table = table
        self.profile = profile

    @property
    def table(self) -> PolicyTable:
        return self._table if self._table is not None else get_policy_table()

    def build(
        self,
        options: AccessScopeOptions,
        kind: ResourceKind = ResourceKind.PROJECT,
    ) -> TenantPredicate:
        """
        Build the tenant predicate for a call.

        Raises:
            InvalidPrincipalError: If the principal has no id
            PolicyViolationError: If the policy produced a predicate not bound
                to the principal
        """
        principal = options.principal
        if not principal.has_id:
            raise InvalidPrincipalError(role=principal.role.value)

        if options.global_access_granted:
            predicate: Any = EmptyPredicate()
            self._log_decision(options, kind, predicate, LogLevel.INFO, "Global access granted")
            return predicate

        if options.global_access_ignored and self.profile.warn_on_ignored_global_access:
            logger.warning(
                "Global access requested by non-admin principal; ignoring",
                principal_id=principal.id,
                role=principal.role.value,
                resource_kind=kind.value,
            )

        scope = self.table.policy_for(kind).scope_for(principal.role)
        predicate = scope.bind(principal.id)
        self._check_binding(predicate, principal.id)

        self._log_decision(
            options, kind, predicate, self.profile.decision_log_level, "Tenant scope applied"
        )
        return predicate

    def _check_binding(self, predicate: Any, principal_id: str) -> None:
        """Every bound value must be the principal's own id."""
        values = predicate.bound_values()
        if not values or any(value != principal_id for value in values):
            raise PolicyViolationError(principal_id, values)

    def _log_decision(
        self,
        options: AccessScopeOptions,
        kind: ResourceKind,
        predicate: Any,
        level: LogLevel,
        message: str,
    ) -> None:
        if not self.profile.log_decisions or not logger.is_enabled_for(level):
            return
        logger.log(
            level,
            message,
            principal_id=options.principal.id,
            role=options.principal.role.value,
            resource_kind=kind.value,
            predicate=predicate.model_dump(mode="json"),
        )


def build_tenant_filter(
    options: AccessScopeOptions,
    kind: ResourceKind = ResourceKind.PROJECT,
) -> TenantPredicate:
    """
    Build the tenant predicate for a principal using the active policy table.

    Returns an EmptyPredicate only for an ADMIN principal with
    allow_global_access set. Every other result is an OR of ownership
    conditions bound to the principal's id.

    Raises:
        InvalidPrincipalError: If the principal has no id
    """
    return TenantFilterBuilder().build(options, kind)
