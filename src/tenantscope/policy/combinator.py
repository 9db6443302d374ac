"""
Combining business filters with tenant scoping.

Business filters stay at the top level of the where-dict; the tenant
predicate is always conjoined under ``AND`` so no base clause can widen
access past the tenant boundary.
"""

from collections.abc import Mapping
from typing import Any

from tenantscope.core.context import AccessScopeOptions
from tenantscope.logging.config import log_tenant_filter
from tenantscope.policy.builder import TenantFilterBuilder
from tenantscope.policy.models import ResourceKind
from tenantscope.utils.defaults import PROFILE_PROD, ScopeProfile


def apply_tenant_filter(
    base_filter: Mapping[str, Any],
    options: AccessScopeOptions,
    kind: ResourceKind = ResourceKind.PROJECT,
    *,
    builder: TenantFilterBuilder | None = None,
    profile: ScopeProfile = PROFILE_PROD,
) -> Mapping[str, Any]:
    """
    Conjoin the tenant predicate with a caller's where-dict.

    Returns base_filter itself when global access is granted. Otherwise
    returns a new dict with the base keys and an ``AND`` list whose first
    element is the tenant predicate, followed by any existing ``AND`` clauses.
    base_filter is never mutated.

    Raises:
        InvalidPrincipalError: If the principal has no id
    """
    builder = builder or TenantFilterBuilder(profile=profile)
    predicate = builder.build(options, kind)

    if predicate.is_empty:
        return base_filter

    existing = base_filter.get("AND")
    if existing is None:
        existing_clauses: list[Any] = []
    elif isinstance(existing, Mapping):
        existing_clauses = [existing]
    else:
        existing_clauses = list(existing)

    combined = {
        **base_filter,
        "AND": [predicate.to_where(), *existing_clauses],
    }

    if profile.log_combined_filters:
        log_tenant_filter(combined, f"{kind.value}.where")
    return combined


def projects_filter(options: AccessScopeOptions) -> Mapping[str, Any]:
    """Scoped where-dict for project listings."""
    return apply_tenant_filter({}, options, ResourceKind.PROJECT)


def customers_filter(options: AccessScopeOptions) -> Mapping[str, Any]:
    """Scoped where-dict for customer listings."""
    return apply_tenant_filter({}, options, ResourceKind.CUSTOMER)


def quotes_filter(options: AccessScopeOptions) -> Mapping[str, Any]:
    """Scoped where-dict for quote listings."""
    return apply_tenant_filter({}, options, ResourceKind.QUOTE)
