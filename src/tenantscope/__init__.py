"""
tenantscope - multi-tenant data access filtering.

Builds the predicate that scopes every query in a shared database to the
records the calling principal may see, renders it for where-dict, raw SQL,
and SQLAlchemy call sites, and answers single-resource access checks.
"""

__version__ = "0.1.0"

from tenantscope.core.context import AccessScopeOptions, Principal, Role, require_principal
from tenantscope.core.errors import (
    InvalidPrincipalError,
    PolicyViolationError,
    TenantScopeError,
    UnauthenticatedError,
)
from tenantscope.policy.access import can_access_resource, explain_resource_access
from tenantscope.policy.builder import TenantFilterBuilder, build_tenant_filter
from tenantscope.policy.combinator import apply_tenant_filter
from tenantscope.policy.models import ResourceKind
from tenantscope.policy.sql import render_sql_filter, render_sql_filter_params

__all__ = [
    # Version
    "__version__",
    # Context
    "AccessScopeOptions",
    "Principal",
    "Role",
    "ResourceKind",
    "require_principal",
    # Operations
    "TenantFilterBuilder",
    "build_tenant_filter",
    "apply_tenant_filter",
    "render_sql_filter",
    "render_sql_filter_params",
    "can_access_resource",
    "explain_resource_access",
    # Errors
    "TenantScopeError",
    "InvalidPrincipalError",
    "UnauthenticatedError",
    "PolicyViolationError",
]
