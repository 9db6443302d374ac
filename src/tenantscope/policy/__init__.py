"""
tenantscope Policy Module.

Contains the role-to-scope policy table, the tenant filter builder, the
where-dict combinator, the raw SQL renderer, and single-resource checks.
"""

from tenantscope.policy.access import (
    AccessDecision,
    AccessReason,
    PlaceholderRule,
    can_access_resource,
    explain_resource_access,
)
from tenantscope.policy.builder import TenantFilterBuilder, build_tenant_filter
from tenantscope.policy.combinator import (
    apply_tenant_filter,
    customers_filter,
    projects_filter,
    quotes_filter,
)
from tenantscope.policy.models import (
    DEFAULT_POLICY_TABLE,
    PolicyTable,
    RelationHop,
    ResourceKind,
    ResourcePolicy,
    RoleScope,
    ScopeRule,
    get_policy_table,
    reset_policy_table,
    set_policy_table,
)
from tenantscope.policy.sql import (
    MATCH_ALL,
    SqlFragment,
    render_sql_filter,
    render_sql_filter_params,
)

__all__ = [
    # Models
    "PolicyTable",
    "ResourcePolicy",
    "ResourceKind",
    "RoleScope",
    "ScopeRule",
    "RelationHop",
    "DEFAULT_POLICY_TABLE",
    "get_policy_table",
    "set_policy_table",
    "reset_policy_table",
    # Builder
    "TenantFilterBuilder",
    "build_tenant_filter",
    # Combinator
    "apply_tenant_filter",
    "projects_filter",
    "customers_filter",
    "quotes_filter",
    # Raw SQL
    "MATCH_ALL",
    "SqlFragment",
    "render_sql_filter",
    "render_sql_filter_params",
    # Access checks
    "AccessDecision",
    "AccessReason",
    "PlaceholderRule",
    "can_access_resource",
    "explain_resource_access",
]
