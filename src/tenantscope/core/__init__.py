"""
tenantscope Core Module.

Contains the caller context, the tenant predicate tree, and the error taxonomy.
"""

from tenantscope.core.context import (
    AccessScopeOptions,
    Principal,
    Role,
    require_principal,
)
from tenantscope.core.errors import (
    InvalidPrincipalError,
    PolicyConfigurationError,
    PolicyViolationError,
    PredicateNotRenderableError,
    TenantScopeError,
    UnauthenticatedError,
    ValidationError,
)
from tenantscope.core.predicates import (
    AndPredicate,
    EmptyPredicate,
    FieldPredicate,
    OrPredicate,
    OwnershipField,
    RelationPredicate,
    RelationQuantifier,
    TenantPredicate,
    dump_predicate,
    parse_predicate,
)

__all__ = [
    # Context
    "AccessScopeOptions",
    "Principal",
    "Role",
    "require_principal",
    # Errors
    "TenantScopeError",
    "InvalidPrincipalError",
    "UnauthenticatedError",
    "PolicyViolationError",
    "PolicyConfigurationError",
    "PredicateNotRenderableError",
    "ValidationError",
    # Predicates
    "TenantPredicate",
    "EmptyPredicate",
    "FieldPredicate",
    "OrPredicate",
    "AndPredicate",
    "RelationPredicate",
    "RelationQuantifier",
    "OwnershipField",
    "dump_predicate",
    "parse_predicate",
]
