"""
Role-to-scope policy definitions.

A policy table maps each resource kind (projects, customers, quotes) and each
role to the set of ownership rules a record must satisfy for a principal to
see it. Every rule binds a field to the principal's own id; the builder ORs a
role's rules together.

The active table is process-wide and immutable. Reconfiguration replaces the
whole table in one reference swap.
"""

import threading
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from tenantscope.core.context import Role
from tenantscope.core.errors import PolicyConfigurationError
from tenantscope.core.predicates import (
    FieldPredicate,
    OrPredicate,
    OwnershipField,
    RelationPredicate,
    RelationQuantifier,
)


class ResourceKind(str, Enum):
    """Listings that carry their own scoping policy."""

    PROJECT = "project"
    CUSTOMER = "customer"
    QUOTE = "quote"


class RelationHop(BaseModel):
    """One step from a record to a related record."""

    relation: str
    quantifier: RelationQuantifier = RelationQuantifier.IS

    model_config = {"frozen": True}


class ScopeRule(BaseModel):
    """
    A single ownership rule: ``<via...>.<field> = principal.id``.

    Example:
        ScopeRule(field=OwnershipField.CUSTOMER_ID,
                  via=(RelationHop(relation="project"),))
        renders as {"project": {"customerId": <id>}}
    """

    field: OwnershipField
    via: tuple[RelationHop, ...] = Field(default_factory=tuple)

    model_config = {"frozen": True}

    @property
    def is_direct(self) -> bool:
        """Whether the rule binds a column on the record itself."""
        return not self.via

    def bind(self, principal_id: str):
        """Build the predicate node for this rule and principal id."""
        node = FieldPredicate(field=self.field, value=principal_id)
        for hop in reversed(self.via):
            node = RelationPredicate(
                relation=hop.relation,
                quantifier=hop.quantifier,
                predicate=node,
            )
        return node


class RoleScope(BaseModel):
    """The rules OR-ed together for one role."""

    rules: tuple[ScopeRule, ...] = Field(..., min_length=1)

    model_config = {"frozen": True}

    def bind(self, principal_id: str) -> OrPredicate:
        return OrPredicate(predicates=tuple(rule.bind(principal_id) for rule in self.rules))


class ResourcePolicy(BaseModel):
    """
    Scoping policy for one resource kind.

    Every concrete role must have an entry. Role.UNKNOWN always resolves to
    ``default``, which should be the narrowest scope.
    """

    kind: ResourceKind
    roles: dict[Role, RoleScope]
    default: RoleScope

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_exhaustive(self) -> "ResourcePolicy":
        if Role.UNKNOWN in self.roles:
            raise ValueError("Role.UNKNOWN is served by the default scope, not the roles map")
        missing = [role.value for role in Role if role is not Role.UNKNOWN and role not in self.roles]
        if missing:
            raise ValueError(
                f"Policy for '{self.kind.value}' is missing roles: {', '.join(missing)}"
            )
        return self

    def scope_for(self, role: Role) -> RoleScope:
        """Get the scope for a role, falling back to the fail-closed default."""
        match role:
            case Role.UNKNOWN:
                return self.default
            case _:
                return self.roles.get(role, self.default)


class PolicyTable(BaseModel):
    """Complete role-to-scope configuration keyed by resource kind."""

    policies: dict[ResourceKind, ResourcePolicy]

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def validate_kinds(self) -> "PolicyTable":
        for kind, policy in self.policies.items():
            if policy.kind != kind:
                raise ValueError(
                    f"Policy registered under '{kind.value}' describes '{policy.kind.value}'"
                )
        return self

    def policy_for(self, kind: ResourceKind) -> ResourcePolicy:
        """Get the policy for a resource kind."""
        policy = self.policies.get(kind)
        if policy is None:
            raise PolicyConfigurationError(
                f"No scoping policy configured for resource kind '{kind.value}'",
                details={"kind": kind.value},
            )
        return policy


def _scope(*rules: ScopeRule) -> RoleScope:
    return RoleScope(rules=rules)


def _rule(field: OwnershipField, *via: RelationHop) -> ScopeRule:
    return ScopeRule(field=field, via=via)


_OWNER_ONLY = _scope(_rule(OwnershipField.OWNER_ID))
_OWNER_OR_CUSTOMER = _scope(
    _rule(OwnershipField.OWNER_ID),
    _rule(OwnershipField.CUSTOMER_ID),
)

PROJECT_POLICY = ResourcePolicy(
    kind=ResourceKind.PROJECT,
    roles={
        Role.ADMIN: _OWNER_ONLY,
        Role.COMPANY: _scope(
            _rule(OwnershipField.OWNER_ID),
            _rule(OwnershipField.COMPANY_ID),
        ),
        Role.CUSTOMER: _OWNER_OR_CUSTOMER,
        Role.FARMER: _OWNER_OR_CUSTOMER,
    },
    default=_OWNER_ONLY,
)

_USER_ONLY = _scope(_rule(OwnershipField.USER_ID))

CUSTOMER_POLICY = ResourcePolicy(
    kind=ResourceKind.CUSTOMER,
    roles={
        Role.ADMIN: _USER_ONLY,
        Role.COMPANY: _scope(
            _rule(OwnershipField.USER_ID),
            _rule(
                OwnershipField.COMPANY_ID,
                RelationHop(relation="projects", quantifier=RelationQuantifier.SOME),
            ),
        ),
        Role.CUSTOMER: _USER_ONLY,
        Role.FARMER: _USER_ONLY,
    },
    default=_USER_ONLY,
)

_CREATOR_ONLY = _scope(_rule(OwnershipField.CREATED_BY_ID))
_CREATOR_OR_PROJECT_CUSTOMER = _scope(
    _rule(OwnershipField.CREATED_BY_ID),
    _rule(OwnershipField.CUSTOMER_ID, RelationHop(relation="project")),
    _rule(
        OwnershipField.USER_ID,
        RelationHop(relation="project"),
        RelationHop(relation="customer"),
    ),
)

QUOTE_POLICY = ResourcePolicy(
    kind=ResourceKind.QUOTE,
    roles={
        Role.ADMIN: _CREATOR_ONLY,
        Role.COMPANY: _CREATOR_ONLY,
        Role.CUSTOMER: _CREATOR_OR_PROJECT_CUSTOMER,
        Role.FARMER: _CREATOR_OR_PROJECT_CUSTOMER,
    },
    default=_CREATOR_ONLY,
)

DEFAULT_POLICY_TABLE = PolicyTable(
    policies={
        ResourceKind.PROJECT: PROJECT_POLICY,
        ResourceKind.CUSTOMER: CUSTOMER_POLICY,
        ResourceKind.QUOTE: QUOTE_POLICY,
    }
)


_active_table: PolicyTable = DEFAULT_POLICY_TABLE
_swap_lock = threading.Lock()


def get_policy_table() -> PolicyTable:
    """Get the process-wide policy table."""
    return _active_table


def set_policy_table(table: PolicyTable) -> PolicyTable:
    """
    Replace the process-wide policy table.

    The new table takes effect for subsequent calls as a single reference
    swap. Returns the previous table so callers can restore it.

    Raises:
        PolicyConfigurationError: If the table is not a PolicyTable or lacks
            a policy for any resource kind
    """
    global _active_table
    if not isinstance(table, PolicyTable):
        raise PolicyConfigurationError(
            "Policy table must be a PolicyTable instance",
            details={"type": type(table).__name__},
        )
    missing = [kind.value for kind in ResourceKind if kind not in table.policies]
    if missing:
        raise PolicyConfigurationError(
            "Policy table must define a policy for every resource kind",
            details={"missing": missing},
        )
    with _swap_lock:
        previous = _active_table
        _active_table = table
    return previous


def reset_policy_table() -> None:
    """Restore the built-in policy table."""
    set_policy_table(DEFAULT_POLICY_TABLE)
