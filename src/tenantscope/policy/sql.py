"""
Raw SQL rendering of tenant predicates.

Two renderers share the policy table with the structured builder:

render_sql_filter() embeds the principal id literally, exactly as it was
given. It does not escape or strip anything, so the id must come from the
authentication layer and never from request input.

render_sql_filter_params() emits a placeholder and returns the id as a bound
parameter. New call sites should use this one.
"""

from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import TextClause, text

from tenantscope.core.context import AccessScopeOptions
from tenantscope.core.errors import PredicateNotRenderableError
from tenantscope.core.predicates import (
    AndPredicate,
    EmptyPredicate,
    FieldPredicate,
    OrPredicate,
    RelationPredicate,
)
from tenantscope.policy.builder import TenantFilterBuilder
from tenantscope.policy.models import ResourceKind

# Composable into "WHERE <fragment>" without special-casing
MATCH_ALL = "1=1"

PRINCIPAL_PARAM = "principal_id"


@dataclass(frozen=True)
class SqlFragment:
    """A WHERE fragment with placeholders and the values bound to them."""

    sql: str
    params: dict[str, Any] = field(default_factory=dict)

    def as_text_clause(self) -> TextClause:
        """Build a SQLAlchemy text clause with the parameters bound."""
        return text(self.sql).bindparams(**self.params)


def _render(predicate: Any, placeholder: Any) -> str:
    match predicate:
        case EmptyPredicate():
            return MATCH_ALL
        case FieldPredicate():
            return f"{predicate.field.column} = {placeholder(predicate)}"
        case OrPredicate() | AndPredicate():
            parts = [_render(child, placeholder) for child in predicate.predicates]
            if len(parts) == 1:
                return parts[0]
            return "(" + f" {predicate.operator} ".join(parts) + ")"
        case RelationPredicate():
            raise PredicateNotRenderableError(predicate.kind)
        case _:
            raise PredicateNotRenderableError(type(predicate).__name__)


def _literal(leaf: FieldPredicate) -> str:
    return f"'{leaf.value}'"


def render_sql_filter(
    options: AccessScopeOptions,
    kind: ResourceKind = ResourceKind.PROJECT,
    *,
    builder: TenantFilterBuilder | None = None,
) -> str:
    """
    Render the tenant scope as a literal SQL fragment.

    Returns "1=1" for authorised global access, otherwise e.g.
    "(owner_id = 'u-1' OR customer_id = 'u-1')". The principal id is
    embedded verbatim.

    Raises:
        InvalidPrincipalError: If the principal has no id
        PredicateNotRenderableError: If the policy scopes through a relation
    """
    predicate = (builder or TenantFilterBuilder()).build(options, kind)
    return _render(predicate, _literal)


def render_sql_filter_params(
    options: AccessScopeOptions,
    kind: ResourceKind = ResourceKind.PROJECT,
    *,
    builder: TenantFilterBuilder | None = None,
) -> SqlFragment:
    """
    Render the tenant scope with a bound parameter instead of a literal.

    Example:
        fragment = render_sql_filter_params(options)
        # fragment.sql    == "(owner_id = :principal_id OR customer_id = :principal_id)"
        # fragment.params == {"principal_id": "u-1"}
        session.execute(select(Project).where(fragment.as_text_clause()))
    """
    predicate = (builder or TenantFilterBuilder()).build(options, kind)
    sql = _render(predicate, lambda leaf: f":{PRINCIPAL_PARAM}")
    if predicate.is_empty:
        return SqlFragment(sql=sql)
    return SqlFragment(sql=sql, params={PRINCIPAL_PARAM: options.principal.id})
