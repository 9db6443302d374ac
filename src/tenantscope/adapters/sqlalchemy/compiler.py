"""
SQLAlchemy predicate compiler.

Compiles tenant predicates into SQLAlchemy boolean clauses against mapped
models, so structured-query call sites get the same scoping as where-dict
and raw SQL call sites.
"""

from typing import Any

from sqlalchemy import Select, and_, or_, true

from tenantscope.core.context import AccessScopeOptions
from tenantscope.core.errors import ValidationError
from tenantscope.core.predicates import (
    AndPredicate,
    EmptyPredicate,
    FieldPredicate,
    OrPredicate,
    OwnershipField,
    RelationPredicate,
    RelationQuantifier,
)
from tenantscope.policy.builder import TenantFilterBuilder
from tenantscope.policy.models import ResourceKind


class SQLAlchemyScopeCompiler:
    """
    Compiles tenant predicates into SQLAlchemy clauses.
    """

    def __init__(self, column_map: dict[OwnershipField, str] | None = None) -> None:
        """
        Initialize the compiler.

        Args:
            column_map: Optional override of the attribute name used for an
                ownership field. Defaults to the snake-case column name.
        """
        self.column_map = column_map or {}

    def compile(self, predicate: Any, model_class: type) -> Any:
        """Compile a predicate into a boolean clause on model_class."""
        match predicate:
            case EmptyPredicate():
                return true()
            case FieldPredicate():
                return self._column(model_class, predicate.field) == predicate.value
            case OrPredicate():
                return or_(*(self.compile(p, model_class) for p in predicate.predicates))
            case AndPredicate():
                return and_(*(self.compile(p, model_class) for p in predicate.predicates))
            case RelationPredicate():
                return self._compile_relation(predicate, model_class)
            case _:
                raise ValidationError(f"Unsupported predicate type: {type(predicate).__name__}")

    def _column(self, model_class: type, field: OwnershipField) -> Any:
        name = self.column_map.get(field, field.column)
        column = getattr(model_class, name, None)
        if column is None:
            raise ValidationError(
                f"Scope field '{name}' does not exist on model '{model_class.__name__}'",
                field=name,
            )
        return column

    def _compile_relation(self, predicate: RelationPredicate, model_class: type) -> Any:
        relationship = getattr(model_class, predicate.relation, None)
        if relationship is None or not hasattr(relationship, "property"):
            raise ValidationError(
                f"Relation '{predicate.relation}' does not exist on model '{model_class.__name__}'",
                field=predicate.relation,
            )
        target = relationship.property.mapper.class_
        inner = self.compile(predicate.predicate, target)
        if predicate.quantifier == RelationQuantifier.SOME:
            return relationship.any(inner)
        return relationship.has(inner)


def scope_select(
    stmt: Select,
    model_class: type,
    options: AccessScopeOptions,
    kind: ResourceKind = ResourceKind.PROJECT,
    *,
    builder: TenantFilterBuilder | None = None,
    compiler: SQLAlchemyScopeCompiler | None = None,
) -> Select:
    """
    Apply the tenant scope to a select statement.

    The statement is returned unchanged only for authorised global access.

    Example:
        stmt = scope_select(select(Project).where(Project.status == "ACTIVE"),
                            Project, options)
    """
    predicate = (builder or TenantFilterBuilder()).build(options, kind)
    if predicate.is_empty:
        return stmt
    return stmt.where((compiler or SQLAlchemyScopeCompiler()).compile(predicate, model_class))
