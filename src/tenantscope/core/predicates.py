"""
Tenant predicate tree.

A tenant predicate describes "the records this principal may see" as a small
recursive expression. Every node is a frozen Pydantic model with a ``kind``
discriminator, so a predicate can be logged verbatim for audit and parsed
back without loss.

Shapes:
    EmptyPredicate                          matches everything
    FieldPredicate(field, value)            ownerId = value
    OrPredicate([...]) / AndPredicate([...])
    RelationPredicate(relation, quantifier, predicate)
                                            scope through a related record
"""

import re
from enum import Enum
from typing import Annotated, Any, ClassVar, Literal, Union

from pydantic import BaseModel, Field, TypeAdapter, field_validator

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


class OwnershipField(str, Enum):
    """Ownership-reference fields a tenant predicate may bind."""

    OWNER_ID = "ownerId"
    CUSTOMER_ID = "customerId"
    COMPANY_ID = "companyId"
    USER_ID = "userId"
    ASSIGNED_ENGINEER_ID = "assignedEngineerId"
    CREATED_BY_ID = "createdById"

    @property
    def column(self) -> str:
        """Snake-case column name used by raw queries and ORM models."""
        return _CAMEL_BOUNDARY.sub("_", self.value).lower()


class RelationQuantifier(str, Enum):
    """How a relation predicate matches its related records."""

    IS = "is"  # to-one relation
    SOME = "some"  # to-many relation, at least one match


class EmptyPredicate(BaseModel):
    """Matches every record. Only produced for authorised global access."""

    kind: Literal["empty"] = "empty"

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return True

    def to_where(self) -> dict[str, Any]:
        return {}

    def bound_values(self) -> list[Any]:
        return []

    def binds(self, value: Any) -> bool:
        return False


class FieldPredicate(BaseModel):
    """
    Equality on one ownership field.

    Example:
        {"kind": "field", "field": "ownerId", "value": "user-1"}
    """

    kind: Literal["field"] = "field"
    field: OwnershipField
    value: str

    model_config = {"frozen": True}

    @property
    def is_empty(self) -> bool:
        return False

    def to_where(self) -> dict[str, Any]:
        return {self.field.value: self.value}

    def bound_values(self) -> list[Any]:
        return [self.value]

    def binds(self, value: Any) -> bool:
        return self.value == value


class _CompoundPredicate(BaseModel):
    """Shared behaviour for OR/AND nodes."""

    predicates: tuple["TenantPredicate", ...] = Field(..., min_length=1)

    model_config = {"frozen": True}

    operator: ClassVar[str] = ""

    @property
    def is_empty(self) -> bool:
        return False

    def to_where(self) -> dict[str, Any]:
        return {self.operator: [p.to_where() for p in self.predicates]}

    def bound_values(self) -> list[Any]:
        values: list[Any] = []
        for predicate in self.predicates:
            values.extend(predicate.bound_values())
        return values

    def binds(self, value: Any) -> bool:
        return any(p.binds(value) for p in self.predicates)


class OrPredicate(_CompoundPredicate):
    """Matches when any child matches."""

    kind: Literal["or"] = "or"
    operator: ClassVar[str] = "OR"


class AndPredicate(_CompoundPredicate):
    """Matches when every child matches."""

    kind: Literal["and"] = "and"
    operator: ClassVar[str] = "AND"


class RelationPredicate(BaseModel):
    """
    Applies a predicate to a related record.

    Example:
        projects some {companyId = "company-1"}
    """

    kind: Literal["relation"] = "relation"
    relation: str
    quantifier: RelationQuantifier = RelationQuantifier.IS
    predicate: "TenantPredicate"

    model_config = {"frozen": True}

    @field_validator("relation")
    @classmethod
    def validate_relation_name(cls, v: str) -> str:
        """Relation names are attribute names, never expressions."""
        if not v or not v.strip().isidentifier():
            raise ValueError(f"Invalid relation name: {v!r}")
        return v.strip()

    @property
    def is_empty(self) -> bool:
        return False

    def to_where(self) -> dict[str, Any]:
        inner = self.predicate.to_where()
        if self.quantifier == RelationQuantifier.SOME:
            return {self.relation: {"some": inner}}
        return {self.relation: inner}

    def bound_values(self) -> list[Any]:
        return self.predicate.bound_values()

    def binds(self, value: Any) -> bool:
        return self.predicate.binds(value)


TenantPredicate = Annotated[
    Union[EmptyPredicate, FieldPredicate, OrPredicate, AndPredicate, RelationPredicate],
    Field(discriminator="kind"),
]

OrPredicate.model_rebuild()
AndPredicate.model_rebuild()
RelationPredicate.model_rebuild()

_predicate_adapter: TypeAdapter[Any] = TypeAdapter(TenantPredicate)


def parse_predicate(data: dict[str, Any]) -> Any:
    """Rebuild a predicate from its serialized (audit log) form."""
    return _predicate_adapter.validate_python(data)


def dump_predicate(predicate: Any) -> dict[str, Any]:
    """Serialize a predicate to plain JSON-compatible data."""
    return predicate.model_dump(mode="json")
