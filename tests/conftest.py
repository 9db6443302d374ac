"""
Shared test fixtures.
"""

from types import SimpleNamespace
from typing import Optional

import pytest
from sqlalchemy import ForeignKey, String, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship

from tenantscope.core.context import AccessScopeOptions, Principal, Role
from tenantscope.policy.models import reset_policy_table

# === Test Models ===


class Base(DeclarativeBase):
    pass


class TestCustomer(Base):
    __tablename__ = "customers"

    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    user_id: Mapped[str] = mapped_column(String(50))
    name: Mapped[str] = mapped_column(String(255))

    projects: Mapped[list["TestProject"]] = relationship(
        "TestProject", back_populates="customer"
    )


class TestProject(Base):
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255))
    status: Mapped[str] = mapped_column(String(50))
    owner_id: Mapped[str] = mapped_column(String(50))
    customer_id: Mapped[str | None] = mapped_column(
        ForeignKey("customers.id"), nullable=True
    )
    company_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    customer: Mapped[Optional["TestCustomer"]] = relationship(
        "TestCustomer", back_populates="projects"
    )
    quotes: Mapped[list["TestQuote"]] = relationship("TestQuote", back_populates="project")


class TestQuote(Base):
    __tablename__ = "quotes"

    id: Mapped[int] = mapped_column(primary_key=True)
    created_by_id: Mapped[str] = mapped_column(String(50))
    project_id: Mapped[int] = mapped_column(ForeignKey("projects.id"))

    project: Mapped["TestProject"] = relationship("TestProject", back_populates="quotes")


# === Fixtures ===


@pytest.fixture
def restore_policy_table():
    """Tests that swap the process-wide table must not leak into others."""
    yield
    reset_policy_table()


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine."""
    engine = create_engine("sqlite:///:memory:", echo=False)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def session(engine):
    """Create a database session."""
    with Session(engine) as session:
        yield session


@pytest.fixture
def seeded_session(session):
    """
    Session with two customers, two companies and one admin.

    projects: 1 cust-A/company-1, 2 company-1 for cust-B,
              3 cust-B/company-2, 4 admin-1 only
    quotes:   1 by company-1 on project 1, 2 by company-2 on project 3,
              3 by cust-B on project 2
    """
    session.add_all(
        [
            TestCustomer(id="cust-A", user_id="cust-A", name="Ayse"),
            TestCustomer(id="cust-B", user_id="cust-B", name="Bora"),
        ]
    )
    session.add_all(
        [
            TestProject(
                id=1, name="Roof array", status="ACTIVE",
                owner_id="cust-A", customer_id="cust-A", company_id="company-1",
            ),
            TestProject(
                id=2, name="Barn array", status="ACTIVE",
                owner_id="company-1", customer_id="cust-B", company_id="company-1",
            ),
            TestProject(
                id=3, name="Greenhouse", status="DRAFT",
                owner_id="cust-B", customer_id="cust-B", company_id="company-2",
            ),
            TestProject(
                id=4, name="Showroom", status="ACTIVE",
                owner_id="admin-1", customer_id=None, company_id=None,
            ),
        ]
    )
    session.add_all(
        [
            TestQuote(id=1, created_by_id="company-1", project_id=1),
            TestQuote(id=2, created_by_id="company-2", project_id=3),
            TestQuote(id=3, created_by_id="cust-B", project_id=2),
        ]
    )
    session.commit()
    return session


@pytest.fixture
def models():
    """The mapped test models."""
    return SimpleNamespace(Customer=TestCustomer, Project=TestProject, Quote=TestQuote)


@pytest.fixture
def make_options():
    """Factory for AccessScopeOptions."""

    def _make(
        principal_id: str,
        role: Role | str = Role.CUSTOMER,
        allow_global_access: bool = False,
    ) -> AccessScopeOptions:
        return AccessScopeOptions(
            principal=Principal(id=principal_id, role=role),
            allow_global_access=allow_global_access,
        )

    return _make


@pytest.fixture
def admin_options(make_options):
    return make_options("admin-123", Role.ADMIN)


@pytest.fixture
def company_options(make_options):
    return make_options("company-456", Role.COMPANY)


@pytest.fixture
def customer_options(make_options):
    return make_options("customer-789", Role.CUSTOMER)
