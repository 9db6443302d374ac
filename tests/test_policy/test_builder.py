"""
Tests for tenant filter construction.
"""

import json

import pytest

from tenantscope.core.context import AccessScopeOptions, Principal, Role
from tenantscope.core.errors import InvalidPrincipalError, PolicyViolationError
from tenantscope.core.predicates import (
    EmptyPredicate,
    FieldPredicate,
    OrPredicate,
    OwnershipField,
    RelationPredicate,
)
from tenantscope.policy.builder import TenantFilterBuilder, build_tenant_filter
from tenantscope.policy.models import (
    DEFAULT_POLICY_TABLE,
    PolicyTable,
    ResourceKind,
    ResourcePolicy,
    RoleScope,
    ScopeRule,
    set_policy_table,
)


def serialized(predicate):
    return json.dumps(predicate.model_dump(mode="json"), sort_keys=True)


class TestGlobalAccess:
    def test_admin_with_global_access_sees_everything(self, make_options):
        predicate = build_tenant_filter(make_options("admin-123", Role.ADMIN, True))
        assert predicate == EmptyPredicate()
        assert predicate.to_where() == {}

    def test_admin_without_global_access_sees_own_data_only(self, admin_options):
        predicate = build_tenant_filter(admin_options)
        where = predicate.to_where()
        assert where == {"OR": [{"ownerId": "admin-123"}]}
        assert not predicate.is_empty

    @pytest.mark.parametrize("role", [Role.COMPANY, Role.CUSTOMER, Role.FARMER, Role.UNKNOWN])
    def test_non_admin_flag_has_no_effect(self, make_options, role):
        with_flag = build_tenant_filter(make_options("p-1", role, True))
        without_flag = build_tenant_filter(make_options("p-1", role, False))
        assert not with_flag.is_empty
        assert with_flag == without_flag

    def test_ignored_flag_is_logged(self, make_options, caplog):
        with caplog.at_level("WARNING", logger="tenantscope"):
            build_tenant_filter(make_options("company-1", Role.COMPANY, True))
        assert any("non-admin" in r.getMessage() for r in caplog.records)


class TestRoleShapes:
    def test_company_sees_company_data(self, company_options):
        where = build_tenant_filter(company_options).to_where()
        assert {"ownerId": "company-456"} in where["OR"]
        assert {"companyId": "company-456"} in where["OR"]
        assert len(where["OR"]) == 2

    def test_customer_sees_only_own_data(self, customer_options):
        where = build_tenant_filter(customer_options).to_where()
        assert where == {"OR": [{"ownerId": "customer-789"}, {"customerId": "customer-789"}]}

    def test_farmer_matches_customer_shape(self, make_options):
        where = build_tenant_filter(make_options("farmer-1", Role.FARMER)).to_where()
        assert where == {"OR": [{"ownerId": "farmer-1"}, {"customerId": "farmer-1"}]}

    def test_unknown_role_gets_owner_only(self, make_options):
        predicate = build_tenant_filter(make_options("x-1", "INSTALLER"))
        assert predicate == OrPredicate(
            predicates=[FieldPredicate(field=OwnershipField.OWNER_ID, value="x-1")]
        )

    def test_every_shape_binds_the_principal(self, make_options):
        for role in Role:
            predicate = build_tenant_filter(make_options("p-9", role))
            assert predicate.binds("p-9")
            assert set(predicate.bound_values()) == {"p-9"}


class TestInvalidPrincipal:
    @pytest.mark.parametrize("principal_id", ["", "   "])
    def test_missing_id_raises(self, principal_id):
        options = AccessScopeOptions(principal=Principal(id=principal_id, role=Role.CUSTOMER))
        with pytest.raises(InvalidPrincipalError) as exc_info:
            build_tenant_filter(options)
        assert exc_info.value.code == "INVALID_PRINCIPAL"
        assert "no principal id" in str(exc_info.value)

    def test_missing_id_raises_even_for_admin_bypass(self):
        options = AccessScopeOptions(
            principal=Principal(id="", role=Role.ADMIN),
            allow_global_access=True,
        )
        with pytest.raises(InvalidPrincipalError):
            build_tenant_filter(options)


class TestIsolation:
    def test_customer_cannot_access_other_customer_data(self, make_options):
        a = serialized(build_tenant_filter(make_options("customer-A")))
        b = serialized(build_tenant_filter(make_options("customer-B")))
        assert a != b
        assert "customer-A" in a and "customer-B" not in a
        assert "customer-B" in b and "customer-A" not in b

    def test_company_cannot_see_admin_data(self, company_options):
        text = serialized(build_tenant_filter(company_options))
        assert "admin-123" not in text
        assert "company-456" in text

    def test_idempotent(self, company_options):
        assert build_tenant_filter(company_options) == build_tenant_filter(company_options)


class TestResourceKinds:
    def test_customer_listing_for_company(self, company_options):
        where = build_tenant_filter(company_options, ResourceKind.CUSTOMER).to_where()
        assert where == {
            "OR": [
                {"userId": "company-456"},
                {"projects": {"some": {"companyId": "company-456"}}},
            ]
        }

    def test_customer_listing_for_customer(self, customer_options):
        where = build_tenant_filter(customer_options, ResourceKind.CUSTOMER).to_where()
        assert where == {"OR": [{"userId": "customer-789"}]}

    def test_quote_listing_for_customer(self, customer_options):
        predicate = build_tenant_filter(customer_options, ResourceKind.QUOTE)
        assert predicate.to_where() == {
            "OR": [
                {"createdById": "customer-789"},
                {"project": {"customerId": "customer-789"}},
                {"project": {"customer": {"userId": "customer-789"}}},
            ]
        }
        assert isinstance(predicate.predicates[2], RelationPredicate)

    def test_quote_listing_for_company(self, company_options):
        where = build_tenant_filter(company_options, ResourceKind.QUOTE).to_where()
        assert where == {"OR": [{"createdById": "company-456"}]}

    def test_admin_bypass_applies_to_every_kind(self, make_options):
        options = make_options("admin-1", Role.ADMIN, True)
        for kind in ResourceKind:
            assert build_tenant_filter(options, kind).is_empty


@pytest.mark.usefixtures("restore_policy_table")
class TestPolicyTableSwap:
    def _owner_only_table(self, field):
        scope = RoleScope(rules=(ScopeRule(field=field),))
        return PolicyTable(
            policies={
                **DEFAULT_POLICY_TABLE.policies,
                ResourceKind.PROJECT: ResourcePolicy(
                    kind=ResourceKind.PROJECT,
                    roles={role: scope for role in Role if role is not Role.UNKNOWN},
                    default=scope,
                )
            }
        )

    def test_builder_reads_swapped_table(self, customer_options):
        set_policy_table(self._owner_only_table(OwnershipField.ASSIGNED_ENGINEER_ID))
        where = build_tenant_filter(customer_options).to_where()
        assert where == {"OR": [{"assignedEngineerId": "customer-789"}]}

    def test_builder_with_pinned_table_ignores_swap(self, customer_options):
        builder = TenantFilterBuilder(table=DEFAULT_POLICY_TABLE)
        set_policy_table(self._owner_only_table(OwnershipField.USER_ID))
        where = builder.build(customer_options).to_where()
        assert {"customerId": "customer-789"} in where["OR"]


class TestBindingGuard:
    def test_predicate_not_bound_to_principal_is_rejected(self, customer_options):
        class ForeignScope(RoleScope):
            def bind(self, principal_id):
                return OrPredicate(
                    predicates=[FieldPredicate(field=OwnershipField.OWNER_ID, value="someone-else")]
                )

        scope = ForeignScope(rules=(ScopeRule(field=OwnershipField.OWNER_ID),))
        table = PolicyTable(
            policies={
                ResourceKind.PROJECT: ResourcePolicy(
                    kind=ResourceKind.PROJECT,
                    roles={role: scope for role in Role if role is not Role.UNKNOWN},
                    default=scope,
                )
            }
        )
        with pytest.raises(PolicyViolationError) as exc_info:
            TenantFilterBuilder(table=table).build(customer_options)
        assert exc_info.value.details["bound_values"] == ["someone-else"]
