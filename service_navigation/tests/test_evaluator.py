"""
Unit tests for the navigation AccessEvaluator.
"""

import pytest
from unittest.mock import MagicMock

from service_navigation.app.access.evaluator import AccessEvaluator
from service_navigation.app.access.models import (
    NavigationItem, NavigationSection, Permission, Role, User
)
from service_navigation.app.access.permissions import ClinicMembership


def lookup_from(granted):
    """Permission lookup granting exactly ``granted``."""
    return MagicMock(side_effect=lambda key: key in granted)


class TestAccessEvaluator:
    """Test cases for AccessEvaluator."""

    @pytest.fixture
    def receptionist(self):
        return User(id="user-1", role=Role.RECEPTIONIST)

    @pytest.fixture
    def appointments_item(self):
        return NavigationItem(
            href="/dashboard/appointments",
            name="Appointments",
            required_permission=Permission.APPOINTMENTS_VIEW
        )

    @pytest.fixture
    def billing_item(self):
        return NavigationItem(
            href="/dashboard/billing",
            name="Billing",
            required_permissions=[Permission.INVOICES_VIEW, Permission.PAYMENTS_VIEW],
            requires_any=True
        )

    @pytest.fixture
    def reports_item(self):
        return NavigationItem(
            href="/dashboard/reports",
            name="Reports",
            required_permissions=[Permission.ANALYTICS_REPORTS, Permission.ANALYTICS_DASHBOARD]
        )

    @pytest.mark.parametrize("role", [Role.SUPER_ADMIN, Role.ADMIN])
    def test_bypass_roles_see_everything(self, role, appointments_item, billing_item, reports_item):
        """Bypass roles never consult the permission lookup."""
        lookup = lookup_from(set())
        evaluator = AccessEvaluator(lookup)
        user = User(id="boss", role=role)

        for item in (appointments_item, billing_item, reports_item):
            assert evaluator.can_access(user, item) is True

        lookup.assert_not_called()
        assert evaluator.is_bypass(user) is True

    def test_landing_route_open_to_everyone(self, receptionist):
        """The landing route ignores its declared permission."""
        evaluator = AccessEvaluator(lookup_from(set()))
        item = NavigationItem(
            href="/dashboard",
            name="Dashboard",
            required_permission=Permission.SETTINGS_VIEW
        )

        assert evaluator.can_access(receptionist, item) is True

    def test_single_permission_granted(self, receptionist, appointments_item):
        """Receptionist with appointments.view sees appointments."""
        evaluator = AccessEvaluator(lookup_from({"appointments.view"}))

        assert evaluator.can_access(receptionist, appointments_item) is True

    def test_single_permission_denied(self, receptionist, appointments_item):
        evaluator = AccessEvaluator(lookup_from({"patients.view"}))

        assert evaluator.can_access(receptionist, appointments_item) is False

    def test_any_permission_one_granted(self, receptionist, billing_item):
        """OR over the set: payments.view alone is enough."""
        evaluator = AccessEvaluator(lookup_from({"payments.view"}))

        assert evaluator.can_access(receptionist, billing_item) is True

    def test_any_permission_none_granted(self, receptionist, billing_item):
        evaluator = AccessEvaluator(lookup_from({"appointments.view"}))

        assert evaluator.can_access(receptionist, billing_item) is False

    def test_any_permission_short_circuits(self, receptionist, billing_item):
        """The second key is not looked up once the first grants."""
        lookup = lookup_from({"invoices.view"})
        evaluator = AccessEvaluator(lookup)

        evaluator.can_access(receptionist, billing_item)

        lookup.assert_called_once_with("invoices.view")

    def test_all_permissions_required(self, receptionist, reports_item):
        """AND over the set when requires_any is false."""
        partial = AccessEvaluator(lookup_from({"analytics.reports"}))
        full = AccessEvaluator(lookup_from({"analytics.reports", "analytics.dashboard"}))

        assert partial.can_access(receptionist, reports_item) is False
        assert full.can_access(receptionist, reports_item) is True

    def test_ungated_item_allowed(self, receptionist):
        """Items declaring no permission are allowed."""
        evaluator = AccessEvaluator(lookup_from(set()))
        item = NavigationItem(href="/dashboard/help", name="Help")

        assert item.is_ungated
        assert evaluator.can_access(receptionist, item) is True

    def test_lookup_errors_propagate(self, receptionist, appointments_item):
        """A failing lookup is not turned into a decision."""
        lookup = MagicMock(side_effect=RuntimeError("permission service down"))
        evaluator = AccessEvaluator(lookup)

        with pytest.raises(RuntimeError, match="permission service down"):
            evaluator.can_access(receptionist, appointments_item)

    def test_missing_user_rejected(self, appointments_item):
        evaluator = AccessEvaluator(lookup_from(set()))

        with pytest.raises(ValueError):
            evaluator.can_access(None, appointments_item)

    def test_repeated_checks_are_stable(self, receptionist, billing_item):
        evaluator = AccessEvaluator(lookup_from({"payments.view"}))

        results = {evaluator.can_access(receptionist, billing_item) for _ in range(5)}

        assert results == {True}

    def test_custom_bypass_roles(self, appointments_item):
        evaluator = AccessEvaluator(lookup_from(set()), bypass_roles=["super_admin"])

        assert evaluator.can_access(User(id="a", role=Role.ADMIN), appointments_item) is False
        assert evaluator.can_access(User(id="s", role=Role.SUPER_ADMIN), appointments_item) is True


class TestSectionFiltering:
    """Test cases for filter_section and filter_navigation."""

    @pytest.fixture
    def finance_section(self):
        return NavigationSection(
            title="Finance",
            items=[
                NavigationItem(href="/dashboard/invoices", name="Invoices",
                               required_permission=Permission.INVOICES_VIEW),
                NavigationItem(href="/dashboard/payments", name="Payments",
                               required_permission=Permission.PAYMENTS_VIEW),
                NavigationItem(href="/dashboard/expenses", name="Expenses",
                               required_permission=Permission.EXPENSES_VIEW),
            ],
            default_collapsed=True
        )

    @pytest.fixture
    def nurse(self):
        return User(id="nurse-1", role=Role.NURSE)

    def test_section_hidden_when_nothing_accessible(self, nurse, finance_section):
        evaluator = AccessEvaluator(lookup_from({"patients.view"}))

        assert evaluator.filter_section(nurse, finance_section) is None

    def test_section_keeps_accessible_items_in_order(self, nurse, finance_section):
        evaluator = AccessEvaluator(lookup_from({"expenses.view", "invoices.view"}))

        filtered = evaluator.filter_section(nurse, finance_section)

        assert [i.href for i in filtered.items] == ["/dashboard/invoices", "/dashboard/expenses"]
        assert filtered.title == "Finance"
        assert filtered.default_collapsed is True
        # Input is left as declared
        assert len(finance_section.items) == 3

    def test_filter_navigation_drops_empty_sections(self, nurse, finance_section):
        clinical = NavigationSection(
            title="Clinical",
            items=[NavigationItem(href="/dashboard/patients", name="Patients",
                                  required_permission=Permission.PATIENTS_VIEW)]
        )
        evaluator = AccessEvaluator(lookup_from({"patients.view"}))

        sections = evaluator.filter_navigation(nurse, [finance_section, clinical])

        assert [s.title for s in sections] == ["Clinical"]


class TestRoutes:
    """Test cases for route matching and role guards."""

    @pytest.fixture
    def evaluator(self):
        return AccessEvaluator(lookup_from(set()))

    def test_landing_route_matches_exactly(self, evaluator):
        assert evaluator.is_route_active("/dashboard", "/dashboard") is True
        assert evaluator.is_route_active("/dashboard", "/dashboard/patients") is False

    def test_other_routes_match_by_prefix(self, evaluator):
        assert evaluator.is_route_active("/dashboard/patients", "/dashboard/patients/42") is True
        assert evaluator.is_route_active("/dashboard/patients", "/dashboard/invoices") is False

    def test_can_enter_route(self, evaluator):
        doctor = User(id="d", role=Role.DOCTOR)
        admin = User(id="a", role=Role.ADMIN)

        assert evaluator.can_enter_route(doctor) is True
        assert evaluator.can_enter_route(doctor, Role.DOCTOR) is True
        assert evaluator.can_enter_route(doctor, "accountant") is False
        assert evaluator.can_enter_route(admin, Role.ACCOUNTANT) is True


class TestClinicMembership:
    """Test cases for the clinic-scoped permission lookup."""

    def test_granted_keys(self):
        user = User(id="u", role=Role.RECEPTIONIST)
        membership = ClinicMembership.from_keys(user, permissions=["appointments.view"])

        assert membership.has_permission("appointments.view") is True
        assert membership.has_permission(Permission.APPOINTMENTS_VIEW) is True
        assert membership.has_permission("invoices.view") is False

    def test_super_admin_clinic_role_grants_everything(self):
        user = User(id="u", role=Role.STAFF)
        membership = ClinicMembership.from_keys(user, role=Role.SUPER_ADMIN)

        assert membership.has_permission("payroll.view") is True
        assert membership.has_role(Role.NURSE) is True

    def test_has_role(self):
        user = User(id="u", role=Role.STAFF)
        membership = ClinicMembership.from_keys(user, role=Role.DOCTOR)

        assert membership.has_role([Role.DOCTOR, Role.NURSE]) is True
        assert membership.has_role("nurse") is False

    def test_membership_drives_evaluator(self):
        """Scenario: receptionist with payments.view but not invoices.view sees billing."""
        user = User(id="u", role=Role.RECEPTIONIST)
        membership = ClinicMembership.from_keys(
            user, permissions=["appointments.view", "payments.view"]
        )
        evaluator = AccessEvaluator(membership.has_permission)
        billing = NavigationItem(
            href="/dashboard/billing",
            name="Billing",
            required_permissions=["invoices.view", "payments.view"],
            requires_any=True
        )

        assert evaluator.can_access(user, billing) is True
