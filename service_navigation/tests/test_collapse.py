"""
Unit tests for section collapse state.
"""

import pytest
from unittest.mock import MagicMock

from service_navigation.app.access.collapse import SectionCollapseState
from service_navigation.app.access.evaluator import AccessEvaluator
from service_navigation.app.access.models import (
    NavigationItem, NavigationSection, Permission, Role, User
)


@pytest.fixture
def staff_section():
    return NavigationSection(
        title="Staff",
        items=[
            NavigationItem(href="/dashboard/staff", name="Staff",
                           required_permission=Permission.USERS_VIEW),
            NavigationItem(href="/dashboard/payroll", name="Payroll",
                           required_permission=Permission.PAYROLL_VIEW),
        ],
        default_collapsed=True
    )


@pytest.fixture
def user():
    return User(id="user-7", role=Role.STAFF)


@pytest.fixture
def evaluator():
    return AccessEvaluator(MagicMock(side_effect=lambda key: key == "users.view"))


class TestSectionCollapseState:
    """Test cases for SectionCollapseState."""

    def test_default_collapsed_applies_without_preference(self, evaluator, staff_section):
        state = SectionCollapseState(evaluator)

        assert state.is_collapsed(staff_section) is True

    def test_preference_overrides_default(self, evaluator, staff_section):
        state = SectionCollapseState(evaluator, {"Staff": False})

        assert state.is_collapsed(staff_section) is False

    def test_non_collapsible_never_collapsed(self, evaluator):
        section = NavigationSection(title="Pinned", collapsible=False, default_collapsed=True)
        state = SectionCollapseState(evaluator, {"Pinned": True})

        assert state.is_collapsed(section) is False

    def test_toggle_flips_effective_state(self, evaluator, staff_section):
        state = SectionCollapseState(evaluator)

        assert state.toggle(staff_section) is False
        assert state.toggle(staff_section) is True
        assert state.preferences == {"Staff": True}

    def test_auto_expand_on_accessible_active_item(self, evaluator, user, staff_section):
        state = SectionCollapseState(evaluator)

        expanded = state.auto_expand_if_active(
            user, staff_section, evaluator.route_matcher("/dashboard/staff/12")
        )

        assert expanded is True
        assert state.is_collapsed(staff_section) is False

    def test_inaccessible_active_item_does_not_expand(self, evaluator, user, staff_section):
        """Payroll is current but not visible to the user."""
        state = SectionCollapseState(evaluator)

        expanded = state.auto_expand_if_active(
            user, staff_section, evaluator.route_matcher("/dashboard/payroll")
        )

        assert expanded is False
        assert state.is_collapsed(staff_section) is True

    def test_auto_expand_never_collapses(self, evaluator, user, staff_section):
        state = SectionCollapseState(evaluator, {"Staff": False})

        expanded = state.auto_expand_if_active(
            user, staff_section, evaluator.route_matcher("/dashboard/invoices")
        )

        assert expanded is False
        assert state.preferences == {"Staff": False}

    def test_preferences_are_copied(self, evaluator, staff_section):
        saved = {"Staff": True}
        state = SectionCollapseState(evaluator, saved)

        state.toggle(staff_section)

        assert saved == {"Staff": True}
