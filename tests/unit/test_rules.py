"""
Unit tests for the shared rule primitives.
"""

import pytest
from unittest.mock import MagicMock

from shared.rules import all_granted, any_granted, is_member


class TestRules:
    """Test cases for is_member, all_granted and any_granted."""

    @pytest.mark.parametrize("value,collection,expected", [
        ("S001", {"S001", "S002"}, True),
        ("S003", {"S001", "S002"}, False),
        (None, {"S001"}, False),
        ("S001", None, False),
        ("S001", frozenset(), False),
    ])
    def test_is_member(self, value, collection, expected):
        assert is_member(value, collection) is expected

    def test_all_granted_stops_at_first_denial(self):
        lookup = MagicMock(side_effect=[False, True])

        assert all_granted(["a", "b"], lookup) is False
        lookup.assert_called_once_with("a")

    def test_any_granted_stops_at_first_grant(self):
        lookup = MagicMock(side_effect=[True, False])

        assert any_granted(["a", "b"], lookup) is True
        lookup.assert_called_once_with("a")

    def test_empty_key_sets(self):
        lookup = MagicMock()

        assert all_granted([], lookup) is True
        assert any_granted([], lookup) is False
        lookup.assert_not_called()

    def test_lookup_errors_are_not_caught(self):
        lookup = MagicMock(side_effect=KeyError("payroll.view"))

        with pytest.raises(KeyError):
            any_granted(["payroll.view"], lookup)
