# SPDX-FileCopyrightText: 2025 Roland Knall <rknall@gmail.com>
# SPDX-License-Identifier: GPL-2.0-only
"""Tests for the key registry."""

from permkeys.keys.base import AggregateModule, PermissionModule
from permkeys.keys.registry import KeyRegistry


class TestKeyRegistry:
    """Tests for KeyRegistry class."""

    def test_empty_registry(self):
        """Test a registry without modules."""
        registry = KeyRegistry()
        assert len(registry) == 0
        assert registry.emission_order() == []

    def test_register_splits_aggregates(self, registry):
        """Test that aggregates are kept apart from source modules."""
        assert [m.name for m in registry.modules] == ["Administration", "SupportedPerson"]
        assert [m.name for m in registry.aggregates] == ["Combined"]
        assert len(registry) == 3

    def test_emission_order_puts_aggregates_last(self, registry):
        """Test that aggregates follow all source modules."""
        order = [module.name for module in registry.emission_order()]
        assert order == ["Administration", "SupportedPerson", "Combined"]

    def test_emission_order_when_aggregate_registered_first(
        self, administration, supported_person, combined
    ):
        """Test that discovery order of aggregates does not matter."""
        registry = KeyRegistry([combined, supported_person, administration])
        order = [module.name for module in registry.emission_order()]
        assert order == ["SupportedPerson", "Administration", "Combined"]

    def test_multiple_aggregates_keep_discovery_order(self, administration):
        """Test that several aggregates keep their relative order."""
        second = AggregateModule(name="Second")
        first = AggregateModule(name="First")
        registry = KeyRegistry([second, administration, first])
        order = [module.name for module in registry.emission_order()]
        assert order == ["Administration", "Second", "First"]

    def test_resolve(self, registry):
        """Test resolving a reference to a source entry."""
        entry = registry.resolve("SupportedPerson", "Delete")
        assert entry is not None
        assert entry.value == "SupportedPerson:Delete"

    def test_resolve_missing(self, registry):
        """Test resolving unknown modules and members."""
        assert registry.resolve("SupportedPerson", "Archive") is None
        assert registry.resolve("Unknown", "Delete") is None

    def test_resolve_ignores_aggregates(self, registry):
        """Test that aggregate entries cannot be referenced."""
        assert registry.resolve("Combined", "RolesEdit") is None

    def test_all_values(self, registry):
        """Test the union of source module keys."""
        values = registry.all_values()
        assert "Administration:RolesEdit" in values
        assert "SupportedPerson:Edit" in values
        assert len(values) == 8

    def test_modules_view_is_a_copy(self):
        """Test that the returned list does not alter the registry."""
        registry = KeyRegistry([PermissionModule(name="Administration")])
        registry.modules.clear()
        assert len(registry.modules) == 1
