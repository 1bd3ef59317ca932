"""
Unit Tests for Module Registry
==============================

Unit tests for instance ids, registry lookup, dependency and conflict gating.
"""

import pytest

from carousel_composer.core.modules.instances import (
    create_instance_id,
    get_base_id,
    get_instances,
    instance_number,
    is_instance_id,
    next_instance_number,
    parse_instance_id,
)
from carousel_composer.core.modules.registry import ModuleNotFoundInRegistryError, ModuleRegistry
from carousel_composer.models.schemas import ModuleCategory

from tests.utils.assertions import assert_rejected, assert_valid_result
from tests.utils.data_generators import FakeModuleFactory


class TestInstanceIds:
    """Test composite instance id handling."""

    @pytest.mark.parametrize(
        "module_id,expected",
        [
            ("textFields", ("textFields", None)),
            ("textFields#2", ("textFields", 2)),
            ("textFields#12", ("textFields", 12)),
            ("textFields#0", ("textFields#0", None)),
            ("textFields#", ("textFields#", None)),
        ],
    )
    def test_parse_instance_id(self, module_id, expected):
        """Test ids split into base and instance number."""
        assert parse_instance_id(module_id) == expected

    def test_base_id_and_number(self):
        """Test helpers derived from parsing."""
        assert get_base_id("freeText#3") == "freeText"
        assert instance_number("freeText") == 1
        assert instance_number("freeText#3") == 3
        assert is_instance_id("freeText#3") is True
        assert is_instance_id("freeText") is False

    def test_create_instance_id(self):
        """Test instance 1 is the bare base id."""
        assert create_instance_id("freeText", 1) == "freeText"
        assert create_instance_id("freeText", 2) == "freeText#2"
        with pytest.raises(ValueError):
            create_instance_id("freeText", 0)

    def test_instances_and_next_number(self):
        """Test instance listing and the next free number."""
        enabled = ["card", "freeText", "freeText#3", "textFields"]

        assert get_instances("freeText", enabled) == ["freeText", "freeText#3"]
        assert next_instance_number("freeText", enabled) == 2
        assert next_instance_number("logo", enabled) == 1


class TestRegistryLookup:
    """Test the immutable lookup table."""

    def test_builtin_modules_registered(self, registry):
        """Test the default registry holds every built-in module."""
        expected = {
            "viewport", "card", "contentImage", "textFields", "bullets",
            "freeText", "logo", "corners", "duo",
            "imageTextBox", "arrowBottomText", "svgElements",
        }
        assert set(registry.modules) == expected

    def test_instance_ids_resolve_to_base(self, registry):
        """Test instance ids look up their base module."""
        assert registry.get("textFields#2") is registry.get("textFields")
        assert "textFields#2" in registry
        assert "unknown" not in registry

    def test_require_unknown_raises(self, registry):
        """Test require raises for unregistered ids."""
        with pytest.raises(ModuleNotFoundInRegistryError):
            registry.require("unknown")

    def test_table_is_read_only(self, registry):
        """Test the module table cannot be mutated."""
        with pytest.raises(TypeError):
            registry.modules["extra"] = registry.get("card")

    def test_duplicate_ids_rejected(self):
        """Test registering the same id twice fails."""
        with pytest.raises(ValueError, match="Duplicate module id"):
            ModuleRegistry([FakeModuleFactory.create("A"), FakeModuleFactory.create("A")])

    def test_list_by_category(self, registry):
        """Test category filtering."""
        layout_ids = {module.id for module in registry.list_by_category(ModuleCategory.LAYOUT)}

        assert layout_ids == {"viewport", "card"}

    def test_sort_by_z_index_is_stable(self):
        """Test ties keep their input order."""
        registry = ModuleRegistry(
            [
                FakeModuleFactory.create("low", z_index=1),
                FakeModuleFactory.create("x", z_index=5),
                FakeModuleFactory.create("y", z_index=5),
            ]
        )

        assert registry.sort_by_z_index(["y", "x", "low"]) == ["low", "y", "x"]
        assert registry.sort_by_z_index(["x", "y", "low"]) == ["low", "x", "y"]


class TestDependencyGating:
    """Test enable and disable gating."""

    def test_disable_required_module_rejected(self, dependency_registry):
        """Test a module cannot be disabled while a dependant is enabled."""
        enabled = ["A", "B"]
        result = dependency_registry.check_disable("A", enabled)

        assert_rejected(result, "required by B")
        assert enabled == ["A", "B"]

    def test_disable_without_dependants(self, dependency_registry):
        """Test disabling a leaf module is allowed."""
        assert_valid_result(dependency_registry.check_disable("B", ["A", "B"]))

    def test_disable_not_enabled(self, dependency_registry):
        """Test disabling a module that is not enabled is rejected."""
        assert_rejected(dependency_registry.check_disable("A", ["B"]), "not enabled")

    def test_enable_missing_dependency(self, dependency_registry):
        """Test enabling requires the dependencies to be present."""
        assert_rejected(dependency_registry.check_enable("B", []), "missing dependencies (A)")
        assert_valid_result(dependency_registry.check_enable("B", ["A"]))

    def test_enable_conflict_either_direction(self, dependency_registry):
        """Test conflicts declared by either module block enabling."""
        assert_rejected(dependency_registry.check_enable("C", ["A"]), "conflicts with (A)")
        assert_rejected(dependency_registry.check_enable("A", ["C"]), "conflicts with (C)")

    def test_enable_unknown_and_duplicate(self, dependency_registry):
        """Test unknown and already enabled ids are rejected."""
        assert_rejected(dependency_registry.check_enable("Z", []), "unknown module")
        assert_rejected(dependency_registry.check_enable("A", ["A"]), "already enabled")

    def test_multiple_instances_gating(self, dependency_registry):
        """Test only multi-instance modules accept instance ids."""
        assert_valid_result(dependency_registry.check_enable("M#2", ["M"]))
        assert_rejected(
            dependency_registry.check_enable("A#2", ["A"]), "does not allow multiple instances"
        )

    def test_dependency_satisfied_by_instance(self):
        """Test any instance of a dependency satisfies it."""
        registry = ModuleRegistry(
            [
                FakeModuleFactory.create("M", allow_multiple_instances=True),
                FakeModuleFactory.create("D", dependencies={"M"}),
            ]
        )

        assert_valid_result(registry.check_enable("D", ["M#2"]))
        assert_valid_result(registry.check_disable("M", ["M", "M#2", "D"]))
        assert_rejected(registry.check_disable("M#2", ["M#2", "D"]), "required by D")

    def test_validate_combination(self, dependency_registry):
        """Test whole-set validation reports every problem."""
        result = dependency_registry.validate_combination(["B", "C", "Z"])

        assert result.valid is False
        assert any('"Fake B" requires: A' in error for error in result.errors)
        assert any('Unknown module "Z"' in error for error in result.errors)

    def test_validate_combination_instances_and_conflicts(self, dependency_registry):
        """Test instance and conflict problems are reported."""
        result = dependency_registry.validate_combination(["A", "A#2", "C"])

        assert result.valid is False
        assert any("does not allow multiple instances" in error for error in result.errors)
        assert any('"Fake C" conflicts with: A, A#2' in error for error in result.errors)

    def test_validate_combination_valid(self, dependency_registry):
        """Test a consistent set validates."""
        assert_valid_result(dependency_registry.validate_combination(["A", "B", "M", "M#2"]))
