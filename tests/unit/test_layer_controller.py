"""
Unit Tests for Layer Controller
===============================

Unit tests for z-index resolution and stylesheet overrides.
"""

import pytest

from carousel_composer.core.layout.layer_controller import LayerController
from carousel_composer.core.layout.stylesheet import CSSRule, Stylesheet
from carousel_composer.core.modules.registry import ModuleRegistry

from tests.utils.data_generators import FakeModuleFactory


@pytest.fixture
def layer_registry():
    """Registry with three fake modules at different heights."""
    return ModuleRegistry(
        [
            FakeModuleFactory.create("bg", z_index=0),
            FakeModuleFactory.create("text", z_index=10),
            FakeModuleFactory.create("badge", z_index=30),
        ]
    )


def _sheet_with_z_index(z_index=10):
    return (
        Stylesheet()
        .add(".text", {"position": "relative", "z-index": z_index})
        .add(".text .item", {"color": "red", "z-index": 2}, layer=False)
    )


class TestZIndexResolution:
    """Test effective z-index lookup."""

    def test_default_and_override(self, layer_registry):
        """Test overrides win over module defaults."""
        layers = LayerController({"text": 50}, registry=layer_registry)

        assert layers.get_z_index("bg") == 0
        assert layers.get_z_index("text") == 50
        assert layers.get_default_z_index("text") == 10
        assert layers.has_override("text") is True
        assert layers.get_z_index("unknown") == 0

    def test_instances_use_base_default(self, layer_registry):
        """Test instance ids inherit the base module z-index."""
        layers = LayerController(registry=layer_registry)

        assert layers.get_z_index("text#2") == 10

    def test_set_and_clear_override(self, layer_registry):
        """Test overrides can be changed at runtime."""
        layers = LayerController(registry=layer_registry)
        layers.set_override("bg", 99)
        assert layers.get_z_index("bg") == 99

        layers.clear_override("bg")
        assert layers.get_z_index("bg") == 0

    def test_move_to_top_and_bottom(self, layer_registry, test_settings):
        """Test moving modules past the current extremes."""
        layers = LayerController(registry=layer_registry)
        ids = ["bg", "text", "badge"]

        assert layers.move_to_top("bg", ids) == 30 + test_settings.layer_step
        assert layers.move_to_bottom("badge", ids) == 10 - test_settings.layer_step
        assert layers.sorted_by_z_index(ids) == ["badge", "text", "bg"]


class TestApplyOverride:
    """Test stylesheet rewriting."""

    def test_override_replaces_layer_rule_only(self, layer_registry):
        """Test only z-index on layer rules changes."""
        layers = LayerController({"text": 77}, registry=layer_registry)
        sheet = _sheet_with_z_index()

        result = layers.apply_override("text", None, sheet)

        assert result.rules[0].get("z-index").value == "77"
        assert result.rules[0].get("position").value == "relative"
        assert result.rules[1].get("z-index").value == "2"

    def test_original_stylesheet_untouched(self, layer_registry):
        """Test overriding returns a new stylesheet."""
        layers = LayerController({"text": 77}, registry=layer_registry)
        sheet = _sheet_with_z_index()

        layers.apply_override("text", None, sheet)

        assert sheet.rules[0].get("z-index").value == "10"

    def test_explicit_value(self, layer_registry):
        """Test an explicit z-index ignores the override table."""
        layers = LayerController(registry=layer_registry)

        result = layers.apply_override("text", 5, _sheet_with_z_index())

        assert "z-index: 5;" in result.render()

    def test_no_override_is_identity(self, layer_registry):
        """Test stylesheets pass through when no override exists."""
        layers = LayerController(registry=layer_registry)
        sheet = _sheet_with_z_index()

        assert layers.apply_override("text", None, sheet) is sheet

    def test_missing_declaration_not_injected_by_default(self, layer_registry):
        """Test stylesheets without z-index are left alone by default."""
        layers = LayerController({"text": 77}, registry=layer_registry, force_inject=False)
        sheet = Stylesheet().add(".text", {"color": "red"})

        result = layers.apply_override("text", None, sheet)

        assert result is sheet
        assert "z-index" not in result.render()

    def test_missing_declaration_injected_when_forced(self, layer_registry):
        """Test forced injection adds z-index to the first layer rule."""
        layers = LayerController({"text": 77}, registry=layer_registry, force_inject=True)
        sheet = (
            Stylesheet()
            .add(".text .item", {"color": "red"}, layer=False)
            .add(".text", {"color": "blue"})
        )

        result = layers.apply_override("text", None, sheet)

        assert result.rules[0].get("z-index") is None
        assert result.rules[1].get("z-index").value == "77"

    def test_forced_injection_needs_layer_rule(self, layer_registry):
        """Test nothing is injected when the module has no layer rule."""
        layers = LayerController({"text": 77}, registry=layer_registry, force_inject=True)
        sheet = Stylesheet(rules=[CSSRule(selector=".x", layer=False)])

        assert layers.apply_override("text", None, sheet) is sheet

    def test_force_injection_follows_settings(self, layer_registry, test_settings):
        """Test the injection flag defaults to the configured setting."""
        layers = LayerController(registry=layer_registry)

        assert layers.force_inject is test_settings.force_z_index_injection
