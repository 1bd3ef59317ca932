"""
Unit Tests for Template Compositer
==================================

Unit tests for document assembly, render ordering, error isolation and
post-processing.
"""

import pytest

from carousel_composer.core.composition.compositer import (
    CompositionError,
    TemplateCompositer,
    compose,
    get_compositer,
)
from carousel_composer.core.layout.stylesheet import is_safe_value
from carousel_composer.core.modules.registry import ModuleRegistry
from carousel_composer.models.schemas import (
    ComposeOptions,
    CompositionConfig,
    ModuleCategory,
    SpatialRule,
    WrapperConfig,
)

from tests.utils.assertions import (
    assert_balanced_markup,
    assert_in_order,
    assert_no_script_injection,
    assert_valid_document,
)
from tests.utils.data_generators import FakeModuleFactory
from tests.utils.mocks import RaisingModule, RecordingPostProcessor, UnsafeModule


@pytest.fixture
def fake_registry():
    """Registry of fake content and overlay modules."""
    return ModuleRegistry(
        [
            FakeModuleFactory.create("A", z_index=10),
            FakeModuleFactory.create("B", z_index=20),
            FakeModuleFactory.create("C", z_index=30),
            FakeModuleFactory.create("O", category=ModuleCategory.OVERLAY, z_index=50),
        ]
    )


class TestDocumentAssembly:
    """Test composition with the built-in modules."""

    @pytest.fixture
    def compositer(self):
        """Create compositer for the default registry."""
        return TemplateCompositer()

    def test_card_with_text(self, compositer, basic_slide_data):
        """Test a card wraps the text section."""
        result = compositer.compose(basic_slide_data["enabled_ids"], basic_slide_data["data_by_id"])

        assert_valid_document(result)
        assert result.viewport_width == 1080
        assert result.viewport_height == 1440
        assert '<div class="card-container">' in result.html
        assert '<div class="content-wrapper">' not in result.html
        assert_in_order(result.html, ['<div class="card-container">', "text-section", "world</span>"])
        assert "#ff0000" in result.html
        assert_balanced_markup(result.html)

    def test_without_card_uses_content_wrapper(self, compositer):
        """Test content falls back to the plain wrapper without a container."""
        result = compositer.compose(
            ["viewport", "textFields"],
            {"textFields": {"count": 1, "fields": [{"content": "Plain text"}]}},
        )

        assert '<div class="content-wrapper">' in result.html
        assert "card-container" not in result.html
        assert "Plain text" in result.html

    def test_disabled_card_is_not_a_container(self, compositer, basic_slide_data):
        """Test a card with enabled false neither styles nor wraps content."""
        data = dict(basic_slide_data["data_by_id"], card={"enabled": False})
        result = compositer.compose(basic_slide_data["enabled_ids"], data)

        assert '<div class="content-wrapper">' in result.html
        assert ".card-container {" not in result.css

    def test_default_order_is_z_index_ascending(self, compositer, basic_slide_data):
        """Test stylesheet sections follow z-index regardless of enable order."""
        result = compositer.compose(
            ["textFields", "card", "viewport"], basic_slide_data["data_by_id"]
        )

        assert_in_order(
            result.css,
            ["/* === Viewport === */", "/* === Card === */", "/* === Text Fields === */"],
        )

    def test_viewport_background(self, compositer, basic_slide_data):
        """Test the viewport background color reaches the stylesheet."""
        result = compositer.compose(basic_slide_data["enabled_ids"], basic_slide_data["data_by_id"])

        assert "#101010" in result.css

    def test_instance_sections_are_labelled(self, compositer):
        """Test instances get their own labelled stylesheet section."""
        result = compositer.compose(
            ["freeText", "freeText#2"],
            {"freeText": {"content": "first"}, "freeText#2": {"content": "second"}},
        )

        assert "/* === Free Text === */" in result.css
        assert "/* === Free Text (freeText#2) === */" in result.css
        assert "first" in result.html
        assert "second" in result.html

    def test_unknown_ids_are_skipped(self, compositer, basic_slide_data):
        """Test ids missing from the registry do not break composition."""
        result = compositer.compose(
            ["viewport", "ghost", "card", "textFields"], basic_slide_data["data_by_id"]
        )

        assert_valid_document(result)
        assert "ghost" not in result.document

    def test_missing_data_uses_defaults(self, compositer):
        """Test modules without data render from their defaults."""
        result = compositer.compose(["viewport", "card"])

        assert_valid_document(result)
        assert ".card-container {" in result.css

    def test_slide_count_widens_viewport(self, compositer, basic_slide_data):
        """Test the viewport spans every slide."""
        result = compositer.compose(
            basic_slide_data["enabled_ids"],
            basic_slide_data["data_by_id"],
            ComposeOptions(slide_count=3),
        )

        assert result.viewport_width == 3240
        assert "width: 3240px;" in result.document

    def test_slide_count_above_maximum_rejected(self, compositer, test_settings):
        """Test too many slides is a malformed request."""
        with pytest.raises(CompositionError, match="exceeds maximum"):
            compositer.compose(
                ["viewport"], options=ComposeOptions(slide_count=test_settings.max_slide_count + 1)
            )

    def test_string_enabled_ids_rejected(self, compositer):
        """Test a bare string is not accepted as the id list."""
        with pytest.raises(CompositionError):
            compositer.compose("viewport")

    def test_composition_is_deterministic(self, compositer, basic_slide_data):
        """Test identical inputs compose identical documents."""
        first = compositer.compose(basic_slide_data["enabled_ids"], basic_slide_data["data_by_id"])
        second = compositer.compose(basic_slide_data["enabled_ids"], basic_slide_data["data_by_id"])

        assert first.document == second.document

    def test_text_is_escaped(self, compositer):
        """Test markup in module text never reaches the document unescaped."""
        result = compositer.compose(
            ["textFields"],
            {"textFields": {"count": 1, "fields": [{"content": "<script>alert(1)</script>"}]}},
        )

        assert "&lt;script&gt;" in result.html
        assert_no_script_injection(result.html)


class TestDuoComposition:
    """Test the two-slide post-processing."""

    @pytest.fixture
    def compositer(self):
        """Create compositer for the default registry."""
        return TemplateCompositer()

    def test_active_duo_doubles_viewport(self, compositer, basic_slide_data):
        """Test an active duo module renders two copies side by side."""
        data = dict(basic_slide_data["data_by_id"], duo={"enabled": True})
        result = compositer.compose(basic_slide_data["enabled_ids"] + ["duo"], data)

        assert result.viewport_width == 2160
        assert '<div class="duo-wrapper">' in result.document
        assert_in_order(result.document, ["duo-slide-1", "text-item-1", "duo-slide-2", "text-item-1"])
        assert result.document.count("text-item text-item-1") == 2

    def test_inactive_duo_changes_nothing(self, compositer, basic_slide_data):
        """Test an enabled but inactive duo module leaves the document alone."""
        result = compositer.compose(
            basic_slide_data["enabled_ids"] + ["duo"], basic_slide_data["data_by_id"]
        )

        assert result.viewport_width == 1080
        assert "duo-wrapper" not in result.document


class TestCompositionConfig:
    """Test explicit render order, spatial rules and z-index overrides."""

    def test_explicit_render_order(self, fake_registry):
        """Test an explicit order replaces the z-index order."""
        compositer = TemplateCompositer(registry=fake_registry)
        result = compositer.compose(
            ["A", "B"], options=ComposeOptions(composition_config=CompositionConfig(render_order=["B", "A"]))
        )

        assert_in_order(result.html, ['class="fake-b"', 'class="fake-a"'])

    def test_enabled_modules_missing_from_order_are_appended(self, fake_registry):
        """Test modules left out of an explicit order follow in default order."""
        compositer = TemplateCompositer(registry=fake_registry)
        result = compositer.compose(
            ["C", "A", "B"], options=ComposeOptions(composition_config=CompositionConfig(render_order=["B"]))
        )

        assert_in_order(result.html, ['class="fake-b"', 'class="fake-a"', 'class="fake-c"'])

    def test_spatial_rule_moves_module(self, fake_registry):
        """Test spatial rules reorder the default order."""
        compositer = TemplateCompositer(registry=fake_registry)
        config = CompositionConfig(
            spatial_rules=[SpatialRule(id="r1", type="before", target="C", reference="A")]
        )
        result = compositer.compose(["A", "B", "C"], options=ComposeOptions(composition_config=config))

        assert_in_order(result.html, ['class="fake-c"', 'class="fake-a"', 'class="fake-b"'])

    def test_overlay_follows_content(self, fake_registry):
        """Test overlay markup is placed after content regardless of order."""
        compositer = TemplateCompositer(registry=fake_registry)
        result = compositer.compose(
            ["O", "A"], options=ComposeOptions(composition_config=CompositionConfig(render_order=["O", "A"]))
        )

        assert_in_order(result.html, ['class="fake-a"', 'class="fake-o"'])

    def test_wrap_rule(self):
        """Test wrap rules surround the target markup."""
        config = CompositionConfig(
            spatial_rules=[
                SpatialRule(
                    id="w",
                    type="wrap",
                    target="freeText",
                    wrapper=WrapperConfig(tag="section", class_name="highlight"),
                )
            ]
        )
        result = TemplateCompositer().compose(
            ["freeText"], {"freeText": {"content": "wrapped"}}, ComposeOptions(composition_config=config)
        )

        assert_in_order(result.html, ['<section class="highlight">', "wrapped", "</section>"])

    def test_z_index_override(self, basic_slide_data):
        """Test overrides rewrite the module layer rule."""
        config = CompositionConfig(z_index_overrides={"textFields": 77})
        result = TemplateCompositer().compose(
            basic_slide_data["enabled_ids"],
            basic_slide_data["data_by_id"],
            ComposeOptions(composition_config=config),
        )

        assert "z-index: 77;" in result.css
        assert "z-index: 10;" not in result.css


class TestModuleIsolation:
    """Test failing and unsafe modules."""

    def test_failing_module_is_skipped(self):
        """Test a raising module contributes nothing and composition completes."""
        registry = ModuleRegistry([FakeModuleFactory.create("A"), RaisingModule()])
        result = TemplateCompositer(registry=registry).compose(["A", "broken"])

        assert_valid_document(result)
        assert 'class="fake-a"' in result.html
        assert "Broken" not in result.css

    def test_unsafe_declarations_and_variables_dropped(self):
        """Test unsafe CSS values and variables never reach the document."""
        registry = ModuleRegistry([UnsafeModule()])
        result = TemplateCompositer(registry=registry).compose(["unsafe"])

        assert "color: red;" in result.css
        assert "z-index: 40;" in result.css
        assert "display: none" not in result.document
        assert "expression(" not in result.document
        assert result.variables == {"unsafe-ok": "12px"}
        assert "--unsafe-ok: 12px;" in result.document

    @pytest.mark.parametrize("bad_data", [["not", "a", "dict"], "text", 42])
    def test_unusable_module_data_falls_back_to_defaults(self, bad_data):
        """Test data that is not a mapping renders the module from its defaults."""
        result = TemplateCompositer().compose(
            ["viewport", "textFields"],
            {"viewport": bad_data, "textFields": {"count": 1, "fields": [{"content": "Still here"}]}},
        )

        assert_valid_document(result)
        assert "/* === Viewport === */" in result.css
        assert "#ffffff" in result.css
        assert "Still here" in result.html

    def test_unusable_duo_data_keeps_single_column(self, basic_slide_data):
        """Test a module whose data cannot be resolved does not widen the viewport."""
        data = dict(basic_slide_data["data_by_id"], duo=["broken"])
        result = TemplateCompositer().compose(basic_slide_data["enabled_ids"] + ["duo"], data)

        assert_valid_document(result)
        assert result.viewport_width == 1080

    def test_data_uri_background_is_kept(self):
        """Test an inline image background survives the stylesheet checks."""
        uri = "data:image/png;base64,iVBORw0KGgo="
        result = TemplateCompositer().compose(
            ["viewport"], {"viewport": {"backgroundType": "image", "backgroundImage": uri}}
        )

        assert f'background-image: url("{uri}");' in result.css

    def test_url_token_does_not_hide_trailing_declarations(self):
        """Test only the quoted url payload is exempt from the value checks."""
        assert is_safe_value('url("data:image/png;base64,AAAA")')
        assert not is_safe_value('url("data:image/png;base64,AAAA"); color: red')
        assert not is_safe_value('url("javascript:alert;1")')

    def test_post_processor_runs_on_full_document(self):
        """Test post-processing sees the assembled document."""
        recorder = RecordingPostProcessor()
        registry = ModuleRegistry([FakeModuleFactory.create("A"), recorder])
        result = TemplateCompositer(registry=registry).compose(["A", "recorder"])

        assert recorder.calls == ["recorder"]
        assert_in_order(result.document, ['class="fake-a"', "<!-- recorded -->", "</body>"])
        assert "<!-- recorded -->" not in result.html

    def test_post_processor_not_run_when_disabled(self):
        """Test post-processing only runs for enabled modules."""
        recorder = RecordingPostProcessor()
        registry = ModuleRegistry([FakeModuleFactory.create("A"), recorder])
        TemplateCompositer(registry=registry).compose(["A"])

        assert recorder.calls == []


class TestConvenienceFunctions:
    """Test module-level helpers."""

    def test_shared_compositer(self):
        """Test the shared compositer is reused."""
        assert get_compositer() is get_compositer()

    def test_compose(self, basic_slide_data):
        """Test compose uses the default registry."""
        result = compose(basic_slide_data["enabled_ids"], basic_slide_data["data_by_id"])

        assert_valid_document(result)
        assert "card-container" in result.html
