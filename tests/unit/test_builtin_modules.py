"""
Unit Tests for Built-in Modules
===============================

Unit tests for module defaults, the image text box, the arrow caption and the
SVG element overlay.
"""

import pytest

from carousel_composer.core.composition.compositer import TemplateCompositer
from carousel_composer.core.modules.builtin import (
    BUILTIN_MODULES,
    ArrowBottomTextModule,
    ImageTextBoxModule,
    SvgElementsModule,
)
from carousel_composer.core.modules.builtin.common import color_filter
from carousel_composer.models.schemas import RenderContext

from tests.utils.assertions import assert_balanced_markup, assert_valid_document


@pytest.fixture
def ctx():
    """Render context for a single slide."""
    return RenderContext(base_url="http://assets.local")


class TestModuleDefaults:
    """Test every built-in module against its own schema."""

    @pytest.mark.parametrize("module_class", BUILTIN_MODULES, ids=lambda cls: cls.id)
    def test_defaults_are_valid(self, module_class):
        """Test default data passes schema validation."""
        module = module_class()

        assert module.validate_data(module.default_data()) == []

    @pytest.mark.parametrize("module_class", BUILTIN_MODULES, ids=lambda cls: cls.id)
    def test_defaults_compose(self, module_class):
        """Test each module composes from its defaults alone."""
        result = TemplateCompositer().compose(["viewport", module_class.id])

        assert_valid_document(result)


class TestColorFilter:
    """Test image tint filters."""

    @pytest.mark.parametrize(
        "color,expected",
        [
            ("#ffffff", "brightness(0) saturate(100%) invert(100%)"),
            ("WHITE", "brightness(0) saturate(100%) invert(100%)"),
            ("#000", "brightness(0) saturate(100%)"),
            ("", "none"),
            ("none", "none"),
            ("red; x", "none"),
        ],
    )
    def test_presets_and_invalid(self, color, expected):
        """Test preset colors and unusable values."""
        assert color_filter(color) == expected

    def test_hex_color(self):
        """Test other hex colors are approximated through hue and lightness."""
        assert color_filter("#ff0000") == (
            "brightness(0) saturate(100%) invert(0%) sepia(100%) "
            "saturate(2000%) hue-rotate(0deg) brightness(100%) contrast(100%)"
        )


class TestImageTextBox:
    """Test the image and text box."""

    @pytest.fixture
    def module(self):
        """Create image text box module."""
        return ImageTextBoxModule()

    @pytest.fixture
    def data(self, module):
        """Box with an image and two text fields."""
        return module.resolve_data(
            {
                "imageConfig": {"url": "/img/box.jpg"},
                "textConfig": {
                    "count": 2,
                    "fields": [
                        {
                            "content": "Hello world",
                            "style": {"fontSize": "32px", "color": "#111111"},
                            "styledChunks": [{"text": "world", "color": "#ff0000"}],
                        },
                        {"content": "<b>plain</b>"},
                    ],
                },
            }
        )

    def test_hidden_without_image(self, module, ctx):
        """Test the box renders nothing until it has an image."""
        data = module.default_data()

        assert module.render_html(data, ctx) == ""
        assert module.render_css(data, ctx).is_empty()

    def test_markup(self, module, data, ctx):
        """Test image and text sides with chunk styling and escaping."""
        html = module.render_html(data, ctx)

        assert 'src="http://assets.local/img/box.jpg"' in html
        assert 'image-text-box-text-field-1"><span style="' in html
        assert '<span style="color:#ff0000;font-size:32px">world</span>' in html
        assert "&lt;b&gt;plain&lt;/b&gt;" in html
        assert_balanced_markup(html)

    @pytest.mark.parametrize(
        "overrides,image_flex,text_flex,direction",
        [
            ({}, "0 0 calc(50% - 12px)", "0 0 calc(50% - 12px)", "row"),
            ({"splitRatio": "30-70"}, "0 0 calc(30% - 12px)", "0 0 calc(70% - 12px)", "row"),
            (
                {"splitRatio": "30-70", "order": "text-left"},
                "0 0 calc(70% - 12px)",
                "0 0 calc(30% - 12px)",
                "row-reverse",
            ),
            (
                {"splitRatio": "custom", "customLeftPercent": 65, "gap": 10},
                "0 0 calc(65% - 5px)",
                "0 0 calc(35% - 5px)",
                "row",
            ),
        ],
    )
    def test_split_ratio(self, module, data, ctx, overrides, image_flex, text_flex, direction):
        """Test the split ratio and order decide each side's share."""
        data.update(overrides)
        css = module.render_css(data, ctx).render()

        assert f"flex: {image_flex};" in css.split(".image-text-box-text-side")[0]
        assert f"flex: {text_flex};" in css.split(".image-text-box-text-side")[1]
        assert f"flex-direction: {direction};" in css

    def test_shadow(self, module, data, ctx):
        """Test the image shadow is emitted only when enabled."""
        assert "box-shadow: none;" in module.render_css(data, ctx).render()

        data["imageConfig"]["shadow"]["enabled"] = True
        css = module.render_css(data, ctx).render()

        assert "box-shadow: 0 0 20px 0px rgba(0, 0, 0, 0.3);" in css

    def test_composes_inside_card(self, data):
        """Test the box lands in the card with the other content."""
        result = TemplateCompositer().compose(["viewport", "card", "imageTextBox"], {"imageTextBox": data})

        assert '<div class="card-container">' in result.html
        assert '<div class="image-text-box">' in result.html
        assert "/* === Image Text Box === */" in result.css


class TestArrowBottomText:
    """Test the arrow caption overlay."""

    @pytest.fixture
    def module(self):
        """Create arrow bottom text module."""
        return ArrowBottomTextModule()

    @pytest.fixture
    def data(self, module):
        """Enabled arrow with a caption."""
        return module.resolve_data(
            {"enabled": True, "arrowImageUrl": "/icons/arrow.svg", "bottomText": "Swipe & see"}
        )

    def test_disabled_by_default(self, module, ctx):
        """Test the overlay is off until enabled with an image."""
        data = module.default_data()

        assert module.is_active(data) is False
        assert module.render_html(data, ctx) == ""
        assert module.render_style_variables(data) == {}

    def test_markup(self, module, data, ctx):
        """Test arrow image and escaped caption."""
        html = module.render_html(data, ctx)

        assert 'src="http://assets.local/icons/arrow.svg"' in html
        assert '<div class="arrow-bottom-text">Swipe &amp; see</div>' in html

    def test_position_uses_percent_padding(self, module, data, ctx):
        """Test the anchor is offset by a percentage of the slide."""
        css = module.render_css(data, ctx).render()

        assert "bottom: 5%;" in css
        assert "right: 5%;" in css
        assert "flex-direction: column;" in css
        assert "z-index: 30;" in css
        assert "filter: brightness(0) saturate(100%) invert(100%);" in css

    def test_horizontal_layout(self, module, data, ctx):
        """Test the caption sits beside the arrow in horizontal layout."""
        data.update({"layout": "horizontal", "specialPosition": "top-center", "padding": 8})
        css = module.render_css(data, ctx).render()

        assert "flex-direction: row;" in css
        assert "top: 8%;" in css
        assert "transform: translateX(-50%);" in css

    def test_style_variables(self, module, data):
        """Test sizing variables are exposed while enabled."""
        assert module.render_style_variables(data) == {
            "arrow-bottom-text-gap": "15px",
            "arrow-width": "80px",
            "arrow-height": "auto",
        }


class TestSvgElements:
    """Test the SVG element overlay."""

    @pytest.fixture
    def module(self):
        """Create SVG elements module."""
        return SvgElementsModule()

    def _data(self, module, *elements):
        data = module.default_data()
        for index, element in enumerate(elements):
            data["svgElements"][index].update(element)
        return data

    def test_nothing_enabled(self, module, ctx):
        """Test the layer is omitted when no element is visible."""
        data = self._data(module, {"enabled": True})

        assert module.render_html(data, ctx) == ""
        assert module.render_css(data, ctx).is_empty()

    def test_only_visible_elements_render(self, module, ctx):
        """Test disabled elements and elements without a source are skipped."""
        data = self._data(
            module,
            {"enabled": True, "svgUrl": "/a.svg"},
            {"enabled": False, "svgUrl": "/b.svg"},
            {"enabled": True, "svgUrl": "https://cdn.local/c.svg"},
        )
        html = module.render_html(data, ctx)

        assert 'class="svg-element svg-element-1"' in html
        assert "svg-element-2" not in html
        assert 'src="https://cdn.local/c.svg"' in html
        assert_balanced_markup(html)

    def test_manual_position_and_rotation(self, module, ctx):
        """Test manual offsets, rotation, opacity and z-index override."""
        data = self._data(
            module,
            {"enabled": True, "svgUrl": "/a.svg", "rotation": 45, "opacity": 0.5, "zIndexOverride": 60},
        )
        css = module.render_css(data, ctx).render()

        assert "top: 50px;" in css
        assert "left: 50px;" in css
        assert "transform: rotate(45deg);" in css
        assert "opacity: 0.5;" in css
        assert "z-index: 60;" in css
        assert "width: 1080px;" in css

    def test_special_position_scales_with_viewport(self, module, ctx):
        """Test preset anchors are padded by a share of the viewport."""
        data = self._data(
            module,
            {"enabled": True, "svgUrl": "/a.svg", "specialPosition": "bottom-center", "rotation": 90},
        )
        css = module.render_css(data, ctx).render()

        assert "bottom: 72px;" in css
        assert "left: 50%;" in css
        assert "transform: translateX(-50%) rotate(90deg);" in css

    def test_more_than_three_elements_rejected(self, module):
        """Test the schema caps the number of elements."""
        data = module.default_data()
        data["svgElements"].append(dict(data["svgElements"][0]))

        assert module.validate_data(data)

    def test_composes_on_overlay(self):
        """Test the layer follows the content in the document."""
        data = {"svgElements": [{"enabled": True, "svgUrl": "/a.svg"}]}
        result = TemplateCompositer().compose(["viewport", "textFields", "svgElements"], {"svgElements": data})

        assert '<div class="svg-elements-layer">' in result.html
        assert "/* === SVG Elements === */" in result.css
