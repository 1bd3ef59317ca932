"""
Arrow Bottom Text Module
========================

Call-to-action overlay: an arrow image with a short caption, anchored to a
preset position of the slide.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    SPECIAL_POSITIONS,
    TEXT_STYLE_SCHEMA,
    color_filter,
    special_position_declarations,
    text_style_declarations,
)
from carousel_composer.utils.html import escape_html, resolve_url


class ArrowBottomTextModule(BaseModule):
    id = "arrowBottomText"
    name = "Arrow Bottom Text"
    description = "Arrow image with a caption, e.g. a swipe hint"
    category = ModuleCategory.OVERLAY
    z_index = 30

    schema = {
        "enabled": {"type": "boolean"},
        "arrowImageUrl": {"type": "string"},
        "arrowColor": {"type": "string"},
        "arrowWidth": {"type": "string"},
        "arrowHeight": {"type": "string"},
        "bottomText": {"type": "string"},
        "bottomTextStyle": TEXT_STYLE_SCHEMA,
        "specialPosition": {"type": "string", "allowed": SPECIAL_POSITIONS},
        "padding": {"type": ["integer", "float"], "min": 0, "max": 20},
        "gapBetween": {"type": ["integer", "float"], "min": 0, "max": 100},
        "layout": {"type": "string", "allowed": ["vertical", "horizontal"]},
    }

    defaults = {
        "enabled": False,
        "arrowImageUrl": "",
        "arrowColor": "#ffffff",
        "arrowWidth": "80px",
        "arrowHeight": "auto",
        "bottomText": "",
        "bottomTextStyle": {
            "fontFamily": "Arial",
            "fontSize": "18px",
            "fontWeight": "700",
            "color": "#ffffff",
            "textTransform": "uppercase",
        },
        "specialPosition": "bottom-right",
        "padding": 5,
        "gapBetween": 15,
        "layout": "vertical",
    }

    def is_active(self, data) -> bool:
        return bool(data.get("enabled")) and bool(data.get("arrowImageUrl"))

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        if not self.is_active(data):
            return sheet

        anchor = data["specialPosition"]
        if anchor == "none":
            anchor = "bottom-right"

        sheet.add(
            ".arrow-bottom-text-container",
            {
                **special_position_declarations(anchor, data["padding"], data["padding"], unit="%"),
                "display": "flex",
                "flex-direction": "column" if data["layout"] == "vertical" else "row",
                "align-items": "center",
                "justify-content": "center",
                "gap": f"{data['gapBetween']}px",
                "width": data["arrowWidth"],
                "z-index": self.z_index,
            },
        )
        sheet.add(
            ".arrow-image",
            {
                "display": "block",
                "width": "100%",
                "height": data["arrowHeight"],
                "object-fit": "contain",
                "filter": color_filter(data.get("arrowColor")),
            },
            layer=False,
        )
        sheet.add(
            ".arrow-bottom-text",
            {
                **text_style_declarations(data.get("bottomTextStyle") or {}),
                "display": "block",
                "white-space": "nowrap",
                "align-self": "flex-end",
                "padding-right": "12px",
            },
            layer=False,
        )
        sheet.add(".arrow-bottom-text:empty", {"display": "none"}, layer=False)
        return sheet

    def render_style_variables(self, data: Dict[str, Any]) -> Dict[str, str]:
        if not data.get("enabled"):
            return {}
        return {
            "arrow-bottom-text-gap": f"{data['gapBetween']}px",
            "arrow-width": data["arrowWidth"],
            "arrow-height": data["arrowHeight"],
        }

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        if not self.is_active(data):
            return ""
        url = resolve_url(data["arrowImageUrl"], ctx.base_url)
        if not url:
            return ""
        return (
            '<div class="arrow-bottom-text-container">\n'
            f'  <img class="arrow-image" src="{escape_html(url)}" alt="Arrow" />\n'
            f'  <div class="arrow-bottom-text">{escape_html(data.get("bottomText") or "")}</div>\n'
            "</div>"
        )
