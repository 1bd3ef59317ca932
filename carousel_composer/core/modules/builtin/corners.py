"""
Corners Module
==============

Four corner slots, each holding styled text or an image.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    TEXT_STYLE_SCHEMA,
    special_position_declarations,
    text_style_declarations,
)
from carousel_composer.utils.html import escape_html, resolve_url

CORNER_POSITIONS = ("top-left", "top-right", "bottom-left", "bottom-right")


def _default_corner(position: str) -> Dict[str, Any]:
    return {
        "type": "none",
        "text": "",
        "textStyle": {
            "fontFamily": "Arial Black",
            "fontSize": "32px",
            "fontWeight": "900",
            "color": "#000000",
        },
        "backgroundEnabled": False,
        "backgroundColor": "#ffffff",
        "imageUrl": "",
        "imageWidth": "60px",
        "imageHeight": "60px",
        "specialPosition": position,
        "paddingX": 40,
        "paddingY": 40,
    }


class CornersModule(BaseModule):
    id = "corners"
    name = "Corners"
    description = "Text or image elements anchored to the four corners"
    category = ModuleCategory.OVERLAY
    z_index = 99

    schema = {
        "corners": {
            "type": "list",
            "minlength": 4,
            "maxlength": 4,
            "schema": {
                "type": "dict",
                "schema": {
                    "type": {"type": "string", "allowed": ["none", "text", "image"]},
                    "text": {"type": "string"},
                    "textStyle": TEXT_STYLE_SCHEMA,
                    "backgroundEnabled": {"type": "boolean"},
                    "backgroundColor": {"type": "string"},
                    "imageUrl": {"type": "string"},
                    "imageWidth": {"type": "string"},
                    "imageHeight": {"type": "string"},
                    "specialPosition": {"type": "string", "allowed": list(CORNER_POSITIONS)},
                    "paddingX": {"type": ["integer", "float"], "min": 0, "max": 300},
                    "paddingY": {"type": ["integer", "float"], "min": 0, "max": 300},
                },
            },
        },
    }

    defaults = {"corners": [_default_corner(position) for position in CORNER_POSITIONS]}

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        sheet.add(
            ".corners-layer",
            {
                "position": "absolute",
                "top": 0,
                "left": 0,
                "width": "100%",
                "height": "100%",
                "pointer-events": "none",
                "z-index": self.z_index,
            },
        )
        for index, corner in enumerate(data["corners"], start=1):
            if corner.get("type", "none") == "none":
                continue
            sheet.add(
                f".corner-{index}",
                special_position_declarations(
                    corner.get("specialPosition", CORNER_POSITIONS[(index - 1) % 4]),
                    corner.get("paddingX", 40),
                    corner.get("paddingY", 40),
                ),
                layer=False,
            )
            if corner["type"] == "text":
                declarations = text_style_declarations(corner.get("textStyle") or {})
                if corner.get("backgroundEnabled"):
                    declarations["background-color"] = corner.get("backgroundColor")
                    declarations["padding"] = "4px 12px"
                sheet.add(f".corner-{index}-text", declarations, layer=False)
            else:
                sheet.add(
                    f".corner-{index} img",
                    {"width": corner.get("imageWidth"), "height": corner.get("imageHeight")},
                    layer=False,
                )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        items = []
        for index, corner in enumerate(data["corners"], start=1):
            content = self._render_corner(corner, index, ctx)
            if content:
                items.append(f'  <div class="corner corner-{index}">{content}</div>')
        if not items:
            return ""
        return '<div class="corners-layer">\n' + "\n".join(items) + "\n</div>"

    @staticmethod
    def _render_corner(corner: Dict[str, Any], index: int, ctx: RenderContext) -> str:
        corner_type = corner.get("type", "none")
        if corner_type == "text" and corner.get("text"):
            return f'<span class="corner-{index}-text">{escape_html(corner["text"])}</span>'
        if corner_type == "image":
            url = resolve_url(corner.get("imageUrl"), ctx.base_url)
            if url:
                return f'<img src="{escape_html(url)}" alt="Corner {index}" />'
        return ""
