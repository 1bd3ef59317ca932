"""
Free Text Module
================

Absolutely positioned text on the overlay layer. Multiple instances may be
enabled; slide counters are rendered through this module.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    SPECIAL_POSITIONS,
    STYLED_CHUNKS_SCHEMA,
    TEXT_STYLE_SCHEMA,
    instance_suffix,
    px,
    render_rich_text,
    special_position_declarations,
    text_style_declarations,
)

_NUMBER = ["integer", "float"]


class FreeTextModule(BaseModule):
    id = "freeText"
    name = "Free Text"
    description = "Positioned text on the overlay layer"
    category = ModuleCategory.OVERLAY
    z_index = 30
    allow_multiple_instances = True

    schema = {
        "content": {"type": "string"},
        "style": TEXT_STYLE_SCHEMA,
        "styledChunks": STYLED_CHUNKS_SCHEMA,
        "specialPosition": {"type": "string", "allowed": SPECIAL_POSITIONS},
        "paddingX": {"type": _NUMBER, "min": 0},
        "paddingY": {"type": _NUMBER, "min": 0},
        "position": {
            "type": "dict",
            "schema": {
                side: {"type": ["string", "integer", "float"], "nullable": True}
                for side in ("top", "left", "right", "bottom")
            },
        },
        "maxWidth": {"type": "string"},
    }

    defaults = {
        "content": "",
        "style": {
            "fontFamily": "Arial",
            "fontSize": "28px",
            "fontWeight": "700",
            "color": "#000000",
            "textAlign": "left",
        },
        "styledChunks": [],
        "specialPosition": "bottom-right",
        "paddingX": 40,
        "paddingY": 40,
        "position": {"top": None, "left": None, "right": None, "bottom": None},
        "maxWidth": "80%",
    }

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        selector = f".free-text{instance_suffix(ctx)}"
        if data["specialPosition"] == "none":
            position = {"position": "absolute"}
            position.update({side: px(value) for side, value in data["position"].items()})
        else:
            position = special_position_declarations(
                data["specialPosition"], data["paddingX"], data["paddingY"]
            )

        sheet = Stylesheet()
        sheet.add(
            selector,
            {
                **position,
                "max-width": data["maxWidth"],
                "z-index": self.z_index,
                **text_style_declarations(data.get("style") or {}),
            },
        )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        content = data.get("content") or ""
        if not content:
            return ""
        markup = render_rich_text(content, data.get("styledChunks"), data.get("style"))
        return f'<div class="free-text free-text{instance_suffix(ctx)}">{markup}</div>'
