"""
Logo Module
===========

Single positioned logo image.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    SPECIAL_POSITIONS,
    px,
    special_position_declarations,
)
from carousel_composer.utils.html import escape_html, resolve_url

_FILTERS = {
    "none": "none",
    "grayscale": "grayscale(100%)",
    "invert": "invert(100%)",
    "brightness": "brightness(1.5)",
    "contrast": "contrast(1.5)",
    "sepia": "sepia(100%)",
}


class LogoModule(BaseModule):
    id = "logo"
    name = "Logo"
    description = "Positioned logo image"
    category = ModuleCategory.OVERLAY
    z_index = 30

    schema = {
        "enabled": {"type": "boolean"},
        "logoUrl": {"type": "string"},
        "width": {"type": "string"},
        "height": {"type": "string"},
        "specialPosition": {"type": "string", "allowed": SPECIAL_POSITIONS},
        "top": {"type": ["string", "integer", "float"], "nullable": True},
        "left": {"type": ["string", "integer", "float"], "nullable": True},
        "paddingX": {"type": ["integer", "float"], "min": 0, "max": 500},
        "paddingY": {"type": ["integer", "float"], "min": 0, "max": 500},
        "opacity": {"type": ["integer", "float"], "min": 0, "max": 1},
        "filter": {"type": "string", "allowed": list(_FILTERS)},
    }

    defaults = {
        "enabled": False,
        "logoUrl": "",
        "width": "120px",
        "height": "auto",
        "specialPosition": "top-left",
        "top": None,
        "left": None,
        "paddingX": 40,
        "paddingY": 40,
        "opacity": 1,
        "filter": "none",
    }

    def is_active(self, data) -> bool:
        url = data.get("logoUrl") or ""
        return bool(data.get("enabled")) and bool(url.strip()) and url != "none"

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        if not self.is_active(data):
            return sheet

        if data["specialPosition"] == "none":
            position = {"position": "absolute", "top": px(data.get("top")), "left": px(data.get("left"))}
        else:
            position = special_position_declarations(
                data["specialPosition"], data["paddingX"], data["paddingY"]
            )

        sheet.add(
            ".logo-container",
            {
                **position,
                "opacity": data["opacity"],
                "filter": _FILTERS.get(data["filter"], "none"),
                "z-index": self.z_index,
            },
        )
        sheet.add(
            ".logo-container img",
            {"width": data["width"], "height": data["height"], "display": "block"},
            layer=False,
        )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        if not self.is_active(data):
            return ""
        url = resolve_url(data["logoUrl"], ctx.base_url)
        if not url:
            return ""
        return f'<div class="logo-container"><img src="{escape_html(url)}" alt="Logo" /></div>'
