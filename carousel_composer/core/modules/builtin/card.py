"""
Card Module
===========

Container that wraps the content modules in a positioned, optionally
image-backed card with a gradient overlay and drop shadow.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    SPECIAL_POSITIONS,
    hex_to_rgb,
    special_position_declarations,
)
from carousel_composer.core.richtext.sanitizers import sanitize_color
from carousel_composer.utils.html import css_url

_NUMBER = ["integer", "float"]


class CardModule(BaseModule):
    id = "card"
    name = "Card"
    description = "Container card wrapping the content modules"
    category = ModuleCategory.LAYOUT
    z_index = 1
    is_container = True

    schema = {
        "enabled": {"type": "boolean"},
        "width": {"type": _NUMBER, "min": 0, "max": 100},
        "height": {"type": _NUMBER, "min": 0, "max": 100},
        "specialPosition": {"type": "string", "allowed": SPECIAL_POSITIONS},
        "positionPadding": {"type": _NUMBER, "min": 0},
        "borderRadius": {"type": _NUMBER, "min": 0},
        "backgroundType": {"type": "string", "allowed": ["color", "image"]},
        "backgroundColor": {"type": "string"},
        "backgroundImage": {"type": "string"},
        "padding": {
            "type": "dict",
            "schema": {side: {"type": _NUMBER} for side in ("top", "right", "bottom", "left")},
        },
        "gradientOverlay": {
            "type": "dict",
            "schema": {
                "enabled": {"type": "boolean"},
                "color": {"type": "string"},
                "startOpacity": {"type": _NUMBER, "min": 0, "max": 1},
                "midOpacity": {"type": _NUMBER, "min": 0, "max": 1},
                "height": {"type": _NUMBER, "min": 0, "max": 100},
                "direction": {
                    "type": "string",
                    "allowed": ["to top", "to bottom", "to left", "to right"],
                },
            },
        },
        "shadow": {
            "type": "dict",
            "schema": {
                "enabled": {"type": "boolean"},
                "x": {"type": _NUMBER},
                "y": {"type": _NUMBER},
                "blur": {"type": _NUMBER, "min": 0},
                "spread": {"type": _NUMBER},
                "color": {"type": "string"},
            },
        },
        "layoutDirection": {
            "type": "string",
            "allowed": ["column", "row", "column-reverse", "row-reverse"],
        },
        "justifyContent": {"type": "string"},
        "contentGap": {"type": "string"},
        "contentAlign": {
            "type": "string",
            "allowed": ["flex-start", "center", "flex-end", "stretch"],
        },
    }

    defaults = {
        "enabled": True,
        "width": 90,
        "height": 90,
        "specialPosition": "center",
        "positionPadding": 40,
        "borderRadius": 0,
        "backgroundType": "color",
        "backgroundColor": "#ffffff",
        "backgroundImage": "",
        "padding": {"top": 60, "right": 60, "bottom": 60, "left": 60},
        "gradientOverlay": {
            "enabled": False,
            "color": "#000000",
            "startOpacity": 0.7,
            "midOpacity": 0.4,
            "height": 60,
            "direction": "to top",
        },
        "shadow": {
            "enabled": False,
            "x": 0,
            "y": 10,
            "blur": 30,
            "spread": 0,
            "color": "rgba(0, 0, 0, 0.3)",
        },
        "layoutDirection": "column",
        "justifyContent": "flex-start",
        "contentGap": "12px",
        "contentAlign": "stretch",
    }

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        if not self.is_active(data):
            return sheet

        if data["specialPosition"] == "none":
            position = {"position": "relative"}
        else:
            position = special_position_declarations(
                data["specialPosition"], data["positionPadding"], data["positionPadding"]
            )

        background_image = None
        if data["backgroundType"] == "image":
            background_image = css_url(data.get("backgroundImage"), ctx.base_url)

        padding = data["padding"]
        shadow = data["shadow"]
        direction = data["layoutDirection"]

        sheet.add(
            ".card-container",
            {
                "width": f"{data['width']}%",
                "height": f"{data['height']}%",
                "background-color": (
                    sanitize_color(data["backgroundColor"])
                    if data["backgroundType"] == "color"
                    else "transparent"
                ),
                "background-image": background_image or "none",
                "background-size": "cover",
                "background-position": "center",
                "background-repeat": "no-repeat",
                "border-radius": f"{data['borderRadius']}px",
                **position,
                "z-index": self.z_index,
                "display": "flex",
                "flex-direction": direction,
                "justify-content": data["justifyContent"],
                "gap": data["contentGap"],
                "align-items": data["contentAlign"] if direction.startswith("row") else "stretch",
                "padding": " ".join(
                    f"{padding.get(side, 0)}px" for side in ("top", "right", "bottom", "left")
                ),
                "box-sizing": "border-box",
                "overflow": "hidden",
                "box-shadow": (
                    f"{shadow['x']}px {shadow['y']}px {shadow['blur']}px "
                    f"{shadow['spread']}px {shadow['color']}"
                    if shadow.get("enabled")
                    else "none"
                ),
            },
        )

        gradient = data["gradientOverlay"]
        if gradient.get("enabled"):
            rgb = hex_to_rgb(gradient.get("color"))
            sheet.add(
                ".card-container::before",
                {
                    "content": "''",
                    "position": "absolute",
                    "top": 0,
                    "left": 0,
                    "right": 0,
                    "bottom": 0,
                    "background": (
                        f"linear-gradient({gradient['direction']}, "
                        f"rgba({rgb}, {gradient['startOpacity']}) 0%, "
                        f"rgba({rgb}, {gradient['midOpacity']}) {gradient['height']}%, "
                        f"rgba({rgb}, 0) 100%)"
                    ),
                    "pointer-events": "none",
                    "z-index": 0,
                },
                layer=False,
            )
            sheet.add(".card-container > *", {"position": "relative", "z-index": 1}, layer=False)

        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        return ""

    def wrap_content(self, inner_html: str, data: Dict[str, Any], ctx: RenderContext) -> str:
        return f'<div class="card-container">\n{inner_html}\n</div>'

    def render_style_variables(self, data: Dict[str, Any]) -> Dict[str, str]:
        if not self.is_active(data):
            return {}
        return {
            "card-width": f"{data['width']}%",
            "card-height": f"{data['height']}%",
            "card-radius": f"{data['borderRadius']}px",
        }
