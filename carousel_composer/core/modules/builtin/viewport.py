"""
Viewport Module
===============

Document background: solid color or image, optional backdrop blur and a
gradient overlay, plus the content wrapper flex settings.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import hex_to_rgb
from carousel_composer.core.richtext.sanitizers import sanitize_color
from carousel_composer.utils.html import css_url

_FULL_COVER = {
    "content": "''",
    "position": "absolute",
    "top": 0,
    "left": 0,
    "right": 0,
    "bottom": 0,
    "width": "100%",
    "height": "100%",
    "pointer-events": "none",
}


class ViewportModule(BaseModule):
    id = "viewport"
    name = "Viewport"
    description = "Background color or image, blur and gradient overlay"
    category = ModuleCategory.LAYOUT
    z_index = 0

    schema = {
        "backgroundType": {"type": "string", "allowed": ["color", "image"]},
        "backgroundColor": {"type": "string"},
        "backgroundImage": {"type": "string"},
        "blurEnabled": {"type": "boolean"},
        "blurAmount": {"type": ["integer", "float"], "min": 0, "max": 50},
        "gradientOverlay": {
            "type": "dict",
            "schema": {
                "enabled": {"type": "boolean"},
                "color": {"type": "string"},
                "startOpacity": {"type": ["integer", "float"], "min": 0, "max": 1},
                "midOpacity": {"type": ["integer", "float"], "min": 0, "max": 1},
                "endOpacity": {"type": ["integer", "float"], "min": 0, "max": 1},
                "height": {"type": ["integer", "float"], "min": 0, "max": 100},
                "direction": {
                    "type": "string",
                    "allowed": ["to top", "to bottom", "to left", "to right"],
                },
                "blendMode": {"type": "string"},
            },
        },
        "contentWrapper": {
            "type": "dict",
            "schema": {
                "padding": {"type": "dict"},
                "gap": {"type": ["integer", "float"], "min": 0},
                "layoutDirection": {"type": "string", "allowed": ["column", "row"]},
                "contentAlign": {"type": "string"},
                "justifyContent": {"type": "string"},
            },
        },
    }

    defaults = {
        "backgroundType": "color",
        "backgroundColor": "#ffffff",
        "backgroundImage": "",
        "blurEnabled": False,
        "blurAmount": 10,
        "gradientOverlay": {
            "enabled": False,
            "color": "#000000",
            "startOpacity": 0.7,
            "midOpacity": 0.3,
            "endOpacity": 0,
            "height": 50,
            "direction": "to top",
            "blendMode": "normal",
        },
        "contentWrapper": {
            "padding": {"top": 0, "right": 0, "bottom": 0, "left": 0},
            "gap": 12,
            "layoutDirection": "column",
            "contentAlign": "stretch",
            "justifyContent": "flex-start",
        },
    }

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()

        if data["backgroundType"] == "image":
            image = css_url(data.get("backgroundImage"), ctx.base_url)
            if image:
                sheet.add(
                    "body",
                    {
                        "background-image": image,
                        "background-size": "cover",
                        "background-position": "center",
                        "background-repeat": "no-repeat",
                    },
                )
        else:
            sheet.add("body", {"background-color": sanitize_color(data["backgroundColor"])})

        if data["blurEnabled"] and data["blurAmount"] > 0:
            blur = f"blur({data['blurAmount']:g}px)"
            sheet.add(
                "body::before",
                {**_FULL_COVER, "backdrop-filter": blur, "-webkit-backdrop-filter": blur, "z-index": 0},
                layer=False,
            )

        gradient = data["gradientOverlay"]
        if gradient.get("enabled") and gradient.get("color"):
            rgb = hex_to_rgb(gradient["color"])
            stops = (
                f"rgba({rgb}, {gradient['startOpacity']}) 0%, "
                f"rgba({rgb}, {gradient['midOpacity']}) {gradient['height']}%, "
                f"rgba({rgb}, {gradient['endOpacity']}) 100%"
            )
            sheet.add(
                "body::after",
                {
                    **_FULL_COVER,
                    "background-image": f"linear-gradient({gradient['direction']}, {stops})",
                    "mix-blend-mode": gradient.get("blendMode") or "normal",
                    "z-index": 9999,
                },
                layer=False,
            )

        wrapper = data["contentWrapper"]
        padding = wrapper.get("padding") or {}
        sheet.add(
            ".content-wrapper",
            {
                "flex-direction": wrapper["layoutDirection"],
                "gap": f"{wrapper['gap']}px",
                "align-items": wrapper["contentAlign"],
                "justify-content": wrapper["justifyContent"],
                "padding": " ".join(
                    f"{padding.get(side, 0)}px" for side in ("top", "right", "bottom", "left")
                ),
            },
            layer=False,
        )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        return ""

    def render_style_variables(self, data: Dict[str, Any]) -> Dict[str, str]:
        return {
            "viewport-bg-color": data["backgroundColor"],
            "viewport-blur": f"{data['blurAmount']}px" if data["blurEnabled"] else "0px",
        }
