"""
Content Image Module
====================

Single image or a side-by-side comparison of two images inside the content
flow.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.utils.html import escape_html, resolve_url

_NUMBER = ["integer", "float"]
_POSITION_ALIGN = {"top": "flex-start", "center": "center", "bottom": "flex-end"}


class ContentImageModule(BaseModule):
    id = "contentImage"
    name = "Content Image"
    description = "Image or image comparison in the content flow"
    category = ModuleCategory.CONTENT
    z_index = 5

    schema = {
        "enabled": {"type": "boolean"},
        "url": {"type": "string"},
        "url2": {"type": "string"},
        "mode": {"type": "string", "allowed": ["single", "comparison"]},
        "borderRadius": {"type": _NUMBER, "min": 0},
        "maxWidth": {"type": _NUMBER, "min": 0, "max": 100},
        "maxHeight": {"type": _NUMBER, "min": 0, "max": 100},
        "objectFit": {"type": "string", "allowed": ["cover", "contain", "fill"]},
        "position": {"type": "string", "allowed": ["top", "center", "bottom"]},
        "comparisonGap": {"type": _NUMBER, "min": 0},
        "marginTop": {"type": _NUMBER},
        "shadow": {
            "type": "dict",
            "schema": {
                "enabled": {"type": "boolean"},
                "blur": {"type": _NUMBER, "min": 0},
                "spread": {"type": _NUMBER},
                "color": {"type": "string"},
            },
        },
    }

    defaults = {
        "enabled": True,
        "url": "",
        "url2": "",
        "mode": "single",
        "borderRadius": 20,
        "maxWidth": 100,
        "maxHeight": 100,
        "objectFit": "cover",
        "position": "center",
        "comparisonGap": 40,
        "marginTop": 0,
        "shadow": {"enabled": False, "blur": 20, "spread": 0, "color": "rgba(0, 0, 0, 0.3)"},
    }

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        if not self.is_active(data):
            return sheet

        shadow = data["shadow"]
        image = {
            "width": "100%",
            "height": "100%",
            "object-fit": data["objectFit"],
            "border-radius": f"{data['borderRadius']}px",
            "box-shadow": (
                f"0 0 {shadow['blur']}px {shadow['spread']}px {shadow['color']}"
                if shadow.get("enabled")
                else "none"
            ),
        }
        sheet.add(
            ".content-image-section",
            {
                "display": "flex",
                "align-items": _POSITION_ALIGN.get(data["position"], "center"),
                "justify-content": "center",
                "max-width": f"{data['maxWidth']}%",
                "max-height": f"{data['maxHeight']}%",
                "flex": "1 1 auto",
                "min-height": 0,
                "margin-top": f"{data['marginTop']}%" if data["marginTop"] else None,
                "overflow": "hidden",
                "position": "relative",
                "z-index": self.z_index,
            },
        )
        sheet.add(".content-image-section .content-image", image, layer=False)
        if data["mode"] == "comparison":
            sheet.add(
                ".content-image-section .comparison-row",
                {"display": "flex", "gap": f"{data['comparisonGap']}px", "width": "100%"},
                layer=False,
            )
            sheet.add(".comparison-image", {"flex": 1, "overflow": "hidden"}, layer=False)
            sheet.add(".comparison-image img", image, layer=False)
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        if not self.is_active(data):
            return ""

        first = resolve_url(data.get("url"), ctx.base_url)
        second = resolve_url(data.get("url2"), ctx.base_url)
        if not first and not second:
            return ""

        if data["mode"] == "single":
            return (
                '<div class="content-image-section">\n'
                f'  <img class="content-image" src="{escape_html(first or second)}" alt="Content" />\n'
                "</div>"
            )

        images = [
            f'    <div class="comparison-image"><img src="{escape_html(url)}" alt="Image {n}" /></div>'
            for n, url in enumerate((first, second), start=1)
            if url
        ]
        return (
            '<div class="content-image-section">\n'
            '  <div class="comparison-row">\n'
            + "\n".join(images)
            + "\n  </div>\n</div>"
        )
