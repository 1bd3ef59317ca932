"""
SVG Elements Module
===================

Up to three decorative vector images on a full-viewport overlay layer, each
tinted, rotated and positioned independently.
"""

from typing import Any, Dict, List, Tuple

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    SPECIAL_POSITIONS,
    color_filter,
    px,
    special_position_declarations,
)
from carousel_composer.utils.html import escape_html, resolve_url

MAX_SVG_ELEMENTS = 3
_NUMBER = ["integer", "float"]
_SIDES = ("top", "left", "right", "bottom")


def _element(offset: int) -> Dict[str, Any]:
    return {
        "enabled": False,
        "svgUrl": "",
        "color": "#ffffff",
        "width": "100px",
        "height": "100px",
        "position": {"top": f"{offset}px", "left": f"{offset}px"},
        "specialPosition": "none",
        "specialPadding": 5,
        "rotation": 0,
        "opacity": 1,
        "zIndexOverride": None,
    }


class SvgElementsModule(BaseModule):
    id = "svgElements"
    name = "SVG Elements"
    description = "Positioned decorative vector images"
    category = ModuleCategory.OVERLAY
    z_index = 20

    schema = {
        "svgElements": {
            "type": "list",
            "maxlength": MAX_SVG_ELEMENTS,
            "schema": {
                "type": "dict",
                "schema": {
                    "enabled": {"type": "boolean"},
                    "svgUrl": {"type": "string"},
                    "color": {"type": "string"},
                    "width": {"type": "string"},
                    "height": {"type": "string"},
                    "position": {
                        "type": "dict",
                        "schema": {
                            side: {"type": ["string", "integer", "float"], "nullable": True}
                            for side in _SIDES
                        },
                    },
                    "specialPosition": {"type": "string", "allowed": SPECIAL_POSITIONS},
                    "specialPadding": {"type": _NUMBER, "min": 0, "max": 20},
                    "rotation": {"type": _NUMBER, "min": 0, "max": 360},
                    "opacity": {"type": _NUMBER, "min": 0, "max": 1},
                    "zIndexOverride": {"type": "integer", "nullable": True},
                },
            },
        },
    }

    defaults = {"svgElements": [_element(50), _element(100), _element(150)]}

    def _visible(self, data: Dict[str, Any]) -> List[Tuple[int, Dict[str, Any]]]:
        elements = (data.get("svgElements") or [])[:MAX_SVG_ELEMENTS]
        return [
            (number, element)
            for number, element in enumerate(elements, start=1)
            if element.get("enabled") and element.get("svgUrl")
        ]

    def is_active(self, data) -> bool:
        return bool(self._visible(data))

    @staticmethod
    def _position(element: Dict[str, Any], ctx: RenderContext) -> Dict[str, Any]:
        rotation = element.get("rotation") or 0
        anchor = element.get("specialPosition") or "none"

        if anchor == "none":
            declarations: Dict[str, Any] = {
                side: px((element.get("position") or {}).get(side)) for side in _SIDES
            }
            transform = None
        else:
            padding = element.get("specialPadding", 5)
            declarations = special_position_declarations(
                anchor,
                ctx.viewport_width * padding / 100,
                ctx.viewport_height * padding / 100,
            )
            declarations.pop("position")
            transform = declarations.pop("transform", None)

        if rotation:
            transform = f"{transform} rotate({rotation:g}deg)" if transform else f"rotate({rotation:g}deg)"
        declarations["transform"] = transform
        return declarations

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        visible = self._visible(data)
        if not visible:
            return sheet

        sheet.add(
            ".svg-elements-layer",
            {
                "position": "absolute",
                "top": 0,
                "left": 0,
                "width": f"{ctx.viewport_width}px",
                "height": f"{ctx.viewport_height}px",
                "pointer-events": "none",
                "z-index": self.z_index,
            },
        )
        sheet.add(
            ".svg-element",
            {"position": "absolute", "display": "flex", "align-items": "center", "justify-content": "center"},
            layer=False,
        )
        sheet.add(
            ".svg-element img",
            {"width": "100%", "height": "100%", "object-fit": "contain"},
            layer=False,
        )

        for number, element in visible:
            sheet.add(
                f".svg-element-{number}",
                {
                    **self._position(element, ctx),
                    "width": element.get("width"),
                    "height": element.get("height"),
                    "opacity": element.get("opacity", 1),
                    "z-index": element.get("zIndexOverride"),
                },
                layer=False,
            )
            sheet.add(
                f".svg-element-{number} img",
                {"filter": color_filter(element.get("color"))},
                layer=False,
            )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        items = []
        for number, element in self._visible(data):
            url = resolve_url(element["svgUrl"], ctx.base_url)
            if not url:
                continue
            items.append(
                f'  <div class="svg-element svg-element-{number}">'
                f'<img src="{escape_html(url)}" alt="SVG {number}" /></div>'
            )
        if not items:
            return ""
        body = "\n".join(items)
        return f'<div class="svg-elements-layer">\n{body}\n</div>'
