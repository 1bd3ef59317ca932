"""
Duo Module
==========

Paired-slide output: doubles the viewport width and rewrites the assembled
document so its body holds two side-by-side slides plus an optional center
image spanning both.

In ``mirror`` mode both slides repeat the composed body. In ``independent``
mode each slide is rendered from its own module data; when no per-slide data
is supplied it falls back to mirroring.
"""

import re
from typing import Any, Dict

from carousel_composer.config.logging import get_logger
from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.utils.html import escape_html, resolve_url

logger = get_logger(__name__)

_BODY_PATTERN = re.compile(r"(<body[^>]*>)(.*?)(</body>)", re.IGNORECASE | re.DOTALL)
_NUMBER = ["integer", "float"]


class DuoModule(BaseModule):
    id = "duo"
    name = "Duo Mode"
    description = "Two-slide output with a central image"
    category = ModuleCategory.SPECIAL
    z_index = 100

    schema = {
        "enabled": {"type": "boolean"},
        "mode": {"type": "string", "allowed": ["mirror", "independent"]},
        "centerImageUrl": {"type": "string"},
        "centerImageOffsetX": {"type": _NUMBER, "min": -500, "max": 500},
        "centerImageOffsetY": {"type": _NUMBER, "min": -500, "max": 500},
        "centerImageScale": {"type": _NUMBER, "min": 50, "max": 200},
        "centerImageRotation": {"type": _NUMBER, "min": -180, "max": 180},
        "outlineEffect": {
            "type": "dict",
            "schema": {
                "enabled": {"type": "boolean"},
                "color": {"type": "string"},
                "size": {"type": _NUMBER, "min": 0, "max": 50},
            },
        },
        "slides": {
            "type": "dict",
            "schema": {"slide1": {"type": "dict"}, "slide2": {"type": "dict"}},
        },
    }

    defaults = {
        "enabled": False,
        "mode": "mirror",
        "centerImageUrl": "",
        "centerImageOffsetX": 0,
        "centerImageOffsetY": 0,
        "centerImageScale": 100,
        "centerImageRotation": 0,
        "outlineEffect": {"enabled": False, "color": "#000000", "size": 10},
        "slides": {"slide1": {}, "slide2": {}},
    }

    def is_active(self, data) -> bool:
        return bool(data.get("enabled"))

    def slide_columns(self, data) -> int:
        return 2 if self.is_active(data) else 1

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        if not self.is_active(data):
            return sheet

        slide_width = ctx.viewport_width // 2
        height = ctx.viewport_height
        sheet.add(
            "body",
            {"width": f"{ctx.viewport_width}px", "overflow": "hidden"},
            layer=False,
            important=True,
        )
        sheet.add(
            ".duo-wrapper",
            {
                "position": "absolute",
                "top": 0,
                "left": 0,
                "width": f"{ctx.viewport_width}px",
                "height": f"{height}px",
                "display": "flex",
                "flex-direction": "row",
                "z-index": 0,
            },
            layer=False,
        )
        sheet.add(
            ".duo-slide",
            {
                "position": "relative",
                "width": f"{slide_width}px",
                "height": f"{height}px",
                "flex-shrink": 0,
                "overflow": "hidden",
            },
            layer=False,
        )

        outline = data["outlineEffect"]
        filter_value = "none"
        if outline.get("enabled") and outline.get("size", 0) > 0:
            size, color = outline["size"], outline["color"]
            offsets = [
                (size, 0), (-size, 0), (0, size), (0, -size),
                (size, size), (-size, size), (size, -size), (-size, -size),
            ]
            filter_value = " ".join(f"drop-shadow({x}px {y}px 0 {color})" for x, y in offsets)

        sheet.add(
            ".duo-center-image",
            {
                "position": "absolute",
                "top": "50%",
                "left": "50%",
                "transform": (
                    "translate(calc(-50% + var(--duo-offset-x)), calc(-50% + var(--duo-offset-y))) "
                    "scale(var(--duo-scale)) rotate(var(--duo-rotation))"
                ),
                "filter": filter_value,
                "pointer-events": "none",
                "z-index": self.z_index,
            },
        )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        # The paired layout is produced by post_process_document.
        return ""

    def render_style_variables(self, data: Dict[str, Any]) -> Dict[str, str]:
        if not self.is_active(data):
            return {}
        return {
            "duo-offset-x": f"{data['centerImageOffsetX']}px",
            "duo-offset-y": f"{data['centerImageOffsetY']}px",
            "duo-scale": f"{data['centerImageScale'] / 100:g}",
            "duo-rotation": f"{data['centerImageRotation']}deg",
        }

    def post_process_document(self, html: str, data: Dict[str, Any], ctx: RenderContext) -> str:
        if not self.is_active(data):
            return html

        match = _BODY_PATTERN.search(html)
        if not match:
            logger.warning("Duo post-processing skipped: no body element")
            return html

        body_content = match.group(2)
        first, second = body_content, body_content
        if data["mode"] == "independent":
            slides = data.get("slides") or {}
            slide1 = slides.get("slide1") or {}
            slide2 = slides.get("slide2") or {}
            if slide1 or slide2:
                first = self._render_slide(slide1, ctx)
                second = self._render_slide(slide2, ctx)

        wrapper = self._wrap(first, second, data, ctx)
        return html[: match.start(2)] + wrapper + html[match.end(2):]

    def _render_slide(self, slide_data: Dict[str, Any], ctx: RenderContext) -> str:
        """Markup of every enabled non-duo module that has data for this slide."""
        from carousel_composer.core.modules.registry import get_registry

        registry = get_registry()
        parts = []
        for module_id in registry.sort_by_z_index(list(ctx.enabled_ids)):
            module = registry.get(module_id)
            if module is None or module.id == self.id or module_id not in slide_data:
                continue
            markup = module.render_html(
                module.resolve_data(slide_data[module_id]), ctx.for_instance(module_id)
            )
            if markup:
                parts.append(markup)
        return "\n".join(parts)

    @staticmethod
    def _wrap(first: str, second: str, data: Dict[str, Any], ctx: RenderContext) -> str:
        center = ""
        url = resolve_url(data.get("centerImageUrl"), ctx.base_url)
        if url:
            center = f'\n  <img class="duo-center-image" src="{escape_html(url)}" alt="Center Image" />'
        return (
            '\n<div class="duo-wrapper">\n'
            f'  <div class="duo-slide duo-slide-1">\n{first}\n  </div>\n'
            f'  <div class="duo-slide duo-slide-2">\n{second}\n  </div>'
            f"{center}\n</div>\n"
        )
