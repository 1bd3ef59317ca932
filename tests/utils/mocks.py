"""
Test Mocks
===========

Module doubles for exercising error isolation and post-processing.
"""

from typing import Any, Dict, List

from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule, ModuleRenderError
from carousel_composer.models.schemas import ModuleCategory, RenderContext


class RaisingModule(BaseModule):
    """Module whose rendering always fails."""

    id = "broken"
    name = "Broken"
    category = ModuleCategory.CONTENT
    z_index = 15

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        raise ModuleRenderError("stylesheet exploded")

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        raise ModuleRenderError("markup exploded")


class UnsafeModule(BaseModule):
    """Module emitting declarations that must be dropped at render time."""

    id = "unsafe"
    name = "Unsafe"
    category = ModuleCategory.OVERLAY
    z_index = 40

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        return Stylesheet().add(
            ".unsafe",
            {
                "color": "red",
                "background": "red;} body { display: none",
                "width": "expression(alert(1))",
                "z-index": self.z_index,
            },
        )

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        return '<div class="unsafe"></div>'

    def render_style_variables(self, data: Dict[str, Any]) -> Dict[str, str]:
        return {"unsafe-ok": "12px", "unsafe-bad": "red; } body {"}


class RecordingPostProcessor(BaseModule):
    """Module recording post-processing calls and tagging the document."""

    id = "recorder"
    name = "Recorder"
    category = ModuleCategory.SPECIAL
    z_index = 200

    def __init__(self) -> None:
        self.calls: List[str] = []

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        return Stylesheet()

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        return ""

    def post_process_document(self, html: str, data: Dict[str, Any], ctx: RenderContext) -> str:
        self.calls.append(ctx.instance_id)
        return html.replace("</body>", "<!-- recorded -->\n</body>")
