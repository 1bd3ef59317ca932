"""
Text Fields Module
==================

Stacked text items, each with its own base style and optional styled chunks.
Multiple instances may be enabled; each instance gets its own class suffix.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    STYLED_CHUNKS_SCHEMA,
    TEXT_STYLE_SCHEMA,
    instance_suffix,
    render_rich_text,
    text_style_declarations,
)

_VERTICAL_ALIGN = {"top": "flex-start", "center": "center", "bottom": "flex-end"}


def _default_field() -> Dict[str, Any]:
    return {
        "content": "",
        "style": {
            "fontFamily": "Arial",
            "fontSize": "24px",
            "fontWeight": "400",
            "color": "#000000",
            "textAlign": "left",
        },
        "styledChunks": [],
    }


class TextFieldsModule(BaseModule):
    id = "textFields"
    name = "Text Fields"
    description = "Stacked text items with styled chunks"
    category = ModuleCategory.CONTENT
    z_index = 10
    allow_multiple_instances = True

    schema = {
        "count": {"type": "integer", "min": 1, "max": 10},
        "gap": {"type": ["integer", "float"], "min": 0, "max": 200},
        "verticalAlign": {"type": "string", "allowed": ["top", "center", "bottom"]},
        "layoutWidth": {"type": "string"},
        "paddingTop": {"type": ["integer", "float"], "min": 0},
        "paddingBottom": {"type": ["integer", "float"], "min": 0},
        "fields": {
            "type": "list",
            "schema": {
                "type": "dict",
                "schema": {
                    "content": {"type": "string"},
                    "style": TEXT_STYLE_SCHEMA,
                    "styledChunks": STYLED_CHUNKS_SCHEMA,
                },
            },
        },
    }

    defaults = {
        "count": 5,
        "gap": 20,
        "verticalAlign": "bottom",
        "layoutWidth": "100%",
        "paddingTop": 0,
        "paddingBottom": 0,
        "fields": [_default_field() for _ in range(5)],
    }

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        section = f".text-section{instance_suffix(ctx)}"
        sheet = Stylesheet()
        sheet.add(
            section,
            {
                "display": "flex",
                "flex-direction": "column",
                "justify-content": _VERTICAL_ALIGN.get(data["verticalAlign"], "flex-end"),
                "gap": f"{data['gap']}px",
                "width": data["layoutWidth"],
                "padding-top": f"{data['paddingTop']}px",
                "padding-bottom": f"{data['paddingBottom']}px",
                "position": "relative",
                "z-index": self.z_index,
            },
        )
        for index, field in enumerate(data["fields"][: data["count"]], start=1):
            sheet.add(
                f"{section} .text-item-{index}",
                text_style_declarations(field.get("style") or {}),
                layer=False,
            )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        items = []
        for index, field in enumerate(data["fields"][: data["count"]], start=1):
            content = field.get("content") or ""
            if not content:
                continue
            markup = render_rich_text(content, field.get("styledChunks"), field.get("style"))
            items.append(f'    <div class="text-item text-item-{index}">{markup}</div>')

        if not items:
            return ""
        body = "\n".join(items)
        return f'<div class="text-section text-section{instance_suffix(ctx)}">\n{body}\n</div>'
