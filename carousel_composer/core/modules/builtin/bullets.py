"""
Bullets Module
==============

Bullet cards with an icon (image, emoji or automatic number) and rich text.
"""

from typing import Any, Dict

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    STYLED_CHUNKS_SCHEMA,
    TEXT_STYLE_SCHEMA,
    render_rich_text,
    text_style_declarations,
)
from carousel_composer.core.richtext.sanitizers import sanitize_color
from carousel_composer.utils.html import escape_html, resolve_url


def _default_item() -> Dict[str, Any]:
    return {
        "enabled": True,
        "icon": "✓",
        "iconType": "emoji",
        "text": "",
        "styledChunks": [],
        "backgroundColor": "#FFFFFF",
        "textStyle": {
            "fontFamily": "Arial",
            "fontSize": "18px",
            "fontWeight": "400",
            "color": "#000000",
            "textAlign": "left",
        },
    }


class BulletsModule(BaseModule):
    id = "bullets"
    name = "Bullets"
    description = "Bullet cards with icons and styled text"
    category = ModuleCategory.CONTENT
    z_index = 10

    schema = {
        "gap": {"type": ["integer", "float"], "min": 0},
        "cardPadding": {"type": ["integer", "float"], "min": 0},
        "borderRadius": {"type": ["integer", "float"], "min": 0},
        "items": {
            "type": "list",
            "maxlength": 5,
            "schema": {
                "type": "dict",
                "schema": {
                    "enabled": {"type": "boolean"},
                    "icon": {"type": "string"},
                    "iconType": {"type": "string", "allowed": ["url", "emoji", "number"]},
                    "text": {"type": "string"},
                    "styledChunks": STYLED_CHUNKS_SCHEMA,
                    "backgroundColor": {"type": "string"},
                    "textStyle": TEXT_STYLE_SCHEMA,
                },
            },
        },
    }

    defaults = {
        "gap": 16,
        "cardPadding": 20,
        "borderRadius": 12,
        "items": [_default_item() for _ in range(3)],
    }

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        sheet.add(
            ".bullets-section",
            {
                "display": "flex",
                "flex-direction": "column",
                "gap": f"{data['gap']}px",
                "position": "relative",
                "z-index": self.z_index,
            },
        )
        sheet.add(
            ".bullet-card",
            {
                "display": "flex",
                "align-items": "center",
                "gap": "16px",
                "padding": f"{data['cardPadding']}px",
                "border-radius": f"{data['borderRadius']}px",
            },
            layer=False,
        )
        sheet.add(".bullet-icon img", {"width": "32px", "height": "32px"}, layer=False)
        for index, item in enumerate(data["items"], start=1):
            sheet.add(
                f".bullet-card-{index}",
                {"background-color": sanitize_color(item.get("backgroundColor"))},
                layer=False,
            )
            sheet.add(
                f".bullet-text-{index}",
                text_style_declarations(item.get("textStyle") or {}),
                layer=False,
            )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        cards = []
        for index, item in enumerate(data["items"], start=1):
            if not item.get("enabled", True) or not item.get("text"):
                continue

            icon_html = self._render_icon(item, index, ctx)
            text_html = render_rich_text(item["text"], item.get("styledChunks"), item.get("textStyle"))
            icon_block = f'<div class="bullet-icon">{icon_html}</div>' if icon_html else ""
            cards.append(
                f'  <div class="bullet-card bullet-card-{index}">{icon_block}'
                f'<div class="bullet-text bullet-text-{index}">{text_html}</div></div>'
            )

        if not cards:
            return ""
        return '<div class="bullets-section">\n' + "\n".join(cards) + "\n</div>"

    @staticmethod
    def _render_icon(item: Dict[str, Any], index: int, ctx: RenderContext) -> str:
        icon_type = item.get("iconType", "emoji")
        if icon_type == "number":
            return str(index)
        icon = item.get("icon") or ""
        if not icon:
            return ""
        if icon_type == "url":
            url = resolve_url(icon, ctx.base_url)
            return f'<img src="{escape_html(url)}" alt="Icon" />' if url else ""
        return escape_html(icon)
