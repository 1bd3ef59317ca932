"""
Image Text Box Module
=====================

Horizontal box pairing an image with a column of text fields. The split
ratio decides how the width is shared and ``order`` which side the image
takes. Text fields accept styled chunks like the text fields module.
"""

from typing import Any, Dict, List

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.builtin.common import (
    STYLED_CHUNKS_SCHEMA,
    TEXT_STYLE_SCHEMA,
    render_rich_text,
    text_style_declarations,
)
from carousel_composer.utils.html import escape_html, resolve_url

_NUMBER = ["integer", "float"]
_SPLIT_RATIOS = {"50-50": 50, "40-60": 40, "60-40": 60, "30-70": 30, "70-30": 70}
_VERTICAL_ALIGN = {"top": "flex-start", "center": "center", "bottom": "flex-end"}
_PADDING_SIDES = ("paddingTop", "paddingRight", "paddingBottom", "paddingLeft")


def _field(font_size: str, font_weight: str, color: str) -> Dict[str, Any]:
    return {
        "content": "",
        "style": {
            "fontFamily": "Arial",
            "fontSize": font_size,
            "fontWeight": font_weight,
            "color": color,
            "textAlign": "left",
            "textTransform": "none",
        },
        "styledChunks": [],
    }


def _padding(config: Dict[str, Any]) -> Dict[str, str]:
    return {
        f"padding-{side[len('padding'):].lower()}": f"{config.get(side) or 0}px"
        for side in _PADDING_SIDES
    }


class ImageTextBoxModule(BaseModule):
    id = "imageTextBox"
    name = "Image Text Box"
    description = "Image and text side by side"
    category = ModuleCategory.CONTENT
    z_index = 7

    schema = {
        "enabled": {"type": "boolean"},
        "width": {"type": "string"},
        "height": {"type": "string"},
        "splitRatio": {"type": "string", "allowed": list(_SPLIT_RATIOS) + ["custom"]},
        "customLeftPercent": {"type": _NUMBER, "min": 10, "max": 90},
        "order": {"type": "string", "allowed": ["image-left", "text-left"]},
        "gap": {"type": _NUMBER, "min": 0, "max": 100},
        "contentAlign": {
            "type": "string",
            "allowed": ["flex-start", "center", "flex-end", "stretch"],
        },
        "layoutWidth": {"type": "string"},
        "alignSelf": {
            "type": "string",
            "allowed": ["auto", "flex-start", "center", "flex-end", "stretch"],
        },
        "imageConfig": {
            "type": "dict",
            "schema": {
                "url": {"type": "string"},
                "borderRadius": {"type": _NUMBER, "min": 0},
                "maxWidth": {"type": _NUMBER, "min": 0, "max": 100},
                "maxHeight": {"type": _NUMBER, "min": 0, "max": 100},
                "objectFit": {"type": "string", "allowed": ["cover", "contain", "fill"]},
                **{side: {"type": _NUMBER, "min": 0} for side in _PADDING_SIDES},
                "shadow": {
                    "type": "dict",
                    "schema": {
                        "enabled": {"type": "boolean"},
                        "blur": {"type": _NUMBER, "min": 0},
                        "spread": {"type": _NUMBER},
                        "color": {"type": "string"},
                    },
                },
            },
        },
        "textConfig": {
            "type": "dict",
            "schema": {
                "count": {"type": "integer", "min": 1, "max": 5},
                "gap": {"type": _NUMBER, "min": 0, "max": 100},
                "verticalAlign": {"type": "string", "allowed": list(_VERTICAL_ALIGN)},
                **{side: {"type": _NUMBER, "min": 0} for side in _PADDING_SIDES},
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
            },
        },
    }

    defaults = {
        "enabled": True,
        "width": "100%",
        "height": "100%",
        "splitRatio": "50-50",
        "customLeftPercent": 50,
        "order": "image-left",
        "gap": 24,
        "contentAlign": "center",
        "layoutWidth": "100%",
        "alignSelf": "stretch",
        "imageConfig": {
            "url": "",
            "borderRadius": 20,
            "maxWidth": 100,
            "maxHeight": 100,
            "objectFit": "cover",
            "paddingTop": 0,
            "paddingRight": 0,
            "paddingBottom": 0,
            "paddingLeft": 0,
            "shadow": {"enabled": False, "blur": 20, "spread": 0, "color": "rgba(0, 0, 0, 0.3)"},
        },
        "textConfig": {
            "count": 3,
            "gap": 16,
            "verticalAlign": "center",
            "paddingTop": 0,
            "paddingRight": 0,
            "paddingBottom": 0,
            "paddingLeft": 0,
            "fields": [
                _field("32px", "700", "#000000"),
                _field("24px", "400", "#333333"),
                _field("18px", "400", "#666666"),
            ],
        },
    }

    def is_active(self, data) -> bool:
        image = data.get("imageConfig") or {}
        return data.get("enabled", True) is not False and bool(image.get("url"))

    @staticmethod
    def left_percent(data: Dict[str, Any]) -> float:
        """Share of the width taken by the left side."""
        if data["splitRatio"] == "custom":
            return data["customLeftPercent"]
        return _SPLIT_RATIOS.get(data["splitRatio"], 50)

    def _fields(self, data: Dict[str, Any]) -> List[Dict[str, Any]]:
        text = data["textConfig"]
        return text.get("fields", [])[: text["count"]]

    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        sheet = Stylesheet()
        if not self.is_active(data):
            return sheet

        image, text = data["imageConfig"], data["textConfig"]
        left = self.left_percent(data)
        image_percent = left if data["order"] == "image-left" else 100 - left
        text_percent = 100 - image_percent
        half_gap = f"{data['gap'] / 2:g}px"

        shadow = image.get("shadow") or {}
        box_shadow = (
            f"0 0 {shadow['blur']}px {shadow['spread']}px {shadow['color']}"
            if shadow.get("enabled")
            else "none"
        )

        sheet.add(
            ".image-text-box",
            {
                "display": "flex",
                "flex-direction": "row" if data["order"] == "image-left" else "row-reverse",
                "width": data["width"],
                "height": data["height"],
                "gap": f"{data['gap']}px",
                "align-items": "stretch",
                "flex-basis": data["layoutWidth"],
                "align-self": data["alignSelf"],
                "min-width": 0,
                "min-height": 0,
                "position": "relative",
                "box-sizing": "border-box",
                "flex-shrink": 1,
                "z-index": self.z_index,
            },
        )
        sheet.add(
            ".image-text-box-image-side",
            {
                "flex": f"0 0 calc({image_percent:g}% - {half_gap})",
                "min-width": 0,
                "min-height": 0,
                "overflow": "hidden",
                **_padding(image),
                "box-sizing": "border-box",
                "border-radius": f"{image['borderRadius']}px",
            },
            layer=False,
        )
        sheet.add(
            ".image-text-box-image",
            {
                "width": "100%",
                "height": "100%",
                "object-fit": image["objectFit"],
                "border-radius": f"{image['borderRadius']}px",
                "box-shadow": box_shadow,
                "display": "block",
            },
            layer=False,
        )
        sheet.add(
            ".image-text-box-text-side",
            {
                "flex": f"0 0 calc({text_percent:g}% - {half_gap})",
                "display": "flex",
                "flex-direction": "column",
                "gap": f"{text['gap']}px",
                "justify-content": _VERTICAL_ALIGN.get(text["verticalAlign"], "center"),
                "min-width": 0,
                "min-height": 0,
                **_padding(text),
                "box-sizing": "border-box",
            },
            layer=False,
        )
        sheet.add(
            ".image-text-box-text-field",
            {"word-wrap": "break-word", "overflow-wrap": "break-word"},
            layer=False,
        )
        for index, field in enumerate(self._fields(data), start=1):
            if not field.get("content"):
                continue
            sheet.add(
                f".image-text-box-text-field-{index}",
                text_style_declarations(field.get("style") or {}),
                layer=False,
            )
        return sheet

    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        if not self.is_active(data):
            return ""
        url = resolve_url(data["imageConfig"]["url"], ctx.base_url)
        if not url:
            return ""

        fields = []
        for index, field in enumerate(self._fields(data), start=1):
            content = field.get("content") or ""
            if not content:
                continue
            markup = render_rich_text(content, field.get("styledChunks"), field.get("style"))
            fields.append(
                f'      <div class="image-text-box-text-field image-text-box-text-field-{index}">{markup}</div>'
            )

        return "\n".join(
            [
                '<div class="image-text-box">',
                '  <div class="image-text-box-image-side">',
                f'    <img class="image-text-box-image" src="{escape_html(url)}" alt="Content" />',
                "  </div>",
                '  <div class="image-text-box-text-side">',
                *fields,
                "  </div>",
                "</div>",
            ]
        )
