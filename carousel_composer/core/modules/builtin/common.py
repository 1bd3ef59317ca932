"""
Shared Module Helpers
=====================

Schema fragments and rendering helpers reused by the built-in modules.
"""

import colorsys
import re
from typing import Any, Dict, Mapping, Optional

from carousel_composer.models.schemas import ParentStyles, RenderContext
from carousel_composer.core.modules.instances import instance_number
from carousel_composer.core.richtext.chunk_renderer import render_styled_chunks
from carousel_composer.core.richtext.sanitizers import sanitize_color, sanitize_size
from carousel_composer.utils.html import escape_html

SIZE_TYPES = ["string", "integer", "float"]

TEXT_STYLE_SCHEMA: Dict[str, Any] = {
    "type": "dict",
    "schema": {
        "fontFamily": {"type": "string"},
        "fontSize": {"type": SIZE_TYPES},
        "fontWeight": {"type": SIZE_TYPES},
        "fontStyle": {"type": "string", "allowed": ["normal", "italic", "oblique"]},
        "color": {"type": "string"},
        "textAlign": {"type": "string", "allowed": ["left", "center", "right", "justify"]},
        "textTransform": {
            "type": "string",
            "allowed": ["none", "uppercase", "lowercase", "capitalize"],
        },
        "lineHeight": {"type": SIZE_TYPES},
        "letterSpacing": {"type": SIZE_TYPES},
        "backgroundColor": {"type": "string"},
        "padding": {"type": SIZE_TYPES},
    },
}

STYLED_CHUNKS_SCHEMA: Dict[str, Any] = {
    "type": "list",
    "schema": {"type": "dict", "schema": {"text": {"type": "string", "required": True}}},
}

SPECIAL_POSITIONS = [
    "none",
    "top-left",
    "top-right",
    "bottom-left",
    "bottom-right",
    "top-center",
    "bottom-center",
    "center-left",
    "center-right",
    "center",
]

_HEX_PATTERN = re.compile(r"^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$")
_NAME_PATTERN = re.compile(r"[^a-z0-9-]")


def instance_suffix(ctx: RenderContext) -> str:
    """Class-name suffix for the instance being rendered ('' for instance 1)."""
    number = instance_number(ctx.instance_id) if ctx.instance_id else 1
    return "" if number == 1 else f"-{number}"


def css_identifier(value: str) -> str:
    """Reduce a string to characters safe in a class name."""
    return _NAME_PATTERN.sub("-", value.lower()).strip("-")


def hex_to_rgb(color: str, fallback: str = "0, 0, 0") -> str:
    """``#rrggbb`` or ``#rgb`` as an ``r, g, b`` triplet."""
    if not color or not _HEX_PATTERN.match(color):
        return fallback
    digits = color[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    return ", ".join(str(int(digits[i:i + 2], 16)) for i in (0, 2, 4))


def px(value: Any) -> Optional[str]:
    """Numbers become pixel lengths; strings are validated as sizes."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return f"{value:g}px"
    return sanitize_size(value) or (value if value in ("auto", "0") else None)


def text_style_declarations(style: Mapping[str, Any]) -> Dict[str, Any]:
    """CSS declarations for a text style mapping."""
    return {
        "font-family": style.get("fontFamily"),
        "font-size": px(style.get("fontSize")),
        "font-weight": style.get("fontWeight"),
        "font-style": style.get("fontStyle"),
        "color": sanitize_color(style.get("color")),
        "text-align": style.get("textAlign"),
        "text-transform": style.get("textTransform"),
        "line-height": style.get("lineHeight"),
        "letter-spacing": px(style.get("letterSpacing")),
        "background-color": sanitize_color(style.get("backgroundColor")),
        "padding": px(style.get("padding")),
    }


def render_rich_text(content: str, chunks: Any, style: Optional[Mapping[str, Any]]) -> str:
    """Escaped text, or chunk markup inheriting ``style`` when chunks exist."""
    if not content:
        return ""
    if not chunks:
        return escape_html(content)
    parent = ParentStyles.model_validate(dict(style or {}))
    return render_styled_chunks(content, chunks, parent)


def special_position_declarations(
    position: str, padding_x: float = 40, padding_y: float = 40, unit: str = "px"
) -> Dict[str, Any]:
    """Absolute positioning for a preset anchor."""
    x = f"{padding_x:g}{unit}"
    y = f"{padding_y:g}{unit}"
    presets = {
        "top-left": {"top": y, "left": x},
        "top-right": {"top": y, "right": x},
        "bottom-left": {"bottom": y, "left": x},
        "bottom-right": {"bottom": y, "right": x},
        "top-center": {"top": y, "left": "50%", "transform": "translateX(-50%)"},
        "bottom-center": {"bottom": y, "left": "50%", "transform": "translateX(-50%)"},
        "center-left": {"top": "50%", "left": x, "transform": "translateY(-50%)"},
        "center-right": {"top": "50%", "right": x, "transform": "translateY(-50%)"},
        "center": {"top": "50%", "left": "50%", "transform": "translate(-50%, -50%)"},
    }
    declarations = {"position": "absolute"}
    declarations.update(presets.get(position, {}))
    return declarations


_PRESET_FILTERS = {
    "white": "brightness(0) saturate(100%) invert(100%)",
    "#ffffff": "brightness(0) saturate(100%) invert(100%)",
    "#fff": "brightness(0) saturate(100%) invert(100%)",
    "black": "brightness(0) saturate(100%)",
    "#000000": "brightness(0) saturate(100%)",
    "#000": "brightness(0) saturate(100%)",
}


def color_filter(color: Optional[str]) -> str:
    """
    CSS ``filter`` chain that tints a monochrome image towards ``color``.

    Black and white have exact presets; other hex colors are approximated
    through their hue, saturation and lightness. Anything else yields ``none``.
    """
    if not color or color == "none":
        return "none"
    normalized = color.strip().lower()
    if normalized in _PRESET_FILTERS:
        return _PRESET_FILTERS[normalized]
    if not _HEX_PATTERN.match(normalized):
        return "none"

    red, green, blue = (int(part) / 255 for part in hex_to_rgb(normalized).split(", "))
    hue, lightness, saturation = colorsys.rgb_to_hls(red, green, blue)
    hue, saturation, lightness = hue * 360, saturation * 100, lightness * 100

    invert = 100 if lightness > 50 else 0
    sepia = 100 if saturation > 0 else 0
    saturate = round(saturation * 20) if saturation > 0 else 100
    return (
        f"brightness(0) saturate(100%) invert({invert}%) sepia({sepia}%) "
        f"saturate({saturate}%) hue-rotate({round(hue)}deg) "
        f"brightness({round(lightness * 2)}%) contrast(100%)"
    )
