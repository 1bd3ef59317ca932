"""
Style Value Sanitizers
=====================

Pattern checks for every CSS value the chunk renderer writes into an inline
``style`` attribute. Each sanitizer returns the normalized token, or None when
the value fails its pattern; callers omit the property in that case.
"""

import re
from typing import Optional, Union

CSSValue = Union[str, int, float, None]

_COLOR_PATTERN = re.compile(
    r"^(#[0-9a-f]{3,8}"
    r"|rgba?\(\s*[\d.]+%?\s*(,\s*[\d.]+%?\s*){2}(,\s*[\d.]+%?\s*)?\)"
    r"|hsla?\(\s*[\d.]+(deg)?\s*(,\s*[\d.]+%\s*){2}(,\s*[\d.]+%?\s*)?\)"
    r"|[a-z]+)$"
)
_HEX_COLOR_PATTERN = re.compile(r"^#([0-9a-f]{3}|[0-9a-f]{6})$")
_SIZE_PATTERN = re.compile(r"^\d+(\.\d+)?(px|em|rem|%|pt|vw|vh)?$")
_SIGNED_SIZE_PATTERN = re.compile(r"^-?\d+(\.\d+)?(px|em|rem|%|pt)?$")
_LINE_HEIGHT_PATTERN = re.compile(r"^\d+(\.\d+)?(px|em|rem|%)?$")
_BLUR_PATTERN = re.compile(r"^\d+(\.\d+)?(px)?$")
_FONT_PATTERN = re.compile(r"^[\w\s,'\"\-]+$")
_FONT_WEIGHTS = {"normal", "bold", "bolder", "lighter"}
_FONT_WEIGHT_PATTERN = re.compile(r"^[1-9]00$")
_FONT_STYLES = {"normal", "italic", "oblique"}
_TEXT_ALIGNS = {"left", "center", "right", "justify"}
_UNITLESS = re.compile(r"^-?\d+(\.\d+)?$")


def _as_token(value: CSSValue) -> Optional[str]:
    if value is None or isinstance(value, bool):
        return None
    token = str(value).strip()
    return token or None


def sanitize_color(value: CSSValue) -> Optional[str]:
    """Hex, rgb(a), hsl(a) or a named color."""
    token = _as_token(value)
    if token is None:
        return None
    token = token.lower()
    return token if _COLOR_PATTERN.match(token) else None


def sanitize_font_family(value: CSSValue) -> Optional[str]:
    """
    Font family names or lists.

    Double quotes become single quotes so the token is safe inside a
    double-quoted attribute. A single name containing spaces is quoted.
    """
    token = _as_token(value)
    if token is None or not _FONT_PATTERN.match(token):
        return None
    token = token.replace('"', "'")
    if token.count("'") % 2:
        return None
    if "," not in token and " " in token and not token.startswith("'"):
        return f"'{token}'"
    return token


def sanitize_size(value: CSSValue) -> Optional[str]:
    """Non-negative length; bare numbers are treated as pixels."""
    token = _as_token(value)
    if token is None or not _SIZE_PATTERN.match(token):
        return None
    return f"{token}px" if _UNITLESS.match(token) else token


def sanitize_letter_spacing(value: CSSValue) -> Optional[str]:
    """Signed length; bare numbers are treated as pixels."""
    token = _as_token(value)
    if token is None:
        return None
    if token == "normal":
        return token
    if not _SIGNED_SIZE_PATTERN.match(token):
        return None
    return f"{token}px" if _UNITLESS.match(token) else token


def sanitize_line_height(value: CSSValue) -> Optional[str]:
    """Line height; unitless multipliers are kept as is."""
    token = _as_token(value)
    if token is None:
        return None
    if token == "normal" or _LINE_HEIGHT_PATTERN.match(token):
        return token
    return None


def sanitize_padding(value: CSSValue) -> Optional[str]:
    """One to four lengths; bare numbers are treated as pixels."""
    token = _as_token(value)
    if token is None:
        return None
    parts = token.split()
    if not 1 <= len(parts) <= 4:
        return None
    normalized = []
    for part in parts:
        size = sanitize_size(part)
        if size is None:
            return None
        normalized.append(size)
    return " ".join(normalized)


def sanitize_blur(value: CSSValue) -> Optional[str]:
    """Blur radius in pixels."""
    token = _as_token(value)
    if token is None or not _BLUR_PATTERN.match(token):
        return None
    return token if token.endswith("px") else f"{token}px"


def sanitize_font_weight(value: CSSValue) -> Optional[str]:
    token = _as_token(value)
    if token is None:
        return None
    token = token.lower()
    if token in _FONT_WEIGHTS or _FONT_WEIGHT_PATTERN.match(token):
        return token
    return None


def sanitize_font_style(value: CSSValue) -> Optional[str]:
    token = _as_token(value)
    if token is None:
        return None
    return token.lower() if token.lower() in _FONT_STYLES else None


def sanitize_text_align(value: CSSValue) -> Optional[str]:
    token = _as_token(value)
    if token is None:
        return None
    return token.lower() if token.lower() in _TEXT_ALIGNS else None


def sanitize_opacity(value: CSSValue, default: float) -> float:
    """Opacity clamped to 0..1; invalid input falls back to ``default``."""
    try:
        opacity = float(value) if value is not None else default
    except (TypeError, ValueError):
        return default
    return min(max(opacity, 0.0), 1.0)


def hex_to_rgba(color: str, opacity: float) -> Optional[str]:
    """Convert ``#rgb`` or ``#rrggbb`` into an ``rgba()`` token."""
    color = color.lower()
    if not _HEX_COLOR_PATTERN.match(color):
        return None
    digits = color[1:]
    if len(digits) == 3:
        digits = "".join(ch * 2 for ch in digits)
    r, g, b = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    return f"rgba({r}, {g}, {b}, {opacity:g})"
