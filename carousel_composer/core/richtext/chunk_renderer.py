"""
Rich-Text Chunk Renderer
=======================

Turn plain text plus a list of styled substrings into safe inline markup.

Chunks claim the first occurrence of their text that does not overlap an
earlier accepted chunk. Each accepted chunk resolves its style per attribute
(chunk value, then parent value), every literal fragment is HTML-escaped and
style attributes are assembled only from sanitized tokens.
"""

from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from pydantic import ValidationError

from carousel_composer.config.logging import get_logger
from carousel_composer.models.schemas import BlurFadeDirection, ParentStyles, StyledChunk
from carousel_composer.utils.html import escape_html
from carousel_composer.core.richtext.sanitizers import (
    hex_to_rgba,
    sanitize_blur,
    sanitize_color,
    sanitize_font_family,
    sanitize_font_style,
    sanitize_font_weight,
    sanitize_letter_spacing,
    sanitize_line_height,
    sanitize_opacity,
    sanitize_padding,
    sanitize_size,
    sanitize_text_align,
)

logger = get_logger(__name__)

LINE_BREAK_SPACER = '<span style="display:block;width:100%;height:0.5em"></span>'
DEFAULT_BLUR_FADE = 8.0
MAX_BLUR_FADE = 25.0
DEFAULT_BLUR_OPACITY = 0.3

ChunkInput = Union[StyledChunk, Mapping[str, Any]]
ParentInput = Union[ParentStyles, Mapping[str, Any], None]


class ChunkRenderer:
    """Renderer for styled text chunks."""

    def __init__(self):
        self.logger = logger.bind(component="chunk_renderer")

    def render(
        self, text: str, chunks: Sequence[ChunkInput], parent: ParentInput = None
    ) -> str:
        """
        Render text with styled chunks applied.

        Args:
            text: Source text
            chunks: Styled substrings, accepted in input order
            parent: Base style of the enclosing field

        Returns:
            Safe inline markup
        """
        if not text:
            return ""

        parent_styles = self._coerce_parent(parent)
        applied: List[Tuple[int, int, str]] = []

        for chunk in self._coerce_chunks(chunks):
            if not chunk.text:
                continue

            span = self._locate(text, chunk.text, applied)
            if span is None:
                self.logger.debug("Chunk not placed", chunk_text=chunk.text)
                continue

            styles = self._build_chunk_styles(chunk, parent_styles)
            if not styles and not chunk.line_break:
                self.logger.debug("Chunk produced no styles", chunk_text=chunk.text)
                continue

            start, end = span
            fragment = escape_html(text[start:end])
            if styles:
                fragment = f'<span style="{";".join(styles)}">{fragment}</span>'
            if chunk.line_break:
                fragment += LINE_BREAK_SPACER
            applied.append((start, end, fragment))

        if not applied:
            return escape_html(text)

        applied.sort(key=lambda item: item[0])
        parts = []
        cursor = 0
        for start, end, fragment in applied:
            parts.append(escape_html(text[cursor:start]))
            parts.append(fragment)
            cursor = end
        parts.append(escape_html(text[cursor:]))
        result = "".join(parts)

        if parent_styles is not None:
            wrapper_styles = self._build_wrapper_styles(parent_styles)
            if wrapper_styles:
                result = f'<span style="{";".join(wrapper_styles)}">{result}</span>'

        return result

    def _coerce_chunks(self, chunks: Iterable[ChunkInput]) -> List[StyledChunk]:
        coerced = []
        for raw in chunks or []:
            if isinstance(raw, StyledChunk):
                coerced.append(raw)
                continue
            try:
                coerced.append(StyledChunk.model_validate(raw))
            except ValidationError as e:
                self.logger.warning("Skipping malformed chunk", error=str(e))
        return coerced

    def _coerce_parent(self, parent: ParentInput) -> Optional[ParentStyles]:
        if parent is None:
            return None
        if not isinstance(parent, ParentStyles):
            try:
                parent = ParentStyles.model_validate(parent)
            except ValidationError as e:
                self.logger.warning("Ignoring malformed parent styles", error=str(e))
                return None
        return None if parent.is_empty() else parent

    @staticmethod
    def _locate(
        text: str, needle: str, claimed: Sequence[Tuple[int, int, str]]
    ) -> Optional[Tuple[int, int]]:
        """First occurrence of ``needle`` not overlapping a claimed range."""
        position = text.find(needle)
        while position != -1:
            end = position + len(needle)
            if not any(position < c_end and c_start < end for c_start, c_end, _ in claimed):
                return position, end
            position = text.find(needle, position + 1)
        return None

    def _build_chunk_styles(
        self, chunk: StyledChunk, parent: Optional[ParentStyles]
    ) -> List[str]:
        styles: List[str] = []

        def resolve(chunk_value, parent_attr, sanitizer):
            if chunk_value is not None:
                return sanitizer(chunk_value)
            if parent is not None:
                parent_value = getattr(parent, parent_attr)
                if parent_value is not None:
                    return sanitizer(parent_value)
            return None

        def push(prop: str, value: Optional[str], suffix: str = "") -> None:
            if value is not None:
                styles.append(f"{prop}:{value}{suffix}")

        push("color", resolve(chunk.color, "color", sanitize_color))
        push("font-family", resolve(chunk.font_family, "font_family", sanitize_font_family))
        push("font-size", resolve(chunk.font_size, "font_size", sanitize_size))

        weight = sanitize_font_weight(chunk.font_weight) if chunk.font_weight is not None else None
        if weight is not None:
            push("font-weight", weight)
        elif chunk.bold is not None:
            push("font-weight", "bold" if chunk.bold else "normal")
        elif parent is not None:
            push("font-weight", sanitize_font_weight(parent.font_weight))

        if chunk.italic is not None:
            push("font-style", "italic" if chunk.italic else "normal")
        elif parent is not None:
            push("font-style", sanitize_font_style(parent.font_style))

        if chunk.underline is not None:
            push("text-decoration", "underline" if chunk.underline else "none")

        push(
            "letter-spacing",
            resolve(chunk.letter_spacing, "letter_spacing", sanitize_letter_spacing),
        )
        push("line-height", resolve(chunk.line_height, "line_height", sanitize_line_height))
        push(
            "background-color",
            resolve(chunk.background_color, "background_color", sanitize_color),
        )

        if chunk.padding is not None:
            push("padding", sanitize_padding(chunk.padding), " !important")
        elif parent is not None:
            push("padding", sanitize_padding(parent.padding))

        if chunk.background_blur is not None:
            styles.extend(self._build_blur_styles(chunk))

        return styles

    @staticmethod
    def _build_blur_styles(chunk: StyledChunk) -> List[str]:
        blur = sanitize_blur(chunk.background_blur)
        if blur is None:
            return []

        styles = [
            f"backdrop-filter:blur({blur})",
            f"-webkit-backdrop-filter:blur({blur})",
            "border-radius:16px",
        ]

        fade = chunk.blur_fade_amount if chunk.blur_fade_amount is not None else DEFAULT_BLUR_FADE
        fade = min(max(float(fade), 0.0), MAX_BLUR_FADE)
        direction = chunk.blur_fade_direction or BlurFadeDirection.VERTICAL

        if fade > 0:
            vertical = _fade_gradient("to bottom", fade)
            horizontal = _fade_gradient("to right", fade)
            if direction == BlurFadeDirection.VERTICAL:
                mask = vertical
            elif direction == BlurFadeDirection.HORIZONTAL:
                mask = horizontal
            else:
                mask = f"{vertical}, {horizontal}"
            styles.append(f"-webkit-mask-image:{mask}")
            styles.append(f"mask-image:{mask}")
            if direction == BlurFadeDirection.BOTH:
                styles.append("-webkit-mask-composite:source-in")
                styles.append("mask-composite:intersect")

        if chunk.blur_color is not None:
            color = sanitize_color(chunk.blur_color)
            opacity = sanitize_opacity(chunk.blur_opacity, DEFAULT_BLUR_OPACITY)
            rgba = hex_to_rgba(color, opacity) if color else None
            if rgba:
                styles.append(f"background-color:{rgba}")

        return styles

    @staticmethod
    def _build_wrapper_styles(parent: ParentStyles) -> List[str]:
        """Parent attributes carried by the outer span so plain runs inherit them."""
        candidates = [
            ("font-family", sanitize_font_family(parent.font_family)),
            ("color", sanitize_color(parent.color)),
            ("font-size", sanitize_size(parent.font_size)),
            ("font-weight", sanitize_font_weight(parent.font_weight)),
            ("font-style", sanitize_font_style(parent.font_style)),
            ("letter-spacing", sanitize_letter_spacing(parent.letter_spacing)),
            ("line-height", sanitize_line_height(parent.line_height)),
        ]
        styles = [f"{prop}:{value}" for prop, value in candidates if value is not None]

        text_align = sanitize_text_align(parent.text_align)
        if text_align:
            styles.append(f"text-align:{text_align}")
            styles.append("display:block")
        return styles


def _fade_gradient(direction: str, fade: float) -> str:
    return (
        f"linear-gradient({direction}, transparent 0%, black {fade:g}%, "
        f"black {100 - fade:g}%, transparent 100%)"
    )


# Shared renderer instance
_renderer: Optional[ChunkRenderer] = None


def get_chunk_renderer() -> ChunkRenderer:
    """Get the shared chunk renderer."""
    global _renderer
    if _renderer is None:
        _renderer = ChunkRenderer()
    return _renderer


def render_styled_chunks(
    text: str, chunks: Sequence[ChunkInput], parent: ParentInput = None
) -> str:
    """
    Convenience function to render styled chunks.

    Args:
        text: Source text
        chunks: Styled chunks (models or dictionaries)
        parent: Optional parent styles

    Returns:
        Safe inline markup
    """
    return get_chunk_renderer().render(text, chunks, parent)
