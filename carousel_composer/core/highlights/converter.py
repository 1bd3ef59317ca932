"""
Highlight Converter
==================

Map externally supplied highlights onto styled chunks.

Two input shapes are accepted and may be mixed in one list:
- legacy: plain substrings
- typed: ``{substring, kind, colored}`` records (``trecho``/``tipo``/``cor``
  keys are accepted as well)
"""

from typing import Any, List, Mapping, Optional, Sequence, Union

from pydantic import ValidationError

from carousel_composer.config.logging import get_logger
from carousel_composer.models.schemas import HighlightKind, HighlightSpec, StyledChunk
from carousel_composer.utils.html import strip_markup_chars

logger = get_logger(__name__)

BACKGROUND_PADDING = "4px"
SECONDARY_BACKGROUND = "#ffffff"

HighlightInput = Union[str, HighlightSpec, Mapping[str, Any]]


class HighlightConverter:
    """Converts highlight instructions into styled chunks."""

    def __init__(self):
        self.logger = logger.bind(component="highlight_converter")

    def convert(
        self,
        text: str,
        highlights: Optional[Sequence[HighlightInput]],
        primary_color: str,
        bold_only: bool = False,
    ) -> List[StyledChunk]:
        """
        Convert highlights into chunks for ``text``.

        A highlight whose substring does not occur in the text is dropped with a
        warning; the remaining highlights are still converted.

        Args:
            text: Source text the highlights refer to
            highlights: Legacy substrings and/or typed highlight records
            primary_color: Highlight color
            bold_only: Emphasize with weight only, never with color

        Returns:
            Styled chunks in input order
        """
        chunks: List[StyledChunk] = []
        if not text or not highlights:
            return chunks

        for highlight in highlights:
            if isinstance(highlight, str):
                chunk = self._convert_legacy(text, highlight, primary_color, bold_only)
            else:
                spec = self._coerce_spec(highlight)
                if spec is None:
                    continue
                chunk = self._convert_typed(text, spec, primary_color, bold_only)

            if chunk is not None:
                chunks.append(chunk)

        return chunks

    def _convert_legacy(
        self, text: str, highlight: str, primary_color: str, bold_only: bool
    ) -> Optional[StyledChunk]:
        substring = self._find(text, highlight)
        if substring is None:
            return None
        if bold_only:
            return StyledChunk(text=substring, bold=True)
        return StyledChunk(text=substring, color=primary_color)

    def _convert_typed(
        self, text: str, spec: HighlightSpec, primary_color: str, bold_only: bool
    ) -> Optional[StyledChunk]:
        substring = self._find(text, spec.substring)
        if substring is None:
            return None

        chunk = StyledChunk(text=substring)
        if spec.kind in (HighlightKind.BOLD, HighlightKind.BOLD_ITALIC):
            chunk.bold = True
        if spec.kind in (HighlightKind.ITALIC, HighlightKind.BOLD_ITALIC):
            chunk.italic = True

        if spec.kind.is_background:
            chunk.padding = BACKGROUND_PADDING
            chunk.background_color = (
                SECONDARY_BACKGROUND if spec.kind == HighlightKind.BG4_SECONDARY else primary_color
            )
        elif spec.colored and not bold_only:
            chunk.color = primary_color

        return chunk

    def _coerce_spec(self, highlight: Union[HighlightSpec, Mapping[str, Any]]) -> Optional[HighlightSpec]:
        if isinstance(highlight, HighlightSpec):
            return highlight
        try:
            return HighlightSpec.model_validate(highlight)
        except ValidationError as e:
            self.logger.warning("Skipping malformed highlight", error=str(e))
            return None

    def _find(self, text: str, highlight: str) -> Optional[str]:
        substring = strip_markup_chars(highlight)
        if not substring.strip():
            self.logger.warning("Skipping empty highlight")
            return None
        if substring not in text:
            self.logger.warning(
                "Highlight not found in text", highlight=substring, text_preview=text[:50]
            )
            return None
        return substring


# Shared converter instance
_converter: Optional[HighlightConverter] = None


def get_highlight_converter() -> HighlightConverter:
    """Get the shared highlight converter."""
    global _converter
    if _converter is None:
        _converter = HighlightConverter()
    return _converter


def convert_highlights(
    text: str,
    highlights: Optional[Sequence[HighlightInput]],
    primary_color: str,
    bold_only: bool = False,
) -> List[StyledChunk]:
    """Convenience function to convert highlights into styled chunks."""
    return get_highlight_converter().convert(text, highlights, primary_color, bold_only)
