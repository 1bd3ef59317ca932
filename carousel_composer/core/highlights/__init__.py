"""
Highlights Module
================

Map externally supplied slide copy and highlights onto module data.

Components:
- converter: Highlight records to styled chunks
- layouts: Named layout bases
- transformer: Carousel slides to editor slides
"""

from .converter import HighlightConverter, convert_highlights
from .layouts import LayoutLibrary, LayoutNotFoundError
from .transformer import (
    CarouselTransformError,
    SlideTransformer,
    transform_carousel,
    transform_slide,
)

__all__ = [
    "HighlightConverter",
    "convert_highlights",
    "LayoutLibrary",
    "LayoutNotFoundError",
    "CarouselTransformError",
    "SlideTransformer",
    "transform_carousel",
    "transform_slide",
]
