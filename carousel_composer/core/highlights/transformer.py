"""
Slide Transformer
=================

Turn externally generated carousel copy into editor slides. Each carousel
slide names a layout base in its ``style``; the base is copied and its module
data filled with the slide texts, converted highlights, photo and counter.

Style variants:
- ``<base> reverse``: card flows bottom-up and text paddings are swapped
- ``*-b``: highlights use the secondary color
- ``stack-img``: bold-only highlights, white text and a card gradient
"""

import re
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from carousel_composer.config.logging import get_logger
from carousel_composer.config.settings import get_settings
from carousel_composer.models.schemas import CardGradient, CarouselSlide, PhotoSources, Slide
from carousel_composer.core.highlights.converter import get_highlight_converter
from carousel_composer.core.highlights.layouts import LayoutLibrary, LayoutNotFoundError
from carousel_composer.core.modules.registry import get_registry
from carousel_composer.utils.data import deep_merge
from carousel_composer.utils.html import strip_markup_chars

logger = get_logger(__name__)

TEXT_KEYS = tuple(f"text_{i}" for i in range(1, 6))
MAIN_TEXT_SIZE_STEP = 12
MAIN_TEXT_BOLD_WEIGHT = "900"
DEFAULT_MAIN_TEXT_SIZE = 36

_REVERSE_PATTERN = re.compile(r"\s+reverse$", re.IGNORECASE)
_LEADING_NUMBER = re.compile(r"\d+")

STACK_IMG_GRADIENT = {
    "enabled": True,
    "color": "#000000",
    "startOpacity": 0.7,
    "midOpacity": 0.4,
    "height": 60,
    "direction": "to top",
}


class CarouselTransformError(ValueError):
    """Exception raised when carousel data cannot be transformed."""
    pass


def split_style(style: str):
    """
    Split a slide style into its layout base and reverse flag.

    Args:
        style: Style as supplied, e.g. ``"stack-img-bg reverse"``

    Returns:
        Tuple of (layout name, reversed)
    """
    style = style.strip()
    if _REVERSE_PATTERN.search(style):
        return _REVERSE_PATTERN.sub("", style), True
    return style, False


class SlideTransformer:
    """Builds editor slides from carousel copy and layout bases."""

    def __init__(
        self,
        library: Optional[LayoutLibrary] = None,
        highlight_color: Optional[str] = None,
        highlight_color_secondary: Optional[str] = None,
    ):
        """
        Initialize slide transformer.

        :param library: Layout bases; the configured library by default
        :param highlight_color: Primary highlight color; defaults to settings
        :param highlight_color_secondary: Color used by ``-b`` variants; defaults to settings
        """
        settings = get_settings()
        self.library = library or LayoutLibrary()
        self.highlight_color = highlight_color or settings.highlight_color
        self.highlight_color_secondary = (
            highlight_color_secondary or settings.highlight_color_secondary
        )
        self.converter = get_highlight_converter()
        self.registry = get_registry()
        self.logger = logger.bind(component="slide_transformer")

    def transform_slide(
        self,
        slide: CarouselSlide,
        total: Optional[int] = None,
        photo: Optional[PhotoSources] = None,
        card_gradient: Optional[CardGradient] = None,
    ) -> Slide:
        """
        Transform one carousel slide.

        Args:
            slide: Carousel slide copy
            total: Number of slides in the carousel, for the counter
            photo: Photo sources for this slide
            card_gradient: Gradient merged into the card overlay

        Returns:
            Editor slide built on the slide's layout base

        Raises:
            CarouselTransformError: If the layout base does not exist
        """
        layout_name, reverse = split_style(slide.style)
        try:
            result = self.library.get(layout_name)
        except LayoutNotFoundError as e:
            raise CarouselTransformError(f"Slide {slide.number}: {e}") from e

        result.name = f"Slide {slide.number}"
        data = result.data
        enabled = result.enabled_module_ids
        stack_img = layout_name == "stack-img"
        color = (
            self.highlight_color_secondary if layout_name.endswith("-b") else self.highlight_color
        )

        if "textFields" in enabled:
            data["textFields"] = self._fill_text_fields(
                self._module_data("textFields", data), slide, color, stack_img
            )

        card = self._module_data("card", data) if "card" in enabled else None
        if card is not None:
            if stack_img:
                card["gradientOverlay"] = deep_merge(card["gradientOverlay"], STACK_IMG_GRADIENT)
            if card_gradient is not None:
                overrides = card_gradient.model_dump(by_alias=True, exclude_none=True)
                card["gradientOverlay"] = deep_merge(
                    card["gradientOverlay"], {**overrides, "enabled": True}
                )
            if reverse:
                card["layoutDirection"] = "column-reverse"
                card["justifyContent"] = "flex-end"
            data["card"] = card

        if reverse and "textFields" in data:
            fields = data["textFields"]
            fields["paddingTop"], fields["paddingBottom"] = (
                fields.get("paddingBottom", 0),
                fields.get("paddingTop", 0),
            )

        if photo is not None:
            self._apply_photo(result, photo)

        if total and "freeText" in enabled:
            counter = self._module_data("freeText", data)
            counter["content"] = f"{slide.number}/{total}"
            data["freeText"] = counter

        self.logger.debug(
            "Slide transformed",
            number=slide.number,
            layout=layout_name,
            reverse=reverse,
            modules=enabled,
        )
        return result

    def _module_data(self, module_id: str, data: Dict[str, Dict[str, Any]]) -> Dict[str, Any]:
        return self.registry.require(module_id).resolve_data(data.get(module_id))

    def _fill_text_fields(
        self, text_data: Dict[str, Any], slide: CarouselSlide, color: str, stack_img: bool
    ) -> Dict[str, Any]:
        fields: List[Dict[str, Any]] = text_data["fields"]
        template = self.registry.require("textFields").default_data()["fields"][0]
        while len(fields) < len(TEXT_KEYS):
            fields.append(deep_merge(template, {}))

        highlights = slide.highlights or {}
        for key, field in zip(TEXT_KEYS, fields):
            raw = slide.text_for(key)
            text = strip_markup_chars(raw).strip() if raw else ""
            field["content"] = text
            if not text:
                field["styledChunks"] = []
                continue

            chunks = self.converter.convert(
                text, highlights.get(key), color, bold_only=stack_img
            )
            if key == slide.main_text:
                chunks = [
                    chunk.model_copy(update={"font_weight": MAIN_TEXT_BOLD_WEIGHT}) if chunk.bold else chunk
                    for chunk in chunks
                ]
            field["styledChunks"] = [
                chunk.model_dump(by_alias=True, exclude_defaults=True) for chunk in chunks
            ]

            style = field.setdefault("style", {})
            if stack_img:
                style["color"] = "#ffffff"
            if key == slide.main_text:
                style["fontSize"] = f"{self._font_size(style.get('fontSize')) + MAIN_TEXT_SIZE_STEP}px"
                style["fontWeight"] = "700"

        used = max((i + 1 for i, field in enumerate(fields) if field.get("content")), default=0)
        text_data["count"] = max(text_data.get("count", 1), used, 1)
        return text_data

    @staticmethod
    def _font_size(value: Any) -> int:
        match = _LEADING_NUMBER.match(str(value or ""))
        return int(match.group()) if match else DEFAULT_MAIN_TEXT_SIZE

    def _apply_photo(self, slide: Slide, photo: PhotoSources) -> None:
        data = slide.data
        if "contentImage" in slide.enabled_module_ids:
            url = photo.landscape or photo.original
            if url:
                image = self._module_data("contentImage", data)
                image["url"] = url
                data["contentImage"] = image
        elif "card" in slide.enabled_module_ids:
            url = photo.portrait or photo.original
            if url:
                card = self._module_data("card", data)
                card["backgroundType"] = "image"
                card["backgroundImage"] = url
                data["card"] = card

    def transform_carousel(
        self,
        payload: Mapping[str, Any],
        card_gradient: Optional[Union[CardGradient, Mapping[str, Any]]] = None,
    ) -> List[Slide]:
        """
        Transform a whole carousel payload.

        Slides are read from ``carousel.copy.slides``, ``carrossel.slides`` or a
        top-level ``slides`` list. ``photos`` entries (``{slide, photo: {src}}``)
        and ``destaques`` entries (``{numero, destaques}``) are matched to slides
        by number; the latter replace the slide's own highlights.

        Args:
            payload: Decoded carousel document
            card_gradient: Gradient applied to every card; ``payload["cardGradient"]`` otherwise

        Returns:
            Editor slides in input order

        Raises:
            CarouselTransformError: If slides are missing or malformed
        """
        raw_slides = self._find_slides(payload)
        photos = self._photos_by_slide(payload.get("photos") or [])
        highlights = self._highlights_by_slide(payload.get("destaques") or [])

        gradient = card_gradient if card_gradient is not None else payload.get("cardGradient")
        if gradient is not None and not isinstance(gradient, CardGradient):
            try:
                gradient = CardGradient.model_validate(gradient)
            except ValidationError as e:
                raise CarouselTransformError(f"Invalid card gradient: {e}") from e

        slides = []
        total = len(raw_slides)
        for index, raw in enumerate(raw_slides):
            if not isinstance(raw, Mapping):
                raise CarouselTransformError(f"Slide at position {index} must be an object")
            raw = dict(raw)
            number = raw.get("number", raw.get("numero"))
            if number in highlights:
                raw["highlights"] = highlights[number]
            try:
                copy = CarouselSlide.model_validate(raw)
            except ValidationError as e:
                raise CarouselTransformError(f"Invalid slide at position {index}: {e}") from e
            slides.append(self.transform_slide(copy, total, photos.get(copy.number), gradient))

        self.logger.info("Carousel transformed", slide_count=len(slides))
        return slides

    @staticmethod
    def _find_slides(payload: Mapping[str, Any]) -> List[Any]:
        candidates = (
            ((payload.get("carousel") or {}).get("copy") or {}).get("slides"),
            (payload.get("carrossel") or {}).get("slides"),
            payload.get("slides"),
        )
        for slides in candidates:
            if isinstance(slides, list):
                return slides
        raise CarouselTransformError("No slides found in carousel payload")

    def _photos_by_slide(self, entries: List[Any]) -> Dict[int, PhotoSources]:
        photos = {}
        for entry in entries:
            try:
                source = entry["photo"]["src"]
                photos[int(entry["slide"])] = PhotoSources.model_validate(source)
            except (KeyError, TypeError, ValueError) as e:
                self.logger.warning("Skipping malformed photo entry", error=str(e))
        return photos

    def _highlights_by_slide(self, entries: List[Any]) -> Dict[int, Any]:
        highlights = {}
        for entry in entries:
            if not isinstance(entry, Mapping) or "numero" not in entry:
                self.logger.warning("Skipping malformed highlight entry")
                continue
            highlights[entry["numero"]] = entry.get("destaques") or {}
        return highlights


def transform_slide(
    slide: Union[CarouselSlide, Mapping[str, Any]],
    highlight_color: Optional[str] = None,
    highlight_color_secondary: Optional[str] = None,
    total: Optional[int] = None,
    photo: Optional[PhotoSources] = None,
    library: Optional[LayoutLibrary] = None,
) -> Slide:
    """Convenience function to transform a single carousel slide."""
    if not isinstance(slide, CarouselSlide):
        try:
            slide = CarouselSlide.model_validate(slide)
        except ValidationError as e:
            raise CarouselTransformError(f"Invalid slide: {e}") from e
    transformer = SlideTransformer(library, highlight_color, highlight_color_secondary)
    return transformer.transform_slide(slide, total, photo)


def transform_carousel(
    payload: Mapping[str, Any],
    highlight_color: Optional[str] = None,
    highlight_color_secondary: Optional[str] = None,
    card_gradient: Optional[Union[CardGradient, Mapping[str, Any]]] = None,
    library: Optional[LayoutLibrary] = None,
) -> List[Slide]:
    """Convenience function to transform a carousel payload."""
    transformer = SlideTransformer(library, highlight_color, highlight_color_secondary)
    return transformer.transform_carousel(payload, card_gradient)
