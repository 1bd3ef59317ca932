"""
Pydantic Models and Schemas
===========================

Core data models for module composition, styled text, ordering rules, editor
state and transport payloads. All models include validation and type hints.
"""

from typing import Optional, List, Dict, Any, Tuple, Union, Literal
from enum import Enum
import uuid

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    field_validator,
)

from carousel_composer.config.logging import get_logger

logger = get_logger(__name__)


# Enums
class ModuleCategory(str, Enum):
    """Module categories, used to bucket markup in the composed document."""
    LAYOUT = "layout"
    CONTENT = "content"
    OVERLAY = "overlay"
    SPECIAL = "special"


class SpatialRuleType(str, Enum):
    """Spatial rule kinds understood by the order engine."""
    BEFORE = "before"
    AFTER = "after"
    BETWEEN = "between"
    WRAP = "wrap"


class BlurFadeDirection(str, Enum):
    """Edge fade direction for background blur masks."""
    HORIZONTAL = "horizontal"
    VERTICAL = "vertical"
    BOTH = "both"


class HighlightKind(str, Enum):
    """Typed highlight kinds."""
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold+italic"
    BG4 = "bg4"
    BG4_PRIMARY = "bg4 primary"
    BG4_SECONDARY = "bg4 secondary"

    @property
    def is_background(self) -> bool:
        return self.value.startswith("bg4")


CSSValue = Union[str, int, float]


# Styled text models
class StyledChunk(BaseModel):
    """A styled substring of a larger text field."""
    text: str = Field(..., description="Literal substring of the parent text")
    color: Optional[str] = None
    font_family: Optional[str] = Field(None, alias="fontFamily")
    font_size: Optional[CSSValue] = Field(None, alias="fontSize")
    font_weight: Optional[CSSValue] = Field(
        None, alias="fontWeight", description="Explicit weight, takes precedence over bold"
    )
    bold: Optional[bool] = None
    italic: Optional[bool] = None
    underline: Optional[bool] = None
    letter_spacing: Optional[CSSValue] = Field(None, alias="letterSpacing")
    line_height: Optional[CSSValue] = Field(None, alias="lineHeight")
    background_color: Optional[str] = Field(None, alias="backgroundColor")
    background_blur: Optional[CSSValue] = Field(
        None, alias="backgroundBlur", description="Backdrop blur radius"
    )
    blur_color: Optional[str] = Field(None, alias="blurColor")
    blur_opacity: Optional[float] = Field(None, alias="blurOpacity")
    blur_fade_direction: Optional[BlurFadeDirection] = Field(None, alias="blurFadeDirection")
    blur_fade_amount: Optional[float] = Field(
        None, alias="blurFadeAmount", description="Fade percentage, clamped to 0-25"
    )
    padding: Optional[CSSValue] = None
    line_break: bool = Field(False, alias="lineBreak")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator(
        "color",
        "font_family",
        "font_size",
        "font_weight",
        "bold",
        "italic",
        "underline",
        "letter_spacing",
        "line_height",
        "background_color",
        "background_blur",
        "blur_color",
        "blur_opacity",
        "blur_fade_direction",
        "blur_fade_amount",
        "padding",
        "line_break",
        mode="wrap",
    )
    @classmethod
    def omit_invalid_style(cls, v: Any, handler: Any, info: ValidationInfo) -> Any:
        """An invalid style attribute is left unset instead of rejecting the chunk."""
        try:
            return handler(v)
        except ValidationError:
            logger.warning("Omitting invalid chunk attribute", field=info.field_name, value=repr(v))
            return False if info.field_name == "line_break" else None


class ParentStyles(BaseModel):
    """Base style of a text field, inherited by chunks that omit a property."""
    color: Optional[str] = None
    font_family: Optional[str] = Field(None, alias="fontFamily")
    font_size: Optional[CSSValue] = Field(None, alias="fontSize")
    font_weight: Optional[CSSValue] = Field(None, alias="fontWeight")
    font_style: Optional[str] = Field(None, alias="fontStyle")
    letter_spacing: Optional[CSSValue] = Field(None, alias="letterSpacing")
    line_height: Optional[CSSValue] = Field(None, alias="lineHeight")
    background_color: Optional[str] = Field(None, alias="backgroundColor")
    padding: Optional[CSSValue] = None
    text_align: Optional[str] = Field(None, alias="textAlign")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    def is_empty(self) -> bool:
        return all(value is None for value in self.model_dump().values())


class HighlightSpec(BaseModel):
    """Typed highlight record."""
    substring: str = Field(..., validation_alias=AliasChoices("substring", "trecho"))
    kind: HighlightKind = Field(
        HighlightKind.BOLD, validation_alias=AliasChoices("kind", "tipo")
    )
    colored: bool = Field(False, validation_alias=AliasChoices("colored", "cor"))

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, v: Any) -> Any:
        if isinstance(v, str):
            return " ".join(v.strip().lower().split())
        return v


# Ordering and layering models
class WrapperConfig(BaseModel):
    """Element used when a wrap rule wraps a module's markup."""
    tag: Literal["div", "section", "article", "span"] = "div"
    class_name: Optional[str] = Field(None, alias="className")
    style: Optional[str] = None

    model_config = ConfigDict(populate_by_name=True)


class SpatialRule(BaseModel):
    """Declarative instruction relocating one module relative to others."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    type: SpatialRuleType = Field(..., description="Rule type")
    target: str = Field(..., description="Module id being moved or wrapped")
    reference: Optional[str] = Field(None, description="Primary reference module id")
    reference2: Optional[str] = Field(None, description="Second reference for between rules")
    description: Optional[str] = None
    wrapper: Optional[WrapperConfig] = None


class CompositionConfig(BaseModel):
    """Explicit render order, z-index overrides and spatial rules."""
    render_order: List[str] = Field(default_factory=list, alias="renderOrder")
    z_index_overrides: Dict[str, int] = Field(default_factory=dict, alias="zIndexOverrides")
    spatial_rules: List[SpatialRule] = Field(default_factory=list, alias="spatialRules")

    model_config = ConfigDict(populate_by_name=True)


class OrderResolution(BaseModel):
    """Result of resolving a base order against spatial rules."""
    order: List[str] = Field(default_factory=list)
    wrapped: Dict[str, WrapperConfig] = Field(default_factory=dict)
    skipped: List[str] = Field(default_factory=list, description="Ids of skipped rules")


# Composition models
class RenderContext(BaseModel):
    """Read-only context shared by every module during one composition."""
    enabled_ids: Tuple[str, ...] = ()
    data_by_id: Dict[str, Dict[str, Any]] = Field(default_factory=dict)
    viewport_width: int = Field(1080, gt=0)
    viewport_height: int = Field(1440, gt=0)
    base_url: str = ""
    instance_id: str = Field("", description="Id of the module instance being rendered")

    model_config = ConfigDict(frozen=True)

    def is_enabled(self, module_id: str) -> bool:
        return module_id in self.enabled_ids

    def for_instance(self, instance_id: str) -> "RenderContext":
        """Copy of this context scoped to one module instance."""
        return self.model_copy(update={"instance_id": instance_id})


class ComposeOptions(BaseModel):
    """Optional inputs of a composition call."""
    base_url: Optional[str] = Field(None, alias="baseUrl")
    composition_config: Optional[CompositionConfig] = Field(None, alias="compositionConfig")
    slide_count: int = Field(1, ge=1, alias="slideCount")

    model_config = ConfigDict(populate_by_name=True)


class ComposedDocument(BaseModel):
    """Final output of the compositer."""
    viewport_width: int
    viewport_height: int
    css: str = ""
    html: str = ""
    style_variables: str = Field("", description="Rendered :root variable declarations")
    variables: Dict[str, str] = Field(default_factory=dict, description="CSS variable map")
    document: str = ""


class ValidationResult(BaseModel):
    """Outcome of a validation check. Errors are human readable."""
    valid: bool = True
    errors: List[str] = Field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls(valid=not errors, errors=list(errors))


# Editor models
class Slide(BaseModel):
    """An isolated namespace of enabled modules and their data."""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    name: Optional[str] = None
    enabled_module_ids: List[str] = Field(default_factory=list, alias="enabledModuleIds")
    data: Dict[str, Dict[str, Any]] = Field(default_factory=dict, alias="moduleDataById")
    composition_config: Optional[CompositionConfig] = Field(None, alias="compositionConfig")

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("enabled_module_ids")
    @classmethod
    def deduplicate_ids(cls, v: List[str]) -> List[str]:
        """Keep first occurrence of each id, preserving order."""
        return list(dict.fromkeys(v))


class EditorState(BaseModel):
    """Editing session: slides plus the index of the slide being edited."""
    slides: List[Slide] = Field(default_factory=lambda: [Slide()])
    current_slide_index: int = Field(0, ge=0, alias="currentSlideIndex")

    model_config = ConfigDict(populate_by_name=True)


# Transport models
class CompositionRequest(BaseModel):
    """Composition input as supplied by external collaborators."""
    enabled_module_ids: List[str] = Field(..., alias="enabledModuleIds")
    module_data_by_id: Dict[str, Dict[str, Any]] = Field(
        default_factory=dict, alias="moduleDataById"
    )
    composition_config: Optional[CompositionConfig] = Field(None, alias="compositionConfig")
    slide_count: int = Field(1, ge=1, alias="slideCount")
    base_url: Optional[str] = Field(None, alias="baseUrl")

    model_config = ConfigDict(populate_by_name=True)

    def to_options(self) -> ComposeOptions:
        return ComposeOptions(
            base_url=self.base_url,
            composition_config=self.composition_config,
            slide_count=self.slide_count,
        )


class LoadResult(BaseModel):
    """Result of loading a transport payload."""
    success: bool = Field(..., description="Whether loading succeeded")
    request: Optional[CompositionRequest] = Field(None, description="Parsed request")
    errors: List[str] = Field(default_factory=list, description="Loading errors")
    warnings: List[str] = Field(default_factory=list, description="Loading warnings")
    processing_time: Optional[float] = Field(None, description="Loading time in seconds")


# Carousel input models
class CarouselSlide(BaseModel):
    """One slide of an externally generated carousel."""
    number: int = Field(..., gt=0, validation_alias=AliasChoices("number", "numero"))
    style: str = Field(..., validation_alias=AliasChoices("style", "estilo"))
    text_1: Optional[str] = Field(None, validation_alias=AliasChoices("text_1", "texto_1"))
    text_2: Optional[str] = Field(None, validation_alias=AliasChoices("text_2", "texto_2"))
    text_3: Optional[str] = Field(None, validation_alias=AliasChoices("text_3", "texto_3"))
    text_4: Optional[str] = Field(None, validation_alias=AliasChoices("text_4", "texto_4"))
    text_5: Optional[str] = Field(None, validation_alias=AliasChoices("text_5", "texto_5"))
    main_text: Optional[str] = Field(
        None,
        validation_alias=AliasChoices("main_text", "texto_principal"),
        description="Key of the text that carries the main message",
    )
    highlights: Optional[Dict[str, List[Any]]] = Field(
        None, validation_alias=AliasChoices("highlights", "destaques")
    )

    @field_validator("main_text", mode="before")
    @classmethod
    def normalize_main_text(cls, v: Any) -> Any:
        if isinstance(v, str) and v.startswith("texto_"):
            return "text_" + v[len("texto_"):]
        return v

    @field_validator("highlights", mode="before")
    @classmethod
    def normalize_highlight_keys(cls, v: Any) -> Any:
        if isinstance(v, dict):
            return {
                ("text_" + key[len("texto_"):] if key.startswith("texto_") else key): value
                for key, value in v.items()
                if value is not None
            }
        return v

    def text_for(self, key: str) -> Optional[str]:
        return getattr(self, key, None)


class PhotoSources(BaseModel):
    """Photo URLs supplied for a slide."""
    portrait: Optional[str] = None
    landscape: Optional[str] = None
    original: Optional[str] = None


class CardGradient(BaseModel):
    """Custom card gradient applied to every transformed slide."""
    color: Optional[str] = None
    start_opacity: Optional[float] = Field(None, ge=0, le=1, alias="startOpacity")
    mid_opacity: Optional[float] = Field(None, ge=0, le=1, alias="midOpacity")
    height: Optional[float] = Field(None, ge=0, le=100)
    direction: Optional[Literal["to top", "to bottom", "to left", "to right"]] = None

    model_config = ConfigDict(populate_by_name=True)
