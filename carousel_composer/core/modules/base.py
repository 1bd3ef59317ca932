"""
Module Base Class
================

Uniform interface implemented by every composable module.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, FrozenSet, List, Mapping

from cerberus import Validator

from carousel_composer.models.schemas import ModuleCategory, RenderContext
from carousel_composer.core.layout.stylesheet import Stylesheet
from carousel_composer.utils.data import deep_copy, deep_merge


class ModuleRenderError(Exception):
    """Exception raised when a module fails to render."""
    pass


class BaseModule(ABC):
    """
    Base class for modules.

    Subclasses declare their identity, stacking order and data schema as class
    attributes and implement the render methods. Render methods must be pure
    given ``(data, ctx)``.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    category: ModuleCategory = ModuleCategory.CONTENT
    z_index: int = 0
    dependencies: FrozenSet[str] = frozenset()
    conflicts: FrozenSet[str] = frozenset()
    allow_multiple_instances: bool = False
    is_container: bool = False

    # Cerberus schema and default data
    schema: Dict[str, Any] = {}
    defaults: Dict[str, Any] = {}

    @abstractmethod
    def render_css(self, data: Dict[str, Any], ctx: RenderContext) -> Stylesheet:
        """Stylesheet fragment for this module."""
        pass

    @abstractmethod
    def render_html(self, data: Dict[str, Any], ctx: RenderContext) -> str:
        """Markup fragment for this module."""
        pass

    def render_style_variables(self, data: Dict[str, Any]) -> Dict[str, str]:
        """CSS custom properties contributed to the ``:root`` block."""
        return {}

    def post_process_document(
        self, html: str, data: Dict[str, Any], ctx: RenderContext
    ) -> str:
        """Transform the fully assembled document. Identity by default."""
        return html

    def wrap_content(self, inner_html: str, data: Dict[str, Any], ctx: RenderContext) -> str:
        """Wrap content-bucket markup. Only container modules override this."""
        return inner_html

    def slide_columns(self, data: Mapping[str, Any]) -> int:
        """Number of slide-wide columns this module needs in the viewport."""
        return 1

    def is_active(self, data: Mapping[str, Any]) -> bool:
        """Whether an enabled module should take effect."""
        return data.get("enabled", True) is not False

    @property
    def has_post_processor(self) -> bool:
        return type(self).post_process_document is not BaseModule.post_process_document

    def default_data(self) -> Dict[str, Any]:
        """Independent copy of the default data."""
        return deep_copy(self.defaults)

    def resolve_data(self, data: Mapping[str, Any] = None) -> Dict[str, Any]:
        """Merge caller data over the defaults."""
        return deep_merge(self.defaults, data or {})

    def validate_data(self, data: Mapping[str, Any]) -> List[str]:
        """
        Validate module data against the schema.

        Returns:
            Human-readable error strings; empty when valid
        """
        if not self.schema:
            return []
        validator = Validator(self.schema, allow_unknown=True)
        if validator.validate(dict(data)):
            return []
        return _format_validation_errors(validator.errors)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r} z_index={self.z_index}>"


def _format_validation_errors(errors: Dict[str, Any], path: str = "") -> List[str]:
    """Format Cerberus validation errors into readable messages."""
    formatted = []
    for field, field_errors in errors.items():
        current_path = f"{path}.{field}" if path else str(field)
        if isinstance(field_errors, list):
            for error in field_errors:
                if isinstance(error, dict):
                    formatted.extend(_format_validation_errors(error, current_path))
                else:
                    formatted.append(f"{current_path}: {error}")
        elif isinstance(field_errors, dict):
            formatted.extend(_format_validation_errors(field_errors, current_path))
        else:
            formatted.append(f"{current_path}: {field_errors}")
    return formatted
