"""
Editor State
============

Operations over an explicit ``EditorState``: enabling and disabling modules,
managing instances and slides, updating module data and composing the current
slide. Rejected actions return a ``ValidationResult`` and leave the state
untouched.
"""

from typing import Any, Mapping, Optional, Tuple

from carousel_composer.config.logging import get_logger
from carousel_composer.models.schemas import (
    ComposedDocument,
    ComposeOptions,
    EditorState,
    Slide,
    ValidationResult,
)
from carousel_composer.core.composition.compositer import TemplateCompositer
from carousel_composer.core.modules.instances import create_instance_id, get_base_id
from carousel_composer.core.modules.registry import ModuleRegistry, get_registry
from carousel_composer.utils.data import deep_merge

logger = get_logger(__name__)


class SlideNotFoundError(IndexError):
    """Exception raised when a slide index is out of range."""
    pass


class SlideEditor:
    """Single-writer editing session over an ``EditorState``."""

    def __init__(
        self,
        state: Optional[EditorState] = None,
        registry: Optional[ModuleRegistry] = None,
    ):
        """
        Initialize slide editor.

        :param state: Editing state to operate on; a one-slide state by default
        :param registry: Module registry; the shared registry by default
        """
        self.state = state or EditorState()
        self.registry = registry or get_registry()
        self.logger = logger.bind(component="editor")
        self._compositer: Optional[TemplateCompositer] = None

    # Slide access

    @property
    def slides(self):
        return self.state.slides

    @property
    def current_slide(self) -> Slide:
        return self.get_slide(self.state.current_slide_index)

    def get_slide(self, index: Optional[int] = None) -> Slide:
        """
        Slide at ``index``, or the current slide.

        Raises:
            SlideNotFoundError: If the index is out of range
        """
        if index is None:
            index = self.state.current_slide_index
        if not 0 <= index < len(self.state.slides):
            raise SlideNotFoundError(f"Slide index {index} out of range")
        return self.state.slides[index]

    # Module operations

    def enable_module(self, module_id: str, slide_index: Optional[int] = None) -> ValidationResult:
        """
        Enable a module on a slide.

        Data is seeded from the module defaults when the slide holds none.

        Returns:
            ValidationResult; on failure the slide is unchanged
        """
        slide = self.get_slide(slide_index)
        result = self.registry.check_enable(module_id, slide.enabled_module_ids)
        if not result.valid:
            self.logger.info("Enable rejected", module_id=module_id, errors=result.errors)
            return result

        slide.enabled_module_ids.append(module_id)
        if module_id not in slide.data:
            slide.data[module_id] = self.registry.get(module_id).default_data()
        self.logger.debug("Module enabled", module_id=module_id, slide_id=slide.id)
        return result

    def disable_module(self, module_id: str, slide_index: Optional[int] = None) -> ValidationResult:
        """
        Disable a module on a slide.

        Module data is kept so re-enabling restores it.
        """
        slide = self.get_slide(slide_index)
        result = self.registry.check_disable(module_id, slide.enabled_module_ids)
        if not result.valid:
            self.logger.info("Disable rejected", module_id=module_id, errors=result.errors)
            return result

        slide.enabled_module_ids.remove(module_id)
        self.logger.debug("Module disabled", module_id=module_id, slide_id=slide.id)
        return result

    def add_instance(
        self, base_id: str, slide_index: Optional[int] = None
    ) -> Tuple[ValidationResult, Optional[str]]:
        """
        Enable a new instance of a multi-instance module.

        Returns:
            Tuple of (result, new instance id or None on failure)
        """
        slide = self.get_slide(slide_index)
        module = self.registry.get(base_id)
        if module is None:
            return ValidationResult.from_errors([f'Cannot enable "{base_id}": unknown module']), None

        number = self.registry.next_instance_number(module.id, slide.enabled_module_ids)
        if number > 1 and not module.allow_multiple_instances:
            return (
                ValidationResult.from_errors(
                    [f'Cannot enable "{base_id}": module does not allow multiple instances']
                ),
                None,
            )

        instance_id = create_instance_id(module.id, number)
        result = self.enable_module(instance_id, slide_index)
        return result, instance_id if result.valid else None

    def remove_instance(self, instance_id: str, slide_index: Optional[int] = None) -> ValidationResult:
        """Disable an instance and discard its data."""
        slide = self.get_slide(slide_index)
        result = self.disable_module(instance_id, slide_index)
        if result.valid:
            slide.data.pop(instance_id, None)
        return result

    def update_module_data(
        self,
        module_id: str,
        updates: Mapping[str, Any],
        slide_index: Optional[int] = None,
        replace: bool = False,
    ) -> ValidationResult:
        """
        Update the data of an enabled module.

        Args:
            module_id: Module or instance id
            updates: Partial data merged over the current data
            slide_index: Target slide; the current slide by default
            replace: Replace the data instead of merging

        Returns:
            ValidationResult carrying schema errors; on failure data is unchanged
        """
        slide = self.get_slide(slide_index)
        module = self.registry.get(module_id)
        if module is None:
            return ValidationResult.from_errors([f'Unknown module "{module_id}"'])
        if module_id not in slide.enabled_module_ids:
            return ValidationResult.from_errors([f'Module "{module_id}" is not enabled'])

        current = slide.data.get(module_id) or module.default_data()
        candidate = deep_merge({}, updates) if replace else deep_merge(current, updates)
        errors = module.validate_data(module.resolve_data(candidate))
        if errors:
            self.logger.info("Module data rejected", module_id=module_id, errors=errors)
            return ValidationResult.from_errors(errors)

        slide.data[module_id] = candidate
        return ValidationResult()

    # Slide operations

    def add_slide(self, name: Optional[str] = None) -> Slide:
        """Append an empty slide and make it current."""
        slide = Slide(name=name)
        self.state.slides.append(slide)
        self.state.current_slide_index = len(self.state.slides) - 1
        self.logger.debug("Slide added", slide_id=slide.id, slide_count=len(self.state.slides))
        return slide

    def remove_slide(self, index: int) -> ValidationResult:
        """Remove a slide; the last remaining slide cannot be removed."""
        slide = self.get_slide(index)
        if len(self.state.slides) == 1:
            return ValidationResult.from_errors(["Cannot remove the only slide"])

        del self.state.slides[index]
        current = self.state.current_slide_index
        if current > index or current >= len(self.state.slides):
            self.state.current_slide_index = max(current - 1, 0)
        self.logger.debug("Slide removed", slide_id=slide.id)
        return ValidationResult()

    def duplicate_slide(self, index: Optional[int] = None) -> Slide:
        """Insert an independent copy of a slide right after it and make it current."""
        if index is None:
            index = self.state.current_slide_index
        source = self.get_slide(index)
        copy = Slide.model_validate(source.model_dump(exclude={"id"}))
        if source.name:
            copy.name = f"{source.name} (copy)"
        self.state.slides.insert(index + 1, copy)
        self.state.current_slide_index = index + 1
        return copy

    def set_current_slide(self, index: int) -> Slide:
        slide = self.get_slide(index)
        self.state.current_slide_index = index
        return slide

    # Composition

    def compose_slide(
        self, slide_index: Optional[int] = None, options: Optional[ComposeOptions] = None
    ) -> ComposedDocument:
        """Compose a slide; its own composition config applies unless options carry one."""
        slide = self.get_slide(slide_index)
        if self._compositer is None:
            self._compositer = TemplateCompositer(registry=self.registry)

        options = options or ComposeOptions()
        if options.composition_config is None and slide.composition_config is not None:
            options = options.model_copy(update={"composition_config": slide.composition_config})
        return self._compositer.compose(slide.enabled_module_ids, slide.data, options)

    def compose_current(self, options: Optional[ComposeOptions] = None) -> ComposedDocument:
        return self.compose_slide(None, options)

    def instances_of(self, base_id: str, slide_index: Optional[int] = None):
        """Enabled instance ids of ``base_id`` on a slide."""
        slide = self.get_slide(slide_index)
        return self.registry.get_instances(get_base_id(base_id), slide.enabled_module_ids)
