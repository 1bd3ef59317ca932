"""
Template Compositer
==================

Assemble enabled modules into a self-contained document: resolve the render
order, apply z-index overrides, render each module in isolation and fill the
document template. A module that fails to render contributes nothing; the
composition itself always completes.
"""

import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import jinja2

from carousel_composer.config.logging import get_logger
from carousel_composer.config.settings import get_settings
from carousel_composer.models.schemas import (
    ComposedDocument,
    ComposeOptions,
    CompositionConfig,
    ModuleCategory,
    RenderContext,
    WrapperConfig,
)
from carousel_composer.core.layout.layer_controller import LayerController
from carousel_composer.core.layout.order_engine import get_order_engine
from carousel_composer.core.layout.stylesheet import is_safe_value
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.registry import ModuleRegistry, get_registry
from carousel_composer.utils.html import escape_html

logger = get_logger(__name__)

_VARIABLE_NAME_PATTERN = re.compile(r"[^a-z0-9-]")


class CompositionError(Exception):
    """Exception raised when a composition request is malformed."""
    pass


class TemplateCompositer:
    """Jinja2-based document compositer."""

    template_name = "document.html"

    def __init__(self, registry: Optional[ModuleRegistry] = None) -> None:
        self.settings = get_settings()
        self.registry = registry or get_registry()
        self.order_engine = get_order_engine()
        self.logger: Any = logger.bind(component="compositer")
        self._setup_jinja2_environment()

    def _setup_jinja2_environment(self) -> None:
        """Setup Jinja2 template environment."""
        template_dir = Path(__file__).parent / "templates"
        self.env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=jinja2.select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def compose(
        self,
        enabled_ids: Sequence[str],
        data_by_id: Optional[Mapping[str, Mapping[str, Any]]] = None,
        options: Optional[ComposeOptions] = None,
    ) -> ComposedDocument:
        """
        Compose a document from enabled modules.

        Args:
            enabled_ids: Enabled module and instance ids, in enable order
            data_by_id: Per-module data; missing keys fall back to defaults
            options: Base URL, composition config and slide count

        Returns:
            Composed document with CSS, markup and variables

        Raises:
            CompositionError: If the request itself is malformed
        """
        options = options or ComposeOptions()
        data_by_id = data_by_id or {}
        if isinstance(enabled_ids, str):
            raise CompositionError("enabled_ids must be a sequence of module ids")
        if options.slide_count > self.settings.max_slide_count:
            raise CompositionError(
                f"slide_count {options.slide_count} exceeds maximum of {self.settings.max_slide_count}"
            )

        known_ids = self._known_ids(enabled_ids)
        resolved_data = {
            module_id: self._resolve_data(module_id, data_by_id.get(module_id))
            for module_id in known_ids
        }

        columns = max(
            [options.slide_count]
            + [self._slide_columns(module_id, resolved_data[module_id]) for module_id in known_ids]
        )
        ctx = RenderContext(
            enabled_ids=tuple(known_ids),
            data_by_id=resolved_data,
            viewport_width=columns * self.settings.slide_width,
            viewport_height=self.settings.slide_height,
            base_url=options.base_url or self.settings.base_url,
        )

        config = self._effective_config(known_ids, options.composition_config)
        resolution = self.order_engine.resolve_with_marks(config.render_order, config.spatial_rules)
        layers = LayerController(config.z_index_overrides, registry=self.registry)

        self.logger.info(
            "Composing document",
            modules=resolution.order,
            viewport_width=ctx.viewport_width,
            viewport_height=ctx.viewport_height,
        )

        css_parts: List[str] = []
        variables: Dict[str, str] = {}
        background: List[str] = []
        content: List[str] = []
        overlay: List[str] = []
        container: Optional[Tuple[str, BaseModule]] = None

        for module_id in resolution.order:
            module = self.registry.get(module_id)
            data = resolved_data[module_id]
            module_ctx = ctx.for_instance(module_id)

            fragment = self._render_module(module_id, module, data, module_ctx, layers)
            if fragment is None:
                continue
            css, html, module_variables = fragment

            if css:
                label = module.name if module_id == module.id else f"{module.name} ({module_id})"
                css_parts.append(f"/* === {label} === */\n{css}")
            variables.update(module_variables)

            if module.is_container:
                if container is None and module.is_active(data):
                    container = (module_id, module)
                if html:
                    background.append(html)
                continue

            if html and module_id in resolution.wrapped:
                html = self._wrap(html, resolution.wrapped[module_id])

            if not html:
                continue
            if module.category == ModuleCategory.LAYOUT:
                background.append(html)
            elif module.category == ModuleCategory.CONTENT:
                content.append(html)
            else:
                overlay.append(html)

        content_html = self._wrap_content("\n".join(content), container, resolved_data, ctx)
        variables = self._clean_variables(variables)
        style_variables = "\n".join(f"      --{name}: {value};" for name, value in variables.items())
        css = "\n\n".join(css_parts)
        body_html = "\n".join(
            part for part in ("\n".join(background), content_html, "\n".join(overlay)) if part
        )

        template = self.env.get_template(self.template_name)
        document = template.render(
            lang="pt-br",
            title="Generated Image",
            viewport_width=ctx.viewport_width,
            viewport_height=ctx.viewport_height,
            style_variables=style_variables,
            css=css,
            background_html="\n".join(background),
            content_html=content_html,
            overlay_html="\n".join(overlay),
        )
        document = self._post_process(document, resolution.order, resolved_data, ctx)

        self.logger.info("Composition completed", document_length=len(document))
        return ComposedDocument(
            viewport_width=ctx.viewport_width,
            viewport_height=ctx.viewport_height,
            css=css,
            html=body_html,
            style_variables=style_variables,
            variables=variables,
            document=document,
        )

    def _known_ids(self, enabled_ids: Sequence[str]) -> List[str]:
        known = []
        for module_id in dict.fromkeys(enabled_ids):
            if self.registry.get(module_id) is None:
                self.logger.warning("Skipping unknown module", module_id=module_id)
                continue
            known.append(module_id)
        return known

    def _resolve_data(self, module_id: str, data: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
        """Merge caller data over the defaults; defaults alone when the data is unusable."""
        module = self.registry.get(module_id)
        try:
            resolved = module.resolve_data(data)
            errors = module.validate_data(resolved)
        except Exception as e:
            self.logger.error("Module data could not be resolved", module_id=module_id, error=str(e))
            return module.default_data()
        if errors:
            self.logger.warning("Module data failed validation", module_id=module_id, errors=errors)
        return resolved

    def _slide_columns(self, module_id: str, data: Dict[str, Any]) -> int:
        try:
            return int(self.registry.get(module_id).slide_columns(data))
        except Exception as e:
            self.logger.error("Module column count failed", module_id=module_id, error=str(e))
            return 1

    def _effective_config(
        self, known_ids: List[str], config: Optional[CompositionConfig]
    ) -> CompositionConfig:
        """
        Build the config driving this composition.

        Without an explicit render order the default order is z-index ascending,
        stable by enable order. Enabled modules absent from an explicit order are
        appended in default order.
        """
        default_order = self.registry.sort_by_z_index(known_ids)
        if config is None:
            return CompositionConfig(render_order=default_order)

        if not config.render_order:
            return config.model_copy(update={"render_order": default_order})

        order = []
        for module_id in config.render_order:
            if module_id not in known_ids:
                self.logger.warning("Render order names a module that is not enabled", module_id=module_id)
                continue
            if module_id not in order:
                order.append(module_id)
        order.extend(module_id for module_id in default_order if module_id not in order)
        return config.model_copy(update={"render_order": order})

    def _render_module(
        self,
        module_id: str,
        module: BaseModule,
        data: Dict[str, Any],
        ctx: RenderContext,
        layers: LayerController,
    ) -> Optional[Tuple[str, str, Dict[str, str]]]:
        """Render one module; ``None`` when it raised."""
        try:
            stylesheet = layers.apply_override(module_id, None, module.render_css(data, ctx))
            css = stylesheet.render()
            html = module.render_html(data, ctx)
            variables = module.render_style_variables(data)
        except Exception as e:
            self.logger.error("Module render failed", module_id=module_id, error=str(e))
            return None
        return css, html, variables

    def _wrap_content(
        self,
        inner_html: str,
        container: Optional[Tuple[str, BaseModule]],
        data_by_id: Dict[str, Dict[str, Any]],
        ctx: RenderContext,
    ) -> str:
        if container is not None:
            module_id, module = container
            try:
                return module.wrap_content(inner_html, data_by_id[module_id], ctx.for_instance(module_id))
            except Exception as e:
                self.logger.error("Container wrap failed", module_id=module_id, error=str(e))
        return f'<div class="content-wrapper">\n{inner_html}\n</div>'

    @staticmethod
    def _wrap(html: str, wrapper: WrapperConfig) -> str:
        attributes = ""
        if wrapper.class_name:
            attributes += f' class="{escape_html(wrapper.class_name)}"'
        if wrapper.style and is_safe_value(wrapper.style.replace(";", "")):
            attributes += f' style="{escape_html(wrapper.style)}"'
        return f"<{wrapper.tag}{attributes}>\n{html}\n</{wrapper.tag}>"

    def _clean_variables(self, variables: Mapping[str, Any]) -> Dict[str, str]:
        cleaned = {}
        for name, value in variables.items():
            clean_name = _VARIABLE_NAME_PATTERN.sub("", str(name).lower())
            text = str(value)
            if not clean_name or not is_safe_value(text):
                self.logger.warning("Dropping unsafe style variable", name=name)
                continue
            cleaned[clean_name] = text
        return cleaned

    def _post_process(
        self,
        document: str,
        order: Sequence[str],
        data_by_id: Dict[str, Dict[str, Any]],
        ctx: RenderContext,
    ) -> str:
        for module_id in order:
            module = self.registry.get(module_id)
            if not module.has_post_processor:
                continue
            try:
                document = module.post_process_document(
                    document, data_by_id[module_id], ctx.for_instance(module_id)
                )
            except Exception as e:
                self.logger.error("Document post-processing failed", module_id=module_id, error=str(e))
        return document


# Shared compositer instance
_compositer: Optional[TemplateCompositer] = None


def get_compositer() -> TemplateCompositer:
    """Get the shared compositer for the default registry."""
    global _compositer
    if _compositer is None:
        _compositer = TemplateCompositer()
    return _compositer


def compose(
    enabled_ids: Sequence[str],
    data_by_id: Optional[Mapping[str, Mapping[str, Any]]] = None,
    options: Optional[ComposeOptions] = None,
) -> ComposedDocument:
    """
    Compose a document with the default registry.

    Args:
        enabled_ids: Enabled module and instance ids
        data_by_id: Per-module data
        options: Composition options

    Returns:
        Composed document
    """
    return get_compositer().compose(enabled_ids, data_by_id, options)
