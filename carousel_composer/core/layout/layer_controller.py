"""
Layer Controller
===============

Resolves per-module z-index values and rewrites the ``z-index`` declaration of
module stylesheets when an override is present.
"""

from typing import Dict, Iterable, List, Mapping, Optional

from carousel_composer.config.logging import get_logger
from carousel_composer.config.settings import get_settings
from carousel_composer.core.layout.stylesheet import CSSDeclaration, CSSRule, Stylesheet

logger = get_logger(__name__)


class LayerController:
    """Z-index overrides for one composition."""

    def __init__(
        self,
        overrides: Optional[Mapping[str, int]] = None,
        registry=None,
        force_inject: Optional[bool] = None,
    ):
        """
        Initialize layer controller.

        :param overrides: Module id to z-index overrides
        :param registry: Module registry used for default z-index values
        :param force_inject: Inject the declaration into stylesheets lacking one;
            defaults to the ``force_z_index_injection`` setting
        """
        settings = get_settings()
        if registry is None:
            from carousel_composer.core.modules.registry import get_registry
            registry = get_registry()

        self.registry = registry
        self.overrides: Dict[str, int] = dict(overrides or {})
        self.force_inject = (
            settings.force_z_index_injection if force_inject is None else force_inject
        )
        self.step = settings.layer_step
        self.logger = logger.bind(component="layer_controller")

    def get_default_z_index(self, module_id: str) -> int:
        module = self.registry.get(module_id)
        return module.z_index if module else 0

    def get_z_index(self, module_id: str) -> int:
        """Override if present, else the module's default."""
        if module_id in self.overrides:
            return self.overrides[module_id]
        return self.get_default_z_index(module_id)

    def has_override(self, module_id: str) -> bool:
        return module_id in self.overrides

    def set_override(self, module_id: str, z_index: int) -> None:
        self.overrides[module_id] = int(z_index)

    def clear_override(self, module_id: str) -> None:
        self.overrides.pop(module_id, None)

    def move_to_top(self, module_id: str, module_ids: Iterable[str]) -> int:
        """Place ``module_id`` one step above the highest of ``module_ids``."""
        others = [self.get_z_index(other) for other in module_ids if other != module_id]
        z_index = (max(others) if others else 0) + self.step
        self.set_override(module_id, z_index)
        return z_index

    def move_to_bottom(self, module_id: str, module_ids: Iterable[str]) -> int:
        """Place ``module_id`` one step below the lowest of ``module_ids``."""
        others = [self.get_z_index(other) for other in module_ids if other != module_id]
        z_index = (min(others) if others else 0) - self.step
        self.set_override(module_id, z_index)
        return z_index

    def sorted_by_z_index(self, module_ids: Iterable[str]) -> List[str]:
        """Ids by effective z-index ascending; ties keep their input order."""
        return sorted(module_ids, key=self.get_z_index)

    def apply_override(
        self, module_id: str, z_index: Optional[int], stylesheet: Stylesheet
    ) -> Stylesheet:
        """
        Rewrite z-index declarations of a module stylesheet.

        Args:
            module_id: Module or instance id owning the stylesheet
            z_index: Value to apply; ``None`` resolves it from the overrides
            stylesheet: Stylesheet emitted by the module

        Returns:
            New stylesheet; every declaration other than ``z-index`` on layer
            rules is unchanged
        """
        if z_index is None:
            if module_id not in self.overrides:
                return stylesheet
            z_index = self.overrides[module_id]

        rules = []
        replaced = False
        for rule in stylesheet.rules:
            if rule.layer and rule.get("z-index") is not None:
                rule = self._with_z_index(rule, z_index)
                replaced = True
            rules.append(rule)

        if not replaced:
            layer_rules = [index for index, rule in enumerate(rules) if rule.layer]
            if self.force_inject and layer_rules:
                first = layer_rules[0]
                rules[first] = self._with_z_index(rules[first], z_index)
            else:
                self.logger.debug(
                    "Stylesheet has no z-index declaration, override not applied",
                    module_id=module_id,
                    z_index=z_index,
                )
                return stylesheet

        return Stylesheet(rules=rules)

    @staticmethod
    def _with_z_index(rule: CSSRule, z_index: int) -> CSSRule:
        declarations = []
        found = False
        for declaration in rule.declarations:
            if declaration.property == "z-index":
                declaration = declaration.model_copy(update={"value": str(z_index)})
                found = True
            declarations.append(declaration)
        if not found:
            declarations.append(CSSDeclaration(property="z-index", value=str(z_index)))
        return rule.model_copy(update={"declarations": declarations})
