"""
Module Registry
===============

Immutable lookup table of module definitions with dependency, conflict and
multi-instance queries. The default registry is built once and shared by every
composition; it is never mutated afterwards.
"""

from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from carousel_composer.config.logging import get_logger
from carousel_composer.models.schemas import ModuleCategory, ValidationResult
from carousel_composer.core.modules.base import BaseModule
from carousel_composer.core.modules.instances import (
    get_base_id,
    get_instances,
    is_instance_id,
    next_instance_number,
    parse_instance_id,
)

logger = get_logger(__name__)


class ModuleNotFoundInRegistryError(KeyError):
    """Exception raised when a module id is not registered."""
    pass


class ModuleRegistry:
    """Read-only table of modules keyed by base id."""

    def __init__(self, modules: Iterable[BaseModule]):
        table: Dict[str, BaseModule] = {}
        for module in modules:
            if not module.id:
                raise ValueError(f"Module {module!r} has no id")
            if module.id in table:
                raise ValueError(f"Duplicate module id: {module.id}")
            table[module.id] = module
        self._modules: Mapping[str, BaseModule] = MappingProxyType(table)

    @property
    def modules(self) -> Mapping[str, BaseModule]:
        return self._modules

    def __contains__(self, module_id: str) -> bool:
        return self.get(module_id) is not None

    def __len__(self) -> int:
        return len(self._modules)

    def get(self, module_id: str) -> Optional[BaseModule]:
        """Look up a module by id; instance ids resolve to their base module."""
        return self._modules.get(get_base_id(module_id))

    def require(self, module_id: str) -> BaseModule:
        module = self.get(module_id)
        if module is None:
            raise ModuleNotFoundInRegistryError(module_id)
        return module

    def list_all(self) -> List[BaseModule]:
        return list(self._modules.values())

    def list_by_category(self, category: ModuleCategory) -> List[BaseModule]:
        category = ModuleCategory(category)
        return [module for module in self._modules.values() if module.category == category]

    def sort_by_z_index(self, module_ids: Sequence[str]) -> List[str]:
        """Sort ids by module z-index ascending; ties keep their input order."""
        def key(module_id: str) -> int:
            module = self.get(module_id)
            return module.z_index if module else 0

        return sorted(module_ids, key=key)

    # Dependency and conflict queries

    def check_dependencies(self, module_id: str, enabled_ids: Iterable[str]) -> List[str]:
        """Dependencies of ``module_id`` absent from ``enabled_ids``."""
        module = self.get(module_id)
        if module is None:
            return []
        enabled_bases = {get_base_id(enabled_id) for enabled_id in enabled_ids}
        return [dep for dep in sorted(module.dependencies) if dep not in enabled_bases]

    def check_conflicts(self, module_id: str, enabled_ids: Iterable[str]) -> List[str]:
        """
        Enabled ids that conflict with ``module_id``.

        A conflict declared by either side counts.
        """
        module = self.get(module_id)
        if module is None:
            return []
        conflicting = []
        for enabled_id in enabled_ids:
            if get_base_id(enabled_id) == module.id:
                continue
            other = self.get(enabled_id)
            if get_base_id(enabled_id) in module.conflicts or (
                other is not None and module.id in other.conflicts
            ):
                conflicting.append(enabled_id)
        return conflicting

    def validate_combination(self, enabled_ids: Sequence[str]) -> ValidationResult:
        """Validate a complete set of enabled modules."""
        errors = []
        for module_id in enabled_ids:
            module = self.get(module_id)
            if module is None:
                errors.append(f'Unknown module "{module_id}"')
                continue

            if is_instance_id(module_id) and not module.allow_multiple_instances:
                errors.append(f'Module "{module.name}" does not allow multiple instances')

            missing = self.check_dependencies(module_id, enabled_ids)
            if missing:
                errors.append(f'Module "{module.name}" requires: {", ".join(missing)}')

            conflicts = self.check_conflicts(module_id, enabled_ids)
            if conflicts:
                errors.append(f'Module "{module.name}" conflicts with: {", ".join(conflicts)}')

        return ValidationResult.from_errors(errors)

    # Enable / disable gating

    def check_enable(self, module_id: str, enabled_ids: Sequence[str]) -> ValidationResult:
        """Whether ``module_id`` may be added to ``enabled_ids``."""
        module = self.get(module_id)
        if module is None:
            return ValidationResult.from_errors([f'Cannot enable "{module_id}": unknown module'])
        if module_id in enabled_ids:
            return ValidationResult.from_errors([f'Cannot enable "{module_id}": already enabled'])
        if is_instance_id(module_id) and not module.allow_multiple_instances:
            return ValidationResult.from_errors(
                [f'Cannot enable "{module_id}": module does not allow multiple instances']
            )

        errors = []
        missing = self.check_dependencies(module_id, enabled_ids)
        if missing:
            errors.append(
                f'Cannot enable "{module_id}": missing dependencies ({", ".join(missing)})'
            )
        conflicts = self.check_conflicts(module_id, enabled_ids)
        if conflicts:
            errors.append(f'Cannot enable "{module_id}": conflicts with ({", ".join(conflicts)})')
        return ValidationResult.from_errors(errors)

    def check_disable(self, module_id: str, enabled_ids: Sequence[str]) -> ValidationResult:
        """Whether ``module_id`` may be removed without breaking a dependant."""
        if module_id not in enabled_ids:
            return ValidationResult.from_errors([f'Cannot disable "{module_id}": not enabled'])

        remaining = [enabled_id for enabled_id in enabled_ids if enabled_id != module_id]
        errors = []
        for other_id in remaining:
            before = set(self.check_dependencies(other_id, enabled_ids))
            after = set(self.check_dependencies(other_id, remaining))
            if after - before:
                errors.append(f'Cannot disable "{module_id}": required by {other_id}')
        return ValidationResult.from_errors(errors)

    # Instance helpers

    def parse_instance_id(self, module_id: str):
        return parse_instance_id(module_id)

    def get_instances(self, base_id: str, enabled_ids: Iterable[str]) -> List[str]:
        return get_instances(base_id, enabled_ids)

    def next_instance_number(self, base_id: str, enabled_ids: Iterable[str]) -> int:
        return next_instance_number(base_id, enabled_ids)

    @classmethod
    def create_default(cls) -> "ModuleRegistry":
        """Registry populated with the built-in modules."""
        from carousel_composer.core.modules.builtin import BUILTIN_MODULES

        registry = cls(module_class() for module_class in BUILTIN_MODULES)
        logger.debug("Module registry built", modules=list(registry.modules))
        return registry


# Process-wide registry, built on first use
_registry: Optional[ModuleRegistry] = None


def get_registry() -> ModuleRegistry:
    """Get the shared module registry."""
    global _registry
    if _registry is None:
        _registry = ModuleRegistry.create_default()
    return _registry
