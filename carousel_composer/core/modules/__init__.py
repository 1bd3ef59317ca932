"""
Module System
=============

Composable slide modules, their registry and instance-id helpers.
"""

from carousel_composer.core.modules.base import BaseModule, ModuleRenderError
from carousel_composer.core.modules.registry import (
    ModuleNotFoundInRegistryError,
    ModuleRegistry,
    get_registry,
)

__all__ = [
    "BaseModule",
    "ModuleRenderError",
    "ModuleNotFoundInRegistryError",
    "ModuleRegistry",
    "get_registry",
]
