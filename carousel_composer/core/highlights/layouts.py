"""
Layout Library
==============

Named layout bases used by the slide transform pipeline. A layout base is a
slide template: enabled modules plus their data. Built-in bases ship with the
package; additional bases are read from ``settings.layouts_path`` as
``<name>.yaml``, ``<name>.yml`` or ``<name>.json`` files and take precedence
over built-ins with the same name.
"""

import json
import uuid
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from carousel_composer.config.logging import get_logger
from carousel_composer.config.settings import get_settings
from carousel_composer.models.schemas import Slide

logger = get_logger(__name__)

LAYOUT_EXTENSIONS = (".yaml", ".yml", ".json")


class LayoutNotFoundError(LookupError):
    """Exception raised when a layout base cannot be found or read."""
    pass


def _text_field(font_size: str, color: str, weight: str = "400") -> Dict[str, Any]:
    return {
        "content": "",
        "style": {
            "fontFamily": "Montserrat",
            "fontSize": font_size,
            "fontWeight": weight,
            "color": color,
            "textAlign": "left",
            "lineHeight": "1.3",
        },
        "styledChunks": [],
    }


def _counter(color: str) -> Dict[str, Any]:
    return {
        "content": "",
        "style": {"fontFamily": "Montserrat", "fontSize": "24px", "fontWeight": "600", "color": color},
        "specialPosition": "top-right",
        "paddingX": 60,
        "paddingY": 60,
    }


def _stack_with_image(card_color: str, text_color: str) -> Dict[str, Any]:
    return {
        "enabledModuleIds": ["viewport", "card", "contentImage", "textFields", "freeText"],
        "moduleDataById": {
            "viewport": {"backgroundType": "color", "backgroundColor": card_color},
            "card": {
                "width": 100,
                "height": 100,
                "specialPosition": "none",
                "backgroundType": "color",
                "backgroundColor": card_color,
                "padding": {"top": 80, "right": 70, "bottom": 80, "left": 70},
                "layoutDirection": "column",
                "justifyContent": "flex-start",
                "contentGap": "40px",
            },
            "contentImage": {"url": "", "borderRadius": 24, "maxHeight": 50},
            "textFields": {
                "count": 5,
                "gap": 24,
                "verticalAlign": "top",
                "paddingTop": 0,
                "paddingBottom": 0,
                "fields": [_text_field("36px", text_color) for _ in range(5)],
            },
            "freeText": _counter(text_color),
        },
    }


BUILTIN_LAYOUTS: Dict[str, Dict[str, Any]] = {
    "stack-img": {
        "enabledModuleIds": ["viewport", "card", "textFields", "freeText"],
        "moduleDataById": {
            "viewport": {"backgroundType": "color", "backgroundColor": "#000000"},
            "card": {
                "width": 100,
                "height": 100,
                "specialPosition": "none",
                "backgroundType": "image",
                "backgroundColor": "#000000",
                "padding": {"top": 80, "right": 70, "bottom": 120, "left": 70},
                "layoutDirection": "column",
                "justifyContent": "flex-end",
                "contentGap": "24px",
            },
            "textFields": {
                "count": 5,
                "gap": 24,
                "verticalAlign": "bottom",
                "paddingTop": 0,
                "paddingBottom": 0,
                "fields": [_text_field("38px", "#ffffff") for _ in range(5)],
            },
            "freeText": _counter("#ffffff"),
        },
    },
    "stack-img-bg": _stack_with_image("#ffffff", "#111111"),
    "stack-img-bg-b": _stack_with_image("#111111", "#ffffff"),
}


class LayoutLibrary:
    """Lookup of layout bases by name."""

    def __init__(self, layouts_path: Optional[Union[str, Path]] = None):
        """
        Initialize layout library.

        :param layouts_path: Directory of layout files; defaults to settings
        """
        if layouts_path is None:
            layouts_path = get_settings().layouts_path
        self.layouts_path = Path(layouts_path) if layouts_path else None
        self.logger = logger.bind(component="layout_library")
        self._cache: Dict[str, Slide] = {}

    def list_layouts(self) -> List[str]:
        names = set(BUILTIN_LAYOUTS)
        if self.layouts_path and self.layouts_path.is_dir():
            names.update(
                path.stem for path in self.layouts_path.iterdir()
                if path.suffix.lower() in LAYOUT_EXTENSIONS
            )
        return sorted(names)

    def get(self, name: str) -> Slide:
        """
        Independent copy of a layout base, with a fresh slide id.

        Raises:
            LayoutNotFoundError: If no layout has this name or its file is invalid
        """
        if name not in self._cache:
            self._cache[name] = self._load(name)
        return self._cache[name].model_copy(deep=True, update={"id": str(uuid.uuid4())})

    def _load(self, name: str) -> Slide:
        raw = self._read_file(name)
        if raw is None:
            if name not in BUILTIN_LAYOUTS:
                raise LayoutNotFoundError(f"Layout not found: {name}")
            raw = BUILTIN_LAYOUTS[name]

        try:
            layout = Slide.model_validate({"name": name, **raw})
        except ValidationError as e:
            raise LayoutNotFoundError(f"Invalid layout {name}: {e}") from e
        self.logger.debug("Layout loaded", layout=name, modules=layout.enabled_module_ids)
        return layout

    def _read_file(self, name: str) -> Optional[Dict[str, Any]]:
        if not self.layouts_path:
            return None
        for extension in LAYOUT_EXTENSIONS:
            path = self.layouts_path / f"{name}{extension}"
            if not path.is_file():
                continue
            try:
                content = path.read_text(encoding="utf-8")
                data = json.loads(content) if extension == ".json" else yaml.safe_load(content)
            except (OSError, json.JSONDecodeError, yaml.YAMLError) as e:
                raise LayoutNotFoundError(f"Cannot read layout {path}: {e}") from e
            if not isinstance(data, dict):
                raise LayoutNotFoundError(f"Layout {path} must contain an object")
            return data
        return None
