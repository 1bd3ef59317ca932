"""
Transport Loader
================

Load composition requests supplied by external collaborators. Payloads are
JSON or YAML documents carrying ``enabledModuleIds``, ``moduleDataById`` and
an optional ``compositionConfig``; structure is validated with Cerberus
before the request model is built.
"""

import json
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml
from cerberus import Validator
from pydantic import ValidationError

from carousel_composer.config.logging import get_logger
from carousel_composer.config.settings import get_settings
from carousel_composer.models.schemas import CompositionRequest, LoadResult
from carousel_composer.core.modules.registry import get_registry

logger = get_logger(__name__)


class TransportLoadError(Exception):
    """Exception raised when a transport payload cannot be read."""
    pass


class RequestValidator:
    """Structural validation of composition payloads using Cerberus schemas."""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(component="validator")
        self._setup_schemas()

    def _setup_schemas(self) -> None:
        """Setup validation schemas."""
        self.wrapper_schema = {
            "tag": {"type": "string", "allowed": ["div", "section", "article", "span"]},
            "className": {"type": "string", "nullable": True},
            "style": {"type": "string", "nullable": True},
        }

        self.rule_schema = {
            "id": {"type": "string"},
            "type": {"type": "string", "required": True, "allowed": ["before", "after", "between", "wrap"]},
            "target": {"type": "string", "required": True, "empty": False},
            "reference": {"type": "string", "nullable": True},
            "reference2": {"type": "string", "nullable": True},
            "description": {"type": "string", "nullable": True},
            "wrapper": {"type": "dict", "nullable": True, "schema": self.wrapper_schema},
        }

        self.config_schema = {
            "renderOrder": {"type": "list", "schema": {"type": "string"}},
            "zIndexOverrides": {
                "type": "dict",
                "keysrules": {"type": "string"},
                "valuesrules": {"type": "integer"},
            },
            "spatialRules": {"type": "list", "schema": {"type": "dict", "schema": self.rule_schema}},
        }

        self.request_schema = {
            "enabledModuleIds": {
                "type": "list",
                "required": True,
                "schema": {"type": "string", "empty": False},
            },
            "moduleDataById": {
                "type": "dict",
                "keysrules": {"type": "string"},
                "valuesrules": {"type": "dict"},
            },
            "compositionConfig": {"type": "dict", "nullable": True, "schema": self.config_schema},
            "slideCount": {"type": "integer", "min": 1},
            "baseUrl": {"type": "string", "nullable": True},
        }

    def validate_request(self, data: Dict[str, Any]) -> Tuple[bool, List[str], List[str]]:
        """
        Validate request structure.

        Args:
            data: Payload to validate

        Returns:
            Tuple of (is_valid, errors, warnings)
        """
        validator = Validator(self.request_schema)
        validator.allow_unknown = True

        is_valid = validator.validate(data)
        errors: List[str] = []
        warnings: List[str] = []

        if not is_valid:
            errors.extend(self._format_validation_errors(validator.errors))
            return False, errors, warnings

        custom_errors, custom_warnings = self._perform_custom_validations(data)
        errors.extend(custom_errors)
        warnings.extend(custom_warnings)

        return not errors, errors, warnings

    def _format_validation_errors(self, errors: Any, path: str = "") -> List[str]:
        """Format Cerberus validation errors into readable messages."""
        formatted_errors: List[str] = []

        for field, error_info in errors.items():
            current_path = f"{path}.{field}" if path else str(field)

            if isinstance(error_info, list):
                for error in error_info:
                    if isinstance(error, dict):
                        formatted_errors.extend(self._format_validation_errors(error, current_path))
                    else:
                        formatted_errors.append(f"{current_path}: {error}")
            elif isinstance(error_info, dict):
                formatted_errors.extend(self._format_validation_errors(error_info, current_path))

        return formatted_errors

    def _perform_custom_validations(self, data: Dict[str, Any]) -> Tuple[List[str], List[str]]:
        """Cross-field checks against the module registry and settings."""
        errors: List[str] = []
        warnings: List[str] = []
        registry = get_registry()
        settings = get_settings()

        enabled = data["enabledModuleIds"]
        for module_id in enabled:
            if module_id not in registry:
                warnings.append(f"enabledModuleIds: unknown module '{module_id}' will be skipped")

        if len(set(enabled)) != len(enabled):
            warnings.append("enabledModuleIds: duplicate ids are ignored")

        for module_id in data.get("moduleDataById") or {}:
            if module_id not in enabled:
                warnings.append(f"moduleDataById: data for '{module_id}' has no enabled module")

        slide_count = data.get("slideCount", 1)
        if slide_count > settings.max_slide_count:
            errors.append(
                f"slideCount: {slide_count} exceeds maximum of {settings.max_slide_count}"
            )

        config = data.get("compositionConfig") or {}
        for module_id in config.get("renderOrder") or []:
            if module_id not in enabled:
                warnings.append(f"compositionConfig.renderOrder: '{module_id}' is not enabled")

        result = registry.validate_combination([m for m in enabled if m in registry])
        warnings.extend(result.errors)

        return errors, warnings


class BaseRequestLoader(ABC):
    """Abstract base class for transport loaders."""

    @abstractmethod
    def load(self, content: str) -> LoadResult:
        """Load payload content into a composition request."""
        pass

    @abstractmethod
    def validate_syntax(self, content: str) -> bool:
        """Validate payload syntax without building the request."""
        pass


class _StructuredRequestLoader(BaseRequestLoader):
    """Shared validation and model conversion for decoded payloads."""

    format_name = ""

    def __init__(self) -> None:
        self.logger: Any = logger.bind(loader=self.format_name)
        self.validator = RequestValidator()

    @abstractmethod
    def _decode(self, content: str) -> Any:
        pass

    def load(self, content: str) -> LoadResult:
        """
        Load payload content.

        Args:
            content: Raw payload as string

        Returns:
            LoadResult containing the parsed request or errors
        """
        start_time = time.time()

        try:
            self.logger.info("Loading composition payload")
            raw_data = self._decode(content)

            if raw_data is None:
                return LoadResult(
                    success=False,
                    errors=["Empty payload"],
                    processing_time=time.time() - start_time,
                )
            if not isinstance(raw_data, dict):
                return LoadResult(
                    success=False,
                    errors=[f"Payload must be an object, got {type(raw_data).__name__}"],
                    processing_time=time.time() - start_time,
                )

            is_valid, errors, warnings = self.validator.validate_request(raw_data)
            if not is_valid:
                return LoadResult(
                    success=False,
                    errors=errors,
                    warnings=warnings,
                    processing_time=time.time() - start_time,
                )

            request = CompositionRequest.model_validate(raw_data)
            return LoadResult(
                success=True,
                request=request,
                warnings=warnings,
                processing_time=time.time() - start_time,
            )

        except ValidationError as e:
            errors = [
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            ]
            self.logger.error("Payload conversion failed", errors=errors)
            return LoadResult(
                success=False, errors=errors, processing_time=time.time() - start_time
            )
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            error_msg = self._syntax_error_message(e)
            self.logger.error("Payload decoding failed", error=error_msg)
            return LoadResult(
                success=False, errors=[error_msg], processing_time=time.time() - start_time
            )

    @staticmethod
    def _syntax_error_message(error: Exception) -> str:
        if isinstance(error, json.JSONDecodeError):
            return f"Invalid JSON syntax at line {error.lineno}, column {error.colno}: {error.msg}"
        return f"Invalid YAML syntax: {error}"

    def validate_syntax(self, content: str) -> bool:
        try:
            self._decode(content)
            return True
        except (json.JSONDecodeError, yaml.YAMLError):
            return False


class JSONRequestLoader(_StructuredRequestLoader):
    """JSON payload loader."""

    format_name = "json"

    def _decode(self, content: str) -> Any:
        return json.loads(content)


class YAMLRequestLoader(_StructuredRequestLoader):
    """YAML payload loader."""

    format_name = "yaml"

    def _decode(self, content: str) -> Any:
        return yaml.safe_load(content)


class RequestLoaderFactory:
    """Factory for creating loaders based on payload format."""

    _loaders = {
        "json": JSONRequestLoader,
        "yaml": YAMLRequestLoader,
    }

    @classmethod
    def create_loader(cls, format_type: str) -> BaseRequestLoader:
        """
        Create a loader instance.

        Args:
            format_type: Payload format ("json", "yaml")

        Returns:
            Loader instance

        Raises:
            ValueError: If the format is not supported
        """
        if format_type not in cls._loaders:
            raise ValueError(f"Unsupported payload format: {format_type}")

        return cls._loaders[format_type]()

    @classmethod
    def detect_format(cls, content: str) -> str:
        """Detect payload format from content."""
        content = content.strip()
        if content.startswith(("{", "[")):
            return "json"
        if content.startswith("---"):
            return "yaml"
        try:
            json.loads(content)
            return "json"
        except json.JSONDecodeError:
            return "yaml"


def load_request(content: str, format_type: Optional[str] = None) -> LoadResult:
    """
    Load a composition request using the appropriate loader.

    Args:
        content: Raw payload
        format_type: Optional format override

    Returns:
        LoadResult containing the parsed request or errors
    """
    if not content or not content.strip():
        return LoadResult(success=False, errors=["Empty payload provided"], processing_time=0.0)

    if not format_type:
        format_type = RequestLoaderFactory.detect_format(content)

    try:
        loader = RequestLoaderFactory.create_loader(format_type)
    except ValueError as e:
        return LoadResult(success=False, errors=[str(e)], processing_time=0.0)
    return loader.load(content)


def load_request_file(path: Union[str, Path]) -> LoadResult:
    """
    Load a composition request from a file.

    The format follows the file extension (``.yaml``/``.yml`` or JSON otherwise).

    Raises:
        TransportLoadError: If the file cannot be read
    """
    path = Path(path)
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as e:
        raise TransportLoadError(f"Cannot read payload file {path}: {e}") from e

    format_type = "yaml" if path.suffix.lower() in (".yaml", ".yml") else None
    return load_request(content, format_type)


def dump_request(request: CompositionRequest, format_type: str = "json") -> str:
    """
    Serialize a request back to its transport form.

    Raises:
        ValueError: If the format is not supported
    """
    data = request.model_dump(by_alias=True, exclude_none=True, mode="json")
    if format_type == "json":
        return json.dumps(data, indent=2, ensure_ascii=False)
    if format_type == "yaml":
        return yaml.safe_dump(data, sort_keys=False, allow_unicode=True)
    raise ValueError(f"Unsupported payload format: {format_type}")
