"""
Test Configuration
==================

Pytest configuration with shared fixtures for unit tests.
Provides test settings, a fake module registry and sample composition data.
"""

import os

os.environ.setdefault("CAROUSEL_ENVIRONMENT", "testing")

import pytest
from pathlib import Path
from typing import Any, Dict, Generator
from unittest.mock import patch

from pydantic_settings import SettingsConfigDict

# Import application modules
from carousel_composer.config.settings import Settings
from carousel_composer.core.modules.registry import ModuleRegistry, get_registry

from tests.utils.data_generators import FakeModuleFactory, SlideDataGenerator


# Test settings override
class TestSettings(Settings):
    """Test-specific settings."""

    environment: str = "testing"
    debug: bool = True
    log_level: str = "DEBUG"
    log_path: Path = Path("./test_storage/logs")
    base_url: str = "http://localhost:3000"
    preview_debounce_ms: int = 10

    model_config = SettingsConfigDict(env_file=".env.test", env_prefix="CAROUSEL_TEST_")


@pytest.fixture(scope="session")
def test_settings() -> TestSettings:
    """Test settings fixture."""
    return TestSettings()


@pytest.fixture(autouse=True)
def override_settings(test_settings: TestSettings) -> Generator[TestSettings, None, None]:
    """Override application settings for testing."""
    with patch("carousel_composer.config.settings.settings", test_settings):
        yield test_settings


@pytest.fixture
def registry() -> ModuleRegistry:
    """Default registry with the built-in modules."""
    return get_registry()


@pytest.fixture
def dependency_registry() -> ModuleRegistry:
    """Registry of fake modules: B depends on A, C conflicts with A, M is multi-instance."""
    return ModuleRegistry(
        [
            FakeModuleFactory.create("A"),
            FakeModuleFactory.create("B", dependencies={"A"}),
            FakeModuleFactory.create("C", conflicts={"A"}),
            FakeModuleFactory.create("M", allow_multiple_instances=True),
        ]
    )


@pytest.fixture
def basic_slide_data() -> Dict[str, Any]:
    """Enabled ids and data for a card with text fields."""
    return SlideDataGenerator.card_with_text()


@pytest.fixture
def carousel_payload() -> Dict[str, Any]:
    """Carousel copy with photos and highlights."""
    return SlideDataGenerator.carousel_payload()
