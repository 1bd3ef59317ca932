"""
Application Settings
===================

Main application settings and environment configuration using Pydantic Settings.
Supports development, testing, and production environments.
"""

from typing import Optional
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from pathlib import Path


class Settings(BaseSettings):
    """Main application settings with environment variable support."""

    # Application Configuration
    app_name: str = Field(default="Carousel Composer", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(
        default="development", description="Environment: development, testing, production"
    )
    debug: bool = Field(default=True, description="Debug mode")

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")
    log_path: Path = Field(default=Path("./storage/logs"), description="Log files directory")

    # Viewport Configuration
    slide_width: int = Field(default=1080, description="Width of a single slide in pixels")
    slide_height: int = Field(default=1440, description="Height of a slide in pixels")
    max_slide_count: int = Field(default=10, description="Maximum slides composed side by side")
    base_url: str = Field(
        default="http://localhost:3000", description="Base URL used to absolutize asset paths"
    )

    # Layering Configuration
    force_z_index_injection: bool = Field(
        default=False,
        description="Inject an overridden z-index into fragments that declare none",
    )
    layer_step: int = Field(default=10, description="Z-index gap used by move to top/bottom")

    # Transform Configuration
    layouts_path: Optional[Path] = Field(
        default=None, description="Directory of YAML/JSON layout bases"
    )
    highlight_color: str = Field(default="#ff0000", description="Primary highlight color")
    highlight_color_secondary: str = Field(
        default="#ffffff", description="Highlight color for dark (-b) layout variants"
    )

    # Preview Configuration
    preview_debounce_ms: int = Field(
        default=300, description="Debounce delay before a preview is recomposed"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment value."""
        allowed = {"development", "testing", "production"}
        if v not in allowed:
            raise ValueError(f"Environment must be one of: {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"Log level must be one of: {allowed}")
        return v.upper()

    @field_validator("slide_width", "slide_height", "max_slide_count", "layer_step")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        """Viewport dimensions and counters must be positive."""
        if v <= 0:
            raise ValueError("Value must be a positive integer")
        return v

    @field_validator("log_path")
    @classmethod
    def create_directories(cls, v: Path) -> Path:
        """Ensure directories exist."""
        v.mkdir(parents=True, exist_ok=True)
        return v

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, env_prefix="CAROUSEL_"
    )


# Global settings instance - will be initialized when needed
settings = None


def get_settings() -> Settings:
    """Get the global settings instance."""
    global settings
    if settings is None:
        settings = Settings()
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
