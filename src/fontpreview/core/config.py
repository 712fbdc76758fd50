"""Configuration management for the font preview system."""

from pathlib import Path

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import (
    ConfigFileNotFoundError,
    ConfigLoadError,
    ConfigurationError,
    EmptyConfigFileError,
    InvalidYamlError,
)

# Pixel size bounds of the preview slider
MIN_PIXEL_SIZE = 12
MAX_PIXEL_SIZE = 128


class RenderConfig(BaseSettings):
    """Text preview rendering configuration."""

    model_config = SettingsConfigDict(
        env_prefix="RENDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    background_color: str = Field("white", description="Preview background color")
    text_color: str = Field("black", description="Preview text color")
    padding: int = Field(20, ge=0, le=500, description="Padding around rendered text in pixels")
    line_spacing: float = Field(
        0.25, ge=0.0, le=2.0, description="Extra line spacing as a fraction of pixel size"
    )


class PreviewConfig(BaseSettings):
    """Main font preview configuration."""

    model_config = SettingsConfigDict(
        env_prefix="FONTPREVIEW_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Ingestion
    font_extensions: list[str] = Field(
        default_factory=lambda: [".ttf", ".otf"],
        description="Recognized font file extensions (case-insensitive)",
    )
    max_concurrent_loads: int = Field(16, ge=1, le=1024, description="Concurrent file loads")
    recursive_directory_scan: bool = Field(
        False, description="Descend into subdirectories when loading a directory"
    )

    # Identity
    render_family_prefix: str = Field(
        "custom-font-", min_length=1, description="Prefix of synthetic render family names"
    )
    default_subfamily: str = Field(
        "Regular", min_length=1, description="Subfamily used when a font declares none"
    )

    # Selection
    remember_comparison: bool = Field(
        False, description="Restore the last comparison font when compare mode is re-enabled"
    )

    # Preview
    default_pixel_size: int = Field(
        48, ge=MIN_PIXEL_SIZE, le=MAX_PIXEL_SIZE, description="Default preview pixel size"
    )
    sample_text: str = Field(
        "Type your own text here to preview the font.",
        min_length=1,
        description="Default preview text",
    )

    log_level: str = Field("INFO", description="Application log level")

    render: RenderConfig = Field(default_factory=RenderConfig)

    @field_validator("font_extensions")
    @classmethod
    def normalize_extensions(cls, v: list[str]) -> list[str]:
        if not v:
            raise ValueError("font_extensions must not be empty")
        normalized = []
        for ext in v:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            if ext not in normalized:
                normalized.append(ext)
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    def is_font_file_name(self, file_name: str) -> bool:
        """Check whether a file name carries a recognized font extension."""
        return file_name.lower().endswith(tuple(self.font_extensions))

    def strip_font_extension(self, file_name: str) -> str:
        """Remove a recognized font extension from a file name."""
        lowered = file_name.lower()
        for ext in self.font_extensions:
            if lowered.endswith(ext):
                return file_name[: -len(ext)]
        return file_name


def load_config_from_yaml(config_path: str | Path, config_class: type) -> BaseSettings:
    """Load configuration from YAML file."""
    config_path = Path(config_path)

    if not config_path.exists():
        raise ConfigFileNotFoundError(str(config_path))

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            raise EmptyConfigFileError(str(config_path))

        if issubclass(config_class, BaseSettings):
            # YAML-based configs must not pick up values from .env
            class YamlConfig(config_class):
                model_config = SettingsConfigDict(
                    env_file=None,
                    case_sensitive=False,
                    extra="ignore",
                )

            return YamlConfig(**config_data)
        return config_class(**config_data)

    except ConfigurationError:
        raise
    except yaml.YAMLError as e:
        raise InvalidYamlError(str(config_path), str(e)) from e
    except Exception as e:
        raise ConfigLoadError(str(e)) from e


def _add_yaml_methods():
    """Add YAML loading methods to configuration classes."""

    @classmethod
    def from_yaml(cls, config_path: str | Path):
        """Load configuration from YAML file."""
        return load_config_from_yaml(config_path, cls)

    @classmethod
    def from_env_and_yaml(cls, yaml_path: str | Path | None = None, env_file: str = ".env"):
        """Load configuration from environment variables and optionally override with YAML."""
        if yaml_path and Path(yaml_path).exists():
            return cls.from_yaml(yaml_path)
        return cls(_env_file=env_file if Path(env_file).exists() else None)

    for config_class in [RenderConfig, PreviewConfig]:
        config_class.from_yaml = from_yaml
        config_class.from_env_and_yaml = from_env_and_yaml


_add_yaml_methods()
