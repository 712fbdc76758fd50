"""Core components for font preview."""

from .config import PreviewConfig, RenderConfig
from .exceptions import (
    ConfigurationError,
    FontPreviewError,
    ProcessingError,
    RenderingError,
    ValidationError,
)
from .models import RenderRequest

__all__ = [
    "ConfigurationError",
    "FontPreviewError",
    "PreviewConfig",
    "ProcessingError",
    "RenderConfig",
    "RenderRequest",
    "RenderingError",
    "ValidationError",
]
