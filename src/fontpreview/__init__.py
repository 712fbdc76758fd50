"""Font Preview System
===================

Load a batch of font files, inspect their metadata and preview rendered text
side by side.

- Concurrent per-file parsing with partial-failure reporting
- Process-unique render family names for every loaded font
- Scoped resource handles and an atomically replaced style registration block
- Primary / comparison selection with compare mode
"""

__version__ = "1.0.0"
__author__ = "Font Preview Team"

from .batch import IngestionPipeline, IngestResult
from .core.config import PreviewConfig, RenderConfig
from .core.exceptions import (
    AllFilesFailedError,
    FontPreviewError,
    NoValidFilesError,
    ParseError,
    PartialFailureWarning,
)
from .fonts import FontRecord, FontStyle, infer_style
from .selection import SelectionMode, SelectionState
from .session import FontSession

__all__ = [
    "AllFilesFailedError",
    "FontPreviewError",
    "FontRecord",
    "FontSession",
    "FontStyle",
    "IngestResult",
    "IngestionPipeline",
    "NoValidFilesError",
    "ParseError",
    "PartialFailureWarning",
    "PreviewConfig",
    "RenderConfig",
    "SelectionMode",
    "SelectionState",
    "infer_style",
]
