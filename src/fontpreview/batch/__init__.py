"""Batch Ingestion Module
======================

Concurrent loading of font file batches.
"""

from .pipeline import (
    IngestionPipeline,
    IngestProgressCallback,
    IngestResult,
    LoggingProgressCallback,
)
from .sources import FontFile, InMemoryFontFile, LocalFontFile, collect_font_files

__all__ = [
    "FontFile",
    "InMemoryFontFile",
    "IngestProgressCallback",
    "IngestResult",
    "IngestionPipeline",
    "LocalFontFile",
    "LoggingProgressCallback",
    "collect_font_files",
]
