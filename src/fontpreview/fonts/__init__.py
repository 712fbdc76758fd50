"""Font Metadata Module
====================

Font parsing, style inference and identity assignment for loaded font files.
"""

from .identity import FontIdentity, FontIdentityAssigner, LoadEpochClock
from .models import FontRecord, FontStyle, InferredStyle, ParsedFont
from .parser import FontMetadataExtractor, FontParser, FontToolsParser
from .style import infer_style

__all__ = [
    "FontIdentity",
    "FontIdentityAssigner",
    "FontMetadataExtractor",
    "FontParser",
    "FontRecord",
    "FontStyle",
    "FontToolsParser",
    "InferredStyle",
    "LoadEpochClock",
    "ParsedFont",
    "infer_style",
]
