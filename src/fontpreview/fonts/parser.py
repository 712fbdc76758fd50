"""
Font Metadata Extraction
========================

Parse raw font bytes into the handful of metadata fields the previewer shows.
Parsing is delegated to a FontParser; fontTools is the default one.
"""

import io
import logging
from typing import Protocol

from fontTools.ttLib import TTFont

from ..core.exceptions import ParseError
from .models import ParsedFont, ParsedFontHandle

logger = logging.getLogger(__name__)

# OpenType name table IDs
NAME_ID_FAMILY = 1
NAME_ID_SUBFAMILY = 2
NAME_ID_VERSION = 5

# Windows US English and Macintosh English
PREFERRED_LANG_IDS = (1033, 0)


class FontParser(Protocol):
    """External font parsing capability."""

    def parse(self, data: bytes) -> ParsedFontHandle:
        """Parse font bytes, raising ParseError when they are not a well-formed font."""
        ...


class FontToolsParser:
    """Font parser backed by fontTools."""

    def __init__(self, keep_font: bool = True):
        """
        Initialize parser.

        Args:
            keep_font: Keep the decompiled TTFont on the parsed handle
        """
        self.keep_font = keep_font

    def parse(self, data: bytes) -> ParsedFont:
        try:
            font = TTFont(io.BytesIO(data))
            # Decompile every table now so truncated or malformed data fails here
            font.ensureDecompiled()
            name_table = font["name"]

            glyph_count = font["maxp"].numGlyphs if "maxp" in font else len(font.getGlyphOrder())

            return ParsedFont(
                family_name=_get_font_name(name_table, NAME_ID_FAMILY),
                subfamily_name=_get_font_name(name_table, NAME_ID_SUBFAMILY),
                version_string=_get_font_name(name_table, NAME_ID_VERSION),
                glyph_count=glyph_count,
                font=font if self.keep_font else None,
            )
        except Exception as e:
            raise ParseError(f"{type(e).__name__}: {e}") from e


def _get_font_name(name_table, name_id: int) -> str | None:
    """Extract a name from the name table, preferring English records."""
    candidates = [record for record in name_table.names if record.nameID == name_id]

    for record in candidates:
        if record.langID in PREFERRED_LANG_IDS:
            value = record.toUnicode(errors="replace").strip()
            if value:
                return value

    # Fallback to any available name
    for record in candidates:
        value = record.toUnicode(errors="replace").strip()
        if value:
            return value

    return None


class FontMetadataExtractor:
    """Stateless wrapper that normalizes every parser failure to ParseError."""

    def __init__(self, parser: FontParser | None = None):
        self.parser = parser or FontToolsParser()

    def extract(self, data: bytes) -> ParsedFontHandle:
        """
        Extract font metadata from raw bytes.

        Args:
            data: Raw font file contents

        Returns:
            Parsed font handle

        Raises:
            ParseError: If the bytes are not a well-formed font
        """
        if not data:
            raise ParseError("empty buffer")

        try:
            return self.parser.parse(data)
        except ParseError:
            raise
        except Exception as e:
            logger.debug(f"Font parser raised {type(e).__name__}: {e}")
            raise ParseError(f"{type(e).__name__}: {e}") from e
