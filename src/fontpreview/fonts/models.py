"""
Font data models and types.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from ..rendering.resources import ResourceHandle

NOT_AVAILABLE = "N/A"


class FontStyle(str, Enum):
    """Normalized font style."""

    NORMAL = "normal"
    ITALIC = "italic"
    OBLIQUE = "oblique"


@dataclass(frozen=True)
class InferredStyle:
    """Weight and style derived from a subfamily label."""

    weight: int  # 100-900
    style: FontStyle


class ParsedFontHandle(Protocol):
    """The parser fields this system reads; everything else is opaque."""

    family_name: str | None
    subfamily_name: str | None
    version_string: str | None
    glyph_count: int | None


@dataclass(frozen=True)
class ParsedFont:
    """Metadata returned by a font parser."""

    family_name: str | None = None
    subfamily_name: str | None = None
    version_string: str | None = None
    glyph_count: int | None = None
    font: Any = field(default=None, repr=False, compare=False)


@dataclass(frozen=True, eq=False)
class FontRecord:
    """A loaded, uniquely addressable and renderable font."""

    id: str
    display_name: str
    render_family: str
    weight: int
    style: FontStyle
    resource_handle: "ResourceHandle" = field(repr=False)
    raw_metadata: ParsedFontHandle = field(repr=False)
    source_file_name: str

    def details(self) -> list[tuple[str, str]]:
        """Labelled metadata for display, with N/A for absent values."""
        meta = self.raw_metadata
        glyphs = meta.glyph_count
        return [
            ("Family", meta.family_name or NOT_AVAILABLE),
            ("Style", meta.subfamily_name or NOT_AVAILABLE),
            ("Version", meta.version_string or NOT_AVAILABLE),
            ("Glyphs", str(glyphs) if glyphs is not None else NOT_AVAILABLE),
        ]

    def __str__(self) -> str:
        return f"{self.display_name} ({self.source_file_name})"
