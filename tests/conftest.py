"""
Pytest configuration and fixtures for font preview tests.
"""

import io
import tempfile
from pathlib import Path

import pytest
from fontTools.fontBuilder import FontBuilder
from fontTools.pens.ttGlyphPen import TTGlyphPen

from fontpreview.core.config import PreviewConfig
from fontpreview.core.exceptions import ParseError
from fontpreview.fonts.identity import FontIdentityAssigner, LoadEpochClock
from fontpreview.fonts.models import ParsedFont
from fontpreview.rendering.environment import PillowRenderingEnvironment
from fontpreview.rendering.resources import RenderResourceManager
from fontpreview.session import FontSession

GLYPH_CHARS = "ABCabc "


def _box_glyph(width: int = 500, height: int = 700):
    pen = TTGlyphPen(None)
    pen.moveTo((50, 0))
    pen.lineTo((50, height))
    pen.lineTo((width, height))
    pen.lineTo((width, 0))
    pen.closePath()
    return pen.glyph()


def build_font_bytes(
    family: str = "Test Sans", style: str = "Regular", version: str = "Version 1.000"
) -> bytes:
    """Build a small but complete TrueType font in memory."""
    glyph_names = {char: f"uni{ord(char):04X}" for char in GLYPH_CHARS}
    glyph_order = [".notdef", *glyph_names.values()]

    fb = FontBuilder(1000, isTTF=True)
    fb.setupGlyphOrder(glyph_order)
    fb.setupCharacterMap({ord(char): name for char, name in glyph_names.items()})
    fb.setupGlyf({name: _box_glyph() for name in glyph_order})
    fb.setupHorizontalMetrics({name: (600, 50) for name in glyph_order})
    fb.setupHorizontalHeader(ascent=800, descent=-200)
    fb.setupNameTable({"familyName": family, "styleName": style, "version": version})
    fb.setupOS2(sTypoAscender=800, usWinAscent=800, usWinDescent=200)
    fb.setupPost()

    buffer = io.BytesIO()
    fb.save(buffer)
    return buffer.getvalue()


class ScriptedParser:
    """Parser for b"family|subfamily[|version|glyphs]" buffers; anything else is corrupt."""

    def __init__(self):
        self.calls = 0

    def parse(self, data: bytes) -> ParsedFont:
        self.calls += 1
        text = data.decode("utf-8", errors="replace")
        if text.startswith("corrupt") or "|" not in text:
            raise ParseError("scripted corruption")

        parts = text.split("|")
        return ParsedFont(
            family_name=parts[0] or None,
            subfamily_name=parts[1] or None,
            version_string=parts[2] if len(parts) > 2 and parts[2] else None,
            glyph_count=int(parts[3]) if len(parts) > 3 and parts[3] else None,
        )


@pytest.fixture(scope="session")
def font_bytes():
    """Factory for generated TrueType font bytes, cached per name."""
    cache: dict[tuple[str, str], bytes] = {}

    def factory(family: str = "Test Sans", style: str = "Regular") -> bytes:
        key = (family, style)
        if key not in cache:
            cache[key] = build_font_bytes(family, style)
        return cache[key]

    return factory


@pytest.fixture
def temp_dir():
    """Create temporary directory for testing."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def font_dir(temp_dir, font_bytes):
    """Directory with two valid fonts, one corrupt font and one non-font file."""
    (temp_dir / "A-Regular.ttf").write_bytes(font_bytes("Alpha", "Regular"))
    (temp_dir / "B-Bold.otf").write_bytes(font_bytes("Beta", "Bold"))
    (temp_dir / "corrupt.ttf").write_bytes(b"definitely not a font")
    (temp_dir / "notes.txt").write_text("not a font either")
    return temp_dir


@pytest.fixture
def config():
    return PreviewConfig()


@pytest.fixture
def scripted_parser():
    return ScriptedParser()


@pytest.fixture
def assigner():
    """Identity assigner with its own clock."""
    return FontIdentityAssigner(clock=LoadEpochClock())


@pytest.fixture
def environment():
    return PillowRenderingEnvironment()


@pytest.fixture
def resources(environment):
    manager = RenderResourceManager(environment)
    yield manager
    manager.teardown()


@pytest.fixture
def scripted_session(config, scripted_parser):
    """Session whose parser reads scripted buffers."""
    with FontSession(config, parser=scripted_parser) as session:
        yield session


@pytest.fixture
def font_session(config):
    """Session with the fontTools parser."""
    with FontSession(config) as session:
        yield session
