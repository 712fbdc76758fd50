"""Font session integration tests with real font files."""

import asyncio

import pytest
from PIL import Image

from fontpreview import (
    AllFilesFailedError,
    FontSession,
    NoValidFilesError,
    PartialFailureWarning,
    SelectionMode,
)
from fontpreview.batch import InMemoryFontFile
from fontpreview.core.config import PreviewConfig
from fontpreview.core.exceptions import (
    FontNotRegisteredError,
    RecordNotFoundError,
    SelectionStateError,
)

pytestmark = pytest.mark.integration


class TestFontSessionLoading:
    """Test loading directories of real fonts."""

    def test_load_directory_with_corrupt_file(self, font_session, font_dir):
        """Test two valid fonts load and the corrupt one is reported."""
        with pytest.warns(PartialFailureWarning, match="Failed to parse: corrupt.ttf"):
            result = font_session.load_directory(font_dir)

        assert [r.display_name for r in font_session.records] == ["Alpha Regular", "Beta Bold"]
        assert [r.id for r in font_session.records] == ["Alpha|Regular|0", "Beta|Bold|1"]
        assert font_session.failures == ("corrupt.ttf",)
        assert result.failures == ("corrupt.ttf",)
        assert font_session.mode is SelectionMode.SINGLE_SELECTED
        assert font_session.selection.primary.display_name == "Alpha Regular"

        beta = font_session.records[1]
        assert beta.weight == 700
        assert dict(beta.details())["Glyphs"] == "8"

    def test_load_directory_without_fonts(self, font_session, temp_dir):
        """Test a directory without font files."""
        (temp_dir / "readme.txt").write_text("hello")

        with pytest.raises(NoValidFilesError):
            font_session.load_directory(temp_dir)

        assert font_session.mode is SelectionMode.EMPTY

    def test_load_directory_all_corrupt(self, font_session, temp_dir):
        """Test a directory where nothing parses."""
        (temp_dir / "a.ttf").write_bytes(b"junk")
        (temp_dir / "b.otf").write_bytes(b"")

        with pytest.raises(AllFilesFailedError) as exc_info:
            font_session.load_directory(temp_dir)

        assert exc_info.value.failures == ["a.ttf", "b.otf"]
        assert font_session.records == ()
        assert font_session.failures == ("a.ttf", "b.otf")

    def test_failed_load_clears_previous_batch(self, font_session, font_dir, temp_dir):
        """Test a blocking failure leaves no stale fonts registered."""
        with pytest.warns(PartialFailureWarning):
            font_session.load_directory(font_dir)
        previous = font_session.records
        empty_dir = temp_dir / "empty"
        empty_dir.mkdir()

        with pytest.raises(NoValidFilesError):
            font_session.load_directory(empty_dir)

        assert all(record.resource_handle.released for record in previous)
        assert font_session.resources.registered_ids == []
        with pytest.raises(FontNotRegisteredError):
            font_session.environment.find_rule(previous[0].render_family)

    def test_reload_replaces_batch(self, font_session, font_dir):
        """Test loading the same directory twice swaps in fresh records."""
        with pytest.warns(PartialFailureWarning):
            font_session.load_directory(font_dir)
        first = font_session.records
        with pytest.warns(PartialFailureWarning):
            font_session.load_directory(font_dir)
        second = font_session.records

        assert [r.id for r in first] == [r.id for r in second]
        assert {r.render_family for r in first}.isdisjoint({r.render_family for r in second})
        assert all(r.resource_handle.released for r in first)
        assert len(font_session.environment.style_blocks) == 1


class TestFontSessionPreview:
    """Test rendering, comparison and export on a loaded session."""

    @pytest.fixture
    def loaded_session(self, font_session, font_dir):
        with pytest.warns(PartialFailureWarning):
            font_session.load_directory(font_dir)
        return font_session

    def test_render_primary(self, loaded_session):
        """Test rendering the sample text with the primary font."""
        image = loaded_session.render()

        assert isinstance(image, Image.Image)
        assert image.width > 0

    def test_render_custom_text_and_size(self, loaded_session):
        """Test custom text and pixel size."""
        small = loaded_session.render(text="ABC", pixel_size=12)
        large = loaded_session.render(text="ABC", pixel_size=128)

        assert large.height > small.height

    def test_render_comparison(self, loaded_session):
        """Test rendering the comparison font in compare mode."""
        loaded_session.enable_compare()
        comparison = loaded_session.selection.comparison

        assert comparison.display_name == "Beta Bold"
        assert isinstance(loaded_session.render(text="abc", record_id=comparison.id), Image.Image)

    def test_render_unknown_record(self, loaded_session):
        """Test rendering an unknown record."""
        with pytest.raises(RecordNotFoundError):
            loaded_session.render(record_id="Gamma|Regular|5")

    def test_selection_transitions(self, loaded_session):
        """Test the session passes selection transitions through."""
        loaded_session.toggle_compare()
        assert loaded_session.mode is SelectionMode.COMPARE_ENABLED

        loaded_session.select_comparison("Alpha|Regular|0")
        assert loaded_session.selection.comparison.id == "Beta|Bold|1"

        loaded_session.disable_compare()
        with pytest.raises(SelectionStateError):
            loaded_session.select_comparison("Beta|Bold|1")

    def test_export_font(self, loaded_session, font_dir, temp_dir):
        """Test exporting writes the original bytes."""
        export_dir = temp_dir / "export"
        export_dir.mkdir()

        written = loaded_session.export_font("Beta|Bold|1", export_dir)

        assert written == export_dir / "B-Bold.otf"
        assert written.read_bytes() == (font_dir / "B-Bold.otf").read_bytes()

    def test_export_to_file_path(self, loaded_session, temp_dir):
        """Test exporting to an explicit file name."""
        target = temp_dir / "out" / "alpha-copy.ttf"

        assert loaded_session.export_font("Alpha|Regular|0", target) == target
        assert target.exists()

    def test_teardown(self, loaded_session):
        """Test teardown releases every handle and empties the selection."""
        records = loaded_session.records

        loaded_session.teardown()

        assert loaded_session.mode is SelectionMode.EMPTY
        assert all(record.resource_handle.released for record in records)
        assert loaded_session.environment.style_blocks == ()
        assert len(loaded_session.environment.resources) == 0


class TestFontSessionAsync:
    """Test asynchronous loading with scripted files."""

    @pytest.mark.asyncio
    async def test_superseded_load_returns_none(self, scripted_session):
        """Test only the most recent load is applied."""
        slow = [InMemoryFontFile("slow.ttf", b"Slow|Regular", delay=0.05)]
        fast = [InMemoryFontFile("fast.ttf", b"Fast|Regular")]

        slow_task = asyncio.create_task(scripted_session.load(slow))
        await asyncio.sleep(0)
        fast_result = await scripted_session.load(fast)

        assert await slow_task is None
        assert fast_result is not None
        assert [r.display_name for r in scripted_session.records] == ["Fast Regular"]
        assert scripted_session.resources.registered_ids == ["Fast|Regular|0"]

    @pytest.mark.asyncio
    async def test_teardown_during_load_discards_it(self, scripted_session):
        """Test a load still running at teardown registers nothing."""
        task = asyncio.create_task(
            scripted_session.load([InMemoryFontFile("slow.ttf", b"Slow|Regular", delay=0.05)])
        )
        await asyncio.sleep(0)

        scripted_session.teardown()

        assert await task is None
        assert scripted_session.environment.style_blocks == ()
        assert len(scripted_session.environment.resources) == 0
        assert scripted_session.records == ()
        assert scripted_session.mode is SelectionMode.EMPTY

    @pytest.mark.asyncio
    async def test_single_font_compares_with_itself(self, scripted_session):
        """Test the one-font batch in compare mode."""
        await scripted_session.load([InMemoryFontFile("only.ttf", b"Only|Italic")])

        scripted_session.enable_compare()

        only = scripted_session.records[0]
        assert scripted_session.selection.primary is only
        assert scripted_session.selection.comparison is only

    @pytest.mark.asyncio
    async def test_remember_comparison_config(self, scripted_parser):
        """Test the remember_comparison setting reaches the selection."""
        config = PreviewConfig(remember_comparison=True)
        files = [InMemoryFontFile(f"{name}.ttf", f"{name}|Regular".encode()) for name in "ABC"]

        with FontSession(config, parser=scripted_parser) as session:
            await session.load(files)
            session.enable_compare()
            session.select_comparison("C|Regular|2")
            session.disable_compare()
            session.enable_compare()

            assert session.selection.comparison.id == "C|Regular|2"
