"""
Font Preview Session
====================

Caller-facing facade: one rendering environment, one resource manager, one
ingestion pipeline and one selection state, torn down together.
"""

import asyncio
import logging
import warnings
from collections.abc import Sequence
from pathlib import Path

from PIL import Image

from .batch.pipeline import IngestionPipeline, IngestProgressCallback, IngestResult
from .batch.sources import FontFile, collect_font_files
from .core.config import PreviewConfig
from .core.exceptions import (
    AllFilesFailedError,
    BatchSupersededError,
    NoValidFilesError,
    PartialFailureWarning,
    RecordNotFoundError,
)
from .core.models import RenderRequest
from .fonts.identity import FontIdentityAssigner
from .fonts.models import FontRecord
from .fonts.parser import FontMetadataExtractor, FontParser
from .rendering.environment import PillowRenderingEnvironment, RenderingEnvironment
from .rendering.resources import RenderResourceManager
from .selection import SelectionMode, SelectionState

logger = logging.getLogger(__name__)


class FontSession:
    """
    Load batches of font files, select fonts and render previews.

    Use as a context manager so that the style block and every resource
    handle are released when the session ends.
    """

    def __init__(
        self,
        config: PreviewConfig | None = None,
        environment: RenderingEnvironment | None = None,
        parser: FontParser | None = None,
        assigner: FontIdentityAssigner | None = None,
    ):
        """
        Initialize font session.

        Args:
            config: Preview configuration
            environment: Rendering environment; defaults to Pillow
            parser: Font parser; defaults to fontTools
            assigner: Identity assigner; defaults to the process-wide clock
        """
        self.config = config or PreviewConfig()
        self.environment = environment or PillowRenderingEnvironment(config=self.config.render)
        self.resources = RenderResourceManager(self.environment)
        self.pipeline = IngestionPipeline(
            self.resources,
            extractor=FontMetadataExtractor(parser),
            assigner=assigner,
            config=self.config,
        )
        self.selection = SelectionState(remember_comparison=self.config.remember_comparison)
        self.failures: tuple[str, ...] = ()

    @property
    def records(self) -> tuple[FontRecord, ...]:
        return self.selection.records

    @property
    def mode(self) -> SelectionMode:
        return self.selection.mode

    async def load(
        self,
        files: Sequence[FontFile],
        progress_callback: IngestProgressCallback | None = None,
    ) -> IngestResult | None:
        """
        Replace the loaded batch with a new one.

        Args:
            files: Files to load
            progress_callback: Optional progress callback

        Returns:
            IngestResult, or None when a newer load superseded this one

        Raises:
            NoValidFilesError: If no file has a recognized extension
            AllFilesFailedError: If every recognized file failed to parse
        """
        self.selection.reset()
        self.failures = ()

        try:
            result = await self.pipeline.ingest(files, progress_callback)
        except NoValidFilesError:
            self.resources.clear()
            raise
        except BatchSupersededError as e:
            logger.debug(f"Load superseded: {e}")
            return None

        self.failures = result.failures
        if not result.records:
            self.resources.clear()
            raise AllFilesFailedError(list(result.failures))

        self.selection.load(result.records)

        if result.failures:
            logger.warning(
                f"Loaded {len(result.records)} fonts, failed to parse {len(result.failures)}"
            )
            warnings.warn(
                PartialFailureWarning(len(result.records), list(result.failures)), stacklevel=2
            )

        return result

    def load_directory(
        self,
        directory: str | Path,
        progress_callback: IngestProgressCallback | None = None,
    ) -> IngestResult | None:
        """Load the font files of a directory (blocking)."""
        files = collect_font_files(directory, recursive=self.config.recursive_directory_scan)
        return asyncio.run(self.load(files, progress_callback))

    # Selection transitions
    def select_primary(self, record_id: str) -> None:
        self.selection.select_primary(record_id)

    def enable_compare(self) -> None:
        self.selection.enable_compare()

    def disable_compare(self) -> None:
        self.selection.disable_compare()

    def toggle_compare(self) -> None:
        self.selection.toggle_compare()

    def select_comparison(self, record_id: str) -> None:
        self.selection.select_comparison(record_id)

    def get_record(self, record_id: str) -> FontRecord:
        record = self.selection.find(record_id)
        if record is None:
            raise RecordNotFoundError(record_id)
        return record

    def render(
        self,
        text: str | None = None,
        record_id: str | None = None,
        pixel_size: int | None = None,
    ) -> Image.Image:
        """
        Render preview text with a loaded font.

        Args:
            text: Text to render; defaults to the configured sample text
            record_id: Font to render with; defaults to the primary font
            pixel_size: Font size in pixels; defaults to the configured size

        Returns:
            PIL Image with the rendered text
        """
        if record_id is not None:
            record = self.get_record(record_id)
        elif self.selection.primary is not None:
            record = self.selection.primary
        else:
            raise RecordNotFoundError("<primary>")

        request = RenderRequest(
            render_family=record.render_family,
            weight=record.weight,
            style=record.style.value,
            pixel_size=pixel_size or self.config.default_pixel_size,
            text=text or self.config.sample_text,
        )
        return self.environment.render_text(request)

    def export_font(self, record_id: str, destination: str | Path) -> Path:
        """
        Write a loaded font's original bytes to disk.

        Args:
            record_id: Font to export
            destination: Target file, or directory to write the source file name into

        Returns:
            Path written
        """
        record = self.get_record(record_id)
        destination = Path(destination)
        if destination.is_dir():
            destination = destination / record.source_file_name

        destination.parent.mkdir(parents=True, exist_ok=True)
        destination.write_bytes(record.resource_handle.read())
        logger.info(f"Exported {record.display_name} to {destination}")
        return destination

    def teardown(self) -> None:
        """Release every resource, discard in-flight loads and clear the selection."""
        self.pipeline.invalidate()
        self.selection.reset()
        self.failures = ()
        self.resources.teardown()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.teardown()
