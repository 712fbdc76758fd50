"""
Ingestion Pipeline
==================

Turns a batch of font files into uniquely addressable, registered font
records. Files are read and parsed concurrently; per-file parse failures are
collected instead of raised, and the surviving records keep input order.
"""

import asyncio
import logging
import time
from collections.abc import Sequence
from dataclasses import dataclass

from ..core.config import PreviewConfig
from ..core.exceptions import (
    BatchSupersededError,
    FontPreviewError,
    NoValidFilesError,
    ParseError,
)
from ..fonts.identity import FontIdentityAssigner
from ..fonts.models import FontRecord
from ..fonts.parser import FontMetadataExtractor
from ..fonts.style import infer_style
from ..rendering.resources import RenderResourceManager, ResourceHandle
from .sources import FontFile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class IngestResult:
    """Outcome of one batch ingestion."""

    records: tuple[FontRecord, ...]
    failures: tuple[str, ...]
    batch_token: int
    load_epoch: int
    processing_time_ms: float = 0.0

    @property
    def total_files(self) -> int:
        return len(self.records) + len(self.failures)

    @property
    def all_failed(self) -> bool:
        return not self.records and bool(self.failures)

    @property
    def has_failures(self) -> bool:
        return bool(self.failures)

    @property
    def success_rate(self) -> float:
        """Calculate success rate as percentage."""
        if self.total_files == 0:
            return 100.0
        return len(self.records) / self.total_files * 100.0


class IngestProgressCallback:
    """Base class for ingestion progress callbacks."""

    def on_start(self, total_files: int) -> None:
        """Called when a batch starts loading."""

    def on_file_complete(self, file_name: str, success: bool) -> None:
        """Called when one file has been parsed or has failed."""

    def on_complete(self, result: IngestResult) -> None:
        """Called when a batch completes and is registered."""


class LoggingProgressCallback(IngestProgressCallback):
    """Progress callback that reports through the module logger."""

    def __init__(self):
        self.total_files = 0
        self.completed_files = 0

    def on_start(self, total_files: int) -> None:
        self.total_files = total_files
        self.completed_files = 0
        logger.info(f"Loading {total_files} font files...")

    def on_file_complete(self, file_name: str, success: bool) -> None:
        self.completed_files += 1
        status = "loaded" if success else "failed"
        logger.debug(f"[{self.completed_files}/{self.total_files}] {file_name} {status}")

    def on_complete(self, result: IngestResult) -> None:
        logger.info(
            f"Loaded {len(result.records)}/{result.total_files} fonts "
            f"({result.success_rate:.1f}%) in {result.processing_time_ms:.1f}ms"
        )


class IngestionPipeline:
    """
    Concurrent font ingestion over a batch of files.

    Each ingest() call takes a new batch token. When a call completes after a
    newer call has started, its records are discarded and their handles
    released instead of being registered.
    """

    def __init__(
        self,
        resources: RenderResourceManager,
        extractor: FontMetadataExtractor | None = None,
        assigner: FontIdentityAssigner | None = None,
        config: PreviewConfig | None = None,
    ):
        """
        Initialize ingestion pipeline.

        Args:
            resources: Resource manager that binds bytes and registers batches
            extractor: Metadata extractor; defaults to the fontTools parser
            assigner: Identity assigner; defaults to the process-wide clock
            config: Preview configuration
        """
        self.config = config or PreviewConfig()
        self.resources = resources
        self.extractor = extractor or FontMetadataExtractor()
        self.assigner = assigner or FontIdentityAssigner(
            render_family_prefix=self.config.render_family_prefix
        )
        self._current_token = 0

    @property
    def current_token(self) -> int:
        return self._current_token

    def invalidate(self) -> None:
        """Mark every in-flight batch as superseded so none of them is registered."""
        self._current_token += 1
        logger.debug(f"Invalidated in-flight batches, current token {self._current_token}")

    def filter_font_files(self, files: Sequence[FontFile]) -> list[FontFile]:
        """Keep the files with a recognized font extension."""
        return [f for f in files if self.config.is_font_file_name(f.name)]

    async def ingest(
        self,
        files: Sequence[FontFile],
        progress_callback: IngestProgressCallback | None = None,
    ) -> IngestResult:
        """
        Load a batch of font files.

        Args:
            files: Files to load, in display order
            progress_callback: Optional progress callback

        Returns:
            IngestResult with records in input order and failed file names

        Raises:
            NoValidFilesError: If no file has a recognized extension
            BatchSupersededError: If a newer batch started before this one completed
        """
        self._current_token += 1
        token = self._current_token
        start_time = time.perf_counter()

        valid_files = self.filter_font_files(files)
        if not valid_files:
            logger.warning(f"No font files among {len(files)} selected files")
            raise NoValidFilesError(self.config.font_extensions)

        if progress_callback is None:
            progress_callback = LoggingProgressCallback()
        progress_callback.on_start(len(valid_files))

        load_epoch = self.assigner.next_epoch()
        semaphore = asyncio.Semaphore(self.config.max_concurrent_loads)
        bound: list[ResourceHandle] = []

        try:
            outcomes = await asyncio.gather(
                *(
                    self._load_file(
                        font_file, index, load_epoch, semaphore, progress_callback, bound
                    )
                    for index, font_file in enumerate(valid_files)
                )
            )
        except BaseException:
            # Cancelled or interrupted: nothing of this batch gets registered
            for handle in bound:
                self.resources.release(handle)
            logger.info(f"Batch {token} aborted, released {len(bound)} handles")
            raise

        records = [outcome for outcome in outcomes if outcome is not None]
        failures = [
            font_file.name
            for font_file, outcome in zip(valid_files, outcomes)
            if outcome is None
        ]

        if token != self._current_token:
            for record in records:
                self.resources.release(record.resource_handle)
            logger.info(f"Discarded batch {token}: superseded by batch {self._current_token}")
            raise BatchSupersededError(token, self._current_token)

        if records:
            try:
                self.resources.register_batch(records)
            except FontPreviewError:
                for record in records:
                    self.resources.release(record.resource_handle)
                raise

        result = IngestResult(
            records=tuple(records),
            failures=tuple(failures),
            batch_token=token,
            load_epoch=load_epoch,
            processing_time_ms=(time.perf_counter() - start_time) * 1000,
        )
        progress_callback.on_complete(result)
        return result

    async def _load_file(
        self,
        font_file: FontFile,
        index: int,
        load_epoch: int,
        semaphore: asyncio.Semaphore,
        progress_callback: IngestProgressCallback,
        bound: list[ResourceHandle],
    ) -> FontRecord | None:
        """Read, parse and identify one file. Returns None when it cannot be read or parsed."""
        async with semaphore:
            try:
                data = await font_file.read()
                parsed = await asyncio.to_thread(self.extractor.extract, data)
            except ParseError as e:
                logger.warning(f"Failed to parse font file {font_file.name}: {e.reason}")
                progress_callback.on_file_complete(font_file.name, False)
                return None
            except Exception as e:
                logger.warning(
                    f"Failed to read font file {font_file.name}: {type(e).__name__}: {e}"
                )
                progress_callback.on_file_complete(font_file.name, False)
                return None

        family = (
            parsed.family_name
            or self.config.strip_font_extension(font_file.name)
            or f"Unnamed Font {index}"
        )
        subfamily = parsed.subfamily_name or self.config.default_subfamily
        inferred = infer_style(subfamily)
        identity = self.assigner.assign(family, subfamily, index, load_epoch)
        handle = self.resources.bind(data)
        bound.append(handle)

        record = FontRecord(
            id=identity.record_id,
            display_name=f"{family} {subfamily}",
            render_family=identity.render_family,
            weight=inferred.weight,
            style=inferred.style,
            resource_handle=handle,
            raw_metadata=parsed,
            source_file_name=font_file.name,
        )
        progress_callback.on_file_complete(font_file.name, True)
        return record
