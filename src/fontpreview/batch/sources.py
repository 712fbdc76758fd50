"""
Font File Sources
=================

Named byte sources that the ingestion pipeline reads from.
"""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class FontFile(Protocol):
    """A named file whose bytes can be read asynchronously."""

    name: str

    async def read(self) -> bytes: ...


class LocalFontFile:
    """Font file on the local filesystem."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self.name = self.path.name

    async def read(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)

    def __repr__(self) -> str:
        return f"LocalFontFile({str(self.path)!r})"


class InMemoryFontFile:
    """Font file held in memory, with an optional simulated read latency."""

    def __init__(self, name: str, data: bytes, delay: float = 0.0):
        self.name = name
        self.data = data
        self.delay = delay

    async def read(self) -> bytes:
        if self.delay:
            await asyncio.sleep(self.delay)
        return self.data

    def __repr__(self) -> str:
        return f"InMemoryFontFile({self.name!r}, {len(self.data)} bytes)"


def collect_font_files(directory: str | Path, recursive: bool = False) -> list[LocalFontFile]:
    """
    Collect the files of a directory in name order.

    Every regular file is returned; extension filtering is the pipeline's job.

    Args:
        directory: Directory to scan
        recursive: Descend into subdirectories

    Returns:
        List of LocalFontFile
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise NotADirectoryError(f"Not a directory: {directory}")

    pattern = "**/*" if recursive else "*"
    files = [LocalFontFile(path) for path in sorted(directory.glob(pattern)) if path.is_file()]
    logger.debug(f"Found {len(files)} files in {directory}")
    return files
