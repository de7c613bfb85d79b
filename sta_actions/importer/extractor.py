"""
Extracts a zip archive one entry at a time, reporting coarse progress and
noting the nested content package that the xwalk upload needs later.
"""

import asyncio
import logging
import zipfile
from collections.abc import Callable, Iterator
from pathlib import Path, PurePosixPath

import aiofiles

from sta_actions.exceptions import ExtractionError
from sta_actions.models.results import (
    ArchiveEntry,
    ExtractionProgress,
    ExtractionResult,
)
from sta_actions.utils.formatting import format_size

from .integrity import ZIP_READ_ERRORS

log = logging.getLogger(__name__)

CHUNK_SIZE = 262144  # 256 KB
PROGRESS_STEP = 20
CONTENT_PACKAGE_SCAN_LIMIT = 3

ProgressCallback = Callable[[ExtractionProgress], None]
CandidateCallback = Callable[[str], None]


def is_content_package_candidate(position: int, entry_name: str) -> bool:
    """
    Decides whether an entry is the nested content package.

    The import service writes the content package near the top of the
    archive, so only the first CONTENT_PACKAGE_SCAN_LIMIT entries are
    considered, and any name ending in `.zip` qualifies.

    Args:
        position: Number of entries processed before this one.
        entry_name: The normalised entry name.
    """
    return position < CONTENT_PACKAGE_SCAN_LIMIT and entry_name.lower().endswith(".zip")


def normalize_entry_name(raw_name: str) -> PurePosixPath:
    """
    Converts a raw zip entry name into a relative forward-slash path.

    Raises:
        ExtractionError: If the name is absolute or escapes the destination.
    """
    path = PurePosixPath(raw_name.replace("\\", "/"))
    if path.is_absolute() or ".." in path.parts:
        raise ExtractionError(f"Failed to extract zip: unsafe entry path '{raw_name}'")
    return path


def iter_entries(zf: zipfile.ZipFile) -> Iterator[tuple[ArchiveEntry, zipfile.ZipInfo]]:
    """Yields entries in central-directory order."""
    for info in zf.infolist():
        name = normalize_entry_name(info.filename)
        yield ArchiveEntry(name=str(name), is_dir=info.is_dir(), size=info.file_size), info


class _ProgressTracker:
    """Emits at most one event per entry, each time the next threshold is crossed."""

    def __init__(self, total: int, step: int = PROGRESS_STEP):
        self.total = total
        self.step = step
        self.done = 0
        self.next_threshold = step

    def advance(self) -> ExtractionProgress | None:
        self.done += 1
        percent = self.done * 100 // self.total
        if percent >= self.next_threshold:
            self.next_threshold += self.step
            return ExtractionProgress(percent=percent, extracted=self.done, total=self.total)
        return None


class ArchiveExtractor:
    """Materialises an archive under a destination directory, sequentially."""

    def __init__(
        self,
        on_progress: ProgressCallback | None = None,
        on_candidate: CandidateCallback | None = None,
        chunk_size: int = CHUNK_SIZE,
    ):
        self.on_progress = on_progress
        self.on_candidate = on_candidate
        self.chunk_size = chunk_size

    async def extract(self, archive_path: str | Path, destination: str | Path) -> ExtractionResult:
        """
        Extracts every entry of `archive_path` into `destination`.

        Directory entries are created with their ancestors; file entries are
        streamed to disk completely before the next entry is read. Existing
        directories are reused and existing files are overwritten.

        Raises:
            ExtractionError: On the first entry that cannot be read or written.
        """
        destination = Path(destination)
        try:
            zf = await asyncio.to_thread(zipfile.ZipFile, archive_path)
        except (zipfile.BadZipFile, OSError) as e:
            raise ExtractionError(f"Failed to extract zip: {e}") from e

        content_package: str | None = None
        with zf:
            tracker = _ProgressTracker(len(zf.infolist()))
            for position, (entry, info) in enumerate(iter_entries(zf)):
                if content_package is None and is_content_package_candidate(
                    position, entry.name
                ):
                    content_package = entry.name
                    if self.on_candidate:
                        self.on_candidate(entry.name)

                parts = PurePosixPath(entry.name).parts
                if not parts and not entry.is_dir:
                    raise ExtractionError(
                        f"Failed to extract zip: empty file name '{info.filename}'"
                    )
                target = destination.joinpath(*parts)
                try:
                    if entry.is_dir:
                        await asyncio.to_thread(target.mkdir, parents=True, exist_ok=True)
                    else:
                        await self._write_entry(zf, info, target)
                        log.debug(f"Extracted '{entry.name}' ({format_size(entry.size)})")
                except ZIP_READ_ERRORS as e:
                    raise ExtractionError(f"Failed to extract zip: {e}") from e

                progress = tracker.advance()
                if progress and self.on_progress:
                    self.on_progress(progress)

        return ExtractionResult(file_count=tracker.total, content_package=content_package)

    async def _write_entry(
        self, zf: zipfile.ZipFile, info: zipfile.ZipInfo, target: Path
    ) -> None:
        await asyncio.to_thread(target.parent.mkdir, parents=True, exist_ok=True)
        source = await asyncio.to_thread(zf.open, info)
        try:
            async with aiofiles.open(target, "wb") as out:
                while chunk := await asyncio.to_thread(source.read, self.chunk_size):
                    await out.write(chunk)
        finally:
            source.close()


async def extract_zip(
    archive_path: str | Path,
    destination: str | Path,
    on_progress: ProgressCallback | None = None,
) -> ExtractionResult:
    """Extracts an archive with default settings."""
    return await ArchiveExtractor(on_progress=on_progress).extract(archive_path, destination)
