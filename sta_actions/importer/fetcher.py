"""
Handles downloading the import zip over HTTP and verifying that what arrived
is a readable archive.
"""

import asyncio
import logging
import os
import zipfile
from dataclasses import dataclass
from pathlib import Path

import aiofiles
import aiohttp

from sta_actions.exceptions import DownloadError

from .integrity import ArchiveIntegrityChecker

log = logging.getLogger(__name__)

CHUNK_SIZE = 262144  # 256 KB


@dataclass(frozen=True)
class FetchedArchive:
    """A downloaded archive and what its central directory declares."""

    path: Path
    file_count: int
    size: int


def default_timeout() -> aiohttp.ClientTimeout:
    """No total limit; only connect and idle-read limits."""
    return aiohttp.ClientTimeout(total=None, sock_connect=15, sock_read=90)


class ZipFetcher:
    """A single-attempt zip downloader. Failures surface to the caller."""

    def __init__(
        self,
        session: aiohttp.ClientSession | None = None,
        timeout: aiohttp.ClientTimeout | None = None,
        chunk_size: int = CHUNK_SIZE,
    ):
        self._session = session
        self._owns_session = session is None
        self.timeout = timeout or default_timeout()
        self.chunk_size = chunk_size

    async def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Closes the session if this fetcher created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "ZipFetcher":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def fetch(self, url: str, destination: str | Path) -> FetchedArchive:
        """
        Downloads `url` to `destination` and validates it as a zip archive.

        Raises:
            DownloadError: On a non-success status, a transfer error, or if the
            downloaded file is not a readable archive.
        """
        destination = Path(destination)
        session = await self._get_session()
        bytes_downloaded = 0
        try:
            async with session.get(url, allow_redirects=True) as response:
                if not response.ok:
                    raise DownloadError(
                        "Failed to download zip. Did the url expire? "
                        f"{response.status} {response.reason}"
                    )

                async with aiofiles.open(destination, "wb") as f:
                    async for chunk in response.content.iter_chunked(self.chunk_size):
                        await f.write(chunk)
                        bytes_downloaded += len(chunk)
        except (aiohttp.ClientError, asyncio.TimeoutError, OSError) as e:
            raise DownloadError(
                f"Failed to download zip: {str(e) or type(e).__name__}"
            ) from e

        log.debug(
            f"Fetched {bytes_downloaded} bytes into '{os.path.basename(destination)}'"
        )

        try:
            file_count = await asyncio.to_thread(
                ArchiveIntegrityChecker.count_zip_entries, destination
            )
        except (zipfile.BadZipFile, OSError) as e:
            raise DownloadError(f"Failed to download zip: {e}") from e

        return FetchedArchive(path=destination, file_count=file_count, size=bytes_downloaded)


async def fetch_zip(url: str, destination: str | Path) -> FetchedArchive:
    """Downloads a zip with a short-lived session."""
    async with ZipFetcher() as fetcher:
        return await fetcher.fetch(url, destination)
