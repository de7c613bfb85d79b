"""
Provides methods for checking the integrity of downloaded archives.
"""

import zipfile
import zlib
from pathlib import Path

# Errors zipfile raises while reading member data. NotImplementedError,
# raised for unsupported compression, is a RuntimeError.
ZIP_READ_ERRORS = (
    OSError,
    EOFError,
    RuntimeError,
    ValueError,
    zipfile.BadZipFile,
    zlib.error,
)


class ArchiveIntegrityChecker:
    """A collection of static methods for validating archive integrity."""

    @staticmethod
    def count_zip_entries(filepath: str | Path) -> int:
        """
        Opens a zip archive and reads its central directory.

        Args:
            filepath: Path to the zip file.

        Returns:
            The number of entries declared by the archive.

        Raises:
            zipfile.BadZipFile: If the file is not a complete zip archive.
            OSError: If the file cannot be opened.
        """
        with zipfile.ZipFile(filepath) as zf:
            return len(zf.infolist())
