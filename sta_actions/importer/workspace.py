"""
The temporary directory that one import run owns.
"""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Workspace:
    """
    A temp root holding the downloaded archive and a `contents` directory.

    Only the archive is ever removed; `contents` is left for later workflow steps.
    """

    root: Path
    contents_dir: Path
    archive_path: Path

    @classmethod
    def create(
        cls,
        prefix: str = "sta-",
        zip_name: str = "import.zip",
        contents_dir_name: str = "contents",
        base_dir: str | Path | None = None,
    ) -> "Workspace":
        root = Path(tempfile.mkdtemp(prefix=prefix, dir=base_dir))
        contents_dir = root / contents_dir_name
        contents_dir.mkdir(parents=True, exist_ok=True)
        return cls(root=root, contents_dir=contents_dir, archive_path=root / zip_name)

    def remove_archive(self) -> OSError | None:
        """
        Deletes the downloaded archive if it exists.

        Returns:
            The error that prevented deletion, or None.
        """
        try:
            self.archive_path.unlink(missing_ok=True)
        except OSError as e:
            log.debug(f"Failed to delete '{self.archive_path}': {e}")
            return e
        return None
