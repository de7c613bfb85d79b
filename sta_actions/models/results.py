"""
Result and event types returned by the import, mountpoint and upload steps.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PipelineStage(str, Enum):
    """States of a single import-zip run."""

    NOT_STARTED = "not_started"
    DOWNLOADING = "downloading"
    EXTRACTING = "extracting"
    SCANNING_MANIFEST = "scanning_manifest"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True)
class ArchiveEntry:
    """A single entry of an archive's central directory."""

    name: str
    is_dir: bool
    size: int = 0


@dataclass(frozen=True)
class ExtractionProgress:
    """Coarse progress event emitted while extracting an archive."""

    percent: int
    extracted: int
    total: int


@dataclass(frozen=True)
class ExtractionResult:
    """Outcome of one extraction pass."""

    file_count: int
    content_package: str | None = None


@dataclass(frozen=True)
class LogEvent:
    """A structured log record kept in memory for the caller."""

    event: str
    level: str
    context: dict[str, Any] = field(default_factory=dict)


@dataclass
class ImportResult:
    """
    Everything the import-zip step reports back to the workflow.

    `temp_dir` and `file_count` are only set when the whole pipeline succeeded.
    `xwalk_zip` is set as soon as a content package is detected, and
    `content_paths` stays None when the filter manifest could not be read.
    """

    stage: PipelineStage = PipelineStage.NOT_STARTED
    temp_dir: str | None = None
    file_count: int | None = None
    xwalk_zip: str | None = None
    content_paths: list[str] | None = None
    error_message: str | None = None
    duration: float = 0.0
    events: list[LogEvent] = field(default_factory=list, repr=False)

    @property
    def ok(self) -> bool:
        return self.error_message is None

    def outputs(self) -> dict[str, Any]:
        """Returns the action outputs that have a value."""
        values = {
            "xwalk_zip": self.xwalk_zip,
            "content_paths": self.content_paths,
            "temp_dir": self.temp_dir,
            "file_count": self.file_count,
            "error_message": self.error_message,
        }
        return {key: value for key, value in values.items() if value is not None}
