"""
Structured logging for the action pipelines.
Records named events in memory so callers decide how to surface them, forwards
them to the standard logger, and can mirror them to a JSONL file.
"""

import json
import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Any

from sta_actions.models.results import ExtractionProgress, LogEvent

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class StructuredLogger:
    """
    Logger that keeps every event it sees as a `LogEvent`.

    Usage:
        logger = StructuredLogger("sta_actions.import")
        logger.info("zip_downloaded", "Downloaded import zip", files=12)
        logger.events  # [LogEvent(event="zip_downloaded", ...)]
    """

    def __init__(
        self,
        name: str,
        log_dir: Path | None = None,
        enable_json: bool = False,
    ):
        """
        Initialize structured logger.

        Args:
            name: Logger name
            log_dir: Directory for JSON log files (None = disabled)
            enable_json: Enable JSON file logging
        """
        self.name = name
        self.events: list[LogEvent] = []
        self._logger = logging.getLogger(name)

        self._json_file = None
        if enable_json and log_dir is not None:
            log_dir.mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
            json_log_path = log_dir / f"sta_actions_{timestamp}.jsonl"
            self._json_file = open(json_log_path, "a", encoding="utf-8")  # noqa: SIM115

        self._session_context: dict[str, Any] = {
            "session_id": f"{int(time.time())}_{id(self)}",
        }

    def _write_json(self, level: str, event: str, message: str, **context) -> None:
        if not self._json_file or self._json_file.closed:
            return

        entry = {
            "timestamp": datetime.now().isoformat(),
            "level": level,
            "event": event,
            "message": message,
            **self._session_context,
            **context,
        }

        try:
            self._json_file.write(json.dumps(entry, default=str) + "\n")
            self._json_file.flush()
        except (OSError, TypeError, ValueError) as e:
            print(f"JSON logging failed: {e}", file=sys.stderr)

    def log(self, level: str, event: str, message: str, **context) -> None:
        """Record an event and forward its message to the standard logger."""
        self.events.append(LogEvent(event=event, level=level, context=context))
        self._logger.log(_LEVELS[level], message)
        self._write_json(level, event, message, **context)

    def debug(self, event: str, message: str, **context) -> None:
        self.log("DEBUG", event, message, **context)

    def info(self, event: str, message: str, **context) -> None:
        self.log("INFO", event, message, **context)

    def warning(self, event: str, message: str, **context) -> None:
        self.log("WARNING", event, message, **context)

    def error(self, event: str, message: str, **context) -> None:
        self.log("ERROR", event, message, **context)

    def find(self, event: str) -> list[LogEvent]:
        """Returns the recorded events with the given name."""
        return [e for e in self.events if e.event == event]

    def close(self) -> None:
        """Close JSON log file."""
        if self._json_file and not self._json_file.closed:
            self._json_file.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class ImportLogger:
    """Specialized logger for import-zip events."""

    def __init__(self, logger: StructuredLogger):
        self.logger = logger

    def workspace_created(self, root: str, contents_dir: str):
        self.logger.info(
            "workspace_created",
            f"✅ Import Zip directory created: {root}. Contents: {contents_dir}",
            root=root,
            contents_dir=contents_dir,
        )

    def zip_downloaded(self, path: str, file_count: int, size: str):
        self.logger.info(
            "zip_downloaded",
            f"✅ Downloaded Import zip to {path} with {file_count} files ({size}).",
            path=path,
            file_count=file_count,
        )

    def extraction_progress(self, progress: ExtractionProgress):
        self.logger.info(
            "extraction_progress",
            f"⏳ Extraction progress: {progress.percent}% "
            f"({progress.extracted}/{progress.total} files)",
            percent=progress.percent,
            extracted=progress.extracted,
            total=progress.total,
        )

    def content_package_found(self, entry_name: str):
        self.logger.info(
            "content_package_found",
            f"✅ cp zip: {entry_name}",
            entry=entry_name,
        )

    def zip_extracted(self, contents_dir: str, file_count: int):
        self.logger.info(
            "zip_extracted",
            f"✅ Import zip extracted to: {contents_dir}",
            contents_dir=contents_dir,
            file_count=file_count,
        )

    def content_paths_found(self, package_path: str, paths: list[str]):
        self.logger.info(
            "content_paths_found",
            f"✅ Found {len(paths)} content path(s) in {package_path}",
            package=package_path,
            paths=paths,
        )

    def manifest_missing(self, package_path: str, reason: str):
        self.logger.warning(
            "manifest_missing",
            f"No filter manifest read from {package_path}: {reason}",
            package=package_path,
            reason=reason,
        )

    def pipeline_failed(self, stage: str, error: str):
        self.logger.warning(
            "pipeline_failed",
            f"❌ Error: {error}",
            stage=stage,
            error=error,
        )

    def archive_cleanup_failed(self, path: str, error: str):
        self.logger.info(
            "archive_cleanup_failed",
            f"Could not delete {path}. Let the OS handle the deletion.",
            path=path,
            error=error,
        )


def create_import_logger(
    log_dir: Path | None = None, enable_json: bool = False
) -> tuple[StructuredLogger, ImportLogger]:
    """
    Create the loggers used by one import-zip run.

    Returns:
        Tuple of (base_logger, import_logger)
    """
    base = StructuredLogger("sta_actions.import", log_dir=log_dir, enable_json=enable_json)
    return base, ImportLogger(base)
