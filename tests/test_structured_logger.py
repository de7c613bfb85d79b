"""Tests for structured event logging and formatting helpers."""

import json
import logging

from sta_actions.models.results import ExtractionProgress
from sta_actions.utils.formatting import format_duration, format_size, mask_secret
from sta_actions.utils.structured_logger import StructuredLogger, create_import_logger


def test_events_are_recorded_and_forwarded(caplog):
    caplog.set_level(logging.DEBUG, logger="sta_actions.test")
    logger = StructuredLogger("sta_actions.test")

    logger.info("zip_downloaded", "Downloaded", files=3)
    logger.warning("manifest_missing", "No manifest")
    logger.info("zip_downloaded", "Downloaded again", files=4)

    found = logger.find("zip_downloaded")
    assert [e.context["files"] for e in found] == [3, 4]
    assert logger.find("manifest_missing")[0].level == "WARNING"
    assert "No manifest" in caplog.text


def test_json_log_file(tmp_path):
    base, import_log = create_import_logger(log_dir=tmp_path / "logs", enable_json=True)
    with base:
        import_log.extraction_progress(ExtractionProgress(percent=40, extracted=2, total=5))
        import_log.pipeline_failed("downloading", "boom")

    (log_file,) = (tmp_path / "logs").glob("sta_actions_*.jsonl")
    entries = [json.loads(line) for line in log_file.read_text().splitlines()]
    assert [e["event"] for e in entries] == ["extraction_progress", "pipeline_failed"]
    assert entries[0]["percent"] == 40
    assert entries[1]["message"] == "❌ Error: boom"
    assert entries[0]["session_id"] == entries[1]["session_id"]


def test_without_log_dir_nothing_is_written(tmp_path):
    base, import_log = create_import_logger(log_dir=tmp_path, enable_json=False)

    import_log.content_package_found("xwalk-index.zip")
    base.close()

    assert list(tmp_path.iterdir()) == []
    assert base.events[0].context == {"entry": "xwalk-index.zip"}


def test_formatting_helpers():
    assert format_size(0) == "0 B"
    assert format_size(1536) == "1.5 KB"
    assert format_duration(0) == "0s"
    assert format_duration(3725) == "1h 2m 5s"
    assert mask_secret("abcdefghijklmnop") == "abcdefghij..."
    assert mask_secret("") == ""
