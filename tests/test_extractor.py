"""Tests for entry-by-entry archive extraction."""

import logging
import zipfile

import pytest

from sta_actions.exceptions import ExtractionError
from sta_actions.importer.extractor import (
    ArchiveExtractor,
    extract_zip,
    is_content_package_candidate,
    iter_entries,
    normalize_entry_name,
)


def _files(count: int):
    return [(f"file_{i}.txt", f"payload {i}") for i in range(count)]


@pytest.mark.asyncio
async def test_extract_returns_declared_entry_count(make_zip, tmp_path):
    archive = make_zip([("dir/", None), ("dir/a.txt", "a"), ("b.txt", "b")])
    dest = tmp_path / "out"

    result = await extract_zip(archive, dest)

    assert result.file_count == 3
    assert (dest / "dir").is_dir()
    assert (dest / "dir" / "a.txt").read_text() == "a"
    assert (dest / "b.txt").read_text() == "b"


@pytest.mark.asyncio
async def test_file_entries_create_missing_parents(make_zip, tmp_path):
    archive = make_zip([("deep/nested/path/file.bin", b"\x00\x01")])

    await extract_zip(archive, tmp_path / "out")

    assert (tmp_path / "out/deep/nested/path/file.bin").read_bytes() == b"\x00\x01"


@pytest.mark.asyncio
async def test_first_zip_among_first_three_entries_is_the_content_package(
    make_zip, tmp_path
):
    archive = make_zip([("a.txt", "a"), ("Package.ZIP", b"zip"), ("other.zip", b"zip")])
    seen = []

    result = await ArchiveExtractor(on_candidate=seen.append).extract(
        archive, tmp_path / "out"
    )

    assert result.content_package == "Package.ZIP"
    assert seen == ["Package.ZIP"]


@pytest.mark.asyncio
async def test_zip_after_third_entry_is_not_a_candidate(make_zip, tmp_path):
    archive = make_zip([("a.txt", "a"), ("b.txt", "b"), ("c.txt", "c"), ("pkg.zip", b"z")])

    result = await extract_zip(archive, tmp_path / "out")

    assert result.content_package is None
    assert (tmp_path / "out" / "pkg.zip").exists()


def test_content_package_heuristic():
    assert is_content_package_candidate(0, "xwalk-index.zip")
    assert is_content_package_candidate(2, "dir/PKG.Zip")
    assert not is_content_package_candidate(3, "xwalk-index.zip")
    assert not is_content_package_candidate(0, "archive.zip.txt")


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "count, expected",
    [
        (5, [(20, 1), (40, 2), (60, 3), (80, 4), (100, 5)]),
        (10, [(20, 2), (40, 4), (60, 6), (80, 8), (100, 10)]),
        (3, [(33, 1), (66, 2), (100, 3)]),
        (2, [(50, 1), (100, 2)]),
        (1, [(100, 1)]),
    ],
)
async def test_progress_is_reported_at_twenty_percent_steps(
    make_zip, tmp_path, count, expected
):
    archive = make_zip(_files(count))
    events = []

    await ArchiveExtractor(on_progress=events.append).extract(archive, tmp_path / "out")

    assert [(e.percent, e.extracted) for e in events] == expected
    assert all(e.total == count for e in events)


@pytest.mark.asyncio
async def test_progress_never_exceeds_five_events(make_zip, tmp_path):
    archive = make_zip(_files(137))
    events = []

    await ArchiveExtractor(on_progress=events.append).extract(archive, tmp_path / "out")

    assert len(events) <= 5
    assert events[-1].percent == 100


@pytest.mark.asyncio
async def test_rerun_reuses_directories_and_overwrites_files(make_zip, tmp_path):
    dest = tmp_path / "out"
    first = make_zip([("dir/", None), ("dir/a.txt", "old")], name="first.zip")
    second = make_zip([("dir/", None), ("dir/a.txt", "new")], name="second.zip")

    await extract_zip(first, dest)
    result = await extract_zip(second, dest)

    assert result.file_count == 2
    assert (dest / "dir" / "a.txt").read_text() == "new"


@pytest.mark.asyncio
async def test_entry_escaping_destination_aborts_extraction(make_zip, tmp_path):
    archive = make_zip([("ok.txt", "ok"), ("../evil.txt", "evil"), ("after.txt", "x")])
    dest = tmp_path / "out"

    with pytest.raises(ExtractionError, match="Failed to extract zip"):
        await extract_zip(archive, dest)

    assert (dest / "ok.txt").exists()
    assert not (tmp_path / "evil.txt").exists()
    assert not (dest / "after.txt").exists()


@pytest.mark.asyncio
async def test_write_failure_is_wrapped(make_zip, tmp_path):
    dest = tmp_path / "out"
    (dest / "a.txt").mkdir(parents=True)
    archive = make_zip([("a.txt", "cannot replace a directory")])

    with pytest.raises(ExtractionError, match="Failed to extract zip"):
        await extract_zip(archive, dest)


@pytest.mark.asyncio
async def test_unreadable_archive_is_an_extraction_error(tmp_path):
    archive = tmp_path / "broken.zip"
    archive.write_bytes(b"definitely not a zip")

    with pytest.raises(ExtractionError):
        await extract_zip(archive, tmp_path / "out")


def test_normalize_entry_name():
    assert str(normalize_entry_name("a\\b\\c.txt")) == "a/b/c.txt"
    with pytest.raises(ExtractionError):
        normalize_entry_name("/etc/passwd")
    with pytest.raises(ExtractionError):
        normalize_entry_name("a/../../b")


def test_entries_carry_their_uncompressed_size(make_zip):
    archive = make_zip([("docs/", None), ("docs/page.html", "x" * 2048)])

    with zipfile.ZipFile(archive) as zf:
        entries = [entry for entry, _ in iter_entries(zf)]

    assert [(e.name, e.is_dir, e.size) for e in entries] == [
        ("docs", True, 0),
        ("docs/page.html", False, 2048),
    ]


@pytest.mark.asyncio
async def test_extracted_files_are_logged_with_their_size(make_zip, tmp_path, caplog):
    caplog.set_level(logging.DEBUG, logger="sta_actions.importer.extractor")
    archive = make_zip([("page.html", "x" * 2048)])

    await extract_zip(archive, tmp_path / "out")

    assert "Extracted 'page.html' (2.0 KB)" in caplog.text
