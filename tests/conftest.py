"""Shared pytest fixtures for sta-actions tests."""

import io
import re
import struct
import zipfile
from pathlib import Path

import pytest

# ============================================================================
# Archive Builders
# ============================================================================

FILTER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<workspaceFilter version="1.0">
    <filter root="/content/site/en"></filter>
    <filter root="/content/dam/site"></filter>
</workspaceFilter>
"""


def build_zip_bytes(
    entries: list[tuple[str, bytes | str | None]], compression: int = zipfile.ZIP_DEFLATED
) -> bytes:
    """Builds a zip in memory; a None payload makes a directory entry."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression) as zf:
        for name, payload in entries:
            if payload is None:
                zf.writestr(name if name.endswith("/") else f"{name}/", b"")
            else:
                zf.writestr(name, payload)
    return buffer.getvalue()


def build_content_package(filter_xml: str | None = FILTER_XML) -> bytes:
    """A vault content package, optionally without a filter manifest."""
    entries: list[tuple[str, bytes | str | None]] = [
        ("jcr_root/content/site/en/.content.xml", "<jcr:root/>"),
    ]
    if filter_xml is not None:
        entries.insert(0, ("META-INF/vault/filter.xml", filter_xml))
    return build_zip_bytes(entries)


def build_unreadable_manifest_package(defect: str) -> bytes:
    """
    A content package whose filter manifest is listed but cannot be read.

    `defect` is "compression" (method 99, unsupported by zipfile) or
    "encrypted" (general purpose flag bit 0 set, no password available).
    """
    raw = bytearray(
        build_zip_bytes(
            [("META-INF/vault/filter.xml", FILTER_XML)], compression=zipfile.ZIP_STORED
        )
    )
    local_header = raw.index(b"PK\x03\x04")
    central_header = raw.index(b"PK\x01\x02")
    if defect == "compression":
        struct.pack_into("<H", raw, local_header + 8, 99)
        struct.pack_into("<H", raw, central_header + 10, 99)
    elif defect == "encrypted":
        struct.pack_into("<H", raw, local_header + 6, 0x1)
        struct.pack_into("<H", raw, central_header + 8, 0x1)
    else:
        raise ValueError(defect)
    return bytes(raw)


def read_github_outputs(path: Path) -> dict[str, str]:
    """Parses a $GITHUB_OUTPUT file written in delimiter format."""
    if not path.exists():
        return {}
    text = path.read_text()
    return {
        name: value
        for name, _, value in re.findall(
            r"^(\w+)<<(ghadelimiter_[0-9a-f-]+)\n(.*?)\n\2$", text, re.M | re.S
        )
    }


@pytest.fixture
def make_zip(tmp_path: Path):
    """Factory writing a zip with the given entries into tmp_path."""

    def _make(entries, name: str = "archive.zip") -> Path:
        path = tmp_path / name
        path.write_bytes(build_zip_bytes(entries))
        return path

    return _make


@pytest.fixture
def import_zip_bytes() -> bytes:
    """A realistic import zip: content package first, then the asset mapping."""
    return build_zip_bytes(
        [
            ("xwalk-index.zip", build_content_package()),
            ("docs/", None),
            ("docs/index.html", "<html></html>"),
            ("asset-mapping.json", '{"a.png": "/content/dam/a.png"}'),
        ]
    )
