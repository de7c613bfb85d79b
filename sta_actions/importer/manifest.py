"""
Reads the vault filter manifest of a content package and extracts the
content root paths it declares.
"""

import asyncio
import logging
import re
import zipfile
from pathlib import Path

from sta_actions.exceptions import ManifestNotFound

from .integrity import ZIP_READ_ERRORS

log = logging.getLogger(__name__)

FILTER_MANIFEST_ENTRY = "META-INF/vault/filter.xml"

# One self-closing-style declaration per line; other layouts are not recognised.
_FILTER_ROOT_REGEX = re.compile(r'^\s*<filter\s+root="([^"]+)"></filter>\s*$')


def parse_filter_paths(xml_text: str) -> list[str]:
    """
    Returns the `root` of every single-line `<filter root="..."></filter>`
    declaration, in line order and with duplicates kept.
    """
    paths = []
    for line in xml_text.split("\n"):
        match = _FILTER_ROOT_REGEX.match(line)
        if match:
            paths.append(match.group(1))
    return paths


def _read_entry(package_path: Path, entry_name: str) -> str:
    try:
        with zipfile.ZipFile(package_path) as zf:
            data = zf.read(entry_name)
    except KeyError as e:
        raise ManifestNotFound(f"'{entry_name}' is not present in the package.") from e
    except ZIP_READ_ERRORS as e:
        raise ManifestNotFound(f"Could not read '{entry_name}' from the package: {e}") from e
    return data.decode("utf-8", errors="replace")


async def read_filter_manifest(
    package_path: str | Path, entry_name: str = FILTER_MANIFEST_ENTRY
) -> str:
    """
    Reads the filter manifest text from a content package.

    Raises:
        ManifestNotFound: If the package cannot be opened or has no manifest.
    """
    return await asyncio.to_thread(_read_entry, Path(package_path), entry_name)


async def scan_content_package(package_path: str | Path) -> list[str]:
    """Reads the filter manifest of a content package and returns its root paths."""
    xml_text = await read_filter_manifest(package_path)
    log.debug(f"Filter XML content:\n{xml_text}")
    return parse_filter_paths(xml_text)
