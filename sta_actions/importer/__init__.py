"""
Import Zip Layer.

This package is responsible for downloading the import zip, extracting it,
and reading the filter manifest of the content package inside it.
"""

from .extractor import ArchiveExtractor, extract_zip, is_content_package_candidate
from .fetcher import FetchedArchive, ZipFetcher, fetch_zip
from .integrity import ArchiveIntegrityChecker
from .manifest import parse_filter_paths, scan_content_package
from .workspace import Workspace

__all__ = [
    "ArchiveExtractor",
    "ArchiveIntegrityChecker",
    "FetchedArchive",
    "Workspace",
    "ZipFetcher",
    "extract_zip",
    "fetch_zip",
    "is_content_package_candidate",
    "parse_filter_paths",
    "scan_content_package",
]
