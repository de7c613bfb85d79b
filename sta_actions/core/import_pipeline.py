"""
The orchestrator for one import-zip run: validate the URL, download the zip,
extract it, and read the content package's filter manifest.
"""

import logging
import time
from pathlib import Path
from urllib.parse import urlsplit

from sta_actions.exceptions import DownloadError, ManifestNotFound, StaActionError
from sta_actions.importer import ArchiveExtractor, Workspace, ZipFetcher
from sta_actions.importer.manifest import scan_content_package
from sta_actions.models.config import ImportZipConfig
from sta_actions.models.results import ExtractionResult, ImportResult, PipelineStage
from sta_actions.utils.formatting import format_size
from sta_actions.utils.structured_logger import create_import_logger

log = logging.getLogger(__name__)


def validate_download_url(url: str, marker: str) -> str:
    """
    Checks that the URL comes from the import service and is well formed.

    Raises:
        DownloadError: If the marker is missing or the URL is not absolute http(s).
    """
    if marker not in url:
        raise DownloadError(f"Invalid download url: {url}")
    parsed = urlsplit(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise DownloadError(f"Invalid download url: {url}")
    return url


class ImportZipPipeline:
    """Runs the import stages strictly one after another."""

    def __init__(
        self,
        config: ImportZipConfig,
        fetcher: ZipFetcher | None = None,
        base_dir: str | Path | None = None,
        log_dir: Path | None = None,
    ):
        self.config = config
        self.fetcher = fetcher
        self.base_dir = base_dir
        self.base_logger, self.logger = create_import_logger(
            log_dir=log_dir, enable_json=log_dir is not None
        )
        self.result = ImportResult()
        self.workspace: Workspace | None = None

    def _set_stage(self, stage: PipelineStage) -> None:
        log.debug(f"Import stage: {self.result.stage.value} -> {stage.value}")
        self.result.stage = stage

    async def run(self) -> ImportResult:
        """
        Runs the pipeline. Never raises for application errors: a failure is
        reported through `ImportResult.error_message`.
        """
        start_time = time.monotonic()
        try:
            validate_download_url(self.config.download_url, self.config.download_url_marker)
            self.workspace = self._create_workspace()

            await self._download()
            extraction = await self._extract()
            await self._scan_manifest(extraction)

            self.result.temp_dir = str(self.workspace.root)
            self.result.file_count = extraction.file_count
            self._set_stage(PipelineStage.DONE)
        except StaActionError as e:
            failed_stage = self.result.stage
            self._set_stage(PipelineStage.FAILED)
            self.result.error_message = f"❌ Error: {e}"
            self.logger.pipeline_failed(failed_stage.value, str(e))
        finally:
            self._remove_archive()
            self.result.duration = time.monotonic() - start_time
            self.result.events = list(self.base_logger.events)
            self.base_logger.close()

        return self.result

    def _create_workspace(self) -> Workspace:
        try:
            workspace = Workspace.create(
                prefix=self.config.temp_dir_prefix,
                zip_name=self.config.zip_name,
                contents_dir_name=self.config.contents_dir_name,
                base_dir=self.base_dir,
            )
        except OSError as e:
            raise StaActionError(f"Could not create import workspace: {e}") from e
        self.logger.workspace_created(str(workspace.root), str(workspace.contents_dir))
        return workspace

    async def _download(self) -> None:
        self._set_stage(PipelineStage.DOWNLOADING)
        url = self.config.download_url
        destination = self.workspace.archive_path
        if self.fetcher is not None:
            fetched = await self.fetcher.fetch(url, destination)
        else:
            async with ZipFetcher() as fetcher:
                fetched = await fetcher.fetch(url, destination)
        self.logger.zip_downloaded(
            str(fetched.path), fetched.file_count, format_size(fetched.size)
        )

    async def _extract(self) -> ExtractionResult:
        self._set_stage(PipelineStage.EXTRACTING)

        def on_candidate(entry_name: str) -> None:
            self.result.xwalk_zip = entry_name
            self.logger.content_package_found(entry_name)

        extractor = ArchiveExtractor(
            on_progress=self.logger.extraction_progress,
            on_candidate=on_candidate,
        )
        extraction = await extractor.extract(
            self.workspace.archive_path, self.workspace.contents_dir
        )
        self.logger.zip_extracted(str(self.workspace.contents_dir), extraction.file_count)
        return extraction

    async def _scan_manifest(self, extraction: ExtractionResult) -> None:
        if not extraction.content_package:
            return

        self._set_stage(PipelineStage.SCANNING_MANIFEST)
        package_path = self.workspace.contents_dir / extraction.content_package
        try:
            paths = await scan_content_package(package_path)
        except ManifestNotFound as e:
            self.logger.manifest_missing(str(package_path), str(e))
            return

        self.result.content_paths = paths
        self.logger.content_paths_found(str(package_path), paths)

    def _remove_archive(self) -> None:
        if self.workspace is None:
            return
        error = self.workspace.remove_archive()
        if error is not None:
            self.logger.archive_cleanup_failed(str(self.workspace.archive_path), str(error))
