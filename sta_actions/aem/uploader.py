"""
Runs the aem-import-helper CLI to upload an xwalk content package and its
asset mapping to an AEM author.
"""

import asyncio
import logging
import os
from dataclasses import dataclass
from urllib.parse import urlsplit

from sta_actions.exceptions import ConfigurationError, UploadError
from sta_actions.models.config import XwalkUploadConfig

from .command import Command, CommandBuilder

log = logging.getLogger(__name__)

HELPER_PACKAGE = "@adobe/aem-import-helper"
ASSET_MAPPING_NAME = "asset-mapping.json"
STDERR_LINE_LIMIT = 1024 * 1024


@dataclass(frozen=True)
class UploadPlan:
    zip_path: str
    asset_mapping_path: str
    target: str
    skip_assets: bool


def author_origin(author_url: str) -> str:
    """Returns the origin of an author URL with a trailing slash."""
    try:
        parsed = urlsplit(author_url)
        host = parsed.hostname
        port = parsed.port
    except ValueError as e:
        raise ConfigurationError(f"Invalid URL: {author_url}") from e
    if not parsed.scheme or not host:
        raise ConfigurationError(f"Invalid URL: {author_url}")

    netloc = f"[{host}]" if ":" in host else host
    if port is not None:
        netloc = f"{netloc}:{port}"
    return f"{parsed.scheme}://{netloc}/"


def plan_upload(config: XwalkUploadConfig) -> UploadPlan:
    return UploadPlan(
        zip_path=os.path.join(config.zip_path, config.resolved_zip_name),
        asset_mapping_path=f"{config.zip_path}/{ASSET_MAPPING_NAME}",
        target=author_origin(config.aem_author_url),
        skip_assets=config.skip_assets,
    )


def build_upload_command(
    plan: UploadPlan, access_token: str, program: str = "npx"
) -> Command:
    return (
        CommandBuilder(program, HELPER_PACKAGE, "aem", "upload")
        .option("--zip", plan.zip_path)
        .option("--asset-mapping", plan.asset_mapping_path)
        .option("--target", plan.target)
        .secret_option("--token", access_token)
        .flag("--skip-assets", enabled=plan.skip_assets)
        .build()
    )


async def _read_stderr(stream: asyncio.StreamReader) -> str:
    """Logs every stderr line and returns the last non-empty one."""
    last_line = ""
    while True:
        try:
            raw_line = await stream.readline()
        except ValueError:
            log.debug(f"Skipped a stderr line longer than {STDERR_LINE_LIMIT} bytes")
            continue
        if not raw_line:
            return last_line
        line = raw_line.decode("utf-8", errors="replace").rstrip()
        if line:
            log.info(line, extra={"markup": False})
            last_line = line


async def run_command(command: Command, name: str = "aem-import-helper") -> None:
    """
    Runs a command with inherited stdout and captured stderr.

    Every stderr line is logged; the last non-empty one is reported on failure.

    Raises:
        UploadError: If the program cannot be started or exits non-zero.
    """
    log.info("Running command:")
    log.info(f"> {command.redacted()}", extra={"markup": False})

    try:
        process = await asyncio.create_subprocess_exec(
            command.program,
            *command.argv(),
            stderr=asyncio.subprocess.PIPE,
            limit=STDERR_LINE_LIMIT,
        )
    except OSError as e:
        raise UploadError(f"{name} could not be started: {e}") from e

    try:
        last_error = await _read_stderr(process.stderr)
    except asyncio.CancelledError:
        if process.returncode is None:
            process.kill()
        raise
    finally:
        return_code = await process.wait()

    if return_code != 0:
        raise UploadError(f"{name} failed. Error: {last_error}")


class XwalkUploader:
    """Uploads one xwalk package described by an `XwalkUploadConfig`."""

    def __init__(self, config: XwalkUploadConfig, program: str = "npx"):
        self.config = config
        self.program = program

    async def upload(self) -> UploadPlan:
        plan = plan_upload(self.config)
        log.info(
            f'✅ Uploading "{plan.zip_path}" and "{plan.asset_mapping_path}" to '
            f"{plan.target}. Assets will {'not ' if plan.skip_assets else ''}be uploaded."
        )
        command = build_upload_command(plan, self.config.access_token, self.program)
        await run_command(command)
        log.info("✅ Upload completed successfully.")
        return plan
