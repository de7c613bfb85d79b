"""
Defines the command-line interface for the application using Typer.
Each command is one workflow step; inputs come from `INPUT_*` variables or options.
"""

import asyncio
import logging
from pathlib import Path

import typer
from rich.console import Console
from rich.logging import RichHandler

from sta_actions import __version__
from sta_actions.aem import XwalkUploader, fetch_access_token
from sta_actions.core.import_pipeline import ImportZipPipeline
from sta_actions.exceptions import ConfigurationError, StaActionError, TokenFetchError
from sta_actions.models.config import (
    AemHelperConfig,
    ImportZipConfig,
    MountpointConfig,
    XwalkUploadConfig,
)
from sta_actions.utils.formatting import mask_secret
from sta_actions.utils.inputs import InputManager
from sta_actions.utils.mountpoint import resolve_mountpoint

from .formatters import (
    format_error_with_suggestions,
    print_import_summary,
    print_mountpoint_table,
)
from .outputs import ActionOutputs

console = Console()

logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[
        RichHandler(
            console=console,
            rich_tracebacks=True,
            show_path=False,
            show_level=False,
            markup=True,
        )
    ],
)
log = logging.getLogger("sta_actions")

app = typer.Typer(
    name="sta-actions",
    help=(
        "Workflow steps for importing content zips and uploading them to AEM."
        " Use 'sta-actions <command> --help' for more info."
    ),
    rich_markup_mode="rich",
    pretty_exceptions_show_locals=False,
    add_completion=False,
)

FETCH_ACCESS_TOKEN = "fetch-access-token"

# Steps whose failures are reported through `error_message` instead of the exit code.
SOFT_FAILURE_COMMANDS = frozenset({"import-zip", "mountpoint", "xwalk-upload"})


@app.callback(invoke_without_command=True)
def main_callback(
    ctx: typer.Context,
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase logging verbosity (-vv for debug).",
    ),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", is_eager=True
    ),
):
    """STA workflow steps"""
    if version:
        console.print(f"[bold]sta-actions[/bold] version [cyan]{__version__}[/cyan]")
        raise typer.Exit()

    log_level = "INFO"
    if verbose >= 2:
        log_level = "DEBUG"
    logging.getLogger("sta_actions").setLevel(log_level)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())


@app.command(name="import-zip")
def import_zip_command(
    download_url: str | None = typer.Option(
        None, "--download-url", help="URL of the import zip (input: download_url)."
    ),
    log_dir: Path | None = typer.Option(  # noqa: B008
        None, "--log-dir", help="Also write structured JSONL logs to this directory."
    ),
):
    """Download the import zip and extract it to a temporary directory."""
    outputs = ActionOutputs.from_env(console)
    try:
        config = InputManager().load_config(
            ImportZipConfig, {"download_url": download_url}
        )
    except StaActionError as e:
        outputs.report_failure(f"❌ Error: {e}")
        return

    result = asyncio.run(ImportZipPipeline(config, log_dir=log_dir).run())
    if result.error_message:
        outputs.warning(result.error_message)
    outputs.set_many(result.outputs())
    print_import_summary(result, console)


@app.command(name="mountpoint")
def mountpoint_command(
    mountpoint: str | None = typer.Option(
        None, "--mountpoint", help="The root mountpoint URL (input: mountpoint)."
    ),
    mountpoint_type: str | None = typer.Option(
        None,
        "--type",
        help="Expected type: sharepoint or crosswalk (input: mountpoint_type).",
    ),
):
    """Classify a mountpoint URL and output its host, site and path."""
    outputs = ActionOutputs.from_env(console)
    try:
        config = InputManager().load_config(
            MountpointConfig,
            {"mountpoint": mountpoint, "mountpoint_type": mountpoint_type},
        )
        result = resolve_mountpoint(config.mountpoint, config.mountpoint_type)
    except StaActionError as e:
        console.print(format_error_with_suggestions(e))
        outputs.report_failure(f"❌ Error: {e}")
        return

    outputs.set("mountpoint", result.mountpoint)
    outputs.set("type", result.type.value)
    outputs.set("data", result.data.to_json())
    print_mountpoint_table(result, console)


@app.command(name="aem-helper")
def aem_helper_command(
    operation: str | None = typer.Option(
        None, "--operation", help=f"Operation to run: {FETCH_ACCESS_TOKEN}."
    ),
    credentials_path: str | None = typer.Option(
        None, "--credentials-path", help="Path to the service credentials JSON."
    ),
):
    """Run an AEM helper operation. Exits non-zero on failure."""
    outputs = ActionOutputs.from_env(console)
    try:
        config = InputManager().load_config(
            AemHelperConfig,
            {"operation": operation, "credentials_path": credentials_path},
        )
    except StaActionError as e:
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    if config.operation != FETCH_ACCESS_TOKEN:
        error = ConfigurationError(f"Unknown operation: {config.operation}")
        console.print(format_error_with_suggestions(error))
        raise typer.Exit(code=1)

    try:
        access_token = asyncio.run(fetch_access_token(config.credentials_path))
    except TokenFetchError as e:
        outputs.error("Failed to fetch access token")
        console.print(format_error_with_suggestions(e))
        raise typer.Exit(code=1) from e

    outputs.mask(access_token)
    outputs.set("access_token", access_token)
    log.info(f"Access token fetched successfully: {mask_secret(access_token)}")


@app.command(name="xwalk-upload")
def xwalk_upload_command(
    access_token: str | None = typer.Option(
        None, "--access-token", help="Bearer token for the AEM author."
    ),
    aem_author_url: str | None = typer.Option(
        None, "--aem-author-url", help="URL of the AEM author instance."
    ),
    zip_path: str | None = typer.Option(
        None, "--zip-path", help="Directory holding the xwalk zip and asset mapping."
    ),
    zip_name: str | None = typer.Option(
        None, "--zip-name", help="Name of the xwalk zip (default xwalk-index.zip)."
    ),
    skip_assets: bool | None = typer.Option(
        None, "--skip-assets/--with-assets", help="Do not upload assets."
    ),
):
    """Upload an xwalk content package with aem-import-helper."""
    outputs = ActionOutputs.from_env(console)
    cli_options = {
        "access_token": access_token,
        "aem_author_url": aem_author_url,
        "zip_path": zip_path,
        "zip_name": zip_name,
        "skip_assets": skip_assets,
    }
    manager = InputManager()
    target = aem_author_url or manager.read_inputs(XwalkUploadConfig).get(
        "aem_author_url", ""
    )
    try:
        config = manager.load_config(XwalkUploadConfig, cli_options)
        outputs.mask(config.access_token)
        asyncio.run(XwalkUploader(config).upload())
    except StaActionError as e:
        console.print(format_error_with_suggestions(e))
        outputs.report_failure(f"Error: Failed to upload for XWalk to {target}: {e}")
