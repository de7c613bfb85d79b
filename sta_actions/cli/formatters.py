"""
Functions for formatting and displaying results in the console using Rich.
"""

from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from sta_actions.models.results import ImportResult
from sta_actions.utils.formatting import format_duration
from sta_actions.utils.mountpoint import MountpointResult


def format_error_with_suggestions(
    error: Exception, context: dict | None = None
) -> Panel:
    """Formats an error with actionable suggestions into a Rich Panel."""
    error_type = type(error).__name__
    error_msg = str(error)

    suggestions_map = {
        "ConfigurationError": [
            "• Check the step's `with:` inputs or the command-line options.",
        ],
        "UnsupportedMountpointError": [
            "• Only SharePoint and AEM (crosswalk) mountpoints can be uploaded to.",
            "• Check the mountpoint in the site's fstab.yaml.",
        ],
        "MountpointFormatError": [
            "• SharePoint mountpoints need a `/sites/<site>/<path>` part.",
        ],
        "TokenFetchError": [
            "• Verify the service credentials file.",
            "• The private key or client secret may have been rotated.",
        ],
        "UploadError": [
            "• Check that Node.js and npx are available on the runner.",
            "• The access token may have expired.",
        ],
    }

    suggestions = suggestions_map.get(
        error_type, ["• Run the command with -vv for detailed logs."]
    )

    error_text = Text()
    error_text.append(f"{error_type}: ", style="bold red")
    error_text.append(error_msg)

    suggestion_text = Text("\n".join(suggestions))

    content = Table.grid(padding=(1, 0))
    content.add_row(error_text)
    content.add_row()
    content.add_row(Text("Suggestions", style="bold yellow"))
    content.add_row(suggestion_text)

    if context:
        content.add_row()
        content.add_row(Text(f"Context: {context}", style="dim"))

    return Panel(
        content,
        title="[bold red]An Error Occurred[/bold red]",
        border_style="red",
        expand=False,
    )


def print_import_summary(result: ImportResult, console: Console | None = None):
    """Displays the outcome of an import-zip run."""
    console = console or Console()

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan", justify="right")
    table.add_column(style="white", justify="left")

    table.add_row("Stage:", result.stage.value)
    if result.temp_dir:
        table.add_row("Temp Dir:", f"[dim]{result.temp_dir}[/dim]")
    if result.file_count is not None:
        table.add_row("Files:", f"[green]{result.file_count}[/green]")
    if result.xwalk_zip:
        table.add_row("Content Package:", result.xwalk_zip)
    if result.content_paths is not None:
        table.add_row("Content Paths:", "\n".join(result.content_paths) or "[dim]none[/dim]")
    table.add_row("Time Elapsed:", f"[blue]{format_duration(result.duration)}[/blue]")
    if result.error_message:
        table.add_row("Error:", f"[red]{result.error_message}[/red]")

    if result.ok:
        title = "📦 [bold]Import Zip Ready[/bold]"
        border_color = "green"
    else:
        title = "❌ [bold]Import Zip Failed[/bold]"
        border_color = "red"

    console.print(
        Panel(
            table,
            title=title,
            border_style=border_color,
            box=box.ROUNDED,
            expand=False,
        )
    )


def print_mountpoint_table(result: MountpointResult, console: Console | None = None):
    """Displays the parsed parts of a mountpoint."""
    console = console or Console()
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column(style="bold cyan")
    table.add_column()

    table.add_row("Type:", f"[green]{result.type.value}[/green]")
    for key, value in result.data.to_dict().items():
        table.add_row(f"{key.capitalize()}:", value)

    console.print(
        Panel(
            table,
            title="[bold green]✓ Mountpoint[/bold green]",
            border_style="green",
            expand=False,
        )
    )
