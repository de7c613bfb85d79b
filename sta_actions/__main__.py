"""
Main entry point for sta-actions.

Commands report their own `StaActionError`s. Anything they let through lands
here: steps that must not fail the workflow still get an `error_message`
output, every other step exits non-zero with an error panel.
"""

import asyncio
import logging
import sys

import typer

from sta_actions.cli.app import SOFT_FAILURE_COMMANDS, app, console
from sta_actions.cli.formatters import format_error_with_suggestions
from sta_actions.cli.outputs import ActionOutputs

log = logging.getLogger("sta_actions")


def invoked_command(argv: list[str]) -> str | None:
    """Returns the sub-command named in `argv`, skipping leading options."""
    for arg in argv:
        if not arg.startswith("-"):
            return arg
    return None


def main(argv: list[str] | None = None) -> None:
    """Main entry point function."""
    args = sys.argv[1:] if argv is None else argv

    try:
        app(args=args)
    except (typer.Exit, typer.Abort):
        pass
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Step cancelled.[/yellow]")
        sys.exit(130)
    except Exception as e:
        log.debug("Full traceback:", exc_info=True)
        if invoked_command(args) in SOFT_FAILURE_COMMANDS:
            ActionOutputs.from_env(console).report_failure(f"❌ Error: {e}")
            return
        console.print(f"\n{format_error_with_suggestions(e, {'type': 'Unexpected'})}")
        sys.exit(1)


if __name__ == "__main__":
    main()
