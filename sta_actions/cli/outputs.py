"""
Reports results to the GitHub Actions runner: step outputs, warnings and masks.
This is the only module that knows about workflow commands.
"""

import json
import logging
import os
import uuid
from pathlib import Path
from typing import Any

from rich.console import Console

log = logging.getLogger(__name__)


def to_command_value(value: Any) -> str:
    """Serialises an output value: strings as-is, None as '', anything else as JSON."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


class ActionOutputs:
    """
    Writes step outputs to the `$GITHUB_OUTPUT` file and keeps a copy in memory.

    Without an output file (local runs) values are only kept in `values`.
    """

    def __init__(self, output_file: str | Path | None = None, console: Console | None = None):
        self.output_file = Path(output_file) if output_file else None
        self.console = console or Console()
        self.values: dict[str, str] = {}

    @classmethod
    def from_env(cls, console: Console | None = None) -> "ActionOutputs":
        return cls(os.getenv("GITHUB_OUTPUT") or None, console=console)

    def set(self, name: str, value: Any) -> None:
        text = to_command_value(value)
        self.values[name] = text
        if self.output_file is None:
            log.debug(f"Output {name}={text}")
            return

        delimiter = f"ghadelimiter_{uuid.uuid4()}"
        with open(self.output_file, "a", encoding="utf-8") as f:
            f.write(f"{name}<<{delimiter}\n{text}\n{delimiter}\n")

    def set_many(self, values: dict[str, Any]) -> None:
        for name, value in values.items():
            self.set(name, value)

    def report_failure(self, message: str) -> None:
        """Surfaces a failure without failing the step; the workflow decides."""
        self.warning(message)
        self.set("error_message", message)

    def _command(self, command: str, message: str) -> None:
        self.console.print(
            f"::{command}::{_escape_data(message)}",
            markup=False,
            highlight=False,
            soft_wrap=True,
        )

    def mask(self, secret: str) -> None:
        """Asks the runner to redact `secret` from all later log output."""
        if secret:
            self._command("add-mask", secret)

    def warning(self, message: str) -> None:
        self._command("warning", message)

    def error(self, message: str) -> None:
        self._command("error", message)
