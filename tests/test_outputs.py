"""Tests for step outputs and workflow commands."""

import io
import re

from rich.console import Console

from sta_actions.cli.outputs import ActionOutputs, to_command_value


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


def test_to_command_value():
    assert to_command_value("x") == "x"
    assert to_command_value(None) == ""
    assert to_command_value(3) == "3"
    assert to_command_value(["/a", "/b"]) == '["/a", "/b"]'


def test_outputs_are_written_in_delimiter_format(tmp_path):
    output_file = tmp_path / "github_output"
    outputs = ActionOutputs(output_file)

    outputs.set_many({"temp_dir": "/tmp/sta-1", "content_paths": ["/content/a"]})

    text = output_file.read_text()
    blocks = re.findall(r"^(\w+)<<(ghadelimiter_[0-9a-f-]+)\n(.*?)\n\2$", text, re.M | re.S)
    assert [(name, value) for name, _, value in blocks] == [
        ("temp_dir", "/tmp/sta-1"),
        ("content_paths", '["/content/a"]'),
    ]
    assert outputs.values["temp_dir"] == "/tmp/sta-1"


def test_multiline_values_survive(tmp_path):
    output_file = tmp_path / "github_output"

    ActionOutputs(output_file).set("error_message", "line one\nline two")

    assert "\nline one\nline two\n" in output_file.read_text()


def test_without_output_file_values_are_kept_in_memory():
    outputs = ActionOutputs()

    outputs.set("file_count", 4)

    assert outputs.values == {"file_count": "4"}


def test_from_env(monkeypatch, tmp_path):
    monkeypatch.setenv("GITHUB_OUTPUT", str(tmp_path / "out"))

    assert ActionOutputs.from_env().output_file == tmp_path / "out"


def test_workflow_commands_are_printed_verbatim():
    console, buffer = _console()
    outputs = ActionOutputs(console=console)

    outputs.mask("token-[abc]")
    outputs.mask("")
    outputs.warning("100% failed\nsecond line")
    outputs.error("bad")

    assert buffer.getvalue().splitlines() == [
        "::add-mask::token-[abc]",
        "::warning::100%25 failed%0Asecond line",
        "::error::bad",
    ]
