"""Tests for the top-level entry point's handling of unexpected errors."""

import pytest

from sta_actions import __main__ as entry
from sta_actions.cli import app as cli_app

from .conftest import read_github_outputs

SHAREPOINT_URL = "https://adobe.sharepoint.com/sites/mysite/Shared%20Documents/site"
MOUNTPOINT_ARGS = ["mountpoint", "--mountpoint", SHAREPOINT_URL, "--type", "sharepoint"]


@pytest.fixture
def output_file(tmp_path, monkeypatch):
    path = tmp_path / "github_output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(path))
    return path


@pytest.mark.parametrize(
    "argv, expected",
    [
        (["mountpoint", "--type", "x"], "mountpoint"),
        (["-vv", "import-zip"], "import-zip"),
        (["--version"], None),
        ([], None),
    ],
)
def test_invoked_command(argv, expected):
    assert entry.invoked_command(argv) == expected


def test_success_exits_zero(output_file):
    with pytest.raises(SystemExit) as exc_info:
        entry.main(MOUNTPOINT_ARGS)

    assert exc_info.value.code == 0
    assert read_github_outputs(output_file)["type"] == "sharepoint"


def test_unexpected_error_in_soft_step_sets_error_message(output_file, monkeypatch, capsys):
    def broken_resolver(mountpoint, desired_type):
        raise RuntimeError("resolver exploded")

    monkeypatch.setattr(cli_app, "resolve_mountpoint", broken_resolver)

    entry.main(MOUNTPOINT_ARGS)

    assert read_github_outputs(output_file) == {"error_message": "❌ Error: resolver exploded"}
    assert "::warning::❌ Error: resolver exploded" in capsys.readouterr().out


def test_unexpected_error_in_aem_helper_exits_non_zero(output_file, monkeypatch):
    async def broken_fetch(credentials_path):
        raise RuntimeError("exchange exploded")

    monkeypatch.setattr(cli_app, "fetch_access_token", broken_fetch)

    with pytest.raises(SystemExit) as exc_info:
        entry.main(["aem-helper", "--operation", "fetch-access-token"])

    assert exc_info.value.code == 1
    assert read_github_outputs(output_file) == {}
