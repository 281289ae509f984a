"""Tests for the root doclayer CLI."""

from pathlib import Path

import pytest
from click.testing import CliRunner

from doclayer import __version__
from doclayer.cli import cli


def test_cli_help(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--help"])
    assert result.exit_code == 0
    assert "doclayer" in result.output
    for command in ("check", "scopes", "resolve"):
        assert command in result.output


def test_cli_version(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output


@pytest.mark.usefixtures("_isolated_cwd")
def test_cli_no_args(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, [])
    assert result.exit_code == 0
    assert "Usage" in result.output


@pytest.mark.parametrize("flag", ["--json", "-q", "-v", "--log-json"])
def test_global_flag_accepted(cli_runner: CliRunner, flag: str) -> None:
    result = cli_runner.invoke(cli, [flag, "--version"])
    assert result.exit_code == 0


def test_config_must_not_be_directory(cli_runner: CliRunner, tmp_path: Path) -> None:
    result = cli_runner.invoke(cli, ["-c", str(tmp_path), "check"])
    assert result.exit_code == 2
