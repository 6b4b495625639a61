"""Tests for --examples flag on CLI commands."""

from __future__ import annotations

import pytest
from click.testing import CliRunner

from rowform.cli import cli

# (CLI args, expected keywords in output)
EXAMPLES_COMMANDS: list[tuple[list[str], list[str]]] = [
    (["validate", "--examples"], ["rowform validate rows.json", "rowform -q validate"]),
    (["submit", "--examples"], ["-o payload.json"]),
    (["schema", "--examples"], ["rowform --json schema"]),
]


@pytest.mark.usefixtures("_isolated_dir")
@pytest.mark.parametrize(("args", "keywords"), EXAMPLES_COMMANDS)
def test_examples_flag(cli_runner: CliRunner, args: list[str], keywords: list[str]) -> None:
    result = cli_runner.invoke(cli, args)
    assert result.exit_code == 0, result.output
    assert "Examples for" in result.output
    for keyword in keywords:
        assert keyword in result.output


@pytest.mark.usefixtures("_isolated_dir")
def test_examples_not_in_help_body(cli_runner: CliRunner) -> None:
    result = cli_runner.invoke(cli, ["validate", "--help"])
    assert "--examples" in result.output
    assert "rowform validate rows.json" not in result.output
