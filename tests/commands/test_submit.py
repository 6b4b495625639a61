"""Tests for the submit CLI command."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from rowform.cli import cli
from tests.conftest import write_rows

VALID = {"category": "option2", "start": "1", "end": "2.5"}


@pytest.mark.usefixtures("_isolated_dir")
class TestSubmitCommand:
    def test_writes_payload(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_rows(tmp_path, [{**VALID, "id": "row-from-file"}])
        result = cli_runner.invoke(cli, ["submit", "rows.json", "-o", "out.json"])
        assert result.exit_code == 0
        assert "outcome: submitted" in result.stdout
        payload = json.loads((tmp_path / "out.json").read_text(encoding="utf-8"))
        assert payload == [VALID]

    def test_json_output(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_rows(tmp_path, [VALID, VALID])
        result = cli_runner.invoke(cli, ["--json", "submit", "rows.json"])
        assert result.exit_code == 0
        data = json.loads(result.stdout)["data"]
        assert data["outcome"] == "submitted"
        assert data["rows"] == 2
        assert data["payload"] == [VALID, VALID]

    def test_rejected(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_rows(tmp_path, [{"category": "", "start": "", "end": ""}])
        result = cli_runner.invoke(cli, ["--json", "submit", "rows.json", "-o", "out.json"])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["data"]["outcome"] == "rejected"
        assert len(payload["error"]["detail"]["errors"]) == 3
        assert not (tmp_path / "out.json").exists()

    def test_verbose_shows_payload(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_rows(tmp_path, [VALID])
        result = cli_runner.invoke(cli, ["-v", "submit", "rows.json"])
        assert result.exit_code == 0
        assert '"category": "option2"' in result.stdout

    def test_callback_failure(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_rows(tmp_path, [VALID])
        result = cli_runner.invoke(cli, ["submit", "rows.json", "-o", "missing/out.json"])
        assert result.exit_code == 1
        assert "ERROR" in result.stderr

    def test_empty_file_rejected(self, cli_runner: CliRunner, tmp_path: Path) -> None:
        write_rows(tmp_path, [])
        result = cli_runner.invoke(cli, ["--json", "submit", "rows.json", "-o", "out.json"])
        assert result.exit_code == 1
        payload = json.loads(result.stderr)
        assert payload["error"]["code"] == "INVALID_INPUT"
        assert "at least 1 required" in payload["error"]["message"]
        assert not (tmp_path / "out.json").exists()
