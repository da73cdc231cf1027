"""Tests for CLI commands."""

import json
from pathlib import Path

import pytest
from typer.testing import CliRunner

from cellcalc._cli.main import app


@pytest.fixture
def cli_runner() -> CliRunner:
    """Return a CLI test runner."""
    return CliRunner()


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run inside a directory whose pyproject.toml seeds ``rate``."""
    (tmp_path / "pyproject.toml").write_text("[tool.cellcalc]\nvariables = { rate = 0.5 }\n")
    monkeypatch.chdir(tmp_path)
    return tmp_path


def _json_lines(output: str) -> list[dict]:
    return [json.loads(line) for line in output.splitlines() if line.startswith("{")]


class TestEvalCommand:
    """Tests for `cellcalc eval`."""

    def test_prints_number(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["eval", "1 + 2"])

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "3.0"

    def test_uses_var_options(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["eval", "x * y", "--var", "x=4", "--var", "y=2.5"])

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "10.0"

    def test_uses_config_variables(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["eval", "rate * 4"])

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "2.0"

    def test_var_option_overrides_config(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["eval", "rate + 0", "--var", "rate=3"])

        assert result.exit_code == 0, result.output
        assert result.stdout.strip() == "3.0"

    def test_error_exits_non_zero(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["eval", "10 / 0"])

        assert result.exit_code == 1
        assert "Division by zero" in result.output

    def test_json_output(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["eval", "missing + 1", "--json"])

        assert result.exit_code == 1
        [reply] = _json_lines(result.output)
        assert reply["type"] == "value"
        assert reply["payload"]["type"] == "error"
        assert reply["payload"]["kind"] == "undefined_variable"

    def test_malformed_var_option(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["eval", "x + 1", "--var", "x=four"])

        assert result.exit_code == 2

    def test_invalid_config(self, cli_runner: CliRunner, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "pyproject.toml").write_text("[tool.cellcalc]\nvariables = 3\n")
        monkeypatch.chdir(tmp_path)

        result = cli_runner.invoke(app, ["eval", "1 + 1"])

        assert result.exit_code == 2
        assert "Configuration error" in result.output


class TestRunCommand:
    """Tests for `cellcalc run`."""

    def test_runs_script(self, cli_runner: CliRunner, workdir: Path) -> None:
        script = workdir / "sheet.txt"
        script.write_text("# totals\nset A1 2\nset B1 A1 * rate\nget B1\n")

        result = cli_runner.invoke(app, ["run", str(script), "--json"])

        assert result.exit_code == 0, result.output
        replies = _json_lines(result.output)
        assert [reply["type"] for reply in replies] == ["ok", "ok", "value"]
        assert replies[-1]["payload"] == {"type": "number", "value": 1.0}

    def test_table_output(self, cli_runner: CliRunner, workdir: Path) -> None:
        script = workdir / "sheet.txt"
        script.write_text("set A1 7\nget A1\n")

        result = cli_runner.invoke(app, ["run", str(script)])

        assert result.exit_code == 0, result.output
        assert "Results" in result.stdout
        assert "7.0" in result.stdout

    def test_failures_exit_non_zero(self, cli_runner: CliRunner, workdir: Path) -> None:
        script = workdir / "sheet.txt"
        script.write_text("set G1 1/0\nget G1\nset H1 1\n")

        result = cli_runner.invoke(app, ["run", str(script), "--json"])

        assert result.exit_code == 1
        replies = _json_lines(result.output)
        assert replies[0] == {"type": "error", "message": "Division by zero"}
        assert replies[2] == {"type": "ok"}
        assert "2 command(s) failed" in result.output

    def test_missing_script(self, cli_runner: CliRunner, workdir: Path) -> None:
        result = cli_runner.invoke(app, ["run", str(workdir / "nope.txt")])

        assert result.exit_code == 2
