"""Tests for CLI commands."""

from importlib import metadata
from pathlib import Path

import pytest
from typer.testing import CliRunner

from exprwhizz._version import get_version
from exprwhizz.cli import app


@pytest.fixture
def cli_runner(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Return a CLI test runner working in an empty directory."""
    monkeypatch.chdir(tmp_path)
    for name in ("LOG_LEVEL", "EXPRWHIZZ_INCREMENT_SHORTHAND", "EXPRWHIZZ_STRINGIFY_CAPACITY"):
        monkeypatch.delenv(name, raising=False)
    return CliRunner()


def test_version(cli_runner: CliRunner):
    """Test --version prints the program name."""
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert "ExpressionWhizz" in result.output


def test_version_matches_installed_metadata(cli_runner: CliRunner):
    """Test --version reports the installed distribution version."""
    result = cli_runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"ExpressionWhizz {metadata.version('exprwhizz')}" in result.output
    assert get_version() == metadata.version("exprwhizz")


def test_eval_single_expression(cli_runner: CliRunner):
    """Test eval prints the rendered tree and its value."""
    result = cli_runner.invoke(app, ["eval", "1 + 2"])
    assert result.exit_code == 0
    assert "(1 + 2)  ==> 3" in result.output


def test_eval_shares_variables(cli_runner: CliRunner):
    """Test eval runs expressions in one session."""
    result = cli_runner.invoke(app, ["eval", "x = 4", "x ^ 2"])
    assert result.exit_code == 0
    assert "Variable 'x' set to 4" in result.output
    assert "(x ^ 2)  ==> 16" in result.output


def test_eval_leading_minus(cli_runner: CliRunner):
    """Test eval accepts an expression starting with a minus sign."""
    result = cli_runner.invoke(app, ["eval", "--", "-1 + 3"])
    assert result.exit_code == 0
    assert "((-1) + 3)  ==> 2" in result.output


def test_eval_error_exit_code(cli_runner: CliRunner):
    """Test eval reports errors and exits non-zero."""
    result = cli_runner.invoke(app, ["eval", "2 * 3", "pi"])
    assert result.exit_code == 1
    assert "(2 * 3)  ==> 6" in result.output
    assert "Unknown variable 'pi'" in result.output


def test_tokens(cli_runner: CliRunner):
    """Test tokens lists every token with its index."""
    result = cli_runner.invoke(app, ["tokens", "3 + x"])
    assert result.exit_code == 0
    lines = result.output.splitlines()
    assert lines == ["0 VALUE 3", "1 PLUS", "2 SYMBOL x"]


def test_tokens_lexical_error(cli_runner: CliRunner):
    """Test tokens reports a bad character."""
    result = cli_runner.invoke(app, ["tokens", "3 + @"])
    assert result.exit_code == 1
    assert "Position 5: unexpected character @" in result.output


def test_config_file_disables_shorthand(cli_runner: CliRunner, tmp_path: Path):
    """Test --config settings reach the tokenizer."""
    config = tmp_path / "custom.toml"
    config.write_text("[exprwhizz]\nincrement_shorthand = false\n")

    result = cli_runner.invoke(app, ["--config", str(config), "tokens", "5++*2"])
    assert result.exit_code == 0
    assert "1 PLUS" in result.output
    assert "2 PLUS" in result.output


def test_default_config_file_is_picked_up(cli_runner: CliRunner, tmp_path: Path):
    """Test whizz.toml in the working directory is read."""
    (tmp_path / "whizz.toml").write_text("[exprwhizz]\nstringify_capacity = 8\n")

    result = cli_runner.invoke(app, ["eval", "1 + 2 + 3"])
    assert result.exit_code == 0
    assert "((1 + $  ==> 6" in result.output


def test_invalid_config(cli_runner: CliRunner, tmp_path: Path):
    """Test a bad settings file exits with code 2."""
    config = tmp_path / "bad.toml"
    config.write_text("[exprwhizz]\nstringify_capacity = 1\n")

    result = cli_runner.invoke(app, ["--config", str(config), "eval", "1"])
    assert result.exit_code == 2
    assert "Configuration error" in result.output


def test_repl_session(cli_runner: CliRunner):
    """Test the REPL evaluates lines until quit."""
    result = cli_runner.invoke(app, ["repl"], input="x = 3\nx + 1\n\nbad @\nquit\n")
    assert result.exit_code == 0
    assert "Welcome to ExpressionWhizz!" in result.output
    assert "Variable 'x' set to 3" in result.output
    assert "(x + 1)  ==> 4" in result.output
    assert "Position 5: unexpected character @" in result.output


def test_repl_stops_at_eof(cli_runner: CliRunner):
    """Test the REPL exits cleanly when input runs out."""
    result = cli_runner.invoke(app, ["repl"], input="2 ^ 10\n")
    assert result.exit_code == 0
    assert "(2 ^ 10)  ==> 1024" in result.output


def test_repl_meta_commands(cli_runner: CliRunner):
    """Test :vars, :del and :dump."""
    result = cli_runner.invoke(
        app,
        ["repl"],
        input=":vars\nx = 3\n:vars\n:dump\n:del x\n:del x\n:del\n:nope\nquit\n",
    )
    assert result.exit_code == 0
    assert "No variables defined" in result.output
    assert "Variables" in result.output
    assert "*** capacity: 8 stored: 1 deleted: 0" in result.output
    assert "Variable 'x' deleted" in result.output
    assert "Cannot delete 'x': no such variable" in result.output
    assert "Usage: :del NAME" in result.output
    assert "Unknown command ':nope'" in result.output
