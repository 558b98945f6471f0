"""Tests for the tasctl CLI."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from tasrecord.cli import cli

SCRIPT = (
    "@seed 0badf00d\n"
    "# opening moves\n"
    "move   1 0\n"
    "@rng 4 roll\n"
    "\n"
    "!wish potion healing  # cheat\n"
    "move -1 0\n"
)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def script(tmp_path):
    path = tmp_path / "run.tas"
    path.write_text(SCRIPT)
    return path


class TestCheck:
    """Tests for tasctl check."""

    def test_valid_script(self, runner, script):
        """A well-formed script is summarized."""
        result = runner.invoke(cli, ["check", str(script)])
        assert result.exit_code == 0
        assert "ok (3 decisions, 1 rng draws, 7 lines)" in result.output

    def test_malformed_line(self, runner, tmp_path):
        """A bad body line is reported with path, line and column."""
        path = tmp_path / "bad.tas"
        path.write_text("@test\nwait\nmove 3\n")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 1
        assert f"{path}:3:1: error: expected 2 arguments" in result.output

    def test_truncated_script(self, runner, tmp_path):
        """A missing final newline fails the check."""
        path = tmp_path / "bad.tas"
        path.write_text("@test\nwait")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 1
        assert "expected newline at end of file" in result.output

    def test_missing_script(self, runner, tmp_path):
        """A missing file is a resource error."""
        result = runner.invoke(cli, ["check", str(tmp_path / "nope.tas")])
        assert result.exit_code == 1
        assert "could not read file" in result.output

    def test_strict_lines(self, runner, tmp_path):
        """Over-long lines only fail with --strict-lines."""
        path = tmp_path / "long.tas"
        path.write_text("@test\nwait" + " " * 300 + "\n")
        assert runner.invoke(cli, ["check", str(path)]).exit_code == 0
        result = runner.invoke(cli, ["--strict-lines", "check", str(path)])
        assert result.exit_code == 1
        assert "line length too long" in result.output

    def test_config_file(self, runner, tmp_path):
        """Line-length limits come from the session YAML."""
        path = tmp_path / "long.tas"
        path.write_text("@test\nwait          \n")
        config = tmp_path / "session.yaml"
        config.write_text("max_line_length: 8\nstrict_line_length: true\n")
        result = runner.invoke(cli, ["--config", str(config), "check", str(path)])
        assert result.exit_code == 1
        assert f"{path}:2:9: error: line length too long" in result.output


class TestInfo:
    """Tests for tasctl info."""

    def test_text(self, runner, script):
        """Test the text summary."""
        result = runner.invoke(cli, ["info", str(script)])
        assert result.exit_code == 0
        assert "Seed: 0badf00d" in result.output
        assert "Decisions: 3" in result.output
        assert "  - move: 2" in result.output
        assert "  - roll: 1" in result.output

    def test_json(self, runner, script):
        """Test the JSON summary."""
        result = runner.invoke(cli, ["info", str(script), "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["seed"] == "0badf00d"
        assert data["test_mode"] is False
        assert data["decision_counts"] == {"!wish": 1, "move": 2}
        assert data["rng_draws"] == 1

    def test_test_header(self, runner, tmp_path):
        """A test-mode script shows its @test header."""
        path = tmp_path / "t.tas"
        path.write_text("@test\n")
        result = runner.invoke(cli, ["info", str(path)])
        assert "Header: @test" in result.output


class TestFmt:
    """Tests for tasctl fmt."""

    CANONICAL = (
        "@seed 0badf00d\n"
        "move 1 0\n"
        "@rng 4 roll\n"
        "!wish potion healing\n"
        "move -1 0\n"
    )

    def test_stdout(self, runner, script):
        """Canonical text goes to stdout by default."""
        result = runner.invoke(cli, ["fmt", str(script)])
        assert result.exit_code == 0
        assert result.output == self.CANONICAL

    def test_in_place_then_check(self, runner, script):
        """Rewriting in place makes --check pass."""
        assert runner.invoke(cli, ["fmt", str(script), "--check"]).exit_code == 1
        assert runner.invoke(cli, ["fmt", str(script), "--in-place"]).exit_code == 0
        assert script.read_text() == self.CANONICAL
        assert runner.invoke(cli, ["fmt", str(script), "--check"]).exit_code == 0

    def test_out_file(self, runner, script, tmp_path):
        """--out leaves the source script untouched."""
        out = tmp_path / "clean.tas"
        result = runner.invoke(cli, ["fmt", str(script), "--out", str(out)])
        assert result.exit_code == 0
        assert out.read_text() == self.CANONICAL
        assert script.read_text() == SCRIPT

    def test_out_and_in_place_conflict(self, runner, script, tmp_path):
        """--out and --in-place are mutually exclusive."""
        result = runner.invoke(cli, ["fmt", str(script), "-i", "-o", str(tmp_path / "x.tas")])
        assert result.exit_code == 2


class TestNew:
    """Tests for tasctl new."""

    def test_seed(self, runner, tmp_path):
        """Test creating a script with an explicit seed."""
        path = tmp_path / "run.tas"
        result = runner.invoke(cli, ["new", str(path), "--seed", "0000beef"])
        assert result.exit_code == 0
        assert path.read_text() == "@seed 0000beef\n"

    def test_test_header(self, runner, tmp_path):
        """Test creating a test-mode script."""
        path = tmp_path / "run.tas"
        assert runner.invoke(cli, ["new", str(path), "--test"]).exit_code == 0
        assert path.read_text() == "@test\n"

    def test_random_seed_is_valid(self, runner, tmp_path):
        """A randomly seeded script passes check."""
        path = tmp_path / "run.tas"
        assert runner.invoke(cli, ["new", str(path)]).exit_code == 0
        assert runner.invoke(cli, ["check", str(path)]).exit_code == 0

    def test_bad_seed(self, runner, tmp_path):
        """Seeds must be 8 lowercase hex digits."""
        result = runner.invoke(cli, ["new", str(tmp_path / "run.tas"), "--seed", "BEEF"])
        assert result.exit_code == 2

    def test_refuses_to_overwrite(self, runner, script):
        """Existing scripts are only replaced with --force."""
        result = runner.invoke(cli, ["new", str(script), "--test"])
        assert result.exit_code == 1
        assert script.read_text() == SCRIPT
        assert runner.invoke(cli, ["new", str(script), "--test", "--force"]).exit_code == 0
        assert script.read_text() == "@test\n"


def test_version(runner):
    """Test --version names the tool."""
    result = runner.invoke(cli, ["--version"])
    assert result.exit_code == 0
    assert "tasctl" in result.output
