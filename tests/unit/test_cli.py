# tests/unit/test_cli.py
"""Tests for the prickle CLI."""

from __future__ import annotations

import logging
import sys
import textwrap
from pathlib import Path

import pytest
import structlog
from typer.testing import CliRunner

from prickle import __version__
from prickle.cli import app

runner = CliRunner()

TARGETS = textwrap.dedent(
    """
    from prickle import Gen, for_all

    passing = for_all(Gen.int_range(0, 10), lambda x: x >= 0)
    failing = for_all(Gen.int_range(0, 100), lambda x: x < 50)
    small = Gen.int_range(0, 5)
    not_a_property = 42


    def make_passing():
        return passing
    """
)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Undo the logging configuration every CLI invocation applies."""
    yield
    structlog.reset_defaults()
    root = logging.getLogger()
    root.handlers = []
    root.setLevel(logging.WARNING)


@pytest.fixture
def targets(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> str:
    """Write a module of CLI targets and make it importable."""
    (tmp_path / "prickle_cli_targets.py").write_text(TARGETS)
    monkeypatch.syspath_prepend(str(tmp_path))
    monkeypatch.delitem(sys.modules, "prickle_cli_targets", raising=False)
    return "prickle_cli_targets"


class TestCheckCommand:
    """Tests for `prickle check`."""

    def test_passing_property(self, targets: str) -> None:
        result = runner.invoke(app, ["check", f"{targets}:passing", "--seed", "1"])
        assert result.exit_code == 0
        assert "+++ OK, passed 100 tests." in result.output

    def test_failing_property_exits_1(self, targets: str) -> None:
        result = runner.invoke(app, ["check", f"{targets}:failing", "--seed", "1"])
        assert result.exit_code == 1
        assert "*** Failed! Falsifiable" in result.output
        assert "\n50\n" in result.output

    def test_tests_option(self, targets: str) -> None:
        result = runner.invoke(app, ["check", f"{targets}:passing", "--tests", "7"])
        assert result.exit_code == 0
        assert "+++ OK, passed 7 tests." in result.output

    def test_preset_option(self, targets: str) -> None:
        result = runner.invoke(app, ["check", f"{targets}:passing", "--preset", "quick"])
        assert result.exit_code == 0
        assert "passed 10 tests" in result.output

    def test_config_file_option(self, targets: str, tmp_path: Path) -> None:
        config_file = tmp_path / "prickle.yaml"
        config_file.write_text("test_limit: 3\n")
        result = runner.invoke(app, ["check", f"{targets}:passing", "--config", str(config_file)])
        assert result.exit_code == 0
        assert "passed 3 tests" in result.output

    def test_unknown_preset(self, targets: str) -> None:
        result = runner.invoke(app, ["check", f"{targets}:passing", "--preset", "missing"])
        assert result.exit_code == 1

    def test_callable_target(self, targets: str) -> None:
        result = runner.invoke(app, ["check", f"{targets}:make_passing"])
        assert result.exit_code == 0

    def test_wrong_target_type(self, targets: str) -> None:
        result = runner.invoke(app, ["check", f"{targets}:not_a_property"])
        assert result.exit_code == 1

    def test_missing_attribute(self, targets: str) -> None:
        result = runner.invoke(app, ["check", f"{targets}:nope"])
        assert result.exit_code == 1

    def test_malformed_target(self) -> None:
        result = runner.invoke(app, ["check", "no_colon_here"])
        assert result.exit_code == 1

    def test_missing_module(self) -> None:
        result = runner.invoke(app, ["check", "prickle_no_such_module:prop"])
        assert result.exit_code == 1


class TestRecheckCommand:
    """Tests for `prickle recheck`."""

    def test_replays_failure(self, targets: str) -> None:
        from prickle.property import report
        from prickle.seed import Seed

        module = __import__(targets)
        original = report(module.failing, seed=Seed.from_int(1))
        assert original.failure is not None
        token = original.failure.recheck_data.serialize()

        result = runner.invoke(app, ["recheck", f"{targets}:failing", token])
        assert result.exit_code == 1
        assert "*** Failed! Falsifiable" in result.output
        assert "This failure can be reproduced" not in result.output

    def test_bad_token(self, targets: str) -> None:
        result = runner.invoke(app, ["recheck", f"{targets}:failing", "not-a-token"])
        assert result.exit_code == 1


class TestSampleCommand:
    """Tests for `prickle sample`."""

    def test_prints_samples(self, targets: str) -> None:
        result = runner.invoke(app, ["sample", f"{targets}:small", "--count", "3", "--seed", "5"])
        assert result.exit_code == 0
        assert result.output.count("=== Outcome ===") == 3

    def test_rejects_property(self, targets: str) -> None:
        result = runner.invoke(app, ["sample", f"{targets}:passing"])
        assert result.exit_code == 1


class TestInfoCommands:
    """Tests for presets, show-config and --version."""

    def test_presets(self) -> None:
        result = runner.invoke(app, ["presets"])
        assert result.exit_code == 0
        for name in ("default", "quick", "thorough"):
            assert f"- {name}" in result.output

    def test_show_config_json(self) -> None:
        result = runner.invoke(app, ["show-config", "--preset", "thorough", "--format", "json"])
        assert result.exit_code == 0
        assert '"test_limit": 1000' in result.output

    def test_show_config_yaml(self) -> None:
        result = runner.invoke(app, ["show-config"])
        assert result.exit_code == 0
        assert "test_limit: 100" in result.output

    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_unknown_log_level(self) -> None:
        result = runner.invoke(app, ["--log-level", "chatty", "presets"])
        assert result.exit_code == 1
