"""Tests for the CLI commands against small on-disk workspaces."""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from helium_dsl.cli.app import app

runner = CliRunner()

pytestmark = pytest.mark.usefixtures("isolated_artifacts")


class TestLint:
    def test_clean_file(self, write_file: Callable[[str, str], Path]) -> None:
        path = write_file("src/clean.mez", "int total = 0;\n")
        result = runner.invoke(app, ["lint", str(path)])
        assert result.exit_code == 0
        assert "Parser not generated yet" in result.output
        assert "1 diagnostic(s) in 1 file(s)" in result.output

    def test_error_severity_fails(self, write_file: Callable[[str, str], Path]) -> None:
        path = write_file("src/else.mez", "if (a == 1) {\n} else {\n    int b = 2;\n}\n")
        result = runner.invoke(app, ["lint", str(path)])
        assert result.exit_code == 1
        assert "else.mez:3:5" in result.output
        assert "no-var-in-else" in result.output

    def test_warnings_do_not_fail(self, write_file: Callable[[str, str], Path]) -> None:
        path = write_file("src/ops.mez", "total += 1;\n")
        result = runner.invoke(app, ["lint", str(path)])
        assert result.exit_code == 0
        assert "Compound assignment is not allowed" in result.output

    def test_directory_is_expanded(self, write_file: Callable[[str, str], Path], tmp_path: Path) -> None:
        write_file("src/a.mez", "int a = 0;\n")
        write_file("src/nested/b.mez", "int b = 0;\n")
        write_file("src/skip.txt", "total += 1;\n")
        result = runner.invoke(app, ["lint", str(tmp_path / "src")])
        assert result.exit_code == 0
        assert "in 2 file(s)" in result.output

    def test_undecodable_file_is_reported_and_others_still_checked(
        self, write_file: Callable[[str, str], Path], tmp_path: Path
    ) -> None:
        write_file("src/a_ops.mez", "total += 1;\n")
        (tmp_path / "src" / "b_broken.mez").write_bytes(b"\xff\xfe{")
        result = runner.invoke(app, ["lint", str(tmp_path / "src")])
        assert result.exit_code == 1
        assert "Cannot read" in result.output
        assert "b_broken.mez" in result.output
        assert "Compound assignment is not allowed" in result.output

    def test_missing_path(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["lint", str(tmp_path / "absent.mez")])
        assert result.exit_code == 1
        assert "Path not found" in result.output

    def test_rules_option(self, write_file: Callable[[str, str], Path], tmp_path: Path) -> None:
        rules = tmp_path / "only-ops.json"
        rules.write_text(json.dumps({"rules": {"forbidden-operators": {"severity": "error"}}}), encoding="utf-8")
        path = write_file("src/ops.mez", "total += 1;\n")
        result = runner.invoke(app, ["lint", str(path), "--rules", str(rules)])
        assert result.exit_code == 1


class TestRules:
    def test_lists_builtin_rules(self) -> None:
        result = runner.invoke(app, ["rules"])
        assert result.exit_code == 0
        for rule_id in ("no-var-in-else", "dot-notation-limit", "naming-conventions", "forbidden-operators"):
            assert rule_id in result.output
        assert "built-in defaults" in result.output


class TestIndex:
    def test_lists_objects(self, model_workspace: Path) -> None:
        result = runner.invoke(app, ["index", str(model_workspace)])
        assert result.exit_code == 0
        assert "Scanned 4 model file(s)" in result.output
        assert "Customer" in result.output
        assert "(3 objects)" in result.output


class TestDefinition:
    def test_prints_location(self, model_workspace: Path, write_file: Callable[[str, str], Path]) -> None:
        doc = write_file("app/units/use.mez", "unit Use;\nOrder current = load();\n")
        result = runner.invoke(app, ["definition", str(doc), "2", "3", "--root", str(model_workspace)])
        assert result.exit_code == 0
        assert "order.mez:1:19" in result.output

    def test_unknown_type(self, model_workspace: Path, write_file: Callable[[str, str], Path]) -> None:
        doc = write_file("app/units/use.mez", "Missing m;\n")
        result = runner.invoke(app, ["definition", str(doc), "1", "3", "--root", str(model_workspace)])
        assert result.exit_code == 1
        assert "No definition found" in result.output

    def test_missing_file(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["definition", str(tmp_path / "absent.mez"), "1", "1"])
        assert result.exit_code == 1


class TestComplete:
    def test_prefix_filter(self, write_file: Callable[[str, str], Path]) -> None:
        path = write_file("src/doc.mez", "int total = 0;\nint tally = 1;\n")
        result = runner.invoke(app, ["complete", str(path), "--prefix", "ta"])
        assert result.exit_code == 0
        assert "tally" in result.output
        assert "(1 items)" in result.output

    def test_builtins_from_metadata(self, write_file: Callable[[str, str], Path], isolated_artifacts: Path) -> None:
        (isolated_artifacts / "bif-metadata.json").write_text(
            json.dumps({"namespaces": {"Math": [{"name": "abs"}]}}), encoding="utf-8"
        )
        path = write_file("src/doc.mez", "")
        result = runner.invoke(app, ["complete", str(path), "--prefix", "Math"])
        assert "Math:abs" in result.output


class TestWatch:
    def test_missing_directory(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["watch", str(tmp_path / "absent")])
        assert result.exit_code == 1

    def test_indexes_then_runs_watcher(self, model_workspace: Path) -> None:
        with patch("helium_dsl.cli.workspace.asyncio.run") as mock_run:
            mock_run.side_effect = lambda coro: coro.close()
            result = runner.invoke(app, ["watch", str(model_workspace)])
        assert result.exit_code == 0
        assert "Scanned 4 model file(s)" in result.output
        mock_run.assert_called_once()


def test_verbose_flag_configures_logging(write_file: Callable[[str, str], Path]) -> None:
    path = write_file("src/a.mez", "int a = 0;\n")
    with patch("helium_dsl.cli.app.logging.basicConfig") as basic_config:
        result = runner.invoke(app, ["--verbose", "lint", str(path)])
    assert result.exit_code == 0
    assert basic_config.call_args.kwargs["level"] == logging.DEBUG
