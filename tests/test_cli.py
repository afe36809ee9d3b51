"""
tests/test_cli.py
Tests for extmodelgen.cli (argument handling and exit codes).
"""

from __future__ import annotations

import pathlib
from typing import Any, Dict, List

import pytest
import yaml

from extmodelgen.cli import (
    EXIT_EXPORT_ERROR,
    EXIT_GENERATION_ERROR,
    EXIT_INPUT_ERROR,
    EXIT_SUCCESS,
    _build_config_overrides,
    _build_parser,
    cli_main,
)


def _run(argv: List[str]) -> int:
    with pytest.raises(SystemExit) as exc_info:
        cli_main(argv)
    return exc_info.value.code


class TestArguments:
    """Parser and override handling."""

    def test_overrides_only_for_given_options(self) -> None:
        args = _build_parser().parse_args(
            ["-i", "models.yaml", "--debug", "--output-format", "extjs4"]
        )
        assert _build_config_overrides(args) == {"output_format": "extjs4", "debug": True}

    def test_no_overrides(self) -> None:
        args = _build_parser().parse_args(["-i", "models.yaml"])
        assert _build_config_overrides(args) == {}

    def test_input_is_required(self) -> None:
        with pytest.raises(SystemExit):
            _build_parser().parse_args([])

    def test_version(self, capsys: pytest.CaptureFixture[str]) -> None:
        assert _run(["--version"]) == 0
        assert "ExtModelGen v" in capsys.readouterr().out


class TestExitCodes:
    """End-to-end runs of cli_main()."""

    def test_success(
        self,
        models_yaml_path: pathlib.Path,
        output_dir: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run(["-i", str(models_yaml_path), "-o", str(output_dir)])
        assert code == EXIT_SUCCESS
        assert (output_dir / "model" / "Author.js").is_file()
        assert "Generation Report" in capsys.readouterr().out

    def test_quiet_prints_nothing(
        self,
        models_yaml_path: pathlib.Path,
        output_dir: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        assert _run(["-i", str(models_yaml_path), "-o", str(output_dir), "-q"]) == EXIT_SUCCESS
        assert capsys.readouterr().out == ""

    def test_missing_input(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-i", str(tmp_path / "missing.yaml"), "-q"]) == EXIT_INPUT_ERROR

    def test_directory_input(self, tmp_path: pathlib.Path) -> None:
        assert _run(["-i", str(tmp_path), "-q"]) == EXIT_INPUT_ERROR

    def test_unparseable_input(self, tmp_path: pathlib.Path) -> None:
        path = tmp_path / "models.yaml"
        path.write_text("classes: {}\n", encoding="utf-8")
        assert _run(["-i", str(path), "-q"]) == EXIT_INPUT_ERROR

    def test_generation_error(
        self,
        models_dict: Dict[str, Any],
        tmp_path: pathlib.Path,
        output_dir: pathlib.Path,
    ) -> None:
        models_dict["classes"][0]["type_validations"] = [{"type": "presence"}]
        path = tmp_path / "models.yaml"
        path.write_text(yaml.dump(models_dict), encoding="utf-8")
        assert _run(["-i", str(path), "-o", str(output_dir), "-q"]) == EXIT_GENERATION_ERROR

    def test_export_error(
        self, models_yaml_path: pathlib.Path, tmp_path: pathlib.Path
    ) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        assert _run(["-i", str(models_yaml_path), "-o", str(blocker), "-q"]) == EXIT_EXPORT_ERROR

    def test_dry_run_prints_code(
        self,
        models_yaml_path: pathlib.Path,
        output_dir: pathlib.Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        code = _run([
            "-i", str(models_yaml_path),
            "-o", str(output_dir),
            "--dry-run",
            "--output-format", "touch2",
        ])
        assert code == EXIT_SUCCESS
        captured = capsys.readouterr()
        assert 'Ext.define("Library.model.Author",' in captured.out
        assert "config:{" in captured.out
        assert "Generation Report" in captured.err
        assert list(output_dir.iterdir()) == []
