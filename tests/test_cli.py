"""CLI parser behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from designctx.cli import _build_parser, main


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "extract", "design.json"])
    assert args.verbose is True
    assert args.command == "extract"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["complexity", "design.json", "--verbose"])
    assert args.verbose is True
    assert args.command == "complexity"


def test_cli_extract_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["extract", "design.json", "--no-cache", "--tech-stack", "vue", "--output", "out.json"]
    )
    assert args.no_cache is True
    assert args.tech_stack == "vue"
    assert args.output == "out.json"
    assert args.config == "."


def test_cli_serve_defaults() -> None:
    parser = _build_parser()
    args = parser.parse_args(["serve"])
    assert args.host == "127.0.0.1"
    assert args.port == 8000
    assert args.verbose is False


def test_cli_requires_command() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args([])


def test_cli_extract_writes_context(tmp_path: Path, sample_payload: dict) -> None:
    design = tmp_path / "design.json"
    design.write_text(json.dumps(sample_payload), encoding="utf-8")
    output = tmp_path / "out" / "context.json"

    main(["extract", str(design), "--config", str(tmp_path), "--output", str(output), "--tech-stack", "react"])

    context = json.loads(output.read_text(encoding="utf-8"))
    assert context["file"]["id"] == "file-1"
    assert context["technical"]["framework"] == "react"
    assert context["extraction"]["cached"] is False


def test_cli_complexity_prints_report(
    tmp_path: Path, sample_payload: dict, capsys: pytest.CaptureFixture[str]
) -> None:
    design = tmp_path / "design.json"
    design.write_text(json.dumps(sample_payload), encoding="utf-8")
    (tmp_path / ".designctx.yml").write_text("analysis:\n  tech_stack: vue\n", encoding="utf-8")

    main(["complexity", str(design), "--config", str(tmp_path)])

    report = json.loads(capsys.readouterr().out)
    assert report["architecture"] == "single-file-components"
    assert report["structural_complexity"] == "simple"


def test_cli_reports_unreadable_design(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["complexity", str(tmp_path / "missing.json"), "--config", str(tmp_path)])
    assert excinfo.value.code == 1
