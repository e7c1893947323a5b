#!/usr/bin/env python3
"""Tests for JSON export and rich rendering of lint results."""

import io
import json
from pathlib import Path

import pytest
from rich.console import Console

from postlint.display import render_posts, render_report, render_rules
from postlint.export import result_to_json, write_report
from postlint.models.errors import PostLintError
from postlint.models.findings import Finding, PostReport
from postlint.models.lint_result import LintResult
from postlint.rules import RULES

pytestmark = pytest.mark.unit


@pytest.fixture
def result() -> LintResult:
    report = PostReport(path="_posts/a.md", title="A [draft]")
    report.add_finding(
        Finding(
            rule="link-undefined-reference",
            message="reference '[x]' used by 'y' is not defined",
            path="_posts/a.md",
            line=9,
        ),
    )
    report.add_finding(
        Finding(rule="layout-missing", severity="warning", message="no layout", path="_posts/a.md", line=1),
    )
    lint_result = LintResult()
    lint_result.add_report(report)
    lint_result.finalize()
    return lint_result


def make_console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=200, color_system=None), buffer


def test_summary_counts(result: LintResult):
    assert result["files"] == 1
    assert result["errors"] == 1
    assert result["warnings"] == 1
    assert result["status"] == "failed"
    assert "end_time" in result


def test_summary_status_strict():
    lint_result = LintResult()
    report = PostReport(path="a.md")
    report.add_finding(Finding(rule="layout-missing", severity="warning", message="m", path="a.md"))
    lint_result.add_report(report)

    lint_result.finalize(strict=False)
    assert lint_result.succeeded

    lint_result.finalize(strict=True)
    assert not lint_result.succeeded


def test_result_to_json(result: LintResult):
    data = json.loads(result_to_json(result))

    assert data["summary"]["errors"] == 1
    assert data["reports"]["_posts/a.md"]["title"] == "A [draft]"
    assert [f["line"] for f in data["findings"]] == [9, 1]


def test_write_report_creates_directories(result: LintResult, tmp_path: Path):
    target = tmp_path / "out" / "nested" / "report.json"

    assert write_report(result, target) == target
    assert json.loads(target.read_text(encoding="utf-8"))["summary"]["files"] == 1


def test_write_report_failure(result: LintResult, tmp_path: Path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")

    with pytest.raises(PostLintError, match="Cannot write report"):
        write_report(result, blocker / "report.json")


def test_render_report_escapes_markup(result: LintResult):
    console, buffer = make_console()
    render_report(result, console)

    out = buffer.getvalue()
    assert "_posts/a.md:9" in out
    assert "'[x]'" in out
    assert "FAILED: 1 file(s), 1 error(s), 1 warning(s)" in out


def test_render_posts_and_rules():
    console, buffer = make_console()
    render_posts([PostReport(path="a.md", title="[Title]", categories=["db", "ops"])], console)
    render_rules(RULES.values(), console)

    out = buffer.getvalue()
    assert "[Title]" in out
    assert "db, ops" in out
    assert "link-empty" in out
