#!/usr/bin/env python3
"""Lint the sample posts shipped with the project."""

from pathlib import Path

import pytest

from postlint.linter import PostLinter
from postlint.main import EXIT_OK, main

pytestmark = pytest.mark.functional


@pytest.fixture
def sample_posts(project_root: Path) -> Path:
    return project_root / "examples" / "_posts"


def test_sample_posts_are_clean(sample_posts: Path):
    result = PostLinter().lint_paths([sample_posts])

    assert result["files"] == 2
    assert result.all_findings() == []
    assert result.succeeded


def test_sample_posts_metadata(sample_posts: Path):
    result = PostLinter().lint_paths([sample_posts])
    titles = sorted(report.title for report in result.reports.values())

    assert titles == ["A Release Management Checklist", "Database Migrations Without the Drama"]
    for report in result.reports.values():
        assert report.layout == "post"
        assert report.date is not None
        assert report.categories


def test_bundled_config_lints_sample_posts(project_root: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.chdir(project_root)
    assert main(["check", "--strict"]) == EXIT_OK
