"""Shared pytest fixtures and configuration for all tests."""

import os
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from _pytest.config import Config

from postlint import config as postlint_config
from tests.utils.post_factory import make_post

PROJECT_ROOT = Path(__file__).parent.parent

type PostWriter = Callable[..., Path]


def pytest_configure(config: Config) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: mark a test as a unit test")
    config.addinivalue_line("markers", "functional: mark a test as a functional test")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """Keep POSTLINT_* variables and cached settings from leaking between tests."""
    for name in list(os.environ):
        if name.startswith("POSTLINT_"):
            monkeypatch.delenv(name, raising=False)
    postlint_config.reset_settings()
    yield
    postlint_config.reset_settings()


@pytest.fixture
def project_root() -> Path:
    """Get the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def posts_dir(tmp_path: Path) -> Path:
    """Create an empty ``_posts`` directory."""
    directory = tmp_path / "_posts"
    directory.mkdir()
    return directory


@pytest.fixture
def write_post(posts_dir: Path) -> PostWriter:
    """Fixture returning a helper that writes a post into ``posts_dir``."""

    def _write(name: str = "2024-01-15-a-post.md", text: str | None = None, **kwargs) -> Path:
        path = posts_dir / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text if text is not None else make_post(**kwargs), encoding="utf-8")
        return path

    return _write
