#!/usr/bin/env python3
"""Tests for the configuration loader."""

from pathlib import Path
from types import SimpleNamespace

import pytest

from postlint import config
from postlint.config_loader import ConfigLoader, is_test_environment
from postlint.models.errors import ConfigurationError

pytestmark = pytest.mark.unit


@pytest.fixture
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run the test from an empty directory so no repo config or .env is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def config_file(workdir: Path) -> Path:
    path = workdir / "postlint.yaml"
    path.write_text(
        "posts_dir: site/_posts\n"
        "extensions: [md]\n"
        "strict: true\n"
        "log_level: debug\n"
        "rules:\n"
        "  disabled: [layout-missing]\n"
        "  severity:\n"
        "    link-empty: warning\n",
        encoding="utf-8",
    )
    return path


def test_defaults_without_config_file(workdir: Path):
    settings = ConfigLoader().get_settings()

    assert settings.posts_dir == Path("_posts")
    assert settings.extensions == [".md", ".markdown"]
    assert settings.strict is False
    assert settings.log_level == "INFO"
    assert settings.rules.disabled == []


def test_default_config_path_is_used(workdir: Path):
    (workdir / "config").mkdir()
    (workdir / "config" / "postlint.yaml").write_text("posts_dir: docs\n", encoding="utf-8")

    assert ConfigLoader().get_settings().posts_dir == Path("docs")


def test_yaml_values(config_file: Path):
    loader = ConfigLoader(config_file)
    settings = loader.get_settings()

    assert settings.posts_dir == Path("site/_posts")
    assert settings.extensions == [".md"]
    assert settings.strict is True
    assert settings.log_level == "DEBUG"
    assert settings.rules.disabled == ["layout-missing"]
    assert settings.rules.severity == {"link-empty": "warning"}
    assert loader.get_value("posts_dir") == "site/_posts"


def test_environment_overrides(config_file: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POSTLINT_POSTS_DIR", "other")
    monkeypatch.setenv("POSTLINT_STRICT", "no")
    monkeypatch.setenv("POSTLINT_LOG_LEVEL", "warning")
    monkeypatch.setenv("POSTLINT_EXTENSIONS", "md, markdown ,txt")
    monkeypatch.setenv("POSTLINT_DISABLE", "date-invalid,layout-missing")

    settings = ConfigLoader(config_file).get_settings()

    assert settings.posts_dir == Path("other")
    assert settings.strict is False
    assert settings.log_level == "WARNING"
    assert settings.extensions == [".md", ".markdown", ".txt"]
    assert settings.rules.disabled == ["layout-missing", "date-invalid"]


def test_invalid_log_level_env_is_ignored(workdir: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("POSTLINT_LOG_LEVEL", "chatty")
    assert ConfigLoader().get_settings().log_level == "INFO"


def test_dotenv_file_is_loaded(workdir: Path, monkeypatch: pytest.MonkeyPatch):
    (workdir / ".env").write_text("POSTLINT_POSTS_DIR=from-dotenv\n", encoding="utf-8")
    # load_dotenv writes into os.environ; register the key so monkeypatch restores it
    monkeypatch.setenv("POSTLINT_POSTS_DIR", "")
    monkeypatch.delenv("POSTLINT_POSTS_DIR")

    assert ConfigLoader().get_settings().posts_dir == Path("from-dotenv")


def test_missing_explicit_config_file(workdir: Path):
    with pytest.raises(ConfigurationError, match="Config file not found"):
        ConfigLoader(workdir / "nope.yaml")


def test_invalid_yaml_config(workdir: Path):
    path = workdir / "bad.yaml"
    path.write_text("posts_dir: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="Invalid YAML"):
        ConfigLoader(path)


def test_non_mapping_config(workdir: Path):
    path = workdir / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="mapping"):
        ConfigLoader(path)


@pytest.mark.parametrize("text", ["rules:\n  - layout-missing\n", "rules: layout-missing\n"])
def test_non_mapping_rules_section(workdir: Path, monkeypatch: pytest.MonkeyPatch, text: str):
    path = workdir / "rules.yaml"
    path.write_text(text, encoding="utf-8")
    monkeypatch.setenv("POSTLINT_DISABLE", "date-invalid")

    with pytest.raises(ConfigurationError, match="'rules'"):
        ConfigLoader(path)


def test_invalid_values(workdir: Path):
    path = workdir / "values.yaml"
    path.write_text("log_level: LOUD\nrules:\n  severity:\n    link-empty: fatal\n", encoding="utf-8")

    with pytest.raises(ConfigurationError) as excinfo:
        ConfigLoader(path)

    assert "log_level" in excinfo.value.message
    assert "link-empty" in excinfo.value.message


def test_empty_extensions_rejected(workdir: Path):
    path = workdir / "ext.yaml"
    path.write_text("extensions: []\n", encoding="utf-8")

    with pytest.raises(ConfigurationError, match="extension"):
        ConfigLoader(path)


def test_is_test_environment():
    # pytest sets PYTEST_CURRENT_TEST while running a test
    assert is_test_environment()


class TestConfigModule:
    """Test the lazily initialised module-level settings."""

    def test_get_settings_is_cached(self, workdir: Path):
        assert config.get_settings() is config.get_settings()

    def test_reset_settings(self, workdir: Path):
        first = config.get_settings()
        config.reset_settings()
        assert config.get_settings() is not first

    def test_load_settings_replaces_active_settings(self, config_file: Path):
        settings = config.load_settings(config_file)
        assert config.get_settings() is settings

    def test_update_from_cli_args(self, workdir: Path):
        args = SimpleNamespace(
            strict=True,
            log_level="debug",
            log_file="logs/run.log",
            disable=["layout-missing", "layout-missing"],
        )

        settings = config.update_from_cli_args(args)

        assert settings.strict is True
        assert settings.log_level == "DEBUG"
        assert settings.log_file == Path("logs/run.log")
        assert settings.rules.disabled == ["layout-missing"]

    def test_update_from_cli_args_ignores_unset(self, workdir: Path):
        settings = config.update_from_cli_args(SimpleNamespace(strict=False, disable=None))

        assert settings.strict is False
        assert settings.rules.disabled == []
