"""Configuration loading for the post linter.

Handles loading and accessing configuration settings.
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from postlint.models.errors import ConfigurationError
from postlint.models.settings import LintSettings
from postlint.type_definitions import LOG_LEVELS, ConfigValue, RawConfig

config_logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/postlint.yaml")
ENV_PREFIX = "POSTLINT_"


def is_test_environment() -> bool:
    """Detect if code is running in a test environment.

    Returns:
        bool: True if pytest is running or POSTLINT_TEST_MODE is set

    """
    if "PYTEST_CURRENT_TEST" in os.environ:
        return True

    return os.environ.get("POSTLINT_TEST_MODE", "").lower() in ("true", "1", "yes")


def _split_list(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class ConfigLoader:
    """Loads lint settings from a YAML file and environment variables."""

    def __init__(self, config_file_path: Path | None = None) -> None:
        """Initialize the configuration loader.

        Args:
            config_file_path: Path to the YAML configuration file. When omitted,
                ``config/postlint.yaml`` is used if it exists.

        Raises:
            ConfigurationError: If an explicitly given file is missing or any
                value fails validation

        """
        self._load_environment_configuration()

        self.config: RawConfig = self._load_yaml_config(config_file_path)
        if not self.config.get("rules"):
            self.config["rules"] = {}

        self._apply_environment_overrides()

        self.settings = self._validate(self.config)

    def _load_environment_configuration(self) -> None:
        """Load environment variables from .env files based on execution context.

        The loading order respects precedence:
        - .env (base config for all environments)
        - .env.local (local overrides, if present)
        - .env.test (test-specific config, if in test environment)

        Later files override values from earlier files.
        """
        load_dotenv(".env")

        if Path(".env.local").exists():
            load_dotenv(".env.local", override=True)
            config_logger.debug("Loaded local overrides from .env.local")

        if is_test_environment() and Path(".env.test").exists():
            load_dotenv(".env.test", override=True)
            config_logger.debug("Loaded test environment from .env.test")

    def _load_yaml_config(self, config_file_path: Path | None) -> RawConfig:
        """Load configuration from a YAML file.

        A missing default file is not an error; a missing explicit file is.
        """
        if config_file_path is None:
            if not DEFAULT_CONFIG_PATH.exists():
                config_logger.debug("No config file at %s, using defaults", DEFAULT_CONFIG_PATH)
                return {}
            config_file_path = DEFAULT_CONFIG_PATH

        try:
            with config_file_path.open("r", encoding="utf-8") as config_file:
                config = yaml.safe_load(config_file)
        except FileNotFoundError as e:
            msg = f"Config file not found: {config_file_path}"
            raise ConfigurationError(msg) from e
        except yaml.YAMLError as e:
            msg = f"Invalid YAML in config file {config_file_path}: {e}"
            raise ConfigurationError(msg) from e

        if config is None:
            return {}
        if not isinstance(config, dict):
            msg = f"Config file {config_file_path} must contain a mapping"
            raise ConfigurationError(msg)
        if config.get("rules") and not isinstance(config["rules"], dict):
            msg = f"'rules' in config file {config_file_path} must be a mapping"
            raise ConfigurationError(msg)

        config_logger.debug("Loaded configuration from %s", config_file_path)
        return config  # type: ignore[return-value]

    def _apply_environment_overrides(self) -> None:
        """Override configuration settings with POSTLINT_* environment variables."""
        for env_var, env_value in os.environ.items():
            if not env_var.startswith(ENV_PREFIX):
                continue

            match env_var.split("_"):
                case ["POSTLINT", "LOG", "LEVEL"]:
                    log_level = env_value.upper()
                    if log_level in LOG_LEVELS:
                        self.config["log_level"] = log_level  # type: ignore[typeddict-item]
                        config_logger.debug("Applied log level: %s", log_level)
                    else:
                        config_logger.warning("Ignoring invalid POSTLINT_LOG_LEVEL: %s", env_value)

                case ["POSTLINT", "LOG", "FILE"]:
                    self.config["log_file"] = env_value or None

                case ["POSTLINT", "POSTS", "DIR"]:
                    self.config["posts_dir"] = env_value
                    config_logger.debug("Applied posts directory: %s", env_value)

                case ["POSTLINT", "STRICT"]:
                    self.config["strict"] = bool(self._convert_value(env_value))
                    config_logger.debug("Applied strict mode: %s", self.config["strict"])

                case ["POSTLINT", "EXTENSIONS"]:
                    self.config["extensions"] = _split_list(env_value)
                    config_logger.debug("Applied extensions: %s", env_value)

                case ["POSTLINT", "DISABLE"]:
                    disabled = list(self.config["rules"].get("disabled", []))
                    disabled.extend(r for r in _split_list(env_value) if r not in disabled)
                    self.config["rules"]["disabled"] = disabled
                    config_logger.debug("Applied disabled rules: %s", env_value)

    def _convert_value(self, value: str) -> ConfigValue:
        """Convert string value to appropriate type."""
        if value.isdigit():
            return int(value)

        match value.lower():
            case "true" | "yes" | "y" | "1":
                return True
            case "false" | "no" | "n" | "0" | "":
                return False
            case _:
                return value

    def _validate(self, config: RawConfig) -> LintSettings:
        try:
            return LintSettings.model_validate(config)
        except ValidationError as e:
            problems = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            )
            msg = f"Invalid configuration: {problems}"
            raise ConfigurationError(msg) from e

    def get_config(self) -> RawConfig:
        """Get the merged, unvalidated configuration dictionary."""
        return self.config

    def get_settings(self) -> LintSettings:
        """Get the validated settings."""
        return self.settings

    def get_value(self, key: str, default: Any = None) -> Any:
        """Get a specific top-level configuration value."""
        return self.config.get(key, default)
