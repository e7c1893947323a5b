"""Configuration module for the post linter.
Provides a centralized, lazily initialised configuration interface using ConfigLoader.
"""

import logging
import threading
from pathlib import Path
from typing import Any

from postlint.config_loader import ConfigLoader
from postlint.models.settings import LintSettings

logger = logging.getLogger(__name__)

_loader: ConfigLoader | None = None
_loader_lock = threading.Lock()


def load_settings(config_file_path: Path | None = None) -> LintSettings:
    """Load settings from ``config_file_path`` and make them the active settings.

    Raises:
        ConfigurationError: If the configuration is missing or invalid

    """
    global _loader
    with _loader_lock:
        _loader = ConfigLoader(config_file_path)
        logger.debug("Loaded settings: %s", _loader.settings.model_dump())
        return _loader.settings


def get_settings() -> LintSettings:
    """Get the active settings, loading the default configuration on first use.

    Thread-safe; uses double-checked locking so concurrent first calls load once.
    """
    global _loader
    if _loader is None:
        with _loader_lock:
            if _loader is None:
                _loader = ConfigLoader()
    return _loader.settings


def reset_settings() -> None:
    """Forget the active settings so the next access reloads them.

    Note: This function is primarily intended for test usage.
    """
    global _loader
    with _loader_lock:
        _loader = None


def update_from_cli_args(args: Any) -> LintSettings:
    """Update the active settings from CLI arguments.

    Args:
        args: An object containing CLI arguments (typically from argparse)

    Returns:
        The updated settings

    """
    settings = get_settings()

    if getattr(args, "strict", False):
        settings.strict = True
        logger.debug("Setting strict=True from CLI arguments")

    if getattr(args, "log_level", None):
        settings.log_level = args.log_level.upper()
        logger.debug("Setting log_level=%s from CLI arguments", settings.log_level)

    if getattr(args, "log_file", None):
        settings.log_file = Path(args.log_file)

    for rule_id in getattr(args, "disable", None) or []:
        if rule_id not in settings.rules.disabled:
            settings.rules.disabled.append(rule_id)
            logger.debug("Disabling rule %s from CLI arguments", rule_id)

    return settings
