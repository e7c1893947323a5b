"""Type definitions shared across the post linter."""

from typing import Any, Literal, NotRequired, TypedDict

Severity = Literal["error", "warning"]

LogLevel = Literal[
    "DEBUG",
    "INFO",
    "NOTICE",
    "SUCCESS",
    "WARNING",
    "ERROR",
    "CRITICAL",
]

type ConfigValue = str | int | bool | list[Any] | dict[str, Any]

LOG_LEVELS: tuple[str, ...] = (
    "DEBUG",
    "INFO",
    "NOTICE",
    "SUCCESS",
    "WARNING",
    "ERROR",
    "CRITICAL",
)


class RulesConfig(TypedDict, total=False):
    """The ``rules`` section of the configuration file."""

    disabled: list[str]
    severity: dict[str, Severity]


class RawConfig(TypedDict, total=False):
    """Configuration as merged from YAML and environment, before validation."""

    posts_dir: str
    extensions: list[str]
    strict: bool
    log_level: LogLevel
    log_file: NotRequired[str | None]
    rules: RulesConfig
