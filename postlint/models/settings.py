"""Validated settings for a lint run.

The configuration loader merges YAML and environment values into a plain
dictionary; this model turns that dictionary into typed, validated settings.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from postlint.type_definitions import LOG_LEVELS, Severity


class RuleSettings(BaseModel):
    """Rule selection and severity overrides."""

    disabled: list[str] = Field(default_factory=list, description="Rule ids to skip")
    severity: dict[str, Severity] = Field(
        default_factory=dict, description="Per-rule severity overrides",
    )


class LintSettings(BaseModel):
    """Settings controlling discovery, rules and output."""

    posts_dir: Path = Field(default=Path("_posts"), description="Default directory to lint")
    extensions: list[str] = Field(
        default_factory=lambda: [".md", ".markdown"],
        description="File suffixes treated as posts",
    )
    strict: bool = Field(default=False, description="Treat warnings as failures")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Path | None = Field(default=None, description="Optional log file")
    rules: RuleSettings = Field(default_factory=RuleSettings)

    @field_validator("extensions")
    @classmethod
    def normalize_extensions(cls, value: list[str]) -> list[str]:
        """Lower-case suffixes and ensure they start with a dot."""
        normalized = []
        for ext in value:
            ext = ext.strip().lower()
            if not ext:
                continue
            if not ext.startswith("."):
                ext = f".{ext}"
            normalized.append(ext)
        if not normalized:
            msg = "At least one post extension must be configured"
            raise ValueError(msg)
        return normalized

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            msg = f"Invalid log level: {value}. Must be one of {', '.join(LOG_LEVELS)}"
            raise ValueError(msg)
        return level
