"""Models package for data structures used in the application."""

from postlint.models.errors import ConfigurationError, FrontMatterError, PostLintError
from postlint.models.findings import Finding, PostReport
from postlint.models.lint_result import LintResult
from postlint.models.settings import LintSettings, RuleSettings

__all__ = [
    "ConfigurationError",
    "Finding",
    "FrontMatterError",
    "LintResult",
    "LintSettings",
    "PostLintError",
    "PostReport",
    "RuleSettings",
]
