"""Export of lint results to JSON files."""

import json
import logging
from pathlib import Path

from postlint.models.errors import PostLintError
from postlint.models.lint_result import LintResult

logger = logging.getLogger(__name__)


def result_to_json(result: LintResult) -> str:
    """Serialize a lint result, including the computed counters."""
    data = result.model_dump(mode="json")
    data["findings"] = [finding.model_dump(mode="json") for finding in result.all_findings()]
    return json.dumps(data, indent=2, ensure_ascii=False)


def write_report(result: LintResult, path: Path) -> Path:
    """Write a lint result as JSON.

    Args:
        result: The finished lint result
        path: Target file; parent directories are created as needed

    Returns:
        The path written

    Raises:
        PostLintError: If the file cannot be written

    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(result_to_json(result) + "\n", encoding="utf-8")
    except OSError as e:
        msg = f"Cannot write report to {path}: {e}"
        raise PostLintError(msg) from e

    logger.info("Wrote lint report to %s", path)
    return path
