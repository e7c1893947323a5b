"""
Lint result model aggregating the reports of a whole run.
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from postlint.models.findings import Finding, PostReport


class LintResult(BaseModel):
    """Represents the overall result of a lint run."""

    reports: dict[str, PostReport] = Field(default_factory=dict)
    global_findings: list[Finding] = Field(default_factory=list)
    summary: dict[str, Any] = Field(default_factory=dict)

    def __init__(self, **data: Any) -> None:
        super().__init__(**data)

        self.summary.setdefault("status", "success")
        self.summary.setdefault("start_time", datetime.now().isoformat())

    def __getitem__(self, key: str) -> Any:
        """Support dictionary-style access to summary values."""
        if key not in self.summary:
            raise KeyError(key)
        return self.summary[key]

    def __contains__(self, key: str) -> bool:
        return key in self.summary

    def add_report(self, report: PostReport) -> None:
        self.reports[report.path] = report

    def all_findings(self) -> list[Finding]:
        """Return every finding, per-post ones first, in path order."""
        findings: list[Finding] = []
        for path in sorted(self.reports):
            findings.extend(self.reports[path].findings)
        findings.extend(self.global_findings)
        return findings

    @property
    def error_count(self) -> int:
        return sum(1 for f in self.all_findings() if f.severity == "error")

    @property
    def warning_count(self) -> int:
        return sum(1 for f in self.all_findings() if f.severity == "warning")

    def finalize(self, strict: bool = False) -> None:
        """Fill in the summary counters and the overall status.

        Args:
            strict: Treat warnings as failures

        """
        errors = self.error_count
        warnings = self.warning_count
        failed = errors > 0 or (strict and warnings > 0)
        self.summary.update(
            {
                "files": len(self.reports),
                "errors": errors,
                "warnings": warnings,
                "strict": strict,
                "status": "failed" if failed else "success",
                "end_time": datetime.now().isoformat(),
            },
        )

    @property
    def succeeded(self) -> bool:
        return self.summary.get("status") == "success"
