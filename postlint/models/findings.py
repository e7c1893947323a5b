"""Finding and per-post report models."""

from datetime import datetime

from pydantic import BaseModel, Field

from postlint.type_definitions import Severity


class Finding(BaseModel):
    """A single rule violation."""

    rule: str
    severity: Severity = "error"
    message: str
    path: str
    line: int | None = None

    def location(self) -> str:
        """Return ``path:line`` (or just the path when no line is known)."""
        if self.line is None:
            return self.path
        return f"{self.path}:{self.line}"


class PostReport(BaseModel):
    """Represents the lint outcome of one post file."""

    path: str
    title: str | None = None
    date: datetime | None = None
    layout: str | None = None
    categories: list[str] = Field(default_factory=list)
    findings: list[Finding] = Field(default_factory=list)

    def add_finding(self, finding: Finding) -> None:
        """Append a finding to this report."""
        self.findings.append(finding)

    @property
    def errors(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == "error"]

    @property
    def warnings(self) -> list[Finding]:
        return [f for f in self.findings if f.severity == "warning"]

    @property
    def ok(self) -> bool:
        return not self.errors
