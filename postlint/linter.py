"""Post linter: discovers post files, runs the rules and collects results."""

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

from postlint.display import ProgressTracker
from postlint.front_matter import parse_front_matter, split_front_matter
from postlint.models.errors import FrontMatterError, PostLintError
from postlint.models.findings import Finding, PostReport
from postlint.models.lint_result import LintResult
from postlint.models.settings import LintSettings
from postlint.rules import Post, Rule, select_rules
from postlint.type_definitions import Severity

logger = logging.getLogger(__name__)


def build_post(text: str, path: str) -> Post:
    """Split and parse a post; front matter problems are kept on the Post."""
    post = Post(path=path, text=text)
    try:
        front_matter_text, body, body_offset = split_front_matter(text)
    except FrontMatterError as e:
        post.front_matter_error = e
        return post

    post.front_matter_text = front_matter_text
    post.body = body
    post.body_offset = body_offset

    if front_matter_text is not None:
        try:
            post.front_matter = parse_front_matter(front_matter_text)
        except FrontMatterError as e:
            post.front_matter_error = e

    return post


class PostLinter:
    """Lints Jekyll-style posts according to the configured rules."""

    def __init__(
        self,
        settings: LintSettings | None = None,
        disabled: Iterable[str] = (),
        show_progress: bool = False,
    ) -> None:
        """Initialize the linter.

        Args:
            settings: Lint settings; defaults apply when omitted
            disabled: Extra rule ids to disable on top of the settings
            show_progress: Show a progress bar while linting

        Raises:
            ConfigurationError: If a configured rule id is unknown

        """
        self.settings = settings or LintSettings()
        self.show_progress = show_progress
        active = select_rules(self.settings.rules, disabled)
        self.post_rules: list[tuple[Rule, Severity]] = [
            (r, severity) for r, severity in active if r.scope == "post"
        ]
        self.corpus_rules: list[tuple[Rule, Severity]] = [
            (r, severity) for r, severity in active if r.scope == "corpus"
        ]

    def is_post_file(self, path: Path) -> bool:
        return path.suffix.lower() in self.settings.extensions

    def discover(self, paths: Sequence[Path] | None = None) -> list[Path]:
        """Expand paths into the post files to lint.

        Directories are walked recursively, skipping entries whose name starts
        with ``.`` or ``_`` below the given directory. Files given explicitly
        are always included.

        Raises:
            PostLintError: If a given path does not exist

        """
        roots = list(paths) if paths else [self.settings.posts_dir]
        found: set[Path] = set()

        for root in roots:
            if root.is_file():
                found.add(root)
                continue
            if not root.is_dir():
                msg = f"Path not found: {root}"
                raise PostLintError(msg)

            for candidate in root.rglob("*"):
                relative = candidate.relative_to(root)
                if any(part.startswith((".", "_")) for part in relative.parts):
                    continue
                if candidate.is_file() and self.is_post_file(candidate):
                    found.add(candidate)

        files = sorted(found)
        logger.debug("Discovered %d post file(s)", len(files))
        return files

    def lint_text(self, text: str, path: str) -> PostReport:
        """Lint the text of one post."""
        return self._lint_post(build_post(text, path))

    def lint_file(self, path: Path) -> PostReport:
        """Lint one post file.

        Raises:
            PostLintError: If the file cannot be read

        """
        try:
            raw = path.read_bytes()
        except OSError as e:
            msg = f"Cannot read {path}: {e}"
            raise PostLintError(msg) from e

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            post = Post(path=str(path), text="", decode_error=f"byte {e.start}: {e.reason}")
            return self._lint_post(post, only=("encoding-invalid",))

        return self.lint_text(text, str(path))

    def _lint_post(self, post: Post, only: tuple[str, ...] | None = None) -> PostReport:
        report = PostReport(path=post.path)
        if post.front_matter is not None:
            report.title = post.front_matter.title
            report.date = post.front_matter.date
            report.layout = post.front_matter.layout
            report.categories = list(post.front_matter.categories)

        for registered, severity in self.post_rules:
            if only is not None and registered.id not in only:
                continue
            for line, message in registered.check(post):
                report.add_finding(
                    Finding(
                        rule=registered.id,
                        severity=severity,
                        message=message,
                        path=post.path,
                        line=line,
                    ),
                )

        if report.findings:
            logger.debug("%s: %d finding(s)", post.path, len(report.findings))
        return report

    def lint_reports(self, reports: Iterable[PostReport]) -> LintResult:
        """Run the corpus rules over finished post reports and build the result."""
        result = LintResult()
        for report in reports:
            result.add_report(report)

        for registered, severity in self.corpus_rules:
            for finding in registered.check(list(result.reports.values())):
                result.global_findings.append(finding.model_copy(update={"severity": severity}))

        result.finalize(strict=self.settings.strict)
        return result

    def lint_paths(self, paths: Sequence[Path] | None = None) -> LintResult:
        """Lint every post under ``paths`` (or the configured posts directory).

        Raises:
            PostLintError: If a path is missing or a file cannot be read

        """
        files = self.discover(paths)
        if not files:
            logger.warning("No post files found")

        reports: list[PostReport] = []
        with ProgressTracker[Path]("Linting posts", len(files), enabled=self.show_progress) as tracker:
            for path in tracker.track(files):
                reports.append(self.lint_file(path))

        result = self.lint_reports(reports)
        logger.info(
            "Linted %d file(s): %d error(s), %d warning(s)",
            result["files"],
            result["errors"],
            result["warnings"],
        )
        return result
