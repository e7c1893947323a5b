"""
Centralized display utilities for console output and progress tracking.
Provides the rich logging setup and the tables used to present lint results.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, Generic, Protocol, TypeVar, cast

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.progress import BarColumn, Progress, TextColumn
from rich.table import Table
from rich.theme import Theme

from postlint.models.findings import PostReport
from postlint.models.lint_result import LintResult
from postlint.rules import Rule

T = TypeVar("T")

SUCCESS_LEVEL = 25
NOTICE_LEVEL = 21


# Define Protocol for extended Logger with success and notice methods
class ExtendedLogger(Protocol):
    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def info(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def error(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def success(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def notice(self, msg: str, *args: Any, **kwargs: Any) -> None: ...
    def exception(self, msg: str, *args: Any, **kwargs: Any) -> None: ...


LOGGING_THEME = Theme(
    {
        "logging.level.debug": "dim",
        "logging.level.info": "blue",
        "logging.level.notice": "cyan",
        "logging.level.warning": "bold yellow",
        "logging.level.error": "bold red",
        "logging.level.critical": "bold red on white",
        "logging.level.success": "bold green",
        "finding.error": "bold red",
        "finding.warning": "yellow",
    }
)

# Logs go to stderr so that report output on stdout stays machine readable
console = Console(theme=LOGGING_THEME, stderr=True)
output_console = Console(theme=LOGGING_THEME)


def _success(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(SUCCESS_LEVEL):
        kwargs["extra"] = kwargs.get("extra", {})
        kwargs["extra"]["markup"] = True
        self._log(SUCCESS_LEVEL, f"[green]{message}[/]", args, stacklevel=2, **kwargs)


def _notice(self: logging.Logger, message: str, *args: Any, **kwargs: Any) -> None:
    if self.isEnabledFor(NOTICE_LEVEL):
        self._log(NOTICE_LEVEL, message, args, stacklevel=2, **kwargs)


def _numeric_level(level: str) -> int:
    match level.upper():
        case "NOTICE":
            return NOTICE_LEVEL
        case "SUCCESS":
            return SUCCESS_LEVEL
        case other:
            return getattr(logging, other, logging.INFO)


def configure_logging(
    level: str = "INFO", log_file: str | Path | None = None
) -> ExtendedLogger:
    """
    Configure logging with rich formatting.

    Args:
        level: Logging level (DEBUG, INFO, NOTICE, SUCCESS, WARNING, ERROR, CRITICAL)
        log_file: Optional path to a log file

    Returns:
        Configured logger instance
    """
    logging.addLevelName(SUCCESS_LEVEL, "SUCCESS")
    logging.addLevelName(NOTICE_LEVEL, "NOTICE")
    setattr(logging.Logger, "success", _success)
    setattr(logging.Logger, "notice", _notice)

    numeric_level = _numeric_level(level)

    rich_handler = RichHandler(
        console=console,
        rich_tracebacks=True,
        tracebacks_show_locals=False,
        markup=False,
        show_time=True,
        show_level=True,
        show_path=False,
        log_time_format="[%X]",
    )
    handlers: list[logging.Handler] = [rich_handler]

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
        file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
            )
        )
        file_handler.setLevel(numeric_level)
        handlers.append(file_handler)

    logging.basicConfig(
        level=numeric_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=handlers,
        force=True,
    )

    logger = logging.getLogger("postlint")
    logger.debug("Rich logging configured at %s", level.upper())
    if log_file:
        logger.debug("Log file: %s", log_file)

    return cast(ExtendedLogger, logger)


class ProgressTracker(Generic[T]):
    """
    Progress bar over the posts being linted.

    Disabled trackers pass items through untouched, which keeps quiet and
    machine-readable runs free of terminal control output.
    """

    def __init__(self, description: str, total: int, enabled: bool = True):
        self.description = description
        self.total = total
        self.enabled = enabled
        self.processed_count = 0
        self.progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(),
            TextColumn("({task.completed}/{task.total})"),
            console=console,
            transient=True,
            disable=not enabled,
        )
        self.task_id = self.progress.add_task(description, total=total)

    def __enter__(self) -> "ProgressTracker[T]":
        self.progress.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.progress.stop()

    def increment(self, advance: int = 1, description: str | None = None) -> None:
        """
        Increment the progress bar.

        Args:
            advance: Number of steps to advance
            description: New description (optional)
        """
        self.processed_count += advance
        if description:
            self.progress.update(
                self.task_id, completed=self.processed_count, description=description
            )
        else:
            self.progress.update(self.task_id, completed=self.processed_count)

    def track(self, iterable: Iterable[T]) -> Iterator[T]:
        """Yield items from ``iterable``, advancing the bar after each one."""
        for item in iterable:
            yield item
            self.increment()


def render_report(result: LintResult, out: Console | None = None) -> None:
    """Print findings grouped by file, followed by a summary line."""
    out = out or output_console
    findings = result.all_findings()

    if findings:
        table = Table(title="Lint findings", show_lines=False)
        table.add_column("Location", style="cyan", no_wrap=True)
        table.add_column("Severity")
        table.add_column("Rule", style="magenta")
        table.add_column("Message")
        for finding in findings:
            table.add_row(
                escape(finding.location()),
                f"[finding.{finding.severity}]{finding.severity}[/]",
                finding.rule,
                escape(finding.message),
            )
        out.print(table)

    summary = result.summary
    style = "bold green" if result.succeeded else "bold red"
    out.print(
        f"[{style}]{summary.get('status', 'unknown').upper()}[/]: "
        f"{summary.get('files', 0)} file(s), "
        f"{summary.get('errors', 0)} error(s), "
        f"{summary.get('warnings', 0)} warning(s)"
    )


def render_posts(reports: Iterable[PostReport], out: Console | None = None) -> None:
    """Print a table of posts with their front matter metadata."""
    out = out or output_console
    table = Table(title="Posts")
    table.add_column("Date", no_wrap=True)
    table.add_column("Title")
    table.add_column("Layout")
    table.add_column("Categories")
    table.add_column("Path", style="cyan")
    for report in reports:
        table.add_row(
            report.date.strftime("%Y-%m-%d") if report.date else "-",
            escape(report.title or "-"),
            escape(report.layout or "-"),
            escape(", ".join(report.categories) or "-"),
            escape(report.path),
        )
    out.print(table)


def render_rules(rules: Iterable[Rule], out: Console | None = None) -> None:
    """Print the registered rules with their default severities."""
    out = out or output_console
    table = Table(title="Rules")
    table.add_column("Rule", style="magenta")
    table.add_column("Default severity")
    table.add_column("Scope")
    table.add_column("Checks")
    for registered in rules:
        table.add_row(
            registered.id,
            f"[finding.{registered.severity}]{registered.severity}[/]",
            registered.scope,
            registered.description,
        )
    out.print(table)
