"""Lint rules for posts.

Every rule is registered under a stable id with a default severity. Post
rules look at one post at a time; corpus rules look at the reports of all
posts in a run.
"""

import functools
import logging
import re
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Literal

from postlint.front_matter import FrontMatter
from postlint.markdown_scan import extract_links, reference_definitions, scan_fences
from postlint.models.errors import ConfigurationError, FrontMatterError
from postlint.models.findings import Finding, PostReport
from postlint.models.settings import RuleSettings
from postlint.type_definitions import Severity

logger = logging.getLogger(__name__)

FILENAME_DATE_PATTERN = re.compile(r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})-.+")

type Violation = tuple[int | None, str]


@dataclass(slots=True)
class Post:
    """A post file split into the parts the rules inspect."""

    path: str
    text: str
    front_matter_text: str | None = None
    front_matter: FrontMatter | None = None
    front_matter_error: FrontMatterError | None = None
    body: str = ""
    body_offset: int = 1
    decode_error: str | None = None


@dataclass(slots=True, frozen=True)
class Rule:
    """A registered lint rule."""

    id: str
    severity: Severity
    description: str
    scope: Literal["post", "corpus"]
    check: Callable[..., Iterable[Violation] | Iterable[Finding]]


RULES: dict[str, Rule] = {}


def rule(
    rule_id: str,
    severity: Severity,
    description: str,
    scope: Literal["post", "corpus"] = "post",
) -> Callable[[Callable], Callable]:
    """Register the decorated function as a lint rule.

    Args:
        rule_id: Stable identifier used in config and output
        severity: Default severity of findings
        description: One-line description shown by ``postlint rules``
        scope: ``post`` for per-file rules, ``corpus`` for cross-post rules

    """

    def decorator(func: Callable) -> Callable:
        if rule_id in RULES:
            msg = f"Rule already registered: {rule_id}"
            raise ValueError(msg)

        @functools.wraps(func)
        def wrapper(*args: object, **kwargs: object) -> list:
            return list(func(*args, **kwargs))

        RULES[rule_id] = Rule(rule_id, severity, description, scope, wrapper)
        return wrapper

    return decorator


@rule("encoding-invalid", "error", "File decodes as UTF-8")
def check_encoding(post: Post) -> Iterator[Violation]:
    if post.decode_error is not None:
        yield None, f"file is not valid UTF-8: {post.decode_error}"


@rule("front-matter-missing", "error", "Post starts with a front matter block")
def check_front_matter_present(post: Post) -> Iterator[Violation]:
    if post.front_matter_text is None and post.front_matter_error is None:
        yield 1, "post has no front matter block"


@rule("front-matter-invalid", "error", "Front matter parses as key/value metadata")
def check_front_matter_valid(post: Post) -> Iterator[Violation]:
    if post.front_matter_error is not None:
        yield post.front_matter_error.line, post.front_matter_error.message


@rule("title-missing", "error", "Front matter has a non-empty title")
def check_title(post: Post) -> Iterator[Violation]:
    if post.front_matter is None:
        return
    title = post.front_matter.title
    if title is None:
        yield 1, "front matter has no 'title'"
    elif not title.strip():
        yield 1, "'title' is empty"


@rule("date-invalid", "error", "Front matter has a well-formed date")
def check_date(post: Post) -> Iterator[Violation]:
    front_matter = post.front_matter
    if front_matter is None:
        return
    if front_matter.raw_date is None:
        yield 1, "front matter has no 'date'"
    elif front_matter.date_error is not None:
        yield 1, f"malformed 'date': {front_matter.date_error}"


@rule("layout-missing", "warning", "Front matter names a layout")
def check_layout(post: Post) -> Iterator[Violation]:
    if post.front_matter is None:
        return
    layout = post.front_matter.layout
    if layout is None or not layout.strip():
        yield 1, "front matter has no 'layout'"


def filename_date(path: str) -> date | None:
    """Return the date encoded in a ``YYYY-MM-DD-slug`` file name, if any."""
    match = FILENAME_DATE_PATTERN.match(Path(path).name)
    if not match:
        return None
    try:
        return date(int(match.group("year")), int(match.group("month")), int(match.group("day")))
    except ValueError:
        return None


@rule("filename-date-mismatch", "warning", "File name date matches the front matter date")
def check_filename_date(post: Post) -> Iterator[Violation]:
    if post.front_matter is None or post.front_matter.date is None:
        return
    from_name = filename_date(post.path)
    if from_name is None:
        return
    from_front_matter = post.front_matter.date.date()
    if from_name != from_front_matter:
        yield 1, (
            f"file name date {from_name.isoformat()} differs from front matter "
            f"date {from_front_matter.isoformat()}"
        )


@rule("fence-unclosed", "error", "Every fenced code block is closed")
def check_fences(post: Post) -> Iterator[Violation]:
    for fence in scan_fences(post.body, post.body_offset):
        if not fence.closed:
            yield fence.start_line, f"code fence '{fence.marker}' is never closed"


@rule("link-empty", "error", "Every link has a non-empty URL")
def check_empty_links(post: Post) -> Iterator[Violation]:
    for link in extract_links(post.body, post.body_offset):
        if link.kind == "reference" or link.url:
            continue
        match link.kind:
            case "image":
                yield link.line, f"image '{link.text}' has an empty URL"
            case "definition":
                yield link.line, f"reference definition '[{link.text}]' has an empty URL"
            case _:
                yield link.line, f"link '{link.text}' has an empty URL"


@rule("link-undefined-reference", "error", "Every reference link has a definition")
def check_reference_links(post: Post) -> Iterator[Violation]:
    links = extract_links(post.body, post.body_offset)
    definitions = reference_definitions(links)
    for link in links:
        if link.kind == "reference" and link.ref not in definitions:
            yield link.line, f"reference '[{link.ref}]' used by '{link.text}' is not defined"


@rule("duplicate-title", "error", "No two posts share a title", scope="corpus")
def check_duplicate_titles(reports: list[PostReport]) -> Iterator[Finding]:
    first_seen: dict[str, str] = {}
    for report in sorted(reports, key=lambda r: r.path):
        if report.title is None:
            continue
        title = report.title.strip()
        if not title:
            continue
        if title in first_seen:
            yield Finding(
                rule="duplicate-title",
                message=f"title '{title}' is already used by {first_seen[title]}",
                path=report.path,
                line=1,
            )
        else:
            first_seen[title] = report.path


def select_rules(settings: RuleSettings, extra_disabled: Iterable[str] = ()) -> list[tuple[Rule, Severity]]:
    """Resolve the active rules and their effective severities.

    Args:
        settings: Rule section of the lint settings
        extra_disabled: Additional rule ids to disable (e.g. from the CLI)

    Returns:
        Active rules paired with their severity, in registration order

    Raises:
        ConfigurationError: If a rule id is unknown

    """
    disabled = set(settings.disabled) | set(extra_disabled)
    unknown = sorted((disabled | set(settings.severity)) - set(RULES))
    if unknown:
        msg = f"Unknown rule id(s): {', '.join(unknown)}. Available: {', '.join(RULES)}"
        raise ConfigurationError(msg)

    selected = []
    for rule_id, registered in RULES.items():
        if rule_id in disabled:
            logger.debug("Rule disabled: %s", rule_id)
            continue
        selected.append((registered, settings.severity.get(rule_id, registered.severity)))
    return selected
