"""Front matter handling for Jekyll-style posts.

A post may start with a YAML block delimited by ``---`` lines. The block is
closed by the next line consisting of ``---`` or ``...``. Everything after
the closing delimiter is the markdown body.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Any

import yaml

from postlint.models.errors import FrontMatterError

logger = logging.getLogger(__name__)

OPENING_DELIMITER = "---"
CLOSING_DELIMITERS = ("---", "...")

# Jekyll accepts dates with optional time and optional UTC offset.
DATE_PATTERN = re.compile(
    r"^(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"(?:[ T](?P<hour>\d{2}):(?P<minute>\d{2})(?::(?P<second>\d{2}))?)?"
    r"(?:\s*(?P<offset>Z|[+-]\d{2}:?\d{2}))?$",
)

KNOWN_KEYS = ("layout", "title", "date", "categories", "category")


@dataclass(slots=True)
class FrontMatter:
    """Parsed front matter of a post."""

    layout: str | None = None
    title: str | None = None
    raw_date: Any = None
    date: datetime | None = None
    date_error: str | None = None
    categories: list[str] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)


def split_front_matter(text: str) -> tuple[str | None, str, int]:
    """Split a post into its front matter block and body.

    Args:
        text: Full post text

    Returns:
        Tuple of (front matter text or None, body, 1-based line number
        where the body starts)

    Raises:
        FrontMatterError: If the block is opened but never closed

    """
    if text.startswith("\ufeff"):
        text = text[1:]

    lines = text.splitlines(keepends=True)
    if not lines or lines[0].rstrip() != OPENING_DELIMITER:
        return None, text, 1

    for index in range(1, len(lines)):
        if lines[index].rstrip() in CLOSING_DELIMITERS:
            front_matter_text = "".join(lines[1:index])
            body = "".join(lines[index + 1 :])
            return front_matter_text, body, index + 2

    msg = "unterminated front matter"
    raise FrontMatterError(msg, line=1)


def parse_date(value: Any) -> datetime:
    """Parse a front matter date value.

    YAML may already have turned the value into a ``date`` or ``datetime``;
    otherwise the Jekyll string forms are accepted.

    Raises:
        ValueError: If the value is not a well-formed date

    """
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time())
    if not isinstance(value, str):
        msg = f"expected a date, got {type(value).__name__}"
        raise ValueError(msg)

    match = DATE_PATTERN.match(value.strip())
    if not match:
        msg = f"'{value}' is not a YYYY-MM-DD[ HH:MM[:SS]][ +HHMM] date"
        raise ValueError(msg)

    parts = match.groupdict()
    tzinfo = None
    if parts["offset"]:
        tzinfo = _parse_offset(parts["offset"])

    # datetime() rejects out-of-range fields such as month 13
    return datetime(
        int(parts["year"]),
        int(parts["month"]),
        int(parts["day"]),
        int(parts["hour"] or 0),
        int(parts["minute"] or 0),
        int(parts["second"] or 0),
        tzinfo=tzinfo,
    )


def _parse_offset(offset: str) -> timezone:
    if offset == "Z":
        return timezone.utc
    sign = -1 if offset[0] == "-" else 1
    digits = offset[1:].replace(":", "")
    hours, minutes = int(digits[:2]), int(digits[2:])
    if hours > 23 or minutes > 59:
        msg = f"invalid UTC offset '{offset}'"
        raise ValueError(msg)
    return timezone(sign * timedelta(hours=hours, minutes=minutes))


def _parse_categories(data: dict[str, Any]) -> list[str]:
    categories: list[str] = []
    for key in ("categories", "category"):
        value = data.get(key)
        match value:
            case None:
                continue
            case str():
                categories.extend(value.split())
            case list():
                categories.extend(str(item) for item in value if item is not None)
            case _:
                msg = f"'{key}' must be a list or a space-separated string"
                raise FrontMatterError(msg)
    return categories


def parse_front_matter(text: str, first_line: int = 2) -> FrontMatter:
    """Parse the YAML of a front matter block.

    Args:
        text: The block between the delimiters
        first_line: File line number of the block's first line, used to
            report YAML errors against the post file

    Returns:
        FrontMatter with the well-known keys extracted and the rest kept in
        ``extra``

    Raises:
        FrontMatterError: If the block is not valid YAML key/value metadata

    """
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        line = None
        mark = getattr(e, "problem_mark", None)
        if mark is not None:
            line = first_line + mark.line
        problem = getattr(e, "problem", None) or str(e)
        raise FrontMatterError(f"invalid YAML: {problem}", line=line) from e
    except ValueError as e:
        # PyYAML builds timestamps eagerly, so an impossible date fails here
        raise FrontMatterError(f"invalid YAML value: {e}", line=first_line) from e

    if data is None:
        return FrontMatter()
    if not isinstance(data, dict):
        msg = f"front matter must be key/value metadata, got {type(data).__name__}"
        raise FrontMatterError(msg, line=first_line)

    front_matter = FrontMatter(
        layout=_as_text(data.get("layout")),
        title=_as_text(data.get("title")),
        raw_date=data.get("date"),
        categories=_parse_categories(data),
        extra={str(k): v for k, v in data.items() if k not in KNOWN_KEYS},
    )

    if front_matter.raw_date is not None:
        try:
            front_matter.date = parse_date(front_matter.raw_date)
        except ValueError as e:
            front_matter.date_error = str(e)
            logger.debug("Unparseable date %r: %s", front_matter.raw_date, e)

    return front_matter


def _as_text(value: Any) -> str | None:
    if value is None:
        return None
    return str(value)
