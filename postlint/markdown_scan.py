#!/usr/bin/env python3
"""Line-oriented scanning of markdown post bodies.

This module finds the structures the lint rules care about:
1. Fenced code blocks (backtick and tilde fences)
2. Inline links and images
3. Reference links and their definitions

It is not a full CommonMark parser. Text inside fenced code blocks,
indented code blocks, Liquid highlight and raw regions and inline code
spans is ignored when looking for links.
"""

import logging
import re
from dataclasses import dataclass
from typing import Literal

logger = logging.getLogger(__name__)

type LinkKind = Literal["inline", "image", "reference", "definition"]

FENCE_PATTERN = re.compile(r"^(?P<indent> {0,3})(?P<marker>`{3,}|~{3,})(?P<info>.*)$")
INLINE_CODE_PATTERN = re.compile(r"(`+)(?!`).+?(?<!`)\1(?!`)")
DEFINITION_PATTERN = re.compile(r"^ {0,3}\[(?P<label>[^\]]+)\]:[ \t]*(?P<url>\S*)")
# A definition's destination may sit alone on the following line
CONTINUED_URL_PATTERN = re.compile(r"^[ \t]*(?P<url><[^>]*>|\S+)")
INDENTED_CODE_PATTERN = re.compile(r"^(?: {4}| {0,3}\t)")
LIST_ITEM_PATTERN = re.compile(r"^ {0,3}(?:[-+*]|\d{1,9}[.)])(?:[ \t]|$)")
LIQUID_BLOCK_START = re.compile(r"\{%-?\s*(?P<tag>highlight|raw)\b[^%]*%\}")
LIQUID_BLOCK_END = {
    "highlight": re.compile(r"\{%-?\s*endhighlight\s*-?%\}"),
    "raw": re.compile(r"\{%-?\s*endraw\s*-?%\}"),
}
LIQUID_RAW_SPAN_PATTERN = re.compile(r"\{%-?\s*raw\s*-?%\}.*?\{%-?\s*endraw\s*-?%\}")
# [text](url "title") and ![alt](url); text may contain one level of brackets
INLINE_LINK_PATTERN = re.compile(
    r"(?P<bang>!?)\[(?P<text>(?:[^\[\]]|\[[^\[\]]*\])*)\]"
    r"\(\s*(?P<url><[^>]*>|[^\s()]*(?:\([^\s()]*\)[^\s()]*)*)(?:\s+(?:\"[^\"]*\"|'[^']*'|\([^)]*\)))?\s*\)",
)
# [text][ref] and collapsed [text][]
REFERENCE_LINK_PATTERN = re.compile(
    r"(?P<bang>!?)\[(?P<text>(?:[^\[\]]|\[[^\[\]]*\])*)\]\[(?P<ref>[^\]]*)\]",
)


@dataclass(slots=True)
class Fence:
    """A fenced code block found in a body."""

    start_line: int
    marker: str
    info: str = ""
    end_line: int | None = None

    @property
    def closed(self) -> bool:
        return self.end_line is not None


@dataclass(slots=True)
class Link:
    """A link, image or reference definition found in a body."""

    kind: LinkKind
    text: str
    url: str
    line: int
    ref: str | None = None


def normalize_label(label: str) -> str:
    """Normalize a reference label for case-insensitive matching."""
    return " ".join(label.split()).casefold()


def _closes(line: str, fence: Fence) -> bool:
    match = FENCE_PATTERN.match(line)
    if not match:
        return False
    marker = match.group("marker")
    return (
        marker[0] == fence.marker[0]
        and len(marker) >= len(fence.marker)
        and not match.group("info").strip()
    )


def scan_fences(body: str, first_line: int = 1) -> list[Fence]:
    """Find every fenced code block in a markdown body.

    Args:
        body: Markdown text
        first_line: File line number of the body's first line

    Returns:
        Fences in order of appearance; an unclosed fence has ``end_line``
        set to None and runs to the end of the body

    """
    fences: list[Fence] = []
    current: Fence | None = None

    for offset, line in enumerate(body.splitlines()):
        line_no = first_line + offset
        if current is not None:
            if _closes(line, current):
                current.end_line = line_no
                current = None
            continue

        match = FENCE_PATTERN.match(line)
        if not match:
            continue
        marker = match.group("marker")
        info = match.group("info").strip()
        # Backtick fences may not carry backticks in their info string
        if marker[0] == "`" and "`" in info:
            continue
        current = Fence(start_line=line_no, marker=marker, info=info)
        fences.append(current)

    if current is not None:
        logger.debug("Unclosed %s fence opened at line %d", current.marker, current.start_line)

    return fences


def _liquid_lines(lines: list[str], first_line: int, skipped: set[int]) -> set[int]:
    """Return the line numbers of multi-line ``highlight`` and ``raw`` blocks, tags included."""
    covered: set[int] = set()
    closing: re.Pattern[str] | None = None

    for offset, line in enumerate(lines):
        line_no = first_line + offset
        if line_no in skipped:
            continue
        if closing is not None:
            covered.add(line_no)
            if closing.search(line):
                closing = None
            continue

        match = LIQUID_BLOCK_START.search(line)
        if match and not LIQUID_BLOCK_END[match.group("tag")].search(line, match.end()):
            covered.add(line_no)
            closing = LIQUID_BLOCK_END[match.group("tag")]

    return covered


def _indented_code_lines(lines: list[str], first_line: int, skipped: set[int]) -> set[int]:
    """Return the line numbers of indented code blocks.

    An indented block starts after a blank line (or at the top of the body)
    and never inside a list, where indentation continues the list item
    instead. A non-blank line that is not indented ends the block.
    """
    covered: set[int] = set()
    after_blank = True
    in_code = False
    in_list = False

    for offset, line in enumerate(lines):
        line_no = first_line + offset
        if line_no in skipped:
            after_blank = True
            in_code = False
            continue
        if not line.strip():
            after_blank = True
            continue

        indented = INDENTED_CODE_PATTERN.match(line) is not None
        if indented and (in_code or (after_blank and not in_list)):
            covered.add(line_no)
            in_code = True
        else:
            in_code = False
            if LIST_ITEM_PATTERN.match(line):
                in_list = True
            elif not indented and after_blank:
                in_list = False
        after_blank = False

    return covered


def _code_lines(body: str, first_line: int) -> set[int]:
    """Return the file line numbers covered by code blocks.

    Fenced blocks (fences included), Liquid ``highlight``/``raw`` blocks and
    indented code blocks are covered.
    """
    body_lines = body.splitlines()
    lines: set[int] = set()
    last_line = first_line + len(body_lines) - 1
    for fence in scan_fences(body, first_line):
        end = fence.end_line if fence.end_line is not None else last_line
        lines.update(range(fence.start_line, end + 1))

    lines |= _liquid_lines(body_lines, first_line, lines)
    lines |= _indented_code_lines(body_lines, first_line, lines)
    return lines


def _unwrap_url(url: str) -> str:
    url = url.strip()
    if url.startswith("<") and url.endswith(">"):
        url = url[1:-1].strip()
    return url


def extract_links(body: str, first_line: int = 1) -> list[Link]:
    """Extract links, images and reference definitions from a body.

    Args:
        body: Markdown text
        first_line: File line number of the body's first line

    Returns:
        Links in order of appearance

    """
    links: list[Link] = []
    lines = body.splitlines()
    skipped = _code_lines(body, first_line)

    for offset, line in enumerate(lines):
        line_no = first_line + offset
        if line_no in skipped:
            continue

        definition = DEFINITION_PATTERN.match(line)
        if definition:
            label = definition.group("label")
            url = definition.group("url")
            next_line_no = line_no + 1
            if not url and offset + 1 < len(lines) and next_line_no not in skipped:
                following = lines[offset + 1]
                continued = CONTINUED_URL_PATTERN.match(following)
                if continued and not DEFINITION_PATTERN.match(following):
                    url = continued.group("url")
                    skipped.add(next_line_no)
            links.append(
                Link(
                    kind="definition",
                    text=label,
                    url=_unwrap_url(url),
                    line=line_no,
                    ref=normalize_label(label),
                ),
            )
            continue

        # Blank out inline code and raw spans so their contents are never read as links
        text = INLINE_CODE_PATTERN.sub(lambda m: " " * len(m.group(0)), line)
        text = LIQUID_RAW_SPAN_PATTERN.sub(lambda m: " " * len(m.group(0)), text)

        found: list[tuple[int, Link]] = []
        for match in INLINE_LINK_PATTERN.finditer(text):
            kind: LinkKind = "image" if match.group("bang") else "inline"
            found.append(
                (
                    match.start(),
                    Link(
                        kind=kind,
                        text=match.group("text"),
                        url=_unwrap_url(match.group("url")),
                        line=line_no,
                    ),
                ),
            )
        for match in REFERENCE_LINK_PATTERN.finditer(text):
            label = match.group("ref") or match.group("text")
            found.append(
                (
                    match.start(),
                    Link(
                        kind="reference",
                        text=match.group("text"),
                        url="",
                        line=line_no,
                        ref=normalize_label(label),
                    ),
                ),
            )
        links.extend(link for _, link in sorted(found, key=lambda item: item[0]))

    return links


def reference_definitions(links: list[Link]) -> dict[str, str]:
    """Map normalized labels to URLs; the first definition of a label wins."""
    definitions: dict[str, str] = {}
    for link in links:
        if link.kind == "definition" and link.ref is not None:
            definitions.setdefault(link.ref, link.url)
    return definitions
