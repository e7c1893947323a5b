"""Factory helpers for building post text in tests."""


def make_post(
    title: str | None = "A Post",
    date: str | None = "2024-01-15",
    layout: str | None = "post",
    body: str = "Some text.\n",
    extra: str = "",
) -> str:
    """Build post text with the given front matter values.

    Passing None for a value leaves the key out of the front matter.
    """
    lines = ["---"]
    if layout is not None:
        lines.append(f"layout: {layout}")
    if title is not None:
        lines.append(f'title: "{title}"')
    if date is not None:
        lines.append(f"date: {date}")
    if extra:
        lines.append(extra.rstrip("\n"))
    lines.append("---")
    return "\n".join(lines) + "\n" + body
