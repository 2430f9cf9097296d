"""Inline rendering: rich-text runs to Markdown strings.

Each run is wrapped independently, in a fixed order::

    bold -> italic -> strikethrough -> code -> link

The wraps are plain string operations, not a parse tree, so a run that is
both bold and code renders as ```**x**``` and overlapping delimiters across
runs are emitted as-is.  Content is not escaped unless ``escape=True``.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from typing import Any

from hugoify.models import TextRun

_ESCAPE_RE = re.compile(r'([\\`*_{}\[\]()#+\-.!|<>~])')


def markdown_escape(text: str) -> str:
    """Backslash-escape Markdown-significant characters in *text*."""
    return _ESCAPE_RE.sub(r'\\\1', text)


def format_run(run: TextRun, escape: bool = False) -> str:
    """Render a single run.  Non-text runs render as an empty string."""
    if run.kind != "text":
        return ""

    content = run.content
    if escape and not run.code:
        content = markdown_escape(content)

    if run.bold:
        content = f"**{content}**"
    if run.italic:
        content = f"*{content}*"
    if run.strikethrough:
        content = f"~~{content}~~"
    if run.code:
        content = f"`{content}`"
    if run.link:
        content = f"[{content}]({run.link})"
    return content


def format_runs(runs: Iterable[TextRun], escape: bool = False) -> str:
    """Render an ordered sequence of runs to inline Markdown.

    Parameters
    ----------
    runs:
        The runs, in document order.
    escape:
        Escape Markdown-significant characters in non-code content.

    Returns
    -------
    str
        The concatenated, styled content.
    """
    return "".join(format_run(run, escape) for run in runs)


def plain_text(runs: Iterable[TextRun]) -> str:
    """Concatenate the content of text runs, ignoring styles and links."""
    return "".join(run.content for run in runs if run.kind == "text")


# ---------------------------------------------------------------------------
# Notion API rich_text -> TextRun
# ---------------------------------------------------------------------------

def run_from_api(segment: Any) -> TextRun:
    """Convert one Notion rich_text object into a :class:`TextRun`.

    Malformed segments become empty non-text runs instead of raising.
    """
    if not isinstance(segment, dict):
        return TextRun(content="", kind="invalid")

    kind = segment.get("type", "text")
    annotations = segment.get("annotations")
    if not isinstance(annotations, dict):
        annotations = {}

    content = ""
    link: str | None = None
    text = segment.get("text")
    if kind == "text" and isinstance(text, dict):
        content = text.get("content") or ""
        link_obj = text.get("link")
        if isinstance(link_obj, dict):
            link = link_obj.get("url") or None
    else:
        content = segment.get("plain_text") or ""

    return TextRun(
        content=content,
        kind=kind if isinstance(kind, str) else "invalid",
        bold=bool(annotations.get("bold", False)),
        italic=bool(annotations.get("italic", False)),
        strikethrough=bool(annotations.get("strikethrough", False)),
        code=bool(annotations.get("code", False)),
        link=link,
    )


def runs_from_api(segments: Any) -> tuple[TextRun, ...]:
    """Convert a Notion rich_text array into a tuple of runs."""
    if not isinstance(segments, Sequence) or isinstance(segments, (str, bytes)):
        return ()
    return tuple(run_from_api(seg) for seg in segments)
