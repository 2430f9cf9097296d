"""Content node tree to Markdown renderer.

Walks a tree of :data:`~hugoify.models.ContentNode` values depth-first,
pre-order, writing Markdown to a text stream.  Every block type has exactly
one rule in :data:`_NODE_RENDERERS`.

Usage::

    from io import StringIO

    from hugoify.config import HugoifyConfig
    from hugoify.converter.renderer import MarkdownRenderer

    renderer = MarkdownRenderer(HugoifyConfig(), media_store=store)
    out = StringIO()
    for node in nodes:
        renderer.render(node, out, context)

Nested list children are indented once, at the point the child starts; a
child that emits several lines has only its first line indented.
"""

from __future__ import annotations

import logging
import posixpath
from collections.abc import Callable as _Callable
from collections.abc import Iterable
from io import StringIO
from typing import TextIO
from urllib.parse import parse_qs, urlparse

from hugoify.config import HugoifyConfig
from hugoify.errors import HugoifyError, HugoifyMediaError, HugoifyUnsupportedBlockError
from hugoify.media.base import MediaStore
from hugoify.models import (
    Bookmark,
    BulletItem,
    Callout,
    Code,
    ColumnList,
    ContentNode,
    Divider,
    Equation,
    File,
    Heading,
    Image,
    MediaContext,
    NumberedItem,
    Paragraph,
    Quote,
    Runs,
    Table,
    Todo,
    Toggle,
    Unsupported,
    Video,
)
from hugoify.observability import get_logger, log_event

from .rich_text import format_runs

log = get_logger("hugoify.renderer")

_BULLET_CHILD_INDENT = "  "
_NUMBERED_CHILD_INDENT = "   "

_DEFAULT_CALLOUT_ICON = "\U0001f4a1"  # light bulb
_CALLOUT_KIND_ICONS: dict[str, str] = {
    "external": "\U0001f517",  # link
    "file": "\U0001f4ce",  # paperclip
}


class MarkdownRenderer:
    """Render content nodes to Markdown.

    Parameters
    ----------
    config:
        Controls shortcode use, escaping, attachment externalization and
        the unsupported-block policy.
    media_store:
        Optional backend that relocates image (and, if enabled, hosted
        attachment) URLs.  When ``None`` remote URLs are emitted unchanged.
    """

    def __init__(
        self,
        config: HugoifyConfig,
        media_store: MediaStore | None = None,
    ) -> None:
        self._config = config
        self._media_store = media_store

    @property
    def media_store(self) -> MediaStore | None:
        return self._media_store

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(
        self,
        node: ContentNode,
        out: TextIO,
        context: MediaContext | None = None,
    ) -> None:
        """Write *node* (and its subtree) to *out*.

        Raises
        ------
        HugoifyRenderError
            On malformed content or an unsupported block under the
            ``"raise"`` policy.
        HugoifyMediaError
            If relocating a media URL fails.
        """
        renderer = _NODE_RENDERERS.get(type(node))
        if renderer is None:
            raise TypeError(f"Not a content node: {type(node).__name__}")
        renderer(self, node, out, context)

    def render_nodes(
        self,
        nodes: Iterable[ContentNode],
        context: MediaContext | None = None,
    ) -> str:
        """Render a sequence of nodes and return the Markdown text."""
        out = StringIO()
        for node in nodes:
            self.render(node, out, context)
        return out.getvalue()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _text(self, runs: Runs) -> str:
        return format_runs(runs, escape=self._config.escape_markdown)

    def _render_children(
        self,
        children: Iterable[ContentNode],
        out: TextIO,
        context: MediaContext | None,
    ) -> None:
        for child in children:
            self.render(child, out, context)

    def _render_quoted_children(
        self,
        children: tuple[ContentNode, ...],
        out: TextIO,
        context: MediaContext | None,
    ) -> None:
        if not children:
            return
        child_md = self.render_nodes(children, context)
        for line in child_md.rstrip("\n").split("\n"):
            out.write(f"> {line}\n" if line.strip() else ">\n")

    def _externalize(self, url: str, context: MediaContext | None) -> str:
        if self._media_store is None or not url:
            return url
        try:
            return self._media_store.save(url, context)
        except HugoifyError:
            raise
        except Exception as exc:
            raise HugoifyMediaError(
                f"Media store failed for {url}: {exc}",
                context={"url": url},
                cause=exc,
            ) from exc

    # ------------------------------------------------------------------
    # Block rules
    # ------------------------------------------------------------------

    def _render_heading(self, node: Heading, out: TextIO, context: MediaContext | None) -> None:
        out.write(f"{'#' * node.level} {self._text(node.runs)}\n\n")

    def _render_paragraph(self, node: Paragraph, out: TextIO, context: MediaContext | None) -> None:
        text = self._text(node.runs)
        if text == "":
            out.write("\n")
        else:
            out.write(f"{text}\n\n")
        self._render_children(node.children, out, context)

    def _render_bullet_item(self, node: BulletItem, out: TextIO, context: MediaContext | None) -> None:
        out.write(f"- {self._text(node.runs)}\n")
        for child in node.children:
            out.write(_BULLET_CHILD_INDENT)
            self.render(child, out, context)

    def _render_numbered_item(self, node: NumberedItem, out: TextIO, context: MediaContext | None) -> None:
        out.write(f"1. {self._text(node.runs)}\n")
        for child in node.children:
            out.write(_NUMBERED_CHILD_INDENT)
            self.render(child, out, context)

    def _render_todo(self, node: Todo, out: TextIO, context: MediaContext | None) -> None:
        checkbox = "[x]" if node.checked else "[ ]"
        out.write(f"- {checkbox} {self._text(node.runs)}\n")

    def _render_toggle(self, node: Toggle, out: TextIO, context: MediaContext | None) -> None:
        out.write(f"<details>\n<summary>{self._text(node.runs)}</summary>\n\n")
        self._render_children(node.children, out, context)
        out.write("</details>\n")

    def _render_quote(self, node: Quote, out: TextIO, context: MediaContext | None) -> None:
        for line in self._text(node.runs).split("\n"):
            out.write(f"> {line}\n")
        self._render_quoted_children(node.children, out, context)

    def _render_code(self, node: Code, out: TextIO, context: MediaContext | None) -> None:
        language = node.language
        # Notion's name for "no language".
        if language == "plain text":
            language = ""
        out.write(f"```{language}\n{self._text(node.runs)}\n```\n\n")

    def _render_callout(self, node: Callout, out: TextIO, context: MediaContext | None) -> None:
        icon = _DEFAULT_CALLOUT_ICON
        if node.icon is not None:
            if node.icon.emoji:
                icon = node.icon.emoji
            else:
                icon = _CALLOUT_KIND_ICONS.get(node.icon.kind, _DEFAULT_CALLOUT_ICON)
        out.write(f"> {icon} {self._text(node.runs)}\n")
        self._render_quoted_children(node.children, out, context)
        out.write("\n")

    def _render_image(self, node: Image, out: TextIO, context: MediaContext | None) -> None:
        caption = self._text(node.caption) or "image"
        url = self._externalize(node.file_url or node.external_url, context)
        out.write(f"![{caption}]({url})\n\n")

    def _render_video(self, node: Video, out: TextIO, context: MediaContext | None) -> None:
        url = node.url
        if is_youtube_url(url):
            out.write(f"{{{{< youtube {extract_youtube_id(url)} >}}}}\n\n")
            return
        if self._config.externalize_attachments and node.kind == "file":
            url = self._externalize(url, context)
        out.write(f'<video controls src="{url}"></video>\n\n')

    def _render_file(self, node: File, out: TextIO, context: MediaContext | None) -> None:
        url = node.url
        if not url:
            return
        filename = url_filename(url)
        if self._config.externalize_attachments and node.kind == "file":
            url = self._externalize(url, context)

        if filename.lower().endswith(".pdf"):
            if self._config.use_shortcodes:
                out.write(f'{{{{< pdf src="{url}" >}}}}\n\n')
            else:
                out.write(
                    f'<embed src="{url}" type="application/pdf" '
                    f'width="100%" height="600px">\n\n'
                )
            return
        out.write(f"[{filename}]({url})\n\n")

    def _render_bookmark(self, node: Bookmark, out: TextIO, context: MediaContext | None) -> None:
        title = self._text(node.caption) or node.url
        out.write(f"[{title}]({node.url})\n\n")

    def _render_equation(self, node: Equation, out: TextIO, context: MediaContext | None) -> None:
        out.write(f"$$\n{node.expression}\n$$\n\n")

    def _render_divider(self, node: Divider, out: TextIO, context: MediaContext | None) -> None:
        out.write("---\n")

    def _render_table(self, node: Table, out: TextIO, context: MediaContext | None) -> None:
        if not node.rows:
            return
        header = node.rows[0]
        out.write(" | ".join(self._text(cell) for cell in header) + "\n")
        out.write(" | ".join("---" for _ in header) + "\n")
        for row in node.rows[1:]:
            out.write(" | ".join(self._text(cell) for cell in row) + "\n")
        out.write("\n")

    def _render_column_list(self, node: ColumnList, out: TextIO, context: MediaContext | None) -> None:
        out.write('<div class="row">\n')
        for column in node.columns:
            out.write('<div class="col">\n')
            self._render_children(column, out, context)
            out.write("</div>\n")
        out.write("</div>\n")

    def _render_unsupported(self, node: Unsupported, out: TextIO, context: MediaContext | None) -> None:
        policy = self._config.unsupported_block_policy
        if policy == "raise":
            raise HugoifyUnsupportedBlockError(
                message=f"Cannot render block type: {node.block_type}",
                context={"block_id": node.block_id, "block_type": node.block_type},
            )
        log_event(
            log, logging.DEBUG, "unsupported block",
            block_type=node.block_type, block_id=node.block_id, policy=policy,
        )
        if policy == "comment":
            out.write(f"<!-- notion:{node.block_type} -->\n\n")


# ------------------------------------------------------------------
# Node renderer dispatch table
# ------------------------------------------------------------------

_NodeRenderer = _Callable[..., None]

_NODE_RENDERERS: dict[type, _NodeRenderer] = {
    Heading: MarkdownRenderer._render_heading,
    Paragraph: MarkdownRenderer._render_paragraph,
    BulletItem: MarkdownRenderer._render_bullet_item,
    NumberedItem: MarkdownRenderer._render_numbered_item,
    Todo: MarkdownRenderer._render_todo,
    Toggle: MarkdownRenderer._render_toggle,
    Quote: MarkdownRenderer._render_quote,
    Code: MarkdownRenderer._render_code,
    Callout: MarkdownRenderer._render_callout,
    Image: MarkdownRenderer._render_image,
    Video: MarkdownRenderer._render_video,
    File: MarkdownRenderer._render_file,
    Bookmark: MarkdownRenderer._render_bookmark,
    Equation: MarkdownRenderer._render_equation,
    Divider: MarkdownRenderer._render_divider,
    Table: MarkdownRenderer._render_table,
    ColumnList: MarkdownRenderer._render_column_list,
    Unsupported: MarkdownRenderer._render_unsupported,
}

# ------------------------------------------------------------------
# URL helpers
# ------------------------------------------------------------------


def is_youtube_url(url: str) -> bool:
    """Return ``True`` if *url* points at YouTube (``youtube.com`` or
    ``youtu.be`` in the host name)."""
    host = urlparse(url).hostname or ""
    return "youtube.com" in host or "youtu.be" in host


def extract_youtube_id(url: str) -> str:
    """Extract the video ID from a ``youtu.be/<id>`` or ``watch?v=<id>`` URL.

    Falls back to the full URL when neither form matches.
    """
    if "youtu.be/" in url:
        video_id = url.split("youtu.be/", 1)[1]
    elif "watch?v=" in url:
        video_id = url.split("watch?v=", 1)[1]
    else:
        video_id = parse_qs(urlparse(url).query).get("v", [""])[0]
        if not video_id:
            return url
    for sep in ("&", "?"):
        video_id = video_id.split(sep, 1)[0]
    return video_id


def url_filename(url: str) -> str:
    """Last path segment of *url*, without query string or fragment."""
    return posixpath.basename(urlparse(url).path)
