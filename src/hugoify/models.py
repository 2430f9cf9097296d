"""Data models for hugoify.

The block tree is modelled as a closed union of frozen dataclasses
(:data:`ContentNode`).  The renderer dispatches on the node class, so adding
a block type means adding a dataclass here and one rule to the renderer's
table.  Everything else in this module is a plain value object passed
between the pipeline stages.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Union

# ---------------------------------------------------------------------------
# Inline text
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextRun:
    """A span of inline text with independent style flags.

    Attributes
    ----------
    content:
        The raw text.
    kind:
        Rich-text kind reported by Notion (``"text"``, ``"mention"``,
        ``"equation"``).  Only ``"text"`` runs produce output.
    bold, italic, strikethrough, code:
        Style flags; they compose freely.
    link:
        Optional link target.
    """

    content: str
    kind: str = "text"
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    code: bool = False
    link: str | None = None


Runs = tuple[TextRun, ...]


@dataclass(frozen=True)
class CalloutIcon:
    """Icon attached to a callout block.

    ``kind`` is ``"emoji"``, ``"external"`` or ``"file"``; ``emoji`` is set
    only for emoji icons.
    """

    kind: str
    emoji: str | None = None


# ---------------------------------------------------------------------------
# Block tree
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Heading:
    level: int
    runs: Runs = ()


@dataclass(frozen=True)
class Paragraph:
    runs: Runs = ()
    children: tuple[ContentNode, ...] = ()


@dataclass(frozen=True)
class BulletItem:
    runs: Runs = ()
    children: tuple[ContentNode, ...] = ()


@dataclass(frozen=True)
class NumberedItem:
    runs: Runs = ()
    children: tuple[ContentNode, ...] = ()


@dataclass(frozen=True)
class Todo:
    runs: Runs = ()
    checked: bool = False


@dataclass(frozen=True)
class Toggle:
    runs: Runs = ()
    children: tuple[ContentNode, ...] = ()


@dataclass(frozen=True)
class Quote:
    runs: Runs = ()
    children: tuple[ContentNode, ...] = ()


@dataclass(frozen=True)
class Code:
    runs: Runs = ()
    language: str = ""


@dataclass(frozen=True)
class Callout:
    runs: Runs = ()
    icon: CalloutIcon | None = None
    children: tuple[ContentNode, ...] = ()


@dataclass(frozen=True)
class Image:
    """An image; ``file_url`` is a Notion-hosted URL, ``external_url`` a
    link to a third-party host.  The hosted URL wins when both are set."""

    file_url: str = ""
    external_url: str = ""
    caption: Runs = ()


@dataclass(frozen=True)
class Video:
    url: str = ""
    kind: str = "external"


@dataclass(frozen=True)
class File:
    url: str = ""
    kind: str = "external"


@dataclass(frozen=True)
class Bookmark:
    url: str = ""
    caption: Runs = ()


@dataclass(frozen=True)
class Equation:
    expression: str = ""


@dataclass(frozen=True)
class Divider:
    pass


@dataclass(frozen=True)
class Table:
    """A table; the first row is the header.  Each row is a tuple of cells
    and each cell a tuple of runs."""

    rows: tuple[tuple[Runs, ...], ...] = ()


@dataclass(frozen=True)
class ColumnList:
    columns: tuple[tuple[ContentNode, ...], ...] = ()


@dataclass(frozen=True)
class Unsupported:
    """A block type with no Markdown rule."""

    block_type: str
    block_id: str = ""


ContentNode = Union[
    Heading,
    Paragraph,
    BulletItem,
    NumberedItem,
    Todo,
    Toggle,
    Quote,
    Code,
    Callout,
    Image,
    Video,
    File,
    Bookmark,
    Equation,
    Divider,
    Table,
    ColumnList,
    Unsupported,
]


# ---------------------------------------------------------------------------
# Page-level values
# ---------------------------------------------------------------------------

@dataclass
class PageMetadata:
    """Front-matter values derived from a page's properties.

    Built once per page, consumed by the filename resolver and the document
    assembler, then discarded.

    Attributes
    ----------
    categories:
        Original (unmapped) category names, in property order.
    category_dir:
        Output directory of the first category, or ``None`` when the page
        has no category property.
    """

    title: str = ""
    date: str = ""
    lastmod: str = ""
    author: str = ""
    cover: str = ""
    description: str = ""
    meta_title: str = ""
    slug: str = ""
    draft: bool = False
    toc: bool = False
    comments: bool = False
    weight: int = 0
    categories: list[str] = field(default_factory=list)
    category_dir: str | None = None
    tags: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MediaContext:
    """Where a page's media belongs: category directory and article slug.

    Built by the assembler for each page and passed explicitly to the
    renderer and every media store call.
    """

    category: str = ""
    article: str = ""


@dataclass(frozen=True)
class Proceed:
    """Metadata derivation succeeded; the page should be published."""

    metadata: PageMetadata


@dataclass(frozen=True)
class Skip:
    """The page is deliberately excluded from output.

    This is a result, not an error: the caller must not treat it as a
    failure or transition the page to a published state.
    """

    page_id: str
    reason: str
    unmapped: tuple[str, ...] = ()


MetadataDecision = Union[Proceed, Skip]


@dataclass
class OutputDocument:
    """A rendered page: flat front-matter field map, body, and target path."""

    fields: dict[str, Any]
    body: str
    path: Path


# ---------------------------------------------------------------------------
# Batch results
# ---------------------------------------------------------------------------

class PageStatus(str, Enum):
    """Outcome of processing a single page."""

    CONVERTED = "converted"
    SKIPPED = "skipped"
    DELETED = "deleted"
    FAILED = "failed"


@dataclass
class PageResult:
    """Outcome of one page in a batch.

    Attributes
    ----------
    page_id:
        Notion page ID.
    title:
        Best-effort page title for reporting.
    status:
        What happened to the page.
    path:
        Output file for converted pages.
    error:
        The per-page error for failed pages.
    """

    page_id: str
    title: str
    status: PageStatus
    path: Path | None = None
    error: Exception | None = None


@dataclass
class BatchReport:
    """Aggregated results of a batch run."""

    results: list[PageResult] = field(default_factory=list)

    def count(self, status: PageStatus) -> int:
        return sum(1 for r in self.results if r.status is status)

    @property
    def failed(self) -> list[PageResult]:
        return [r for r in self.results if r.status is PageStatus.FAILED]
