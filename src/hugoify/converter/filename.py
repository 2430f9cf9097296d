"""Output file naming and routing.

Titles are romanized with pypinyin so that Chinese titles produce readable
ASCII slugs (``"你好 World"`` becomes ``"ni-hao-world"``).  Characters with
no romanization pass through ``lazy_pinyin`` unchanged, so Latin words
and digits stay in the slug (``"Go语言"`` becomes ``"go-yu-yan"``); every
other character is folded into hyphens.  Only a title with nothing left
after that falls back to the page ID.
"""

from __future__ import annotations

import re
from pathlib import Path

from pypinyin import lazy_pinyin

from hugoify.config import UNCATEGORIZED

_INVALID_RE = re.compile(r"[^a-z0-9-]+")
_HYPHENS_RE = re.compile(r"-{2,}")


def slugify_title(title: str) -> str:
    """Return the URL slug of *title* (may be empty)."""
    if not title:
        return ""
    joined = "-".join(lazy_pinyin(title)).lower()
    slug = _INVALID_RE.sub("-", joined)
    slug = _HYPHENS_RE.sub("-", slug)
    return slug.strip("-")


def resolve_filename(page_id: str, title: str) -> str:
    """Markdown filename for a page.

    Falls back to the page ID when the title yields no usable slug.
    """
    slug = slugify_title(title)
    return f"{slug or page_id}.md"


def output_path(root: str | Path, category_dir: str | None, filename: str) -> Path:
    """``{root}/{category_dir}/{filename}``; pages without a category go to
    the ``uncategorized`` directory."""
    return Path(root) / (category_dir or UNCATEGORIZED) / filename
