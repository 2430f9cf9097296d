"""Notion page to Hugo Markdown conversion.

Public API:

- :func:`parse_blocks` -- Notion block dicts to content nodes.
- :class:`MarkdownRenderer` -- content nodes to Markdown.
- :func:`format_runs` -- rich-text runs to inline Markdown.
- :func:`derive_metadata` -- page properties to front-matter metadata.
- :func:`resolve_filename` / :func:`output_path` -- output routing.
"""

from hugoify.converter.blocks import SUPPORTED_BLOCK_TYPES, parse_block, parse_blocks
from hugoify.converter.filename import output_path, resolve_filename, slugify_title
from hugoify.converter.metadata import derive_metadata, resolve_categories
from hugoify.converter.renderer import MarkdownRenderer
from hugoify.converter.rich_text import format_runs, plain_text, runs_from_api

__all__ = [
    "SUPPORTED_BLOCK_TYPES",
    "MarkdownRenderer",
    "derive_metadata",
    "format_runs",
    "output_path",
    "parse_block",
    "parse_blocks",
    "plain_text",
    "resolve_categories",
    "resolve_filename",
    "runs_from_api",
    "slugify_title",
]
