"""hugoify -- publish Notion pages as Hugo Markdown documents.

Public re-exports
-----------------

* **Pipeline:** :class:`DocumentAssembler`, :func:`run_batch`
* **Configuration:** :class:`HugoifyConfig`, :func:`load_config`
* **Conversion:** :class:`MarkdownRenderer`, :func:`parse_blocks`,
  :func:`derive_metadata`, :func:`format_runs`
* **Media:** :class:`LocalMediaStore`, :func:`build_media_store`
* **Errors:** Every :class:`HugoifyError` subclass and :class:`ErrorCode`
* **Models:** Content nodes and result types

Usage::

    from hugoify import DocumentAssembler, HugoifyConfig, MarkdownRenderer, TemplateWriter

    config = HugoifyConfig(output_root="content/posts", category_map={"Tech": "tech"})
    assembler = DocumentAssembler(config, MarkdownRenderer(config), TemplateWriter())
    result = assembler.convert(page, blocks)
"""

from __future__ import annotations

# ── Pipeline ────────────────────────────────────────────────────────────
from hugoify.assembler import DocumentAssembler

# ── Configuration ───────────────────────────────────────────────────────
from hugoify.config import (
    HugoifyConfig,
    PropertyNames,
    StatusNames,
    StorageConfig,
    load_config,
)

# ── Conversion ──────────────────────────────────────────────────────────
from hugoify.converter import (
    MarkdownRenderer,
    derive_metadata,
    format_runs,
    parse_blocks,
    resolve_filename,
)

# ── Errors ──────────────────────────────────────────────────────────────
from hugoify.errors import (
    ErrorCode,
    HugoifyAPIError,
    HugoifyConfigurationError,
    HugoifyError,
    HugoifyMediaError,
    HugoifyMetadataError,
    HugoifyNetworkError,
    HugoifyRenderError,
    HugoifyRetryExhaustedError,
    HugoifyTemplateError,
    HugoifyUnsupportedBlockError,
)

# ── Media ───────────────────────────────────────────────────────────────
from hugoify.media import LocalMediaStore, MediaStore, build_media_store

# ── Models ──────────────────────────────────────────────────────────────
from hugoify.models import (
    BatchReport,
    MediaContext,
    OutputDocument,
    PageMetadata,
    PageResult,
    PageStatus,
    Proceed,
    Skip,
    TextRun,
)
from hugoify.pipeline import run_batch
from hugoify.template import TemplateWriter

__all__ = [
    # Pipeline
    "DocumentAssembler",
    "TemplateWriter",
    "run_batch",
    # Configuration
    "HugoifyConfig",
    "PropertyNames",
    "StatusNames",
    "StorageConfig",
    "load_config",
    # Conversion
    "MarkdownRenderer",
    "derive_metadata",
    "format_runs",
    "parse_blocks",
    "resolve_filename",
    # Errors
    "ErrorCode",
    "HugoifyError",
    "HugoifyConfigurationError",
    "HugoifyRenderError",
    "HugoifyUnsupportedBlockError",
    "HugoifyTemplateError",
    "HugoifyMetadataError",
    "HugoifyMediaError",
    "HugoifyAPIError",
    "HugoifyNetworkError",
    "HugoifyRetryExhaustedError",
    # Media
    "LocalMediaStore",
    "MediaStore",
    "build_media_store",
    # Models
    "BatchReport",
    "MediaContext",
    "OutputDocument",
    "PageMetadata",
    "PageResult",
    "PageStatus",
    "Proceed",
    "Skip",
    "TextRun",
]
