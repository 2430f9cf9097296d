"""Per-page orchestration: metadata, routing, rendering and output.

:class:`DocumentAssembler` turns one Notion page and its block tree into a
written Hugo document.  It is the only place that knows the order of the
conversion stages::

    derive_metadata -> resolve_filename -> MediaContext
        -> parse_blocks -> MarkdownRenderer -> TemplateWriter

A page whose categories are not all mapped short-circuits after the first
stage with a :class:`~hugoify.models.Skip`; nothing is rendered or written.
"""

from __future__ import annotations

import logging
import time
from io import StringIO
from typing import Any

from hugoify.config import UNCATEGORIZED, HugoifyConfig
from hugoify.converter.blocks import parse_blocks
from hugoify.converter.filename import output_path, resolve_filename
from hugoify.converter.metadata import derive_metadata, page_title
from hugoify.converter.renderer import MarkdownRenderer
from hugoify.errors import HugoifyConfigurationError, HugoifyError
from hugoify.models import (
    MediaContext,
    OutputDocument,
    PageMetadata,
    PageResult,
    PageStatus,
    Skip,
)
from hugoify.observability import NoopMetricsHook, get_logger, log_event
from hugoify.template import TemplateWriter, quote

log = get_logger("hugoify.assembler")


def _error_code(exc: HugoifyError) -> str:
    return getattr(exc.code, "value", exc.code)


def list_literal(values: list[str]) -> str:
    """Format *values* as an inline front-matter list: ``["a", "b"]``."""
    if not values:
        return "[]"
    return "[" + ", ".join(quote(v) for v in values) + "]"


def front_matter_fields(metadata: PageMetadata, content: str) -> dict[str, Any]:
    """Flat field map handed to the template."""
    return {
        "Title": metadata.title,
        "MetaTitle": metadata.meta_title,
        "Description": metadata.description,
        "Date": metadata.date,
        "Image": metadata.cover,
        "Author": metadata.author,
        "Draft": metadata.draft,
        "Weight": metadata.weight,
        "Content": content,
        "Toc": metadata.toc,
        "Comments": metadata.comments,
        "Slug": metadata.slug,
        "Lastmod": metadata.lastmod,
        "Tags": list_literal(metadata.tags),
        "Categories": list_literal(metadata.categories),
    }


class DocumentAssembler:
    """Convert and write one page at a time.

    Parameters
    ----------
    config:
        Output root, property names and category map.
    renderer:
        Block renderer, already wired to a media store.
    writer:
        Template writer for the final document.
    """

    def __init__(
        self,
        config: HugoifyConfig,
        renderer: MarkdownRenderer,
        writer: TemplateWriter,
    ) -> None:
        self._config = config
        self._renderer = renderer
        self._writer = writer
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()

    def assemble(self, page: Any, blocks: Any) -> OutputDocument | Skip:
        """Render *page* and write it.

        Parameters
        ----------
        page:
            Notion page object (API JSON).
        blocks:
            Top-level block dicts of the page, with ``children`` attached.

        Returns
        -------
        OutputDocument | Skip
            The written document, or the skip decision unchanged.

        Raises
        ------
        HugoifyError
            Metadata, render, media or template failures for this page.
        """
        decision = derive_metadata(page, self._config)
        if isinstance(decision, Skip):
            return decision
        metadata = decision.metadata

        category_dir = metadata.category_dir or UNCATEGORIZED
        filename = resolve_filename(page["id"], metadata.title)
        context = MediaContext(category=category_dir, article=filename.removesuffix(".md"))

        nodes = parse_blocks(blocks)
        out = StringIO()
        for node in nodes:
            self._renderer.render(node, out, context)
        body = out.getvalue()

        fields = front_matter_fields(metadata, body)
        path = output_path(self._config.output_root, category_dir, filename)
        self._writer.write(path, fields)
        return OutputDocument(fields=fields, body=body, path=path)

    def convert(self, page: Any, blocks: Any) -> PageResult:
        """Like :meth:`assemble`, but report the outcome instead of raising.

        Configuration errors still propagate: they are not specific to the
        page and must stop the run.
        """
        page_id = page.get("id", "") if isinstance(page, dict) else ""
        title = page_title(page, self._config)
        start = time.monotonic()

        try:
            outcome = self.assemble(page, blocks)
        except HugoifyConfigurationError:
            raise
        except HugoifyError as exc:
            self._metrics.increment("hugoify.pages_failed_total", tags={"code": _error_code(exc)})
            log_event(
                log, logging.ERROR, "page failed",
                page_id=page_id, title=title, code=_error_code(exc), error=exc.message,
            )
            return PageResult(page_id=page_id, title=title, status=PageStatus.FAILED, error=exc)

        if isinstance(outcome, Skip):
            self._metrics.increment("hugoify.pages_skipped_total")
            log_event(
                log, logging.WARNING, "page skipped",
                page_id=page_id, title=title, reason=outcome.reason,
                unmapped=list(outcome.unmapped),
            )
            return PageResult(page_id=page_id, title=title, status=PageStatus.SKIPPED)

        elapsed_ms = (time.monotonic() - start) * 1000
        self._metrics.increment("hugoify.pages_converted_total")
        self._metrics.timing("hugoify.page_convert_duration_ms", elapsed_ms)
        log_event(
            log, logging.INFO, "page converted",
            page_id=page_id, title=title, path=str(outcome.path),
        )
        return PageResult(
            page_id=page_id, title=title, status=PageStatus.CONVERTED, path=outcome.path,
        )
