"""Batch driver: convert every pending page and advance its status.

Pages are processed one at a time.  A failure on one page is logged and
recorded, and the batch moves on; only configuration errors stop the run.

Status transitions:

* ready -> published, once the document has been written;
* to-delete -> deleted;
* skipped and failed pages keep their status.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from hugoify.assembler import DocumentAssembler
from hugoify.config import HugoifyConfig
from hugoify.converter.metadata import page_title, select_name
from hugoify.errors import HugoifyConfigurationError, HugoifyError
from hugoify.models import BatchReport, PageResult, PageStatus
from hugoify.observability import NoopMetricsHook, get_logger, log_event

log = get_logger("hugoify.pipeline")


class PageSource(Protocol):
    """What the batch driver needs from a content source."""

    def pending_pages(self) -> list[dict[str, Any]]: ...

    def get_block_tree(self, block_id: str) -> list[dict[str, Any]]: ...

    def update_status(self, page_id: str, status: str) -> Any: ...


def page_status(page: dict[str, Any], config: HugoifyConfig) -> str | None:
    """Current value of the page's status property."""
    props = page.get("properties")
    if not isinstance(props, dict):
        return None
    return select_name(props.get(config.properties.status), "status")


def _transition(source: PageSource, page_id: str, title: str, status: str) -> bool:
    try:
        source.update_status(page_id, status)
    except HugoifyConfigurationError:
        raise
    except HugoifyError as exc:
        log_event(
            log, logging.WARNING, "status update failed",
            page_id=page_id, title=title, status=status, error=exc.message,
        )
        return False
    return True


def process_page(
    page: dict[str, Any],
    source: PageSource,
    assembler: DocumentAssembler,
    config: HugoifyConfig,
) -> PageResult:
    """Handle a single page: delete, or fetch, convert and publish."""
    page_id = page.get("id", "")
    title = page_title(page, config)

    if page_status(page, config) == config.status.to_delete:
        if not _transition(source, page_id, title, config.status.deleted):
            return PageResult(page_id=page_id, title=title, status=PageStatus.FAILED)
        log_event(log, logging.INFO, "page deleted", page_id=page_id, title=title)
        return PageResult(page_id=page_id, title=title, status=PageStatus.DELETED)

    try:
        blocks = source.get_block_tree(page_id)
    except HugoifyConfigurationError:
        raise
    except HugoifyError as exc:
        code = getattr(exc.code, "value", exc.code)
        metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        metrics.increment("hugoify.pages_failed_total", tags={"code": code})
        log_event(
            log, logging.ERROR, "page failed",
            page_id=page_id, title=title, code=code, error=exc.message,
        )
        return PageResult(page_id=page_id, title=title, status=PageStatus.FAILED, error=exc)

    result = assembler.convert(page, blocks)
    if result.status is PageStatus.CONVERTED:
        _transition(source, page_id, title, config.status.published)
    return result


def run_batch(
    source: PageSource,
    assembler: DocumentAssembler,
    config: HugoifyConfig,
) -> BatchReport:
    """Process every pending page of *source*.

    Returns
    -------
    BatchReport
        One result per page, in source order.
    """
    metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
    pages = source.pending_pages()
    log_event(log, logging.INFO, "batch started", pages=len(pages))

    report = BatchReport()
    for page in pages:
        result = process_page(page, source, assembler, config)
        if result.status is PageStatus.DELETED:
            metrics.increment("hugoify.pages_deleted_total")
        report.results.append(result)

    log_event(
        log, logging.INFO, "batch finished",
        converted=report.count(PageStatus.CONVERTED),
        skipped=report.count(PageStatus.SKIPPED),
        deleted=report.count(PageStatus.DELETED),
        failed=report.count(PageStatus.FAILED),
    )
    return report
