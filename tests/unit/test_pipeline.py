"""Tests for hugoify/pipeline.py."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from hugoify.assembler import DocumentAssembler
from hugoify.config import HugoifyConfig, StorageConfig
from hugoify.converter.renderer import MarkdownRenderer
from hugoify.errors import HugoifyAPIError, HugoifyConfigurationError, HugoifyMediaError
from hugoify.models import PageStatus
from hugoify.pipeline import page_status, process_page, run_batch
from hugoify.template import TemplateWriter


class FakeSource:
    """In-memory page source recording status transitions."""

    def __init__(self, pages, blocks=None, fail_blocks=(), fail_updates=False):
        self.pages = pages
        self.blocks = blocks or {}
        self.fail_blocks = set(fail_blocks)
        self.fail_updates = fail_updates
        self.updates: list[tuple[str, str]] = []

    def pending_pages(self):
        return list(self.pages)

    def get_block_tree(self, block_id):
        if block_id in self.fail_blocks:
            raise HugoifyAPIError("not found", context={"status_code": 404})
        return self.blocks.get(block_id, [])

    def update_status(self, page_id, status):
        if self.fail_updates:
            raise HugoifyAPIError("conflict", context={"status_code": 409})
        self.updates.append((page_id, status))


@pytest.fixture
def site_config(tmp_path) -> HugoifyConfig:
    return HugoifyConfig(
        token="test_token_1234",
        output_root=str(tmp_path / "content"),
        category_map={"Tech": "tech"},
        storage=StorageConfig(type="none"),
    )


@pytest.fixture
def assembler(site_config) -> DocumentAssembler:
    return DocumentAssembler(site_config, MarkdownRenderer(site_config), TemplateWriter())


class TestRunBatch:
    def test_mixed_batch(self, site_config, assembler, page, block, rich_text):
        pages = [
            page(page_id="ok", title="Good", categories=["Tech"]),
            page(page_id="skip", title="Other", categories=["Life"]),
            page(page_id="gone", title="Old", status="ToDelete"),
            page(page_id="broken", title="Broken", categories=["Tech"]),
        ]
        source = FakeSource(
            pages,
            blocks={"ok": [block("paragraph", rich_text=[rich_text("hi")])]},
            fail_blocks={"broken"},
        )
        report = run_batch(source, assembler, site_config)

        assert [r.status for r in report.results] == [
            PageStatus.CONVERTED,
            PageStatus.SKIPPED,
            PageStatus.DELETED,
            PageStatus.FAILED,
        ]
        assert source.updates == [("ok", "Published"), ("gone", "Deleted")]
        assert [r.page_id for r in report.failed] == ["broken"]

    def test_failure_does_not_stop_batch(self, site_config, assembler, page):
        pages = [
            page(page_id="a", title="A", categories=["Tech"]),
            page(page_id="b", title="B", categories=["Tech"]),
        ]
        source = FakeSource(pages, blocks={"a": [{"type": "table", "table": {}, "children": [
            {"type": "paragraph", "paragraph": {}},
        ]}]})
        report = run_batch(source, assembler, site_config)
        assert report.count(PageStatus.FAILED) == 1
        assert report.count(PageStatus.CONVERTED) == 1
        assert source.updates == [("b", "Published")]

    def test_deleted_metric(self, site_config, assembler, page):
        metrics = MagicMock()
        site_config.metrics = metrics
        run_batch(FakeSource([page(status="ToDelete")]), assembler, site_config)
        metrics.increment.assert_any_call("hugoify.pages_deleted_total")

    def test_empty_batch(self, site_config, assembler):
        report = run_batch(FakeSource([]), assembler, site_config)
        assert report.results == []


class TestProcessPage:
    def test_status_update_failure_keeps_conversion(self, site_config, assembler, page):
        source = FakeSource([], fail_updates=True)
        result = process_page(page(categories=["Tech"]), source, assembler, site_config)
        assert result.status is PageStatus.CONVERTED

    def test_delete_update_failure_is_failed(self, site_config, assembler, page):
        source = FakeSource([], fail_updates=True)
        result = process_page(page(status="ToDelete"), source, assembler, site_config)
        assert result.status is PageStatus.FAILED

    def test_configuration_error_propagates(self, site_config, assembler, page):
        source = MagicMock()
        source.get_block_tree.side_effect = HugoifyConfigurationError("bad token")
        with pytest.raises(HugoifyConfigurationError):
            process_page(page(), source, assembler, site_config)


def test_page_status(site_config, page):
    assert page_status(page(status="Ready"), site_config) == "Ready"
    assert page_status({"id": "x"}, site_config) is None


class TestMediaFailureIsolation:
    def test_unexpected_store_error_fails_only_that_page(self, site_config, page, block):
        store = MagicMock()
        store.save.side_effect = [RuntimeError("disk quota"), "/images/ok.png"]
        renderer = MarkdownRenderer(site_config, media_store=store)
        assembler = DocumentAssembler(site_config, renderer, TemplateWriter())
        pages = [
            page(page_id="bad", title="Bad", categories=["Tech"]),
            page(page_id="good", title="Good", categories=["Tech"]),
        ]
        image = block("image", type="external", external={"url": "https://x.example/a.png"})
        source = FakeSource(pages, blocks={"bad": [image], "good": [image]})

        report = run_batch(source, assembler, site_config)

        assert [r.status for r in report.results] == [PageStatus.FAILED, PageStatus.CONVERTED]
        error = report.results[0].error
        assert isinstance(error, HugoifyMediaError)
        assert isinstance(error.cause, RuntimeError)
        assert source.updates == [("good", "Published")]
