"""Golden fixture tests.

A realistic Notion page and block tree (as returned by the API, children
already attached) is converted end to end and the written document is
compared with the expected Markdown body in ``fixtures/``.
"""
from __future__ import annotations

import json
from pathlib import Path

import pytest

from hugoify.assembler import DocumentAssembler
from hugoify.config import HugoifyConfig, StorageConfig
from hugoify.converter.renderer import MarkdownRenderer
from hugoify.models import PageStatus
from hugoify.template import TemplateWriter

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def article() -> dict:
    return json.loads((FIXTURES_DIR / "article.json").read_text(encoding="utf-8"))


@pytest.fixture
def golden_config(tmp_path) -> HugoifyConfig:
    return HugoifyConfig(
        token="test_token_1234",
        output_root=str(tmp_path / "content"),
        category_map={"技术": "tech"},
        storage=StorageConfig(type="none"),
    )


def test_article_body(article, golden_config):
    assembler = DocumentAssembler(golden_config, MarkdownRenderer(golden_config), TemplateWriter())
    result = assembler.convert(article["page"], article["blocks"])

    assert result.status is PageStatus.CONVERTED
    assert result.path == Path(golden_config.output_root) / "tech" / "yong-hugo-da-jian-bo-ke.md"

    expected_body = (FIXTURES_DIR / "article.md").read_text(encoding="utf-8")
    text = result.path.read_text(encoding="utf-8")
    front_matter, body = text.split("---\n\n", 1)
    assert body == expected_body

    assert 'title: "用 Hugo 搭建博客"' in front_matter
    assert 'description: "From Notion to a static site"' in front_matter
    assert "date: 2024-05-06T07:08:00Z" in front_matter
    assert "lastmod: 2024-05-07T09:30:00Z" in front_matter
    assert 'image: "https://images.example.com/cover.jpg"' in front_matter
    assert 'author: "Lin"' in front_matter
    assert "draft: false" in front_matter
    assert "toc: true" in front_matter
    assert "weight: 3" in front_matter
    assert 'tags: ["hugo", "notion"]' in front_matter
    assert 'categories: ["技术"]' in front_matter


def test_article_with_comment_policy(article, golden_config):
    golden_config.unsupported_block_policy = "comment"
    renderer = MarkdownRenderer(golden_config)
    assembler = DocumentAssembler(golden_config, renderer, TemplateWriter())
    doc = assembler.assemble(article["page"], article["blocks"])
    assert doc.body.endswith("$$\n\n<!-- notion:child_page -->\n\n")
