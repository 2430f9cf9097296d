"""Shared test fixtures for the hugoify test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock

import pytest

from hugoify.config import HugoifyConfig
from hugoify.converter.renderer import MarkdownRenderer
from hugoify.media.base import MediaStore


def _rich_text(content: str, link: str | None = None, **annotations: bool) -> dict[str, Any]:
    return {
        "type": "text",
        "text": {"content": content, "link": {"url": link} if link else None},
        "annotations": {
            "bold": False,
            "italic": False,
            "strikethrough": False,
            "underline": False,
            "code": False,
            "color": "default",
            **annotations,
        },
        "plain_text": content,
        "href": link,
    }


def _block(block_type: str, block_id: str = "", children: list | None = None, **payload: Any) -> dict[str, Any]:
    block: dict[str, Any] = {
        "object": "block",
        "id": block_id or f"{block_type}-id",
        "type": block_type,
        block_type: payload,
        "has_children": bool(children),
    }
    if children is not None:
        block["children"] = children
    return block


def _page(
    page_id: str = "page-1",
    title: str = "Hello World",
    categories: list[str] | None = None,
    tags: list[str] | None = None,
    status: str = "Ready",
    **extra_props: Any,
) -> dict[str, Any]:
    properties: dict[str, Any] = {
        "Name": {"type": "title", "title": [_rich_text(title)] if title else []},
        "Status": {"type": "status", "status": {"name": status}},
        "Tags": {
            "type": "multi_select",
            "multi_select": [{"name": t} for t in (tags or [])],
        },
    }
    if categories is not None:
        properties["Categories"] = {
            "type": "multi_select",
            "multi_select": [{"name": c} for c in categories],
        }
    properties.update(extra_props)
    return {
        "object": "page",
        "id": page_id,
        "created_time": "2024-03-01T08:30:00.000Z",
        "last_edited_time": "2024-03-02T10:00:00.000Z",
        "created_by": {"object": "user", "id": "u1", "name": "Ada"},
        "cover": None,
        "properties": properties,
    }


@pytest.fixture
def rich_text():
    """Factory for Notion rich_text objects."""
    return _rich_text


@pytest.fixture
def block():
    """Factory for Notion block objects."""
    return _block


@pytest.fixture
def page():
    """Factory for Notion page objects."""
    return _page


@pytest.fixture
def config() -> HugoifyConfig:
    """Default test configuration with a dummy token."""
    return HugoifyConfig(token="test_token_1234", category_map={"Tech": "tech"})


@pytest.fixture
def renderer(config: HugoifyConfig) -> MarkdownRenderer:
    """Renderer without a media store: URLs pass through unchanged."""
    return MarkdownRenderer(config)


@pytest.fixture
def media_store() -> MagicMock:
    """Media store double returning a fixed CDN URL."""
    store = MagicMock(spec=MediaStore)
    store.save.return_value = "https://cdn/x.png"
    return store
