"""Notion block objects to :data:`~hugoify.models.ContentNode` trees.

The Notion API returns blocks as dicts keyed by their type::

    {"id": "...", "type": "quote", "quote": {"rich_text": [...]},
     "children": [...]}

Children are read from ``block[type]["children"]`` or ``block["children"]``
(the source client attaches them at the top level).  Block types without a
Markdown rule become :class:`~hugoify.models.Unsupported` nodes so the
renderer's policy decides what to do with them.
"""

from __future__ import annotations

from collections.abc import Callable as _Callable
from typing import Any

from hugoify.errors import HugoifyRenderError
from hugoify.models import (
    Bookmark,
    BulletItem,
    Callout,
    CalloutIcon,
    Code,
    ColumnList,
    ContentNode,
    Divider,
    Equation,
    File,
    Heading,
    Image,
    NumberedItem,
    Paragraph,
    Quote,
    Table,
    Todo,
    Toggle,
    Unsupported,
    Video,
)

from .rich_text import runs_from_api


def parse_blocks(blocks: Any) -> tuple[ContentNode, ...]:
    """Parse a list of Notion block dicts into content nodes, in order.

    Raises
    ------
    HugoifyRenderError
        If a block or its payload is not a mapping, or a table contains a
        child that is not a ``table_row``.
    """
    if blocks is None:
        return ()
    if not isinstance(blocks, list):
        raise HugoifyRenderError(
            message=f"Expected a list of blocks, got {type(blocks).__name__}",
        )
    return tuple(parse_block(block) for block in blocks)


def parse_block(block: Any) -> ContentNode:
    """Parse a single Notion block dict into a content node."""
    if not isinstance(block, dict):
        raise HugoifyRenderError(
            message=f"Expected a block object, got {type(block).__name__}",
        )

    block_type = block.get("type", "")
    parser = _BLOCK_PARSERS.get(block_type)
    if parser is None:
        return Unsupported(block_type=block_type or "unknown", block_id=block.get("id", ""))
    return parser(block, _payload(block, block_type))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _payload(block: dict, block_type: str) -> dict:
    data = block.get(block_type, {})
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise HugoifyRenderError(
            message=f"Malformed {block_type} block: payload is {type(data).__name__}",
            context={"block_id": block.get("id", ""), "block_type": block_type},
        )
    return data


def _children(block: dict, data: dict) -> tuple[ContentNode, ...]:
    children = data.get("children") or block.get("children")
    return parse_blocks(children) if children else ()


def _hosted_or_external(data: dict) -> tuple[str, str]:
    """Return ``(kind, url)`` for a Notion file object."""
    kind = data.get("type", "")
    sub = data.get(kind)
    url = sub.get("url", "") if isinstance(sub, dict) else ""
    return kind, url or ""


# ---------------------------------------------------------------------------
# Per-type parsers
# ---------------------------------------------------------------------------

def _heading(level: int) -> _Callable[[dict, dict], ContentNode]:
    def parse(block: dict, data: dict) -> ContentNode:
        return Heading(level=level, runs=runs_from_api(data.get("rich_text")))
    return parse


def _paragraph(block: dict, data: dict) -> ContentNode:
    return Paragraph(runs=runs_from_api(data.get("rich_text")), children=_children(block, data))


def _bullet(block: dict, data: dict) -> ContentNode:
    return BulletItem(runs=runs_from_api(data.get("rich_text")), children=_children(block, data))


def _numbered(block: dict, data: dict) -> ContentNode:
    return NumberedItem(runs=runs_from_api(data.get("rich_text")), children=_children(block, data))


def _todo(block: dict, data: dict) -> ContentNode:
    return Todo(runs=runs_from_api(data.get("rich_text")), checked=bool(data.get("checked", False)))


def _toggle(block: dict, data: dict) -> ContentNode:
    return Toggle(runs=runs_from_api(data.get("rich_text")), children=_children(block, data))


def _quote(block: dict, data: dict) -> ContentNode:
    return Quote(runs=runs_from_api(data.get("rich_text")), children=_children(block, data))


def _code(block: dict, data: dict) -> ContentNode:
    return Code(runs=runs_from_api(data.get("rich_text")), language=data.get("language") or "")


def _callout(block: dict, data: dict) -> ContentNode:
    icon = None
    raw_icon = data.get("icon")
    if isinstance(raw_icon, dict):
        kind = raw_icon.get("type", "")
        emoji = raw_icon.get("emoji") if kind == "emoji" else None
        icon = CalloutIcon(kind=kind, emoji=emoji or None)
    return Callout(
        runs=runs_from_api(data.get("rich_text")),
        icon=icon,
        children=_children(block, data),
    )


def _image(block: dict, data: dict) -> ContentNode:
    file_obj = data.get("file")
    external = data.get("external")
    return Image(
        file_url=(file_obj.get("url") or "") if isinstance(file_obj, dict) else "",
        external_url=(external.get("url") or "") if isinstance(external, dict) else "",
        caption=runs_from_api(data.get("caption")),
    )


def _video(block: dict, data: dict) -> ContentNode:
    kind, url = _hosted_or_external(data)
    return Video(url=url, kind=kind or "external")


def _file(block: dict, data: dict) -> ContentNode:
    kind, url = _hosted_or_external(data)
    return File(url=url, kind=kind or "external")


def _bookmark(block: dict, data: dict) -> ContentNode:
    return Bookmark(url=data.get("url") or "", caption=runs_from_api(data.get("caption")))


def _equation(block: dict, data: dict) -> ContentNode:
    return Equation(expression=data.get("expression") or "")


def _divider(block: dict, data: dict) -> ContentNode:
    return Divider()


def _table(block: dict, data: dict) -> ContentNode:
    children = data.get("children") or block.get("children") or []
    rows = []
    for child in children:
        if not isinstance(child, dict) or child.get("type") != "table_row":
            raise HugoifyRenderError(
                message="Table contains a child that is not a table_row",
                context={
                    "block_id": block.get("id", ""),
                    "block_type": "table",
                    "child_type": child.get("type") if isinstance(child, dict) else None,
                },
            )
        cells = _payload(child, "table_row").get("cells") or []
        rows.append(tuple(runs_from_api(cell) for cell in cells))
    return Table(rows=tuple(rows))


def _column_list(block: dict, data: dict) -> ContentNode:
    children = data.get("children") or block.get("children") or []
    columns = []
    for column in children:
        if not isinstance(column, dict) or column.get("type") != "column":
            continue
        columns.append(_children(column, _payload(column, "column")))
    return ColumnList(columns=tuple(columns))


_BlockParser = _Callable[[dict, dict], ContentNode]

_BLOCK_PARSERS: dict[str, _BlockParser] = {
    "heading_1": _heading(1),
    "heading_2": _heading(2),
    "heading_3": _heading(3),
    "paragraph": _paragraph,
    "bulleted_list_item": _bullet,
    "numbered_list_item": _numbered,
    "to_do": _todo,
    "toggle": _toggle,
    "quote": _quote,
    "code": _code,
    "callout": _callout,
    "image": _image,
    "video": _video,
    "file": _file,
    "bookmark": _bookmark,
    "equation": _equation,
    "divider": _divider,
    "table": _table,
    "column_list": _column_list,
}

SUPPORTED_BLOCK_TYPES: frozenset[str] = frozenset(_BLOCK_PARSERS)
"""Notion block types with a Markdown rule."""
