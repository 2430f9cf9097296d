"""Page properties to :class:`~hugoify.models.PageMetadata`.

Notion properties arrive as a name-keyed map of typed values::

    {"Name": {"type": "title", "title": [...]},
     "Categories": {"type": "multi_select", "multi_select": [{"name": "Tech"}]},
     "Status": {"type": "status", "status": {"name": "Ready"}}}

A property that is missing, or present with an unexpected type, is treated
as absent.  The only decision that changes control flow is category
routing: :func:`derive_metadata` returns :class:`~hugoify.models.Skip` when
any category on the page has no entry in the category map.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any

from hugoify.config import HugoifyConfig
from hugoify.errors import HugoifyMetadataError
from hugoify.models import MetadataDecision, PageMetadata, Proceed, Skip

from .rich_text import plain_text, runs_from_api


def derive_metadata(page: Any, config: HugoifyConfig) -> MetadataDecision:
    """Derive front-matter metadata for *page*.

    Returns
    -------
    Proceed | Skip
        ``Skip`` when a category is unmapped; nothing else produces it.

    Raises
    ------
    HugoifyMetadataError
        If *page* is not a mapping with an ``id``.
    """
    if not isinstance(page, Mapping):
        raise HugoifyMetadataError(
            f"Expected a page object, got {type(page).__name__}",
            context={"page_type": type(page).__name__},
        )
    page_id = page.get("id")
    if not page_id:
        raise HugoifyMetadataError("Page object has no id")

    props = page.get("properties")
    if not isinstance(props, Mapping):
        props = {}
    names = config.properties

    categories = category_names(props, names.category, names.categories)
    resolution = resolve_categories(categories, config.category_map)
    if isinstance(resolution, Skip):
        return Skip(page_id=page_id, reason=resolution.reason, unmapped=resolution.unmapped)

    status = select_name(props.get(names.status), "status")
    metadata = PageMetadata(
        title=rich_text_value(props.get(names.title), "title"),
        date=format_timestamp(page.get("created_time")),
        lastmod=format_timestamp(page.get("last_edited_time")),
        author=_author(page, props, config),
        cover=file_url(page.get("cover")),
        description=rich_text_value(props.get(names.description), "rich_text"),
        meta_title=rich_text_value(props.get(names.meta_title), "rich_text"),
        slug=rich_text_value(props.get(names.slug), "rich_text"),
        draft=status is not None and status == config.status.draft,
        toc=checkbox_value(props.get(names.toc)),
        comments=checkbox_value(props.get(names.comments)),
        weight=number_value(props.get(names.weight)),
        categories=list(categories),
        category_dir=resolution,
        tags=multi_select_names(props.get(names.tags)),
    )
    return Proceed(metadata)


def page_title(page: Any, config: HugoifyConfig) -> str:
    """Best-effort title of *page* for logs and reports; never raises."""
    if not isinstance(page, Mapping):
        return ""
    props = page.get("properties")
    if not isinstance(props, Mapping):
        return ""
    return rich_text_value(props.get(config.properties.title), "title")


def resolve_categories(categories: list[str], mapping: Mapping[str, str]) -> str | None | Skip:
    """Map category names to the page's output directory.

    Returns the mapped directory of the first category, ``None`` when there
    are no categories, or :class:`Skip` listing every unmapped name.  Never
    returns a partial mapping.
    """
    unmapped = tuple(name for name in categories if name not in mapping)
    if unmapped:
        return Skip(
            page_id="",
            reason=f"category not mapped: {', '.join(unmapped)}",
            unmapped=unmapped,
        )
    if not categories:
        return None
    return mapping[categories[0]]


# ---------------------------------------------------------------------------
# Property readers
# ---------------------------------------------------------------------------

def _typed(prop: Any, expected: str) -> Any:
    """Return ``prop[expected]`` if *prop* is a property of that type."""
    if not isinstance(prop, Mapping):
        return None
    prop_type = prop.get("type")
    if prop_type is not None and prop_type != expected:
        return None
    return prop.get(expected)


def category_names(props: Mapping[str, Any], single_name: str, multi_name: str) -> list[str]:
    """Read categories from a single-select property, else a multi-select one."""
    single = props.get(single_name)
    if isinstance(single, Mapping) and single.get("type", "select") == "select" and "select" in single:
        name = select_name(single, "select")
        return [name] if name else []
    return multi_select_names(props.get(multi_name))


def select_name(prop: Any, kind: str = "select") -> str | None:
    """Name of the selected option of a select or status property."""
    value = _typed(prop, kind)
    if not isinstance(value, Mapping):
        return None
    name = value.get("name")
    return name if isinstance(name, str) else None


def multi_select_names(prop: Any) -> list[str]:
    """Option names of a multi-select property, in order."""
    value = _typed(prop, "multi_select")
    if not isinstance(value, list):
        return []
    return [
        opt["name"] for opt in value
        if isinstance(opt, Mapping) and isinstance(opt.get("name"), str) and opt["name"]
    ]


def rich_text_value(prop: Any, kind: str) -> str:
    """Plain text of a ``title`` or ``rich_text`` property."""
    return plain_text(runs_from_api(_typed(prop, kind)))


def checkbox_value(prop: Any) -> bool:
    return _typed(prop, "checkbox") is True


def number_value(prop: Any) -> int:
    value = _typed(prop, "number")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def file_url(obj: Any) -> str:
    """URL of a Notion file object (cover, icon): external or hosted."""
    if not isinstance(obj, Mapping):
        return ""
    sub = obj.get(obj.get("type", ""))
    if isinstance(sub, Mapping):
        return sub.get("url") or ""
    return ""


def format_timestamp(value: Any) -> str:
    """Normalise a Notion ISO timestamp to RFC 3339 in UTC.

    Unparsable values are returned unchanged; missing ones become ``""``.
    """
    if not isinstance(value, str) or not value:
        return ""
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _author(page: Mapping[str, Any], props: Mapping[str, Any], config: HugoifyConfig) -> str:
    prop_name = config.properties.author
    if prop_name:
        prop = props.get(prop_name)
        people = _typed(prop, "people")
        if isinstance(people, list):
            names = [p.get("name") for p in people if isinstance(p, Mapping) and p.get("name")]
            if names:
                return ", ".join(names)
        text = rich_text_value(prop, "rich_text")
        if text:
            return text

    created_by = page.get("created_by")
    if isinstance(created_by, Mapping) and created_by.get("name"):
        return str(created_by["name"])
    return config.default_author
