"""Configuration for hugoify.

:class:`HugoifyConfig` captures every knob of a conversion run.  It is a
plain dataclass validated in ``__post_init__``; invalid values raise
:class:`~hugoify.errors.HugoifyConfigurationError` so that a bad
configuration stops the process before any page is touched.

:func:`load_config` reads the ``notion.config.json`` file format.  Both the
camelCase keys (``databaseID``, ``urlPrefix``, ``categoryMap``) and the
snake_case keys (``database_id``, ``url_prefix``, ``category_map``) are
accepted.
"""

from __future__ import annotations

import dataclasses
import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

from hugoify.errors import HugoifyConfigurationError

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_CONFIG_FILE = "notion.config.json"

TOKEN_ENV_VAR = "NOTION_SECRET"

UNCATEGORIZED = "uncategorized"
"""Output directory for pages without a category property."""

_STORAGE_TYPES = frozenset({"local", "s3", "none"})

_BLOCK_POLICIES = frozenset({"skip", "comment", "raise"})


# ---------------------------------------------------------------------------
# Nested sections
# ---------------------------------------------------------------------------

@dataclass
class StorageConfig:
    """Where externalized media is stored.

    Parameters
    ----------
    type:
        ``"local"`` (filesystem), ``"s3"`` (object storage) or ``"none"``
        (keep remote URLs untouched).
    local_path, local_url_prefix:
        Root directory for the local backend and the URL prefix that maps to
        it (e.g. ``"static/images"`` and ``"/images"``).
    s3_bucket, s3_region, s3_path_prefix, s3_url_prefix:
        Object-storage bucket, region, key prefix and public URL prefix.
    """

    type: str = "local"
    local_path: str = "static/images"
    local_url_prefix: str = "/images"
    s3_bucket: str = ""
    s3_region: str = ""
    s3_path_prefix: str = ""
    s3_url_prefix: str = ""


@dataclass
class StatusNames:
    """Values of the Notion status property that drive publishing."""

    draft: str = "Draft"
    ready: str = "Ready"
    published: str = "Published"
    to_delete: str = "ToDelete"
    deleted: str = "Deleted"


@dataclass
class PropertyNames:
    """Names of the Notion database properties read by the metadata
    processor.  ``author`` is optional; when unset the page creator's name
    is used."""

    title: str = "Name"
    category: str = "Category"
    categories: str = "Categories"
    tags: str = "Tags"
    status: str = "Status"
    description: str = "Description"
    meta_title: str = "Meta Title"
    slug: str = "Slug"
    toc: str = "Toc"
    comments: str = "Comments"
    weight: str = "Weight"
    author: str | None = None


# ---------------------------------------------------------------------------
# Configuration dataclass
# ---------------------------------------------------------------------------

@dataclass
class HugoifyConfig:
    """Complete configuration for a conversion run.

    Parameters
    ----------
    token:
        Notion integration token.  Falls back to ``$NOTION_SECRET``.
        Never logged.
    database_id:
        Notion database holding the articles.
    output_root:
        Hugo content folder; documents land in
        ``{output_root}/{category_dir}/{slug}.md``.
    template_path:
        Jinja2 archetype template.  When ``None`` the built-in Hugo front
        matter template is used.
    category_map:
        Notion category name to output directory name.  A page with any
        unmapped category is skipped.
    use_shortcodes:
        Emit Hugo shortcodes for PDF attachments instead of ``<embed>``.
    escape_markdown:
        Escape Markdown-significant characters in rich text.  Off by default
        so output matches what authors typed.
    externalize_attachments:
        Also route Notion-hosted video and file URLs through the media
        store (images always are).
    unsupported_block_policy:
        How to render blocks with no Markdown rule.

        * ``"skip"`` -- omit silently.
        * ``"comment"`` -- emit ``<!-- notion:<type> -->``.
        * ``"raise"`` -- raise :class:`HugoifyUnsupportedBlockError`.
    default_author:
        Author used when neither an author property nor the page creator's
        name is available.
    retry_max_attempts, retry_base_delay, retry_max_delay, retry_jitter:
        Retry policy of the Notion API transport.
    timeout_seconds:
        HTTP timeout for Notion API requests and media downloads.
    metrics:
        Optional :class:`~hugoify.observability.MetricsHook`.
    """

    # -- Notion ------------------------------------------------------------
    token: str = field(default_factory=lambda: os.environ.get(TOKEN_ENV_VAR, ""))

    database_id: str = ""

    notion_version: str = "2022-06-28"

    base_url: str = "https://api.notion.com/v1"

    status: StatusNames = field(default_factory=StatusNames)

    properties: PropertyNames = field(default_factory=PropertyNames)

    category_map: dict[str, str] = field(default_factory=dict)

    # -- Output ------------------------------------------------------------
    output_root: str = "content/posts"

    template_path: str | None = None

    storage: StorageConfig = field(default_factory=StorageConfig)

    # -- Rendering ---------------------------------------------------------
    use_shortcodes: bool = True

    escape_markdown: bool = False

    externalize_attachments: bool = False

    unsupported_block_policy: Literal["skip", "comment", "raise"] = "skip"

    default_author: str = ""

    # -- HTTP --------------------------------------------------------------
    retry_max_attempts: int = 3

    retry_base_delay: float = 1.0

    retry_max_delay: float = 30.0

    retry_jitter: bool = True

    timeout_seconds: float = 30.0

    # -- Observability -----------------------------------------------------
    metrics: Any | None = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        from urllib.parse import urlparse

        parsed = urlparse(self.base_url)
        if parsed.scheme == "http" and parsed.hostname not in (
            "localhost",
            "127.0.0.1",
            "::1",
        ):
            raise HugoifyConfigurationError(
                f"base_url uses insecure HTTP for non-local host '{parsed.hostname}'",
                context={"field": "base_url", "value": self.base_url},
            )

        if self.unsupported_block_policy not in _BLOCK_POLICIES:
            raise HugoifyConfigurationError(
                f"unsupported_block_policy must be one of {sorted(_BLOCK_POLICIES)}, "
                f"got {self.unsupported_block_policy!r}",
                context={"field": "unsupported_block_policy"},
            )
        if self.storage.type not in _STORAGE_TYPES:
            raise HugoifyConfigurationError(
                f"Unsupported storage type: {self.storage.type!r}",
                context={"field": "storage.type", "value": self.storage.type},
            )
        if not self.output_root:
            raise HugoifyConfigurationError(
                "output_root must not be empty",
                context={"field": "output_root"},
            )
        if self.retry_max_attempts < 1:
            raise HugoifyConfigurationError(
                f"retry_max_attempts must be >= 1, got {self.retry_max_attempts}",
                context={"field": "retry_max_attempts"},
            )
        if self.retry_base_delay < 0 or self.retry_max_delay < 0:
            raise HugoifyConfigurationError(
                "retry delays must be >= 0",
                context={"field": "retry_base_delay"},
            )
        if self.timeout_seconds <= 0:
            raise HugoifyConfigurationError(
                f"timeout_seconds must be > 0, got {self.timeout_seconds}",
                context={"field": "timeout_seconds"},
            )

    def __repr__(self) -> str:
        """Mask the token to prevent accidental credential leakage."""
        parts: list[str] = []
        for f in dataclasses.fields(self):
            val = getattr(self, f.name)
            if f.name == "token":
                masked = f"...{val[-4:]}" if len(val) >= 8 else "****"
                parts.append(f"token='{masked}'")
            else:
                parts.append(f"{f.name}={val!r}")
        return f"HugoifyConfig({', '.join(parts)})"


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def _pick(data: dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first key of *keys* present in *data*."""
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def _section(data: dict[str, Any], key: str) -> dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def config_from_dict(data: dict[str, Any], **overrides: Any) -> HugoifyConfig:
    """Build a :class:`HugoifyConfig` from a parsed ``notion.config.json``.

    Keyword *overrides* win over values from *data*.
    """
    content = _section(data, "content")
    storage = _section(data, "storage")
    local = _section(storage, "local")
    s3 = _section(storage, "s3")
    notion = _section(data, "notion")
    status = _section(notion, "status")
    props = _section(notion, "properties")

    status_defaults = StatusNames()
    prop_defaults = PropertyNames()

    kwargs: dict[str, Any] = {
        "database_id": _pick(data, "databaseID", "databaseId", "database_id", default=""),
        "output_root": _pick(content, "folder", default="content/posts"),
        "template_path": _pick(content, "archetype"),
        "storage": StorageConfig(
            type=_pick(storage, "type", default="local"),
            local_path=_pick(local, "path", default="static/images"),
            local_url_prefix=_pick(local, "urlPrefix", "url_prefix", default="/images"),
            s3_bucket=_pick(s3, "bucket", default=""),
            s3_region=_pick(s3, "region", default=""),
            s3_path_prefix=_pick(s3, "pathPrefix", "path_prefix", default=""),
            s3_url_prefix=_pick(s3, "urlPrefix", "url_prefix", default=""),
        ),
        "status": StatusNames(
            draft=_pick(status, "draft", default=status_defaults.draft),
            ready=_pick(status, "ready", default=status_defaults.ready),
            published=_pick(status, "published", default=status_defaults.published),
            to_delete=_pick(status, "toDelete", "to_delete", default=status_defaults.to_delete),
            deleted=_pick(status, "deleted", default=status_defaults.deleted),
        ),
        "properties": PropertyNames(
            title=_pick(props, "title", default=prop_defaults.title),
            category=_pick(props, "category", default=prop_defaults.category),
            categories=_pick(props, "categories", default=prop_defaults.categories),
            tags=_pick(props, "tags", default=prop_defaults.tags),
            status=_pick(props, "status", default=prop_defaults.status),
            description=_pick(props, "description", default=prop_defaults.description),
            meta_title=_pick(props, "metaTitle", "meta_title", default=prop_defaults.meta_title),
            slug=_pick(props, "slug", default=prop_defaults.slug),
            toc=_pick(props, "toc", default=prop_defaults.toc),
            comments=_pick(props, "comments", default=prop_defaults.comments),
            weight=_pick(props, "weight", default=prop_defaults.weight),
            author=_pick(props, "author") or None,
        ),
        "category_map": dict(_pick(notion, "categoryMap", "category_map", default={})),
    }

    rendering = _section(data, "rendering")
    for key, aliases in (
        ("use_shortcodes", ("useShortcodes", "use_shortcodes")),
        ("escape_markdown", ("escapeMarkdown", "escape_markdown")),
        ("externalize_attachments", ("externalizeAttachments", "externalize_attachments")),
        ("unsupported_block_policy", ("unsupportedBlockPolicy", "unsupported_block_policy")),
        ("default_author", ("defaultAuthor", "default_author")),
    ):
        value = _pick(rendering, *aliases)
        if value is not None:
            kwargs[key] = value

    kwargs.update(overrides)
    try:
        return HugoifyConfig(**kwargs)
    except TypeError as exc:
        raise HugoifyConfigurationError(
            f"Invalid configuration value: {exc}", cause=exc,
        ) from exc


def load_config(path: str | os.PathLike[str], **overrides: Any) -> HugoifyConfig:
    """Read and validate a JSON configuration file.

    Raises
    ------
    HugoifyConfigurationError
        If the file cannot be read, is not valid JSON, or holds invalid
        values.
    """
    config_path = Path(path)
    try:
        raw = config_path.read_text(encoding="utf-8")
    except OSError as exc:
        raise HugoifyConfigurationError(
            f"Cannot read configuration file {config_path}: {exc}",
            context={"path": str(config_path)},
            cause=exc,
        ) from exc

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise HugoifyConfigurationError(
            f"Configuration file {config_path} is not valid JSON: {exc}",
            context={"path": str(config_path)},
            cause=exc,
        ) from exc

    if not isinstance(data, dict):
        raise HugoifyConfigurationError(
            f"Configuration file {config_path} must contain a JSON object",
            context={"path": str(config_path)},
        )
    return config_from_dict(data, **overrides)
