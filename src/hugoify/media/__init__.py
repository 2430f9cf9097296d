"""Media externalization: relocate remote assets into a storage backend.

- :class:`LocalMediaStore` -- writes into a directory served by the site.
- :class:`S3MediaStore` -- uploads to an S3-compatible bucket.
- :func:`build_media_store` -- pick a backend from configuration.
"""

from __future__ import annotations

from hugoify.config import HugoifyConfig
from hugoify.errors import HugoifyConfigurationError

from .base import (
    SUPPORTED_MEDIA_TYPES,
    Download,
    MediaStore,
    RemoteMediaStore,
    derive_filename,
    mime_to_extension,
)
from .local import LocalMediaStore


def build_media_store(config: HugoifyConfig) -> MediaStore | None:
    """Create the media store selected by ``config.storage.type``.

    Returns ``None`` for ``"none"``: remote URLs are then kept as-is.

    Raises
    ------
    HugoifyConfigurationError
        If the selected backend is missing required settings or its client
        cannot be created.
    """
    storage = config.storage

    if storage.type == "none":
        return None

    if storage.type == "local":
        if not storage.local_path:
            raise HugoifyConfigurationError(
                "storage.local.path is required for local storage",
                context={"field": "storage.local.path"},
            )
        return LocalMediaStore(
            storage.local_path,
            storage.local_url_prefix,
            timeout_seconds=config.timeout_seconds,
            metrics=config.metrics,
        )

    if storage.type == "s3":
        if not storage.s3_bucket or not storage.s3_url_prefix:
            raise HugoifyConfigurationError(
                "storage.s3.bucket and storage.s3.urlPrefix are required for s3 storage",
                context={"field": "storage.s3"},
            )
        from botocore.exceptions import BotoCoreError

        from .s3 import S3MediaStore

        try:
            return S3MediaStore(
                bucket=storage.s3_bucket,
                path_prefix=storage.s3_path_prefix,
                url_prefix=storage.s3_url_prefix,
                region=storage.s3_region,
                timeout_seconds=config.timeout_seconds,
                metrics=config.metrics,
            )
        except BotoCoreError as exc:
            raise HugoifyConfigurationError(
                f"Cannot create S3 client: {exc}",
                context={"field": "storage.s3"},
                cause=exc,
            ) from exc

    raise HugoifyConfigurationError(
        f"Unsupported storage type: {storage.type!r}",
        context={"field": "storage.type", "value": storage.type},
    )


__all__ = [
    "SUPPORTED_MEDIA_TYPES",
    "Download",
    "LocalMediaStore",
    "MediaStore",
    "RemoteMediaStore",
    "build_media_store",
    "derive_filename",
    "mime_to_extension",
]
