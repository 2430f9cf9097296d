"""S3-compatible object-storage media store.

Objects are stored flat under ``{path_prefix}/{filename}``; the page
context is ignored, so two pages referencing the same file name share an
object.  The returned URL is ``{url_prefix}/{filename}``.
"""

from __future__ import annotations

import logging
import posixpath
from typing import Any

import boto3
import httpx
from botocore.exceptions import BotoCoreError, ClientError

from hugoify.errors import HugoifyMediaError
from hugoify.models import MediaContext
from hugoify.observability import NoopMetricsHook, get_logger, log_event

from .base import RemoteMediaStore, derive_filename

log = get_logger("hugoify.media.s3")


class S3MediaStore(RemoteMediaStore):
    """Download assets and upload them to an S3 bucket.

    Parameters
    ----------
    bucket:
        Target bucket name.
    path_prefix:
        Key prefix (``"images/blog"``); leading and trailing slashes are
        ignored.
    url_prefix:
        Public URL of the prefix (CDN or bucket website endpoint).
    region:
        AWS region used when creating the default client.
    s3_client:
        Optional pre-built boto3 S3 client.
    client, timeout_seconds:
        See :class:`~hugoify.media.base.RemoteMediaStore`.
    metrics:
        Optional metrics hook.
    """

    backend = "s3"

    def __init__(
        self,
        bucket: str,
        path_prefix: str,
        url_prefix: str,
        region: str | None = None,
        s3_client: Any | None = None,
        client: httpx.Client | None = None,
        timeout_seconds: float = 30.0,
        metrics: object | None = None,
    ) -> None:
        super().__init__(client=client, timeout_seconds=timeout_seconds)
        self._bucket = bucket
        self._path_prefix = path_prefix.strip("/")
        self._url_prefix = url_prefix.rstrip("/")
        self._s3 = s3_client or boto3.client("s3", region_name=region or None)
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    def object_key(self, filename: str) -> str:
        """Bucket key for *filename*."""
        if not self._path_prefix:
            return filename
        return posixpath.join(self._path_prefix, filename)

    def save(self, url: str, context: MediaContext | None = None) -> str:
        download = self.download(url)
        filename = derive_filename(download)
        key = self.object_key(filename)

        extra: dict[str, Any] = {}
        if download.content_type:
            extra["ContentType"] = download.content_type
        try:
            self._s3.put_object(
                Bucket=self._bucket,
                Key=key,
                Body=download.content,
                **extra,
            )
        except (BotoCoreError, ClientError) as exc:
            raise HugoifyMediaError(
                f"Failed to upload {url} to s3://{self._bucket}/{key}: {exc}",
                context={"url": url, "key": key, "bucket": self._bucket},
                cause=exc,
            ) from exc

        remote_url = f"{self._url_prefix}/{filename}"
        self._metrics.increment("hugoify.media_saved_total", tags={"backend": self.backend})
        log_event(log, logging.DEBUG, "media saved", url=url, key=key, local_url=remote_url)
        return remote_url
