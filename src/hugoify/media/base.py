"""Media store contract and the download step shared by every backend.

A media store takes a remote asset URL, persists the bytes somewhere the
site can serve them from, and returns the URL to use in the Markdown
instead.  Backends differ only in where the bytes go; downloading and
naming live here.
"""

from __future__ import annotations

import hashlib
import posixpath
import re
from dataclasses import dataclass
from typing import Protocol, runtime_checkable
from urllib.parse import unquote, urlparse

import httpx

from hugoify.errors import HugoifyMediaError
from hugoify.models import MediaContext

SUPPORTED_MEDIA_TYPES: frozenset[str] = frozenset({
    "image/jpeg",
    "image/png",
    "image/gif",
    "image/webp",
    "video/mp4",
    "video/webm",
    "audio/mpeg",
    "audio/wav",
    "application/pdf",
})
"""MIME types every backend advertises.  Callers may use this to pre-filter;
:meth:`MediaStore.save` itself does not enforce it."""

MIME_EXTENSIONS: dict[str, str] = {
    "image/jpeg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
    "video/mp4": ".mp4",
    "application/pdf": ".pdf",
}

DEFAULT_EXTENSION = ".bin"


@runtime_checkable
class MediaStore(Protocol):
    """Contract shared by the filesystem and object-storage backends."""

    def save(self, url: str, context: MediaContext | None = None) -> str:
        """Persist the asset at *url* and return its new URL.

        Raises
        ------
        HugoifyMediaError
            If the download or the write fails.
        """
        ...

    def supported_types(self) -> frozenset[str]:
        """MIME types this backend accepts."""
        ...


@dataclass(frozen=True)
class Download:
    """A fetched asset."""

    url: str
    content: bytes
    content_type: str


def mime_to_extension(content_type: str) -> str:
    """Map a ``Content-Type`` value to a file extension (``.bin`` if unknown)."""
    mime = content_type.split(";", 1)[0].strip().lower()
    return MIME_EXTENSIONS.get(mime, DEFAULT_EXTENSION)


_UNSAFE_CHARS_RE = re.compile(r"[\\\x00-\x1f\x7f]")


def filename_from_url(url: str) -> str:
    """Last segment of the URL path, percent-decoded, without query string.

    The path is decoded before it is split, so an encoded ``%2F`` cannot
    smuggle a directory into the name.  Backslashes and control characters
    become ``_`` and leading dots are dropped, which also rules out ``.``
    and ``..``.
    """
    name = posixpath.basename(unquote(urlparse(url).path))
    name = _UNSAFE_CHARS_RE.sub("_", name)
    return name.lstrip(".")


def derive_filename(download: Download) -> str:
    """Choose the stored filename for *download*.

    The URL's own filename is kept when it has an extension.  Otherwise a
    name is synthesized from the content hash and the declared content
    type, so the same bytes always map to the same file.
    """
    filename = filename_from_url(download.url)
    if filename and posixpath.splitext(filename)[1]:
        return filename
    digest = hashlib.md5(download.content).hexdigest()
    stem = filename or "media"
    return f"{stem}-{digest}{mime_to_extension(download.content_type)}"


class RemoteMediaStore:
    """Base class for stores that download the asset over HTTP first.

    Parameters
    ----------
    client:
        Optional :class:`httpx.Client`; one is created (and owned) when
        omitted.
    timeout_seconds:
        Timeout for the owned client.
    """

    backend = "remote"

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout_seconds: float = 30.0,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout_seconds),
            follow_redirects=True,
        )

    def supported_types(self) -> frozenset[str]:
        return SUPPORTED_MEDIA_TYPES

    def download(self, url: str) -> Download:
        """Fetch *url*.

        Raises
        ------
        HugoifyMediaError
            On transport errors or non-2xx responses.
        """
        try:
            response = self._client.get(url)
        except httpx.HTTPError as exc:
            raise HugoifyMediaError(
                f"Failed to download {url}: {exc}",
                context={"url": url},
                cause=exc,
            ) from exc

        if not 200 <= response.status_code < 300:
            raise HugoifyMediaError(
                f"Failed to download {url}: HTTP {response.status_code}",
                context={"url": url, "status_code": response.status_code},
            )

        return Download(
            url=url,
            content=response.content,
            content_type=response.headers.get("content-type", ""),
        )

    def close(self) -> None:
        """Close the HTTP client if this store created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> RemoteMediaStore:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
