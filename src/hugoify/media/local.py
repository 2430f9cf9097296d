"""Filesystem media store.

Assets are written under ``save_path``, nested by category and article when
the page context provides both::

    {save_path}/{category}/{article}/{filename}

and the returned URL is ``{url_prefix}/{relative path}`` with forward
slashes regardless of the host OS.
"""

from __future__ import annotations

import logging
from pathlib import Path, PurePath

import httpx

from hugoify.errors import HugoifyMediaError
from hugoify.models import MediaContext
from hugoify.observability import NoopMetricsHook, get_logger, log_event

from .base import RemoteMediaStore, derive_filename

log = get_logger("hugoify.media.local")


class LocalMediaStore(RemoteMediaStore):
    """Download assets into a local directory served by the site.

    Parameters
    ----------
    save_path:
        Root directory, typically inside Hugo's ``static/``.
    url_prefix:
        Public URL that maps to *save_path* (e.g. ``"/images"``).
    client, timeout_seconds:
        See :class:`~hugoify.media.base.RemoteMediaStore`.
    metrics:
        Optional metrics hook.
    """

    backend = "local"

    def __init__(
        self,
        save_path: str | Path,
        url_prefix: str,
        client: httpx.Client | None = None,
        timeout_seconds: float = 30.0,
        metrics: object | None = None,
    ) -> None:
        super().__init__(client=client, timeout_seconds=timeout_seconds)
        self._save_path = Path(save_path)
        self._url_prefix = url_prefix.rstrip("/")
        self._metrics = metrics if metrics is not None else NoopMetricsHook()

    def relative_path(self, filename: str, context: MediaContext | None) -> PurePath:
        """Path of *filename* relative to the save root."""
        if context is not None and context.category and context.article:
            return PurePath(context.category, context.article, filename)
        return PurePath(filename)

    def save(self, url: str, context: MediaContext | None = None) -> str:
        download = self.download(url)
        relative = self.relative_path(derive_filename(download), context)
        full_path = self._save_path / relative

        try:
            if not full_path.resolve().is_relative_to(self._save_path.resolve()):
                raise HugoifyMediaError(
                    f"Refusing to write {full_path}: outside {self._save_path}",
                    context={"url": url, "path": str(full_path)},
                )
            full_path.parent.mkdir(parents=True, exist_ok=True)
            full_path.write_bytes(download.content)
        except (OSError, ValueError) as exc:
            raise HugoifyMediaError(
                f"Failed to write {full_path}: {exc}",
                context={"url": url, "path": str(full_path)},
                cause=exc,
            ) from exc

        local_url = f"{self._url_prefix}/{relative.as_posix()}"
        self._metrics.increment("hugoify.media_saved_total", tags={"backend": self.backend})
        log_event(log, logging.DEBUG, "media saved", url=url, path=str(full_path), local_url=local_url)
        return local_url
