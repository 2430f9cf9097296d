"""HTTP transport for the Notion API.

Request lifecycle:

1. Send the request with auth and version headers.
2. On ``2xx`` -- return the parsed JSON body.
3. On ``429`` / ``5xx`` / network error -- back off and retry.
4. On any other ``4xx`` -- raise :class:`HugoifyAPIError` immediately.
5. When attempts run out -- raise :class:`HugoifyRetryExhaustedError`.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from typing import Any

import httpx

from hugoify.config import HugoifyConfig
from hugoify.errors import (
    HugoifyAPIError,
    HugoifyNetworkError,
    HugoifyRetryExhaustedError,
)
from hugoify.observability import NoopMetricsHook, get_logger, log_event

from .retries import RETRYABLE_STATUSES, compute_backoff, should_retry

log = get_logger("hugoify.transport")

PAGE_SIZE = 100


def _parse_retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("retry-after")
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _api_error(response: httpx.Response, method: str, path: str) -> HugoifyAPIError:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    notion_message = body.get("message", response.text[:500])
    return HugoifyAPIError(
        f"Notion API error {response.status_code} on {method} {path}: {notion_message}",
        context={
            "status_code": response.status_code,
            "notion_code": body.get("code", ""),
            "path": path,
        },
    )


class NotionTransport:
    """Synchronous Notion API transport with retries.

    Parameters
    ----------
    config:
        Supplies the token, API version, base URL, timeout and retry policy.
    transport:
        Optional httpx transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        config: HugoifyConfig,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self._config = config
        self._metrics = config.metrics if config.metrics is not None else NoopMetricsHook()
        self._client = httpx.Client(
            base_url=config.base_url,
            headers={
                "Authorization": f"Bearer {config.token}",
                "Notion-Version": config.notion_version,
                "Content-Type": "application/json",
            },
            timeout=httpx.Timeout(config.timeout_seconds),
            transport=transport,
        )

    def request(self, method: str, path: str, **kwargs: Any) -> dict:
        """Execute a request and return the parsed JSON body.

        Raises
        ------
        HugoifyAPIError
            On non-retryable error responses.
        HugoifyNetworkError
            On transport failures once retries are used up.
        HugoifyRetryExhaustedError
            When every attempt got a retryable error status.
        """
        max_attempts = self._config.retry_max_attempts
        last_status: int | None = None

        for attempt in range(max_attempts):
            try:
                response = self._client.request(method, path, **kwargs)
            except (httpx.TimeoutException, httpx.NetworkError) as exc:
                self._metrics.increment(
                    "hugoify.requests_total", tags={"method": method, "status": "error"},
                )
                log_event(
                    log, logging.WARNING, "request network error",
                    method=method, path=path, attempt=attempt + 1, error=str(exc),
                )
                if not should_retry(None, exc, attempt, max_attempts):
                    raise HugoifyNetworkError(
                        f"Network error on {method} {path}: {exc}",
                        context={"url": path, "attempt": attempt + 1},
                        cause=exc,
                    ) from exc
                self._metrics.increment("hugoify.retries_total", tags={"reason": "network_error"})
                time.sleep(self._backoff(attempt))
                continue

            last_status = response.status_code
            self._metrics.increment(
                "hugoify.requests_total",
                tags={"method": method, "status": str(response.status_code)},
            )

            if 200 <= response.status_code < 300:
                if response.status_code == 204 or not response.content:
                    return {}
                return response.json()

            if response.status_code not in RETRYABLE_STATUSES:
                raise _api_error(response, method, path)

            if not should_retry(response.status_code, None, attempt, max_attempts):
                break

            retry_after: float | None = None
            reason = "server_error"
            if response.status_code == 429:
                retry_after = _parse_retry_after(response)
                reason = "rate_limited"
                log_event(
                    log, logging.WARNING, "rate limited by Notion API",
                    method=method, path=path, retry_after=retry_after, attempt=attempt + 1,
                )
            self._metrics.increment("hugoify.retries_total", tags={"reason": reason})
            time.sleep(self._backoff(attempt, retry_after))

        raise HugoifyRetryExhaustedError(
            f"All {max_attempts} attempts exhausted for {method} {path} "
            f"(last status: {last_status})",
            context={"attempts": max_attempts, "last_status_code": last_status},
        )

    def _backoff(self, attempt: int, retry_after: float | None = None) -> float:
        return compute_backoff(
            attempt,
            base=self._config.retry_base_delay,
            maximum=self._config.retry_max_delay,
            jitter=self._config.retry_jitter,
            retry_after=retry_after,
        )

    def paginate(self, path: str, method: str = "GET", json: dict | None = None) -> Iterator[dict]:
        """Yield every result of a cursor-paginated list endpoint.

        ``POST`` endpoints carry the cursor in the JSON body, ``GET``
        endpoints in the query string.
        """
        cursor: str | None = None
        while True:
            if method.upper() == "POST":
                body = dict(json or {})
                body["page_size"] = PAGE_SIZE
                if cursor is not None:
                    body["start_cursor"] = cursor
                data = self.request(method, path, json=body)
            else:
                params: dict[str, Any] = {"page_size": PAGE_SIZE}
                if cursor is not None:
                    params["start_cursor"] = cursor
                data = self.request(method, path, params=params)

            yield from data.get("results", [])

            if not data.get("has_more", False):
                break
            cursor = data.get("next_cursor")
            if cursor is None:
                break

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> NotionTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
