"""Notion API access: HTTP transport with retries and the page source."""

from .retries import compute_backoff, should_retry
from .source import NotionSource
from .transport import NotionTransport

__all__ = [
    "NotionSource",
    "NotionTransport",
    "compute_backoff",
    "should_retry",
]
