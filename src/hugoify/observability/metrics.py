"""Metrics hook protocol and no-op default implementation.

hugoify emits counters and timings while converting a batch.  A
:class:`NoopMetricsHook` is used unless the configuration supplies an object
satisfying :class:`MetricsHook` (StatsD, Prometheus, ...).

Emitted metric names:

* ``hugoify.pages_converted_total``     -- counter
* ``hugoify.pages_skipped_total``       -- counter
* ``hugoify.pages_failed_total``        -- counter (tag ``code``)
* ``hugoify.pages_deleted_total``       -- counter
* ``hugoify.media_saved_total``         -- counter (tag ``backend``)
* ``hugoify.page_convert_duration_ms``  -- timing
* ``hugoify.requests_total``            -- counter (tags ``method``, ``status``)
* ``hugoify.retries_total``             -- counter (tag ``reason``)
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class MetricsHook(Protocol):
    """Protocol that any metrics backend must satisfy."""

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Increment a counter metric."""
        ...

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        """Record a duration in milliseconds."""
        ...


class NoopMetricsHook:
    """Metrics backend that discards every data point."""

    __slots__ = ()

    def increment(
        self,
        name: str,
        value: int = 1,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass

    def timing(
        self,
        name: str,
        ms: float,
        tags: dict[str, str] | None = None,
    ) -> None:
        pass
