"""When and how long the Notion transport waits before trying again.

A batch run makes one database query per status plus one children request
per block that has children, so a long article can issue hundreds of
requests.  Notion answers bursts with ``429`` and occasionally with a
``5xx``; both are worth another attempt.  Everything else (bad token,
page not shared with the integration, malformed filter) fails the same way
on every attempt and is raised at once.

The knobs come from :class:`~hugoify.config.HugoifyConfig`:
``retry_max_attempts``, ``retry_base_delay``, ``retry_max_delay`` and
``retry_jitter``.  Media downloads never go through this policy.
"""

from __future__ import annotations

import random

import httpx

RETRYABLE_STATUSES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

RETRYABLE_EXCEPTIONS: tuple[type[Exception], ...] = (
    httpx.TimeoutException,
    httpx.NetworkError,
)


def should_retry(
    status_code: int | None,
    exception: Exception | None,
    attempt: int,
    max_attempts: int,
) -> bool:
    """Whether the transport should send the request again.

    *attempt* counts from 0, so with ``max_attempts=3`` attempts 0 and 1 may
    be followed by another and attempt 2 is the last.  A transport
    exception is judged by its type and a response by its status; with
    neither there is nothing to retry.
    """
    if attempt + 1 >= max_attempts:
        return False
    if exception is not None:
        return isinstance(exception, RETRYABLE_EXCEPTIONS)
    return status_code in RETRYABLE_STATUSES


def compute_backoff(
    attempt: int,
    base: float = 1.0,
    maximum: float = 30.0,
    jitter: bool = True,
    retry_after: float | None = None,
) -> float:
    """Seconds to sleep after failed attempt number *attempt*.

    Parameters
    ----------
    attempt:
        Zero-based number of the attempt that just failed.
    base, maximum:
        The delay doubles from *base* with each attempt and never exceeds
        *maximum*.
    jitter:
        Scale the delay by a random factor between 0.5 and 1 so that
        several runs sharing one integration token do not retry in step.
    retry_after:
        Seconds from a rate-limit response's ``Retry-After`` header.  It
        replaces the doubling schedule but is still capped at *maximum*.

    Returns
    -------
    float
    """
    if retry_after is None:
        delay = base * (2 ** attempt)
    else:
        delay = retry_after
    delay = min(delay, maximum)

    if jitter:
        delay *= random.uniform(0.5, 1.0)
    return delay
