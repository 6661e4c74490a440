"""
retry.py — Backoff for outbound calls to third-party APIs.

Google Places (and any other provider client) wraps its request coroutine
with with_retry(). By default only transient failures are retried:
connection errors, timeouts, 429 and 5xx responses. Anything else (a 4xx,
a provider status such as REQUEST_DENIED) fails on the first attempt.

Usage:
    from bestof_shared.retry import with_retry

    @with_retry(max_attempts=3, base_delay=1.0)
    async def fetch(client: httpx.AsyncClient, url: str) -> dict:
        r = await client.get(url)
        r.raise_for_status()
        return r.json()
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, TypeVar

import httpx
import structlog
from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

log = structlog.get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


def is_transient_http_error(exc: BaseException) -> bool:
    if isinstance(exc, httpx.TransportError):
        return True
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return False


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    log.warning(
        "retry_attempt",
        function=getattr(retry_state.fn, "__qualname__", None),
        attempt=retry_state.attempt_number,
        error=str(exc),
        sleep_s=retry_state.next_action.sleep if retry_state.next_action else None,
    )


def with_retry(
    max_attempts: int = 3,
    base_delay: float = 1.0,
    max_delay: float = 30.0,
    retry_on: type[Exception] | tuple[type[Exception], ...] | None = None,
) -> Callable[[F], F]:
    """
    Retry an async callable with exponential backoff.

    Delays: base_delay * 2^(attempt-1), capped at max_delay. The last
    exception is re-raised unchanged once attempts run out.

    Args:
        max_attempts: Total attempts before raising.
        base_delay:   Initial delay in seconds.
        max_delay:    Maximum delay cap in seconds.
        retry_on:     Exception type(s) to retry instead of the transient-HTTP check.
    """
    predicate = (
        retry_if_exception_type(retry_on)
        if retry_on is not None
        else retry_if_exception(is_transient_http_error)
    )
    return retry(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay, max=max_delay),
        retry=predicate,
        reraise=True,
        before_sleep=_log_retry,
    )
