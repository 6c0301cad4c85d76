"""Bounded fixed-delay retry of transient recognition failures."""
from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_fixed,
)

from pharmarx_ocr.core.gcp_config import RetryConfig
from pharmarx_ocr.ocr.errors import RecognitionError, is_transient

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _should_retry(exc: BaseException) -> bool:
    return isinstance(exc, RecognitionError) and is_transient(exc.kind)


def _log_failed_attempt(state: RetryCallState) -> None:
    exc = state.outcome.exception() if state.outcome else None
    logger.warning(
        "ocr_attempt_failed",
        extra={
            "attempt": state.attempt_number,
            "error_kind": getattr(exc, "kind", None),
            "error": str(exc),
        },
    )


async def call_with_retry(
    fn: Callable[..., Awaitable[T]],
    *args: Any,
    config: RetryConfig,
) -> T:
    """Await `fn(*args)` up to `config.max_retries` times in total.

    Only transient `RecognitionError`s are retried, after a fixed
    `retry_delay_ms` pause. The last error is re-raised unchanged.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(config.max_retries),
        wait=wait_fixed(config.retry_delay_ms / 1000),
        retry=retry_if_exception(_should_retry),
        before_sleep=_log_failed_attempt,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await fn(*args)
    raise AssertionError("unreachable: AsyncRetrying always returns or raises")
